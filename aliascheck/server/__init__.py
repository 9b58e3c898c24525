'''
**aliascheck.server**
---------

The HTTP service exposing `/lookup/{hostname}` and
`/verify_target/{hostname1}/{hostname2}` behind Basic-Auth.
Run it with `aliascheck-server` or `python -m aliascheck.server`.
'''
from aliascheck.server._app import create_app, require_credentials
from aliascheck.server._settings import ServiceSettings

__all__ = [
    'create_app',
    'require_credentials',
    'ServiceSettings',
]
