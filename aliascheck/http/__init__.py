'''
**aliascheck.http**
---------

The async HTTP client for a running aliascheck service, built on httpx.
Responses are decoded into the same `ResolutionResult` and
`VerificationOutcome` dataclasses the library returns locally.
'''
from aliascheck.http._client import (
    AliascheckClient,
    ClientConfig,
    ServiceError,
    raise_for_service_error,
)

__all__ = [
    'AliascheckClient',
    'ClientConfig',
    'ServiceError',
    'raise_for_service_error',
]
