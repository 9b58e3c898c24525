import logging
import secrets
from typing import Annotated

from fastapi import Depends, FastAPI, HTTPException, Request
from fastapi.responses import JSONResponse
from fastapi.security import HTTPBasic, HTTPBasicCredentials
from starlette.exceptions import HTTPException as StarletteHTTPException

from aliascheck.dns import AliascheckError, DNSBackend, to_fqdn
from aliascheck.server._settings import ServiceSettings
from aliascheck.verify import AliasVerifier, Resolver

logger = logging.getLogger(__name__)

basic_auth = HTTPBasic(auto_error=False)


async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    if exc.status_code == 401:
        body = {'error': 'unauthorized'}
    elif isinstance(exc.detail, dict):
        body = exc.detail
    else:
        body = {'error': str(exc.detail).lower()}
    return JSONResponse(body, status_code=exc.status_code, headers=exc.headers)


def get_settings(request: Request) -> ServiceSettings:
    return request.app.state.settings


def get_backend(request: Request) -> Resolver:
    return request.app.state.backend


def get_verifier(request: Request) -> AliasVerifier:
    return request.app.state.verifier


def require_credentials(
    credentials: Annotated[HTTPBasicCredentials | None, Depends(basic_auth)],
    settings: Annotated[ServiceSettings, Depends(get_settings)],
) -> None:
    '''
    Reject the request unless it carries the configured Basic-Auth
    credentials.

    Raises
    ------
    HTTPException
        401 when the credentials are missing or wrong.
    '''
    if credentials is not None:
        user_ok = secrets.compare_digest(
            credentials.username.encode(), settings.auth_user.encode()
        )
        password_ok = secrets.compare_digest(
            credentials.password.encode(), settings.auth_password.encode()
        )
        if user_ok and password_ok:
            return

    raise HTTPException(
        status_code=401,
        detail="unauthorized",
        headers={"WWW-Authenticate": "Basic"},
    )


async def lookup(
    hostname: str,
    backend: Annotated[Resolver, Depends(get_backend)],
    nocache: str = '',
) -> dict:
    try:
        result = await backend.lookup(to_fqdn(hostname), bool(nocache))
    except AliascheckError as exc:
        logger.error(f"Lookup of {hostname} failed: {exc}")
        raise HTTPException(status_code=500, detail={'error': str(exc)}) from exc
    return result.as_json()


async def verify_target(
    hostname1: str,
    hostname2: str,
    verifier: Annotated[AliasVerifier, Depends(get_verifier)],
    target_alias: str = '',
    nocache: str = '',
) -> dict:
    outcome = await verifier.verify(
        hostname1,
        hostname2,
        target_alias=target_alias or None,
        nocache=bool(nocache),
    )
    if outcome.error is not None:
        logger.error(
            f"Verification {hostname1} -> {hostname2} failed at "
            f"{outcome.error.hostname}: {outcome.error.message}"
        )
        raise HTTPException(status_code=500, detail=outcome.error.as_json())
    return outcome.as_json()


async def health() -> dict:
    return {'status': 'ok'}


def create_app(
    settings: ServiceSettings | None = None,
    backend: Resolver | None = None,
) -> FastAPI:
    '''
    Build the aliascheck FastAPI application.

    Parameters
    ----------
    settings : ServiceSettings | None, optional
        by default read from the environment
    backend : Resolver | None, optional
        The resolver behind both routes. A DNSBackend reading the system
        resolver configuration is built when not given.

    Returns
    -------
    FastAPI

    Raises
    ------
    ConfigError
        If the system resolver configuration cannot be read.
    '''
    settings = settings or ServiceSettings()
    backend = backend or DNSBackend(settings.resolver_config())

    app = FastAPI(
        title="aliascheck",
        description="DNS lookup and CNAME/ALIAS target verification",
    )
    app.state.settings = settings
    app.state.backend = backend
    app.state.verifier = AliasVerifier(backend, settings.verification_policy())

    app.add_exception_handler(StarletteHTTPException, http_error_handler)

    protected = [Depends(require_credentials)]
    app.add_api_route('/lookup/{hostname}', lookup, methods=['GET'], dependencies=protected)
    app.add_api_route(
        '/verify_target/{hostname1}/{hostname2}',
        verify_target,
        methods=['GET'],
        dependencies=protected,
    )
    app.add_api_route('/health', health, methods=['GET'])
    return app
