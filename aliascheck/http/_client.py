import dataclasses as dc
import logging

import httpx

from aliascheck.dns import AliascheckError, ResolutionResult
from aliascheck.verify import VerificationOutcome

logger = logging.getLogger(__name__)


class ServiceError(AliascheckError):
    '''
    Raised when the aliascheck service answers with an error.

    Parent: AliascheckError
    '''

    def __init__(self, status_code: int, message: str, hostname: str | None = None) -> None:
        self.status_code: int = status_code
        self.message: str = message
        self.hostname: str | None = hostname
        where = f" ({hostname})" if hostname else ""
        super().__init__(f"HTTP {status_code}: {message}{where}")


def _base_limits() -> httpx.Limits:
    return httpx.Limits(
        max_connections=20,
        max_keepalive_connections=5,
        keepalive_expiry=15,
    )


def _base_timeouts() -> httpx.Timeout:
    # a nocache lookup walks every label of both names
    return httpx.Timeout(
        connect=5.0,
        read=60.0,
        write=5.0,
        pool=5.0,
    )


def _default_headers() -> dict[str, str]:
    return {
        'Accept': 'application/json',
    }


@dc.dataclass(slots=True)
class ClientConfig:
    '''
    Configuration options for the aliascheck service client.
    Good defaults are provided for most use cases.
    '''
    timeout: httpx.Timeout = dc.field(default_factory=_base_timeouts)
    limits: httpx.Limits = dc.field(default_factory=_base_limits)
    follow_redirects: bool = False
    trust_env: bool = False


def _query_params(nocache: bool, target_alias: str | None = None) -> dict[str, str]:
    params = {}
    if nocache:
        params['nocache'] = '1'
    if target_alias:
        params['target_alias'] = target_alias
    return params


def raise_for_service_error(response: httpx.Response) -> None:
    '''
    Turn an error response of the service into a ServiceError.

    Parameters
    ----------
    response : httpx.Response

    Raises
    ------
    ServiceError
    '''
    if response.is_success:
        return

    try:
        body = response.json()
    except ValueError:
        body = {}

    if not isinstance(body, dict):
        body = {}

    raise ServiceError(
        status_code=response.status_code,
        message=body.get('error') or response.reason_phrase,
        hostname=body.get('hostname'),
    )


class AliascheckClient(httpx.AsyncClient):
    '''
    Thin wrapper around httpx.AsyncClient for calling a running
    aliascheck service.
    '''

    def __init__(
        self,
        base_url: str,
        *,
        auth: tuple[str, str] | httpx.Auth | None = None,
        headers: dict[str, str] | None = None,
        config: ClientConfig | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._config: ClientConfig = config or ClientConfig()

        all_headers = _default_headers()
        if headers:
            all_headers.update(headers)

        super().__init__(
            base_url=base_url,
            auth=auth,
            limits=self._config.limits,
            timeout=self._config.timeout,
            headers=all_headers,
            follow_redirects=self._config.follow_redirects,
            trust_env=self._config.trust_env,
            transport=transport,
        )

    async def lookup(self, hostname: str, nocache: bool = False) -> ResolutionResult:
        '''
        Look up the records of a hostname through the service.

        Parameters
        ----------
        hostname : str
        nocache : bool, optional
            by default False

        Returns
        -------
        ResolutionResult

        Raises
        ------
        ServiceError
        '''
        response = await self.get(
            f'/lookup/{hostname}',
            params=_query_params(nocache),
        )
        raise_for_service_error(response)
        return ResolutionResult.from_json(response.json())

    async def verify(
        self,
        hostname1: str,
        hostname2: str,
        target_alias: str | None = None,
        nocache: bool = False,
    ) -> VerificationOutcome:
        '''
        Verify that `hostname1` points at `hostname2` through the service.

        Parameters
        ----------
        hostname1 : str
        hostname2 : str
        target_alias : str | None, optional
            by default None
        nocache : bool, optional
            by default False

        Returns
        -------
        VerificationOutcome

        Raises
        ------
        ServiceError
            If either hostname could not be resolved by the service.
        '''
        response = await self.get(
            f'/verify_target/{hostname1}/{hostname2}',
            params=_query_params(nocache, target_alias),
        )
        raise_for_service_error(response)
        outcome = VerificationOutcome.from_json(response.json())
        logger.debug(f"Verified {hostname1} -> {hostname2}: {outcome.status}")
        return outcome
