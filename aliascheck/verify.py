'''
**aliascheck.verify**

Alias verification for two hostnames.

When provided with a primary hostname and the hostname of a target service,
the AliasVerifier resolves both and classifies how they relate: a direct
CNAME, a CNAME chain, an ALIAS/static IP sharing addresses, or nothing at
all. The result is the VerificationOutcome dataclass, which carries the
records that were resolved to reach the decision.
'''
import dataclasses as dc
import logging
from typing import Any, Literal, Protocol, Self

from aliascheck.dns import (
    AliascheckError,
    ResolutionResult,
    VerificationError,
    to_fqdn,
)

logger = logging.getLogger(__name__)


Status = Literal['ok', 'warning', 'no_match', 'error']

NO_MATCH = 0
DIRECT_CNAME = 1
SHARED_ADDRESS = 2
CNAME_CHAIN = 3
FAILED = -1


class Resolver(Protocol):
    async def lookup(self, hostname: str, nocache: bool = False) -> ResolutionResult:
        ...


@dc.dataclass(slots=True)
class VerificationPolicy:
    '''
    Switches between the verification variants seen in the wild.
    The defaults match the behaviour of the original service.
    '''
    enable_chain_detection: bool = False
    alias_overrides_secondary: bool = True
    no_match_status: Literal['no_match', 'error'] = 'no_match'


@dc.dataclass(slots=True, frozen=True)
class LookupErrorDetail:
    message: str
    hostname: str

    def as_json(self) -> dict[str, str]:
        return {'error': self.message, 'hostname': self.hostname}


@dc.dataclass(slots=True, frozen=True)
class VerificationOutcome:
    status: Status
    code: int
    message: str
    data: dict[str, ResolutionResult] = dc.field(default_factory=dict)
    error: LookupErrorDetail | None = None

    @property
    def failed(self) -> bool:
        return self.error is not None

    def raise_for_error(self) -> Self:
        '''
        Raise a VerificationError if one of the hostnames could not
        be resolved.

        Returns
        -------
        VerificationOutcome
            The outcome itself, when it did not fail.

        Raises
        ------
        VerificationError
        '''
        if self.error is not None:
            raise VerificationError(self.error.hostname, self.error.message)
        return self

    def as_json(self) -> dict[str, Any]:
        body: dict[str, Any] = {
            'status': self.status,
            'code': self.code,
            'message': self.message,
            'data': {host: result.as_json() for host, result in self.data.items()},
        }
        if self.error is not None:
            body['error'] = self.error.as_json()
        return body

    @classmethod
    def from_json(cls, data: dict[str, Any]) -> Self:
        error = data.get('error')
        return cls(
            status=data['status'],
            code=int(data['code']),
            message=data.get('message', ''),
            data={
                host: ResolutionResult.from_json(result)
                for host, result in (data.get('data') or {}).items()
            },
            error=LookupErrorDetail(
                message=error.get('error', ''),
                hostname=error.get('hostname', ''),
            ) if error else None,
        )

    @classmethod
    def failure(cls, hostname: str, exc: BaseException) -> Self:
        return cls(
            status='error',
            code=FAILED,
            message=str(exc),
            error=LookupErrorDetail(message=str(exc), hostname=hostname),
        )


def shares_address(first: ResolutionResult, second: ResolutionResult) -> bool:
    return not set(first.addresses).isdisjoint(second.addresses)


class AliasVerifier:
    '''
    Checks whether a hostname points at a target hostname.

    Evaluation order is direct CNAME, CNAME chain (when enabled),
    shared address, no match. The first branch that applies wins.
    '''

    def __init__(
        self,
        resolver: Resolver,
        policy: VerificationPolicy | None = None,
    ) -> None:
        self._resolver = resolver
        self._policy = policy or VerificationPolicy()

    def comparison_target(self, hostname2: str, target_alias: str | None) -> str:
        if target_alias and self._policy.alias_overrides_secondary:
            return to_fqdn(target_alias)
        return hostname2

    async def verify(
        self,
        hostname1: str,
        hostname2: str,
        target_alias: str | None = None,
        nocache: bool = False,
    ) -> VerificationOutcome:
        '''
        Classify the relationship between `hostname1` and `hostname2`.

        Parameters
        ----------
        hostname1 : str
            The hostname that is expected to point at `hostname2`.
        hostname2 : str
            The target service hostname.
        target_alias : str | None, optional
            A name to resolve in place of `hostname2` for the address
            comparison, by default None
        nocache : bool, optional
            Walk the delegation chain for both lookups, by default False

        Returns
        -------
        VerificationOutcome
            An outcome with status 'error' and the offending hostname in
            `error` when either lookup fails.
        '''
        try:
            hostname1 = to_fqdn(hostname1)
        except AliascheckError as exc:
            return VerificationOutcome.failure(hostname1, exc)

        try:
            hostname2 = to_fqdn(hostname2)
            target_host = self.comparison_target(hostname2, target_alias)
        except AliascheckError as exc:
            return VerificationOutcome.failure(target_alias or hostname2, exc)

        try:
            primary = await self._resolver.lookup(hostname1, nocache)
        except AliascheckError as exc:
            logger.warning(f"Verification of {hostname1} failed: {exc}")
            return VerificationOutcome.failure(hostname1, exc)

        if primary.cname == hostname2:
            return VerificationOutcome(
                status='ok',
                code=DIRECT_CNAME,
                message="direct CNAME match",
                data={hostname1: primary},
            )

        try:
            target = await self._resolver.lookup(target_host, nocache)
        except AliascheckError as exc:
            logger.warning(f"Verification of {target_host} failed: {exc}")
            return VerificationOutcome.failure(target_host, exc)

        data = {hostname1: primary, target_host: target}

        if self._policy.enable_chain_detection and target.cname == hostname2:
            return VerificationOutcome(
                status='warning',
                code=CNAME_CHAIN,
                message="indirect CNAME / CNAME chain",
                data=data,
            )

        if shares_address(primary, target):
            return VerificationOutcome(
                status='warning',
                code=SHARED_ADDRESS,
                message="ALIAS or Static IP match",
                data=data,
            )

        return VerificationOutcome(
            status=self._policy.no_match_status,
            code=NO_MATCH,
            message="no matches",
            data=data,
        )

    @property
    def policy(self) -> VerificationPolicy:
        return self._policy
