import dataclasses as dc
from typing import Any, Literal, Self

import dns.exception
import dns.name

from aliascheck.dns._errors import InvalidHostnameError

WalkOrigin = Literal['root-servers', 'system']


def to_fqdn(hostname: str) -> str:
    '''
    Normalize a hostname to a dot-terminated, fully-qualified name.

    Parameters
    ----------
    hostname : str

    Returns
    -------
    str

    Raises
    ------
    InvalidHostnameError
    '''
    try:
        return dns.name.from_text(hostname.strip()).to_text()
    except dns.exception.DNSException as exc:
        raise InvalidHostnameError(f"Invalid hostname {hostname!r}: {exc}") from exc


def append_if_missing(items: list[str], value: str) -> None:
    if value not in items:
        items.append(value)


@dc.dataclass(slots=True)
class ResolverConfig:
    '''
    Options for DNS lookups.
    '''
    filename: str = "/etc/resolv.conf"
    walk_from: WalkOrigin = 'root-servers'
    walk_tcp: bool = False
    query_tcp: bool = True
    timeout: float = 5.0
    port: int = 53


@dc.dataclass(slots=True, frozen=True)
class ResolutionResult:
    '''
    The merged records of a single lookup.
    '''
    addresses: tuple[str, ...] = ()
    cname: str = ''
    cname_chain: tuple[str, ...] = ()
    last_nameserver: str = ''

    def as_json(self) -> dict[str, Any]:
        return {
            'A': list(self.addresses),
            'CNAME': self.cname,
            'CNAMEChain': list(self.cname_chain),
            'LastNS': self.last_nameserver,
        }

    @classmethod
    def from_json(cls, data: dict[str, Any]) -> Self:
        return cls(
            addresses=tuple(data.get('A') or ()),
            cname=data.get('CNAME') or '',
            cname_chain=tuple(data.get('CNAMEChain') or ()),
            last_nameserver=data.get('LastNS') or '',
        )
