import dataclasses as dc
import logging
import random
from typing import Final, Self

import dns.resolver

from aliascheck.dns._errors import ConfigError

logger = logging.getLogger(__name__)


ROOT_SERVERS: Final[tuple[str, ...]] = tuple(
    f"{letter}.root-servers.net." for letter in "abcdefghijklm"
)


@dc.dataclass(slots=True, frozen=True)
class RootDirectory:
    '''
    The candidate nameservers a lookup or a delegation walk starts from.
    The server list is read once and never mutated afterwards, so a single
    instance can be shared by every request.
    '''
    servers: tuple[str, ...]
    rng: random.Random = dc.field(default_factory=random.Random, compare=False)

    def __post_init__(self) -> None:
        if not self.servers:
            raise ConfigError("Root directory needs at least one nameserver")

    @classmethod
    def from_resolv_conf(
        cls,
        filename: str = "/etc/resolv.conf",
        rng: random.Random | None = None,
    ) -> Self:
        '''
        Load the nameservers configured for the operating system's resolver.

        Parameters
        ----------
        filename : str, optional
            by default "/etc/resolv.conf"
        rng : random.Random | None, optional
            The random source used to pick a server, by default None

        Returns
        -------
        RootDirectory

        Raises
        ------
        ConfigError
            If the file cannot be read or lists no nameservers.
        '''
        try:
            resolver = dns.resolver.Resolver(filename=filename, configure=True)
        except (dns.resolver.NoResolverConfiguration, OSError) as exc:
            raise ConfigError(
                f"Cannot read resolver configuration {filename}: {exc}"
            ) from exc

        servers = tuple(str(ns) for ns in resolver.nameservers)
        logger.info(f"Loaded {len(servers)} nameserver(s) from {filename}")
        return cls(servers=servers, rng=rng or random.Random())

    @classmethod
    def from_root_hints(cls, rng: random.Random | None = None) -> Self:
        return cls(servers=ROOT_SERVERS, rng=rng or random.Random())

    def pick_starting_server(self) -> str:
        return pick_one(self.servers, self.rng)


def pick_one(candidates: tuple[str, ...] | list[str], rng: random.Random) -> str:
    '''
    Pick a candidate uniformly at random, without touching the random
    source when there is only one.

    Parameters
    ----------
    candidates : tuple[str, ...] | list[str]
    rng : random.Random

    Returns
    -------
    str
    '''
    if len(candidates) == 1:
        return candidates[0]
    return rng.choice(candidates)
