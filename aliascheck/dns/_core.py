import logging
import random

from aliascheck.dns._aggregator import RecordAggregator
from aliascheck.dns._exchange import DNSExchange, QueryExchange
from aliascheck.dns._models import ResolutionResult, ResolverConfig, to_fqdn
from aliascheck.dns._roots import RootDirectory
from aliascheck.dns._walker import DelegationWalker

logger = logging.getLogger(__name__)


class DNSBackend:
    '''
    Looks up the A and CNAME records of a hostname, either through the
    system resolver or straight from the nameserver found by walking the
    delegation chain.
    '''

    def __init__(
        self,
        config: ResolverConfig | None = None,
        *,
        system: RootDirectory | None = None,
        exchange: QueryExchange | None = None,
        rng: random.Random | None = None,
    ) -> None:
        '''
        Parameters
        ----------
        config : ResolverConfig | None, optional
            by default None
        system : RootDirectory | None, optional
            The system nameservers. Read from `config.filename` when not
            given, which raises `ConfigError` if the file is unusable.
        exchange : QueryExchange | None, optional
            Sends the queries, by default a `DNSExchange`
        rng : random.Random | None, optional
            The random source for every nameserver choice, by default None
        '''
        self._config = config or ResolverConfig()
        self._rng = rng or random.Random()
        self._system = system or RootDirectory.from_resolv_conf(
            self._config.filename, rng=self._rng
        )

        if self._config.walk_from == 'system':
            walk_roots = self._system
        else:
            walk_roots = RootDirectory.from_root_hints(rng=self._rng)

        self._exchange = exchange or DNSExchange(self._config, self._system.servers)
        self._walker = DelegationWalker(
            walk_roots,
            self._exchange,
            tcp=self._config.walk_tcp,
            rng=self._rng,
        )
        self._aggregator = RecordAggregator(
            self._exchange,
            tcp=self._config.query_tcp,
        )

    async def lookup(self, hostname: str, nocache: bool = False) -> ResolutionResult:
        '''
        Resolve the A and CNAME records of a hostname.

        Parameters
        ----------
        hostname : str
        nocache : bool, optional
            Walk the delegation chain and ask the authoritative nameserver
            instead of the system resolver, by default False

        Returns
        -------
        ResolutionResult

        Raises
        ------
        InvalidHostnameError
        DelegationError
        QueryError
        '''
        fqdn = to_fqdn(hostname)
        if nocache:
            nameserver = await self._walker.find_authoritative(fqdn)
        else:
            nameserver = self._system.pick_starting_server()

        logger.info(f"Looking up {fqdn} against {nameserver} (nocache={nocache})")
        return await self._aggregator.aggregate(nameserver, fqdn)

    @property
    def config(self) -> ResolverConfig:
        return self._config

    @property
    def system(self) -> RootDirectory:
        return self._system

    @property
    def walker(self) -> DelegationWalker:
        return self._walker
