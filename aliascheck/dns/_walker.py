import logging
import random

import dns.name
import dns.rdatatype as rtype

from aliascheck.dns._errors import DelegationError
from aliascheck.dns._exchange import TRANSPORT_ERRORS, QueryExchange
from aliascheck.dns._models import to_fqdn
from aliascheck.dns._parser import iter_records
from aliascheck.dns._records import NSRecord
from aliascheck.dns._roots import RootDirectory, pick_one

logger = logging.getLogger(__name__)


def suffixes(fqdn: str) -> list[str]:
    '''
    The suffixes of a domain name below the root, shortest first.

    >>> suffixes('a.b.example.com.')
    ['com.', 'example.com.', 'b.example.com.', 'a.b.example.com.']

    Parameters
    ----------
    fqdn : str

    Returns
    -------
    list[str]
    '''
    name = dns.name.from_text(fqdn)
    found = []
    while name != dns.name.root:
        found.append(name.to_text())
        name = name.parent()
    return found[::-1]


class DelegationWalker:
    '''
    Finds the nameserver authoritative for a name by asking for the NS
    records of every suffix of the name, starting from the root, without
    relying on the recursion of any resolver.
    '''

    def __init__(
        self,
        roots: RootDirectory,
        exchange: QueryExchange,
        *,
        tcp: bool = False,
        rng: random.Random | None = None,
    ) -> None:
        self._roots = roots
        self._exchange = exchange
        self._tcp = tcp
        self._rng = rng or roots.rng

    async def delegation_for(self, suffix: str, nameserver: str) -> str:
        '''
        Ask `nameserver` for the NS records of `suffix` and pick the
        nameserver to use one level down.

        Parameters
        ----------
        suffix : str
        nameserver : str
            The nameserver authoritative for the parent of `suffix`.

        Returns
        -------
        str
            One of the delegated nameservers, or `nameserver` when the
            response carries no NS records.

        Raises
        ------
        DelegationError
        '''
        try:
            response = await self._exchange(
                suffix, rtype.NS, nameserver, tcp=self._tcp
            )
        except TRANSPORT_ERRORS as exc:
            logger.warning(f"NS query for {suffix} against {nameserver} failed: {exc}")
            raise DelegationError(suffix, exc) from exc

        candidates = [
            record.target
            for record in iter_records([*response.answer, *response.authority])
            if isinstance(record, NSRecord)
        ]
        if not candidates:
            logger.debug(f"No delegation for {suffix}, staying on {nameserver}")
            return nameserver

        chosen = pick_one(candidates, self._rng)
        logger.debug(f"{suffix} is delegated to {chosen} ({len(candidates)} candidate(s))")
        return chosen

    async def find_authoritative(self, hostname: str) -> str:
        '''
        Walk the delegation chain of a hostname down from the root.

        Parameters
        ----------
        hostname : str

        Returns
        -------
        str
            The last nameserver obtained for the full name.

        Raises
        ------
        DelegationError
            If any of the NS queries fails. The walk is not retried.
        '''
        fqdn = to_fqdn(hostname)
        nameserver = self._roots.pick_starting_server()
        logger.debug(f"Walking delegation for {fqdn} from {nameserver}")

        for suffix in suffixes(fqdn):
            nameserver = await self.delegation_for(suffix, nameserver)

        return nameserver
