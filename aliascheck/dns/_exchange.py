'''
Sends a single question to a single nameserver and returns the parsed
response. This is the only place the DNS wire protocol is touched; the
walker and the aggregator drive it through the `QueryExchange` protocol
so tests can substitute canned responses.
'''
import ipaddress
import logging
from typing import Protocol

import dns.asyncquery
import dns.asyncresolver
import dns.exception
import dns.message
import dns.name
import dns.rdatatype

from aliascheck.dns._models import ResolverConfig

logger = logging.getLogger(__name__)

# dnspython raises EOFError when a TCP peer closes the connection mid-exchange
TRANSPORT_ERRORS = (dns.exception.DNSException, OSError, EOFError)


class QueryExchange(Protocol):
    async def __call__(
        self,
        qname: str,
        rdtype: dns.rdatatype.RdataType,
        nameserver: str,
        *,
        tcp: bool,
    ) -> dns.message.Message:
        ...


def is_ip_literal(host: str) -> bool:
    try:
        ipaddress.ip_address(host)
    except ValueError:
        return False
    return True


class DNSExchange:
    '''
    The default `QueryExchange`, backed by dnspython.

    Nameservers given by hostname (root-server names, NS targets) are
    turned into an IPv4 address with a stub resolver pointed at the
    system nameservers before the question is sent.
    '''

    def __init__(
        self,
        config: ResolverConfig,
        system_servers: tuple[str, ...],
    ) -> None:
        self._config = config
        self._resolver = dns.asyncresolver.Resolver(configure=False)
        self._resolver.nameservers = list(system_servers)
        self._resolver.lifetime = config.timeout

    async def address_of(self, nameserver: str) -> str:
        '''
        Get the address to send a query to for a nameserver.

        Parameters
        ----------
        nameserver : str

        Returns
        -------
        str

        Raises
        ------
        dns.exception.DNSException
            If the nameserver hostname does not resolve.
        '''
        if is_ip_literal(nameserver):
            return nameserver

        answer = await self._resolver.resolve(nameserver, dns.rdatatype.A)
        address = answer[0].address
        logger.debug(f"Nameserver {nameserver} is at {address}")
        return address

    async def __call__(
        self,
        qname: str,
        rdtype: dns.rdatatype.RdataType,
        nameserver: str,
        *,
        tcp: bool,
    ) -> dns.message.Message:
        where = await self.address_of(nameserver)
        query = dns.message.make_query(dns.name.from_text(qname), rdtype)
        send = dns.asyncquery.tcp if tcp else dns.asyncquery.udp

        logger.debug(
            f"Sending {dns.rdatatype.to_text(rdtype)} {qname} to "
            f"{nameserver} ({where}:{self._config.port}, {'tcp' if tcp else 'udp'})"
        )
        return await send(
            query,
            where,
            timeout=self._config.timeout,
            port=self._config.port,
        )
