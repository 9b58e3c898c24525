import dataclasses as dc
import logging

import dns.message
import dns.name
import dns.rdatatype as rtype

from aliascheck.dns._errors import QueryError
from aliascheck.dns._exchange import TRANSPORT_ERRORS, QueryExchange
from aliascheck.dns._models import ResolutionResult, append_if_missing, to_fqdn
from aliascheck.dns._parser import iter_records, owned_by
from aliascheck.dns._records import ARecord, CNAMERecord

logger = logging.getLogger(__name__)


@dc.dataclass(slots=True)
class AnswerSummary:
    '''
    The addresses and CNAME a single response holds for one name.
    '''
    addresses: list[str] = dc.field(default_factory=list)
    cname: str = ''
    cname_chain: list[str] = dc.field(default_factory=list)


def cname_chain(targets: dict[dns.name.Name, str], fqdn: str) -> list[str]:
    chain: list[str] = []
    current = dns.name.from_text(fqdn)
    while current in targets:
        target = targets[current]
        if target in chain:
            break
        chain.append(target)
        current = dns.name.from_text(target)
    return chain


def summarize_answer(message: dns.message.Message, fqdn: str) -> AnswerSummary:
    '''
    Pull the A addresses and the CNAME owned by `fqdn` out of the answer
    section of a response. Other sections are ignored.

    Parameters
    ----------
    message : dns.message.Message
    fqdn : str

    Returns
    -------
    AnswerSummary
    '''
    owner = dns.name.from_text(fqdn)
    summary = AnswerSummary()
    first_targets: dict[dns.name.Name, str] = {}

    for record in iter_records(message.answer):
        record_owner = dns.name.from_text(record.name)
        match record:
            case ARecord(address=address) if owned_by(record, fqdn):
                append_if_missing(summary.addresses, address)
            case CNAMERecord(target=target):
                first_targets.setdefault(record_owner, target)
            case _:
                pass

    summary.cname = first_targets.get(owner, '')
    summary.cname_chain = cname_chain(first_targets, fqdn)
    return summary


class RecordAggregator:
    '''
    Resolves a name against one nameserver with an ANY query followed by
    an A query, and merges both answers. Many authoritative servers refuse
    or truncate ANY, so the A query fills in what it leaves out.
    '''

    def __init__(self, exchange: QueryExchange, *, tcp: bool = True) -> None:
        self._exchange = exchange
        self._tcp = tcp

    async def _summarize(
        self,
        nameserver: str,
        fqdn: str,
        rdtype: rtype.RdataType,
    ) -> AnswerSummary:
        try:
            response = await self._exchange(fqdn, rdtype, nameserver, tcp=self._tcp)
        except TRANSPORT_ERRORS as exc:
            query_type = rtype.to_text(rdtype)
            logger.warning(f"{query_type} query for {fqdn} against {nameserver} failed: {exc}")
            raise QueryError(query_type, fqdn, exc) from exc
        return summarize_answer(response, fqdn)

    async def aggregate(self, nameserver: str, hostname: str) -> ResolutionResult:
        '''
        Query `nameserver` for ANY and then A records of `hostname` and
        merge the answers.

        Parameters
        ----------
        nameserver : str
        hostname : str

        Returns
        -------
        ResolutionResult
            Addresses in first-seen order across both answers. The CNAME of
            the ANY answer wins over the one of the A answer.

        Raises
        ------
        QueryError
            If either exchange fails. No partial result is returned.
        '''
        fqdn = to_fqdn(hostname)
        any_answer = await self._summarize(nameserver, fqdn, rtype.ANY)
        a_answer = await self._summarize(nameserver, fqdn, rtype.A)

        addresses = any_answer.addresses.copy()
        for address in a_answer.addresses:
            append_if_missing(addresses, address)

        chain = any_answer.cname_chain if any_answer.cname else a_answer.cname_chain

        result = ResolutionResult(
            addresses=tuple(addresses),
            cname=any_answer.cname or a_answer.cname,
            cname_chain=tuple(chain),
            last_nameserver=nameserver,
        )
        logger.debug(f"Resolved {fqdn} via {nameserver}: {result}")
        return result
