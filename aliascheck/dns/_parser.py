from __future__ import annotations

import functools
from collections.abc import Iterable, Iterator
from typing import Any

import dns.name
import dns.rdata
import dns.rrset
from dns.rdtypes.ANY.CNAME import CNAME as R_CNAME
from dns.rdtypes.ANY.NS import NS as R_NS
from dns.rdtypes.ANY.SOA import SOA as R_SOA
from dns.rdtypes.IN.A import A as R_A

from aliascheck.dns._records import (
    ARecord,
    CNAMERecord,
    DNSRecord,
    NSRecord,
    SOARecord,
)


def _name(n: Any) -> str:
    return "" if n is None else str(n)


@functools.singledispatch
def parse_rdata(r: dns.rdata.Rdata, owner: str, ttl: int | None) -> DNSRecord | None:
    '''
    Parse the rdata of a single DNS record into its record variant,
    dispatching on the dnspython rdata class.

    Parameters
    ----------
    r : dns.rdata.Rdata
    owner : str
        The owner name of the rrset the rdata belongs to (dot-terminated).
    ttl : int | None

    Returns
    -------
    DNSRecord | None
        `None` for record types outside of A/CNAME/NS/SOA.
    '''
    return None


@parse_rdata.register
def _(r: R_A, owner: str, ttl: int | None) -> ARecord:
    return ARecord(name=owner, address=r.address, ttl=ttl)


@parse_rdata.register
def _(r: R_CNAME, owner: str, ttl: int | None) -> CNAMERecord:
    return CNAMERecord(name=owner, target=_name(r.target), ttl=ttl)


@parse_rdata.register
def _(r: R_NS, owner: str, ttl: int | None) -> NSRecord:
    return NSRecord(name=owner, target=_name(r.target), ttl=ttl)


@parse_rdata.register
def _(r: R_SOA, owner: str, ttl: int | None) -> SOARecord:
    return SOARecord(
        name=owner,
        mname=_name(r.mname),
        rname=_name(r.rname),
        serial=int(r.serial),
        refresh=int(r.refresh),
        retry=int(r.retry),
        expire=int(r.expire),
        minimum=int(r.minimum),
        ttl=ttl,
    )


def iter_records(section: Iterable[dns.rrset.RRset]) -> Iterator[DNSRecord]:
    '''
    Walk a message section (answer, authority, additional) and yield
    every supported record in the order it appears.

    Parameters
    ----------
    section : Iterable[dns.rrset.RRset]

    Yields
    ------
    DNSRecord
    '''
    for rrset in section:
        owner = _name(rrset.name)
        for rdata in rrset:
            if (record := parse_rdata(rdata, owner, rrset.ttl)) is not None:
                yield record


def owned_by(record: DNSRecord, fqdn: str) -> bool:
    '''
    Check if a record's owner name is the given FQDN. DNS names compare
    case-insensitively.
    '''
    return dns.name.from_text(record.name) == dns.name.from_text(fqdn)
