import dataclasses as dc
from typing import ClassVar, Literal

RecordKind = Literal['A', 'CNAME', 'NS', 'SOA']


@dc.dataclass(slots=True, frozen=True)
class ARecord:
    kind: ClassVar[RecordKind] = 'A'
    name: str
    address: str
    ttl: int | None = None


@dc.dataclass(slots=True, frozen=True)
class CNAMERecord:
    kind: ClassVar[RecordKind] = 'CNAME'
    name: str
    target: str
    ttl: int | None = None


@dc.dataclass(slots=True, frozen=True)
class NSRecord:
    kind: ClassVar[RecordKind] = 'NS'
    name: str
    target: str
    ttl: int | None = None


@dc.dataclass(slots=True, frozen=True)
class SOARecord:
    kind: ClassVar[RecordKind] = 'SOA'
    name: str
    mname: str
    rname: str
    serial: int
    refresh: int
    retry: int
    expire: int
    minimum: int
    ttl: int | None = None


DNSRecord = ARecord | CNAMERecord | NSRecord | SOARecord
