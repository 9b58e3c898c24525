# tests/conftest.py

import random

import dns.message
import dns.name
import dns.rdatatype
import dns.rrset
import pytest

from aliascheck.dns import DNSBackend, ResolutionResult, ResolverConfig, RootDirectory

SYSTEM_RESOLVER = "192.0.2.53"


def rr(name: str, rdtype: str, *rdatas: str, ttl: int = 300) -> dns.rrset.RRset:
    return dns.rrset.from_text(name, ttl, "IN", rdtype, *rdatas)


def make_response(
    qname: str,
    rdtype: str,
    answer: list[dns.rrset.RRset] | None = None,
    authority: list[dns.rrset.RRset] | None = None,
) -> dns.message.Message:
    query = dns.message.make_query(qname, dns.rdatatype.from_text(rdtype))
    response = dns.message.make_response(query)
    response.answer.extend(answer or [])
    response.authority.extend(authority or [])
    return response


class FakeExchange:
    """
    Stands in for the DNS transport. Responses are keyed by question
    name, type and (optionally) the nameserver asked; anything without a
    canned response gets an empty NOERROR answer.
    """

    def __init__(self):
        self.responses = {}
        self.calls = []

    def add(self, qname, rdtype, response, nameserver=None):
        self.responses[(qname, rdtype, nameserver)] = response

    async def __call__(self, qname, rdtype, nameserver, *, tcp):
        rdtype_text = dns.rdatatype.to_text(rdtype)
        self.calls.append((qname, rdtype_text, nameserver, tcp))

        response = self.responses.get(
            (qname, rdtype_text, nameserver),
            self.responses.get((qname, rdtype_text, None)),
        )
        if isinstance(response, BaseException):
            raise response
        if response is None:
            return make_response(qname, rdtype_text)
        return response


class FakeResolver:
    """
    Stands in for DNSBackend in verification and HTTP tests.
    """

    def __init__(self, results=None):
        self.results = results or {}
        self.calls = []

    async def lookup(self, hostname, nocache=False):
        self.calls.append((hostname, nocache))
        result = self.results.get(hostname, ResolutionResult())
        if isinstance(result, BaseException):
            raise result
        return result


@pytest.fixture
def fake_exchange():
    return FakeExchange()


@pytest.fixture
def system_directory():
    return RootDirectory(servers=(SYSTEM_RESOLVER,))


@pytest.fixture
def backend(fake_exchange, system_directory):
    return DNSBackend(
        ResolverConfig(walk_from="system"),
        system=system_directory,
        exchange=fake_exchange,
        rng=random.Random(0),
    )


@pytest.fixture
def fake_resolver():
    return FakeResolver()
