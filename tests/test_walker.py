# tests/test_walker.py

import random
from unittest.mock import MagicMock

import dns.exception
import pytest

from aliascheck.dns import DelegationError, DelegationWalker, RootDirectory, suffixes
from conftest import make_response, rr

ROOT = "198.41.0.4"


@pytest.fixture
def roots():
    return RootDirectory(servers=(ROOT,))


@pytest.fixture
def delegations(fake_exchange):
    fake_exchange.add(
        "com.", "NS",
        make_response(
            "com.", "NS",
            authority=[rr("com.", "NS", "a.gtld-servers.net.")],
        ),
        nameserver=ROOT,
    )
    fake_exchange.add(
        "example.com.", "NS",
        make_response(
            "example.com.", "NS",
            authority=[rr("example.com.", "NS", "ns1.example.com.")],
        ),
        nameserver="a.gtld-servers.net.",
    )
    fake_exchange.add(
        "www.example.com.", "NS",
        make_response(
            "www.example.com.", "NS",
            authority=[
                rr(
                    "example.com.", "SOA",
                    "ns1.example.com. hostmaster.example.com. 1 7200 3600 1209600 300",
                )
            ],
        ),
        nameserver="ns1.example.com.",
    )
    return fake_exchange


def test_suffixes_shortest_first():
    assert suffixes("a.b.example.com.") == [
        "com.",
        "example.com.",
        "b.example.com.",
        "a.b.example.com.",
    ]


def test_suffixes_of_root_is_empty():
    assert suffixes(".") == []


@pytest.mark.asyncio
async def test_walk_follows_referrals(roots, delegations):
    walker = DelegationWalker(roots, delegations)

    nameserver = await walker.find_authoritative("www.example.com")

    assert nameserver == "ns1.example.com."
    assert delegations.calls == [
        ("com.", "NS", ROOT, False),
        ("example.com.", "NS", "a.gtld-servers.net.", False),
        ("www.example.com.", "NS", "ns1.example.com.", False),
    ]


@pytest.mark.asyncio
async def test_walk_queries_at_most_one_ns_per_label(roots, fake_exchange):
    walker = DelegationWalker(roots, fake_exchange)

    nameserver = await walker.find_authoritative("a.b.c.example.com.")

    assert len(fake_exchange.calls) == 5
    # nothing was delegated, the walk stays on the starting server
    assert nameserver == ROOT


@pytest.mark.asyncio
async def test_walk_accepts_ns_in_answer_section(roots, fake_exchange):
    fake_exchange.add(
        "org.", "NS",
        make_response("org.", "NS", answer=[rr("org.", "NS", "a0.org.afilias-nst.info.")]),
    )
    walker = DelegationWalker(roots, fake_exchange)

    assert await walker.find_authoritative("org.") == "a0.org.afilias-nst.info."


@pytest.mark.asyncio
async def test_walk_picks_delegation_with_random_source(roots, fake_exchange):
    fake_exchange.add(
        "net.", "NS",
        make_response(
            "net.", "NS",
            authority=[rr("net.", "NS", "a.gtld-servers.net.", "b.gtld-servers.net.")],
        ),
    )
    rng = MagicMock(spec=random.Random)
    rng.choice.side_effect = lambda candidates: candidates[-1]
    walker = DelegationWalker(roots, fake_exchange, rng=rng)

    assert await walker.find_authoritative("net.") == "b.gtld-servers.net."
    rng.choice.assert_called_once_with(["a.gtld-servers.net.", "b.gtld-servers.net."])


@pytest.mark.asyncio
async def test_walk_single_delegation_skips_random_source(roots, delegations):
    rng = MagicMock(spec=random.Random)
    walker = DelegationWalker(roots, delegations, rng=rng)

    assert await walker.find_authoritative("www.example.com.") == "ns1.example.com."
    rng.choice.assert_not_called()


@pytest.mark.asyncio
async def test_walk_failure_names_the_suffix(roots, delegations):
    delegations.add(
        "example.com.", "NS", dns.exception.Timeout(), nameserver="a.gtld-servers.net."
    )
    walker = DelegationWalker(roots, delegations)

    with pytest.raises(DelegationError) as exc_info:
        await walker.find_authoritative("www.example.com.")

    assert exc_info.value.suffix == "example.com."
    assert isinstance(exc_info.value.cause, dns.exception.Timeout)
    # the walk stops at the failing label
    assert len(delegations.calls) == 2


@pytest.mark.asyncio
async def test_walk_wraps_socket_errors(roots, fake_exchange):
    fake_exchange.add("com.", "NS", ConnectionRefusedError("refused"))
    walker = DelegationWalker(roots, fake_exchange)

    with pytest.raises(DelegationError, match="com."):
        await walker.find_authoritative("example.com.")


@pytest.mark.asyncio
async def test_walk_uses_tcp_when_configured(roots, fake_exchange):
    walker = DelegationWalker(roots, fake_exchange, tcp=True)

    await walker.find_authoritative("com.")

    assert fake_exchange.calls == [("com.", "NS", ROOT, True)]


@pytest.mark.asyncio
async def test_walk_wraps_closed_tcp_connection(roots, fake_exchange):
    fake_exchange.add("com.", "NS", EOFError("EOF"))
    walker = DelegationWalker(roots, fake_exchange, tcp=True)

    with pytest.raises(DelegationError) as exc_info:
        await walker.find_authoritative("example.com.")

    assert exc_info.value.suffix == "com."
    assert isinstance(exc_info.value.cause, EOFError)
