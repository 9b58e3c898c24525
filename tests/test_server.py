# tests/test_server.py

from unittest.mock import patch

import pytest
from fastapi.testclient import TestClient

from aliascheck.dns import ConfigError, DelegationError, QueryError, ResolutionResult
from aliascheck.server import ServiceSettings, create_app
from aliascheck.server.__main__ import main
from conftest import FakeResolver

AUTH = ("tester", "s3cret")


@pytest.fixture
def settings():
    return ServiceSettings(auth_user=AUTH[0], auth_password=AUTH[1])


@pytest.fixture
def resolver():
    return FakeResolver({
        "www.example.com.": ResolutionResult(
            addresses=("93.184.216.34",),
            cname="cdn.example.net.",
            cname_chain=("cdn.example.net.",),
            last_nameserver="192.0.2.53",
        ),
        "cdn.example.net.": ResolutionResult(
            addresses=("93.184.216.34",),
            last_nameserver="192.0.2.53",
        ),
    })


@pytest.fixture
def client(settings, resolver):
    return TestClient(create_app(settings, backend=resolver))


def test_lookup_requires_credentials(client):
    response = client.get("/lookup/www.example.com")

    assert response.status_code == 401
    assert response.json() == {"error": "unauthorized"}


def test_lookup_rejects_wrong_password(client):
    response = client.get("/lookup/www.example.com", auth=(AUTH[0], "wrong"))

    assert response.status_code == 401


def test_verify_requires_credentials(client, resolver):
    response = client.get("/verify_target/www.example.com/cdn.example.net")

    assert response.status_code == 401
    assert resolver.calls == []


def test_lookup(client, resolver):
    response = client.get("/lookup/www.example.com", auth=AUTH)

    assert response.status_code == 200
    assert response.json() == {
        "A": ["93.184.216.34"],
        "CNAME": "cdn.example.net.",
        "CNAMEChain": ["cdn.example.net."],
        "LastNS": "192.0.2.53",
    }
    assert resolver.calls == [("www.example.com.", False)]


def test_lookup_nocache_flag(client, resolver):
    client.get("/lookup/www.example.com", params={"nocache": "1"}, auth=AUTH)
    client.get("/lookup/www.example.com", params={"nocache": ""}, auth=AUTH)

    assert resolver.calls == [("www.example.com.", True), ("www.example.com.", False)]


def test_lookup_failure_is_server_error(client, resolver):
    resolver.results["broken.example.com."] = DelegationError("example.com.", TimeoutError("timed out"))

    response = client.get("/lookup/broken.example.com", auth=AUTH)

    assert response.status_code == 500
    assert "example.com." in response.json()["error"]


def test_verify_direct_cname(client):
    response = client.get("/verify_target/www.example.com/cdn.example.net", auth=AUTH)

    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "ok"
    assert body["code"] == 1
    assert body["message"] == "direct CNAME match"
    assert list(body["data"]) == ["www.example.com."]
    assert "error" not in body


def test_verify_with_target_alias(client, resolver):
    resolver.results["other.example.org."] = ResolutionResult(addresses=("10.0.0.1",))

    response = client.get(
        "/verify_target/other.example.org/target.example.net",
        params={"target_alias": "cdn.example.net"},
        auth=AUTH,
    )

    assert response.status_code == 200
    assert response.json()["code"] == 0
    assert resolver.calls == [("other.example.org.", False), ("cdn.example.net.", False)]


def test_verify_failure_names_hostname(client, resolver):
    resolver.results["cdn.example.net."] = QueryError("A", "cdn.example.net.", TimeoutError("timed out"))
    resolver.results["www.example.com."] = ResolutionResult(addresses=("93.184.216.34",))

    response = client.get("/verify_target/www.example.com/cdn.example.net", auth=AUTH)

    assert response.status_code == 500
    body = response.json()
    assert body["hostname"] == "cdn.example.net."
    assert "timed out" in body["error"]


def test_verify_uses_policy_from_settings(resolver):
    settings = ServiceSettings(
        auth_user=AUTH[0],
        auth_password=AUTH[1],
        no_match_status="error",
    )
    resolver.results["www.example.com."] = ResolutionResult(addresses=("1.1.1.1",))
    client = TestClient(create_app(settings, backend=resolver))

    response = client.get("/verify_target/www.example.com/cdn.example.net", auth=AUTH)

    assert response.status_code == 200
    assert response.json()["status"] == "error"
    assert response.json()["code"] == 0


def test_unknown_route(client):
    response = client.get("/nope", auth=AUTH)

    assert response.status_code == 404
    assert response.json() == {"error": "not found"}


def test_health_needs_no_credentials(client):
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_create_app_fails_without_resolver_configuration(tmp_path):
    settings = ServiceSettings(resolv_conf=str(tmp_path / "missing.conf"))

    with pytest.raises(ConfigError):
        create_app(settings)


def test_main_exits_on_config_error(tmp_path, monkeypatch):
    monkeypatch.setenv("RESOLV_CONF", str(tmp_path / "missing.conf"))

    with patch("aliascheck.server.__main__.uvicorn.run") as run:
        assert main() == 1

    run.assert_not_called()


def test_malformed_basic_header_is_unauthorized(client, resolver):
    response = client.get(
        "/lookup/www.example.com",
        headers={"Authorization": "Basic !!!"},
    )

    assert response.status_code == 401
    assert response.json() == {"error": "unauthorized"}
    assert resolver.calls == []


def test_lookup_closed_connection_is_structured_error(settings, fake_exchange, backend):
    fake_exchange.add("www.example.com.", "ANY", EOFError("EOF"))
    client = TestClient(create_app(settings, backend=backend))

    response = client.get("/lookup/www.example.com", auth=AUTH)

    assert response.status_code == 500
    assert "ANY" in response.json()["error"]
