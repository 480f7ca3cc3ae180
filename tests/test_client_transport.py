import logging

import pytest
import requests

from fitapi.domain.errors import ApiCallError, TransportError
from fitapi.domain.models import Credentials, RequestDescriptor
from fitapi.orchestrator.client import FitbitClient
from fitapi.settings import FitapiSettings
from fitapi.transport.http import RequestsTransport


class FakeResponse:
    status_code = 200


class FakeSession:
    def __init__(self, error: Exception | None = None):
        self.calls: list[dict] = []
        self.error = error

    def request(self, method, url, **kwargs):
        self.calls.append({"method": method, "url": url, **kwargs})
        if self.error is not None:
            raise self.error
        return FakeResponse()


class RecordingTransport:
    def __init__(self):
        self.sent: list[tuple[RequestDescriptor, Credentials]] = []

    def send(self, request, credentials):
        self.sent.append((request, credentials))
        return "response"


def test_requests_transport_sends_descriptor():
    session = FakeSession()
    transport = RequestsTransport(settings=FitapiSettings(timeout=5), session=session)
    d = RequestDescriptor(
        method="api-log-water",
        verb="POST",
        path="/1/user/-/foods/log/water.json",
        headers={"Accept-Language": "en_US"},
        body="amount=500&date=2024-01-01",
    )

    resp = transport.send(d, Credentials(auth_token="t", auth_secret="s"))

    assert resp.status_code == 200
    call = session.calls[0]
    assert call["method"] == "POST"
    assert call["url"] == "https://api.fitbit.com/1/user/-/foods/log/water.json"
    assert call["data"] == "amount=500&date=2024-01-01"
    assert call["headers"]["Accept-Language"] == "en_US"
    assert call["headers"]["Content-Type"] == "application/x-www-form-urlencoded"
    assert call["timeout"] == 5
    assert call["auth"] is None


def test_requests_transport_get_with_query_and_signing_hook():
    session = FakeSession()
    seen = []

    def auth_factory(credentials):
        seen.append(credentials)
        return None

    transport = RequestsTransport(
        settings=FitapiSettings(base_url="http://localhost:8080/"),
        session=session,
        auth_factory=auth_factory,
    )
    d = RequestDescriptor(method="api-search-foods", verb="GET", path="/1/foods/search.xml?query=apple", query="query=apple")
    transport.send(d, Credentials(consumer_key="ck"))

    call = session.calls[0]
    assert call["url"] == "http://localhost:8080/1/foods/search.xml?query=apple"
    assert call["data"] is None
    assert "Content-Type" not in call["headers"]
    assert seen[0].consumer_key == "ck"


def test_requests_transport_wraps_errors():
    transport = RequestsTransport(session=FakeSession(error=requests.ConnectionError("boom")))
    d = RequestDescriptor(method="api-get-food-units", verb="GET", path="/1/foods/units.xml")
    with pytest.raises(TransportError) as exc:
        transport.send(d, Credentials())
    assert "boom" in str(exc.value)


def test_client_call_compiles_and_sends():
    transport = RecordingTransport()
    client = FitbitClient("ck", "cs", transport=transport)

    out = client.call("api-log-water", {"amount": "500", "date": "2024-01-01"}, "tok", "sec")

    assert out == "response"
    request, creds = transport.sent[0]
    assert request.body == "amount=500&date=2024-01-01"
    assert creds == Credentials(consumer_key="ck", consumer_secret="cs", auth_token="tok", auth_secret="sec")
    assert creds.has_user_token


def test_client_call_rejects_without_sending():
    transport = RecordingTransport()
    client = FitbitClient(transport=transport)

    with pytest.raises(ApiCallError) as exc:
        client.call("api-log-water", {"date": "2024-01-01"}, "tok", "sec")

    assert exc.value.failure.kind == "missing_required_parameters"
    assert "You're missing ['amount']" in str(exc.value)
    assert transport.sent == []


def test_client_compile_uses_its_settings():
    client = FitbitClient(transport=RecordingTransport(), settings=FitapiSettings(api_version="2"))
    d = client.compile("api-get-food-units")
    assert d.path == "/2/foods/units.xml"


def test_requests_transport_warns_when_user_token_cannot_be_signed(caplog):
    session = FakeSession()
    transport = RequestsTransport(session=session)
    d = RequestDescriptor(method="api-get-user-info", verb="GET", path="/1/user/-/profile.xml")

    with caplog.at_level(logging.WARNING, logger="fitapi.transport.http"):
        transport.send(d, Credentials(auth_token="t", auth_secret="s"))

    assert session.calls[0]["auth"] is None
    assert "no auth_factory" in caplog.text


def test_requests_transport_quiet_without_user_token(caplog):
    transport = RequestsTransport(session=FakeSession())
    d = RequestDescriptor(method="api-get-food-units", verb="GET", path="/1/foods/units.xml")

    with caplog.at_level(logging.WARNING, logger="fitapi.transport.http"):
        transport.send(d, Credentials(consumer_key="ck"))

    assert caplog.records == []
