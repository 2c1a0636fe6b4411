"""Tests for the correlation API client against a fake session."""

import pytest
import requests

from conftest import FakeResponse
from correlation_sync.client import LOOKUP_URL_PATH, SAVE_URL_PATH
from correlation_sync.errors import ContractError, ResponseDecodeError, TransportError
from correlation_sync.payloads import build_payloads


@pytest.fixture
def payloads(rule_doc):
    return build_payloads(rule_doc("Alpha"))


def test_client_sets_static_headers_and_tls_policy(make_client, fake_session) -> None:
    make_client()
    assert fake_session.headers["x-api-key"] == "secret-key"
    assert fake_session.headers["Content-Type"] == "application/json"
    assert fake_session.verify is True


def test_client_can_skip_certificate_validation(make_client, fake_session) -> None:
    make_client(verify_tls=False)
    assert fake_session.verify is False


def test_urls_are_built_from_hostname(make_client) -> None:
    client = make_client(hostname="siem.internal:8443")
    assert client.save_url == "https://siem.internal:8443" + SAVE_URL_PATH
    assert client.lookup_url == "https://siem.internal:8443" + LOOKUP_URL_PATH
    assert "methodName=AddOrUpdateCorrelation" in client.save_url
    assert "methodName=GetCorrelationList" in client.lookup_url


@pytest.mark.parametrize(
    "body, found",
    [
        ({"Items": []}, False),
        ({"Items": [{}]}, True),
        ({"Items": [{"Name": "Alpha"}, {"Name": "Alpha 2"}]}, True),
        ({}, False),
        ({"Items": None}, False),
        ({"Items": "Alpha"}, False),
    ],
)
def test_lookup_outcome(make_client, fake_session, payloads, body, found) -> None:
    fake_session.routes["GetCorrelationList"] = FakeResponse(200, body)
    client = make_client(timeout=12.5)

    assert client.lookup(payloads[1]) is found

    call = fake_session.calls[0]
    assert call["url"] == client.lookup_url
    assert call["json"] == {"filter": '"Alpha"', "smartRestRequestContext": "-<SmartRestRequestContext>-"}
    assert call["timeout"] == 12.5


@pytest.mark.parametrize("status", [201, 400, 401, 500])
def test_non_200_is_a_transport_error(make_client, fake_session, payloads, status) -> None:
    fake_session.routes["GetCorrelationList"] = FakeResponse(status, {"Items": []})
    fake_session.routes["AddOrUpdateCorrelation"] = FakeResponse(status, {"Status": True})
    client = make_client()

    with pytest.raises(TransportError) as exc:
        client.lookup(payloads[1])
    assert exc.value.status_code == status

    with pytest.raises(TransportError):
        client.save(payloads[0])


def test_connection_failure_is_a_transport_error(make_client, fake_session, payloads) -> None:
    fake_session.routes["GetCorrelationList"] = requests.ConnectionError("refused")
    with pytest.raises(TransportError) as exc:
        make_client().lookup(payloads[1])
    assert exc.value.status_code is None


@pytest.mark.parametrize("text", ["<html>oops</html>", "[1, 2]", '"ok"'])
def test_undecodable_body_is_a_decode_error(make_client, fake_session, payloads, text) -> None:
    fake_session.routes["GetCorrelationList"] = FakeResponse(200, text=text)
    with pytest.raises(ResponseDecodeError):
        make_client().lookup(payloads[1])


def test_null_lookup_body_means_not_found(make_client, fake_session, payloads) -> None:
    fake_session.routes["GetCorrelationList"] = FakeResponse(200, text="null")
    assert make_client().lookup(payloads[1]) is False


def test_null_save_body_lacks_status(make_client, fake_session, payloads) -> None:
    fake_session.routes["AddOrUpdateCorrelation"] = FakeResponse(200, text="null")
    with pytest.raises(ContractError):
        make_client().save(payloads[0])


def test_save_returns_full_body(make_client, fake_session, payloads) -> None:
    body = {"Status": True, "Id": 42, "Messages": ["ok"]}
    fake_session.routes["AddOrUpdateCorrelation"] = FakeResponse(200, body)
    client = make_client()

    assert client.save(payloads[0]) == body
    assert fake_session.calls[0]["url"] == client.save_url
    assert fake_session.calls[0]["json"] == payloads[0].to_dict()


def test_save_accepts_false_status(make_client, fake_session, payloads) -> None:
    fake_session.routes["AddOrUpdateCorrelation"] = FakeResponse(200, {"Status": False})
    assert make_client().save(payloads[0]) == {"Status": False}


@pytest.mark.parametrize("body", [{"Id": 42}, {"Status": "true"}, {"Status": 1}, {"Status": None}])
def test_save_without_boolean_status_is_a_contract_error(make_client, fake_session, payloads, body) -> None:
    fake_session.routes["AddOrUpdateCorrelation"] = FakeResponse(200, body)
    with pytest.raises(ContractError):
        make_client().save(payloads[0])
