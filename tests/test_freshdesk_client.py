"""Tests for the Freshdesk HTTP wrapper, with the session's transport stubbed."""

import json

import pytest
import requests

from formrelay.errors import UpstreamError
from formrelay.schemas.ticket import TicketPayload
from formrelay.services.freshdesk_client import FreshdeskClient


def make_response(status, body=None, text=None):
    resp = requests.Response()
    resp.status_code = status
    resp.encoding = "utf-8"
    if text is None:
        text = json.dumps(body) if body is not None else ""
    resp._content = text.encode("utf-8")
    return resp


class Transport:
    def __init__(self, *responses):
        self.responses = list(responses)
        self.requests = []

    def __call__(self, method, url, **kwargs):
        self.requests.append((method, url, kwargs))
        result = self.responses.pop(0)
        if isinstance(result, Exception):
            raise result
        return result


@pytest.fixture
def make_client():
    def _make(*responses):
        transport = Transport(*responses)
        client = FreshdeskClient("acme", "secret-key", timeout=7)
        client.session.request = transport
        return client, transport

    return _make


def test_session_is_authenticated_with_api_key():
    client = FreshdeskClient("acme", "secret-key")
    assert client.base_url == "https://acme.freshdesk.com/api/v2"
    assert client.session.auth == ("secret-key", "X")
    assert client.session.headers["Accept"] == "application/json"


def test_search_by_email_returns_contacts(make_client):
    client, transport = make_client(make_response(200, [{"id": 7, "name": "Ana", "email": "a@acme.com", "mobile": None}]))

    contacts = client.search_contacts_by_email("a@acme.com")

    assert [c.id for c in contacts] == [7]
    method, url, kwargs = transport.requests[0]
    assert method == "GET"
    assert url == "https://acme.freshdesk.com/api/v2/contacts"
    assert kwargs["params"] == {"email": "a@acme.com"}
    assert kwargs["timeout"] == 7


def test_search_by_phone_uses_mobile_param(make_client):
    client, transport = make_client(make_response(200, []))

    assert client.search_contacts_by_phone("+5511999") == []
    assert transport.requests[0][2]["params"] == {"mobile": "+5511999"}


@pytest.mark.parametrize(
    "response",
    [
        make_response(500, text="boom"),
        make_response(404, {"message": "nope"}),
        make_response(200, {"not": "a list"}),
        make_response(200, text="<html>"),
        requests.ConnectionError("down"),
    ],
)
def test_failed_lookup_means_no_match(make_client, response):
    client, _ = make_client(response)
    assert client.search_contacts_by_email("a@acme.com") == []


def test_create_contact_posts_fields(make_client):
    client, transport = make_client(make_response(201, {"id": 9, "name": "Ana", "email": "a@acme.com"}))

    contact = client.create_contact({"name": "Ana", "email": "a@acme.com"})

    assert contact.id == 9
    method, url, kwargs = transport.requests[0]
    assert (method, url) == ("POST", "https://acme.freshdesk.com/api/v2/contacts")
    assert kwargs["json"] == {"name": "Ana", "email": "a@acme.com"}


def test_create_contact_failure_carries_status_and_body(make_client):
    client, _ = make_client(make_response(400, text='{"errors": ["invalid email"]}'))

    with pytest.raises(UpstreamError) as exc:
        client.create_contact({"email": "bad"})

    assert exc.value.status_code == 400
    assert "invalid email" in exc.value.body


def test_create_contact_network_error_is_bad_gateway(make_client):
    client, _ = make_client(requests.Timeout("slow"))

    with pytest.raises(UpstreamError) as exc:
        client.create_contact({"email": "a@acme.com"})

    assert exc.value.status_code == 502


def test_update_contact_puts_to_contact_url(make_client):
    client, transport = make_client(make_response(200, {"id": 9, "name": "Ana B"}))

    contact = client.update_contact(9, {"name": "Ana B"})

    assert contact.name == "Ana B"
    method, url, _ = transport.requests[0]
    assert (method, url) == ("PUT", "https://acme.freshdesk.com/api/v2/contacts/9")


def test_update_contact_failure_raises(make_client):
    client, _ = make_client(make_response(403, text="forbidden"))

    with pytest.raises(UpstreamError):
        client.update_contact(9, {"name": "Ana B"})


def test_create_ticket_reports_outcome(make_client):
    client, transport = make_client(make_response(422, text='{"description": "Validation failed"}'))
    payload = TicketPayload(requester_id=9, subject="Hi", description="<p>x</p>", priority=2)

    result = client.create_ticket(payload)

    assert not result.ok
    assert result.status_code == 422
    assert "Validation failed" in result.body
    sent = transport.requests[0][2]["json"]
    assert sent == {
        "requester_id": 9,
        "subject": "Hi",
        "description": "<p>x</p>",
        "priority": 2,
        "status": 2,
        "source": 2,
    }


def test_create_ticket_network_error(make_client):
    client, _ = make_client(requests.ConnectionError("down"))
    payload = TicketPayload(email="a@acme.com", subject="Hi", description="x")

    result = client.create_ticket(payload)

    assert not result.ok
    assert result.status_code == 502
