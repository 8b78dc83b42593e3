from unittest.mock import MagicMock

import pytest
import requests

from localmart.client import ChatClient, ErrorKind


def response(status_code, body):
    res = MagicMock()
    res.status_code = status_code
    res.ok = status_code < 400
    if isinstance(body, Exception):
        res.json.side_effect = body
    else:
        res.json.return_value = body
    return res


@pytest.fixture
def http():
    session = MagicMock()
    session.headers = {}
    return session


@pytest.fixture
def client(http):
    return ChatClient("http://shop.test/", token="abc", session=http)


def test_token_is_sent_as_bearer(client, http):
    assert http.headers["Authorization"] == "Bearer abc"


def test_send_posts_action(client, http):
    http.request.return_value = response(200, {"data": {"id": 5, "content": "hi"}})

    outcome = client.send(3, "hi")

    assert outcome.ok
    assert outcome.value == {"id": 5, "content": "hi"}
    http.request.assert_called_once_with(
        "POST", "http://shop.test/api/v1/chat",
        timeout=10, json={"action": "send", "conversationId": 3, "content": "hi"},
    )


def test_fetch_sends_cursor_only_when_present(client, http):
    http.request.return_value = response(200, {"data": []})

    client.fetch(3)
    client.fetch(3, after="2026-01-01T12:00:00")

    first, second = http.request.call_args_list
    assert first.kwargs["json"] == {"action": "fetch", "conversationId": 3}
    assert second.kwargs["json"] == {"action": "fetch", "conversationId": 3, "after": "2026-01-01T12:00:00"}


def test_fetch_null_data_is_empty_list(client, http):
    http.request.return_value = response(200, {"data": None})

    outcome = client.fetch(3)

    assert outcome.ok
    assert outcome.value == []


def test_unread_count_unwraps_count(client, http):
    http.request.return_value = response(200, {"data": {"count": 4}})

    assert client.unread_count(3).value == 4


@pytest.mark.parametrize("status_code, code, kind", [
    (400, "INVALID_INPUT", ErrorKind.INVALID_INPUT),
    (401, "UNAUTHORIZED", ErrorKind.UNAUTHORIZED),
    (403, "PERMISSION_DENIED", ErrorKind.PERMISSION_DENIED),
    (404, "RESOURCE_NOT_FOUND", ErrorKind.NOT_FOUND),
    (409, "CONFLICT", ErrorKind.CONFLICT),
    (503, "SERVICE_UNAVAILABLE", ErrorKind.TRANSIENT),
    (500, "INTERNAL_SERVER_ERROR", ErrorKind.TRANSIENT),
    (418, "TEAPOT", ErrorKind.UNKNOWN),
])
def test_error_responses_are_tagged(client, http, status_code, code, kind):
    http.request.return_value = response(status_code, {"error": {"code": code, "message": "nope"}})

    outcome = client.mark_read(3)

    assert not outcome.ok
    assert outcome.error is kind
    assert outcome.message == "nope"


def test_error_without_json_body_falls_back_to_status(client, http):
    http.request.return_value = response(502, ValueError("not json"))

    outcome = client.init(1, 2)

    assert outcome.error is ErrorKind.TRANSIENT
    assert outcome.message == "HTTP 502"


def test_transport_failure_is_transient(client, http):
    http.request.side_effect = requests.ConnectionError("connection refused")

    outcome = client.fetch(3)

    assert outcome.error is ErrorKind.TRANSIENT
    assert "connection refused" in outcome.message


def test_login_stores_token(http):
    client = ChatClient("http://shop.test", session=http)
    http.request.return_value = response(200, {"data": {"token": "fresh", "user": {"id": 1}}})

    outcome = client.login("carol@test.com", "password")

    assert outcome.ok
    assert http.headers["Authorization"] == "Bearer fresh"


def test_failed_login_keeps_headers(http):
    client = ChatClient("http://shop.test", session=http)
    http.request.return_value = response(401, {"error": {"code": "INVALID_CREDENTIALS", "message": "bad"}})

    outcome = client.login("carol@test.com", "wrong")

    assert outcome.error is ErrorKind.UNAUTHORIZED
    assert "Authorization" not in http.headers


def test_list_conversations_passes_role(client, http):
    http.request.return_value = response(200, {"data": [{"id": 1}]})

    outcome = client.list_conversations(role="CUSTOMER")

    assert outcome.value == [{"id": 1}]
    assert http.request.call_args.kwargs["params"] == {"role": "CUSTOMER"}
