import json

import pytest

from chat_core.exceptions import DecodeError, RegistrationError, TransportError

from conftest import AUTH_TOKEN, CLIENT_ID, SERVER, DummyResponse

TOKEN_REPLY = {"name": "authToken", "content": AUTH_TOKEN}


def test_register_with_display_name(session, registration, identity):
    session.handler = lambda m, u, d, h: DummyResponse(200, TOKEN_REPLY)

    registration.request_registration(f"{SERVER}/users/{CLIENT_ID}", "Arndt")

    snap = identity.snapshot()
    assert snap.auth_token == AUTH_TOKEN
    assert snap.registered is True
    assert snap.client_name == "Arndt"

    method, url, data, _ = session.calls[0]
    assert (method, url) == ("GET", f"{SERVER}/users/{CLIENT_ID}")
    assert json.loads(data) == {"plugin": "/register", "content": "Arndt", "clientId": CLIENT_ID}


def test_register_without_identity_path_fails(session, registration, identity):
    session.handler = lambda m, u, d, h: DummyResponse(200, TOKEN_REPLY)

    with pytest.raises(RegistrationError):
        registration.request_registration(SERVER, "Arndt")

    assert session.calls == []
    assert identity.registered is False


def test_register_rejects_blank_name(session, registration):
    with pytest.raises(RegistrationError):
        registration.request_registration(f"{SERVER}/users/{CLIENT_ID}", "   ")
    assert session.calls == []


def test_register_surfaces_server_errors(session, registration, identity):
    session.handler = lambda m, u, d, h: DummyResponse(400, "no such user")

    with pytest.raises(TransportError) as exc:
        registration.request_registration(f"{SERVER}/users/{CLIENT_ID}", "Arndt")

    assert exc.value.status_code == 400
    assert identity.registered is False


def test_malformed_reply_leaves_state_unchanged(registration, identity):
    with pytest.raises(DecodeError):
        registration.register(b"{broken")
    assert identity.snapshot().registered is False


def test_empty_token_is_rejected(registration, identity):
    with pytest.raises(RegistrationError):
        registration.register(json.dumps({"name": "authToken", "content": ""}))
    assert identity.registered is False


def test_unregister_is_idempotent(registration, registered):
    registration.unregister()
    registration.unregister()
    snap = registered.snapshot()
    assert snap.registered is False
    assert snap.auth_token == ""


def test_probe_does_not_register(session, registration, identity):
    session.handler = lambda m, u, d, h: DummyResponse(200, TOKEN_REPLY)

    rsp = registration.probe(SERVER)

    assert rsp.content == AUTH_TOKEN
    assert session.calls[0][:2] == ("GET", SERVER)
    assert identity.registered is False


def test_reregister_refreshes_token(session, registration, registered):
    from chat_core.wire import Message

    session.handler = lambda m, u, d, h: DummyResponse(200, {"name": "authToken", "content": "fresh"})

    registration.reregister(SERVER, Message("/register", "Arndt", CLIENT_ID))

    method, url, _, headers = session.calls[0]
    assert (method, url) == ("DELETE", SERVER)
    assert headers["Authorization"] == AUTH_TOKEN
    snap = registered.snapshot()
    assert snap.auth_token == "fresh"
    assert snap.client_name == "Arndt"


def test_delete_unregisters(session, registration, registered):
    from chat_core.wire import Message

    registration.delete(SERVER, Message("/quit", "", CLIENT_ID))

    assert session.calls[0][0] == "DELETE"
    assert registered.registered is False
