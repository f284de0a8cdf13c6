import json
import os
import tempfile
import threading
import time

import pytest

# Keep config/log files out of the source tree.
os.environ.setdefault("CHAT_CLIENT_HOME", tempfile.mkdtemp(prefix="chat-client-tests-"))

SERVER = "http://chat.test"
CLIENT_ID = "clientId-DyGWNnLrLWnbuhf-LgBUAdAxdZf-U1pgRw"
AUTH_TOKEN = "authId-5EDyGWNnLrLWnbuhf-LgBUAdAxdZf-U1pgRwc7ex1dt5EDyGWNnLrLWnbuhf"


class DummyResponse:
    def __init__(self, status_code=200, content=b""):
        self.status_code = status_code
        if isinstance(content, dict):
            content = json.dumps(content)
        if isinstance(content, str):
            content = content.encode("utf-8")
        self.content = content

    @property
    def text(self):
        return self.content.decode("utf-8", errors="replace")


class DummySession:
    """Stands in for http_client.http; *handler(method, url, data, headers)* answers."""

    def __init__(self, handler=None):
        self.handler = handler or (lambda method, url, data, headers: DummyResponse())
        self.calls = []
        self._lock = threading.Lock()

    def request(self, method, url, data=None, headers=None, timeout=None):
        with self._lock:
            self.calls.append((method, url, data, dict(headers or {})))
        result = self.handler(method, url, data, headers or {})
        if isinstance(result, Exception):
            raise result
        return result

    def close(self):
        pass

    def calls_to(self, method):
        with self._lock:
            return [c for c in self.calls if c[0] == method]


def scripted(*replies):
    """Handler answering polls with *replies* in order, then an empty body."""
    pending = list(replies)
    lock = threading.Lock()

    def handler(method, url, data, headers):
        with lock:
            if pending:
                return pending.pop(0)
        return DummyResponse(200, b"")

    return handler


@pytest.fixture
def session(monkeypatch):
    from chat_core import http_client

    dummy = DummySession()
    monkeypatch.setattr(http_client, "http", dummy)
    return dummy


@pytest.fixture
def identity():
    from chat_core.state import Identity

    return Identity(CLIENT_ID)


@pytest.fixture
def registration(identity):
    from chat_core.registration import RegistrationManager

    return RegistrationManager(identity)


@pytest.fixture
def registered(identity):
    identity.mark_registered("Arndt", AUTH_TOKEN)
    return identity


def chat_server(messages, register_status=200):
    """Registration, a fixed list of polled messages, then end of stream."""
    pending = list(messages)
    lock = threading.Lock()

    def handler(method, url, data, headers):
        if method == "GET" and url.endswith(f"/users/{CLIENT_ID}"):
            if register_status != 200:
                return DummyResponse(register_status, "registration refused")
            return DummyResponse(200, {"name": "authToken", "content": AUTH_TOKEN})
        if method == "GET":
            with lock:
                if pending:
                    return DummyResponse(200, pending.pop(0))
            return DummyResponse(200, b"")
        return DummyResponse(200, b"")

    return handler


def wait_for(predicate, timeout=3):
    deadline = time.monotonic() + timeout
    while not predicate() and time.monotonic() < deadline:
        time.sleep(0.01)
    return predicate()
