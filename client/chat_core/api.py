"""
Server API calls — probe, register, poll, send, delete.

All functions are blocking (called from the poll thread or the caller's
thread). Network failures and non-200 statuses raise TransportError;
callers decide whether that stops polling or surfaces to the user.
"""

import requests

from .config import log
from .constants import API_TIMEOUT, POLL_TIMEOUT
from .exceptions import TransportError
from .wire import encode_message
from . import http_client


def _headers(auth_token=None):
    headers = {"Content-Type": "application/json"}
    if auth_token:
        headers["Authorization"] = auth_token
    return headers


def _request(method, url, body=None, auth_token=None, timeout=API_TIMEOUT):
    """Issue one request. Returns the raw body bytes of a 200 reply."""
    try:
        resp = http_client.http.request(
            method, url, data=body, headers=_headers(auth_token), timeout=timeout,
        )
    except requests.RequestException as e:
        raise TransportError(f"{method} {url} failed: {e}") from e

    if resp.status_code != 200:
        raise TransportError(
            f"{method} {url} → HTTP {resp.status_code}: {resp.text[:200]}",
            status_code=resp.status_code,
        )
    return resp.content


# ─── Registration ────────────────────────────────────────────────

def probe(base_url):
    """GET {base} registration probe. Returns the raw reply body."""
    return _request("GET", base_url)


def register(url, message):
    """GET {base}/users/{clientId} carrying the chosen display name."""
    log.info("Registering %r at %s ...", message.content, url)
    return _request("GET", url, body=encode_message(message))


# ─── Polling ─────────────────────────────────────────────────────

def fetch_message(poll_url, auth_token):
    """One poll cycle. Blocks for as long as the server holds the request."""
    return _request("GET", poll_url, auth_token=auth_token, timeout=POLL_TIMEOUT)


# ─── Outbound ────────────────────────────────────────────────────

def send_plugin(base_url, client_id, message, auth_token=None):
    """POST {base}/users/{clientId}/run. Success is HTTP 200."""
    url = f"{base_url.rstrip('/')}/users/{client_id}/run"
    _request("POST", url, body=encode_message(message), auth_token=auth_token)
    log.info("Sent %s (%d chars)", message.plugin, len(message.content))


def send_delete(base_url, message, auth_token=None):
    """DELETE {base} with a Message body. Returns the raw reply body."""
    return _request("DELETE", base_url, body=encode_message(message), auth_token=auth_token)
