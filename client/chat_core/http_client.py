"""
Shared requests.Session for every server call.

Retries cover connection establishment only: the request never reached
the server, so replaying it cannot duplicate a send, a delete or a poll.
Read and status failures reach the caller on the first attempt; the poll
loop turns them into a stop reason instead of retrying.
"""

import os
import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from .constants import CLIENT_VERSION

_connect_retry = Retry(
    total=3,
    connect=3,
    read=0,
    status=0,
    other=0,
    backoff_factor=1,                           # Wait 1s, 2s, 4s between connect attempts
    raise_on_status=False,
)


def _ca_bundle():
    """REQUESTS_CA_BUNDLE / SSL_CERT_FILE if set, else certifi's bundle."""
    for var in ("REQUESTS_CA_BUNDLE", "SSL_CERT_FILE"):
        path = os.environ.get(var)
        if path and os.path.isfile(path):
            return path
    import certifi
    return certifi.where()


def create_session():
    session = requests.Session()
    # Poll thread + sender thread may each hold a connection.
    adapter = HTTPAdapter(pool_connections=1, pool_maxsize=4, max_retries=_connect_retry)
    for scheme in ("http://", "https://"):
        session.mount(scheme, adapter)
    session.verify = _ca_bundle()
    session.headers["User-Agent"] = f"chat-client/{CLIENT_VERSION}"
    return session


def reset_session(session):
    """Close *session* (stale pooled connections) and return a fresh one."""
    try:
        session.close()
    except requests.RequestException:
        pass
    return create_session()


http = create_session()
