"""
Registration: the handshake that trades a display name for an auth token.

RegistrationManager is the only component allowed to flip Identity
between registered and unregistered.
"""

from urllib.parse import urlparse

from .config import log
from .constants import REGISTER_PLUGIN
from .exceptions import RegistrationError
from .wire import Message, decode_response
from . import api


class RegistrationManager:

    def __init__(self, identity):
        self._identity = identity

    @property
    def identity(self):
        return self._identity

    def register(self, body, display_name=None):
        """
        Apply a registration reply. Decodes *body* first so a malformed
        reply (DecodeError) or an empty token (RegistrationError) leaves
        Identity untouched.
        """
        rsp = decode_response(body)
        if not rsp.content:
            raise RegistrationError("Registration reply carried no auth token")

        name = display_name or rsp.name
        self._identity.mark_registered(name, rsp.content)
        log.info("Registered as %s", name)
        return rsp

    def unregister(self):
        """Drop registration and secrets. Safe to call repeatedly."""
        if self._identity.mark_unregistered():
            log.info("Unregistered (client %s)", self._identity.client_id[:8] + "...")

    def user_path_ok(self, url):
        path = urlparse(url).path.rstrip("/")
        return path.endswith(f"/users/{self._identity.client_id}")

    def request_registration(self, url, display_name):
        """Register *display_name* at {base}/users/{clientId}."""
        display_name = (display_name or "").strip()
        if not display_name:
            raise RegistrationError("Display name is required")
        if not self.user_path_ok(url):
            raise RegistrationError(f"Registration URL lacks /users/{{clientId}}: {url}")

        msg = Message(plugin=REGISTER_PLUGIN, content=display_name,
                      client_id=self._identity.client_id)
        body = api.register(url, msg)
        return self.register(body, display_name)

    def probe(self, base_url):
        """GET {base}; returns the decoded reply without touching Identity."""
        return decode_response(api.probe(base_url))

    def reregister(self, base_url, message):
        """DELETE {base}, then register from the fresh reply."""
        snap = self._identity.snapshot()
        body = api.send_delete(base_url, message, snap.auth_token)
        return self.register(body, snap.client_name or None)

    def delete(self, base_url, message):
        """DELETE {base} and drop local registration."""
        token = self._identity.snapshot().auth_token
        api.send_delete(base_url, message, token)
        self.unregister()
