"""
ChatClient — one registered identity talking to one chat server.

Owns Identity, RegistrationManager, OutputQueue, PollLoop and Sender.
Polling starts at construction and sits blocked until register() succeeds.
"""

import secrets

from .config import log
from .constants import CLIENT_ID_BYTES, OUTPUT_QUEUE_SIZE
from .output import OutputQueue
from .poller import PollLoop
from .registration import RegistrationManager
from .sender import Sender
from .state import Identity


class ChatClient:

    def __init__(self, server_url, client_id=None, reader=None,
                 queue_size=OUTPUT_QUEUE_SIZE, poll_url=None, on_stop=None,
                 autostart=True):
        self._url = server_url.rstrip("/")
        self._identity = Identity(client_id or secrets.token_urlsafe(CLIENT_ID_BYTES))
        self._registration = RegistrationManager(self._identity)
        self.output = OutputQueue(queue_size)
        self._poller = PollLoop(poll_url or self._url, self._registration,
                                self.output, on_stop=on_stop)
        self._sender = Sender(self._url, self._identity, reader=reader)

        if autostart:
            self._poller.start()

    # ─── State ───────────────────────────────────────────────

    @property
    def url(self):
        return self._url

    @property
    def client_id(self):
        return self._identity.client_id

    @property
    def identity(self):
        """Immutable snapshot of the current identity."""
        return self._identity.snapshot()

    @property
    def registered(self):
        return self._identity.registered

    @property
    def poll_state(self):
        return self._poller.state

    @property
    def stop_reason(self):
        return self._poller.stop_reason

    @property
    def stop_error(self):
        return self._poller.stop_error

    # ─── Registration ────────────────────────────────────────

    def user_url(self):
        return f"{self._url}/users/{self.client_id}"

    def register(self, display_name):
        """Register *display_name*. Raises TransportError/DecodeError/RegistrationError."""
        return self._registration.request_registration(self.user_url(), display_name)

    def probe(self):
        return self._registration.probe(self._url)

    def unregister(self):
        self._registration.unregister()

    def reregister(self, msg):
        return self._registration.reregister(self._url, msg)

    def delete(self, msg):
        self._registration.delete(self._url, msg)

    # ─── Messages ────────────────────────────────────────────

    def poll_messages(self):
        """Everything received so far, without blocking."""
        return self.output.drain()

    def read_line(self, cancel):
        return self._sender.read_line(cancel)

    def send_message(self, cancel=None, text=None):
        return self._sender.send_message(cancel, text)

    def send_plugin(self, msg):
        self._sender.send_plugin(msg)

    # ─── Lifecycle ───────────────────────────────────────────

    def start_polling(self):
        return self._poller.start()

    def restart_polling(self):
        """Resume polling after STOPPED. Refused once the client has been stopped."""
        if self.output.closed:
            return False
        return self._poller.restart()

    def set_on_stop(self, callback):
        """Install the on_stop(reason, error) callback of the poll loop."""
        self._poller.on_stop = callback

    def stop(self, timeout=1.0):
        """Stop polling and close the output queue. An in-flight poll is left to finish."""
        self._poller.stop(timeout)
        self.output.close()
        log.info("ChatClient shut down.")
