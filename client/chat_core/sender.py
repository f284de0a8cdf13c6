"""
Sender — turns a line of user input into a Message and submits it.

Runs on the caller's thread. The blocking readline() happens in a helper
thread so an external cancel Event can win the race; a read abandoned
that way is picked up by the next call instead of being started twice.
"""

import sys
import threading

from .config import log
from .constants import AWAIT_SLICE_SEC, CANCEL_CHECK_SEC, COMMAND_PREFIX
from .commands import parse_command
from . import api


class Sender:

    def __init__(self, base_url, identity, reader=None, prefix=COMMAND_PREFIX):
        self._base_url = base_url
        self._identity = identity
        self._reader = reader if reader is not None else sys.stdin
        self._prefix = prefix
        self._lock = threading.Lock()
        self._pending = None   # (done Event, result dict) of an outstanding read

    # ─── Input ───────────────────────────────────────────────

    def _pending_read(self):
        with self._lock:
            if self._pending is None:
                done = threading.Event()
                box = {}

                def do_read():
                    try:
                        box["line"] = self._reader.readline()
                    except Exception as e:
                        box["error"] = e
                    finally:
                        done.set()

                threading.Thread(target=do_read, name="chat-input", daemon=True).start()
                self._pending = (done, box)
            return self._pending

    def read_line(self, cancel):
        """
        One line from the reader, or None if *cancel* fired first.
        Returns "" at end of input. Reader exceptions propagate.
        """
        done, box = self._pending_read()
        while not done.wait(CANCEL_CHECK_SEC):
            if cancel.is_set():
                return None

        with self._lock:
            self._pending = None
        if "error" in box:
            raise box["error"]
        return box["line"]

    def _await_registered(self, cancel):
        while not self._identity.await_registered(timeout=AWAIT_SLICE_SEC):
            if cancel.is_set():
                return False
        return True

    # ─── Send ────────────────────────────────────────────────

    def send_message(self, cancel=None, text=None):
        """
        Send *text*, or one line read from the reader when *text* is None.
        Returns the sent Message, or None when cancelled, at end of input,
        or for blank input. TransportError propagates.
        """
        cancel = cancel if cancel is not None else threading.Event()
        if cancel.is_set() or not self._await_registered(cancel):
            return None

        if text is None:
            text = self.read_line(cancel)
            if text is None:
                log.info("Send cancelled while waiting for input")
                return None
            if text == "":
                log.info("Input closed")
                return None

        if not text.strip():
            return None

        command = parse_command(text, self._prefix)
        snap = self._identity.snapshot()
        msg = command.to_message(snap.client_id)
        api.send_plugin(self._base_url, snap.client_id, msg, snap.auth_token)
        return msg

    def send_plugin(self, msg):
        """Submit an already built Message."""
        snap = self._identity.snapshot()
        api.send_plugin(self._base_url, snap.client_id, msg, snap.auth_token)
