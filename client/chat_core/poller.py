"""
PollLoop — background thread that fetches inbound chat messages.

  IDLE ──start()──▶ POLLING ──error / end of stream / stop()──▶ STOPPED
                       ▲                                          │
                       └──────────────── restart() ◀──────────────┘

While POLLING the thread waits until the client is registered, issues one
long-poll request, filters the reply and pushes it onto the OutputQueue.
The first transport, status or decode failure unregisters the client and
stops the loop; there is no automatic retry. Why it stopped is kept in
stop_reason / stop_error and passed to the on_stop callback.
"""

import queue
import threading
from enum import Enum

from .config import log
from .constants import AWAIT_SLICE_SEC, INACTIVE_FLAG
from .exceptions import DecodeError, QueueClosed, TransportError
from .wire import decode_response
from . import api


class PollState(str, Enum):
    IDLE = "idle"
    POLLING = "polling"
    STOPPED = "stopped"


class StopReason(str, Enum):
    TRANSPORT_ERROR = "transport_error"   # network failure
    BAD_STATUS = "bad_status"             # non-200 reply
    DECODE_ERROR = "decode_error"         # reply was not a Response
    END_OF_STREAM = "end_of_stream"       # empty body: server ended the stream
    REQUESTED = "requested"               # stop() or queue closed
    CRASHED = "crashed"                   # unexpected exception in the thread


class PollLoop:

    def __init__(self, poll_url, registration, output, on_stop=None):
        self._url = poll_url
        self._registration = registration
        self._identity = registration.identity
        self._output = output
        self.on_stop = on_stop

        self._lock = threading.Lock()
        self._thread = None
        self._stop_event = threading.Event()

        self.state = PollState.IDLE
        self.stop_reason = None
        self.stop_error = None

    # ─── Lifecycle ───────────────────────────────────────────

    @property
    def running(self):
        thread = self._thread
        return thread is not None and thread.is_alive()

    def start(self):
        """
        Start polling. Returns False if a poll thread is already alive.
        May be called from on_stop, where the finishing thread still counts as alive.
        """
        with self._lock:
            if self.running and self._thread is not threading.current_thread():
                return False
            self._stop_event = threading.Event()
            self.state = PollState.POLLING
            self.stop_reason = None
            self.stop_error = None
            self._thread = threading.Thread(
                target=self._run, args=(self._stop_event,),
                name="chat-poll", daemon=True,
            )
            self._thread.start()
        log.info("Poll loop started (%s)", self._url)
        return True

    def restart(self):
        """Entry point for resuming after STOPPED. Waits for registration again."""
        return self.start()

    def stop(self, timeout=None):
        """
        Ask the loop to stop and wait up to *timeout* for it.
        A request already in flight is not interrupted.
        """
        self._stop_event.set()
        self.join(timeout)

    def join(self, timeout=None):
        thread = self._thread
        if thread is not None and thread is not threading.current_thread():
            thread.join(timeout)

    # ─── Thread body ─────────────────────────────────────────

    def _run(self, stop_event):
        reason, error = StopReason.CRASHED, None
        try:
            reason, error = self._loop(stop_event)
        except Exception as e:
            log.error("Poll loop crashed: %s", e, exc_info=True)
            error = e
        finally:
            self.stop_reason = reason
            self.stop_error = error
            self.state = PollState.STOPPED
            log.info("Poll loop stopped: %s", reason.value)

        if self.on_stop is not None:
            self.on_stop(reason, error)

    def _loop(self, stop_event):
        while not stop_event.is_set():
            if not self._identity.await_registered(timeout=AWAIT_SLICE_SEC):
                continue

            token = self._identity.snapshot().auth_token
            if not token:
                continue  # unregistered between wake and snapshot

            try:
                body = api.fetch_message(self._url, token)
            except TransportError as e:
                if stop_event.is_set():
                    return StopReason.REQUESTED, None
                if e.status_code is None:
                    log.warning("Poll network error: %s", e)
                    reason = StopReason.TRANSPORT_ERROR
                else:
                    log.warning("Poll failed: HTTP %d", e.status_code)
                    reason = StopReason.BAD_STATUS
                self._registration.unregister()
                return reason, e

            if self._identity.snapshot().auth_token != token:
                log.info("Dropping poll reply fetched before unregistration")
                continue

            if not body.strip():
                log.info("Server ended the message stream")
                return StopReason.END_OF_STREAM, None

            try:
                rsp = decode_response(body)
            except DecodeError as e:
                log.warning("Poll reply could not be decoded: %s", e)
                self._registration.unregister()
                return StopReason.DECODE_ERROR, e

            if self.accept(rsp) and not self._push(rsp, stop_event):
                return StopReason.REQUESTED, None

        return StopReason.REQUESTED, None

    def _push(self, rsp, stop_event):
        """Blocking push that still notices stop(). False if not delivered."""
        while not stop_event.is_set():
            try:
                self._output.push(rsp, timeout=AWAIT_SLICE_SEC)
                return True
            except queue.Full:
                continue
            except QueueClosed:
                log.info("Output queue closed — dropping poll results")
                return False
        return False

    # ─── Filter ──────────────────────────────────────────────

    def accept(self, rsp):
        """
        Decide whether *rsp* reaches the OutputQueue.
        Empty content is dropped silently; the inactivity sentinel is
        dropped and unregisters the client.
        """
        if not rsp.content.strip():
            return False

        if rsp.name == INACTIVE_FLAG:
            log.warning("You got kicked out due to inactivity")
            self._registration.unregister()
            return False

        return True
