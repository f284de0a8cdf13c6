"""
Identity — single source of truth for who this client is.

Shared between the poll thread and the sender, so every read and write
goes through one lock. Registration wakes every waiter blocked in
await_registered() via the condition built on that lock.
"""

import threading
from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class IdentitySnapshot:
    client_id: str
    client_name: str = ""
    auth_token: str = ""
    registered: bool = False


class Identity:
    """Owns client id, display name, auth token and the registered flag."""

    def __init__(self, client_id: str):
        self._client_id = client_id
        self._client_name = ""
        self._auth_token = ""
        self._registered = False
        self._lock = threading.Lock()
        self._cond = threading.Condition(self._lock)

    @property
    def client_id(self) -> str:
        return self._client_id

    @property
    def registered(self) -> bool:
        with self._lock:
            return self._registered

    def snapshot(self) -> IdentitySnapshot:
        with self._lock:
            return IdentitySnapshot(
                client_id=self._client_id,
                client_name=self._client_name,
                auth_token=self._auth_token,
                registered=self._registered,
            )

    def await_registered(self, timeout: Optional[float] = None) -> bool:
        """
        Block until registered. Returns False if *timeout* elapsed first.
        The predicate is re-checked after every wake, so spurious or
        stale notifications never let a caller through unregistered.
        """
        with self._cond:
            return self._cond.wait_for(lambda: self._registered, timeout=timeout)

    # ── Mutations (RegistrationManager only) ──────────────────

    def mark_registered(self, client_name: str, auth_token: str):
        if not auth_token:
            raise ValueError("auth_token must be non-empty to register")
        with self._cond:
            self._client_name = client_name
            self._auth_token = auth_token
            self._registered = True
            self._cond.notify_all()

    def mark_unregistered(self) -> bool:
        """Clear the flag and the secrets. Returns True if state changed."""
        with self._cond:
            was = self._registered
            self._registered = False
            self._client_name = ""
            self._auth_token = ""
            return was
