"""
Contacts authorization - who may read the contacts data source.

The authorization state is owned by the data source, not by the app. The app
reads it through `ContactsAccess.check_access` and, when undetermined, asks
for it once through `ContactsAccess.request_access`.
"""

from __future__ import annotations

import threading
from abc import ABC, abstractmethod
from enum import Enum
from typing import Callable, Optional

from loguru import logger


class AuthorizationState(str, Enum):
    """Permission level for the contacts data source."""
    NOT_DETERMINED = "not_determined"
    AUTHORIZED = "authorized"
    DENIED = "denied"
    RESTRICTED = "restricted"

    @classmethod
    def parse(cls, value: object) -> "AuthorizationState":
        if isinstance(value, cls):
            return value
        s = str(value or "").strip().lower().replace("-", "_").replace(" ", "_")
        for state in cls:
            if state.value == s or state.name.lower() == s:
                return state
        raise ValueError(f"Unknown authorization state: {value!r}")


# Called exactly once with (granted, error). May run on any thread.
AccessCallback = Callable[[bool, Optional[Exception]], None]


class ContactsAccess(ABC):
    """Capability interface over the data source's authorization subsystem."""

    @abstractmethod
    def check_access(self) -> AuthorizationState:
        """Return the current authorization state."""
        pass

    @abstractmethod
    def request_access(self, callback: AccessCallback) -> None:
        """
        Ask for access.

        Returns immediately; `callback` is invoked exactly once, later, on an
        arbitrary thread.
        """
        pass


class LocalContactsAccess(ContactsAccess):
    """
    Authorization provider for the local contacts file.

    The initial state comes from configuration. A request resolves on a
    worker thread to `AUTHORIZED` when `grant_on_request` is set and to
    `DENIED` otherwise.
    """

    def __init__(
        self,
        state: AuthorizationState = AuthorizationState.NOT_DETERMINED,
        grant_on_request: bool = True,
        on_change: Optional[Callable[[AuthorizationState], None]] = None,
    ):
        self._state = AuthorizationState.parse(state)
        self._grant_on_request = grant_on_request
        self._on_change = on_change
        self._lock = threading.Lock()
        self._thread: Optional[threading.Thread] = None

    def check_access(self) -> AuthorizationState:
        with self._lock:
            return self._state

    def request_access(self, callback: AccessCallback) -> None:
        self._thread = threading.Thread(
            target=self._resolve, args=(callback,), name="contacts-access", daemon=True
        )
        self._thread.start()

    def join(self, timeout: Optional[float] = None) -> None:
        """Wait for a pending request to resolve."""
        if self._thread:
            self._thread.join(timeout)

    def _resolve(self, callback: AccessCallback) -> None:
        with self._lock:
            if self._state == AuthorizationState.NOT_DETERMINED:
                self._state = (
                    AuthorizationState.AUTHORIZED if self._grant_on_request else AuthorizationState.DENIED
                )
                changed = True
            else:
                changed = False
            state = self._state

        logger.info(f"Contacts access request resolved: {state.value}")
        if changed and self._on_change:
            try:
                self._on_change(state)
            except Exception as e:
                logger.warning(f"Authorization change listener error: {e}")

        callback(state == AuthorizationState.AUTHORIZED, None)
