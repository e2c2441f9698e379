"""Explicit per-session state handed to every dashboard loader.

A ``SessionContext`` is built when the guard succeeds and torn down on
sign-out or redirect. Loaders read the signed-in profile through
``context.ready``, a one-shot value: callers that arrive after it resolved
get the cached profile straight away, callers that arrive before it wait at
most ``AUTH_READY_TIMEOUT`` seconds.
"""

import threading
from dataclasses import dataclass, field

from core.config import AUTH_READY_TIMEOUT
from core.errors import SessionTimeoutError


class ProfileReady:
    """One-shot readiness signal carrying the resolved profile."""

    def __init__(self):
        self._event = threading.Event()
        self._lock = threading.Lock()
        self._value = None
        self._callbacks = []

    @property
    def is_set(self) -> bool:
        return self._event.is_set()

    def resolve(self, profile):
        """Publish the profile. Later calls are ignored."""
        with self._lock:
            if self._event.is_set():
                return False
            self._value = profile
            self._event.set()
            callbacks, self._callbacks = self._callbacks, []
        for callback in callbacks:
            callback(profile)
        return True

    def subscribe(self, callback):
        """Run ``callback(profile)`` now if resolved, otherwise once resolved."""
        with self._lock:
            if not self._event.is_set():
                self._callbacks.append(callback)
                return
            value = self._value
        callback(value)

    def wait(self, timeout: float | None = AUTH_READY_TIMEOUT):
        if not self._event.wait(timeout):
            raise SessionTimeoutError("Auth timeout")
        return self._value


@dataclass
class SessionContext:
    account_id: str
    email: str | None = None
    profile: object = None
    ready: ProfileReady = field(default_factory=ProfileReady)
    active: bool = True

    def establish(self, profile):
        self.profile = profile
        self.ready.resolve(profile)

    def current_profile(self, timeout: float | None = AUTH_READY_TIMEOUT):
        return self.ready.wait(timeout)

    def teardown(self):
        self.active = False
        self.profile = None

    @property
    def uid(self) -> str:
        return self.account_id

    @property
    def role(self) -> str | None:
        return getattr(self.profile, "role", None)

    @property
    def display_name(self) -> str:
        return getattr(self.profile, "name", None) or self.email or "User"
