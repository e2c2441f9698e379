"""
Error taxonomy shared by services and pages.

AuthError and PersistenceError are caught by the page that issued the
operation and shown as a notification. ValidationError is raised before any
write. NotFoundError is only raised where a caller asked for a single record;
list views render placeholders instead.
"""


class ClinicError(Exception):
    """Base class for all application errors."""


# Identity provider error codes
AUTH_NOT_FOUND = "not-found"
AUTH_WRONG_PASSWORD = "wrong-password"
AUTH_TOO_MANY_REQUESTS = "too-many-requests"
AUTH_EMAIL_IN_USE = "email-in-use"
AUTH_WEAK_PASSWORD = "weak-password"
AUTH_SESSION_EXPIRED = "session-expired"
AUTH_OTHER = "other"

_AUTH_MESSAGES = {
    AUTH_NOT_FOUND: "Invalid email or password.",
    AUTH_WRONG_PASSWORD: "Invalid email or password.",
    AUTH_TOO_MANY_REQUESTS: "Too many attempts. Try again later.",
    AUTH_EMAIL_IN_USE: "Email already registered.",
    AUTH_WEAK_PASSWORD: "Password is too weak.",
    AUTH_SESSION_EXPIRED: "Session error. Please login again.",
}


class AuthError(ClinicError):
    def __init__(self, code: str, message: str | None = None):
        self.code = code
        self.message = message or _AUTH_MESSAGES.get(code, "Authentication failed.")
        super().__init__(self.message)


class AccessDenied(ClinicError):
    """Resolved role is not allowed on the requested dashboard."""

    def __init__(self, role: str, allowed):
        self.role = role
        self.allowed = frozenset(allowed)
        super().__init__(f"Access denied for role '{role}'.")


class NotFoundError(ClinicError):
    pass


class ValidationError(ClinicError, ValueError):
    pass


class PersistenceError(ClinicError):
    pass


class SessionTimeoutError(ClinicError, TimeoutError):
    pass


class InvalidTransitionError(ClinicError, ValueError):
    def __init__(self, current: str, requested: str):
        self.current = current
        self.requested = requested
        super().__init__(f"Cannot move appointment from {current} to {requested}.")
