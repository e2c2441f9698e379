"""Local identity provider: accounts, passwords and sign-in throttling."""

import threading
from datetime import timedelta

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from core.auth import hash_password, verify_password
from core.config import LOGIN_LOCKOUT_SECONDS, MAX_FAILED_LOGINS, MIN_PASSWORD_LENGTH
from core.errors import (
    AUTH_EMAIL_IN_USE,
    AUTH_NOT_FOUND,
    AUTH_TOO_MANY_REQUESTS,
    AUTH_WEAK_PASSWORD,
    AUTH_WRONG_PASSWORD,
    AuthError,
    PersistenceError,
    ValidationError,
)
from core.logging import get_logger
from core.time_utils import now_utc
from models.account import Account

log = get_logger(__name__)

# email -> (consecutive failures, time of first failure in the window)
_failed_logins: dict[str, tuple[int, object]] = {}
_throttle_lock = threading.Lock()
_listeners = []


def normalize_email(email: str | None) -> str:
    return (email or "").strip().lower()


def on_auth_change(callback):
    """Register ``callback(account_or_none)``; returns an unsubscribe function."""
    _listeners.append(callback)

    def unsubscribe():
        if callback in _listeners:
            _listeners.remove(callback)

    return unsubscribe


def notify_auth_change(account):
    for callback in list(_listeners):
        callback(account)


def _prune_throttle(now):
    """Drop entries whose window has passed. Caller holds the lock."""
    window = timedelta(seconds=LOGIN_LOCKOUT_SECONDS)
    expired = [email for email, (_, since) in _failed_logins.items() if now - since > window]
    for email in expired:
        del _failed_logins[email]


def _check_throttle(email: str, now):
    with _throttle_lock:
        _prune_throttle(now)
        count, _ = _failed_logins.get(email, (0, None))
    if count >= MAX_FAILED_LOGINS:
        raise AuthError(AUTH_TOO_MANY_REQUESTS)


def _record_failure(email: str, now):
    with _throttle_lock:
        _prune_throttle(now)
        count, since = _failed_logins.get(email, (0, now))
        _failed_logins[email] = (count + 1, since)


def _clear_failures(email: str):
    with _throttle_lock:
        _failed_logins.pop(email, None)


def reset_throttle(email: str | None = None):
    if email is None:
        with _throttle_lock:
            _failed_logins.clear()
    else:
        _clear_failures(normalize_email(email))


def get_account(db: Session, account_id: str):
    return db.get(Account, account_id)


def get_account_by_email(db: Session, email: str):
    return db.query(Account).filter(Account.email == normalize_email(email)).first()


def sign_up(db: Session, email: str, password: str, display_name: str | None = None, *, commit: bool = True):
    """Create a principal. Raises AuthError(email-in-use / weak-password)."""
    email = normalize_email(email)
    if not email:
        raise ValidationError("Email is required.")
    if len(password or "") < MIN_PASSWORD_LENGTH:
        raise AuthError(
            AUTH_WEAK_PASSWORD,
            f"Password must be at least {MIN_PASSWORD_LENGTH} characters.",
        )
    if get_account_by_email(db, email):
        raise AuthError(AUTH_EMAIL_IN_USE)

    account = Account(
        email=email,
        display_name=(display_name or "").strip() or None,
        password_hash=hash_password(password),
    )
    db.add(account)
    try:
        if commit:
            db.commit()
            db.refresh(account)
        else:
            db.flush()
    except SQLAlchemyError as exc:
        db.rollback()
        raise PersistenceError(f"Could not create account: {exc}") from exc

    log.info("account_created", account_id=account.id, email=email)
    return account


def sign_in(db: Session, email: str, password: str, *, now=None):
    """Check credentials and return the Account."""
    email = normalize_email(email)
    now = now or now_utc()
    _check_throttle(email, now)

    account = get_account_by_email(db, email)
    if account is None:
        _record_failure(email, now)
        log.info("sign_in_failed", email=email, reason=AUTH_NOT_FOUND)
        raise AuthError(AUTH_NOT_FOUND)

    if not verify_password(password or "", account.password_hash):
        _record_failure(email, now)
        log.info("sign_in_failed", email=email, reason=AUTH_WRONG_PASSWORD)
        raise AuthError(AUTH_WRONG_PASSWORD)

    _clear_failures(email)
    log.info("sign_in", account_id=account.id)
    return account


def sign_out(context=None):
    """End the session: tear down the context and notify listeners."""
    if context is not None:
        log.info("sign_out", account_id=context.account_id)
        context.teardown()
    notify_auth_change(None)


def update_display_name(db: Session, account_id: str, name: str, *, commit: bool = True):
    account = db.get(Account, account_id)
    if account is None:
        return None
    account.display_name = name
    if commit:
        db.commit()
    return account
