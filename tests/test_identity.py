"""
Unit tests for the local identity provider.
"""

import threading
from datetime import timedelta

import pytest

from core.config import LOGIN_LOCKOUT_SECONDS, MAX_FAILED_LOGINS
from core.errors import AuthError, ValidationError
from core.session_context import SessionContext
from services import identity_service
from services.identity_service import (
    get_account_by_email,
    notify_auth_change,
    on_auth_change,
    sign_in,
    sign_out,
    sign_up,
)


def test_sign_up_then_sign_in(db):
    account = sign_up(db, "  Jane@X.com ", "secret1", display_name="Jane")
    assert account.email == "jane@x.com"
    assert account.display_name == "Jane"
    assert account.password_hash != "secret1"

    signed_in = sign_in(db, "jane@x.com", "secret1")
    assert signed_in.id == account.id


def test_sign_up_rejects_duplicate_email(db):
    sign_up(db, "a@x.com", "secret1")
    with pytest.raises(AuthError) as e:
        sign_up(db, "A@x.com", "another1")
    assert e.value.code == "email-in-use"


def test_sign_up_rejects_weak_password(db):
    with pytest.raises(AuthError) as e:
        sign_up(db, "a@x.com", "123")
    assert e.value.code == "weak-password"
    assert get_account_by_email(db, "a@x.com") is None


def test_sign_up_requires_email(db):
    with pytest.raises(ValidationError):
        sign_up(db, "  ", "secret1")


def test_sign_in_unknown_email(db):
    with pytest.raises(AuthError) as e:
        sign_in(db, "nobody@x.com", "secret1")
    assert e.value.code == "not-found"
    assert e.value.message == "Invalid email or password."


def test_sign_in_wrong_password(db):
    sign_up(db, "a@x.com", "secret1")
    with pytest.raises(AuthError) as e:
        sign_in(db, "a@x.com", "wrong-pass")
    assert e.value.code == "wrong-password"


def test_too_many_failures_locks_out_even_correct_password(db, fixed_now):
    sign_up(db, "a@x.com", "secret1")
    for _ in range(MAX_FAILED_LOGINS):
        with pytest.raises(AuthError):
            sign_in(db, "a@x.com", "nope-nope", now=fixed_now)

    with pytest.raises(AuthError) as e:
        sign_in(db, "a@x.com", "secret1", now=fixed_now)
    assert e.value.code == "too-many-requests"

    later = fixed_now + timedelta(seconds=LOGIN_LOCKOUT_SECONDS + 1)
    assert sign_in(db, "a@x.com", "secret1", now=later).email == "a@x.com"


def test_successful_sign_in_clears_failures(db, fixed_now):
    sign_up(db, "a@x.com", "secret1")
    for _ in range(MAX_FAILED_LOGINS - 1):
        with pytest.raises(AuthError):
            sign_in(db, "a@x.com", "nope-nope", now=fixed_now)
    sign_in(db, "a@x.com", "secret1", now=fixed_now)

    # counter starts over
    for _ in range(MAX_FAILED_LOGINS - 1):
        with pytest.raises(AuthError) as e:
            sign_in(db, "a@x.com", "nope-nope", now=fixed_now)
        assert e.value.code == "wrong-password"


def test_auth_change_listeners(db):
    seen = []
    unsubscribe = on_auth_change(seen.append)

    account = sign_up(db, "a@x.com", "secret1")
    notify_auth_change(account)

    context = SessionContext(account_id=account.id, email=account.email)
    sign_out(context)
    assert seen == [account, None]
    assert context.active is False

    unsubscribe()
    notify_auth_change(account)
    assert seen == [account, None]


def test_expired_failures_are_pruned(db, fixed_now):
    for i in range(50):
        with pytest.raises(AuthError):
            sign_in(db, f"user{i}@x.com", "nope-nope", now=fixed_now)
    assert len(identity_service._failed_logins) == 50

    with pytest.raises(AuthError):
        sign_in(db, "late@x.com", "nope-nope", now=fixed_now + timedelta(days=30))

    assert list(identity_service._failed_logins) == ["late@x.com"]


def test_concurrent_failures_are_all_counted(fixed_now):
    def fail_many():
        for _ in range(200):
            identity_service._record_failure("a@x.com", fixed_now)

    threads = [threading.Thread(target=fail_many) for _ in range(8)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert identity_service._failed_logins["a@x.com"][0] == 1600
