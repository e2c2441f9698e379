"""
Unit tests for the authorization guard and session readiness.
"""

import threading

import pytest

from core.errors import AccessDenied, AuthError, SessionTimeoutError
from core.session_context import ProfileReady, SessionContext
from services.guard_service import authorize, establish_session, is_allowed
from services.identity_service import sign_up

from tests.factories import add_profile


@pytest.mark.parametrize(
    "role, allowed, expected",
    [
        ("Doctor", {"Doctor"}, True),
        ("Doctor", {"Receptionist"}, False),
        ("Patient", {"Doctor", "Receptionist"}, False),
        ("Admin", {"Admin"}, True),
        ("Patient", set(), True),
        ("Receptionist", (), True),
    ],
)
def test_is_allowed(role, allowed, expected):
    assert is_allowed(role, allowed) is expected


def test_authorize_admits_matching_role(db):
    account = sign_up(db, "doc@x.com", "secret1")
    add_profile(db, account.id, "Doctor", name="Dr Who")

    profile = authorize(db, account, {"Doctor"})

    assert profile.role == "Doctor"


def test_authorize_denies_other_roles(db):
    account = sign_up(db, "pat@x.com", "secret1")

    with pytest.raises(AccessDenied) as e:
        authorize(db, account, {"Doctor"})
    assert e.value.role == "Patient"
    assert e.value.allowed == frozenset({"Doctor"})


def test_establish_session_resolves_ready(db):
    account = sign_up(db, "rec@x.com", "secret1")
    add_profile(db, account.id, "Receptionist", name="Rita")

    context = establish_session(db, account.id, {"Receptionist"})

    assert context.active
    assert context.uid == account.id
    assert context.role == "Receptionist"
    assert context.display_name == "Rita"
    assert context.ready.is_set
    assert context.current_profile(timeout=0).id == account.id


def test_establish_session_unknown_account(db):
    with pytest.raises(AuthError) as e:
        establish_session(db, "missing", ())
    assert e.value.code == "session-expired"


def test_ready_resolves_only_once():
    ready = ProfileReady()
    assert ready.resolve("first") is True
    assert ready.resolve("second") is False
    assert ready.wait(timeout=0) == "first"


def test_late_subscriber_gets_cached_profile():
    ready = ProfileReady()
    ready.resolve("profile")

    seen = []
    ready.subscribe(seen.append)

    assert seen == ["profile"]


def test_early_subscriber_fires_once_on_resolve():
    ready = ProfileReady()
    seen = []
    ready.subscribe(seen.append)
    assert seen == []

    ready.resolve("profile")
    ready.resolve("other")

    assert seen == ["profile"]


def test_wait_times_out():
    with pytest.raises(SessionTimeoutError, match="Auth timeout"):
        ProfileReady().wait(timeout=0.01)


def test_waiter_released_by_other_thread():
    ready = ProfileReady()
    results = []
    waiter = threading.Thread(target=lambda: results.append(ready.wait(timeout=5)))
    waiter.start()

    ready.resolve("profile")
    waiter.join(timeout=5)

    assert results == ["profile"]


def test_teardown_deactivates_context():
    context = SessionContext(account_id="u1", email="u1@x.com")
    context.establish(type("P", (), {"role": "Doctor", "name": "Dr A"})())
    assert context.role == "Doctor"

    context.teardown()

    assert context.active is False
    assert context.role is None
    assert context.display_name == "u1@x.com"
