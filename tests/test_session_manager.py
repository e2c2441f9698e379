"""
Unit tests for the Streamlit session glue, with st swapped for a stand-in.
"""

from contextlib import contextmanager
from types import SimpleNamespace

import pytest

from core import session_manager
from core.errors import AuthError, PersistenceError
from core.session_context import SessionContext
from services import guard_service
from services.identity_service import sign_up

from tests.factories import add_profile


class FakeSessionState(dict):
    def __getattr__(self, name):
        try:
            return self[name]
        except KeyError as exc:
            raise AttributeError(name) from exc

    def __setattr__(self, name, value):
        self[name] = value


class PageSwitched(Exception):
    pass


@pytest.fixture
def fake_st(monkeypatch, db):
    messages = []

    def switch_page(page):
        raise PageSwitched(page)

    fake = SimpleNamespace(
        session_state=FakeSessionState(),
        query_params=FakeSessionState(),
        switch_page=switch_page,
        error=messages.append,
        warning=messages.append,
        messages=messages,
    )

    @contextmanager
    def db_context():
        yield db

    monkeypatch.setattr(session_manager, "st", fake)
    monkeypatch.setattr(session_manager, "get_db_context", db_context)
    return fake


def test_start_session_stores_context(db, fake_st):
    account = sign_up(db, "doc@x.com", "secret1")
    add_profile(db, account.id, "Doctor", name="Grey")

    context = session_manager.start_session(account)

    assert context.role == "Doctor"
    assert fake_st.session_state["session"] is context
    assert fake_st.session_state.account_id == account.id


def test_start_session_signs_out_when_account_is_gone(fake_st):
    ghost = SimpleNamespace(id="ghost", email="ghost@x.com")

    with pytest.raises(AuthError):
        session_manager.start_session(ghost)

    assert "account_id" not in fake_st.session_state
    assert fake_st.session_state.get("session") is None


def test_start_session_signs_out_on_store_error(db, fake_st, monkeypatch):
    account = sign_up(db, "p@x.com", "secret1")

    def broken(*args, **kwargs):
        raise PersistenceError("Could not resolve profile")

    monkeypatch.setattr(guard_service, "establish_session", broken)

    with pytest.raises(PersistenceError):
        session_manager.start_session(account)

    assert "account_id" not in fake_st.session_state


def test_require_role_reuses_ready_context(db, fake_st):
    account = sign_up(db, "rec@x.com", "secret1")
    add_profile(db, account.id, "Receptionist", name="Rita")
    context = session_manager.start_session(account)

    assert session_manager.require_role("Receptionist") is context


def test_require_role_redirects_wrong_role(db, fake_st):
    account = sign_up(db, "pat@x.com", "secret1")
    session_manager.start_session(account)

    with pytest.raises(PageSwitched):
        session_manager.require_role("Doctor")

    assert "Access denied for your role." in fake_st.messages
    assert "account_id" not in fake_st.session_state


def test_require_role_times_out_when_profile_never_ready(fake_st, monkeypatch):
    monkeypatch.setattr(session_manager, "AUTH_READY_TIMEOUT", 0.01)
    fake_st.session_state.account_id = "u1"
    fake_st.session_state["session"] = SessionContext(account_id="u1", email="u1@x.com")

    with pytest.raises(PageSwitched):
        session_manager.require_role()

    assert "Session error. Please login again." in fake_st.messages
    assert "account_id" not in fake_st.session_state
