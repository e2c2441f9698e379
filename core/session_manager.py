import streamlit as st

from core.config import AUTH_READY_TIMEOUT
from core.database import get_db_context
from core.errors import AccessDenied, ClinicError
from core.logging import get_logger
from core.session_context import SessionContext

log = get_logger(__name__)

SESSION_KEY = "session"

ROLE_HOME = {
    "Admin": "pages/a_dashboard.py",
    "Doctor": "pages/d_dashboard.py",
    "Receptionist": "pages/r_dashboard.py",
    "Patient": "pages/p_dashboard.py",
}


def init_session_state():
    """Ensure required session keys exist."""
    if SESSION_KEY not in st.session_state:
        st.session_state[SESSION_KEY] = None
    if "account_id" not in st.session_state:
        st.session_state.account_id = None


def login(account):
    """Remember the signed-in principal; the guard builds the context."""
    from services.identity_service import notify_auth_change

    st.session_state.account_id = account.id
    st.session_state[SESSION_KEY] = None
    notify_auth_change(account)


def get_session() -> SessionContext | None:
    return st.session_state.get(SESSION_KEY)


def clear_session():
    """Tear down the session context without redirect."""
    from services.identity_service import sign_out

    context = st.session_state.pop(SESSION_KEY, None)
    had_account = st.session_state.pop("account_id", None) is not None
    if context is not None or had_account:
        sign_out(context)


def logout():
    """Clear session and redirect to main app page."""
    clear_session()

    # Clear query parameters
    try:
        st.query_params.clear()
    except Exception:
        pass

    # Redirect to main page
    st.switch_page("app.py")


def start_session(account) -> SessionContext:
    """Sign ``account`` in and run the guard for its first dashboard.

    If the profile cannot be resolved the account is signed out again and
    the error is re-raised for the page to show.
    """
    from services.guard_service import establish_session

    login(account)
    try:
        with get_db_context() as db:
            context = establish_session(db, account.id)
    except ClinicError:
        clear_session()
        raise

    st.session_state[SESSION_KEY] = context
    return context


def require_role(*roles: str) -> SessionContext:
    """Run the authorization guard for this page.

    Unauthenticated visitors, denied roles, guard failures and a profile
    that never becomes ready are signed out and sent back to app.py.
    """
    from services.guard_service import establish_session

    init_session_state()

    account_id = st.session_state.account_id
    if account_id is None:
        st.warning("Please log in to access this page.")
        st.switch_page("app.py")

    context = get_session()
    reusable = (
        context is not None
        and context.active
        and context.account_id == account_id
        and (not roles or context.role in roles)
    )

    try:
        if not reusable:
            with get_db_context() as db:
                context = establish_session(db, account_id, roles)
        context.current_profile(AUTH_READY_TIMEOUT)
    except AccessDenied as exc:
        log.warning("access_denied", account_id=account_id, role=exc.role, allowed=sorted(exc.allowed))
        st.error("Access denied for your role.")
        logout()
    except ClinicError as exc:
        log.error("guard_failed", account_id=account_id, error=str(exc))
        st.error("Session error. Please login again.")
        logout()

    st.session_state[SESSION_KEY] = context
    return context
