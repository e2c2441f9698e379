import streamlit as st

from core.config import CLINIC_NAME
from core.database import get_db_context, init_db
from core.errors import AuthError, ClinicError
from core.helpers import hide_sidebar_completely
from core.logging import get_logger
from core.session_manager import ROLE_HOME, SESSION_KEY, clear_session, init_session_state, start_session
from services.identity_service import sign_in, sign_up
from services.user_service import ensure_default_users

log = get_logger(__name__)


def go_to(page_path: str):
    st.switch_page(page_path)


def enter_dashboard(account):
    """Resolve the profile for a fresh sign-in and open its dashboard."""
    context = start_session(account)

    home = ROLE_HOME.get(context.role)
    if home is None:
        st.error(f"Unknown role: {context.role}")
        clear_session()
        return
    go_to(home)


def main():
    st.set_page_config(
        page_title=CLINIC_NAME,
        page_icon="🩺",
        layout="wide",
        initial_sidebar_state="collapsed",
    )

    init_session_state()
    init_db()

    try:
        with get_db_context() as db:
            ensure_default_users(db)
    except ClinicError as exc:
        log.warning("default_admin_skipped", error=str(exc))

    context = st.session_state.get(SESSION_KEY)

    st.title(CLINIC_NAME)

    if context is not None and context.active:
        st.info(f"Logged in as: **{context.display_name}** ({context.role})")
        c1, c2 = st.columns(2)
        with c1:
            if st.button("Go to Dashboard"):
                go_to(ROLE_HOME.get(context.role, "app.py"))
        with c2:
            if st.button("Log out"):
                clear_session()
                st.rerun()
        return

    hide_sidebar_completely()
    st.write("---")

    login_tab, signup_tab = st.tabs(["Login", "Create Patient Account"])

    with login_tab:
        with st.form("login_form"):
            email = st.text_input("Email")
            password = st.text_input("Password", type="password")
            submitted = st.form_submit_button("Login")

        if submitted:
            try:
                with get_db_context() as db:
                    account = sign_in(db, email, password)
                enter_dashboard(account)
            except AuthError as exc:
                if exc.code == "too-many-requests":
                    st.warning(exc.message)
                else:
                    st.error(exc.message)
            except ClinicError as exc:
                st.error(str(exc))

    with signup_tab:
        st.caption(
            "If the clinic already registered you, sign up with the same email "
            "and your existing record will be linked."
        )
        with st.form("signup_form"):
            name = st.text_input("Full Name")
            su_email = st.text_input("Email", key="su_email")
            su_password = st.text_input("Password", type="password", key="su_password")
            su_password2 = st.text_input("Confirm Password", type="password")
            create = st.form_submit_button("Create Account")

        if create:
            if not name.strip():
                st.error("Name is required.")
            elif su_password != su_password2:
                st.error("Passwords do not match.")
            else:
                try:
                    with get_db_context() as db:
                        account = sign_up(db, su_email, su_password, display_name=name)
                    st.success("Account created! Redirecting...")
                    enter_dashboard(account)
                except AuthError as exc:
                    st.error(exc.message)
                except ClinicError as exc:
                    st.error(str(exc))


if __name__ == "__main__":
    main()
