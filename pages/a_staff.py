import streamlit as st

from core.database import get_db_context
from core.errors import AuthError, ClinicError, ValidationError
from core.helpers import render_sidebar
from core.session_manager import require_role
from models.user import ROLE_ADMIN, ROLE_DOCTOR, ROLE_RECEPTIONIST
from services.user_service import register_account

STAFF_ROLES = (ROLE_DOCTOR, ROLE_RECEPTIONIST, ROLE_ADMIN)


def main():
    context = require_role("Admin")
    render_sidebar(context)

    st.title("Staff Accounts")
    st.caption("Create sign-ins for doctors, receptionists and other admins.")

    with st.form("register_staff_form", clear_on_submit=True):
        name = st.text_input("Full Name")
        email = st.text_input("Email")
        password = st.text_input("Password", type="password")
        role = st.selectbox("Role", STAFF_ROLES)
        submitted = st.form_submit_button("Create Account")

    if submitted:
        try:
            with get_db_context() as db:
                profile = register_account(db, name, email, password, role)
            st.success(f"{profile.role} account created for {profile.name}.")
        except AuthError as exc:
            st.error(exc.message)
        except ValidationError as exc:
            st.warning(str(exc))
        except ClinicError as exc:
            st.error(str(exc))


if __name__ == "__main__":
    main()
