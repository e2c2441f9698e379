import uuid

import streamlit as st


def generate_id() -> str:
    """Opaque record id, same shape for every collection."""
    return uuid.uuid4().hex


# -----------------------------
# Sidebar helpers
# -----------------------------
def hide_default_sidebar_nav():
    """Hide Streamlit's default multi-page navigation for a cleaner custom menu."""
    st.markdown(
        """
        <style>
        /* Hide the auto-generated Pages section */
        [data-testid="stSidebarNav"] { display: none; }
        </style>
        """,
        unsafe_allow_html=True,
    )


def hide_sidebar_completely():
    """Completely hide Streamlit's sidebar and the toggle control.

    Used on the login/signup landing page where navigation should not be
    visible.
    """
    st.markdown(
        """
        <style>
        [data-testid="stSidebar"] { display: none !important; }
        [data-testid="collapsedControl"] { display: none !important; }
        </style>
        """,
        unsafe_allow_html=True,
    )


SIDEBAR_MENUS = {
    "Admin": [
        ("Dashboard", "pages/a_dashboard.py"),
        ("Staff Accounts", "pages/a_staff.py"),
    ],
    "Doctor": [
        ("Dashboard", "pages/d_dashboard.py"),
        ("My Patients", "pages/d_patients.py"),
        ("Prescriptions", "pages/d_prescriptions.py"),
        ("My Profile", "pages/s_profile.py"),
    ],
    "Receptionist": [
        ("Dashboard", "pages/r_dashboard.py"),
        ("Patients", "pages/r_patients.py"),
        ("Appointments", "pages/r_appointments.py"),
        ("Daily Schedule", "pages/r_schedule.py"),
        ("My Profile", "pages/s_profile.py"),
    ],
    "Patient": [
        ("My Profile", "pages/p_dashboard.py"),
        ("Appointments", "pages/p_appointments.py"),
        ("Prescriptions", "pages/p_prescriptions.py"),
        ("Medical History", "pages/p_history.py"),
    ],
}


def render_sidebar(context):
    """Render the role menu for the signed-in profile, plus Logout."""
    hide_default_sidebar_nav()
    role = context.role
    with st.sidebar:
        st.markdown(f"### {context.display_name}")
        st.caption(role)
        for label, page in SIDEBAR_MENUS.get(role, []):
            if st.button(label, use_container_width=True, key=f"nav_{page}"):
                st.switch_page(page)
        st.divider()
        if st.button("Logout", use_container_width=True):
            from core.session_manager import logout
            logout()


def status_badge(status: str | None) -> str:
    status = status or "Pending"
    colour = {
        "Completed": "green",
        "Confirmed": "blue",
        "Cancelled": "red",
    }.get(status, "orange")
    return f":{colour}[{status}]"


FLASH_KEY = "flash_message"


def rerun_with_message(message: str):
    """Rerun the page so every list reloads from the store; show ``message`` after."""
    st.session_state[FLASH_KEY] = message
    st.rerun()


def show_flash():
    message = st.session_state.pop(FLASH_KEY, None)
    if message:
        st.success(message)
