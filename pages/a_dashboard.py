import streamlit as st

from core.database import get_db_context
from core.errors import ClinicError
from core.helpers import render_sidebar
from core.session_manager import require_role
from core.time_utils import format_date
from services.dashboard_service import load_admin_view


def main():
    context = require_role("Admin")
    render_sidebar(context)

    st.title("Admin Dashboard")

    try:
        with get_db_context() as db:
            view = load_admin_view(db)
    except ClinicError as exc:
        st.error(str(exc))
        return

    c1, c2, c3, c4 = st.columns(4)
    c1.metric("Doctors", len(view.profiles_by_role.get("Doctor", [])))
    c2.metric("Patients", view.patient_count)
    c3.metric("Appointments", view.appointment_count)
    c4.metric("Prescriptions", view.prescription_count)

    st.divider()

    for role, profiles in view.profiles_by_role.items():
        with st.expander(f"{role}s ({len(profiles)})"):
            if not profiles:
                st.caption("None yet.")
            for p in profiles:
                st.write(f"**{p.name or '—'}** · {p.email or ''} · {p.plan or ''} · joined {format_date(p.created_at)}")


if __name__ == "__main__":
    main()
