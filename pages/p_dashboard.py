import streamlit as st

from core.database import get_db_context
from core.errors import ClinicError
from core.helpers import render_sidebar
from core.session_manager import require_role
from core.time_utils import format_date
from services.dashboard_service import load_patient_dashboard
from services.stats_service import patient_stats


def main():
    context = require_role("Patient")
    render_sidebar(context)

    try:
        with get_db_context() as db:
            view = load_patient_dashboard(db, context.uid)
    except ClinicError as exc:
        st.error(f"Failed to load profile. {exc}")
        return

    p = view.patient
    st.title(f"Welcome, {p.name or context.display_name}")

    stats = patient_stats(view.appointments, view.prescriptions)
    c1, c2, c3 = st.columns(3)
    c1.metric("Appointments", stats["appointments"])
    c2.metric("Prescriptions", stats["prescriptions"])
    c3.metric("Next Appointment", format_date(stats["next"].date, "%b %d") if stats["next"] else "None")

    st.write("---")
    st.subheader("Your Profile")
    st.write(f"**Email:** {p.email or context.email or ''}")
    st.write(f"**Age:** {p.age or '—'}")
    st.write(f"**Gender:** {p.gender or '—'}")
    st.write(f"**Contact:** {p.contact or '—'}")
    st.write(f"**Joined:** {format_date(p.created_at, '%b %Y')}")


if __name__ == "__main__":
    main()
