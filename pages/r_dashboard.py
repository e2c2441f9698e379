import streamlit as st

from core.database import get_db_context
from core.errors import ClinicError
from core.helpers import render_sidebar
from core.session_manager import require_role
from core.time_utils import format_date, local_now
from services.dashboard_service import load_receptionist_view, name_lookup
from services.stats_service import appointments_on_day, receptionist_stats

PREVIEW_LIMIT = 4


def main():
    context = require_role("Receptionist")
    render_sidebar(context)

    st.title("Reception Dashboard")

    try:
        with get_db_context() as db:
            view = load_receptionist_view(db)
    except ClinicError as exc:
        st.error(f"Failed to load data. {exc}")
        return

    stats = receptionist_stats(view.patients, view.appointments)

    c1, c2, c3 = st.columns(3)
    with c1:
        st.metric("Total Patients", stats["total_patients"])
        if st.button("Open Patients"):
            st.switch_page("pages/r_patients.py")
    with c2:
        st.metric("Today's Appointments", stats["today"])
        if st.button("Open Schedule"):
            st.switch_page("pages/r_schedule.py")
    with c3:
        st.metric("Pending", stats["pending"])
        if st.button("Open Pending"):
            st.session_state["reception_filter_status"] = "Pending"
            st.switch_page("pages/r_appointments.py")

    st.divider()
    st.subheader("Today's Schedule")

    names = view.patient_names()
    today = appointments_on_day(view.appointments, local_now().date())[:PREVIEW_LIMIT]
    if not today:
        st.caption("No appointments today.")
    for a in today:
        c1, c2 = st.columns([3, 1])
        c1.write(name_lookup(names, a.patient_id, a.patient_name))
        c2.write(format_date(a.date, "%I:%M %p"))


if __name__ == "__main__":
    main()
