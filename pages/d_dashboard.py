import streamlit as st

from core.database import get_db_context
from core.errors import ClinicError
from core.helpers import render_sidebar, rerun_with_message, show_flash, status_badge
from core.session_manager import require_role
from core.time_utils import format_date, local_now
from models.appointment import STATUSES
from services.appointment_service import apply_transition, offered_actions
from services.dashboard_service import filter_by_status, load_doctor_view, name_lookup
from services.stats_service import appointments_on_day, doctor_stats


def render_appointment(appointment, names, role, key_prefix, fmt):
    with st.container():
        c1, c2, c3 = st.columns([4, 1, 1])
        with c1:
            patient = name_lookup(names, appointment.patient_id, appointment.patient_name)
            st.write(f"**{patient}**")
            st.caption(f"{format_date(appointment.date, fmt)} · {appointment.reason or 'General Visit'}")
        with c2:
            st.markdown(status_badge(appointment.status))
        with c3:
            for status in offered_actions(appointment.status, role):
                if st.button("Complete", key=f"{key_prefix}_{status}_{appointment.id}"):
                    return status
            if st.button("View", key=f"{key_prefix}_view_{appointment.id}"):
                st.session_state["selected_patient"] = appointment.patient_id
                st.switch_page("pages/d_patients.py")
    return None


# ----------------------------------------------
# MAIN PAGE
# ----------------------------------------------
def main():
    context = require_role("Doctor")  # Protect page (redirects if wrong role)
    render_sidebar(context)
    show_flash()

    st.title("Doctor Dashboard")
    st.write(f"Welcome, Dr. {context.display_name}")

    try:
        with get_db_context() as db:
            view = load_doctor_view(db, context.uid)
    except ClinicError as exc:
        st.error(f"Failed to load appointments. {exc}")
        return

    names = view.patient_names()
    stats = doctor_stats(view.appointments, view.prescriptions)

    # Summary numbers
    st.subheader("Overview")
    c1, c2, c3 = st.columns(3)
    c1.metric("Today's Appointments", stats["today"])
    c2.metric("This Month", stats["monthly"])
    c3.metric("Prescriptions Issued", stats["prescriptions"])

    st.divider()

    requested = None
    st.subheader("Today's Appointments")
    today = appointments_on_day(view.appointments, local_now().date())
    if not today:
        st.info("No appointments for today.")
    for appointment in today:
        status = render_appointment(appointment, names, context.role, "today", "%I:%M %p")
        if status:
            requested = (appointment.id, status)

    st.divider()

    st.subheader("My Appointments")
    status_filter = st.selectbox("Status", ["All", *STATUSES])
    listed = filter_by_status(view.appointments, None if status_filter == "All" else status_filter)
    if not listed:
        st.info("No appointments found.")
    for appointment in listed:
        status = render_appointment(appointment, names, context.role, "all", "%b %d, %Y · %I:%M %p")
        if status:
            requested = (appointment.id, status)

    if requested:
        appointment_id, status = requested
        try:
            with get_db_context() as db:
                apply_transition(
                    db,
                    appointment_id,
                    status,
                    reload=lambda: rerun_with_message("Appointment marked as completed."),
                )
        except ClinicError as exc:
            st.error(f"Error: {exc}")


if __name__ == "__main__":
    main()
