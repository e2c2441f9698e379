from datetime import datetime, time

import streamlit as st

from core.database import get_db_context
from core.errors import ClinicError, ValidationError
from core.helpers import render_sidebar, rerun_with_message, show_flash, status_badge
from core.session_manager import require_role
from core.time_utils import format_date
from models.appointment import STATUSES
from services.appointment_service import apply_transition, book_appointment, offered_actions
from services.dashboard_service import filter_by_status, load_receptionist_view, name_lookup

ACTION_LABELS = {"Confirmed": "Confirm", "Cancelled": "Cancel"}


def book_form(context, view):
    patient_names = view.patient_names()
    doctor_names = view.doctor_names()

    with st.expander("Book Appointment"):
        with st.form("book_appt_form", clear_on_submit=True):
            patient_id = st.selectbox(
                "Patient",
                [""] + list(patient_names),
                format_func=lambda pid: patient_names.get(pid, "Select Patient") if pid else "Select Patient",
            )
            doctor_id = st.selectbox(
                "Doctor",
                [""] + list(doctor_names),
                format_func=lambda did: doctor_names.get(did, "Select Doctor") if did else "Select Doctor",
            )
            day = st.date_input("Date", value=None)
            at = st.time_input("Time", value=time(9, 0))
            reason = st.text_input("Reason")
            submitted = st.form_submit_button("Book Appointment")

        if submitted:
            when = datetime.combine(day, at).astimezone() if day else None
            try:
                with get_db_context() as db:
                    book_appointment(
                        db,
                        patient_id=patient_id,
                        doctor_id=doctor_id,
                        when=when,
                        reason=reason,
                        created_by=context.uid,
                        patient_name=patient_names.get(patient_id, ""),
                        doctor_name=doctor_names.get(doctor_id, "Doctor"),
                    )
                st.success("Appointment booked!")
                st.rerun()
            except ValidationError as exc:
                st.warning(str(exc))
            except ClinicError as exc:
                st.error(f"Error: {exc}")


def main():
    context = require_role("Receptionist")
    render_sidebar(context)
    show_flash()

    st.title("Appointments")

    try:
        with get_db_context() as db:
            view = load_receptionist_view(db)
    except ClinicError as exc:
        st.error(f"Failed to load appointments. {exc}")
        return

    book_form(context, view)

    options = ["All", *STATUSES]
    preset = st.session_state.pop("reception_filter_status", None)
    status_filter = st.selectbox("Status", options, index=options.index(preset) if preset in options else 0)
    listed = filter_by_status(view.appointments, None if status_filter == "All" else status_filter)

    if not listed:
        st.info("No appointments found.")
        return

    patient_names = view.patient_names()
    doctor_names = view.doctor_names()
    requested = None

    for a in listed:
        c1, c2, c3, c4, c5 = st.columns([2, 2, 2, 1, 2])
        c1.write(name_lookup(patient_names, a.patient_id, a.patient_name))
        c2.write(f"Dr. {name_lookup(doctor_names, a.doctor_id, a.doctor_name)}")
        c3.write(format_date(a.date, "%b %d, %Y %I:%M %p"))
        c4.markdown(status_badge(a.status))
        with c5:
            for status in offered_actions(a.status, context.role):
                if st.button(ACTION_LABELS.get(status, status), key=f"{status}_{a.id}"):
                    requested = (a.id, status)

    if requested:
        appointment_id, status = requested
        try:
            with get_db_context() as db:
                apply_transition(
                    db,
                    appointment_id,
                    status,
                    reload=lambda: rerun_with_message(f"Appointment {status.lower()}."),
                )
        except ClinicError as exc:
            st.error(f"Error: {exc}")


if __name__ == "__main__":
    main()
