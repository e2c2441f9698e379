from datetime import datetime, time

import streamlit as st

from core.database import get_db_context
from core.errors import ClinicError, ValidationError
from core.helpers import render_sidebar, status_badge
from core.session_manager import require_role
from core.time_utils import format_date, local_now
from services.appointment_service import book_appointment
from services.dashboard_service import doctor_choices, load_patient_dashboard, name_lookup


def main():
    context = require_role("Patient")
    render_sidebar(context)

    st.title("Appointments")

    try:
        with get_db_context() as db:
            view = load_patient_dashboard(db, context.uid)
    except ClinicError as exc:
        st.error(f"Failed to load appointments. {exc}")
        return

    doctors = doctor_choices(view)

    with st.expander("Book an Appointment"):
        with st.form("booking_form", clear_on_submit=True):
            doctor_id = st.selectbox(
                "Doctor",
                [""] + list(doctors),
                format_func=lambda did: f"Dr. {doctors[did]}" if did else "— Choose a doctor —",
            )
            day = st.date_input("Date", value=None, min_value=local_now().date())
            at = st.time_input("Time", value=None)
            reason = st.text_input("Reason")
            submitted = st.form_submit_button("Confirm Appointment")

        if submitted:
            if not doctor_id or not day or at is None:
                st.warning("Please fill all required fields.")
            else:
                try:
                    with get_db_context() as db:
                        book_appointment(
                            db,
                            patient_id=view.patient.id,
                            doctor_id=doctor_id,
                            when=datetime.combine(day, at or time.min).astimezone(),
                            reason=reason,
                            created_by=context.uid,
                            patient_name=view.patient.name or "",
                            doctor_name=doctors.get(doctor_id, ""),
                        )
                    st.success("Appointment booked successfully!")
                    st.rerun()
                except ValidationError as exc:
                    st.warning(str(exc))
                except ClinicError:
                    st.error("Failed to book appointment. Please try again.")

    if not view.appointments:
        st.info("No appointments yet.")
        return

    for a in view.appointments:
        with st.container():
            c1, c2, c3 = st.columns([1, 4, 1])
            c1.write(format_date(a.date))
            with c2:
                st.write(f"**Dr. {name_lookup(doctors, a.doctor_id, a.doctor_name or 'Doctor')}**")
                st.caption(f"{format_date(a.date, '%I:%M %p')} · {a.reason or 'General Visit'}")
            c3.markdown(status_badge(a.status))


if __name__ == "__main__":
    main()
