import streamlit as st

from core.database import get_db_context
from core.errors import ClinicError
from core.helpers import render_sidebar, status_badge
from core.session_manager import require_role
from core.time_utils import format_date, local_now
from services.dashboard_service import load_receptionist_view, name_lookup
from services.stats_service import appointments_on_day


def main():
    context = require_role("Receptionist")
    render_sidebar(context)

    st.title("Daily Schedule")

    day = st.date_input("Date", value=local_now().date())
    st.caption(day.strftime("%A, %B %d, %Y"))

    try:
        with get_db_context() as db:
            view = load_receptionist_view(db)
    except ClinicError as exc:
        st.error(f"Error loading schedule. {exc}")
        return

    slots = appointments_on_day(view.appointments, day)
    if not slots:
        st.info("No appointments scheduled for this day.")
        return

    patient_names = view.patient_names()
    doctor_names = view.doctor_names()
    for a in slots:
        c1, c2, c3 = st.columns([1, 4, 1])
        c1.write(format_date(a.date, "%I:%M %p"))
        with c2:
            st.write(f"**{name_lookup(patient_names, a.patient_id, a.patient_name)}**")
            st.caption(f"Dr. {name_lookup(doctor_names, a.doctor_id, a.doctor_name)} · {a.reason or 'General'}")
        c3.markdown(status_badge(a.status))


if __name__ == "__main__":
    main()
