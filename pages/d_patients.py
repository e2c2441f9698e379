import streamlit as st

from core.database import get_db_context
from core.errors import ClinicError
from core.helpers import render_sidebar
from core.session_manager import require_role
from core.time_utils import format_date
from services.dashboard_service import load_doctor_view, search_patients


def render_timeline(events):
    if not events:
        st.info("No medical history for this patient.")
        return
    for event in events:
        icon = "📅" if event.type == "appointment" else "💊"
        st.markdown(f"{icon} **{event.title}**  \n{format_date(event.instant)} · {event.detail}")


def render_patient_detail(view, patient_id):
    patient = next((p for p in view.patients if p.id == patient_id), None)
    if patient is None:
        st.error("Patient not found.")
        return

    st.subheader(patient.name or "—")
    st.caption(patient.email or "")
    c1, c2, c3 = st.columns(3)
    c1.write(f"**Age:** {patient.age or '—'}")
    c2.write(f"**Gender:** {patient.gender or '—'}")
    c3.write(f"**Contact:** {patient.contact or '—'}")

    st.markdown("#### Medical History")
    render_timeline(view.timeline(patient_id))

    if st.button("Close"):
        st.session_state.pop("selected_patient", None)
        st.rerun()


def main():
    context = require_role("Doctor")
    render_sidebar(context)

    st.title("My Patients")
    st.caption("Patients with at least one appointment with you. Search looks through the full directory.")

    try:
        with get_db_context() as db:
            view = load_doctor_view(db, context.uid)
    except ClinicError as exc:
        st.error(str(exc))
        return

    selected = st.session_state.get("selected_patient")
    if selected:
        render_patient_detail(view, selected)
        st.markdown("---")

    q = st.text_input("Search", placeholder="Name or contact").strip()
    patients = search_patients(view.patients, q) if q else view.my_patients

    if not patients:
        st.info("No patients found.")
        return

    for p in patients:
        with st.container():
            col1, col2 = st.columns([4, 1])
            with col1:
                details = " · ".join(x for x in (p.gender, f"{p.age} yrs" if p.age else "") if x)
                st.write(f"**{p.name}**")
                if details:
                    st.caption(details)
            with col2:
                if st.button("View", key=f"view_{p.id}"):
                    st.session_state["selected_patient"] = p.id
                    st.rerun()


if __name__ == "__main__":
    main()
