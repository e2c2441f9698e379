import streamlit as st

from core.database import get_db_context
from core.errors import ClinicError, ValidationError
from core.helpers import render_sidebar
from core.session_manager import require_role
from core.time_utils import format_date
from services.dashboard_service import load_doctor_view, name_lookup
from services.prescription_service import create_prescription

RECENT_LIMIT = 10


def main():
    context = require_role("Doctor")
    render_sidebar(context)

    st.title("Prescriptions")

    try:
        with get_db_context() as db:
            view = load_doctor_view(db, context.uid)
    except ClinicError as exc:
        st.error(str(exc))
        return

    names = view.patient_names()

    st.subheader("New Prescription")
    rows = st.number_input("Number of medicines", min_value=1, max_value=20, value=1, step=1)

    with st.form("prescription_form", clear_on_submit=True):
        patient_id = st.selectbox(
            "Patient",
            options=[""] + [p.id for p in view.patients],
            format_func=lambda pid: names.get(pid, "Select Patient") if pid else "Select Patient",
        )
        diagnosis = st.text_input("Diagnosis")

        medicines = []
        for i in range(int(rows)):
            c1, c2, c3 = st.columns(3)
            name = c1.text_input("Medicine name", key=f"med_name_{i}")
            dosage = c2.text_input("Dosage", key=f"med_dosage_{i}")
            instruction = c3.text_input("Instructions", key=f"med_instr_{i}")
            medicines.append({"name": name, "dosage": dosage, "instruction": instruction})

        notes = st.text_area("Notes")
        submitted = st.form_submit_button("Create Prescription")

    if submitted:
        try:
            with get_db_context() as db:
                create_prescription(
                    db,
                    patient_id=patient_id,
                    doctor_id=context.uid,
                    diagnosis=diagnosis,
                    medicines=medicines,
                    notes=notes,
                )
            st.success("Prescription created successfully!")
            st.rerun()
        except ValidationError as exc:
            st.warning(str(exc))
        except ClinicError as exc:
            st.error(f"Error: {exc}")

    st.divider()
    st.subheader("Recent Prescriptions")

    if not view.prescriptions:
        st.info("No prescriptions issued yet.")
        return

    for rx in view.prescriptions[:RECENT_LIMIT]:
        with st.container():
            meds = ", ".join(f"{m.get('name')} ({m.get('dosage') or '—'})" for m in rx.medicines or [])
            st.write(f"**{name_lookup(names, rx.patient_id, 'Patient')}** — {format_date(rx.created_at)}")
            st.caption(meds or "No medicines")
            if rx.diagnosis:
                st.caption(f"Dx: {rx.diagnosis}")


if __name__ == "__main__":
    main()
