import streamlit as st

from core.database import get_db_context
from core.errors import ClinicError
from core.helpers import render_sidebar
from core.session_manager import require_role
from core.time_utils import format_date
from services.dashboard_service import doctor_choices, load_patient_dashboard, name_lookup
from services.pdf_service import prescription_filename, render_prescription_pdf


def main():
    context = require_role("Patient")
    render_sidebar(context)

    st.title("Prescriptions")

    try:
        with get_db_context() as db:
            view = load_patient_dashboard(db, context.uid)
    except ClinicError as exc:
        st.error(f"Failed to load prescriptions. {exc}")
        return

    if not view.prescriptions:
        st.info("No prescriptions yet.")
        return

    doctors = doctor_choices(view)
    patient_name = view.patient.name

    for rx in view.prescriptions:
        doctor_name = name_lookup(doctors, rx.doctor_id, "Doctor")
        with st.container():
            st.markdown(f"#### Prescription by Dr. {doctor_name}")
            st.caption(format_date(rx.created_at))
            if rx.diagnosis:
                st.write(f"**Diagnosis:** {rx.diagnosis}")

            if rx.medicines:
                st.table([
                    {"Medicine": m.get("name"), "Dosage": m.get("dosage") or "", "Instructions": m.get("instruction") or ""}
                    for m in rx.medicines
                ])
            else:
                st.caption("No medicines listed.")

            if rx.notes:
                st.write(f"📝 {rx.notes}")

            st.download_button(
                "📥 Download PDF",
                data=render_prescription_pdf(rx, patient_name, doctor_name),
                file_name=prescription_filename(patient_name, rx.created_at),
                mime="application/pdf",
                key=f"pdf_{rx.id}",
            )
        st.markdown("---")


if __name__ == "__main__":
    main()
