import streamlit as st

from core.database import get_db_context
from core.errors import AuthError, ClinicError, ValidationError
from core.helpers import render_sidebar
from core.session_manager import require_role
from services.dashboard_service import load_receptionist_view, search_patients
from services.patient_service import register_patient, update_patient

GENDERS = ["", "Male", "Female", "Other"]


def add_patient_form(context):
    with st.expander("Register New Patient"):
        with st.form("add_patient_form", clear_on_submit=True):
            name = st.text_input("Full Name")
            age = st.text_input("Age")
            gender = st.selectbox("Gender", GENDERS)
            contact = st.text_input("Contact")
            email = st.text_input("Email (optional)")
            password = st.text_input("Password (optional, creates a login)", type="password")
            submitted = st.form_submit_button("Register Patient")

        if submitted:
            try:
                with get_db_context() as db:
                    patient = register_patient(
                        db,
                        name,
                        age=age,
                        gender=gender,
                        contact=contact,
                        email=email,
                        created_by=context.uid,
                        password=password or None,
                    )
                st.success(f'Patient "{patient.name}" registered!')
                st.rerun()
            except ValidationError as exc:
                st.warning(str(exc))
            except AuthError as exc:
                st.error(exc.message)
            except ClinicError as exc:
                st.error(f"Error: {exc}")


def edit_patient_form(patient):
    with st.form(f"edit_{patient.id}"):
        name = st.text_input("Name", value=patient.name or "")
        age = st.text_input("Age", value=str(patient.age) if patient.age is not None else "")
        gender = st.selectbox(
            "Gender",
            GENDERS,
            index=GENDERS.index(patient.gender) if patient.gender in GENDERS else 0,
        )
        contact = st.text_input("Contact", value=patient.contact or "")
        saved = st.form_submit_button("Save")

    if saved:
        try:
            with get_db_context() as db:
                update_patient(db, patient.id, name=name, age=age, gender=gender, contact=contact)
            st.success("Patient updated!")
            st.session_state.pop("editing_patient", None)
            st.rerun()
        except ValidationError as exc:
            st.warning(str(exc))
        except ClinicError as exc:
            st.error(f"Error: {exc}")


def main():
    context = require_role("Receptionist")
    render_sidebar(context)

    st.title("Patients")

    add_patient_form(context)

    try:
        with get_db_context() as db:
            view = load_receptionist_view(db)
    except ClinicError as exc:
        st.error(f"Failed to load patients. {exc}")
        return

    q = st.text_input("Search", placeholder="Name or contact").strip()
    patients = search_patients(view.patients, q)

    if not patients:
        st.info("No patients registered yet." if not q else "No patients found.")
        return

    editing = st.session_state.get("editing_patient")
    for p in patients:
        with st.container():
            c1, c2, c3, c4 = st.columns([3, 2, 2, 1])
            c1.write(f"**{p.name}**")
            c2.write(f"{p.age or '—'} · {p.gender or '—'}")
            c3.write(p.contact or "—")
            if c4.button("Edit", key=f"edit_btn_{p.id}"):
                st.session_state["editing_patient"] = p.id
                st.rerun()
            if editing == p.id:
                edit_patient_form(p)


if __name__ == "__main__":
    main()
