import streamlit as st

from core.database import get_db_context
from core.errors import ClinicError, ValidationError
from core.helpers import render_sidebar
from core.session_manager import require_role
from services.user_service import get_staff_profile, update_staff_profile


def main():
    context = require_role("Doctor", "Receptionist")
    render_sidebar(context)

    st.title("My Profile")

    with get_db_context() as db:
        details = get_staff_profile(db, context.role, context.uid)

    prefix = "Dr. " if context.role == "Doctor" else ""
    st.subheader(f"{prefix}{details['name'] or '—'}")
    st.write(f"**Specialization:** {details['specialization'] or '—'}")
    st.write(f"**Email:** {details['email'] or ''}")
    st.write(f"**Experience:** {details['experience'] or '0'} Years")
    st.write(f"**Contact:** {details['contact'] or '—'}")
    st.write(details["bio"] or "No biography provided.")

    st.divider()

    with st.expander("Edit Profile"):
        with st.form("edit_profile_form"):
            name = st.text_input("Name", value=details["name"] or "")
            specialization = st.text_input("Specialization", value=details["specialization"] or "")
            experience = st.text_input("Experience (years)", value=details["experience"] or "")
            contact = st.text_input("Contact", value=details["contact"] or "")
            bio = st.text_area("Bio", value=details["bio"] or "")
            saved = st.form_submit_button("Save Changes")

        if saved:
            try:
                with get_db_context() as db:
                    update_staff_profile(
                        db,
                        context.role,
                        context.uid,
                        name=name,
                        specialization=specialization,
                        experience=experience,
                        contact=contact,
                        bio=bio,
                    )
                context.profile.name = name.strip()
                st.success("Profile updated successfully!")
                st.rerun()
            except ValidationError as exc:
                st.warning(str(exc))
            except ClinicError as exc:
                st.error(f"Error updating profile: {exc}")


if __name__ == "__main__":
    main()
