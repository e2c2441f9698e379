import streamlit as st

from core.database import get_db_context
from core.errors import ClinicError
from core.helpers import render_sidebar
from core.session_manager import require_role
from core.time_utils import format_date
from services.dashboard_service import load_patient_dashboard


def main():
    context = require_role("Patient")
    render_sidebar(context)

    st.title("Medical History")

    try:
        with get_db_context() as db:
            view = load_patient_dashboard(db, context.uid)
    except ClinicError as exc:
        st.error(str(exc))
        return

    events = view.timeline()
    if not events:
        st.info("No medical history yet.")
        return

    for event in events:
        icon = "📅" if event.type == "appointment" else "💊"
        st.markdown(f"{icon} **{event.title}**  \n{format_date(event.instant)} · {event.detail}")


if __name__ == "__main__":
    main()
