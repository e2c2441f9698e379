"""
Unit tests for the per-role dashboard loaders.
"""

import pytest
from sqlalchemy.exc import OperationalError

from core.errors import PersistenceError
from services.dashboard_service import (
    PatientFallback,
    derive_my_patients,
    doctor_choices,
    filter_by_status,
    load_admin_view,
    load_doctor_view,
    load_patient_dashboard,
    load_patient_view,
    load_receptionist_view,
    name_lookup,
    search_patients,
)
from services.identity_service import sign_up
from services.profile_service import resolve_profile

from tests.factories import add_appointment, add_patient, add_prescription, add_profile, utc


@pytest.fixture
def clinic(db):
    add_profile(db, "D", "Doctor", name="Grey")
    add_profile(db, "D2", "Doctor", name="House")
    add_profile(db, "R", "Receptionist", name="Rita")
    add_patient(db, "P1", "Alice", email="alice@x.com")
    add_patient(db, "P2", "Bob")
    add_patient(db, "P3", "Carol")
    add_appointment(db, "a1", "P1", "D", utc(2026, 10, 1, 9))
    add_appointment(db, "a2", "P2", "D", utc(2026, 10, 5, 9), status="Confirmed")
    add_appointment(db, "a3", "P1", "D", utc(2026, 10, 3, 9), status="Completed")
    add_appointment(db, "a4", "P3", "D2", utc(2026, 10, 4, 9))
    add_appointment(db, "a5", "gone", "D", utc(2026, 10, 2, 9))
    add_prescription(db, "r1", "P1", "D", utc(2026, 10, 1, 10))
    add_prescription(db, "r2", "P3", "D2", utc(2026, 10, 4, 10))
    return db


def test_doctor_view_is_scoped_and_sorted(clinic):
    view = load_doctor_view(clinic, "D")

    assert [a.id for a in view.appointments] == ["a2", "a3", "a5", "a1"]
    assert [p.id for p in view.prescriptions] == ["r1"]
    assert {p.id for p in view.my_patients} == {"P1", "P2"}
    assert len(view.patients) == 3


def test_doctor_view_names_and_timeline(clinic):
    view = load_doctor_view(clinic, "D")
    names = view.patient_names()

    assert name_lookup(names, "P1") == "Alice"
    assert name_lookup(names, "gone") == "—"

    events = view.timeline("P1")
    assert [e.source_id for e in events] == ["a3", "r1", "a1"]


def test_doctor_without_appointments_has_no_patients(clinic):
    view = load_doctor_view(clinic, "nobody")
    assert view.appointments == []
    assert view.my_patients == []


def test_patient_view_by_record_id(clinic):
    view = load_patient_view(clinic, type("A", (), {"id": "P1", "email": "alice@x.com"})())

    assert view.patient.name == "Alice"
    assert [a.id for a in view.appointments] == ["a3", "a1"]
    assert [p.id for p in view.prescriptions] == ["r1"]
    assert set(view.doctors) == {"D", "D2"}
    assert doctor_choices(view) == {"D": "Grey", "D2": "House"}


def test_patient_view_through_linked_record(clinic):
    account = sign_up(clinic, "alice@x.com", "secret1")
    resolve_profile(clinic, account)

    view = load_patient_dashboard(clinic, account.id)

    assert view.patient.id == "P1"
    assert [a.id for a in view.appointments] == ["a3", "a1"]
    titles = [e.title for e in view.timeline()]
    assert titles[0] == "Appointment with Dr. Grey — Completed"


def test_patient_view_falls_back_when_no_record(clinic):
    account = sign_up(clinic, "solo@x.com", "secret1", display_name="Solo")

    view = load_patient_view(clinic, account)

    assert isinstance(view.patient, PatientFallback)
    assert view.patient.id == account.id
    assert view.patient.name == "Solo"
    assert view.appointments == []


def test_patient_dashboard_unknown_account(clinic):
    with pytest.raises(PersistenceError):
        load_patient_dashboard(clinic, "missing")


def test_receptionist_view(clinic):
    view = load_receptionist_view(clinic)

    assert len(view.patients) == 3
    assert [a.id for a in view.appointments] == ["a2", "a4", "a3", "a5", "a1"]
    assert view.doctor_names() == {"D": "Grey", "D2": "House"}
    assert view.patient_names()["P3"] == "Carol"


def test_admin_view_groups_profiles(clinic):
    view = load_admin_view(clinic)

    assert {p.id for p in view.profiles_by_role["Doctor"]} == {"D", "D2"}
    assert [p.id for p in view.profiles_by_role["Receptionist"]] == ["R"]
    assert view.profiles_by_role["Admin"] == []
    assert view.patient_count == 3
    assert view.appointment_count == 5
    assert view.prescription_count == 2


def test_loader_errors_become_persistence_errors(db, monkeypatch):
    def broken_query(*args, **kwargs):
        raise OperationalError("SELECT", {}, Exception("database is locked"))

    monkeypatch.setattr(db, "query", broken_query)

    with pytest.raises(PersistenceError):
        load_receptionist_view(db)


def test_filter_and_search(clinic):
    view = load_receptionist_view(clinic)

    assert [a.id for a in filter_by_status(view.appointments, "Pending")] == ["a4", "a5", "a1"]
    assert len(filter_by_status(view.appointments, None)) == 5

    assert [p.name for p in search_patients(view.patients, "  ali ")] == ["Alice"]
    assert len(search_patients(view.patients, "")) == 3


def test_derive_my_patients_ignores_dangling_ids():
    class P:
        def __init__(self, pid):
            self.id = pid

    class A:
        def __init__(self, pid):
            self.patient_id = pid

    patients = [P("x"), P("y")]
    assert [p.id for p in derive_my_patients(patients, [A("y"), A("zzz"), A("y")])] == ["y"]


def test_name_lookup_prefers_booking_time_name():
    assert name_lookup({}, "gone", "Old Name") == "Old Name"
    assert name_lookup({"x": "Now"}, "x", "Old Name") == "Now"
