"""
Unit tests for prescriptions, patient records and staff profiles.
"""

import pytest

from core.errors import AuthError, NotFoundError, ValidationError
from models import Account, DiagnosisLog, Patient, Prescription, User
from services.identity_service import sign_in
from services.patient_service import find_patient_for_account, register_patient, update_patient
from services.prescription_service import clean_medicines, create_prescription, medicine_names
from services.profile_service import resolve_profile
from services.user_service import (
    ensure_default_users,
    get_staff_profile,
    register_account,
    update_staff_profile,
)

from tests.factories import add_patient


# ------------------------------------------
# Prescriptions
# ------------------------------------------
def test_clean_medicines_drops_blank_rows():
    rows = [
        {"name": " Amoxicillin ", "dosage": "250mg ", "instruction": None},
        {"name": "   ", "dosage": "10mg"},
        ("Ibuprofen", "200mg"),
        ("",),
    ]
    assert clean_medicines(rows) == [
        {"name": "Amoxicillin", "dosage": "250mg", "instruction": ""},
        {"name": "Ibuprofen", "dosage": "200mg", "instruction": ""},
    ]


def test_create_prescription_logs_diagnosis(db):
    prescription = create_prescription(
        db,
        patient_id="P",
        doctor_id="D",
        diagnosis=" Flu ",
        medicines=[{"name": "Paracetamol", "dosage": "500mg", "instruction": "after meals"}, {"name": ""}],
        notes="Rest",
    )

    assert prescription.diagnosis == "Flu"
    assert medicine_names(prescription) == ["Paracetamol"]
    log = db.query(DiagnosisLog).one()
    assert (log.patient_id, log.symptoms, log.risk_level) == ("P", "Flu", "Low")


def test_create_prescription_without_diagnosis_has_no_log(db):
    create_prescription(db, patient_id="P", doctor_id="D", medicines=[("Zinc",)])
    assert db.query(DiagnosisLog).count() == 0
    assert db.query(Prescription).count() == 1


@pytest.mark.parametrize(
    "patient_id, medicines",
    [("", [("Zinc",)]), ("P", []), ("P", [{"name": "  "}])],
)
def test_create_prescription_validation(db, patient_id, medicines):
    with pytest.raises(ValidationError):
        create_prescription(db, patient_id=patient_id, doctor_id="D", medicines=medicines)
    assert db.query(Prescription).count() == 0


# ------------------------------------------
# Patients
# ------------------------------------------
def test_register_patient_without_account(db):
    patient = register_patient(db, " Jane ", age="34", gender="Female", contact=" 555 ", email="J@X.com", created_by="R")

    assert patient.name == "Jane"
    assert patient.age == 34
    assert patient.contact == "555"
    assert patient.email == "j@x.com"
    assert patient.user_id == ""
    assert db.query(Account).count() == 0


def test_register_patient_with_account(db):
    patient = register_patient(db, "Jane", email="j@x.com", password="secret1", created_by="R")

    account = sign_in(db, "j@x.com", "secret1")
    assert patient.id == account.id
    assert patient.user_id == account.id
    assert db.get(User, account.id).role == "Patient"
    assert find_patient_for_account(db, account.id).id == patient.id


def test_register_patient_account_conflict_writes_nothing(db):
    register_patient(db, "Jane", email="j@x.com", password="secret1")

    with pytest.raises(AuthError):
        register_patient(db, "Jane Again", email="j@x.com", password="secret1")
    assert db.query(Patient).count() == 1


@pytest.mark.parametrize("age", ["abc", "-1", 200])
def test_register_patient_rejects_bad_age(db, age):
    with pytest.raises(ValidationError):
        register_patient(db, "Jane", age=age)


def test_update_patient(db):
    add_patient(db, "P1", "Jane")

    patient = update_patient(db, "P1", name="Jane Doe", age=40, contact=" 123 ")

    assert (patient.name, patient.age, patient.contact) == ("Jane Doe", 40, "123")


def test_update_patient_errors(db):
    add_patient(db, "P1", "Jane")
    with pytest.raises(ValidationError):
        update_patient(db, "P1", name=" ")
    with pytest.raises(NotFoundError):
        update_patient(db, "missing", name="X")


# ------------------------------------------
# Staff
# ------------------------------------------
def test_register_account_creates_staff_profile(db):
    profile = register_account(db, "Dr Grey", "grey@x.com", "secret1", "Doctor")

    assert profile.role == "Doctor"
    assert sign_in(db, "grey@x.com", "secret1").id == profile.id


def test_register_account_rejects_unknown_role(db):
    with pytest.raises(ValidationError):
        register_account(db, "X", "x@x.com", "secret1", "Janitor")
    assert db.query(Account).count() == 0


def test_ensure_default_users_seeds_one_admin(db):
    first = ensure_default_users(db)
    assert first.role == "Admin"
    assert ensure_default_users(db) is None
    assert db.query(User).filter(User.role == "Admin").count() == 1


def test_staff_profile_falls_back_to_profile_fields(db):
    profile = register_account(db, "Rita", "rita@x.com", "secret1", "Receptionist")

    details = get_staff_profile(db, "Receptionist", profile.id)

    assert details["name"] == "Rita"
    assert details["email"] == "rita@x.com"
    assert details["specialization"] is None


def test_update_staff_profile(db):
    profile = register_account(db, "Grey", "grey@x.com", "secret1", "Doctor")

    details = update_staff_profile(
        db, "Doctor", profile.id,
        name="Meredith Grey", specialization="Surgery", experience=12, contact="555", bio="",
    )

    assert details["name"] == "Meredith Grey"
    assert details["specialization"] == "Surgery"
    assert details["experience"] == "12"
    assert db.get(User, profile.id).name == "Meredith Grey"
    assert db.get(Account, profile.id).display_name == "Meredith Grey"


def test_update_staff_profile_rejects_patient_role(db):
    with pytest.raises(ValidationError):
        update_staff_profile(db, "Patient", "x", name="X")


def test_register_patient_account_links_existing_record(db):
    add_patient(db, "rec-made", "Jane", email="j@x.com")

    profile = register_account(db, "Jane D", "j@x.com", "secret1", "Patient")
    resolve_profile(db, db.get(Account, profile.id))

    assert db.get(Patient, "rec-made").user_id == profile.id
    assert find_patient_for_account(db, profile.id).id == "rec-made"
    assert profile.name == "Jane"
    assert db.query(Patient).count() == 1


def test_register_patient_account_creates_record(db):
    profile = register_account(db, "Sam", "sam@x.com", "secret1", "Patient")

    record = find_patient_for_account(db, profile.id)
    assert record is not None
    assert (record.id, record.name, record.email) == (profile.id, "Sam", "sam@x.com")


def test_register_staff_account_has_no_patient_record(db):
    profile = register_account(db, "Dr Grey", "grey@x.com", "secret1", "Doctor")
    assert find_patient_for_account(db, profile.id) is None
    assert db.query(Patient).count() == 0
