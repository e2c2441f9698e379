from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from core.errors import PersistenceError, ValidationError
from core.logging import get_logger
from models.prescription import DiagnosisLog, Prescription

log = get_logger(__name__)

DEFAULT_RISK_LEVEL = "Low"


def clean_medicines(rows) -> list[dict]:
    """Keep rows that have a medicine name, trimmed, in their original order."""
    medicines = []
    for row in rows or []:
        if isinstance(row, dict):
            name, dosage, instruction = row.get("name"), row.get("dosage"), row.get("instruction")
        else:
            name, dosage, instruction = (list(row) + [None, None, None])[:3]
        name = (name or "").strip()
        if not name:
            continue
        medicines.append({
            "name": name,
            "dosage": (dosage or "").strip(),
            "instruction": (instruction or "").strip(),
        })
    return medicines


def create_prescription(
    db: Session,
    *,
    patient_id: str,
    doctor_id: str,
    diagnosis: str = "",
    medicines=(),
    notes: str = "",
):
    """Issue a prescription; a diagnosis also records a DiagnosisLog.

    Both rows are written in the same commit.
    """
    if not patient_id:
        raise ValidationError("Please select a patient.")
    medicines = clean_medicines(medicines)
    if not medicines:
        raise ValidationError("Add at least one medicine.")

    diagnosis = (diagnosis or "").strip()
    prescription = Prescription(
        patient_id=patient_id,
        doctor_id=doctor_id,
        diagnosis=diagnosis,
        medicines=medicines,
        notes=(notes or "").strip(),
    )
    db.add(prescription)

    if diagnosis:
        db.add(
            DiagnosisLog(
                patient_id=patient_id,
                doctor_id=doctor_id,
                symptoms=diagnosis,
                ai_response="",
                risk_level=DEFAULT_RISK_LEVEL,
            )
        )

    try:
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        raise PersistenceError(f"Could not create prescription: {exc}") from exc

    db.refresh(prescription)
    log.info("prescription_created", prescription_id=prescription.id, patient_id=patient_id)
    return prescription


def medicine_names(prescription) -> list[str]:
    return [m.get("name") for m in (getattr(prescription, "medicines", None) or []) if m.get("name")]
