from core.config import DATABASE_URL
from core.database import get_db_context
from core.time_utils import format_date
from models import Appointment, Patient, Prescription, User

print("DB:", DATABASE_URL)

with get_db_context() as db:
    for model in (User, Patient, Appointment, Prescription):
        print(f"{model.__tablename__}: {db.query(model).count()}")

    print("latest appointments:")
    for a in db.query(Appointment).all()[-10:]:
        print(" ", a.id, a.patient_id, a.doctor_id, a.status, format_date(a.date, "%Y-%m-%d %H:%M"))
