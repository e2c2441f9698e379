# scripts/setup_db.py

from core.config import DEFAULT_ADMIN_EMAIL
from core.database import get_db_context, init_db
from services.user_service import ensure_default_users


def main():
    print("Creating database tables...")

    # Create all SQLAlchemy tables
    init_db()

    # Insert the first admin
    with get_db_context() as db:
        created = ensure_default_users(db)

    if created:
        print(f"Default admin created: {DEFAULT_ADMIN_EMAIL}")
    print("Database initialized successfully.")


if __name__ == "__main__":
    main()
