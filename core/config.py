"""
Centralised configuration constants read from the environment.
"""

import os

from dotenv import load_dotenv

load_dotenv()

BASE_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))

# ── Database ─────────────────────────────────────────────────────────
DEFAULT_DB_PATH = os.path.join(BASE_DIR, "data", "clinic.db")
DATABASE_URL = os.getenv("DATABASE_URL", f"sqlite:///{DEFAULT_DB_PATH}")

# ── Branding ─────────────────────────────────────────────────────────
CLINIC_NAME = os.getenv("CLINIC_NAME", "MedVault Clinic")
DEFAULT_PLAN = os.getenv("DEFAULT_PLAN", "Free")

# ── Session / auth ───────────────────────────────────────────────────
AUTH_READY_TIMEOUT = float(os.getenv("AUTH_READY_TIMEOUT", "10"))
MIN_PASSWORD_LENGTH = int(os.getenv("MIN_PASSWORD_LENGTH", "6"))
MAX_FAILED_LOGINS = int(os.getenv("MAX_FAILED_LOGINS", "5"))
LOGIN_LOCKOUT_SECONDS = int(os.getenv("LOGIN_LOCKOUT_SECONDS", "300"))

# First-run admin seeded by scripts/setup_db.py
DEFAULT_ADMIN_EMAIL = os.getenv("DEFAULT_ADMIN_EMAIL", "admin@medvault.local")
DEFAULT_ADMIN_PASSWORD = os.getenv("DEFAULT_ADMIN_PASSWORD", "admin123")

# ── Logging ──────────────────────────────────────────────────────────
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
