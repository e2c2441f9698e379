from .identity_service import sign_in, sign_up, sign_out, on_auth_change
from .profile_service import resolve_profile
from .guard_service import authorize

# Import the other service modules directly where needed; reportlab is only
# pulled in by pages that export PDFs.

__all__ = ["sign_in", "sign_up", "sign_out", "on_auth_change", "resolve_profile", "authorize"]
