from sqlalchemy.orm import Session

from core.errors import AUTH_SESSION_EXPIRED, AccessDenied, AuthError
from core.session_context import SessionContext
from services.identity_service import get_account
from services.profile_service import resolve_profile


def is_allowed(role: str | None, allowed_roles) -> bool:
    """Empty ``allowed_roles`` admits every role."""
    allowed_roles = set(allowed_roles or ())
    return not allowed_roles or role in allowed_roles


def authorize(db: Session, account, allowed_roles=()):
    """Resolve the profile and check it against ``allowed_roles``.

    Raises AccessDenied when the role is not allowed; the caller must sign
    the session out and redirect.
    """
    profile = resolve_profile(db, account)
    if not is_allowed(profile.role, allowed_roles):
        raise AccessDenied(profile.role, allowed_roles)
    return profile


def establish_session(db: Session, account_id: str, allowed_roles=()) -> SessionContext:
    """Build a fresh SessionContext for ``account_id`` after authorizing it."""
    account = get_account(db, account_id)
    if account is None:
        raise AuthError(AUTH_SESSION_EXPIRED)

    context = SessionContext(account_id=account.id, email=account.email)
    profile = authorize(db, account, allowed_roles)
    context.establish(profile)
    return context
