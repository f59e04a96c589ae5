from typing import Optional

from fastapi import Depends, Header, HTTPException

from gearx.core.config import Settings, get_settings
from gearx.core.errors import PermissionDeniedError
from gearx.i18n.en_messages import AdminMessages


def is_admin_email(email: Optional[str], config: Settings) -> bool:
    if not email:
        return False
    return email.strip().lower() in config.admin_allowlist


def require_admin(
    x_admin_email: Optional[str] = Header(default=None),
    config: Settings = Depends(get_settings),
) -> str:
    """FastAPI dependency returning the caller's email when it is allowlisted.

    Raises:
        HTTPException 401: header missing.
        PermissionDeniedError: email not in ``Settings.admin_emails``.
    """
    if not x_admin_email or not x_admin_email.strip():
        raise HTTPException(status_code=401, detail=AdminMessages.ADMIN_HEADER_REQUIRED)
    if not is_admin_email(x_admin_email, config):
        raise PermissionDeniedError(AdminMessages.ADMIN_ONLY)
    return x_admin_email.strip().lower()
