"""Admin authentication for the dashboard write endpoints."""
import logging
import secrets
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBasic, HTTPBasicCredentials
from omninews import config

logger = logging.getLogger(__name__)

basic_auth = HTTPBasic(auto_error=False)


def require_admin(credentials: HTTPBasicCredentials = Depends(basic_auth)) -> str:
    """Check HTTP Basic credentials against ADMIN_USER / ADMIN_PASS.

    Writes are refused outright when no admin account is configured.
    """
    unauthorized = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Admin credentials required",
        headers={"WWW-Authenticate": 'Basic realm="Admin"'},
    )
    if not config.ADMIN_USER or not config.ADMIN_PASS:
        logger.warning("Admin write attempted but ADMIN_USER/ADMIN_PASS are not configured")
        raise unauthorized
    if credentials is None:
        raise unauthorized

    user_ok = secrets.compare_digest(credentials.username.encode(), config.ADMIN_USER.encode())
    pass_ok = secrets.compare_digest(credentials.password.encode(), config.ADMIN_PASS.encode())
    if not (user_ok and pass_ok):
        logger.warning(f"Rejected admin login for user {credentials.username!r}")
        raise unauthorized
    return credentials.username
