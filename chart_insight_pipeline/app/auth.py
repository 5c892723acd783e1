"""Static credential check for the login form."""

import hmac
import logging
from typing import Optional

from .config import Settings
from .schemas import LoginResult

logger = logging.getLogger(__name__)


def authenticate(user_id: str, password: str, settings: Settings, messages: dict) -> LoginResult:
    """Compare credentials against ADMIN_UID / ADMIN_PASSWORD."""
    logger.info(f"Attempting authentication for user: {user_id}")

    # Evaluate both so timing does not reveal which one was wrong
    uid_ok = hmac.compare_digest(user_id.encode("utf-8"), settings.admin_uid.encode("utf-8"))
    password_ok = hmac.compare_digest(password.encode("utf-8"), settings.admin_password.encode("utf-8"))

    if uid_ok and password_ok:
        logger.info(f"Authentication successful for user: {user_id}")
        return LoginResult(success=True)

    logger.info(f"Authentication failed for user: {user_id}")
    return LoginResult(success=False, error=messages["invalid_credentials"])


def check_login_form(user_id: Optional[str], password: Optional[str], messages: dict) -> Optional[str]:
    """Return a joined validation message for missing fields, or None if both are present."""
    problems = []
    if not user_id:
        problems.append(messages["user_id_required"])
    if not password:
        problems.append(messages["password_required"])
    return ", ".join(problems) or None
