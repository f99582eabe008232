import functools
import logging

from flask import current_app, jsonify, session
from werkzeug.security import check_password_hash

logger = logging.getLogger(__name__)

SESSION_KEY = "is_admin"


def verify_admin_password(password: str) -> bool:
    """Check against the configured hash; no hash configured means no admin."""
    pw_hash = current_app.config.get("ADMIN_PASSWORD_HASH") or ""
    if not pw_hash or not password:
        return False
    return check_password_hash(pw_hash, password)


def is_admin() -> bool:
    return bool(session.get(SESSION_KEY))


def login(password: str) -> bool:
    if verify_admin_password(password):
        session[SESSION_KEY] = True
        return True
    logger.info("Rejected admin login attempt")
    return False


def logout() -> None:
    session.pop(SESSION_KEY, None)


def admin_required(view):
    @functools.wraps(view)
    def wrapped(*args, **kwargs):
        if not is_admin():
            resp = jsonify({"success": False, "error": "Admin login required"})
            resp.status_code = 403
            return resp
        return view(*args, **kwargs)
    return wrapped
