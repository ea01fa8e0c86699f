import logging
from typing import Any, Dict

import bcrypt
from fastapi import Request, HTTPException

from funwalk import config

logger = logging.getLogger(__name__)

SESSION_ADMIN_KEY = "admin"

def admin_gate_enabled() -> bool:
    return bool(config.ADMIN_SECRET_HASH)

def verify_admin_secret(secret: str) -> bool:
    """Compare le mot de passe saisi au hash bcrypt ADMIN_SECRET_HASH."""
    if not secret or not config.ADMIN_SECRET_HASH:
        return False
    try:
        return bcrypt.checkpw(secret.encode("utf-8"), config.ADMIN_SECRET_HASH.encode("utf-8"))
    except ValueError:
        # Hash mal formé dans l'environnement
        logger.error("security.verify_admin_secret: invalid ADMIN_SECRET_HASH")
        return False

def login_admin(request: Request) -> None:
    request.session[SESSION_ADMIN_KEY] = True

def logout_admin(request: Request) -> None:
    request.session.pop(SESSION_ADMIN_KEY, None)

def require_admin(request: Request) -> Dict[str, Any]:
    """
    Garde du tableau de bord.
    - sans ADMIN_SECRET_HASH: accès libre
    - sinon: session admin obligatoire (POST /admin/login), 401 à défaut
    """
    if not admin_gate_enabled():
        return {"role": "admin", "gate": "open"}
    if request.session.get(SESSION_ADMIN_KEY) is True:
        return {"role": "admin", "gate": "session"}
    raise HTTPException(status_code=401, detail="Admin login required")
