from typing import Optional, Dict, Any
import logging
from storefront.config import ADMIN_EMAILS
from storefront.auth.models import LoginResult, login_result_from, login_failure
from .repository import (
    auth_sign_in_password as sign_in_password,
    auth_sign_out as sign_out,
    get_user_from_access_token as _repo_get_user_from_token,
)

logger = logging.getLogger(__name__)

def determine_role(email: Optional[str], metadata: Dict[str, Any] | None) -> str:
    """Rôle applicatif: 'admin' via user_metadata.role ou ADMIN_EMAILS, sinon 'user'."""
    if str((metadata or {}).get("role", "")).lower() == "admin":
        return "admin"
    if email and email.strip().lower() in {e.lower() for e in ADMIN_EMAILS}:
        return "admin"
    return "user"

# --- Cas d’usage Auth exposés ---

def login(email: str, password: str) -> LoginResult:
    """Connexion:
    - Délègue à supabase.auth.sign_in_with_password via repository
    - Normalise la réponse en LoginResult
    """
    try:
        email = (email or "").strip()
        res = sign_in_password(email, password)
        return login_result_from(res, fallback_error="Identifiants invalides ou email non confirmé")
    except Exception as e:
        return login_failure("sign_in", e)

def logout(access_token: Optional[str]) -> None:
    if not access_token:
        return
    try:
        sign_out(access_token)
    except Exception as e:
        # Session déjà expirée côté GoTrue: rien à révoquer
        logger.info("auth.logout sign_out ignored: %s", type(e).__name__)

def get_user_from_token(access_token: str) -> Dict[str, Any]:
    """Normalise user issu de supabase.auth.get_user(access_token):
    - Retourne {id, email, metadata, role, token}
    """
    raw = _repo_get_user_from_token(access_token)
    email = raw.get("email")
    metadata = raw.get("user_metadata") or {}
    return {
        "id": raw.get("id"),
        "email": email,
        "metadata": metadata,
        "role": determine_role(email, metadata),
        "token": access_token,
    }
