"""
Résultat de connexion renvoyé par le service Auth à la vue /api/v1/auth/login.
"""
from dataclasses import dataclass
from typing import Any, Dict, Optional
import logging

logger = logging.getLogger(__name__)

# module storefront.auth.models
@dataclass(frozen=True)
class LoginResult:
    success: bool
    access_token: Optional[str] = None
    user: Optional[Dict[str, Any]] = None
    error: Optional[str] = None

def to_user_dict(user) -> Dict[str, Any]:
    """Utilisateur GoTrue -> {id, email, metadata, role}."""
    # Import local: service importe ce module
    from storefront.auth.service import determine_role
    email = getattr(user, "email", None)
    metadata = getattr(user, "user_metadata", None) or {}
    return {
        "id": getattr(user, "id", None),
        "email": email,
        "metadata": metadata,
        "role": determine_role(email, metadata),
    }

def login_result_from(res, fallback_error: str) -> LoginResult:
    """Réponse de sign_in_with_password: succès seulement si une session porte un access_token."""
    access_token = getattr(getattr(res, "session", None), "access_token", None)
    if not access_token:
        return LoginResult(False, error=fallback_error)
    return LoginResult(True, access_token=access_token, user=to_user_dict(getattr(res, "user", None)))

def login_failure(action: str, e: Exception) -> LoginResult:
    logger.exception("auth.%s failed: %s", action, type(e).__name__)
    return LoginResult(False, error=f"Erreur {action}")
