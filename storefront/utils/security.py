from fastapi import Request, Depends
from fastapi.responses import Response
from typing import Optional, Dict, Any
from storefront.config import COOKIE_SECURE
from storefront.errors import Unauthorized, Forbidden

COOKIE_NAME = "sb_access"

def set_session_cookie(response: Response, access_token: str):
    response.set_cookie(
        key=COOKIE_NAME,
        value=access_token,
        httponly=True,
        secure=COOKIE_SECURE,
        samesite="Lax",
        max_age=60 * 60,
        path="/",
    )

def clear_session_cookie(response: Response):
    response.delete_cookie(COOKIE_NAME, path="/")

def extract_access_token(request: Request) -> Optional[str]:
    # Hybride: priorité au Bearer, fallback cookie
    token = None
    auth_header = request.headers.get("Authorization", "")
    if auth_header.startswith("Bearer "):
        token = auth_header[7:].strip()
    if not token:
        token = request.cookies.get(COOKIE_NAME)
    return token or None

def get_current_user(request: Request) -> Dict[str, Any]:
    """
    Résout l'utilisateur authentifié ({id, email, role, token}) ou lève Unauthorized.
    """
    token = extract_access_token(request)
    if not token:
        raise Unauthorized()

    try:
        # Délégué au service Auth
        from storefront.auth.service import get_user_from_token as _svc_get_user_from_token
        user = _svc_get_user_from_token(token)
    except Exception:
        raise Unauthorized("Session expirée, veuillez vous connecter")
    if not user.get("id"):
        raise Unauthorized("Session expirée, veuillez vous connecter")
    return user

def require_user(user: Dict[str, Any] = Depends(get_current_user)) -> Dict[str, Any]:
    return user

def require_admin(user: Dict[str, Any] = Depends(get_current_user)) -> Dict[str, Any]:
    if user.get("role") != "admin":
        raise Forbidden()
    return user
