from typing import Dict, Any
from fastapi import APIRouter, Depends, Request, Response
from pydantic import BaseModel, Field

from storefront.errors import Unauthorized
from storefront.utils.rate_limit import optional_rate_limit
from storefront.utils.security import require_user, set_session_cookie, clear_session_cookie, extract_access_token
from .service import login as svc_login, logout as svc_logout

# --- API Router (/api/v1/auth) ---

api_router = APIRouter(prefix="/api/v1/auth", tags=["Auth API"])

class LoginRequest(BaseModel):
    email: str = Field(min_length=3)
    password: str = Field(min_length=1)

@api_router.post("/login", dependencies=[Depends(optional_rate_limit(times=5, seconds=60))])
def api_login(req: LoginRequest, response: Response):
    """Connexion (API JSON).
    - Délègue la vérification des identifiants au service (svc_login).
    - Pose le cookie de session (sb_access) si un access_token est fourni.
    - Retourne {access_token, token_type, user}.
    """
    result = svc_login(req.email, req.password)
    if not result.success:
        raise Unauthorized(result.error or "Identifiants invalides")
    if result.access_token:
        set_session_cookie(response, result.access_token)
    return {"access_token": result.access_token, "token_type": "bearer", "user": result.user}

@api_router.get("/me")
def api_me(user: Dict[str, Any] = Depends(require_user)):
    return {"id": user.get("id"), "email": user.get("email"), "role": user.get("role")}

@api_router.post("/logout")
def api_logout(request: Request, response: Response):
    svc_logout(extract_access_token(request))
    clear_session_cookie(response)
    return {"success": True}
