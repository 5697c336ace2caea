from typing import Dict, Any
from storefront.infra import supabase_client

# --- Auth (supabase.auth.*) ---

def auth_sign_in_password(email: str, password: str):
    """Wrapper Supabase Auth: connexion par email/mot de passe (GoTrue)."""
    client = supabase_client.get_supabase()
    return client.auth.sign_in_with_password({"email": email, "password": password})

def auth_sign_out(access_token: str) -> None:
    """Révoque la session côté GoTrue (best-effort, le cookie est supprimé de toute façon)."""
    client = supabase_client.get_supabase()
    client.auth.admin.sign_out(access_token)

def get_user_from_access_token(access_token: str) -> Dict[str, Any]:
    """Récupère et normalise l’utilisateur depuis supabase.auth.get_user(access_token)."""
    res = supabase_client.get_supabase().auth.get_user(access_token)
    user = getattr(res, "user", None) or {}
    if not isinstance(user, dict):
        user = {
            "id": getattr(user, "id", None),
            "email": getattr(user, "email", None),
            "user_metadata": getattr(user, "user_metadata", None),
        }
    return user or {}
