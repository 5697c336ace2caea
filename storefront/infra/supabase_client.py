from typing import Optional
from supabase import create_client, Client
from storefront import config
from storefront.errors import PersistenceFailure

_supabase: Optional[Client] = None
_service_supabase: Optional[Client] = None

def get_supabase() -> Client:
    global _supabase
    if _supabase is None:
        if not config.SUPABASE_URL or not config.SUPABASE_ANON:
            raise PersistenceFailure("SUPABASE_URL/SUPABASE_ANON_KEY manquants")
        _supabase = create_client(config.SUPABASE_URL, config.SUPABASE_ANON)
    return _supabase

def get_service_supabase() -> Client:
    """
    Client service-role (bypass RLS): webhook de paiement, back-office.
    """
    global _service_supabase
    if _service_supabase is None:
        if not config.SUPABASE_URL or not config.SUPABASE_SERVICE_KEY:
            raise PersistenceFailure("SUPABASE_SERVICE_KEY manquant pour get_service_supabase()")
        _service_supabase = create_client(config.SUPABASE_URL, config.SUPABASE_SERVICE_KEY)
    return _service_supabase

def get_user_supabase(user_token: str) -> Client:
    """
    Client Supabase 'anon' avec auth utilisateur (RLS actif).
    À utiliser pour opérer au nom d'un utilisateur sans polluer l'instance globale.
    """
    if not user_token:
        raise ValueError("user_token is required")
    client = create_client(config.SUPABASE_URL, config.SUPABASE_ANON)
    client.postgrest.auth(user_token)
    return client

def client_for(user_token: Optional[str] = None) -> Client:
    """
    Client utilisateur (RLS) si un token est fourni, sinon client service-role.
    """
    if user_token:
        return get_user_supabase(user_token)
    return get_service_supabase()
