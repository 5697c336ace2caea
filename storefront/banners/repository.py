"""
Accès aux données pour la feature 'banners' (table banners + bucket de stockage).
"""
from typing import Any, Dict, List, Optional
import logging
from storefront import config
from storefront.errors import PersistenceFailure
from storefront.infra import supabase_client

logger = logging.getLogger(__name__)

# module storefront.banners.repository
def list_banners() -> List[dict]:
    try:
        res = (
            supabase_client.get_supabase()
            .table("banners")
            .select("*")
            .order("position")
            .execute()
        )
        return res.data or []
    except Exception:
        logger.exception("banners.repository.list_banners failed")
        raise PersistenceFailure("Impossible de charger les bannières")

def get_banner(banner_id: str) -> Optional[dict]:
    try:
        res = (
            supabase_client.get_supabase()
            .table("banners")
            .select("*")
            .eq("id", banner_id)
            .limit(1)
            .execute()
        )
    except Exception:
        logger.exception("banners.repository.get_banner failed id=%s", banner_id)
        raise PersistenceFailure("Impossible de charger la bannière")
    rows = res.data or []
    return rows[0] if rows else None

def insert_banner(data: Dict[str, Any]) -> dict:
    try:
        res = get_service_table().insert(data).execute()
    except Exception:
        logger.exception("banners.repository.insert_banner failed")
        raise PersistenceFailure("Impossible de créer la bannière")
    rows = res.data or []
    return rows[0] if rows else dict(data)

def update_banner(banner_id: str, data: Dict[str, Any]) -> Optional[dict]:
    try:
        res = get_service_table().update(data).eq("id", banner_id).execute()
    except Exception:
        logger.exception("banners.repository.update_banner failed id=%s", banner_id)
        raise PersistenceFailure("Impossible de mettre à jour la bannière")
    rows = res.data or []
    return rows[0] if rows else None

def delete_banner(banner_id: str) -> None:
    try:
        get_service_table().delete().eq("id", banner_id).execute()
    except Exception:
        logger.exception("banners.repository.delete_banner failed id=%s", banner_id)
        raise PersistenceFailure("Impossible de supprimer la bannière")

def get_service_table():
    return supabase_client.get_service_supabase().table("banners")

# --- Stockage des images ---

def upload_image(path: str, content: bytes, content_type: Optional[str] = None) -> str:
    """Téléverse l'image dans le bucket et retourne son URL publique."""
    bucket = supabase_client.get_service_supabase().storage.from_(config.STORAGE_BUCKET)
    try:
        bucket.upload(path, content, {"content-type": content_type or "application/octet-stream"})
    except Exception:
        logger.exception("banners.repository.upload_image failed path=%s", path)
        raise PersistenceFailure("Échec du téléversement de l'image")
    return bucket.get_public_url(path)

def remove_image(path: str) -> None:
    # Best-effort: une image orpheline dans le bucket ne bloque pas l'opération
    try:
        supabase_client.get_service_supabase().storage.from_(config.STORAGE_BUCKET).remove([path])
    except Exception:
        logger.warning("banners.repository.remove_image failed path=%s", path)
