"""
Cas d'usage 'banners': CRUD admin avec gestion de l'image associée.
"""
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional
from uuid import uuid4
import logging

from storefront import config
from storefront.errors import InvalidPayload, NotFound
from . import repository

logger = logging.getLogger(__name__)

# Images de démonstration hébergées hors du bucket: jamais supprimées
PLACEHOLDER_HOSTS = ("unsplash.com",)

def image_storage_path(filename: str) -> str:
    ext = filename.rsplit(".", 1)[-1].lower() if "." in (filename or "") else "bin"
    return f"{config.BANNERS_FOLDER}/{uuid4().hex}.{ext}"

def storage_path_from_url(image_url: Optional[str]) -> Optional[str]:
    """Chemin dans le bucket d'une image publique, None pour les images de démonstration."""
    if not image_url or any(host in image_url for host in PLACEHOLDER_HOSTS):
        return None
    name = image_url.rstrip("/").split("/")[-1].split("?")[0]
    return f"{config.BANNERS_FOLDER}/{name}" if name else None

def list_banners() -> List[dict]:
    return repository.list_banners()

def get_banner(banner_id: str) -> dict:
    banner = repository.get_banner(banner_id)
    if not banner:
        raise NotFound("Bannière introuvable")
    return banner

def _upload(image: Optional[Dict[str, Any]]) -> Optional[str]:
    if not image or not image.get("content"):
        return None
    path = image_storage_path(image.get("filename") or "")
    return repository.upload_image(path, image["content"], image.get("content_type"))

def create_banner(title: str, position: int = 0, is_active: bool = False, image: Optional[Dict[str, Any]] = None) -> dict:
    """
    Crée une bannière; image = {filename, content, content_type} optionnelle.
    """
    title = (title or "").strip()
    if not title:
        raise InvalidPayload("Le titre est requis")
    image_url = _upload(image) or ""
    created = repository.insert_banner({
        "title": title,
        "image_url": image_url,
        "position": position,
        "is_active": is_active,
    })
    logger.info("banners.create id=%s", created.get("id"))
    return created

def update_banner(banner_id: str, title: str, position: int = 0, is_active: bool = False, image: Optional[Dict[str, Any]] = None) -> dict:
    """
    Met à jour une bannière; l'image existante est conservée sauf nouvel envoi.
    L'ancienne image n'est supprimée du bucket qu'après la mise à jour de la ligne.
    """
    title = (title or "").strip()
    if not title:
        raise InvalidPayload("Le titre est requis")
    existing = get_banner(banner_id)

    old_url = existing.get("image_url")
    new_url = _upload(image)

    updated = repository.update_banner(banner_id, {
        "title": title,
        "image_url": new_url or old_url,
        "position": position,
        "is_active": is_active,
        "updated_at": datetime.now(timezone.utc).isoformat(),
    })
    if not updated:
        raise NotFound("Bannière introuvable")

    if new_url:
        old_path = storage_path_from_url(old_url)
        if old_path:
            repository.remove_image(old_path)
    return updated

def delete_banner(banner_id: str) -> None:
    existing = get_banner(banner_id)
    repository.delete_banner(banner_id)
    old_path = storage_path_from_url(existing.get("image_url"))
    if old_path:
        repository.remove_image(old_path)
    logger.info("banners.delete id=%s", banner_id)
