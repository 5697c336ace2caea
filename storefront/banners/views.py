"""Endpoints des bannières.
- Lecture publique: GET /api/banners, GET /api/banners/{id}
- Écriture admin (multipart): POST, PUT /{id}, DELETE /{id}
"""
from typing import Any, Dict, Optional
from fastapi import APIRouter, Depends, File, Form, UploadFile

from storefront.utils.security import require_admin
from storefront.banners import service as banners_service

router = APIRouter(prefix="/api/banners", tags=["Banners API"])

async def _read_upload(image: Optional[UploadFile]) -> Optional[Dict[str, Any]]:
    if image is None or not image.filename:
        return None
    content = await image.read()
    if not content:
        return None
    return {"filename": image.filename, "content": content, "content_type": image.content_type}

def _parse_position(position: Optional[str]) -> int:
    try:
        return int(position or 0)
    except ValueError:
        return 0

@router.get("")
def list_banners():
    return banners_service.list_banners()

@router.get("/{banner_id}")
def get_banner(banner_id: str):
    return banners_service.get_banner(banner_id)

@router.post("", dependencies=[Depends(require_admin)])
async def create_banner(
    title: str = Form(""),
    position: Optional[str] = Form(None),
    is_active: Optional[str] = Form(None),
    image: Optional[UploadFile] = File(None),
):
    return banners_service.create_banner(
        title,
        position=_parse_position(position),
        is_active=(is_active == "true"),
        image=await _read_upload(image),
    )

@router.put("/{banner_id}", dependencies=[Depends(require_admin)])
async def update_banner(
    banner_id: str,
    title: str = Form(""),
    position: Optional[str] = Form(None),
    is_active: Optional[str] = Form(None),
    image: Optional[UploadFile] = File(None),
):
    return banners_service.update_banner(
        banner_id,
        title,
        position=_parse_position(position),
        is_active=(is_active == "true"),
        image=await _read_upload(image),
    )

@router.delete("/{banner_id}", dependencies=[Depends(require_admin)])
def delete_banner(banner_id: str):
    banners_service.delete_banner(banner_id)
    return {"success": True}
