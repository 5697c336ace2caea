from typing import Any, Dict, Optional
from fastapi import APIRouter, Depends
from pydantic import BaseModel

from storefront.utils.security import require_admin
from storefront.admin import service as admin_service

# module storefront.admin.views
router = APIRouter(prefix="/admin/api", tags=["Admin"])

class OrderStatusRequest(BaseModel):
    status: str

@router.get("/stats")
def admin_stats(user: Dict[str, Any] = Depends(require_admin)):
    return admin_service.dashboard_stats()

@router.get("/orders")
def admin_list_orders(limit: int = 100, status: Optional[str] = None, user: Dict[str, Any] = Depends(require_admin)):
    return {"items": admin_service.list_orders(limit=limit, status=status)}

@router.post("/orders/{order_id}/status")
def admin_update_order_status(order_id: str, body: OrderStatusRequest, user: Dict[str, Any] = Depends(require_admin)):
    updated = admin_service.update_fulfillment_status(order_id, body.status)
    return {"ok": True, "item": updated}
