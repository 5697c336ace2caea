# module storefront.orders.views
from typing import Any, Dict
from fastapi import APIRouter, Depends

from storefront.utils.security import require_user
from storefront.orders import service as orders_service

router = APIRouter(prefix="/api/v1/orders", tags=["Orders API"])

@router.get("")
def my_orders(user: Dict[str, Any] = Depends(require_user)):
    """Commandes de l'utilisateur connecté (plus récentes d'abord)."""
    items = orders_service.list_user_orders(user["id"], user_token=user.get("token"))
    return {"items": items}
