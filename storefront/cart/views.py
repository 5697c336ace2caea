# module storefront.cart.views
"""Endpoints du panier (authentification requise, 401 sinon).
- GET    /api/v1/cart: lignes du panier jointes aux produits
- POST   /api/v1/cart: ajout/incrément {productId, quantity}
- DELETE /api/v1/cart: vide le panier
"""
from typing import Any, Dict
from fastapi import APIRouter, Depends
from pydantic import BaseModel, ConfigDict, Field

from storefront.utils.security import require_user
from storefront.utils.rate_limit import optional_rate_limit
from storefront.cart import service as cart_service

router = APIRouter(prefix="/api/v1/cart", tags=["Cart API"])

class AddToCartRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    product_id: str = Field(alias="productId", min_length=1)
    quantity: int = Field(default=1, ge=1)

@router.get("")
def list_cart(user: Dict[str, Any] = Depends(require_user)):
    lines = cart_service.read_cart_snapshot(user["id"], user_token=user.get("token"))
    return [line.to_dict() for line in lines]

@router.post("", dependencies=[Depends(optional_rate_limit(times=30, seconds=60))])
def add_to_cart(body: AddToCartRequest, user: Dict[str, Any] = Depends(require_user)):
    cart_service.add_to_cart(user["id"], body.product_id, body.quantity, user_token=user.get("token"))
    return {"success": True}

@router.delete("")
def clear_cart(user: Dict[str, Any] = Depends(require_user)):
    cart_service.clear_cart(user["id"], user_token=user.get("token"))
    return {"success": True}
