"""
Cas d'usage 'cart': lecture du snapshot, ajout/incrément, vidage.
"""
from typing import Any, Dict, List, Optional
import logging

from storefront.errors import InsufficientStock, InvalidPayload, NotFound
from . import repository
from .models import CartLine, name_from_product, price_from_product, stock_from_product

logger = logging.getLogger(__name__)

def _first_image(product: Dict[str, Any]) -> Optional[str]:
    images = product.get("images")
    if isinstance(images, list) and images:
        return str(images[0])
    return None

def to_cart_line(row: Dict[str, Any]) -> Optional[CartLine]:
    """
    Convertit une ligne cart_items jointe en CartLine.
    - Retourne None si le produit n'existe plus (jointure vide).
    """
    product = row.get("products") or {}
    if not product or not product.get("id"):
        return None
    return CartLine(
        id=str(row.get("id") or ""),
        product_id=str(product.get("id")),
        name=name_from_product(product),
        unit_price=price_from_product(product),
        quantity=int(row.get("quantity") or 0),
        stock=stock_from_product(product),
        image=_first_image(product),
    )

def read_cart_snapshot(user_id: str, user_token: Optional[str] = None) -> List[CartLine]:
    """
    Snapshot du panier: lignes jointes aux prix/stock/nom courants du catalogue.
    Liste vide (pas une erreur) si le panier ne contient rien.
    """
    rows = repository.fetch_cart_rows(user_id, user_token=user_token)
    lines: List[CartLine] = []
    for row in rows:
        line = to_cart_line(row)
        if line is None:
            logger.warning("cart.snapshot skipped row without product id=%s user_id=%s", row.get("id"), user_id)
            continue
        lines.append(line)
    return lines

def add_to_cart(user_id: str, product_id: str, quantity: int = 1, user_token: Optional[str] = None) -> Dict[str, Any]:
    """
    Ajoute un produit au panier ou incrémente la ligne existante.
    - 404 si le produit n'existe pas, 400 si le stock ne couvre pas la quantité demandée.
    """
    if not product_id or quantity < 1:
        raise InvalidPayload("productId et quantity (>= 1) requis")
    product = repository.get_product(product_id)
    if not product:
        raise NotFound("Produit introuvable")
    if stock_from_product(product) < quantity:
        raise InsufficientStock(name_from_product(product))

    existing = repository.get_cart_item(user_id, product_id, user_token=user_token)
    if existing:
        new_quantity = int(existing.get("quantity") or 0) + quantity
        repository.update_cart_item_quantity(str(existing.get("id")), new_quantity, user_token=user_token)
    else:
        new_quantity = quantity
        repository.insert_cart_item(user_id, product_id, quantity, user_token=user_token)
    logger.info("cart.add user_id=%s product_id=%s quantity=%s", user_id, product_id, new_quantity)
    return {"product_id": product_id, "quantity": new_quantity}

def clear_cart(user_id: str, user_token: Optional[str] = None) -> None:
    repository.delete_cart_items(user_id, user_token=user_token)
