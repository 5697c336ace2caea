"""
Cas d'usage 'orders': matérialisation d'une commande à partir d'un snapshot de panier.
"""
from typing import Any, Dict, List, Optional, Sequence
import logging

from storefront.cart.models import CartLine
from storefront.errors import EmptyCart, InsufficientStock, InvalidPayload
from . import repository
from .models import MaterializedOrder, OrderItem, STATUS_CREATED

logger = logging.getLogger(__name__)

def check_quantities(lines: Sequence[CartLine]) -> None:
    """Chaque ligne doit porter une quantité >= 1 (cart_items est modifiable par le client)."""
    for line in lines:
        if line.quantity < 1:
            raise InvalidPayload(f"Quantité invalide pour {line.name}")

def check_stock(lines: Sequence[CartLine]) -> None:
    """
    Vérifie stock >= quantité pour chaque ligne.
    Lève InsufficientStock sur la première ligne en défaut (rien n'est écrit).
    """
    for line in lines:
        if line.stock < line.quantity:
            raise InsufficientStock(line.name)

def freeze_items(lines: Sequence[CartLine]) -> List[OrderItem]:
    return [
        OrderItem(product_id=line.product_id, name=line.name, price=line.unit_price, quantity=line.quantity)
        for line in lines
    ]

def compute_total(items: Sequence[OrderItem]) -> float:
    """Total = somme(prix unitaire x quantité), arrondi au centime."""
    return round(sum(item.price * item.quantity for item in items), 2)

def materialize_order(user_id: str, lines: Sequence[CartLine], user_token: Optional[str] = None) -> MaterializedOrder:
    """
    Transforme le snapshot du panier en commande durable (statut 'created').
    Étapes:
      1) panier vide -> EmptyCart
      2) quantité < 1 -> InvalidPayload; stock insuffisant -> InsufficientStock (tout ou rien)
      3) total calculé une fois sur les lignes figées (product_id, name, price, quantity)
      4) un seul INSERT; erreur base -> PersistenceFailure
    Le stock n'est pas décrémenté ici.
    """
    if not lines:
        raise EmptyCart()
    check_quantities(lines)
    check_stock(lines)

    items = freeze_items(lines)
    total = compute_total(items)
    row = repository.insert_order(
        {
            "user_id": user_id,
            "amount": total,
            "status": STATUS_CREATED,
            "items": [item.to_dict() for item in items],
        },
        user_token=user_token,
    )
    order_id = str(row["id"])
    logger.info("orders.materialize order_id=%s user_id=%s total=%s lines=%s", order_id, user_id, total, len(items))
    return MaterializedOrder(order_id=order_id, total=total, items=items)

def list_user_orders(user_id: str, user_token: Optional[str] = None) -> List[Dict[str, Any]]:
    return repository.fetch_user_orders(user_id, user_token=user_token)
