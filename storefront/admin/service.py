# module storefront.admin.service
"""
Back-office: suivi des commandes et statuts de préparation.
Le vocabulaire de préparation (processing, shipped, delivered, cancelled) ne s'applique
qu'aux commandes payées: les statuts de paiement restent pilotés par le webhook.
"""
from typing import Any, Dict, List, Optional
import logging

from storefront.errors import InvalidPayload, NotFound
from storefront.orders import repository as orders_repository
from storefront.orders.models import FULFILLMENT_STATUSES, STATUS_PAID
from storefront.admin import repository as admin_repository

logger = logging.getLogger(__name__)

def list_orders(limit: int = 100, status: Optional[str] = None) -> List[dict]:
    return orders_repository.fetch_all_orders(limit=limit, status=status)

def update_fulfillment_status(order_id: str, status: str) -> Dict[str, Any]:
    """
    Applique un statut de préparation.
    - 400 si le statut n'appartient pas au vocabulaire de préparation
    - 400 si la commande n'est pas encore payée
    - 404 si la commande est introuvable
    """
    status = (status or "").strip().lower()
    if status not in FULFILLMENT_STATUSES:
        raise InvalidPayload(f"Statut invalide: {status or '(vide)'}")
    order = orders_repository.get_order(order_id)
    if not order:
        raise NotFound("Commande introuvable")
    current = order.get("status")
    if current != STATUS_PAID and current not in FULFILLMENT_STATUSES:
        raise InvalidPayload("Commande non payée")
    updated = orders_repository.update_order(order_id, {"status": status})
    logger.info("admin.orders status order_id=%s from=%s to=%s", order_id, current, status)
    return updated or {**order, "status": status}

def dashboard_stats() -> Dict[str, int]:
    return {
        "products_count": admin_repository.count_table_rows("products"),
        "orders_count": admin_repository.count_table_rows("orders"),
        "paid_orders_count": admin_repository.count_table_rows("orders", status=STATUS_PAID),
        "categories_count": admin_repository.count_table_rows("categories"),
    }
