"""
Module 'orders' (feature-first): matérialisation d'une commande à partir du panier
et lecture des commandes. Les transitions de paiement sont pilotées par storefront.payments.
"""
from .models import (
    OrderItem,
    MaterializedOrder,
    STATUS_CREATED,
    STATUS_PAID,
    STATUS_PAYMENT_FAILED,
    FULFILLMENT_STATUSES,
)
from .service import materialize_order, compute_total, list_user_orders

__all__ = [
    "OrderItem",
    "MaterializedOrder",
    "STATUS_CREATED",
    "STATUS_PAID",
    "STATUS_PAYMENT_FAILED",
    "FULFILLMENT_STATUSES",
    "materialize_order",
    "compute_total",
    "list_user_orders",
]
