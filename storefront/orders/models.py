"""
Types et vocabulaire de statut des commandes.
"""
from dataclasses import dataclass, field
from typing import Any, Dict, List

# Statuts de paiement (pilotés par le webhook de la passerelle)
STATUS_CREATED = "created"
STATUS_PAID = "paid"
STATUS_PAYMENT_FAILED = "payment_failed"
PAYMENT_STATUSES = (STATUS_CREATED, STATUS_PAID, STATUS_PAYMENT_FAILED)

# Statuts opérationnels (back-office, après paiement)
FULFILLMENT_STATUSES = ("processing", "shipped", "delivered", "cancelled")

# module storefront.orders.models
@dataclass(frozen=True)
class OrderItem:
    """Copie figée d'une ligne: le prix ne suit plus le catalogue après la création."""

    product_id: str
    name: str
    price: float
    quantity: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "product_id": self.product_id,
            "name": self.name,
            "price": self.price,
            "quantity": self.quantity,
        }

@dataclass(frozen=True)
class MaterializedOrder:
    order_id: str
    total: float
    items: List[OrderItem] = field(default_factory=list)
