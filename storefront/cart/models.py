"""
Types du panier (pas de DB ici).
"""
from dataclasses import dataclass
from typing import Any, Dict, Optional

# module storefront.cart.models
@dataclass(frozen=True)
class CartLine:
    """Ligne de panier jointe aux attributs produit lus au moment de la lecture."""

    id: str
    product_id: str
    name: str
    unit_price: float
    quantity: int
    stock: int
    image: Optional[str] = None

    @property
    def line_total(self) -> float:
        return self.unit_price * self.quantity

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "quantity": self.quantity,
            "product": {
                "id": self.product_id,
                "name": self.name,
                "price": self.unit_price,
                "stock_quantity": self.stock,
                "image": self.image,
            },
        }

def price_from_product(product: Dict[str, Any]) -> float:
    """
    Prix unitaire d'un produit (float).
    - Autorise product.get("price") à être str|float|int.
    - Retourne 0.0 si parsing impossible.
    """
    try:
        return float(product.get("price") or 0)
    except (TypeError, ValueError):
        return 0.0

def stock_from_product(product: Dict[str, Any]) -> int:
    raw = product.get("stock_quantity")
    if raw is None:
        raw = product.get("stock")
    try:
        return int(raw or 0)
    except (TypeError, ValueError):
        return 0

def name_from_product(product: Dict[str, Any]) -> str:
    return str(product.get("name") or product.get("title") or "Article")
