"""
Module 'cart' (feature-first): panier de l'utilisateur authentifié.
Lecture du snapshot (lignes jointes aux produits), ajout/incrément, vidage.
"""
from .models import CartLine
from .service import read_cart_snapshot, add_to_cart, clear_cart

__all__ = [
    "CartLine",
    "read_cart_snapshot",
    "add_to_cart",
    "clear_cart",
]
