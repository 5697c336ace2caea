"""
Accès aux données pour la feature 'cart' (tables cart_items, products).
Les écritures lèvent PersistenceFailure: aucune erreur de la base n'est avalée.
"""
from typing import Any, Dict, List, Optional
import logging
from storefront.errors import PersistenceFailure
from storefront.infra import supabase_client

logger = logging.getLogger(__name__)

CART_SELECT = "id, quantity, products:product_id (id, name, price, images, stock_quantity)"

# module storefront.cart.repository
def fetch_cart_rows(user_id: str, user_token: Optional[str] = None) -> List[Dict[str, Any]]:
    """
    Lignes du panier avec la jointure produit (products:product_id).
    """
    try:
        res = (
            supabase_client.client_for(user_token)
            .table("cart_items")
            .select(CART_SELECT)
            .eq("user_id", user_id)
            .execute()
        )
        return res.data or []
    except Exception:
        logger.exception("cart.repository.fetch_cart_rows failed user_id=%s", user_id)
        raise PersistenceFailure("Impossible de lire le panier")

def get_product(product_id: str) -> Optional[Dict[str, Any]]:
    if not product_id:
        return None
    try:
        res = (
            supabase_client.get_service_supabase()
            .table("products")
            .select("id, name, price, stock_quantity")
            .eq("id", product_id)
            .limit(1)
            .execute()
        )
        rows = res.data or []
        return rows[0] if rows else None
    except Exception:
        logger.exception("cart.repository.get_product failed product_id=%s", product_id)
        raise PersistenceFailure()

def get_cart_item(user_id: str, product_id: str, user_token: Optional[str] = None) -> Optional[Dict[str, Any]]:
    try:
        res = (
            supabase_client.client_for(user_token)
            .table("cart_items")
            .select("id, quantity")
            .eq("user_id", user_id)
            .eq("product_id", product_id)
            .limit(1)
            .execute()
        )
        rows = res.data or []
        return rows[0] if rows else None
    except Exception:
        logger.exception("cart.repository.get_cart_item failed user_id=%s product_id=%s", user_id, product_id)
        raise PersistenceFailure()

def update_cart_item_quantity(item_id: str, quantity: int, user_token: Optional[str] = None) -> None:
    try:
        (
            supabase_client.client_for(user_token)
            .table("cart_items")
            .update({"quantity": quantity})
            .eq("id", item_id)
            .execute()
        )
    except Exception:
        logger.exception("cart.repository.update_cart_item_quantity failed id=%s", item_id)
        raise PersistenceFailure("Impossible de mettre à jour le panier")

def insert_cart_item(user_id: str, product_id: str, quantity: int, user_token: Optional[str] = None) -> None:
    try:
        (
            supabase_client.client_for(user_token)
            .table("cart_items")
            .insert({"user_id": user_id, "product_id": product_id, "quantity": quantity})
            .execute()
        )
    except Exception:
        logger.exception("cart.repository.insert_cart_item failed user_id=%s product_id=%s", user_id, product_id)
        raise PersistenceFailure("Impossible de mettre à jour le panier")

def delete_cart_items(user_id: str, user_token: Optional[str] = None) -> None:
    """Supprime toutes les lignes du panier d'un utilisateur (et seulement les siennes)."""
    try:
        supabase_client.client_for(user_token).table("cart_items").delete().eq("user_id", user_id).execute()
    except Exception:
        logger.exception("cart.repository.delete_cart_items failed user_id=%s", user_id)
        raise PersistenceFailure("Impossible de vider le panier")
