"""
Accès aux données pour la feature 'orders' (table orders).
"""
from typing import Any, Dict, List, Optional
import logging
from postgrest.exceptions import APIError
from storefront.errors import PersistenceFailure
from storefront.infra import supabase_client

logger = logging.getLogger(__name__)

ORDER_COLUMNS = (
    "id, user_id, amount, status, items, gateway_order_id, payment_id, "
    "payment_method, payment_timestamp, payment_error, created_at"
)

# module storefront.orders.repository
def insert_order(data: Dict[str, Any], user_token: Optional[str] = None) -> Dict[str, Any]:
    """
    Insère une commande (un seul INSERT) et retourne la ligne créée.
    Lève PersistenceFailure si la base refuse ou ne renvoie pas la ligne.
    """
    try:
        res = (
            supabase_client.client_for(user_token)
            .table("orders")
            .insert(data)
            .execute()
        )
    except APIError as e:
        code = None
        if e.args and isinstance(e.args[0], dict):
            code = e.args[0].get("code")
        logger.error("orders.repository.insert_order rejected user_id=%s code=%s", data.get("user_id"), code)
        raise PersistenceFailure("Impossible de créer la commande")
    except Exception:
        logger.exception("orders.repository.insert_order failed user_id=%s", data.get("user_id"))
        raise PersistenceFailure("Impossible de créer la commande")
    rows = res.data or []
    row = rows[0] if isinstance(rows, list) and rows else None
    if not row or not row.get("id"):
        logger.error("orders.repository.insert_order returned no row user_id=%s", data.get("user_id"))
        raise PersistenceFailure("Impossible de créer la commande")
    return row

def get_order(order_id: str) -> Optional[Dict[str, Any]]:
    """Lecture service-role d'une commande (webhook, back-office)."""
    try:
        res = (
            supabase_client.get_service_supabase()
            .table("orders")
            .select(ORDER_COLUMNS)
            .eq("id", order_id)
            .limit(1)
            .execute()
        )
    except Exception:
        logger.exception("orders.repository.get_order failed id=%s", order_id)
        raise PersistenceFailure()
    rows = res.data or []
    return rows[0] if rows else None

def update_order_if_status(order_id: str, expected_status: str, data: Dict[str, Any]) -> bool:
    """
    Mise à jour conditionnelle (compare-and-set sur le statut courant).
    Retourne True si une ligne a été modifiée, False si le statut a changé entre-temps.
    """
    try:
        res = (
            supabase_client.get_service_supabase()
            .table("orders")
            .update(data)
            .eq("id", order_id)
            .eq("status", expected_status)
            .execute()
        )
    except Exception:
        logger.exception("orders.repository.update_order_if_status failed id=%s", order_id)
        raise PersistenceFailure()
    return bool(res.data)

def update_order(order_id: str, data: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    try:
        res = (
            supabase_client.get_service_supabase()
            .table("orders")
            .update(data)
            .eq("id", order_id)
            .execute()
        )
    except Exception:
        logger.exception("orders.repository.update_order failed id=%s data=%s", order_id, data)
        raise PersistenceFailure()
    rows = res.data or []
    return rows[0] if rows else None

def fetch_user_orders(user_id: str, user_token: Optional[str] = None, limit: int = 50) -> List[Dict[str, Any]]:
    """
    Commandes de l'utilisateur connecté, plus récentes d'abord.
    """
    if not user_id:
        return []
    try:
        res = (
            supabase_client.client_for(user_token)
            .table("orders")
            .select(ORDER_COLUMNS)
            .eq("user_id", user_id)
            .order("created_at", desc=True)
            .limit(limit)
            .execute()
        )
        return res.data or []
    except Exception:
        logger.exception("orders.repository.fetch_user_orders failed user_id=%s", user_id)
        return []

def fetch_all_orders(limit: int = 100, status: Optional[str] = None) -> List[Dict[str, Any]]:
    """
    Commandes pour le back-office (service-role), plus récentes d'abord.
    """
    try:
        query = (
            supabase_client.get_service_supabase()
            .table("orders")
            .select(ORDER_COLUMNS)
        )
        if status:
            query = query.eq("status", status)
        res = query.order("created_at", desc=True).limit(limit).execute()
        return res.data or []
    except Exception:
        logger.exception("orders.repository.fetch_all_orders failed")
        return []
