from typing import Any, Dict, List, Optional
from storefront.infra import supabase_client
import logging

logger = logging.getLogger(__name__)

# module storefront.catalog.repository
def list_products(
    category: Optional[str] = None,
    subcategory: Optional[str] = None,
    min_price: Optional[float] = None,
    max_price: Optional[float] = None,
) -> List[dict]:
    """
    Produits du catalogue, filtres optionnels (catégorie, sous-catégorie, fourchette de prix).
    """
    try:
        query = supabase_client.get_supabase().table("products").select("*")
        if category:
            query = query.eq("category_id", category)
        if subcategory:
            query = query.eq("subcategory_id", subcategory)
        if min_price is not None:
            query = query.gte("price", min_price)
        if max_price is not None:
            query = query.lte("price", max_price)
        res = query.execute()
        return res.data or []
    except Exception:
        logger.exception("catalog.repository.list_products failed")
        return []

def get_product_by_slug(slug: str) -> Optional[dict]:
    if not slug:
        return None
    try:
        res = (
            supabase_client.get_supabase()
            .table("products")
            .select("*")
            .eq("slug", slug)
            .limit(1)
            .execute()
        )
        rows = res.data or []
        return rows[0] if rows else None
    except Exception:
        logger.exception("catalog.repository.get_product_by_slug failed slug=%s", slug)
        return None

def list_root_categories() -> List[dict]:
    try:
        res = (
            supabase_client.get_supabase()
            .table("categories")
            .select("*")
            .is_("parent_id", "null")
            .order("position")
            .execute()
        )
        return res.data or []
    except Exception:
        logger.exception("catalog.repository.list_root_categories failed")
        return []

def get_category_with_subcategories(slug: str) -> Optional[Dict[str, Any]]:
    """
    Catégorie (par slug) enrichie de ses sous-catégories ordonnées par position.
    """
    try:
        client = supabase_client.get_supabase()
        res = client.table("categories").select("*").eq("slug", slug).limit(1).execute()
        rows = res.data or []
        if not rows:
            return None
        category = dict(rows[0])
        subs = (
            client.table("categories")
            .select("*")
            .eq("parent_id", category.get("id"))
            .order("position")
            .execute()
        )
        category["subcategories"] = subs.data or []
        return category
    except Exception:
        logger.exception("catalog.repository.get_category_with_subcategories failed slug=%s", slug)
        return None
