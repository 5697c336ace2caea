from storefront.infra.supabase_client import get_service_supabase
import logging

logger = logging.getLogger(__name__)

# module storefront.admin.repository
def count_table_rows(table_name: str, **filters) -> int:
    """
    Compte les lignes d'une table via Supabase (filtres d'égalité optionnels).
    Utilise count='exact' si disponible, sinon fallback sur len(data).
    """
    try:
        query = get_service_supabase().table(table_name).select("id", count="exact")
        for column, value in filters.items():
            query = query.eq(column, value)
        res = query.execute()
        if getattr(res, "count", None) is not None:
            return int(res.count)
        return len(res.data or [])
    except Exception:
        logger.exception("admin.repository.count_table_rows failed table=%s", table_name)
        return 0
