from urllib.parse import urlparse
import socket
from storefront import config
from storefront.infra import supabase_client

CHECKED_TABLES = ("products", "cart_items", "orders")

def _check_table(client, name: str):
    try:
        res = client.table(name).select("id").limit(1).execute()
        return {"ok": True, "rows": len(res.data or [])}
    except Exception as e:
        return {"ok": False, "error": type(e).__name__}

def health_supabase_info():
    parsed = urlparse(config.SUPABASE_URL) if config.SUPABASE_URL else None
    hostname = parsed.hostname if parsed else None
    dns_ok = None
    if hostname:
        try:
            socket.getaddrinfo(hostname, 443)
            dns_ok = True
        except OSError:
            dns_ok = False

    info = {
        "hostname": hostname,
        "dns_ok": dns_ok,
        "connect_ok": False,
        "error": None,
        "tables": {},
    }
    try:
        client = supabase_client.get_service_supabase()
        for t in CHECKED_TABLES:
            info["tables"][t] = _check_table(client, t)
        info["connect_ok"] = True
    except Exception as e:
        info["error"] = type(e).__name__
    return info

def health_payments_info():
    # Présence des secrets uniquement, jamais leur valeur
    return {
        "gateway_configured": bool(config.RAZORPAY_KEY_ID and config.RAZORPAY_KEY_SECRET),
        "webhook_configured": bool(config.RAZORPAY_WEBHOOK_SECRET),
        "currency": config.PAYMENT_CURRENCY,
    }
