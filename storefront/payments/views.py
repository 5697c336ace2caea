# module storefront.payments.views
"""Endpoints du parcours de paiement.
- POST /api/checkout/create-order: panier -> commande 'created' -> commande distante (authentifié, rate-limité)
- POST /api/webhook/payment: événements de la passerelle, signés HMAC-SHA256 sur le corps brut
Réponses d'erreur: {"error": "..."} (voir storefront.errors).
"""
from typing import Any, Dict
import logging

from fastapi import APIRouter, Depends, Request
from starlette.concurrency import run_in_threadpool

from storefront import config
from storefront.errors import GatewayMisconfigured, InvalidSignature
from storefront.utils.rate_limit import optional_rate_limit
from storefront.utils.security import require_user
from storefront.payments import service as payments_service
from storefront.payments.events import decode_payload, parse_webhook_event
from storefront.payments.signature import verify_signature

logger = logging.getLogger(__name__)

checkout_router = APIRouter(prefix="/api/checkout", tags=["Checkout API"])
webhook_router = APIRouter(prefix="/api/webhook", tags=["Webhooks"])

@checkout_router.post("/create-order", dependencies=[Depends(optional_rate_limit(times=10, seconds=60))])
def create_order(user: Dict[str, Any] = Depends(require_user)):
    """Crée la commande interne et la commande de paiement distante pour le panier courant.
    - Aucun body requis: le panier est lu depuis la session.
    - Retourne {id, currency, amount, orderId, key} pour le widget de paiement.
    - Erreurs: 400 (panier vide, stock insuffisant), 401, 500 (configuration, base), 502 (passerelle).
    """
    return payments_service.create_checkout_order(user["id"], user_token=user.get("token"))

@webhook_router.post("/payment", include_in_schema=False)
async def payment_webhook(request: Request):
    """Webhook de la passerelle.
    - Lit le corps brut AVANT tout parsing (la signature porte sur les octets exacts).
    - Signature invalide: 400, aucune écriture.
    - Événements inconnus: {"received": true} sans effet.
    """
    secret = config.RAZORPAY_WEBHOOK_SECRET
    if not secret:
        logger.error("payments.webhook RAZORPAY_WEBHOOK_SECRET missing")
        raise GatewayMisconfigured()

    raw_body = await request.body()
    signature = request.headers.get(config.RAZORPAY_SIGNATURE_HEADER)
    if not verify_signature(raw_body, signature, secret):
        logger.warning("payments.webhook invalid signature")
        raise InvalidSignature()

    event = parse_webhook_event(decode_payload(raw_body))
    await run_in_threadpool(payments_service.reconcile_payment_event, event)
    return {"received": True}
