"""
Adaptateur passerelle de paiement (SDK Razorpay): centralise les appels et la configuration.
- Les identifiants sont lus à chaque appel dans storefront.config (jamais renvoyés au client).
- Le montant est exprimé en unité mineure (x100 pour une devise à deux décimales).
"""
from dataclasses import dataclass
from typing import Any, Dict, Tuple
import logging

import razorpay
import requests
from razorpay.errors import BadRequestError, GatewayError, ServerError

from storefront import config
from storefront.errors import GatewayMisconfigured, GatewayRejected

logger = logging.getLogger(__name__)

# module storefront.payments.gateway
@dataclass(frozen=True)
class GatewayOrder:
    """Commande de paiement distante, telle que renvoyée par la passerelle."""

    id: str
    amount: int
    currency: str
    key: str

    def to_response(self, order_id: str) -> Dict[str, Any]:
        # Format attendu par le widget de paiement côté client
        return {
            "id": self.id,
            "currency": self.currency,
            "amount": self.amount,
            "orderId": order_id,
            "key": self.key,
        }

def require_gateway() -> Tuple[str, str]:
    """
    Retourne (key_id, key_secret) ou lève GatewayMisconfigured.
    À appeler avant toute écriture pour ne jamais créer de commande sans passerelle.
    """
    key_id = config.RAZORPAY_KEY_ID
    key_secret = config.RAZORPAY_KEY_SECRET
    if not key_id or not key_secret:
        logger.error("payments.gateway credentials missing (RAZORPAY_KEY_ID/RAZORPAY_KEY_SECRET)")
        raise GatewayMisconfigured()
    return key_id, key_secret

def get_client() -> razorpay.Client:
    """Client SDK authentifié (clé publique + secret), pointé sur RAZORPAY_API_URL."""
    key_id, key_secret = require_gateway()
    return razorpay.Client(auth=(key_id, key_secret), base_url=config.RAZORPAY_API_URL)

def to_minor_units(amount: float) -> int:
    return int(round(float(amount) * 100))

def create_gateway_order(*, order_id: str, amount: float, notes: Dict[str, str]) -> GatewayOrder:
    """
    Crée la commande de paiement distante liée à la commande interne.
    - receipt: "order_<order_id>"; notes: {order_id, user_id} pour la corrélation webhook
    - payment_capture=1: capture automatique, confirmée par l'événement payment.captured
    - Refus de la passerelle: GatewayRejected avec sa description telle quelle
    """
    client = get_client()
    key_id = config.RAZORPAY_KEY_ID
    data = {
        "amount": to_minor_units(amount),
        "currency": config.PAYMENT_CURRENCY,
        "receipt": f"order_{order_id}",
        "payment_capture": 1,
        "notes": notes,
    }
    try:
        body = client.order.create(data=data, timeout=config.GATEWAY_TIMEOUT_SECONDS)
    except (BadRequestError, GatewayError, ServerError) as e:
        description = str(e) or "Échec de création de la commande de paiement"
        logger.warning("payments.gateway rejected order_id=%s error=%s description=%s", order_id, type(e).__name__, description)
        raise GatewayRejected(description)
    except ValueError:
        # Corps de réponse non JSON (requests.JSONDecodeError compris)
        logger.error("payments.gateway unreadable response order_id=%s", order_id)
        raise GatewayRejected("Réponse illisible de la passerelle de paiement")
    except requests.RequestException as e:
        logger.error("payments.gateway request failed order_id=%s error=%s", order_id, type(e).__name__)
        raise GatewayRejected("Passerelle de paiement injoignable")

    if not isinstance(body, dict) or not body.get("id"):
        raise GatewayRejected("Réponse de la passerelle sans identifiant")
    remote = GatewayOrder(
        id=str(body["id"]),
        amount=int(body.get("amount") or data["amount"]),
        currency=str(body.get("currency") or data["currency"]),
        key=key_id,
    )
    logger.info("payments.gateway created gateway_order_id=%s order_id=%s amount=%s", remote.id, order_id, remote.amount)
    return remote
