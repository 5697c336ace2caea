"""
Cas d'usage 'payments': orchestre panier, commandes, passerelle et réconciliation webhook.

Checkout:
  snapshot du panier -> commande 'created' -> commande distante (passerelle) -> réponse client
Webhook:
  événement typé -> transition de statut (compare-and-set) -> vidage du panier si payé
"""
from typing import Any, Dict, Optional, Union
import logging

from storefront.cart import repository as cart_repository
from storefront.cart import service as cart_service
from storefront.errors import GatewayRejected, MissingCorrelation, PersistenceFailure
from storefront.orders import repository as orders_repository
from storefront.orders import service as orders_service
from storefront.orders.models import STATUS_CREATED, STATUS_PAID, STATUS_PAYMENT_FAILED
from . import gateway
from .events import PaymentCaptured, PaymentFailed, UnknownEvent, WebhookEvent

logger = logging.getLogger(__name__)

DEFAULT_PAYMENT_ERROR = "Paiement échoué"

# --- Checkout ---

def create_checkout_order(user_id: str, user_token: Optional[str] = None) -> Dict[str, Any]:
    """
    Crée la commande interne puis la commande de paiement distante.
    Retour: {id, currency, amount, orderId, key} pour le widget de paiement.
    """
    # Identifiants vérifiés avant toute écriture
    gateway.require_gateway()

    lines = cart_service.read_cart_snapshot(user_id, user_token=user_token)
    order = orders_service.materialize_order(user_id, lines, user_token=user_token)

    try:
        remote = gateway.create_gateway_order(
            order_id=order.order_id,
            amount=order.total,
            notes={"order_id": order.order_id, "user_id": user_id},
        )
    except GatewayRejected as e:
        _mark_gateway_failure(order.order_id, e.description)
        raise

    _attach_gateway_order(order.order_id, remote.id)
    return remote.to_response(order.order_id)

def _attach_gateway_order(order_id: str, gateway_order_id: str) -> None:
    # Best-effort: la corrélation webhook passe par les notes, pas par cette colonne
    try:
        orders_repository.update_order_if_status(order_id, STATUS_CREATED, {"gateway_order_id": gateway_order_id})
    except PersistenceFailure:
        logger.warning("payments.checkout could not store gateway_order_id order_id=%s", order_id)

def _mark_gateway_failure(order_id: str, description: Optional[str]) -> None:
    # Évite une commande 'created' sans contrepartie distante
    try:
        orders_repository.update_order_if_status(
            order_id,
            STATUS_CREATED,
            {"status": STATUS_PAYMENT_FAILED, "payment_error": description or "Création du paiement refusée"},
        )
    except PersistenceFailure:
        logger.warning("payments.checkout could not flag order after gateway failure order_id=%s", order_id)

# --- Réconciliation webhook ---

def next_status(order: Dict[str, Any], event: Union[PaymentCaptured, PaymentFailed]) -> Optional[str]:
    """
    Table de transition des statuts de paiement (None = ignorer l'événement).
    - created        --captured--> paid
    - payment_failed --captured--> paid (nouvelle tentative sur la même commande distante)
    - created        --failed-->   payment_failed
    - payment_failed --failed-->   payment_failed, seulement pour un autre payment_id
    - paid et statuts de préparation: absorbants
    """
    current = order.get("status")
    if isinstance(event, PaymentCaptured):
        if current in (STATUS_CREATED, STATUS_PAYMENT_FAILED):
            return STATUS_PAID
        return None
    if current == STATUS_CREATED:
        return STATUS_PAYMENT_FAILED
    if current == STATUS_PAYMENT_FAILED and order.get("payment_id") != event.payment.payment_id:
        return STATUS_PAYMENT_FAILED
    return None

def payment_fields(event: Union[PaymentCaptured, PaymentFailed]) -> Dict[str, Any]:
    payment = event.payment
    if isinstance(event, PaymentCaptured):
        return {
            "status": STATUS_PAID,
            "payment_id": payment.payment_id,
            "payment_method": payment.method,
            "payment_timestamp": payment.timestamp_iso,
        }
    return {
        "status": STATUS_PAYMENT_FAILED,
        "payment_id": payment.payment_id,
        "payment_method": payment.method,
        "payment_error": payment.error_description or DEFAULT_PAYMENT_ERROR,
    }

def _already_captured(order: Dict[str, Any], event: WebhookEvent) -> bool:
    return (
        isinstance(event, PaymentCaptured)
        and order.get("status") == STATUS_PAID
        and order.get("payment_id") == event.payment.payment_id
    )

def reconcile_payment_event(event: WebhookEvent) -> bool:
    """
    Applique un événement webhook à la commande corrélée.
    Retourne True si le statut a changé.
    - UnknownEvent: aucun effet
    - notes.order_id absent: MissingCorrelation (avant tout accès à la base)
    - commande introuvable ou transition non permise: aucun effet (accusé de réception)
    - payment.captured: vide le panier de notes.user_id; une redélivrance du même paiement
      termine ce vidage si la première tentative a échoué
    """
    if isinstance(event, UnknownEvent):
        logger.info("payments.webhook unhandled event=%s", event.event)
        return False

    payment = event.payment
    if not payment.order_id:
        raise MissingCorrelation()

    order = orders_repository.get_order(payment.order_id)
    if not order:
        logger.warning("payments.webhook unknown order event=%s order_id=%s", event.event, payment.order_id)
        return False

    target = next_status(order, event)
    applied = False
    if target is not None:
        applied = orders_repository.update_order_if_status(payment.order_id, order["status"], payment_fields(event))
        if not applied:
            logger.warning("payments.webhook concurrent update event=%s order_id=%s", event.event, payment.order_id)
    else:
        logger.info(
            "payments.webhook ignored transition event=%s order_id=%s status=%s",
            event.event, payment.order_id, order.get("status"),
        )

    if isinstance(event, PaymentCaptured) and (applied or _already_captured(order, event)):
        if payment.user_id:
            cart_repository.delete_cart_items(payment.user_id)
        else:
            logger.warning("payments.webhook captured without user_id order_id=%s", payment.order_id)

    logger.info("payments.webhook event=%s order_id=%s applied=%s", event.event, payment.order_id, applied)
    return applied
