"""
Module 'payments' (feature-first): point d'entrée public.
Réunit l'adaptateur passerelle, la vérification de signature, les événements webhook et les services.
"""
from .gateway import GatewayOrder, require_gateway, create_gateway_order, to_minor_units
from .signature import compute_signature, verify_signature
from .events import (
    PaymentCaptured,
    PaymentFailed,
    UnknownEvent,
    decode_payload,
    parse_webhook_event,
)
from .service import create_checkout_order, reconcile_payment_event, next_status

__all__ = [
    # gateway
    "GatewayOrder",
    "require_gateway",
    "create_gateway_order",
    "to_minor_units",
    # signature
    "compute_signature",
    "verify_signature",
    # events
    "PaymentCaptured",
    "PaymentFailed",
    "UnknownEvent",
    "decode_payload",
    "parse_webhook_event",
    # services
    "create_checkout_order",
    "reconcile_payment_event",
    "next_status",
]
