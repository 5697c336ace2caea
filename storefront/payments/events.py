"""
Désérialisation des événements webhook en variantes typées.
- payment.captured -> PaymentCaptured
- payment.failed   -> PaymentFailed
- tout autre nom   -> UnknownEvent (accusé de réception sans effet)
"""
import json
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict, Optional, Union

from storefront.errors import InvalidPayload

EVENT_PAYMENT_CAPTURED = "payment.captured"
EVENT_PAYMENT_FAILED = "payment.failed"

# module storefront.payments.events
@dataclass(frozen=True)
class PaymentDetails:
    payment_id: Optional[str]
    method: Optional[str]
    amount: Optional[int]
    created_at: Optional[int]
    order_id: Optional[str]
    user_id: Optional[str]
    error_description: Optional[str] = None

    @property
    def timestamp_iso(self) -> Optional[str]:
        if self.created_at is None:
            return None
        try:
            return datetime.fromtimestamp(self.created_at, tz=timezone.utc).isoformat()
        except (OverflowError, OSError, ValueError):
            return None

@dataclass(frozen=True)
class PaymentCaptured:
    payment: PaymentDetails
    event: str = EVENT_PAYMENT_CAPTURED

@dataclass(frozen=True)
class PaymentFailed:
    payment: PaymentDetails
    event: str = EVENT_PAYMENT_FAILED

@dataclass(frozen=True)
class UnknownEvent:
    event: str

WebhookEvent = Union[PaymentCaptured, PaymentFailed, UnknownEvent]

def decode_payload(raw_body: bytes) -> Dict[str, Any]:
    """Parse le corps brut (déjà authentifié) en dict; InvalidPayload sinon."""
    try:
        payload = json.loads(raw_body.decode("utf-8"))
    except (UnicodeDecodeError, ValueError):
        raise InvalidPayload("Payload webhook invalide")
    if not isinstance(payload, dict):
        raise InvalidPayload("Payload webhook invalide")
    return payload

def _as_int(value: Any) -> Optional[int]:
    try:
        return int(value) if value is not None else None
    except (TypeError, ValueError):
        return None

def _as_str(value: Any) -> Optional[str]:
    if value is None or value == "":
        return None
    return str(value)

def _object_at(data: Dict[str, Any], *keys: str) -> Dict[str, Any]:
    """Descend dans des objets JSON imbriqués; {} si un niveau manque ou n'est pas un objet."""
    node: Any = data
    for key in keys:
        node = node.get(key) if isinstance(node, dict) else None
    return node if isinstance(node, dict) else {}

def extract_payment(payload: Dict[str, Any]) -> PaymentDetails:
    """
    Extrait payload.payment.entity (notes.order_id / notes.user_id pour la corrélation).
    Tolérant: les champs absents deviennent None.
    """
    entity = _object_at(payload, "payload", "payment", "entity")
    # La passerelle sérialise des notes vides en liste
    notes = _object_at(entity, "notes")
    return PaymentDetails(
        payment_id=_as_str(entity.get("id")),
        method=_as_str(entity.get("method")),
        amount=_as_int(entity.get("amount")),
        created_at=_as_int(entity.get("created_at")),
        order_id=_as_str(notes.get("order_id")),
        user_id=_as_str(notes.get("user_id")),
        error_description=_as_str(entity.get("error_description")),
    )

def parse_webhook_event(payload: Dict[str, Any]) -> WebhookEvent:
    name = str(payload.get("event") or "")
    if name == EVENT_PAYMENT_CAPTURED:
        return PaymentCaptured(payment=extract_payment(payload))
    if name == EVENT_PAYMENT_FAILED:
        return PaymentFailed(payment=extract_payment(payload))
    return UnknownEvent(event=name)
