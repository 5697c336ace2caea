import pytest

from storefront.errors import MissingCorrelation
from storefront.payments.events import parse_webhook_event
from storefront.payments.service import next_status, reconcile_payment_event

def _seed_order(store, status="created", user_id="u1", payment_id=None):
    order_id = store.insert_order({"user_id": user_id, "amount": 2200, "status": status, "items": []})["id"]
    store.orders[order_id]["payment_id"] = payment_id
    store.writes.clear()
    return order_id

def _event(payment_event, name, order_id, user_id="u1", payment_id="pay_1", **extra):
    return parse_webhook_event(payment_event(name, order_id=order_id, user_id=user_id, payment_id=payment_id, **extra))

@pytest.mark.parametrize(
    "current, name, stored_payment, expected",
    [
        ("created", "payment.captured", None, "paid"),
        ("payment_failed", "payment.captured", "pay_0", "paid"),
        ("paid", "payment.captured", "pay_1", None),
        ("shipped", "payment.captured", "pay_1", None),
        ("created", "payment.failed", None, "payment_failed"),
        ("payment_failed", "payment.failed", "pay_0", "payment_failed"),
        ("payment_failed", "payment.failed", "pay_1", None),
        ("paid", "payment.failed", "pay_1", None),
        ("delivered", "payment.failed", "pay_1", None),
    ],
)
def test_next_status_table(payment_event, current, name, stored_payment, expected):
    event = _event(payment_event, name, "o-1")
    assert next_status({"status": current, "payment_id": stored_payment}, event) == expected

def test_captured_marks_paid_and_clears_only_that_cart(store, payment_event):
    # Arrange
    order_id = _seed_order(store)
    store.add_product("A", "Produit A", 500, 10)
    store.add_cart_line("u1", "A", 2)
    store.add_cart_line("u2", "A", 1)
    # Act
    applied = reconcile_payment_event(_event(payment_event, "payment.captured", order_id))
    # Assert
    assert applied is True
    order = store.orders[order_id]
    assert order["status"] == "paid"
    assert order["payment_id"] == "pay_1"
    assert order["payment_method"] == "upi"
    assert order["payment_timestamp"] == "2023-11-14T22:13:20+00:00"
    assert store.cart_of("u1") == []
    assert len(store.cart_of("u2")) == 1

def test_captured_replay_is_idempotent(store, payment_event):
    order_id = _seed_order(store)
    event = _event(payment_event, "payment.captured", order_id)
    assert reconcile_payment_event(event) is True
    snapshot = dict(store.orders[order_id])

    assert reconcile_payment_event(event) is False
    assert store.orders[order_id] == snapshot

def test_replay_finishes_cart_clearing(store, payment_event):
    order_id = _seed_order(store, status="paid", payment_id="pay_1")
    store.add_product("A", "Produit A", 500, 10)
    store.add_cart_line("u1", "A", 2)

    applied = reconcile_payment_event(_event(payment_event, "payment.captured", order_id))

    assert applied is False
    assert store.cart_of("u1") == []
    assert "orders.update" not in store.writes

def test_failed_keeps_cart_and_records_error(store, payment_event):
    order_id = _seed_order(store)
    store.add_product("A", "Produit A", 500, 10)
    store.add_cart_line("u1", "A", 2)

    applied = reconcile_payment_event(
        _event(payment_event, "payment.failed", order_id, payment_id="pay_x", error_description="Carte refusée")
    )

    assert applied is True
    order = store.orders[order_id]
    assert order["status"] == "payment_failed"
    assert order["payment_error"] == "Carte refusée"
    assert order["payment_id"] == "pay_x"
    assert len(store.cart_of("u1")) == 1

def test_failed_without_description_uses_default(store, payment_event):
    order_id = _seed_order(store)
    reconcile_payment_event(_event(payment_event, "payment.failed", order_id))
    assert store.orders[order_id]["payment_error"] == "Paiement échoué"

def test_failed_after_paid_is_ignored(store, payment_event):
    order_id = _seed_order(store, status="paid", payment_id="pay_1")
    applied = reconcile_payment_event(_event(payment_event, "payment.failed", order_id, payment_id="pay_2"))
    assert applied is False
    assert store.orders[order_id]["status"] == "paid"
    assert store.orders[order_id]["payment_id"] == "pay_1"

def test_retry_after_failure_can_be_captured(store, payment_event):
    order_id = _seed_order(store)
    reconcile_payment_event(_event(payment_event, "payment.failed", order_id, payment_id="pay_1"))
    applied = reconcile_payment_event(_event(payment_event, "payment.captured", order_id, payment_id="pay_2"))
    assert applied is True
    assert store.orders[order_id]["status"] == "paid"
    assert store.orders[order_id]["payment_id"] == "pay_2"

def test_missing_order_id_raises_before_any_access(store, payment_event):
    event = _event(payment_event, "payment.captured", None)
    with pytest.raises(MissingCorrelation) as exc:
        reconcile_payment_event(event)
    assert exc.value.status_code == 400
    assert store.writes == []

def test_unknown_order_is_acknowledged(store, payment_event):
    applied = reconcile_payment_event(_event(payment_event, "payment.captured", "order-404"))
    assert applied is False
    assert store.writes == []

def test_unknown_event_has_no_effect(store):
    event = parse_webhook_event({"event": "refund.processed", "payload": {}})
    assert reconcile_payment_event(event) is False
    assert store.writes == []

def test_lost_race_does_not_clear_cart(store, payment_event, monkeypatch):
    order_id = _seed_order(store)
    store.add_product("A", "Produit A", 500, 10)
    store.add_cart_line("u1", "A", 1)
    # Un autre worker a changé le statut entre la lecture et l'écriture
    monkeypatch.setattr("storefront.orders.repository.update_order_if_status", lambda *a, **kw: False)

    applied = reconcile_payment_event(_event(payment_event, "payment.captured", order_id))

    assert applied is False
    assert len(store.cart_of("u1")) == 1
