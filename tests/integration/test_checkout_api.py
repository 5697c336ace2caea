from storefront.utils.security import require_user

def _fill_cart(store, user_id="test-user"):
    store.add_product("A", "Produit A", 500, 10)
    store.add_product("B", "Produit B", 1200, 3)
    store.add_cart_line(user_id, "A", 2)
    store.add_cart_line(user_id, "B", 1)

def test_create_order_returns_widget_payload(client, store, fake_gateway):
    _fill_cart(store)
    r = client.post("/api/checkout/create-order")
    assert r.status_code == 200
    assert r.json() == {"id": "order_gw_1", "currency": "INR", "amount": 220000, "orderId": "order-1", "key": "rzp_test_key"}
    assert r.headers["Cache-Control"].startswith("no-store")

def test_create_order_never_exposes_secret(client, store, fake_gateway):
    _fill_cart(store)
    r = client.post("/api/checkout/create-order")
    assert "rzp_test_secret" not in r.text

def test_create_order_requires_session(app, client, store, fake_gateway):
    app.dependency_overrides.pop(require_user, None)
    r = client.post("/api/checkout/create-order")
    assert r.status_code == 401
    assert "error" in r.json()
    assert store.orders == {}

def test_create_order_empty_cart(client, store, fake_gateway):
    r = client.post("/api/checkout/create-order")
    assert r.status_code == 400
    assert r.json() == {"error": "Le panier est vide"}

def test_create_order_insufficient_stock(client, store, fake_gateway):
    _fill_cart(store)
    store.products["B"]["stock_quantity"] = 0
    r = client.post("/api/checkout/create-order")
    assert r.status_code == 400
    assert r.json() == {"error": "Stock insuffisant pour Produit B"}
    assert store.orders == {}

def test_create_order_misconfigured_gateway(client, store, fake_gateway, monkeypatch):
    _fill_cart(store)
    monkeypatch.setattr("storefront.config.RAZORPAY_KEY_ID", "")
    r = client.post("/api/checkout/create-order")
    assert r.status_code == 500
    assert r.json() == {"error": "Passerelle de paiement non configurée"}
    assert store.orders == {}

def test_create_order_gateway_rejection(client, store, fake_gateway):
    _fill_cart(store)
    fake_gateway.reject(400, "Order amount less than minimum amount allowed")
    r = client.post("/api/checkout/create-order")
    assert r.status_code == 502
    assert r.json() == {"error": "Order amount less than minimum amount allowed"}
    assert store.orders["order-1"]["status"] == "payment_failed"

def test_create_order_rejects_negative_cart_line(client, store, fake_gateway):
    _fill_cart(store)
    # Ligne modifiée directement dans cart_items
    store.cart[1]["quantity"] = -1
    r = client.post("/api/checkout/create-order")
    assert r.status_code == 400
    assert r.json() == {"error": "Quantité invalide pour Produit B"}
    assert store.orders == {}
    assert fake_gateway.calls == []
