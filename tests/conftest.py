import os

# Avant l'import de l'app: pas de Redis pendant les tests
os.environ.setdefault("DISABLE_FASTAPI_LIMITER_INIT_FOR_TESTS", "1")

import copy
import json
import uuid
import pytest
from typing import Generator, Dict, Any, List, Optional
from fastapi.testclient import TestClient
from types import SimpleNamespace
from unittest.mock import MagicMock
from razorpay.errors import BadRequestError, ServerError

from storefront.app import app as fastapi_app
from storefront.payments.signature import compute_signature
from storefront.utils.security import require_user, require_admin

# Marquage automatique selon le dossier
def pytest_collection_modifyitems(config, items):
    for item in items:
        nodeid = item.nodeid.replace("\\", "/")
        if "tests/unit/" in nodeid:
            item.add_marker(pytest.mark.unit)
        elif "tests/integration/" in nodeid:
            item.add_marker(pytest.mark.integration)

@pytest.fixture(scope="session")
def app():
    return fastapi_app

@pytest.fixture()
def client(app) -> Generator[TestClient, None, None]:
    with TestClient(app) as c:
        yield c

TEST_USER: Dict[str, Any] = {
    "id": "test-user",
    "email": "test@example.com",
    "role": "user",
    "metadata": {"full_name": "Test User"},
    "token": "fake-token",
}

# Simuler un utilisateur authentifié pour les endpoints protégés
@pytest.fixture(autouse=True)
def _override_require_user(app):
    app.dependency_overrides[require_user] = lambda: dict(TEST_USER)
    try:
        yield
    finally:
        app.dependency_overrides.pop(require_user, None)

@pytest.fixture
def authenticated_admin_client(app, client):
    def _override_require_admin():
        return {"id": "admin-user-id", "role": "admin", "email": "admin@example.com"}
    app.dependency_overrides[require_admin] = _override_require_admin
    yield client
    app.dependency_overrides.pop(require_admin, None)

# Aucun test ne doit joindre un vrai projet Supabase
@pytest.fixture(scope="function", autouse=True)
def mock_db_dependency(monkeypatch):
    monkeypatch.setattr("storefront.infra.supabase_client.get_supabase", lambda: MagicMock())
    monkeypatch.setattr("storefront.infra.supabase_client.get_service_supabase", lambda: MagicMock())
    monkeypatch.setattr("storefront.infra.supabase_client.get_user_supabase", lambda token: MagicMock())

# --- Passerelle de paiement ---

@pytest.fixture
def gateway_config(monkeypatch):
    monkeypatch.setattr("storefront.config.RAZORPAY_KEY_ID", "rzp_test_key")
    monkeypatch.setattr("storefront.config.RAZORPAY_KEY_SECRET", "rzp_test_secret")
    monkeypatch.setattr("storefront.config.RAZORPAY_API_URL", "https://gateway.test")
    monkeypatch.setattr("storefront.config.PAYMENT_CURRENCY", "INR")
    return {"key_id": "rzp_test_key", "key_secret": "rzp_test_secret"}

class FakeGateway:
    """Remplace razorpay.Client dans l'adaptateur passerelle et enregistre les appels."""

    def __init__(self):
        self.calls: List[Dict[str, Any]] = []
        self.clients: List[Dict[str, Any]] = []
        self.error: Optional[Exception] = None
        self.body: Any = None
        self.order = SimpleNamespace(create=self._create_order)

    def reject(self, status_code: int, description: str) -> None:
        # Le SDK lève BadRequestError sur 4xx et ServerError sur 5xx
        error_cls = ServerError if status_code >= 500 else BadRequestError
        self.error = error_cls(description)

    def fail(self, error: Exception) -> None:
        self.error = error

    def respond(self, body: Any) -> None:
        self.body = body

    def client(self, session=None, auth=None, **options):
        self.clients.append({"auth": auth, **options})
        return self

    def _create_order(self, data=None, **kwargs):
        self.calls.append({"data": data, **kwargs})
        if self.error is not None:
            raise self.error
        if self.body is not None:
            return self.body
        return {
            "id": f"order_gw_{len(self.calls)}",
            "entity": "order",
            "amount": data["amount"],
            "currency": data["currency"],
            "receipt": data["receipt"],
            "status": "created",
        }

@pytest.fixture
def fake_gateway(monkeypatch, gateway_config):
    gw = FakeGateway()
    monkeypatch.setattr("storefront.payments.gateway.razorpay.Client", gw.client)
    return gw

# --- Webhook ---

WEBHOOK_SECRET = "whsec_test"

@pytest.fixture
def webhook_secret(monkeypatch):
    monkeypatch.setattr("storefront.config.RAZORPAY_WEBHOOK_SECRET", WEBHOOK_SECRET)
    return WEBHOOK_SECRET

def make_payment_event(event: str, order_id: Optional[str] = "order-1", user_id: Optional[str] = "test-user",
                       payment_id: str = "pay_1", **entity_extra) -> Dict[str, Any]:
    notes: Dict[str, Any] = {}
    if order_id is not None:
        notes["order_id"] = order_id
    if user_id is not None:
        notes["user_id"] = user_id
    entity = {
        "id": payment_id,
        "entity": "payment",
        "amount": 220000,
        "currency": "INR",
        "method": "upi",
        "created_at": 1700000000,
        "notes": notes,
    }
    entity.update(entity_extra)
    return {"entity": "event", "event": event, "payload": {"payment": {"entity": entity}}}

def signed_body(payload: Dict[str, Any], secret: str = WEBHOOK_SECRET):
    raw = json.dumps(payload).encode("utf-8")
    return raw, compute_signature(raw, secret)

# --- Base en mémoire (produits, paniers, commandes) ---

class FakeStore:
    """
    Stockage en mémoire branché à la place des repositories cart/orders.
    Reproduit la jointure products:product_id et le compare-and-set sur le statut.
    """

    def __init__(self):
        self.products: Dict[str, Dict[str, Any]] = {}
        self.cart: List[Dict[str, Any]] = []
        self.orders: Dict[str, Dict[str, Any]] = {}
        self.writes: List[str] = []

    # Données de départ
    def add_product(self, product_id: str, name: str, price: float, stock: int) -> None:
        self.products[product_id] = {"id": product_id, "name": name, "price": price, "stock_quantity": stock, "images": []}

    def add_cart_line(self, user_id: str, product_id: str, quantity: int) -> None:
        self.cart.append({"id": uuid.uuid4().hex, "user_id": user_id, "product_id": product_id, "quantity": quantity})

    def cart_of(self, user_id: str) -> List[Dict[str, Any]]:
        return [row for row in self.cart if row["user_id"] == user_id]

    # cart.repository
    def fetch_cart_rows(self, user_id, user_token=None):
        return [
            {"id": row["id"], "quantity": row["quantity"], "products": copy.deepcopy(self.products.get(row["product_id"]))}
            for row in self.cart_of(user_id)
        ]

    def get_product(self, product_id):
        product = self.products.get(product_id)
        return copy.deepcopy(product) if product else None

    def get_cart_item(self, user_id, product_id, user_token=None):
        for row in self.cart_of(user_id):
            if row["product_id"] == product_id:
                return {"id": row["id"], "quantity": row["quantity"]}
        return None

    def update_cart_item_quantity(self, item_id, quantity, user_token=None):
        self.writes.append("cart.update")
        for row in self.cart:
            if row["id"] == item_id:
                row["quantity"] = quantity

    def insert_cart_item(self, user_id, product_id, quantity, user_token=None):
        self.writes.append("cart.insert")
        self.cart.append({"id": uuid.uuid4().hex, "user_id": user_id, "product_id": product_id, "quantity": quantity})

    def delete_cart_items(self, user_id, user_token=None):
        self.writes.append("cart.delete")
        self.cart = [row for row in self.cart if row["user_id"] != user_id]

    # orders.repository
    def insert_order(self, data, user_token=None):
        self.writes.append("orders.insert")
        order_id = f"order-{len(self.orders) + 1}"
        row = {"id": order_id, "payment_id": None, "payment_method": None, "payment_timestamp": None,
               "payment_error": None, "gateway_order_id": None, **copy.deepcopy(data)}
        self.orders[order_id] = row
        return copy.deepcopy(row)

    def get_order(self, order_id):
        order = self.orders.get(order_id)
        return copy.deepcopy(order) if order else None

    def update_order_if_status(self, order_id, expected_status, data):
        order = self.orders.get(order_id)
        if not order or order.get("status") != expected_status:
            return False
        self.writes.append("orders.update")
        order.update(data)
        return True

    def update_order(self, order_id, data):
        order = self.orders.get(order_id)
        if not order:
            return None
        self.writes.append("orders.update")
        order.update(data)
        return copy.deepcopy(order)

    def fetch_user_orders(self, user_id, user_token=None, limit=50):
        return [copy.deepcopy(o) for o in self.orders.values() if o.get("user_id") == user_id][:limit]

    def fetch_all_orders(self, limit=100, status=None):
        rows = [copy.deepcopy(o) for o in self.orders.values() if not status or o.get("status") == status]
        return rows[:limit]

    def install(self, monkeypatch) -> "FakeStore":
        for name in ("fetch_cart_rows", "get_product", "get_cart_item", "update_cart_item_quantity",
                     "insert_cart_item", "delete_cart_items"):
            monkeypatch.setattr(f"storefront.cart.repository.{name}", getattr(self, name))
        for name in ("insert_order", "get_order", "update_order_if_status", "update_order",
                     "fetch_user_orders", "fetch_all_orders"):
            monkeypatch.setattr(f"storefront.orders.repository.{name}", getattr(self, name))
        return self

@pytest.fixture
def store(monkeypatch) -> FakeStore:
    return FakeStore().install(monkeypatch)

@pytest.fixture
def payment_event():
    return make_payment_event

@pytest.fixture
def sign_webhook(webhook_secret):
    return lambda payload: signed_body(payload, webhook_secret)
