from fastapi import FastAPI, Depends
from fastapi.testclient import TestClient

from storefront.app_setup.exceptions import register_exception_handlers
from storefront.utils.security import get_current_user, require_admin, COOKIE_NAME

def _make_app():
    app = FastAPI()
    register_exception_handlers(app)

    @app.get("/api/me")
    def me(user=Depends(get_current_user)):
        return {"id": user["id"], "role": user["role"]}

    @app.get("/api/admin")
    def admin(user=Depends(require_admin)):
        return {"ok": True}

    return app

def _fake_user_from_token(token):
    if token == "bad":
        raise RuntimeError("invalid jwt")
    role = "admin" if token == "admin-token" else "user"
    return {"id": f"id-{token}", "email": "x@y.z", "role": role, "token": token}

def test_no_token_is_401():
    client = TestClient(_make_app())
    r = client.get("/api/me")
    assert r.status_code == 401
    assert r.json() == {"error": "Non authentifié"}

def test_bearer_token(monkeypatch):
    monkeypatch.setattr("storefront.auth.service.get_user_from_token", _fake_user_from_token)
    client = TestClient(_make_app())
    r = client.get("/api/me", headers={"Authorization": "Bearer abc"})
    assert r.status_code == 200
    assert r.json() == {"id": "id-abc", "role": "user"}

def test_cookie_token(monkeypatch):
    monkeypatch.setattr("storefront.auth.service.get_user_from_token", _fake_user_from_token)
    client = TestClient(_make_app())
    client.cookies.set(COOKIE_NAME, "from-cookie")
    r = client.get("/api/me")
    assert r.json()["id"] == "id-from-cookie"

def test_invalid_token_is_401(monkeypatch):
    monkeypatch.setattr("storefront.auth.service.get_user_from_token", _fake_user_from_token)
    client = TestClient(_make_app())
    r = client.get("/api/me", headers={"Authorization": "Bearer bad"})
    assert r.status_code == 401

def test_require_admin(monkeypatch):
    monkeypatch.setattr("storefront.auth.service.get_user_from_token", _fake_user_from_token)
    client = TestClient(_make_app())
    assert client.get("/api/admin", headers={"Authorization": "Bearer abc"}).status_code == 403
    assert client.get("/api/admin", headers={"Authorization": "Bearer admin-token"}).status_code == 200
