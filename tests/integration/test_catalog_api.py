def test_list_products(client, monkeypatch):
    calls = {}

    def fake_list(category, subcategory, min_price, max_price):
        calls["args"] = (category, subcategory, min_price, max_price)
        return [{"id": "A", "slug": "produit-a"}]

    monkeypatch.setattr("storefront.catalog.repository.list_products", fake_list)
    r = client.get("/api/v1/products", params={"category": "c1", "min_price": 10})
    assert r.status_code == 200
    assert r.json() == {"items": [{"id": "A", "slug": "produit-a"}]}
    assert calls["args"] == ("c1", None, 10.0, None)

def test_product_detail_404(client, monkeypatch):
    monkeypatch.setattr("storefront.catalog.repository.get_product_by_slug", lambda slug: None)
    r = client.get("/api/v1/products/missing")
    assert r.status_code == 404
    assert r.json() == {"error": "Produit introuvable"}

def test_categories(client, monkeypatch):
    monkeypatch.setattr("storefront.catalog.repository.list_root_categories", lambda: [{"slug": "maison"}])
    monkeypatch.setattr(
        "storefront.catalog.repository.get_category_with_subcategories",
        lambda slug: {"slug": slug, "subcategories": []} if slug == "maison" else None,
    )
    assert client.get("/api/v1/categories").json() == {"items": [{"slug": "maison"}]}
    assert client.get("/api/v1/categories/maison").json()["slug"] == "maison"
    assert client.get("/api/v1/categories/autre").status_code == 404
