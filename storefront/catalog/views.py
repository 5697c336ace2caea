"""Endpoints publics du catalogue (lecture seule).
- /api/v1/products: liste filtrable; /api/v1/products/{slug}: détail (404 sinon)
- /api/v1/categories: catégories racines; /api/v1/categories/{slug}: avec sous-catégories
"""
from typing import Optional
from fastapi import APIRouter

from storefront.errors import NotFound
from storefront.catalog import repository as catalog_repository

router = APIRouter(prefix="/api/v1", tags=["Catalog API"])

@router.get("/products")
def list_products(
    category: Optional[str] = None,
    subcategory: Optional[str] = None,
    min_price: Optional[float] = None,
    max_price: Optional[float] = None,
):
    items = catalog_repository.list_products(category, subcategory, min_price, max_price)
    return {"items": items}

@router.get("/products/{slug}")
def get_product(slug: str):
    product = catalog_repository.get_product_by_slug(slug)
    if not product:
        raise NotFound("Produit introuvable")
    return product

@router.get("/categories")
def list_categories():
    return {"items": catalog_repository.list_root_categories()}

@router.get("/categories/{slug}")
def get_category(slug: str):
    category = catalog_repository.get_category_with_subcategories(slug)
    if not category:
        raise NotFound("Catégorie introuvable")
    return category
