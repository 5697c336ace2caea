"""
Registre central des routers.
- API v1: auth, cart, orders, catalog
- Paiement: checkout (create-order) et webhook de la passerelle
- Bannières, admin, health
"""
from fastapi import FastAPI
from storefront.auth.views import api_router as auth_api_router
from storefront.cart import views as cart_views
from storefront.orders import views as orders_views
from storefront.catalog import views as catalog_views
from storefront.payments import views as payments_views
from storefront.banners import views as banners_views
from storefront.admin.views import router as admin_router
from storefront.health.router import router as health_router

def register_routers(app: FastAPI) -> None:
    """
    Agrège tous les routers de l’application.
    - L’ordre n’a pas d’impact sauf conflits de chemins (évités par préfixes).
    """
    # API v1
    app.include_router(auth_api_router)
    app.include_router(cart_views.router)
    app.include_router(orders_views.router)
    app.include_router(catalog_views.router)
    # Paiement
    app.include_router(payments_views.checkout_router)
    app.include_router(payments_views.webhook_router)
    # Contenu éditorial
    app.include_router(banners_views.router)
    # Admin
    app.include_router(admin_router)
    # Health & monitoring
    app.include_router(health_router)
