# module storefront.errors
"""
Taxonomie des erreurs de la boutique.
Chaque erreur est une HTTPException portant son code HTTP et un message lisible;
le handler global (app_setup.exceptions) la rend sous la forme {"error": "<message>"}.
"""
from typing import Optional
from fastapi import HTTPException


class StorefrontError(HTTPException):
    """Base des erreurs métier: code HTTP + message par défaut."""

    status_code = 500
    default_detail = "Erreur interne"

    def __init__(self, detail: Optional[str] = None):
        super().__init__(status_code=type(self).status_code, detail=detail or type(self).default_detail)


class Unauthorized(StorefrontError):
    status_code = 401
    default_detail = "Non authentifié"


class Forbidden(StorefrontError):
    status_code = 403
    default_detail = "Accès interdit"


class NotFound(StorefrontError):
    status_code = 404
    default_detail = "Ressource introuvable"


class InvalidPayload(StorefrontError):
    status_code = 400
    default_detail = "Payload invalide"


class EmptyCart(StorefrontError):
    status_code = 400
    default_detail = "Le panier est vide"


class InsufficientStock(StorefrontError):
    """Stock insuffisant pour un produit du panier (porte le nom du produit)."""

    status_code = 400

    def __init__(self, product_name: str):
        self.product_name = product_name
        super().__init__(f"Stock insuffisant pour {product_name}")


class GatewayMisconfigured(StorefrontError):
    # Message générique: ne jamais renvoyer de secret au client
    status_code = 500
    default_detail = "Passerelle de paiement non configurée"


class GatewayRejected(StorefrontError):
    """La passerelle a refusé la requête; la description de la passerelle est conservée telle quelle."""

    status_code = 502
    default_detail = "Échec de création de la commande de paiement"

    def __init__(self, description: Optional[str] = None):
        self.description = description
        super().__init__(description)


class InvalidSignature(StorefrontError):
    status_code = 400
    default_detail = "Signature invalide"


class MissingCorrelation(StorefrontError):
    status_code = 400
    default_detail = "Identifiant de commande manquant dans le webhook"


class PersistenceFailure(StorefrontError):
    status_code = 500
    default_detail = "Erreur de persistance"
