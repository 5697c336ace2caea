"""
Vérification de la signature des webhooks de la passerelle.
HMAC-SHA256 (hex) calculé sur le corps brut, avant tout parsing JSON.
"""
import hashlib
import hmac
from typing import Optional

def compute_signature(raw_body: bytes, secret: str) -> str:
    return hmac.new(secret.encode("utf-8"), raw_body, hashlib.sha256).hexdigest()

def verify_signature(raw_body: bytes, signature: Optional[str], secret: str) -> bool:
    """
    Comparaison exacte (temps constant) du digest attendu et de l'en-tête reçu.
    Pas de normalisation de casse ni de préfixe.
    """
    if not signature or not secret:
        return False
    expected = compute_signature(raw_body, secret)
    return hmac.compare_digest(expected.encode("utf-8"), signature.encode("utf-8"))
