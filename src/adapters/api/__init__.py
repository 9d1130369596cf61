"""
Clients API externes.

Ce module fournit l'adaptateur pour communiquer avec le catalogue produit :
- HttpCatalogClient : implementation HTTP de ICatalogClient

Infrastructure partagee:
- CircuitBreaker / CircuitOpenError : disjoncteur pour service degrade
- RateLimitError, ServerError : erreurs HTTP passageres (429, 5xx)
- with_retry : Decorateur avec backoff exponentiel pour les lectures idempotentes
- request_with_retry : Requete httpx avec retry automatique

Le client implemente ICatalogClient defini dans core/ports/catalog.py.
"""

from src.adapters.api.catalog_client import HttpCatalogClient
from src.adapters.api.circuit_breaker import CircuitBreaker, CircuitOpenError, CircuitState
from src.adapters.api.retry import (
    RateLimitError,
    ServerError,
    TransientHTTPError,
    request_with_retry,
    with_retry,
)

__all__ = [
    "HttpCatalogClient",
    "CircuitBreaker",
    "CircuitOpenError",
    "CircuitState",
    "RateLimitError",
    "ServerError",
    "TransientHTTPError",
    "request_with_retry",
    "with_retry",
]
