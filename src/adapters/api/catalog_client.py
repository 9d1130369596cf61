"""
Client HTTP du catalogue produit.

Implemente l'interface ICatalogClient en appelant le service produit
(GET /api/v1/products/{id}). Chaque appel est borne par un timeout, relance
sur erreur passagere (lecture idempotente) et protege par un disjoncteur.

Les reponses sont traduites en erreurs metier :
- 404 -> NotFoundError
- isActive=false -> UnavailableError(INACTIVE)
- stockQuantity < quantite -> UnavailableError(INSUFFICIENT_STOCK)
- transport, timeout, 5xx, reponse illisible, circuit ouvert -> UpstreamFailureError

Usage:
    client = HttpCatalogClient(base_url="http://product-service:8082")
    product = await client.fetch_product(42)
    await client.close()
"""

from decimal import Decimal, InvalidOperation
from typing import Any, Optional

import httpx
from loguru import logger

from src.adapters.api.circuit_breaker import CircuitBreaker, CircuitOpenError
from src.adapters.api.retry import TransientHTTPError, request_with_retry
from src.core.exceptions import (
    NotFoundError,
    UnavailableError,
    UnavailableReason,
    UpstreamFailureError,
)
from src.core.ports.catalog import ICatalogClient
from src.core.value_objects.money import to_money
from src.core.value_objects.product import ProductSnapshot


class HttpCatalogClient(ICatalogClient):
    """
    Client API du catalogue produit.

    Attributes:
        PRODUCT_PATH: Chemin de la ressource produit

    Example:
        breaker = CircuitBreaker(failure_threshold=5, recovery_timeout=30.0)
        client = HttpCatalogClient(base_url="http://localhost:8082", breaker=breaker)

        await client.check_availability(1, quantity=2)
        product = await client.fetch_product(1)
        print(f"{product.name}: {product.price}")

        await client.close()
    """

    PRODUCT_PATH = "/api/v1/products/{product_id}"

    def __init__(
        self,
        base_url: str,
        timeout: float = 5.0,
        max_attempts: int = 3,
        max_wait: float = 2.0,
        breaker: Optional[CircuitBreaker] = None,
    ) -> None:
        """
        Initialise le client catalogue.

        Args:
            base_url: URL de base du service produit
            timeout: Timeout de chaque requete en secondes
            max_attempts: Nombre maximum de tentatives par lecture
            max_wait: Delai maximum entre deux tentatives en secondes
            breaker: Disjoncteur partage (un nouveau est cree si absent)
        """
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._max_attempts = max_attempts
        self._max_wait = max_wait
        self._breaker = breaker or CircuitBreaker()
        self._client: Optional[httpx.AsyncClient] = None

    def _get_client(self) -> httpx.AsyncClient:
        """
        Retourne le client HTTP, le cree si necessaire (lazy init).

        Returns:
            httpx.AsyncClient configure pour le service produit
        """
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                base_url=self._base_url,
                headers={"Accept": "application/json"},
                timeout=httpx.Timeout(self._timeout),
            )
        return self._client

    async def fetch_product(self, product_id: int) -> ProductSnapshot:
        """
        Recupere l'etat courant d'un produit.

        Args:
            product_id: ID du produit dans le catalogue

        Returns:
            ProductSnapshot avec prix a 2 decimales

        Raises:
            NotFoundError: Produit inexistant
            UpstreamFailureError: Catalogue injoignable ou reponse inattendue
        """
        payload = await self._fetch_payload(product_id)
        if payload is None:
            logger.info("Produit introuvable dans le catalogue", product_id=product_id)
            raise NotFoundError("Product", product_id)
        return self._to_snapshot(product_id, payload)

    async def check_availability(self, product_id: int, quantity: int) -> None:
        """
        Verifie qu'un produit est actif et que son stock couvre la quantite.

        Raises:
            NotFoundError: Produit inexistant
            UnavailableError: Produit inactif ou stock insuffisant
            UpstreamFailureError: Catalogue injoignable ou reponse inattendue
        """
        product = await self.fetch_product(product_id)

        if not product.is_active:
            raise UnavailableError(product_id, UnavailableReason.INACTIVE)

        if product.stock_quantity < quantity:
            raise UnavailableError(
                product_id,
                UnavailableReason.INSUFFICIENT_STOCK,
                available=product.stock_quantity,
                requested=quantity,
            )

    async def _fetch_payload(self, product_id: int) -> Optional[dict[str, Any]]:
        """Lit la ressource produit via le disjoncteur. None si 404."""
        try:
            return await self._breaker.call(self._request_product, product_id)
        except CircuitOpenError as e:
            logger.warning("Catalogue indisponible (circuit ouvert)", product_id=product_id)
            raise UpstreamFailureError("Product catalog is unavailable") from e
        except (httpx.HTTPError, TransientHTTPError, ValueError) as e:
            logger.error(
                "Erreur lors de l'appel au catalogue",
                product_id=product_id,
                error=repr(e),
            )
            raise UpstreamFailureError(
                "Failed to retrieve product information"
            ) from e

    async def _request_product(self, product_id: int) -> Optional[dict[str, Any]]:
        url = self.PRODUCT_PATH.format(product_id=product_id)
        logger.debug("Appel du catalogue", url=url)
        try:
            response = await request_with_retry(
                self._get_client(),
                "GET",
                url,
                max_attempts=self._max_attempts,
                max_wait=self._max_wait,
            )
        except httpx.HTTPStatusError as e:
            if e.response.status_code == 404:
                return None
            raise

        # parse_float=Decimal : aucun prix ne transite par un float
        data = response.json(parse_float=Decimal)
        if not isinstance(data, dict):
            raise ValueError(f"Unexpected catalog payload: {type(data).__name__}")
        return data

    @staticmethod
    def _to_snapshot(product_id: int, data: dict[str, Any]) -> ProductSnapshot:
        """
        Convertit la reponse JSON du catalogue en ProductSnapshot.

        isActive ou stockQuantity absents sont traites comme inactif / stock nul.
        isActive doit etre un booleen JSON et le prix ne peut etre negatif.

        Raises:
            UpstreamFailureError: Si un champ obligatoire manque ou est invalide
        """
        try:
            price = data["price"]
            if isinstance(price, float):
                price = str(price)
            price = to_money(Decimal(price))
            if price < 0:
                raise ValueError(f"negative price: {price}")

            is_active = data.get("isActive")
            if is_active is None:
                is_active = False
            elif not isinstance(is_active, bool):
                raise TypeError(f"isActive is not a boolean: {is_active!r}")

            return ProductSnapshot(
                id=int(data.get("id", product_id)),
                name=str(data["name"]),
                price=price,
                stock_quantity=int(data.get("stockQuantity") or 0),
                is_active=is_active,
            )
        except (KeyError, TypeError, ValueError, InvalidOperation) as e:
            logger.error("Reponse catalogue invalide", product_id=product_id, error=repr(e))
            raise UpstreamFailureError("Unexpected response from product catalog") from e

    async def close(self) -> None:
        """Ferme le client HTTP (a appeler a l'arret de l'application)."""
        if self._client is not None and not self._client.is_closed:
            await self._client.aclose()
