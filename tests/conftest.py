"""
Fixtures pytest partagees pour les tests du service de commandes.

Ce module contient les fixtures communes utilisees dans les tests:
- Settings de test avec chemins temporaires
- Engine et session SQLite dans tmp_path
- Catalogue en memoire (FakeCatalogClient) implementant ICatalogClient
- Horloge deterministe pour les horodatages
"""

from collections.abc import Iterator
from datetime import datetime, timedelta
from decimal import Decimal
from pathlib import Path

import pytest
from sqlalchemy import Engine
from sqlmodel import Session

from src.config import Settings
from src.core.exceptions import (
    NotFoundError,
    UnavailableError,
    UnavailableReason,
    UpstreamFailureError,
)
from src.core.ports.catalog import ICatalogClient
from src.core.value_objects.product import ProductSnapshot
from src.infrastructure.persistence.database import create_db_engine, init_db
from src.infrastructure.persistence.repositories import SQLModelOrderRepository


class FakeCatalogClient(ICatalogClient):
    """
    Catalogue en memoire.

    Enregistre chaque appel dans `calls` pour verifier l'ordre de traitement.
    Un produit liste dans `failing` provoque une UpstreamFailureError.
    """

    def __init__(self) -> None:
        self.products: dict[int, ProductSnapshot] = {}
        self.failing: set[int] = set()
        self.calls: list[tuple[str, int]] = []
        self.closed = False

    def add(
        self,
        product_id: int,
        name: str,
        price: str,
        stock_quantity: int = 100,
        is_active: bool = True,
    ) -> ProductSnapshot:
        product = ProductSnapshot(
            id=product_id,
            name=name,
            price=Decimal(price),
            stock_quantity=stock_quantity,
            is_active=is_active,
        )
        self.products[product_id] = product
        return product

    async def fetch_product(self, product_id: int) -> ProductSnapshot:
        self.calls.append(("fetch", product_id))
        if product_id in self.failing:
            raise UpstreamFailureError("Failed to retrieve product information")
        if product_id not in self.products:
            raise NotFoundError("Product", product_id)
        return self.products[product_id]

    async def check_availability(self, product_id: int, quantity: int) -> None:
        self.calls.append(("check", product_id))
        if product_id in self.failing:
            raise UpstreamFailureError("Failed to retrieve product information")
        product = self.products.get(product_id)
        if product is None:
            raise NotFoundError("Product", product_id)
        if not product.is_active:
            raise UnavailableError(product_id, UnavailableReason.INACTIVE)
        if product.stock_quantity < quantity:
            raise UnavailableError(
                product_id,
                UnavailableReason.INSUFFICIENT_STOCK,
                available=product.stock_quantity,
                requested=quantity,
            )

    async def close(self) -> None:
        self.closed = True


class StepClock:
    """Horloge qui avance d'une minute a chaque lecture."""

    def __init__(self, start: datetime = datetime(2024, 1, 15, 10, 0, 0)) -> None:
        self.current = start

    def __call__(self) -> datetime:
        now = self.current
        self.current = self.current + timedelta(minutes=1)
        return now


@pytest.fixture
def test_settings(tmp_path: Path) -> Settings:
    """
    Settings de test avec chemins temporaires.

    Base SQLite et fichier de log isoles dans tmp_path, catalogue sur un
    hote fictif intercepte par respx.
    """
    return Settings(
        database_url=f"sqlite:///{tmp_path}/test.db",
        catalog_base_url="http://catalog.test",
        catalog_timeout_seconds=1.0,
        catalog_max_attempts=3,
        catalog_retry_max_wait_seconds=0.01,
        catalog_breaker_failure_threshold=5,
        catalog_breaker_recovery_seconds=30.0,
        log_file=tmp_path / "test.log",
    )


@pytest.fixture
def engine(test_settings: Settings) -> Iterator[Engine]:
    """Engine SQLite avec les tables creees."""
    db_engine = create_db_engine(test_settings.database_url)
    init_db(db_engine)
    yield db_engine
    db_engine.dispose()


@pytest.fixture
def session(engine: Engine) -> Iterator[Session]:
    """Session SQLModel fermee en fin de test."""
    with Session(engine) as db_session:
        yield db_session


@pytest.fixture
def order_repository(session: Session) -> SQLModelOrderRepository:
    """Repository des commandes sur la session de test."""
    return SQLModelOrderRepository(session)


@pytest.fixture
def fake_catalog() -> FakeCatalogClient:
    """
    Catalogue en memoire pre-rempli.

    - 1 : Mechanical Keyboard, 10.00, stock 50
    - 2 : Wireless Mouse, 5.50, stock 3
    - 3 : Legacy Monitor, inactif
    """
    catalog = FakeCatalogClient()
    catalog.add(1, "Mechanical Keyboard", "10.00", stock_quantity=50)
    catalog.add(2, "Wireless Mouse", "5.50", stock_quantity=3)
    catalog.add(3, "Legacy Monitor", "120.00", stock_quantity=10, is_active=False)
    return catalog


@pytest.fixture
def clock() -> StepClock:
    """Horloge deterministe."""
    return StepClock()
