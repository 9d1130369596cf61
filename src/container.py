"""
Container d'injection de dependances via dependency-injector.

Fournit une gestion centralisee des dependances pour les interfaces CLI et Web :
engine et sessions SQLModel, repository des commandes, client du catalogue
et service de commandes.
"""

from dependency_injector import containers, providers
from sqlmodel import Session

from .adapters.api.catalog_client import HttpCatalogClient
from .adapters.api.circuit_breaker import CircuitBreaker
from .config import Settings
from .infrastructure.persistence.database import create_db_engine, init_db
from .infrastructure.persistence.repositories import SQLModelOrderRepository
from .services.order_service import OrderService


class Container(containers.DeclarativeContainer):
    """Container DI de l'application.

    Utilisation :
        container = Container()
        container.database.init()  # Cree les tables une fois
        session = container.session()
        service = container.order_service(
            order_repository=container.order_repository(session=session)
        )
    """

    # Configuration - singleton charge une seule fois
    config = providers.Singleton(Settings)

    # Engine partage par toutes les sessions
    engine = providers.Singleton(
        create_db_engine,
        database_url=config.provided.database_url,
    )

    # Database - Resource pour initialisation unique
    database = providers.Resource(init_db, engine=engine)

    # Session - nouvelle session a chaque appel (a fermer par l'appelant)
    session = providers.Factory(Session, engine)

    # Repository - Factory pour nouvelle instance avec session fraiche
    order_repository = providers.Factory(
        SQLModelOrderRepository,
        session=session,
    )

    # Disjoncteur - Singleton : l'etat du catalogue est partage entre requetes
    circuit_breaker = providers.Singleton(
        CircuitBreaker,
        failure_threshold=config.provided.catalog_breaker_failure_threshold,
        recovery_timeout=config.provided.catalog_breaker_recovery_seconds,
    )

    # Client catalogue - Singleton (pool de connexions httpx partage)
    catalog_client = providers.Singleton(
        HttpCatalogClient,
        base_url=config.provided.catalog_base_url,
        timeout=config.provided.catalog_timeout_seconds,
        max_attempts=config.provided.catalog_max_attempts,
        max_wait=config.provided.catalog_retry_max_wait_seconds,
        breaker=circuit_breaker,
    )

    # Service de commandes - Factory car depend du repository (session fraiche)
    order_service = providers.Factory(
        OrderService,
        order_repository=order_repository,
        catalog_client=catalog_client,
        default_page_size=config.provided.default_page_size,
        max_page_size=config.provided.max_page_size,
    )
