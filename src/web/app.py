"""
Application FastAPI du service de commandes.

Initialise l'application web avec le Container DI, enregistre la table de
traduction des erreurs et monte les routes.
"""

from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from loguru import logger

from ..container import Container
from .errors import install_error_handlers
from .routes.health import router as health_router
from .routes.orders import router as orders_router


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Initialise la base au démarrage et libère les ressources à l'arrêt."""
    container = app.state.container
    container.database.init()
    logger.info("Service de commandes démarré")
    yield
    await container.catalog_client().close()
    container.shutdown_resources()


def create_app(container: Optional[Container] = None) -> FastAPI:
    """
    Construit l'application FastAPI.

    Args:
        container: Container DI à utiliser (un nouveau est créé si absent)
    """
    app = FastAPI(title="Order Service", version="0.1.0", lifespan=lifespan)
    app.state.container = container or Container()

    install_error_handlers(app)

    # Routes
    app.include_router(health_router)
    app.include_router(orders_router)
    return app


app = create_app()
