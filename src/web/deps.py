"""
Dépendances partagées de l'application web.

Fournit le service de commandes aux routes, avec une session de base de
données propre à chaque requête et fermée à la fin de celle-ci.
"""

from collections.abc import Generator

from fastapi import Request

from ..services.order_service import OrderService


def get_order_service(request: Request) -> Generator[OrderService, None, None]:
    """Construit un OrderService sur une session fraîche depuis le Container DI."""
    container = request.app.state.container
    session = container.session()
    try:
        yield container.order_service(
            order_repository=container.order_repository(session=session),
        )
    finally:
        session.close()
