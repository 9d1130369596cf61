"""
Module de persistance pour le service de commandes.

Ce module fournit l'infrastructure de stockage utilisant SQLModel (SQLAlchemy).
Il contient :

- database.py : Creation de l'engine, session factory, initialisation
- models.py : Modeles SQLModel representant les tables de la base de donnees
- repositories/ : Implementation SQLModel de IOrderRepository

Les modeles ici sont des adapters de persistance, distincts des entites de domaine
(dataclass dans core/entities/). La conversion entre les deux se fait dans les
repositories.

Usage:
    from src.infrastructure.persistence import create_db_engine, init_db

    engine = create_db_engine("sqlite:///data/orders.db")
    init_db(engine)  # Cree les tables si necessaire
"""

from src.infrastructure.persistence.database import (
    create_db_engine,
    get_engine,
    get_session,
    init_db,
)
from src.infrastructure.persistence.models import OrderItemModel, OrderModel

__all__ = [
    "create_db_engine",
    "get_engine",
    "get_session",
    "init_db",
    "OrderModel",
    "OrderItemModel",
]
