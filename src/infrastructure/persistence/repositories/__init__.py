"""
Implementations SQLModel des repositories.

Ce module contient l'implementation concrete de l'interface repository
definie dans src/core/ports/repositories.py, utilisant SQLModel pour
la persistance.

Le repository :
- Herite de l'interface ABC correspondante du domaine
- Recoit une session SQLModel via injection de dependances
- Convertit entre entites de domaine (dataclass) et modeles DB (SQLModel)
"""

from src.infrastructure.persistence.repositories.order_repository import (
    SQLModelOrderRepository,
)

__all__ = [
    "SQLModelOrderRepository",
]
