"""
Ports (interfaces abstraites) définissant les contrats pour les adaptateurs.

Les ports sont les frontières de l'architecture hexagonale. Ils définissent
ce dont le domaine a besoin du monde extérieur sans spécifier
comment ces besoins sont satisfaits.

Ports repository : Contrats de persistance des données
- IOrderRepository : Stockage des commandes et de leurs lignes

Ports client API : Contrats pour les services externes
- ICatalogClient : Accès en lecture au catalogue produit
"""

from src.core.ports.catalog import ICatalogClient
from src.core.ports.repositories import IOrderRepository

__all__ = [
    # Repositories
    "IOrderRepository",
    # Clients API
    "ICatalogClient",
]
