"""
Couche adaptateurs (infrastructure).

Les adaptateurs implémentent les ports définis dans core/ports/ et fournissent
des implémentations concrètes pour les systèmes externes.

Sous-packages :
- api/ : Client HTTP du catalogue produit (httpx, retry tenacity, disjoncteur)

La persistance (SQLModel) vit dans src/infrastructure/persistence/ et
l'interface HTTP (FastAPI) dans src/web/.

Chaque adaptateur dépend de core/ mais core/ ne dépend jamais des adaptateurs.
Cela permet de changer les implémentations sans affecter la logique métier.
"""

from src.adapters.api.catalog_client import HttpCatalogClient

__all__ = [
    "HttpCatalogClient",
]
