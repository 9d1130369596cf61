"""
Interface port pour le catalogue produit.

Le catalogue est l'autorité externe sur le prix, le nom, le stock et l'état
actif des produits. Ce port est en lecture seule.
"""

from abc import ABC, abstractmethod

from src.core.exceptions import NotFoundError, UnavailableError
from src.core.value_objects.product import ProductSnapshot


class ICatalogClient(ABC):
    """
    Accès en lecture au catalogue produit.

    Les implémentations distinguent les erreurs métier (NotFoundError,
    UnavailableError) des pannes de transport (UpstreamFailureError).
    """

    @abstractmethod
    async def fetch_product(self, product_id: int) -> ProductSnapshot:
        """
        Récupère l'état courant d'un produit.

        Raises :
            NotFoundError : Produit inexistant
            UpstreamFailureError : Catalogue injoignable ou réponse inattendue
        """
        ...

    @abstractmethod
    async def check_availability(self, product_id: int, quantity: int) -> None:
        """
        Vérifie qu'un produit est actif et que son stock couvre la quantité.

        Raises :
            NotFoundError : Produit inexistant
            UnavailableError : Produit inactif ou stock insuffisant
            UpstreamFailureError : Catalogue injoignable ou réponse inattendue
        """
        ...

    async def is_orderable(self, product_id: int, quantity: int) -> bool:
        """
        Variante booléenne de check_availability.

        Les pannes du catalogue ne sont pas converties en False : elles remontent.
        """
        try:
            await self.check_availability(product_id, quantity)
        except (NotFoundError, UnavailableError):
            return False
        return True
