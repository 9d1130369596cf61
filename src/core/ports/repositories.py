"""
Interfaces ports pour les repositories.

Interfaces abstraites (ports) définissant les contrats pour la persistance des commandes.
Les implémentations (adaptateurs) fourniront les mécanismes de stockage concrets
(SQLite via SQLModel, en mémoire pour les tests, etc.).
"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Optional

from src.core.entities.order import Order, OrderStatus
from src.core.value_objects.pagination import Page, PageRequest


class IOrderRepository(ABC):
    """
    Interface de stockage des commandes.

    Une commande et toutes ses lignes sont persistées ensemble. Seuls le statut,
    la version et updated_at sont modifiables, via une écriture conditionnelle
    sur la version (compare-and-swap).
    """

    @abstractmethod
    def add(self, order: Order) -> Order:
        """
        Insère une nouvelle commande et ses lignes en une seule transaction.

        Retourne :
            La commande avec ses IDs (commande et lignes) attribués
        """
        ...

    @abstractmethod
    def get_by_id(self, order_id: int) -> Optional[Order]:
        """Récupère une commande par son ID, lignes comprises."""
        ...

    @abstractmethod
    def update_status(self, order: Order, expected_version: int) -> Order:
        """
        Persiste le nouveau statut si la version stockée vaut expected_version.

        Args :
            order : Commande portant le nouveau statut, la nouvelle version et updated_at
            expected_version : Version lue avant la modification

        Raises :
            ConcurrencyConflictError : Si la version stockée a changé entre-temps
        """
        ...

    @abstractmethod
    def list_by_customer(self, customer_id: int, page_request: PageRequest) -> Page[Order]:
        """Liste paginée des commandes d'un client."""
        ...

    @abstractmethod
    def list_all(
        self,
        page_request: PageRequest,
        status: Optional[OrderStatus] = None,
    ) -> Page[Order]:
        """Liste paginée de toutes les commandes, filtrée par statut si fourni."""
        ...

    @abstractmethod
    def list_by_date_range(
        self,
        start: datetime,
        end: datetime,
        page_request: PageRequest,
    ) -> Page[Order]:
        """Liste paginée des commandes dont order_date est dans [start, end]."""
        ...

    @abstractmethod
    def list_by_customer_and_status(
        self, customer_id: int, status: OrderStatus
    ) -> list[Order]:
        """Liste les commandes d'un client dans un statut donné."""
        ...

    @abstractmethod
    def count(self) -> int:
        """Nombre total de commandes stockées."""
        ...
