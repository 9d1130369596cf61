"""
Objets valeur de pagination et de tri.

PageRequest décrit la page demandée (numéro, taille, tri) et Page porte le
résultat avec les métadonnées de pagination.
"""

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Generic, Optional, TypeVar

T = TypeVar("T")

# Champs de tri exposés (nom externe)
SORTABLE_FIELDS = frozenset({
    "id",
    "orderDate",
    "totalAmount",
    "status",
    "createdAt",
    "updatedAt",
})

DEFAULT_SORT_FIELD = "orderDate"
DEFAULT_PAGE = 0
DEFAULT_PAGE_SIZE = 10


class SortDirection(Enum):
    """Sens du tri."""

    ASC = "asc"
    DESC = "desc"

    @classmethod
    def parse(cls, value: Optional[str]) -> "SortDirection":
        """
        Interprete un sens de tri saisi par l'utilisateur.

        Absent -> descendant. "desc" (toute casse) -> descendant.
        Toute autre valeur -> ascendant.
        """
        if value is None or value.strip().lower() == "desc":
            return cls.DESC
        return cls.ASC


@dataclass(frozen=True)
class PageRequest:
    """
    Page demandée.

    Attributs :
        page : Numéro de page (0-indexé)
        size : Nombre d'éléments par page
        sort_field : Champ de tri (nom externe, voir SORTABLE_FIELDS)
        sort_direction : Sens du tri
    """

    page: int = DEFAULT_PAGE
    size: int = DEFAULT_PAGE_SIZE
    sort_field: str = DEFAULT_SORT_FIELD
    sort_direction: SortDirection = SortDirection.DESC

    def __post_init__(self) -> None:
        if self.page < 0:
            raise ValueError(f"page doit etre >= 0, recu {self.page}")
        if self.size < 1:
            raise ValueError(f"size doit etre >= 1, recu {self.size}")
        if self.sort_field not in SORTABLE_FIELDS:
            raise ValueError(f"Champ de tri inconnu: {self.sort_field}")

    @property
    def offset(self) -> int:
        """Index du premier élément de la page."""
        return self.page * self.size


@dataclass(frozen=True)
class Page(Generic[T]):
    """
    Page de résultats.

    Attributs :
        content : Éléments de la page, dans l'ordre du tri
        page : Numéro de page (0-indexé)
        size : Taille de page demandée
        total_elements : Nombre total d'éléments correspondant à la requête
    """

    content: list[T] = field(default_factory=list)
    page: int = DEFAULT_PAGE
    size: int = DEFAULT_PAGE_SIZE
    total_elements: int = 0

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total_elements / self.size) if self.size else 0

    @property
    def is_first(self) -> bool:
        return self.page == 0

    @property
    def is_last(self) -> bool:
        return self.page + 1 >= self.total_pages
