"""
Objets valeur immutables du domaine commande.

Exports:
- ProductSnapshot: État d'un produit du catalogue à un instant donné
- PageRequest, Page, SortDirection: Pagination et tri des listes de commandes
- to_money, to_cents, from_cents: Arithmétique monétaire à 2 décimales
"""

from src.core.value_objects.money import ZERO, from_cents, to_cents, to_money
from src.core.value_objects.pagination import (
    DEFAULT_PAGE,
    DEFAULT_PAGE_SIZE,
    DEFAULT_SORT_FIELD,
    SORTABLE_FIELDS,
    Page,
    PageRequest,
    SortDirection,
)
from src.core.value_objects.product import ProductSnapshot

__all__ = [
    "ProductSnapshot",
    "Page",
    "PageRequest",
    "SortDirection",
    "SORTABLE_FIELDS",
    "DEFAULT_PAGE",
    "DEFAULT_PAGE_SIZE",
    "DEFAULT_SORT_FIELD",
    "ZERO",
    "to_money",
    "to_cents",
    "from_cents",
]
