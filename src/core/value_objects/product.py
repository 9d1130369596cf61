"""
Instantané d'un produit du catalogue.
"""

from dataclasses import dataclass
from decimal import Decimal


@dataclass(frozen=True)
class ProductSnapshot:
    """
    État d'un produit tel que renvoyé par le catalogue à un instant donné.

    Attributs :
        id : Identifiant du produit dans le catalogue
        name : Nom du produit
        price : Prix unitaire courant (2 décimales)
        stock_quantity : Stock disponible
        is_active : Le produit est-il commandable
    """

    id: int
    name: str
    price: Decimal
    stock_quantity: int
    is_active: bool
