"""
Arithmétique monétaire en virgule fixe.

Tous les montants sont des Decimal à 2 décimales, arrondis au demi supérieur.
Aucun float n'intervient dans le calcul des sous-totaux ni des totaux.
"""

from decimal import ROUND_HALF_UP, Decimal
from typing import Union

CENT = Decimal("0.01")
ZERO = Decimal("0.00")


def to_money(value: Union[Decimal, int, str]) -> Decimal:
    """
    Convertit une valeur en montant à 2 décimales.

    Les float sont refusés : leur représentation binaire fausse les centimes.

    Raises:
        TypeError: Si la valeur est un float
    """
    if isinstance(value, float):
        raise TypeError("Les montants doivent être des Decimal, pas des float")
    return Decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)


def to_cents(amount: Decimal) -> int:
    """Convertit un montant en nombre entier de centimes (stockage)."""
    return int(to_money(amount) * 100)


def from_cents(cents: int) -> Decimal:
    """Convertit un nombre de centimes en montant."""
    return to_money(Decimal(cents) / 100)
