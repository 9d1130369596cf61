"""
Garde des transitions de statut d'une commande.

Fonction pure : aucune lecture ni écriture, elle décide seulement si le
passage d'un statut à un autre est autorisé.

    PENDING   -> CONFIRMED, CANCELLED
    CONFIRMED -> SHIPPED, CANCELLED
    SHIPPED   -> DELIVERED
    DELIVERED, CANCELLED : terminaux
"""

from src.core.entities.order import OrderStatus
from src.core.exceptions import InvalidOperationError

ALLOWED_TRANSITIONS: dict[OrderStatus, frozenset[OrderStatus]] = {
    OrderStatus.PENDING: frozenset({OrderStatus.CONFIRMED, OrderStatus.CANCELLED}),
    OrderStatus.CONFIRMED: frozenset({OrderStatus.SHIPPED, OrderStatus.CANCELLED}),
    OrderStatus.SHIPPED: frozenset({OrderStatus.DELIVERED}),
    OrderStatus.DELIVERED: frozenset(),
    OrderStatus.CANCELLED: frozenset(),
}

TERMINAL_STATUSES = frozenset({OrderStatus.DELIVERED, OrderStatus.CANCELLED})


def is_terminal(status: OrderStatus) -> bool:
    """Vérifie si aucun changement n'est plus possible depuis ce statut."""
    return status in TERMINAL_STATUSES


def is_allowed(current: OrderStatus, requested: OrderStatus) -> bool:
    """Vérifie si la transition figure dans la table."""
    return requested in ALLOWED_TRANSITIONS[current]


def check_transition(current: OrderStatus, requested: OrderStatus) -> None:
    """
    Valide une transition de statut.

    Les statuts terminaux sont vérifiés avant la table pour un message
    d'erreur explicite. Une transition vers le même statut est refusée.

    Args:
        current: Statut actuel de la commande
        requested: Statut demandé

    Raises:
        InvalidOperationError: Si la transition n'est pas autorisée
    """
    if is_terminal(current):
        raise InvalidOperationError(
            f"Cannot change status of a {current.value.lower()} order "
            f"(requested {requested.value})",
            current=current,
            requested=requested,
        )
    if not is_allowed(current, requested):
        raise InvalidOperationError(
            f"Invalid status transition from {current.value} to {requested.value}",
            current=current,
            requested=requested,
        )
