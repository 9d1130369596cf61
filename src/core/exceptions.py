"""
Taxonomie des erreurs métier du service de commandes.

Chaque erreur porte un ErrorKind. La couche web traduit ce type en code HTTP
via une table unique (src/web/errors.py) : le domaine reste indépendant du
transport.
"""

from enum import Enum
from typing import Optional


class ErrorKind(Enum):
    """Catégorie d'erreur exposée à l'extérieur."""

    NOT_FOUND = "NOT_FOUND"
    UNAVAILABLE = "UNAVAILABLE"
    INVALID_OPERATION = "INVALID_OPERATION"
    CONCURRENCY_CONFLICT = "CONCURRENCY_CONFLICT"
    UPSTREAM_FAILURE = "UPSTREAM_FAILURE"
    VALIDATION = "VALIDATION"


class UnavailableReason(Enum):
    """Raison pour laquelle un produit existant ne peut pas être commandé."""

    INACTIVE = "inactive"
    INSUFFICIENT_STOCK = "insufficient-stock"


class OrderServiceError(Exception):
    """
    Erreur de base du service de commandes.

    Attributes:
        kind: Catégorie de l'erreur
        message: Message lisible, sûr à exposer au client
    """

    kind: ErrorKind

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class NotFoundError(OrderServiceError):
    """La commande ou le produit référencé n'existe pas."""

    kind = ErrorKind.NOT_FOUND

    def __init__(self, resource: str, resource_id: object) -> None:
        self.resource = resource
        self.resource_id = resource_id
        super().__init__(f"{resource} not found with id: {resource_id}")


class UnavailableError(OrderServiceError):
    """
    Le produit existe mais ne peut pas être commandé.

    Attributes:
        product_id: Produit concerné
        reason: INACTIVE ou INSUFFICIENT_STOCK
        available: Stock disponible (pour INSUFFICIENT_STOCK)
        requested: Quantité demandée (pour INSUFFICIENT_STOCK)
    """

    kind = ErrorKind.UNAVAILABLE

    def __init__(
        self,
        product_id: int,
        reason: UnavailableReason,
        available: Optional[int] = None,
        requested: Optional[int] = None,
    ) -> None:
        self.product_id = product_id
        self.reason = reason
        self.available = available
        self.requested = requested
        if reason is UnavailableReason.INACTIVE:
            message = f"Product with id {product_id} is not active"
        else:
            message = (
                f"Insufficient stock for product id {product_id}. "
                f"Available: {available}, Requested: {requested}"
            )
        super().__init__(message)


class InvalidOperationError(OrderServiceError):
    """La transition de statut demandée n'est pas autorisée."""

    kind = ErrorKind.INVALID_OPERATION

    def __init__(self, message: str, current=None, requested=None) -> None:
        self.current = current
        self.requested = requested
        super().__init__(message)


class ConcurrencyConflictError(OrderServiceError):
    """
    La commande a été modifiée depuis sa lecture.

    L'appelant peut relire la commande et relancer l'opération.
    """

    kind = ErrorKind.CONCURRENCY_CONFLICT
    retryable = True

    def __init__(self, order_id: int, expected_version: int) -> None:
        self.order_id = order_id
        self.expected_version = expected_version
        super().__init__(
            f"Order {order_id} was modified concurrently "
            f"(expected version {expected_version})"
        )


class UpstreamFailureError(OrderServiceError):
    """Le catalogue est injoignable ou a renvoyé une réponse inattendue."""

    kind = ErrorKind.UPSTREAM_FAILURE


class RequestValidationError(OrderServiceError):
    """
    Requête mal formée, rejetée avant tout appel au catalogue.

    Attributes:
        field_errors: Message d'erreur par champ (chemin pointé, ex: "items[0].quantity")
    """

    kind = ErrorKind.VALIDATION

    def __init__(self, field_errors: dict[str, str]) -> None:
        self.field_errors = field_errors
        super().__init__("Input validation error")
