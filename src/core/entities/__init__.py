"""
Business entities representing core domain concepts.

Entities are mutable objects with identity that persist over time.
They encapsulate business rules and behavior.

Exports:
- Order: Aggregate root owning its order lines
- OrderItem: Immutable order line with catalog snapshots
- OrderStatus: Lifecycle status of an order
"""

from src.core.entities.order import (
    MAX_NOTES_LENGTH,
    MAX_SHIPPING_ADDRESS_LENGTH,
    Order,
    OrderItem,
    OrderStatus,
    sum_subtotals,
)

__all__ = [
    "Order",
    "OrderItem",
    "OrderStatus",
    "MAX_NOTES_LENGTH",
    "MAX_SHIPPING_ADDRESS_LENGTH",
    "sum_subtotals",
]
