"""
Application services layer (use cases).

Services orchestrate the domain logic to fulfill application use cases.
They coordinate between entities, ports, and external systems.

This layer contains:
- OrderService: order creation, reads, listings and status transitions
- OrderLineRequest: a requested order line (product, quantity)

Services depend on ports (interfaces) from core/, never on concrete
implementations from adapters/.
"""

from src.services.order_service import OrderLineRequest, OrderService

__all__ = [
    "OrderService",
    "OrderLineRequest",
]
