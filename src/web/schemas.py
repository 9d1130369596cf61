"""
Schemas pydantic des requetes et reponses HTTP.

Les noms de champs exposes sont en camelCase (customerId, totalAmount...).
Les montants sont serialises en chaines a 2 decimales ("36.50").

Les regles metier (quantite >= 1, longueurs max...) sont verifiees par le
service : les schemas de requete ne controlent que les types.
"""

from datetime import datetime
from decimal import Decimal
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, field_validator
from pydantic.alias_generators import to_camel

from src.core.entities.order import Order, OrderItem, OrderStatus
from src.core.value_objects.pagination import Page


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class OrderItemRequest(_CamelModel):
    """Ligne demandee : {productId, quantity}."""

    product_id: Optional[int] = None
    quantity: Optional[int] = None


class CreateOrderRequest(_CamelModel):
    """Corps de POST /api/v1/orders."""

    customer_id: Optional[int] = None
    items: Optional[list[OrderItemRequest]] = None
    shipping_address: Optional[str] = None
    notes: Optional[str] = None


class UpdateOrderStatusRequest(_CamelModel):
    """Corps de PUT /api/v1/orders/{id}/status. version est optionnelle."""

    status: Optional[OrderStatus] = None
    version: Optional[int] = None

    @field_validator("status", mode="before")
    @classmethod
    def normalize_status(cls, v: Any) -> Any:
        """Accepte le statut quelle que soit la casse ("confirmed")."""
        if isinstance(v, str):
            return v.strip().upper()
        return v


class OrderItemResponse(_CamelModel):
    id: Optional[int]
    product_id: int
    product_name: str
    quantity: int
    price: Decimal
    subtotal: Decimal

    @classmethod
    def from_entity(cls, item: OrderItem) -> "OrderItemResponse":
        return cls(
            id=item.id,
            product_id=item.product_id,
            product_name=item.product_name,
            quantity=item.quantity,
            price=item.price,
            subtotal=item.subtotal,
        )


class OrderResponse(_CamelModel):
    """Representation d'une commande."""

    id: Optional[int]
    customer_id: int
    order_date: datetime
    total_amount: Decimal
    status: OrderStatus
    shipping_address: Optional[str]
    notes: Optional[str]
    version: int
    created_at: Optional[datetime]
    updated_at: Optional[datetime]
    items: list[OrderItemResponse]

    @classmethod
    def from_entity(cls, order: Order) -> "OrderResponse":
        return cls(
            id=order.id,
            customer_id=order.customer_id,
            order_date=order.order_date,
            total_amount=order.total_amount,
            status=order.status,
            shipping_address=order.shipping_address,
            notes=order.notes,
            version=order.version,
            created_at=order.created_at,
            updated_at=order.updated_at,
            items=[OrderItemResponse.from_entity(item) for item in order.items],
        )


class OrderPageResponse(_CamelModel):
    """Page de commandes."""

    content: list[OrderResponse]
    page: int
    size: int
    total_elements: int
    total_pages: int
    first: bool
    last: bool

    @classmethod
    def from_page(cls, page: Page[Order]) -> "OrderPageResponse":
        return cls(
            content=[OrderResponse.from_entity(order) for order in page.content],
            page=page.page,
            size=page.size,
            total_elements=page.total_elements,
            total_pages=page.total_pages,
            first=page.is_first,
            last=page.is_last,
        )
