"""
Routes REST des commandes (/api/v1/orders).

Création, lecture, listes paginées et changement de statut. Les erreurs
métier remontent telles quelles et sont traduites par src/web/errors.py.
"""

from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from loguru import logger

from ...core.entities.order import OrderStatus
from ...core.value_objects.pagination import DEFAULT_PAGE, DEFAULT_SORT_FIELD
from ...services.order_service import OrderLineRequest, OrderService
from ..deps import get_order_service
from ..schemas import (
    CreateOrderRequest,
    OrderPageResponse,
    OrderResponse,
    UpdateOrderStatusRequest,
)

router = APIRouter(prefix="/api/v1/orders", tags=["orders"])


@router.post("", response_model=OrderResponse, status_code=status.HTTP_201_CREATED)
async def create_order(
    body: CreateOrderRequest,
    service: OrderService = Depends(get_order_service),
) -> OrderResponse:
    """Crée une commande avec ses lignes."""
    logger.info("POST /api/v1/orders", customer_id=body.customer_id)
    order = await service.create_order(
        customer_id=body.customer_id,
        items=[
            OrderLineRequest(product_id=item.product_id, quantity=item.quantity)
            for item in body.items or []
        ],
        shipping_address=body.shipping_address,
        notes=body.notes,
    )
    return OrderResponse.from_entity(order)


@router.get("", response_model=OrderPageResponse)
def list_orders(
    status_filter: Optional[OrderStatus] = Query(default=None, alias="status"),
    page: int = DEFAULT_PAGE,
    size: Optional[int] = None,
    sort_by: str = Query(default=DEFAULT_SORT_FIELD, alias="sortBy"),
    sort_dir: str = Query(default="desc", alias="sortDir"),
    service: OrderService = Depends(get_order_service),
) -> OrderPageResponse:
    """Liste toutes les commandes, filtrées par statut si demandé (admin)."""
    result = service.list_all(
        status=status_filter, page=page, size=size, sort_by=sort_by, sort_dir=sort_dir
    )
    return OrderPageResponse.from_page(result)


@router.get("/range", response_model=OrderPageResponse)
def list_orders_by_date_range(
    start: datetime,
    end: datetime,
    page: int = DEFAULT_PAGE,
    size: Optional[int] = None,
    sort_by: str = Query(default=DEFAULT_SORT_FIELD, alias="sortBy"),
    sort_dir: str = Query(default="desc", alias="sortDir"),
    service: OrderService = Depends(get_order_service),
) -> OrderPageResponse:
    """Liste les commandes passées entre start et end (bornes incluses)."""
    result = service.list_by_date_range(
        start, end, page=page, size=size, sort_by=sort_by, sort_dir=sort_dir
    )
    return OrderPageResponse.from_page(result)


@router.get("/customer/{customer_id}", response_model=OrderPageResponse)
def list_customer_orders(
    customer_id: int,
    page: int = DEFAULT_PAGE,
    size: Optional[int] = None,
    sort_by: str = Query(default=DEFAULT_SORT_FIELD, alias="sortBy"),
    sort_dir: str = Query(default="desc", alias="sortDir"),
    service: OrderService = Depends(get_order_service),
) -> OrderPageResponse:
    """Liste paginée des commandes d'un client."""
    result = service.list_by_customer(
        customer_id, page=page, size=size, sort_by=sort_by, sort_dir=sort_dir
    )
    return OrderPageResponse.from_page(result)


@router.get(
    "/customer/{customer_id}/status/{order_status}",
    response_model=list[OrderResponse],
)
def list_customer_orders_by_status(
    customer_id: int,
    order_status: OrderStatus,
    service: OrderService = Depends(get_order_service),
) -> list[OrderResponse]:
    """Commandes d'un client dans un statut donné."""
    orders = service.list_by_customer_and_status(customer_id, order_status)
    return [OrderResponse.from_entity(order) for order in orders]


@router.get("/{order_id}", response_model=OrderResponse)
def get_order(
    order_id: int,
    service: OrderService = Depends(get_order_service),
) -> OrderResponse:
    """Détail d'une commande."""
    return OrderResponse.from_entity(service.get_order(order_id))


@router.put("/{order_id}/status", response_model=OrderResponse)
def update_order_status(
    order_id: int,
    body: UpdateOrderStatusRequest,
    service: OrderService = Depends(get_order_service),
) -> OrderResponse:
    """Change le statut d'une commande (admin)."""
    logger.info(
        "Changement de statut demande",
        order_id=order_id,
        new_status=body.status.value if body.status else None,
    )
    order = service.update_status(order_id, body.status, expected_version=body.version)
    return OrderResponse.from_entity(order)
