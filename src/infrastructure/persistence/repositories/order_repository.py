"""
Implementation SQLModel du repository Order.

Implemente l'interface IOrderRepository pour la persistance des commandes
et de leurs lignes via SQLModel.

Une commande et ses lignes sont inserees dans une seule transaction. Le
changement de statut est une ecriture conditionnelle sur la version
(UPDATE ... WHERE id = :id AND version = :expected) : si aucune ligne n'est
modifiee, la commande a change entre-temps et l'ecriture est refusee.
"""

from datetime import datetime
from typing import Optional

from loguru import logger
from sqlalchemy import func, update
from sqlmodel import Session, select

from src.core.entities.order import Order, OrderItem, OrderStatus
from src.core.exceptions import ConcurrencyConflictError, NotFoundError
from src.core.ports.repositories import IOrderRepository
from src.core.value_objects.money import from_cents, to_cents
from src.core.value_objects.pagination import Page, PageRequest, SortDirection
from src.infrastructure.persistence.models import OrderItemModel, OrderModel

# Champ de tri externe -> colonne
_SORT_COLUMNS = {
    "id": OrderModel.id,
    "orderDate": OrderModel.order_date,
    "totalAmount": OrderModel.total_amount_cents,
    "status": OrderModel.status,
    "createdAt": OrderModel.created_at,
    "updatedAt": OrderModel.updated_at,
}


class SQLModelOrderRepository(IOrderRepository):
    """
    Repository SQLModel pour les commandes.

    Implemente IOrderRepository avec conversion bidirectionnelle
    entre l'agregat Order (domaine) et OrderModel/OrderItemModel (persistance).
    """

    def __init__(self, session: Session) -> None:
        """
        Initialise le repository avec une session SQLModel.

        Args :
            session : Session SQLModel active pour les operations DB
        """
        self._session = session

    def _to_entity(self, model: OrderModel, item_models: list[OrderItemModel]) -> Order:
        """
        Convertit les modeles DB en agregat domaine.

        Args :
            model : La commande depuis la DB
            item_models : Ses lignes, triees par position

        Retourne :
            L'agregat Order correspondant
        """
        items = tuple(
            OrderItem(
                id=item.id,
                product_id=item.product_id,
                product_name=item.product_name,
                quantity=item.quantity,
                price=from_cents(item.price_cents),
                subtotal=from_cents(item.subtotal_cents),
            )
            for item in item_models
        )
        return Order(
            id=model.id,
            customer_id=model.customer_id,
            items=items,
            total_amount=from_cents(model.total_amount_cents),
            order_date=model.order_date,
            status=OrderStatus(model.status),
            shipping_address=model.shipping_address,
            notes=model.notes,
            version=model.version,
            created_at=model.created_at,
            updated_at=model.updated_at,
        )

    def _to_model(self, entity: Order) -> OrderModel:
        """
        Convertit l'agregat domaine en modele DB (sans les lignes).

        Args :
            entity : L'agregat Order du domaine

        Retourne :
            Le modele OrderModel pour la persistance
        """
        return OrderModel(
            customer_id=entity.customer_id,
            order_date=entity.order_date,
            total_amount_cents=to_cents(entity.total_amount),
            status=entity.status.value,
            shipping_address=entity.shipping_address,
            notes=entity.notes,
            version=entity.version,
            created_at=entity.created_at or entity.order_date,
            updated_at=entity.updated_at or entity.order_date,
        )

    def _load_items(self, order_ids: list[int]) -> dict[int, list[OrderItemModel]]:
        """Charge les lignes de plusieurs commandes en une requete."""
        items_by_order: dict[int, list[OrderItemModel]] = {order_id: [] for order_id in order_ids}
        if not order_ids:
            return items_by_order
        statement = (
            select(OrderItemModel)
            .where(OrderItemModel.order_id.in_(order_ids))
            .order_by(OrderItemModel.order_id, OrderItemModel.position)
        )
        for item in self._session.exec(statement).all():
            items_by_order[item.order_id].append(item)
        return items_by_order

    def _to_entities(self, models: list[OrderModel]) -> list[Order]:
        items_by_order = self._load_items([model.id for model in models])
        return [self._to_entity(model, items_by_order[model.id]) for model in models]

    def add(self, order: Order) -> Order:
        """Insere une commande et ses lignes en une seule transaction."""
        model = self._to_model(order)
        try:
            self._session.add(model)
            self._session.flush()  # attribue model.id
            for position, item in enumerate(order.items):
                self._session.add(
                    OrderItemModel(
                        order_id=model.id,
                        position=position,
                        product_id=item.product_id,
                        product_name=item.product_name,
                        quantity=item.quantity,
                        price_cents=to_cents(item.price),
                        subtotal_cents=to_cents(item.subtotal),
                    )
                )
            self._session.commit()
        except Exception:
            self._session.rollback()
            raise

        order_id = model.id
        saved = self.get_by_id(order_id)
        if saved is None:
            raise NotFoundError("Order", order_id)
        return saved

    def get_by_id(self, order_id: int) -> Optional[Order]:
        """Recupere une commande par son ID, lignes comprises."""
        model = self._session.get(OrderModel, order_id)
        if model is None:
            return None
        return self._to_entity(model, self._load_items([order_id])[order_id])

    def update_status(self, order: Order, expected_version: int) -> Order:
        """Persiste statut, version et updated_at si la version n'a pas change."""
        statement = (
            update(OrderModel)
            .where(OrderModel.id == order.id)
            .where(OrderModel.version == expected_version)
            .values(
                status=order.status.value,
                version=order.version,
                updated_at=order.updated_at,
            )
        )
        try:
            result = self._session.connection().execute(statement)
        except Exception:
            self._session.rollback()
            raise

        if result.rowcount != 1:
            self._session.rollback()
            logger.warning(
                "Conflit de version sur la commande",
                order_id=order.id,
                expected_version=expected_version,
            )
            raise ConcurrencyConflictError(order.id, expected_version)
        self._session.commit()

        # expire_on_commit : la relecture reflete l'etat stocke
        saved = self.get_by_id(order.id)
        if saved is None:
            raise NotFoundError("Order", order.id)
        return saved

    def _paginate(self, statement, count_statement, page_request: PageRequest) -> Page[Order]:
        """Applique tri et pagination, et compte le total."""
        column = _SORT_COLUMNS[page_request.sort_field]
        if page_request.sort_direction is SortDirection.DESC:
            statement = statement.order_by(column.desc(), OrderModel.id.desc())
        else:
            statement = statement.order_by(column.asc(), OrderModel.id.asc())
        statement = statement.offset(page_request.offset).limit(page_request.size)

        total = self._session.exec(count_statement).one()
        models = list(self._session.exec(statement).all())
        return Page(
            content=self._to_entities(models),
            page=page_request.page,
            size=page_request.size,
            total_elements=total,
        )

    def list_by_customer(self, customer_id: int, page_request: PageRequest) -> Page[Order]:
        """Liste paginee des commandes d'un client."""
        statement = select(OrderModel).where(OrderModel.customer_id == customer_id)
        count_statement = (
            select(func.count())
            .select_from(OrderModel)
            .where(OrderModel.customer_id == customer_id)
        )
        return self._paginate(statement, count_statement, page_request)

    def list_all(
        self,
        page_request: PageRequest,
        status: Optional[OrderStatus] = None,
    ) -> Page[Order]:
        """Liste paginee de toutes les commandes, filtree par statut si fourni."""
        statement = select(OrderModel)
        count_statement = select(func.count()).select_from(OrderModel)
        if status is not None:
            statement = statement.where(OrderModel.status == status.value)
            count_statement = count_statement.where(OrderModel.status == status.value)
        return self._paginate(statement, count_statement, page_request)

    def list_by_date_range(
        self,
        start: datetime,
        end: datetime,
        page_request: PageRequest,
    ) -> Page[Order]:
        """Liste paginee des commandes dont order_date est dans [start, end]."""
        condition = OrderModel.order_date.between(start, end)
        statement = select(OrderModel).where(condition)
        count_statement = select(func.count()).select_from(OrderModel).where(condition)
        return self._paginate(statement, count_statement, page_request)

    def list_by_customer_and_status(
        self, customer_id: int, status: OrderStatus
    ) -> list[Order]:
        """Liste les commandes d'un client dans un statut donne, plus recentes d'abord."""
        statement = (
            select(OrderModel)
            .where(OrderModel.customer_id == customer_id)
            .where(OrderModel.status == status.value)
            .order_by(OrderModel.order_date.desc(), OrderModel.id.desc())
        )
        return self._to_entities(list(self._session.exec(statement).all()))

    def count(self) -> int:
        """Nombre total de commandes stockees."""
        return self._session.exec(select(func.count()).select_from(OrderModel)).one()
