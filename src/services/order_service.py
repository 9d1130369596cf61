"""
Service d'orchestration du cycle de vie des commandes.

Le OrderService est la facade du domaine commande : il compose le catalogue
produit, l'agregat Order et la garde de transitions de statut.

Responsabilites:
- Creation d'une commande : validation de chaque ligne aupres du catalogue,
  instantane des prix, calcul du total, persistance atomique
- Lecture d'une commande et listes paginees (client, statut, periode)
- Changement de statut via la table de transitions, avec controle de version

Toute erreur pendant la creation ou le changement de statut annule
l'operation entiere : aucune commande partielle n'est jamais persistee.
"""

from collections.abc import Callable
from dataclasses import dataclass, replace
from datetime import datetime, timezone
from typing import Optional

from loguru import logger

from src.core.entities.order import (
    MAX_NOTES_LENGTH,
    MAX_SHIPPING_ADDRESS_LENGTH,
    Order,
    OrderItem,
    OrderStatus,
)
from src.core.exceptions import (
    ConcurrencyConflictError,
    NotFoundError,
    OrderServiceError,
    RequestValidationError,
)
from src.core.ports.catalog import ICatalogClient
from src.core.ports.repositories import IOrderRepository
from src.core.status_guard import check_transition
from src.core.value_objects.pagination import (
    DEFAULT_PAGE,
    DEFAULT_SORT_FIELD,
    SORTABLE_FIELDS,
    Page,
    PageRequest,
    SortDirection,
)

DEFAULT_MAX_PAGE_SIZE = 100


@dataclass(frozen=True)
class OrderLineRequest:
    """
    Ligne demandee a la creation d'une commande.

    Attributs :
        product_id : Produit du catalogue
        quantity : Quantite demandee (>= 1)
    """

    product_id: Optional[int]
    quantity: Optional[int]


def utcnow() -> datetime:
    """Horodatage UTC sans fuseau (format stocke en base)."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def to_naive_utc(moment: datetime) -> datetime:
    """Ramene un horodatage avec fuseau en UTC sans fuseau, comme en base."""
    if moment.tzinfo is None:
        return moment
    return moment.astimezone(timezone.utc).replace(tzinfo=None)


class OrderService:
    """
    Orchestrateur des commandes.

    Example:
        service = OrderService(
            order_repository=SQLModelOrderRepository(session),
            catalog_client=HttpCatalogClient(base_url="http://localhost:8082"),
        )

        order = await service.create_order(
            customer_id=7,
            items=[OrderLineRequest(product_id=1, quantity=2)],
        )
        order = service.update_status(order.id, OrderStatus.CONFIRMED)
    """

    def __init__(
        self,
        order_repository: IOrderRepository,
        catalog_client: ICatalogClient,
        default_page_size: int = 10,
        max_page_size: int = DEFAULT_MAX_PAGE_SIZE,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        """
        Initialise le service de commandes.

        Args:
            order_repository: Repository pour la persistance des commandes
            catalog_client: Acces en lecture au catalogue produit
            default_page_size: Taille de page quand aucune n'est demandee
            max_page_size: Taille de page maximale acceptee
            clock: Source des horodatages (injectable pour les tests)
        """
        self._repository = order_repository
        self._catalog = catalog_client
        self._default_page_size = default_page_size
        self._max_page_size = max_page_size
        self._clock = clock

    # ------------------------------------------------------------------
    # Creation
    # ------------------------------------------------------------------

    async def create_order(
        self,
        customer_id: Optional[int],
        items: list[OrderLineRequest],
        shipping_address: Optional[str] = None,
        notes: Optional[str] = None,
    ) -> Order:
        """
        Cree une commande PENDING a partir des lignes demandees.

        Les lignes sont traitees dans l'ordre de la requete : pour chacune,
        verification de disponibilite puis lecture du produit. Le nom et le
        prix du produit sont figes dans la ligne. La commande n'est persistee
        qu'une fois toutes les lignes validees.

        Args:
            customer_id: Client a l'origine de la commande
            items: Lignes demandees (au moins une)
            shipping_address: Adresse de livraison (<= 500 caracteres)
            notes: Notes libres (<= 1000 caracteres)

        Returns:
            La commande persistee avec son ID

        Raises:
            RequestValidationError: Requete mal formee (avant tout appel catalogue)
            NotFoundError: Un produit n'existe pas
            UnavailableError: Un produit est inactif ou en stock insuffisant
            UpstreamFailureError: Le catalogue est injoignable
        """
        self._validate_create_request(customer_id, items, shipping_address, notes)
        logger.info(
            "Creation d'une commande",
            customer_id=customer_id,
            item_count=len(items),
        )

        order_items: list[OrderItem] = []
        for position, line in enumerate(items):
            try:
                await self._catalog.check_availability(line.product_id, line.quantity)
                product = await self._catalog.fetch_product(line.product_id)
            except OrderServiceError as e:
                logger.warning(
                    "Creation de commande refusee",
                    customer_id=customer_id,
                    position=position,
                    product_id=line.product_id,
                    kind=e.kind.value,
                    reason=e.message,
                )
                raise

            order_items.append(
                OrderItem.create(
                    product_id=line.product_id,
                    product_name=product.name,
                    price=product.price,
                    quantity=line.quantity,
                )
            )

        order = Order.create(
            customer_id=customer_id,
            items=order_items,
            now=self._clock(),
            shipping_address=shipping_address,
            notes=notes,
        )
        saved = self._repository.add(order)
        logger.info(
            "Commande creee",
            order_id=saved.id,
            customer_id=customer_id,
            total_amount=str(saved.total_amount),
        )
        return saved

    def _validate_create_request(
        self,
        customer_id: Optional[int],
        items: Optional[list[OrderLineRequest]],
        shipping_address: Optional[str],
        notes: Optional[str],
    ) -> None:
        """Rejette une requete mal formee avant tout appel au catalogue."""
        errors: dict[str, str] = {}

        if customer_id is None:
            errors["customerId"] = "Customer ID is required"

        if not items:
            errors["items"] = "Order must have at least one item"
        else:
            for index, line in enumerate(items):
                if line.product_id is None:
                    errors[f"items[{index}].productId"] = "Product ID is required"
                if line.quantity is None:
                    errors[f"items[{index}].quantity"] = "Quantity is required"
                elif line.quantity < 1:
                    errors[f"items[{index}].quantity"] = "Quantity must be at least 1"

        if shipping_address is not None and len(shipping_address) > MAX_SHIPPING_ADDRESS_LENGTH:
            errors["shippingAddress"] = (
                f"Shipping address must not exceed {MAX_SHIPPING_ADDRESS_LENGTH} characters"
            )
        if notes is not None and len(notes) > MAX_NOTES_LENGTH:
            errors["notes"] = f"Notes must not exceed {MAX_NOTES_LENGTH} characters"

        if errors:
            logger.info("Requete de creation invalide", field_errors=errors)
            raise RequestValidationError(errors)

    # ------------------------------------------------------------------
    # Lecture
    # ------------------------------------------------------------------

    def get_order(self, order_id: int) -> Order:
        """
        Recupere une commande par son ID.

        Raises:
            NotFoundError: Si la commande n'existe pas
        """
        logger.debug("Lecture de la commande", order_id=order_id)
        order = self._repository.get_by_id(order_id)
        if order is None:
            raise NotFoundError("Order", order_id)
        return order

    def list_by_customer(
        self,
        customer_id: int,
        page: int = DEFAULT_PAGE,
        size: Optional[int] = None,
        sort_by: str = DEFAULT_SORT_FIELD,
        sort_dir: Optional[str] = None,
    ) -> Page[Order]:
        """Liste paginee des commandes d'un client (defaut : plus recentes d'abord)."""
        page_request = self._page_request(page, size, sort_by, sort_dir)
        logger.debug(
            "Liste des commandes du client",
            customer_id=customer_id,
            page=page_request.page,
            size=page_request.size,
        )
        return self._repository.list_by_customer(customer_id, page_request)

    def list_all(
        self,
        status: Optional[OrderStatus] = None,
        page: int = DEFAULT_PAGE,
        size: Optional[int] = None,
        sort_by: str = DEFAULT_SORT_FIELD,
        sort_dir: Optional[str] = None,
    ) -> Page[Order]:
        """Liste paginee de toutes les commandes, filtree par statut si fourni."""
        page_request = self._page_request(page, size, sort_by, sort_dir)
        logger.debug(
            "Liste de toutes les commandes",
            status=status.value if status else None,
            page=page_request.page,
            size=page_request.size,
        )
        return self._repository.list_all(page_request, status=status)

    def list_by_date_range(
        self,
        start: datetime,
        end: datetime,
        page: int = DEFAULT_PAGE,
        size: Optional[int] = None,
        sort_by: str = DEFAULT_SORT_FIELD,
        sort_dir: Optional[str] = None,
    ) -> Page[Order]:
        """
        Liste paginee des commandes passees entre start et end (bornes incluses).

        Raises:
            RequestValidationError: Si start est posterieur a end
        """
        # Bornes avec fuseau converties en UTC, bornes naives supposees UTC
        start, end = to_naive_utc(start), to_naive_utc(end)
        if start > end:
            raise RequestValidationError({"start": "start must not be after end"})
        page_request = self._page_request(page, size, sort_by, sort_dir)
        return self._repository.list_by_date_range(start, end, page_request)

    def list_by_customer_and_status(
        self, customer_id: int, status: OrderStatus
    ) -> list[Order]:
        """Liste les commandes d'un client dans un statut donne."""
        return self._repository.list_by_customer_and_status(customer_id, status)

    def _page_request(
        self,
        page: int,
        size: Optional[int],
        sort_by: Optional[str],
        sort_dir: Optional[str],
    ) -> PageRequest:
        """Construit et valide la page demandee."""
        size = self._default_page_size if size is None else size
        sort_by = sort_by or DEFAULT_SORT_FIELD
        errors: dict[str, str] = {}

        if page < 0:
            errors["page"] = "Page index must not be negative"
        if size < 1 or size > self._max_page_size:
            errors["size"] = f"Page size must be between 1 and {self._max_page_size}"
        if sort_by not in SORTABLE_FIELDS:
            errors["sortBy"] = (
                f"Unknown sort field '{sort_by}', expected one of: "
                + ", ".join(sorted(SORTABLE_FIELDS))
            )
        if errors:
            raise RequestValidationError(errors)

        return PageRequest(
            page=page,
            size=size,
            sort_field=sort_by,
            sort_direction=SortDirection.parse(sort_dir),
        )

    # ------------------------------------------------------------------
    # Changement de statut
    # ------------------------------------------------------------------

    def update_status(
        self,
        order_id: int,
        new_status: Optional[OrderStatus],
        expected_version: Optional[int] = None,
    ) -> Order:
        """
        Change le statut d'une commande.

        Lecture, validation de la transition et ecriture conditionnelle sur la
        version lue forment une seule operation : si la commande a ete
        modifiee entre-temps, l'ecriture est refusee.

        Args:
            order_id: Commande a modifier
            new_status: Statut demande
            expected_version: Version connue de l'appelant (optionnelle)

        Returns:
            La commande mise a jour (version incrementee)

        Raises:
            RequestValidationError: Si new_status est absent
            NotFoundError: Si la commande n'existe pas
            InvalidOperationError: Si la transition n'est pas autorisee
            ConcurrencyConflictError: Si la version a change
        """
        if new_status is None:
            raise RequestValidationError({"status": "Status is required"})

        logger.info(
            "Changement de statut demande",
            order_id=order_id,
            new_status=new_status.value,
        )
        order = self.get_order(order_id)

        if expected_version is not None and expected_version != order.version:
            logger.warning(
                "Version obsolete fournie par l'appelant",
                order_id=order_id,
                expected_version=expected_version,
                current_version=order.version,
            )
            raise ConcurrencyConflictError(order_id, expected_version)

        try:
            check_transition(order.status, new_status)
        except OrderServiceError as e:
            logger.warning(
                "Transition de statut refusee",
                order_id=order_id,
                current=order.status.value,
                requested=new_status.value,
                reason=e.message,
            )
            raise

        read_version = order.version
        updated = replace(
            order,
            status=new_status,
            version=read_version + 1,
            updated_at=self._clock(),
        )
        saved = self._repository.update_status(updated, expected_version=read_version)
        logger.info(
            "Statut de commande mis a jour",
            order_id=order_id,
            status=saved.status.value,
            version=saved.version,
        )
        return saved
