"""
Entites de l'agregat commande.

Une Order possede en propre une sequence fixe d'OrderItem creees en meme
temps qu'elle. Le nom et le prix du produit sur chaque ligne sont des
instantanes du catalogue a la creation, jamais resynchronises ensuite.
"""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Optional

from src.core.value_objects.money import ZERO, to_money

MAX_SHIPPING_ADDRESS_LENGTH = 500
MAX_NOTES_LENGTH = 1000
INITIAL_VERSION = 0


class OrderStatus(Enum):
    """Statut d'une commande."""

    PENDING = "PENDING"
    CONFIRMED = "CONFIRMED"
    SHIPPED = "SHIPPED"
    DELIVERED = "DELIVERED"
    CANCELLED = "CANCELLED"


@dataclass(frozen=True)
class OrderItem:
    """
    Ligne de commande, immuable une fois creee.

    Attributs :
        product_id : Reference produit du catalogue (non revalidee ensuite)
        product_name : Instantane du nom du produit
        price : Instantane du prix unitaire, 2 decimales
        quantity : Quantite commandee, >= 1
        subtotal : price * quantity, calcule une seule fois
        id : ID en base, attribue a la persistance
    """

    product_id: int
    product_name: str
    price: Decimal
    quantity: int
    subtotal: Decimal
    id: Optional[int] = None

    def __post_init__(self) -> None:
        if self.quantity < 1:
            raise ValueError(f"quantity must be >= 1, got {self.quantity}")
        if self.price < ZERO:
            raise ValueError(f"price must not be negative, got {self.price}")
        if self.subtotal != to_money(self.price * self.quantity):
            raise ValueError(
                f"subtotal {self.subtotal} does not match "
                f"{self.price} x {self.quantity}"
            )

    @classmethod
    def create(
        cls,
        product_id: int,
        product_name: str,
        price: Decimal,
        quantity: int,
    ) -> "OrderItem":
        """Construit une ligne a partir d'un instantane catalogue et calcule son sous-total."""
        unit_price = to_money(price)
        return cls(
            product_id=product_id,
            product_name=product_name,
            price=unit_price,
            quantity=quantity,
            subtotal=to_money(unit_price * quantity),
        )


@dataclass
class Order:
    """
    Racine de l'agregat commande.

    Apres la creation, seuls status, version et updated_at changent. Tous les
    autres champs, sequence de lignes comprise, sont figes.

    Attributs :
        customer_id : Reference client externe (non validee ici)
        items : Lignes possedees, dans l'ordre de la requete
        total_amount : Somme des sous-totaux des lignes
        order_date : Horodatage de creation
        status : Statut courant du cycle de vie
        shipping_address : Texte libre optionnel, <= 500 caracteres
        notes : Texte libre optionnel, <= 1000 caracteres
        version : Jeton de concurrence optimiste
        created_at : Horodatage de creation de l'enregistrement
        updated_at : Horodatage de la derniere modification
        id : ID en base, attribue a la persistance
    """

    customer_id: int
    items: tuple[OrderItem, ...]
    total_amount: Decimal
    order_date: datetime
    status: OrderStatus = OrderStatus.PENDING
    shipping_address: Optional[str] = None
    notes: Optional[str] = None
    version: int = INITIAL_VERSION
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    id: Optional[int] = None

    def __post_init__(self) -> None:
        if not self.items:
            raise ValueError("an order must have at least one item")
        self.items = tuple(self.items)
        if self.total_amount != sum_subtotals(self.items):
            raise ValueError(
                f"total_amount {self.total_amount} does not match "
                f"the sum of item subtotals {sum_subtotals(self.items)}"
            )
        if self.shipping_address and len(self.shipping_address) > MAX_SHIPPING_ADDRESS_LENGTH:
            raise ValueError("shipping_address exceeds 500 characters")
        if self.notes and len(self.notes) > MAX_NOTES_LENGTH:
            raise ValueError("notes exceed 1000 characters")

    @classmethod
    def create(
        cls,
        customer_id: int,
        items: list[OrderItem],
        now: datetime,
        shipping_address: Optional[str] = None,
        notes: Optional[str] = None,
    ) -> "Order":
        """Assemble une nouvelle commande PENDING et calcule son total."""
        return cls(
            customer_id=customer_id,
            items=tuple(items),
            total_amount=sum_subtotals(items),
            order_date=now,
            status=OrderStatus.PENDING,
            shipping_address=shipping_address,
            notes=notes,
            version=INITIAL_VERSION,
            created_at=now,
            updated_at=now,
        )


def sum_subtotals(items) -> Decimal:
    """Somme exacte des sous-totaux d'une séquence de lignes."""
    total = ZERO
    for item in items:
        total += item.subtotal
    return to_money(total)
