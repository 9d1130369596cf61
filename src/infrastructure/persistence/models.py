"""
Modeles SQLModel pour la base de donnees des commandes.

Ces modeles representent les tables de la base de donnees.
Ils sont distincts des entites de domaine (dataclass dans core/entities/)
selon l'architecture hexagonale.

Tables:
- orders: Commandes (agregat racine)
- order_items: Lignes de commande, rattachees a une commande

Les montants sont stockes en centimes entiers (*_cents) : SQLite n'a pas de
type decimal natif et aucun montant ne doit transiter par un float.
Les horodatages sont des UTC sans fuseau, en colonnes DateTime explicites.
"""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import Column, DateTime
from sqlmodel import Field, Index, SQLModel


class OrderModel(SQLModel, table=True):
    """
    Modele representant une commande.

    La colonne version sert de jeton de concurrence optimiste : toute mise a
    jour est conditionnee a la version lue.
    """

    __tablename__ = "orders"
    __table_args__ = (
        Index("ix_orders_customer_order_date", "customer_id", "order_date"),
    )

    id: int | None = Field(default=None, primary_key=True)
    customer_id: int = Field(index=True)
    order_date: datetime = Field(sa_column=Column(DateTime, nullable=False, index=True))
    total_amount_cents: int
    status: str = Field(default="PENDING", max_length=20, index=True)
    shipping_address: str | None = Field(default=None, max_length=500)
    notes: str | None = Field(default=None, max_length=1000)
    version: int = Field(default=0)
    created_at: datetime = Field(sa_column=Column(DateTime, nullable=False))
    updated_at: datetime = Field(sa_column=Column(DateTime, nullable=False))


class OrderItemModel(SQLModel, table=True):
    """
    Modele representant une ligne de commande.

    Lie a une commande via order_id (foreign key). La colonne position
    conserve l'ordre des lignes de la requete de creation.
    """

    __tablename__ = "order_items"
    __table_args__ = (
        Index("ix_order_items_order_position", "order_id", "position"),
    )

    id: int | None = Field(default=None, primary_key=True)
    order_id: int = Field(foreign_key="orders.id", index=True)
    position: int
    product_id: int
    product_name: str = Field(max_length=255)
    quantity: int
    price_cents: int
    subtotal_cents: int
