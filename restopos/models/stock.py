"""
Models du journal de stock.

Enregistrements immuables, ajoutes uniquement par IngredientLedgerService:
achats, transferts, retraits, ventes directes et mouvements lies aux commandes.
Jamais supprimes: la FK vers ingredients est en RESTRICT.
"""
import enum
from datetime import datetime
from decimal import Decimal
from typing import Optional, TYPE_CHECKING

from sqlalchemy import DateTime, Text, Numeric, ForeignKey, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from restopos.models.base import Base, BigIntPK, enum_type, utc_now
from restopos.models.ingredient import StockLocation

if TYPE_CHECKING:
    from restopos.models.ingredient import Ingredient


def _created_at() -> Mapped[datetime]:
    return mapped_column(
        DateTime(timezone=True),
        default=utc_now,
        server_default=func.now(),
        nullable=False,
        index=True
    )


def _ingredient_fk() -> Mapped[int]:
    return mapped_column(
        BigIntPK,
        ForeignKey("ingredients.id", ondelete="RESTRICT"),
        nullable=False,
        index=True
    )


class StockMovementKind(str, enum.Enum):
    """Sens d'un mouvement de stock lie a une commande."""
    DEDUCT = "deduct"
    RESTORE = "restore"


class StockPurchase(Base):
    """
    Achat d'ingredient (entree en reserve).

    Attributes:
        quantity: Quantite achetee
        unit_cost: Cout unitaire d'achat
        total_cost: quantity * unit_cost
        supplier: Fournisseur (optionnel)
    """
    __tablename__ = "stock_purchases"

    id: Mapped[int] = mapped_column(BigIntPK, primary_key=True)
    ingredient_id: Mapped[int] = _ingredient_fk()
    quantity: Mapped[Decimal] = mapped_column(Numeric(12, 3), nullable=False)
    unit_cost: Mapped[Decimal] = mapped_column(Numeric(12, 4), nullable=False)
    total_cost: Mapped[Decimal] = mapped_column(Numeric(14, 4), nullable=False)
    supplier: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    purchased_at: Mapped[datetime] = _created_at()

    ingredient: Mapped["Ingredient"] = relationship()

    def __repr__(self) -> str:
        return f"<StockPurchase(ingredient_id={self.ingredient_id}, qty={self.quantity}, unit_cost={self.unit_cost})>"


class StockTransfer(Base):
    """Transfert entre emplacements. store -> store materialise une reception d'achat."""
    __tablename__ = "stock_transfers"

    id: Mapped[int] = mapped_column(BigIntPK, primary_key=True)
    ingredient_id: Mapped[int] = _ingredient_fk()
    quantity: Mapped[Decimal] = mapped_column(Numeric(12, 3), nullable=False)
    from_location: Mapped[StockLocation] = mapped_column(
        enum_type(StockLocation, "stock_location"), nullable=False
    )
    to_location: Mapped[StockLocation] = mapped_column(
        enum_type(StockLocation, "stock_location"), nullable=False
    )
    reason: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[datetime] = _created_at()

    ingredient: Mapped["Ingredient"] = relationship()

    @property
    def is_receipt(self) -> bool:
        """Reception d'achat (store -> store)."""
        return self.from_location == self.to_location == StockLocation.STORE

    def __repr__(self) -> str:
        return (
            f"<StockTransfer(ingredient_id={self.ingredient_id}, qty={self.quantity}, "
            f"{self.from_location.value}->{self.to_location.value})>"
        )


class StockRemoval(Base):
    """Retrait de stock (perte, casse, peremption...). La raison est obligatoire."""
    __tablename__ = "stock_removals"

    id: Mapped[int] = mapped_column(BigIntPK, primary_key=True)
    ingredient_id: Mapped[int] = _ingredient_fk()
    quantity: Mapped[Decimal] = mapped_column(Numeric(12, 3), nullable=False)
    location: Mapped[StockLocation] = mapped_column(
        enum_type(StockLocation, "stock_location"), nullable=False
    )
    reason: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[datetime] = _created_at()

    ingredient: Mapped["Ingredient"] = relationship()

    def __repr__(self) -> str:
        return f"<StockRemoval(ingredient_id={self.ingredient_id}, qty={self.quantity}, reason='{self.reason}')>"


class StockSale(Base):
    """
    Vente directe d'ingredient depuis la reserve.

    Attributes:
        cost_per_unit: Cout moyen au moment de la vente
        sale_price: Prix de vente unitaire
        profit: (sale_price - cost_per_unit) * quantity
    """
    __tablename__ = "stock_sales"

    id: Mapped[int] = mapped_column(BigIntPK, primary_key=True)
    ingredient_id: Mapped[int] = _ingredient_fk()
    quantity: Mapped[Decimal] = mapped_column(Numeric(12, 3), nullable=False)
    cost_per_unit: Mapped[Decimal] = mapped_column(Numeric(12, 4), nullable=False)
    sale_price: Mapped[Decimal] = mapped_column(Numeric(12, 4), nullable=False)
    total_cost: Mapped[Decimal] = mapped_column(Numeric(14, 4), nullable=False)
    total_sale: Mapped[Decimal] = mapped_column(Numeric(14, 4), nullable=False)
    profit: Mapped[Decimal] = mapped_column(Numeric(14, 4), nullable=False)
    customer_name: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = _created_at()

    ingredient: Mapped["Ingredient"] = relationship()

    def __repr__(self) -> str:
        return f"<StockSale(ingredient_id={self.ingredient_id}, qty={self.quantity}, profit={self.profit})>"


class OrderStockMovement(Base):
    """
    Mouvement de stock cuisine provoque par une commande.

    applied_quantity < requested_quantity signale un ecretage a zero.
    """
    __tablename__ = "order_stock_movements"

    id: Mapped[int] = mapped_column(BigIntPK, primary_key=True)
    order_id: Mapped[Optional[int]] = mapped_column(
        BigIntPK,
        ForeignKey("orders.id", ondelete="SET NULL"),
        nullable=True,
        index=True
    )
    ingredient_id: Mapped[int] = _ingredient_fk()
    kind: Mapped[StockMovementKind] = mapped_column(
        enum_type(StockMovementKind, "stock_movement_kind"), nullable=False
    )
    requested_quantity: Mapped[Decimal] = mapped_column(Numeric(12, 3), nullable=False)
    applied_quantity: Mapped[Decimal] = mapped_column(Numeric(12, 3), nullable=False)
    created_at: Mapped[datetime] = _created_at()

    @property
    def was_clamped(self) -> bool:
        return self.applied_quantity < self.requested_quantity

    def __repr__(self) -> str:
        return (
            f"<OrderStockMovement(order_id={self.order_id}, ingredient_id={self.ingredient_id}, "
            f"kind={self.kind.value}, applied={self.applied_quantity})>"
        )
