"""
Models du catalogue: MenuCategory, MenuItem et RecipeLine.
"""
from decimal import Decimal
from typing import Optional, List, TYPE_CHECKING

from sqlalchemy import Boolean, Integer, Text, Numeric, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column, relationship

from restopos.models.base import Base, BigIntPK, TimestampMixin

if TYPE_CHECKING:
    from restopos.models.ingredient import Ingredient
    from restopos.models.order import OrderItem


class MenuCategory(Base, TimestampMixin):
    """Categorie du menu (Entrees, Grillades, Boissons...)."""
    __tablename__ = "menu_categories"

    id: Mapped[int] = mapped_column(BigIntPK, primary_key=True)
    name: Mapped[str] = mapped_column(Text, nullable=False)
    icon: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    color: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    sort_order: Mapped[int] = mapped_column(Integer, default=0, nullable=False)

    items: Mapped[List["MenuItem"]] = relationship(back_populates="category")

    def __repr__(self) -> str:
        return f"<MenuCategory(id={self.id}, name='{self.name}')>"


class MenuItem(Base, TimestampMixin):
    """
    Article vendable du menu.

    Attributes:
        price: Prix de vente
        recipe: Lignes de recette ordonnees (quantite par unite vendue)
        recipe_cost: Cout de la recette au cout moyen courant
        profit_margin: Marge en pourcentage du prix
        is_available: Disponible a la commande
    """
    __tablename__ = "menu_items"

    id: Mapped[int] = mapped_column(BigIntPK, primary_key=True)
    name: Mapped[str] = mapped_column(Text, nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    price: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    category_id: Mapped[Optional[int]] = mapped_column(
        BigIntPK,
        ForeignKey("menu_categories.id", ondelete="SET NULL"),
        nullable=True,
        index=True
    )
    is_available: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    recipe_cost: Mapped[Decimal] = mapped_column(Numeric(12, 4), default=Decimal("0"), nullable=False)
    profit_margin: Mapped[Decimal] = mapped_column(Numeric(7, 2), default=Decimal("0"), nullable=False)

    # Relations
    category: Mapped[Optional["MenuCategory"]] = relationship(back_populates="items")
    recipe: Mapped[List["RecipeLine"]] = relationship(
        back_populates="menu_item",
        cascade="all, delete-orphan",
        order_by="RecipeLine.position"
    )
    # Pas de cascade: la suppression met order_items.menu_item_id a NULL
    order_items: Mapped[List["OrderItem"]] = relationship(back_populates="menu_item")

    @property
    def profit(self) -> Decimal:
        """Profit unitaire (prix - cout recette)."""
        return self.price - self.recipe_cost

    def __repr__(self) -> str:
        return f"<MenuItem(id={self.id}, name='{self.name}', price={self.price})>"


class RecipeLine(Base):
    """Ligne de recette: quantite d'ingredient consommee par unite vendue."""
    __tablename__ = "menu_item_recipe_lines"

    id: Mapped[int] = mapped_column(BigIntPK, primary_key=True)
    menu_item_id: Mapped[int] = mapped_column(
        BigIntPK,
        ForeignKey("menu_items.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )
    ingredient_id: Mapped[int] = mapped_column(
        BigIntPK,
        ForeignKey("ingredients.id", ondelete="RESTRICT"),
        nullable=False,
        index=True
    )
    quantity: Mapped[Decimal] = mapped_column(Numeric(12, 3), nullable=False)
    position: Mapped[int] = mapped_column(Integer, default=0, nullable=False)

    menu_item: Mapped["MenuItem"] = relationship(back_populates="recipe")
    ingredient: Mapped["Ingredient"] = relationship(back_populates="recipe_lines")

    def __repr__(self) -> str:
        return f"<RecipeLine(menu_item_id={self.menu_item_id}, ingredient_id={self.ingredient_id}, qty={self.quantity})>"
