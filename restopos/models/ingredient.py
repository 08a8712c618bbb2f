"""
Models Ingredient et IngredientCategory.

Les champs de stock (store_stock, kitchen_stock) et cost_per_unit ne sont
modifies que par IngredientLedgerService.
"""
import enum
from decimal import Decimal
from typing import Optional, List, TYPE_CHECKING

from sqlalchemy import Integer, Text, Numeric, ForeignKey, CheckConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from restopos.models.base import Base, BigIntPK, TimestampMixin, enum_type

if TYPE_CHECKING:
    from restopos.models.menu import RecipeLine


class IngredientUnit(str, enum.Enum):
    """Unites de mesure pour ingredients."""
    KILOGRAM = "kg"
    GRAM = "g"
    LITRE = "L"
    MILLILITRE = "ml"
    PIECES = "pcs"
    DOZEN = "dozen"


class StockLocation(str, enum.Enum):
    """Emplacements de stock."""
    STORE = "store"
    KITCHEN = "kitchen"


class IngredientCategory(Base, TimestampMixin):
    """Categorie d'ingredients (Viande, Legumes, ...)."""
    __tablename__ = "ingredient_categories"

    id: Mapped[int] = mapped_column(BigIntPK, primary_key=True)
    name: Mapped[str] = mapped_column(Text, nullable=False, unique=True)

    ingredients: Mapped[List["Ingredient"]] = relationship(back_populates="category")

    def __repr__(self) -> str:
        return f"<IngredientCategory(id={self.id}, name='{self.name}')>"


class Ingredient(Base, TimestampMixin):
    """
    Ingredient suivi en stock sur deux emplacements.

    Attributes:
        name: Nom unique de l'ingredient
        unit: Unite de mesure
        cost_per_unit: Cout moyen pondere par unite
        store_stock: Quantite en reserve
        kitchen_stock: Quantite en cuisine
        low_stock_threshold: Seuil d'alerte sur le stock total
        version_id: Compteur de verrouillage optimiste
    """
    __tablename__ = "ingredients"
    __table_args__ = (
        CheckConstraint("store_stock >= 0", name="ck_ingredients_store_stock_positive"),
        CheckConstraint("kitchen_stock >= 0", name="ck_ingredients_kitchen_stock_positive"),
        CheckConstraint("cost_per_unit >= 0", name="ck_ingredients_cost_positive"),
    )

    id: Mapped[int] = mapped_column(BigIntPK, primary_key=True)
    name: Mapped[str] = mapped_column(Text, nullable=False, unique=True)
    unit: Mapped[IngredientUnit] = mapped_column(
        enum_type(IngredientUnit, "ingredient_unit"),
        nullable=False,
        default=IngredientUnit.KILOGRAM
    )
    cost_per_unit: Mapped[Decimal] = mapped_column(Numeric(12, 4), default=Decimal("0"), nullable=False)
    store_stock: Mapped[Decimal] = mapped_column(Numeric(12, 3), default=Decimal("0"), nullable=False)
    kitchen_stock: Mapped[Decimal] = mapped_column(Numeric(12, 3), default=Decimal("0"), nullable=False)
    low_stock_threshold: Mapped[Decimal] = mapped_column(Numeric(12, 3), default=Decimal("0"), nullable=False)
    category_id: Mapped[Optional[int]] = mapped_column(
        BigIntPK,
        ForeignKey("ingredient_categories.id", ondelete="RESTRICT"),
        nullable=True,
        index=True
    )
    version_id: Mapped[int] = mapped_column(Integer, nullable=False)

    __mapper_args__ = {"version_id_col": version_id}

    # Relations
    category: Mapped[Optional["IngredientCategory"]] = relationship(back_populates="ingredients")
    recipe_lines: Mapped[List["RecipeLine"]] = relationship(back_populates="ingredient")

    @property
    def total_stock(self) -> Decimal:
        """Stock total (reserve + cuisine)."""
        return (self.store_stock or Decimal("0")) + (self.kitchen_stock or Decimal("0"))

    @property
    def stock_value(self) -> Decimal:
        """Valeur du stock au cout moyen pondere."""
        return self.total_stock * (self.cost_per_unit or Decimal("0"))

    @property
    def is_low(self) -> bool:
        """Le stock total est-il sous (ou au niveau du) seuil d'alerte."""
        return self.total_stock <= (self.low_stock_threshold or Decimal("0"))

    def stock_at(self, location: StockLocation) -> Decimal:
        """Quantite disponible a un emplacement."""
        if location == StockLocation.STORE:
            return self.store_stock
        return self.kitchen_stock

    def __repr__(self) -> str:
        return (
            f"<Ingredient(id={self.id}, name='{self.name}', "
            f"store={self.store_stock}, kitchen={self.kitchen_stock})>"
        )
