"""
Service du journal d'ingredients.

Seul ce service modifie store_stock, kitchen_stock et cost_per_unit.
Chaque mutation laisse un enregistrement dans le journal de stock.
"""
import logging
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from restopos.core.exceptions import (
    IngredientNotFound,
    InsufficientStock,
    InvalidInput,
    InvalidQuantity,
)
from restopos.core.numbers import (
    positive_quantity,
    quantize_cost,
    quantize_qty,
    to_decimal,
)
from restopos.core.optimistic_lock import translate_stale_data
from restopos.models.ingredient import Ingredient, StockLocation
from restopos.models.stock import (
    StockPurchase,
    StockTransfer,
    StockRemoval,
    StockSale,
    OrderStockMovement,
    StockMovementKind,
)
from restopos.repositories.ingredient import IngredientRepository
from restopos.repositories.stock import StockLedgerRepository
from restopos.services.events import TOPIC_INGREDIENTS, mark_changed

logger = logging.getLogger(__name__)

# Une commande ne doit jamais echouer faute de stock cuisine: la deduction
# est ecretee a zero et l'ecart est trace dans OrderStockMovement.
KITCHEN_DEDUCTION_POLICY = "clamp"

RECEIPT_REASON = "Stock received"
DEFAULT_TRANSFER_REASONS = {
    (StockLocation.STORE, StockLocation.KITCHEN): "Transfer to kitchen",
    (StockLocation.KITCHEN, StockLocation.STORE): "Return to store",
}

SEVERITY_CRITICAL = "critical"
SEVERITY_WARNING = "warning"


@dataclass(frozen=True)
class LowStockAlert:
    """Alerte de stock bas sur le stock total d'un ingredient."""
    ingredient_id: int
    name: str
    unit: str
    store_stock: Decimal
    kitchen_stock: Decimal
    total_stock: Decimal
    threshold: Decimal
    severity: str


def _location(value) -> StockLocation:
    try:
        return StockLocation(value)
    except ValueError as exc:
        raise InvalidInput(f"Unknown stock location: {value!r}") from exc


class IngredientLedgerService:
    """
    Service du stock d'ingredients.

    Responsabilites:
    - Achats avec cout moyen pondere
    - Transferts reserve <-> cuisine
    - Retraits et ventes directes
    - Deduction / restitution du stock cuisine pour les commandes
    - Alertes de stock bas et valorisation
    """

    def __init__(
        self,
        ingredient_repo: IngredientRepository,
        stock_repo: StockLedgerRepository,
    ):
        self.ingredient_repo = ingredient_repo
        self.stock_repo = stock_repo

    # =========================================================================
    # Helpers
    # =========================================================================

    def _lock(self, ingredient_id: int) -> Ingredient:
        ingredient = self.ingredient_repo.get_for_update(ingredient_id)
        if ingredient is None:
            raise IngredientNotFound(ingredient_id)
        return ingredient

    def _changed(self) -> None:
        mark_changed(self.ingredient_repo.session, TOPIC_INGREDIENTS)

    # =========================================================================
    # Mutations
    # =========================================================================

    def add_purchase(
        self,
        ingredient_id: int,
        quantity: Decimal,
        unit_cost: Decimal,
        supplier: Optional[str] = None,
        notes: Optional[str] = None,
    ) -> StockPurchase:
        """
        Enregistre un achat en reserve et recalcule le cout moyen pondere.

        new_cost = (store * old_cost + quantity * unit_cost) / (store + quantity)

        Args:
            ingredient_id: ID de l'ingredient
            quantity: Quantite achetee (> 0)
            unit_cost: Cout unitaire d'achat (>= 0)
            supplier: Fournisseur
            notes: Notes

        Returns:
            L'achat enregistre

        Raises:
            InvalidQuantity: quantite <= 0 ou cout negatif
            IngredientNotFound: ingredient inconnu
        """
        quantity = positive_quantity(quantity)
        unit_cost = to_decimal(unit_cost, "unit_cost")
        if unit_cost < 0:
            raise InvalidQuantity(f"unit_cost must be >= 0, got {unit_cost}")
        unit_cost = quantize_cost(unit_cost)

        with translate_stale_data():
            ingredient = self._lock(ingredient_id)
            old_stock = ingredient.store_stock
            denominator = old_stock + quantity
            if denominator > 0:
                new_cost = (old_stock * ingredient.cost_per_unit + quantity * unit_cost) / denominator
            else:
                new_cost = unit_cost

            ingredient.cost_per_unit = quantize_cost(new_cost)
            ingredient.store_stock = quantize_qty(old_stock + quantity)

            purchase = self.stock_repo.add(StockPurchase(
                ingredient_id=ingredient.id,
                quantity=quantity,
                unit_cost=unit_cost,
                total_cost=quantize_cost(quantity * unit_cost),
                supplier=supplier,
                notes=notes,
            ))
            self.stock_repo.add(StockTransfer(
                ingredient_id=ingredient.id,
                quantity=quantity,
                from_location=StockLocation.STORE,
                to_location=StockLocation.STORE,
                reason=RECEIPT_REASON,
            ))

        self._changed()
        logger.info(
            f"Achat ingredient {ingredient.id}: {quantity} @ {unit_cost}, "
            f"cout moyen {ingredient.cost_per_unit}"
        )
        return purchase

    def transfer(
        self,
        ingredient_id: int,
        quantity: Decimal,
        from_location: StockLocation,
        to_location: StockLocation,
        reason: Optional[str] = None,
    ) -> StockTransfer:
        """
        Transfere du stock entre reserve et cuisine. Le stock total est inchange.

        Raises:
            InvalidInput: emplacements identiques
            InsufficientStock: quantite > stock source (rien n'est modifie)
        """
        quantity = positive_quantity(quantity)
        source = _location(from_location)
        destination = _location(to_location)
        if source == destination:
            raise InvalidInput("from_location and to_location must differ")

        with translate_stale_data():
            ingredient = self._lock(ingredient_id)
            available = ingredient.stock_at(source)
            if quantity > available:
                raise InsufficientStock(
                    ingredient_id=ingredient.id,
                    requested=quantity,
                    available=available,
                    location=source.value,
                )

            if source == StockLocation.STORE:
                ingredient.store_stock = quantize_qty(ingredient.store_stock - quantity)
                ingredient.kitchen_stock = quantize_qty(ingredient.kitchen_stock + quantity)
            else:
                ingredient.kitchen_stock = quantize_qty(ingredient.kitchen_stock - quantity)
                ingredient.store_stock = quantize_qty(ingredient.store_stock + quantity)

            transfer = self.stock_repo.add(StockTransfer(
                ingredient_id=ingredient.id,
                quantity=quantity,
                from_location=source,
                to_location=destination,
                reason=(reason or "").strip() or DEFAULT_TRANSFER_REASONS[(source, destination)],
            ))

        self._changed()
        logger.info(f"Transfert ingredient {ingredient.id}: {quantity} {source.value} -> {destination.value}")
        return transfer

    def transfer_to_kitchen(
        self, ingredient_id: int, quantity: Decimal, reason: Optional[str] = None
    ) -> StockTransfer:
        return self.transfer(ingredient_id, quantity, StockLocation.STORE, StockLocation.KITCHEN, reason)

    def transfer_to_store(
        self, ingredient_id: int, quantity: Decimal, reason: Optional[str] = None
    ) -> StockTransfer:
        return self.transfer(ingredient_id, quantity, StockLocation.KITCHEN, StockLocation.STORE, reason)

    def remove(
        self,
        ingredient_id: int,
        quantity: Decimal,
        reason: str,
        location: StockLocation,
    ) -> StockRemoval:
        """
        Retire du stock (perte, casse...). La raison est obligatoire.

        Raises:
            InvalidInput: raison vide
            InsufficientStock: quantite > stock de l'emplacement
        """
        quantity = positive_quantity(quantity)
        location = _location(location)
        reason = (reason or "").strip()
        if not reason:
            raise InvalidInput("A removal reason is required")

        with translate_stale_data():
            ingredient = self._lock(ingredient_id)
            available = ingredient.stock_at(location)
            if quantity > available:
                raise InsufficientStock(
                    ingredient_id=ingredient.id,
                    requested=quantity,
                    available=available,
                    location=location.value,
                )

            if location == StockLocation.STORE:
                ingredient.store_stock = quantize_qty(available - quantity)
            else:
                ingredient.kitchen_stock = quantize_qty(available - quantity)

            removal = self.stock_repo.add(StockRemoval(
                ingredient_id=ingredient.id,
                quantity=quantity,
                location=location,
                reason=reason,
            ))

        self._changed()
        logger.info(f"Retrait ingredient {ingredient.id}: {quantity} ({location.value}) - {reason}")
        return removal

    def sell(
        self,
        ingredient_id: int,
        quantity: Decimal,
        sale_price: Decimal,
        customer_name: Optional[str] = None,
        notes: Optional[str] = None,
    ) -> StockSale:
        """
        Vente directe depuis la reserve.

        Le cout enregistre est le cout moyen au moment de la vente;
        profit = (sale_price - cost_per_unit) * quantity.
        """
        quantity = positive_quantity(quantity)
        sale_price = to_decimal(sale_price, "sale_price")
        if sale_price < 0:
            raise InvalidQuantity(f"sale_price must be >= 0, got {sale_price}")
        sale_price = quantize_cost(sale_price)

        with translate_stale_data():
            ingredient = self._lock(ingredient_id)
            if quantity > ingredient.store_stock:
                raise InsufficientStock(
                    ingredient_id=ingredient.id,
                    requested=quantity,
                    available=ingredient.store_stock,
                    location=StockLocation.STORE.value,
                )

            cost = ingredient.cost_per_unit
            total_cost = quantize_cost(cost * quantity)
            total_sale = quantize_cost(sale_price * quantity)
            ingredient.store_stock = quantize_qty(ingredient.store_stock - quantity)

            sale = self.stock_repo.add(StockSale(
                ingredient_id=ingredient.id,
                quantity=quantity,
                cost_per_unit=cost,
                sale_price=sale_price,
                total_cost=total_cost,
                total_sale=total_sale,
                profit=total_sale - total_cost,
                customer_name=customer_name,
                notes=notes,
            ))

        self._changed()
        logger.info(f"Vente directe ingredient {ingredient.id}: {quantity} @ {sale_price}")
        return sale

    # =========================================================================
    # Hooks du moteur de commandes
    # =========================================================================

    def deduct_for_order(
        self,
        ingredient_id: int,
        quantity: Decimal,
        order_id: Optional[int] = None,
    ) -> Optional[OrderStockMovement]:
        """
        Deduit du stock cuisine pour une commande, ecrete a zero.

        Ne leve jamais InsufficientStock. Un ingredient inconnu retourne None
        pour que l'appelant le signale comme non resolu.
        """
        requested = quantize_qty(to_decimal(quantity, "quantity"))
        with translate_stale_data():
            ingredient = self.ingredient_repo.get_for_update(ingredient_id)
            if ingredient is None:
                logger.warning(f"Deduction ignoree: ingredient {ingredient_id} introuvable (commande {order_id})")
                return None

            applied = min(requested, ingredient.kitchen_stock)
            ingredient.kitchen_stock = quantize_qty(ingredient.kitchen_stock - applied)
            if applied < requested:
                logger.warning(
                    f"Stock cuisine insuffisant pour ingredient {ingredient.id}: "
                    f"demande {requested}, deduit {applied} (commande {order_id})"
                )

            movement = self.stock_repo.add(OrderStockMovement(
                order_id=order_id,
                ingredient_id=ingredient.id,
                kind=StockMovementKind.DEDUCT,
                requested_quantity=requested,
                applied_quantity=applied,
            ))

        self._changed()
        return movement

    def restore_for_order(
        self,
        ingredient_id: int,
        quantity: Decimal,
        order_id: Optional[int] = None,
    ) -> Optional[OrderStockMovement]:
        """
        Restitue du stock cuisine (annulation). Ajout inconditionnel:
        apres une deduction ecretee, le stock peut depasser sa valeur d'origine.
        """
        requested = quantize_qty(to_decimal(quantity, "quantity"))
        with translate_stale_data():
            ingredient = self.ingredient_repo.get_for_update(ingredient_id)
            if ingredient is None:
                logger.warning(f"Restitution ignoree: ingredient {ingredient_id} introuvable (commande {order_id})")
                return None

            ingredient.kitchen_stock = quantize_qty(ingredient.kitchen_stock + requested)
            movement = self.stock_repo.add(OrderStockMovement(
                order_id=order_id,
                ingredient_id=ingredient.id,
                kind=StockMovementKind.RESTORE,
                requested_quantity=requested,
                applied_quantity=requested,
            ))

        self._changed()
        return movement

    # =========================================================================
    # Lectures
    # =========================================================================

    def get_low_stock_alerts(self) -> List[LowStockAlert]:
        """
        Ingredients dont le stock total est au niveau du seuil ou en dessous.

        Severite "critical" si total <= seuil / 2, sinon "warning".
        """
        alerts = []
        for ingredient in self.ingredient_repo.list_all():
            if not ingredient.is_low:
                continue
            total = ingredient.total_stock
            threshold = ingredient.low_stock_threshold
            severity = SEVERITY_CRITICAL if total <= threshold / 2 else SEVERITY_WARNING
            alerts.append(LowStockAlert(
                ingredient_id=ingredient.id,
                name=ingredient.name,
                unit=ingredient.unit.value,
                store_stock=ingredient.store_stock,
                kitchen_stock=ingredient.kitchen_stock,
                total_stock=total,
                threshold=threshold,
                severity=severity,
            ))
        alerts.sort(key=lambda a: (a.severity != SEVERITY_CRITICAL, a.name))
        return alerts

    def get_purchase_history(
        self,
        ingredient_id: Optional[int] = None,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
    ) -> List[StockPurchase]:
        return self.stock_repo.get_purchases(ingredient_id, start, end)

    def get_transfer_history(
        self,
        ingredient_id: Optional[int] = None,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
    ) -> List[StockTransfer]:
        return self.stock_repo.get_transfers(ingredient_id, start, end)

    def get_removals(
        self,
        ingredient_id: Optional[int] = None,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
    ) -> List[StockRemoval]:
        return self.stock_repo.get_removals(ingredient_id, start, end)

    def get_sales(
        self,
        ingredient_id: Optional[int] = None,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
    ) -> List[StockSale]:
        return self.stock_repo.get_sales(ingredient_id, start, end)

    def calculate_stock_value(self) -> Decimal:
        """Valeur du stock: somme (reserve + cuisine) * cout moyen."""
        total = sum(
            (ingredient.stock_value for ingredient in self.ingredient_repo.list_all()),
            Decimal("0"),
        )
        return quantize_cost(total)
