"""
Moteur de commandes.

Machine a etats:
    pending -> completed  (settle)
    pending -> cancelled  (cancel)

La creation deduit le stock cuisine via IngredientLedgerService et occupe
la table pour une commande sur place. L'annulation restitue le stock selon
la recette courante des articles. Chaque operation s'execute dans la
transaction de la session: les services ne font que flush().
"""
import enum
import logging
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Callable, Dict, List, Optional

from restopos.core.config import get_settings
from restopos.core.exceptions import (
    EmptyCart,
    InvalidDiscount,
    InvalidOrderTransition,
    InvalidQuantity,
    MenuItemNotFound,
    OrderNotFound,
    TableNotFound,
    TableOccupied,
    WaiterNotFound,
)
from restopos.core.numbers import quantize_money, quantize_qty, to_decimal
from restopos.models.base import utc_now
from restopos.models.menu import MenuItem
from restopos.models.order import (
    DiscountType,
    Order,
    OrderItem,
    OrderStatus,
    OrderType,
    PaymentMethod,
)
from restopos.models.stock import OrderStockMovement
from restopos.models.table import RestaurantTable, Waiter
from restopos.repositories.menu import MenuItemRepository
from restopos.repositories.order import OrderRepository
from restopos.repositories.table import WaiterRepository
from restopos.services.events import TOPIC_ORDERS, mark_changed
from restopos.services.ledger import IngredientLedgerService
from restopos.services.tables import TableRegistryService

logger = logging.getLogger(__name__)

ORDER_NUMBER_PREFIX = "ORD-"
_BASE36 = "0123456789ABCDEFGHIJKLMNOPQRSTUVWXYZ"


# =============================================================================
# Types
# =============================================================================

class OrderEntryPolicy(str, enum.Enum):
    """Etat initial d'une commande a sa creation."""
    ALWAYS_PENDING = "always_pending"
    AUTO_COMPLETE_NON_DINE_IN = "auto_complete_non_dine_in"

    def initial_status(self, order_type: OrderType) -> OrderStatus:
        if self == OrderEntryPolicy.AUTO_COMPLETE_NON_DINE_IN and order_type != OrderType.DINE_IN:
            return OrderStatus.COMPLETED
        return OrderStatus.PENDING


@dataclass(frozen=True)
class CartLine:
    """Ligne de panier: article et quantite entiere positive."""
    menu_item_id: int
    quantity: int = 1
    notes: Optional[str] = None


@dataclass
class Cart:
    """Panier ephemere, resolu au moment de la validation."""
    lines: List[CartLine] = field(default_factory=list)

    def add(self, menu_item_id: int, quantity: int = 1, notes: Optional[str] = None) -> "Cart":
        self.lines.append(CartLine(menu_item_id=menu_item_id, quantity=quantity, notes=notes))
        return self

    @property
    def is_empty(self) -> bool:
        return not self.lines


@dataclass
class OrderDetails:
    """Metadonnees d'une commande (hors panier)."""
    order_type: OrderType = OrderType.DINE_IN
    payment_method: PaymentMethod = PaymentMethod.CASH
    table_id: Optional[int] = None
    waiter_id: Optional[int] = None
    customer_name: Optional[str] = None
    discount_type: DiscountType = DiscountType.FIXED
    discount_value: Decimal = Decimal("0")
    discount_reason: Optional[str] = None


@dataclass(frozen=True)
class OrderTotals:
    subtotal: Decimal
    tax: Decimal
    discount: Decimal
    total: Decimal


@dataclass(frozen=True)
class UnresolvedReference:
    """Reference (article ou ingredient) introuvable lors d'un mouvement de stock."""
    kind: str
    id: Optional[int]
    order_item_id: Optional[int] = None


@dataclass
class OrderCreation:
    """Commande creee et rapport de deduction du stock cuisine."""
    order: Order
    movements: List[OrderStockMovement] = field(default_factory=list)
    unresolved: List[UnresolvedReference] = field(default_factory=list)

    @property
    def clamped(self) -> List[OrderStockMovement]:
        """Deductions ecretees faute de stock cuisine suffisant."""
        return [m for m in self.movements if m.was_clamped]


@dataclass
class CancellationResult:
    """Commande annulee, stock restitue et references non resolues."""
    order: Order
    restored: List[OrderStockMovement] = field(default_factory=list)
    unresolved: List[UnresolvedReference] = field(default_factory=list)

    @property
    def is_partial(self) -> bool:
        return bool(self.unresolved)


# =============================================================================
# Fonctions pures
# =============================================================================

def to_base36(value: int) -> str:
    if value < 0:
        raise ValueError("value must be >= 0")
    if value == 0:
        return "0"
    digits = []
    while value:
        value, remainder = divmod(value, 36)
        digits.append(_BASE36[remainder])
    return "".join(reversed(digits))


def generate_order_number(now: datetime) -> str:
    """'ORD-' + horodatage en millisecondes, en base 36 majuscule."""
    return ORDER_NUMBER_PREFIX + to_base36(int(now.timestamp() * 1000))


def calculate_totals(
    subtotal: Decimal,
    discount_type: DiscountType,
    discount_value: Decimal,
    tax_rate: Decimal,
    gst_enabled: bool,
) -> OrderTotals:
    """
    Calcule taxe, remise et total.

    La remise en pourcentage porte sur le sous-total (hors taxe).

    Raises:
        InvalidDiscount: remise negative, pourcentage > 100, ou total negatif
    """
    subtotal = quantize_money(Decimal(subtotal))
    value = to_decimal(discount_value, "discount_value")
    if value < 0:
        raise InvalidDiscount(f"Discount must be >= 0, got {value}")

    discount_type = DiscountType(discount_type)
    if discount_type == DiscountType.PERCENTAGE:
        if value > 100:
            raise InvalidDiscount(f"Percentage discount must be <= 100, got {value}")
        discount = subtotal * value / 100
    else:
        discount = value
    discount = quantize_money(discount)

    tax = quantize_money(subtotal * Decimal(tax_rate) / 100) if gst_enabled else Decimal("0.00")
    total = subtotal + tax - discount
    if total < 0:
        raise InvalidDiscount(
            f"Discount {discount} exceeds order amount {subtotal + tax}",
            details={"discount": str(discount), "amount": str(subtotal + tax)},
        )
    return OrderTotals(subtotal=subtotal, tax=tax, discount=discount, total=quantize_money(total))


# =============================================================================
# Service
# =============================================================================

class OrderEngineService:
    """
    Service du cycle de vie des commandes.

    Responsabilites:
    - Creation (totaux, deduction stock cuisine, occupation table)
    - Modification des commandes en cours (sans effet sur le stock)
    - Reglement et annulation (restitution du stock)
    - Consultation des commandes
    """

    def __init__(
        self,
        order_repo: OrderRepository,
        menu_repo: MenuItemRepository,
        waiter_repo: WaiterRepository,
        ledger: IngredientLedgerService,
        tables: TableRegistryService,
        tax_rate: Optional[Decimal] = None,
        gst_enabled: Optional[bool] = None,
        entry_policy: Optional[OrderEntryPolicy] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        settings = get_settings()
        self.order_repo = order_repo
        self.menu_repo = menu_repo
        self.waiter_repo = waiter_repo
        self.ledger = ledger
        self.tables = tables
        self.tax_rate = Decimal(settings.TAX_RATE if tax_rate is None else tax_rate)
        self.gst_enabled = settings.GST_ENABLED if gst_enabled is None else gst_enabled
        self.entry_policy = OrderEntryPolicy(entry_policy or settings.ORDER_ENTRY_POLICY)
        self.clock = clock or utc_now

    # =========================================================================
    # Helpers
    # =========================================================================

    def _changed(self) -> None:
        mark_changed(self.order_repo.session, TOPIC_ORDERS)

    def _get_order(self, order_id: int) -> Order:
        order = self.order_repo.get_with_items(order_id)
        if order is None:
            raise OrderNotFound(order_id)
        return order

    def _require_pending(self, order: Order, action: str) -> None:
        if order.status != OrderStatus.PENDING:
            raise InvalidOrderTransition(order.id, order.status.value, action)

    def _resolve_cart(self, cart: Cart) -> Dict[int, MenuItem]:
        """Verifie le panier et charge les articles avec leur recette."""
        if cart is None or cart.is_empty:
            raise EmptyCart()
        for line in cart.lines:
            if not isinstance(line.quantity, int) or isinstance(line.quantity, bool) or line.quantity < 1:
                raise InvalidQuantity(
                    f"Cart quantity must be a positive integer, got {line.quantity!r}"
                )
        ids = list({line.menu_item_id for line in cart.lines})
        items = {item.id: item for item in self.menu_repo.get_many_with_recipe(ids)}
        for line in cart.lines:
            if line.menu_item_id not in items:
                raise MenuItemNotFound(line.menu_item_id)
        return items

    def _totals(self, cart: Cart, items: Dict[int, MenuItem], details: OrderDetails) -> OrderTotals:
        subtotal = sum(
            (items[line.menu_item_id].price * line.quantity for line in cart.lines),
            Decimal("0"),
        )
        return calculate_totals(
            subtotal=subtotal,
            discount_type=details.discount_type,
            discount_value=details.discount_value,
            tax_rate=self.tax_rate,
            gst_enabled=self.gst_enabled,
        )

    def _build_items(self, cart: Cart, items: Dict[int, MenuItem]) -> List[OrderItem]:
        result = []
        for position, line in enumerate(cart.lines):
            menu_item = items[line.menu_item_id]
            result.append(OrderItem(
                menu_item_id=menu_item.id,
                menu_item_name=menu_item.name,
                quantity=line.quantity,
                unit_price=menu_item.price,
                total=quantize_money(menu_item.price * line.quantity),
                notes=line.notes,
                position=position,
            ))
        return result

    def _target_table_id(self, details: OrderDetails) -> Optional[int]:
        if OrderType(details.order_type) != OrderType.DINE_IN:
            return None
        return details.table_id

    def _check_table(self, table_id: int, order_id: Optional[int] = None) -> RestaurantTable:
        """La table existe et n'est pas occupee par une autre commande."""
        table = self.tables.table_repo.get_for_update(table_id)
        if table is None:
            raise TableNotFound(table_id)
        if table.is_occupied and table.current_order_id != order_id:
            raise TableOccupied(table.id, table.current_order_id)
        return table

    def _resolve_waiter(self, waiter_id: Optional[int]) -> Optional[Waiter]:
        if waiter_id is None:
            return None
        waiter = self.waiter_repo.get(waiter_id)
        if waiter is None:
            raise WaiterNotFound(waiter_id)
        return waiter

    def _unique_order_number(self, now: datetime) -> str:
        millis = int(now.timestamp() * 1000)
        number = ORDER_NUMBER_PREFIX + to_base36(millis)
        while self.order_repo.get_by_number(number) is not None:
            millis += 1
            number = ORDER_NUMBER_PREFIX + to_base36(millis)
        return number

    # =========================================================================
    # Creation
    # =========================================================================

    def create(self, cart: Cart, details: OrderDetails) -> Order:
        """Cree une commande. Voir create_with_report."""
        return self.create_with_report(cart, details).order

    def create_with_report(self, cart: Cart, details: OrderDetails) -> OrderCreation:
        """
        Cree une commande et deduit le stock cuisine.

        Toutes les verifications precedent la premiere ecriture.

        Args:
            cart: Panier (non vide)
            details: Type, paiement, table, serveur, remise

        Returns:
            OrderCreation avec la commande et les mouvements de stock

        Raises:
            EmptyCart: panier vide
            MenuItemNotFound: article inconnu
            InvalidDiscount: remise invalide ou total negatif
            TableNotFound / TableOccupied: table sur place invalide
        """
        items = self._resolve_cart(cart)
        totals = self._totals(cart, items, details)
        order_type = OrderType(details.order_type)

        table_id = self._target_table_id(details)
        table = self._check_table(table_id) if table_id is not None else None
        waiter = self._resolve_waiter(details.waiter_id)

        now = self.clock()
        status = self.entry_policy.initial_status(order_type)
        order = Order(
            order_number=self._unique_order_number(now),
            subtotal=totals.subtotal,
            tax=totals.tax,
            discount=totals.discount,
            discount_type=DiscountType(details.discount_type),
            discount_value=quantize_money(to_decimal(details.discount_value, "discount_value")),
            discount_reason=details.discount_reason,
            total=totals.total,
            payment_method=PaymentMethod(details.payment_method),
            order_type=order_type,
            status=status,
            table_id=table.id if table else None,
            table_number=table.number if table else None,
            waiter_id=waiter.id if waiter else None,
            waiter_name=waiter.name if waiter else None,
            customer_name=details.customer_name,
            created_at=now,
            completed_at=now if status == OrderStatus.COMPLETED else None,
            items=self._build_items(cart, items),
        )
        self.order_repo.session.add(order)
        self.order_repo.session.flush()

        result = OrderCreation(order=order)
        for line in cart.lines:
            for recipe_line in items[line.menu_item_id].recipe:
                quantity = quantize_qty(recipe_line.quantity * line.quantity)
                movement = self.ledger.deduct_for_order(recipe_line.ingredient_id, quantity, order.id)
                if movement is None:
                    result.unresolved.append(UnresolvedReference("ingredient", recipe_line.ingredient_id))
                else:
                    result.movements.append(movement)

        if table is not None and status == OrderStatus.PENDING:
            self.tables.occupy(table.id, order.id)

        self._changed()
        logger.info(
            f"Commande {order.order_number} creee: {order.order_type.value}, "
            f"total {order.total}, statut {order.status.value}"
        )
        if result.clamped:
            logger.warning(
                f"Commande {order.order_number}: {len(result.clamped)} deduction(s) ecretee(s) a zero"
            )
        return result

    # =========================================================================
    # Modification
    # =========================================================================

    def update(self, order_id: int, cart: Cart, details: OrderDetails) -> Order:
        """
        Remplace le contenu d'une commande en cours et recalcule les totaux.

        Le stock n'est PAS ajuste: seule la creation deduit.
        Si la table change, l'ancienne est liberee et la nouvelle occupee.

        Raises:
            OrderNotFound, InvalidOrderTransition, EmptyCart, MenuItemNotFound,
            InvalidDiscount, TableNotFound, TableOccupied
        """
        order = self._get_order(order_id)
        self._require_pending(order, "update")
        items = self._resolve_cart(cart)
        totals = self._totals(cart, items, details)

        new_table_id = self._target_table_id(details)
        new_table = None
        if new_table_id is not None and new_table_id != order.table_id:
            new_table = self._check_table(new_table_id, order_id=order.id)
        waiter = self._resolve_waiter(details.waiter_id)

        if new_table_id != order.table_id:
            if order.table_id is not None:
                self.tables.free(order.table_id)
            if new_table is not None:
                self.tables.occupy(new_table.id, order.id)
            order.table_id = new_table.id if new_table else None
            order.table_number = new_table.number if new_table else None

        order.items.clear()
        self.order_repo.session.flush()
        order.items.extend(self._build_items(cart, items))

        order.subtotal = totals.subtotal
        order.tax = totals.tax
        order.discount = totals.discount
        order.discount_type = DiscountType(details.discount_type)
        order.discount_value = quantize_money(to_decimal(details.discount_value, "discount_value"))
        order.discount_reason = details.discount_reason
        order.total = totals.total
        order.payment_method = PaymentMethod(details.payment_method)
        order.order_type = OrderType(details.order_type)
        order.waiter_id = waiter.id if waiter else None
        order.waiter_name = waiter.name if waiter else None
        order.customer_name = details.customer_name
        self.order_repo.session.flush()

        self._changed()
        logger.warning(
            f"Commande {order.order_number} modifiee: le stock cuisine n'est pas reajuste"
        )
        return order

    # =========================================================================
    # Transitions
    # =========================================================================

    def settle(self, order_id: int) -> Order:
        """Regle la commande: libere la table, statut completed. Aucun effet stock."""
        order = self._get_order(order_id)
        self._require_pending(order, "settle")

        if order.table_id is not None:
            self.tables.free(order.table_id)
        order.status = OrderStatus.COMPLETED
        order.completed_at = self.clock()
        self.order_repo.session.flush()

        self._changed()
        logger.info(f"Commande {order.order_number} reglee ({order.payment_method.value}, {order.total})")
        return order

    def cancel(self, order_id: int) -> CancellationResult:
        """
        Annule la commande: libere la table et restitue le stock cuisine
        selon la recette courante des articles.

        Les articles ou ingredients disparus sont ignores et listes dans
        CancellationResult.unresolved. La restitution n'echoue jamais.
        """
        order = self._get_order(order_id)
        self._require_pending(order, "cancel")

        if order.table_id is not None:
            self.tables.free(order.table_id)

        result = CancellationResult(order=order)
        menu_ids = [item.menu_item_id for item in order.items if item.menu_item_id is not None]
        menu_items = {m.id: m for m in self.menu_repo.get_many_with_recipe(menu_ids)}

        for item in order.items:
            menu_item = menu_items.get(item.menu_item_id) if item.menu_item_id is not None else None
            if menu_item is None:
                result.unresolved.append(UnresolvedReference("menu_item", item.menu_item_id, item.id))
                continue
            for recipe_line in menu_item.recipe:
                quantity = quantize_qty(recipe_line.quantity * item.quantity)
                movement = self.ledger.restore_for_order(recipe_line.ingredient_id, quantity, order.id)
                if movement is None:
                    result.unresolved.append(
                        UnresolvedReference("ingredient", recipe_line.ingredient_id, item.id)
                    )
                else:
                    result.restored.append(movement)

        order.status = OrderStatus.CANCELLED
        self.order_repo.session.flush()

        self._changed()
        if result.unresolved:
            logger.warning(
                f"Commande {order.order_number} annulee avec restitution partielle: "
                f"{len(result.unresolved)} reference(s) non resolue(s)"
            )
        else:
            logger.info(f"Commande {order.order_number} annulee, stock restitue")
        return result

    # =========================================================================
    # Lectures
    # =========================================================================

    def get_order(self, order_id: int) -> Order:
        return self._get_order(order_id)

    def list_orders(
        self,
        status: Optional[OrderStatus] = None,
        order_type: Optional[OrderType] = None,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
    ) -> List[Order]:
        return self.order_repo.list_filtered(status=status, order_type=order_type, start=start, end=end)

    def list_pending_orders(self) -> List[Order]:
        """Commandes en cours."""
        return self.order_repo.list_filtered(status=OrderStatus.PENDING)

