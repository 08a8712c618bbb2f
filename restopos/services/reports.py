"""
Service de reporting par journee commerciale.

Le cout des ventes est calcule avec le cout recette COURANT des articles;
les lignes dont l'article a ete supprime comptent pour zero.
Profit net = revenu - cout - depenses de la date.
"""
import logging
from collections import defaultdict
from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from typing import Callable, Dict, List, Optional

from restopos.core.config import get_settings
from restopos.core.numbers import quantize_money
from restopos.models.base import utc_now
from restopos.models.expense import ExpenseCategory
from restopos.models.order import Order, OrderStatus, PaymentMethod
from restopos.repositories.expense import ExpenseRepository
from restopos.repositories.menu import MenuItemRepository
from restopos.repositories.order import OrderRepository
from restopos.repositories.stock import StockLedgerRepository
from restopos.services.business_day import business_date, business_day_range, last_n_business_days

logger = logging.getLogger(__name__)

TOP_ITEMS_LIMIT = 5
ZERO = Decimal("0.00")


@dataclass(frozen=True)
class TopItem:
    name: str
    quantity: int
    revenue: Decimal


@dataclass
class DailyReport:
    """Rapport d'une journee commerciale."""
    business_date: date
    start: datetime
    end: datetime
    completed_orders: int = 0
    pending_orders: int = 0
    cancelled_orders: int = 0
    revenue: Decimal = ZERO
    tax: Decimal = ZERO
    discounts: Decimal = ZERO
    cost: Decimal = ZERO
    unresolved_items: int = 0
    expenses: Decimal = ZERO
    payment_breakdown: Dict[str, Decimal] = field(default_factory=dict)
    expense_breakdown: Dict[str, Decimal] = field(default_factory=dict)
    top_items: List[TopItem] = field(default_factory=list)

    @property
    def total_orders(self) -> int:
        return self.completed_orders + self.pending_orders + self.cancelled_orders

    @property
    def profit(self) -> Decimal:
        return self.revenue - self.cost

    @property
    def net_profit(self) -> Decimal:
        return self.revenue - self.cost - self.expenses

    @property
    def average_order_value(self) -> Decimal:
        if not self.completed_orders:
            return ZERO
        return quantize_money(self.revenue / self.completed_orders)


@dataclass(frozen=True)
class DailySales:
    business_date: date
    orders: int
    revenue: Decimal
    cost: Decimal

    @property
    def profit(self) -> Decimal:
        return self.revenue - self.cost


@dataclass(frozen=True)
class DirectSalesSummary:
    """Ventes directes d'ingredients sur une journee commerciale."""
    business_date: date
    sales: int
    total_sale: Decimal
    total_cost: Decimal
    profit: Decimal


class ReportService:
    """
    Service de reporting.

    Responsabilites:
    - Rapport journalier (commandes, revenu, cout, depenses, paiements, meilleures ventes)
    - Resume des ventes sur les N dernieres journees
    - Resume des ventes directes d'ingredients
    """

    def __init__(
        self,
        order_repo: OrderRepository,
        menu_repo: MenuItemRepository,
        stock_repo: StockLedgerRepository,
        expense_repo: Optional[ExpenseRepository] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self.order_repo = order_repo
        self.menu_repo = menu_repo
        self.stock_repo = stock_repo
        self.expense_repo = expense_repo
        self.clock = clock or utc_now

    def _today(self) -> date:
        return business_date(self.clock())

    def _recipe_costs(self, orders: List[Order]) -> Dict[int, Decimal]:
        ids = {
            item.menu_item_id
            for order in orders
            for item in order.items
            if item.menu_item_id is not None
        }
        return {m.id: m.recipe_cost for m in self.menu_repo.get_many_with_recipe(list(ids))}

    def _cost_of(self, orders: List[Order], recipe_costs: Dict[int, Decimal]) -> tuple:
        cost = Decimal("0")
        unresolved = 0
        for order in orders:
            for item in order.items:
                unit_cost = recipe_costs.get(item.menu_item_id)
                if unit_cost is None:
                    unresolved += 1
                    continue
                cost += unit_cost * item.quantity
        return quantize_money(cost), unresolved

    def daily_report(self, day: Optional[date] = None) -> DailyReport:
        """
        Rapport d'une journee commerciale (par defaut: la journee en cours).

        Revenu = somme des totaux des commandes reglees.
        """
        day = day or self._today()
        start, end = business_day_range(day)
        orders = self.order_repo.list_filtered(start=start, end=end)

        report = DailyReport(business_date=day, start=start, end=end)
        report.payment_breakdown = {method.value: ZERO for method in PaymentMethod}
        completed = []
        for order in orders:
            if order.status == OrderStatus.COMPLETED:
                completed.append(order)
            elif order.status == OrderStatus.PENDING:
                report.pending_orders += 1
            elif order.status == OrderStatus.CANCELLED:
                report.cancelled_orders += 1

        report.completed_orders = len(completed)
        report.revenue = quantize_money(sum((o.total for o in completed), Decimal("0")))
        report.tax = quantize_money(sum((o.tax for o in completed), Decimal("0")))
        report.discounts = quantize_money(sum((o.discount for o in completed), Decimal("0")))
        for order in completed:
            method = order.payment_method.value
            report.payment_breakdown[method] = report.payment_breakdown[method] + order.total

        report.cost, report.unresolved_items = self._cost_of(completed, self._recipe_costs(completed))

        if self.expense_repo is not None:
            totals = self.expense_repo.totals_by_category(day)
            report.expense_breakdown = {
                category.value: quantize_money(totals.get(category, ZERO)) for category in ExpenseCategory
            }
            report.expenses = quantize_money(sum(totals.values(), Decimal("0")))

        quantities: Dict[str, int] = defaultdict(int)
        revenues: Dict[str, Decimal] = defaultdict(Decimal)
        for order in completed:
            for item in order.items:
                quantities[item.menu_item_name] += item.quantity
                revenues[item.menu_item_name] += item.total
        ranked = sorted(quantities, key=lambda name: (-quantities[name], name))
        report.top_items = [
            TopItem(name=name, quantity=quantities[name], revenue=quantize_money(revenues[name]))
            for name in ranked[:TOP_ITEMS_LIMIT]
        ]

        logger.info(
            f"Rapport journalier {day}: {report.completed_orders} commande(s) reglee(s), "
            f"revenu {report.revenue}, depenses {report.expenses}"
        )
        return report

    def sales_summary(self, days: int = 7) -> List[DailySales]:
        """Revenu, cout et profit par journee sur les N dernieres journees."""
        settings = get_settings()
        result = []
        for day in last_n_business_days(
            days,
            settings.BUSINESS_DAY_CUTOFF_HOUR,
            settings.BUSINESS_DAY_CUTOFF_MINUTE,
            now=self.clock(),
        ):
            start, end = business_day_range(day)
            completed = self.order_repo.list_filtered(status=OrderStatus.COMPLETED, start=start, end=end)
            cost, _ = self._cost_of(completed, self._recipe_costs(completed))
            result.append(DailySales(
                business_date=day,
                orders=len(completed),
                revenue=quantize_money(sum((o.total for o in completed), Decimal("0"))),
                cost=cost,
            ))
        return result

    def direct_sales_summary(self, day: Optional[date] = None) -> DirectSalesSummary:
        day = day or self._today()
        start, end = business_day_range(day)
        sales = self.stock_repo.get_sales(start=start, end=end)
        total_sale = sum((s.total_sale for s in sales), Decimal("0"))
        total_cost = sum((s.total_cost for s in sales), Decimal("0"))
        return DirectSalesSummary(
            business_date=day,
            sales=len(sales),
            total_sale=quantize_money(total_sale),
            total_cost=quantize_money(total_cost),
            profit=quantize_money(total_sale - total_cost),
        )
