"""
Tests du moteur de commandes: creation, modification, reglement,
annulation et restitution du stock cuisine.
"""
import pytest
from datetime import datetime, timezone
from decimal import Decimal

from restopos.core.exceptions import (
    EmptyCart,
    InvalidDiscount,
    InvalidOrderTransition,
    InvalidQuantity,
    MenuItemNotFound,
    TableNotFound,
    TableOccupied,
    WaiterNotFound,
)
from restopos.models.ingredient import IngredientUnit
from restopos.models.order import DiscountType, OrderStatus, OrderType, PaymentMethod
from restopos.models.table import TableStatus
from restopos.services.events import TOPIC_ORDERS, TOPIC_TABLES, pending_topics
from restopos.services.orders import (
    Cart,
    OrderDetails,
    OrderEntryPolicy,
    calculate_totals,
    generate_order_number,
    to_base36,
)
from tests.factories import IngredientFactory, RestaurantTableFactory, WaiterFactory


@pytest.fixture
def engine(order_engine):
    order_engine.tax_rate = Decimal("16")
    order_engine.gst_enabled = True
    order_engine.entry_policy = OrderEntryPolicy.ALWAYS_PENDING
    return order_engine


@pytest.fixture
def table(db_session):
    return RestaurantTableFactory.create(db_session=db_session, number=1)


def dine_in(table_id, **kwargs):
    return OrderDetails(order_type=OrderType.DINE_IN, table_id=table_id, **kwargs)


def takeaway(**kwargs):
    return OrderDetails(order_type=OrderType.TAKEAWAY, **kwargs)


# =============================================================================
# Fonctions pures
# =============================================================================

class TestTotals:

    @pytest.mark.unit
    def test_percentage_discount_applies_to_subtotal(self):
        totals = calculate_totals(Decimal("1000"), DiscountType.PERCENTAGE, Decimal("10"), Decimal("16"), True)

        assert totals.discount == Decimal("100.00")
        assert totals.tax == Decimal("160.00")
        assert totals.total == Decimal("1060.00")

    @pytest.mark.unit
    def test_gst_disabled_means_no_tax(self):
        totals = calculate_totals(Decimal("1000"), DiscountType.FIXED, Decimal("0"), Decimal("16"), False)

        assert totals.tax == Decimal("0.00")
        assert totals.total == Decimal("1000.00")

    @pytest.mark.unit
    @pytest.mark.parametrize("discount_type, value", [
        (DiscountType.FIXED, Decimal("-1")),
        (DiscountType.PERCENTAGE, Decimal("101")),
        (DiscountType.FIXED, Decimal("1200")),
    ])
    def test_invalid_discounts(self, discount_type, value):
        with pytest.raises(InvalidDiscount):
            calculate_totals(Decimal("1000"), discount_type, value, Decimal("16"), True)

    @pytest.mark.unit
    def test_full_percentage_discount_leaves_tax(self):
        totals = calculate_totals(Decimal("1000"), DiscountType.PERCENTAGE, Decimal("100"), Decimal("16"), True)

        assert totals.total == Decimal("160.00")


class TestOrderNumber:

    @pytest.mark.unit
    def test_base36(self):
        assert to_base36(0) == "0"
        assert to_base36(35) == "Z"
        assert to_base36(36) == "10"

    @pytest.mark.unit
    def test_format(self):
        ts = datetime(1970, 1, 1, 0, 0, 1, tzinfo=timezone.utc)

        assert generate_order_number(ts) == "ORD-RS"


# =============================================================================
# Creation
# =============================================================================

class TestCreate:

    @pytest.mark.unit
    def test_dine_in_order_deducts_kitchen_and_occupies_table(
        self, engine, burger, stocked_kitchen, table, db_session
    ):
        result = engine.create_with_report(Cart().add(burger.id, 2), dine_in(table.id))
        order = result.order

        assert order.status == OrderStatus.PENDING
        assert order.subtotal == Decimal("1600.00")
        assert order.tax == Decimal("256.00")
        assert order.total == Decimal("1856.00")
        assert order.order_number.startswith("ORD-")
        assert order.table_number == 1
        assert [(i.menu_item_name, i.quantity, i.unit_price) for i in order.items] == [
            ("Burger", 2, Decimal("800.00")),
        ]

        assert stocked_kitchen["beef"].kitchen_stock == Decimal("1.6")
        assert stocked_kitchen["bun"].kitchen_stock == Decimal("18")
        assert stocked_kitchen["beef"].store_stock == Decimal("3")
        assert len(result.movements) == 2
        assert all(m.order_id == order.id for m in result.movements)
        assert result.clamped == []

        assert table.status == TableStatus.OCCUPIED
        assert table.current_order_id == order.id
        assert {TOPIC_ORDERS, TOPIC_TABLES} <= pending_topics(db_session)

    @pytest.mark.unit
    def test_kitchen_shortage_is_clamped_not_rejected(self, engine, db_session, ledger, menu_service):
        cheese = IngredientFactory.create(db_session=db_session, name="Fromage", unit=IngredientUnit.KILOGRAM)
        ledger.add_purchase(cheese.id, Decimal("0.8"), Decimal("500"))
        ledger.transfer_to_kitchen(cheese.id, Decimal("0.8"))
        toast = menu_service.create_menu_item(
            name="Croque", price=Decimal("300"),
            recipe=[{"ingredient_id": cheese.id, "quantity": Decimal("1.0")}],
        )

        result = engine.create_with_report(Cart().add(toast.id), takeaway())

        assert cheese.kitchen_stock == Decimal("0")
        assert len(result.clamped) == 1
        assert result.clamped[0].applied_quantity == Decimal("0.8")

        cancellation = engine.cancel(result.order.id)

        assert cheese.kitchen_stock == Decimal("1.0")
        assert not cancellation.is_partial

    @pytest.mark.unit
    def test_empty_cart_writes_nothing(self, engine, burger):
        with pytest.raises(EmptyCart):
            engine.create(Cart(), takeaway())

        assert engine.list_orders() == []

    @pytest.mark.unit
    def test_quantity_must_be_positive_integer(self, engine, burger):
        with pytest.raises(InvalidQuantity):
            engine.create(Cart().add(burger.id, 0), takeaway())

    @pytest.mark.unit
    def test_unknown_menu_item(self, engine, burger):
        with pytest.raises(MenuItemNotFound):
            engine.create(Cart().add(burger.id).add(4242), takeaway())

    @pytest.mark.unit
    def test_unknown_table_and_waiter(self, engine, burger):
        with pytest.raises(TableNotFound):
            engine.create(Cart().add(burger.id), dine_in(4242))
        with pytest.raises(WaiterNotFound):
            engine.create(Cart().add(burger.id), takeaway(waiter_id=4242))

    @pytest.mark.unit
    def test_discount_exceeding_total_rejected_before_any_write(self, engine, burger, stocked_kitchen):
        with pytest.raises(InvalidDiscount):
            engine.create(
                Cart().add(burger.id),
                takeaway(discount_type=DiscountType.FIXED, discount_value=Decimal("5000")),
            )

        assert stocked_kitchen["beef"].kitchen_stock == Decimal("2")
        assert engine.list_orders() == []

    @pytest.mark.unit
    def test_occupied_table_rejected_without_deduction(self, engine, burger, stocked_kitchen, table):
        first = engine.create(Cart().add(burger.id), dine_in(table.id))

        with pytest.raises(TableOccupied) as exc_info:
            engine.create(Cart().add(burger.id), dine_in(table.id))

        assert exc_info.value.current_order_id == first.id
        assert stocked_kitchen["bun"].kitchen_stock == Decimal("19")
        assert len(engine.list_orders()) == 1

    @pytest.mark.unit
    def test_non_dine_in_order_ignores_table(self, engine, burger, table):
        order = engine.create(Cart().add(burger.id), OrderDetails(order_type=OrderType.ONLINE, table_id=table.id))

        assert order.table_id is None
        assert table.status == TableStatus.AVAILABLE

    @pytest.mark.unit
    def test_waiter_name_is_snapshotted(self, engine, burger, db_session):
        waiter = WaiterFactory.create(db_session=db_session, name="Bilal")

        order = engine.create(Cart().add(burger.id), takeaway(waiter_id=waiter.id))

        assert order.waiter_id == waiter.id
        assert order.waiter_name == "Bilal"

    @pytest.mark.unit
    def test_menu_item_edit_does_not_rewrite_existing_order(self, engine, burger, menu_service, db_session):
        order = engine.create(Cart().add(burger.id, 2), takeaway())
        db_session.commit()

        menu_service.update_menu_item(burger.id, {"name": "Burger Deluxe", "price": Decimal("950")})
        db_session.commit()
        db_session.expire_all()

        stored = engine.get_order(order.id)
        item = stored.items[0]
        assert item.menu_item_id == burger.id
        assert item.menu_item_name == "Burger"
        assert item.unit_price == Decimal("800.00")
        assert item.total == Decimal("1600.00")
        assert stored.subtotal == Decimal("1600.00")
        assert stored.total == Decimal("1856.00")

    @pytest.mark.unit
    def test_order_numbers_unique_within_same_millisecond(self, engine, burger):
        first = engine.create(Cart().add(burger.id), takeaway())
        second = engine.create(Cart().add(burger.id), takeaway())

        assert first.order_number != second.order_number

    @pytest.mark.unit
    def test_auto_complete_policy(self, engine, burger, table, fixed_now):
        engine.entry_policy = OrderEntryPolicy.AUTO_COMPLETE_NON_DINE_IN

        counter = engine.create(Cart().add(burger.id), takeaway(payment_method=PaymentMethod.CARD))
        seated = engine.create(Cart().add(burger.id), dine_in(table.id))

        assert counter.status == OrderStatus.COMPLETED
        assert counter.completed_at == fixed_now
        assert seated.status == OrderStatus.PENDING


# =============================================================================
# Modification
# =============================================================================

class TestUpdate:

    @pytest.mark.unit
    def test_update_recomputes_totals_without_touching_stock(self, engine, burger, stocked_kitchen, table):
        order = engine.create(Cart().add(burger.id), dine_in(table.id))

        updated = engine.update(
            order.id,
            Cart().add(burger.id, 3, notes="sans oignon"),
            dine_in(table.id, discount_type=DiscountType.PERCENTAGE, discount_value=Decimal("10")),
        )

        assert updated.subtotal == Decimal("2400.00")
        assert updated.discount == Decimal("240.00")
        assert updated.total == Decimal("2544.00")
        assert updated.item_count == 3
        assert updated.items[0].notes == "sans oignon"
        assert stocked_kitchen["bun"].kitchen_stock == Decimal("19")
        assert table.current_order_id == order.id

    @pytest.mark.unit
    def test_changing_table_moves_occupancy(self, engine, burger, table, db_session):
        other = RestaurantTableFactory.create(db_session=db_session, number=2)
        order = engine.create(Cart().add(burger.id), dine_in(table.id))

        engine.update(order.id, Cart().add(burger.id), dine_in(other.id))

        assert table.status == TableStatus.AVAILABLE
        assert table.current_order_id is None
        assert other.current_order_id == order.id
        assert order.table_number == 2

    @pytest.mark.unit
    def test_cannot_move_to_occupied_table(self, engine, burger, table, db_session):
        other = RestaurantTableFactory.create(db_session=db_session, number=2)
        order = engine.create(Cart().add(burger.id), dine_in(table.id))
        engine.create(Cart().add(burger.id), dine_in(other.id))

        with pytest.raises(TableOccupied):
            engine.update(order.id, Cart().add(burger.id), dine_in(other.id))

        assert table.current_order_id == order.id

    @pytest.mark.unit
    def test_only_pending_orders_can_be_updated(self, engine, burger):
        order = engine.create(Cart().add(burger.id), takeaway())
        engine.settle(order.id)

        with pytest.raises(InvalidOrderTransition):
            engine.update(order.id, Cart().add(burger.id), takeaway())


# =============================================================================
# Reglement et annulation
# =============================================================================

class TestTransitions:

    @pytest.mark.unit
    def test_settle_frees_table(self, engine, burger, table, stocked_kitchen, fixed_now):
        order = engine.create(Cart().add(burger.id), dine_in(table.id))

        settled = engine.settle(order.id)

        assert settled.status == OrderStatus.COMPLETED
        assert settled.completed_at == fixed_now
        assert table.status == TableStatus.AVAILABLE
        assert table.current_order_id is None
        assert stocked_kitchen["bun"].kitchen_stock == Decimal("19")

    @pytest.mark.unit
    def test_terminal_states_are_final(self, engine, burger):
        settled = engine.create(Cart().add(burger.id), takeaway())
        engine.settle(settled.id)
        cancelled = engine.create(Cart().add(burger.id), takeaway())
        engine.cancel(cancelled.id)

        with pytest.raises(InvalidOrderTransition):
            engine.settle(settled.id)
        with pytest.raises(InvalidOrderTransition):
            engine.cancel(settled.id)
        with pytest.raises(InvalidOrderTransition):
            engine.settle(cancelled.id)

    @pytest.mark.unit
    def test_cancel_restores_kitchen_and_frees_table(self, engine, burger, table, stocked_kitchen):
        order = engine.create(Cart().add(burger.id, 2), dine_in(table.id))

        result = engine.cancel(order.id)

        assert result.order.status == OrderStatus.CANCELLED
        assert len(result.restored) == 2
        assert stocked_kitchen["beef"].kitchen_stock == Decimal("2")
        assert stocked_kitchen["bun"].kitchen_stock == Decimal("20")
        assert table.status == TableStatus.AVAILABLE

    @pytest.mark.unit
    def test_cancel_uses_current_recipe(self, engine, burger, menu_service, stocked_kitchen):
        order = engine.create(Cart().add(burger.id), takeaway())
        menu_service.set_recipe(burger.id, [{"ingredient_id": stocked_kitchen["bun"].id, "quantity": "2"}])

        engine.cancel(order.id)

        # deduit 0.2 boeuf + 1 pain, restitue 2 pains
        assert stocked_kitchen["beef"].kitchen_stock == Decimal("1.8")
        assert stocked_kitchen["bun"].kitchen_stock == Decimal("21")

    @pytest.mark.unit
    def test_cancel_with_deleted_menu_item_is_partial(self, engine, burger, menu_service, stocked_kitchen):
        order = engine.create(Cart().add(burger.id), takeaway())
        menu_service.delete_menu_item(burger.id)

        result = engine.cancel(order.id)

        assert result.is_partial
        assert [(u.kind, u.order_item_id) for u in result.unresolved] == [("menu_item", order.items[0].id)]
        assert result.order.status == OrderStatus.CANCELLED
        assert stocked_kitchen["bun"].kitchen_stock == Decimal("19")

    @pytest.mark.unit
    def test_pending_list(self, engine, burger):
        pending = engine.create(Cart().add(burger.id), takeaway())
        done = engine.create(Cart().add(burger.id), takeaway())
        engine.settle(done.id)

        assert [o.id for o in engine.list_pending_orders()] == [pending.id]
        assert len(engine.list_orders(status=OrderStatus.COMPLETED)) == 1
