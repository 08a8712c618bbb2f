"""initial schema: ingredients, stock ledger, menu, tables, orders

Revision ID: a1c4e7f20b31
Revises: 
Create Date: 2026-10-17 21:30:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = 'a1c4e7f20b31'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


BIGINT = sa.BigInteger().with_variant(sa.Integer(), "sqlite")


def _timestamps():
    return [
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    ]


def _ledger_table(name: str, *columns: sa.Column, stamp: str = 'created_at') -> None:
    op.create_table(
        name,
        sa.Column('id', BIGINT, nullable=False),
        sa.Column('ingredient_id', BIGINT, nullable=False),
        *columns,
        sa.Column(stamp, sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.ForeignKeyConstraint(['ingredient_id'], ['ingredients.id'], ondelete='RESTRICT'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(f'ix_{name}_ingredient_id', name, ['ingredient_id'])
    op.create_index(f'ix_{name}_{stamp}', name, [stamp])


def upgrade() -> None:
    """Create restaurant tables."""

    # Ingredients
    op.create_table(
        'ingredient_categories',
        sa.Column('id', BIGINT, nullable=False),
        sa.Column('name', sa.Text(), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('name')
    )
    op.create_table(
        'ingredients',
        sa.Column('id', BIGINT, nullable=False),
        sa.Column('name', sa.Text(), nullable=False),
        sa.Column('unit', sa.String(32), nullable=False),
        sa.Column('cost_per_unit', sa.Numeric(12, 4), nullable=False),
        sa.Column('store_stock', sa.Numeric(12, 3), nullable=False),
        sa.Column('kitchen_stock', sa.Numeric(12, 3), nullable=False),
        sa.Column('low_stock_threshold', sa.Numeric(12, 3), nullable=False),
        sa.Column('category_id', BIGINT, nullable=True),
        sa.Column('version_id', sa.Integer(), nullable=False),
        *_timestamps(),
        sa.CheckConstraint('store_stock >= 0', name='ck_ingredients_store_stock_positive'),
        sa.CheckConstraint('kitchen_stock >= 0', name='ck_ingredients_kitchen_stock_positive'),
        sa.CheckConstraint('cost_per_unit >= 0', name='ck_ingredients_cost_positive'),
        sa.ForeignKeyConstraint(['category_id'], ['ingredient_categories.id'], ondelete='RESTRICT'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('name')
    )
    op.create_index('ix_ingredients_category_id', 'ingredients', ['category_id'])

    # Menu
    op.create_table(
        'menu_categories',
        sa.Column('id', BIGINT, nullable=False),
        sa.Column('name', sa.Text(), nullable=False),
        sa.Column('icon', sa.Text(), nullable=True),
        sa.Column('color', sa.Text(), nullable=True),
        sa.Column('sort_order', sa.Integer(), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_table(
        'menu_items',
        sa.Column('id', BIGINT, nullable=False),
        sa.Column('name', sa.Text(), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('price', sa.Numeric(12, 2), nullable=False),
        sa.Column('category_id', BIGINT, nullable=True),
        sa.Column('is_available', sa.Boolean(), nullable=False),
        sa.Column('recipe_cost', sa.Numeric(12, 4), nullable=False),
        sa.Column('profit_margin', sa.Numeric(7, 2), nullable=False),
        *_timestamps(),
        sa.ForeignKeyConstraint(['category_id'], ['menu_categories.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_menu_items_category_id', 'menu_items', ['category_id'])
    op.create_table(
        'menu_item_recipe_lines',
        sa.Column('id', BIGINT, nullable=False),
        sa.Column('menu_item_id', BIGINT, nullable=False),
        sa.Column('ingredient_id', BIGINT, nullable=False),
        sa.Column('quantity', sa.Numeric(12, 3), nullable=False),
        sa.Column('position', sa.Integer(), nullable=False),
        sa.ForeignKeyConstraint(['menu_item_id'], ['menu_items.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['ingredient_id'], ['ingredients.id'], ondelete='RESTRICT'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_menu_item_recipe_lines_menu_item_id', 'menu_item_recipe_lines', ['menu_item_id'])
    op.create_index('ix_menu_item_recipe_lines_ingredient_id', 'menu_item_recipe_lines', ['ingredient_id'])

    # Salle
    op.create_table(
        'restaurant_tables',
        sa.Column('id', BIGINT, nullable=False),
        sa.Column('number', sa.Integer(), nullable=False),
        sa.Column('capacity', sa.Integer(), nullable=False),
        sa.Column('floor', sa.Text(), nullable=True),
        sa.Column('status', sa.String(32), nullable=False),
        sa.Column('current_order_id', BIGINT, nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('number')
    )
    op.create_table(
        'waiters',
        sa.Column('id', BIGINT, nullable=False),
        sa.Column('name', sa.Text(), nullable=False),
        sa.Column('phone', sa.Text(), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id')
    )

    # Commandes
    op.create_table(
        'orders',
        sa.Column('id', BIGINT, nullable=False),
        sa.Column('order_number', sa.Text(), nullable=False),
        sa.Column('subtotal', sa.Numeric(12, 2), nullable=False),
        sa.Column('tax', sa.Numeric(12, 2), nullable=False),
        sa.Column('discount', sa.Numeric(12, 2), nullable=False),
        sa.Column('discount_type', sa.String(32), nullable=False),
        sa.Column('discount_value', sa.Numeric(12, 2), nullable=False),
        sa.Column('discount_reason', sa.Text(), nullable=True),
        sa.Column('total', sa.Numeric(12, 2), nullable=False),
        sa.Column('payment_method', sa.String(32), nullable=False),
        sa.Column('order_type', sa.String(32), nullable=False),
        sa.Column('status', sa.String(32), nullable=False),
        sa.Column('table_id', BIGINT, nullable=True),
        sa.Column('table_number', sa.Integer(), nullable=True),
        sa.Column('waiter_id', BIGINT, nullable=True),
        sa.Column('waiter_name', sa.Text(), nullable=True),
        sa.Column('customer_name', sa.Text(), nullable=True),
        sa.Column('completed_at', sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(['table_id'], ['restaurant_tables.id'], ondelete='SET NULL'),
        sa.ForeignKeyConstraint(['waiter_id'], ['waiters.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('order_number')
    )
    op.create_index('ix_orders_order_type', 'orders', ['order_type'])
    op.create_index('ix_orders_status', 'orders', ['status'])
    op.create_index('ix_orders_table_id', 'orders', ['table_id'])
    op.create_index('ix_orders_created_at', 'orders', ['created_at'])
    op.create_table(
        'order_items',
        sa.Column('id', BIGINT, nullable=False),
        sa.Column('order_id', BIGINT, nullable=False),
        sa.Column('menu_item_id', BIGINT, nullable=True),
        sa.Column('menu_item_name', sa.Text(), nullable=False),
        sa.Column('quantity', sa.Integer(), nullable=False),
        sa.Column('unit_price', sa.Numeric(12, 2), nullable=False),
        sa.Column('total', sa.Numeric(12, 2), nullable=False),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('position', sa.Integer(), nullable=False),
        sa.ForeignKeyConstraint(['order_id'], ['orders.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['menu_item_id'], ['menu_items.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_order_items_order_id', 'order_items', ['order_id'])
    op.create_index('ix_order_items_menu_item_id', 'order_items', ['menu_item_id'])

    # Dependance circulaire tables <-> commandes
    with op.batch_alter_table('restaurant_tables') as batch_op:
        batch_op.create_foreign_key(
            'fk_tables_current_order', 'orders', ['current_order_id'], ['id'], ondelete='SET NULL'
        )

    # Journal de stock
    _ledger_table(
        'stock_purchases',
        sa.Column('quantity', sa.Numeric(12, 3), nullable=False),
        sa.Column('unit_cost', sa.Numeric(12, 4), nullable=False),
        sa.Column('total_cost', sa.Numeric(14, 4), nullable=False),
        sa.Column('supplier', sa.Text(), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        stamp='purchased_at',
    )
    _ledger_table(
        'stock_transfers',
        sa.Column('quantity', sa.Numeric(12, 3), nullable=False),
        sa.Column('from_location', sa.String(32), nullable=False),
        sa.Column('to_location', sa.String(32), nullable=False),
        sa.Column('reason', sa.Text(), nullable=False),
    )
    _ledger_table(
        'stock_removals',
        sa.Column('quantity', sa.Numeric(12, 3), nullable=False),
        sa.Column('location', sa.String(32), nullable=False),
        sa.Column('reason', sa.Text(), nullable=False),
    )
    _ledger_table(
        'stock_sales',
        sa.Column('quantity', sa.Numeric(12, 3), nullable=False),
        sa.Column('cost_per_unit', sa.Numeric(12, 4), nullable=False),
        sa.Column('sale_price', sa.Numeric(12, 4), nullable=False),
        sa.Column('total_cost', sa.Numeric(14, 4), nullable=False),
        sa.Column('total_sale', sa.Numeric(14, 4), nullable=False),
        sa.Column('profit', sa.Numeric(14, 4), nullable=False),
        sa.Column('customer_name', sa.Text(), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
    )
    op.create_table(
        'order_stock_movements',
        sa.Column('id', BIGINT, nullable=False),
        sa.Column('order_id', BIGINT, nullable=True),
        sa.Column('ingredient_id', BIGINT, nullable=False),
        sa.Column('kind', sa.String(32), nullable=False),
        sa.Column('requested_quantity', sa.Numeric(12, 3), nullable=False),
        sa.Column('applied_quantity', sa.Numeric(12, 3), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.ForeignKeyConstraint(['order_id'], ['orders.id'], ondelete='SET NULL'),
        sa.ForeignKeyConstraint(['ingredient_id'], ['ingredients.id'], ondelete='RESTRICT'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_order_stock_movements_order_id', 'order_stock_movements', ['order_id'])
    op.create_index('ix_order_stock_movements_ingredient_id', 'order_stock_movements', ['ingredient_id'])
    op.create_index('ix_order_stock_movements_created_at', 'order_stock_movements', ['created_at'])


def downgrade() -> None:
    """Drop restaurant tables in reverse dependency order."""
    op.drop_table('order_stock_movements')
    op.drop_table('stock_sales')
    op.drop_table('stock_removals')
    op.drop_table('stock_transfers')
    op.drop_table('stock_purchases')

    with op.batch_alter_table('restaurant_tables') as batch_op:
        batch_op.drop_constraint('fk_tables_current_order', type_='foreignkey')

    op.drop_table('order_items')
    op.drop_table('orders')
    op.drop_table('waiters')
    op.drop_table('restaurant_tables')
    op.drop_table('menu_item_recipe_lines')
    op.drop_table('menu_items')
    op.drop_table('menu_categories')
    op.drop_table('ingredients')
    op.drop_table('ingredient_categories')
