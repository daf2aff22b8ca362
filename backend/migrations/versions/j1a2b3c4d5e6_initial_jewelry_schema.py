"""initial jewelry schema

Revision ID: j1a2b3c4d5e6
Revises:
Create Date: 2026-10-19 00:00:00.000000

Creates the catalog, invoicing, market rate and settings tables:
- items: catalog with stock and image reference
- invoices / invoice_items: invoice documents with line snapshots
- daily_market_rate: one row per (type, day) with hourly samples
- categories / materials: slug-keyed lookup lists
"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = 'j1a2b3c4d5e6'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    # ============================================================================
    # daily_market_rate: hourly gold price / exchange rate samples per day
    # ============================================================================
    op.create_table(
        'daily_market_rate',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('type', sa.String(length=32), nullable=False),
        sa.Column('hourly_rate', sa.JSON(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sqlite_autoincrement=True
    )
    op.create_index('ix_daily_market_rate_type_created', 'daily_market_rate', ['type', 'created_at'])

    # ============================================================================
    # items: catalog
    # ============================================================================
    op.create_table(
        'items',
        sa.Column('id', sa.String(length=64), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('category', sa.String(length=64), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('material', sa.String(length=128), nullable=False),
        sa.Column('stock', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('image', sa.String(length=1024), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.CheckConstraint('stock >= 0', name='ck_items_stock_non_negative'),
    )
    op.create_index('ix_items_category', 'items', ['category'])
    op.create_index('ix_items_created_at', 'items', ['created_at'])

    # ============================================================================
    # invoices: invoice header; invoice_number unique across the store
    # ============================================================================
    op.create_table(
        'invoices',
        sa.Column('id', sa.String(length=64), nullable=False),
        sa.Column('invoice_number', sa.String(length=32), nullable=False),
        sa.Column('customer_name', sa.String(length=255), nullable=False),
        sa.Column('customer_phone', sa.String(length=64), nullable=True),
        sa.Column('customer_address', sa.Text(), nullable=True),
        sa.Column('total', sa.Numeric(precision=12, scale=2), nullable=False),
        sa.Column('type', sa.String(length=16), nullable=False),
        sa.Column('status', sa.String(length=32), nullable=False, server_default='paid'),
        sa.Column('due_date', sa.DateTime(timezone=True), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('invoice_number', name='uq_invoices_invoice_number'),
        sa.CheckConstraint("type <> 'pawn' OR due_date IS NOT NULL", name='ck_invoices_pawn_due_date'),
    )
    op.create_index('ix_invoices_type_created', 'invoices', ['type', 'created_at'])

    # ============================================================================
    # invoice_items: line snapshots; item_id is a weak reference (no FK)
    # ============================================================================
    op.create_table(
        'invoice_items',
        sa.Column('id', sa.String(length=64), nullable=False),
        sa.Column('invoice_id', sa.String(length=64), nullable=False),
        sa.Column('item_id', sa.String(length=64), nullable=True),
        sa.Column('position', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('category', sa.String(length=64), nullable=True),
        sa.Column('quantity', sa.Integer(), nullable=False),
        sa.Column('price', sa.Numeric(precision=12, scale=2), nullable=False),
        sa.Column('discount', sa.Numeric(precision=12, scale=2), nullable=False, server_default='0'),
        sa.Column('total', sa.Numeric(precision=12, scale=2), nullable=False),
        sa.Column('return_type', sa.String(length=32), nullable=True),
        sa.Column('weight', sa.Float(), nullable=True),
        sa.ForeignKeyConstraint(['invoice_id'], ['invoices.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_invoice_items_invoice_id', 'invoice_items', ['invoice_id'])
    op.create_index('ix_invoice_items_item_id', 'invoice_items', ['item_id'])

    # ============================================================================
    # categories / materials: lookup lists keyed by slug
    # ============================================================================
    for table in ('categories', 'materials'):
        op.create_table(
            table,
            sa.Column('id', sa.String(length=128), nullable=False),
            sa.Column('name', sa.String(length=128), nullable=False),
            sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
            sa.PrimaryKeyConstraint('id'),
            sa.UniqueConstraint('name'),
        )


def downgrade():
    op.drop_table('materials')
    op.drop_table('categories')
    op.drop_index('ix_invoice_items_item_id', table_name='invoice_items')
    op.drop_index('ix_invoice_items_invoice_id', table_name='invoice_items')
    op.drop_table('invoice_items')
    op.drop_index('ix_invoices_type_created', table_name='invoices')
    op.drop_table('invoices')
    op.drop_index('ix_items_created_at', table_name='items')
    op.drop_index('ix_items_category', table_name='items')
    op.drop_table('items')
    op.drop_index('ix_daily_market_rate_type_created', table_name='daily_market_rate')
    op.drop_table('daily_market_rate')
