"""create_customer_tag_tables

Revision ID: 4c7e1d2a9f30
Revises:
Create Date: 2026-10-18 09:42:11.304518

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision: str = '4c7e1d2a9f30'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create tag catalog, customers, addresses and orders tables."""
    op.create_table('customer_tags',
        sa.Column('tag_id', sa.String(length=32), nullable=False),
        sa.Column('prefix', sa.String(length=100), nullable=False),
        sa.Column('code', sa.String(length=100), nullable=False),
        sa.Column('full_tag', sa.String(length=201), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('color', sa.String(length=7), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('customer_count', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint('tag_id'),
        sa.UniqueConstraint('full_tag'),
        sa.UniqueConstraint('prefix', 'code', name='uq_customer_tags_prefix_code'),
    )
    op.create_index('ix_customer_tags_prefix', 'customer_tags', ['prefix'], unique=False)

    op.create_table('customers',
        sa.Column('id', sa.UUID(), nullable=False),
        sa.Column('customer_code', sa.String(length=100), nullable=True),
        sa.Column('customer_type', sa.String(length=20), nullable=False, server_default='business'),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('company_name', sa.String(length=255), nullable=True),
        sa.Column('first_name', sa.String(length=100), nullable=True),
        sa.Column('last_name', sa.String(length=100), nullable=True),
        sa.Column('tags', postgresql.JSONB(astext_type=sa.Text()), nullable=False,
                  server_default=sa.text("'[]'::jsonb")),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
        sa.CheckConstraint("customer_type IN ('business', 'private')", name='ck_customers_customer_type'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_customers_customer_code', 'customers', ['customer_code'], unique=False)

    op.create_table('customer_addresses',
        sa.Column('id', sa.UUID(), nullable=False),
        sa.Column('customer_id', sa.UUID(), nullable=False),
        sa.Column('position', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('external_code', sa.String(length=100), nullable=True),
        sa.Column('label', sa.String(length=255), nullable=True),
        sa.Column('street', sa.String(length=255), nullable=True),
        sa.Column('city', sa.String(length=100), nullable=True),
        sa.Column('postal_code', sa.String(length=20), nullable=True),
        sa.Column('country', sa.String(length=2), nullable=False, server_default='IT'),
        sa.Column('is_default', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('tag_overrides', postgresql.JSONB(astext_type=sa.Text()), nullable=False,
                  server_default=sa.text("'[]'::jsonb")),
        sa.ForeignKeyConstraint(['customer_id'], ['customers.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(
        'ix_customer_addresses_customer_id', 'customer_addresses', ['customer_id'], unique=False
    )

    op.create_table('orders',
        sa.Column('id', sa.UUID(), nullable=False),
        sa.Column('cart_number', sa.Integer(), nullable=False),
        sa.Column('year', sa.Integer(), nullable=False),
        sa.Column('status', sa.String(length=20), nullable=False, server_default='draft'),
        sa.Column('is_current', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('customer_id', sa.UUID(), nullable=False),
        sa.Column('shipping_address_id', sa.UUID(), nullable=False),
        sa.Column('effective_tags', postgresql.JSONB(astext_type=sa.Text()), nullable=False,
                  server_default=sa.text("'[]'::jsonb")),
        sa.Column('price_list_id', sa.String(length=100), nullable=False, server_default='default'),
        sa.Column('currency', sa.String(length=3), nullable=False, server_default='EUR'),
        sa.Column('pricelist_type', sa.String(length=50), nullable=True),
        sa.Column('pricelist_code', sa.String(length=50), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
        sa.CheckConstraint("status IN ('draft', 'pending')", name='ck_orders_status'),
        sa.ForeignKeyConstraint(['customer_id'], ['customers.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(
            ['shipping_address_id'], ['customer_addresses.id'], ondelete='CASCADE'
        ),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('year', 'cart_number', name='uq_orders_year_cart_number'),
    )
    op.create_index(
        'ix_orders_current_cart', 'orders',
        ['customer_id', 'shipping_address_id', 'is_current'], unique=False,
    )


def downgrade() -> None:
    """Drop tag catalog, customers, addresses and orders tables."""
    op.drop_index('ix_orders_current_cart', table_name='orders')
    op.drop_table('orders')
    op.drop_index('ix_customer_addresses_customer_id', table_name='customer_addresses')
    op.drop_table('customer_addresses')
    op.drop_index('ix_customers_customer_code', table_name='customers')
    op.drop_table('customers')
    op.drop_index('ix_customer_tags_prefix', table_name='customer_tags')
    op.drop_table('customer_tags')
