"""initial schema

Revision ID: 0001
Revises:
Create Date: 2025-01-15 10:00:00

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '0001'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps():
    return [
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=True),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True),
    ]


def upgrade() -> None:
    op.create_table(
        'user',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('name', sa.String(length=200), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('role', sa.String(length=20), nullable=False, server_default='user'),
        sa.Column('password_hash', sa.String(), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('failed_login_attempts', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('locked_until', sa.DateTime(), nullable=True),
        sa.Column('reset_token_hash', sa.String(length=64), nullable=True),
        sa.Column('reset_token_expires_at', sa.DateTime(), nullable=True),
        *_timestamps(),
        sa.Column('last_login', sa.DateTime(), nullable=True),
    )
    op.create_index('ix_user_id', 'user', ['id'])
    op.create_index('ix_user_email', 'user', ['email'], unique=True)
    op.create_index('ix_user_reset_token_hash', 'user', ['reset_token_hash'])

    op.create_table(
        'category',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('name', sa.String(length=100), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        *_timestamps(),
    )
    op.create_index('ix_category_id', 'category', ['id'])
    op.create_index('ix_category_name', 'category', ['name'], unique=True)

    op.create_table(
        'supplier',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('name', sa.String(length=200), nullable=False),
        sa.Column('email', sa.String(length=100), nullable=True),
        sa.Column('phone', sa.String(length=20), nullable=True),
        sa.Column('delivery_time_days', sa.Integer(), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        *_timestamps(),
    )
    op.create_index('ix_supplier_id', 'supplier', ['id'])
    op.create_index('ix_supplier_name', 'supplier', ['name'])

    op.create_table(
        'client',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('name', sa.String(length=200), nullable=False),
        sa.Column('email', sa.String(length=100), nullable=False),
        sa.Column('phone', sa.String(length=20), nullable=True),
        sa.Column('address', sa.Text(), nullable=True),
        sa.Column('cpf', sa.String(length=14), nullable=True, unique=True),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        *_timestamps(),
    )
    op.create_index('ix_client_id', 'client', ['id'])
    op.create_index('ix_client_name', 'client', ['name'])
    op.create_index('ix_client_email', 'client', ['email'], unique=True)

    op.create_table(
        'product',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('code', sa.String(length=50), nullable=True),
        sa.Column('name', sa.String(length=200), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('category_id', sa.Integer(),
                  sa.ForeignKey('category.id', ondelete='RESTRICT'), nullable=False),
        sa.Column('stock_quantity', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('price', sa.DECIMAL(10, 2), nullable=False),
        sa.Column('sale_price', sa.DECIMAL(10, 2), nullable=False, server_default='0'),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        *_timestamps(),
        sa.CheckConstraint('stock_quantity >= 0', name='ck_product_stock_non_negative'),
    )
    op.create_index('ix_product_id', 'product', ['id'])
    op.create_index('ix_product_code', 'product', ['code'], unique=True)
    op.create_index('ix_product_name', 'product', ['name'])
    op.create_index('ix_product_is_active', 'product', ['is_active'])
    op.create_index('ix_product_created_at', 'product', ['created_at'])

    op.create_table(
        'product_supplier',
        sa.Column('product_id', sa.Integer(),
                  sa.ForeignKey('product.id', ondelete='CASCADE'), primary_key=True),
        sa.Column('supplier_id', sa.Integer(),
                  sa.ForeignKey('supplier.id', ondelete='CASCADE'), primary_key=True),
    )

    op.create_table(
        'client_product',
        sa.Column('client_id', sa.Integer(),
                  sa.ForeignKey('client.id', ondelete='CASCADE'), primary_key=True),
        sa.Column('product_id', sa.Integer(),
                  sa.ForeignKey('product.id', ondelete='CASCADE'), primary_key=True),
    )

    op.create_table(
        'order',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('code', sa.String(length=30), nullable=False),
        sa.Column('name', sa.String(length=200), nullable=False),
        sa.Column('price', sa.DECIMAL(10, 2), nullable=False),
        sa.Column('quantity', sa.Integer(), nullable=False, server_default='1'),
        sa.Column('type', sa.String(length=20), nullable=False),
        sa.Column('status', sa.String(length=20), nullable=False, server_default='a-caminho'),
        sa.Column('product_id', sa.Integer(),
                  sa.ForeignKey('product.id', ondelete='SET NULL'), nullable=True),
        sa.Column('category_id', sa.Integer(),
                  sa.ForeignKey('category.id', ondelete='SET NULL'), nullable=True),
        sa.Column('supplier_id', sa.Integer(),
                  sa.ForeignKey('supplier.id', ondelete='SET NULL'), nullable=True),
        sa.Column('client_id', sa.Integer(),
                  sa.ForeignKey('client.id', ondelete='SET NULL'), nullable=True),
        sa.Column('delivery_date', sa.DateTime(), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        *_timestamps(),
        sa.Column('received_at', sa.DateTime(), nullable=True),
        sa.Column('cancelled_at', sa.DateTime(), nullable=True),
    )
    op.create_index('ix_order_id', 'order', ['id'])
    op.create_index('ix_order_code', 'order', ['code'], unique=True)
    op.create_index('ix_order_type', 'order', ['type'])
    op.create_index('ix_order_status', 'order', ['status'])
    op.create_index('ix_order_created_at', 'order', ['created_at'])


def downgrade() -> None:
    op.drop_table('order')
    op.drop_table('client_product')
    op.drop_table('product_supplier')
    op.drop_table('product')
    op.drop_table('client')
    op.drop_table('supplier')
    op.drop_table('category')
    op.drop_table('user')
