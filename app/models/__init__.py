"""
Models package initialization.
This file imports all models to make them available to Alembic for autogeneration.
"""

# IMPORTANT: Utiliser la MÊME Base que celle de database.py
from app.core.database import Base

from .user import User, UserRole
from .category import Category
from .product import Product, product_supplier_table, client_product_table
from .client import Client
from .supplier import Supplier
from .order import Order, OrderStatus, OrderType

__all__ = [
    'Base',
    'User', 'UserRole',
    'Category',
    'Product', 'product_supplier_table', 'client_product_table',
    'Client',
    'Supplier',
    'Order', 'OrderStatus', 'OrderType',
]
