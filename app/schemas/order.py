# ===================================
# app/schemas/order.py
# ===================================
from typing import List, Optional
from datetime import datetime
from decimal import Decimal
from pydantic import BaseModel, Field

from app.models.order import OrderStatus, OrderType
from app.schemas.common import PaginatedResponse


class OrderBase(BaseModel):
    name: str = Field(min_length=1, max_length=200, description="Nom du produit commandé")
    price: Decimal = Field(ge=0, decimal_places=2)
    delivery_date: Optional[datetime] = None
    notes: Optional[str] = None
    client_id: Optional[int] = None
    supplier_id: Optional[int] = None


class OrderCreate(OrderBase):
    code: Optional[str] = Field(None, min_length=1, max_length=30)  # Généré si absent
    type: OrderType
    quantity: int = Field(ge=1, description="Quantité doit être positive")
    product_id: Optional[int] = None
    category_id: Optional[int] = None


class OrderUpdate(BaseModel):
    """Le type et la quantité sont figés après l'enregistrement"""
    name: Optional[str] = Field(None, min_length=1, max_length=200)
    price: Optional[Decimal] = Field(None, ge=0, decimal_places=2)
    delivery_date: Optional[datetime] = None
    notes: Optional[str] = None
    client_id: Optional[int] = None
    supplier_id: Optional[int] = None
    product_id: Optional[int] = None
    category_id: Optional[int] = None


class Order(OrderBase):
    id: int
    code: str
    type: OrderType
    status: OrderStatus
    quantity: int
    product_id: Optional[int] = None
    category_id: Optional[int] = None
    total: Decimal
    created_at: Optional[datetime] = None
    received_at: Optional[datetime] = None
    cancelled_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class OrderResponse(BaseModel):
    success: bool = True
    message: str
    data: Order


class OrdersListResponse(PaginatedResponse):
    data: List[Order]
