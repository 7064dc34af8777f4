# ===================================
# app/schemas/product.py
# ===================================

from typing import List, Optional
from datetime import datetime
from decimal import Decimal
from enum import Enum
from pydantic import BaseModel, Field, field_validator

from app.schemas.common import PaginatedResponse


class StockMovement(str, Enum):
    IN = "entrada"
    OUT = "saida"


class ProductBase(BaseModel):
    name: str = Field(min_length=1, max_length=200)
    code: Optional[str] = Field(None, max_length=50)
    description: Optional[str] = None
    category_id: int
    price: Decimal = Field(ge=0, decimal_places=2)
    sale_price: Decimal = Field(default=Decimal("0"), ge=0, decimal_places=2)

    @field_validator("name", mode="before")
    @classmethod
    def strip_name(cls, v):
        return v.strip() if isinstance(v, str) else v

    @field_validator("code", mode="before")
    @classmethod
    def blank_code_to_none(cls, v):
        if isinstance(v, str):
            return v.strip() or None
        return v


class ProductCreate(ProductBase):
    stock_quantity: int = Field(default=0, ge=0)
    supplier_ids: List[int] = []


class ProductUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=200)
    code: Optional[str] = Field(None, max_length=50)
    description: Optional[str] = None
    category_id: Optional[int] = None
    stock_quantity: Optional[int] = Field(None, ge=0)
    price: Optional[Decimal] = Field(None, ge=0, decimal_places=2)
    sale_price: Optional[Decimal] = Field(None, ge=0, decimal_places=2)
    is_active: Optional[bool] = None
    supplier_ids: Optional[List[int]] = None

    @field_validator("name", mode="before")
    @classmethod
    def strip_name(cls, v):
        return v.strip() if isinstance(v, str) else v

    @field_validator("code", mode="before")
    @classmethod
    def blank_code_to_none(cls, v):
        if isinstance(v, str):
            return v.strip() or None
        return v


class StockUpdate(BaseModel):
    quantity: int = Field(gt=0, description="Quantité à déplacer")
    movement: StockMovement


class CategoryInfo(BaseModel):
    id: int
    name: str

    class Config:
        from_attributes = True


class SupplierInfo(BaseModel):
    id: int
    name: str
    email: Optional[str] = None
    phone: Optional[str] = None
    delivery_time_days: Optional[int] = None
    is_active: bool

    class Config:
        from_attributes = True


class Product(ProductBase):
    id: int
    stock_quantity: int
    is_active: bool
    created_at: Optional[datetime] = None
    category: Optional[CategoryInfo] = None

    class Config:
        from_attributes = True


class ProductDetail(Product):
    """Version détaillée avec les fournisseurs"""
    suppliers: List[SupplierInfo] = []


class ProductResponse(BaseModel):
    success: bool = True
    message: str
    data: ProductDetail


class ProductsListResponse(PaginatedResponse):
    data: List[Product]


class LowStockResponse(BaseModel):
    success: bool = True
    data: List[Product]
    total: int
    threshold: int


class StockMovementResult(BaseModel):
    id: int
    name: str
    previous_quantity: int
    current_quantity: int
    movement: StockMovement


class StockMovementResponse(BaseModel):
    success: bool = True
    message: str
    data: StockMovementResult


class ProductRef(BaseModel):
    id: int
    name: str

    class Config:
        from_attributes = True


class ProductSuppliers(BaseModel):
    product: ProductRef
    suppliers: List[SupplierInfo]


class ProductSuppliersResponse(BaseModel):
    success: bool = True
    data: ProductSuppliers
