# ===================================
# app/schemas/supplier.py
# ===================================
from typing import List, Optional
from datetime import datetime
from pydantic import BaseModel, EmailStr, Field


class SupplierBase(BaseModel):
    name: str = Field(min_length=1, max_length=200)
    email: Optional[EmailStr] = None
    phone: Optional[str] = Field(None, max_length=20)
    delivery_time_days: Optional[int] = Field(None, ge=1)


class SupplierCreate(SupplierBase):
    is_active: bool = True


class SupplierUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=200)
    email: Optional[EmailStr] = None
    phone: Optional[str] = Field(None, max_length=20)
    delivery_time_days: Optional[int] = Field(None, ge=1)
    is_active: Optional[bool] = None


class Supplier(SupplierBase):
    id: int
    is_active: bool
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class SupplierResponse(BaseModel):
    success: bool = True
    message: str
    data: Supplier


class SuppliersListResponse(BaseModel):
    success: bool = True
    data: List[Supplier]
    total: int
