# ===================================
# app/schemas/client.py
# ===================================
from typing import List, Optional
from datetime import datetime
from pydantic import BaseModel, EmailStr, Field, field_validator

from app.schemas.common import PaginatedResponse


class ClientBase(BaseModel):
    name: str = Field(min_length=2, max_length=200)
    email: EmailStr
    phone: Optional[str] = Field(None, max_length=20)
    address: Optional[str] = None
    cpf: Optional[str] = Field(None, max_length=14)

    @field_validator("name", "phone", "address", "cpf", mode="before")
    @classmethod
    def strip_text(cls, v):
        if isinstance(v, str):
            return v.strip() or None
        return v


class ClientCreate(ClientBase):
    product_ids: List[int] = []


class ClientUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=2, max_length=200)
    email: Optional[EmailStr] = None
    phone: Optional[str] = Field(None, max_length=20)
    address: Optional[str] = None
    cpf: Optional[str] = Field(None, max_length=14)
    is_active: Optional[bool] = None
    product_ids: Optional[List[int]] = None

    @field_validator("name", "phone", "address", "cpf", mode="before")
    @classmethod
    def strip_text(cls, v):
        if isinstance(v, str):
            return v.strip() or None
        return v


class ClientProducts(BaseModel):
    product_ids: List[int] = Field(min_length=1)


class ProductInfo(BaseModel):
    id: int
    name: str
    code: Optional[str] = None

    class Config:
        from_attributes = True


class Client(ClientBase):
    id: int
    is_active: bool
    created_at: Optional[datetime] = None
    products: List[ProductInfo] = []

    class Config:
        from_attributes = True


class ClientResponse(BaseModel):
    success: bool = True
    message: str
    data: Client


class ClientsListResponse(PaginatedResponse):
    data: List[Client]
