# ===================================
# app/schemas/common.py
# ===================================
from pydantic import BaseModel


class MessageResponse(BaseModel):
    success: bool = True
    message: str


class PaginatedResponse(BaseModel):
    """Champs de pagination partagés par les listes"""
    success: bool = True
    total: int
    page: int
    per_page: int
    has_more: bool

    @classmethod
    def paginate(cls, data, total: int, skip: int, limit: int, **extra):
        return cls(
            data=data,
            total=total,
            page=(skip // limit) + 1,
            per_page=limit,
            has_more=(skip + limit) < total,
            **extra
        )
