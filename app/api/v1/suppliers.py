# ===================================
# app/api/v1/suppliers.py
# ===================================
from typing import Any, Optional
from fastapi import APIRouter, Depends, HTTPException, status, Query
from sqlalchemy.orm import Session

from app.api.deps import require_user
from app.core.database import get_db
from app.models.user import User
from app.repositories.supplier_repo import SupplierRepository
from app.schemas.common import MessageResponse
from app.schemas.supplier import (
    Supplier,
    SupplierCreate,
    SupplierUpdate,
    SupplierResponse,
    SuppliersListResponse
)

router = APIRouter()


def _get_supplier_or_404(repo: SupplierRepository, supplier_id: int):
    supplier = repo.get_supplier_by_id(supplier_id)
    if not supplier:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Fournisseur non trouvé"
        )
    return supplier


@router.get("/", response_model=SuppliersListResponse)
def list_suppliers(
    is_active: Optional[bool] = Query(None, description="Filtrer par statut actif"),
    current_user: User = Depends(require_user),
    db: Session = Depends(get_db)
) -> Any:
    """Récupérer les fournisseurs"""
    suppliers = SupplierRepository(db).get_suppliers(is_active=is_active)
    return SuppliersListResponse(
        data=[Supplier.model_validate(s) for s in suppliers],
        total=len(suppliers)
    )


@router.get("/{supplier_id}", response_model=SupplierResponse)
def get_supplier(
    supplier_id: int,
    current_user: User = Depends(require_user),
    db: Session = Depends(get_db)
) -> Any:
    """Récupérer un fournisseur par ID"""
    supplier = _get_supplier_or_404(SupplierRepository(db), supplier_id)
    return SupplierResponse(message="Fournisseur récupéré", data=Supplier.model_validate(supplier))


@router.post("/", response_model=SupplierResponse, status_code=status.HTTP_201_CREATED)
def create_supplier(
    supplier_data: SupplierCreate,
    current_user: User = Depends(require_user),
    db: Session = Depends(get_db)
) -> Any:
    """Créer un fournisseur"""
    supplier = SupplierRepository(db).create_supplier(supplier_data.model_dump())
    return SupplierResponse(
        message="Fournisseur créé avec succès",
        data=Supplier.model_validate(supplier)
    )


@router.put("/{supplier_id}", response_model=SupplierResponse)
def update_supplier(
    supplier_id: int,
    supplier_update: SupplierUpdate,
    current_user: User = Depends(require_user),
    db: Session = Depends(get_db)
) -> Any:
    """Mettre à jour un fournisseur"""
    repo = SupplierRepository(db)
    supplier = _get_supplier_or_404(repo, supplier_id)
    supplier = repo.update_supplier(supplier, supplier_update.model_dump(exclude_unset=True))
    return SupplierResponse(
        message="Fournisseur mis à jour avec succès",
        data=Supplier.model_validate(supplier)
    )


@router.delete("/{supplier_id}", response_model=MessageResponse)
def delete_supplier(
    supplier_id: int,
    current_user: User = Depends(require_user),
    db: Session = Depends(get_db)
) -> Any:
    """Supprimer définitivement un fournisseur"""
    repo = SupplierRepository(db)
    supplier = _get_supplier_or_404(repo, supplier_id)
    repo.delete_supplier(supplier)
    return MessageResponse(message="Fournisseur supprimé avec succès")
