# ===================================
# app/repositories/supplier_repo.py
# ===================================
from typing import List, Optional
from sqlalchemy.orm import Session
from sqlalchemy import select, asc

from app.models.supplier import Supplier


class SupplierRepository:
    """Repository pour la gestion des fournisseurs"""

    def __init__(self, db: Session):
        self.db = db

    def get_supplier_by_id(self, supplier_id: int) -> Optional[Supplier]:
        return self.db.get(Supplier, supplier_id)

    def get_suppliers_by_ids(self, supplier_ids: List[int]) -> List[Supplier]:
        return list(self.db.scalars(
            select(Supplier).where(Supplier.id.in_(supplier_ids))
        ))

    def get_suppliers(self, is_active: Optional[bool] = None) -> List[Supplier]:
        query = select(Supplier)
        if is_active is not None:
            query = query.where(Supplier.is_active == is_active)
        return list(self.db.scalars(query.order_by(asc(Supplier.name), asc(Supplier.id))))

    def create_supplier(self, supplier_data: dict) -> Supplier:
        supplier = Supplier(**supplier_data)
        self.db.add(supplier)
        self.db.commit()
        self.db.refresh(supplier)
        return supplier

    def update_supplier(self, supplier: Supplier, update_data: dict) -> Supplier:
        for field, value in update_data.items():
            if hasattr(supplier, field) and value is not None:
                setattr(supplier, field, value)

        self.db.commit()
        self.db.refresh(supplier)
        return supplier

    def delete_supplier(self, supplier: Supplier) -> None:
        """Suppression définitive ; les commandes perdent la référence"""
        self.db.delete(supplier)
        self.db.commit()
