# ===================================
# app/repositories/product_repo.py
# ===================================
from typing import List, Optional, Tuple
from sqlalchemy.orm import Session, selectinload
from sqlalchemy import select, func, and_, or_, asc

from app.models.product import Product
from app.models.supplier import Supplier


class ProductRepository:
    """Repository pour la gestion des produits"""

    def __init__(self, db: Session):
        self.db = db

    def get_product_by_id(self, product_id: int, with_suppliers: bool = True) -> Optional[Product]:
        """Récupérer un produit par son ID"""
        query = select(Product).where(Product.id == product_id)

        options = [selectinload(Product.category)]
        if with_suppliers:
            options.append(selectinload(Product.suppliers))

        return self.db.scalar(query.options(*options))

    def get_product_for_update(self, product_id: int) -> Optional[Product]:
        """Récupérer un produit en verrouillant sa ligne (SELECT ... FOR UPDATE)"""
        return self.db.scalar(
            select(Product)
            .where(Product.id == product_id)
            .with_for_update()
        )

    def get_product_by_code(self, code: str, exclude_id: Optional[int] = None) -> Optional[Product]:
        """Récupérer un produit par son code"""
        query = select(Product).where(Product.code == code)
        if exclude_id is not None:
            query = query.where(Product.id != exclude_id)
        return self.db.scalar(query)

    def get_products_by_ids(self, product_ids: List[int]) -> List[Product]:
        return list(self.db.scalars(
            select(Product).where(Product.id.in_(product_ids))
        ))

    def get_products(self, skip: int = 0, limit: int = 20,
                     search: Optional[str] = None,
                     category_id: Optional[int] = None,
                     is_active: Optional[bool] = True) -> Tuple[List[Product], int]:
        """Récupérer les produits avec filtres et pagination"""

        query = select(Product)

        # Filtres
        conditions = []

        if is_active is not None:
            conditions.append(Product.is_active == is_active)

        if category_id:
            conditions.append(Product.category_id == category_id)

        if search:
            conditions.append(
                or_(
                    Product.name.ilike(f"%{search}%"),
                    Product.code.ilike(f"%{search}%")
                )
            )

        if conditions:
            query = query.where(and_(*conditions))

        # Compter le total
        count_query = select(func.count()).select_from(query.subquery())
        total = self.db.scalar(count_query)

        products = self.db.scalars(
            query.options(selectinload(Product.category))
            .order_by(asc(Product.name), asc(Product.id))
            .offset(skip)
            .limit(limit)
        ).all()

        return list(products), total or 0

    def get_low_stock_products(self, threshold: int) -> List[Product]:
        """Produits actifs dont le stock est inférieur ou égal au seuil"""
        return list(self.db.scalars(
            select(Product)
            .where(
                Product.is_active == True,  # noqa: E712
                Product.stock_quantity <= threshold
            )
            .options(selectinload(Product.category))
            .order_by(asc(Product.stock_quantity), asc(Product.name))
        ))

    def get_active_suppliers(self, product_id: int) -> List[Supplier]:
        """Fournisseurs actifs liés à un produit"""
        return list(self.db.scalars(
            select(Supplier)
            .where(
                Supplier.products.any(Product.id == product_id),
                Supplier.is_active == True  # noqa: E712
            )
            .order_by(asc(Supplier.name))
        ))

    def create_product(self, product_data: dict, commit: bool = True) -> Product:
        """Créer un nouveau produit"""
        product = Product(**product_data)
        self.db.add(product)
        if commit:
            self.db.commit()
            self.db.refresh(product)
        else:
            self.db.flush()
        return product

    def update_product(self, product: Product, update_data: dict) -> Product:
        """Mettre à jour un produit"""
        for field, value in update_data.items():
            if hasattr(product, field) and value is not None:
                setattr(product, field, value)

        self.db.commit()
        self.db.refresh(product)
        return product

    def soft_delete_product(self, product: Product) -> Product:
        """Désactiver un produit (soft delete)"""
        product.is_active = False
        self.db.commit()
        return product
