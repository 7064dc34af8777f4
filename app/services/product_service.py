# ===================================
# app/services/product_service.py
# ===================================

import logging
from typing import List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.exceptions import NotFoundError, ConflictError, InsufficientStockError
from app.models.product import Product
from app.models.supplier import Supplier
from app.repositories.category_repo import CategoryRepository
from app.repositories.product_repo import ProductRepository
from app.repositories.supplier_repo import SupplierRepository
from app.schemas.product import ProductCreate, ProductUpdate, StockMovement, StockUpdate

logger = logging.getLogger(__name__)


class ProductService:
    """Service pour la logique métier des produits"""

    def __init__(self, db: Session):
        self.db = db
        self.product_repo = ProductRepository(db)
        self.category_repo = CategoryRepository(db)
        self.supplier_repo = SupplierRepository(db)

    def get_product(self, product_id: int) -> Product:
        product = self.product_repo.get_product_by_id(product_id)
        if not product:
            raise NotFoundError("Produit non trouvé")
        return product

    def create_product(self, product_data: ProductCreate) -> Product:
        """Créer un produit après vérification de la catégorie et du code"""
        self._check_category(product_data.category_id)
        if product_data.code:
            self._check_code(product_data.code)

        suppliers = self._load_suppliers(product_data.supplier_ids)

        product_dict = product_data.model_dump(exclude={"supplier_ids"})
        product_dict["name"] = product_dict["name"].strip()

        try:
            product = self.product_repo.create_product(product_dict, commit=False)
            product.suppliers = suppliers
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            raise

        logger.info("Produit créé: %s (id=%s)", product.name, product.id)
        return self.get_product(product.id)

    def update_product(self, product_id: int, product_update: ProductUpdate) -> Product:
        """Mettre à jour un produit ; supplier_ids remplace les liens existants"""
        product = self.get_product(product_id)
        update_data = product_update.model_dump(exclude_unset=True)

        if update_data.get("category_id") is not None:
            self._check_category(update_data["category_id"])
        if update_data.get("code"):
            self._check_code(update_data["code"], exclude_id=product.id)

        supplier_ids = update_data.pop("supplier_ids", None)
        if supplier_ids is not None:
            product.suppliers = self._load_suppliers(supplier_ids)

        try:
            self.product_repo.update_product(product, update_data)
        except SQLAlchemyError:
            self.db.rollback()
            raise
        return self.get_product(product.id)

    def delete_product(self, product_id: int) -> Product:
        product = self.get_product(product_id)
        return self.product_repo.soft_delete_product(product)

    def move_stock(self, product_id: int, stock_update: StockUpdate) -> dict:
        """Entrée ou sortie de stock sous verrou de ligne"""
        try:
            product = self.product_repo.get_product_for_update(product_id)
            if not product:
                raise NotFoundError("Produit non trouvé")

            previous = product.stock_quantity
            if stock_update.movement == StockMovement.IN:
                product.add_stock(stock_update.quantity)
            else:
                if previous < stock_update.quantity:
                    raise InsufficientStockError(previous, stock_update.quantity)
                product.remove_stock(stock_update.quantity)

            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        logger.info(
            "Mouvement de stock %s de %s sur le produit %s: %s -> %s",
            stock_update.movement.value, stock_update.quantity,
            product.id, previous, product.stock_quantity
        )
        return {
            "id": product.id,
            "name": product.name,
            "previous_quantity": previous,
            "current_quantity": product.stock_quantity,
            "movement": stock_update.movement,
        }

    def get_low_stock_products(self, threshold: Optional[int] = None) -> List[Product]:
        if threshold is None:
            threshold = settings.low_stock_threshold
        return self.product_repo.get_low_stock_products(threshold)

    def get_product_suppliers(self, product_id: int) -> tuple[Product, List[Supplier]]:
        product = self.get_product(product_id)
        return product, self.product_repo.get_active_suppliers(product.id)

    def _check_category(self, category_id: int) -> None:
        if not self.category_repo.get_category_by_id(category_id):
            raise NotFoundError("Catégorie non trouvée")

    def _check_code(self, code: str, exclude_id: Optional[int] = None) -> None:
        if self.product_repo.get_product_by_code(code, exclude_id=exclude_id):
            raise ConflictError(f"Un produit avec le code '{code}' existe déjà")

    def _load_suppliers(self, supplier_ids: List[int]) -> List[Supplier]:
        """Charger les fournisseurs, 404 si un identifiant est inconnu"""
        if not supplier_ids:
            return []
        unique_ids = set(supplier_ids)
        suppliers = self.supplier_repo.get_suppliers_by_ids(list(unique_ids))
        missing = unique_ids - {s.id for s in suppliers}
        if missing:
            raise NotFoundError(
                f"Fournisseur(s) non trouvé(s): {', '.join(str(i) for i in sorted(missing))}"
            )
        return suppliers
