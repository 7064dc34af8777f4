# ===================================
# app/services/order_service.py
# ===================================
"""
Cycle de vie des commandes.

Une vente décrémente le stock dès son enregistrement ; un achat n'alimente
le stock qu'à sa réception. Chaque mouvement de stock est validé dans la
même transaction que la commande.
"""

import logging
from typing import List, Optional, Tuple

from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.exceptions import (
    StockControlError, NotFoundError, ConflictError,
    InsufficientStockError, InvalidOrderStateError
)
from app.models.category import Category
from app.models.client import Client
from app.models.order import Order, OrderStatus, OrderType
from app.models.product import Product
from app.models.supplier import Supplier
from app.repositories.category_repo import CategoryRepository
from app.repositories.order_repo import OrderRepository
from app.repositories.product_repo import ProductRepository
from app.schemas.order import OrderCreate, OrderUpdate

logger = logging.getLogger(__name__)


class OrderService:
    """Service pour la logique métier des commandes"""

    def __init__(self, db: Session):
        self.db = db
        self.order_repo = OrderRepository(db)
        self.product_repo = ProductRepository(db)
        self.category_repo = CategoryRepository(db)

    def get_order(self, order_id: int) -> Order:
        order = self.order_repo.get_order_by_id(order_id)
        if not order:
            raise NotFoundError("Commande non trouvée")
        return order

    def list_orders(self, skip: int = 0, limit: int = 50,
                    status: Optional[OrderStatus] = None,
                    order_type: Optional[OrderType] = None) -> Tuple[List[Order], int]:
        return self.order_repo.get_orders(skip=skip, limit=limit, status=status, order_type=order_type)

    def register_order(self, order_data: OrderCreate) -> Order:
        """Enregistrer une commande ; une vente réserve immédiatement le stock"""
        if order_data.code and self.order_repo.get_order_by_code(order_data.code):
            raise ConflictError(f"Une commande avec le code '{order_data.code}' existe déjà")

        self._check_references(
            client_id=order_data.client_id,
            supplier_id=order_data.supplier_id,
            category_id=order_data.category_id
        )

        if order_data.type == OrderType.SALE and order_data.product_id is None:
            raise StockControlError("Une vente doit référencer un produit")

        order_dict = order_data.model_dump()
        order_dict["type"] = order_data.type.value
        order_dict["status"] = OrderStatus.IN_TRANSIT.value

        try:
            if order_data.product_id is not None:
                product = self._lock_product(order_data.product_id)
                if order_data.type == OrderType.SALE:
                    if not product.is_active:
                        raise NotFoundError("Produit non trouvé")
                    if product.stock_quantity < order_data.quantity:
                        raise InsufficientStockError(product.stock_quantity, order_data.quantity)
                    product.remove_stock(order_data.quantity)

            order = self.order_repo.add_order(order_dict)
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        logger.info("Commande %s enregistrée (%s, quantité %s)", order.code, order.type, order.quantity)
        self.db.refresh(order)
        return order

    def update_order(self, order_id: int, order_update: OrderUpdate) -> Order:
        """Modifier une commande encore en cours d'acheminement"""
        order = self.get_order(order_id)
        self._ensure_pending(order)

        update_data = order_update.model_dump(exclude_unset=True)

        if "product_id" in update_data:
            if not order.is_purchase:
                raise StockControlError("Le produit d'une vente ne peut pas être modifié")
            if update_data["product_id"] is not None:
                self._get_product(update_data["product_id"])

        self._check_references(
            client_id=update_data.get("client_id"),
            supplier_id=update_data.get("supplier_id"),
            category_id=update_data.get("category_id")
        )

        for field, value in update_data.items():
            if field in ("name", "price") and value is None:
                continue
            setattr(order, field, value)

        try:
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
        self.db.refresh(order)
        return order

    def delete_order(self, order_id: int) -> None:
        """Suppression définitive ; une vente en attente rend son stock"""
        order = self.get_order(order_id)
        try:
            if order.is_pending and order.is_sale:
                self._restock(order)
            self.order_repo.delete_order(order)
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
        logger.info("Commande %s supprimée", order.code)

    def receive_order(self, order_id: int) -> Order:
        """Réception : un achat alimente le stock ou crée le produit"""
        try:
            order = self.order_repo.get_order_for_update(order_id)
            if not order:
                raise NotFoundError("Commande non trouvée")
            self._ensure_pending(order)

            if order.is_purchase:
                product = None
                if order.product_id is not None:
                    product = self.product_repo.get_product_for_update(order.product_id)

                if product is None:
                    product = self._create_product_from_order(order)
                    order.product_id = product.id
                else:
                    product.add_stock(order.quantity)

                if order.supplier is not None and order.supplier not in product.suppliers:
                    product.suppliers.append(order.supplier)

            order.update_status(OrderStatus.RECEIVED)
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        logger.info("Commande %s reçue", order.code)
        self.db.refresh(order)
        return order

    def cancel_order(self, order_id: int) -> Order:
        """Annulation : une vente rend sa quantité au stock"""
        try:
            order = self.order_repo.get_order_for_update(order_id)
            if not order:
                raise NotFoundError("Commande non trouvée")
            self._ensure_pending(order)

            if order.is_sale:
                self._restock(order)

            order.update_status(OrderStatus.CANCELLED)
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        logger.info("Commande %s annulée", order.code)
        self.db.refresh(order)
        return order

    def _ensure_pending(self, order: Order) -> None:
        if not order.is_pending:
            raise InvalidOrderStateError(
                f"La commande {order.code} a déjà le statut '{order.status}'"
            )

    def _restock(self, order: Order) -> None:
        if order.product_id is None:
            return
        product = self.product_repo.get_product_for_update(order.product_id)
        if product is not None:
            product.add_stock(order.quantity)

    def _lock_product(self, product_id: int) -> Product:
        product = self.product_repo.get_product_for_update(product_id)
        if not product:
            raise NotFoundError("Produit non trouvé")
        return product

    def _get_product(self, product_id: int) -> Product:
        product = self.db.get(Product, product_id)
        if not product:
            raise NotFoundError("Produit non trouvé")
        return product

    def _check_references(self, client_id: Optional[int] = None,
                          supplier_id: Optional[int] = None,
                          category_id: Optional[int] = None) -> None:
        """Vérifier que les entités référencées existent"""
        if client_id is not None and self.db.get(Client, client_id) is None:
            raise NotFoundError("Client non trouvé")
        if supplier_id is not None and self.db.get(Supplier, supplier_id) is None:
            raise NotFoundError("Fournisseur non trouvé")
        if category_id is not None and self.db.get(Category, category_id) is None:
            raise NotFoundError("Catégorie non trouvée")

    def _create_product_from_order(self, order: Order) -> Product:
        """Créer le produit d'un achat reçu qui n'en référence aucun"""
        category = None
        if order.category_id is not None:
            category = self.category_repo.get_category_by_id(order.category_id)
        if category is None:
            category = self.category_repo.get_or_create_by_name(settings.default_category_name)

        product = self.product_repo.create_product({
            "name": order.name,
            "price": order.price,
            "stock_quantity": order.quantity,
            "category_id": category.id,
            "is_active": True,
        }, commit=False)
        logger.info("Produit '%s' créé à la réception de la commande %s", product.name, order.code)
        return product
