# ===================================
# app/repositories/order_repo.py
# ===================================
from typing import List, Optional, Tuple
from sqlalchemy.orm import Session
from sqlalchemy import select, func, and_, desc

from app.models.order import Order, OrderStatus, OrderType


class OrderRepository:
    """Repository pour la gestion des commandes

    Les méthodes d'écriture ne font que flush : le service valide la
    transaction une fois le stock mis à jour.
    """

    def __init__(self, db: Session):
        self.db = db

    def add_order(self, order_data: dict) -> Order:
        """Ajouter une commande à la session, en générant son code si besoin"""
        if not order_data.get("code"):
            order_data["code"] = Order.generate_code(self.db)

        order = Order(**order_data)
        self.db.add(order)
        self.db.flush()
        return order

    def get_order_by_id(self, order_id: int) -> Optional[Order]:
        """Récupérer une commande par son ID"""
        return self.db.get(Order, order_id)

    def get_order_for_update(self, order_id: int) -> Optional[Order]:
        """Récupérer une commande en verrouillant sa ligne"""
        return self.db.scalar(
            select(Order).where(Order.id == order_id).with_for_update()
        )

    def get_order_by_code(self, code: str) -> Optional[Order]:
        """Récupérer une commande par son code"""
        return self.db.scalar(select(Order).where(Order.code == code))

    def get_orders(self, skip: int = 0, limit: int = 50,
                   status: Optional[OrderStatus] = None,
                   order_type: Optional[OrderType] = None) -> Tuple[List[Order], int]:
        """Récupérer les commandes avec filtres, plus récentes en premier"""
        query = select(Order)

        # Filtres
        conditions = []

        if status:
            conditions.append(Order.status == status.value)

        if order_type:
            conditions.append(Order.type == order_type.value)

        if conditions:
            query = query.where(and_(*conditions))

        # Compter le total
        count_query = select(func.count()).select_from(query.subquery())
        total = self.db.scalar(count_query)

        orders = self.db.scalars(
            query.order_by(desc(Order.created_at), desc(Order.id))
            .offset(skip)
            .limit(limit)
        ).all()

        return list(orders), total or 0

    def delete_order(self, order: Order) -> None:
        self.db.delete(order)
        self.db.flush()
