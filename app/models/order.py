# ===================================
# app/models/order.py
# ===================================
from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, DECIMAL, Text, select, func
from sqlalchemy.orm import relationship
from datetime import datetime
import enum

from app.core.database import Base


class OrderStatus(str, enum.Enum):
    """Statuts de commande (valeurs attendues par le frontend)"""
    IN_TRANSIT = "a-caminho"     # En cours d'acheminement
    RECEIVED = "recebido"        # Reçue
    CANCELLED = "cancelado"      # Annulée


class OrderType(str, enum.Enum):
    """Sens du mouvement de stock"""
    PURCHASE = "compra"          # Achat auprès d'un fournisseur (entrée)
    SALE = "venda"               # Vente à un client (sortie)


class Order(Base):
    __tablename__ = "order"

    id = Column(Integer, primary_key=True, index=True)
    code = Column(String(30), unique=True, index=True, nullable=False)  # Ex: "PED-2025-000001"

    # Produit commandé
    name = Column(String(200), nullable=False)
    price = Column(DECIMAL(10, 2), nullable=False)
    quantity = Column(Integer, default=1, nullable=False)
    type = Column(String(20), nullable=False, index=True)
    status = Column(String(20), default=OrderStatus.IN_TRANSIT.value, nullable=False, index=True)

    # Références (toutes optionnelles)
    product_id = Column(Integer, ForeignKey('product.id', ondelete='SET NULL'), nullable=True)
    category_id = Column(Integer, ForeignKey('category.id', ondelete='SET NULL'), nullable=True)
    supplier_id = Column(Integer, ForeignKey('supplier.id', ondelete='SET NULL'), nullable=True)
    client_id = Column(Integer, ForeignKey('client.id', ondelete='SET NULL'), nullable=True)

    delivery_date = Column(DateTime, nullable=True)
    notes = Column(Text, nullable=True)

    # Timestamps
    created_at = Column(DateTime(timezone=True), server_default=func.now(), index=True)
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())
    received_at = Column(DateTime, nullable=True)
    cancelled_at = Column(DateTime, nullable=True)

    # Relations
    product = relationship("Product")
    category = relationship("Category")
    supplier = relationship("Supplier", back_populates="orders")
    client = relationship("Client", back_populates="orders")

    def __repr__(self):
        return f"<Order(id={self.id}, code='{self.code}', status='{self.status}')>"

    @property
    def is_pending(self) -> bool:
        return self.status == OrderStatus.IN_TRANSIT.value

    @property
    def is_sale(self) -> bool:
        return self.type == OrderType.SALE.value

    @property
    def is_purchase(self) -> bool:
        return self.type == OrderType.PURCHASE.value

    @property
    def total(self):
        """Montant total de la commande"""
        return self.price * self.quantity

    def update_status(self, new_status: OrderStatus):
        """Mettre à jour le statut de la commande avec horodatage"""
        self.status = new_status.value

        now = datetime.utcnow()
        if new_status == OrderStatus.RECEIVED:
            self.received_at = now
        elif new_status == OrderStatus.CANCELLED:
            self.cancelled_at = now

    @classmethod
    def generate_code(cls, db_session) -> str:
        """Générer un code de commande unique"""
        current_year = datetime.utcnow().year
        prefix = f"PED-{current_year}-"

        count = db_session.scalar(
            select(func.count(cls.id)).where(cls.code.like(f"{prefix}%"))
        ) or 0

        code = f"{prefix}{(count + 1):06d}"
        # Des suppressions peuvent laisser des trous : avancer jusqu'à un code libre
        while db_session.scalar(select(cls.id).where(cls.code == code)) is not None:
            count += 1
            code = f"{prefix}{(count + 1):06d}"
        return code
