# ===================================
# app/models/product.py
# ===================================
from sqlalchemy import (
    Column, Integer, String, Boolean, DateTime, ForeignKey,
    Text, DECIMAL, Table, CheckConstraint
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from app.core.database import Base

# Tables d'association
product_supplier_table = Table(
    'product_supplier',
    Base.metadata,
    Column('product_id', Integer, ForeignKey('product.id', ondelete='CASCADE'), primary_key=True),
    Column('supplier_id', Integer, ForeignKey('supplier.id', ondelete='CASCADE'), primary_key=True)
)

client_product_table = Table(
    'client_product',
    Base.metadata,
    Column('client_id', Integer, ForeignKey('client.id', ondelete='CASCADE'), primary_key=True),
    Column('product_id', Integer, ForeignKey('product.id', ondelete='CASCADE'), primary_key=True)
)


class Product(Base):
    __tablename__ = "product"
    __table_args__ = (
        CheckConstraint("stock_quantity >= 0", name="ck_product_stock_non_negative"),
    )

    id = Column(Integer, primary_key=True, index=True)
    code = Column(String(50), unique=True, index=True, nullable=True)

    # Informations principales
    name = Column(String(200), nullable=False, index=True)
    description = Column(Text, nullable=True)
    category_id = Column(Integer, ForeignKey('category.id', ondelete='RESTRICT'), nullable=False)

    # Stock et prix
    stock_quantity = Column(Integer, default=0, nullable=False)
    price = Column(DECIMAL(10, 2), nullable=False)               # Prix de revient
    sale_price = Column(DECIMAL(10, 2), default=0, nullable=False)  # Prix de vente

    # État
    is_active = Column(Boolean, default=True, nullable=False, index=True)

    # Timestamps
    created_at = Column(DateTime(timezone=True), server_default=func.now(), index=True)
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    # Relations
    category = relationship("Category", back_populates="products")
    suppliers = relationship("Supplier", secondary=product_supplier_table, back_populates="products")
    clients = relationship("Client", secondary=client_product_table, back_populates="products")

    def __repr__(self):
        return f"<Product(id={self.id}, code='{self.code}', name='{self.name}')>"

    def is_in_stock(self) -> bool:
        """Vérifier si le produit est en stock"""
        return self.stock_quantity > 0

    def add_stock(self, quantity: int) -> int:
        """Entrée en stock, retourne la nouvelle quantité"""
        self.stock_quantity = (self.stock_quantity or 0) + quantity
        return self.stock_quantity

    def remove_stock(self, quantity: int) -> int:
        """Sortie de stock ; l'appelant a vérifié la disponibilité"""
        self.stock_quantity = self.stock_quantity - quantity
        return self.stock_quantity
