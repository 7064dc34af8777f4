# ===================================
# app/models/client.py
# ===================================
from sqlalchemy import Column, Integer, String, Boolean, DateTime, Text
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from app.core.database import Base


class Client(Base):
    __tablename__ = "client"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(200), nullable=False, index=True)
    email = Column(String(100), unique=True, index=True, nullable=False)
    phone = Column(String(20), nullable=True)
    address = Column(Text, nullable=True)
    cpf = Column(String(14), unique=True, nullable=True)  # Document fiscal brésilien
    is_active = Column(Boolean, default=True, nullable=False)

    # Timestamps
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    # Relations
    products = relationship("Product", secondary="client_product", back_populates="clients")
    orders = relationship("Order", back_populates="client")

    def __repr__(self):
        return f"<Client(id={self.id}, email='{self.email}')>"
