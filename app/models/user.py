# ===================================
# app/models/user.py
# ===================================
import enum

from sqlalchemy import Column, Integer, String, Boolean, DateTime
from sqlalchemy.sql import func

from app.core.database import Base


class UserRole(str, enum.Enum):
    """Rôles applicatifs"""
    ADMIN = "admin"
    USER = "user"


class User(Base):
    __tablename__ = "user"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(200), nullable=False)
    email = Column(String(255), unique=True, index=True, nullable=False)
    role = Column(String(20), default=UserRole.USER.value, nullable=False)

    # Authentification
    password_hash = Column(String, nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)

    # Limitation des tentatives de connexion
    failed_login_attempts = Column(Integer, default=0, nullable=False)
    locked_until = Column(DateTime, nullable=True)  # UTC naïf

    # Récupération de mot de passe (empreinte SHA-256 du code envoyé)
    reset_token_hash = Column(String(64), index=True, nullable=True)
    reset_token_expires_at = Column(DateTime, nullable=True)  # UTC naïf

    # Timestamps
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())
    last_login = Column(DateTime, nullable=True)

    def __repr__(self):
        return f"<User(id={self.id}, email='{self.email}')>"

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN.value

    def is_locked(self, now) -> bool:
        """Vérifier si le compte est bloqué à l'instant donné"""
        return self.locked_until is not None and self.locked_until > now
