# ===================================
# app/repositories/user_repo.py
# ===================================
from typing import List, Optional, Tuple
from sqlalchemy.orm import Session
from sqlalchemy import select, func, and_, or_, desc, update
from datetime import datetime

from app.models.user import User, UserRole
from app.schemas.user import UserCreate
from app.core.security import get_password_hash


def get_user_by_id(db: Session, user_id: int) -> Optional[User]:
    """Récupérer un utilisateur par son ID"""
    return db.get(User, user_id)


def get_user_by_email(db: Session, email: str) -> Optional[User]:
    """Récupérer un utilisateur par son email (insensible à la casse)"""
    return db.scalar(
        select(User).where(func.lower(User.email) == email.lower())
    )


def get_user_by_reset_token_hash(db: Session, token_hash: str, now: datetime) -> Optional[User]:
    """Récupérer l'utilisateur détenant un code de récupération non expiré"""
    return db.scalar(
        select(User).where(
            User.reset_token_hash == token_hash,
            User.reset_token_expires_at > now
        )
    )


def create_user(db: Session, user: UserCreate) -> User:
    """Créer un nouvel utilisateur"""
    db_user = User(
        name=user.name.strip(),
        email=user.email.lower(),
        role=UserRole(user.role).value,
        password_hash=get_password_hash(user.password),
        is_active=True,
        failed_login_attempts=0
    )

    db.add(db_user)
    db.commit()
    db.refresh(db_user)
    return db_user


def update_user(db: Session, user: User, update_data: dict) -> User:
    """Mettre à jour un utilisateur"""
    if update_data.get("email"):
        update_data["email"] = update_data["email"].lower()
    if update_data.get("role") is not None:
        update_data["role"] = UserRole(update_data["role"]).value

    for field, value in update_data.items():
        if hasattr(user, field) and value is not None:
            setattr(user, field, value)

    db.commit()
    db.refresh(user)
    return user


def deactivate_user(db: Session, user: User) -> User:
    """Désactiver un utilisateur (soft delete)"""
    user.is_active = False
    db.commit()
    db.refresh(user)
    return user


def get_users(db: Session, skip: int = 0, limit: int = 100,
              search: Optional[str] = None,
              is_active: Optional[bool] = None,
              role: Optional[str] = None) -> Tuple[List[User], int]:
    """Récupérer la liste des utilisateurs avec filtres"""
    query = select(User)

    # Filtres
    conditions = []

    if search:
        conditions.append(
            or_(
                User.email.ilike(f"%{search}%"),
                User.name.ilike(f"%{search}%")
            )
        )

    if is_active is not None:
        conditions.append(User.is_active == is_active)

    if role:
        conditions.append(User.role == role)

    if conditions:
        query = query.where(and_(*conditions))

    # Compter le total
    count_query = select(func.count()).select_from(query.subquery())
    total = db.scalar(count_query)

    # Récupérer avec pagination
    users = db.scalars(
        query.order_by(desc(User.created_at), desc(User.id))
        .offset(skip)
        .limit(limit)
    ).all()

    return list(users), total or 0


def set_password(db: Session, user: User, new_password: str) -> User:
    """Changer le mot de passe et invalider code de récupération et blocage"""
    user.password_hash = get_password_hash(new_password)
    user.reset_token_hash = None
    user.reset_token_expires_at = None
    user.failed_login_attempts = 0
    user.locked_until = None
    db.commit()
    db.refresh(user)
    return user


def cleanup_expired_reset_tokens(db: Session, now: datetime) -> int:
    """Effacer les codes de récupération expirés"""
    result = db.execute(
        update(User)
        .where(
            and_(
                User.reset_token_hash.is_not(None),
                User.reset_token_expires_at < now
            )
        )
        .values(reset_token_hash=None, reset_token_expires_at=None)
    )
    db.commit()
    return result.rowcount
