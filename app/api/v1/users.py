# ===================================
# app/api/v1/users.py
# ===================================
from typing import Any, Optional
from fastapi import APIRouter, Depends, HTTPException, status, Query
from sqlalchemy.orm import Session

from app.api.deps import require_user, require_admin
from app.core.database import get_db
from app.models.user import UserRole
from app.repositories.user_repo import (
    get_users,
    get_user_by_id,
    get_user_by_email,
    update_user,
    deactivate_user
)
from app.schemas.common import MessageResponse
from app.schemas.user import (
    User,
    UserUpdate,
    UserProfileUpdate,
    UserResponse,
    UsersListResponse
)

router = APIRouter()


def _check_email_available(db: Session, email: Optional[str], user_id: int) -> None:
    if not email:
        return
    existing = get_user_by_email(db, email=email)
    if existing and existing.id != user_id:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Un utilisateur avec cet email existe déjà"
        )


@router.get("/", response_model=UsersListResponse)
def list_users(
    skip: int = Query(0, ge=0, description="Nombre d'éléments à ignorer"),
    limit: int = Query(20, ge=1, le=100, description="Nombre d'éléments à retourner"),
    search: Optional[str] = Query(None, description="Terme de recherche"),
    is_active: Optional[bool] = Query(None, description="Filtrer par statut actif"),
    role: Optional[UserRole] = Query(None, description="Filtrer par rôle"),
    current_user: User = Depends(require_admin),
    db: Session = Depends(get_db)
) -> Any:
    """
    Récupérer la liste des utilisateurs (Admin seulement)
    """
    users, total = get_users(
        db=db,
        skip=skip,
        limit=limit,
        search=search,
        is_active=is_active,
        role=role.value if role else None
    )

    return UsersListResponse.paginate(
        [User.model_validate(user) for user in users], total, skip, limit
    )


@router.get("/me", response_model=UserResponse)
def get_my_profile(
    current_user: User = Depends(require_user)
) -> Any:
    """
    Récupérer son propre profil
    """
    return UserResponse(
        message="Profil récupéré",
        data=User.model_validate(current_user)
    )


@router.put("/me", response_model=UserResponse)
def update_my_profile(
    profile_update: UserProfileUpdate,
    current_user: User = Depends(require_user),
    db: Session = Depends(get_db)
) -> Any:
    """
    Mettre à jour son propre profil (nom, email)
    """
    update_data = profile_update.model_dump(exclude_unset=True)
    _check_email_available(db, update_data.get("email"), current_user.id)

    user = update_user(db, current_user, update_data)

    return UserResponse(
        message="Profil mis à jour avec succès",
        data=User.model_validate(user)
    )


@router.get("/{user_id}", response_model=UserResponse)
def get_user(
    user_id: int,
    current_user: User = Depends(require_admin),
    db: Session = Depends(get_db)
) -> Any:
    """
    Récupérer un utilisateur par ID (Admin seulement)
    """
    user = get_user_by_id(db, user_id=user_id)
    if not user:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Utilisateur non trouvé"
        )

    return UserResponse(
        message="Utilisateur récupéré",
        data=User.model_validate(user)
    )


@router.put("/{user_id}", response_model=UserResponse)
def update_user_by_id(
    user_id: int,
    user_update: UserUpdate,
    current_user: User = Depends(require_admin),
    db: Session = Depends(get_db)
) -> Any:
    """
    Mettre à jour un utilisateur (Admin seulement)
    """
    user = get_user_by_id(db, user_id=user_id)
    if not user:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Utilisateur non trouvé"
        )

    update_data = user_update.model_dump(exclude_unset=True)
    _check_email_available(db, update_data.get("email"), user.id)

    if user.id == current_user.id and update_data.get("is_active") is False:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Vous ne pouvez pas désactiver votre propre compte"
        )

    user = update_user(db, user, update_data)

    return UserResponse(
        message="Utilisateur mis à jour avec succès",
        data=User.model_validate(user)
    )


@router.delete("/{user_id}", response_model=MessageResponse)
def delete_user_by_id(
    user_id: int,
    current_user: User = Depends(require_admin),
    db: Session = Depends(get_db)
) -> Any:
    """
    Désactiver un utilisateur (Admin seulement)
    """
    if user_id == current_user.id:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Vous ne pouvez pas supprimer votre propre compte"
        )

    user = get_user_by_id(db, user_id=user_id)
    if not user:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Utilisateur non trouvé"
        )

    deactivate_user(db, user)

    return MessageResponse(message="Utilisateur désactivé avec succès")
