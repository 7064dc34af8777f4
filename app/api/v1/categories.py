# ===================================
# app/api/v1/categories.py
# ===================================
from typing import Any
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from app.api.deps import require_user
from app.core.database import get_db
from app.models.user import User
from app.repositories.category_repo import CategoryRepository
from app.schemas.category import (
    Category,
    CategoryCreate,
    CategoryUpdate,
    CategoryResponse,
    CategoriesListResponse
)
from app.schemas.common import MessageResponse

router = APIRouter()


def _get_category_or_404(repo: CategoryRepository, category_id: int):
    category = repo.get_category_by_id(category_id)
    if not category:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Catégorie non trouvée"
        )
    return category


@router.get("/", response_model=CategoriesListResponse)
def list_categories(
    current_user: User = Depends(require_user),
    db: Session = Depends(get_db)
) -> Any:
    """Récupérer toutes les catégories actives"""
    categories = CategoryRepository(db).get_active_categories()
    return CategoriesListResponse(
        data=[Category.model_validate(c) for c in categories],
        total=len(categories)
    )


@router.get("/{category_id}", response_model=CategoryResponse)
def get_category(
    category_id: int,
    current_user: User = Depends(require_user),
    db: Session = Depends(get_db)
) -> Any:
    """Récupérer une catégorie par ID"""
    category = _get_category_or_404(CategoryRepository(db), category_id)
    return CategoryResponse(message="Catégorie récupérée", data=Category.model_validate(category))


@router.post("/", response_model=CategoryResponse, status_code=status.HTTP_201_CREATED)
def create_category(
    category_data: CategoryCreate,
    current_user: User = Depends(require_user),
    db: Session = Depends(get_db)
) -> Any:
    """Créer une nouvelle catégorie"""
    repo = CategoryRepository(db)
    if repo.get_category_by_name(category_data.name):
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Une catégorie avec ce nom existe déjà"
        )

    category = repo.create_category(category_data.model_dump())
    return CategoryResponse(
        message="Catégorie créée avec succès",
        data=Category.model_validate(category)
    )


@router.put("/{category_id}", response_model=CategoryResponse)
def update_category(
    category_id: int,
    category_update: CategoryUpdate,
    current_user: User = Depends(require_user),
    db: Session = Depends(get_db)
) -> Any:
    """Mettre à jour une catégorie"""
    repo = CategoryRepository(db)
    category = _get_category_or_404(repo, category_id)

    update_data = category_update.model_dump(exclude_unset=True)
    if update_data.get("name") and repo.get_category_by_name(update_data["name"], exclude_id=category.id):
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Une catégorie avec ce nom existe déjà"
        )

    category = repo.update_category(category, update_data)
    return CategoryResponse(
        message="Catégorie mise à jour avec succès",
        data=Category.model_validate(category)
    )


@router.delete("/{category_id}", response_model=MessageResponse)
def delete_category(
    category_id: int,
    current_user: User = Depends(require_user),
    db: Session = Depends(get_db)
) -> Any:
    """Désactiver une catégorie"""
    repo = CategoryRepository(db)
    category = _get_category_or_404(repo, category_id)
    repo.soft_delete_category(category)
    return MessageResponse(message="Catégorie supprimée avec succès")
