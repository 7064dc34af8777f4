# ===================================
# app/repositories/category_repo.py
# ===================================
from typing import List, Optional
from sqlalchemy.orm import Session
from sqlalchemy import select, func

from app.models.category import Category


class CategoryRepository:
    """Repository pour la gestion des catégories"""

    def __init__(self, db: Session):
        self.db = db

    def get_category_by_id(self, category_id: int) -> Optional[Category]:
        return self.db.get(Category, category_id)

    def get_category_by_name(self, name: str, exclude_id: Optional[int] = None) -> Optional[Category]:
        """Récupérer une catégorie par son nom, en excluant éventuellement un ID"""
        query = select(Category).where(func.lower(Category.name) == name.lower())
        if exclude_id is not None:
            query = query.where(Category.id != exclude_id)
        return self.db.scalar(query)

    def get_active_categories(self) -> List[Category]:
        """Catégories actives triées par nom"""
        return list(self.db.scalars(
            select(Category)
            .where(Category.is_active == True)  # noqa: E712
            .order_by(Category.name)
        ))

    def create_category(self, category_data: dict, commit: bool = True) -> Category:
        category = Category(**category_data)
        self.db.add(category)
        if commit:
            self.db.commit()
            self.db.refresh(category)
        else:
            self.db.flush()
        return category

    def update_category(self, category: Category, update_data: dict) -> Category:
        for field, value in update_data.items():
            if hasattr(category, field) and value is not None:
                setattr(category, field, value)

        self.db.commit()
        self.db.refresh(category)
        return category

    def soft_delete_category(self, category: Category) -> Category:
        """Désactiver une catégorie (soft delete)"""
        category.is_active = False
        self.db.commit()
        return category

    def get_or_create_by_name(self, name: str) -> Category:
        """Récupérer ou créer (sans commit) une catégorie par son nom"""
        category = self.get_category_by_name(name)
        if category is None:
            category = self.create_category({"name": name, "is_active": True}, commit=False)
        return category
