# ===================================
# app/api/v1/products.py
# ===================================
from typing import Any, Optional
from fastapi import APIRouter, Depends, status, Query
from sqlalchemy.orm import Session

from app.api.deps import require_user
from app.core.config import settings
from app.core.database import get_db
from app.models.user import User
from app.repositories.product_repo import ProductRepository
from app.services.product_service import ProductService
from app.schemas.common import MessageResponse
from app.schemas.product import (
    Product,
    ProductCreate,
    ProductUpdate,
    ProductDetail,
    ProductResponse,
    ProductsListResponse,
    LowStockResponse,
    StockUpdate,
    StockMovementResult,
    StockMovementResponse,
    ProductRef,
    ProductSuppliers,
    ProductSuppliersResponse,
    SupplierInfo
)

router = APIRouter()


@router.get("/", response_model=ProductsListResponse)
def list_products(
    skip: int = Query(0, ge=0, description="Nombre d'éléments à ignorer"),
    limit: int = Query(20, ge=1, le=100, description="Nombre d'éléments à retourner"),
    search: Optional[str] = Query(None, description="Recherche par nom ou code"),
    category_id: Optional[int] = Query(None, description="Filtrer par catégorie"),
    current_user: User = Depends(require_user),
    db: Session = Depends(get_db)
) -> Any:
    """
    Récupérer la liste des produits actifs avec filtres et pagination
    """
    products, total = ProductRepository(db).get_products(
        skip=skip,
        limit=limit,
        search=search,
        category_id=category_id
    )

    return ProductsListResponse.paginate(
        [Product.model_validate(product) for product in products], total, skip, limit
    )


@router.get("/low-stock", response_model=LowStockResponse)
def get_low_stock_products(
    threshold: Optional[int] = Query(None, ge=0, description="Seuil de stock bas"),
    current_user: User = Depends(require_user),
    db: Session = Depends(get_db)
) -> Any:
    """
    Produits dont le stock est inférieur ou égal au seuil
    """
    if threshold is None:
        threshold = settings.low_stock_threshold
    products = ProductService(db).get_low_stock_products(threshold)

    return LowStockResponse(
        data=[Product.model_validate(p) for p in products],
        total=len(products),
        threshold=threshold
    )


@router.get("/{product_id}", response_model=ProductResponse)
def get_product(
    product_id: int,
    current_user: User = Depends(require_user),
    db: Session = Depends(get_db)
) -> Any:
    """
    Récupérer un produit par ID
    """
    product = ProductService(db).get_product(product_id)
    return ProductResponse(message="Produit récupéré", data=ProductDetail.model_validate(product))


@router.post("/", response_model=ProductResponse, status_code=status.HTTP_201_CREATED)
def create_product(
    product_data: ProductCreate,
    current_user: User = Depends(require_user),
    db: Session = Depends(get_db)
) -> Any:
    """
    Créer un nouveau produit
    """
    product = ProductService(db).create_product(product_data)
    return ProductResponse(
        message="Produit créé avec succès",
        data=ProductDetail.model_validate(product)
    )


@router.put("/{product_id}", response_model=ProductResponse)
def update_product(
    product_id: int,
    product_update: ProductUpdate,
    current_user: User = Depends(require_user),
    db: Session = Depends(get_db)
) -> Any:
    """
    Mettre à jour un produit
    """
    product = ProductService(db).update_product(product_id, product_update)
    return ProductResponse(
        message="Produit mis à jour avec succès",
        data=ProductDetail.model_validate(product)
    )


@router.delete("/{product_id}", response_model=MessageResponse)
def delete_product(
    product_id: int,
    current_user: User = Depends(require_user),
    db: Session = Depends(get_db)
) -> Any:
    """
    Supprimer un produit (soft delete)
    """
    ProductService(db).delete_product(product_id)
    return MessageResponse(message="Produit supprimé avec succès")


@router.patch("/{product_id}/stock", response_model=StockMovementResponse)
def update_stock(
    product_id: int,
    stock_update: StockUpdate,
    current_user: User = Depends(require_user),
    db: Session = Depends(get_db)
) -> Any:
    """
    Entrée ou sortie de stock
    """
    result = ProductService(db).move_stock(product_id, stock_update)
    return StockMovementResponse(
        message="Stock mis à jour avec succès",
        data=StockMovementResult(**result)
    )


@router.get("/{product_id}/suppliers", response_model=ProductSuppliersResponse)
def get_product_suppliers(
    product_id: int,
    current_user: User = Depends(require_user),
    db: Session = Depends(get_db)
) -> Any:
    """
    Fournisseurs actifs d'un produit
    """
    product, suppliers = ProductService(db).get_product_suppliers(product_id)
    return ProductSuppliersResponse(
        data=ProductSuppliers(
            product=ProductRef.model_validate(product),
            suppliers=[SupplierInfo.model_validate(s) for s in suppliers]
        )
    )
