# ===================================
# app/api/v1/orders.py
# ===================================
from typing import Any, Optional
from fastapi import APIRouter, Depends, status, Query
from sqlalchemy.orm import Session

from app.api.deps import require_user
from app.core.database import get_db
from app.models.order import OrderStatus, OrderType
from app.models.user import User
from app.schemas.common import MessageResponse
from app.schemas.order import (
    Order,
    OrderCreate,
    OrderUpdate,
    OrderResponse,
    OrdersListResponse
)
from app.services.order_service import OrderService

router = APIRouter()


@router.get("/", response_model=OrdersListResponse)
def list_orders(
    skip: int = Query(0, ge=0, description="Nombre d'éléments à ignorer"),
    limit: int = Query(20, ge=1, le=100, description="Nombre d'éléments à retourner"),
    status_filter: Optional[OrderStatus] = Query(None, alias="status", description="Filtrer par statut"),
    type_filter: Optional[OrderType] = Query(None, alias="type", description="Filtrer par type"),
    current_user: User = Depends(require_user),
    db: Session = Depends(get_db)
) -> Any:
    """
    Récupérer les commandes, plus récentes en premier
    """
    orders, total = OrderService(db).list_orders(
        skip=skip,
        limit=limit,
        status=status_filter,
        order_type=type_filter
    )

    return OrdersListResponse.paginate(
        [Order.model_validate(order) for order in orders], total, skip, limit
    )


@router.get("/{order_id}", response_model=OrderResponse)
def get_order(
    order_id: int,
    current_user: User = Depends(require_user),
    db: Session = Depends(get_db)
) -> Any:
    """
    Récupérer une commande par ID
    """
    order = OrderService(db).get_order(order_id)
    return OrderResponse(message="Commande récupérée", data=Order.model_validate(order))


@router.post("/", response_model=OrderResponse, status_code=status.HTTP_201_CREATED)
def register_order(
    order_data: OrderCreate,
    current_user: User = Depends(require_user),
    db: Session = Depends(get_db)
) -> Any:
    """
    Enregistrer une commande

    Une vente vérifie et décrémente immédiatement le stock du produit.
    """
    order = OrderService(db).register_order(order_data)
    return OrderResponse(
        message="Commande enregistrée avec succès",
        data=Order.model_validate(order)
    )


@router.put("/{order_id}", response_model=OrderResponse)
def update_order(
    order_id: int,
    order_update: OrderUpdate,
    current_user: User = Depends(require_user),
    db: Session = Depends(get_db)
) -> Any:
    """
    Modifier une commande en cours d'acheminement
    """
    order = OrderService(db).update_order(order_id, order_update)
    return OrderResponse(
        message="Commande mise à jour avec succès",
        data=Order.model_validate(order)
    )


@router.delete("/{order_id}", response_model=MessageResponse)
def delete_order(
    order_id: int,
    current_user: User = Depends(require_user),
    db: Session = Depends(get_db)
) -> Any:
    """
    Supprimer une commande
    """
    OrderService(db).delete_order(order_id)
    return MessageResponse(message="Commande supprimée avec succès")


@router.put("/{order_id}/receive", response_model=OrderResponse)
def receive_order(
    order_id: int,
    current_user: User = Depends(require_user),
    db: Session = Depends(get_db)
) -> Any:
    """
    Marquer une commande comme reçue
    """
    order = OrderService(db).receive_order(order_id)
    return OrderResponse(
        message="Commande reçue avec succès",
        data=Order.model_validate(order)
    )


@router.put("/{order_id}/cancel", response_model=OrderResponse)
def cancel_order(
    order_id: int,
    current_user: User = Depends(require_user),
    db: Session = Depends(get_db)
) -> Any:
    """
    Annuler une commande
    """
    order = OrderService(db).cancel_order(order_id)
    return OrderResponse(
        message="Commande annulée avec succès",
        data=Order.model_validate(order)
    )
