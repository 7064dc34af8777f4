# ===================================
# app/api/v1/clients.py
# ===================================
from typing import Any, List, Optional
from fastapi import APIRouter, Depends, HTTPException, status, Query
from sqlalchemy.orm import Session

from app.api.deps import require_user
from app.core.database import get_db
from app.models.product import Product
from app.models.user import User
from app.repositories.client_repo import ClientRepository
from app.repositories.product_repo import ProductRepository
from app.schemas.client import (
    Client,
    ClientCreate,
    ClientUpdate,
    ClientProducts,
    ClientResponse,
    ClientsListResponse
)
from app.schemas.common import MessageResponse

router = APIRouter()


def _get_client_or_404(repo: ClientRepository, client_id: int):
    client = repo.get_client_by_id(client_id)
    if not client:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Client non trouvé"
        )
    return client


def _check_unique_fields(repo: ClientRepository, email: Optional[str], cpf: Optional[str],
                         exclude_id: Optional[int] = None) -> None:
    if email and repo.get_client_by_email(email, exclude_id=exclude_id):
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Un client avec cet email existe déjà"
        )
    if cpf and repo.get_client_by_cpf(cpf, exclude_id=exclude_id):
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Un client avec ce CPF existe déjà"
        )


def _load_products(db: Session, product_ids: List[int]) -> List[Product]:
    """Charger les produits, 404 si un identifiant est inconnu"""
    unique_ids = set(product_ids)
    products = ProductRepository(db).get_products_by_ids(list(unique_ids))
    missing = unique_ids - {p.id for p in products}
    if missing:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Produit(s) non trouvé(s): {', '.join(str(i) for i in sorted(missing))}"
        )
    return products


@router.get("/", response_model=ClientsListResponse)
def list_clients(
    skip: int = Query(0, ge=0, description="Nombre d'éléments à ignorer"),
    limit: int = Query(20, ge=1, le=100, description="Nombre d'éléments à retourner"),
    search: Optional[str] = Query(None, description="Recherche par nom, email ou CPF"),
    current_user: User = Depends(require_user),
    db: Session = Depends(get_db)
) -> Any:
    """
    Récupérer la liste des clients actifs
    """
    clients, total = ClientRepository(db).get_clients(skip=skip, limit=limit, search=search)
    return ClientsListResponse.paginate(
        [Client.model_validate(c) for c in clients], total, skip, limit
    )


@router.get("/{client_id}", response_model=ClientResponse)
def get_client(
    client_id: int,
    current_user: User = Depends(require_user),
    db: Session = Depends(get_db)
) -> Any:
    """
    Récupérer un client par ID
    """
    client = _get_client_or_404(ClientRepository(db), client_id)
    return ClientResponse(message="Client récupéré", data=Client.model_validate(client))


@router.post("/", response_model=ClientResponse, status_code=status.HTTP_201_CREATED)
def create_client(
    client_data: ClientCreate,
    current_user: User = Depends(require_user),
    db: Session = Depends(get_db)
) -> Any:
    """
    Créer un nouveau client
    """
    repo = ClientRepository(db)
    _check_unique_fields(repo, client_data.email, client_data.cpf)

    client_dict = client_data.model_dump(exclude={"product_ids"})
    client_dict["email"] = client_dict["email"].lower()
    client_dict["products"] = _load_products(db, client_data.product_ids) if client_data.product_ids else []

    client = repo.create_client(client_dict)
    return ClientResponse(
        message="Client créé avec succès",
        data=Client.model_validate(client)
    )


@router.put("/{client_id}", response_model=ClientResponse)
def update_client(
    client_id: int,
    client_update: ClientUpdate,
    current_user: User = Depends(require_user),
    db: Session = Depends(get_db)
) -> Any:
    """
    Mettre à jour un client
    """
    repo = ClientRepository(db)
    client = _get_client_or_404(repo, client_id)

    update_data = client_update.model_dump(exclude_unset=True)
    if update_data.get("email"):
        update_data["email"] = update_data["email"].lower()
    _check_unique_fields(repo, update_data.get("email"), update_data.get("cpf"), exclude_id=client.id)

    product_ids = update_data.pop("product_ids", None)
    if product_ids is not None:
        client.products = _load_products(db, product_ids) if product_ids else []

    client = repo.update_client(client, update_data)
    return ClientResponse(
        message="Client mis à jour avec succès",
        data=Client.model_validate(client)
    )


@router.delete("/{client_id}", response_model=MessageResponse)
def delete_client(
    client_id: int,
    current_user: User = Depends(require_user),
    db: Session = Depends(get_db)
) -> Any:
    """
    Désactiver un client (soft delete)
    """
    repo = ClientRepository(db)
    client = _get_client_or_404(repo, client_id)
    repo.soft_delete_client(client)
    return MessageResponse(message="Client supprimé avec succès")


@router.post("/{client_id}/products", response_model=ClientResponse)
def add_client_products(
    client_id: int,
    link_data: ClientProducts,
    current_user: User = Depends(require_user),
    db: Session = Depends(get_db)
) -> Any:
    """
    Associer des produits à un client
    """
    repo = ClientRepository(db)
    client = _get_client_or_404(repo, client_id)

    for product in _load_products(db, link_data.product_ids):
        if product not in client.products:
            client.products.append(product)

    client = repo.update_client(client, {})
    return ClientResponse(
        message="Produits associés au client",
        data=Client.model_validate(client)
    )


@router.delete("/{client_id}/products", response_model=ClientResponse)
def remove_client_products(
    client_id: int,
    link_data: ClientProducts,
    current_user: User = Depends(require_user),
    db: Session = Depends(get_db)
) -> Any:
    """
    Dissocier des produits d'un client
    """
    repo = ClientRepository(db)
    client = _get_client_or_404(repo, client_id)

    to_remove = {p.id for p in _load_products(db, link_data.product_ids)}
    client.products = [p for p in client.products if p.id not in to_remove]

    client = repo.update_client(client, {})
    return ClientResponse(
        message="Produits dissociés du client",
        data=Client.model_validate(client)
    )
