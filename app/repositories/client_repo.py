# ===================================
# app/repositories/client_repo.py
# ===================================
from typing import List, Optional, Tuple
from sqlalchemy.orm import Session, selectinload
from sqlalchemy import select, func, and_, or_, asc

from app.models.client import Client


class ClientRepository:
    """Repository pour la gestion des clients"""

    def __init__(self, db: Session):
        self.db = db

    def get_client_by_id(self, client_id: int) -> Optional[Client]:
        return self.db.scalar(
            select(Client)
            .where(Client.id == client_id)
            .options(selectinload(Client.products))
        )

    def get_client_by_email(self, email: str, exclude_id: Optional[int] = None) -> Optional[Client]:
        query = select(Client).where(func.lower(Client.email) == email.lower())
        if exclude_id is not None:
            query = query.where(Client.id != exclude_id)
        return self.db.scalar(query)

    def get_client_by_cpf(self, cpf: str, exclude_id: Optional[int] = None) -> Optional[Client]:
        query = select(Client).where(Client.cpf == cpf)
        if exclude_id is not None:
            query = query.where(Client.id != exclude_id)
        return self.db.scalar(query)

    def get_clients(self, skip: int = 0, limit: int = 20,
                    search: Optional[str] = None) -> Tuple[List[Client], int]:
        """Récupérer les clients actifs avec recherche et pagination"""
        query = select(Client)

        conditions = [Client.is_active == True]  # noqa: E712

        if search:
            conditions.append(
                or_(
                    Client.name.ilike(f"%{search}%"),
                    Client.email.ilike(f"%{search}%"),
                    Client.cpf.ilike(f"%{search}%")
                )
            )

        query = query.where(and_(*conditions))

        # Compter le total
        count_query = select(func.count()).select_from(query.subquery())
        total = self.db.scalar(count_query)

        clients = self.db.scalars(
            query.options(selectinload(Client.products))
            .order_by(asc(Client.name), asc(Client.id))
            .offset(skip)
            .limit(limit)
        ).all()

        return list(clients), total or 0

    def create_client(self, client_data: dict) -> Client:
        client = Client(**client_data)
        self.db.add(client)
        self.db.commit()
        self.db.refresh(client)
        return client

    def update_client(self, client: Client, update_data: dict) -> Client:
        for field, value in update_data.items():
            if hasattr(client, field) and value is not None:
                setattr(client, field, value)

        self.db.commit()
        self.db.refresh(client)
        return client

    def soft_delete_client(self, client: Client) -> Client:
        """Désactiver un client (soft delete)"""
        client.is_active = False
        self.db.commit()
        return client
