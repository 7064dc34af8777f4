# ===================================
# app/core/exceptions.py
# ===================================
"""
Exceptions métier levées par la couche services.
Les handlers de app/main.py les traduisent en réponses HTTP.
"""

from fastapi import status


class StockControlError(Exception):
    """Erreur métier de base"""
    status_code = status.HTTP_400_BAD_REQUEST
    error_type = "business_error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFoundError(StockControlError):
    """La ressource référencée n'existe pas"""
    status_code = status.HTTP_404_NOT_FOUND
    error_type = "not_found"


class ConflictError(StockControlError):
    """Violation d'unicité (nom, email, code...)"""
    status_code = status.HTTP_409_CONFLICT
    error_type = "conflict"


class InsufficientStockError(StockControlError):
    status_code = status.HTTP_400_BAD_REQUEST
    error_type = "insufficient_stock"

    def __init__(self, available: int, requested: int):
        super().__init__(
            f"Stock insuffisant: {available} disponible(s), {requested} demandé(s)"
        )
        self.available = available
        self.requested = requested


class InvalidOrderStateError(StockControlError):
    """Transition de statut de commande interdite"""
    status_code = status.HTTP_409_CONFLICT
    error_type = "invalid_order_state"


class AccountLockedError(StockControlError):
    """Trop de tentatives de connexion échouées"""
    status_code = status.HTTP_429_TOO_MANY_REQUESTS
    error_type = "account_locked"
