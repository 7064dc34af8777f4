# ===================================
# app/services/auth_service.py
# ===================================

import logging
from datetime import timedelta
from typing import Tuple

from fastapi import HTTPException, status
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.exceptions import AccountLockedError
from app.core.security import (
    verify_password,
    create_access_token,
    generate_reset_code,
    hash_reset_code,
    utcnow
)
from app.models.user import User
from app.repositories.user_repo import (
    get_user_by_email,
    get_user_by_reset_token_hash,
    set_password
)

logger = logging.getLogger(__name__)


class AuthService:
    """Connexion avec limitation des tentatives et récupération de mot de passe"""

    def __init__(self, db: Session):
        self.db = db

    def authenticate(self, email: str, password: str) -> Tuple[User, str]:
        """Vérifier les credentials et retourner l'utilisateur et son token"""
        invalid_credentials = HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Email ou mot de passe incorrect",
            headers={"WWW-Authenticate": "Bearer"},
        )

        user = get_user_by_email(self.db, email=email)
        if not user:
            logger.warning("Tentative de connexion avec un email inconnu: %s", email)
            raise invalid_credentials

        now = utcnow()
        if user.is_locked(now):
            logger.warning("Connexion refusée, compte bloqué: %s", user.email)
            raise AccountLockedError(
                "Compte temporairement bloqué suite à trop de tentatives, réessayez plus tard"
            )

        if not verify_password(password, user.password_hash):
            self._register_failed_attempt(user, now)
            raise invalid_credentials

        if not user.is_active:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Compte désactivé"
            )

        user.failed_login_attempts = 0
        user.locked_until = None
        user.last_login = now
        self.db.commit()
        self.db.refresh(user)

        access_token = create_access_token(subject=user.id, email=user.email)
        logger.info("Connexion réussie: %s", user.email)
        return user, access_token

    def _register_failed_attempt(self, user: User, now) -> None:
        user.failed_login_attempts = (user.failed_login_attempts or 0) + 1

        if user.failed_login_attempts >= settings.login_max_attempts:
            user.locked_until = now + timedelta(minutes=settings.login_lockout_minutes)
            user.failed_login_attempts = 0
            logger.warning(
                "Compte %s bloqué pour %s minutes",
                user.email, settings.login_lockout_minutes
            )
        else:
            logger.warning(
                "Mot de passe incorrect pour %s (%s/%s)",
                user.email, user.failed_login_attempts, settings.login_max_attempts
            )

        self.db.commit()

    def start_password_recovery(self, email: str) -> Tuple[User, str]:
        """Générer un code de récupération ; seule son empreinte est stockée"""
        user = get_user_by_email(self.db, email=email)
        if not user:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Utilisateur non trouvé"
            )

        code = generate_reset_code()
        user.reset_token_hash = hash_reset_code(code)
        user.reset_token_expires_at = utcnow() + timedelta(
            minutes=settings.password_reset_token_expire_minutes
        )
        self.db.commit()

        logger.info("Code de récupération généré pour %s", user.email)
        return user, code

    def reset_password(self, code: str, new_password: str) -> User:
        """Réinitialiser le mot de passe avec un code valide"""
        user = get_user_by_reset_token_hash(self.db, hash_reset_code(code.strip()), utcnow())
        if not user:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Code de récupération invalide ou expiré"
            )

        user = set_password(self.db, user, new_password)
        logger.info("Mot de passe réinitialisé pour %s", user.email)
        return user
