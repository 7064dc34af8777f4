# ===================================
# app/api/v1/auth.py
# ===================================
from typing import Any
from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, status
from sqlalchemy.orm import Session

from app.core.database import get_db
from app.core.config import settings
from app.core.security import (
    verify_password,
    get_current_active_user
)
from app.repositories.user_repo import (
    get_user_by_email,
    create_user,
    set_password
)
from app.schemas.common import MessageResponse
from app.schemas.user import (
    UserCreate,
    UserResponse,
    LoginRequest,
    AuthResponse,
    Token,
    User,
    PasswordRecoveryRequest,
    PasswordResetRequest,
    UserChangePassword
)
from app.services.auth_service import AuthService
from app.services.email_service import send_password_reset_email

router = APIRouter()


@router.post("/register", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
def register(
    user_data: UserCreate,
    db: Session = Depends(get_db)
) -> Any:
    """
    Inscription d'un nouvel utilisateur
    """
    # Vérifier si l'email existe déjà
    if get_user_by_email(db, email=user_data.email):
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Un utilisateur avec cet email existe déjà"
        )

    user = create_user(db=db, user=user_data)

    return UserResponse(
        message="Inscription réussie",
        data=User.model_validate(user)
    )


@router.post("/login", response_model=AuthResponse)
def login(
    login_data: LoginRequest,
    db: Session = Depends(get_db)
) -> Any:
    """
    Connexion d'un utilisateur

    Après trop d'échecs le compte est bloqué temporairement (429).
    """
    user, access_token = AuthService(db).authenticate(login_data.email, login_data.password)

    token_data = Token(
        access_token=access_token,
        token_type="bearer",
        expires_in=settings.jwt_access_token_expire_minutes * 60,
        user=User.model_validate(user)
    )

    return AuthResponse(
        message="Connexion réussie",
        data=token_data
    )


@router.post("/password-recovery", response_model=MessageResponse)
def password_recovery(
    recovery_data: PasswordRecoveryRequest,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db)
) -> Any:
    """
    Envoyer un code de récupération par email
    """
    user, code = AuthService(db).start_password_recovery(recovery_data.email)
    background_tasks.add_task(send_password_reset_email, user.email, code)

    return MessageResponse(message="Code de récupération envoyé par email")


@router.post("/password-reset", response_model=MessageResponse)
def password_reset(
    reset_data: PasswordResetRequest,
    db: Session = Depends(get_db)
) -> Any:
    """
    Réinitialiser le mot de passe avec le code reçu
    """
    AuthService(db).reset_password(reset_data.token, reset_data.new_password)
    return MessageResponse(message="Mot de passe réinitialisé avec succès")


@router.get("/me", response_model=User)
def get_current_user_info(
    current_user: User = Depends(get_current_active_user)
) -> Any:
    """
    Récupérer les informations de l'utilisateur connecté
    """
    return current_user


@router.post("/change-password", response_model=MessageResponse)
def change_password(
    password_data: UserChangePassword,
    current_user: User = Depends(get_current_active_user),
    db: Session = Depends(get_db)
) -> Any:
    """
    Changer le mot de passe de l'utilisateur connecté
    """
    # Vérifier le mot de passe actuel
    if not verify_password(password_data.current_password, current_user.password_hash):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Mot de passe actuel incorrect"
        )

    # Vérifier que le nouveau mot de passe est différent
    if verify_password(password_data.new_password, current_user.password_hash):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Le nouveau mot de passe doit être différent de l'actuel"
        )

    set_password(db, current_user, password_data.new_password)

    return MessageResponse(message="Mot de passe changé avec succès")
