# ===================================
# app/services/email_service.py
# ===================================
import logging
from functools import lru_cache

from fastapi_mail import FastMail, MessageSchema, MessageType, ConnectionConfig
from fastapi_mail.errors import ConnectionErrors

from app.core.config import settings

logger = logging.getLogger(__name__)


@lru_cache()
def get_mail_config() -> ConnectionConfig:
    """Configuration SMTP construite à partir des settings"""
    return ConnectionConfig(
        MAIL_USERNAME=settings.smtp_username or "",
        MAIL_PASSWORD=settings.smtp_password or "",
        MAIL_FROM=settings.from_email,
        MAIL_FROM_NAME=settings.app_name,
        MAIL_PORT=settings.smtp_port,
        MAIL_SERVER=settings.smtp_server or "localhost",
        MAIL_STARTTLS=settings.smtp_use_tls,
        MAIL_SSL_TLS=False,
        USE_CREDENTIALS=bool(settings.smtp_username),
        VALIDATE_CERTS=settings.is_production,
        SUPPRESS_SEND=1 if settings.mail_suppress_send else 0
    )


async def send_password_reset_email(email: str, code: str) -> None:
    """Envoyer le code de récupération de mot de passe"""
    fm = FastMail(get_mail_config())
    html = (
        "<h3>Récupération de mot de passe</h3>"
        f"<p>Votre code : <strong>{code}</strong></p>"
        f"<p>Il expire dans {settings.password_reset_token_expire_minutes} minutes.</p>"
    )

    message = MessageSchema(
        subject=f"{settings.app_name} - Récupération de mot de passe",
        recipients=[email],
        body=html,
        subtype=MessageType.html
    )

    try:
        await fm.send_message(message)
    except ConnectionErrors:
        # Tâche d'arrière-plan : la réponse HTTP est déjà partie
        logger.exception("Échec d'envoi de l'email de récupération à %s", email)
        return

    logger.info("Email de récupération envoyé à %s", email)
