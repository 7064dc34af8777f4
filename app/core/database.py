# ===================================
# app/core/database.py
# ===================================
import logging
from typing import Generator

from sqlalchemy import create_engine, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

from app.core.config import settings

logger = logging.getLogger(__name__)


def _engine_options() -> dict:
    """Options du moteur selon le dialecte"""
    if settings.is_sqlite:
        # SQLite en mémoire : une seule connexion partagée entre les threads
        return {
            "connect_args": {"check_same_thread": False},
            "poolclass": StaticPool,
        }
    return {"pool_pre_ping": True}


# Configuration du moteur SQLAlchemy
engine = create_engine(
    settings.database_url,
    echo=settings.debug,  # Log des requêtes SQL en mode debug
    **_engine_options()
)

SessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    bind=engine,
)

Base = declarative_base()


def get_db() -> Generator:
    """
    Générateur de session de base de données pour l'injection de dépendance FastAPI
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def init_db() -> None:
    """
    Crée les tables manquantes (les migrations Alembic restent la référence en production)
    """
    import app.models  # noqa: F401  enregistre les modèles dans Base.metadata

    Base.metadata.create_all(bind=engine)
    logger.info("✓ Tables créées")


def check_db_connection() -> bool:
    """
    Vérifie la connexion à la base de données
    """
    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        return True
    except SQLAlchemyError as e:
        logger.error(f"❌ Erreur de connexion DB: {e}")
        return False
