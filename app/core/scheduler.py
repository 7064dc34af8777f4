# ===================================
# Fichier: app/core/scheduler.py
# ===================================
from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.jobstores.memory import MemoryJobStore
from apscheduler.jobstores.sqlalchemy import SQLAlchemyJobStore
from apscheduler.executors.pool import ThreadPoolExecutor
import logging

from app.core.config import settings

logger = logging.getLogger(__name__)

scheduler = None


def init_scheduler():
    """Initialiser APScheduler"""
    global scheduler

    if not settings.scheduler_enabled or scheduler is not None:
        return

    # Une base SQLite en mémoire n'est pas partagée : jobs gardés en mémoire
    if settings.is_sqlite:
        jobstores = {'default': MemoryJobStore()}
    else:
        jobstores = {'default': SQLAlchemyJobStore(url=settings.database_url)}

    executors = {
        'default': ThreadPoolExecutor(4),
    }

    job_defaults = {
        'coalesce': True,
        'max_instances': 1
    }

    scheduler = BackgroundScheduler(
        jobstores=jobstores,
        executors=executors,
        job_defaults=job_defaults,
        timezone='UTC'
    )

    # Ajouter les jobs périodiques
    add_periodic_jobs()

    scheduler.start()
    logger.info("APScheduler démarré")


def add_periodic_jobs():
    """Ajouter les tâches périodiques"""
    # Purge des codes de récupération expirés (tous les jours à 2h)
    scheduler.add_job(
        func=cleanup_expired_reset_tokens_job,
        trigger='cron',
        hour=2,
        minute=0,
        id='cleanup_expired_reset_tokens',
        replace_existing=True
    )

    # Rapport de stock bas (tous les jours à 7h)
    scheduler.add_job(
        func=low_stock_report_job,
        trigger='cron',
        hour=7,
        minute=0,
        id='low_stock_report',
        replace_existing=True
    )


def cleanup_expired_reset_tokens_job():
    """Job de purge des codes de récupération expirés"""
    from app.core.database import SessionLocal
    from app.core.security import utcnow
    from app.repositories.user_repo import cleanup_expired_reset_tokens

    try:
        with SessionLocal() as db:
            count = cleanup_expired_reset_tokens(db, utcnow())
            logger.info("Nettoyage: %s code(s) de récupération expiré(s) effacé(s)", count)
    except Exception:
        logger.exception("Erreur lors de la purge des codes de récupération")


def low_stock_report_job():
    """Job de rapport des produits en stock bas"""
    from app.core.database import SessionLocal
    from app.repositories.product_repo import ProductRepository

    try:
        with SessionLocal() as db:
            products = ProductRepository(db).get_low_stock_products(settings.low_stock_threshold)
            if not products:
                logger.info("Rapport stock bas: aucun produit sous le seuil de %s", settings.low_stock_threshold)
                return
            logger.warning(
                "Rapport stock bas: %s produit(s) sous le seuil de %s",
                len(products), settings.low_stock_threshold
            )
            for product in products:
                logger.warning("  - %s (id=%s): %s en stock", product.name, product.id, product.stock_quantity)
    except Exception:
        logger.exception("Erreur lors du rapport de stock bas")


def shutdown_scheduler():
    """Arrêter le scheduler"""
    global scheduler
    if scheduler:
        scheduler.shutdown()
        scheduler = None
        logger.info("APScheduler arrêté")
