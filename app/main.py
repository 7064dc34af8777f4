# ===================================
# app/main.py
# ===================================
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.encoders import jsonable_encoder
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from contextlib import asynccontextmanager
import logging

from app.core.config import settings
from app.core.database import init_db, check_db_connection
from app.core.exceptions import StockControlError
from app.core.scheduler import init_scheduler, shutdown_scheduler

# Import des routes
from app.api.v1 import auth, users, categories, products, clients, suppliers, orders

# Configuration des logs
logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s"
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Gestionnaire de cycle de vie de l'application"""
    # Démarrage
    logger.info("Démarrage de %s (%s)...", settings.app_name, settings.environment)

    # Vérifier la connexion DB
    if not check_db_connection():
        logger.error("Impossible de se connecter à la base de données")
        raise RuntimeError("Database connection failed")

    # Initialiser la base de données
    init_db()

    # Démarrer le scheduler si activé
    if settings.scheduler_enabled:
        init_scheduler()

    logger.info("Application démarrée avec succès")

    yield

    # Arrêt
    shutdown_scheduler()
    logger.info("Arrêt de l'application...")


def _error_response(status_code: int, message, error_type: str, **extra) -> JSONResponse:
    error = {
        "code": status_code,
        "message": message,
        "type": error_type
    }
    error.update(extra)
    return JSONResponse(
        status_code=status_code,
        content={"success": False, "error": error},
    )


def create_app() -> FastAPI:
    """Factory pour créer l'application FastAPI"""

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        openapi_url=f"{settings.api_prefix}/openapi.json",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan
    )

    # CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=settings.cors_allow_credentials,
        allow_methods=settings.cors_allow_methods,
        allow_headers=settings.cors_allow_headers,
    )

    # Routes API v1
    app.include_router(auth.router, prefix=f"{settings.api_prefix}/auth", tags=["Auth"])
    app.include_router(users.router, prefix=f"{settings.api_prefix}/users", tags=["Users"])
    app.include_router(categories.router, prefix=f"{settings.api_prefix}/categories", tags=["Categories"])
    app.include_router(products.router, prefix=f"{settings.api_prefix}/products", tags=["Products"])
    app.include_router(clients.router, prefix=f"{settings.api_prefix}/clients", tags=["Clients"])
    app.include_router(suppliers.router, prefix=f"{settings.api_prefix}/suppliers", tags=["Suppliers"])
    app.include_router(orders.router, prefix=f"{settings.api_prefix}/orders", tags=["Orders"])

    # Route de santé
    @app.get("/health")
    async def health_check():
        """Vérification de la santé de l'API"""
        db_status = "ok" if check_db_connection() else "error"

        return {
            "status": "ok" if db_status == "ok" else "error",
            "version": settings.app_version,
            "environment": settings.environment,
            "database": db_status,
            "scheduler": "ok" if settings.scheduler_enabled else "disabled"
        }

    # Route racine
    @app.get("/")
    async def root():
        return {
            "message": f"Bienvenue sur {settings.app_name}",
            "version": settings.app_version,
            "docs": "/docs",
            "health": "/health"
        }

    # Gestion globale des erreurs
    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        response = _error_response(exc.status_code, exc.detail, "http_error")
        if getattr(exc, "headers", None):
            response.headers.update(exc.headers)
        return response

    @app.exception_handler(StockControlError)
    async def stock_control_exception_handler(request: Request, exc: StockControlError):
        return _error_response(exc.status_code, exc.message, exc.error_type)

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        return _error_response(
            422,
            "Données invalides",
            "validation_error",
            details=jsonable_encoder(exc.errors())
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception):
        logger.error(f"Erreur non gérée: {exc}", exc_info=True)
        return _error_response(
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            "Erreur interne du serveur",
            "internal_error"
        )

    return app


# Créer l'instance de l'application
app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "app.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.debug,
        log_level=settings.log_level.lower()
    )
