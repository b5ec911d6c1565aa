"""
Admissions Workflow Service - FastAPI application

Wires the subject and access routers, the correlation middleware and the
DomainError handlers. The area registry is loaded at startup so a broken
registry file stops the service before it serves a single guard decision.
"""

from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from pymongo.errors import PyMongoError

from . import __version__
from .config.areas import get_area_registry
from .config.settings import settings
from .api.routes import api_router
from .api.middleware import CorrelationIdMiddleware, register_error_handlers
from .repositories.mongo_client import create_indexes, close_connection, health_check
from .utils.logger import setup_logging, get_logger

setup_logging()
logger = get_logger(__name__)


# =============================================================================
# Lifecycle
# =============================================================================

@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Startup: validate the area registry, ensure MongoDB indexes.
    Shutdown: close the MongoDB client.
    """
    # AreaRegistryError propagates and aborts startup
    registry = get_area_registry()
    logger.info(
        f"Area registry loaded: {len(registry.role_grants)} role grants, "
        f"{len(registry.status_grants)} status grants",
        extra={"area": registry.sign_in_area}
    )

    try:
        create_indexes()
    except PyMongoError as e:
        # Transitions will surface PERSISTENCE_FAILURE until MongoDB is reachable
        logger.error(f"Index creation failed: {e}", extra={"error_code": type(e).__name__})

    logger.info(f"Admissions workflow service {__version__} ready ({settings.environment})")
    yield

    close_connection()
    logger.info("Admissions workflow service stopped")


# =============================================================================
# Application Factory
# =============================================================================

def create_app() -> FastAPI:
    """Build the FastAPI application."""
    application = FastAPI(
        title="Admissions Workflow Service",
        description="Applicant-to-student status workflow, access policy and route guard",
        version=__version__,
        lifespan=lifespan,
        docs_url="/api/docs" if settings.debug else None,
        redoc_url=None,
        openapi_url="/api/openapi.json" if settings.debug else None,
    )

    # Correlation is added last so it wraps CORS and sees every request first
    application.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=settings.cors_origins.strip() != "*",
        allow_methods=["GET", "POST"],
        allow_headers=["Content-Type", "X-Subject-Id", "X-Correlation-Id"],
        expose_headers=["X-Correlation-Id"],
    )
    application.add_middleware(CorrelationIdMiddleware)

    register_error_handlers(application)
    application.include_router(api_router, prefix="/api/v1")
    application.add_api_route("/health", health, methods=["GET"], tags=["Health"])

    return application


async def health():
    """Liveness plus MongoDB connectivity and the active sign-in area."""
    mongo = health_check()
    registry = get_area_registry()
    return {
        "status": "healthy" if mongo.get("status") == "healthy" else "degraded",
        "version": __version__,
        "environment": settings.environment,
        "mongo": mongo,
        "sign_in_area": registry.sign_in_area,
    }


app = create_app()
