"""
Worker Provisioning Service - Main Application

Callable endpoint that provisions worker accounts in Firebase Auth and
Firestore on behalf of signed-in customers.
"""

import logging
import sys

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .api import callable_error_handler, router
from .config import get_settings
from .services import CallableError, get_document_store, get_identity_service


def configure_logging() -> None:
    """Configure structured logging for Cloud Logging compatibility."""
    settings = get_settings()
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=settings.log_level.upper(),
    )
    
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = get_settings()
    configure_logging()
    
    app = FastAPI(
        title="Worker Provisioning",
        description="Callable endpoint that provisions worker accounts",
        version="1.0.0",
        docs_url="/docs",
        redoc_url="/redoc",
    )
    
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    
    app.include_router(router)
    app.add_exception_handler(CallableError, callable_error_handler)
    
    logger = structlog.get_logger(__name__)
    logger.info(
        "application_startup",
        service=settings.service_name,
        environment=settings.environment,
        project_id=settings.gcp_project_id,
        region=settings.gcp_region,
    )
    
    return app


app = create_app()


@app.on_event("startup")
async def startup_event() -> None:
    """Log when application is ready."""
    logger = structlog.get_logger(__name__)
    logger.info("startup_complete")


@app.on_event("shutdown")
async def shutdown_event() -> None:
    """Release the process-wide Firebase App and Firestore client."""
    logger = structlog.get_logger(__name__)
    logger.info("shutdown_initiated")
    get_identity_service().close()
    get_document_store().close()
