"""
Application factory for the combo builder API.

create_app() builds a FastAPI application with CORS and every router
registered. It does not touch the database; call db.init_db() (main.py does)
to create missing catalog tables.
"""

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from . import config
from .routes import (
    carts_router,
    combo_sessions_router,
    combos_router,
    pos_combo_sessions_router,
    pos_combos_router,
)
from .services.session import get_registry_stats

logger = logging.getLogger(__name__)


def create_app() -> FastAPI:
    """
    Create a FastAPI application.

    Returns:
        Configured FastAPI application
    """
    app = FastAPI(
        title="Combo Builder API",
        description="Step-by-step combo meal configurator for storefront and POS",
        version="1.0.0",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(combos_router)
    app.include_router(combo_sessions_router)
    app.include_router(pos_combos_router)
    app.include_router(pos_combo_sessions_router)
    app.include_router(carts_router)

    @app.get("/health")
    def health_check():
        return {"status": "healthy", "combo_sessions": get_registry_stats()}

    logger.info("Application created with CORS origins %s", config.CORS_ORIGINS)

    return app
