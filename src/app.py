"""
Suggestion Box API Server
Core functionality: suggestion CRUD over SQLite, static asset serving
"""

import logging
import os
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from config.settings import DB_PATH, STATIC_DIR, ALLOWED_ORIGINS
from database.connection import init_database, close_database
from api.routes import suggestions
from utils.error_handling import setup_error_handling

logger = logging.getLogger(__name__)


def create_app(db_path: Optional[str] = None, static_dir: Optional[str] = None) -> FastAPI:
    """Build the application; arguments override DB_PATH / STATIC_DIR"""
    db_path = db_path or DB_PATH
    static_dir = static_dir or STATIC_DIR

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application lifespan manager"""
        # DatabaseInitializationError propagates and aborts startup
        app.state.db = await init_database(db_path)
        yield
        await close_database(app.state.db)

    app = FastAPI(
        title="Suggestion Box",
        description="Backend API for submitting, listing, updating and deleting suggestions",
        version="1.0.0",
        lifespan=lifespan
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=ALLOWED_ORIGINS,
        allow_credentials="*" not in ALLOWED_ORIGINS,
        allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
        allow_headers=["*"],
    )

    setup_error_handling(app)

    app.include_router(suggestions.router, prefix="/api/suggestions", tags=["Suggestions"])

    # Everything the API does not claim is served from the static directory.
    # Without one, unmatched paths fall through to the router's plain 404.
    if os.path.isdir(static_dir):
        app.mount("/", StaticFiles(directory=static_dir, html=True), name="static")
    else:
        logger.warning(f"Static directory {static_dir} not found, non-API paths will return 404")

    logger.info(f"Application created (db: {db_path}, static: {static_dir})")
    return app


# FastAPI app instance is exported for use by uvicorn
app = create_app()
