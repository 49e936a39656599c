"""FastAPI application factory.

Main entry point for the lingo Web API.
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from lingo import __version__
from lingo.auth.middleware import IdentityMiddleware
from lingo.config.app_config import load_app_config
from lingo.db.database import get_db_path, init_db
from lingo.web.routes import (
    admin_router,
    courses_router,
    health_router,
    leaderboard_router,
    learn_router,
    lessons_router,
    subscription_router,
)

logger = structlog.get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Lifespan context manager for startup/shutdown events."""
    init_db(get_db_path())
    config = load_app_config()
    logger.info(
        "api_startup",
        db_path=str(get_db_path()),
        user_header=config.auth.user_header,
    )
    yield


def create_app() -> FastAPI:
    """Create and configure the FastAPI application.

    Returns:
        Configured FastAPI app instance
    """
    app = FastAPI(
        title="Lingo API",
        description="Read API for courses, lesson progress, subscriptions and leaderboard",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],  # Configure appropriately for production
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Added last so it runs first: every route sees a request scope
    app.add_middleware(IdentityMiddleware)

    app.include_router(health_router)
    app.include_router(courses_router)
    app.include_router(learn_router)
    app.include_router(lessons_router)
    app.include_router(subscription_router)
    app.include_router(leaderboard_router)
    app.include_router(admin_router)

    return app


# Default app instance for uvicorn
app = create_app()
