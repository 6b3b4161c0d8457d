# -*- coding: utf-8 -*-
"""
Daily diet API

Users register, log in with a cookie session and record meals; the service
reports how well they stick to their diet.
"""

from __future__ import annotations

import logging
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from . import __version__
from .app_db import init_app_db
from .auth.api import router as sessions_router
from .auth.security import Clock, PasswordHasher, TokenSigner
from .config import Settings
from .errors import register_exception_handlers
from .meals.api import router as meals_router
from .meals.storage import MealStore
from .users.api import router as users_router
from .users.storage import UserStore

logger = logging.getLogger(__name__)


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def create_app(settings: Optional[Settings] = None, *, clock: Optional[Clock] = None) -> FastAPI:
    """Build a fully wired application.

    Everything the routes need (stores, token signer, password hasher) hangs off
    ``app.state``, so two apps built with different settings never share state.
    """
    settings = settings or Settings()
    _configure_logging(settings.log_level)

    app = FastAPI(
        title="Daily Diet",
        description="Meal tracking with diet adherence metrics",
        version=__version__,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    init_app_db(settings.db_path)

    app.state.settings = settings
    app.state.user_store = UserStore(settings.db_path)
    app.state.meal_store = MealStore(settings.db_path)
    app.state.password_hasher = PasswordHasher(settings.password_iterations)
    app.state.token_signer = TokenSigner(settings.jwt_secret, settings.token_ttl_seconds, clock=clock)

    register_exception_handlers(app)

    app.include_router(users_router)
    app.include_router(sessions_router)
    app.include_router(meals_router)

    @app.get("/health", include_in_schema=False)
    def health() -> dict:
        return {"status": "ok"}

    logger.info("Daily diet API ready (db=%s)", settings.db_path)
    return app


def run() -> None:
    """Console entry point (used by pyproject [project.scripts])."""
    import uvicorn

    settings = Settings()
    uvicorn.run(create_app(settings), host=settings.host, port=settings.port, reload=False)


if __name__ == "__main__":
    run()
