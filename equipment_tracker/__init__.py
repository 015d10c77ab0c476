"""Application wiring for the Equipment Tracker API.

Configuration, database setup, middleware, routers and error handlers are
assembled here into a single FastAPI ``app``. Schema creation, migrations and
first-run seeding happen in the lifespan hook so importing the package has
no side effects on the database.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException

from .core.config import settings
from .core.errors import AppError, app_error_handler, http_exception_handler, validation_exception_handler
from .db.migrate import run_migrations
from .db.seed import seed
from .db.session import Base, SessionLocal, engine
from .middlewares import RequestIdMiddleware, SecurityHeadersMiddleware

# Registers every table on Base.metadata.
from . import models as _models  # noqa: F401

logger = logging.getLogger("equipment_tracker")


def init_db() -> None:
    """Create missing tables, upgrade legacy schemas and seed first-run data."""

    Base.metadata.create_all(bind=engine)
    run_migrations(engine)
    db = SessionLocal()
    try:
        seed(db)
    finally:
        db.close()


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()
    logger.info("app.started", extra={"extra_data": {"db": engine.url.render_as_string(hide_password=True)}})
    yield


app = FastAPI(title=settings.APP_NAME, lifespan=lifespan)

# ---------- Middleware ----------
app.add_middleware(SecurityHeadersMiddleware)
app.add_middleware(RequestIdMiddleware)
if settings.ALLOWED_ORIGINS:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

# ---------- Routers ----------
from .routers import api_auth as api_auth_router  # noqa: E402

app.include_router(api_auth_router.router)

from .routers import api_users as api_users_router  # noqa: E402

app.include_router(api_users_router.router)

from .routers import api_departments as api_departments_router  # noqa: E402

app.include_router(api_departments_router.router)

from .routers import api_brands as api_brands_router  # noqa: E402

app.include_router(api_brands_router.router)

from .routers import api_equipment as api_equipment_router  # noqa: E402

app.include_router(api_equipment_router.router)

from .routers import api_public as api_public_router  # noqa: E402

app.include_router(api_public_router.router)

# ---------- Exception handling ----------
app.add_exception_handler(AppError, app_error_handler)
app.add_exception_handler(StarletteHTTPException, http_exception_handler)
app.add_exception_handler(RequestValidationError, validation_exception_handler)


@app.get("/api/health", tags=["health"])
async def api_health() -> dict[str, str]:
    return {"status": "ok"}


__all__ = ["app", "init_db"]
