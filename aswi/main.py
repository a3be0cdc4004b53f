"""
Aswi attendance, leave & inventory API — application entry point.

This is the **only** file that assembles the app. All business logic
lives in the `api/`, `services/`, `models/` and `core/` packages.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy import select

from aswi.api.v1.api import api_router
from aswi.api.v1.endpoints.auth import limiter
from aswi.core.config import settings
from aswi.core.enums import Role
from aswi.core.exceptions import register_exception_handlers
from aswi.core.security import get_password_hash
from aswi.db.base import Base
from aswi.db.session import async_session_factory, engine

# Ensure all models are imported so metadata.create_all can see them
from aswi.models.employee import Attendance, Employee, EmployeeType  # noqa: F401
from aswi.models.inventory import (Company, InboundStock,  # noqa: F401
                                   Mortality, OutboundLive)
from aswi.models.leave import LeaveRequest  # noqa: F401
from aswi.models.user import User

logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
)
logger = logging.getLogger(__name__)


async def seed_admin() -> None:
    """Create the first ADMIN account if its email is not registered yet."""
    async with async_session_factory() as session:
        result = await session.execute(
            select(User).where(User.email == settings.FIRST_ADMIN_EMAIL)
        )
        if result.scalar_one_or_none() is None:
            session.add(
                User(
                    name="Administrator",
                    email=settings.FIRST_ADMIN_EMAIL,
                    hashed_password=get_password_hash(settings.FIRST_ADMIN_PASSWORD),
                    role=Role.ADMIN.value,
                )
            )
            await session.commit()
            logger.info(
                "Default admin created: %s (password: <redacted>)",
                settings.FIRST_ADMIN_EMAIL,
            )


# ── Lifespan ────────────────────────────────────────────────────────
@asynccontextmanager
async def lifespan(_app: FastAPI):
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Database tables initialised")

    await seed_admin()

    logger.info(
        "%s v%s started (timezone %s)",
        settings.PROJECT_NAME, settings.VERSION, settings.TIMEZONE,
    )
    yield
    await engine.dispose()
    logger.info("Shutdown complete")


# ── App factory ─────────────────────────────────────────────────────
def create_app() -> FastAPI:
    application = FastAPI(
        title=settings.PROJECT_NAME,
        description="Employee attendance, leave and live-stock inventory",
        version=settings.VERSION,
        openapi_url=f"{settings.API_V1_PREFIX}/openapi.json",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    # CORS
    application.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Rate limiter (429s are rendered by the exception handlers below)
    application.state.limiter = limiter

    # Global exception handlers (prevent stack-trace leakage)
    register_exception_handlers(application)

    # Mount API v1
    application.include_router(api_router, prefix=settings.API_V1_PREFIX)

    return application


app = create_app()
