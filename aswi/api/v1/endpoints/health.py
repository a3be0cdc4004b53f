"""
Public health check.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from aswi.api.v1.deps import get_db
from aswi.core.config import settings
from aswi.schemas.common import HealthResponse

router = APIRouter(tags=["health"])
logger = logging.getLogger(__name__)


@router.get("/health", response_model=HealthResponse)
async def health(db: AsyncSession = Depends(get_db)):
    """Database connectivity; 503 when the database is unreachable."""
    try:
        await db.execute(select(1))
    except SQLAlchemyError as e:
        logger.error("Health check DB failure: %s", e)
        body = HealthResponse(status="degraded", db=False, version=settings.VERSION)
        return JSONResponse(status_code=503, content=body.model_dump())
    return HealthResponse(status="ok", db=True, version=settings.VERSION)
