"""
Inventory endpoints (admin/owner only).

- Companies and the three movement ledgers: inbound, mortality, outbound-live.
- Derived rollups: live stock and mortality rekap.
"""

from __future__ import annotations

import logging
from datetime import date

from fastapi import APIRouter, Depends, Query
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from aswi.api.v1.deps import get_db, require_admin
from aswi.core.enums import ClaimStatus
from aswi.core.exceptions import BadRequestError
from aswi.models.inventory import Company, InboundStock, Mortality, OutboundLive
from aswi.schemas.common import MAX_DB_ID, ApiResponse, ok
from aswi.schemas.inventory import (CompanyCreate, CompanyRead, MortalityRead,
                                    MortalityRekap, MovementCreate,
                                    StockReport, WeighedMovementCreate,
                                    WeighedMovementRead)
from aswi.services import inventory as aggregator

router = APIRouter(
    prefix="/inventory",
    tags=["inventory"],
    dependencies=[Depends(require_admin)],
)
logger = logging.getLogger(__name__)


# ── Companies ───────────────────────────────────────────────────────
@router.get("/companies", response_model=ApiResponse[list[CompanyRead]])
async def list_companies(db: AsyncSession = Depends(get_db)) -> dict:
    result = await db.execute(select(Company).order_by(Company.name))
    return ok(list(result.scalars().all()))


@router.post("/companies", response_model=ApiResponse[CompanyRead], status_code=201)
async def create_company(
    body: CompanyCreate,
    db: AsyncSession = Depends(get_db),
) -> dict:
    existing = await db.execute(select(Company.id).where(Company.name == body.name))
    if existing.scalar_one_or_none() is not None:
        raise BadRequestError("Company already exists")

    company = Company(**body.model_dump())
    db.add(company)
    await db.commit()
    await db.refresh(company)
    logger.info("Company created: %s", company.name)
    return ok(company, message="Company created")


# ── Movements ───────────────────────────────────────────────────────
@router.get("/inbound", response_model=ApiResponse[list[WeighedMovementRead]])
async def list_inbound(
    company_id: int | None = Query(None, ge=1, le=MAX_DB_ID),
    date_from: date | None = Query(None),
    date_to: date | None = Query(None),
    db: AsyncSession = Depends(get_db),
) -> dict:
    return ok(
        await aggregator.list_movements(db, InboundStock, company_id, date_from, date_to)
    )


@router.post("/inbound", response_model=ApiResponse[WeighedMovementRead], status_code=201)
async def create_inbound(
    body: WeighedMovementCreate,
    db: AsyncSession = Depends(get_db),
) -> dict:
    entry = await aggregator.record_movement(db, InboundStock, **body.model_dump())
    return ok(entry, message="Inbound stock recorded")


@router.get("/mortality", response_model=ApiResponse[list[MortalityRead]])
async def list_mortality(
    company_id: int | None = Query(None, ge=1, le=MAX_DB_ID),
    date_from: date | None = Query(None),
    date_to: date | None = Query(None),
    claim_status: ClaimStatus | None = Query(None),
    db: AsyncSession = Depends(get_db),
) -> dict:
    return ok(
        await aggregator.list_movements(
            db, Mortality, company_id, date_from, date_to,
            claim_status=claim_status.value if claim_status else None,
        )
    )


@router.post("/mortality", response_model=ApiResponse[MortalityRead], status_code=201)
async def create_mortality(
    body: MovementCreate,
    db: AsyncSession = Depends(get_db),
) -> dict:
    """Record dead stock; claimability is derived from the head count."""
    entry = await aggregator.record_movement(db, Mortality, **body.model_dump())
    return ok(entry, message="Mortality recorded")


@router.get("/outbound-live", response_model=ApiResponse[list[WeighedMovementRead]])
async def list_outbound_live(
    company_id: int | None = Query(None, ge=1, le=MAX_DB_ID),
    date_from: date | None = Query(None),
    date_to: date | None = Query(None),
    db: AsyncSession = Depends(get_db),
) -> dict:
    return ok(
        await aggregator.list_movements(db, OutboundLive, company_id, date_from, date_to)
    )


@router.post(
    "/outbound-live",
    response_model=ApiResponse[WeighedMovementRead],
    status_code=201,
)
async def create_outbound_live(
    body: WeighedMovementCreate,
    db: AsyncSession = Depends(get_db),
) -> dict:
    entry = await aggregator.record_movement(db, OutboundLive, **body.model_dump())
    return ok(entry, message="Outbound live stock recorded")


# ── Rollups ─────────────────────────────────────────────────────────
@router.get("/stock", response_model=ApiResponse[StockReport])
async def stock(
    company_id: int | None = Query(None, ge=1, le=MAX_DB_ID),
    date_from: date | None = Query(None),
    date_to: date | None = Query(None),
    db: AsyncSession = Depends(get_db),
) -> dict:
    return ok(await aggregator.compute_stock(db, company_id, date_from, date_to))


@router.get("/mortality-rekap", response_model=ApiResponse[MortalityRekap])
async def mortality_rekap(
    company_id: int | None = Query(None, ge=1, le=MAX_DB_ID),
    date_from: date | None = Query(None),
    date_to: date | None = Query(None),
    db: AsyncSession = Depends(get_db),
) -> dict:
    return ok(await aggregator.mortality_rekap(db, company_id, date_from, date_to))
