"""
Inventory aggregator — live-stock and mortality rollups per company.

Stock is never stored: it is derived from the three movement ledgers as
inbound − mortality − outbound. The grand total is the sum of the
per-company results, not a separate aggregate.
"""

from __future__ import annotations

import logging
from datetime import date

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from aswi.core.config import settings
from aswi.core.enums import ClaimStatus
from aswi.core.exceptions import BadRequestError, NotFoundError
from aswi.models.inventory import Company, InboundStock, Mortality, OutboundLive

logger = logging.getLogger(__name__)

FIGURES = ("inbound", "mortality", "outbound", "stock")


def claim_status_for(head_count: int) -> str:
    if head_count >= settings.MORTALITY_CLAIM_THRESHOLD:
        return ClaimStatus.BISA_CLAIM.value
    return ClaimStatus.TIDAK_BISA.value


def stock_figures(inbound: int, mortality: int, outbound: int) -> dict[str, int]:
    return {
        "inbound": inbound,
        "mortality": mortality,
        "outbound": outbound,
        "stock": inbound - mortality - outbound,
    }


def add_figures(rows: list[dict]) -> dict[str, int]:
    """Sum already-derived per-company figures into a grand total."""
    return {key: sum(r[key] for r in rows) for key in FIGURES}


def _check_range(date_from: date | None, date_to: date | None) -> None:
    if date_from and date_to and date_from > date_to:
        raise BadRequestError("date_from must not be after date_to")


async def get_company(db: AsyncSession, company_id: int) -> Company:
    company = await db.get(Company, company_id)
    if company is None:
        raise NotFoundError("Company not found")
    return company


async def _sum_by_company(
    db: AsyncSession,
    model,
    company_id: int | None,
    date_from: date | None,
    date_to: date | None,
) -> dict[int, int]:
    query = select(model.company_id, func.coalesce(func.sum(model.head_count), 0))
    if company_id is not None:
        query = query.where(model.company_id == company_id)
    if date_from:
        query = query.where(model.date >= date_from)
    if date_to:
        query = query.where(model.date <= date_to)
    result = await db.execute(query.group_by(model.company_id))
    return {cid: int(total) for cid, total in result.all()}


async def _companies(db: AsyncSession, company_id: int | None) -> list[Company]:
    if company_id is not None:
        return [await get_company(db, company_id)]
    result = await db.execute(select(Company).order_by(Company.name))
    return list(result.scalars().all())


async def compute_stock(
    db: AsyncSession,
    company_id: int | None = None,
    date_from: date | None = None,
    date_to: date | None = None,
) -> dict:
    """Per-company stock figures plus their grand total."""
    _check_range(date_from, date_to)
    companies = await _companies(db, company_id)

    inbound = await _sum_by_company(db, InboundStock, company_id, date_from, date_to)
    mortality = await _sum_by_company(db, Mortality, company_id, date_from, date_to)
    outbound = await _sum_by_company(db, OutboundLive, company_id, date_from, date_to)

    rows = []
    for company in companies:
        figures = stock_figures(
            inbound.get(company.id, 0),
            mortality.get(company.id, 0),
            outbound.get(company.id, 0),
        )
        rows.append({"company_id": company.id, "company_name": company.name, **figures})

    return {
        "companies": rows,
        "total": add_figures(rows),
        "date_from": date_from,
        "date_to": date_to,
    }


def _bucket(records: int = 0, head_count: int = 0) -> dict[str, int]:
    return {"records": records, "head_count": head_count}


async def mortality_rekap(
    db: AsyncSession,
    company_id: int | None = None,
    date_from: date | None = None,
    date_to: date | None = None,
) -> dict:
    """Mortality partitioned by claimability, per company and overall."""
    _check_range(date_from, date_to)
    companies = await _companies(db, company_id)

    query = select(
        Mortality.company_id,
        Mortality.claim_status,
        func.count(Mortality.id),
        func.coalesce(func.sum(Mortality.head_count), 0),
    )
    if company_id is not None:
        query = query.where(Mortality.company_id == company_id)
    if date_from:
        query = query.where(Mortality.date >= date_from)
    if date_to:
        query = query.where(Mortality.date <= date_to)
    result = await db.execute(
        query.group_by(Mortality.company_id, Mortality.claim_status)
    )
    partitions: dict[tuple[int, str], dict[str, int]] = {
        (cid, status): _bucket(int(count), int(heads))
        for cid, status, count, heads in result.all()
    }

    rows = []
    for company in companies:
        bisa = partitions.get((company.id, ClaimStatus.BISA_CLAIM.value), _bucket())
        tidak = partitions.get((company.id, ClaimStatus.TIDAK_BISA.value), _bucket())
        rows.append(
            {
                "company_id": company.id,
                "company_name": company.name,
                "bisa_claim": bisa,
                "tidak_bisa_claim": tidak,
                "total": _bucket(
                    bisa["records"] + tidak["records"],
                    bisa["head_count"] + tidak["head_count"],
                ),
            }
        )

    total = {
        part: _bucket(
            sum(r[part]["records"] for r in rows),
            sum(r[part]["head_count"] for r in rows),
        )
        for part in ("bisa_claim", "tidak_bisa_claim", "total")
    }
    return {
        "companies": rows,
        "total": total,
        "date_from": date_from,
        "date_to": date_to,
    }


# ── Movement entries ────────────────────────────────────────────────
async def record_movement(db: AsyncSession, model, **fields):
    """Append one inbound / mortality / outbound entry for an existing company."""
    await get_company(db, fields["company_id"])
    if model is Mortality:
        fields["claim_status"] = claim_status_for(fields["head_count"])
    entry = model(**fields)
    db.add(entry)
    await db.commit()
    await db.refresh(entry)
    logger.info(
        "%s entry: company %d, %d head on %s",
        model.__tablename__, entry.company_id, entry.head_count, entry.date,
    )
    return entry


async def list_movements(
    db: AsyncSession,
    model,
    company_id: int | None = None,
    date_from: date | None = None,
    date_to: date | None = None,
    limit: int = 200,
    claim_status: str | None = None,
) -> list:
    _check_range(date_from, date_to)
    query = select(model)
    if company_id is not None:
        query = query.where(model.company_id == company_id)
    if claim_status is not None:
        # only Mortality carries a claim status
        query = query.where(model.claim_status == claim_status)
    if date_from:
        query = query.where(model.date >= date_from)
    if date_to:
        query = query.where(model.date <= date_to)
    result = await db.execute(
        query.order_by(model.date.desc(), model.id.desc()).limit(limit)
    )
    return list(result.scalars().all())


async def day_movement(db: AsyncSession, day: date) -> dict[str, int]:
    """One day's movement across all companies plus all-time live stock."""
    totals = {}
    for key, model in (
        ("inbound", InboundStock),
        ("mortality", Mortality),
        ("outbound", OutboundLive),
    ):
        result = await db.execute(
            select(func.coalesce(func.sum(model.head_count), 0)).where(model.date == day)
        )
        totals[key] = int(result.scalar_one())
    totals["stock"] = (await compute_stock(db))["total"]["stock"]
    return totals
