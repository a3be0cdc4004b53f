"""Pydantic schemas for companies, stock movements and stock rollups."""

from __future__ import annotations

from datetime import date, datetime

from pydantic import BaseModel, Field, field_validator

from aswi.schemas.common import MAX_HEAD_COUNT, DbId, IdStr


# ── Company ─────────────────────────────────────────────────────────
class CompanyCreate(BaseModel):
    name: str
    address: str | None = None
    contact: str | None = None

    @field_validator("name")
    @classmethod
    def _name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Company name must not be empty")
        return v


class CompanyRead(BaseModel):
    id: IdStr
    name: str
    address: str | None
    contact: str | None

    model_config = {"from_attributes": True}


# ── Movements ───────────────────────────────────────────────────────
class MovementCreate(BaseModel):
    company_id: DbId
    date: date
    head_count: int = Field(gt=0, le=MAX_HEAD_COUNT)
    notes: str | None = None


class WeighedMovementCreate(MovementCreate):
    total_weight_kg: float | None = Field(default=None, ge=0)


class CompanyBrief(BaseModel):
    id: IdStr
    name: str

    model_config = {"from_attributes": True}


class MovementRead(BaseModel):
    id: IdStr
    company_id: IdStr
    company: CompanyBrief | None = None
    date: date
    head_count: int
    notes: str | None
    created_at: datetime | None

    model_config = {"from_attributes": True}


class WeighedMovementRead(MovementRead):
    total_weight_kg: float | None = None


class MortalityRead(MovementRead):
    claim_status: str


# ── Stock rollup ────────────────────────────────────────────────────
class StockFigures(BaseModel):
    inbound: int
    mortality: int
    outbound: int
    stock: int


class CompanyStock(StockFigures):
    company_id: IdStr
    company_name: str


class StockReport(BaseModel):
    companies: list[CompanyStock]
    total: StockFigures
    date_from: date | None = None
    date_to: date | None = None


# ── Mortality rekap ─────────────────────────────────────────────────
class ClaimBucket(BaseModel):
    records: int = 0
    head_count: int = 0


class CompanyMortality(BaseModel):
    company_id: IdStr
    company_name: str
    bisa_claim: ClaimBucket
    tidak_bisa_claim: ClaimBucket
    total: ClaimBucket


class MortalityTotals(BaseModel):
    bisa_claim: ClaimBucket
    tidak_bisa_claim: ClaimBucket
    total: ClaimBucket


class MortalityRekap(BaseModel):
    companies: list[CompanyMortality]
    total: MortalityTotals
    date_from: date | None = None
    date_to: date | None = None
