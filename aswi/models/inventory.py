"""
Company & live-stock movement models.

Movement rows are append-only ledger entries; stock balances are always
derived from them and never stored.
"""

from __future__ import annotations

from datetime import date, datetime, timezone

from sqlalchemy import (Column, Date, DateTime, Float, ForeignKey, Index,
                        Integer, String)
from sqlalchemy.orm import relationship

from aswi.db.base import Base, BigId


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Company(Base):
    __tablename__ = "companies"

    id: int = Column(BigId, primary_key=True, index=True)  # type: ignore[assignment]
    name: str = Column(String(200), unique=True, nullable=False)  # type: ignore[assignment]
    address: str | None = Column(String(500), nullable=True)  # type: ignore[assignment]
    contact: str | None = Column(String(100), nullable=True)  # type: ignore[assignment]
    created_at: datetime = Column(DateTime(timezone=True), default=_utcnow)  # type: ignore[assignment]


class InboundStock(Base):
    __tablename__ = "inbound_stock"
    __table_args__ = (Index("ix_inbound_company_date", "company_id", "date"),)

    id: int = Column(BigId, primary_key=True, index=True)  # type: ignore[assignment]
    company_id: int = Column(BigId, ForeignKey("companies.id"), nullable=False)  # type: ignore[assignment]
    date: date = Column(Date, nullable=False)  # type: ignore[assignment]
    head_count: int = Column(Integer, nullable=False)  # type: ignore[assignment]
    total_weight_kg: float | None = Column(Float, nullable=True)  # type: ignore[assignment]
    notes: str | None = Column(String(500), nullable=True)  # type: ignore[assignment]
    created_at: datetime = Column(DateTime(timezone=True), default=_utcnow)  # type: ignore[assignment]

    company = relationship("Company", lazy="joined")


class Mortality(Base):
    __tablename__ = "mortality"
    __table_args__ = (Index("ix_mortality_company_date", "company_id", "date"),)

    id: int = Column(BigId, primary_key=True, index=True)  # type: ignore[assignment]
    company_id: int = Column(BigId, ForeignKey("companies.id"), nullable=False)  # type: ignore[assignment]
    date: date = Column(Date, nullable=False)  # type: ignore[assignment]
    head_count: int = Column(Integer, nullable=False)  # type: ignore[assignment]
    claim_status: str = Column(String(12), nullable=False)  # type: ignore[assignment]
    # BISA_CLAIM | TIDAK_BISA
    notes: str | None = Column(String(500), nullable=True)  # type: ignore[assignment]
    created_at: datetime = Column(DateTime(timezone=True), default=_utcnow)  # type: ignore[assignment]

    company = relationship("Company", lazy="joined")


class OutboundLive(Base):
    __tablename__ = "outbound_live"
    __table_args__ = (Index("ix_outbound_company_date", "company_id", "date"),)

    id: int = Column(BigId, primary_key=True, index=True)  # type: ignore[assignment]
    company_id: int = Column(BigId, ForeignKey("companies.id"), nullable=False)  # type: ignore[assignment]
    date: date = Column(Date, nullable=False)  # type: ignore[assignment]
    head_count: int = Column(Integer, nullable=False)  # type: ignore[assignment]
    total_weight_kg: float | None = Column(Float, nullable=True)  # type: ignore[assignment]
    notes: str | None = Column(String(500), nullable=True)  # type: ignore[assignment]
    created_at: datetime = Column(DateTime(timezone=True), default=_utcnow)  # type: ignore[assignment]

    company = relationship("Company", lazy="joined")
