"""
Leave request model — IZIN / CUTI / SAKIT applications and their decision.
"""

from __future__ import annotations

from datetime import date, datetime, timezone

from sqlalchemy import Column, Date, DateTime, ForeignKey, Index, String, Text
from sqlalchemy.orm import relationship

from aswi.db.base import Base, BigId


class LeaveRequest(Base):
    __tablename__ = "leave_requests"
    __table_args__ = (Index("ix_leave_employee_status", "employee_id", "status"),)

    id: int = Column(BigId, primary_key=True, index=True)  # type: ignore[assignment]
    employee_id: int = Column(BigId, ForeignKey("employees.id"), nullable=False)  # type: ignore[assignment]
    leave_type: str = Column(String(10), nullable=False)  # type: ignore[assignment]
    # IZIN | CUTI | SAKIT
    start_date: date = Column(Date, nullable=False)  # type: ignore[assignment]
    end_date: date = Column(Date, nullable=False)  # type: ignore[assignment]
    reason: str = Column(Text, nullable=False)  # type: ignore[assignment]
    status: str = Column(String(10), nullable=False, default="PENDING")  # type: ignore[assignment]
    # PENDING | APPROVED | REJECTED
    decided_by: int | None = Column(BigId, ForeignKey("users.id"), nullable=True)  # type: ignore[assignment]
    decided_at: datetime | None = Column(DateTime(timezone=True), nullable=True)  # type: ignore[assignment]
    created_at: datetime = Column(  # type: ignore[assignment]
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
    )

    employee = relationship("Employee", lazy="joined")
