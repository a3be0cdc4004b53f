"""
Employee, employee type & attendance models — core business domain.
"""

from __future__ import annotations

from datetime import date, datetime, time, timezone

from sqlalchemy import (Column, Date, DateTime, Float, ForeignKey, Index,
                        Integer, String, Time, UniqueConstraint)
from sqlalchemy.orm import relationship

from aswi.db.base import Base, BigId


class EmployeeType(Base):
    __tablename__ = "employee_types"

    id: int = Column(BigId, primary_key=True, index=True)  # type: ignore[assignment]
    name: str = Column(String(100), unique=True, nullable=False)  # type: ignore[assignment]
    check_in_time: time = Column(Time, nullable=False)  # type: ignore[assignment]
    check_out_time: time = Column(Time, nullable=False)  # type: ignore[assignment]
    late_tolerance_minutes: int = Column(Integer, nullable=False, default=15)  # type: ignore[assignment]

    employees = relationship("Employee", back_populates="employee_type")


class Employee(Base):
    __tablename__ = "employees"

    id: int = Column(BigId, primary_key=True, index=True)  # type: ignore[assignment]
    nip: str = Column(String(50), unique=True, nullable=False, index=True)  # type: ignore[assignment]
    name: str = Column(String(200), nullable=False)  # type: ignore[assignment]
    phone: str | None = Column(String(30), nullable=True)  # type: ignore[assignment]
    address: str | None = Column(String(500), nullable=True)  # type: ignore[assignment]
    status: str = Column(String(10), nullable=False, default="AKTIF")  # type: ignore[assignment]
    # AKTIF | NONAKTIF
    employee_type_id: int = Column(BigId, ForeignKey("employee_types.id"), nullable=False)  # type: ignore[assignment]
    user_id: int = Column(BigId, ForeignKey("users.id"), unique=True, nullable=False)  # type: ignore[assignment]
    created_at: datetime = Column(  # type: ignore[assignment]
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
    )
    updated_at: datetime = Column(  # type: ignore[assignment]
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    user = relationship("User", back_populates="employee")
    employee_type = relationship("EmployeeType", back_populates="employees", lazy="joined")
    attendances = relationship("Attendance", back_populates="employee")


class Attendance(Base):
    __tablename__ = "attendance"
    __table_args__ = (
        # One record per employee per calendar day
        UniqueConstraint("employee_id", "date", name="uq_attendance_employee_date"),
        Index("ix_attendance_date_status", "date", "status"),
    )

    id: int = Column(BigId, primary_key=True, index=True)  # type: ignore[assignment]
    employee_id: int = Column(BigId, ForeignKey("employees.id"), nullable=False)  # type: ignore[assignment]
    date: date = Column(Date, nullable=False)  # type: ignore[assignment]
    check_in_at: datetime | None = Column(DateTime(timezone=True), nullable=True)  # type: ignore[assignment]
    check_out_at: datetime | None = Column(DateTime(timezone=True), nullable=True)  # type: ignore[assignment]
    status: str = Column(String(20), nullable=False)  # type: ignore[assignment]
    # HADIR | TERLAMBAT | IZIN | CUTI | SAKIT | ALPHA
    latitude: float | None = Column(Float, nullable=True)  # type: ignore[assignment]
    longitude: float | None = Column(Float, nullable=True)  # type: ignore[assignment]
    created_at: datetime = Column(  # type: ignore[assignment]
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
    )

    employee = relationship("Employee", back_populates="attendances")
