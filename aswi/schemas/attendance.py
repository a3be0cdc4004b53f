"""Pydantic schemas for Employee / Attendance / Dashboards."""

from __future__ import annotations

import re
from datetime import date, datetime, time

from pydantic import BaseModel, Field, field_validator

from aswi.core.enums import EmployeeStatus
from aswi.schemas.common import DbId, IdStr
from aswi.schemas.leave import LeaveRequestRead
from aswi.schemas.user import check_password_length

_NIP_RE = re.compile(r"^[A-Za-z0-9._-]{1,50}$")
_EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
_STATUSES = {s.value for s in EmployeeStatus}


# ── Employee type ───────────────────────────────────────────────────
class EmployeeTypeCreate(BaseModel):
    name: str
    check_in_time: time
    check_out_time: time
    late_tolerance_minutes: int = Field(default=15, ge=0, le=240)

    @field_validator("name")
    @classmethod
    def _name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Name must not be empty")
        return v


class EmployeeTypeUpdate(BaseModel):
    name: str | None = None
    check_in_time: time | None = None
    check_out_time: time | None = None
    late_tolerance_minutes: int | None = Field(default=None, ge=0, le=240)


class EmployeeTypeRead(BaseModel):
    id: IdStr
    name: str
    check_in_time: time
    check_out_time: time
    late_tolerance_minutes: int

    model_config = {"from_attributes": True}


# ── Employee ────────────────────────────────────────────────────────
class EmployeeCreate(BaseModel):
    nip: str
    name: str
    email: str
    password: str
    employee_type_id: DbId
    phone: str | None = None
    address: str | None = None
    status: str = EmployeeStatus.AKTIF.value

    @field_validator("nip")
    @classmethod
    def _nip(cls, v: str) -> str:
        v = v.strip()
        if not _NIP_RE.match(v):
            raise ValueError("NIP must be 1-50 alphanumeric chars")
        return v

    @field_validator("name")
    @classmethod
    def _name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Name must not be empty")
        if len(v) > 200:
            raise ValueError("Name must not exceed 200 characters")
        return v

    @field_validator("email")
    @classmethod
    def _email(cls, v: str) -> str:
        v = v.strip().lower()
        if not _EMAIL_RE.match(v):
            raise ValueError("Invalid email address")
        return v

    @field_validator("password")
    @classmethod
    def _password(cls, v: str) -> str:
        return check_password_length(v)

    @field_validator("status")
    @classmethod
    def _status(cls, v: str) -> str:
        if v not in _STATUSES:
            raise ValueError(f"Status must be one of: {sorted(_STATUSES)}")
        return v


class EmployeeUpdate(BaseModel):
    name: str | None = None
    phone: str | None = None
    address: str | None = None
    employee_type_id: DbId | None = None
    status: str | None = None

    @field_validator("status")
    @classmethod
    def _status(cls, v: str | None) -> str | None:
        if v is not None and v not in _STATUSES:
            raise ValueError(f"Status must be one of: {sorted(_STATUSES)}")
        return v


class EmployeeRead(BaseModel):
    id: IdStr
    user_id: IdStr
    nip: str
    name: str
    email: str | None = None
    phone: str | None
    address: str | None
    status: str
    employee_type: EmployeeTypeRead | None
    created_at: datetime | None

    model_config = {"from_attributes": True}


# ── Check-in / out ──────────────────────────────────────────────────
class CheckInRequest(BaseModel):
    latitude: float | None = Field(default=None, ge=-90, le=90)
    longitude: float | None = Field(default=None, ge=-180, le=180)


class AttendanceRead(BaseModel):
    id: IdStr
    employee_id: IdStr
    date: date
    check_in_at: datetime | None
    check_out_at: datetime | None
    status: str
    latitude: float | None = None
    longitude: float | None = None

    model_config = {"from_attributes": True}


class AttendanceRow(AttendanceRead):
    """Attendance record joined with its employee, for admin views."""

    employee_name: str
    employee_nip: str
    employee_type: str | None = None


# ── Monthly recap ───────────────────────────────────────────────────
class StatusCounts(BaseModel):
    hadir: int = 0
    terlambat: int = 0
    izin: int = 0
    cuti: int = 0
    sakit: int = 0
    alpha: int = 0
    total_present: int = 0


class RecapDay(BaseModel):
    model_config = {"from_attributes": True}

    id: IdStr
    date: date
    check_in_at: datetime | None
    check_out_at: datetime | None
    status: str


class EmployeeRecap(BaseModel):
    employee_id: IdStr
    nip: str
    name: str
    employee_type: str | None
    counts: StatusCounts
    days: list[RecapDay]


class MonthlyRecapResponse(BaseModel):
    year: int
    month: int
    start_date: date
    end_date: date
    total_employees: int
    totals: StatusCounts
    employees: list[EmployeeRecap]


# ── Dashboards ──────────────────────────────────────────────────────
class EmployeeOption(BaseModel):
    id: IdStr
    nip: str
    name: str


class AttendanceOverview(BaseModel):
    total_active_employees: int
    present: int
    on_leave: int
    alpha: int
    not_recorded: int


class InventoryDay(BaseModel):
    inbound: int
    mortality: int
    outbound: int
    stock: int


class AdminSummaryResponse(BaseModel):
    date: date
    attendance: AttendanceOverview
    records: list[AttendanceRow]
    employees: list[EmployeeOption]
    inventory: InventoryDay
    filters: dict[str, str | None]


class UserDashboardResponse(BaseModel):
    employee: EmployeeRead
    today: AttendanceRead | None
    present_this_month: int
    attendance_history: list[AttendanceRead]
    recent_leave: list[LeaveRequestRead]
