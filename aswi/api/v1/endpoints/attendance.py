"""
Attendance endpoints — check-in / check-out, own history, monthly recap.
"""

from __future__ import annotations

from datetime import date

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from aswi.api.v1.deps import (Principal, get_db, require_active_employee,
                              require_admin)
from aswi.core import dates
from aswi.schemas.attendance import (AttendanceRead, CheckInRequest,
                                     MonthlyRecapResponse)
from aswi.schemas.common import MAX_DB_ID, ApiResponse, ok
from aswi.services import attendance as ledger

router = APIRouter(prefix="/attendance", tags=["attendance"])


@router.post("/check-in", response_model=ApiResponse[AttendanceRead])
async def check_in(
    body: CheckInRequest | None = None,
    db: AsyncSession = Depends(get_db),
    principal: Principal = Depends(require_active_employee),
) -> dict:
    body = body or CheckInRequest()
    record = await ledger.check_in(
        db, principal.employee, latitude=body.latitude, longitude=body.longitude
    )
    return ok(record, message=f"Check-in recorded ({record.status})")


@router.post("/check-out", response_model=ApiResponse[AttendanceRead])
async def check_out(
    db: AsyncSession = Depends(get_db),
    principal: Principal = Depends(require_active_employee),
) -> dict:
    record = await ledger.check_out(db, principal.employee)
    return ok(record, message="Check-out recorded")


@router.get("/history", response_model=ApiResponse[list[AttendanceRead]])
async def attendance_history(
    date_from: date | None = Query(None),
    date_to: date | None = Query(None),
    limit: int = Query(31, ge=1, le=366),
    db: AsyncSession = Depends(get_db),
    principal: Principal = Depends(require_active_employee),
) -> dict:
    records = await ledger.history(
        db, principal.employee.id, date_from=date_from, date_to=date_to, limit=limit
    )
    return ok(records)


@router.get("/monthly-recap", response_model=ApiResponse[MonthlyRecapResponse])
async def monthly_recap(
    month: int | None = Query(None),
    year: int | None = Query(None),
    employee_id: int | None = Query(None, ge=1, le=MAX_DB_ID),
    employee_type_id: int | None = Query(None, ge=1, le=MAX_DB_ID),
    db: AsyncSession = Depends(get_db),
    _admin: Principal = Depends(require_admin),
) -> dict:
    """Per-employee status counts for one month (defaults to the current one)."""
    today = dates.today()
    recap = await ledger.monthly_recap(
        db,
        year=year if year is not None else today.year,
        month=month if month is not None else today.month,
        employee_id=employee_id,
        employee_type_id=employee_type_id,
    )
    return ok(recap)
