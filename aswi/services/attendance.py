"""
Attendance ledger — one record per employee per calendar day.

State per (employee, day): no record → checked in → complete. Records are
also created by leave approval (see :mod:`aswi.services.leave`); those
carry a leave status and no check-in time.
"""

from __future__ import annotations

import logging
import math
from collections import Counter
from datetime import date, datetime

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from aswi.core import dates
from aswi.core.config import settings
from aswi.core.enums import (LEAVE_STATUSES, AttendanceStatus, EmployeeStatus,
                             LeaveStatus)
from aswi.core.exceptions import BadRequestError
from aswi.models.employee import Attendance, Employee, EmployeeType
from aswi.models.leave import LeaveRequest

logger = logging.getLogger(__name__)

EARTH_RADIUS_M = 6371e3


def haversine_distance(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Great-circle distance in metres."""
    phi1 = math.radians(lat1)
    phi2 = math.radians(lat2)
    d_phi = math.radians(lat2 - lat1)
    d_lambda = math.radians(lon2 - lon1)
    a = (
        math.sin(d_phi / 2) ** 2
        + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2) ** 2
    )
    return EARTH_RADIUS_M * 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))


def classify_check_in(
    moment: datetime, check_in_time, tolerance_minutes: int | None
) -> str:
    """HADIR up to the type's start time plus tolerance, TERLAMBAT after."""
    local = dates.to_local(moment)
    if tolerance_minutes is None:
        tolerance_minutes = settings.DEFAULT_LATE_TOLERANCE_MINUTES
    cutoff = dates.late_cutoff(local.date(), check_in_time, tolerance_minutes)
    if local <= cutoff:
        return AttendanceStatus.HADIR.value
    return AttendanceStatus.TERLAMBAT.value


def _check_geofence(latitude: float | None, longitude: float | None) -> None:
    if settings.SKIP_LOCATION_CHECK:
        return
    if latitude is None or longitude is None:
        raise BadRequestError("GPS location is required for check-in")
    distance = haversine_distance(
        latitude, longitude, settings.OFFICE_LATITUDE, settings.OFFICE_LONGITUDE
    )
    if distance > settings.MAX_CHECKIN_DISTANCE_METERS:
        raise BadRequestError(
            f"Outside the work area ({round(distance)}m from the office, "
            f"max {settings.MAX_CHECKIN_DISTANCE_METERS}m)"
        )


async def find_record(db: AsyncSession, employee_id: int, day: date) -> Attendance | None:
    result = await db.execute(
        select(Attendance).where(
            Attendance.employee_id == employee_id, Attendance.date == day
        )
    )
    return result.scalar_one_or_none()


async def find_approved_leave(
    db: AsyncSession, employee_id: int, day: date
) -> LeaveRequest | None:
    result = await db.execute(
        select(LeaveRequest)
        .where(
            LeaveRequest.employee_id == employee_id,
            LeaveRequest.status == LeaveStatus.APPROVED.value,
            LeaveRequest.start_date <= day,
            LeaveRequest.end_date >= day,
        )
        .limit(1)
    )
    return result.scalars().first()


async def check_in(
    db: AsyncSession,
    employee: Employee,
    latitude: float | None = None,
    longitude: float | None = None,
    now: datetime | None = None,
) -> Attendance:
    """Open today's record for ``employee``.

    ``now`` is taken once and both the date key and the late check derive
    from it. The (employee, date) unique constraint backs the duplicate
    check, so a concurrent second check-in fails here as well.
    """
    now = now or dates.local_now()
    today = dates.to_local(now).date()

    existing = await find_record(db, employee.id, today)
    if existing is not None:
        # Approved leave fans out into check-in-less records for its days
        if existing.check_in_at is None and existing.status in LEAVE_STATUSES:
            raise BadRequestError(
                f"Cannot check in: approved {existing.status} covers today"
            )
        raise BadRequestError("Already checked in today")

    leave = await find_approved_leave(db, employee.id, today)
    if leave is not None:
        raise BadRequestError(
            f"Cannot check in: approved {leave.leave_type} covers today"
        )

    _check_geofence(latitude, longitude)

    employee_type = await db.get(EmployeeType, employee.employee_type_id)
    if employee_type is None:
        raise BadRequestError("Employee has no employee type")

    record = Attendance(
        employee_id=employee.id,
        date=today,
        check_in_at=dates.ensure_utc(now),
        status=classify_check_in(
            now, employee_type.check_in_time, employee_type.late_tolerance_minutes
        ),
        latitude=latitude,
        longitude=longitude,
    )
    db.add(record)
    try:
        await db.commit()
    except IntegrityError:
        await db.rollback()
        raise BadRequestError("Already checked in today")
    await db.refresh(record)

    logger.info(
        "Check-in %s for employee %d on %s", record.status, employee.id, today
    )
    return record


async def check_out(
    db: AsyncSession,
    employee: Employee,
    now: datetime | None = None,
) -> Attendance:
    """Close today's record; the status set at check-in is kept."""
    now = now or dates.local_now()
    today = dates.to_local(now).date()

    result = await db.execute(
        select(Attendance)
        .where(Attendance.employee_id == employee.id, Attendance.date == today)
        .with_for_update()
    )
    record = result.scalar_one_or_none()
    if record is None or record.check_in_at is None:
        raise BadRequestError("Not checked in today")
    if record.check_out_at is not None:
        raise BadRequestError("Already checked out today")

    record.check_out_at = dates.ensure_utc(now)
    await db.commit()
    await db.refresh(record)

    logger.info("Check-out for employee %d on %s", employee.id, today)
    return record


async def history(
    db: AsyncSession,
    employee_id: int,
    date_from: date | None = None,
    date_to: date | None = None,
    limit: int = 31,
) -> list[Attendance]:
    query = select(Attendance).where(Attendance.employee_id == employee_id)
    if date_from:
        query = query.where(Attendance.date >= date_from)
    if date_to:
        query = query.where(Attendance.date <= date_to)
    result = await db.execute(query.order_by(Attendance.date.desc()).limit(limit))
    return list(result.scalars().all())


def count_statuses(records: list[Attendance]) -> dict[str, int]:
    """Per-status counts keyed by lower-case status, plus ``total_present``."""
    counter = Counter(r.status for r in records)
    counts = {s.value.lower(): counter.get(s.value, 0) for s in AttendanceStatus}
    counts["total_present"] = counts["hadir"] + counts["terlambat"]
    return counts


async def monthly_recap(
    db: AsyncSession,
    year: int,
    month: int,
    employee_id: int | None = None,
    employee_type_id: int | None = None,
) -> dict:
    """Status counts and daily detail per active employee for one month."""
    if month < 1 or month > 12:
        raise BadRequestError("Month must be 1-12")
    if year < 2000 or year > 2100:
        raise BadRequestError("Year must be between 2000 and 2100")

    start, end = dates.month_bounds(year, month)

    emp_query = select(Employee).where(Employee.status == EmployeeStatus.AKTIF.value)
    if employee_id:
        emp_query = emp_query.where(Employee.id == employee_id)
    if employee_type_id:
        emp_query = emp_query.where(Employee.employee_type_id == employee_type_id)
    employees = list((await db.execute(emp_query.order_by(Employee.name))).scalars().unique())

    # All records for the month in one query
    by_employee: dict[int, list[Attendance]] = {e.id: [] for e in employees}
    if employees:
        att_result = await db.execute(
            select(Attendance)
            .where(
                Attendance.employee_id.in_(list(by_employee)),
                Attendance.date >= start,
                Attendance.date <= end,
            )
            .order_by(Attendance.date.asc())
        )
        for record in att_result.scalars().all():
            by_employee[record.employee_id].append(record)

    rows = []
    totals: Counter = Counter()
    for emp in employees:
        records = by_employee[emp.id]
        counts = count_statuses(records)
        totals.update(counts)
        rows.append(
            {
                "employee_id": emp.id,
                "nip": emp.nip,
                "name": emp.name,
                "employee_type": emp.employee_type.name if emp.employee_type else None,
                "counts": counts,
                "days": records,
            }
        )

    return {
        "year": year,
        "month": month,
        "start_date": start,
        "end_date": end,
        "total_employees": len(rows),
        "totals": dict(totals),
        "employees": rows,
    }
