"""
Dashboards — daily admin overview and the employee's own summary.
"""

from __future__ import annotations

from datetime import date, timedelta

from fastapi import APIRouter, Depends, Query
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from aswi.api.v1.deps import (Principal, get_db, require_active_employee,
                              require_admin)
from aswi.core import dates
from aswi.core.enums import (LEAVE_STATUSES, PRESENT_STATUSES,
                             AttendanceStatus, EmployeeStatus)
from aswi.core.exceptions import BadRequestError
from aswi.models.employee import Attendance, Employee
from aswi.models.user import User
from aswi.schemas.attendance import (AdminSummaryResponse,
                                     UserDashboardResponse)
from aswi.schemas.common import MAX_DB_ID, ApiResponse, ok
from aswi.services import attendance as ledger
from aswi.services import inventory as aggregator
from aswi.services import leave as workflow

router = APIRouter(prefix="/dashboard", tags=["dashboard"])

_ATTENDANCE_STATUSES = [s.value for s in AttendanceStatus]


@router.get("/admin-summary", response_model=ApiResponse[AdminSummaryResponse])
async def admin_summary(
    day: date | None = Query(None, alias="date"),
    employee_id: int | None = Query(None, ge=1, le=MAX_DB_ID),
    status: str | None = Query(None),
    db: AsyncSession = Depends(get_db),
    _admin: Principal = Depends(require_admin),
) -> dict:
    """Attendance overview for one day plus that day's inventory movement."""
    day = day or dates.today()
    if status:
        status = status.upper()
        if status not in _ATTENDANCE_STATUSES:
            raise BadRequestError(
                f"Status must be one of: {', '.join(_ATTENDANCE_STATUSES)}"
            )

    active = await db.execute(
        select(Employee)
        .where(Employee.status == EmployeeStatus.AKTIF.value)
        .order_by(Employee.name)
    )
    active_employees = list(active.scalars().all())

    # Status counts over active employees only, ignoring the list filters
    counts_result = await db.execute(
        select(Attendance.status, func.count(Attendance.id))
        .join(Employee, Employee.id == Attendance.employee_id)
        .where(
            Attendance.date == day,
            Employee.status == EmployeeStatus.AKTIF.value,
        )
        .group_by(Attendance.status)
    )
    by_status = dict(counts_result.all())
    present = sum(by_status.get(s, 0) for s in PRESENT_STATUSES)
    on_leave = sum(by_status.get(s, 0) for s in LEAVE_STATUSES)
    alpha = by_status.get(AttendanceStatus.ALPHA.value, 0)
    recorded = sum(by_status.values())

    records_query = (
        select(Attendance, Employee)
        .join(Employee, Employee.id == Attendance.employee_id)
        .where(Attendance.date == day)
    )
    if employee_id:
        records_query = records_query.where(Attendance.employee_id == employee_id)
    if status:
        records_query = records_query.where(Attendance.status == status)
    records_result = await db.execute(records_query.order_by(Employee.name))
    records = [
        {
            "id": att.id,
            "employee_id": att.employee_id,
            "date": att.date,
            "check_in_at": att.check_in_at,
            "check_out_at": att.check_out_at,
            "status": att.status,
            "latitude": att.latitude,
            "longitude": att.longitude,
            "employee_name": emp.name,
            "employee_nip": emp.nip,
            "employee_type": emp.employee_type.name if emp.employee_type else None,
        }
        for att, emp in records_result.all()
    ]

    return ok(
        {
            "date": day,
            "attendance": {
                "total_active_employees": len(active_employees),
                "present": present,
                "on_leave": on_leave,
                "alpha": alpha,
                "not_recorded": max(len(active_employees) - recorded, 0),
            },
            "records": records,
            "employees": [
                {"id": e.id, "nip": e.nip, "name": e.name} for e in active_employees
            ],
            "inventory": await aggregator.day_movement(db, day),
            "filters": {
                "date": day.isoformat(),
                "employee_id": str(employee_id) if employee_id else None,
                "status": status,
            },
        }
    )


@router.get("/user", response_model=ApiResponse[UserDashboardResponse])
async def user_dashboard(
    db: AsyncSession = Depends(get_db),
    principal: Principal = Depends(require_active_employee),
) -> dict:
    """Today's record, month-to-date presence, last 30 days and latest leave."""
    employee = principal.employee
    today = dates.today()

    email = (
        await db.execute(select(User.email).where(User.id == employee.user_id))
    ).scalar_one_or_none()

    present_this_month = (
        await db.execute(
            select(func.count(Attendance.id)).where(
                Attendance.employee_id == employee.id,
                Attendance.date >= today.replace(day=1),
                Attendance.date <= today,
                Attendance.status.in_(PRESENT_STATUSES),
            )
        )
    ).scalar_one()

    history = await ledger.history(
        db, employee.id, date_from=today - timedelta(days=29), date_to=today, limit=30
    )
    today_record = next((r for r in history if r.date == today), None)

    return ok(
        {
            "employee": {
                "id": employee.id,
                "user_id": employee.user_id,
                "nip": employee.nip,
                "name": employee.name,
                "email": email,
                "phone": employee.phone,
                "address": employee.address,
                "status": employee.status,
                "employee_type": employee.employee_type,
                "created_at": employee.created_at,
            },
            "today": today_record,
            "present_this_month": present_this_month,
            "attendance_history": history,
            "recent_leave": await workflow.list_leave(db, employee_id=employee.id, limit=5),
        }
    )
