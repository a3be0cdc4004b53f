"""
Leave workflow — PENDING → APPROVED | REJECTED.

Approval fans out into the attendance ledger: every day of the request
gets a record carrying the leave type unless the employee already
checked in that day. The request row is locked and the whole fan-out is
committed once, so a failed decision leaves nothing behind.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from aswi.core import dates
from aswi.core.enums import LeaveStatus
from aswi.core.exceptions import BadRequestError, NotFoundError
from aswi.models.employee import Attendance, Employee
from aswi.models.leave import LeaveRequest
from aswi.schemas.leave import LeaveRequestCreate

logger = logging.getLogger(__name__)


async def submit_leave(
    db: AsyncSession, employee: Employee, payload: LeaveRequestCreate
) -> LeaveRequest:
    today = dates.today()
    if payload.start_date < today:
        raise BadRequestError("Start date cannot be in the past")
    if payload.start_date > payload.end_date:
        raise BadRequestError("Start date must not be after end date")

    leave = LeaveRequest(
        employee_id=employee.id,
        leave_type=payload.leave_type,
        start_date=payload.start_date,
        end_date=payload.end_date,
        reason=payload.reason,
        status=LeaveStatus.PENDING.value,
    )
    db.add(leave)
    await db.commit()
    await db.refresh(leave)

    logger.info(
        "Leave %s submitted by employee %d (%s → %s)",
        leave.leave_type, employee.id, leave.start_date, leave.end_date,
    )
    return leave


async def decide_leave(
    db: AsyncSession,
    request_id: int,
    decision: str,
    decided_by: int | None = None,
) -> tuple[LeaveRequest, int]:
    """Apply ``decision`` to a pending request.

    Returns the updated request and the number of attendance days written.
    """
    result = await db.execute(
        select(LeaveRequest)
        .where(LeaveRequest.id == request_id)
        .with_for_update(of=LeaveRequest)
    )
    leave = result.scalars().first()
    if leave is None:
        raise NotFoundError("Leave request not found")
    if leave.status != LeaveStatus.PENDING.value:
        raise BadRequestError(f"Leave request already {leave.status}")

    days_applied = 0
    try:
        leave.status = decision
        leave.decided_by = decided_by
        leave.decided_at = datetime.now(timezone.utc)

        if decision == LeaveStatus.APPROVED.value:
            existing = await db.execute(
                select(Attendance).where(
                    Attendance.employee_id == leave.employee_id,
                    Attendance.date >= leave.start_date,
                    Attendance.date <= leave.end_date,
                )
            )
            by_date = {r.date: r for r in existing.scalars().all()}

            for day in dates.iter_days(leave.start_date, leave.end_date):
                record = by_date.get(day)
                if record is None:
                    db.add(
                        Attendance(
                            employee_id=leave.employee_id,
                            date=day,
                            status=leave.leave_type,
                        )
                    )
                    days_applied += 1
                elif record.check_in_at is None:
                    record.status = leave.leave_type
                    days_applied += 1
                # a real check-in on that day is kept

        await db.commit()
    except Exception:
        await db.rollback()
        logger.error("Leave decision %d rolled back", request_id, exc_info=True)
        raise

    await db.refresh(leave)
    logger.info(
        "Leave request %d %s (%d attendance days written)",
        request_id, decision, days_applied,
    )
    return leave, days_applied


async def list_leave(
    db: AsyncSession,
    employee_id: int | None = None,
    status: str | None = None,
    limit: int | None = None,
) -> list[LeaveRequest]:
    query = select(LeaveRequest)
    if employee_id is not None:
        query = query.where(LeaveRequest.employee_id == employee_id)
    if status:
        query = query.where(LeaveRequest.status == status)
    query = query.order_by(LeaveRequest.created_at.desc(), LeaveRequest.id.desc())
    if limit:
        query = query.limit(limit)
    result = await db.execute(query)
    return list(result.scalars().all())


async def pending_count(db: AsyncSession) -> int:
    result = await db.execute(
        select(func.count(LeaveRequest.id)).where(
            LeaveRequest.status == LeaveStatus.PENDING.value
        )
    )
    return result.scalar_one()
