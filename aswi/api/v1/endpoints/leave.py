"""
Leave request endpoints — submit, list, decide, pending count.

Employees see only their own requests; admin/owner see everyone's.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from aswi.api.v1.deps import (Principal, find_employee_for_user, get_db,
                              get_principal, require_active_employee,
                              require_admin)
from aswi.core.enums import LeaveStatus
from aswi.core.exceptions import BadRequestError
from aswi.schemas.common import ApiResponse, CountRead, ok
from aswi.schemas.leave import (LeaveDecisionRead, LeaveDecisionRequest,
                                LeaveRequestCreate, LeaveRequestRead)
from aswi.services import leave as workflow

router = APIRouter(prefix="/leave-requests", tags=["leave"])

_STATUSES = [s.value for s in LeaveStatus]


@router.post("", response_model=ApiResponse[LeaveRequestRead], status_code=201)
async def submit_leave_request(
    body: LeaveRequestCreate,
    db: AsyncSession = Depends(get_db),
    principal: Principal = Depends(require_active_employee),
) -> dict:
    leave = await workflow.submit_leave(db, principal.employee, body)
    return ok(leave, message="Leave request submitted")


@router.get("", response_model=ApiResponse[list[LeaveRequestRead]])
async def list_leave_requests(
    status: str | None = Query(None),
    db: AsyncSession = Depends(get_db),
    principal: Principal = Depends(get_principal),
) -> dict:
    if status:
        status = status.upper()
        if status not in _STATUSES:
            raise BadRequestError(f"Status must be one of: {', '.join(_STATUSES)}")

    if principal.is_admin:
        return ok(await workflow.list_leave(db, status=status))

    employee = await find_employee_for_user(db, principal.user_id)
    if employee is None:
        return ok([])
    return ok(await workflow.list_leave(db, employee_id=employee.id, status=status))


@router.post("/approve", response_model=ApiResponse[LeaveDecisionRead])
async def decide_leave_request(
    body: LeaveDecisionRequest,
    db: AsyncSession = Depends(get_db),
    admin: Principal = Depends(require_admin),
) -> dict:
    """Approve or reject a pending request (admin/owner only)."""
    leave, days_applied = await workflow.decide_leave(
        db, body.request_id, body.decision, decided_by=admin.user_id
    )
    return ok(
        {"id": leave.id, "status": leave.status, "days_applied": days_applied},
        message=f"Leave request {leave.status.lower()}",
    )


@router.get("/pending-count", response_model=ApiResponse[CountRead])
async def pending_leave_count(
    db: AsyncSession = Depends(get_db),
    _admin: Principal = Depends(require_admin),
) -> dict:
    return ok({"count": await workflow.pending_count(db)})
