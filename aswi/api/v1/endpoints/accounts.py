"""
Account management — password change / reset and reset-request queue.

- change-password and reset-request act on the caller's own account.
- Listing, counting and resetting other accounts is admin/owner only.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Depends
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from aswi.api.v1.deps import Principal, get_db, get_principal, require_admin
from aswi.core.exceptions import BadRequestError, NotFoundError
from aswi.core.security import get_password_hash, verify_password
from aswi.models.user import User
from aswi.schemas.common import ApiResponse, CountRead, MessageResponse, ok
from aswi.schemas.user import (AccountRead, ChangePasswordRequest,
                               ResetPasswordRequest)

router = APIRouter(prefix="/accounts", tags=["accounts"])
logger = logging.getLogger(__name__)


def _account(user: User) -> dict:
    employee = user.employee
    return {
        "id": user.id,
        "name": user.name,
        "email": user.email,
        "role": user.role,
        "need_password_reset": user.need_password_reset,
        "reset_requested_at": user.reset_requested_at,
        "created_at": user.created_at,
        "employee": None
        if employee is None
        else {
            "id": employee.id,
            "nip": employee.nip,
            "name": employee.name,
            "status": employee.status,
            "employee_type": employee.employee_type.name
            if employee.employee_type
            else None,
        },
    }


async def _get_user(db: AsyncSession, user_id: int) -> User:
    user = await db.get(User, user_id)
    if user is None:
        raise NotFoundError("User not found")
    return user


@router.get("", response_model=ApiResponse[list[AccountRead]])
async def list_accounts(
    db: AsyncSession = Depends(get_db),
    _admin: Principal = Depends(require_admin),
) -> dict:
    result = await db.execute(
        select(User).options(selectinload(User.employee)).order_by(User.name)
    )
    return ok([_account(u) for u in result.scalars().all()])


@router.post("/change-password", response_model=MessageResponse)
async def change_password(
    body: ChangePasswordRequest,
    db: AsyncSession = Depends(get_db),
    principal: Principal = Depends(get_principal),
) -> MessageResponse:
    """Change the caller's own password after verifying the current one."""
    user = await _get_user(db, principal.user_id)
    if not verify_password(body.current_password, user.hashed_password):
        raise BadRequestError("Current password is incorrect")

    user.hashed_password = get_password_hash(body.new_password)
    user.need_password_reset = False
    user.reset_requested_at = None
    await db.commit()
    logger.info("Password changed by user %d", user.id)
    return MessageResponse(message="Password changed")


@router.post("/reset-password", response_model=MessageResponse)
async def reset_password(
    body: ResetPasswordRequest,
    db: AsyncSession = Depends(get_db),
    admin: Principal = Depends(require_admin),
) -> MessageResponse:
    """Set a new password and clear the reset flags in one commit."""
    user = await _get_user(db, body.user_id)
    try:
        user.hashed_password = get_password_hash(body.new_password)
        user.need_password_reset = False
        user.reset_requested_at = None
        await db.commit()
    except Exception:
        await db.rollback()
        raise
    logger.info("Password of user %d reset by user %d", user.id, admin.user_id)
    return MessageResponse(message="Password reset")


@router.post("/reset-request", response_model=MessageResponse)
async def request_reset(
    db: AsyncSession = Depends(get_db),
    principal: Principal = Depends(get_principal),
) -> MessageResponse:
    user = await _get_user(db, principal.user_id)
    user.need_password_reset = True
    user.reset_requested_at = datetime.now(timezone.utc)
    await db.commit()
    logger.info("Password reset requested by user %d", user.id)
    return MessageResponse(message="Reset request sent to administrator")


@router.get("/reset-requests", response_model=ApiResponse[list[AccountRead]])
async def list_reset_requests(
    db: AsyncSession = Depends(get_db),
    _admin: Principal = Depends(require_admin),
) -> dict:
    result = await db.execute(
        select(User)
        .options(selectinload(User.employee))
        .where(User.need_password_reset.is_(True))
        .order_by(User.reset_requested_at.desc())
    )
    return ok([_account(u) for u in result.scalars().all()])


@router.get("/reset-requests/count", response_model=ApiResponse[CountRead])
async def count_reset_requests(
    db: AsyncSession = Depends(get_db),
    _admin: Principal = Depends(require_admin),
) -> dict:
    result = await db.execute(
        select(func.count(User.id)).where(User.need_password_reset.is_(True))
    )
    return ok({"count": result.scalar_one()})
