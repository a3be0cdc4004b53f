"""
Auth endpoints — login (email or NIP), logout, current profile, forgot password.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, Request, Response
from slowapi import Limiter
from slowapi.util import get_remote_address
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from aswi.api.v1.deps import Principal, get_db, get_principal
from aswi.core.config import settings
from aswi.core.enums import EmployeeStatus
from aswi.core.exceptions import ForbiddenError, NotFoundError, UnauthenticatedError
from aswi.core.security import TokenSubject, create_access_token, verify_password
from aswi.models.employee import Employee
from aswi.models.user import User
from aswi.schemas.common import ApiResponse, MessageResponse, ok
from aswi.schemas.token import LoginData, LoginRequest
from aswi.schemas.user import ForgotPasswordRequest, MeRead

# Rate limiter — keyed by client IP
limiter = Limiter(key_func=get_remote_address, enabled=settings.RATE_LIMIT_ENABLED)

router = APIRouter(prefix="/auth", tags=["auth"])
logger = logging.getLogger(__name__)


def _type_brief(employee_type) -> dict | None:
    if employee_type is None:
        return None
    return {
        "id": employee_type.id,
        "name": employee_type.name,
        "check_in_time": employee_type.check_in_time.strftime("%H:%M"),
        "check_out_time": employee_type.check_out_time.strftime("%H:%M"),
    }


async def _find_login_user(db: AsyncSession, body: LoginRequest) -> User | None:
    query = select(User).options(selectinload(User.employee))
    if body.email and body.email.strip():
        query = query.where(User.email == body.email.strip().lower())
    else:
        query = query.join(Employee, Employee.user_id == User.id).where(
            Employee.nip == body.nip.strip()
        )
    result = await db.execute(query)
    return result.scalar_one_or_none()


@router.post("/login", response_model=ApiResponse[LoginData])
@limiter.limit("5/minute")
async def login(
    request: Request,
    response: Response,
    body: LoginRequest,
    db: AsyncSession = Depends(get_db),
) -> dict:
    """Authenticate with email or NIP. Sets the HttpOnly session cookie."""
    user = await _find_login_user(db, body)
    if user is None or not verify_password(body.password, user.hashed_password):
        raise UnauthenticatedError("Invalid credentials")

    employee = user.employee
    if employee is not None and employee.status != EmployeeStatus.AKTIF.value:
        raise ForbiddenError("Inactive employee")

    token = create_access_token(TokenSubject(user_id=user.id, role=user.role))

    response.set_cookie(
        key=settings.AUTH_COOKIE_NAME,
        value=token,
        httponly=True,
        secure=settings.COOKIE_SECURE,
        samesite="lax",
        max_age=settings.ACCESS_TOKEN_EXPIRE_DAYS * 24 * 60 * 60,
        path="/",
    )
    logger.info("Login: user %d (%s)", user.id, user.role)

    return ok(
        {
            "user": {
                "id": user.id,
                "name": user.name,
                "email": user.email,
                "nip": employee.nip if employee else None,
                "role": user.role,
                "need_password_reset": user.need_password_reset,
            },
            "token": token,
        },
        message="Login successful",
    )


@router.post("/logout", response_model=MessageResponse)
async def logout(response: Response) -> MessageResponse:
    """Clear the session cookie. The token itself stays valid until expiry."""
    response.delete_cookie(settings.AUTH_COOKIE_NAME, path="/")
    return MessageResponse(message="Logged out")


@router.get("/me", response_model=ApiResponse[MeRead])
async def read_current_user(
    principal: Principal = Depends(get_principal),
    db: AsyncSession = Depends(get_db),
) -> dict:
    """Return the current user and, for employees, their profile."""
    result = await db.execute(
        select(User)
        .options(selectinload(User.employee))
        .where(User.id == principal.user_id)
    )
    user = result.scalar_one_or_none()
    if user is None:
        raise NotFoundError("User not found")

    employee = user.employee
    return ok(
        {
            "id": user.id,
            "name": user.name,
            "email": user.email,
            "role": user.role,
            "need_password_reset": user.need_password_reset,
            "created_at": user.created_at,
            "employee": None
            if employee is None
            else {
                "id": employee.id,
                "nip": employee.nip,
                "name": employee.name,
                "phone": employee.phone,
                "address": employee.address,
                "status": employee.status,
                "employee_type": _type_brief(employee.employee_type),
            },
        }
    )


@router.post("/forgot-password", response_model=MessageResponse)
@limiter.limit("3/minute")
async def forgot_password(
    request: Request,
    body: ForgotPasswordRequest,
    db: AsyncSession = Depends(get_db),
) -> MessageResponse:
    """Flag the account for an admin password reset.

    The reply is the same whether or not the email exists.
    """
    result = await db.execute(select(User).where(User.email == body.email))
    user = result.scalar_one_or_none()
    if user is not None:
        user.need_password_reset = True
        user.reset_requested_at = datetime.now(timezone.utc)
        await db.commit()
        logger.info("Password reset requested for user %d", user.id)

    return MessageResponse(
        message="If the account exists, an administrator will reset the password"
    )
