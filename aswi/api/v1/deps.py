"""
FastAPI dependencies — access guard and database session.

Every protected endpoint goes through :func:`authorize`, parameterised by
one of the role gates below, instead of re-checking the token itself.
"""

from __future__ import annotations

from collections.abc import AsyncGenerator
from dataclasses import dataclass
from enum import Enum

from fastapi import Depends, Request
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from aswi.core.config import settings
from aswi.core.enums import ADMIN_ROLES, EmployeeStatus, Role
from aswi.core.exceptions import ForbiddenError, UnauthenticatedError
from aswi.core.security import decode_access_token
from aswi.db.session import async_session_factory
from aswi.models.employee import Employee

# auto_error=False so a missing header can fall back to the cookie
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/v1/auth/login", auto_error=False)


class Gate(str, Enum):
    AUTHENTICATED = "authenticated"
    ADMIN_OR_OWNER = "admin-or-owner"
    ACTIVE_EMPLOYEE = "active-employee-user"


@dataclass
class Principal:
    user_id: int
    role: str
    employee: Employee | None = None

    @property
    def is_admin(self) -> bool:
        return self.role in ADMIN_ROLES


# ── Database session ────────────────────────────────────────────────
async def get_db() -> AsyncGenerator[AsyncSession, None]:
    async with async_session_factory() as session:
        try:
            yield session
        finally:
            await session.close()


# ── Access guard ────────────────────────────────────────────────────
async def find_employee_for_user(db: AsyncSession, user_id: int) -> Employee | None:
    result = await db.execute(select(Employee).where(Employee.user_id == user_id))
    return result.scalar_one_or_none()


async def authorize(
    db: AsyncSession,
    token: str | None,
    gate: Gate = Gate.AUTHENTICATED,
) -> Principal:
    """Resolve the caller behind ``token`` and enforce ``gate``.

    Raises :class:`UnauthenticatedError` for a missing or invalid token and
    :class:`ForbiddenError` for a wrong role or an inactive employee.
    Read-only.
    """
    if not token:
        raise UnauthenticatedError("Unauthorized")

    subject = decode_access_token(token)
    if subject is None:
        raise UnauthenticatedError("Invalid or expired token")

    principal = Principal(user_id=subject.user_id, role=subject.role)

    if gate is Gate.ADMIN_OR_OWNER and not principal.is_admin:
        raise ForbiddenError("Forbidden - admin or owner only")

    if gate is Gate.ACTIVE_EMPLOYEE:
        if principal.role != Role.USER.value:
            raise ForbiddenError("Forbidden - employees only")
        employee = await find_employee_for_user(db, principal.user_id)
        if employee is None or employee.status != EmployeeStatus.AKTIF.value:
            raise ForbiddenError("Inactive employee")
        principal.employee = employee

    return principal


def extract_token(request: Request, bearer: str | None) -> str | None:
    """Bearer header first, then the HTTP-only session cookie."""
    if bearer:
        return bearer
    cookie = request.cookies.get(settings.AUTH_COOKIE_NAME)
    if cookie and cookie.startswith("Bearer "):
        return cookie.split(" ", 1)[1]
    return cookie or None


def require(gate: Gate):
    async def _dep(
        request: Request,
        bearer: str | None = Depends(oauth2_scheme),
        db: AsyncSession = Depends(get_db),
    ) -> Principal:
        return await authorize(db, extract_token(request, bearer), gate)

    return _dep


get_principal = require(Gate.AUTHENTICATED)
require_admin = require(Gate.ADMIN_OR_OWNER)
require_active_employee = require(Gate.ACTIVE_EMPLOYEE)
