"""
Employee types & employee administration (admin/owner only).

Employees are never hard-deleted; leaving the company is a status change
to NONAKTIF.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Path, Query
from sqlalchemy import or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from aswi.api.v1.deps import Principal, get_db, require_admin
from aswi.core.enums import Role
from aswi.core.exceptions import BadRequestError, NotFoundError
from aswi.core.security import get_password_hash
from aswi.models.employee import Employee, EmployeeType
from aswi.models.user import User
from aswi.schemas.attendance import (EmployeeCreate, EmployeeRead,
                                     EmployeeTypeCreate, EmployeeTypeRead,
                                     EmployeeTypeUpdate, EmployeeUpdate)
from aswi.schemas.common import MAX_DB_ID, ApiResponse, ok

router = APIRouter(tags=["employees"])
logger = logging.getLogger(__name__)


# ── Employee types ──────────────────────────────────────────────────
@router.get("/employee-types", response_model=ApiResponse[list[EmployeeTypeRead]])
async def list_employee_types(
    db: AsyncSession = Depends(get_db),
    _admin: Principal = Depends(require_admin),
) -> dict:
    result = await db.execute(select(EmployeeType).order_by(EmployeeType.name))
    return ok(list(result.scalars().all()))


@router.post(
    "/employee-types",
    response_model=ApiResponse[EmployeeTypeRead],
    status_code=201,
)
async def create_employee_type(
    body: EmployeeTypeCreate,
    db: AsyncSession = Depends(get_db),
    _admin: Principal = Depends(require_admin),
) -> dict:
    existing = await db.execute(select(EmployeeType).where(EmployeeType.name == body.name))
    if existing.scalar_one_or_none():
        raise BadRequestError("Employee type already exists")

    employee_type = EmployeeType(**body.model_dump())
    db.add(employee_type)
    await db.commit()
    await db.refresh(employee_type)
    logger.info("Employee type created: %s", employee_type.name)
    return ok(employee_type, message="Employee type created")


@router.put("/employee-types/{type_id}", response_model=ApiResponse[EmployeeTypeRead])
async def update_employee_type(
    body: EmployeeTypeUpdate,
    type_id: int = Path(ge=1, le=MAX_DB_ID),
    db: AsyncSession = Depends(get_db),
    _admin: Principal = Depends(require_admin),
) -> dict:
    employee_type = await db.get(EmployeeType, type_id)
    if employee_type is None:
        raise NotFoundError("Employee type not found")

    for field, value in body.model_dump(exclude_unset=True).items():
        if value is not None:
            setattr(employee_type, field, value)
    try:
        await db.commit()
    except IntegrityError:
        await db.rollback()
        raise BadRequestError("Employee type already exists")
    await db.refresh(employee_type)
    return ok(employee_type, message="Employee type updated")


# ── Employees ───────────────────────────────────────────────────────
def _employee(employee: Employee, email: str | None) -> dict:
    return {
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
    }


async def _load_employee(db: AsyncSession, employee_id: int) -> tuple[Employee, str | None]:
    result = await db.execute(
        select(Employee, User.email)
        .join(User, User.id == Employee.user_id)
        .where(Employee.id == employee_id)
        .execution_options(populate_existing=True)
    )
    row = result.first()
    if row is None:
        raise NotFoundError("Employee not found")
    return row[0], row[1]


@router.get("/employees", response_model=ApiResponse[list[EmployeeRead]])
async def list_employees(
    status: str | None = Query(None),
    employee_type_id: int | None = Query(None, ge=1, le=MAX_DB_ID),
    search: str | None = Query(None, max_length=100),
    db: AsyncSession = Depends(get_db),
    _admin: Principal = Depends(require_admin),
) -> dict:
    query = select(Employee, User.email).join(User, User.id == Employee.user_id)
    if status:
        query = query.where(Employee.status == status.upper())
    if employee_type_id:
        query = query.where(Employee.employee_type_id == employee_type_id)
    if search and search.strip():
        pattern = f"%{search.strip()}%"
        query = query.where(
            or_(
                Employee.name.ilike(pattern),
                Employee.nip.ilike(pattern),
                User.email.ilike(pattern),
            )
        )
    result = await db.execute(query.order_by(Employee.name))
    return ok([_employee(emp, email) for emp, email in result.all()])


@router.post("/employees", response_model=ApiResponse[EmployeeRead], status_code=201)
async def create_employee(
    body: EmployeeCreate,
    db: AsyncSession = Depends(get_db),
    _admin: Principal = Depends(require_admin),
) -> dict:
    """Create the USER account and the employee profile together."""
    if await db.get(EmployeeType, body.employee_type_id) is None:
        raise NotFoundError("Employee type not found")

    dup_nip = await db.execute(select(Employee.id).where(Employee.nip == body.nip))
    if dup_nip.scalar_one_or_none() is not None:
        raise BadRequestError(f"NIP '{body.nip}' already exists")
    dup_email = await db.execute(select(User.id).where(User.email == body.email))
    if dup_email.scalar_one_or_none() is not None:
        raise BadRequestError(f"Email '{body.email}' already registered")

    user = User(
        name=body.name,
        email=body.email,
        hashed_password=get_password_hash(body.password),
        role=Role.USER.value,
    )
    db.add(user)
    try:
        await db.flush()
        employee = Employee(
            nip=body.nip,
            name=body.name,
            phone=body.phone,
            address=body.address,
            status=body.status,
            employee_type_id=body.employee_type_id,
            user_id=user.id,
        )
        db.add(employee)
        await db.commit()
    except IntegrityError:
        await db.rollback()
        raise BadRequestError("NIP or email already exists")

    employee, email = await _load_employee(db, employee.id)
    logger.info("Employee onboarded: %s (%s)", employee.nip, employee.name)
    return ok(_employee(employee, email), message="Employee created")


@router.get("/employees/{employee_id}", response_model=ApiResponse[EmployeeRead])
async def get_employee(
    employee_id: int = Path(ge=1, le=MAX_DB_ID),
    db: AsyncSession = Depends(get_db),
    _admin: Principal = Depends(require_admin),
) -> dict:
    employee, email = await _load_employee(db, employee_id)
    return ok(_employee(employee, email))


@router.put("/employees/{employee_id}", response_model=ApiResponse[EmployeeRead])
async def update_employee(
    body: EmployeeUpdate,
    employee_id: int = Path(ge=1, le=MAX_DB_ID),
    db: AsyncSession = Depends(get_db),
    _admin: Principal = Depends(require_admin),
) -> dict:
    employee, email = await _load_employee(db, employee_id)

    updates = body.model_dump(exclude_unset=True)
    if updates.get("employee_type_id") is not None:
        if await db.get(EmployeeType, updates["employee_type_id"]) is None:
            raise NotFoundError("Employee type not found")

    for field, value in updates.items():
        if value is not None:
            setattr(employee, field, value)
    if "name" in updates and updates["name"]:
        user = await db.get(User, employee.user_id)
        user.name = updates["name"]
    await db.commit()

    employee, email = await _load_employee(db, employee_id)
    logger.info("Employee %d updated: %s", employee_id, sorted(updates))
    return ok(_employee(employee, email), message="Employee updated")
