"""
Shared test fixtures for the attendance, leave & inventory API.

Each test gets its own in-memory aiosqlite database; the app's ``get_db``
dependency is overridden to use it. Auth is real: tests mint tokens with
``create_access_token`` instead of overriding the guard.
"""

import os
import sys
from datetime import time
from typing import AsyncGenerator

import pytest

# Ensure project root is importable
ROOT_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if ROOT_DIR not in sys.path:
    sys.path.insert(0, ROOT_DIR)

# Override environment BEFORE importing application modules
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["CORS_ORIGINS"] = "http://testserver,http://localhost:3000"
os.environ["SECRET_KEY"] = "test-secret-key-not-for-production"
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["SKIP_LOCATION_CHECK"] = "true"

from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from aswi.api.v1.deps import get_db
from aswi.core.enums import Role
from aswi.core.security import TokenSubject, create_access_token, get_password_hash
from aswi.db.base import Base
from aswi.main import app
from aswi.models.employee import Employee, EmployeeType
from aswi.models.inventory import Company
from aswi.models.user import User


@pytest.fixture
async def engine():
    test_engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield test_engine
    await test_engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture(autouse=True)
def override_get_db(session_factory):
    async def _override_get_db() -> AsyncGenerator[AsyncSession, None]:
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = _override_get_db
    yield
    app.dependency_overrides.clear()


@pytest.fixture
async def async_client() -> AsyncGenerator[AsyncClient, None]:
    """Return a httpx AsyncClient wired to the app."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest.fixture
async def db_session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    """Return a raw database session for direct queries in tests."""
    async with session_factory() as session:
        yield session


# ── Factories ───────────────────────────────────────────────────────
def _auth_headers(user: User) -> dict[str, str]:
    token = create_access_token(TokenSubject(user_id=user.id, role=user.role))
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def auth_headers():
    """Bearer header for a user: ``auth_headers(user)``."""
    return _auth_headers


@pytest.fixture
def make_user(db_session: AsyncSession):
    async def _make(
        email: str = "admin@aswi.test",
        role: str = Role.ADMIN.value,
        password: str = "secret123",
        name: str = "Admin",
    ) -> User:
        user = User(
            name=name,
            email=email,
            hashed_password=get_password_hash(password),
            role=role,
        )
        db_session.add(user)
        await db_session.commit()
        await db_session.refresh(user)
        return user

    return _make


@pytest.fixture
def make_employee_type(db_session: AsyncSession):
    async def _make(
        name: str = "Kantor",
        check_in: time = time(8, 0),
        check_out: time = time(17, 0),
        tolerance: int = 15,
    ) -> EmployeeType:
        employee_type = EmployeeType(
            name=name,
            check_in_time=check_in,
            check_out_time=check_out,
            late_tolerance_minutes=tolerance,
        )
        db_session.add(employee_type)
        await db_session.commit()
        await db_session.refresh(employee_type)
        return employee_type

    return _make


@pytest.fixture
def make_employee(db_session: AsyncSession, make_user, make_employee_type):
    async def _make(
        nip: str = "EMP001",
        name: str = "Budi",
        status: str = "AKTIF",
        password: str = "secret123",
        employee_type: EmployeeType | None = None,
    ) -> tuple[User, Employee]:
        if employee_type is None:
            employee_type = await make_employee_type(name=f"Type-{nip}")
        user = await make_user(
            email=f"{nip.lower()}@aswi.test",
            role=Role.USER.value,
            password=password,
            name=name,
        )
        employee = Employee(
            nip=nip,
            name=name,
            status=status,
            employee_type_id=employee_type.id,
            user_id=user.id,
        )
        db_session.add(employee)
        await db_session.commit()
        await db_session.refresh(employee)
        return user, employee

    return _make


@pytest.fixture
def make_company(db_session: AsyncSession):
    async def _make(name: str = "PT Maju") -> Company:
        company = Company(name=name)
        db_session.add(company)
        await db_session.commit()
        await db_session.refresh(company)
        return company

    return _make


@pytest.fixture
async def admin(make_user) -> User:
    return await make_user()


@pytest.fixture
def admin_headers(admin: User) -> dict[str, str]:
    return _auth_headers(admin)
