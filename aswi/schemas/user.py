"""Pydantic schemas for accounts and password management."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, field_validator

from aswi.core.config import settings
from aswi.schemas.common import DbId, IdStr


def check_password_length(v: str) -> str:
    if len(v) < settings.MIN_PASSWORD_LENGTH:
        raise ValueError(
            f"Password must be at least {settings.MIN_PASSWORD_LENGTH} characters"
        )
    return v


class ChangePasswordRequest(BaseModel):
    current_password: str
    new_password: str

    @field_validator("new_password")
    @classmethod
    def _new(cls, v: str) -> str:
        return check_password_length(v)


class ResetPasswordRequest(BaseModel):
    user_id: DbId
    new_password: str

    @field_validator("new_password")
    @classmethod
    def _new(cls, v: str) -> str:
        return check_password_length(v)


class ForgotPasswordRequest(BaseModel):
    email: str

    @field_validator("email")
    @classmethod
    def _normalise_email(cls, v: str) -> str:
        v = v.strip().lower()
        if not v:
            raise ValueError("Email is required")
        return v


class AccountEmployee(BaseModel):
    id: IdStr
    nip: str
    name: str
    status: str
    employee_type: str | None = None


class AccountRead(BaseModel):
    id: IdStr
    name: str
    email: str | None
    role: str
    need_password_reset: bool
    reset_requested_at: datetime | None
    created_at: datetime | None
    employee: AccountEmployee | None = None


class EmployeeTypeBrief(BaseModel):
    id: IdStr
    name: str
    check_in_time: str
    check_out_time: str


class MeEmployee(BaseModel):
    id: IdStr
    nip: str
    name: str
    phone: str | None
    address: str | None
    status: str
    employee_type: EmployeeTypeBrief | None


class MeRead(BaseModel):
    id: IdStr
    name: str
    email: str | None
    role: str
    need_password_reset: bool
    created_at: datetime | None
    employee: MeEmployee | None
