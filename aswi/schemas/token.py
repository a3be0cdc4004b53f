"""Pydantic schemas for login and session tokens."""

from __future__ import annotations

from pydantic import BaseModel, model_validator

from aswi.schemas.common import IdStr


class LoginRequest(BaseModel):
    email: str | None = None
    nip: str | None = None
    password: str

    @model_validator(mode="after")
    def _identifier_present(self) -> "LoginRequest":
        if not (self.email or "").strip() and not (self.nip or "").strip():
            raise ValueError("email or nip is required")
        if not self.password:
            raise ValueError("password is required")
        return self


class LoginUser(BaseModel):
    id: IdStr
    name: str
    email: str | None
    nip: str | None
    role: str
    need_password_reset: bool


class LoginData(BaseModel):
    user: LoginUser
    token: str
    token_type: str = "bearer"
