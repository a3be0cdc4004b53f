"""Pydantic schemas for leave (izin / cuti / sakit) requests."""

from __future__ import annotations

from datetime import date, datetime

from pydantic import BaseModel, field_validator

from aswi.core.enums import LeaveStatus, LeaveType
from aswi.schemas.common import DbId, IdStr

VALID_LEAVE_TYPES = [t.value for t in LeaveType]
VALID_DECISIONS = [LeaveStatus.APPROVED.value, LeaveStatus.REJECTED.value]


class LeaveRequestCreate(BaseModel):
    leave_type: str
    start_date: date
    end_date: date
    reason: str

    @field_validator("leave_type")
    @classmethod
    def _type(cls, v: str) -> str:
        v = v.strip().upper()
        if v not in VALID_LEAVE_TYPES:
            raise ValueError(f"Leave type must be one of: {', '.join(VALID_LEAVE_TYPES)}")
        return v

    @field_validator("reason")
    @classmethod
    def _reason(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Reason must not be empty")
        return v


class LeaveDecisionRequest(BaseModel):
    request_id: DbId
    decision: str

    @field_validator("decision")
    @classmethod
    def _decision(cls, v: str) -> str:
        v = v.strip().upper()
        if v not in VALID_DECISIONS:
            raise ValueError(f"Decision must be one of: {', '.join(VALID_DECISIONS)}")
        return v


class LeaveEmployee(BaseModel):
    id: IdStr
    nip: str
    name: str

    model_config = {"from_attributes": True}


class LeaveRequestRead(BaseModel):
    id: IdStr
    employee_id: IdStr
    employee: LeaveEmployee | None = None
    leave_type: str
    start_date: date
    end_date: date
    reason: str
    status: str
    decided_at: datetime | None = None
    created_at: datetime | None

    model_config = {"from_attributes": True}


class LeaveDecisionRead(BaseModel):
    id: IdStr
    status: str
    days_applied: int
