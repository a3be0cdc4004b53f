"""String enums shared by models, schemas and services."""

from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    USER = "USER"
    ADMIN = "ADMIN"
    OWNER = "OWNER"


ADMIN_ROLES = frozenset({Role.ADMIN.value, Role.OWNER.value})


class EmployeeStatus(str, Enum):
    AKTIF = "AKTIF"
    NONAKTIF = "NONAKTIF"


class AttendanceStatus(str, Enum):
    HADIR = "HADIR"
    TERLAMBAT = "TERLAMBAT"
    IZIN = "IZIN"
    CUTI = "CUTI"
    SAKIT = "SAKIT"
    ALPHA = "ALPHA"


PRESENT_STATUSES = (AttendanceStatus.HADIR.value, AttendanceStatus.TERLAMBAT.value)
LEAVE_STATUSES = (
    AttendanceStatus.IZIN.value,
    AttendanceStatus.CUTI.value,
    AttendanceStatus.SAKIT.value,
)


class LeaveType(str, Enum):
    IZIN = "IZIN"
    CUTI = "CUTI"
    SAKIT = "SAKIT"


class LeaveStatus(str, Enum):
    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"


class ClaimStatus(str, Enum):
    BISA_CLAIM = "BISA_CLAIM"
    TIDAK_BISA = "TIDAK_BISA"
