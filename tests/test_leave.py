"""Leave workflow: submission rules, decisions and attendance fan-out."""

from datetime import datetime, timedelta, timezone

import pytest
from httpx import AsyncClient
from sqlalchemy import select

from aswi.core import dates
from aswi.core.exceptions import BadRequestError, NotFoundError
from aswi.models.employee import Attendance
from aswi.models.leave import LeaveRequest
from aswi.schemas.leave import LeaveRequestCreate
from aswi.services import leave as workflow


def _payload(start_offset: int, end_offset: int, leave_type: str = "CUTI") -> LeaveRequestCreate:
    today = dates.today()
    return LeaveRequestCreate(
        leave_type=leave_type,
        start_date=today + timedelta(days=start_offset),
        end_date=today + timedelta(days=end_offset),
        reason="Acara keluarga",
    )


async def _records(db, employee_id: int) -> list[Attendance]:
    result = await db.execute(
        select(Attendance)
        .where(Attendance.employee_id == employee_id)
        .order_by(Attendance.date)
        .execution_options(populate_existing=True)
    )
    return list(result.scalars().all())


# ── Submission ──────────────────────────────────────────────────────
@pytest.mark.asyncio
async def test_submit_creates_pending_request(db_session, make_employee):
    _, employee = await make_employee()
    leave = await workflow.submit_leave(db_session, employee, _payload(1, 2))
    assert leave.status == "PENDING"
    assert leave.employee_id == employee.id


@pytest.mark.asyncio
async def test_submit_starting_today_is_allowed(db_session, make_employee):
    _, employee = await make_employee()
    leave = await workflow.submit_leave(db_session, employee, _payload(0, 0, "SAKIT"))
    assert leave.start_date == dates.today()


@pytest.mark.asyncio
async def test_submit_in_the_past_rejected(db_session, make_employee):
    _, employee = await make_employee()
    with pytest.raises(BadRequestError, match="past"):
        await workflow.submit_leave(db_session, employee, _payload(-1, 1))


@pytest.mark.asyncio
async def test_submit_start_after_end_rejected(db_session, make_employee):
    _, employee = await make_employee()
    with pytest.raises(BadRequestError, match="after end date"):
        await workflow.submit_leave(db_session, employee, _payload(5, 3))


def test_unknown_leave_type_rejected():
    with pytest.raises(ValueError):
        _payload(1, 1, leave_type="LIBUR")


# ── Decisions ───────────────────────────────────────────────────────
@pytest.mark.asyncio
async def test_approve_fans_out_over_every_day(db_session, make_employee, admin):
    _, employee = await make_employee()
    leave = await workflow.submit_leave(db_session, employee, _payload(3, 5, "IZIN"))

    decided, days_applied = await workflow.decide_leave(
        db_session, leave.id, "APPROVED", decided_by=admin.id
    )
    assert decided.status == "APPROVED"
    assert decided.decided_by == admin.id
    assert days_applied == 3

    records = await _records(db_session, employee.id)
    assert [r.date for r in records] == [
        leave.start_date + timedelta(days=i) for i in range(3)
    ]
    for record in records:
        assert record.status == "IZIN"
        assert record.check_in_at is None
        assert record.check_out_at is None
        assert record.latitude is None


@pytest.mark.asyncio
async def test_approve_keeps_existing_check_in(db_session, make_employee):
    _, employee = await make_employee()
    leave = await workflow.submit_leave(db_session, employee, _payload(3, 5, "SAKIT"))
    day2 = leave.start_date + timedelta(days=1)
    checked_in = datetime(2030, 1, 1, 1, 0, tzinfo=timezone.utc)
    db_session.add(
        Attendance(employee_id=employee.id, date=day2, status="HADIR", check_in_at=checked_in)
    )
    await db_session.commit()

    _, days_applied = await workflow.decide_leave(db_session, leave.id, "APPROVED")
    assert days_applied == 2

    by_date = {r.date: r for r in await _records(db_session, employee.id)}
    assert len(by_date) == 3
    assert by_date[day2].status == "HADIR"
    assert by_date[day2].check_in_at is not None
    assert by_date[leave.start_date].status == "SAKIT"
    assert by_date[leave.end_date].status == "SAKIT"


@pytest.mark.asyncio
async def test_approve_overwrites_record_without_check_in(db_session, make_employee):
    _, employee = await make_employee()
    leave = await workflow.submit_leave(db_session, employee, _payload(2, 2, "CUTI"))
    db_session.add(Attendance(employee_id=employee.id, date=leave.start_date, status="ALPHA"))
    await db_session.commit()

    await workflow.decide_leave(db_session, leave.id, "APPROVED")

    records = await _records(db_session, employee.id)
    assert len(records) == 1
    assert records[0].status == "CUTI"


@pytest.mark.asyncio
async def test_reject_changes_only_status(db_session, make_employee):
    _, employee = await make_employee()
    leave = await workflow.submit_leave(db_session, employee, _payload(1, 3))

    decided, days_applied = await workflow.decide_leave(db_session, leave.id, "REJECTED")
    assert decided.status == "REJECTED"
    assert days_applied == 0
    assert await _records(db_session, employee.id) == []


@pytest.mark.asyncio
async def test_decided_request_is_final(db_session, make_employee):
    _, employee = await make_employee()
    leave = await workflow.submit_leave(db_session, employee, _payload(1, 1))
    await workflow.decide_leave(db_session, leave.id, "REJECTED")

    with pytest.raises(BadRequestError, match="already REJECTED"):
        await workflow.decide_leave(db_session, leave.id, "APPROVED")
    assert await _records(db_session, employee.id) == []


@pytest.mark.asyncio
async def test_decide_unknown_request(db_session):
    with pytest.raises(NotFoundError):
        await workflow.decide_leave(db_session, 999, "APPROVED")


@pytest.mark.asyncio
async def test_failed_fan_out_leaves_nothing_behind(db_session, make_employee, monkeypatch):
    _, employee = await make_employee()
    employee_id = employee.id
    leave = await workflow.submit_leave(db_session, employee, _payload(1, 3))
    leave_id = leave.id
    real_iter_days = dates.iter_days

    def _failing_iter_days(start, end):
        days = real_iter_days(start, end)
        yield next(days)
        raise RuntimeError("store went away")

    monkeypatch.setattr(dates, "iter_days", _failing_iter_days)

    with pytest.raises(RuntimeError):
        await workflow.decide_leave(db_session, leave_id, "APPROVED")

    status = await db_session.execute(
        select(LeaveRequest.status).where(LeaveRequest.id == leave_id)
    )
    assert status.scalar_one() == "PENDING"
    assert await _records(db_session, employee_id) == []


# ── HTTP ────────────────────────────────────────────────────────────
@pytest.mark.asyncio
async def test_leave_flow_over_http(
    async_client: AsyncClient, make_employee, admin_headers, auth_headers
):
    user, _ = await make_employee()
    other_user, _ = await make_employee(nip="EMP002", name="Sari")
    headers = auth_headers(user)
    start = dates.today() + timedelta(days=7)

    resp = await async_client.post(
        "/api/v1/leave-requests",
        json={
            "leave_type": "cuti",
            "start_date": start.isoformat(),
            "end_date": (start + timedelta(days=1)).isoformat(),
            "reason": "Liburan",
        },
        headers=headers,
    )
    assert resp.status_code == 201
    created = resp.json()["data"]
    assert created["leave_type"] == "CUTI"
    assert created["status"] == "PENDING"
    assert created["employee"]["nip"] == "EMP001"

    # other employees cannot see it
    other = await async_client.get("/api/v1/leave-requests", headers=auth_headers(other_user))
    assert other.json()["data"] == []

    count = await async_client.get("/api/v1/leave-requests/pending-count", headers=admin_headers)
    assert count.json()["data"]["count"] == 1

    pending = await async_client.get(
        "/api/v1/leave-requests", params={"status": "pending"}, headers=admin_headers
    )
    assert [r["id"] for r in pending.json()["data"]] == [created["id"]]

    # employees cannot decide
    forbidden = await async_client.post(
        "/api/v1/leave-requests/approve",
        json={"request_id": created["id"], "decision": "APPROVED"},
        headers=headers,
    )
    assert forbidden.status_code == 403

    decided = await async_client.post(
        "/api/v1/leave-requests/approve",
        json={"request_id": created["id"], "decision": "APPROVED"},
        headers=admin_headers,
    )
    assert decided.status_code == 200
    assert decided.json()["data"] == {
        "id": created["id"],
        "status": "APPROVED",
        "days_applied": 2,
    }

    again = await async_client.post(
        "/api/v1/leave-requests/approve",
        json={"request_id": created["id"], "decision": "REJECTED"},
        headers=admin_headers,
    )
    assert again.status_code == 400


@pytest.mark.asyncio
async def test_submit_in_past_over_http(async_client: AsyncClient, make_employee, auth_headers):
    user, _ = await make_employee()
    yesterday = dates.today() - timedelta(days=1)
    resp = await async_client.post(
        "/api/v1/leave-requests",
        json={
            "leave_type": "IZIN",
            "start_date": yesterday.isoformat(),
            "end_date": yesterday.isoformat(),
            "reason": "Terlambat mengajukan",
        },
        headers=auth_headers(user),
    )
    assert resp.status_code == 400
    assert resp.json() == {"success": False, "error": "Start date cannot be in the past"}


@pytest.mark.asyncio
async def test_invalid_decision_rejected(async_client: AsyncClient, admin_headers):
    resp = await async_client.post(
        "/api/v1/leave-requests/approve",
        json={"request_id": 1, "decision": "MAYBE"},
        headers=admin_headers,
    )
    assert resp.status_code == 400
