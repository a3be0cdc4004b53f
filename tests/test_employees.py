"""Tests for employee type and employee administration endpoints."""

import pytest
from httpx import AsyncClient

TYPE_BODY = {
    "name": "Kandang",
    "check_in_time": "07:00",
    "check_out_time": "16:00",
}


async def _create_type(client: AsyncClient, headers, **overrides) -> dict:
    resp = await client.post(
        "/api/v1/employee-types", json={**TYPE_BODY, **overrides}, headers=headers
    )
    assert resp.status_code == 201
    return resp.json()["data"]


def _employee_body(type_id, **overrides) -> dict:
    body = {
        "nip": "EMP100",
        "name": "Agus Setiawan",
        "email": "agus@aswi.test",
        "password": "agus1234",
        "employee_type_id": type_id,
        "phone": "0812000000",
    }
    body.update(overrides)
    return body


@pytest.mark.asyncio
async def test_create_employee_type(async_client: AsyncClient, admin_headers):
    created = await _create_type(async_client, admin_headers)
    assert created["name"] == "Kandang"
    assert created["check_in_time"] == "07:00:00"
    assert created["late_tolerance_minutes"] == 15

    dup = await async_client.post(
        "/api/v1/employee-types", json=TYPE_BODY, headers=admin_headers
    )
    assert dup.status_code == 400


@pytest.mark.asyncio
async def test_update_employee_type(async_client: AsyncClient, admin_headers):
    created = await _create_type(async_client, admin_headers)
    resp = await async_client.put(
        f"/api/v1/employee-types/{created['id']}",
        json={"late_tolerance_minutes": 5},
        headers=admin_headers,
    )
    assert resp.status_code == 200
    assert resp.json()["data"]["late_tolerance_minutes"] == 5
    assert resp.json()["data"]["name"] == "Kandang"

    missing = await async_client.put(
        "/api/v1/employee-types/9999", json={"name": "X"}, headers=admin_headers
    )
    assert missing.status_code == 404


@pytest.mark.asyncio
async def test_create_employee_with_account(async_client: AsyncClient, admin_headers):
    employee_type = await _create_type(async_client, admin_headers)
    resp = await async_client.post(
        "/api/v1/employees", json=_employee_body(employee_type["id"]), headers=admin_headers
    )
    assert resp.status_code == 201
    data = resp.json()["data"]
    assert data["nip"] == "EMP100"
    assert data["email"] == "agus@aswi.test"
    assert data["status"] == "AKTIF"
    assert data["employee_type"]["name"] == "Kandang"
    assert isinstance(data["user_id"], str)

    # the new account can log in with its NIP
    login = await async_client.post(
        "/api/v1/auth/login", json={"nip": "EMP100", "password": "agus1234"}
    )
    assert login.status_code == 200
    assert login.json()["data"]["user"]["role"] == "USER"


@pytest.mark.asyncio
async def test_duplicate_nip_or_email_rejected(async_client: AsyncClient, admin_headers):
    employee_type = await _create_type(async_client, admin_headers)
    first = await async_client.post(
        "/api/v1/employees", json=_employee_body(employee_type["id"]), headers=admin_headers
    )
    assert first.status_code == 201

    same_nip = await async_client.post(
        "/api/v1/employees",
        json=_employee_body(employee_type["id"], email="other@aswi.test"),
        headers=admin_headers,
    )
    assert same_nip.status_code == 400
    assert "NIP" in same_nip.json()["error"]

    same_email = await async_client.post(
        "/api/v1/employees",
        json=_employee_body(employee_type["id"], nip="EMP101"),
        headers=admin_headers,
    )
    assert same_email.status_code == 400
    assert "Email" in same_email.json()["error"]


@pytest.mark.asyncio
async def test_create_employee_unknown_type(async_client: AsyncClient, admin_headers):
    resp = await async_client.post(
        "/api/v1/employees", json=_employee_body(9999), headers=admin_headers
    )
    assert resp.status_code == 404


@pytest.mark.asyncio
async def test_create_employee_short_password(async_client: AsyncClient, admin_headers):
    employee_type = await _create_type(async_client, admin_headers)
    resp = await async_client.post(
        "/api/v1/employees",
        json=_employee_body(employee_type["id"], password="123"),
        headers=admin_headers,
    )
    assert resp.status_code == 400
    assert "password" in resp.json()["error"]


@pytest.mark.asyncio
async def test_list_and_filter_employees(async_client: AsyncClient, make_employee, admin_headers):
    await make_employee(nip="EMP001", name="Budi")
    await make_employee(nip="EMP002", name="Sari", status="NONAKTIF")

    everyone = await async_client.get("/api/v1/employees", headers=admin_headers)
    assert len(everyone.json()["data"]) == 2

    active = await async_client.get(
        "/api/v1/employees", params={"status": "aktif"}, headers=admin_headers
    )
    assert [e["nip"] for e in active.json()["data"]] == ["EMP001"]

    search = await async_client.get(
        "/api/v1/employees", params={"search": "sar"}, headers=admin_headers
    )
    assert [e["name"] for e in search.json()["data"]] == ["Sari"]


@pytest.mark.asyncio
async def test_get_and_update_employee(
    async_client: AsyncClient, make_employee, make_employee_type, admin_headers
):
    _, employee = await make_employee()
    other_type = await make_employee_type(name="Shift Malam")

    resp = await async_client.get(f"/api/v1/employees/{employee.id}", headers=admin_headers)
    assert resp.status_code == 200
    assert resp.json()["data"]["nip"] == "EMP001"

    updated = await async_client.put(
        f"/api/v1/employees/{employee.id}",
        json={"status": "NONAKTIF", "employee_type_id": other_type.id, "phone": "0813"},
        headers=admin_headers,
    )
    assert updated.status_code == 200
    data = updated.json()["data"]
    assert data["status"] == "NONAKTIF"
    assert data["phone"] == "0813"
    assert data["employee_type"]["name"] == "Shift Malam"

    bad_status = await async_client.put(
        f"/api/v1/employees/{employee.id}", json={"status": "PENSIUN"}, headers=admin_headers
    )
    assert bad_status.status_code == 400


@pytest.mark.asyncio
async def test_get_employee_not_found(async_client: AsyncClient, admin_headers):
    resp = await async_client.get("/api/v1/employees/9999", headers=admin_headers)
    assert resp.status_code == 404
