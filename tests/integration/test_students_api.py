from io import BytesIO

import pandas as pd
import pytest
from httpx import AsyncClient
from sqlalchemy import func, select

from app.models import Registration, Student


@pytest.mark.asyncio
async def test_coordinator_sees_only_own_year(client: AsyncClient, coordinator_headers, make_student):
    await make_student("second", name="Own Student")
    await make_student("third", name="Other Student")

    response = await client.get("/api/v1/students", headers=coordinator_headers)

    assert response.status_code == 200
    data = response.json()
    assert data["total"] == 1
    assert data["students"][0]["name"] == "Own Student"


@pytest.mark.asyncio
async def test_admin_sees_all_and_filters(client: AsyncClient, admin_headers, make_student):
    await make_student("first", department="Mechanical")
    await make_student("second")
    await make_student("fourth")

    all_students = await client.get("/api/v1/students", headers=admin_headers)
    assert all_students.json()["total"] == 3

    fourth = await client.get("/api/v1/students", params={"year": "fourth"}, headers=admin_headers)
    assert fourth.json()["total"] == 1

    search = await client.get("/api/v1/students", params={"search": "mecha"}, headers=admin_headers)
    assert search.json()["total"] == 1


@pytest.mark.asyncio
async def test_coordinator_cannot_read_other_year_student(client: AsyncClient, coordinator_headers, make_student):
    student = await make_student("first")

    response = await client.get(f"/api/v1/students/{student.id}", headers=coordinator_headers)

    assert response.status_code == 403
    assert response.json()["error"] == "scope_violation"


@pytest.mark.asyncio
async def test_admin_creates_student(client: AsyncClient, admin_headers):
    payload = {"name": "Asha Rao", "roll_number": "CS-101", "department": "Computer Science", "year": "first"}

    response = await client.post("/api/v1/students", json=payload, headers=admin_headers)
    assert response.status_code == 201
    assert response.json()["year"] == "first"

    duplicate = await client.post("/api/v1/students", json=payload, headers=admin_headers)
    assert duplicate.status_code == 400


@pytest.mark.asyncio
async def test_invalid_year_rejected(client: AsyncClient, admin_headers):
    payload = {"name": "X", "roll_number": "X-1", "department": "CS", "year": "fifth"}

    response = await client.post("/api/v1/students", json=payload, headers=admin_headers)

    assert response.status_code == 422


@pytest.mark.asyncio
async def test_coordinator_cannot_create_student(client: AsyncClient, coordinator_headers):
    payload = {"name": "X", "roll_number": "X-2", "department": "CS", "year": "second"}

    response = await client.post("/api/v1/students", json=payload, headers=coordinator_headers)

    assert response.status_code == 403


@pytest.mark.asyncio
async def test_update_ignores_year(client: AsyncClient, admin_headers, make_student):
    student = await make_student("second")

    response = await client.patch(
        f"/api/v1/students/{student.id}",
        json={"name": "Renamed", "year": "fourth"},
        headers=admin_headers,
    )

    assert response.status_code == 200
    data = response.json()
    assert data["name"] == "Renamed"
    assert data["year"] == "second"


@pytest.mark.asyncio
async def test_delete_student_removes_registrations(
    client: AsyncClient, db_session, admin_headers, make_student, make_sport, make_registration
):
    student = await make_student("third")
    await make_registration(student, await make_sport())

    response = await client.delete(f"/api/v1/students/{student.id}", headers=admin_headers)

    assert response.status_code == 204
    remaining = (await db_session.execute(select(func.count(Registration.id)))).scalar_one()
    assert remaining == 0


def _excel(rows: list[dict]) -> bytes:
    buf = BytesIO()
    pd.DataFrame(rows).to_excel(buf, index=False, engine="openpyxl")
    return buf.getvalue()


@pytest.mark.asyncio
async def test_import_students(client: AsyncClient, db_session, admin_headers, make_student):
    await make_student("second", roll_number="R-EXISTING", name="Old Name")
    content = _excel([
        {"Name": "Ravi Kumar", "Roll Number": "R-001", "Department": "Civil", "Year": "first"},
        {"Name": "New Name", "Roll Number": "R-EXISTING", "Department": "Electrical", "Year": "second"},
        {"Name": "Moved", "Roll Number": "R-EXISTING", "Department": "Electrical", "Year": "fourth"},
        {"Name": "No Year", "Roll Number": "R-002", "Department": "Civil", "Year": "fifth"},
        {"Name": None, "Roll Number": "R-003", "Department": "Civil", "Year": "third"},
    ])

    response = await client.post(
        "/api/v1/students/import",
        files={"file": ("students.xlsx", content, "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet")},
        headers=admin_headers,
    )

    assert response.status_code == 201
    data = response.json()
    assert data["total_rows"] == 5
    assert data["created"] == 1
    assert data["updated"] == 1
    assert data["total_errors"] == 3
    assert [e["row"] for e in data["errors"]] == [3, 4, 5]

    existing = (await db_session.execute(
        select(Student).where(Student.roll_number == "R-EXISTING")
    )).scalar_one()
    assert existing.name == "New Name"
    assert existing.year == "second"


@pytest.mark.asyncio
async def test_import_rejects_non_excel(client: AsyncClient, admin_headers):
    response = await client.post(
        "/api/v1/students/import",
        files={"file": ("students.csv", b"Name,Roll Number\n", "text/csv")},
        headers=admin_headers,
    )

    assert response.status_code == 400


@pytest.mark.asyncio
async def test_import_missing_columns(client: AsyncClient, admin_headers):
    content = _excel([{"Name": "A", "Roll Number": "R-9"}])

    response = await client.post(
        "/api/v1/students/import",
        files={"file": ("students.xlsx", content, "application/octet-stream")},
        headers=admin_headers,
    )

    assert response.status_code == 400
    assert "Department" in response.json()["detail"]
