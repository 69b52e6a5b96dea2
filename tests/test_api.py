from __future__ import annotations

from decimal import Decimal

import pytest

from conftest import auth_header, make_course, make_event, make_partner, make_student, make_user


@pytest.fixture
def partner_ctx(db_session):
    partner = make_partner(db_session, user_id="user-1", utm_tag="AGRO-001")
    course = make_course(db_session)
    student = make_student(db_session, partner.id)
    return partner, course, student


H = auth_header("user-1")


# ==============================
# auth
# ==============================
def test_sync_returns_tokens_in_camel_case(client):
    res = client.post("/api/auth/sync", json={"id": "idp-42", "email": "pilot@example.com", "firstName": "Ana"})
    assert res.status_code == 200
    body = res.json()
    assert body["accessToken"] == "dev-access-idp-42"
    assert body["refreshToken"].startswith("dev-refresh-")
    assert body["user"]["firstName"] == "Ana"

    me = client.get("/api/auth/user", headers=auth_header("idp-42"))
    assert me.status_code == 200
    assert me.json()["email"] == "pilot@example.com"


def test_resync_with_partial_claims_keeps_other_fields(client):
    res = client.post("/api/auth/sync", json={"id": "idp-1", "email": "a@example.com", "firstName": "Ana"})
    assert res.status_code == 200

    res = client.post("/api/auth/sync", json={"id": "idp-1", "lastName": "Silva"})
    assert res.status_code == 200

    me = client.get("/api/auth/user", headers=auth_header("idp-1")).json()
    assert me["email"] == "a@example.com"
    assert me["firstName"] == "Ana"
    assert me["lastName"] == "Silva"


def test_missing_or_unknown_token_is_401(client, db_session):
    res = client.get("/api/auth/user")
    assert res.status_code == 401
    assert res.json() == {"message": "unauthorized"}

    assert client.get("/api/auth/user", headers=auth_header("ghost")).status_code == 401
    assert client.get("/api/courses", headers={"Authorization": "Bearer nope"}).status_code == 401


def test_process_time_header(client, db_session):
    make_user(db_session, "user-1")
    res = client.get("/api/auth/user", headers=H)
    assert "x-process-time" in res.headers


# ==============================
# partner
# ==============================
def test_partner_lifecycle(client, db_session):
    make_user(db_session, "user-1")

    res = client.get("/api/partner", headers=H)
    assert res.status_code == 404
    assert res.json() == {"message": "partner not found"}

    res = client.post("/api/partner", headers=H, json={"company": "Agro Drones", "utmTag": "AGRO-001"})
    assert res.status_code == 201
    body = res.json()
    assert body["utmTag"] == "AGRO-001"
    assert body["classification"] == "bronze"
    assert body["userId"] == "user-1"

    res = client.patch("/api/partner", headers=H, json={"company": "Agro Drones Ltda"})
    assert res.status_code == 200
    assert res.json()["company"] == "Agro Drones Ltda"
    assert res.json()["classification"] == "bronze"


def test_duplicate_utm_tag_is_409(client, db_session):
    make_partner(db_session, user_id="user-1", utm_tag="AGRO-001")
    make_user(db_session, "user-2")

    res = client.post("/api/partner", headers=auth_header("user-2"), json={"company": "Copy", "utmTag": "AGRO-001"})
    assert res.status_code == 409
    assert "message" in res.json()


def test_partner_create_validation_is_422(client, db_session):
    make_user(db_session, "user-1")
    res = client.post("/api/partner", headers=H, json={"company": "No tag"})
    assert res.status_code == 422
    assert "utmTag" in res.json()["message"] or "utm_tag" in res.json()["message"]


# ==============================
# students
# ==============================
def test_students_are_partner_scoped(client, db_session, partner_ctx):
    partner, _, student = partner_ctx
    other = make_partner(db_session, user_id="user-2", utm_tag="OTHER-1")
    foreign = make_student(db_session, other.id, name="Foreign", email="f@example.com")

    res = client.get("/api/students", headers=H)
    assert [s["id"] for s in res.json()] == [student.id]

    assert client.get(f"/api/students/{foreign.id}", headers=H).status_code == 404
    assert client.patch(f"/api/students/{foreign.id}", headers=H, json={"name": "x"}).status_code == 404

    res = client.post("/api/students", headers=H, json={"name": "Maria", "email": "maria@example.com", "cpf": "123"})
    assert res.status_code == 201
    assert res.json()["partnerId"] == partner.id

    res = client.post("/api/students", headers=H, json={"name": "Bad", "email": "not-an-email"})
    assert res.status_code == 422


# ==============================
# enrollments
# ==============================
def test_enrollment_flow_over_http(client, db_session, partner_ctx):
    partner, course, student = partner_ctx

    res = client.post("/api/enrollments", headers=H, json={"courseId": course.id, "studentId": student.id})
    assert res.status_code == 201
    enrollment = res.json()
    assert enrollment["status"] == "enrolled"
    assert Decimal(enrollment["progress"]) == 0
    assert enrollment["partnerId"] == partner.id

    eid = enrollment["id"]
    res = client.post("/api/enrollments", headers=H, json={"courseId": course.id, "studentId": student.id})
    assert res.status_code == 409

    res = client.patch(f"/api/enrollments/{eid}", headers=H, json={"status": "completed"})
    assert res.status_code == 400
    assert "message" in res.json()

    res = client.patch(f"/api/enrollments/{eid}", headers=H, json={"status": "in_progress", "progress": 50})
    assert res.status_code == 200
    res = client.patch(f"/api/enrollments/{eid}", headers=H, json={"status": "completed", "grade": 8.5})
    assert res.status_code == 200
    assert res.json()["completionDate"] is not None

    res = client.patch(f"/api/enrollments/{eid}", headers=H, json={"certificateRequested": True})
    assert res.status_code == 200
    assert res.json()["certificateRequested"] is True
    assert res.json()["certificateIssued"] is False

    listed = client.get("/api/enrollments", headers=H).json()
    assert len(listed) == 1
    assert listed[0]["course"]["name"] == course.name
    assert listed[0]["student"]["name"] == student.name

    partner_body = client.get("/api/partner", headers=H).json()
    assert partner_body["completedCourses"] == 1
    assert partner_body["coursesInProgress"] == 0
    assert Decimal(partner_body["completionRate"]) == 100


def test_enrollment_ownership(client, db_session, partner_ctx):
    _, course, _ = partner_ctx
    other = make_partner(db_session, user_id="user-2", utm_tag="OTHER-1")
    foreign_student = make_student(db_session, other.id, name="Foreign", email="f@example.com")

    res = client.post("/api/enrollments", headers=H, json={"courseId": course.id, "studentId": foreign_student.id})
    assert res.status_code == 404

    res = client.post(
        "/api/enrollments", headers=auth_header("user-2"),
        json={"courseId": course.id, "studentId": foreign_student.id},
    )
    assert res.status_code == 201
    foreign_eid = res.json()["id"]

    res = client.patch(f"/api/enrollments/{foreign_eid}", headers=H, json={"progress": 10})
    assert res.status_code == 404


def test_enrollment_patch_rejects_out_of_range(client, db_session, partner_ctx):
    _, course, student = partner_ctx
    eid = client.post(
        "/api/enrollments", headers=H, json={"courseId": course.id, "studentId": student.id},
    ).json()["id"]

    assert client.patch(f"/api/enrollments/{eid}", headers=H, json={"progress": 150}).status_code == 422
    assert client.patch(f"/api/enrollments/{eid}", headers=H, json={"grade": 11}).status_code == 422
    res = client.patch(f"/api/enrollments/{eid}", headers=H, json={"completionDate": "2026-01-01T00:00:00Z"})
    assert res.status_code == 400


# ==============================
# courses / stats / documents
# ==============================
def test_courses_endpoints(client, db_session, partner_ctx):
    _, course, student = partner_ctx
    hidden = make_course(db_session, name="Retired", is_active=False)

    listed = client.get("/api/courses", headers=H).json()
    assert [c["id"] for c in listed] == [course.id]
    assert listed[0]["instructors"] == ["Carlos"]

    assert client.get(f"/api/courses/{hidden.id}", headers=H).status_code == 200
    assert client.get("/api/courses/9999", headers=H).status_code == 404

    assert client.get(f"/api/courses/{course.id}/progress", headers=H).status_code == 404
    client.post("/api/enrollments", headers=H, json={"courseId": course.id, "studentId": student.id})

    progress = client.get(f"/api/courses/{course.id}/progress", headers=H).json()
    assert progress["courseId"] == course.id

    enrollments = client.get(f"/api/courses/{course.id}/enrollments", headers=H).json()
    assert enrollments[0]["partner"]["utmTag"] == "AGRO-001"

    stats = client.get(f"/api/courses/{course.id}/stats", headers=H).json()
    assert stats["totalEnrollments"] == 1
    assert stats["enrolled"] == 1
    assert stats["averageGrade"] is None

    assert client.get(f"/api/courses/{course.id}/documents", headers=H).json() == []


def test_partner_stats(client, db_session, partner_ctx):
    _, course, student = partner_ctx
    eid = client.post(
        "/api/enrollments", headers=H, json={"courseId": course.id, "studentId": student.id},
    ).json()["id"]
    client.patch(f"/api/enrollments/{eid}", headers=H, json={"status": "in_progress"})
    client.patch(f"/api/enrollments/{eid}", headers=H, json={"status": "completed", "grade": 9})

    stats = client.get("/api/partner/stats", headers=H).json()
    assert stats["classification"] == "bronze"
    assert stats["tierProgress"] == 33
    assert stats["nextTier"] == "silver"
    assert stats["completed"] == 1
    assert Decimal(stats["completionRate"]) == 100
    assert Decimal(stats["averageGrade"]) == 9
    assert stats["eventsRegistered"] == 0


def test_partner_documents(client, db_session, partner_ctx):
    _, course, student = partner_ctx
    eid = client.post(
        "/api/enrollments", headers=H, json={"courseId": course.id, "studentId": student.id},
    ).json()["id"]

    res = client.post(
        "/api/partner/documents", headers=H,
        json={"enrollmentId": eid, "documentName": "ID card", "fileUrl": "/files/id.pdf"},
    )
    assert res.status_code == 201
    assert res.json()["status"] == "pending"

    res = client.post(
        "/api/partner/documents", headers=H,
        json={"enrollmentId": 9999, "documentName": "x", "fileUrl": "/x"},
    )
    assert res.status_code == 404

    docs = client.get("/api/partner/documents", headers=H).json()
    assert [d["documentName"] for d in docs] == ["ID card"]


# ==============================
# events
# ==============================
def test_events_endpoints(client, db_session, partner_ctx):
    make_event(db_session, days=-2, title="Past")
    upcoming = make_event(db_session, days=3, title="Soon", max_participants=1)

    assert [e["title"] for e in client.get("/api/events", headers=H).json()] == ["Past", "Soon"]
    assert [e["title"] for e in client.get("/api/events/upcoming", headers=H).json()] == ["Soon"]

    res = client.post(f"/api/events/{upcoming.id}/register", headers=H)
    assert res.status_code == 201
    assert client.post(f"/api/events/{upcoming.id}/register", headers=H).status_code == 409
    assert client.post("/api/events/9999/register", headers=H).status_code == 404

    regs = client.get("/api/partner/events", headers=H).json()
    assert regs[0]["event"]["title"] == "Soon"
    assert regs[0]["attended"] is False
