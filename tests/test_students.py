from __future__ import annotations

import pytest
from pydantic import ValidationError

from quizforge.modules.students.schemas import InviteStudentsRequest


@pytest.fixture
def enrolled(fake_supabase, klass, teacher):
    second = fake_supabase.seed("classes", name="Chemistry", tutor_id=teacher[0].id)
    sam = fake_supabase.seed("profiles", full_name="Sam Student", matric_number="M001")
    kim = fake_supabase.seed("profiles", full_name="Kim Learner", matric_number="M002")
    fake_supabase.seed("enrollments", class_id=klass["id"], student_id=sam["id"])
    fake_supabase.seed("enrollments", class_id=second["id"], student_id=sam["id"])
    fake_supabase.seed("enrollments", class_id=klass["id"], student_id=kim["id"])
    return sam, kim, second


def test_invite_emails_from_string():
    request = InviteStudentsRequest(emails="a@mail.com, b@mail.com\nc@mail.com,")
    assert [str(e) for e in request.emails] == ["a@mail.com", "b@mail.com", "c@mail.com"]
    with pytest.raises(ValidationError):
        InviteStudentsRequest(emails="a@mail.com, not-an-email")


def test_list_students_deduplicated(client, enrolled, headers):
    sam, kim, second = enrolled
    response = client.get("/api/students", headers=headers)
    assert response.status_code == 200
    students = {s["id"]: s for s in response.json()}
    assert len(students) == 2
    assert sorted(c["name"] for c in students[sam["id"]]["classes"]) == ["Biology 101", "Chemistry"]

    filtered = client.get("/api/students", params={"class_id": second["id"]}, headers=headers)
    assert [s["id"] for s in filtered.json()] == [sam["id"]]


def test_list_students_other_teacher_sees_nothing(client, enrolled, other_teacher):
    response = client.get("/api/students", headers=other_teacher[1])
    assert response.json() == []


def test_get_student_with_submissions(client, fake_supabase, enrolled, open_exam, headers):
    sam = enrolled[0]
    fake_supabase.seed(
        "exam_submissions", exam_id=open_exam["id"], student_name="Sam Student",
        matric_number="M001", score=2, max_score=8,
    )
    response = client.get(f"/api/students/{sam['id']}", headers=headers)
    assert response.status_code == 200
    body = response.json()
    assert body["matric_number"] == "M001"
    assert len(body["classes"]) == 2
    assert body["submissions"][0]["score"] == 2


def test_get_student_hides_other_teachers_submissions(
    client, fake_supabase, enrolled, open_exam, other_teacher, headers
):
    foreign_class = fake_supabase.seed("classes", name="History", tutor_id=other_teacher[0].id)
    foreign_exam = fake_supabase.seed(
        "exams", title="Dates", class_id=foreign_class["id"], creator_id=other_teacher[0].id,
    )
    fake_supabase.seed(
        "exam_submissions", exam_id=foreign_exam["id"], student_name="Sam Student",
        matric_number="M001", score=9, max_score=10,
    )
    fake_supabase.seed(
        "exam_submissions", exam_id=open_exam["id"], student_name="Sam Student",
        matric_number="M001", score=2, max_score=8,
    )
    response = client.get(f"/api/students/{enrolled[0]['id']}", headers=headers)
    assert response.status_code == 200
    assert [s["exam_id"] for s in response.json()["submissions"]] == [open_exam["id"]]


def test_get_student_not_enrolled_is_forbidden(client, enrolled, other_teacher):
    response = client.get(f"/api/students/{enrolled[0]['id']}", headers=other_teacher[1])
    assert response.status_code == 403


def test_invite_students(client, fake_supabase, klass, teacher, headers):
    response = client.post(
        "/api/students/invite",
        json={"emails": "one@mail.com,two@mail.com", "class_id": klass["id"], "message": "Welcome"},
        headers=headers,
    )
    assert response.status_code == 201
    assert response.json()["invited"] == 2
    rows = fake_supabase.rows("invitations")
    assert {r["email"] for r in rows} == {"one@mail.com", "two@mail.com"}
    assert all(r["inviter_id"] == teacher[0].id for r in rows)


def test_invite_rejects_invalid_address(client, headers):
    response = client.post("/api/students/invite", json={"emails": ["ok@mail.com", "bad"]}, headers=headers)
    assert response.status_code == 422


def test_create_students(client, fake_supabase, klass, headers):
    response = client.post(
        "/api/students/create",
        json={
            "class_id": klass["id"],
            "students": [
                {"name": "Ola Ade", "matric_number": "CSC/001"},
                {"name": "Ben Oke", "matric_number": "CSC002", "email": "ben@mail.com"},
            ],
        },
        headers=headers,
    )
    assert response.status_code == 201
    body = response.json()
    assert body["errors"] == []
    emails = sorted(s["email"] for s in body["created"])
    assert emails == ["ben@mail.com", "csc/001@quizforge.edu"]

    created = [u for u in fake_supabase.auth.users.values() if u.user_metadata.get("role") == "student"]
    assert len(created) == 2
    assert fake_supabase.auth.passwords[created[0].id] == created[0].user_metadata["matric_number"]
    assert {p["matric_number"] for p in fake_supabase.rows("profiles")} == {"CSC/001", "CSC002"}
    assert len(fake_supabase.rows("enrollments")) == 2


def test_create_students_rejects_existing_matric(client, fake_supabase, headers):
    fake_supabase.seed("profiles", full_name="Old", matric_number="M001")
    response = client.post(
        "/api/students/create",
        json={"students": [{"name": "New", "matric_number": "M001"}]},
        headers=headers,
    )
    assert response.status_code == 400
    assert "M001" in response.json()["detail"]


def test_create_students_rolls_back_auth_user(client, fake_supabase, headers):
    fake_supabase.fail("profiles", "insert")
    response = client.post(
        "/api/students/create",
        json={"students": [{"name": "Ola Ade", "matric_number": "M010"}]},
        headers=headers,
    )
    assert response.status_code == 201
    body = response.json()
    assert body["created"] == []
    assert body["errors"][0]["matric_number"] == "M010"
    assert len(fake_supabase.auth.deleted_users) == 1
    assert all(u.user_metadata.get("role") != "student" for u in fake_supabase.auth.users.values())
