from __future__ import annotations

import pytest

from fakes import TABLE_COLUMNS, FakeAPIError


def test_create_class(client, fake_supabase, teacher, headers):
    response = client.post("/api/classes", json={"name": "  Chemistry  ", "description": "Labs"}, headers=headers)
    assert response.status_code == 201
    body = response.json()
    assert body["name"] == "Chemistry"
    assert body["tutor_id"] == teacher[0].id
    assert len(fake_supabase.rows("classes")) == 1


def test_class_name_shorter_than_two_characters_is_rejected(client, fake_supabase, headers):
    response = client.post("/api/classes", json={"name": "C"}, headers=headers)
    assert response.status_code == 422
    assert "at least 2 characters" in response.text
    assert fake_supabase.rows("classes") == []


def test_students_cannot_create_classes(client, student_user):
    response = client.post("/api/classes", json={"name": "Hacking"}, headers=student_user[1])
    assert response.status_code == 403


def test_list_only_own_classes(client, fake_supabase, klass, other_teacher, headers):
    fake_supabase.seed("classes", name="Not mine", tutor_id=other_teacher[0].id)
    response = client.get("/api/classes", headers=headers)
    assert response.status_code == 200
    assert [c["name"] for c in response.json()] == ["Biology 101"]


def test_get_class_detail(client, fake_supabase, klass, student_user, headers):
    fake_supabase.seed("profiles", id=student_user[0].id, full_name="Sam Student", matric_number="M001")
    fake_supabase.seed("enrollments", class_id=klass["id"], student_id=student_user[0].id)
    response = client.get(f"/api/classes/{klass['id']}", headers=headers)
    assert response.status_code == 200
    body = response.json()
    assert [s["full_name"] for s in body["students"]] == ["Sam Student"]
    assert body["exams"] == []


def test_class_ownership(client, klass, other_teacher):
    response = client.get(f"/api/classes/{klass['id']}", headers=other_teacher[1])
    assert response.status_code == 403
    missing = client.get("/api/classes/does-not-exist", headers=other_teacher[1])
    assert missing.status_code == 404


def test_update_and_delete_class(client, fake_supabase, klass, headers):
    fake_supabase.seed("enrollments", class_id=klass["id"], student_id="s1")
    updated = client.patch(f"/api/classes/{klass['id']}", json={"name": "Biology 102"}, headers=headers)
    assert updated.status_code == 200
    assert updated.json()["name"] == "Biology 102"

    deleted = client.delete(f"/api/classes/{klass['id']}", headers=headers)
    assert deleted.status_code == 204
    assert fake_supabase.rows("classes") == []
    assert fake_supabase.rows("enrollments") == []


def test_update_class_writes_only_schema_columns(client, fake_supabase, klass, headers):
    response = client.patch(f"/api/classes/{klass['id']}", json={"description": "Cells and tissues"}, headers=headers)
    assert response.status_code == 200
    stored = fake_supabase.rows("classes")[0]
    assert stored["description"] == "Cells and tissues"
    assert set(stored) <= TABLE_COLUMNS["classes"]

    unchanged = client.patch(f"/api/classes/{klass['id']}", json={}, headers=headers)
    assert unchanged.status_code == 200
    assert unchanged.json()["name"] == "Biology 101"


def test_fake_rejects_unknown_columns(fake_supabase, klass):
    with pytest.raises(FakeAPIError):
        fake_supabase.table("classes").update({"updated_at": "now"}).eq("id", klass["id"]).execute()


def test_add_students_is_idempotent(client, fake_supabase, klass, headers):
    student_ids = ["7f9d2f7e-0000-4000-8000-000000000001", "7f9d2f7e-0000-4000-8000-000000000002"]
    first = client.post(f"/api/classes/{klass['id']}/students", json={"student_ids": student_ids}, headers=headers)
    assert first.status_code == 200
    assert first.json()["enrolled"] == 2
    client.post(f"/api/classes/{klass['id']}/students", json={"student_ids": student_ids[:1]}, headers=headers)
    assert len(fake_supabase.rows("enrollments")) == 2

    removed = client.delete(f"/api/classes/{klass['id']}/students/{student_ids[0]}", headers=headers)
    assert removed.status_code == 204
    assert [e["student_id"] for e in fake_supabase.rows("enrollments")] == [student_ids[1]]
