from __future__ import annotations

from datetime import datetime, timedelta, timezone


def test_stats(client, fake_supabase, open_exam, klass, teacher, other_teacher, headers):
    second = fake_supabase.seed("classes", name="Chemistry", tutor_id=teacher[0].id)
    fake_supabase.seed("enrollments", class_id=klass["id"], student_id="s1")
    fake_supabase.seed("enrollments", class_id=second["id"], student_id="s1")
    fake_supabase.seed("enrollments", class_id=second["id"], student_id="s2")
    future = datetime.now(timezone.utc) + timedelta(days=2)
    fake_supabase.seed(
        "exams", title="Later", class_id=klass["id"], creator_id=teacher[0].id, is_published=True,
        start_time=future.isoformat(), end_time=(future + timedelta(hours=1)).isoformat(),
    )
    fake_supabase.seed("classes", name="Not mine", tutor_id=other_teacher[0].id)

    response = client.get("/api/dashboard/stats", headers=headers)
    assert response.status_code == 200
    assert response.json() == {
        "total_classes": 2,
        "total_exams": 2,
        "total_students": 2,
        "active_exams": 1,
    }


def test_stats_empty(client, headers):
    response = client.get("/api/dashboard/stats", headers=headers)
    assert response.json() == {"total_classes": 0, "total_exams": 0, "total_students": 0, "active_exams": 0}


def test_recent(client, fake_supabase, klass, teacher, headers):
    now = datetime.now(timezone.utc)
    for i in range(4):
        fake_supabase.seed(
            "classes", name=f"Class {i}", tutor_id=teacher[0].id,
            created_at=(now + timedelta(minutes=i + 1)).isoformat(),
        )
    fake_supabase.seed("enrollments", class_id=fake_supabase.rows("classes")[-1]["id"], student_id="s1")
    for days in (3, 1, -1):
        start = now + timedelta(days=days)
        fake_supabase.seed(
            "exams", title=f"In {days} days", class_id=klass["id"], creator_id=teacher[0].id,
            start_time=start.isoformat(), end_time=(start + timedelta(hours=1)).isoformat(),
            duration_minutes=60, is_published=False,
        )

    response = client.get("/api/dashboard/recent", headers=headers)
    assert response.status_code == 200
    body = response.json()
    assert [c["name"] for c in body["classes"]] == ["Class 3", "Class 2", "Class 1"]
    assert body["classes"][0]["student_count"] == 1
    assert [e["title"] for e in body["upcoming_exams"]] == ["In 1 days", "In 3 days"]
    assert body["upcoming_exams"][0]["class_name"] == "Biology 101"


def test_dashboard_requires_auth(client):
    assert client.get("/api/dashboard/stats").status_code == 401
