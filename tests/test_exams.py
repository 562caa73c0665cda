from __future__ import annotations

import random
import re
from datetime import datetime, timedelta, timezone

from fakes import TABLE_COLUMNS

from quizforge.modules.exams import service as exam_service
from quizforge.modules.exams.service import generate_access_code, shuffle_for_student


def _window(hours_from_now: int = 1, length_hours: int = 2):
    start = datetime.now(timezone.utc) + timedelta(hours=hours_from_now)
    return start.isoformat(), (start + timedelta(hours=length_hours)).isoformat()


def _create(client, headers, class_id, **overrides):
    start, end = _window()
    payload = {"title": "Midterm", "class_id": class_id, "start_time": start, "end_time": end}
    payload.update(overrides)
    return client.post("/api/exams", json=payload, headers=headers)


def test_create_exam_defaults(client, klass, teacher, headers):
    response = _create(client, headers, klass["id"])
    assert response.status_code == 201
    body = response.json()
    assert body["duration_minutes"] == 60
    assert body["max_attempts"] == 1
    assert body["is_published"] is False
    assert body["creator_id"] == teacher[0].id


def test_create_exam_validation(client, klass, headers):
    start, end = _window()
    assert _create(client, headers, klass["id"], title="X").status_code == 422
    assert _create(client, headers, klass["id"], duration_minutes=0).status_code == 422
    assert _create(client, headers, klass["id"], duration_minutes=301).status_code == 422
    assert _create(client, headers, klass["id"], start_time=end, end_time=start).status_code == 422


def test_create_exam_requires_class_ownership(client, klass, other_teacher):
    response = _create(client, other_teacher[1], klass["id"])
    assert response.status_code == 403


def test_list_exams_with_class_name(client, fake_supabase, klass, teacher, headers):
    _create(client, headers, klass["id"])
    response = client.get("/api/exams", headers=headers)
    assert response.status_code == 200
    assert [e["class_name"] for e in response.json()] == ["Biology 101"]

    filtered = client.get("/api/exams", params={"class_id": "other"}, headers=headers)
    assert filtered.json() == []


def test_schedule_window(client, klass, headers):
    _create(client, headers, klass["id"], title="Soon")
    later_start, later_end = _window(hours_from_now=24 * 30)
    _create(client, headers, klass["id"], title="Much later", start_time=later_start, end_time=later_end)

    window_end = (datetime.now(timezone.utc) + timedelta(days=7)).isoformat()
    response = client.get("/api/exams/schedule", params={"end": window_end}, headers=headers)
    assert response.status_code == 200
    assert [e["title"] for e in response.json()] == ["Soon"]
    assert response.json()[0]["class_name"] == "Biology 101"


def test_get_exam_with_questions(client, open_exam, headers):
    response = client.get(f"/api/exams/{open_exam['id']}", headers=headers)
    assert response.status_code == 200
    questions = response.json()["questions"]
    assert [q["question_type"] for q in questions] == ["multiple_choice", "short_answer", "essay"]
    assert questions[0]["correct_answer"] == "Mitochondria"


def test_update_checks_end_against_stored_start(client, open_exam, headers):
    too_early = (datetime.now(timezone.utc) - timedelta(hours=3)).isoformat()
    response = client.patch(f"/api/exams/{open_exam['id']}", json={"end_time": too_early}, headers=headers)
    assert response.status_code == 400
    assert response.json()["detail"] == "End time must be after start time"

    ok = client.patch(f"/api/exams/{open_exam['id']}", json={"title": "Cells quiz v2"}, headers=headers)
    assert ok.status_code == 200
    assert ok.json()["title"] == "Cells quiz v2"


def test_delete_exam(client, fake_supabase, open_exam, headers):
    response = client.delete(f"/api/exams/{open_exam['id']}", headers=headers)
    assert response.status_code == 204
    assert fake_supabase.rows("exams") == []
    assert fake_supabase.rows("questions") == []


def test_exam_ownership(client, open_exam, other_teacher):
    assert client.get(f"/api/exams/{open_exam['id']}", headers=other_teacher[1]).status_code == 403
    assert client.delete(f"/api/exams/{open_exam['id']}", headers=other_teacher[1]).status_code == 403


def test_publish_without_questions_fails(client, klass, headers):
    exam = _create(client, headers, klass["id"]).json()
    response = client.post(f"/api/exams/{exam['id']}/publish", headers=headers)
    assert response.status_code == 400
    assert response.json()["detail"] == "Cannot publish an exam with no questions"


def test_publish_generates_access_code(client, fake_supabase, open_exam, headers):
    response = client.post(f"/api/exams/{open_exam['id']}/publish", headers=headers)
    assert response.status_code == 200
    body = response.json()
    assert re.fullmatch(r"[A-Z0-9]{8}", body["access_code"])
    assert body["shareable_url"].endswith(f"/exam/{open_exam['id']}?code={body['access_code']}")
    assert body["exam"]["is_published"] is True
    assert fake_supabase.rows("exams")[0]["access_code"] == body["access_code"]


def test_access_hides_correct_answers(client, open_exam):
    response = client.get(f"/api/exams/{open_exam['id']}/access", params={"code": "ABCD1234"})
    assert response.status_code == 200
    body = response.json()
    assert body["exam"]["class_name"] == "Biology 101"
    assert len(body["questions"]) == 3
    assert all("correct_answer" not in q for q in body["questions"])


def test_access_with_wrong_code_is_not_found(client, open_exam):
    response = client.get(f"/api/exams/{open_exam['id']}/access", params={"code": "WRONG000"})
    assert response.status_code == 404


def test_access_unpublished_exam_is_not_found(client, fake_supabase, open_exam):
    fake_supabase.rows("exams")[0]["is_published"] = False
    response = client.get(f"/api/exams/{open_exam['id']}/access", params={"code": "ABCD1234"})
    assert response.status_code == 404


def test_access_outside_window_is_forbidden(client, fake_supabase, open_exam):
    fake_supabase.rows("exams")[0]["end_time"] = (datetime.now(timezone.utc) - timedelta(minutes=1)).isoformat()
    response = client.get(f"/api/exams/{open_exam['id']}/access", params={"code": "ABCD1234"})
    assert response.status_code == 403
    assert response.json()["detail"] == "This exam has ended"


def test_generate_access_code_format():
    codes = {generate_access_code() for _ in range(20)}
    assert all(re.fullmatch(r"[A-Z0-9]{8}", c) for c in codes)
    assert len(codes) > 1


def test_shuffle_keeps_questions_and_options():
    questions = [
        {"id": str(i), "question_type": "multiple_choice", "options": ["a", "b", "c", "d"]}
        for i in range(6)
    ]
    shuffled = shuffle_for_student(questions, rng=random.Random(4))
    assert sorted(q["id"] for q in shuffled) == [str(i) for i in range(6)]
    assert all(sorted(q["options"]) == ["a", "b", "c", "d"] for q in shuffled)
    assert questions[0]["options"] == ["a", "b", "c", "d"]


def test_create_ignores_published_flag(client, fake_supabase, klass, headers):
    response = _create(client, headers, klass["id"], is_published=True)
    assert response.status_code == 201
    assert response.json()["is_published"] is False
    assert response.json()["access_code"] is None
    assert fake_supabase.rows("exams")[0]["is_published"] is False


def test_update_cannot_publish(client, fake_supabase, klass, headers):
    exam = _create(client, headers, klass["id"]).json()
    response = client.patch(f"/api/exams/{exam['id']}", json={"is_published": True}, headers=headers)
    assert response.status_code == 200
    assert response.json()["is_published"] is False
    assert set(fake_supabase.rows("exams")[0]) <= TABLE_COLUMNS["exams"]


def test_access_shuffles_when_enabled(client, fake_supabase, open_exam, monkeypatch):
    url = f"/api/exams/{open_exam['id']}/access"
    in_order = client.get(url, params={"code": "ABCD1234"}).json()["questions"]

    def seeded(questions, rng=None):
        return shuffle_for_student(questions, rng=random.Random(7))

    monkeypatch.setattr(exam_service, "shuffle_for_student", seeded)
    fake_supabase.rows("exams")[0]["shuffle_questions"] = True
    response = client.get(url, params={"code": "ABCD1234"})
    assert response.status_code == 200
    questions = response.json()["questions"]

    expected = shuffle_for_student(in_order, rng=random.Random(7))
    assert [q["id"] for q in questions] == [q["id"] for q in expected]
    assert [q["options"] for q in questions] == [q["options"] for q in expected]
    assert all("correct_answer" not in q for q in questions)
