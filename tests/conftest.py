from __future__ import annotations

import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Dict, Iterator

import pytest
from fastapi.testclient import TestClient

TESTS_DIR = Path(__file__).resolve().parent
if str(TESTS_DIR) not in sys.path:
    sys.path.insert(0, str(TESTS_DIR))

from fakes import FakeSupabase  # noqa: E402

from quizforge.database.supabase_client import get_service_supabase, get_session_factory, get_supabase  # noqa: E402
from quizforge.main import app  # noqa: E402
from quizforge.modules.auth.service import clear_auth_cache  # noqa: E402


@pytest.fixture
def fake_supabase() -> FakeSupabase:
    return FakeSupabase()


@pytest.fixture
def client(fake_supabase: FakeSupabase) -> Iterator[TestClient]:
    clear_auth_cache()
    app.dependency_overrides[get_supabase] = lambda: fake_supabase
    app.dependency_overrides[get_service_supabase] = lambda: fake_supabase
    app.dependency_overrides[get_session_factory] = lambda: fake_supabase.session_client
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()
    clear_auth_cache()


def _login(fake_supabase: FakeSupabase, email: str, role: str = "teacher", name: str = "Ada Tutor"):
    metadata = {"full_name": name}
    if role:
        metadata["role"] = role
    user = fake_supabase.auth.add_user(email, "secret123", metadata)
    token = fake_supabase.auth.issue_token(user)
    return user, {"Authorization": f"Bearer {token}"}


@pytest.fixture
def teacher(fake_supabase: FakeSupabase):
    """(user, headers) for a signed-in teacher"""
    return _login(fake_supabase, "ada@school.edu")


@pytest.fixture
def other_teacher(fake_supabase: FakeSupabase):
    return _login(fake_supabase, "grace@school.edu", name="Grace Other")


@pytest.fixture
def student_user(fake_supabase: FakeSupabase):
    return _login(fake_supabase, "sam@quizforge.edu", role="student", name="Sam Student")


@pytest.fixture
def headers(teacher) -> Dict[str, str]:
    return teacher[1]


@pytest.fixture
def klass(fake_supabase: FakeSupabase, teacher):
    return fake_supabase.seed("classes", name="Biology 101", description="Intro", tutor_id=teacher[0].id)


def iso(dt: datetime) -> str:
    return dt.isoformat()


@pytest.fixture
def open_exam(fake_supabase: FakeSupabase, teacher, klass):
    """Published exam whose window contains now, with two graded questions and an essay"""
    now = datetime.now(timezone.utc)
    exam = fake_supabase.seed(
        "exams",
        title="Cells quiz",
        description=None,
        class_id=klass["id"],
        creator_id=teacher[0].id,
        duration_minutes=30,
        start_time=iso(now - timedelta(hours=1)),
        end_time=iso(now + timedelta(hours=1)),
        is_published=True,
        shuffle_questions=False,
        max_attempts=1,
        access_code="ABCD1234",
        published_at=iso(now - timedelta(hours=2)),
    )
    fake_supabase.seed(
        "questions",
        exam_id=exam["id"],
        question_text="Powerhouse of the cell?",
        question_type="multiple_choice",
        options=["Nucleus", "Mitochondria", "Ribosome"],
        correct_answer="Mitochondria",
        points=2,
        created_at=iso(now - timedelta(minutes=30)),
    )
    fake_supabase.seed(
        "questions",
        exam_id=exam["id"],
        question_text="Name the cell's control centre",
        question_type="short_answer",
        options=None,
        correct_answer="Nucleus",
        points=1,
        created_at=iso(now - timedelta(minutes=20)),
    )
    fake_supabase.seed(
        "questions",
        exam_id=exam["id"],
        question_text="Describe osmosis",
        question_type="essay",
        options=None,
        correct_answer=None,
        points=5,
        created_at=iso(now - timedelta(minutes=10)),
    )
    return exam
