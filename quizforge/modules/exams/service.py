from supabase import Client
from quizforge.config import settings
from quizforge.modules.exams.schemas import (
    ExamCreate, ExamUpdate, ExamResponse, ExamDetailResponse, ExamPublishResponse,
    ExamAccessResponse, StudentExamInfo, ScheduleEvent, as_utc
)
from typing import List, Optional, Dict, Any
from fastapi import HTTPException
from datetime import datetime, timezone
import random
import secrets
import string
import logging

logger = logging.getLogger(__name__)

ACCESS_CODE_ALPHABET = string.ascii_uppercase + string.digits
ACCESS_CODE_LENGTH = 8
STUDENT_QUESTION_COLUMNS = "id, question_text, question_type, options, points, created_at"


def generate_access_code() -> str:
    return "".join(secrets.choice(ACCESS_CODE_ALPHABET) for _ in range(ACCESS_CODE_LENGTH))


def code_matches(exam: ExamResponse, access_code: Optional[str]) -> bool:
    if not exam.access_code or not access_code:
        return False
    return secrets.compare_digest(exam.access_code, access_code.strip().upper())


def check_exam_window(exam: ExamResponse, now: Optional[datetime] = None):
    """Raise 403 when the exam has not opened yet or has already closed"""
    now = now or datetime.now(timezone.utc)
    start_time = as_utc(exam.start_time)
    end_time = as_utc(exam.end_time)
    if start_time and now < start_time:
        raise HTTPException(status_code=403, detail="This exam has not started yet")
    if end_time and now > end_time:
        raise HTTPException(status_code=403, detail="This exam has ended")


def shuffle_for_student(questions: List[Dict[str, Any]], rng: Optional[random.Random] = None) -> List[Dict[str, Any]]:
    """Shuffle question order and multiple-choice options"""
    rng = rng or random.Random()
    shuffled = [dict(q) for q in questions]
    rng.shuffle(shuffled)
    for question in shuffled:
        if question.get("question_type") == "multiple_choice" and question.get("options"):
            options = list(question["options"])
            rng.shuffle(options)
            question["options"] = options
    return shuffled


class ExamService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def _class_names(self, class_ids: List[str]) -> Dict[str, str]:
        if not class_ids:
            return {}
        result = self.supabase.table("classes")\
            .select("id, name")\
            .in_("id", list(set(class_ids)))\
            .execute()
        return {row["id"]: row["name"] for row in result.data or []}

    def _with_class_names(self, rows: List[Dict[str, Any]]) -> List[ExamResponse]:
        names = self._class_names([row["class_id"] for row in rows])
        return [ExamResponse(**row, class_name=names.get(row["class_id"])) for row in rows]

    def list_exams(
        self,
        creator_id: str,
        class_id: Optional[str] = None,
        limit: int = 50,
        offset: int = 0
    ) -> List[ExamResponse]:
        """List exams created by the user, optionally for one class"""
        try:
            query = self.supabase.table("exams").select("*").eq("creator_id", creator_id)
            if class_id:
                query = query.eq("class_id", class_id)
            result = query.order("start_time", desc=True)\
                .limit(limit)\
                .offset(offset)\
                .execute()
            return self._with_class_names(result.data or [])
        except Exception as e:
            logger.error(f"Error listing exams for {creator_id}: {e}")
            raise HTTPException(status_code=500, detail=str(e))

    def get_schedule(
        self,
        creator_id: str,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None
    ) -> List[ScheduleEvent]:
        """Calendar events for the user's exams overlapping [start, end]"""
        try:
            query = self.supabase.table("exams")\
                .select("id, title, start_time, end_time, class_id, is_published")\
                .eq("creator_id", creator_id)
            if start:
                query = query.gte("end_time", as_utc(start).isoformat())
            if end:
                query = query.lte("start_time", as_utc(end).isoformat())
            result = query.order("start_time").execute()
            rows = result.data or []
            names = self._class_names([row["class_id"] for row in rows])
            return [ScheduleEvent(**row, class_name=names.get(row["class_id"])) for row in rows]
        except Exception as e:
            logger.error(f"Error loading schedule for {creator_id}: {e}")
            raise HTTPException(status_code=500, detail=str(e))

    def create_exam(self, exam_data: ExamCreate, creator_id: str) -> ExamResponse:
        """Create a new exam in a class the user teaches"""
        try:
            result = self.supabase.table("exams").insert({
                "title": exam_data.title,
                "description": exam_data.description,
                "class_id": exam_data.class_id,
                "duration_minutes": exam_data.duration_minutes,
                "start_time": exam_data.start_time.isoformat(),
                "end_time": exam_data.end_time.isoformat(),
                "is_published": False,
                "shuffle_questions": exam_data.shuffle_questions,
                "max_attempts": exam_data.max_attempts,
                "creator_id": creator_id
            }).execute()

            if not result.data:
                raise HTTPException(status_code=500, detail="Failed to create exam")

            return ExamResponse(**result.data[0])
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error creating exam: {e}")
            raise HTTPException(status_code=400, detail=str(e))

    def get_exam_detail(self, exam_row: Dict[str, Any]) -> ExamDetailResponse:
        """Exam with its questions (including answers) in creation order"""
        try:
            questions = self.supabase.table("questions")\
                .select("*")\
                .eq("exam_id", exam_row["id"])\
                .order("created_at")\
                .execute()
            class_name = self._class_names([exam_row["class_id"]]).get(exam_row["class_id"])
            return ExamDetailResponse(**exam_row, class_name=class_name, questions=questions.data or [])
        except Exception as e:
            logger.error(f"Error loading exam {exam_row.get('id')}: {e}")
            raise HTTPException(status_code=500, detail=str(e))

    def update_exam(self, exam_row: Dict[str, Any], exam_data: ExamUpdate) -> ExamResponse:
        """Update exam; the time window is re-checked against stored values"""
        current = ExamResponse(**exam_row)
        start_time = exam_data.start_time or as_utc(current.start_time)
        end_time = exam_data.end_time or as_utc(current.end_time)
        if start_time and end_time and end_time <= start_time:
            raise HTTPException(status_code=400, detail="End time must be after start time")

        update_data = exam_data.model_dump(exclude_none=True)
        for key in ("start_time", "end_time"):
            if key in update_data:
                update_data[key] = update_data[key].isoformat()
        if not update_data:
            return current

        try:
            result = self.supabase.table("exams")\
                .update(update_data)\
                .eq("id", exam_row["id"])\
                .execute()

            if not result.data:
                raise HTTPException(status_code=404, detail="Exam not found")

            return ExamResponse(**result.data[0])
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=400, detail=str(e))

    def delete_exam(self, exam_id: str) -> bool:
        """Delete exam and its questions"""
        try:
            self.supabase.table("questions")\
                .delete()\
                .eq("exam_id", exam_id)\
                .execute()

            result = self.supabase.table("exams")\
                .delete()\
                .eq("id", exam_id)\
                .execute()

            return len(result.data) > 0
        except Exception as e:
            logger.error(f"Error deleting exam {exam_id}: {e}")
            raise HTTPException(status_code=400, detail=str(e))

    def count_questions(self, exam_id: str) -> int:
        result = self.supabase.table("questions")\
            .select("id", count="exact")\
            .eq("exam_id", exam_id)\
            .execute()
        if result.count is not None:
            return result.count
        return len(result.data or [])

    def publish_exam(self, exam_id: str) -> ExamPublishResponse:
        """Publish exam with a fresh access code"""
        try:
            if self.count_questions(exam_id) == 0:
                raise HTTPException(status_code=400, detail="Cannot publish an exam with no questions")

            access_code = generate_access_code()
            result = self.supabase.table("exams")\
                .update({
                    "is_published": True,
                    "published_at": datetime.now(timezone.utc).isoformat(),
                    "access_code": access_code
                })\
                .eq("id", exam_id)\
                .execute()

            if not result.data:
                raise HTTPException(status_code=404, detail="Exam not found")

            logger.info(f"Exam {exam_id} published")
            return ExamPublishResponse(
                exam=ExamResponse(**result.data[0]),
                access_code=access_code,
                shareable_url=f"{settings.frontend_url}/exam/{exam_id}?code={access_code}",
                message="Exam published successfully"
            )
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=400, detail=str(e))

    def get_published_exam(self, exam_id: str) -> ExamResponse:
        """Published exam or 404"""
        try:
            result = self.supabase.table("exams")\
                .select("*")\
                .eq("id", exam_id)\
                .maybe_single()\
                .execute()
        except Exception as e:
            logger.error(f"Error loading exam {exam_id}: {e}")
            raise HTTPException(status_code=500, detail=str(e))
        if result is None or not result.data:
            raise HTTPException(status_code=404, detail="Exam not found or not published")
        exam = ExamResponse(**result.data)
        if not exam.is_published:
            raise HTTPException(status_code=404, detail="Exam not found or not published")
        return exam

    def access_exam(self, exam_id: str, access_code: str) -> ExamAccessResponse:
        """Student view of a published exam: no correct answers, optional shuffling"""
        exam = self.get_published_exam(exam_id)
        if not code_matches(exam, access_code):
            raise HTTPException(status_code=404, detail="Exam not found or invalid access code")
        check_exam_window(exam)
        try:
            result = self.supabase.table("questions")\
                .select(STUDENT_QUESTION_COLUMNS)\
                .eq("exam_id", exam_id)\
                .order("created_at")\
                .execute()
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

        questions = [
            {k: v for k, v in q.items() if k != "correct_answer"}
            for q in result.data or []
        ]
        if exam.shuffle_questions:
            questions = shuffle_for_student(questions)

        class_name = self._class_names([exam.class_id]).get(exam.class_id)
        return ExamAccessResponse(
            exam=StudentExamInfo(
                id=exam.id,
                title=exam.title,
                description=exam.description,
                duration_minutes=exam.duration_minutes,
                start_time=exam.start_time,
                end_time=exam.end_time,
                class_name=class_name
            ),
            questions=questions
        )
