from supabase import Client
from quizforge.modules.exams.service import ExamService, check_exam_window, code_matches
from quizforge.modules.submissions.schemas import (
    SubmissionCreate, SubmissionResult, SubmissionResponse, SubmissionDetailResponse
)
from typing import List, Dict, Any, Optional, Tuple
from fastapi import HTTPException
from datetime import datetime, timezone
from decimal import Decimal, ROUND_HALF_UP
import logging

logger = logging.getLogger(__name__)

AUTO_GRADED_TYPES = ("multiple_choice", "true_false", "short_answer")


def grade_answer(question: Dict[str, Any], answer: Optional[str]) -> Tuple[Optional[bool], Optional[int]]:
    """
    Grade one answer against its question.

    Multiple choice and true/false need an exact match, short answers are
    compared case-insensitively after trimming. Essays are left ungraded and
    return (None, None).
    """
    question_type = question.get("question_type")
    if question_type not in AUTO_GRADED_TYPES:
        return None, None

    expected = question.get("correct_answer")
    if answer is None or expected is None:
        is_correct = False
    elif question_type == "short_answer":
        is_correct = answer.strip().lower() == expected.strip().lower()
    else:
        is_correct = answer == expected

    return is_correct, (question.get("points") or 0) if is_correct else 0


def percentage(score: int, max_score: int) -> int:
    if max_score <= 0:
        return 0
    value = Decimal(score * 100) / Decimal(max_score)
    return int(value.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


class SubmissionService:
    def __init__(self, supabase: Client, admin: Optional[Client] = None):
        self.supabase = supabase
        self.admin = admin or supabase

    def count_attempts(self, exam_id: str, matric_number: str) -> int:
        result = self.admin.table("exam_submissions")\
            .select("id", count="exact")\
            .eq("exam_id", exam_id)\
            .eq("matric_number", matric_number)\
            .execute()
        if result.count is not None:
            return result.count
        return len(result.data or [])

    def submit(self, submission_data: SubmissionCreate) -> SubmissionResult:
        """Grade and store a student's answers for a published exam"""
        exam = ExamService(self.admin).get_published_exam(submission_data.exam_id)
        if not code_matches(exam, submission_data.access_code):
            raise HTTPException(status_code=401, detail="Invalid access code")
        check_exam_window(exam)

        try:
            attempts = self.count_attempts(exam.id, submission_data.matric_number)
            if attempts >= exam.max_attempts:
                raise HTTPException(
                    status_code=400,
                    detail="Maximum number of attempts reached for this exam"
                )

            questions = self.admin.table("questions")\
                .select("id, question_type, correct_answer, points")\
                .eq("exam_id", exam.id)\
                .execute().data or []
            by_id = {q["id"]: q for q in questions}
            max_score = sum(q.get("points") or 0 for q in questions)

            graded = []
            score = 0
            seen = set()
            for item in submission_data.answers:
                question = by_id.get(item.question_id)
                if question is None:
                    logger.warning(f"Skipping answer for unknown question {item.question_id} on exam {exam.id}")
                    continue
                # first answer per question wins
                if item.question_id in seen:
                    continue
                seen.add(item.question_id)
                is_correct, points_earned = grade_answer(question, item.answer)
                score += points_earned or 0
                graded.append({
                    "question_id": item.question_id,
                    "answer": item.answer,
                    "is_correct": is_correct,
                    "points_earned": points_earned
                })

            result = self.admin.table("exam_submissions").insert({
                "exam_id": exam.id,
                "student_name": submission_data.student_name,
                "matric_number": submission_data.matric_number,
                "score": score,
                "max_score": max_score,
                "started_at": submission_data.started_at.isoformat() if submission_data.started_at else None,
                "completed_at": datetime.now(timezone.utc).isoformat()
            }).execute()
            if not result.data:
                raise HTTPException(status_code=500, detail="Failed to save submission")
            submission_id = result.data[0]["id"]

            if graded:
                for row in graded:
                    row["submission_id"] = submission_id
                try:
                    self.admin.table("submission_answers").insert(graded).execute()
                except Exception:
                    self.admin.table("exam_submissions").delete().eq("id", submission_id).execute()
                    raise

            logger.info(f"Submission {submission_id} for exam {exam.id}: {score}/{max_score}")
            return SubmissionResult(
                id=submission_id,
                exam_id=exam.id,
                score=score,
                max_score=max_score,
                percentage=percentage(score, max_score),
                message="Exam submitted successfully"
            )
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error saving submission for exam {submission_data.exam_id}: {e}")
            raise HTTPException(status_code=500, detail=str(e))

    def list_submissions(self, exam_id: str) -> List[SubmissionResponse]:
        """Submissions for an exam, newest first"""
        try:
            result = self.supabase.table("exam_submissions")\
                .select("*")\
                .eq("exam_id", exam_id)\
                .order("completed_at", desc=True)\
                .execute()
            return [SubmissionResponse(**row) for row in result.data or []]
        except Exception as e:
            logger.error(f"Error listing submissions for exam {exam_id}: {e}")
            raise HTTPException(status_code=500, detail=str(e))

    def get_submission_row(self, submission_id: str) -> Dict[str, Any]:
        try:
            result = self.supabase.table("exam_submissions")\
                .select("*")\
                .eq("id", submission_id)\
                .maybe_single()\
                .execute()
        except Exception as e:
            logger.error(f"Error fetching submission {submission_id}: {e}")
            raise HTTPException(status_code=500, detail=str(e))
        if result is None or not result.data:
            raise HTTPException(status_code=404, detail="Submission not found")
        return result.data

    def get_submission_detail(self, submission_row: Dict[str, Any]) -> SubmissionDetailResponse:
        """Submission with each answer and the question it answers"""
        try:
            answers = self.supabase.table("submission_answers")\
                .select("*")\
                .eq("submission_id", submission_row["id"])\
                .execute().data or []
            question_ids = [a["question_id"] for a in answers]
            questions = {}
            if question_ids:
                rows = self.supabase.table("questions")\
                    .select("*")\
                    .in_("id", question_ids)\
                    .execute().data or []
                questions = {q["id"]: q for q in rows}
            return SubmissionDetailResponse(
                **submission_row,
                answers=[{**a, "question": questions.get(a["question_id"])} for a in answers]
            )
        except Exception as e:
            logger.error(f"Error loading submission {submission_row.get('id')}: {e}")
            raise HTTPException(status_code=500, detail=str(e))
