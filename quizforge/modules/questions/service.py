from supabase import Client
from quizforge.modules.questions.schemas import (
    QuestionBase, QuestionCreate, QuestionUpdate, QuestionResponse, BulkQuestionResponse,
    validate_question_fields
)
from typing import List, Dict, Any
from fastapi import HTTPException
import logging

logger = logging.getLogger(__name__)


def _question_row(exam_id: str, question: QuestionBase) -> Dict[str, Any]:
    return {
        "exam_id": exam_id,
        "question_text": question.question_text,
        "question_type": question.question_type,
        "options": question.options,
        "correct_answer": question.correct_answer,
        "points": question.points
    }


class QuestionService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def list_questions(self, exam_id: str) -> List[QuestionResponse]:
        """Questions of an exam in creation order"""
        try:
            result = self.supabase.table("questions")\
                .select("*")\
                .eq("exam_id", exam_id)\
                .order("created_at")\
                .execute()
            return [QuestionResponse(**row) for row in result.data or []]
        except Exception as e:
            logger.error(f"Error listing questions for exam {exam_id}: {e}")
            raise HTTPException(status_code=500, detail=str(e))

    def get_question_row(self, question_id: str) -> Dict[str, Any]:
        try:
            result = self.supabase.table("questions")\
                .select("*")\
                .eq("id", question_id)\
                .maybe_single()\
                .execute()
        except Exception as e:
            logger.error(f"Error fetching question {question_id}: {e}")
            raise HTTPException(status_code=500, detail=str(e))
        if result is None or not result.data:
            raise HTTPException(status_code=404, detail="Question not found")
        return result.data

    def create_question(self, question_data: QuestionCreate) -> QuestionResponse:
        try:
            result = self.supabase.table("questions")\
                .insert(_question_row(question_data.exam_id, question_data))\
                .execute()

            if not result.data:
                raise HTTPException(status_code=500, detail="Failed to create question")

            return QuestionResponse(**result.data[0])
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error creating question: {e}")
            raise HTTPException(status_code=400, detail=str(e))

    def bulk_create(self, exam_id: str, questions: List[QuestionBase]) -> BulkQuestionResponse:
        """Insert several questions in one call"""
        try:
            result = self.supabase.table("questions")\
                .insert([_question_row(exam_id, q) for q in questions])\
                .execute()
            created = [QuestionResponse(**row) for row in result.data or []]
            logger.info(f"Added {len(created)} questions to exam {exam_id}")
            return BulkQuestionResponse(exam_id=exam_id, created=len(created), questions=created)
        except Exception as e:
            logger.error(f"Error bulk creating questions for exam {exam_id}: {e}")
            raise HTTPException(status_code=400, detail=str(e))

    def update_question(self, question_row: Dict[str, Any], question_data: QuestionUpdate) -> QuestionResponse:
        """Update a question; type rules are checked on the merged result"""
        update_data = question_data.model_dump(exclude_none=True)
        merged = {**question_row, **update_data}
        correct_answer = merged.get("correct_answer")
        if merged.get("question_type") == "true_false" and correct_answer:
            correct_answer = correct_answer.strip().lower()
            merged["correct_answer"] = correct_answer
        try:
            options = validate_question_fields(merged["question_type"], merged.get("options"), correct_answer)
        except ValueError as e:
            raise HTTPException(status_code=400, detail=str(e))

        update_data["options"] = options
        if correct_answer is not None:
            update_data["correct_answer"] = correct_answer

        try:
            result = self.supabase.table("questions")\
                .update(update_data)\
                .eq("id", question_row["id"])\
                .execute()

            if not result.data:
                raise HTTPException(status_code=404, detail="Question not found")

            return QuestionResponse(**result.data[0])
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=400, detail=str(e))

    def delete_question(self, question_id: str) -> bool:
        try:
            result = self.supabase.table("questions")\
                .delete()\
                .eq("id", question_id)\
                .execute()
            return len(result.data) > 0
        except Exception as e:
            logger.error(f"Error deleting question {question_id}: {e}")
            raise HTTPException(status_code=400, detail=str(e))
