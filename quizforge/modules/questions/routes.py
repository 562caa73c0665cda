from fastapi import APIRouter, Depends, HTTPException
from quizforge.database.supabase_client import get_supabase
from quizforge.modules.questions.schemas import (
    QuestionCreate, QuestionUpdate, QuestionResponse, BulkQuestionCreate, BulkQuestionResponse
)
from quizforge.modules.questions.service import QuestionService
from quizforge.core.dependencies import get_current_user, require_teacher, check_exam_owner
from supabase import Client
from typing import List, Dict, Optional

router = APIRouter(prefix="/questions", tags=["questions"])


def get_question_service(supabase: Client = Depends(get_supabase)) -> QuestionService:
    return QuestionService(supabase)


@router.get("", response_model=List[QuestionResponse])
async def list_questions(
    exam_id: Optional[str] = None,
    user_data: Dict = Depends(get_current_user),
    supabase: Client = Depends(get_supabase),
    service: QuestionService = Depends(get_question_service)
):
    """List the questions of an exam (creator only)"""
    if not exam_id:
        raise HTTPException(status_code=400, detail="exam_id is required")
    check_exam_owner(exam_id, user_data, supabase, action="view questions of")
    return service.list_questions(exam_id)


@router.post("", response_model=QuestionResponse, status_code=201)
async def create_question(
    question_data: QuestionCreate,
    user_data: Dict = Depends(require_teacher),
    supabase: Client = Depends(get_supabase),
    service: QuestionService = Depends(get_question_service)
):
    """Add a question to an exam"""
    check_exam_owner(question_data.exam_id, user_data, supabase, action="add questions to")
    return service.create_question(question_data)


@router.post("/bulk", response_model=BulkQuestionResponse, status_code=201)
async def bulk_create_questions(
    bulk_data: BulkQuestionCreate,
    user_data: Dict = Depends(require_teacher),
    supabase: Client = Depends(get_supabase),
    service: QuestionService = Depends(get_question_service)
):
    """Add several questions to an exam at once"""
    check_exam_owner(bulk_data.exam_id, user_data, supabase, action="add questions to")
    return service.bulk_create(bulk_data.exam_id, bulk_data.questions)


@router.get("/{question_id}", response_model=QuestionResponse)
async def get_question(
    question_id: str,
    user_data: Dict = Depends(get_current_user),
    supabase: Client = Depends(get_supabase),
    service: QuestionService = Depends(get_question_service)
):
    question_row = service.get_question_row(question_id)
    check_exam_owner(question_row["exam_id"], user_data, supabase, action="view questions of")
    return QuestionResponse(**question_row)


@router.patch("/{question_id}", response_model=QuestionResponse)
async def update_question(
    question_id: str,
    question_data: QuestionUpdate,
    user_data: Dict = Depends(require_teacher),
    supabase: Client = Depends(get_supabase),
    service: QuestionService = Depends(get_question_service)
):
    question_row = service.get_question_row(question_id)
    check_exam_owner(question_row["exam_id"], user_data, supabase, action="edit questions of")
    return service.update_question(question_row, question_data)


@router.delete("/{question_id}", status_code=204)
async def delete_question(
    question_id: str,
    user_data: Dict = Depends(require_teacher),
    supabase: Client = Depends(get_supabase),
    service: QuestionService = Depends(get_question_service)
):
    question_row = service.get_question_row(question_id)
    check_exam_owner(question_row["exam_id"], user_data, supabase, action="delete questions of")
    service.delete_question(question_id)
    return None
