from fastapi import APIRouter, Depends, Query
from quizforge.database.supabase_client import get_supabase
from quizforge.modules.exams.schemas import (
    ExamCreate, ExamUpdate, ExamResponse, ExamDetailResponse, ExamPublishResponse,
    ExamAccessResponse, ScheduleEvent
)
from quizforge.modules.exams.service import ExamService
from quizforge.core.dependencies import get_current_user, require_teacher, check_class_owner, check_exam_owner
from supabase import Client
from typing import List, Dict, Optional
from datetime import datetime

router = APIRouter(prefix="/exams", tags=["exams"])


def get_exam_service(supabase: Client = Depends(get_supabase)) -> ExamService:
    return ExamService(supabase)


@router.get("", response_model=List[ExamResponse])
async def list_exams(
    class_id: Optional[str] = None,
    limit: int = 50,
    offset: int = 0,
    user_data: Dict = Depends(get_current_user),
    service: ExamService = Depends(get_exam_service)
):
    """List exams created by the current user"""
    return service.list_exams(user_data["id"], class_id=class_id, limit=limit, offset=offset)


@router.get("/schedule", response_model=List[ScheduleEvent])
async def get_schedule(
    start: Optional[datetime] = None,
    end: Optional[datetime] = None,
    user_data: Dict = Depends(get_current_user),
    service: ExamService = Depends(get_exam_service)
):
    """Calendar view of the current user's exams"""
    return service.get_schedule(user_data["id"], start=start, end=end)


@router.post("", response_model=ExamResponse, status_code=201)
async def create_exam(
    exam_data: ExamCreate,
    user_data: Dict = Depends(require_teacher),
    service: ExamService = Depends(get_exam_service),
    supabase: Client = Depends(get_supabase)
):
    """Create an exam in one of the user's classes"""
    check_class_owner(exam_data.class_id, user_data, supabase, action="create exams in")
    return service.create_exam(exam_data, user_data["id"])


@router.get("/{exam_id}", response_model=ExamDetailResponse)
async def get_exam(
    exam_id: str,
    user_data: Dict = Depends(get_current_user),
    supabase: Client = Depends(get_supabase),
    service: ExamService = Depends(get_exam_service)
):
    """Get exam with its questions (creator only)"""
    exam_row = check_exam_owner(exam_id, user_data, supabase, action="view")
    return service.get_exam_detail(exam_row)


@router.patch("/{exam_id}", response_model=ExamResponse)
async def update_exam(
    exam_id: str,
    exam_data: ExamUpdate,
    user_data: Dict = Depends(require_teacher),
    supabase: Client = Depends(get_supabase),
    service: ExamService = Depends(get_exam_service)
):
    """Update exam (creator only)"""
    exam_row = check_exam_owner(exam_id, user_data, supabase, action="update")
    return service.update_exam(exam_row, exam_data)


@router.delete("/{exam_id}", status_code=204)
async def delete_exam(
    exam_id: str,
    user_data: Dict = Depends(require_teacher),
    supabase: Client = Depends(get_supabase),
    service: ExamService = Depends(get_exam_service)
):
    """Delete exam (creator only)"""
    check_exam_owner(exam_id, user_data, supabase, action="delete")
    service.delete_exam(exam_id)
    return None


@router.post("/{exam_id}/publish", response_model=ExamPublishResponse)
async def publish_exam(
    exam_id: str,
    user_data: Dict = Depends(require_teacher),
    supabase: Client = Depends(get_supabase),
    service: ExamService = Depends(get_exam_service)
):
    """Publish exam and hand out its access code"""
    check_exam_owner(exam_id, user_data, supabase, action="publish")
    return service.publish_exam(exam_id)


@router.get("/{exam_id}/access", response_model=ExamAccessResponse)
async def access_exam(
    exam_id: str,
    code: str = Query(..., min_length=1),
    service: ExamService = Depends(get_exam_service)
):
    """Public: student view of a published exam"""
    return service.access_exam(exam_id, code)
