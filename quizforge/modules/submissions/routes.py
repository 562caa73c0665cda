from fastapi import APIRouter, Depends, HTTPException
from quizforge.database.supabase_client import get_supabase, get_service_supabase
from quizforge.modules.submissions.schemas import (
    SubmissionCreate, SubmissionResult, SubmissionResponse, SubmissionDetailResponse
)
from quizforge.modules.submissions.service import SubmissionService
from quizforge.core.dependencies import require_teacher, check_exam_owner
from supabase import Client
from typing import List, Dict, Optional

router = APIRouter(prefix="/submissions", tags=["submissions"])


def get_submission_service(
    supabase: Client = Depends(get_supabase),
    admin: Client = Depends(get_service_supabase)
) -> SubmissionService:
    return SubmissionService(supabase, admin)


@router.post("", response_model=SubmissionResult, status_code=201)
async def submit_exam(
    submission_data: SubmissionCreate,
    service: SubmissionService = Depends(get_submission_service)
):
    """Public: submit answers for a published exam using its access code"""
    return service.submit(submission_data)


@router.get("", response_model=List[SubmissionResponse])
async def list_submissions(
    exam_id: Optional[str] = None,
    user_data: Dict = Depends(require_teacher),
    supabase: Client = Depends(get_supabase),
    service: SubmissionService = Depends(get_submission_service)
):
    """List submissions for an exam (creator only)"""
    if not exam_id:
        raise HTTPException(status_code=400, detail="exam_id is required")
    check_exam_owner(exam_id, user_data, supabase, action="view submissions of")
    return service.list_submissions(exam_id)


@router.get("/{submission_id}", response_model=SubmissionDetailResponse)
async def get_submission(
    submission_id: str,
    user_data: Dict = Depends(require_teacher),
    supabase: Client = Depends(get_supabase),
    service: SubmissionService = Depends(get_submission_service)
):
    submission_row = service.get_submission_row(submission_id)
    check_exam_owner(submission_row["exam_id"], user_data, supabase, action="view submissions of")
    return service.get_submission_detail(submission_row)
