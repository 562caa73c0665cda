from fastapi import APIRouter, Depends
from quizforge.database.supabase_client import get_supabase, get_service_supabase
from quizforge.modules.students.schemas import (
    StudentResponse, StudentDetailResponse,
    InviteStudentsRequest, InviteStudentsResponse,
    CreateStudentsRequest, CreateStudentsResponse
)
from quizforge.modules.students.service import StudentService
from quizforge.core.dependencies import require_teacher, check_class_owner
from supabase import Client
from typing import List, Dict, Optional

router = APIRouter(prefix="/students", tags=["students"])


def get_student_service(
    supabase: Client = Depends(get_supabase),
    admin: Client = Depends(get_service_supabase)
) -> StudentService:
    return StudentService(supabase, admin)


@router.get("", response_model=List[StudentResponse])
async def list_students(
    class_id: Optional[str] = None,
    user_data: Dict = Depends(require_teacher),
    supabase: Client = Depends(get_supabase),
    service: StudentService = Depends(get_student_service)
):
    """List students enrolled in the current user's classes"""
    if class_id:
        check_class_owner(class_id, user_data, supabase, action="view students of")
    return service.list_students(user_data["id"], class_id=class_id)


@router.post("/invite", response_model=InviteStudentsResponse, status_code=201)
async def invite_students(
    invite_data: InviteStudentsRequest,
    user_data: Dict = Depends(require_teacher),
    supabase: Client = Depends(get_supabase),
    service: StudentService = Depends(get_student_service)
):
    """Record invitations for a list of email addresses"""
    if invite_data.class_id:
        check_class_owner(invite_data.class_id, user_data, supabase, action="invite students to")
    return service.invite_students(invite_data, user_data["id"])


@router.post("/create", response_model=CreateStudentsResponse, status_code=201)
async def create_students(
    create_data: CreateStudentsRequest,
    user_data: Dict = Depends(require_teacher),
    supabase: Client = Depends(get_supabase),
    service: StudentService = Depends(get_student_service)
):
    """Create student accounts from name / matric number pairs"""
    if create_data.class_id:
        check_class_owner(create_data.class_id, user_data, supabase, action="add students to")
    return service.create_students(create_data)


@router.get("/{student_id}", response_model=StudentDetailResponse)
async def get_student(
    student_id: str,
    user_data: Dict = Depends(require_teacher),
    service: StudentService = Depends(get_student_service)
):
    return service.get_student(student_id, user_data["id"])
