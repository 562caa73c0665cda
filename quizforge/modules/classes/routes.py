from fastapi import APIRouter, Depends
from quizforge.database.supabase_client import get_supabase
from quizforge.modules.classes.schemas import (
    ClassCreate, ClassUpdate, ClassResponse, ClassDetailResponse,
    EnrollStudentsRequest, EnrollStudentsResponse
)
from quizforge.modules.classes.service import ClassService
from quizforge.core.dependencies import get_current_user, require_teacher, check_class_owner
from supabase import Client
from typing import List, Dict

router = APIRouter(prefix="/classes", tags=["classes"])


def get_class_service(supabase: Client = Depends(get_supabase)) -> ClassService:
    return ClassService(supabase)


@router.get("", response_model=List[ClassResponse])
async def list_classes(
    limit: int = 50,
    offset: int = 0,
    user_data: Dict = Depends(get_current_user),
    service: ClassService = Depends(get_class_service)
):
    """List classes taught by the current user"""
    return service.list_classes(user_data["id"], limit=limit, offset=offset)


@router.post("", response_model=ClassResponse, status_code=201)
async def create_class(
    class_data: ClassCreate,
    user_data: Dict = Depends(require_teacher),
    service: ClassService = Depends(get_class_service)
):
    """Create a new class"""
    return service.create_class(class_data, user_data["id"])


@router.get("/{class_id}", response_model=ClassDetailResponse)
async def get_class(
    class_id: str,
    user_data: Dict = Depends(get_current_user),
    service: ClassService = Depends(get_class_service),
    supabase: Client = Depends(get_supabase)
):
    """Get class with students and exams (tutor only)"""
    class_row = check_class_owner(class_id, user_data, supabase, action="view")
    return service.get_class_detail(class_row)


@router.patch("/{class_id}", response_model=ClassResponse)
async def update_class(
    class_id: str,
    class_data: ClassUpdate,
    user_data: Dict = Depends(require_teacher),
    service: ClassService = Depends(get_class_service),
    supabase: Client = Depends(get_supabase)
):
    """Update class (tutor only)"""
    class_row = check_class_owner(class_id, user_data, supabase, action="update")
    return service.update_class(class_row, class_data)


@router.delete("/{class_id}", status_code=204)
async def delete_class(
    class_id: str,
    user_data: Dict = Depends(require_teacher),
    service: ClassService = Depends(get_class_service),
    supabase: Client = Depends(get_supabase)
):
    """Delete class (tutor only)"""
    check_class_owner(class_id, user_data, supabase, action="delete")
    service.delete_class(class_id)
    return None


@router.post("/{class_id}/students", response_model=EnrollStudentsResponse)
async def add_students(
    class_id: str,
    enroll_data: EnrollStudentsRequest,
    user_data: Dict = Depends(require_teacher),
    service: ClassService = Depends(get_class_service),
    supabase: Client = Depends(get_supabase)
):
    """Enrol students into the class (tutor only)"""
    check_class_owner(class_id, user_data, supabase, action="add students to")
    enrolled = service.add_students(class_id, [str(sid) for sid in enroll_data.student_ids])
    return EnrollStudentsResponse(
        class_id=class_id,
        enrolled=enrolled,
        message="Students added to class successfully"
    )


@router.delete("/{class_id}/students/{student_id}", status_code=204)
async def remove_student(
    class_id: str,
    student_id: str,
    user_data: Dict = Depends(require_teacher),
    service: ClassService = Depends(get_class_service),
    supabase: Client = Depends(get_supabase)
):
    """Remove a student from the class (tutor only)"""
    check_class_owner(class_id, user_data, supabase, action="remove students from")
    service.remove_student(class_id, student_id)
    return None
