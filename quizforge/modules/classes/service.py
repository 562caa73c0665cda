from supabase import Client
from quizforge.modules.classes.schemas import (
    ClassCreate, ClassUpdate, ClassResponse, ClassDetailResponse
)
from typing import List, Dict, Any
from fastapi import HTTPException
import logging

logger = logging.getLogger(__name__)


class ClassService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def list_classes(self, tutor_id: str, limit: int = 50, offset: int = 0) -> List[ClassResponse]:
        """List classes taught by the user, newest first"""
        try:
            result = self.supabase.table("classes")\
                .select("*")\
                .eq("tutor_id", tutor_id)\
                .order("created_at", desc=True)\
                .limit(limit)\
                .offset(offset)\
                .execute()
            return [ClassResponse(**row) for row in result.data]
        except Exception as e:
            logger.error(f"Error listing classes for {tutor_id}: {e}")
            raise HTTPException(status_code=500, detail=str(e))

    def create_class(self, class_data: ClassCreate, tutor_id: str) -> ClassResponse:
        """Create a new class owned by the tutor"""
        try:
            result = self.supabase.table("classes").insert({
                "name": class_data.name,
                "description": class_data.description,
                "institution_id": class_data.institution_id,
                "tutor_id": tutor_id
            }).execute()

            if not result.data:
                raise HTTPException(status_code=500, detail="Failed to create class")

            return ClassResponse(**result.data[0])
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error creating class: {e}")
            raise HTTPException(status_code=400, detail=str(e))

    def get_class_detail(self, class_row: Dict[str, Any]) -> ClassDetailResponse:
        """Class with its enrolled students and exams"""
        try:
            enrollments = self.supabase.table("enrollments")\
                .select("student_id")\
                .eq("class_id", class_row["id"])\
                .execute()
            student_ids = [e["student_id"] for e in enrollments.data or []]
            students = []
            if student_ids:
                profiles = self.supabase.table("profiles")\
                    .select("id, full_name, matric_number, avatar_url")\
                    .in_("id", student_ids)\
                    .execute()
                students = profiles.data or []

            exams = self.supabase.table("exams")\
                .select("id, title, description, start_time, end_time, duration_minutes, is_published, created_at")\
                .eq("class_id", class_row["id"])\
                .order("start_time")\
                .execute()

            return ClassDetailResponse(**class_row, students=students, exams=exams.data or [])
        except Exception as e:
            logger.error(f"Error loading class {class_row.get('id')}: {e}")
            raise HTTPException(status_code=500, detail=str(e))

    def update_class(self, class_row: Dict[str, Any], class_data: ClassUpdate) -> ClassResponse:
        """Update class"""
        update_data = {}
        if class_data.name:
            update_data["name"] = class_data.name
        if class_data.description is not None:
            update_data["description"] = class_data.description
        if not update_data:
            return ClassResponse(**class_row)

        try:
            result = self.supabase.table("classes")\
                .update(update_data)\
                .eq("id", class_row["id"])\
                .execute()

            if not result.data:
                raise HTTPException(status_code=404, detail="Class not found")

            return ClassResponse(**result.data[0])
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=400, detail=str(e))

    def delete_class(self, class_id: str) -> bool:
        """Delete class and its enrollments"""
        try:
            self.supabase.table("enrollments")\
                .delete()\
                .eq("class_id", class_id)\
                .execute()

            result = self.supabase.table("classes")\
                .delete()\
                .eq("id", class_id)\
                .execute()

            return len(result.data) > 0
        except Exception as e:
            logger.error(f"Error deleting class {class_id}: {e}")
            raise HTTPException(status_code=400, detail=str(e))

    def add_students(self, class_id: str, student_ids: List[str]) -> int:
        """Enrol students; already-enrolled students are left as they are"""
        if not student_ids:
            return 0
        entries = [{"class_id": class_id, "student_id": sid} for sid in dict.fromkeys(student_ids)]
        try:
            self.supabase.table("enrollments")\
                .upsert(entries, on_conflict="class_id,student_id")\
                .execute()
            return len(entries)
        except Exception as e:
            logger.error(f"Error enrolling students into {class_id}: {e}")
            raise HTTPException(status_code=400, detail=str(e))

    def remove_student(self, class_id: str, student_id: str) -> bool:
        """Remove a student from the class"""
        try:
            result = self.supabase.table("enrollments")\
                .delete()\
                .eq("class_id", class_id)\
                .eq("student_id", student_id)\
                .execute()
            return len(result.data) > 0
        except Exception as e:
            raise HTTPException(status_code=400, detail=str(e))
