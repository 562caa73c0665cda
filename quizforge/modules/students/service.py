from supabase import Client
from quizforge.config import settings
from quizforge.modules.students.schemas import (
    StudentResponse, StudentDetailResponse, StudentClassInfo,
    InviteStudentsRequest, InviteStudentsResponse,
    CreateStudentsRequest, CreateStudentsResponse, CreatedStudent, StudentCreateError, NewStudent
)
from typing import List, Dict, Any, Optional
from fastapi import HTTPException
import logging

logger = logging.getLogger(__name__)

PROFILE_COLUMNS = "id, full_name, matric_number, avatar_url, institution, department"


def student_email(student: NewStudent) -> str:
    if student.email:
        return str(student.email)
    return f"{student.matric_number.lower()}@{settings.student_email_domain}"


class StudentService:
    def __init__(self, supabase: Client, admin: Optional[Client] = None):
        self.supabase = supabase
        self.admin = admin or supabase

    def _tutor_classes(self, tutor_id: str) -> Dict[str, str]:
        result = self.supabase.table("classes")\
            .select("id, name")\
            .eq("tutor_id", tutor_id)\
            .execute()
        return {row["id"]: row["name"] for row in result.data or []}

    def _enrollments(self, class_ids: List[str], student_id: Optional[str] = None) -> List[Dict[str, Any]]:
        if not class_ids:
            return []
        query = self.supabase.table("enrollments")\
            .select("class_id, student_id")\
            .in_("class_id", class_ids)
        if student_id:
            query = query.eq("student_id", student_id)
        return query.execute().data or []

    def _class_exam_ids(self, class_ids: List[str]) -> List[str]:
        if not class_ids:
            return []
        result = self.supabase.table("exams")\
            .select("id")\
            .in_("class_id", class_ids)\
            .execute()
        return [row["id"] for row in result.data or []]

    def list_students(self, tutor_id: str, class_id: Optional[str] = None) -> List[StudentResponse]:
        """Students enrolled in the tutor's classes, each listed once with all their classes"""
        try:
            classes = self._tutor_classes(tutor_id)
            class_ids = [class_id] if class_id else list(classes)
            class_ids = [cid for cid in class_ids if cid in classes]

            student_classes: Dict[str, List[StudentClassInfo]] = {}
            for row in self._enrollments(class_ids):
                student_classes.setdefault(row["student_id"], []).append(
                    StudentClassInfo(id=row["class_id"], name=classes[row["class_id"]])
                )
            if not student_classes:
                return []

            profiles = self.supabase.table("profiles")\
                .select(PROFILE_COLUMNS)\
                .in_("id", list(student_classes))\
                .execute()
            students = [
                StudentResponse(
                    id=p["id"],
                    full_name=p.get("full_name"),
                    matric_number=p.get("matric_number"),
                    avatar_url=p.get("avatar_url"),
                    classes=student_classes[p["id"]]
                )
                for p in profiles.data or []
            ]
            return sorted(students, key=lambda s: (s.full_name or "").lower())
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error listing students for {tutor_id}: {e}")
            raise HTTPException(status_code=500, detail=str(e))

    def get_student(self, student_id: str, tutor_id: str) -> StudentDetailResponse:
        """Student profile with classes and exam submissions; tutors only see their own students"""
        try:
            classes = self._tutor_classes(tutor_id)
            enrollments = self._enrollments(list(classes), student_id=student_id)
            if not enrollments:
                raise HTTPException(status_code=403, detail="Student is not enrolled in any of your classes")

            result = self.supabase.table("profiles")\
                .select(PROFILE_COLUMNS)\
                .eq("id", student_id)\
                .maybe_single()\
                .execute()
            if result is None or not result.data:
                raise HTTPException(status_code=404, detail="Student not found")
            profile = result.data

            submissions = []
            exam_ids = self._class_exam_ids(list(classes))
            if profile.get("matric_number") and exam_ids:
                submissions = self.supabase.table("exam_submissions")\
                    .select("*")\
                    .eq("matric_number", profile["matric_number"])\
                    .in_("exam_id", exam_ids)\
                    .order("completed_at", desc=True)\
                    .execute().data or []

            return StudentDetailResponse(
                **profile,
                classes=[StudentClassInfo(id=e["class_id"], name=classes[e["class_id"]]) for e in enrollments],
                submissions=submissions
            )
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error loading student {student_id}: {e}")
            raise HTTPException(status_code=500, detail=str(e))

    def invite_students(self, invite_data: InviteStudentsRequest, inviter_id: str) -> InviteStudentsResponse:
        emails = list(dict.fromkeys(str(e).lower() for e in invite_data.emails))
        rows = [
            {
                "email": email,
                "inviter_id": inviter_id,
                "class_id": invite_data.class_id,
                "message": invite_data.message
            }
            for email in emails
        ]
        try:
            self.supabase.table("invitations").insert(rows).execute()
        except Exception as e:
            logger.error(f"Error saving invitations: {e}")
            raise HTTPException(status_code=400, detail=str(e))
        logger.info(f"{inviter_id} invited {len(emails)} students")
        return InviteStudentsResponse(
            invited=len(emails),
            emails=emails,
            message=f"Invitations sent to {len(emails)} students"
        )

    def _check_duplicate_matrics(self, matric_numbers: List[str]):
        repeated = sorted({m for m in matric_numbers if matric_numbers.count(m) > 1})
        if repeated:
            raise HTTPException(
                status_code=400,
                detail=f"Duplicate matric numbers in request: {', '.join(repeated)}"
            )
        try:
            result = self.admin.table("profiles")\
                .select("matric_number")\
                .in_("matric_number", matric_numbers)\
                .execute()
        except Exception as e:
            logger.error(f"Error checking matric numbers: {e}")
            raise HTTPException(status_code=500, detail=str(e))
        existing = sorted({row["matric_number"] for row in result.data or []})
        if existing:
            raise HTTPException(
                status_code=400,
                detail=f"Matric numbers already registered: {', '.join(existing)}"
            )

    def _create_account(self, student: NewStudent) -> CreatedStudent:
        email = student_email(student)
        response = self.admin.auth.admin.create_user({
            "email": email,
            "password": student.matric_number,
            "email_confirm": True,
            "user_metadata": {
                "full_name": student.name,
                "role": "student",
                "matric_number": student.matric_number
            }
        })
        if not response or not response.user:
            raise ValueError("Failed to create auth user")
        user_id = response.user.id

        try:
            self.admin.table("profiles").insert({
                "id": user_id,
                "full_name": student.name,
                "matric_number": student.matric_number
            }).execute()
        except Exception:
            logger.warning(f"Profile insert failed for {student.matric_number}, removing auth user {user_id}")
            self.admin.auth.admin.delete_user(user_id)
            raise

        return CreatedStudent(id=user_id, name=student.name, matric_number=student.matric_number, email=email)

    def create_students(self, create_data: CreateStudentsRequest) -> CreateStudentsResponse:
        """Create student accounts, optionally enrolling them into a class"""
        self._check_duplicate_matrics([s.matric_number for s in create_data.students])

        created: List[CreatedStudent] = []
        errors: List[StudentCreateError] = []
        for student in create_data.students:
            try:
                created.append(self._create_account(student))
            except Exception as e:
                logger.error(f"Error creating student {student.matric_number}: {e}")
                errors.append(StudentCreateError(matric_number=student.matric_number, error=str(e)))

        if create_data.class_id and created:
            try:
                self.admin.table("enrollments")\
                    .upsert(
                        [{"class_id": create_data.class_id, "student_id": s.id} for s in created],
                        on_conflict="class_id,student_id"
                    )\
                    .execute()
            except Exception as e:
                logger.error(f"Error enrolling new students into {create_data.class_id}: {e}")
                errors.append(StudentCreateError(matric_number="*", error=f"Enrollment failed: {str(e)}"))

        return CreateStudentsResponse(
            created=created,
            errors=errors,
            message=f"Created {len(created)} of {len(create_data.students)} students"
        )
