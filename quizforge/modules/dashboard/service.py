from supabase import Client
from quizforge.modules.dashboard.schemas import DashboardStats, DashboardRecent, RecentClass, UpcomingExam
from typing import List, Dict, Optional
from fastapi import HTTPException
from datetime import datetime, timezone
from collections import Counter
import logging

logger = logging.getLogger(__name__)

RECENT_CLASSES_LIMIT = 3
UPCOMING_EXAMS_LIMIT = 5


def _count(result) -> int:
    if result.count is not None:
        return result.count
    return len(result.data or [])


class DashboardService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def _class_ids(self, tutor_id: str) -> List[str]:
        result = self.supabase.table("classes")\
            .select("id")\
            .eq("tutor_id", tutor_id)\
            .execute()
        return [row["id"] for row in result.data or []]

    def _enrollment_counts(self, class_ids: List[str]) -> Counter:
        if not class_ids:
            return Counter()
        result = self.supabase.table("enrollments")\
            .select("class_id, student_id")\
            .in_("class_id", class_ids)\
            .execute()
        return Counter(row["class_id"] for row in result.data or [])

    def get_stats(self, user_id: str, now: Optional[datetime] = None) -> DashboardStats:
        """Counts of classes, exams, enrolled students and exams open right now"""
        now_iso = (now or datetime.now(timezone.utc)).isoformat()
        try:
            class_ids = self._class_ids(user_id)

            total_students = 0
            if class_ids:
                enrollments = self.supabase.table("enrollments")\
                    .select("student_id")\
                    .in_("class_id", class_ids)\
                    .execute()
                total_students = len({row["student_id"] for row in enrollments.data or []})

            exams = self.supabase.table("exams")\
                .select("id", count="exact")\
                .eq("creator_id", user_id)\
                .execute()

            active = self.supabase.table("exams")\
                .select("id", count="exact")\
                .eq("creator_id", user_id)\
                .eq("is_published", True)\
                .lte("start_time", now_iso)\
                .gte("end_time", now_iso)\
                .execute()

            return DashboardStats(
                total_classes=len(class_ids),
                total_exams=_count(exams),
                total_students=total_students,
                active_exams=_count(active)
            )
        except Exception as e:
            logger.error(f"Error computing dashboard stats for {user_id}: {e}")
            raise HTTPException(status_code=500, detail=str(e))

    def get_recent(self, user_id: str, now: Optional[datetime] = None) -> DashboardRecent:
        """Newest classes with student counts and the next exams to run"""
        now_iso = (now or datetime.now(timezone.utc)).isoformat()
        try:
            classes = self.supabase.table("classes")\
                .select("id, name, description, created_at")\
                .eq("tutor_id", user_id)\
                .order("created_at", desc=True)\
                .limit(RECENT_CLASSES_LIMIT)\
                .execute().data or []
            counts = self._enrollment_counts([c["id"] for c in classes])

            exams = self.supabase.table("exams")\
                .select("id, title, class_id, start_time, end_time, duration_minutes, is_published")\
                .eq("creator_id", user_id)\
                .gte("start_time", now_iso)\
                .order("start_time")\
                .limit(UPCOMING_EXAMS_LIMIT)\
                .execute().data or []
            names: Dict[str, str] = {}
            if exams:
                rows = self.supabase.table("classes")\
                    .select("id, name")\
                    .in_("id", list({e["class_id"] for e in exams}))\
                    .execute().data or []
                names = {row["id"]: row["name"] for row in rows}

            return DashboardRecent(
                classes=[RecentClass(**c, student_count=counts.get(c["id"], 0)) for c in classes],
                upcoming_exams=[UpcomingExam(**e, class_name=names.get(e["class_id"])) for e in exams]
            )
        except Exception as e:
            logger.error(f"Error loading recent activity for {user_id}: {e}")
            raise HTTPException(status_code=500, detail=str(e))
