from pydantic import BaseModel
from typing import Optional, List
from datetime import datetime


class DashboardStats(BaseModel):
    total_classes: int
    total_exams: int
    total_students: int
    active_exams: int


class RecentClass(BaseModel):
    id: str
    name: str
    description: Optional[str] = None
    student_count: int = 0
    created_at: Optional[datetime] = None


class UpcomingExam(BaseModel):
    id: str
    title: str
    class_id: str
    class_name: Optional[str] = None
    start_time: datetime
    end_time: Optional[datetime] = None
    duration_minutes: Optional[int] = None
    is_published: bool = False


class DashboardRecent(BaseModel):
    classes: List[RecentClass]
    upcoming_exams: List[UpcomingExam]
