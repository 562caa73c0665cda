from pydantic import BaseModel, Field, field_validator, model_validator
from typing import Optional, List
from datetime import datetime, timezone


def as_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Naive datetimes are taken to be UTC"""
    if value is None or value.tzinfo is not None:
        return value
    return value.replace(tzinfo=timezone.utc)


def _validate_title(value: Optional[str]) -> Optional[str]:
    if value is None:
        return value
    value = value.strip()
    if len(value) < 2:
        raise ValueError("Exam title must be at least 2 characters.")
    return value


class ExamCreate(BaseModel):
    title: str
    class_id: str = Field(min_length=1)
    description: Optional[str] = None
    duration_minutes: int = Field(60, ge=1, le=300)
    start_time: datetime
    end_time: datetime
    shuffle_questions: bool = False
    max_attempts: int = Field(1, ge=1)

    @field_validator("title")
    @classmethod
    def title_min_length(cls, value):
        return _validate_title(value)

    @field_validator("start_time", "end_time")
    @classmethod
    def normalise_timezone(cls, value):
        return as_utc(value)

    @model_validator(mode="after")
    def end_after_start(self):
        if self.end_time <= self.start_time:
            raise ValueError("End time must be after start time")
        return self


class ExamUpdate(BaseModel):
    title: Optional[str] = None
    description: Optional[str] = None
    duration_minutes: Optional[int] = Field(None, ge=1, le=300)
    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None
    shuffle_questions: Optional[bool] = None
    max_attempts: Optional[int] = Field(None, ge=1)

    @field_validator("title")
    @classmethod
    def title_min_length(cls, value):
        return _validate_title(value)

    @field_validator("start_time", "end_time")
    @classmethod
    def normalise_timezone(cls, value):
        return as_utc(value)

    @model_validator(mode="after")
    def end_after_start(self):
        if self.start_time and self.end_time and self.end_time <= self.start_time:
            raise ValueError("End time must be after start time")
        return self


class ExamResponse(BaseModel):
    id: str
    title: str
    description: Optional[str] = None
    class_id: str
    creator_id: str
    duration_minutes: int = 60
    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None
    is_published: bool = False
    shuffle_questions: bool = False
    max_attempts: int = 1
    access_code: Optional[str] = None
    published_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    class_name: Optional[str] = None

    class Config:
        from_attributes = True


class ExamDetailResponse(ExamResponse):
    questions: List[dict] = []


class ExamPublishResponse(BaseModel):
    exam: ExamResponse
    access_code: str
    shareable_url: str
    message: str


class StudentExamInfo(BaseModel):
    id: str
    title: str
    description: Optional[str] = None
    duration_minutes: int
    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None
    class_name: Optional[str] = None


class ExamAccessResponse(BaseModel):
    exam: StudentExamInfo
    questions: List[dict]


class ScheduleEvent(BaseModel):
    id: str
    title: str
    start_time: datetime
    end_time: datetime
    class_id: str
    class_name: Optional[str] = None
    is_published: bool = False
