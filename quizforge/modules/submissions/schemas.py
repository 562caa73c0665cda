from pydantic import BaseModel, Field, field_validator
from typing import Optional, List
from datetime import datetime


class AnswerSubmit(BaseModel):
    question_id: str
    answer: Optional[str] = None


class SubmissionCreate(BaseModel):
    exam_id: str = Field(min_length=1)
    access_code: str = Field(min_length=1)
    student_name: str
    matric_number: str
    started_at: Optional[datetime] = None
    answers: List[AnswerSubmit] = []

    @field_validator("student_name", "matric_number")
    @classmethod
    def strip_required(cls, value):
        value = value.strip()
        if not value:
            raise ValueError("Field cannot be empty")
        return value


class SubmissionResult(BaseModel):
    id: str
    exam_id: str
    score: int
    max_score: int
    percentage: int
    message: str


class SubmissionResponse(BaseModel):
    id: str
    exam_id: str
    student_name: str
    matric_number: str
    score: Optional[int] = None
    max_score: Optional[int] = None
    started_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class SubmissionDetailResponse(SubmissionResponse):
    answers: List[dict] = []
