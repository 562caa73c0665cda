from pydantic import BaseModel, field_validator
from typing import Optional, List
from datetime import datetime
from uuid import UUID


def _validate_class_name(value: Optional[str]) -> Optional[str]:
    if value is None:
        return value
    value = value.strip()
    if len(value) < 2:
        raise ValueError("Class name must be at least 2 characters.")
    return value


class ClassCreate(BaseModel):
    name: str
    description: Optional[str] = None
    institution_id: Optional[str] = None

    @field_validator("name")
    @classmethod
    def name_min_length(cls, value):
        return _validate_class_name(value)


class ClassUpdate(BaseModel):
    name: Optional[str] = None
    description: Optional[str] = None

    @field_validator("name")
    @classmethod
    def name_min_length(cls, value):
        return _validate_class_name(value)


class ClassResponse(BaseModel):
    id: str
    name: str
    description: Optional[str] = None
    tutor_id: str
    institution_id: Optional[str] = None
    created_at: datetime

    class Config:
        from_attributes = True


class ClassDetailResponse(ClassResponse):
    students: List[dict] = []
    exams: List[dict] = []


class EnrollStudentsRequest(BaseModel):
    student_ids: List[UUID]


class EnrollStudentsResponse(BaseModel):
    class_id: str
    enrolled: int
    message: str
