from pydantic import BaseModel, EmailStr, Field, field_validator
from typing import Optional, List, Union
import re


class StudentClassInfo(BaseModel):
    id: str
    name: str


class StudentResponse(BaseModel):
    id: str
    full_name: Optional[str] = None
    matric_number: Optional[str] = None
    avatar_url: Optional[str] = None
    classes: List[StudentClassInfo] = []


class StudentDetailResponse(StudentResponse):
    institution: Optional[str] = None
    department: Optional[str] = None
    submissions: List[dict] = []


class InviteStudentsRequest(BaseModel):
    """emails may be a list or a single comma / newline separated string"""
    emails: List[EmailStr] = Field(min_length=1)
    class_id: Optional[str] = None
    message: Optional[str] = None

    @field_validator("emails", mode="before")
    @classmethod
    def split_emails(cls, value: Union[str, List[str]]):
        if isinstance(value, str):
            value = re.split(r"[,\n]", value)
        if isinstance(value, list):
            value = [v.strip() for v in value if isinstance(v, str) and v.strip()]
        return value


class InviteStudentsResponse(BaseModel):
    invited: int
    emails: List[str]
    message: str


class NewStudent(BaseModel):
    name: str = Field(min_length=1)
    matric_number: str = Field(min_length=1)
    email: Optional[EmailStr] = None

    @field_validator("name", "matric_number")
    @classmethod
    def strip_required(cls, value):
        value = value.strip()
        if not value:
            raise ValueError("Field cannot be empty")
        return value


class CreateStudentsRequest(BaseModel):
    students: List[NewStudent] = Field(min_length=1)
    class_id: Optional[str] = None


class CreatedStudent(BaseModel):
    id: str
    name: str
    matric_number: str
    email: str


class StudentCreateError(BaseModel):
    matric_number: str
    error: str


class CreateStudentsResponse(BaseModel):
    created: List[CreatedStudent]
    errors: List[StudentCreateError] = []
    message: str
