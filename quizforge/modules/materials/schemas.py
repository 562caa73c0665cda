from pydantic import BaseModel, field_validator
from typing import Optional
from datetime import datetime


class MaterialCreate(BaseModel):
    title: str
    class_id: str
    description: Optional[str] = None

    @field_validator("title")
    @classmethod
    def title_not_empty(cls, value):
        value = value.strip()
        if not value:
            raise ValueError("Title is required")
        return value


class MaterialResponse(BaseModel):
    id: str
    title: str
    description: Optional[str] = None
    class_id: str
    tutor_id: str
    file_path: str
    file_url: Optional[str] = None
    file_type: Optional[str] = None
    file_size: Optional[int] = None
    created_at: Optional[datetime] = None
    class_name: Optional[str] = None

    class Config:
        from_attributes = True
