from pydantic import BaseModel, Field, field_validator
from typing import Optional, Literal, Dict, Any


class ProfileResponse(BaseModel):
    id: str
    email: Optional[str] = None
    name: Optional[str] = None
    role: str = "teacher"
    avatar: Optional[str] = None
    institution: Optional[str] = None
    department: Optional[str] = None
    matric_number: Optional[str] = None


class ProfileUpdate(BaseModel):
    name: Optional[str] = None
    institution: Optional[str] = None
    department: Optional[str] = None

    @field_validator("name")
    @classmethod
    def name_not_empty(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return value
        value = value.strip()
        if len(value) < 2:
            raise ValueError("Name must be at least 2 characters.")
        return value


class PasswordChangeRequest(BaseModel):
    current_password: str = Field(min_length=1)
    new_password: str = Field(min_length=6)


class NotificationSettingsUpdate(BaseModel):
    email_notifications: Optional[bool] = None
    exam_submissions: Optional[bool] = None
    new_students: Optional[bool] = None
    system_updates: Optional[bool] = None


class NotificationSettingsResponse(BaseModel):
    notifications: Dict[str, Any]


class AppearanceSettingsUpdate(BaseModel):
    theme: Optional[Literal["light", "dark", "system"]] = None
    font_size: Optional[Literal["small", "medium", "large"]] = None
    high_contrast: Optional[bool] = None


class AppearanceSettingsResponse(BaseModel):
    theme: Literal["light", "dark", "system"]
    font_size: Literal["small", "medium", "large"]
    high_contrast: bool
    storage_key: str


class AvatarResponse(BaseModel):
    avatar: str
