from pydantic import BaseModel, EmailStr, Field, field_validator
from typing import Optional


class LoginRequest(BaseModel):
    email: EmailStr
    password: str = Field(min_length=1)


class RegisterRequest(BaseModel):
    email: EmailStr
    password: str = Field(min_length=6)
    name: str

    @field_validator("name")
    @classmethod
    def name_required(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Name is required")
        return value


class UserInfo(BaseModel):
    id: str
    email: Optional[str] = None
    name: Optional[str] = None
    role: str = "teacher"


class SessionInfo(BaseModel):
    access_token: str
    refresh_token: Optional[str] = None
    expires_at: Optional[int] = None
    token_type: str = "bearer"


class TokenResponse(BaseModel):
    user: UserInfo
    session: SessionInfo


class RegisterResponse(BaseModel):
    user: UserInfo
    message: str


class RefreshRequest(BaseModel):
    refresh_token: str = Field(min_length=1)


class ForgotPasswordRequest(BaseModel):
    email: EmailStr


class ResetPasswordRequest(BaseModel):
    password: str = Field(min_length=6)


class SessionStatusResponse(BaseModel):
    authenticated: bool
    user: Optional[UserInfo] = None


class OAuthUrlResponse(BaseModel):
    provider: str
    url: str
