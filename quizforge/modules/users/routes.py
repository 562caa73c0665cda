from fastapi import APIRouter, Depends, UploadFile, File
from quizforge.config import settings
from quizforge.database.supabase_client import get_supabase, get_service_supabase, get_session_factory
from quizforge.database.storage import SupabaseStorage
from quizforge.modules.auth.service import AuthService
from quizforge.modules.users.schemas import (
    ProfileResponse, ProfileUpdate, PasswordChangeRequest,
    NotificationSettingsUpdate, NotificationSettingsResponse,
    AppearanceSettingsUpdate, AppearanceSettingsResponse, AvatarResponse
)
from quizforge.modules.users.service import UserService
from quizforge.core.dependencies import get_current_user
from supabase import Client
from typing import Callable, Dict

router = APIRouter(prefix="/user", tags=["user"])


def get_user_service(
    supabase: Client = Depends(get_supabase),
    admin: Client = Depends(get_service_supabase),
    session_factory: Callable[[], Client] = Depends(get_session_factory)
) -> UserService:
    return UserService(
        supabase,
        AuthService(supabase, admin, session_factory),
        SupabaseStorage(supabase, settings.avatars_bucket)
    )


@router.get("/profile", response_model=ProfileResponse)
async def get_profile(
    current_user: Dict = Depends(get_current_user),
    service: UserService = Depends(get_user_service)
):
    """Get the current user's profile"""
    return service.get_profile(current_user)


@router.patch("/profile", response_model=ProfileResponse)
async def update_profile(
    profile_data: ProfileUpdate,
    current_user: Dict = Depends(get_current_user),
    service: UserService = Depends(get_user_service)
):
    """Update the current user's profile"""
    return service.update_profile(current_user, profile_data)


@router.post("/password", status_code=200)
async def change_password(
    password_data: PasswordChangeRequest,
    current_user: Dict = Depends(get_current_user),
    service: UserService = Depends(get_user_service)
):
    """Change password after verifying the current one"""
    service.change_password(current_user, password_data)
    return {"message": "Password updated successfully"}


@router.patch("/notifications", response_model=NotificationSettingsResponse)
async def update_notifications(
    notification_data: NotificationSettingsUpdate,
    current_user: Dict = Depends(get_current_user),
    service: UserService = Depends(get_user_service)
):
    """Update notification settings"""
    return NotificationSettingsResponse(
        notifications=service.update_notifications(current_user, notification_data)
    )


@router.get("/appearance", response_model=AppearanceSettingsResponse)
async def get_appearance(
    current_user: Dict = Depends(get_current_user),
    service: UserService = Depends(get_user_service)
):
    """Get appearance settings, defaults applied"""
    return service.get_appearance(current_user)


@router.patch("/appearance", response_model=AppearanceSettingsResponse)
async def update_appearance(
    appearance_data: AppearanceSettingsUpdate,
    current_user: Dict = Depends(get_current_user),
    service: UserService = Depends(get_user_service)
):
    """Update theme, font size and contrast"""
    return service.update_appearance(current_user, appearance_data)


@router.post("/avatar", response_model=AvatarResponse)
async def upload_avatar(
    file: UploadFile = File(...),
    current_user: Dict = Depends(get_current_user),
    service: UserService = Depends(get_user_service)
):
    """Upload a new avatar image"""
    content = await file.read()
    return AvatarResponse(avatar=service.upload_avatar(current_user, content, file.content_type))
