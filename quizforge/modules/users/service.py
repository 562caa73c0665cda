from supabase import Client
from quizforge.config import settings
from quizforge.database.storage import SupabaseStorage
from quizforge.modules.auth.service import AuthService
from quizforge.modules.users.schemas import (
    ProfileResponse, ProfileUpdate, PasswordChangeRequest,
    NotificationSettingsUpdate, AppearanceSettingsUpdate, AppearanceSettingsResponse
)
from typing import Dict, Any, Optional
from fastapi import HTTPException
from datetime import datetime, timezone
import uuid
import logging

logger = logging.getLogger(__name__)

AVATAR_CONTENT_TYPES = {
    "image/png": "png",
    "image/jpeg": "jpg",
    "image/gif": "gif",
    "image/webp": "webp",
}
MAX_AVATAR_BYTES = 2 * 1024 * 1024

DEFAULT_NOTIFICATIONS = {
    "email_notifications": True,
    "exam_submissions": True,
    "new_students": True,
    "system_updates": False,
}


def load_appearance(metadata: Dict[str, Any]) -> AppearanceSettingsResponse:
    """Stored appearance settings with unset values filled from defaults"""
    stored = metadata.get("appearance") or {}
    return AppearanceSettingsResponse(
        theme=stored.get("theme") or settings.default_theme,
        font_size=stored.get("font_size") or "medium",
        high_contrast=bool(stored.get("high_contrast", False)),
        storage_key=settings.theme_storage_key
    )


class UserService:
    def __init__(self, supabase: Client, auth_service: AuthService, storage: Optional[SupabaseStorage] = None):
        self.supabase = supabase
        self.auth_service = auth_service
        self.storage = storage

    def _get_profile_row(self, user_id: str) -> Dict[str, Any]:
        try:
            result = self.supabase.table("profiles")\
                .select("*")\
                .eq("id", user_id)\
                .maybe_single()\
                .execute()
            if result is None or not result.data:
                return {}
            return result.data
        except Exception as e:
            logger.warning(f"Could not load profile row for {user_id}: {e}")
            return {}

    def _upsert_profile(self, user_id: str, values: Dict[str, Any]):
        row = {"id": user_id, "updated_at": datetime.now(timezone.utc).isoformat()}
        row.update(values)
        try:
            self.supabase.table("profiles").upsert(row, on_conflict="id").execute()
        except Exception as e:
            logger.error(f"Error upserting profile for {user_id}: {e}")
            raise HTTPException(status_code=500, detail=str(e))

    def get_profile(self, user_data: Dict[str, Any]) -> ProfileResponse:
        """Profile view: auth metadata merged with the profiles row"""
        metadata = user_data.get("user_metadata") or {}
        profile = self._get_profile_row(user_data["id"])
        return ProfileResponse(
            id=user_data["id"],
            email=user_data.get("email"),
            name=profile.get("full_name") or metadata.get("full_name") or user_data.get("email"),
            role=metadata.get("role") or "teacher",
            avatar=profile.get("avatar_url") or metadata.get("avatar"),
            institution=profile.get("institution") or metadata.get("institution"),
            department=profile.get("department") or metadata.get("department"),
            matric_number=profile.get("matric_number")
        )

    def update_profile(self, user_data: Dict[str, Any], profile_data: ProfileUpdate) -> ProfileResponse:
        """Update name / institution / department"""
        metadata = dict(user_data.get("user_metadata") or {})
        profile_values = {}
        if profile_data.name:
            metadata["full_name"] = profile_data.name
            profile_values["full_name"] = profile_data.name
        if profile_data.institution is not None:
            metadata["institution"] = profile_data.institution
            profile_values["institution"] = profile_data.institution
        if profile_data.department is not None:
            metadata["department"] = profile_data.department
            profile_values["department"] = profile_data.department

        updated_user = self.auth_service.update_metadata(user_data["id"], metadata)
        if profile_values:
            self._upsert_profile(user_data["id"], profile_values)
        return self.get_profile(updated_user)

    def change_password(self, user_data: Dict[str, Any], password_data: PasswordChangeRequest) -> bool:
        """Verify the current password, then set the new one"""
        if not self.auth_service.verify_password(user_data["email"], password_data.current_password):
            raise HTTPException(status_code=401, detail="Current password is incorrect")
        return self.auth_service.update_password(user_data["id"], password_data.new_password)

    def update_notifications(self, user_data: Dict[str, Any], notification_data: NotificationSettingsUpdate) -> Dict[str, Any]:
        metadata = dict(user_data.get("user_metadata") or {})
        notifications = dict(DEFAULT_NOTIFICATIONS)
        notifications.update(metadata.get("notifications") or {})
        notifications.update(notification_data.model_dump(exclude_none=True))
        metadata["notifications"] = notifications
        updated_user = self.auth_service.update_metadata(user_data["id"], metadata)
        return updated_user["user_metadata"].get("notifications", notifications)

    def get_appearance(self, user_data: Dict[str, Any]) -> AppearanceSettingsResponse:
        return load_appearance(user_data.get("user_metadata") or {})

    def update_appearance(self, user_data: Dict[str, Any], appearance_data: AppearanceSettingsUpdate) -> AppearanceSettingsResponse:
        metadata = dict(user_data.get("user_metadata") or {})
        appearance = dict(metadata.get("appearance") or {})
        appearance.update(appearance_data.model_dump(exclude_none=True))
        metadata["appearance"] = appearance
        updated_user = self.auth_service.update_metadata(user_data["id"], metadata)
        return load_appearance(updated_user["user_metadata"])

    def upload_avatar(self, user_data: Dict[str, Any], content: bytes, content_type: Optional[str]) -> str:
        """Store an avatar image and point the profile at its public URL"""
        extension = AVATAR_CONTENT_TYPES.get(content_type or "")
        if not extension:
            raise HTTPException(status_code=400, detail="Avatar must be a PNG, JPEG, GIF or WebP image")
        if not content:
            raise HTTPException(status_code=400, detail="Avatar file is empty")
        if len(content) > MAX_AVATAR_BYTES:
            raise HTTPException(status_code=400, detail="Avatar must be 2 MB or smaller")
        if self.storage is None:
            raise HTTPException(status_code=500, detail="Avatar storage is not configured")

        key = f"{user_data['id']}/{uuid.uuid4()}.{extension}"
        try:
            avatar_url = self.storage.upload_file(content, key, content_type)
        except Exception as e:
            raise HTTPException(status_code=500, detail=f"Failed to upload avatar: {str(e)}")

        metadata = dict(user_data.get("user_metadata") or {})
        metadata["avatar"] = avatar_url
        self.auth_service.update_metadata(user_data["id"], metadata)
        self._upsert_profile(user_data["id"], {"avatar_url": avatar_url})
        return avatar_url
