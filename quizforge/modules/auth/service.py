import hashlib
import time
from supabase import Client
from quizforge.database.supabase_client import SupabaseClient
from quizforge.modules.auth.schemas import (
    LoginRequest, RegisterRequest, TokenResponse, RegisterResponse,
    UserInfo, SessionInfo, OAuthUrlResponse
)
from quizforge.config import settings
from fastapi import HTTPException
from typing import Callable, Dict, Any, Optional
import logging

logger = logging.getLogger(__name__)

# In-memory cache for get_current_user to reduce Supabase auth calls (e.g. many parallel requests with same token)
_AUTH_USER_CACHE: Dict[str, tuple] = {}
_AUTH_CACHE_TTL_SEC = 60
_AUTH_CACHE_MAX_SIZE = 500

OAUTH_PROVIDERS = ("google", "github", "azure")


def clear_auth_cache():
    _AUTH_USER_CACHE.clear()


def invalidate_cached_user(user_id: str):
    """Drop cached entries for a user whose metadata just changed"""
    stale = [key for key, (data, _) in _AUTH_USER_CACHE.items() if data.get("id") == user_id]
    for key in stale:
        del _AUTH_USER_CACHE[key]


def user_to_dict(user: Any) -> Dict[str, Any]:
    return {
        "id": user.id,
        "email": user.email,
        "user_metadata": user.user_metadata or {},
        "app_metadata": user.app_metadata or {},
        "created_at": user.created_at,
        "updated_at": getattr(user, "updated_at", None)
    }


def to_user_info(user_data: Dict[str, Any]) -> UserInfo:
    metadata = user_data.get("user_metadata") or {}
    return UserInfo(
        id=user_data["id"],
        email=user_data.get("email"),
        name=metadata.get("full_name") or user_data.get("email"),
        role=metadata.get("role") or "teacher"
    )


def _to_session_info(session: Any) -> SessionInfo:
    return SessionInfo(
        access_token=session.access_token,
        refresh_token=session.refresh_token,
        expires_at=session.expires_at
    )


class AuthService:
    def __init__(
        self,
        supabase: Client,
        admin: Optional[Client] = None,
        session_factory: Optional[Callable[[], Client]] = None
    ):
        self.supabase = supabase
        self.admin = admin or supabase
        # sign-in style calls store a session on the client they run on
        self.session_factory = session_factory or SupabaseClient.create_session_client

    def register(self, register_data: RegisterRequest) -> RegisterResponse:
        """Register a new teacher using Supabase Auth"""
        try:
            auth_response = self.session_factory().auth.sign_up({
                "email": register_data.email,
                "password": register_data.password,
                "options": {
                    "data": {
                        "full_name": register_data.name,
                        "role": "teacher"
                    }
                }
            })

            if not auth_response.user:
                raise HTTPException(status_code=400, detail="Failed to register user")

            return RegisterResponse(
                user=to_user_info(user_to_dict(auth_response.user)),
                message="User registered successfully. Please check your email for verification."
            )
        except HTTPException:
            raise
        except Exception as e:
            error_message = str(e)
            logger.warning(f"Registration failed for {register_data.email}: {error_message}")
            if "already registered" in error_message.lower() or "already exists" in error_message.lower():
                raise HTTPException(status_code=400, detail="User already exists")
            raise HTTPException(status_code=400, detail=f"Registration failed: {error_message}")

    def login(self, login_data: LoginRequest) -> TokenResponse:
        """Authenticate user using Supabase Auth"""
        try:
            auth_response = self.session_factory().auth.sign_in_with_password({
                "email": login_data.email,
                "password": login_data.password
            })

            if not auth_response.user or not auth_response.session:
                raise HTTPException(status_code=401, detail="Invalid email or password")

            return TokenResponse(
                user=to_user_info(user_to_dict(auth_response.user)),
                session=_to_session_info(auth_response.session)
            )
        except HTTPException:
            raise
        except Exception as e:
            error_message = str(e)
            if "invalid" in error_message.lower() or "credentials" in error_message.lower():
                raise HTTPException(status_code=401, detail="Invalid email or password")
            logger.error(f"Login failed: {error_message}")
            raise HTTPException(status_code=500, detail=f"Login failed: {error_message}")

    def verify_password(self, email: str, password: str) -> bool:
        """True if the credentials sign in successfully"""
        try:
            auth_response = self.session_factory().auth.sign_in_with_password({
                "email": email,
                "password": password
            })
            return bool(auth_response.user)
        except Exception:
            return False

    def get_current_user(self, token: str) -> Dict[str, Any]:
        """Get current user details from Supabase Auth token. Uses short TTL cache to reduce auth API calls."""
        try:
            cache_key = hashlib.sha256(token.encode()).hexdigest()
            now = time.monotonic()
            if cache_key in _AUTH_USER_CACHE:
                user_data, expiry = _AUTH_USER_CACHE[cache_key]
                if now < expiry:
                    return user_data
                del _AUTH_USER_CACHE[cache_key]
            user_response = self.supabase.auth.get_user(jwt=token)
            if not user_response or not user_response.user:
                raise HTTPException(status_code=401, detail="Invalid or expired token")
            user_data = user_to_dict(user_response.user)
            if len(_AUTH_USER_CACHE) < _AUTH_CACHE_MAX_SIZE:
                _AUTH_USER_CACHE[cache_key] = (user_data, now + _AUTH_CACHE_TTL_SEC)
            return user_data
        except HTTPException:
            raise
        except Exception as e:
            error_msg = str(e)
            if "JWT" in error_msg or "expired" in error_msg.lower() or "invalid" in error_msg.lower():
                raise HTTPException(status_code=401, detail="Invalid or expired token")
            raise HTTPException(status_code=401, detail="Authentication failed")

    def logout(self, token: str) -> bool:
        """Logout user using Supabase Auth"""
        cache_key = hashlib.sha256(token.encode()).hexdigest()
        _AUTH_USER_CACHE.pop(cache_key, None)
        try:
            # revokes the caller's refresh tokens; the access token lives until it expires
            self.admin.auth.admin.sign_out(token)
            return True
        except Exception as e:
            logger.warning(f"Sign out failed: {e}")
            return False

    def refresh(self, refresh_token: str) -> SessionInfo:
        """Exchange a refresh token for a new session"""
        try:
            auth_response = self.session_factory().auth.refresh_session(refresh_token)
        except Exception as e:
            raise HTTPException(status_code=401, detail=str(e))
        if not auth_response or not auth_response.session:
            raise HTTPException(status_code=401, detail="Invalid refresh token")
        return _to_session_info(auth_response.session)

    def send_password_reset(self, email: str) -> bool:
        """Send a password reset email that links back to the frontend"""
        try:
            self.supabase.auth.reset_password_for_email(
                email,
                {"redirect_to": f"{settings.frontend_url}/auth/reset-password"}
            )
            return True
        except Exception as e:
            raise HTTPException(status_code=400, detail=str(e))

    def update_password(self, user_id: str, password: str) -> bool:
        """Set a new password (service role)"""
        try:
            response = self.admin.auth.admin.update_user_by_id(user_id, {"password": password})
        except Exception as e:
            raise HTTPException(status_code=400, detail=str(e))
        if not response or not response.user:
            raise HTTPException(status_code=404, detail="User not found")
        invalidate_cached_user(user_id)
        return True

    def update_metadata(self, user_id: str, metadata: Dict[str, Any]) -> Dict[str, Any]:
        """Replace user_metadata (service role) and return the updated user"""
        try:
            response = self.admin.auth.admin.update_user_by_id(user_id, {"user_metadata": metadata})
        except Exception as e:
            raise HTTPException(status_code=400, detail=str(e))
        if not response or not response.user:
            raise HTTPException(status_code=404, detail="User not found")
        invalidate_cached_user(user_id)
        return user_to_dict(response.user)

    def get_oauth_url(self, provider: str) -> OAuthUrlResponse:
        """Build the provider authorization URL that redirects back to the frontend"""
        if provider not in OAUTH_PROVIDERS:
            raise HTTPException(status_code=400, detail=f"Unsupported OAuth provider: {provider}")
        try:
            response = self.session_factory().auth.sign_in_with_oauth({
                "provider": provider,
                "options": {"redirect_to": f"{settings.frontend_url}/auth/confirm"}
            })
        except Exception as e:
            raise HTTPException(status_code=400, detail=str(e))
        return OAuthUrlResponse(provider=provider, url=response.url)
