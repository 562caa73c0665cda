from fastapi import APIRouter, Depends
from quizforge.database.supabase_client import get_supabase, get_service_supabase, get_session_factory
from quizforge.modules.auth.schemas import (
    LoginRequest, RegisterRequest, TokenResponse, RegisterResponse, UserInfo,
    RefreshRequest, SessionInfo, ForgotPasswordRequest, ResetPasswordRequest,
    SessionStatusResponse, OAuthUrlResponse
)
from quizforge.modules.auth.service import AuthService, to_user_info
from quizforge.core.dependencies import get_current_user, get_current_token, get_optional_user
from supabase import Client
from typing import Callable, Dict, Optional

router = APIRouter(prefix="/auth", tags=["auth"])


def get_auth_service(
    supabase: Client = Depends(get_supabase),
    admin: Client = Depends(get_service_supabase),
    session_factory: Callable[[], Client] = Depends(get_session_factory)
) -> AuthService:
    return AuthService(supabase, admin, session_factory)


@router.post("/register", response_model=RegisterResponse, status_code=201)
async def register(
    register_data: RegisterRequest,
    service: AuthService = Depends(get_auth_service)
):
    """Register a new teacher account"""
    return service.register(register_data)


@router.post("/login", response_model=TokenResponse)
async def login(
    login_data: LoginRequest,
    service: AuthService = Depends(get_auth_service)
):
    """Login and get access token"""
    return service.login(login_data)


@router.post("/logout", status_code=200)
async def logout(
    token: str = Depends(get_current_token),
    current_user: Dict = Depends(get_current_user),
    service: AuthService = Depends(get_auth_service)
):
    """Logout and invalidate token"""
    service.logout(token)
    return {"message": "Logout successful"}


@router.get("/me", response_model=UserInfo)
async def me(current_user: Dict = Depends(get_current_user)):
    """Get current authenticated user"""
    return to_user_info(current_user)


@router.get("/session", response_model=SessionStatusResponse)
async def session_status(current_user: Optional[Dict] = Depends(get_optional_user)):
    """Whether the caller holds a valid session (used by public-only pages to redirect)"""
    if current_user is None:
        return SessionStatusResponse(authenticated=False)
    return SessionStatusResponse(authenticated=True, user=to_user_info(current_user))


@router.post("/refresh", response_model=SessionInfo)
async def refresh(
    refresh_data: RefreshRequest,
    service: AuthService = Depends(get_auth_service)
):
    """Refresh access token"""
    return service.refresh(refresh_data.refresh_token)


@router.post("/forgot-password", status_code=200)
async def forgot_password(
    request: ForgotPasswordRequest,
    service: AuthService = Depends(get_auth_service)
):
    """Send password reset email"""
    service.send_password_reset(request.email)
    return {"message": "Password reset email sent"}


@router.post("/reset-password", status_code=200)
async def reset_password(
    request: ResetPasswordRequest,
    current_user: Dict = Depends(get_current_user),
    service: AuthService = Depends(get_auth_service)
):
    """Set a new password for the user holding the reset session"""
    service.update_password(current_user["id"], request.password)
    return {"message": "Password updated successfully"}


@router.get("/oauth/{provider}", response_model=OAuthUrlResponse)
async def oauth_url(
    provider: str,
    service: AuthService = Depends(get_auth_service)
):
    """Get the OAuth authorization URL for a provider"""
    return service.get_oauth_url(provider)
