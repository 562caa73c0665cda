"""
Core dependencies for route protection and ownership checking
"""

from fastapi import Depends, HTTPException, Security, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from quizforge.database.supabase_client import get_supabase
from quizforge.modules.auth.service import AuthService
from supabase import Client
from typing import Optional, Dict, Any
import logging

logger = logging.getLogger(__name__)

# auto_error disabled so a missing header is reported as 401 rather than 403
security = HTTPBearer(auto_error=False)

TEACHER_ROLES = ("teacher", "admin")


def get_auth_service(supabase: Client = Depends(get_supabase)) -> AuthService:
    return AuthService(supabase)


def get_current_token(
    credentials: Optional[HTTPAuthorizationCredentials] = Security(security)
) -> str:
    """Extract JWT token from Authorization header"""
    if credentials is None or not credentials.credentials:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authentication token is required"
        )
    return credentials.credentials


def get_current_user(
    token: str = Depends(get_current_token),
    auth_service: AuthService = Depends(get_auth_service)
) -> Dict[str, Any]:
    """Resolve the current user from the bearer token"""
    return auth_service.get_current_user(token)


def get_optional_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Security(security),
    auth_service: AuthService = Depends(get_auth_service)
) -> Optional[Dict[str, Any]]:
    """Current user, or None when the request carries no valid session"""
    if credentials is None or not credentials.credentials:
        return None
    try:
        return auth_service.get_current_user(credentials.credentials)
    except HTTPException:
        return None


def get_user_role(user_data: Dict[str, Any]) -> str:
    """Role from user_metadata; accounts registered without one are teachers"""
    metadata = user_data.get("user_metadata") or {}
    return metadata.get("role") or "teacher"


def require_teacher(user_data: Dict = Depends(get_current_user)) -> Dict[str, Any]:
    """Dependency rejecting anyone who is not a teacher or admin"""
    if get_user_role(user_data) not in TEACHER_ROLES:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Access denied: Teacher privileges required"
        )
    return user_data


def require_admin(user_data: Dict = Depends(get_current_user)) -> Dict[str, Any]:
    """Dependency rejecting anyone who is not an admin"""
    if get_user_role(user_data) != "admin":
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Access denied: Admin privileges required"
        )
    return user_data


def _fetch_one(supabase: Client, table: str, columns: str, row_id: str) -> Optional[Dict[str, Any]]:
    try:
        result = supabase.table(table)\
            .select(columns)\
            .eq("id", row_id)\
            .maybe_single()\
            .execute()
    except Exception as e:
        logger.error(f"Error fetching {table} {row_id}: {e}")
        raise HTTPException(status_code=500, detail=str(e))
    if result is None or not result.data:
        return None
    return result.data


def check_class_owner(
    class_id: str,
    user_data: Dict[str, Any],
    supabase: Client,
    action: str = "access"
) -> Dict[str, Any]:
    """Return the class row if the user is its tutor; 404 / 403 otherwise"""
    class_row = _fetch_one(supabase, "classes", "*", class_id)
    if not class_row:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Class not found")
    if class_row.get("tutor_id") != user_data["id"]:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=f"You do not have permission to {action} this class"
        )
    return class_row


def check_exam_owner(
    exam_id: str,
    user_data: Dict[str, Any],
    supabase: Client,
    action: str = "access"
) -> Dict[str, Any]:
    """Return the exam row if the user created it; 404 / 403 otherwise"""
    exam_row = _fetch_one(supabase, "exams", "*", exam_id)
    if not exam_row:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Exam not found")
    if exam_row.get("creator_id") != user_data["id"]:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=f"You do not have permission to {action} this exam"
        )
    return exam_row
