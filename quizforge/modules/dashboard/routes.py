from fastapi import APIRouter, Depends
from quizforge.database.supabase_client import get_supabase
from quizforge.modules.dashboard.schemas import DashboardStats, DashboardRecent
from quizforge.modules.dashboard.service import DashboardService
from quizforge.core.dependencies import get_current_user
from supabase import Client
from typing import Dict

router = APIRouter(prefix="/dashboard", tags=["dashboard"])


def get_dashboard_service(supabase: Client = Depends(get_supabase)) -> DashboardService:
    return DashboardService(supabase)


@router.get("/stats", response_model=DashboardStats)
async def get_stats(
    user_data: Dict = Depends(get_current_user),
    service: DashboardService = Depends(get_dashboard_service)
):
    return service.get_stats(user_data["id"])


@router.get("/recent", response_model=DashboardRecent)
async def get_recent(
    user_data: Dict = Depends(get_current_user),
    service: DashboardService = Depends(get_dashboard_service)
):
    """Recent classes and upcoming exams"""
    return service.get_recent(user_data["id"])
