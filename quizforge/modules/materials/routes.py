from fastapi import APIRouter, Depends, HTTPException, UploadFile, File, Form
from pydantic import ValidationError
from quizforge.config import settings
from quizforge.database.supabase_client import get_supabase
from quizforge.database.storage import SupabaseStorage
from quizforge.modules.materials.schemas import MaterialCreate, MaterialResponse
from quizforge.modules.materials.service import MaterialService
from quizforge.core.dependencies import get_current_user, require_teacher, check_class_owner
from supabase import Client
from typing import List, Dict, Optional

router = APIRouter(prefix="/materials", tags=["materials"])


def get_material_service(supabase: Client = Depends(get_supabase)) -> MaterialService:
    return MaterialService(supabase, SupabaseStorage(supabase, settings.documents_bucket))


@router.get("", response_model=List[MaterialResponse])
async def list_materials(
    class_id: Optional[str] = None,
    user_data: Dict = Depends(get_current_user),
    service: MaterialService = Depends(get_material_service)
):
    """List materials uploaded by the current user"""
    return service.list_materials(user_data["id"], class_id=class_id)


@router.post("", response_model=MaterialResponse, status_code=201)
async def upload_material(
    file: UploadFile = File(...),
    title: str = Form(...),
    class_id: str = Form(...),
    description: Optional[str] = Form(None),
    user_data: Dict = Depends(require_teacher),
    supabase: Client = Depends(get_supabase),
    service: MaterialService = Depends(get_material_service)
):
    """
    Upload a learning material (pdf, doc, docx, txt, ppt, pptx) for one of
    the user's classes. The file goes to the documents bucket and the
    returned row carries its public URL.
    """
    try:
        material_data = MaterialCreate(title=title, class_id=class_id, description=description)
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=e.errors()[0]["msg"])
    check_class_owner(material_data.class_id, user_data, supabase, action="upload materials to")
    return await service.upload_material(material_data, file, user_data["id"])


@router.get("/{material_id}", response_model=MaterialResponse)
async def get_material(
    material_id: str,
    user_data: Dict = Depends(get_current_user),
    service: MaterialService = Depends(get_material_service)
):
    material_row = service.get_material_row(material_id)
    service.check_owner(material_row, user_data["id"], action="view")
    return service.get_material(material_row)


@router.delete("/{material_id}", status_code=204)
async def delete_material(
    material_id: str,
    user_data: Dict = Depends(require_teacher),
    service: MaterialService = Depends(get_material_service)
):
    """Delete a material and its stored file"""
    material_row = service.get_material_row(material_id)
    service.check_owner(material_row, user_data["id"], action="delete")
    service.delete_material(material_row)
    return None
