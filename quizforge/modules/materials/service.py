from supabase import Client
from quizforge.config import settings
from quizforge.database.storage import SupabaseStorage
from quizforge.modules.materials.schemas import MaterialCreate, MaterialResponse
from fastapi import HTTPException, UploadFile
from typing import List, Dict, Any, Optional
import os
import re
import uuid
import logging

logger = logging.getLogger(__name__)


def safe_filename(filename: str) -> str:
    """Basename with anything outside [A-Za-z0-9._-] replaced by '_'"""
    name = os.path.basename(filename.replace("\\", "/"))
    return re.sub(r"[^A-Za-z0-9._-]", "_", name) or "file"


def file_extension(filename: str) -> str:
    return os.path.splitext(filename)[1].lstrip(".").lower()


class MaterialService:
    def __init__(self, supabase: Client, storage: Optional[SupabaseStorage] = None):
        self.supabase = supabase
        self.storage = storage

    def _class_names(self, class_ids: List[str]) -> Dict[str, str]:
        if not class_ids:
            return {}
        result = self.supabase.table("classes")\
            .select("id, name")\
            .in_("id", list(set(class_ids)))\
            .execute()
        return {row["id"]: row["name"] for row in result.data or []}

    def list_materials(self, tutor_id: str, class_id: Optional[str] = None) -> List[MaterialResponse]:
        """Materials uploaded by the tutor, newest first"""
        try:
            query = self.supabase.table("materials").select("*").eq("tutor_id", tutor_id)
            if class_id:
                query = query.eq("class_id", class_id)
            rows = query.order("created_at", desc=True).execute().data or []
            names = self._class_names([row["class_id"] for row in rows])
            return [MaterialResponse(**row, class_name=names.get(row["class_id"])) for row in rows]
        except Exception as e:
            logger.error(f"Error listing materials for {tutor_id}: {e}")
            raise HTTPException(status_code=500, detail=str(e))

    def get_material_row(self, material_id: str) -> Dict[str, Any]:
        try:
            result = self.supabase.table("materials")\
                .select("*")\
                .eq("id", material_id)\
                .maybe_single()\
                .execute()
        except Exception as e:
            logger.error(f"Error fetching material {material_id}: {e}")
            raise HTTPException(status_code=500, detail=str(e))
        if result is None or not result.data:
            raise HTTPException(status_code=404, detail="Material not found")
        return result.data

    def check_owner(self, material_row: Dict[str, Any], user_id: str, action: str = "access"):
        if material_row.get("tutor_id") != user_id:
            raise HTTPException(status_code=403, detail=f"You do not have permission to {action} this material")

    def get_material(self, material_row: Dict[str, Any]) -> MaterialResponse:
        class_name = self._class_names([material_row["class_id"]]).get(material_row["class_id"])
        return MaterialResponse(**material_row, class_name=class_name)

    async def upload_material(
        self,
        material_data: MaterialCreate,
        file: UploadFile,
        tutor_id: str
    ) -> MaterialResponse:
        """Check type and size, store the file in the documents bucket and record it"""
        filename = safe_filename(file.filename or "")
        extension = file_extension(filename)
        allowed = settings.get_allowed_material_extensions()
        if extension not in allowed:
            raise HTTPException(
                status_code=400,
                detail=f"Unsupported file type. Allowed: {', '.join(allowed)}"
            )

        limit = settings.max_upload_size_bytes
        too_large = HTTPException(
            status_code=400,
            detail=f"File exceeds the {settings.max_upload_size_mb} MB limit"
        )
        if file.size is not None and file.size > limit:
            raise too_large
        # never buffer more than one byte past the limit
        content = await file.read(limit + 1)
        if not content:
            raise HTTPException(status_code=400, detail="Uploaded file is empty")
        if len(content) > limit:
            raise too_large
        if self.storage is None:
            raise HTTPException(status_code=500, detail="Document storage is not configured")

        file_path = f"{material_data.class_id}/{uuid.uuid4()}-{filename}"
        try:
            file_url = self.storage.upload_file(
                content, file_path, file.content_type or "application/octet-stream"
            )
        except Exception as e:
            raise HTTPException(status_code=500, detail=f"Failed to upload file: {str(e)}")
        logger.info(f"Stored material {file_path} ({len(content)} bytes)")

        try:
            result = self.supabase.table("materials").insert({
                "title": material_data.title,
                "description": material_data.description,
                "class_id": material_data.class_id,
                "tutor_id": tutor_id,
                "file_path": file_path,
                "file_url": file_url,
                "file_type": extension,
                "file_size": len(content)
            }).execute()
            if not result.data:
                raise HTTPException(status_code=500, detail="Failed to save material")
        except Exception as e:
            logger.error(f"Error saving material row, removing {file_path}: {e}")
            self.storage.delete_file(file_path)
            if isinstance(e, HTTPException):
                raise
            raise HTTPException(status_code=400, detail=str(e))

        return self.get_material(result.data[0])

    def delete_material(self, material_row: Dict[str, Any]) -> bool:
        """Remove the stored file, then the row"""
        if self.storage is not None and material_row.get("file_path"):
            if not self.storage.delete_file(material_row["file_path"]):
                logger.warning(f"Stored file {material_row['file_path']} could not be removed")
        try:
            result = self.supabase.table("materials")\
                .delete()\
                .eq("id", material_row["id"])\
                .execute()
            return len(result.data) > 0
        except Exception as e:
            logger.error(f"Error deleting material {material_row['id']}: {e}")
            raise HTTPException(status_code=400, detail=str(e))
