"""
Public theme endpoint
"""
from fastapi import APIRouter, Depends

from storefront.api.deps import get_admin_service
from storefront.schemas.admin import ThemeListResponse
from storefront.services.admin_service import AdminService

router = APIRouter(prefix="/themes", tags=["themes"])


@router.get("", response_model=ThemeListResponse, summary="List active themes")
def list_active_themes(service: AdminService = Depends(get_admin_service)):
    return service.list_active_themes()
