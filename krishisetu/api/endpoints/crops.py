"""
Crop listing endpoints - RESTful resource (GET/POST/PUT/DELETE).
Design: Thin controller; service layer holds business logic.
"""

from fastapi import APIRouter, status

from krishisetu.config import get_settings
from krishisetu.core.dependencies import CurrentPrincipal
from krishisetu.db.repositories.crop_repository import CropRepository
from krishisetu.db.session import DbSession
from krishisetu.schemas.crop import CropCreate, CropCreated, CropResponse, CropUpdate, CropUpdated, MessageResponse
from krishisetu.services.crop_service import CropService

router = APIRouter()
settings = get_settings()


def _get_crop_service(session: DbSession) -> CropService:
    """Factory for service with repository injection (Dependency Inversion)."""
    return CropService(CropRepository(session), page_size=settings.listing_page_size)


@router.post("", response_model=CropCreated, status_code=status.HTTP_201_CREATED)
async def create_crop(session: DbSession, data: CropCreate, principal: CurrentPrincipal):
    """Create a listing owned by the caller. Starts in moderation status 'pending'."""
    svc = _get_crop_service(session)
    return CropCreated(inserted_id=await svc.create(principal, data))


@router.get("", response_model=list[CropResponse])
async def list_crops(session: DbSession):
    """Newest listings (public)."""
    return await _get_crop_service(session).list_recent()


@router.get("/{crop_id}", response_model=CropResponse)
async def get_crop(session: DbSession, crop_id: str):
    return await _get_crop_service(session).get(crop_id)


@router.put("/{crop_id}", response_model=CropUpdated)
async def update_crop(session: DbSession, crop_id: str, data: CropUpdate, principal: CurrentPrincipal):
    """Owner-only whitelisted patch."""
    crop = await _get_crop_service(session).update(principal, crop_id, data)
    return CropUpdated(crop=crop)


@router.delete("/{crop_id}", response_model=MessageResponse)
async def delete_crop(session: DbSession, crop_id: str, principal: CurrentPrincipal):
    """Owner-only. Removes the crop together with all its interests."""
    await _get_crop_service(session).delete(principal, crop_id)
    return MessageResponse(message="Crop deleted successfully")
