"""
Crop service - listing CRUD (SOLID: Single Responsibility).
Challenge: Keep controllers thin; owner identity comes from the verified
principal and never changes afterwards.
"""

import logging

from krishisetu.core.exceptions import InvalidInput, NotFound
from krishisetu.core.ownership import ensure_owner
from krishisetu.db.models.crop import Crop
from krishisetu.db.repositories.crop_repository import CropRepository
from krishisetu.schemas.auth import Principal
from krishisetu.schemas.crop import CropCreate, CropResponse, CropUpdate, InterestResponse, OwnerInfo

logger = logging.getLogger(__name__)


def crop_to_response(crop: Crop) -> CropResponse:
    """Map model to API response with the owner embedded."""
    return CropResponse(
        id=crop.id,
        name=crop.name,
        type=crop.type,
        price_per_unit=crop.price_per_unit,
        unit=crop.unit,
        quantity=crop.quantity,
        description=crop.description,
        location=crop.location,
        image=crop.image,
        owner=OwnerInfo(owner_email=crop.owner_email, owner_name=crop.owner_name),
        status=crop.status,
        created_at=crop.created_at,
        interests=[InterestResponse.model_validate(i, from_attributes=True) for i in crop.interests],
    )


class CropService:
    """Handles listing use cases: create, read, owner-only update and delete."""

    def __init__(self, crop_repo: CropRepository, page_size: int = 50):
        self.crop_repo = crop_repo
        self.page_size = page_size

    async def load(self, crop_id: str) -> Crop:
        crop = await self.crop_repo.get_by_id(crop_id)
        if not crop:
            raise NotFound("Crop not found")
        return crop

    async def create(self, principal: Principal, data: CropCreate) -> str:
        if data.owner.owner_email != principal.email:
            raise InvalidInput("owner.ownerEmail must be the signed-in user")
        crop = Crop(
            name=data.name,
            type=data.type,
            price_per_unit=data.price_per_unit,
            unit=data.unit,
            quantity=data.quantity,
            description=data.description,
            location=data.location,
            image=data.image,
            owner_id=principal.uid,
            owner_email=principal.email,
            owner_name=data.owner.owner_name or principal.name,
            status="pending",
        )
        crop = await self.crop_repo.add(crop)
        logger.info("Crop %s listed by %s", crop.id, principal.email)
        return crop.id

    async def list_recent(self) -> list[CropResponse]:
        crops = await self.crop_repo.list_recent(self.page_size)
        return [crop_to_response(c) for c in crops]

    async def get(self, crop_id: str) -> CropResponse:
        return crop_to_response(await self.load(crop_id))

    async def update(self, principal: Principal, crop_id: str, patch: CropUpdate) -> CropResponse:
        crop = await self.load(crop_id)
        ensure_owner(principal, crop)
        fields = patch.model_dump(exclude_unset=True, exclude_none=True)
        if not fields:
            raise InvalidInput("No updatable fields supplied")
        await self.crop_repo.apply_patch(crop, fields)
        logger.info("Crop %s updated by owner (%s)", crop_id, ", ".join(sorted(fields)))
        return crop_to_response(await self.load(crop_id))

    async def delete(self, principal: Principal, crop_id: str) -> None:
        crop = await self.load(crop_id)
        ensure_owner(principal, crop)
        await self.crop_repo.delete(crop)
        logger.info("Crop %s deleted with %d interest(s)", crop_id, len(crop.interests))
