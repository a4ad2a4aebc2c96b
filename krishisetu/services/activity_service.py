"""
Activity service - per-user read-only projections ("my posts", "my interests").
Computed on demand from the store; nothing here is cached.
"""

from krishisetu.db.repositories.crop_repository import CropRepository
from krishisetu.schemas.auth import Principal
from krishisetu.schemas.crop import CropResponse
from krishisetu.schemas.interest import SentInterest
from krishisetu.services.crop_service import crop_to_response


class ActivityService:
    def __init__(self, crop_repo: CropRepository):
        self.crop_repo = crop_repo

    async def posted_crops(self, principal: Principal) -> list[CropResponse]:
        """Crops owned by the caller, newest first."""
        crops = await self.crop_repo.list_by_owner(principal.email)
        return [crop_to_response(c) for c in crops]

    async def sent_interests(self, principal: Principal) -> list[SentInterest]:
        """Every interest the caller has sent, flattened across crops."""
        crops = await self.crop_repo.list_with_interest_from(principal.email)
        sent = []
        for crop in crops:
            for interest in crop.interests:
                if interest.user_email != principal.email:
                    continue
                sent.append(
                    SentInterest(
                        id=interest.id,
                        crop_id=crop.id,
                        crop_name=crop.name,
                        owner_name=crop.owner_name or "Unknown",
                        quantity=interest.quantity,
                        total_price=interest.quantity * crop.price_per_unit,
                        status=interest.status,
                        message=interest.message,
                        created_at=interest.created_at or crop.created_at,
                    )
                )
        return sent
