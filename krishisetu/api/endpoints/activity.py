"""
Per-user views: the caller's own listings and the interests they have sent.
"""

from fastapi import APIRouter

from krishisetu.core.dependencies import CurrentPrincipal
from krishisetu.db.repositories.crop_repository import CropRepository
from krishisetu.db.session import DbSession
from krishisetu.schemas.crop import CropResponse
from krishisetu.schemas.interest import SentInterest
from krishisetu.services.activity_service import ActivityService

router = APIRouter()


@router.get("/my-interests", response_model=list[SentInterest])
async def my_interests(session: DbSession, principal: CurrentPrincipal):
    return await ActivityService(CropRepository(session)).sent_interests(principal)


@router.get("/my-posts", response_model=list[CropResponse])
async def my_posts(session: DbSession, principal: CurrentPrincipal):
    return await ActivityService(CropRepository(session)).posted_crops(principal)
