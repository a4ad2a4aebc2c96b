"""
Interest endpoints - buyers send interest, owners accept or reject it.
"""

from fastapi import APIRouter, status

from krishisetu.core.dependencies import CurrentPrincipal
from krishisetu.db.repositories.crop_repository import CropRepository
from krishisetu.db.session import DbSession
from krishisetu.schemas.interest import InterestCreate, InterestCreated, InterestDecided, InterestDecision
from krishisetu.services.interest_service import InterestService

router = APIRouter()


@router.post("/{crop_id}/interests", response_model=InterestCreated, status_code=status.HTTP_201_CREATED)
async def create_interest(session: DbSession, crop_id: str, data: InterestCreate, principal: CurrentPrincipal):
    interest = await InterestService(CropRepository(session)).create(principal, crop_id, data)
    return InterestCreated(interest=interest)


@router.put("/{crop_id}/interests/{interest_id}", response_model=InterestDecided)
async def decide_interest(
    session: DbSession,
    crop_id: str,
    interest_id: str,
    data: InterestDecision,
    principal: CurrentPrincipal,
):
    """Owner accepts or rejects a pending interest; acceptance reduces crop quantity."""
    svc = InterestService(CropRepository(session))
    return await svc.decide(principal, crop_id, interest_id, data.status)
