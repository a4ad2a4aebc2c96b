"""Interest request/response schemas."""

from datetime import datetime
from typing import Any, Literal

from krishisetu.schemas.crop import CamelModel, InterestResponse


class InterestCreate(CamelModel):
    # quantity is validated by the service so rule order matches the lifecycle
    quantity: Any = None
    message: str | None = None
    user_name: str | None = None


class InterestCreated(CamelModel):
    ok: bool = True
    interest: InterestResponse


class InterestDecision(CamelModel):
    status: Literal["accepted", "rejected"]


class InterestDecided(CamelModel):
    ok: bool = True
    status: str
    remaining_quantity: float


class SentInterest(CamelModel):
    """A buyer's view of one interest; total_price is derived, never stored."""

    id: str
    crop_id: str
    crop_name: str
    owner_name: str
    quantity: int
    total_price: float
    status: str
    message: str
    created_at: datetime
