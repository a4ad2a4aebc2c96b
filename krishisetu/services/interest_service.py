"""
Interest service - the interest lifecycle (create, accept, reject).
Challenge: Quantity never goes negative, one interest per buyer per crop,
only the owner adjudicates, and an interest is adjudicated at most once.
Design: Rules are checked against a fresh read, then the write is a single
conditional update in the store; a write that matches nothing means another
request got there first.
"""

import logging
import math
from typing import Any

from prometheus_client import Counter
from sqlalchemy.exc import IntegrityError

from krishisetu.core.exceptions import Conflict, InvalidInput, InvalidOperation, NotFound
from krishisetu.core.ownership import ensure_owner, is_owner
from krishisetu.db.models.crop import Crop
from krishisetu.db.models.interest import Interest, InterestStatus
from krishisetu.db.repositories.crop_repository import CropRepository
from krishisetu.schemas.auth import Principal
from krishisetu.schemas.crop import InterestResponse
from krishisetu.schemas.interest import InterestCreate, InterestDecided

logger = logging.getLogger(__name__)

INTERESTS_CREATED = Counter("krishisetu_interests_created_total", "Interests sent by buyers")
INTEREST_DECISIONS = Counter(
    "krishisetu_interest_decisions_total", "Interests accepted or rejected by owners", ["decision"]
)

DUPLICATE_INTEREST = "You have already sent an interest for this crop"
# Upper bound of the interests.quantity INTEGER column
MAX_INTEREST_QUANTITY = 2**31 - 1


def parse_quantity(raw: Any) -> int:
    """Requested quantity as a positive integer. Numeric strings are accepted."""
    if isinstance(raw, bool) or raw is None:
        raise InvalidInput("Quantity must be a whole number >= 1")
    value = raw
    if isinstance(raw, str):
        try:
            value = float(raw.strip())
        except ValueError:
            raise InvalidInput("Quantity must be a whole number >= 1") from None
    if not isinstance(value, (int, float)):
        raise InvalidInput("Quantity must be a whole number >= 1")
    if isinstance(value, float) and (not math.isfinite(value) or not value.is_integer()):
        raise InvalidInput("Quantity must be a whole number >= 1")
    if value < 1:
        raise InvalidInput("Quantity must be a whole number >= 1")
    if value > MAX_INTEREST_QUANTITY:
        raise InvalidInput(f"Quantity must be at most {MAX_INTEREST_QUANTITY}")
    return int(value)


class InterestService:
    """Interest state machine: pending -> accepted | rejected, both terminal."""

    def __init__(self, crop_repo: CropRepository):
        self.crop_repo = crop_repo

    async def _load(self, crop_id: str) -> Crop:
        crop = await self.crop_repo.get_by_id(crop_id)
        if not crop:
            raise NotFound("Crop not found")
        return crop

    async def create(self, principal: Principal, crop_id: str, data: InterestCreate) -> InterestResponse:
        crop = await self._load(crop_id)
        if is_owner(principal, crop):
            raise InvalidOperation("Owners cannot send interest on their own crop")
        quantity = parse_quantity(data.quantity)
        if crop.interest_from(principal.email):
            logger.info("Duplicate interest from %s on crop %s", principal.email, crop_id)
            raise Conflict(DUPLICATE_INTEREST)

        interest = Interest(
            crop_id=crop.id,
            user_email=principal.email,
            user_name=data.user_name or principal.name or "",
            quantity=quantity,
            message=data.message or "",
            status=InterestStatus.PENDING.value,
        )
        try:
            appended = await self.crop_repo.append_interest(interest)
        except IntegrityError as exc:
            # Same buyer raced past the duplicate check
            raise Conflict(DUPLICATE_INTEREST) from exc
        if not appended:
            raise Conflict.lost_race("Could not add interest")

        INTERESTS_CREATED.inc()
        logger.info("Interest %s from %s on crop %s (qty %d)", interest.id, principal.email, crop_id, quantity)
        return InterestResponse.model_validate(interest, from_attributes=True)

    async def decide(
        self, principal: Principal, crop_id: str, interest_id: str, decision: str
    ) -> InterestDecided:
        status = InterestStatus(decision)
        if status is InterestStatus.PENDING:
            raise InvalidInput("Invalid status")

        crop = await self._load(crop_id)
        ensure_owner(principal, crop)
        interest = crop.find_interest(interest_id)
        if not interest:
            raise NotFound("Interest not found")
        if not interest.is_pending:
            raise InvalidOperation("Action already taken")

        take = interest.quantity if status is InterestStatus.ACCEPTED else None
        if take is not None and take > crop.quantity:
            logger.warning(
                "Crop %s oversubscribed: accepting %d of %s remaining, capping at zero",
                crop_id, take, crop.quantity,
            )
        remaining = await self.crop_repo.decide_interest(crop_id, interest_id, status, take_quantity=take)
        if remaining is None:
            raise Conflict.lost_race("Interest was already decided by another request")

        INTEREST_DECISIONS.labels(decision=status.value).inc()
        logger.info("Interest %s on crop %s %s; %s left", interest_id, crop_id, status.value, remaining)
        return InterestDecided(status=status.value, remaining_quantity=remaining)
