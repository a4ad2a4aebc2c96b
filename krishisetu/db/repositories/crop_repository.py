"""
Crop repository - the listing store. Owns crops and their embedded interests.
Challenge: Read-modify-write safety without in-process locks; several server
instances may run at once.
Design: Every mutation of an interest is a single conditional UPDATE scoped to
the parent crop, so the database serialises competing writers per crop row.
"""

from typing import Any

from sqlalchemy import case, select, update
from sqlalchemy.orm import selectinload

from krishisetu.db.models.crop import Crop, utcnow
from krishisetu.db.models.interest import Interest, InterestStatus
from krishisetu.db.repositories.base_repository import BaseRepository


class CropRepository(BaseRepository[Crop]):
    """Crop queries plus the atomic interest transitions."""

    def __init__(self, session):
        super().__init__(session, Crop)

    def _select(self):
        return super()._select().options(selectinload(Crop.interests))

    async def list_recent(self, limit: int) -> list[Crop]:
        """Newest listings first."""
        result = await self.session.execute(
            self._select().order_by(Crop.created_at.desc()).limit(limit)
        )
        return list(result.scalars().all())

    async def list_by_owner(self, email: str) -> list[Crop]:
        result = await self.session.execute(
            self._select().where(Crop.owner_email == email).order_by(Crop.created_at.desc())
        )
        return list(result.scalars().all())

    async def list_with_interest_from(self, email: str) -> list[Crop]:
        """Crops holding at least one interest sent by this buyer."""
        result = await self.session.execute(
            self._select()
            .where(Crop.interests.any(Interest.user_email == email))
            .order_by(Crop.created_at.desc())
        )
        return list(result.scalars().all())

    async def apply_patch(self, crop: Crop, fields: dict[str, Any]) -> Crop:
        for name, value in fields.items():
            setattr(crop, name, value)
        await self.session.flush()
        await self.session.refresh(crop)
        return crop

    async def append_interest(self, interest: Interest) -> bool:
        """
        Append an interest to its crop. Returns False when the crop row is gone
        (lost race against a delete). A duplicate buyer surfaces as IntegrityError.
        """
        touched = await self.session.execute(
            update(Crop)
            .where(Crop.id == interest.crop_id)
            .values(updated_at=utcnow())
            .execution_options(synchronize_session=False)
        )
        if touched.rowcount != 1:
            return False
        self.session.add(interest)
        await self.session.flush()
        return True

    async def decide_interest(
        self,
        crop_id: str,
        interest_id: str,
        decision: InterestStatus,
        take_quantity: int | None = None,
    ) -> float | None:
        """
        Move a pending interest to `decision`; when `take_quantity` is given, also
        reduce the crop quantity by it, clamped at zero.

        Returns the crop's remaining quantity, or None when the interest was no
        longer pending (or gone) at write time.
        """
        decided = await self.session.execute(
            update(Interest)
            .where(
                Interest.id == interest_id,
                Interest.crop_id == crop_id,
                Interest.status == InterestStatus.PENDING.value,
            )
            .values(status=decision.value, decided_at=utcnow())
            .execution_options(synchronize_session=False)
        )
        if decided.rowcount != 1:
            return None

        values: dict[str, Any] = {"updated_at": utcnow()}
        if take_quantity is not None:
            values["quantity"] = case(
                (Crop.quantity < take_quantity, 0),
                else_=Crop.quantity - take_quantity,
            )
        result = await self.session.execute(
            update(Crop)
            .where(Crop.id == crop_id)
            .values(**values)
            .returning(Crop.quantity)
            .execution_options(synchronize_session=False)
        )
        return result.scalar_one_or_none()

    async def ping(self) -> None:
        await self.session.execute(select(1))
