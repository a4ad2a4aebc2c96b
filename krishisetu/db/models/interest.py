"""
Interest model - a buyer's bid against a crop for a sub-quantity.
"""

import enum
from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import CheckConstraint, DateTime, ForeignKey, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from krishisetu.db.base import Base
from krishisetu.db.models.crop import new_id, utcnow

if TYPE_CHECKING:
    from krishisetu.db.models.crop import Crop


class InterestStatus(str, enum.Enum):
    """pending -> accepted | rejected; both terminal."""

    PENDING = "pending"
    ACCEPTED = "accepted"
    REJECTED = "rejected"


class Interest(Base):
    """Embedded in exactly one crop; one per (crop, buyer email)."""

    __tablename__ = "interests"
    __table_args__ = (
        UniqueConstraint("crop_id", "user_email", name="uq_interests_crop_buyer"),
        CheckConstraint("quantity >= 1", name="ck_interests_quantity_positive"),
    )

    id: Mapped[str] = mapped_column(String(32), primary_key=True, default=new_id)
    crop_id: Mapped[str] = mapped_column(
        ForeignKey("crops.id", ondelete="CASCADE"), nullable=False, index=True
    )
    user_email: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    user_name: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    quantity: Mapped[int] = mapped_column(Integer, nullable=False)
    message: Mapped[str] = mapped_column(Text, nullable=False, default="")
    status: Mapped[str] = mapped_column(String(20), nullable=False, default=InterestStatus.PENDING.value)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)
    decided_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    crop: Mapped["Crop"] = relationship("Crop", back_populates="interests")

    @property
    def is_pending(self) -> bool:
        return self.status == InterestStatus.PENDING.value

    def __repr__(self) -> str:
        return f"<Interest(id={self.id}, crop_id={self.crop_id}, status={self.status})>"
