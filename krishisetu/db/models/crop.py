"""
Crop model - a sellable lot of produce and the aggregate that owns its interests.
"""

import uuid
from datetime import datetime, timezone
from typing import TYPE_CHECKING

from sqlalchemy import CheckConstraint, DateTime, Float, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from krishisetu.db.base import Base

if TYPE_CHECKING:
    from krishisetu.db.models.interest import Interest


def new_id() -> str:
    return uuid.uuid4().hex


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Crop(Base):
    """Listing entity. Interests live and die with their crop."""

    __tablename__ = "crops"
    __table_args__ = (CheckConstraint("quantity >= 0", name="ck_crops_quantity_non_negative"),)

    id: Mapped[str] = mapped_column(String(32), primary_key=True, default=new_id)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    type: Mapped[str] = mapped_column(String(100), nullable=False)
    price_per_unit: Mapped[float] = mapped_column(Float, nullable=False)
    unit: Mapped[str] = mapped_column(String(50), nullable=False)
    quantity: Mapped[float] = mapped_column(Float, nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    location: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    image: Mapped[str] = mapped_column(String(1024), nullable=False, default="")

    # Owner is embedded; owner_email is immutable after creation
    owner_id: Mapped[str | None] = mapped_column(String(128), nullable=True)
    owner_email: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    owner_name: Mapped[str] = mapped_column(String(255), nullable=False, default="")

    # Moderation status, independent of interest state
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="pending")
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, index=True)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)

    interests: Mapped[list["Interest"]] = relationship(
        "Interest",
        back_populates="crop",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="Interest.created_at",
        lazy="selectin",
    )

    def find_interest(self, interest_id: str) -> "Interest | None":
        return next((i for i in self.interests if i.id == interest_id), None)

    def interest_from(self, email: str) -> "Interest | None":
        return next((i for i in self.interests if i.user_email == email), None)

    def __repr__(self) -> str:
        return f"<Crop(id={self.id}, name={self.name}, quantity={self.quantity})>"
