"""Crop request/response schemas - REST API contract (camelCase on the wire)."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class OwnerInfo(CamelModel):
    owner_email: str = Field(..., min_length=1)
    owner_name: str = ""


class CropCreate(CamelModel):
    # Empty strings and zero amounts count as missing
    name: str = Field(..., min_length=1)
    type: str = Field(..., min_length=1)
    price_per_unit: float = Field(..., gt=0)
    unit: str = Field(..., min_length=1)
    quantity: float = Field(..., gt=0)
    description: str = Field(..., min_length=1)
    location: str = Field(..., min_length=1)
    image: str = Field(..., min_length=1)
    owner: OwnerInfo


class CropUpdate(CamelModel):
    """Whitelisted patch. Owner, status, interests and timestamps are not updatable."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="forbid")

    name: str | None = Field(None, min_length=1)
    type: str | None = Field(None, min_length=1)
    price_per_unit: float | None = Field(None, gt=0)
    unit: str | None = Field(None, min_length=1)
    quantity: float | None = Field(None, ge=0)
    description: str | None = None
    location: str | None = None
    image: str | None = None


class InterestResponse(CamelModel):
    id: str
    crop_id: str
    user_email: str
    user_name: str
    quantity: int
    message: str
    status: str
    created_at: datetime
    decided_at: datetime | None = None


class CropResponse(CamelModel):
    id: str
    name: str
    type: str
    price_per_unit: float
    unit: str
    quantity: float
    description: str
    location: str
    image: str
    owner: OwnerInfo
    status: str
    created_at: datetime
    interests: list[InterestResponse] = []


class CropCreated(CamelModel):
    message: str = "Crop added successfully"
    inserted_id: str


class CropUpdated(CamelModel):
    message: str = "Crop updated successfully"
    crop: CropResponse


class MessageResponse(BaseModel):
    message: str
