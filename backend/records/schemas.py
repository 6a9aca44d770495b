# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20261019v1
# ---------------------------------------------------------------------------
"""Pydantic request / response models for farmers, milk and feed records."""

from datetime import datetime, timezone
from typing import Annotated, List, Literal, Optional

from pydantic import AfterValidator, BaseModel, Field


def to_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Record dates are stored as naive UTC.  An offset-aware value is
    converted; a naive one is taken to be UTC already."""
    if value is None or value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


UtcDateTime = Annotated[datetime, AfterValidator(to_utc)]


# -- Requests --------------------------------------------------------------


class FarmerCreate(BaseModel):
    name: str = Field(min_length=2, max_length=255)
    village: str = Field(min_length=2, max_length=255)
    contact: str = Field(min_length=10, max_length=32)
    bank_acc: str = Field(min_length=5, max_length=64)


class MilkRecordCreate(BaseModel):
    farmer_id: str
    date: UtcDateTime
    shift: Literal["MORNING", "EVENING"]
    quantity: float = Field(gt=0)
    fat: float = Field(ge=0, le=100)
    degree: float = Field(gt=0)
    rate: float = Field(gt=0)


class FeedRecordCreate(BaseModel):
    farmer_id: str
    date: UtcDateTime
    feed_type: str = Field(min_length=2, max_length=128)
    quantity: float = Field(gt=0)
    price: float = Field(gt=0)


class FeedStatusUpdate(BaseModel):
    status: Literal["PENDING", "PAID"]


# -- Responses -------------------------------------------------------------


class FarmerRow(BaseModel):
    id: str
    name: str
    village: str
    contact: str
    bank_acc: str
    created_at: datetime

    model_config = {"from_attributes": True}


class MilkRecordRow(BaseModel):
    id: str
    farmer_id: str
    date: datetime
    shift: str
    quantity: float
    fat: float
    degree: float
    rate: float
    amount: float

    model_config = {"from_attributes": True}


class FeedRecordRow(BaseModel):
    id: str
    farmer_id: str
    date: datetime
    feed_type: str
    quantity: float
    price: float
    status: str

    model_config = {"from_attributes": True}


class FarmerList(BaseModel):
    farmers: List[FarmerRow]


class MilkRecordList(BaseModel):
    records: List[MilkRecordRow]


class FeedRecordList(BaseModel):
    records: List[FeedRecordRow]
