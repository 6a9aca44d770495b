# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20261019v1
# ---------------------------------------------------------------------------
"""
Farm record endpoints – farmers, milk collections, feed supplies.

Access policy
-------------
* Creating a farmer and changing a feed payment status is admin-only.
* Everything else is open to any authenticated user (USER or ADMIN).
"""

from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from auth.dependencies import require_admin, require_user
from core.errors import AppError, ErrorKind
from core.logger import logger
from core.schemas import ApiResponse
from core.tokens import TokenClaims
from database import get_db
from models.farmer import Farmer
from models.feed_record import FeedRecord
from models.milk_record import MilkRecord
from records.schemas import (
    FarmerCreate,
    FarmerList,
    FarmerRow,
    FeedRecordCreate,
    FeedRecordList,
    FeedRecordRow,
    FeedStatusUpdate,
    MilkRecordCreate,
    MilkRecordList,
    MilkRecordRow,
    to_utc,
)

router = APIRouter(tags=["records"])


def get_farmer_or_404(farmer_id: str, db: Session) -> Farmer:
    farmer = db.get(Farmer, farmer_id)
    if farmer is None:
        raise AppError(ErrorKind.NOT_FOUND, "Farmer not found")
    return farmer


# ---------------------------------------------------------------------------
# Farmers
# ---------------------------------------------------------------------------


@router.post("/farmers", response_model=ApiResponse[FarmerRow], status_code=status.HTTP_201_CREATED)
def create_farmer(
    body: FarmerCreate,
    admin: TokenClaims = Depends(require_admin),
    db: Session = Depends(get_db),
):
    farmer = Farmer(**body.model_dump())
    db.add(farmer)
    db.commit()
    db.refresh(farmer)
    logger.info("Farmer %s created by %s", farmer.id, admin.user_id)
    return ApiResponse[FarmerRow](message="Farmer created successfully", data=FarmerRow.model_validate(farmer))


@router.get("/farmers", response_model=ApiResponse[FarmerList])
def list_farmers(
    identity: TokenClaims = Depends(require_user),
    db: Session = Depends(get_db),
):
    farmers = db.query(Farmer).order_by(Farmer.name).all()
    return ApiResponse[FarmerList](data=FarmerList(farmers=farmers))


@router.get("/farmers/{farmer_id}", response_model=ApiResponse[FarmerRow])
def get_farmer(
    farmer_id: str,
    identity: TokenClaims = Depends(require_user),
    db: Session = Depends(get_db),
):
    return ApiResponse[FarmerRow](data=FarmerRow.model_validate(get_farmer_or_404(farmer_id, db)))


# ---------------------------------------------------------------------------
# Milk records
# ---------------------------------------------------------------------------


@router.post("/milk-records", response_model=ApiResponse[MilkRecordRow], status_code=status.HTTP_201_CREATED)
def create_milk_record(
    body: MilkRecordCreate,
    identity: TokenClaims = Depends(require_user),
    db: Session = Depends(get_db),
):
    """Record a collection.  ``amount`` is always computed as quantity × rate."""
    get_farmer_or_404(body.farmer_id, db)
    record = MilkRecord(**body.model_dump(), amount=round(body.quantity * body.rate, 2))
    db.add(record)
    db.commit()
    db.refresh(record)
    return ApiResponse[MilkRecordRow](message="Milk record created successfully", data=MilkRecordRow.model_validate(record))


@router.get("/milk-records", response_model=ApiResponse[MilkRecordList])
def list_milk_records(
    farmer_id: Optional[str] = Query(None),
    start: Optional[datetime] = Query(None, description="ISO-8601 start of period"),
    end: Optional[datetime] = Query(None, description="ISO-8601 end of period"),
    identity: TokenClaims = Depends(require_user),
    db: Session = Depends(get_db),
):
    q = db.query(MilkRecord)
    if farmer_id:
        q = q.filter(MilkRecord.farmer_id == farmer_id)
    if start:
        q = q.filter(MilkRecord.date >= to_utc(start))
    if end:
        q = q.filter(MilkRecord.date <= to_utc(end))
    records = q.order_by(MilkRecord.date.desc()).all()
    return ApiResponse[MilkRecordList](data=MilkRecordList(records=records))


# ---------------------------------------------------------------------------
# Feed records
# ---------------------------------------------------------------------------


@router.post("/feed-records", response_model=ApiResponse[FeedRecordRow], status_code=status.HTTP_201_CREATED)
def create_feed_record(
    body: FeedRecordCreate,
    identity: TokenClaims = Depends(require_user),
    db: Session = Depends(get_db),
):
    get_farmer_or_404(body.farmer_id, db)
    record = FeedRecord(**body.model_dump(), status="PENDING")
    db.add(record)
    db.commit()
    db.refresh(record)
    return ApiResponse[FeedRecordRow](message="Feed record created successfully", data=FeedRecordRow.model_validate(record))


@router.get("/feed-records", response_model=ApiResponse[FeedRecordList])
def list_feed_records(
    farmer_id: Optional[str] = Query(None),
    identity: TokenClaims = Depends(require_user),
    db: Session = Depends(get_db),
):
    q = db.query(FeedRecord)
    if farmer_id:
        q = q.filter(FeedRecord.farmer_id == farmer_id)
    records = q.order_by(FeedRecord.date.desc()).all()
    return ApiResponse[FeedRecordList](data=FeedRecordList(records=records))


@router.put("/feed-records/{record_id}/status", response_model=ApiResponse[FeedRecordRow])
def update_feed_status(
    record_id: str,
    body: FeedStatusUpdate,
    admin: TokenClaims = Depends(require_admin),
    db: Session = Depends(get_db),
):
    record = db.get(FeedRecord, record_id)
    if record is None:
        raise AppError(ErrorKind.NOT_FOUND, "Feed record not found")
    record.status = body.status
    db.commit()
    db.refresh(record)
    return ApiResponse[FeedRecordRow](message="Feed status updated", data=FeedRecordRow.model_validate(record))
