# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20261019v1
# ---------------------------------------------------------------------------
"""MilkRecord ORM model – one collection per farmer per shift."""

import uuid

from sqlalchemy import Column, String, Float, Enum, DateTime, ForeignKey
from sqlalchemy.sql import func

from database import Base


class MilkRecord(Base):
    __tablename__ = "milk_records"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    farmer_id = Column(
        String(36),
        ForeignKey("farmers.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    date = Column(DateTime(timezone=True), nullable=False, index=True)
    shift = Column(Enum("MORNING", "EVENING", name="milk_shift"), nullable=False)
    quantity = Column(Float, nullable=False)   # litres
    fat = Column(Float, nullable=False)        # percent
    degree = Column(Float, nullable=False)
    rate = Column(Float, nullable=False)       # per litre
    # quantity * rate, computed server-side at creation
    amount = Column(Float, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
