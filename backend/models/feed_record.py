# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20261019v1
# ---------------------------------------------------------------------------
"""FeedRecord ORM model – feed supplied to a farmer, paid or pending."""

import uuid

from sqlalchemy import Column, String, Float, Enum, DateTime, ForeignKey
from sqlalchemy.sql import func

from database import Base


class FeedRecord(Base):
    __tablename__ = "feed_records"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    farmer_id = Column(
        String(36),
        ForeignKey("farmers.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    date = Column(DateTime(timezone=True), nullable=False, index=True)
    feed_type = Column(String(128), nullable=False)
    quantity = Column(Float, nullable=False)   # kg
    price = Column(Float, nullable=False)
    status = Column(
        Enum("PENDING", "PAID", name="feed_payment_status"),
        nullable=False,
        default="PENDING",
    )
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
