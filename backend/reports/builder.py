# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20261019v1
# ---------------------------------------------------------------------------
"""
Report data assembly.

Loads a farmer's milk or feed records for an optional period and computes
the summary block shown at the top of every exported report.  The renderers
in ``reports.excel`` and ``reports.pdf`` only lay this structure out.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from sqlalchemy.orm import Session

from models.farmer import Farmer
from models.feed_record import FeedRecord
from models.milk_record import MilkRecord


@dataclass
class FarmerInfo:
    name: str
    village: str
    contact: str


@dataclass
class Period:
    start: Optional[datetime] = None
    end: Optional[datetime] = None

    def label(self) -> str:
        fmt = "%Y-%m-%d"
        start = self.start.strftime(fmt) if self.start else "beginning"
        end = self.end.strftime(fmt) if self.end else "today"
        return f"{start} to {end}"


@dataclass
class MilkRow:
    date: str
    shift: str
    quantity: float
    fat: float
    degree: float
    rate: float
    amount: float


@dataclass
class MilkSummary:
    record_count: int
    total_quantity: float
    average_fat: float
    total_amount: float


@dataclass
class MilkReport:
    farmer: FarmerInfo
    period: Period
    summary: MilkSummary
    records: list[MilkRow] = field(default_factory=list)


@dataclass
class FeedRow:
    date: str
    feed_type: str
    quantity: float
    price: float
    status: str


@dataclass
class FeedSummary:
    record_count: int
    total_quantity: float
    total_amount: float
    pending_amount: float


@dataclass
class FeedReport:
    farmer: FarmerInfo
    period: Period
    summary: FeedSummary
    records: list[FeedRow] = field(default_factory=list)


def _fmt_date(value: datetime) -> str:
    return value.strftime("%Y-%m-%d")


def summarize_milk(rows: list[MilkRow]) -> MilkSummary:
    count = len(rows)
    return MilkSummary(
        record_count=count,
        total_quantity=round(sum(r.quantity for r in rows), 2),
        average_fat=round(sum(r.fat for r in rows) / count, 2) if count else 0.0,
        total_amount=round(sum(r.amount for r in rows), 2),
    )


def summarize_feed(rows: list[FeedRow]) -> FeedSummary:
    return FeedSummary(
        record_count=len(rows),
        total_quantity=round(sum(r.quantity for r in rows), 2),
        total_amount=round(sum(r.price for r in rows), 2),
        pending_amount=round(sum(r.price for r in rows if r.status == "PENDING"), 2),
    )


def build_milk_report(db: Session, farmer: Farmer, period: Period) -> MilkReport:
    q = db.query(MilkRecord).filter(MilkRecord.farmer_id == farmer.id)
    if period.start:
        q = q.filter(MilkRecord.date >= period.start)
    if period.end:
        q = q.filter(MilkRecord.date <= period.end)

    rows = [
        MilkRow(
            date=_fmt_date(r.date),
            shift=r.shift,
            quantity=r.quantity,
            fat=r.fat,
            degree=r.degree,
            rate=r.rate,
            amount=r.amount,
        )
        for r in q.order_by(MilkRecord.date.asc()).all()
    ]
    return MilkReport(
        farmer=FarmerInfo(name=farmer.name, village=farmer.village, contact=farmer.contact),
        period=period,
        summary=summarize_milk(rows),
        records=rows,
    )


def build_feed_report(db: Session, farmer: Farmer, period: Period) -> FeedReport:
    q = db.query(FeedRecord).filter(FeedRecord.farmer_id == farmer.id)
    if period.start:
        q = q.filter(FeedRecord.date >= period.start)
    if period.end:
        q = q.filter(FeedRecord.date <= period.end)

    rows = [
        FeedRow(
            date=_fmt_date(r.date),
            feed_type=r.feed_type,
            quantity=r.quantity,
            price=r.price,
            status=r.status,
        )
        for r in q.order_by(FeedRecord.date.asc()).all()
    ]
    return FeedReport(
        farmer=FarmerInfo(name=farmer.name, village=farmer.village, contact=farmer.contact),
        period=period,
        summary=summarize_feed(rows),
        records=rows,
    )
