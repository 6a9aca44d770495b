# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20261019v1
# ---------------------------------------------------------------------------
"""
Report export endpoints – milk and feed reports per farmer, as PDF or Excel.

The file is built in memory and streamed back; nothing is written to disk
on the server.
"""

import io
import re
from datetime import datetime, timezone
from typing import Literal, Optional

from fastapi import APIRouter, Depends, Query
from fastapi.responses import StreamingResponse
from sqlalchemy.orm import Session

from auth.dependencies import require_user
from core.logger import logger
from core.tokens import TokenClaims
from database import get_db
from records.router import get_farmer_or_404
from records.schemas import to_utc
from reports import excel, pdf
from reports.builder import Period, build_feed_report, build_milk_report

router = APIRouter(prefix="/reports", tags=["reports"])

ReportFormat = Literal["pdf", "excel"]


def _filename(kind: str, farmer_name: str, fmt: str) -> str:
    slug = re.sub(r"[^A-Za-z0-9]+", "-", farmer_name).strip("-").lower() or "farmer"
    stamp = datetime.now(timezone.utc).strftime("%Y%m%d%H%M%S")
    ext = "pdf" if fmt == "pdf" else "xlsx"
    return f"{kind}-report-{slug}-{stamp}.{ext}"


def _stream(payload: bytes, media_type: str, filename: str) -> StreamingResponse:
    return StreamingResponse(
        io.BytesIO(payload),
        media_type=media_type,
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


# ---------------------------------------------------------------------------
# GET /reports/milk/{farmer_id}
# ---------------------------------------------------------------------------


@router.get("/milk/{farmer_id}")
def export_milk_report(
    farmer_id: str,
    format: ReportFormat = Query("pdf"),
    start: Optional[datetime] = Query(None, description="ISO-8601 start of period"),
    end: Optional[datetime] = Query(None, description="ISO-8601 end of period"),
    identity: TokenClaims = Depends(require_user),
    db: Session = Depends(get_db),
):
    farmer = get_farmer_or_404(farmer_id, db)
    report = build_milk_report(db, farmer, Period(start=to_utc(start), end=to_utc(end)))

    if format == "pdf":
        payload, media_type = pdf.render_milk_report(report), pdf.PDF_MEDIA_TYPE
    else:
        payload, media_type = excel.render_milk_report(report), excel.XLSX_MEDIA_TYPE

    logger.info("Milk report (%s) for farmer %s exported by %s", format, farmer.id, identity.user_id)
    return _stream(payload, media_type, _filename("milk", farmer.name, format))


# ---------------------------------------------------------------------------
# GET /reports/feed/{farmer_id}
# ---------------------------------------------------------------------------


@router.get("/feed/{farmer_id}")
def export_feed_report(
    farmer_id: str,
    format: ReportFormat = Query("excel"),
    start: Optional[datetime] = Query(None, description="ISO-8601 start of period"),
    end: Optional[datetime] = Query(None, description="ISO-8601 end of period"),
    identity: TokenClaims = Depends(require_user),
    db: Session = Depends(get_db),
):
    farmer = get_farmer_or_404(farmer_id, db)
    report = build_feed_report(db, farmer, Period(start=to_utc(start), end=to_utc(end)))

    if format == "pdf":
        payload, media_type = pdf.render_feed_report(report), pdf.PDF_MEDIA_TYPE
    else:
        payload, media_type = excel.render_feed_report(report), excel.XLSX_MEDIA_TYPE

    logger.info("Feed report (%s) for farmer %s exported by %s", format, farmer.id, identity.user_id)
    return _stream(payload, media_type, _filename("feed", farmer.name, format))
