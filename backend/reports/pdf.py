# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20261019v1
# ---------------------------------------------------------------------------
"""PDF rendering of milk and feed reports with reportlab (platypus)."""

import io
from xml.sax.saxutils import escape

from reportlab.lib import colors
from reportlab.lib.enums import TA_CENTER
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

from reports.builder import FarmerInfo, FeedReport, MilkReport

PDF_MEDIA_TYPE = "application/pdf"

_STYLES = getSampleStyleSheet()
_TITLE = ParagraphStyle("ReportTitle", parent=_STYLES["Title"], fontSize=20, alignment=TA_CENTER)
_SUBTITLE = ParagraphStyle("ReportSubtitle", parent=_STYLES["Heading2"], fontSize=16, alignment=TA_CENTER)
_SECTION = _STYLES["Heading3"]
_BODY = _STYLES["BodyText"]

# The base-14 fonts have no rupee glyph
_CURRENCY = "Rs."

_TABLE_STYLE = TableStyle([
    ("BACKGROUND", (0, 0), (-1, 0), colors.HexColor("#E0E0E0")),
    ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
    ("GRID", (0, 0), (-1, -1), 0.5, colors.HexColor("#CCCCCC")),
    ("ALIGN", (2, 1), (-1, -1), "RIGHT"),
    ("FONTSIZE", (0, 0), (-1, -1), 9),
])


def _preamble(subtitle: str, farmer: FarmerInfo, period_label: str) -> list:
    return [
        Paragraph("Dairy Farm Management", _TITLE),
        Paragraph(subtitle, _SUBTITLE),
        Spacer(1, 12),
        Paragraph("Farmer Information:", _SECTION),
        Paragraph(f"Name: {escape(farmer.name)}", _BODY),
        Paragraph(f"Village: {escape(farmer.village)}", _BODY),
        Paragraph(f"Contact: {escape(farmer.contact)}", _BODY),
        Paragraph(f"Period: {period_label}", _BODY),
        Spacer(1, 12),
    ]


def _table(headers: list[str], rows: list[list]) -> Table:
    table = Table([headers] + rows, repeatRows=1)
    table.setStyle(_TABLE_STYLE)
    return table


def _build(story: list) -> bytes:
    buf = io.BytesIO()
    doc = SimpleDocTemplate(buf, pagesize=A4, leftMargin=50, rightMargin=50, topMargin=50, bottomMargin=50)
    doc.build(story)
    return buf.getvalue()


def render_milk_report(report: MilkReport) -> bytes:
    s = report.summary
    story = _preamble("Milk Collection Report", report.farmer, report.period.label())
    story += [
        Paragraph("Summary:", _SECTION),
        Paragraph(f"Total Records: {s.record_count}", _BODY),
        Paragraph(f"Total Quantity: {s.total_quantity:.2f} liters", _BODY),
        Paragraph(f"Average Fat: {s.average_fat:.2f}%", _BODY),
        Paragraph(f"Total Amount: {_CURRENCY} {s.total_amount:.2f}", _BODY),
        Spacer(1, 12),
    ]
    if report.records:
        story.append(_table(
            ["Date", "Shift", "Quantity (L)", "Fat %", "Degree", f"Rate ({_CURRENCY})", f"Amount ({_CURRENCY})"],
            [
                [r.date, r.shift, f"{r.quantity:.2f}", f"{r.fat:.1f}", f"{r.degree:g}", f"{r.rate:.2f}", f"{r.amount:.2f}"]
                for r in report.records
            ],
        ))
    return _build(story)


def render_feed_report(report: FeedReport) -> bytes:
    s = report.summary
    story = _preamble("Feed Records Report", report.farmer, report.period.label())
    story += [
        Paragraph("Summary:", _SECTION),
        Paragraph(f"Total Records: {s.record_count}", _BODY),
        Paragraph(f"Total Quantity: {s.total_quantity:.2f} kg", _BODY),
        Paragraph(f"Total Amount: {_CURRENCY} {s.total_amount:.2f}", _BODY),
        Paragraph(f"Pending Amount: {_CURRENCY} {s.pending_amount:.2f}", _BODY),
        Spacer(1, 12),
    ]
    if report.records:
        story.append(_table(
            ["Date", "Feed Type", "Quantity (kg)", f"Price ({_CURRENCY})", "Status"],
            [
                [r.date, r.feed_type, f"{r.quantity:.2f}", f"{r.price:.2f}", r.status]
                for r in report.records
            ],
        ))
    return _build(story)
