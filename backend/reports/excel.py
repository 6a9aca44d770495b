# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20261019v1
# ---------------------------------------------------------------------------
"""Excel (.xlsx) rendering of milk and feed reports with openpyxl."""

import io

from openpyxl import Workbook
from openpyxl.styles import Font, PatternFill, Alignment, Border, Side
from openpyxl.worksheet.worksheet import Worksheet

from reports.builder import FarmerInfo, FeedReport, MilkReport

XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"

_TITLE_FONT   = Font(name="Calibri", size=16, bold=True)
_BOLD_FONT    = Font(name="Calibri", size=11, bold=True)
_HEADER_FILL  = PatternFill(start_color="E0E0E0", end_color="E0E0E0", fill_type="solid")
_CENTER       = Alignment(horizontal="center", vertical="center")
_THIN_BORDER  = Border(
    left=Side(style="thin", color="CCCCCC"),
    right=Side(style="thin", color="CCCCCC"),
    top=Side(style="thin", color="CCCCCC"),
    bottom=Side(style="thin", color="CCCCCC"),
)

# Fixed layout: title row 1, farmer block from row 3, summary from row 8,
# table header on row 14, data from row 15.
_HEADER_ROW = 14

# Spreadsheet apps evaluate text starting with these as a formula
_FORMULA_PREFIXES = ("=", "+", "-", "@")

_MILK_HEADERS = ["Date", "Shift", "Quantity (L)", "Fat %", "Degree", "Rate (₹)", "Amount (₹)"]
_FEED_HEADERS = ["Date", "Feed Type", "Quantity (kg)", "Price (₹)", "Status"]


def _write_preamble(ws: Worksheet, title: str, width: int, farmer: FarmerInfo, period_label: str) -> None:
    last_col = chr(64 + width)
    ws.merge_cells(f"A1:{last_col}1")
    ws["A1"] = title
    ws["A1"].font = _TITLE_FONT
    ws["A1"].alignment = _CENTER

    ws["A3"] = "Farmer Information:"
    ws["A3"].font = _BOLD_FONT
    ws["A4"] = f"Name: {farmer.name}"
    ws["A5"] = f"Village: {farmer.village}"
    ws["A6"] = f"Contact: {farmer.contact}"
    ws["D3"] = f"Period: {period_label}"


def _write_table(ws: Worksheet, headers: list[str], rows: list[list]) -> None:
    for col_idx, text in enumerate(headers, start=1):
        cell = ws.cell(row=_HEADER_ROW, column=col_idx, value=text)
        cell.font = _BOLD_FONT
        cell.fill = _HEADER_FILL
        cell.alignment = _CENTER
        cell.border = _THIN_BORDER

    for row_offset, values in enumerate(rows, start=1):
        for col_idx, value in enumerate(values, start=1):
            cell = ws.cell(row=_HEADER_ROW + row_offset, column=col_idx, value=value)
            if isinstance(value, str) and value.startswith(_FORMULA_PREFIXES):
                cell.data_type = "s"
            cell.border = _THIN_BORDER

    for col_idx in range(1, len(headers) + 1):
        ws.column_dimensions[chr(64 + col_idx)].width = 15


def _to_bytes(wb: Workbook) -> bytes:
    buf = io.BytesIO()
    wb.save(buf)
    wb.close()
    return buf.getvalue()


def render_milk_report(report: MilkReport) -> bytes:
    wb = Workbook()
    ws = wb.active
    ws.title = "Milk Records"

    _write_preamble(ws, "Dairy Farm Management - Milk Collection Report", len(_MILK_HEADERS),
                    report.farmer, report.period.label())

    s = report.summary
    ws["A8"] = "Summary:"
    ws["A8"].font = _BOLD_FONT
    ws["A9"] = f"Total Records: {s.record_count}"
    ws["A10"] = f"Total Quantity: {s.total_quantity:.2f} liters"
    ws["A11"] = f"Average Fat: {s.average_fat:.2f}%"
    ws["A12"] = f"Total Amount: ₹{s.total_amount:.2f}"

    _write_table(ws, _MILK_HEADERS, [
        [r.date, r.shift, round(r.quantity, 2), round(r.fat, 1), r.degree, round(r.rate, 2), round(r.amount, 2)]
        for r in report.records
    ])
    return _to_bytes(wb)


def render_feed_report(report: FeedReport) -> bytes:
    wb = Workbook()
    ws = wb.active
    ws.title = "Feed Records"

    _write_preamble(ws, "Dairy Farm Management - Feed Records Report", len(_FEED_HEADERS),
                    report.farmer, report.period.label())

    s = report.summary
    ws["A8"] = "Summary:"
    ws["A8"].font = _BOLD_FONT
    ws["A9"] = f"Total Records: {s.record_count}"
    ws["A10"] = f"Total Quantity: {s.total_quantity:.2f} kg"
    ws["A11"] = f"Total Amount: ₹{s.total_amount:.2f}"
    ws["A12"] = f"Pending Amount: ₹{s.pending_amount:.2f}"

    _write_table(ws, _FEED_HEADERS, [
        [r.date, r.feed_type, round(r.quantity, 2), round(r.price, 2), r.status]
        for r in report.records
    ])
    return _to_bytes(wb)
