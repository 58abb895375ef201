"""
Attendance exports
Excel workbook (openpyxl) and printable PDF (reportlab) for a date range
"""

import io
import logging
from collections import Counter
from datetime import date, datetime

from openpyxl import Workbook
from openpyxl.styles import Alignment, Font, PatternFill
from openpyxl.utils import get_column_letter
from reportlab.lib import colors
from reportlab.lib.pagesizes import A4, landscape
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.units import inch
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

from ...models_attendance import Attendance
from .service import STATUS_LABELS

logger = logging.getLogger(__name__)

COLUMNS = [
    ("Date", 15),
    ("Staff Name", 25),
    ("Role", 20),
    ("Status", 15),
    ("Check-in", 12),
    ("Check-out", 12),
    ("Notes", 30),
]

# Fill / font colours per status
STATUS_STYLES = {
    "present": ("FFD1FAE5", "FF065F46"),
    "absent": ("FFFEE2E2", "FF991B1B"),
    "half_day": ("FFFEF3C7", "FF92400E"),
    "leave": ("FFDBEAFE", "FF1E40AF"),
}

BRAND_COLOR = "FF4F46E5"


def format_status(status: str) -> str:
    return STATUS_LABELS.get(status, status)


def export_filename(start: date, end: date, extension: str) -> str:
    return f"Attendance_{start.isoformat()}_to_{end.isoformat()}.{extension}"


def _row_values(record: Attendance) -> list:
    staff = record.staff
    return [
        record.attendance_date.isoformat(),
        staff.name if staff else "Unknown",
        staff.role if staff and staff.role else "-",
        format_status(record.status),
        record.check_in_time or "-",
        record.check_out_time or "-",
        record.notes or "",
    ]


def build_attendance_workbook(records: list[Attendance]) -> bytes:
    """Build the xlsx export and return its bytes"""
    wb = Workbook()
    ws = wb.active
    ws.title = "Attendance"
    ws.oddHeader.center.text = "Attendance Report"

    ws.append([name for name, _ in COLUMNS])
    for index, (_, width) in enumerate(COLUMNS, start=1):
        ws.column_dimensions[get_column_letter(index)].width = width

    header_fill = PatternFill(start_color=BRAND_COLOR, end_color=BRAND_COLOR, fill_type="solid")
    for cell in ws[1]:
        cell.font = Font(bold=True, color="FFFFFFFF")
        cell.fill = header_fill
        cell.alignment = Alignment(horizontal="center")

    for record in records:
        ws.append(_row_values(record))
        status_cell = ws.cell(row=ws.max_row, column=4)
        style = STATUS_STYLES.get(record.status)
        if style:
            fill, font = style
            status_cell.fill = PatternFill(start_color=fill, end_color=fill, fill_type="solid")
            status_cell.font = Font(color=font, bold=True)
        status_cell.alignment = Alignment(horizontal="center")

    buffer = io.BytesIO()
    wb.save(buffer)
    logger.info(f"📊 Built attendance workbook with {len(records)} rows")
    return buffer.getvalue()


def build_attendance_pdf(records: list[Attendance], start: date, end: date, salon_name: str = "SalonX") -> bytes:
    """Build the PDF export with a status summary line"""
    buffer = io.BytesIO()
    margin = 0.5 * inch
    doc = SimpleDocTemplate(
        buffer,
        pagesize=landscape(A4),
        rightMargin=margin,
        leftMargin=margin,
        topMargin=margin,
        bottomMargin=margin,
        title=f"Attendance Report {start.isoformat()} to {end.isoformat()}",
    )

    styles = getSampleStyleSheet()
    brand = colors.HexColor("#4f46e5")
    title_style = ParagraphStyle("AttendanceTitle", parent=styles["Heading1"], fontSize=18, textColor=brand)
    meta_style = ParagraphStyle("AttendanceMeta", parent=styles["Normal"], fontSize=9, textColor=colors.HexColor("#666666"))

    story = [
        Paragraph(f"{salon_name} - Attendance Report", title_style),
        Paragraph(f"Period: {start.isoformat()} to {end.isoformat()}", meta_style),
        Paragraph(f"Generated: {datetime.utcnow().strftime('%Y-%m-%d %H:%M')} UTC", meta_style),
        Spacer(1, 12),
    ]

    if records:
        table = Table([[name for name, _ in COLUMNS]] + [_row_values(r) for r in records], repeatRows=1)
        table_style = [
            ("BACKGROUND", (0, 0), (-1, 0), brand),
            ("TEXTCOLOR", (0, 0), (-1, 0), colors.white),
            ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
            ("FONTSIZE", (0, 0), (-1, -1), 9),
            ("GRID", (0, 0), (-1, -1), 0.25, colors.HexColor("#cccccc")),
            ("VALIGN", (0, 0), (-1, -1), "MIDDLE"),
        ]
        for row_index, record in enumerate(records, start=1):
            if row_index % 2 == 0:
                table_style.append(("BACKGROUND", (0, row_index), (-1, row_index), colors.HexColor("#f7f7fa")))
            style = STATUS_STYLES.get(record.status)
            if style:
                table_style.append(("TEXTCOLOR", (3, row_index), (3, row_index), colors.HexColor(f"#{style[1][2:]}")))
        table.setStyle(TableStyle(table_style))
        story.append(table)
    else:
        story.append(Paragraph("No attendance records for this period.", styles["Normal"]))

    counts = Counter(r.status for r in records)
    story.append(Spacer(1, 16))
    story.append(Paragraph("<b>Summary</b>", styles["Heading3"]))
    story.append(
        Paragraph(
            f"Present: {counts['present']}  |  Absent: {counts['absent']}  |  "
            f"Half Day: {counts['half_day']}  |  Leave: {counts['leave']}",
            styles["Normal"],
        )
    )

    doc.build(story)
    logger.info(f"📄 Built attendance PDF with {len(records)} rows")
    return buffer.getvalue()
