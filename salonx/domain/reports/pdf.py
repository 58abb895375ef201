"""
Business Report PDF Generator
Revenue summary, staff performance and recent bills for a salon
"""

import io
import logging
from datetime import datetime

from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.units import inch
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

logger = logging.getLogger(__name__)


def format_inr(amount: float) -> str:
    # Rs. prefix, the base-14 fonts carry no rupee glyph
    return f"Rs. {amount:,.2f}"


class BusinessReportPDF:
    """Render the business report dict produced by ReportsService.business_report_data"""

    def __init__(self, report: dict):
        self.report = report

        self.page_width, self.page_height = A4
        self.margin = 0.6 * inch
        self.content_width = self.page_width - (2 * self.margin)

        self.brand_color = colors.HexColor("#4f46e5")
        self.green = colors.HexColor("#10b981")
        self.amber = colors.HexColor("#f59e0b")
        self.dark_gray = colors.HexColor("#1e293b")
        self.light_gray = colors.HexColor("#f9fafb")

    def generate(self) -> bytes:
        """Generate PDF and return bytes"""
        salon = self.report["salon"]
        logger.info(f"📄 Generating business report for {salon['name']} ({self.report['period_label']})")

        buffer = io.BytesIO()
        doc = SimpleDocTemplate(
            buffer,
            pagesize=A4,
            rightMargin=self.margin,
            leftMargin=self.margin,
            topMargin=self.margin,
            bottomMargin=self.margin,
            title=f"Business Report - {salon['name']}",
        )

        styles = getSampleStyleSheet()
        title_style = ParagraphStyle(
            "ReportTitle", parent=styles["Heading1"], fontSize=24, textColor=self.dark_gray, alignment=1
        )
        subtitle_style = ParagraphStyle(
            "ReportSubtitle", parent=styles["Normal"], fontSize=10, textColor=colors.HexColor("#666666"), alignment=1
        )
        heading_style = ParagraphStyle(
            "ReportHeading", parent=styles["Heading2"], fontSize=15, textColor=self.dark_gray, spaceBefore=18, spaceAfter=8
        )

        story = [
            Paragraph(salon["name"], title_style),
            Paragraph("Business Report", subtitle_style),
            Paragraph(f"Period: {self.report['period_label']}", subtitle_style),
        ]
        if salon.get("city"):
            story.append(Paragraph(f"Location: {salon['city']}", subtitle_style))
        if salon.get("phone"):
            story.append(Paragraph(f"Phone: {salon['phone']}", subtitle_style))
        story.append(Spacer(1, 16))

        story.append(Paragraph("Revenue Summary", heading_style))
        story.append(self._summary_table())

        if self.report["staff_performance"]:
            story.append(Paragraph("Staff Performance", heading_style))
            rows = [["Staff Name", "Services Done", "Revenue Generated"]]
            rows += [
                [s["name"], str(s["services"]), format_inr(s["revenue"])]
                for s in self.report["staff_performance"][:10]
            ]
            story.append(self._data_table(rows, [0.45, 0.25, 0.30]))

        if self.report["recent_bills"]:
            story.append(Paragraph("Recent Bills", heading_style))
            rows = [["Invoice #", "Customer", "Date", "Method", "Amount"]]
            for bill in self.report["recent_bills"]:
                rows.append(
                    [
                        bill.invoice_number,
                        bill.customer.name if bill.customer else "-",
                        bill.created_at.strftime("%d %b") if bill.created_at else "-",
                        (bill.payment_method or "").upper(),
                        format_inr(bill.total_amount or 0),
                    ]
                )
            story.append(self._data_table(rows, [0.22, 0.28, 0.15, 0.13, 0.22]))

        story.append(Spacer(1, 24))
        story.append(
            Paragraph(f"Generated on {datetime.utcnow().strftime('%d %b %Y %H:%M')} UTC", subtitle_style)
        )

        doc.build(story)
        pdf_bytes = buffer.getvalue()
        buffer.close()
        return pdf_bytes

    def _summary_table(self) -> Table:
        labels = ["Total Revenue", "Total Bills", "Avg Transaction"]
        values = [
            format_inr(self.report["total_revenue"]),
            str(self.report["total_bills"]),
            format_inr(self.report["avg_transaction"]),
        ]
        width = self.content_width / 3
        table = Table([labels, values], colWidths=[width] * 3, rowHeights=[18, 30])
        table.setStyle(
            TableStyle(
                [
                    ("BACKGROUND", (0, 0), (0, -1), self.brand_color),
                    ("BACKGROUND", (1, 0), (1, -1), self.green),
                    ("BACKGROUND", (2, 0), (2, -1), self.amber),
                    ("TEXTCOLOR", (0, 0), (-1, -1), colors.white),
                    ("FONTSIZE", (0, 0), (-1, 0), 9),
                    ("FONTNAME", (0, 1), (-1, 1), "Helvetica-Bold"),
                    ("FONTSIZE", (0, 1), (-1, 1), 15),
                    ("LEFTPADDING", (0, 0), (-1, -1), 10),
                    ("VALIGN", (0, 0), (-1, -1), "MIDDLE"),
                ]
            )
        )
        return table

    def _data_table(self, rows: list[list[str]], fractions: list[float]) -> Table:
        table = Table(rows, colWidths=[self.content_width * f for f in fractions], repeatRows=1)
        style = [
            ("BACKGROUND", (0, 0), (-1, 0), self.brand_color),
            ("TEXTCOLOR", (0, 0), (-1, 0), colors.white),
            ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
            ("FONTSIZE", (0, 0), (-1, -1), 9),
            ("TOPPADDING", (0, 0), (-1, -1), 5),
            ("BOTTOMPADDING", (0, 0), (-1, -1), 5),
        ]
        for row_index in range(1, len(rows)):
            if row_index % 2 == 1:
                style.append(("BACKGROUND", (0, row_index), (-1, row_index), self.light_gray))
        table.setStyle(TableStyle(style))
        return table
