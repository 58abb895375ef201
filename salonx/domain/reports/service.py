"""
Reports service - Revenue, billing history, performance and stock reports

Every revenue figure is computed from paid invoices, the same rows the POS
writes.
"""

import csv
import logging
import math
from collections import defaultdict
from datetime import date, datetime, time, timedelta
from io import StringIO
from typing import Optional

from dateutil.relativedelta import relativedelta
from fastapi import HTTPException
from sqlalchemy.orm import Session

from ...models_billing import Invoice
from ...shared.validators import parse_optional_date
from ..inventory.service import stock_status
from .repository import ReportsRepository

logger = logging.getLogger(__name__)

PERFORMANCE_WINDOW_DAYS = 30
MOVEMENTS_LIMIT = 500
CHART_PERIODS = ["daily", "monthly"]


def money(value: float) -> float:
    return round(value or 0, 2)


def day_start(day: date) -> datetime:
    return datetime.combine(day, time.min)


def day_end(day: date) -> datetime:
    return datetime.combine(day, time.max)


def parse_range(start: Optional[str], end: Optional[str]) -> tuple[Optional[datetime], Optional[datetime]]:
    """Inclusive date-only range to datetime bounds"""
    try:
        start_day = parse_optional_date(start)
        end_day = parse_optional_date(end)
    except ValueError:
        raise HTTPException(status_code=400, detail="Invalid date format. Use YYYY-MM-DD")
    return (
        day_start(start_day) if start_day else None,
        day_end(end_day) if end_day else None,
    )


def week_start(today: date) -> date:
    """Most recent Sunday"""
    return today - timedelta(days=(today.weekday() + 1) % 7)


def aggregate_performance(items, staff_names: dict[str, str]) -> tuple[list[dict], list[dict]]:
    """Top services by count and staff by revenue from invoice items"""
    services: dict[str, dict] = {}
    staff: dict[str, dict] = {}
    for item in items:
        quantity = item.quantity or 1
        if item.item_type == "service" and item.item_id:
            entry = services.setdefault(item.item_id, {"name": item.item_name or "Unknown", "count": 0, "revenue": 0.0})
            entry["count"] += quantity
            entry["revenue"] += item.total_price or 0
        if item.staff_id:
            entry = staff.setdefault(
                item.staff_id,
                {"name": staff_names.get(item.staff_id, "Unknown Staff"), "services": 0, "revenue": 0.0},
            )
            if item.item_type == "service":
                entry["services"] += quantity
            entry["revenue"] += item.total_price or 0

    top_services = sorted(services.values(), key=lambda s: s["count"], reverse=True)
    staff_performance = sorted(staff.values(), key=lambda s: s["revenue"], reverse=True)
    for row in top_services + staff_performance:
        row["revenue"] = money(row["revenue"])
    return top_services, staff_performance


class ReportsService:
    """Service layer for reports"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = ReportsRepository()

    # ========================================================================
    # REVENUE
    # ========================================================================

    def revenue_summary(self, salon_id: str, now: Optional[datetime] = None) -> dict:
        now = now or datetime.utcnow()
        today = now.date()
        month_start = day_start(today.replace(day=1))
        week_begin = day_start(week_start(today))
        today_begin = day_start(today)

        totals = {"today": 0.0, "week": 0.0, "month": 0.0}
        for invoice in self.repo.paid_invoices(self.db, salon_id, since=min(month_start, week_begin)):
            amount = invoice.total_amount or 0
            if invoice.created_at >= month_start:
                totals["month"] += amount
            if invoice.created_at >= week_begin:
                totals["week"] += amount
            if invoice.created_at >= today_begin:
                totals["today"] += amount
        return {key: money(value) for key, value in totals.items()}

    def list_bills(
        self,
        salon_id: str,
        page: int = 1,
        limit: int = 20,
        from_date: Optional[str] = None,
        to_date: Optional[str] = None,
        search: Optional[str] = None,
    ) -> dict:
        page = max(page, 1)
        limit = min(max(limit, 1), 100)
        since, until = parse_range(from_date, to_date)
        invoices, total = self.repo.page_invoices(
            self.db, salon_id, (page - 1) * limit, limit, since, until, search.strip() if search else None
        )
        counts = self.repo.item_counts(self.db, [i.id for i in invoices])
        return {
            "success": True,
            "bills": [
                {
                    "id": invoice.id,
                    "invoice_number": invoice.invoice_number,
                    "created_at": invoice.created_at.isoformat() if invoice.created_at else None,
                    "subtotal": invoice.subtotal,
                    "discount_amount": invoice.discount_amount,
                    "tax_amount": invoice.tax_amount,
                    "total_amount": invoice.total_amount,
                    "payment_method": invoice.payment_method,
                    "payment_status": invoice.payment_status,
                    "customer": (
                        {"id": invoice.customer.id, "name": invoice.customer.name, "phone": invoice.customer.phone}
                        if invoice.customer
                        else None
                    ),
                    "items_count": counts.get(invoice.id, 0),
                }
                for invoice in invoices
            ],
            "total": total,
            "page": page,
            "limit": limit,
            "totalPages": math.ceil(total / limit) if total else 0,
        }

    def chart(self, salon_id: str, period: str = "daily", days: int = 30, today: Optional[date] = None) -> dict:
        if period not in CHART_PERIODS:
            raise HTTPException(status_code=400, detail="Invalid period")
        today = today or datetime.utcnow().date()

        if period == "daily":
            days = min(max(days, 1), 365)
            start = today - timedelta(days=days)
            buckets = {(start + timedelta(days=i)).isoformat(): [0.0, 0] for i in range(days + 1)}
            key_format = "%Y-%m-%d"
            label = "date"
        else:
            first_month = today.replace(day=1) - relativedelta(months=11)
            start = first_month
            buckets = {(first_month + relativedelta(months=i)).strftime("%Y-%m"): [0.0, 0] for i in range(12)}
            key_format = "%Y-%m"
            label = "month"

        for invoice in self.repo.paid_invoices(self.db, salon_id, since=day_start(start)):
            bucket = buckets.get(invoice.created_at.strftime(key_format))
            if bucket is not None:
                bucket[0] += invoice.total_amount or 0
                bucket[1] += 1

        data = [{label: key, "revenue": money(revenue), "bills": bills} for key, (revenue, bills) in sorted(buckets.items())]
        return {"success": True, "period": period, "data": data}

    # ========================================================================
    # PERFORMANCE
    # ========================================================================

    def performance(self, salon_id: str) -> dict:
        since = datetime.utcnow() - timedelta(days=PERFORMANCE_WINDOW_DAYS)
        invoices = self.repo.paid_invoices(self.db, salon_id, since=since)
        if not invoices:
            return {"topServices": [], "staffPerformance": [], "totalBills": 0, "totalItems": 0}

        items = self.repo.items_for_invoices(self.db, [i.id for i in invoices])
        top_services, staff_performance = aggregate_performance(items, self.repo.staff_names(self.db, salon_id))
        return {
            "topServices": top_services[:5],
            "staffPerformance": staff_performance[:5],
            "totalBills": len(invoices),
            "totalItems": len(items),
        }

    # ========================================================================
    # STOCK
    # ========================================================================

    def stock_report(self, salon_id: str, category: Optional[str] = None, status: Optional[str] = None) -> dict:
        report = []
        for inv in self.repo.inventory_with_products(self.db, salon_id):
            product = inv.product
            row = {
                "product_id": product.id,
                "product_name": product.name,
                "category": product.category,
                "brand": product.brand,
                "unit": product.unit,
                "quantity": inv.quantity,
                "reorder_level": inv.reorder_level,
                "stock_status": stock_status(inv.quantity, inv.reorder_level),
                "cost_price": product.cost_price,
                "stock_value": money((product.cost_price or 0) * inv.quantity),
                "selling_price": product.selling_price,
                "potential_revenue": money((product.selling_price or 0) * inv.quantity),
                "last_updated": inv.updated_at.isoformat() if inv.updated_at else None,
            }
            if category and row["category"] != category:
                continue
            if status and row["stock_status"] != status:
                continue
            report.append(row)

        summary = {
            "total_products": len(report),
            "total_stock_value": money(sum(r["stock_value"] for r in report)),
            "total_potential_revenue": money(sum(r["potential_revenue"] for r in report)),
            "out_of_stock_count": sum(1 for r in report if r["stock_status"] == "out_of_stock"),
            "low_stock_count": sum(1 for r in report if r["stock_status"] == "low_stock"),
        }
        return {"data": report, "summary": summary}

    def movements_report(
        self,
        salon_id: str,
        start_date: Optional[str] = None,
        end_date: Optional[str] = None,
        product_id: Optional[str] = None,
        movement_type: Optional[str] = None,
        supplier_id: Optional[str] = None,
    ) -> dict:
        since, until = parse_range(start_date, end_date)
        movements = self.repo.movements(
            self.db, salon_id, since, until, product_id, movement_type, supplier_id, limit=MOVEMENTS_LIMIT
        )
        report = [
            {
                "id": m.id,
                "date": m.created_at.isoformat() if m.created_at else None,
                "product_name": m.product.name if m.product else None,
                "product_unit": m.product.unit if m.product else None,
                "movement_type": m.movement_type,
                "quantity_change": m.quantity_change,
                "quantity_before": m.quantity_before,
                "quantity_after": m.quantity_after,
                "supplier_name": m.supplier.name if m.supplier else None,
                "reference_type": m.reference_type,
                "reason": m.reason,
            }
            for m in movements
        ]

        def total(kind: str) -> float:
            return sum(m.quantity_change for m in movements if m.movement_type == kind)

        summary = {
            "total_movements": len(report),
            "purchases": total("purchase"),
            "deductions": abs(total("billing_deduction")),
            "adjustments": total("manual_adjustment"),
        }
        return {"data": report, "summary": summary}

    def suppliers_report(
        self, salon_id: str, start_date: Optional[str] = None, end_date: Optional[str] = None, supplier_id: Optional[str] = None
    ) -> dict:
        since, until = parse_range(start_date, end_date)
        purchases = self.repo.movements(
            self.db, salon_id, since, until, movement_type="purchase", supplier_id=supplier_id, suppliers_only=True
        )

        suppliers: dict[str, dict] = {}
        for m in purchases:
            if not m.supplier:
                continue
            entry = suppliers.setdefault(
                m.supplier_id,
                {
                    "supplier_id": m.supplier_id,
                    "supplier_name": m.supplier.name,
                    "contact_person": m.supplier.contact_person,
                    "phone": m.supplier.phone,
                    "total_purchases": 0,
                    "total_quantity": 0.0,
                    "total_value": 0.0,
                    "products": [],
                },
            )
            cost = (m.product.cost_price if m.product else 0) * m.quantity_change
            entry["total_purchases"] += 1
            entry["total_quantity"] += m.quantity_change
            entry["total_value"] += cost
            entry["products"].append(
                {"product_name": m.product.name if m.product else "Unknown", "quantity": m.quantity_change, "cost": money(cost)}
            )

        report = sorted(suppliers.values(), key=lambda r: r["total_value"], reverse=True)
        for row in report:
            row["total_value"] = money(row["total_value"])
        summary = {
            "total_suppliers": len(report),
            "total_purchases": sum(r["total_purchases"] for r in report),
            "total_quantity": sum(r["total_quantity"] for r in report),
            "total_value": money(sum(r["total_value"] for r in report)),
        }
        return {"data": report, "summary": summary}

    # ========================================================================
    # DOWNLOADS
    # ========================================================================

    def business_report_data(self, salon_id: str, period: str = "month", now: Optional[datetime] = None) -> dict:
        """Collect everything the PDF business report shows"""
        now = now or datetime.utcnow()
        if period == "week":
            since = day_start(now.date() - timedelta(days=7))
            period_label = "Last 7 Days"
        else:
            since = day_start(now.date().replace(day=1))
            period_label = now.strftime("%B %Y")

        invoices = self.repo.paid_invoices(self.db, salon_id, since=since)
        items = self.repo.items_for_invoices(self.db, [i.id for i in invoices])

        staff_stats: dict[str, dict] = defaultdict(lambda: {"services": 0, "revenue": 0.0})
        for item in items:
            if item.staff_id:
                staff_stats[item.staff_id]["services"] += 1
                staff_stats[item.staff_id]["revenue"] += item.total_price or 0
        names = self.repo.staff_names(self.db, salon_id)
        staff_performance = sorted(
            (
                {"name": names.get(staff_id, "Unknown"), "services": s["services"], "revenue": money(s["revenue"])}
                for staff_id, s in staff_stats.items()
            ),
            key=lambda s: s["revenue"],
            reverse=True,
        )

        total_revenue = money(sum(i.total_amount or 0 for i in invoices))
        salon = self.repo.get_salon(self.db, salon_id)
        return {
            "salon": {
                "name": salon.name if salon else "SalonX",
                "city": salon.city if salon else None,
                "phone": salon.phone if salon else None,
            },
            "period_label": period_label,
            "total_revenue": total_revenue,
            "total_bills": len(invoices),
            "avg_transaction": money(total_revenue / len(invoices)) if invoices else 0,
            "staff_performance": staff_performance,
            "recent_bills": invoices[:15],
        }

    def export_invoices_csv(self, salon_id: str, from_date: Optional[str] = None, to_date: Optional[str] = None) -> tuple[str, str]:
        """Returns (csv_text, filename)"""
        since, until = parse_range(from_date, to_date)
        invoices = self.repo.paid_invoices(self.db, salon_id, since, until)

        output = StringIO()
        writer = csv.writer(output)
        writer.writerow(
            [
                "Invoice Number",
                "Date",
                "Customer",
                "Phone",
                "Subtotal",
                "Discount",
                "Tax",
                "Total",
                "Payment Method",
                "Status",
            ]
        )
        for invoice in invoices:
            writer.writerow(self._csv_row(invoice))

        filename = f"invoices_export_{datetime.utcnow().strftime('%Y%m%d_%H%M%S')}.csv"
        logger.info(f"✅ CSV export for salon {salon_id}: {filename} ({len(invoices)} invoices)")
        return output.getvalue(), filename

    @staticmethod
    def _csv_row(invoice: Invoice) -> list:
        return [
            invoice.invoice_number,
            invoice.created_at.strftime("%Y-%m-%d %H:%M:%S") if invoice.created_at else "",
            invoice.customer.name if invoice.customer else "",
            invoice.customer.phone if invoice.customer else "",
            f"{invoice.subtotal:.2f}",
            f"{invoice.discount_amount:.2f}",
            f"{invoice.tax_amount:.2f}",
            f"{invoice.total_amount:.2f}",
            invoice.payment_method or "",
            invoice.payment_status or "",
        ]
