"""Revenue dashboards, bill history, stock reports and downloads.

Invariants:
    - Revenue only counts paid invoices
    - Week starts on Sunday; month on the 1st
    - The daily chart has one bucket per day including today
    - Stock value is cost price times quantity on hand
"""

from datetime import date, datetime

import pytest

from salonx.domain.reports.service import ReportsService, week_start
from salonx.models_billing import Invoice


def add_invoice(db, salon, when, amount, status="paid", number=None):
    invoice = Invoice(
        salon_id=salon.id,
        invoice_number=number or f"SALX-{when.strftime('%Y%m%d%H%M%S')}",
        subtotal=amount,
        total_amount=amount,
        payment_method="cash",
        payment_status=status,
        created_at=when,
    )
    db.add(invoice)
    db.commit()
    return invoice


@pytest.fixture
def complete_bill(salon_client, staff, haircut):
    def _bill(quantity=1):
        return salon_client.post(
            "/api/billing/complete",
            json={
                "billed_by_staff_id": staff.id,
                "payment_method": "cash",
                "items": [{"item_type": "service", "item_id": haircut.id, "item_name": "Haircut",
                           "staff_id": staff.id, "quantity": quantity, "unit_price": 500}],
            },
        ).json()["bill"]

    return _bill


def test_week_starts_on_sunday():
    assert week_start(date(2025, 3, 12)) == date(2025, 3, 9)
    assert week_start(date(2025, 3, 9)) == date(2025, 3, 9)


def test_revenue_summary_buckets(db, salon):
    now = datetime(2025, 3, 12, 15, 0)  # Wednesday
    add_invoice(db, salon, datetime(2025, 3, 12, 10, 0), 100)
    add_invoice(db, salon, datetime(2025, 3, 10, 10, 0), 200)
    add_invoice(db, salon, datetime(2025, 3, 2, 10, 0), 400)
    add_invoice(db, salon, datetime(2025, 2, 27, 10, 0), 800)
    add_invoice(db, salon, datetime(2025, 3, 12, 11, 0), 1600, status="refunded")

    summary = ReportsService(db).revenue_summary(salon.id, now=now)
    assert summary == {"today": 100, "week": 300, "month": 700}


def test_daily_chart_has_a_bucket_per_day(db, salon):
    add_invoice(db, salon, datetime(2025, 3, 12, 10, 0), 250)
    chart = ReportsService(db).chart(salon.id, "daily", 7, today=date(2025, 3, 12))
    assert len(chart["data"]) == 8
    assert chart["data"][0]["date"] == "2025-03-05"
    assert chart["data"][-1] == {"date": "2025-03-12", "revenue": 250, "bills": 1}


def test_monthly_chart_covers_twelve_months(db, salon):
    add_invoice(db, salon, datetime(2024, 5, 3, 10, 0), 90)
    chart = ReportsService(db).chart(salon.id, "monthly", today=date(2025, 3, 12))
    months = [row["month"] for row in chart["data"]]
    assert months[0] == "2024-04"
    assert months[-1] == "2025-03"
    assert chart["data"][1]["revenue"] == 90


def test_chart_rejects_unknown_period(salon_client):
    response = salon_client.get("/api/reports/chart", params={"period": "hourly"})
    assert response.status_code == 400
    assert response.json()["detail"] == "Invalid period"


def test_revenue_endpoint_counts_todays_bill(salon_client, complete_bill):
    complete_bill(quantity=2)
    assert salon_client.get("/api/reports/revenue").json()["today"] == 1000


def test_bills_are_paginated_and_searchable(salon_client, complete_bill):
    numbers = [complete_bill()["invoice_number"] for _ in range(3)]

    page = salon_client.get("/api/reports/bills", params={"page": 1, "limit": 2}).json()
    assert page["total"] == 3
    assert page["totalPages"] == 2
    assert len(page["bills"]) == 2
    assert page["bills"][0]["items_count"] == 1

    found = salon_client.get("/api/reports/bills", params={"search": numbers[1]}).json()
    assert [bill["invoice_number"] for bill in found["bills"]] == [numbers[1]]


def test_performance(salon_client, complete_bill):
    complete_bill(quantity=3)
    body = salon_client.get("/api/reports/performance").json()
    assert body["totalBills"] == 1
    assert body["topServices"][0] == {"name": "Haircut", "count": 3, "revenue": 1500}
    assert body["staffPerformance"][0]["name"] == "Priya"


def test_performance_without_bills(salon_client):
    body = salon_client.get("/api/reports/performance").json()
    assert body == {"topServices": [], "staffPerformance": [], "totalBills": 0, "totalItems": 0}


def test_stock_report(salon_client, shampoo):
    body = salon_client.get("/api/reports/stock").json()
    row = body["data"][0]
    assert row["stock_value"] == 4000
    assert row["potential_revenue"] == 7000
    assert row["stock_status"] == "in_stock"
    assert body["summary"]["total_stock_value"] == 4000

    filtered = salon_client.get("/api/reports/stock", params={"status": "low_stock"}).json()
    assert filtered["data"] == []


def test_movements_and_supplier_reports(salon_client, shampoo, supplier):
    salon_client.post(
        "/api/inventory/purchase", json={"product_id": shampoo.id, "quantity": 10, "supplier_id": supplier.id}
    )
    salon_client.post(
        "/api/inventory/adjust", json={"product_id": shampoo.id, "quantity_change": -2, "reason": "Spilled"}
    )

    movements = salon_client.get("/api/reports/movements").json()
    assert movements["summary"] == {"total_movements": 2, "purchases": 10, "deductions": 0, "adjustments": -2}

    suppliers = salon_client.get("/api/reports/suppliers").json()
    assert suppliers["data"][0]["supplier_name"] == "Beauty Wholesale"
    assert suppliers["data"][0]["total_value"] == 2000


def test_invalid_date_filter(salon_client):
    response = salon_client.get("/api/reports/movements", params={"start_date": "12/03/2025"})
    assert response.status_code == 400


def test_csv_export(salon_client, complete_bill):
    number = complete_bill()["invoice_number"]
    response = salon_client.get("/api/reports/export")
    assert response.headers["content-type"].startswith("text/csv")
    lines = response.text.strip().splitlines()
    assert lines[0].startswith("Invoice Number,Date,Customer")
    assert lines[1].startswith(number)


def test_pdf_download(salon_client, complete_bill):
    complete_bill()
    response = salon_client.get("/api/reports/download", params={"period": "week"})
    assert response.status_code == 200
    assert response.headers["content-type"] == "application/pdf"
    assert 'filename="Report_Last_7_Days.pdf"' in response.headers["content-disposition"]
    assert response.content.startswith(b"%PDF")
