"""Staff service - Business logic for staff members and their performance"""

import logging
from datetime import datetime, timedelta
from typing import Optional

from fastapi import HTTPException
from sqlalchemy.orm import Session

from ...models import Staff
from ...utils.sanitization import sanitize_string
from .repository import StaffRepository
from .schemas import StaffCreate, StaffMetrics, StaffUpdate

logger = logging.getLogger(__name__)

METRICS_WINDOW_DAYS = 30


class StaffService:
    """Service layer for staff business logic"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = StaffRepository()

    def get_staff_list(self, salon_id: str) -> list[Staff]:
        return self.repo.list_staff(self.db, salon_id)

    def get_staff(self, salon_id: str, staff_id: str) -> Staff:
        staff = self.repo.get_staff(self.db, salon_id, staff_id)
        if not staff:
            raise HTTPException(status_code=404, detail="Staff member not found")
        return staff

    def create_staff(self, salon_id: str, data: StaffCreate) -> Staff:
        if not (data.name or "").strip():
            raise HTTPException(status_code=400, detail="Staff name is required")
        if not (data.role or "").strip():
            raise HTTPException(status_code=400, detail="Role is required")

        staff = self.repo.create_staff(
            self.db,
            salon_id,
            name=sanitize_string(data.name),
            role=sanitize_string(data.role),
            phone=sanitize_string(data.phone),
            email=(data.email or "").strip().lower() or None,
            image_url=data.imageUrl,
            service_ids=data.serviceIds or [],
            is_cashier=bool(data.isCashier),
            is_active=True,
        )
        logger.info(f"✅ Staff created: {staff.id} for salon {salon_id}")
        return staff

    def update_staff(self, salon_id: str, data: StaffUpdate) -> Staff:
        if not data.id:
            raise HTTPException(status_code=400, detail="Staff ID is required")
        staff = self.get_staff(salon_id, data.id)

        field_map = {
            "name": "name",
            "role": "role",
            "phone": "phone",
            "email": "email",
            "imageUrl": "image_url",
            "serviceIds": "service_ids",
            "isCashier": "is_cashier",
            "isActive": "is_active",
        }
        updates = {}
        for key, value in data.model_dump(exclude_unset=True, exclude={"id"}).items():
            column = field_map[key]
            if key in ("name", "role"):
                if not (value or "").strip():
                    raise HTTPException(status_code=400, detail=f"{key.capitalize()} cannot be empty")
                value = sanitize_string(value)
            elif key == "phone":
                value = sanitize_string(value)
            elif key == "serviceIds":
                value = value or []
            updates[column] = value

        return self.repo.update_staff(self.db, staff, **updates)

    def delete_staff(self, salon_id: str, staff_id: Optional[str], permanent: bool = False) -> None:
        """Soft delete by default; permanent deletion is refused once staff appear on invoices"""
        if not staff_id:
            raise HTTPException(status_code=400, detail="Staff ID is required")
        staff = self.get_staff(salon_id, staff_id)

        if not permanent:
            self.repo.update_staff(self.db, staff, is_active=False)
            logger.info(f"🚫 Staff deactivated: {staff_id}")
            return

        if self.repo.count_billed_invoices(self.db, staff_id) > 0:
            raise HTTPException(
                status_code=400,
                detail="Cannot delete staff member with existing invoices. Deactivate instead.",
            )
        if self.repo.count_performed_items(self.db, staff_id) > 0:
            raise HTTPException(
                status_code=400,
                detail="Cannot delete staff member who has performed services. Deactivate instead.",
            )
        self.repo.delete_staff(self.db, staff)
        logger.info(f"🗑️ Staff deleted: {staff_id}")

    # ========================================================================
    # PERFORMANCE
    # ========================================================================

    def get_metrics(self, salon_id: str, staff_id: str) -> dict:
        """Rolling 30-day performance for one staff member"""
        self.get_staff(salon_id, staff_id)
        since = datetime.utcnow() - timedelta(days=METRICS_WINDOW_DAYS)

        items = self.repo.get_items_since(self.db, salon_id, staff_id, since)
        service_items = [i for i in items if i.item_type == "service"]
        product_items = [i for i in items if i.item_type == "product"]
        invoice_ids = list({i.invoice_id for i in service_items})

        metrics = StaffMetrics(
            staff_id=staff_id,
            bills_created=len(invoice_ids),
            services_performed=int(sum(i.quantity or 0 for i in service_items)),
            products_sold=round(sum(i.quantity or 0 for i in product_items), 2),
            revenue_generated=round(sum(i.total_price or 0 for i in items), 2),
            total_items_handled=len(items),
            appointments_completed=self.repo.count_completed_appointments(self.db, salon_id, staff_id, since),
        )

        recent = self.repo.get_invoices(self.db, list({i.invoice_id for i in items}))
        recent_invoices = [
            {
                "id": inv.id,
                "invoice_number": inv.invoice_number,
                "total_amount": inv.total_amount,
                "created_at": inv.created_at,
                "customer": {"id": inv.customer.id, "name": inv.customer.name} if inv.customer else None,
            }
            for inv in recent
        ]
        return {"metrics": metrics, "recent_invoices": recent_invoices, "period_days": METRICS_WINDOW_DAYS}

    def get_performance(self, salon_id: str) -> list[dict]:
        """All-time performance for every staff member"""
        staff_list = self.repo.list_staff(self.db, salon_id)
        bills = self.repo.bills_created_by_staff(self.db, salon_id)

        totals: dict[str, dict] = {}
        for staff_id, item_type, quantity, revenue, count in self.repo.item_totals_by_staff(self.db, salon_id):
            entry = totals.setdefault(
                staff_id, {"services_performed": 0, "products_sold": 0, "revenue_generated": 0.0, "total_items_handled": 0}
            )
            if item_type == "service":
                entry["services_performed"] += int(quantity)
            else:
                entry["products_sold"] += float(quantity)
            entry["revenue_generated"] += float(revenue)
            entry["total_items_handled"] += int(count)

        result = []
        for staff in staff_list:
            entry = totals.get(staff.id, {})
            result.append(
                {
                    "staff_id": staff.id,
                    "staff_name": staff.name,
                    "role": staff.role,
                    "is_active": staff.is_active,
                    "bills_created": bills.get(staff.id, 0),
                    "services_performed": entry.get("services_performed", 0),
                    "products_sold": entry.get("products_sold", 0),
                    "revenue_generated": round(entry.get("revenue_generated", 0.0), 2),
                    "total_items_handled": entry.get("total_items_handled", 0),
                }
            )
        result.sort(key=lambda row: row["revenue_generated"], reverse=True)
        return result
