"""Customer service - Business logic for customer operations"""

import logging

from fastapi import HTTPException
from sqlalchemy.orm import Session

from ...models import Customer
from ...shared.validators import validate_email
from ...utils.sanitization import sanitize_string
from .repository import CustomerRepository
from .schemas import CustomerImportRow, CustomerUpdate

logger = logging.getLogger(__name__)

GENDERS = ["male", "female", "other"]


class CustomerService:
    """Service layer for customer business logic"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = CustomerRepository()

    def get_customers(self, salon_id: str) -> list[Customer]:
        return self.repo.list_customers(self.db, salon_id)

    def get_customer(self, salon_id: str, customer_id: str) -> Customer:
        customer = self.repo.get_customer(self.db, salon_id, customer_id)
        if not customer:
            raise HTTPException(status_code=404, detail="Customer not found")
        return customer

    def import_customers(self, salon_id: str, rows: list[CustomerImportRow]) -> tuple[list[Customer], int]:
        """Bulk import; rows without a name or phone are skipped"""
        valid_rows = []
        failed = 0
        for row in rows:
            name = (row.name or "").strip()
            phone = (row.phone or "").strip()
            if not name or not phone:
                failed += 1
                continue
            gender = (row.gender or "").strip().lower() or None
            valid_rows.append(
                {
                    "name": sanitize_string(name),
                    "phone": sanitize_string(phone),
                    "email": (row.email or "").strip().lower() or None,
                    "gender": gender if gender in GENDERS else None,
                    "notes": sanitize_string(row.notes),
                    "tags": row.tags or ["Imported"],
                }
            )

        if not valid_rows:
            raise HTTPException(
                status_code=400,
                detail={"message": "No valid customers to import", "imported": 0, "failed": failed},
            )

        customers = self.repo.bulk_create(self.db, salon_id, valid_rows)
        logger.info(f"📥 Imported {len(customers)} customers for salon {salon_id} ({failed} skipped)")
        return customers, failed

    def update_customer(self, salon_id: str, customer_id: str, data: CustomerUpdate) -> Customer:
        customer = self.get_customer(salon_id, customer_id)
        updates = data.model_dump(exclude_unset=True)

        if "name" in updates:
            if not (updates["name"] or "").strip():
                raise HTTPException(status_code=400, detail="Name cannot be empty")
            updates["name"] = sanitize_string(updates["name"])
        if "phone" in updates:
            if not (updates["phone"] or "").strip():
                raise HTTPException(status_code=400, detail="Phone cannot be empty")
            updates["phone"] = sanitize_string(updates["phone"])
        if updates.get("email"):
            try:
                updates["email"] = validate_email(updates["email"])
            except ValueError as e:
                raise HTTPException(status_code=400, detail=str(e)) from e
        if updates.get("gender") and updates["gender"] not in GENDERS:
            raise HTTPException(status_code=400, detail="Gender must be male, female, or other")
        if "notes" in updates:
            updates["notes"] = sanitize_string(updates["notes"])
        if "tags" in updates and updates["tags"] is None:
            updates["tags"] = []

        return self.repo.update_customer(self.db, customer, **updates)

    def delete_customers(self, salon_id: str, customer_ids: list[str]) -> int:
        if not customer_ids:
            raise HTTPException(status_code=400, detail="Customer IDs are required")
        deleted = self.repo.delete_customers(self.db, salon_id, customer_ids)
        logger.info(f"🗑️ Deleted {deleted} customers for salon {salon_id}")
        return deleted

    def delete_customer(self, salon_id: str, customer_id: str) -> None:
        self.get_customer(salon_id, customer_id)
        self.repo.delete_customers(self.db, salon_id, [customer_id])
