"""Supplier service"""

import logging

from fastapi import HTTPException
from sqlalchemy.orm import Session

from ...models_inventory import Supplier
from ...utils.sanitization import sanitize_dict
from .repository import SupplierRepository
from .schemas import SupplierCreate, SupplierUpdate

logger = logging.getLogger(__name__)

TEXT_FIELDS = ["name", "contact_person", "phone", "address", "gst_number", "notes"]


class SupplierService:
    def __init__(self, db: Session):
        self.db = db
        self.repo = SupplierRepository()

    def list_suppliers(self, salon_id: str) -> list[Supplier]:
        return self.repo.list_active(self.db, salon_id)

    def get_supplier(self, salon_id: str, supplier_id: str) -> Supplier:
        supplier = self.repo.get_supplier(self.db, salon_id, supplier_id)
        if not supplier:
            raise HTTPException(status_code=404, detail="Supplier not found")
        return supplier

    def get_supplier_with_purchases(self, salon_id: str, supplier_id: str) -> tuple[Supplier, list]:
        supplier = self.get_supplier(salon_id, supplier_id)
        return supplier, self.repo.recent_purchases(self.db, salon_id, supplier_id)

    def create_supplier(self, salon_id: str, data: SupplierCreate) -> Supplier:
        if not (data.name or "").strip():
            raise HTTPException(status_code=400, detail="Supplier name is required")
        fields = sanitize_dict(data.model_dump(), TEXT_FIELDS)
        if fields.get("email"):
            fields["email"] = fields["email"].strip().lower()
        supplier = self.repo.create_supplier(self.db, salon_id, is_active=True, **fields)
        logger.info(f"✅ Supplier created: {supplier.id} ({supplier.name})")
        return supplier

    def update_supplier(self, salon_id: str, supplier_id: str, data: SupplierUpdate) -> Supplier:
        supplier = self.get_supplier(salon_id, supplier_id)
        updates = sanitize_dict(data.model_dump(exclude_unset=True), TEXT_FIELDS)
        if "name" in updates and not (updates["name"] or "").strip():
            raise HTTPException(status_code=400, detail="Supplier name cannot be empty")
        return self.repo.update_supplier(self.db, supplier, **updates)

    def delete_supplier(self, salon_id: str, supplier_id: str) -> str:
        """Suppliers with purchase history are deactivated rather than deleted"""
        supplier = self.get_supplier(salon_id, supplier_id)
        if self.repo.has_movements(self.db, supplier_id):
            self.repo.update_supplier(self.db, supplier, is_active=False)
            logger.info(f"🚫 Supplier deactivated: {supplier_id}")
            return "Supplier deactivated (has purchase history)"
        self.repo.delete_supplier(self.db, supplier)
        logger.info(f"🗑️ Supplier deleted: {supplier_id}")
        return "Supplier deleted"
