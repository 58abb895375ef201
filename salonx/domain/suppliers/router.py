"""Supplier router"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ...auth import get_current_salon_id
from ...database import get_db
from ...models_inventory import Supplier
from .schemas import SupplierCreate, SupplierUpdate
from .service import SupplierService

router = APIRouter(prefix="/api/suppliers", tags=["Suppliers"])


def get_supplier_service(db: Session = Depends(get_db)) -> SupplierService:
    """Dependency injection for SupplierService"""
    return SupplierService(db)


def serialize_supplier(s: Supplier) -> dict:
    return {
        "id": s.id,
        "salon_id": s.salon_id,
        "name": s.name,
        "contact_person": s.contact_person,
        "phone": s.phone,
        "email": s.email,
        "address": s.address,
        "gst_number": s.gst_number,
        "notes": s.notes,
        "is_active": s.is_active,
        "created_at": s.created_at,
    }


@router.get("")
async def list_suppliers(
    salon_id: str = Depends(get_current_salon_id),
    service: SupplierService = Depends(get_supplier_service),
):
    return {"success": True, "data": [serialize_supplier(s) for s in service.list_suppliers(salon_id)]}


@router.post("", status_code=201)
async def create_supplier(
    data: SupplierCreate,
    salon_id: str = Depends(get_current_salon_id),
    service: SupplierService = Depends(get_supplier_service),
):
    supplier = service.create_supplier(salon_id, data)
    return {"success": True, "data": serialize_supplier(supplier), "message": "Supplier created successfully"}


@router.get("/{supplier_id}")
async def get_supplier(
    supplier_id: str,
    salon_id: str = Depends(get_current_salon_id),
    service: SupplierService = Depends(get_supplier_service),
):
    supplier, purchases = service.get_supplier_with_purchases(salon_id, supplier_id)
    data = serialize_supplier(supplier)
    data["purchases"] = [
        {
            "id": m.id,
            "product_id": m.product_id,
            "product_name": m.product.name if m.product else None,
            "product_unit": m.product.unit if m.product else None,
            "quantity": m.quantity_change,
            "cost_price": m.product.cost_price if m.product else None,
            "reason": m.reason,
            "created_at": m.created_at,
        }
        for m in purchases
    ]
    return {"success": True, "data": data}


@router.patch("/{supplier_id}")
async def update_supplier(
    supplier_id: str,
    data: SupplierUpdate,
    salon_id: str = Depends(get_current_salon_id),
    service: SupplierService = Depends(get_supplier_service),
):
    supplier = service.update_supplier(salon_id, supplier_id, data)
    return {"success": True, "data": serialize_supplier(supplier), "message": "Supplier updated successfully"}


@router.delete("/{supplier_id}")
async def delete_supplier(
    supplier_id: str,
    salon_id: str = Depends(get_current_salon_id),
    service: SupplierService = Depends(get_supplier_service),
):
    message = service.delete_supplier(salon_id, supplier_id)
    return {"success": True, "message": message}


__all__ = ["router"]
