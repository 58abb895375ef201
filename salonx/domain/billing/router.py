"""Billing router - POS checkout, stock deduction and invoice view"""

from typing import Optional

from fastapi import APIRouter, Depends, Header
from sqlalchemy.orm import Session

from ...auth import get_current_salon_id
from ...database import get_db
from ...models_billing import Invoice
from .schemas import CompleteBillRequest, DeductRequest
from .service import BillingService

router = APIRouter(prefix="/api/billing", tags=["Billing"])


def get_billing_service(db: Session = Depends(get_db)) -> BillingService:
    """Dependency injection for BillingService"""
    return BillingService(db)


def serialize_invoice(invoice: Invoice) -> dict:
    return {
        "id": invoice.id,
        "invoice_number": invoice.invoice_number,
        "customer_id": invoice.customer_id,
        "customer_name": invoice.customer.name if invoice.customer else None,
        "customer_phone": invoice.customer.phone if invoice.customer else None,
        "billed_by_staff_id": invoice.billed_by_staff_id,
        "billed_by_name": invoice.billed_by.name if invoice.billed_by else None,
        "subtotal": invoice.subtotal,
        "discount_percent": invoice.discount_percent,
        "discount_amount": invoice.discount_amount,
        "coupon_code": invoice.coupon_code,
        "tax_percent": invoice.tax_percent,
        "tax_amount": invoice.tax_amount,
        "total_amount": invoice.total_amount,
        "payment_method": invoice.payment_method,
        "payment_status": invoice.payment_status,
        "notes": invoice.notes,
        "created_at": invoice.created_at.isoformat() if invoice.created_at else None,
        "items": [
            {
                "id": item.id,
                "item_type": item.item_type,
                "item_id": item.item_id,
                "item_name": item.item_name,
                "staff_id": item.staff_id,
                "staff_name": item.staff.name if item.staff else None,
                "quantity": item.quantity,
                "unit_price": item.unit_price,
                "total_price": item.total_price,
            }
            for item in invoice.items
        ],
    }


# ============================================================================
# CHECKOUT
# ============================================================================


@router.post("/complete")
async def complete_bill(
    data: CompleteBillRequest,
    x_idempotency_key: Optional[str] = Header(None),
    salon_id: str = Depends(get_current_salon_id),
    service: BillingService = Depends(get_billing_service),
):
    invoice, message = service.complete_bill(salon_id, data, x_idempotency_key)
    return {"success": True, "bill": serialize_invoice(invoice), "message": message}


@router.post("/deduct")
async def deduct_stock(
    data: DeductRequest,
    salon_id: str = Depends(get_current_salon_id),
    service: BillingService = Depends(get_billing_service),
):
    results = service.deduct_items(salon_id, data.items, data.billing_id)
    return {"success": True, "results": results}


# ============================================================================
# INVOICE VIEW
# ============================================================================


@router.get("/invoice/{invoice_id}")
async def get_invoice(
    invoice_id: str,
    salon_id: str = Depends(get_current_salon_id),
    service: BillingService = Depends(get_billing_service),
):
    invoice = service.get_invoice(salon_id, invoice_id)
    return {"success": True, "invoice": serialize_invoice(invoice), "salon": service.get_salon_block(salon_id)}


__all__ = ["router"]
