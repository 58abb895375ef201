"""
Billing service - Point-of-sale invoices

create_invoice_atomic validates the bill, checks and deducts stock, numbers the
invoice and records coupon usage inside a single transaction. Any failure rolls
the whole bill back.
"""

import logging
from collections import defaultdict
from datetime import datetime
from typing import Optional

from fastapi import HTTPException
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ...models_billing import Invoice, InvoiceItem
from ...utils.sanitization import sanitize_string
from ..coupons.repository import CouponRepository
from ..inventory.service import InventoryService, format_qty
from ..notifications.service import notify
from .repository import BillingRepository
from .schemas import BillItem, CompleteBillRequest, DeductItem

logger = logging.getLogger(__name__)

PAYMENT_METHODS = ["cash", "upi", "card"]
INVOICE_PREFIX = "SALX"


class BillingError(Exception):
    """A bill was rejected; the message is shown to the cashier"""


def normalize_item(item: BillItem) -> dict:
    """Map the several item shapes the POS sends onto one"""
    return {
        "item_type": item.item_type or ("service" if item.service_id else "product"),
        "item_id": item.item_id or item.service_id or item.product_id,
        "item_name": item.item_name or item.service_name or "Unknown",
        "staff_id": item.staff_id or None,
        "quantity": item.quantity or 1,
        "unit_price": item.unit_price or 0,
    }


def compute_totals(items: list[dict], data: CompleteBillRequest) -> dict:
    """Use client totals where given, otherwise derive them from the items"""
    subtotal = data.subtotal if data.subtotal is not None else sum(i["quantity"] * i["unit_price"] for i in items)
    discount_percent = data.discount_percent or 0
    discount_amount = data.discount_amount
    if discount_amount is None:
        discount_amount = subtotal * discount_percent / 100
    tax_percent = data.tax_percent or 0
    tax_amount = data.tax_amount
    if tax_amount is None:
        tax_amount = max(subtotal - discount_amount, 0) * tax_percent / 100
    total = data.final_amount
    if total is None:
        total = max(subtotal - discount_amount, 0) + tax_amount
    return {
        "subtotal": round(subtotal, 2),
        "discount_percent": discount_percent,
        "discount_amount": round(discount_amount, 2),
        "tax_percent": tax_percent,
        "tax_amount": round(tax_amount, 2),
        "total_amount": round(total, 2),
    }


class BillingService:
    """Service layer for POS billing"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = BillingRepository()
        self.coupons = CouponRepository()
        self.inventory = InventoryService(db)

    # ========================================================================
    # INVOICE NUMBERING
    # ========================================================================

    def next_invoice_number(self, salon_id: str, when: Optional[datetime] = None) -> str:
        """SALX-YYYYMM-NNNN, sequential per salon per month"""
        when = when or datetime.utcnow()
        prefix = f"{INVOICE_PREFIX}-{when.strftime('%Y%m')}-"
        sequence = self.repo.count_with_prefix(self.db, salon_id, prefix) + 1
        number = f"{prefix}{sequence:04d}"
        while self.repo.invoice_number_exists(self.db, salon_id, number):
            sequence += 1
            number = f"{prefix}{sequence:04d}"
        return number

    # ========================================================================
    # ATOMIC INVOICE CREATION
    # ========================================================================

    def complete_bill(self, salon_id: str, data: CompleteBillRequest, idempotency_key: Optional[str]) -> tuple[Invoice, str]:
        """Validate request shape, then create the invoice atomically"""
        if not data.items:
            raise HTTPException(status_code=400, detail="No items in bill")
        if not data.payment_method:
            raise HTTPException(status_code=400, detail="Payment method is required")
        if data.payment_method not in PAYMENT_METHODS:
            raise HTTPException(status_code=400, detail="Payment method must be cash, upi, or card")
        if not data.billed_by_staff_id:
            raise HTTPException(status_code=400, detail="Biller (staff) is required")
        if any((i.item_type == "service" or i.service_id) and not i.staff_id for i in data.items):
            raise HTTPException(status_code=400, detail="All services must have a staff member assigned")

        items = [normalize_item(i) for i in data.items]
        try:
            invoice_id, message = self.create_invoice_atomic(salon_id, data, items, idempotency_key)
        except BillingError as e:
            self.db.rollback()
            logger.warning(f"🚫 Bill rejected for salon {salon_id}: {e}")
            raise HTTPException(status_code=400, detail=str(e)) from e
        except IntegrityError as e:
            self.db.rollback()
            logger.error(f"❌ Invoice insert conflict for salon {salon_id}: {e}")
            raise HTTPException(status_code=409, detail="Invoice could not be created, please retry") from e
        except Exception:
            self.db.rollback()
            raise

        return self.get_invoice(salon_id, invoice_id), message

    def create_invoice_atomic(
        self, salon_id: str, data: CompleteBillRequest, items: list[dict], idempotency_key: Optional[str]
    ) -> tuple[str, str]:
        """Returns (invoice_id, message); raises BillingError without committing anything"""
        if idempotency_key:
            existing = self.repo.get_by_idempotency_key(self.db, salon_id, idempotency_key)
            if existing:
                logger.info(f"♻️ Idempotent replay for invoice {existing.invoice_number}")
                return existing.id, "Invoice already exists (idempotent)"

        if not self.repo.get_staff(self.db, salon_id, data.billed_by_staff_id):
            raise BillingError("Invalid biller staff")

        product_totals: dict[str, float] = defaultdict(float)
        for item in items:
            if item["quantity"] <= 0:
                raise BillingError("Item quantity must be greater than zero")
            if item["item_type"] == "service":
                if not item["staff_id"]:
                    raise BillingError("Service items require staff_id")
                if not self.repo.get_staff(self.db, salon_id, item["staff_id"]):
                    raise BillingError("Invalid staff for service item")
            elif item["item_type"] == "product":
                if not item["item_id"]:
                    raise BillingError("Product items require item_id")
                product_totals[item["item_id"]] += item["quantity"]
            else:
                raise BillingError(f"Invalid item type: {item['item_type']}")

        for product_id, required in product_totals.items():
            stock = self.inventory.repo.lock_inventory(self.db, salon_id, product_id)
            available = stock.quantity if stock else 0
            if stock is None or available < required:
                raise BillingError(
                    f"Insufficient stock for product. Available: {format_qty(available)}, Required: {format_qty(required)}"
                )

        customer = None
        if data.customer_id:
            customer = self.repo.get_customer(self.db, salon_id, data.customer_id, lock=True)
            if not customer:
                raise BillingError("Customer not found")

        coupon = None
        if data.coupon_id:
            coupon = self.coupons.get_coupon(self.db, salon_id, data.coupon_id, lock=True)
            if not coupon:
                raise BillingError("Invalid coupon")

        now = datetime.utcnow()
        totals = compute_totals(items, data)
        invoice = Invoice(
            salon_id=salon_id,
            invoice_number=self.next_invoice_number(salon_id, now),
            customer_id=customer.id if customer else None,
            billed_by_staff_id=data.billed_by_staff_id,
            coupon_id=coupon.id if coupon else None,
            coupon_code=(data.coupon_code or (coupon.code if coupon else None)),
            payment_method=data.payment_method,
            payment_status="paid",
            idempotency_key=idempotency_key,
            notes=sanitize_string(data.notes),
            created_at=now,
            **totals,
        )
        self.db.add(invoice)
        self.db.flush()

        for item in items:
            self.db.add(
                InvoiceItem(
                    invoice_id=invoice.id,
                    item_type=item["item_type"],
                    item_id=item["item_id"],
                    item_name=sanitize_string(item["item_name"]),
                    staff_id=item["staff_id"],
                    quantity=item["quantity"],
                    unit_price=item["unit_price"],
                    total_price=round(item["quantity"] * item["unit_price"], 2),
                )
            )

        for item in items:
            if item["item_type"] != "product":
                continue
            result = self.inventory.deduct_for_billing(salon_id, item["item_id"], item["quantity"], invoice.id)
            if not result.success:
                raise BillingError(result.message)

        if coupon:
            coupon.used_count = (coupon.used_count or 0) + 1
        if customer:
            self.repo.record_visit(customer, totals["total_amount"], now)

        notify(
            self.db,
            salon_id,
            "payment_received",
            "Payment received",
            f"₹{totals['total_amount']:.2f} via {data.payment_method.upper()} - {invoice.invoice_number}",
        )
        self.db.commit()
        logger.info(f"🧾 Invoice {invoice.invoice_number} created for salon {salon_id}: ₹{totals['total_amount']}")
        return invoice.id, "Invoice created successfully"

    # ========================================================================
    # STANDALONE STOCK DEDUCTION
    # ========================================================================

    def deduct_items(self, salon_id: str, items: list[DeductItem], billing_id: Optional[str]) -> list[dict]:
        """Deduct each item in turn; stops at the first failure, keeping earlier deductions"""
        if not items:
            raise HTTPException(status_code=400, detail="Items array is required")

        results = []
        for item in items:
            if not item.product_id:
                raise HTTPException(status_code=400, detail={"message": "product_id is required", "results": results})
            if item.quantity is None or item.quantity <= 0:
                raise HTTPException(
                    status_code=400,
                    detail={"message": "Quantity must be greater than zero", "failed_product_id": item.product_id, "results": results},
                )

            result = self.inventory.deduct_for_billing(salon_id, item.product_id, item.quantity, billing_id)
            if not result.success:
                self.db.rollback()
                raise HTTPException(
                    status_code=400,
                    detail={"message": result.message, "failed_product_id": item.product_id, "results": results},
                )
            self.db.commit()
            results.append({"product_id": item.product_id, **result.model_dump()})

        logger.info(f"📦 Deducted stock for {len(results)} items (billing {billing_id})")
        return results

    # ========================================================================
    # READ
    # ========================================================================

    def get_invoice(self, salon_id: str, invoice_id: str) -> Invoice:
        invoice = self.repo.get_invoice(self.db, salon_id, invoice_id)
        if not invoice:
            raise HTTPException(status_code=404, detail="Invoice not found")
        return invoice

    def get_salon_block(self, salon_id: str) -> dict:
        salon = self.repo.get_salon(self.db, salon_id)
        return {
            "name": salon.name if salon else "SalonX",
            "address": salon.address if salon else None,
            "phone": salon.phone if salon else None,
            "email": salon.owner_email if salon else None,
            "gst_number": salon.gst_number if salon else None,
            "logo": salon.logo_url if salon else None,
        }
