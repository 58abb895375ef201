"""Billing domain schemas"""

from typing import Optional

from pydantic import BaseModel


class BillItem(BaseModel):
    item_type: Optional[str] = None
    item_id: Optional[str] = None
    service_id: Optional[str] = None
    product_id: Optional[str] = None
    item_name: Optional[str] = None
    service_name: Optional[str] = None
    staff_id: Optional[str] = None
    quantity: Optional[float] = None
    unit_price: Optional[float] = None


class CompleteBillRequest(BaseModel):
    customer_id: Optional[str] = None
    billed_by_staff_id: Optional[str] = None
    items: list[BillItem] = []
    subtotal: Optional[float] = None
    discount_percent: Optional[float] = None
    discount_amount: Optional[float] = None
    coupon_id: Optional[str] = None
    coupon_code: Optional[str] = None
    tax_percent: Optional[float] = None
    tax_amount: Optional[float] = None
    final_amount: Optional[float] = None
    payment_method: Optional[str] = None
    notes: Optional[str] = None


class DeductItem(BaseModel):
    product_id: Optional[str] = None
    quantity: Optional[float] = None
    unit_price: Optional[float] = None


class DeductRequest(BaseModel):
    items: list[DeductItem] = []
    billing_id: Optional[str] = None
