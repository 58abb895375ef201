"""Inventory domain schemas"""

from typing import Optional

from pydantic import BaseModel


class StockPurchaseRequest(BaseModel):
    product_id: Optional[str] = None
    quantity: Optional[float] = None
    supplier_id: Optional[str] = None
    reason: Optional[str] = None


class StockAdjustRequest(BaseModel):
    product_id: Optional[str] = None
    quantity_change: Optional[float] = None
    reason: Optional[str] = None


class StockResult(BaseModel):
    """Outcome of a stock procedure"""

    success: bool
    new_quantity: Optional[float] = None
    message: str
