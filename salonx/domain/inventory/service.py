"""
Inventory service - Stock procedures

Every stock change locks the product's inventory row, writes the new quantity
and appends a stock_movements row with before/after values in one transaction.
Procedures return a StockResult instead of raising so callers can decide how a
failure surfaces (HTTP 400 for direct calls, rollback inside billing).
"""

import logging
from typing import Optional

from fastapi import HTTPException
from sqlalchemy.orm import Session

from ...models_inventory import Inventory
from ..notifications.service import notify
from .repository import InventoryRepository
from .schemas import StockResult

logger = logging.getLogger(__name__)


def format_qty(value: float) -> str:
    value = float(value or 0)
    return str(int(value)) if value.is_integer() else f"{value:g}"


def stock_status(quantity: float, reorder_level: float) -> str:
    if (quantity or 0) <= 0:
        return "out_of_stock"
    if quantity <= (reorder_level or 0):
        return "low_stock"
    return "in_stock"


class InventoryService:
    """Service layer for stock levels and stock procedures"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = InventoryRepository()

    # ========================================================================
    # LISTING
    # ========================================================================

    def list_inventory(self, salon_id: str, low_stock: bool = False, category: Optional[str] = None) -> dict:
        rows = []
        summary = {"total_products": 0, "out_of_stock": 0, "low_stock": 0, "in_stock": 0, "total_value": 0.0}

        for inv in self.repo.list_inventory(self.db, salon_id, category):
            if low_stock and (inv.quantity or 0) > (inv.reorder_level or 0):
                continue

            status = stock_status(inv.quantity, inv.reorder_level)
            summary["total_products"] += 1
            summary[status] += 1
            summary["total_value"] += (inv.product.cost_price or 0) * (inv.quantity or 0)
            rows.append(
                {
                    "id": inv.id,
                    "product_id": inv.product_id,
                    "quantity": inv.quantity,
                    "reorder_level": inv.reorder_level,
                    "stock_status": status,
                    "updated_at": inv.updated_at,
                    "product": {
                        "id": inv.product.id,
                        "name": inv.product.name,
                        "category": inv.product.category,
                        "brand": inv.product.brand,
                        "type": inv.product.type,
                        "unit": inv.product.unit,
                        "cost_price": inv.product.cost_price,
                        "selling_price": inv.product.selling_price,
                    },
                }
            )

        summary["total_value"] = round(summary["total_value"], 2)
        return {"data": rows, "summary": summary}

    # ========================================================================
    # STOCK PROCEDURES (no commit; the caller owns the transaction)
    # ========================================================================

    def _apply_change(
        self,
        salon_id: str,
        inventory: Inventory,
        change: float,
        movement_type: str,
        reference_type: Optional[str] = None,
        reference_id: Optional[str] = None,
        supplier_id: Optional[str] = None,
        reason: Optional[str] = None,
    ) -> float:
        before = inventory.quantity or 0
        after = before + change
        inventory.quantity = after

        self.repo.add_movement(
            self.db,
            salon_id=salon_id,
            product_id=inventory.product_id,
            supplier_id=supplier_id,
            movement_type=movement_type,
            quantity_change=change,
            quantity_before=before,
            quantity_after=after,
            reference_type=reference_type,
            reference_id=reference_id,
            reason=reason,
        )

        reorder_level = inventory.reorder_level or 0
        if change < 0 and after <= reorder_level < before:
            product = inventory.product
            name = product.name if product else inventory.product_id
            notify(
                self.db,
                salon_id,
                "low_stock",
                "Low stock alert",
                f"{name} is down to {format_qty(after)} (reorder level {format_qty(reorder_level)})",
            )
            logger.info(f"📉 Low stock for product {inventory.product_id}: {after}")
        return after

    def purchase(
        self,
        salon_id: str,
        product_id: Optional[str],
        quantity: Optional[float],
        supplier_id: Optional[str] = None,
        reason: Optional[str] = None,
    ) -> StockResult:
        if not product_id:
            return StockResult(success=False, message="product_id is required")
        if quantity is None or quantity <= 0:
            return StockResult(success=False, message="Quantity must be greater than zero")

        product = self.repo.get_product(self.db, salon_id, product_id)
        if not product:
            return StockResult(success=False, message="Product not found")
        if supplier_id and not self.repo.get_supplier(self.db, salon_id, supplier_id):
            return StockResult(success=False, message="Supplier not found")

        inventory = self.repo.lock_inventory(self.db, salon_id, product_id)
        if inventory is None:
            inventory = Inventory(salon_id=salon_id, product_id=product_id, quantity=0, reorder_level=10)
            self.db.add(inventory)
            self.db.flush()

        new_quantity = self._apply_change(
            salon_id,
            inventory,
            quantity,
            "purchase",
            reference_type="purchase_order",
            supplier_id=supplier_id,
            reason=reason or "Stock purchase",
        )
        return StockResult(success=True, new_quantity=new_quantity, message="Stock added successfully")

    def adjust(
        self, salon_id: str, product_id: Optional[str], quantity_change: Optional[float], reason: Optional[str]
    ) -> StockResult:
        if not product_id:
            return StockResult(success=False, message="product_id is required")
        if not quantity_change:
            return StockResult(success=False, message="quantity_change is required and must not be zero")
        if not (reason or "").strip():
            return StockResult(success=False, message="Reason is required for manual adjustment")

        inventory = self.repo.lock_inventory(self.db, salon_id, product_id)
        if inventory is None:
            return StockResult(success=False, message="Product not found in inventory")

        current = inventory.quantity or 0
        if current + quantity_change < 0:
            return StockResult(
                success=False,
                message=f"Cannot reduce below zero. Current: {format_qty(current)}, Change: {format_qty(quantity_change)}",
            )

        new_quantity = self._apply_change(
            salon_id,
            inventory,
            quantity_change,
            "manual_adjustment",
            reference_type="manual",
            reason=reason.strip(),
        )
        return StockResult(success=True, new_quantity=new_quantity, message="Adjustment applied successfully")

    def deduct_for_billing(
        self, salon_id: str, product_id: str, quantity: float, billing_id: Optional[str] = None
    ) -> StockResult:
        inventory = self.repo.lock_inventory(self.db, salon_id, product_id)
        if inventory is None:
            return StockResult(success=False, message="Product not found in inventory")

        available = inventory.quantity or 0
        if available < quantity:
            return StockResult(
                success=False,
                message=f"Insufficient stock. Available: {format_qty(available)}, Required: {format_qty(quantity)}",
            )

        new_quantity = self._apply_change(
            salon_id,
            inventory,
            -quantity,
            "billing_deduction",
            reference_type="invoice" if billing_id else None,
            reference_id=billing_id,
            reason="Used in billing",
        )
        return StockResult(success=True, new_quantity=new_quantity, message="Stock deducted successfully")

    # ========================================================================
    # TRANSACTIONAL WRAPPERS FOR THE HTTP LAYER
    # ========================================================================

    def _commit_or_raise(self, result: StockResult) -> StockResult:
        if not result.success:
            self.db.rollback()
            raise HTTPException(status_code=400, detail=result.message)
        self.db.commit()
        return result

    def add_stock_purchase(self, salon_id: str, product_id, quantity, supplier_id=None, reason=None) -> StockResult:
        try:
            result = self.purchase(salon_id, product_id, quantity, supplier_id, reason)
        except Exception:
            self.db.rollback()
            raise
        result = self._commit_or_raise(result)
        logger.info(f"📦 Purchase recorded for product {product_id}: +{quantity} -> {result.new_quantity}")
        return result

    def adjust_inventory_manual(self, salon_id: str, product_id, quantity_change, reason) -> StockResult:
        try:
            result = self.adjust(salon_id, product_id, quantity_change, reason)
        except Exception:
            self.db.rollback()
            raise
        result = self._commit_or_raise(result)
        logger.info(f"🔧 Manual adjustment for product {product_id}: {quantity_change} -> {result.new_quantity}")
        return result
