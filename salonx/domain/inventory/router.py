"""Inventory router - Stock levels, purchases and manual adjustments"""

from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ...auth import get_current_salon_id
from ...database import get_db
from .schemas import StockAdjustRequest, StockPurchaseRequest
from .service import InventoryService

router = APIRouter(prefix="/api/inventory", tags=["Inventory"])


def get_inventory_service(db: Session = Depends(get_db)) -> InventoryService:
    """Dependency injection for InventoryService"""
    return InventoryService(db)


@router.get("")
async def list_inventory(
    low_stock: bool = Query(False),
    category: Optional[str] = Query(None),
    salon_id: str = Depends(get_current_salon_id),
    service: InventoryService = Depends(get_inventory_service),
):
    return {"success": True, **service.list_inventory(salon_id, low_stock, category)}


@router.post("/purchase")
async def add_purchase(
    data: StockPurchaseRequest,
    salon_id: str = Depends(get_current_salon_id),
    service: InventoryService = Depends(get_inventory_service),
):
    result = service.add_stock_purchase(salon_id, data.product_id, data.quantity, data.supplier_id, data.reason)
    return result.model_dump()


@router.post("/adjust")
async def adjust_stock(
    data: StockAdjustRequest,
    salon_id: str = Depends(get_current_salon_id),
    service: InventoryService = Depends(get_inventory_service),
):
    result = service.adjust_inventory_manual(salon_id, data.product_id, data.quantity_change, data.reason)
    return result.model_dump()


__all__ = ["router"]
