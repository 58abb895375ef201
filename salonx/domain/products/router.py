"""Product router"""

from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ...auth import get_current_salon_id
from ...database import get_db
from ...models_inventory import Product
from .schemas import ProductCreate, ProductUpdate
from .service import ProductService

router = APIRouter(prefix="/api/products", tags=["Products"])


def get_product_service(db: Session = Depends(get_db)) -> ProductService:
    """Dependency injection for ProductService"""
    return ProductService(db)


def serialize_product(p: Product, include_inventory: bool = True) -> dict:
    data = {
        "id": p.id,
        "salon_id": p.salon_id,
        "name": p.name,
        "category": p.category,
        "brand": p.brand,
        "type": p.type,
        "unit": p.unit,
        "cost_price": p.cost_price,
        "selling_price": p.selling_price,
        "image_url": p.image_url,
        "is_active": p.is_active,
        "created_at": p.created_at,
    }
    if include_inventory:
        inv = p.inventory
        data["inventory"] = (
            {"quantity": inv.quantity, "reorder_level": inv.reorder_level, "updated_at": inv.updated_at}
            if inv
            else None
        )
    return data


@router.get("")
async def list_products(
    category: Optional[str] = Query(None),
    type: Optional[str] = Query(None),
    active: bool = Query(True),
    salon_id: str = Depends(get_current_salon_id),
    service: ProductService = Depends(get_product_service),
):
    products = service.list_products(salon_id, category, type, active)
    return {"success": True, "data": [serialize_product(p) for p in products]}


@router.post("", status_code=201)
async def create_product(
    data: ProductCreate,
    salon_id: str = Depends(get_current_salon_id),
    service: ProductService = Depends(get_product_service),
):
    product = service.create_product(salon_id, data)
    return {"success": True, "data": serialize_product(product), "message": "Product created successfully"}


@router.get("/{product_id}")
async def get_product(
    product_id: str,
    salon_id: str = Depends(get_current_salon_id),
    service: ProductService = Depends(get_product_service),
):
    return {"success": True, "data": serialize_product(service.get_product(salon_id, product_id))}


@router.patch("/{product_id}")
async def update_product(
    product_id: str,
    data: ProductUpdate,
    salon_id: str = Depends(get_current_salon_id),
    service: ProductService = Depends(get_product_service),
):
    product = service.update_product(salon_id, product_id, data)
    return {"success": True, "data": serialize_product(product), "message": "Product updated successfully"}


@router.delete("/{product_id}")
async def delete_product(
    product_id: str,
    salon_id: str = Depends(get_current_salon_id),
    service: ProductService = Depends(get_product_service),
):
    service.deactivate_product(salon_id, product_id)
    return {"success": True, "message": "Product deactivated"}


__all__ = ["router"]
