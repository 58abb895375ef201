"""Product service - Retail and back-bar product catalogue"""

import logging
from typing import Optional

from fastapi import HTTPException
from sqlalchemy.orm import Session

from ...models_inventory import Product
from ...utils.sanitization import sanitize_string
from .repository import ProductRepository
from .schemas import ProductCreate, ProductUpdate

logger = logging.getLogger(__name__)

PRODUCT_TYPES = ["service_use", "retail_sale", "both"]
DEFAULT_REORDER_LEVEL = 10


def _check_type(product_type: str) -> None:
    if product_type not in PRODUCT_TYPES:
        raise HTTPException(status_code=400, detail="Type must be service_use, retail_sale, or both")


def _check_prices(*prices: Optional[float]) -> None:
    if any(p is not None and p < 0 for p in prices):
        raise HTTPException(status_code=400, detail="Prices cannot be negative")


class ProductService:
    def __init__(self, db: Session):
        self.db = db
        self.repo = ProductRepository()

    def list_products(self, salon_id: str, category, product_type, active: bool) -> list[Product]:
        return self.repo.list_products(self.db, salon_id, category, product_type, active)

    def get_product(self, salon_id: str, product_id: str) -> Product:
        product = self.repo.get_product(self.db, salon_id, product_id)
        if not product:
            raise HTTPException(status_code=404, detail="Product not found")
        return product

    def create_product(self, salon_id: str, data: ProductCreate) -> Product:
        if not (data.name or "").strip() or not data.type or not (data.unit or "").strip():
            raise HTTPException(status_code=400, detail="Name, type, and unit are required")
        _check_type(data.type)
        _check_prices(data.cost_price, data.selling_price)

        product = self.repo.create_product(
            self.db,
            salon_id,
            reorder_level=data.reorder_level if data.reorder_level is not None else DEFAULT_REORDER_LEVEL,
            name=sanitize_string(data.name),
            type=data.type,
            unit=sanitize_string(data.unit),
            category=sanitize_string(data.category),
            brand=sanitize_string(data.brand),
            cost_price=data.cost_price or 0,
            selling_price=data.selling_price or 0,
            image_url=data.image_url,
            is_active=True,
        )
        logger.info(f"✅ Product created: {product.id} ({product.name})")
        return product

    def update_product(self, salon_id: str, product_id: str, data: ProductUpdate) -> Product:
        product = self.get_product(salon_id, product_id)
        updates = data.model_dump(exclude_unset=True)

        if "type" in updates:
            _check_type(updates["type"])
        _check_prices(updates.get("cost_price"), updates.get("selling_price"))
        for key in ("name", "unit"):
            if key in updates and not (updates[key] or "").strip():
                raise HTTPException(status_code=400, detail=f"{key.capitalize()} cannot be empty")
        for key in ("name", "unit", "category", "brand"):
            if key in updates:
                updates[key] = sanitize_string(updates[key])

        reorder_level = updates.pop("reorder_level", None)
        if reorder_level is not None and product.inventory is not None:
            product.inventory.reorder_level = reorder_level

        return self.repo.update_product(self.db, product, **updates)

    def deactivate_product(self, salon_id: str, product_id: str) -> None:
        product = self.get_product(salon_id, product_id)
        self.repo.update_product(self.db, product, is_active=False)
        logger.info(f"🚫 Product deactivated: {product_id}")
