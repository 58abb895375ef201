"""Product domain schemas"""

from typing import Optional

from pydantic import BaseModel


class ProductCreate(BaseModel):
    name: Optional[str] = None
    type: Optional[str] = None
    unit: Optional[str] = None
    category: Optional[str] = None
    brand: Optional[str] = None
    cost_price: Optional[float] = 0
    selling_price: Optional[float] = 0
    image_url: Optional[str] = None
    reorder_level: Optional[float] = None


class ProductUpdate(BaseModel):
    name: Optional[str] = None
    type: Optional[str] = None
    unit: Optional[str] = None
    category: Optional[str] = None
    brand: Optional[str] = None
    cost_price: Optional[float] = None
    selling_price: Optional[float] = None
    image_url: Optional[str] = None
    is_active: Optional[bool] = None
    reorder_level: Optional[float] = None
