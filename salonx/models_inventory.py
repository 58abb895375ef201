"""
Inventory models: retail/back-bar products, stock levels, suppliers and the stock ledger
"""

from sqlalchemy import Boolean, Column, DateTime, Float, ForeignKey, String, Text
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from .database import Base
from .models import generate_uuid


class Product(Base):
    __tablename__ = "products"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    salon_id = Column(String(36), ForeignKey("salons.id"), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    category = Column(String(100), nullable=True)
    brand = Column(String(100), nullable=True)
    type = Column(String(20), nullable=False)  # service_use, retail_sale, both
    unit = Column(String(20), nullable=False)  # ml, g, pcs ...
    cost_price = Column(Float, default=0, nullable=False)
    selling_price = Column(Float, default=0, nullable=False)
    image_url = Column(String(500), nullable=True)
    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    inventory = relationship("Inventory", back_populates="product", uselist=False)


class Inventory(Base):
    """Current stock level, one row per product"""

    __tablename__ = "inventory"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    salon_id = Column(String(36), ForeignKey("salons.id"), nullable=False, index=True)
    product_id = Column(String(36), ForeignKey("products.id"), unique=True, nullable=False)
    quantity = Column(Float, default=0, nullable=False)
    reorder_level = Column(Float, default=10, nullable=False)
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    product = relationship("Product", back_populates="inventory")


class Supplier(Base):
    __tablename__ = "suppliers"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    salon_id = Column(String(36), ForeignKey("salons.id"), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    contact_person = Column(String(255), nullable=True)
    phone = Column(String(20), nullable=True)
    email = Column(String(255), nullable=True)
    address = Column(Text, nullable=True)
    gst_number = Column(String(20), nullable=True)
    notes = Column(Text, nullable=True)
    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())


class StockMovement(Base):
    """Append-only ledger of quantity changes"""

    __tablename__ = "stock_movements"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    salon_id = Column(String(36), ForeignKey("salons.id"), nullable=False, index=True)
    product_id = Column(String(36), ForeignKey("products.id"), nullable=False, index=True)
    supplier_id = Column(String(36), ForeignKey("suppliers.id"), nullable=True)
    movement_type = Column(String(30), nullable=False)  # purchase, billing_deduction, manual_adjustment
    quantity_change = Column(Float, nullable=False)
    quantity_before = Column(Float, nullable=False)
    quantity_after = Column(Float, nullable=False)
    reference_type = Column(String(30), nullable=True)  # purchase_order, invoice, manual
    reference_id = Column(String(36), nullable=True)
    reason = Column(Text, nullable=True)
    created_at = Column(DateTime, server_default=func.now(), index=True)

    product = relationship("Product")
    supplier = relationship("Supplier")
