"""Inventory repository - Stock levels and the movement ledger"""

from typing import Optional

from sqlalchemy.orm import Session, joinedload

from ...models_inventory import Inventory, Product, StockMovement, Supplier


class InventoryRepository:
    """Repository for inventory database operations"""

    @staticmethod
    def list_inventory(db: Session, salon_id: str, category: Optional[str] = None) -> list[Inventory]:
        query = (
            db.query(Inventory)
            .join(Product, Inventory.product_id == Product.id)
            .options(joinedload(Inventory.product))
            .filter(Inventory.salon_id == salon_id, Product.is_active.is_(True))
        )
        if category:
            query = query.filter(Product.category == category)
        return query.order_by(Product.name.asc()).all()

    @staticmethod
    def lock_inventory(db: Session, salon_id: str, product_id: str) -> Optional[Inventory]:
        """Fetch a stock row with a row lock for the rest of the transaction"""
        return (
            db.query(Inventory)
            .filter(Inventory.salon_id == salon_id, Inventory.product_id == product_id)
            .with_for_update()
            .first()
        )

    @staticmethod
    def get_product(db: Session, salon_id: str, product_id: str) -> Optional[Product]:
        return db.query(Product).filter(Product.id == product_id, Product.salon_id == salon_id).first()

    @staticmethod
    def get_supplier(db: Session, salon_id: str, supplier_id: str) -> Optional[Supplier]:
        return db.query(Supplier).filter(Supplier.id == supplier_id, Supplier.salon_id == salon_id).first()

    @staticmethod
    def add_movement(db: Session, **movement_data) -> StockMovement:
        movement = StockMovement(**movement_data)
        db.add(movement)
        return movement
