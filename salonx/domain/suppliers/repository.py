"""Supplier repository"""

from typing import Optional

from sqlalchemy.orm import Session, joinedload

from ...models_inventory import StockMovement, Supplier


class SupplierRepository:
    """Repository for supplier database operations"""

    @staticmethod
    def list_active(db: Session, salon_id: str) -> list[Supplier]:
        return (
            db.query(Supplier)
            .filter(Supplier.salon_id == salon_id, Supplier.is_active.is_(True))
            .order_by(Supplier.name.asc())
            .all()
        )

    @staticmethod
    def get_supplier(db: Session, salon_id: str, supplier_id: str) -> Optional[Supplier]:
        return db.query(Supplier).filter(Supplier.id == supplier_id, Supplier.salon_id == salon_id).first()

    @staticmethod
    def recent_purchases(db: Session, salon_id: str, supplier_id: str, limit: int = 50) -> list[StockMovement]:
        return (
            db.query(StockMovement)
            .options(joinedload(StockMovement.product))
            .filter(
                StockMovement.salon_id == salon_id,
                StockMovement.supplier_id == supplier_id,
                StockMovement.movement_type == "purchase",
            )
            .order_by(StockMovement.created_at.desc())
            .limit(limit)
            .all()
        )

    @staticmethod
    def has_movements(db: Session, supplier_id: str) -> bool:
        return db.query(StockMovement.id).filter(StockMovement.supplier_id == supplier_id).first() is not None

    @staticmethod
    def create_supplier(db: Session, salon_id: str, **supplier_data) -> Supplier:
        supplier = Supplier(salon_id=salon_id, **supplier_data)
        db.add(supplier)
        db.commit()
        db.refresh(supplier)
        return supplier

    @staticmethod
    def update_supplier(db: Session, supplier: Supplier, **updates) -> Supplier:
        for key, value in updates.items():
            setattr(supplier, key, value)
        db.commit()
        db.refresh(supplier)
        return supplier

    @staticmethod
    def delete_supplier(db: Session, supplier: Supplier) -> None:
        db.delete(supplier)
        db.commit()
