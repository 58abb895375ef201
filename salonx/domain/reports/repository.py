"""Reports repository - Read-only queries over invoices and stock"""

from datetime import datetime
from typing import Optional

from sqlalchemy import func
from sqlalchemy.orm import Session, joinedload

from ...models import Salon, Staff
from ...models_billing import Invoice, InvoiceItem
from ...models_inventory import Inventory, Product, StockMovement


class ReportsRepository:
    """Repository for reporting queries"""

    @staticmethod
    def paid_invoices(
        db: Session, salon_id: str, since: Optional[datetime] = None, until: Optional[datetime] = None
    ) -> list[Invoice]:
        query = (
            db.query(Invoice)
            .options(joinedload(Invoice.customer))
            .filter(Invoice.salon_id == salon_id, Invoice.payment_status == "paid")
        )
        if since:
            query = query.filter(Invoice.created_at >= since)
        if until:
            query = query.filter(Invoice.created_at <= until)
        return query.order_by(Invoice.created_at.desc()).all()

    @staticmethod
    def page_invoices(
        db: Session,
        salon_id: str,
        offset: int,
        limit: int,
        since: Optional[datetime] = None,
        until: Optional[datetime] = None,
        search: Optional[str] = None,
    ) -> tuple[list[Invoice], int]:
        query = db.query(Invoice).filter(Invoice.salon_id == salon_id)
        if since:
            query = query.filter(Invoice.created_at >= since)
        if until:
            query = query.filter(Invoice.created_at <= until)
        if search:
            query = query.filter(Invoice.invoice_number.ilike(f"%{search}%"))
        total = query.count()
        invoices = (
            query.options(joinedload(Invoice.customer))
            .order_by(Invoice.created_at.desc())
            .offset(offset)
            .limit(limit)
            .all()
        )
        return invoices, total

    @staticmethod
    def item_counts(db: Session, invoice_ids: list[str]) -> dict[str, int]:
        if not invoice_ids:
            return {}
        rows = (
            db.query(InvoiceItem.invoice_id, func.count(InvoiceItem.id))
            .filter(InvoiceItem.invoice_id.in_(invoice_ids))
            .group_by(InvoiceItem.invoice_id)
            .all()
        )
        return {invoice_id: count for invoice_id, count in rows}

    @staticmethod
    def items_for_invoices(db: Session, invoice_ids: list[str]) -> list[InvoiceItem]:
        if not invoice_ids:
            return []
        return db.query(InvoiceItem).filter(InvoiceItem.invoice_id.in_(invoice_ids)).all()

    @staticmethod
    def staff_names(db: Session, salon_id: str) -> dict[str, str]:
        rows = db.query(Staff.id, Staff.name).filter(Staff.salon_id == salon_id).all()
        return {staff_id: name for staff_id, name in rows}

    @staticmethod
    def inventory_with_products(db: Session, salon_id: str) -> list[Inventory]:
        return (
            db.query(Inventory)
            .join(Product, Inventory.product_id == Product.id)
            .options(joinedload(Inventory.product))
            .filter(Inventory.salon_id == salon_id, Product.is_active.is_(True))
            .order_by(Product.name.asc())
            .all()
        )

    @staticmethod
    def movements(
        db: Session,
        salon_id: str,
        since: Optional[datetime] = None,
        until: Optional[datetime] = None,
        product_id: Optional[str] = None,
        movement_type: Optional[str] = None,
        supplier_id: Optional[str] = None,
        suppliers_only: bool = False,
        limit: Optional[int] = None,
    ) -> list[StockMovement]:
        query = (
            db.query(StockMovement)
            .options(joinedload(StockMovement.product), joinedload(StockMovement.supplier))
            .filter(StockMovement.salon_id == salon_id)
        )
        if since:
            query = query.filter(StockMovement.created_at >= since)
        if until:
            query = query.filter(StockMovement.created_at <= until)
        if product_id:
            query = query.filter(StockMovement.product_id == product_id)
        if movement_type:
            query = query.filter(StockMovement.movement_type == movement_type)
        if supplier_id:
            query = query.filter(StockMovement.supplier_id == supplier_id)
        if suppliers_only:
            query = query.filter(StockMovement.supplier_id.isnot(None))
        query = query.order_by(StockMovement.created_at.desc())
        if limit:
            query = query.limit(limit)
        return query.all()

    @staticmethod
    def get_salon(db: Session, salon_id: str) -> Optional[Salon]:
        return db.query(Salon).filter(Salon.id == salon_id).first()
