"""Product repository"""

from typing import Optional

from sqlalchemy.orm import Session, joinedload

from ...models_inventory import Inventory, Product


class ProductRepository:
    """Repository for product database operations"""

    @staticmethod
    def list_products(
        db: Session,
        salon_id: str,
        category: Optional[str] = None,
        product_type: Optional[str] = None,
        active: bool = True,
    ) -> list[Product]:
        query = db.query(Product).options(joinedload(Product.inventory)).filter(Product.salon_id == salon_id)
        if active:
            query = query.filter(Product.is_active.is_(True))
        if category:
            query = query.filter(Product.category == category)
        if product_type:
            query = query.filter(Product.type == product_type)
        return query.order_by(Product.name.asc()).all()

    @staticmethod
    def get_product(db: Session, salon_id: str, product_id: str) -> Optional[Product]:
        return (
            db.query(Product)
            .options(joinedload(Product.inventory))
            .filter(Product.id == product_id, Product.salon_id == salon_id)
            .first()
        )

    @staticmethod
    def create_product(db: Session, salon_id: str, reorder_level: float, **product_data) -> Product:
        """Create a product together with its empty stock row"""
        product = Product(salon_id=salon_id, **product_data)
        db.add(product)
        db.flush()
        db.add(Inventory(salon_id=salon_id, product_id=product.id, quantity=0, reorder_level=reorder_level))
        db.commit()
        db.refresh(product)
        return product

    @staticmethod
    def update_product(db: Session, product: Product, **updates) -> Product:
        for key, value in updates.items():
            setattr(product, key, value)
        db.commit()
        db.refresh(product)
        return product
