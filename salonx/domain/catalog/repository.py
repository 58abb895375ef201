"""Service catalog repository"""

from typing import Optional

from sqlalchemy.orm import Session

from ...models import Service


class CatalogRepository:
    """Repository for salon service menu operations"""

    @staticmethod
    def list_services(db: Session, salon_id: str) -> list[Service]:
        return (
            db.query(Service)
            .filter(Service.salon_id == salon_id)
            .order_by(Service.category.asc(), Service.name.asc())
            .all()
        )

    @staticmethod
    def get_service(db: Session, salon_id: str, service_id: str) -> Optional[Service]:
        return db.query(Service).filter(Service.id == service_id, Service.salon_id == salon_id).first()

    @staticmethod
    def get_services_by_ids(db: Session, salon_id: str, service_ids: list[str]) -> list[Service]:
        if not service_ids:
            return []
        return db.query(Service).filter(Service.salon_id == salon_id, Service.id.in_(service_ids)).all()

    @staticmethod
    def create_service(db: Session, salon_id: str, **service_data) -> Service:
        service = Service(salon_id=salon_id, **service_data)
        db.add(service)
        db.commit()
        db.refresh(service)
        return service

    @staticmethod
    def update_service(db: Session, service: Service, **updates) -> Service:
        for key, value in updates.items():
            setattr(service, key, value)
        db.commit()
        db.refresh(service)
        return service

    @staticmethod
    def delete_service(db: Session, service: Service) -> None:
        db.delete(service)
        db.commit()
