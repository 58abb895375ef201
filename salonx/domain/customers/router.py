"""Customer router - FastAPI endpoints for customer operations"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ...auth import get_current_salon_id
from ...database import get_db
from ...models import Customer
from .schemas import CustomerBulkDelete, CustomerImportRequest, CustomerResponse, CustomerUpdate
from .service import CustomerService

router = APIRouter(prefix="/api/customers", tags=["Customers"])


def get_customer_service(db: Session = Depends(get_db)) -> CustomerService:
    """Dependency injection for CustomerService"""
    return CustomerService(db)


def to_response(c: Customer) -> CustomerResponse:
    return CustomerResponse(
        id=c.id,
        salonId=c.salon_id,
        name=c.name,
        phone=c.phone,
        email=c.email,
        gender=c.gender,
        notes=c.notes,
        tags=c.tags or [],
        totalVisits=c.total_visits or 0,
        totalSpent=c.total_spent or 0,
        lastVisitDate=c.last_visit_date,
        createdAt=c.created_at,
        updatedAt=c.updated_at,
    )


# ============================================================================
# COLLECTION
# ============================================================================


@router.get("")
async def list_customers(
    salon_id: str = Depends(get_current_salon_id),
    service: CustomerService = Depends(get_customer_service),
):
    return {"success": True, "customers": [to_response(c) for c in service.get_customers(salon_id)]}


@router.post("")
async def import_customers(
    data: CustomerImportRequest,
    salon_id: str = Depends(get_current_salon_id),
    service: CustomerService = Depends(get_customer_service),
):
    """Bulk import customers (CSV rows parsed client-side)"""
    customers, failed = service.import_customers(salon_id, data.customers)
    return {
        "success": True,
        "imported": len(customers),
        "failed": failed,
        "customers": [to_response(c) for c in customers],
    }


@router.delete("")
async def delete_customers(
    data: CustomerBulkDelete,
    salon_id: str = Depends(get_current_salon_id),
    service: CustomerService = Depends(get_customer_service),
):
    deleted = service.delete_customers(salon_id, data.ids)
    return {"success": True, "deleted": deleted}


# ============================================================================
# SINGLE CUSTOMER
# ============================================================================


@router.get("/{customer_id}")
async def get_customer(
    customer_id: str,
    salon_id: str = Depends(get_current_salon_id),
    service: CustomerService = Depends(get_customer_service),
):
    return {"success": True, "customer": to_response(service.get_customer(salon_id, customer_id))}


@router.patch("/{customer_id}")
async def update_customer(
    customer_id: str,
    data: CustomerUpdate,
    salon_id: str = Depends(get_current_salon_id),
    service: CustomerService = Depends(get_customer_service),
):
    customer = service.update_customer(salon_id, customer_id, data)
    return {"success": True, "customer": to_response(customer)}


@router.delete("/{customer_id}")
async def delete_customer(
    customer_id: str,
    salon_id: str = Depends(get_current_salon_id),
    service: CustomerService = Depends(get_customer_service),
):
    service.delete_customer(salon_id, customer_id)
    return {"success": True}


__all__ = ["router"]
