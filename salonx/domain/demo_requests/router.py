"""Demo request router - Public submission, admin triage"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ...auth import require_admin
from ...database import get_db
from ...rate_limiter import create_rate_limiter
from .schemas import DemoRequestCreate, DemoRequestResponse, DemoRequestUpdate
from .service import DemoRequestService

router = APIRouter(prefix="/api/demo-requests", tags=["Demo Requests"])

limit_demo_requests = create_rate_limiter(limit=5, window_seconds=3600, key_prefix="demo_request")


def get_demo_request_service(db: Session = Depends(get_db)) -> DemoRequestService:
    """Dependency injection for DemoRequestService"""
    return DemoRequestService(db)


@router.post("")
async def submit_demo_request(
    data: DemoRequestCreate,
    _: None = Depends(limit_demo_requests),
    service: DemoRequestService = Depends(get_demo_request_service),
):
    request = service.submit(data)
    return {
        "success": True,
        "id": request.id,
        "message": "Demo request submitted successfully! We will contact you within 24 hours.",
    }


@router.get("")
async def list_demo_requests(
    _admin: dict = Depends(require_admin),
    service: DemoRequestService = Depends(get_demo_request_service),
):
    requests = service.list_requests()
    return {"data": [DemoRequestResponse.model_validate(r).model_dump(by_alias=True) for r in requests]}


@router.patch("/{request_id}")
async def update_demo_request(
    request_id: str,
    data: DemoRequestUpdate,
    _admin: dict = Depends(require_admin),
    service: DemoRequestService = Depends(get_demo_request_service),
):
    request = service.update(request_id, data)
    return {"success": True, "data": DemoRequestResponse.model_validate(request).model_dump(by_alias=True)}


__all__ = ["router"]
