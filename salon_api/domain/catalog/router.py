"""Service catalog endpoints"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ...auth import require_admin
from ...database import get_db
from ...models import User
from .schemas import ServiceCreate, ServiceResponse, ServiceUpdate
from .service import CatalogService

router = APIRouter(prefix="/services", tags=["Services"])


def get_catalog_service(db: Session = Depends(get_db)) -> CatalogService:
    """Dependency injection for CatalogService"""
    return CatalogService(db)


@router.get("", response_model=list[ServiceResponse])
async def list_services(service: CatalogService = Depends(get_catalog_service)):
    """Public list of salon services"""
    return service.get_services()


@router.post("", response_model=ServiceResponse)
async def create_service(
    data: ServiceCreate,
    _admin: User = Depends(require_admin),
    service: CatalogService = Depends(get_catalog_service),
):
    return service.create_service(data)


@router.put("/{service_id}", response_model=ServiceResponse)
async def update_service(
    service_id: int,
    data: ServiceUpdate,
    _admin: User = Depends(require_admin),
    service: CatalogService = Depends(get_catalog_service),
):
    return service.update_service(service_id, data)


@router.delete("/{service_id}")
async def delete_service(
    service_id: int,
    _admin: User = Depends(require_admin),
    service: CatalogService = Depends(get_catalog_service),
):
    return service.delete_service(service_id)
