"""Service catalog business logic"""

import logging

from sqlalchemy.orm import Session

from ...errors import ConstraintViolation, NotFoundError
from ...models import Service
from .repository import ServiceRepository
from .schemas import ServiceCreate, ServiceUpdate

logger = logging.getLogger(__name__)


class CatalogService:
    def __init__(self, db: Session):
        self.db = db
        self.repo = ServiceRepository()

    def get_services(self) -> list[Service]:
        services = self.repo.get_services(self.db)
        logger.info(f"✅ Services fetched: {len(services)}")
        return services

    def get_service(self, service_id: int) -> Service:
        service = self.repo.get_service_by_id(self.db, service_id)
        if not service:
            raise NotFoundError("Service not found", entity="Service")
        return service

    def create_service(self, data: ServiceCreate) -> Service:
        logger.info(f"📥 Creating service: {data.name} ({data.category}, {data.price})")
        service = self.repo.create_service(self.db, **data.model_dump())
        logger.info(f"✅ Service created: {service.id}")
        return service

    def update_service(self, service_id: int, data: ServiceUpdate) -> Service:
        service = self.get_service(service_id)
        service = self.repo.update_service(self.db, service, **data.model_dump())
        logger.info(f"✅ Service updated: {service_id}")
        return service

    def delete_service(self, service_id: int) -> dict:
        service = self.get_service(service_id)

        booking_count = self.repo.count_bookings(self.db, service_id)
        if booking_count:
            raise ConstraintViolation(
                f"Service has {booking_count} booking(s) and cannot be deleted", entity="Service"
            )

        self.repo.delete_service(self.db, service)
        logger.info(f"✅ Service deleted: {service_id}")
        return {"success": True}
