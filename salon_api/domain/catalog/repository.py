"""Service catalog repository"""

from typing import Optional

from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ...database import transaction
from ...errors import translate_db_error
from ...models import Booking, Service


class ServiceRepository:
    @staticmethod
    def get_services(db: Session) -> list[Service]:
        return db.query(Service).order_by(Service.category, Service.name).all()

    @staticmethod
    def get_service_by_id(db: Session, service_id: int) -> Optional[Service]:
        return db.get(Service, service_id)

    @staticmethod
    def create_service(db: Session, **kwargs) -> Service:
        service = Service(**kwargs)
        try:
            with transaction(db):
                db.add(service)
        except SQLAlchemyError as e:
            raise translate_db_error(e, "Service") from e
        db.refresh(service)
        return service

    @staticmethod
    def update_service(db: Session, service: Service, **kwargs) -> Service:
        try:
            with transaction(db):
                for key, value in kwargs.items():
                    setattr(service, key, value)
        except SQLAlchemyError as e:
            raise translate_db_error(e, "Service") from e
        db.refresh(service)
        return service

    @staticmethod
    def count_bookings(db: Session, service_id: int) -> int:
        return (
            db.query(func.count(Booking.id)).filter(Booking.service_id == service_id).scalar() or 0
        )

    @staticmethod
    def delete_service(db: Session, service: Service) -> None:
        try:
            with transaction(db):
                db.delete(service)
        except SQLAlchemyError as e:
            raise translate_db_error(e, "Service") from e
