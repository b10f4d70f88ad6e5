"""Report service - aggregates bookings, clients and services into reports"""

import csv
import logging
from io import StringIO
from typing import Optional

from fastapi.responses import StreamingResponse
from sqlalchemy.orm import Session

from ...errors import NotFoundError
from ...models import Booking, BookingStatus, Report, User
from ...shared.validators import parse_date
from ..bookings.repository import BookingRepository
from ..bookings.service import serialize_booking
from ..catalog.repository import ServiceRepository
from ..catalog.schemas import ServiceResponse
from ..clients.repository import ClientRepository
from ..clients.schemas import iso_or_none, serialize_client
from .repository import ReportRepository
from .schemas import ReportRequest, ReportType

logger = logging.getLogger(__name__)


def _count(bookings: list[Booking], status: BookingStatus) -> int:
    return sum(1 for b in bookings if b.status == status.value)


def serialize_report(report: Report, include_data: bool = True) -> dict:
    data = {
        "id": report.id,
        "type": report.type,
        "name": report.name,
        "startDate": iso_or_none(report.start_date),
        "endDate": iso_or_none(report.end_date),
        "stats": report.stats,
        "createdAt": iso_or_none(report.created_at),
    }
    if include_data:
        data["data"] = report.data
    return data


class ReportService:
    def __init__(self, db: Session):
        self.db = db
        self.repo = ReportRepository()

    def _bookings_in_range(self, start: Optional[str], end: Optional[str]) -> list[Booking]:
        bookings = BookingRepository.get_all_bookings(self.db)
        # The range only applies when both bounds are given
        if start and end:
            start_date, end_date = parse_date(start), parse_date(end)
            bookings = [b for b in bookings if start_date <= b.booking_date <= end_date]
        return bookings

    def _build(self, data: ReportRequest) -> tuple[dict, list[dict]]:
        if data.type == ReportType.FINANCIAL:
            bookings = self._bookings_in_range(data.startDate, data.endDate)
            completed = [b for b in bookings if b.status == BookingStatus.COMPLETED.value]
            revenue = sum(float(b.service.price or 0) for b in completed if b.service)
            stats = {
                "revenue": revenue,
                "totalBookings": len(bookings),
                "completedBookings": len(completed),
                "pendingBookings": _count(bookings, BookingStatus.PENDING),
            }
            return stats, [serialize_booking(b, include_user=True) for b in completed]

        if data.type == ReportType.BOOKINGS:
            bookings = self._bookings_in_range(data.startDate, data.endDate)
            stats = {
                "totalBookings": len(bookings),
                "completedBookings": _count(bookings, BookingStatus.COMPLETED),
                "pendingBookings": _count(bookings, BookingStatus.PENDING),
                "cancelledBookings": _count(bookings, BookingStatus.CANCELLED),
            }
            return stats, [serialize_booking(b, include_user=True) for b in bookings]

        if data.type == ReportType.CLIENTS:
            rows = [
                {**serialize_client(user), "total_bookings": total or 0, "last_booking": iso_or_none(last)}
                for user, total, last in ClientRepository.get_clients(self.db)
            ]
            return {"totalClients": len(rows)}, rows

        services = ServiceRepository.get_services(self.db)
        rows = [ServiceResponse.model_validate(s).model_dump(mode="json") for s in services]
        return {"totalServices": len(rows)}, rows

    def generate_report(self, data: ReportRequest, user: User) -> dict:
        logger.info(f"📥 Generating {data.type.value} report for admin {user.id}")
        stats, rows = self._build(data)

        report = self.repo.save_report(
            self.db,
            type=data.type.value,
            name=data.name,
            start_date=parse_date(data.startDate) if data.startDate else None,
            end_date=parse_date(data.endDate) if data.endDate else None,
            stats=stats,
            data=rows,
            created_by=user.id,
        )
        logger.info(f"✅ Report generated successfully: {report.id} ({len(rows)} rows)")
        return {"success": True, "report": serialize_report(report)}

    def get_history(self) -> list[dict]:
        return [serialize_report(r, include_data=False) for r in self.repo.get_reports(self.db)]

    def export_csv(self, report_id: int) -> StreamingResponse:
        """Download a stored report's rows as CSV"""
        report = self.repo.get_report(self.db, report_id)
        if not report:
            raise NotFoundError("Report not found", entity="Report")

        rows = report.data or []
        columns: list[str] = []
        for row in rows:
            for key in row:
                if key not in columns:
                    columns.append(key)

        output = StringIO()
        writer = csv.DictWriter(output, fieldnames=columns, restval="")
        writer.writeheader()
        writer.writerows(rows)
        output.seek(0)

        filename = f"report_{report.id}_{report.type}.csv"
        logger.info(f"✅ CSV export successful: {filename} ({len(rows)} rows)")

        return StreamingResponse(
            iter([output.getvalue()]),
            media_type="text/csv",
            headers={
                "Content-Disposition": f"attachment; filename={filename}",
                "Cache-Control": "no-cache",
            },
        )
