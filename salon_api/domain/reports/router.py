"""Report endpoints (admin only)"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ...auth import require_admin
from ...database import get_db
from ...models import User
from .schemas import ReportRequest
from .service import ReportService

router = APIRouter(prefix="/reports", tags=["Reports"])


def get_report_service(db: Session = Depends(get_db)) -> ReportService:
    return ReportService(db)


@router.post("/generate")
async def generate_report(
    data: ReportRequest,
    admin: User = Depends(require_admin),
    service: ReportService = Depends(get_report_service),
):
    return service.generate_report(data, admin)


@router.get("/history")
async def get_report_history(
    _admin: User = Depends(require_admin),
    service: ReportService = Depends(get_report_service),
):
    return service.get_history()


@router.get("/{report_id}/download")
async def download_report(
    report_id: int,
    _admin: User = Depends(require_admin),
    service: ReportService = Depends(get_report_service),
):
    """Stream the report's rows as a CSV attachment"""
    return service.export_csv(report_id)
