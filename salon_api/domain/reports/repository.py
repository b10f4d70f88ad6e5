"""Report repository"""

from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ...database import transaction
from ...errors import translate_db_error
from ...models import Report


class ReportRepository:
    @staticmethod
    def save_report(db: Session, **kwargs) -> Report:
        report = Report(**kwargs)
        try:
            with transaction(db):
                db.add(report)
        except SQLAlchemyError as e:
            raise translate_db_error(e, "Report") from e
        db.refresh(report)
        return report

    @staticmethod
    def get_reports(db: Session) -> list[Report]:
        return db.query(Report).order_by(Report.created_at.desc(), Report.id.desc()).all()

    @staticmethod
    def get_report(db: Session, report_id: int) -> Optional[Report]:
        return db.get(Report, report_id)
