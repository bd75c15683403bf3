import logging
from typing import List, Optional

from sqlalchemy.orm import Session

from app.core.errors import ConflictError, NotFoundError, ValidationError
from app.core.timeutils import utcnow
from app.models.event import SocialEvent
from app.models.report import Report
from app.models.user import User

logger = logging.getLogger(__name__)

class ReportService:
    def __init__(self, db: Session):
        self.db = db

    def create_report(self, reporter: User, reported_user_id: int, reason: str, event_id: Optional[int] = None) -> Report:
        if reported_user_id == reporter.id:
            raise ValidationError("You cannot report yourself")
        if not self.db.get(User, reported_user_id):
            raise NotFoundError(f"User {reported_user_id} not found")
        if event_id is not None and not self.db.get(SocialEvent, event_id):
            raise NotFoundError(f"Event {event_id} not found")

        report = Report(
            reporter_id=reporter.id,
            reported_user_id=reported_user_id,
            event_id=event_id,
            reason=reason.strip(),
            status="PENDING",
        )
        self.db.add(report)
        self.db.commit()
        self.db.refresh(report)
        logger.info(f"User {reporter.id} reported user {reported_user_id} (report {report.id})")
        return report

    def list_reports(self, status: Optional[str] = None) -> List[Report]:
        query = self.db.query(Report)
        if status:
            query = query.filter(Report.status == status.upper())
        return query.order_by(Report.id).all()

    def resolve(self, report_id: int) -> Report:
        report = self.db.get(Report, report_id)
        if not report:
            raise NotFoundError(f"Report {report_id} not found")
        if report.status == "RESOLVED":
            raise ConflictError("Report is already resolved")

        report.status = "RESOLVED"
        report.resolved_at = utcnow()
        self.db.commit()
        self.db.refresh(report)
        logger.info(f"Report {report.id} resolved")
        return report
