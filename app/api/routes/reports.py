from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.api.deps import get_current_user
from app.db.database import get_db
from app.models.schemas import ReportCreate, ReportResponse
from app.models.user import User
from app.services.report_service import ReportService

router = APIRouter(
    prefix="/reports",
    tags=["reports"]
)

@router.post("", response_model=ReportResponse, status_code=status.HTTP_201_CREATED)
def create_report(
    report: ReportCreate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Report another user, optionally in the context of an event."""
    return ReportService(db).create_report(current_user, report.reported_user_id, report.reason, report.event_id)
