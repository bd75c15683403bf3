import logging
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from typing import List, Optional

from app.api.deps import require_admin
from app.db.database import get_db
from app.models.schemas import ReportResponse, UserResponse, VerificationDecision
from app.models.user import User
from app.services.report_service import ReportService
from app.services.user_service import UserService

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/admin",
    tags=["admin"]
)

@router.get("/users", response_model=List[UserResponse])
def list_users(admin: User = Depends(require_admin), db: Session = Depends(get_db)):
    return UserService(db).list_users()

@router.post("/users/{user_id}/verification", response_model=UserResponse)
def set_verification(
    user_id: int,
    decision: VerificationDecision,
    admin: User = Depends(require_admin),
    db: Session = Depends(get_db)
):
    service = UserService(db)
    user = service.set_verification_status(service.get_user(user_id), decision.status)
    logger.info(f"Admin {admin.id} set verification of user {user_id} to {decision.status}")
    return user

@router.get("/reports", response_model=List[ReportResponse])
def list_reports(status: Optional[str] = None, admin: User = Depends(require_admin), db: Session = Depends(get_db)):
    return ReportService(db).list_reports(status)

@router.post("/reports/{report_id}/resolve", response_model=ReportResponse)
def resolve_report(report_id: int, admin: User = Depends(require_admin), db: Session = Depends(get_db)):
    return ReportService(db).resolve(report_id)
