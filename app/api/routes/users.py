from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from typing import List

from app.api.deps import get_current_user
from app.db.database import get_db
from app.models.schemas import (
    PublicUserResponse, ReviewCreate, ReviewResponse, UserResponse, UserSummary,
    UserUpdate, VerificationSubmission,
)
from app.models.user import User
from app.services.trust_service import TrustService
from app.services.user_service import UserService

router = APIRouter(
    prefix="/users",
    tags=["users"]
)

@router.get("/me", response_model=UserResponse)
def read_me(current_user: User = Depends(get_current_user)):
    return current_user

@router.patch("/me", response_model=UserResponse)
def update_me(
    updates: UserUpdate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Update profile fields; omitted fields are left unchanged."""
    return UserService(db).update_profile(current_user, updates.model_dump(exclude_unset=True))

@router.delete("/me", status_code=status.HTTP_204_NO_CONTENT)
def delete_me(current_user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    UserService(db).delete_account(current_user)

@router.get("/me/blocked", response_model=List[UserSummary])
def read_blocked_users(current_user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    return UserService(db).get_blocked_users(current_user)

@router.post("/me/verification", response_model=UserResponse)
def submit_verification(
    submission: VerificationSubmission,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Submit a private photo for identity verification."""
    return UserService(db).submit_verification(current_user, submission.photo_url)

@router.get("/{user_id}", response_model=PublicUserResponse)
def read_user(user_id: int, current_user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    service = UserService(db)
    return service.public_profile(service.get_user(user_id))

@router.post("/{user_id}/block", response_model=UserResponse)
def block_user(user_id: int, current_user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    return UserService(db).block_user(current_user, user_id)

@router.delete("/{user_id}/block", response_model=UserResponse)
def unblock_user(user_id: int, current_user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    return UserService(db).unblock_user(current_user, user_id)

@router.get("/{user_id}/reviews", response_model=List[ReviewResponse])
def read_reviews(user_id: int, current_user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    target = UserService(db).get_user(user_id)
    return TrustService(db).list_reviews(target)

@router.post("/{user_id}/reviews", response_model=ReviewResponse, status_code=status.HTTP_201_CREATED)
def create_review(
    user_id: int,
    review: ReviewCreate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """
    Review another user after meeting them.

    The rating (1-5) feeds into the target's trust score.
    """
    target = UserService(db).get_user(user_id)
    return TrustService(db).add_review(target, current_user, review.rating, review.comment)
