import logging
from typing import List

from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.errors import ValidationError
from app.core.trust import calculate_trust_score
from app.models.user import PeerReview, User

logger = logging.getLogger(__name__)

class TrustService:
    """Keeps each user's trust score in line with their reviews and missed events."""

    def __init__(self, db: Session):
        self.db = db

    def recalculate(self, user: User) -> int:
        ratings = [review.rating for review in user.reviews]
        score = calculate_trust_score(
            ratings,
            user.missed_events_count or 0,
            penalty=settings.missed_event_penalty,
        )
        if score != user.trust_score:
            logger.info(f"Trust score of user {user.id}: {user.trust_score} -> {score}")
        user.trust_score = score
        return score

    def add_review(self, target: User, reviewer: User, rating: int, comment: str = "") -> PeerReview:
        """
        Record a peer review and recompute the target's trust score.

        Each reviewer holds one review per target; reviewing again replaces
        the earlier rating and comment.

        Raises:
            ValidationError: If a user reviews themself or the rating is outside 1-5
        """
        if target.id == reviewer.id:
            raise ValidationError("You cannot review yourself")
        if not 1 <= rating <= 5:
            raise ValidationError("Rating must be between 1 and 5")

        review = next((r for r in target.reviews if r.reviewer_id == reviewer.id), None)
        if review is None:
            review = PeerReview(target_user_id=target.id, reviewer_id=reviewer.id)
            target.reviews.append(review)
        else:
            logger.info(f"User {reviewer.id} updated their review of user {target.id}")
        review.reviewer_name = reviewer.name
        review.rating = rating
        review.comment = comment or ""
        self.recalculate(target)
        self.db.commit()
        self.db.refresh(review)
        return review

    def list_reviews(self, target: User) -> List[PeerReview]:
        return list(target.reviews)

    def record_missed_event(self, user: User) -> int:
        user.missed_events_count = (user.missed_events_count or 0) + 1
        score = self.recalculate(user)
        self.db.commit()
        self.db.refresh(user)
        return score
