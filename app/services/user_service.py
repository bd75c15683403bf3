import logging
from typing import Any, Dict, List, Optional

from sqlalchemy import or_
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.errors import ConflictError, NotFoundError, ValidationError
from app.core.security import FirebaseIdentity
from app.core.timeutils import calculate_age
from app.models.conversation import ChatMessage, Conversation
from app.models.event import SocialEvent
from app.models.report import Report
from app.models.schemas import MAX_PHOTOS
from app.models.user import DEFAULT_PRIVACY_SETTINGS, PeerReview, User

logger = logging.getLogger(__name__)

MINIMUM_AGE = 18

class UserService:
    """
    Service for user accounts: sign-up, profile edits, blocking, identity
    verification and account deletion.
    """

    def __init__(self, db: Session):
        self.db = db

    def get_user(self, user_id: int) -> User:
        user = self.db.get(User, user_id)
        if not user:
            raise NotFoundError(f"User {user_id} not found")
        return user

    def get_by_firebase_uid(self, uid: str) -> Optional[User]:
        return self.db.query(User).filter(User.firebase_uid == uid).first()

    def list_users(self) -> List[User]:
        return self.db.query(User).order_by(User.id).all()

    def signup(self, identity: FirebaseIdentity, profile: Dict[str, Any]) -> User:
        """
        Create an account for a verified Firebase identity.

        Args:
            identity: Verified Firebase identity (uid and phone number)
            profile: Sign-up fields (name, dob, gender, bio, photos, ...)

        Returns:
            The new User

        Raises:
            ConflictError: If the uid or phone number already has an account
            ValidationError: If the user is under 18 or has no photo
        """
        phone = identity.phone or profile.get("phone")
        if not phone:
            raise ValidationError("Phone number is required")

        if self.get_by_firebase_uid(identity.uid):
            raise ConflictError("An account already exists for this sign-in")

        existing = self.db.query(User).filter(User.phone == phone).first()
        # Accounts created before Firebase sign-in (e.g. seeded) are only claimed
        # by a phone number that Firebase itself verified
        if existing and (existing.firebase_uid or not identity.phone):
            raise ConflictError("Phone number is already registered")

        age = calculate_age(profile["dob"])
        if age is None or age < MINIMUM_AGE:
            raise ValidationError(f"Must be {MINIMUM_AGE}+ to join Hangoutz")

        photos = list(profile.get("photos") or [])
        if not photos:
            raise ValidationError("At least one photo is required")

        user = existing or User(phone=phone)
        user.firebase_uid = identity.uid
        user.name = profile["name"]
        user.dob = profile["dob"]
        user.gender = profile.get("gender")
        user.email = profile.get("email")
        user.bio = profile.get("bio") or ""
        user.photos = photos[:MAX_PHOTOS]
        user.interests = list(profile.get("interests") or [])
        user.blocked_user_ids = user.blocked_user_ids or []
        user.privacy_settings = user.privacy_settings or dict(DEFAULT_PRIVACY_SETTINGS)
        user.trust_score = user.trust_score if user.trust_score is not None else 100
        user.missed_events_count = user.missed_events_count or 0
        user.role = user.role or "USER"
        user.verification_status = "PENDING"

        if existing is None:
            self.db.add(user)
        self.db.commit()
        self.db.refresh(user)

        verification_photo = profile.get("verification_photo_url")
        if verification_photo:
            user = self.submit_verification(user, verification_photo)

        logger.info(f"User {user.id} signed up")
        return user

    def update_profile(self, user: User, updates: Dict[str, Any]) -> User:
        if "photos" in updates and updates["photos"] is not None:
            if not updates["photos"]:
                raise ValidationError("At least one photo is required")
            user.photos = list(updates["photos"])[:MAX_PHOTOS]
        if "interests" in updates and updates["interests"] is not None:
            user.interests = list(updates["interests"])
        if "privacy_settings" in updates and updates["privacy_settings"] is not None:
            user.privacy_settings = {**(user.privacy_settings or {}), **updates["privacy_settings"]}
        for field in ("name", "email", "bio"):
            if field in updates and updates[field] is not None:
                setattr(user, field, updates[field])

        self.db.commit()
        self.db.refresh(user)
        return user

    def public_profile(self, user: User) -> Dict[str, Any]:
        """Profile as shown to other users, honouring the owner's privacy settings."""
        privacy = {**DEFAULT_PRIVACY_SETTINGS, **(user.privacy_settings or {})}
        return {
            "id": user.id,
            "name": user.name,
            "age": user.age if privacy["show_age"] else None,
            "gender": user.gender if privacy["show_gender"] else None,
            "bio": user.bio,
            "photo_url": user.photo_url,
            "photos": user.photos or [],
            "interests": user.interests or [],
            "verified": user.verified,
            "trust_score": user.trust_score,
            "trust_label": user.trust_label,
            "missed_events_count": user.missed_events_count,
            "reviews": list(user.reviews),
        }

    # Blocking

    def block_user(self, user: User, other_id: int) -> User:
        if other_id == user.id:
            raise ValidationError("You cannot block yourself")
        self.get_user(other_id)

        if not user.has_blocked(other_id):
            # Reassign so the JSON column is flagged as changed
            user.blocked_user_ids = [*(user.blocked_user_ids or []), other_id]
            self.db.commit()
            self.db.refresh(user)
            logger.info(f"User {user.id} blocked user {other_id}")
        return user

    def unblock_user(self, user: User, other_id: int) -> User:
        if user.has_blocked(other_id):
            user.blocked_user_ids = [uid for uid in user.blocked_user_ids if uid != other_id]
            self.db.commit()
            self.db.refresh(user)
            logger.info(f"User {user.id} unblocked user {other_id}")
        return user

    def get_blocked_users(self, user: User) -> List[User]:
        ids = user.blocked_user_ids or []
        if not ids:
            return []
        return self.db.query(User).filter(User.id.in_(ids)).order_by(User.id).all()

    def is_blocked_between(self, user_a: User, user_b: User) -> bool:
        return user_a.has_blocked(user_b.id) or user_b.has_blocked(user_a.id)

    # Identity verification

    def submit_verification(self, user: User, photo_url: str) -> User:
        user.verification_photo_url = photo_url
        user.verification_status = "VERIFIED" if settings.auto_approve_verification else "PENDING"
        self.db.commit()
        self.db.refresh(user)
        logger.info(f"User {user.id} submitted verification, status {user.verification_status}")
        return user

    def set_verification_status(self, user: User, status: str) -> User:
        user.verification_status = status
        self.db.commit()
        self.db.refresh(user)
        logger.info(f"Verification status of user {user.id} set to {status}")
        return user

    # Account deletion

    def delete_account(self, user: User) -> None:
        """
        Remove a user and everything that only makes sense with them present:
        their conversations, hosted events, messages and reports against them.
        """
        user_id = user.id

        conversation_ids = [
            c.id for c in self.db.query(Conversation).filter(
                or_(Conversation.user_a_id == user_id, Conversation.user_b_id == user_id)
            ).all()
        ]
        hosted_event_ids = [
            e.id for e in self.db.query(SocialEvent).filter(SocialEvent.host_id == user_id).all()
        ]

        if conversation_ids:
            self.db.query(ChatMessage).filter(
                ChatMessage.channel_type == "DM",
                ChatMessage.channel_id.in_(conversation_ids),
            ).delete(synchronize_session=False)
            self.db.query(Conversation).filter(Conversation.id.in_(conversation_ids)).delete(
                synchronize_session=False
            )
        if hosted_event_ids:
            self.db.query(ChatMessage).filter(
                ChatMessage.channel_type == "EVENT",
                ChatMessage.channel_id.in_(hosted_event_ids),
            ).delete(synchronize_session=False)
            self.db.query(Report).filter(Report.event_id.in_(hosted_event_ids)).update(
                {Report.event_id: None}, synchronize_session=False
            )
            self.db.query(SocialEvent).filter(SocialEvent.id.in_(hosted_event_ids)).delete(
                synchronize_session=False
            )

        self.db.query(ChatMessage).filter(ChatMessage.sender_id == user_id).delete(synchronize_session=False)
        self.db.query(Report).filter(Report.reported_user_id == user_id).delete(synchronize_session=False)
        self.db.query(Report).filter(Report.reporter_id == user_id).update(
            {Report.reporter_id: None}, synchronize_session=False
        )
        self.db.query(PeerReview).filter(PeerReview.reviewer_id == user_id).update(
            {PeerReview.reviewer_id: None}, synchronize_session=False
        )

        for event in self.db.query(SocialEvent).all():
            if user_id in (event.participant_ids or []):
                event.participant_ids = [uid for uid in event.participant_ids if uid != user_id]
        for other in self.db.query(User).filter(User.id != user_id).all():
            if other.has_blocked(user_id):
                other.blocked_user_ids = [uid for uid in other.blocked_user_ids if uid != user_id]

        self.db.delete(user)
        self.db.commit()
        logger.info(f"Deleted account {user_id}")
