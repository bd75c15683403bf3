from sqlalchemy import Column, Integer, String, Text, DateTime, Date, JSON, ForeignKey, UniqueConstraint
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship

from app.core.timeutils import calculate_age
from app.core.trust import trust_label
from app.db.database import Base

DEFAULT_PRIVACY_SETTINGS = {"show_age": True, "show_gender": True}

class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    phone = Column(String(20), unique=True, index=True, nullable=False)
    firebase_uid = Column(String(128), unique=True, index=True, nullable=True)
    name = Column(String(100), nullable=True)
    email = Column(String(100), nullable=True)
    dob = Column(Date, nullable=True)
    gender = Column(String(10), nullable=True)  # Male, Female
    bio = Column(Text, default="")
    photos = Column(JSON, default=list)  # Gallery, first entry is the primary photo
    interests = Column(JSON, default=list)
    verification_status = Column(String(20), default="PENDING")  # PENDING, VERIFIED, REJECTED
    verification_photo_url = Column(Text, nullable=True)  # Private photo for identity check
    trust_score = Column(Integer, default=100)
    missed_events_count = Column(Integer, default=0)
    role = Column(String(10), default="USER")  # USER, ADMIN
    blocked_user_ids = Column(JSON, default=list)
    privacy_settings = Column(JSON, default=lambda: dict(DEFAULT_PRIVACY_SETTINGS))
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    # Relationships
    reviews = relationship(
        "PeerReview",
        back_populates="target_user",
        foreign_keys="PeerReview.target_user_id",
        cascade="all, delete-orphan",
        order_by="PeerReview.id",
    )

    @property
    def photo_url(self):
        return self.photos[0] if self.photos else None

    @property
    def verified(self) -> bool:
        return self.verification_status == "VERIFIED"

    @property
    def age(self):
        return calculate_age(self.dob)

    @property
    def trust_label(self) -> str:
        return trust_label(self.trust_score or 0)

    @property
    def is_admin(self) -> bool:
        return self.role == "ADMIN"

    def has_blocked(self, other_id: int) -> bool:
        return other_id in (self.blocked_user_ids or [])


class PeerReview(Base):
    __tablename__ = "peer_reviews"
    __table_args__ = (UniqueConstraint("target_user_id", "reviewer_id", name="uq_review_per_reviewer"),)

    id = Column(Integer, primary_key=True, index=True)
    target_user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), index=True)
    reviewer_id = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    reviewer_name = Column(String(100))
    rating = Column(Integer, nullable=False)  # 1-5
    comment = Column(Text, default="")
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    target_user = relationship("User", back_populates="reviews", foreign_keys=[target_user_id])
