from sqlalchemy import Column, Integer, String, Text, DateTime, Float, JSON, ForeignKey
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship

from app.db.database import Base

DEFAULT_EVENT_IMAGE = "https://images.unsplash.com/photo-1511632765486-a4a920224d29?q=80&w=800&auto=format&fit=crop"

class SocialEvent(Base):
    __tablename__ = "events"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(200), nullable=False)
    description = Column(Text, nullable=False)
    location = Column(String(255), nullable=False)
    category = Column(String(50), index=True, nullable=False)
    image_url = Column(Text, default=DEFAULT_EVENT_IMAGE)
    date_time = Column(DateTime, index=True, nullable=False)  # Naive UTC
    max_participants = Column(Integer, default=10)
    status = Column(String(20), index=True, default="UPCOMING")  # UPCOMING, HAPPENING, COMPLETED, CANCELLED
    host_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), index=True)
    participant_ids = Column(JSON, default=list)
    no_show_ids = Column(JSON, default=list)  # Participants recorded as missing the event
    lat = Column(Float, nullable=True)
    lng = Column(Float, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    # Relationships
    host = relationship("User")

    @property
    def participant_count(self) -> int:
        return len(self.participant_ids or [])

    @property
    def is_full(self) -> bool:
        return self.participant_count >= (self.max_participants or 0)

    @property
    def coordinates(self):
        if self.lat is None or self.lng is None:
            return None
        return {"lat": self.lat, "lng": self.lng}
