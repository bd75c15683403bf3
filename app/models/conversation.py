from sqlalchemy import Column, Integer, String, Text, DateTime, Boolean, ForeignKey, UniqueConstraint
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship

from app.core.timeutils import utcnow
from app.db.database import Base

class Conversation(Base):
    __tablename__ = "conversations"
    # One conversation per unordered pair; user_a_id is always the smaller id
    __table_args__ = (UniqueConstraint("user_a_id", "user_b_id", name="uq_conversation_pair"),)

    id = Column(Integer, primary_key=True, index=True)
    user_a_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), index=True)
    user_b_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), index=True)
    requester_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"))
    status = Column(String(20), default="PENDING")  # PENDING, ACCEPTED, REJECTED
    type = Column(String(10), default="DM")
    last_message = Column(Text, default="")
    last_message_time = Column(DateTime, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    # Relationships
    user_a = relationship("User", foreign_keys=[user_a_id])
    user_b = relationship("User", foreign_keys=[user_b_id])

    @property
    def participants(self):
        return [self.user_a, self.user_b]

    @property
    def participant_ids(self):
        return [self.user_a_id, self.user_b_id]

    def other_participant_id(self, user_id: int) -> int:
        return self.user_b_id if user_id == self.user_a_id else self.user_a_id


class ChatMessage(Base):
    __tablename__ = "chat_messages"

    id = Column(Integer, primary_key=True, index=True)
    channel_type = Column(String(10), index=True)  # DM, EVENT
    channel_id = Column(Integer, index=True)  # Conversation.id or SocialEvent.id
    sender_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"))
    message = Column(Text, nullable=False)
    is_system = Column(Boolean, default=False)
    timestamp = Column(DateTime, default=utcnow, index=True)

    # Relationships
    sender = relationship("User")
