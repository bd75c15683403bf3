from typing import List

from sqlalchemy.orm import Session

from app.core.timeutils import utcnow
from app.models.conversation import ChatMessage
from app.models.user import User

class ChatService:
    """Stores and reads messages for a channel (a conversation or an event)."""

    def __init__(self, db: Session):
        self.db = db

    def post_message(self, channel_type: str, channel_id: int, sender: User, text: str, is_system: bool = False) -> ChatMessage:
        message = ChatMessage(
            channel_type=channel_type,
            channel_id=channel_id,
            sender_id=sender.id,
            message=text.strip(),
            is_system=is_system,
            timestamp=utcnow(),
        )
        self.db.add(message)
        return message

    def list_messages(self, channel_type: str, channel_id: int, limit: int = 200) -> List[ChatMessage]:
        return (
            self.db.query(ChatMessage)
            .filter(ChatMessage.channel_type == channel_type, ChatMessage.channel_id == channel_id)
            .order_by(ChatMessage.timestamp, ChatMessage.id)
            .limit(limit)
            .all()
        )
