import logging
from typing import List

from sqlalchemy import or_
from sqlalchemy.orm import Session

from app.core.errors import ConflictError, NotFoundError, PermissionDeniedError, ValidationError
from app.models.conversation import ChatMessage, Conversation
from app.models.user import User
from app.services.chat_service import ChatService

logger = logging.getLogger(__name__)

INBOXES = ("all", "primary", "requests")

class ConversationService:
    """
    Direct messages between two users.

    A conversation starts as a PENDING request from ``requester_id``. Only the
    other participant can accept or reject it. While pending, only the
    requester may send messages; once rejected, nobody can.
    """

    def __init__(self, db: Session):
        self.db = db

    def get_conversation(self, conversation_id: int, user: User) -> Conversation:
        conversation = self.db.get(Conversation, conversation_id)
        if not conversation or user.id not in conversation.participant_ids:
            raise NotFoundError(f"Conversation {conversation_id} not found")
        return conversation

    def _find_pair(self, user_id: int, other_id: int) -> Conversation:
        low, high = sorted((user_id, other_id))
        return (
            self.db.query(Conversation)
            .filter(Conversation.user_a_id == low, Conversation.user_b_id == high)
            .first()
        )

    def list_conversations(self, user: User, box: str = "all") -> List[Conversation]:
        """
        List a user's conversations, most recent activity first.

        Args:
            user: Participant whose inbox is listed
            box: "primary" (accepted, or requested by the user), "requests"
                 (pending requests from others) or "all"
        """
        box = (box or "all").lower()
        if box not in INBOXES:
            raise ValidationError(f"Unknown inbox: {box}")

        conversations = (
            self.db.query(Conversation)
            .filter(or_(Conversation.user_a_id == user.id, Conversation.user_b_id == user.id))
            .all()
        )

        if box == "primary":
            conversations = [
                c for c in conversations
                if c.status == "ACCEPTED" or c.requester_id == user.id
            ]
        elif box == "requests":
            conversations = [
                c for c in conversations
                if c.status == "PENDING" and c.requester_id != user.id
            ]

        return sorted(
            conversations,
            key=lambda c: (c.last_message_time is not None, c.last_message_time or c.created_at, c.id),
            reverse=True,
        )

    def start_conversation(self, requester: User, target: User) -> Conversation:
        """
        Open (or return) the conversation between ``requester`` and ``target``.

        An existing conversation is returned as is, except a rejected one,
        which becomes a fresh request from ``requester``.

        Raises:
            ValidationError: If a user tries to message themself
            PermissionDeniedError: If either user has blocked the other
        """
        if requester.id == target.id:
            raise ValidationError("You cannot start a conversation with yourself")
        if requester.has_blocked(target.id) or target.has_blocked(requester.id):
            raise PermissionDeniedError("You cannot message this user")

        conversation = self._find_pair(requester.id, target.id)
        if conversation:
            if conversation.status == "REJECTED":
                conversation.status = "PENDING"
                conversation.requester_id = requester.id
                self.db.commit()
                self.db.refresh(conversation)
                logger.info(f"Conversation {conversation.id} reopened by user {requester.id}")
            return conversation

        low, high = sorted((requester.id, target.id))
        conversation = Conversation(
            user_a_id=low,
            user_b_id=high,
            requester_id=requester.id,
            status="PENDING",
            type="DM",
            last_message="",
        )
        self.db.add(conversation)
        self.db.commit()
        self.db.refresh(conversation)
        logger.info(f"User {requester.id} requested conversation {conversation.id} with user {target.id}")
        return conversation

    def _respond(self, conversation: Conversation, user: User, new_status: str) -> Conversation:
        if user.id == conversation.requester_id:
            raise PermissionDeniedError("Only the recipient can respond to a message request")
        if conversation.status != "PENDING":
            raise ConflictError(f"Conversation is already {conversation.status.lower()}")

        conversation.status = new_status
        self.db.commit()
        self.db.refresh(conversation)
        logger.info(f"Conversation {conversation.id} {new_status.lower()} by user {user.id}")
        return conversation

    def accept(self, conversation: Conversation, user: User) -> Conversation:
        return self._respond(conversation, user, "ACCEPTED")

    def reject(self, conversation: Conversation, user: User) -> Conversation:
        return self._respond(conversation, user, "REJECTED")

    def can_send(self, conversation: Conversation, sender: User) -> bool:
        if conversation.status == "ACCEPTED":
            return True
        if conversation.status == "PENDING":
            return sender.id == conversation.requester_id
        return False

    def send_message(self, conversation: Conversation, sender: User, text: str) -> ChatMessage:
        if not text.strip():
            raise ValidationError("Message cannot be empty")

        other = self.db.get(User, conversation.other_participant_id(sender.id))
        if sender.has_blocked(other.id) or other.has_blocked(sender.id):
            raise PermissionDeniedError("Blocked. Unblock to continue chatting.")
        if not self.can_send(conversation, sender):
            if conversation.status == "REJECTED":
                raise PermissionDeniedError("This message request was declined")
            raise PermissionDeniedError("Accept the message request to reply")

        message = ChatService(self.db).post_message("DM", conversation.id, sender, text)
        conversation.last_message = message.message
        conversation.last_message_time = message.timestamp
        self.db.commit()
        self.db.refresh(message)
        return message

    def list_messages(self, conversation: Conversation) -> List[ChatMessage]:
        return ChatService(self.db).list_messages("DM", conversation.id)
