from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from typing import List

from app.api.deps import get_current_user
from app.db.database import get_db
from app.models.schemas import ChatMessageResponse, ConversationCreate, ConversationResponse, MessageCreate
from app.models.user import User
from app.services.conversation_service import ConversationService
from app.services.user_service import UserService

router = APIRouter(
    prefix="/conversations",
    tags=["conversations"]
)

@router.get("", response_model=List[ConversationResponse])
def list_conversations(
    box: str = "all",
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """
    List the current user's conversations.

    Parameters:
    - box: "primary" for accepted chats and requests you sent, "requests" for
      pending requests from other users, "all" for both
    """
    return ConversationService(db).list_conversations(current_user, box)

@router.post("", response_model=ConversationResponse, status_code=status.HTTP_201_CREATED)
def start_conversation(
    body: ConversationCreate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Start a conversation with another user, or return the existing one."""
    target = UserService(db).get_user(body.target_user_id)
    return ConversationService(db).start_conversation(current_user, target)

@router.get("/{conversation_id}", response_model=ConversationResponse)
def read_conversation(conversation_id: int, current_user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    return ConversationService(db).get_conversation(conversation_id, current_user)

@router.post("/{conversation_id}/accept", response_model=ConversationResponse)
def accept_conversation(conversation_id: int, current_user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    service = ConversationService(db)
    return service.accept(service.get_conversation(conversation_id, current_user), current_user)

@router.post("/{conversation_id}/reject", response_model=ConversationResponse)
def reject_conversation(conversation_id: int, current_user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    service = ConversationService(db)
    return service.reject(service.get_conversation(conversation_id, current_user), current_user)

@router.get("/{conversation_id}/messages", response_model=List[ChatMessageResponse])
def read_messages(conversation_id: int, current_user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    service = ConversationService(db)
    return service.list_messages(service.get_conversation(conversation_id, current_user))

@router.post("/{conversation_id}/messages", response_model=ChatMessageResponse, status_code=status.HTTP_201_CREATED)
def send_message(
    conversation_id: int,
    body: MessageCreate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    service = ConversationService(db)
    return service.send_message(service.get_conversation(conversation_id, current_user), current_user, body.message)
