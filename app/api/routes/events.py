from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from typing import List, Optional

from app.api.deps import get_current_user
from app.db.database import get_db
from app.models.schemas import (
    ChatMessageResponse, EventCreate, EventResponse, MessageCreate, NoShowCreate, PublicUserResponse,
)
from app.models.user import User
from app.services.event_service import EventService
from app.services.user_service import UserService

router = APIRouter(
    prefix="/events",
    tags=["events"]
)

@router.get("", response_model=List[EventResponse])
def list_events(
    category: Optional[str] = None,
    when: str = "ALL",
    include_cancelled: bool = False,
    db: Session = Depends(get_db)
):
    """
    List events, soonest first.

    Parameters:
    - category: Only events in this category
    - when: ALL, TODAY or UPCOMING
    - include_cancelled: Also return cancelled events
    """
    return EventService(db).list_events(category=category, when=when, include_cancelled=include_cancelled)

@router.post("/create", response_model=EventResponse, status_code=status.HTTP_201_CREATED)
def create_event(
    event: EventCreate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """
    Create an event. Only verified users may host, and the event must be
    inside the city geofence.
    """
    return EventService(db).create_event(current_user, event.model_dump())

@router.get("/{event_id}", response_model=EventResponse)
def read_event(event_id: int, db: Session = Depends(get_db)):
    return EventService(db).get_event(event_id)

@router.post("/{event_id}/join", response_model=EventResponse)
def join_event(event_id: int, current_user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    service = EventService(db)
    return service.join_event(service.get_event(event_id), current_user)

@router.post("/{event_id}/leave", response_model=EventResponse)
def leave_event(event_id: int, current_user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    service = EventService(db)
    return service.leave_event(service.get_event(event_id), current_user)

@router.post("/{event_id}/cancel", response_model=EventResponse)
def cancel_event(event_id: int, current_user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    service = EventService(db)
    return service.cancel_event(service.get_event(event_id), current_user)

@router.post("/{event_id}/no-shows", response_model=PublicUserResponse)
def record_no_show(
    event_id: int,
    body: NoShowCreate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Host reports a participant who did not turn up; costs them trust score."""
    service = EventService(db)
    user_service = UserService(db)
    participant = service.record_no_show(service.get_event(event_id), current_user, user_service.get_user(body.user_id))
    return user_service.public_profile(participant)

@router.get("/{event_id}/messages", response_model=List[ChatMessageResponse])
def read_event_messages(event_id: int, current_user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    service = EventService(db)
    return service.list_messages(service.get_event(event_id), current_user)

@router.post("/{event_id}/messages", response_model=ChatMessageResponse, status_code=status.HTTP_201_CREATED)
def post_event_message(
    event_id: int,
    body: MessageCreate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    service = EventService(db)
    return service.post_message(service.get_event(event_id), current_user, body.message)
