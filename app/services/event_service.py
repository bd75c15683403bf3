import logging
from datetime import datetime, timedelta
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.errors import ConflictError, NotFoundError, PermissionDeniedError, ValidationError
from app.core.geo import ensure_within_city
from app.core.timeutils import local_start_of_day, to_naive_utc, utcnow
from app.models.conversation import ChatMessage
from app.models.event import DEFAULT_EVENT_IMAGE, SocialEvent
from app.models.user import User
from app.services.chat_service import ChatService
from app.services.trust_service import TrustService

logger = logging.getLogger(__name__)

DATE_FILTERS = ("ALL", "TODAY", "UPCOMING")

class EventService:
    """
    Service for meetups: creation inside the city geofence, listing,
    joining and leaving, cancellation, no-shows and the event group chat.
    """

    def __init__(self, db: Session):
        self.db = db

    def refresh_status(self, events: List[SocialEvent], now: Optional[datetime] = None) -> None:
        """
        Move events along UPCOMING -> HAPPENING -> COMPLETED based on their start
        time. Cancelled and completed events are left alone.
        """
        now = now or utcnow()
        duration = timedelta(hours=settings.event_duration_hours)
        changed = False
        for event in events:
            if event.status not in ("UPCOMING", "HAPPENING") or event.date_time > now:
                continue
            new_status = "COMPLETED" if event.date_time + duration <= now else "HAPPENING"
            if new_status != event.status:
                logger.info(f"Event {event.id}: {event.status} -> {new_status}")
                event.status = new_status
                changed = True
        if changed:
            self.db.commit()

    def get_event(self, event_id: int) -> SocialEvent:
        event = self.db.get(SocialEvent, event_id)
        if not event:
            raise NotFoundError(f"Event {event_id} not found")
        self.refresh_status([event])
        return event

    def list_events(
        self,
        category: Optional[str] = None,
        when: str = "ALL",
        include_cancelled: bool = False,
        now: Optional[datetime] = None,
    ) -> List[SocialEvent]:
        """
        List events ordered by start time.

        Args:
            category: Only events in this category ("All" or None for every category)
            when: ALL, TODAY (starts on the current day in the city's timezone) or
                UPCOMING (starts later than now)
            include_cancelled: Whether cancelled events are returned
            now: Reference time, defaults to the current UTC time
        """
        when = (when or "ALL").upper()
        if when not in DATE_FILTERS:
            raise ValidationError(f"Unknown date filter: {when}")
        now = now or utcnow()

        query = self.db.query(SocialEvent)
        if category and category != "All":
            query = query.filter(SocialEvent.category == category)
        if not include_cancelled:
            query = query.filter(SocialEvent.status != "CANCELLED")
        if when == "TODAY":
            start_of_day = local_start_of_day(now)
            query = query.filter(
                SocialEvent.date_time >= start_of_day,
                SocialEvent.date_time < start_of_day + timedelta(days=1),
            )
        elif when == "UPCOMING":
            query = query.filter(SocialEvent.date_time > now)

        events = query.order_by(SocialEvent.date_time, SocialEvent.id).all()
        self.refresh_status(events, now)
        return events

    def create_event(self, host: User, data: Dict[str, Any]) -> SocialEvent:
        """
        Create an event hosted by ``host``.

        Raises:
            PermissionDeniedError: If the host has not passed identity verification
            GeofenceError: If the coordinates are outside the city radius
            ValidationError: If the event starts in the past
        """
        if not host.verified:
            raise PermissionDeniedError("Verify your identity to post events")

        date_time = to_naive_utc(data["date_time"])
        if date_time <= utcnow():
            raise ValidationError("Event must start in the future")

        coordinates = data["coordinates"]
        ensure_within_city(coordinates["lat"], coordinates["lng"])

        event = SocialEvent(
            title=data["title"].strip(),
            description=data["description"].strip(),
            location=data["location"].strip(),
            category=data["category"],
            date_time=date_time,
            image_url=data.get("image_url") or DEFAULT_EVENT_IMAGE,
            max_participants=data.get("max_participants") or 10,
            status="UPCOMING",
            host_id=host.id,
            participant_ids=[host.id],
            no_show_ids=[],
            lat=coordinates["lat"],
            lng=coordinates["lng"],
        )
        self.db.add(event)
        self.db.commit()
        self.db.refresh(event)
        logger.info(f"User {host.id} created event {event.id} '{event.title}'")
        return event

    def join_event(self, event: SocialEvent, user: User) -> SocialEvent:
        if not user.verified:
            raise PermissionDeniedError("Verify your identity to join events")
        if user.id in (event.participant_ids or []):
            return event
        self.refresh_status([event])
        if event.status != "UPCOMING":
            raise ConflictError(f"Event is {event.status.lower()} and can no longer be joined")
        if event.is_full:
            raise ConflictError("Event is full")

        event.participant_ids = [*(event.participant_ids or []), user.id]
        self.db.commit()
        self.db.refresh(event)
        logger.info(f"User {user.id} joined event {event.id}")
        return event

    def leave_event(self, event: SocialEvent, user: User) -> SocialEvent:
        if user.id == event.host_id:
            raise ValidationError("The host cannot leave their own event; cancel it instead")
        if user.id not in (event.participant_ids or []):
            raise ValidationError("You have not joined this event")

        event.participant_ids = [uid for uid in event.participant_ids if uid != user.id]
        self.db.commit()
        self.db.refresh(event)
        logger.info(f"User {user.id} left event {event.id}")
        return event

    def cancel_event(self, event: SocialEvent, user: User) -> SocialEvent:
        if user.id != event.host_id:
            raise PermissionDeniedError("Only the host can cancel this event")
        if event.status in ("COMPLETED", "CANCELLED"):
            raise ConflictError(f"Event is already {event.status.lower()}")

        event.status = "CANCELLED"
        ChatService(self.db).post_message("EVENT", event.id, user, "The host cancelled this event.", is_system=True)
        self.db.commit()
        self.db.refresh(event)
        logger.info(f"Event {event.id} cancelled by host")
        return event

    def record_no_show(self, event: SocialEvent, host: User, participant: User) -> User:
        """
        Record that ``participant`` missed ``event``; counted once per event.

        Returns the participant with the updated trust score.
        """
        if host.id != event.host_id:
            raise PermissionDeniedError("Only the host can report missed attendance")
        if participant.id == event.host_id:
            raise ValidationError("The host cannot be marked as a no-show")
        if participant.id not in (event.participant_ids or []):
            raise ValidationError("User did not join this event")
        if event.status == "CANCELLED":
            raise ConflictError("Event was cancelled")
        if event.date_time > utcnow():
            raise ConflictError("Event has not started yet")

        if participant.id in (event.no_show_ids or []):
            return participant

        event.no_show_ids = [*(event.no_show_ids or []), participant.id]
        TrustService(self.db).record_missed_event(participant)
        logger.info(f"User {participant.id} missed event {event.id}")
        return participant

    # Group chat

    def _ensure_participant(self, event: SocialEvent, user: User) -> None:
        if user.id not in (event.participant_ids or []):
            raise PermissionDeniedError("Join the event to take part in its chat")

    def list_messages(self, event: SocialEvent, user: User) -> List[ChatMessage]:
        self._ensure_participant(event, user)
        return ChatService(self.db).list_messages("EVENT", event.id)

    def post_message(self, event: SocialEvent, user: User, text: str) -> ChatMessage:
        self._ensure_participant(event, user)
        if not text.strip():
            raise ValidationError("Message cannot be empty")

        message = ChatService(self.db).post_message("EVENT", event.id, user, text)
        self.db.commit()
        self.db.refresh(message)
        return message
