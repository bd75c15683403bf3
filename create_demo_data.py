#!/usr/bin/env python3
"""
Script to populate the local database with demo users, events and chats.

Run against the default SQLite database for offline/demo mode:
    python create_demo_data.py
"""
import random
from datetime import date, timedelta
from dotenv import load_dotenv

# Load environment variables
load_dotenv()

# Import all models so every table is registered before create_all
from app.core.security import create_access_token
from app.core.timeutils import utcnow
from app.db.database import SessionLocal, engine, Base
from app.models.conversation import Conversation, ChatMessage
from app.models.event import SocialEvent
from app.models.report import Report  # noqa: F401
from app.models.user import User
from app.services.trust_service import TrustService

DEMO_USERS = [
    {"phone": "+919000000001", "name": "Aarav", "gender": "Male", "dob": date(1998, 4, 12),
     "bio": "Weekend cricketer, weekday coder.", "interests": ["🏏 Cricket", "🎮 Gaming"], "role": "ADMIN"},
    {"phone": "+919000000002", "name": "Diya", "gender": "Female", "dob": date(2000, 9, 3),
     "bio": "Always hunting for the best chaat in town.", "interests": ["🍔 Food", "📸 Photography"]},
    {"phone": "+919000000003", "name": "Kabir", "gender": "Male", "dob": date(1995, 1, 27),
     "bio": "Chess, books and long walks by the lake.", "interests": ["♟️ Chess", "📚 Reading"]},
    {"phone": "+919000000004", "name": "Meera", "gender": "Female", "dob": date(1999, 6, 18),
     "bio": "Yoga in the morning, movies at night.", "interests": ["🧘 Wellness", "🎬 Movies"],
     "privacy_settings": {"show_age": False, "show_gender": True}},
]

# Points inside the 30km Raipur geofence
DEMO_EVENTS = [
    {"title": "Sunday Cricket at Marine Drive", "category": "🏏 Cricket", "location": "Marine Drive, Telibandha",
     "lat": 21.2497, "lng": 81.6647, "days": 2},
    {"title": "Street Food Crawl", "category": "🍔 Food", "location": "Chowpatty, Ghadi Chowk",
     "lat": 21.2380, "lng": 81.6337, "days": 0},
    {"title": "Blitz Chess Meetup", "category": "♟️ Chess", "location": "Central Library, Civil Lines",
     "lat": 21.2556, "lng": 81.6420, "days": 5},
]

def create_demo_data():
    """Create demo users, events and a conversation request"""
    Base.metadata.create_all(bind=engine)
    db = SessionLocal()

    try:
        users = []
        for data in DEMO_USERS:
            user = db.query(User).filter(User.phone == data["phone"]).first()
            if not user:
                user = User(
                    phone=data["phone"],
                    name=data["name"],
                    gender=data["gender"],
                    dob=data["dob"],
                    bio=data["bio"],
                    interests=data["interests"],
                    photos=[f"https://i.pravatar.cc/300?u={data['phone']}"],
                    verification_status="VERIFIED",
                    role=data.get("role", "USER"),
                    blocked_user_ids=[],
                    privacy_settings=data.get("privacy_settings", {"show_age": True, "show_gender": True}),
                    trust_score=100,
                    missed_events_count=0,
                )
                db.add(user)
                db.commit()
                db.refresh(user)
                print(f"Created demo user: {user.name} (ID: {user.id})")
            else:
                print(f"Using existing demo user: {user.name} (ID: {user.id})")
            users.append(user)

        if db.query(SocialEvent).count() == 0:
            now = utcnow().replace(minute=0, second=0, microsecond=0)
            for i, data in enumerate(DEMO_EVENTS):
                host = users[i % len(users)]
                others = [u.id for u in users if u.id != host.id]
                event = SocialEvent(
                    title=data["title"],
                    description=f"{data['title']} - everyone is welcome!",
                    location=data["location"],
                    category=data["category"],
                    date_time=now + timedelta(days=data["days"], hours=random.randint(2, 8)),
                    max_participants=10,
                    status="UPCOMING",
                    host_id=host.id,
                    participant_ids=[host.id] + random.sample(others, k=2),
                    no_show_ids=[],
                    lat=data["lat"],
                    lng=data["lng"],
                )
                db.add(event)
            db.commit()
            print(f"Created {len(DEMO_EVENTS)} demo events")
        else:
            print("Events already exist, skipping")

        requester, recipient = users[1], users[2]
        low, high = sorted((requester.id, recipient.id))
        conversation = db.query(Conversation).filter(
            Conversation.user_a_id == low, Conversation.user_b_id == high
        ).first()
        if not conversation:
            text = "Hey! Saw you're into chess too, up for a game this week?"
            conversation = Conversation(
                user_a_id=low,
                user_b_id=high,
                requester_id=requester.id,
                status="PENDING",
                last_message=text,
                last_message_time=utcnow(),
            )
            db.add(conversation)
            db.commit()
            db.refresh(conversation)
            db.add(ChatMessage(channel_type="DM", channel_id=conversation.id, sender_id=requester.id, message=text))
            db.commit()
            print(f"Created message request from {requester.name} to {recipient.name}")

        # A few reviews so trust scores are not all identical
        trust_service = TrustService(db)
        if not users[3].reviews:
            trust_service.add_review(users[3], users[0], 4, "Great company at the movie night")
            trust_service.add_review(users[3], users[1], 5, "Super punctual")

        return [(user.id, user.name) for user in users]

    finally:
        db.close()

if __name__ == "__main__":
    users = create_demo_data()
    print(f"\nDemo data created successfully!")
    print(f"Session tokens for trying the API (Authorization: Bearer <token>):")
    for user_id, name in users:
        print(f"  {name:<6} (ID {user_id}): {create_access_token(user_id)}")
