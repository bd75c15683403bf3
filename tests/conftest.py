import os

# Configure the app for tests before it is imported
os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")
os.environ.setdefault("FIREBASE_PROJECT_ID", "hangoutz-test")
os.environ.setdefault("JWT_SECRET", "test-secret")

from datetime import date

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.main import app
from app.api.deps import get_token_verifier
from app.core.errors import AuthenticationError
from app.core.security import FirebaseIdentity, create_access_token
from app.db.database import Base, get_db
from app.models.user import User

# Use in-memory SQLite for testing
TEST_DATABASE_URL = "sqlite:///:memory:"

# Raipur city centre, inside the geofence
RAIPUR = {"lat": 21.2514, "lng": 81.6296}

class FakeFirebaseVerifier:
    """Accepts tokens of the form "<uid>:<phone>"; anything else is rejected."""

    def verify(self, id_token: str) -> FirebaseIdentity:
        if ":" not in id_token:
            raise AuthenticationError("Invalid Firebase token")
        uid, phone = id_token.split(":", 1)
        return FirebaseIdentity(uid=uid, phone=phone or None)

@pytest.fixture
def test_db():
    # Create the SQLite engine with SQLAlchemy for testing
    engine = create_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

    # Create the tables
    Base.metadata.create_all(bind=engine)

    # Dependency override
    def override_get_db():
        try:
            db = TestingSessionLocal()
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_token_verifier] = lambda: FakeFirebaseVerifier()

    yield TestingSessionLocal  # This is where the testing happens

    app.dependency_overrides.clear()
    # Drop all tables after test
    Base.metadata.drop_all(bind=engine)

@pytest.fixture
def db_session(test_db):
    db = test_db()
    try:
        yield db
    finally:
        db.close()

@pytest.fixture
def client(test_db):
    with TestClient(app) as c:
        yield c

@pytest.fixture
def make_user(db_session):
    """Factory inserting a user directly; returns (user_id, auth headers)."""
    counter = {"n": 0}

    def _make_user(name="Test User", verified=True, role="USER", **fields):
        counter["n"] += 1
        user = User(
            phone=fields.pop("phone", f"+91900000{counter['n']:04d}"),
            firebase_uid=fields.pop("firebase_uid", f"uid-{counter['n']}"),
            name=name,
            dob=fields.pop("dob", date(1995, 5, 20)),
            gender=fields.pop("gender", "Female"),
            photos=fields.pop("photos", [f"https://example.com/{counter['n']}.jpg"]),
            interests=fields.pop("interests", []),
            bio=fields.pop("bio", ""),
            verification_status="VERIFIED" if verified else "PENDING",
            role=role,
            trust_score=fields.pop("trust_score", 100),
            missed_events_count=fields.pop("missed_events_count", 0),
            blocked_user_ids=[],
            privacy_settings=fields.pop("privacy_settings", {"show_age": True, "show_gender": True}),
            **fields,
        )
        db_session.add(user)
        db_session.commit()
        db_session.refresh(user)
        return user.id, {"Authorization": f"Bearer {create_access_token(user.id)}"}

    return _make_user

def event_payload(**overrides):
    payload = {
        "title": "Evening walk",
        "description": "Walk around the lake",
        "location": "Telibandha Lake",
        "category": "🧘 Wellness",
        "date_time": "2099-01-01T18:00:00",
        "coordinates": dict(RAIPUR),
    }
    payload.update(overrides)
    return payload
