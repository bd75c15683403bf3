from datetime import date, timedelta

from app.core.config import settings
from app.models.user import User

SIGNUP = {
    "firebase_token": "firebase-uid-1:+919876543210",
    "name": "Riya",
    "dob": "1998-02-14",
    "gender": "Female",
    "bio": "Coffee and board games",
    "photos": ["https://example.com/riya.jpg"],
    "interests": ["☕ Coffee"],
}

def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}

def test_login_without_account_returns_404(client):
    response = client.post("/auth/login", json={"firebase_token": "unknown-uid:+911111111111"})
    assert response.status_code == 404

def test_login_with_invalid_token_returns_401(client):
    response = client.post("/auth/login", json={"firebase_token": "garbage"})
    assert response.status_code == 401

def test_signup_then_login(client):
    response = client.post("/auth/signup", json=SIGNUP)
    assert response.status_code == 201

    data = response.json()
    assert data["token"]
    assert data["user"]["phone"] == "+919876543210"
    assert data["user"]["trust_score"] == 100
    assert data["user"]["trust_label"] == "Elite"
    assert data["user"]["verified"] is False
    assert data["user"]["photo_url"] == "https://example.com/riya.jpg"

    response = client.post("/auth/login", json={"firebase_token": SIGNUP["firebase_token"]})
    assert response.status_code == 200
    assert response.json()["user"]["id"] == data["user"]["id"]

    me = client.get("/users/me", headers={"Authorization": f"Bearer {response.json()['token']}"})
    assert me.status_code == 200
    assert me.json()["name"] == "Riya"

def test_signup_twice_conflicts(client):
    assert client.post("/auth/signup", json=SIGNUP).status_code == 201
    response = client.post("/auth/signup", json=SIGNUP)
    assert response.status_code == 409

def test_signup_requires_adult(client):
    too_young = (date.today() - timedelta(days=365 * 17)).isoformat()
    response = client.post("/auth/signup", json={**SIGNUP, "dob": too_young})
    assert response.status_code == 400
    assert "18+" in response.json()["detail"]

def test_signup_requires_photo(client):
    response = client.post("/auth/signup", json={**SIGNUP, "photos": []})
    assert response.status_code == 400

def test_signup_rejects_more_than_five_photos(client):
    response = client.post("/auth/signup", json={**SIGNUP, "photos": [f"p{i}" for i in range(6)]})
    assert response.status_code == 422

def test_signup_with_verification_photo_is_verified(client):
    response = client.post("/auth/signup", json={**SIGNUP, "verification_photo_url": "data:image/jpeg;base64,abc"})
    assert response.status_code == 201
    assert response.json()["user"]["verified"] is True

def test_signup_verification_pending_without_auto_approve(client, monkeypatch):
    monkeypatch.setattr(settings, "auto_approve_verification", False)
    response = client.post("/auth/signup", json={**SIGNUP, "verification_photo_url": "data:image/jpeg;base64,abc"})
    assert response.status_code == 201
    assert response.json()["user"]["verification_status"] == "PENDING"

def test_signup_cannot_claim_seeded_account_with_client_phone(client, db_session):
    db_session.add(User(phone="+919000000001", name="Seeded", photos=[], blocked_user_ids=[]))
    db_session.commit()

    # Token without a verified phone number; the phone comes from the request body
    response = client.post("/auth/signup", json={**SIGNUP, "firebase_token": "uid-x:", "phone": "+919000000001"})
    assert response.status_code == 409

    seeded = db_session.query(User).filter(User.phone == "+919000000001").one()
    assert seeded.firebase_uid is None
    assert seeded.name == "Seeded"

def test_signup_claims_seeded_account_with_verified_phone(client, db_session):
    db_session.add(User(phone="+919876543210", name="Seeded", photos=[], blocked_user_ids=[]))
    db_session.commit()

    response = client.post("/auth/signup", json=SIGNUP)
    assert response.status_code == 201
    assert response.json()["user"]["name"] == "Riya"
    assert db_session.query(User).count() == 1

def test_signup_with_client_phone_for_new_number(client):
    response = client.post("/auth/signup", json={**SIGNUP, "firebase_token": "uid-y:", "phone": "+919111111111"})
    assert response.status_code == 201
    assert response.json()["user"]["phone"] == "+919111111111"

def test_protected_route_requires_token(client):
    assert client.get("/users/me").status_code == 401
    response = client.get("/users/me", headers={"Authorization": "Bearer not-a-jwt"})
    assert response.status_code == 401
