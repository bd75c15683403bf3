from pydantic import BaseModel, Field
from typing import List, Optional, Literal
from datetime import date, datetime

Gender = Literal["Male", "Female"]
VerificationStatus = Literal["PENDING", "VERIFIED", "REJECTED"]
EventStatus = Literal["UPCOMING", "HAPPENING", "COMPLETED", "CANCELLED"]
ConversationStatus = Literal["PENDING", "ACCEPTED", "REJECTED"]

MAX_PHOTOS = 5

# Shared schemas
class PrivacySettings(BaseModel):
    show_age: bool = True
    show_gender: bool = True

class Coordinates(BaseModel):
    lat: float = Field(..., ge=-90, le=90)
    lng: float = Field(..., ge=-180, le=180)

class UserSummary(BaseModel):
    """Minimal user card embedded in events, conversations and messages."""
    id: int
    name: Optional[str] = None
    photo_url: Optional[str] = None

    class Config:
        from_attributes = True

# Auth schemas
class LoginRequest(BaseModel):
    firebase_token: str

class SignupRequest(BaseModel):
    firebase_token: str
    name: str = Field(..., min_length=1, max_length=100)
    dob: date
    phone: Optional[str] = None  # Used only when the token carries no phone number
    gender: Optional[Gender] = None
    email: Optional[str] = None
    bio: str = ""
    photos: List[str] = Field(default_factory=list, max_length=MAX_PHOTOS)
    interests: List[str] = Field(default_factory=list)
    verification_photo_url: Optional[str] = None

# User schemas
class UserResponse(BaseModel):
    """Full profile, returned only to the user themself."""
    id: int
    phone: str
    name: Optional[str] = None
    email: Optional[str] = None
    dob: Optional[date] = None
    age: Optional[int] = None
    gender: Optional[str] = None
    bio: Optional[str] = ""
    photo_url: Optional[str] = None
    photos: List[str] = []
    interests: List[str] = []
    verified: bool
    verification_status: VerificationStatus
    trust_score: int
    trust_label: str
    missed_events_count: int
    role: str
    blocked_user_ids: List[int] = []
    privacy_settings: PrivacySettings
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True

class PublicUserResponse(BaseModel):
    """Profile as seen by other users; age and gender follow privacy settings."""
    id: int
    name: Optional[str] = None
    age: Optional[int] = None
    gender: Optional[str] = None
    bio: Optional[str] = ""
    photo_url: Optional[str] = None
    photos: List[str] = []
    interests: List[str] = []
    verified: bool
    trust_score: int
    trust_label: str
    missed_events_count: int
    reviews: List["ReviewResponse"] = []

class AuthResponse(BaseModel):
    token: str
    user: UserResponse

class UserUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    email: Optional[str] = None
    bio: Optional[str] = None
    photos: Optional[List[str]] = Field(None, max_length=MAX_PHOTOS)
    interests: Optional[List[str]] = None
    privacy_settings: Optional[PrivacySettings] = None

class VerificationSubmission(BaseModel):
    photo_url: str = Field(..., min_length=1)

class VerificationDecision(BaseModel):
    status: VerificationStatus

# Review schemas
class ReviewCreate(BaseModel):
    rating: int = Field(..., ge=1, le=5)
    comment: str = ""

class ReviewResponse(BaseModel):
    id: int
    reviewer_id: Optional[int] = None
    reviewer_name: Optional[str] = None
    rating: int
    comment: str
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True

PublicUserResponse.model_rebuild()

# Report schemas
class ReportCreate(BaseModel):
    reported_user_id: int
    reason: str = Field(..., min_length=1)
    event_id: Optional[int] = None

class ReportResponse(BaseModel):
    id: int
    reporter_id: Optional[int] = None
    reported_user_id: int
    event_id: Optional[int] = None
    reason: str
    status: str
    created_at: Optional[datetime] = None
    resolved_at: Optional[datetime] = None

    class Config:
        from_attributes = True

# Event schemas
class EventCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=200)
    description: str = Field(..., min_length=1)
    location: str = Field(..., min_length=1, max_length=255)
    category: str = Field(..., min_length=1, max_length=50)
    date_time: datetime
    coordinates: Coordinates
    image_url: Optional[str] = None
    max_participants: int = Field(10, ge=2, le=500)

class EventResponse(BaseModel):
    id: int
    title: str
    description: str
    location: str
    category: str
    image_url: Optional[str] = None
    date_time: datetime
    max_participants: int
    status: EventStatus
    host: UserSummary
    participant_ids: List[int] = []
    participant_count: int
    coordinates: Optional[Coordinates] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True

class NoShowCreate(BaseModel):
    user_id: int

# Conversation and message schemas
class ConversationCreate(BaseModel):
    target_user_id: int

class ConversationResponse(BaseModel):
    id: int
    participants: List[UserSummary]
    status: ConversationStatus
    requester_id: int
    type: str = "DM"
    last_message: Optional[str] = ""
    last_message_time: Optional[datetime] = None

    class Config:
        from_attributes = True

class MessageCreate(BaseModel):
    message: str = Field(..., min_length=1, max_length=2000)

class ChatMessageResponse(BaseModel):
    id: int
    channel_type: str
    channel_id: int
    sender: UserSummary
    message: str
    is_system: bool = False
    timestamp: datetime

    class Config:
        from_attributes = True
