import logging

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.api.deps import get_token_verifier
from app.core.errors import NotFoundError
from app.core.security import FirebaseTokenVerifier, create_access_token
from app.db.database import get_db
from app.models.schemas import AuthResponse, LoginRequest, SignupRequest
from app.services.user_service import UserService

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/auth",
    tags=["auth"]
)

@router.post("/login", response_model=AuthResponse)
def login(
    body: LoginRequest,
    db: Session = Depends(get_db),
    verifier: FirebaseTokenVerifier = Depends(get_token_verifier)
):
    """
    Exchange a Firebase ID token for a Hangoutz session token.

    Returns 404 when the phone number has no account yet, which tells the
    client to continue with sign-up.
    """
    identity = verifier.verify(body.firebase_token)

    user = UserService(db).get_by_firebase_uid(identity.uid)
    if not user:
        raise NotFoundError("No account found for this phone number")

    logger.info(f"User {user.id} logged in")
    return {"token": create_access_token(user.id), "user": user}

@router.post("/signup", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
def signup(
    body: SignupRequest,
    db: Session = Depends(get_db),
    verifier: FirebaseTokenVerifier = Depends(get_token_verifier)
):
    """
    Create an account for a verified Firebase phone sign-in.

    Users must be 18 or older and upload at least one photo. A verification
    photo may be submitted straight away.
    """
    identity = verifier.verify(body.firebase_token)

    profile = body.model_dump(exclude={"firebase_token"})
    user = UserService(db).signup(identity, profile)

    return {"token": create_access_token(user.id), "user": user}
