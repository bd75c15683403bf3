import logging
import re
import time
from dataclasses import dataclass
from datetime import timedelta
from typing import Dict, Optional

import httpx
from jose import JWTError, jwt

from app.core.config import settings
from app.core.errors import AuthenticationError, UpstreamError
from app.core.timeutils import utcnow

logger = logging.getLogger(__name__)

GOOGLE_CERTS_URL = (
    "https://www.googleapis.com/robot/v1/metadata/x509/securetoken@system.gserviceaccount.com"
)


def create_access_token(user_id: int, expires_delta: Optional[timedelta] = None) -> str:
    """Issue a signed session token for the given user id."""
    expire = utcnow() + (expires_delta or timedelta(days=settings.jwt_expire_days))
    to_encode = {"sub": str(user_id), "exp": expire}
    return jwt.encode(to_encode, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def decode_access_token(token: str) -> int:
    """
    Validate a session token and return the user id it was issued for.

    Raises:
        AuthenticationError: If the token is malformed, expired or has no subject
    """
    try:
        payload = jwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_algorithm])
    except JWTError as e:
        raise AuthenticationError(f"Invalid session token: {str(e)}")

    subject = payload.get("sub")
    if subject is None or not str(subject).isdigit():
        raise AuthenticationError("Invalid session token: missing subject")
    return int(subject)


@dataclass
class FirebaseIdentity:
    """The parts of a verified Firebase ID token the service relies on."""
    uid: str
    phone: Optional[str] = None


class FirebaseTokenVerifier:
    """
    Verifies Firebase ID tokens issued by phone sign-in.

    Tokens are RS256 JWTs signed by Google; the public certificates are
    fetched from Google and cached for as long as the response allows.
    """

    def __init__(self, project_id: Optional[str] = None, certs_url: str = GOOGLE_CERTS_URL):
        self.project_id = project_id if project_id is not None else settings.firebase_project_id
        self.certs_url = certs_url
        self._certs: Dict[str, str] = {}
        self._certs_expire_at = 0.0

    def _fetch_certs(self) -> Dict[str, str]:
        if self._certs and time.time() < self._certs_expire_at:
            return self._certs

        try:
            response = httpx.get(self.certs_url, timeout=10.0)
            response.raise_for_status()
        except httpx.HTTPError as e:
            logger.error(f"Failed to fetch Firebase signing certificates: {str(e)}")
            raise UpstreamError("Could not reach Firebase to verify the sign-in token")

        max_age = 3600
        match = re.search(r"max-age=(\d+)", response.headers.get("cache-control", ""))
        if match:
            max_age = int(match.group(1))

        self._certs = response.json()
        self._certs_expire_at = time.time() + max_age
        return self._certs

    def verify(self, id_token: str) -> FirebaseIdentity:
        """
        Verify an ID token and return the Firebase identity it carries.

        Raises:
            AuthenticationError: If the token cannot be verified
        """
        if not self.project_id:
            raise AuthenticationError("Firebase authentication is not configured")

        try:
            header = jwt.get_unverified_header(id_token)
        except JWTError:
            raise AuthenticationError("Malformed Firebase token")

        cert = self._fetch_certs().get(header.get("kid"))
        if cert is None:
            raise AuthenticationError("Firebase token signed with an unknown key")

        try:
            claims = jwt.decode(
                id_token,
                cert,
                algorithms=["RS256"],
                audience=self.project_id,
                issuer=f"https://securetoken.google.com/{self.project_id}",
            )
        except JWTError as e:
            logger.warning(f"Firebase token verification failed: {str(e)}")
            raise AuthenticationError("Invalid Firebase token")

        uid = claims.get("sub")
        if not uid:
            raise AuthenticationError("Firebase token has no subject")
        return FirebaseIdentity(uid=uid, phone=claims.get("phone_number"))


firebase_verifier = FirebaseTokenVerifier()
