import os
from typing import List

from dotenv import load_dotenv

# Load environment variables
load_dotenv()


def _get_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


class Settings:
    """
    Runtime configuration read from the environment (and a local .env file).

    A single instance is created at import time; tests override individual
    attributes with monkeypatch rather than re-reading the environment.
    """

    def __init__(self):
        self.database_url: str = os.getenv("DATABASE_URL", "sqlite:///./hangoutz.db")
        self.log_level: str = os.getenv("LOG_LEVEL", "INFO").upper()
        self.cors_origins: List[str] = [
            origin.strip() for origin in os.getenv("CORS_ORIGINS", "*").split(",") if origin.strip()
        ]

        # Session tokens
        self.jwt_secret: str = os.getenv("JWT_SECRET", "change-me-in-production")
        self.jwt_algorithm: str = "HS256"
        self.jwt_expire_days: int = int(os.getenv("JWT_EXPIRE_DAYS", "7"))

        # Firebase phone auth
        self.firebase_project_id: str = os.getenv("FIREBASE_PROJECT_ID", "")

        # Geofence (defaults to Raipur)
        self.city_name: str = os.getenv("CITY_NAME", "Raipur")
        self.city_center_lat: float = float(os.getenv("CITY_CENTER_LAT", "21.2514"))
        self.city_center_lng: float = float(os.getenv("CITY_CENTER_LNG", "81.6296"))
        self.max_city_distance_km: float = float(os.getenv("MAX_CITY_DISTANCE_KM", "30"))
        # Local day boundary for "today" listings (IST is UTC+5:30)
        self.city_utc_offset_minutes: int = int(os.getenv("CITY_UTC_OFFSET_MINUTES", "330"))

        # Events leave HAPPENING for COMPLETED this long after they start
        self.event_duration_hours: float = float(os.getenv("EVENT_DURATION_HOURS", "3"))

        # Trust and verification
        self.missed_event_penalty: int = int(os.getenv("MISSED_EVENT_PENALTY", "20"))
        self.auto_approve_verification: bool = _get_bool("AUTO_APPROVE_VERIFICATION", True)


settings = Settings()
