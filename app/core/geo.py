import logging
import math
from typing import Optional

from app.core.config import settings
from app.core.errors import GeofenceError, ValidationError

logger = logging.getLogger(__name__)

EARTH_RADIUS_KM = 6371.0


def haversine_distance(lat1: float, lng1: float, lat2: float, lng2: float) -> float:
    """
    Great-circle distance between two points in kilometres.

    Args:
        lat1, lng1: First point in decimal degrees
        lat2, lng2: Second point in decimal degrees

    Returns:
        Distance in kilometres
    """
    d_lat = math.radians(lat2 - lat1)
    d_lng = math.radians(lng2 - lng1)
    a = (
        math.sin(d_lat / 2) ** 2
        + math.cos(math.radians(lat1)) * math.cos(math.radians(lat2)) * math.sin(d_lng / 2) ** 2
    )
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS_KM * c


def validate_coordinates(lat: float, lng: float) -> None:
    if not -90.0 <= lat <= 90.0:
        raise ValidationError(f"Latitude must be between -90 and 90, got {lat}")
    if not -180.0 <= lng <= 180.0:
        raise ValidationError(f"Longitude must be between -180 and 180, got {lng}")


def ensure_within_city(
    lat: float,
    lng: float,
    center_lat: Optional[float] = None,
    center_lng: Optional[float] = None,
    max_distance_km: Optional[float] = None,
    city_name: Optional[str] = None,
) -> float:
    """
    Reject coordinates farther than the configured radius from the city centre.

    Returns the distance in kilometres when the point is inside the geofence.

    Raises:
        GeofenceError: If the point lies outside the radius
    """
    center_lat = settings.city_center_lat if center_lat is None else center_lat
    center_lng = settings.city_center_lng if center_lng is None else center_lng
    max_distance_km = settings.max_city_distance_km if max_distance_km is None else max_distance_km
    city_name = city_name or settings.city_name

    validate_coordinates(lat, lng)
    distance = haversine_distance(lat, lng, center_lat, center_lng)
    if distance > max_distance_km:
        logger.info(f"Geofence rejected ({lat}, {lng}): {distance:.1f}km from {city_name}")
        raise GeofenceError(
            f"Location Restricted: Hangoutz is only available in {city_name} "
            f"({max_distance_km:g}km). You are {distance:.1f}km away.",
            distance_km=distance,
        )
    return distance
