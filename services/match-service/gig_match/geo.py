import math
import re
from typing import NamedTuple

EARTH_RADIUS_KM = 6371

_NUMBER = r"([+-]?\d+\.?\d*)"
LABELLED_COORDINATES = re.compile(rf"Coordinates:\s*{_NUMBER},\s*{_NUMBER}")
BARE_COORDINATES = re.compile(rf"{_NUMBER},\s*{_NUMBER}")


class Coordinate(NamedTuple):
    lat: float
    lng: float


def haversine(lat1, lon1, lat2, lon2):
    R = EARTH_RADIUS_KM
    d_lat = math.radians(lat2 - lat1)
    d_lon = math.radians(lon2 - lon1)

    a = (
        math.sin(d_lat / 2) ** 2
        + math.cos(math.radians(lat1))
        * math.cos(math.radians(lat2))
        * math.sin(d_lon / 2) ** 2
    )

    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return R * c


def distance_km(a: Coordinate, b: Coordinate) -> float:
    return haversine(a.lat, a.lng, b.lat, b.lng)


def extract_coordinates(location: str | None) -> Coordinate | None:
    """
    Pull a lat/lng pair out of free text. An explicit "Coordinates: lat, lng"
    marker wins over a bare "lat, lng" pair. Place names are not geocoded.
    """
    if not location:
        return None

    for pattern in (LABELLED_COORDINATES, BARE_COORDINATES):
        m = pattern.search(location)
        if m:
            return Coordinate(float(m.group(1)), float(m.group(2)))

    return None


def to_number(value) -> float | None:
    """
    Read a number or numeric string. Blanks, junk and NaN come back as None.
    """
    if value is None or value == "" or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if math.isnan(number):
        return None
    return number


def to_coordinate(lat, lng) -> Coordinate | None:
    """
    Structured lat/lng fields. None when either side is missing or unreadable.
    """
    lat, lng = to_number(lat), to_number(lng)
    if lat is None or lng is None:
        return None
    return Coordinate(lat, lng)


def resolve_coordinates(lat, lng, location_text: str | None) -> Coordinate | None:
    # structured fields first, then whatever the free text carries
    return to_coordinate(lat, lng) or extract_coordinates(location_text)
