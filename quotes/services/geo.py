import math
from dataclasses import dataclass
from typing import Mapping, Optional

EARTH_RADIUS_KM = 6371.0
DEFAULT_AVERAGE_SPEED_KMH = 30.0
MIN_TRAVEL_MINUTES = 5


@dataclass(frozen=True)
class Location:
    latitude: float
    longitude: float
    address: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Mapping) -> "Location":
        lat = data.get("latitude", data.get("lat"))
        lng = data.get("longitude", data.get("lng"))
        if lat is None or lng is None:
            raise ValueError("latitude and longitude are required")
        return cls(latitude=float(lat), longitude=float(lng), address=data.get("address") or None)


def distance_km(origin: Location, destination: Location) -> float:
    """Great-circle (Haversine) distance in kilometres, rounded to 2 decimals.

    No validation is done here; out-of-range or non-finite coordinates give a
    meaningless (possibly NaN) result. Use `validation.quote_fare` at the edge.
    """
    d_lat = math.radians(destination.latitude - origin.latitude)
    d_lng = math.radians(destination.longitude - origin.longitude)

    h = (
        math.sin(d_lat / 2) ** 2
        + math.cos(math.radians(origin.latitude))
        * math.cos(math.radians(destination.latitude))
        * math.sin(d_lng / 2) ** 2
    )
    c = 2 * math.atan2(math.sqrt(h), math.sqrt(1 - h))
    return round(EARTH_RADIUS_KM * c, 2)


def travel_time_minutes(distance: float, average_speed_kmh: float = DEFAULT_AVERAGE_SPEED_KMH) -> int:
    # 5 minute floor covers pickup/loading on very short trips
    minutes = math.ceil(distance / average_speed_kmh * 60)
    return max(MIN_TRAVEL_MINUTES, minutes)


def is_valid_location(location: Location) -> bool:
    lat, lng = location.latitude, location.longitude
    if not isinstance(lat, (int, float)) or not isinstance(lng, (int, float)):
        return False
    if not (math.isfinite(lat) and math.isfinite(lng)):
        return False
    return -90 <= lat <= 90 and -180 <= lng <= 180
