from dataclasses import dataclass
from urllib.parse import quote
import logging
import requests
from django.core.cache import cache
from django.conf import settings

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GeocodeResult:
    latitude: float
    longitude: float
    place_name: str

    def to_dict(self) -> dict:
        return {"latitude": self.latitude, "longitude": self.longitude, "place_name": self.place_name}


class GeocodingService:
    """Forward geocoding through the Mapbox Geocoding API with server-side caching.

    Public method:
        forward(query: str, country: str = "TZ", use_cache: bool = True) -> GeocodeResult

    Caching:
        Stores results in Django cache under key `geocode:{country}:{query}`
        Timeout controlled with `settings.GEOCODING_CACHE_TIMEOUT` (seconds).
    """

    BASE_URL = "https://api.mapbox.com/geocoding/v5/mapbox.places"

    @staticmethod
    def _cache_key(query: str, country: str) -> str:
        # memcached rejects keys with whitespace
        return f"geocode:{country.upper()}:{'+'.join(query.lower().split())}"

    @staticmethod
    def forward(query: str, country: str = "TZ", use_cache: bool = True) -> GeocodeResult:
        query = (query or "").strip()
        if not query:
            raise ValueError("query must be a non-empty address")

        token = getattr(settings, "MAPBOX_ACCESS_TOKEN", None)
        if not token:
            raise RuntimeError("MAPBOX_ACCESS_TOKEN is not configured in settings")

        key = GeocodingService._cache_key(query, country)
        if use_cache:
            cached = cache.get(key)
            if cached is not None:
                logger.debug("geocode cache hit for %r = %s", query, cached)
                return GeocodeResult(**cached)

        url = f"{GeocodingService.BASE_URL}/{quote(query, safe='')}.json"
        params = {"access_token": token, "limit": 1}
        if country:
            params["country"] = country.upper()

        try:
            resp = requests.get(url, params=params, timeout=10)
            resp.raise_for_status()
            data = resp.json()
        except requests.RequestException as exc:
            logger.exception("Mapbox geocoding request failed")
            raise RuntimeError(f"Error calling Mapbox Geocoding API: {exc}") from exc

        features = data.get("features") or []
        if not features:
            logger.warning("No geocoding match for %r", query)
            raise ValueError(f"Could not geocode address: {query}")

        try:
            # Mapbox returns [lng, lat]
            lng, lat = features[0]["geometry"]["coordinates"][:2]
        except (KeyError, TypeError, ValueError) as exc:
            logger.exception("Unexpected geocoding response format")
            raise RuntimeError("Unexpected geocoding response format") from exc

        result = GeocodeResult(
            latitude=float(lat),
            longitude=float(lng),
            place_name=features[0].get("place_name") or query,
        )

        timeout = getattr(settings, "GEOCODING_CACHE_TIMEOUT", 24 * 3600)
        try:
            cache.set(key, result.to_dict(), timeout=timeout)
        except Exception:
            logger.exception("Failed to set geocode cache (non-fatal)")

        logger.debug("Geocoded %r to %s", query, result)
        return result
