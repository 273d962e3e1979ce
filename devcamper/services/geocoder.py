"""
Geocoding client.

Converts postal codes and street addresses to coordinates using
OpenStreetMap's Nominatim search API, with retry on network errors.
Every call goes to the service; nothing is kept between requests.
"""

import logging
import time
from dataclasses import dataclass
from typing import List, Optional

import requests

from devcamper.config import Settings, get_settings

logger = logging.getLogger(__name__)

MAX_RETRIES = 3
RETRY_DELAY = 1.1


class GeocoderError(Exception):
    """Raised when a query cannot be resolved to a location."""


@dataclass(frozen=True)
class GeoLocation:
    latitude: float
    longitude: float
    formatted_address: Optional[str] = None
    street: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    zipcode: Optional[str] = None
    country: Optional[str] = None

    def as_fields(self) -> dict:
        """Column values for a Bootcamp row."""
        return {
            "latitude": self.latitude,
            "longitude": self.longitude,
            "formatted_address": self.formatted_address,
            "street": self.street,
            "city": self.city,
            "state": self.state,
            "zipcode": self.zipcode,
            "country": self.country,
        }


def parse_nominatim_result(item: dict) -> GeoLocation:
    """Build a GeoLocation from one entry of a Nominatim ``format=json`` response."""
    address = item.get("address") or {}
    street = " ".join(p for p in (address.get("house_number"), address.get("road")) if p) or None
    city = address.get("city") or address.get("town") or address.get("village") or address.get("hamlet")
    country_code = address.get("country_code")
    return GeoLocation(
        latitude=float(item["lat"]),
        longitude=float(item["lon"]),
        formatted_address=item.get("display_name"),
        street=street,
        city=city,
        state=address.get("state"),
        zipcode=address.get("postcode"),
        country=country_code.upper() if country_code else address.get("country"),
    )


class NominatimGeocoder:
    """
    Forward geocoder backed by Nominatim.

    Holds no state beyond its connection settings, so one instance can
    serve concurrent requests.
    """

    def __init__(self, base_url: str, user_agent: str, timeout: float = 10.0, retry_delay: float = RETRY_DELAY):
        self.search_url = f"{base_url.rstrip('/')}/search"
        self.user_agent = user_agent
        self.timeout = timeout
        self.retry_delay = retry_delay

    @classmethod
    def from_settings(cls, settings: Settings) -> "NominatimGeocoder":
        return cls(
            base_url=settings.geocoder_base_url,
            user_agent=settings.geocoder_user_agent,
            timeout=settings.geocoder_timeout,
        )

    def geocode(self, query: str) -> List[GeoLocation]:
        params = {"q": query, "format": "json", "addressdetails": 1, "limit": 1}
        headers = {"User-Agent": self.user_agent}

        last_error = None
        for attempt in range(1, MAX_RETRIES + 1):
            try:
                response = requests.get(self.search_url, params=params, headers=headers, timeout=self.timeout)
            except requests.RequestException as e:
                last_error = f"network error: {e}"
            else:
                if response.status_code == 200:
                    results = [parse_nominatim_result(item) for item in response.json()]
                    if not results:
                        raise GeocoderError(f"No location found for '{query}'")
                    logger.info(f"Geocoded '{query}' to ({results[0].latitude}, {results[0].longitude})")
                    return results
                last_error = f"HTTP {response.status_code}"

            if attempt < MAX_RETRIES:
                wait_time = self.retry_delay * attempt
                logger.warning(
                    f"Geocoding '{query}' failed ({last_error}). Retrying in {wait_time}s... "
                    f"(Attempt {attempt}/{MAX_RETRIES})"
                )
                time.sleep(wait_time)

        raise GeocoderError(f"Failed to geocode '{query}' after {MAX_RETRIES} attempts ({last_error})")


# Singleton instance
_geocoder: Optional[NominatimGeocoder] = None


def get_geocoder() -> NominatimGeocoder:
    """Get or create the singleton geocoder."""
    global _geocoder
    if _geocoder is None:
        _geocoder = NominatimGeocoder.from_settings(get_settings())
    return _geocoder
