"""
Geocoding providers and the shared geocoding cache.
"""

from __future__ import annotations

import logging
import threading
import time
from abc import ABC, abstractmethod
from collections import OrderedDict
from typing import Callable, Optional, Tuple

from geopy.exc import GeopyError
from geopy.geocoders import Nominatim, OpenCage

from data_models import Coordinates, GeocodeResult

LOGGER = logging.getLogger(__name__)

DEFAULT_USER_AGENT = "resume-matcher/1.0"


class GeocodeCache:
    """
    Bounded, thread-safe cache of successful geocoding results.

    Keys are normalized addresses compared case-insensitively. Entries are
    evicted least-recently-used once ``maxsize`` is reached and expire after
    ``ttl_seconds`` when a TTL is set.
    """

    def __init__(
        self,
        maxsize: int = 2048,
        ttl_seconds: Optional[float] = 86400.0,
        timer: Callable[[], float] = time.monotonic,
    ) -> None:
        if maxsize <= 0:
            raise ValueError("GeocodeCache maxsize must be > 0")
        self.maxsize = maxsize
        self.ttl_seconds = ttl_seconds
        self._timer = timer
        self._entries: "OrderedDict[str, Tuple[float, GeocodeResult]]" = OrderedDict()
        self._lock = threading.Lock()

    @staticmethod
    def _key(address: str) -> str:
        return address.strip().lower()

    def get(self, address: str) -> Optional[GeocodeResult]:
        key = self._key(address)
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            stored_at, result = entry
            if self.ttl_seconds is not None and self._timer() - stored_at >= self.ttl_seconds:
                del self._entries[key]
                return None
            self._entries.move_to_end(key)
            return result

    def set(self, address: str, result: GeocodeResult) -> None:
        if not result.success:
            return
        key = self._key(address)
        with self._lock:
            self._entries[key] = (self._timer(), result)
            self._entries.move_to_end(key)
            while len(self._entries) > self.maxsize:
                self._entries.popitem(last=False)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __contains__(self, address: str) -> bool:
        return self.get(address) is not None

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)


class GeocodingProvider(ABC):
    """Resolve a free-text address into coordinates."""

    name = "unknown"

    @abstractmethod
    def resolve(self, address: str) -> GeocodeResult:
        """Return a GeocodeResult; provider and transport errors become failed results."""


class _GeopyProvider(GeocodingProvider):
    """Provider backed by a geopy geocoder."""

    def __init__(self, geocoder) -> None:
        self._geocoder = geocoder

    def _geocode(self, address: str):
        return self._geocoder.geocode(address, exactly_one=True)

    def resolve(self, address: str) -> GeocodeResult:
        try:
            location = self._geocode(address)
        except GeopyError as exc:
            LOGGER.warning("%s geocoding error for %r: %s", self.name, address, exc)
            return GeocodeResult(success=False, provider=self.name, error=str(exc))

        if location is None:
            return GeocodeResult(success=False, provider=self.name, error="Address not found")

        return GeocodeResult(
            success=True,
            coordinates=Coordinates(float(location.latitude), float(location.longitude)),
            formatted_address=getattr(location, "address", None),
            provider=self.name,
        )


class OpenCageProvider(_GeopyProvider):
    """Paid OpenCage geocoder; no artificial throttling."""

    name = "OpenCage"

    def __init__(self, api_key: str, timeout: float = 10.0, geocoder=None) -> None:
        if geocoder is None:
            if not api_key:
                raise ValueError("OpenCage geocoding requires an API key")
            geocoder = OpenCage(api_key=api_key, timeout=timeout)
        super().__init__(geocoder)


class NominatimProvider(_GeopyProvider):
    """
    Free OpenStreetMap Nominatim geocoder.

    Nominatim's usage policy allows one request per second, so every network call
    is preceded by a fixed delay. The delay is per call and not coordinated
    between threads.
    """

    name = "Nominatim (OpenStreetMap)"

    def __init__(
        self,
        user_agent: str = DEFAULT_USER_AGENT,
        min_delay_seconds: float = 1.0,
        timeout: float = 10.0,
        geocoder=None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        super().__init__(geocoder or Nominatim(user_agent=user_agent, timeout=timeout))
        self.min_delay_seconds = min_delay_seconds
        self._sleep = sleep

    def _geocode(self, address: str):
        self._sleep(self.min_delay_seconds)
        return super()._geocode(address)


def build_geocoding_provider(settings) -> GeocodingProvider:
    """
    Select the geocoding backend once at startup.

    Args:
        settings: Application settings dataclass.

    Returns:
        OpenCage provider when requested (or when ``auto`` and a key is present),
        otherwise the rate-limited Nominatim provider.
    """
    choice = (settings.geocoder or "auto").lower()
    if choice == "opencage" or (choice == "auto" and settings.opencage_api_key):
        LOGGER.info("Using OpenCage geocoding API")
        return OpenCageProvider(settings.opencage_api_key, timeout=settings.geocode_timeout)

    if choice == "auto":
        LOGGER.warning(
            "OpenCage API key not found, using Nominatim (OpenStreetMap) - rate limited to 1 request/second"
        )
    else:
        LOGGER.info("Using Nominatim (OpenStreetMap) geocoding")
    return NominatimProvider(
        user_agent=settings.nominatim_user_agent,
        min_delay_seconds=settings.nominatim_delay_seconds,
        timeout=settings.geocode_timeout,
    )
