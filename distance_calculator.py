"""
Commute estimation between a candidate's home and a job site.

Distances are great-circle (Haversine) distances, not driving distances.
"""

from __future__ import annotations

import logging
import math
from dataclasses import replace
from typing import Optional, Tuple

from addresses import normalize_address
from data_models import CommuteEstimate, CommuteLookup, Coordinates, GeocodeResult
from geocoding import GeocodeCache, GeocodingProvider

LOGGER = logging.getLogger(__name__)

EARTH_RADIUS_KM = 6371.0
KM_TO_MILES = 0.621371

SHORT_COMMUTE_MILES = 20.0
LONG_COMMUTE_MILES = 35.0


def haversine_km(origin: Coordinates, destination: Coordinates) -> float:
    """Great-circle distance in kilometers between two coordinate pairs."""
    lat1 = math.radians(origin.latitude)
    lat2 = math.radians(destination.latitude)
    d_lat = lat2 - lat1
    d_lon = math.radians(destination.longitude - origin.longitude)

    a = math.sin(d_lat / 2) ** 2 + math.cos(lat1) * math.cos(lat2) * math.sin(d_lon / 2) ** 2
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS_KM * c


def classify_commute(distance_miles: float) -> Tuple[bool, str, str]:
    """
    Classify a commute by straight-line distance.

    Returns:
        Tuple of (reasonable, tier, description).
    """
    if distance_miles < SHORT_COMMUTE_MILES:
        return True, "short", "Short commute (reasonable)"
    if distance_miles < LONG_COMMUTE_MILES:
        return True, "moderate", "Moderate commute (verify with candidate)"
    return False, "long", "Long commute (may be concern)"


class DistanceCalculator:
    """Geocodes both ends of a commute and estimates its length."""

    def __init__(self, provider: GeocodingProvider, cache: Optional[GeocodeCache] = None) -> None:
        """
        Initialize the calculator.

        Args:
            provider: Geocoding backend selected at startup.
            cache: Shared geocoding cache; a private one is created if omitted.
        """
        self.provider = provider
        self.cache = cache if cache is not None else GeocodeCache()

    def geocode_address(self, address: str) -> GeocodeResult:
        """
        Resolve an address, consulting the cache first.

        On a provider miss the last two comma-separated segments (usually
        "city, state ZIP") are tried as a lower-precision fallback. Only
        successful results are cached, keyed by the full normalized address.

        Args:
            address: Free-text address.

        Returns:
            GeocodeResult; ``cached`` is set when served from the cache.
        """
        normalized = normalize_address(address)
        if not normalized:
            return GeocodeResult(success=False, provider=self.provider.name, error="Empty address")

        cached = self.cache.get(normalized)
        if cached is not None:
            LOGGER.debug("Using cached geocoding for: %s", normalized)
            return replace(cached, cached=True)

        result = self.provider.resolve(normalized)

        if not result.success and "," in normalized:
            simplified = ",".join(normalized.split(",")[-2:]).strip()
            if simplified and simplified != normalized:
                LOGGER.info("Geocoding %r failed, retrying with %r", normalized, simplified)
                result = self.provider.resolve(simplified)

        if result.success:
            self.cache.set(normalized, result)
            LOGGER.debug("Cached geocoding result for: %s", normalized)
        return result

    def lookup(self, candidate_address: Optional[str], job_site_address: Optional[str]) -> CommuteLookup:
        """
        Estimate the commute, keeping track of which side failed to geocode.

        Args:
            candidate_address: Candidate's home address.
            job_site_address: Job site address.

        Returns:
            CommuteLookup with an estimate only when both addresses resolved.
        """
        if not (candidate_address or "").strip() or not (job_site_address or "").strip():
            LOGGER.debug("Commute not computable: candidate or job site address missing")
            return CommuteLookup(reason="Both candidate and job site addresses are required")

        candidate = self.geocode_address(candidate_address)
        job_site = self.geocode_address(job_site_address)

        errors = {}
        if not candidate.success:
            errors["candidate"] = candidate.error or "Geocoding failed"
            LOGGER.warning("Could not geocode candidate address %r: %s", candidate_address, errors["candidate"])
        if not job_site.success:
            errors["job_site"] = job_site.error or "Geocoding failed"
            LOGGER.warning("Could not geocode job site address %r: %s", job_site_address, errors["job_site"])
        if errors:
            return CommuteLookup(errors=errors, reason="Failed to geocode addresses")

        distance_km = haversine_km(candidate.coordinates, job_site.coordinates)
        distance_miles = distance_km * KM_TO_MILES
        reasonable, tier, description = classify_commute(distance_miles)

        estimate = CommuteEstimate(
            candidate_address=candidate_address,
            candidate_coords=candidate.coordinates,
            job_site_address=job_site_address,
            job_site_coords=job_site.coordinates,
            distance_km=round(distance_km, 1),
            distance_miles=round(distance_miles, 1),
            commute_reasonable=reasonable,
            commute_tier=tier,
            commute_description=description,
        )
        LOGGER.info("Distance calculated: %.1f miles (%s)", estimate.distance_miles, description)
        return CommuteLookup(estimate=estimate)

    def calculate_distance(
        self, candidate_address: Optional[str], job_site_address: Optional[str]
    ) -> Optional[CommuteEstimate]:
        """Return the commute estimate, or None when it cannot be computed."""
        return self.lookup(candidate_address, job_site_address).estimate
