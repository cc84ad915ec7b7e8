"""Great-circle distance between two resolved locations."""

from __future__ import annotations

import math

from ipintel.common.constants import EARTH_RADIUS_KM, KM_TO_MILES
from ipintel.common.errors import LookupFailedError
from ipintel.common.models import DistanceResult, LocationSummary, NormalizedGeoRecord


def round_half_up(value: float, places: int = 2) -> float:
    scale = 10**places
    return math.floor(value * scale + 0.5) / scale


def haversine_km(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    d_lat = math.radians(lat2 - lat1)
    d_lon = math.radians(lon2 - lon1)
    a = (
        math.sin(d_lat / 2) ** 2
        + math.cos(math.radians(lat1)) * math.cos(math.radians(lat2)) * math.sin(d_lon / 2) ** 2
    )
    # Float error can push a just past 1 for antipodal or out-of-range points.
    a = min(1.0, max(0.0, a))
    return EARTH_RADIUS_KM * 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))


def distance(lat1: float, lon1: float, lat2: float, lon2: float) -> tuple[float, float]:
    """Return ``(km, miles)`` rounded to two decimals. Inputs are not range-checked."""
    km = haversine_km(lat1, lon1, lat2, lon2)
    return round_half_up(km), round_half_up(km * KM_TO_MILES)


def _summary(record: NormalizedGeoRecord) -> LocationSummary:
    if not record.ok or record.location.lat is None or record.location.lon is None:
        raise LookupFailedError(f"No coordinates from {record.source}")
    return LocationSummary(
        ip=record.ip,
        country=record.location.country,
        city=record.location.city,
        lat=record.location.lat,
        lon=record.location.lon,
    )


def build_distance_result(first: NormalizedGeoRecord, second: NormalizedGeoRecord) -> DistanceResult:
    origin = _summary(first)
    destination = _summary(second)
    km, miles = distance(origin.lat, origin.lon, destination.lat, destination.lon)
    return DistanceResult(
        origin=origin,
        destination=destination,
        distance_km=km,
        distance_miles=miles,
        same_country=origin.country == destination.country,
        same_city=origin.city == destination.city,
    )
