"""Secondary source: ipinfo.io."""

from __future__ import annotations

from typing import Any

from ipintel.common.coerce import safe_bool, safe_float, safe_str
from ipintel.common.constants import SECONDARY, STATUS_SUCCESS
from ipintel.common.models import Location, Network, NormalizedGeoRecord, ThreatSignals

PROVIDER_ID = SECONDARY


def _split_loc(value: Any) -> tuple[float | None, float | None]:
    text = safe_str(value)
    if text is None:
        return None, None
    parts = text.split(",")
    lat = safe_float(parts[0])
    lon = safe_float(parts[1]) if len(parts) > 1 else None
    return lat, lon


def _error_message(raw: dict) -> str | None:
    error = raw.get("error")
    if isinstance(error, dict):
        return safe_str(error.get("message")) or safe_str(error.get("title")) or "Lookup failed"
    if error is not None:
        return safe_str(error) or "Lookup failed"
    if raw.get("bogon") is True:
        return "Bogon address"
    return None


def request_params(operation: str) -> None:
    return None


def normalize(raw: Any) -> NormalizedGeoRecord:
    if not isinstance(raw, dict):
        return NormalizedGeoRecord.failure(PROVIDER_ID, "Malformed payload")
    message = _error_message(raw)
    if message is not None:
        return NormalizedGeoRecord.failure(PROVIDER_ID, message)

    lat, lon = _split_loc(raw.get("loc"))
    # ipinfo reports only the ISO code, and its org is "AS<n> <name>".
    country = safe_str(raw.get("country"))
    org = safe_str(raw.get("org"))

    return NormalizedGeoRecord(
        source=PROVIDER_ID,
        status=STATUS_SUCCESS,
        ip=safe_str(raw.get("ip")),
        location=Location(
            country=country,
            country_code=country,
            region=safe_str(raw.get("region")),
            city=safe_str(raw.get("city")),
            postal_code=safe_str(raw.get("postal")),
            lat=lat,
            lon=lon,
            timezone=safe_str(raw.get("timezone")),
        ),
        network=Network(
            org=org,
            asn=org,
            hostname=safe_str(raw.get("hostname")),
        ),
        threat_signals=ThreatSignals(is_anycast=safe_bool(raw.get("anycast"))),
    )
