"""Primary source: ip-api.com."""

from __future__ import annotations

from typing import Any

from ipintel.common.coerce import safe_bool, safe_float, safe_str
from ipintel.common.constants import PRIMARY, STATUS_SUCCESS
from ipintel.common.models import Location, Network, NormalizedGeoRecord, ThreatSignals

PROVIDER_ID = PRIMARY

# ip-api only returns the fields it is asked for.
FIELD_SETS = {
    "overview": ("query",),
    "lookup": (
        "status", "message", "country", "countryCode", "region", "regionName", "city", "zip",
        "lat", "lon", "timezone", "isp", "org", "as", "asname", "query",
    ),
    "full": (
        "status", "message", "country", "countryCode", "region", "regionName", "city", "zip",
        "lat", "lon", "timezone", "isp", "org", "as", "asname", "reverse", "mobile", "proxy",
        "hosting", "query",
    ),
    "batch": (
        "status", "message", "country", "countryCode", "city", "lat", "lon", "isp", "org", "as",
        "proxy", "hosting", "query",
    ),
    "threat": (
        "status", "message", "country", "countryCode", "isp", "org", "as", "asname", "reverse",
        "mobile", "proxy", "hosting", "query",
    ),
    "distance": ("status", "message", "country", "city", "lat", "lon", "query"),
}


def request_params(operation: str) -> dict[str, str]:
    fields = FIELD_SETS.get(operation, FIELD_SETS["full"])
    return {"fields": ",".join(fields)}


def normalize(raw: Any) -> NormalizedGeoRecord:
    if not isinstance(raw, dict):
        return NormalizedGeoRecord.failure(PROVIDER_ID, "Malformed payload")
    if raw.get("status") != STATUS_SUCCESS:
        return NormalizedGeoRecord.failure(PROVIDER_ID, safe_str(raw.get("message")) or "Lookup failed")

    return NormalizedGeoRecord(
        source=PROVIDER_ID,
        status=STATUS_SUCCESS,
        ip=safe_str(raw.get("query")),
        location=Location(
            country=safe_str(raw.get("country")),
            country_code=safe_str(raw.get("countryCode")),
            region=safe_str(raw.get("regionName")),
            city=safe_str(raw.get("city")),
            postal_code=safe_str(raw.get("zip")),
            lat=safe_float(raw.get("lat")),
            lon=safe_float(raw.get("lon")),
            timezone=safe_str(raw.get("timezone")),
        ),
        network=Network(
            isp=safe_str(raw.get("isp")),
            org=safe_str(raw.get("org")),
            asn=safe_str(raw.get("as")),
            asn_name=safe_str(raw.get("asname")),
            hostname=safe_str(raw.get("reverse")),
        ),
        threat_signals=ThreatSignals(
            is_proxy_or_vpn=safe_bool(raw.get("proxy")),
            is_hosting=safe_bool(raw.get("hosting")),
            is_mobile=safe_bool(raw.get("mobile")),
        ),
    )
