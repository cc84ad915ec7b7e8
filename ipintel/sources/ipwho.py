"""Tertiary source: ipwho.is."""

from __future__ import annotations

from typing import Any

from ipintel.common.coerce import safe_dict, safe_float, safe_str
from ipintel.common.constants import STATUS_SUCCESS, TERTIARY
from ipintel.common.models import Location, Network, NormalizedGeoRecord

PROVIDER_ID = TERTIARY


def _asn(connection: dict) -> str | None:
    number = safe_str(connection.get("asn"))
    if number is None:
        return None
    return f"AS{number}"


def request_params(operation: str) -> None:
    return None


def normalize(raw: Any) -> NormalizedGeoRecord:
    if not isinstance(raw, dict):
        return NormalizedGeoRecord.failure(PROVIDER_ID, "Malformed payload")
    if raw.get("success") is False:
        return NormalizedGeoRecord.failure(PROVIDER_ID, safe_str(raw.get("message")) or "Lookup failed")

    connection = safe_dict(raw.get("connection"))
    timezone = safe_dict(raw.get("timezone"))

    return NormalizedGeoRecord(
        source=PROVIDER_ID,
        status=STATUS_SUCCESS,
        ip=safe_str(raw.get("ip")),
        location=Location(
            country=safe_str(raw.get("country")),
            country_code=safe_str(raw.get("country_code")),
            region=safe_str(raw.get("region")),
            city=safe_str(raw.get("city")),
            postal_code=safe_str(raw.get("postal")),
            lat=safe_float(raw.get("latitude")),
            lon=safe_float(raw.get("longitude")),
            timezone=safe_str(timezone.get("id")),
        ),
        network=Network(
            isp=safe_str(connection.get("isp")),
            org=safe_str(connection.get("org")),
            asn=_asn(connection),
            domain=safe_str(connection.get("domain")),
        ),
    )
