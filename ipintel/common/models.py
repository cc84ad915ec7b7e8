"""Request-scoped value objects shared by the adapters and engines.

Absent values are ``None``. ``False``, ``0`` and ``0.0`` are present values and
must never be confused with absence.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from ipintel.common.constants import STATUS_FAILURE, STATUS_SUCCESS


@dataclass(frozen=True)
class Location:
    country: str | None = None
    country_code: str | None = None
    region: str | None = None
    city: str | None = None
    postal_code: str | None = None
    lat: float | None = None
    lon: float | None = None
    timezone: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "country": self.country,
            "countryCode": self.country_code,
            "region": self.region,
            "city": self.city,
            "postalCode": self.postal_code,
            "lat": self.lat,
            "lon": self.lon,
            "timezone": self.timezone,
        }


@dataclass(frozen=True)
class Network:
    isp: str | None = None
    org: str | None = None
    asn: str | None = None
    asn_name: str | None = None
    hostname: str | None = None
    domain: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "isp": self.isp,
            "org": self.org,
            "asn": self.asn,
            "asnName": self.asn_name,
            "hostname": self.hostname,
            "domain": self.domain,
        }


@dataclass(frozen=True)
class ThreatSignals:
    is_proxy_or_vpn: bool | None = None
    is_hosting: bool | None = None
    is_mobile: bool | None = None
    is_anycast: bool | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "isProxyOrVpn": self.is_proxy_or_vpn,
            "isHosting": self.is_hosting,
            "isMobile": self.is_mobile,
            "isAnycast": self.is_anycast,
        }


@dataclass(frozen=True)
class NormalizedGeoRecord:
    source: str
    status: str
    ip: str | None = None
    location: Location = field(default_factory=Location)
    network: Network = field(default_factory=Network)
    threat_signals: ThreatSignals = field(default_factory=ThreatSignals)
    message: str | None = None

    @property
    def ok(self) -> bool:
        return self.status == STATUS_SUCCESS

    @classmethod
    def failure(cls, source: str, message: str | None = None) -> "NormalizedGeoRecord":
        return cls(source=source, status=STATUS_FAILURE, message=message)

    def to_dict(self) -> dict[str, Any]:
        return {
            "source": self.source,
            "status": self.status,
            "message": self.message,
            "ip": self.ip,
            "location": self.location.to_dict(),
            "network": self.network.to_dict(),
            "threatSignals": self.threat_signals.to_dict(),
        }


@dataclass(frozen=True)
class Confidence:
    sources_queried: int
    sources_responded: int

    def to_dict(self) -> dict[str, int]:
        return {
            "sourcesQueried": self.sources_queried,
            "sourcesResponded": self.sources_responded,
        }


@dataclass(frozen=True)
class AggregatedIntelligence:
    ip: str | None
    location: Location
    network: Network
    threat_signals: ThreatSignals
    confidence: Confidence
    sources: tuple[str, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return {
            "ip": self.ip,
            "location": self.location.to_dict(),
            "network": self.network.to_dict(),
            "threatSignals": self.threat_signals.to_dict(),
            "confidence": self.confidence.to_dict(),
            "sources": list(self.sources),
        }


@dataclass(frozen=True)
class RiskAssessment:
    score: int
    level: str
    factors: tuple[str, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return {"score": self.score, "level": self.level, "factors": list(self.factors)}


@dataclass(frozen=True)
class BatchItemResult:
    ip: str
    record: NormalizedGeoRecord | None = None
    error: str | None = None

    def to_dict(self) -> dict[str, Any]:
        if self.error is not None or self.record is None:
            return {"ip": self.ip, "error": self.error or "Lookup failed"}
        record = self.record
        return {
            "ip": record.ip if record.ip is not None else self.ip,
            "country": record.location.country,
            "countryCode": record.location.country_code,
            "city": record.location.city,
            "lat": record.location.lat,
            "lon": record.location.lon,
            "isp": record.network.isp,
            "org": record.network.org,
            "asn": record.network.asn,
            "isProxy": record.threat_signals.is_proxy_or_vpn,
            "isHosting": record.threat_signals.is_hosting,
        }


@dataclass(frozen=True)
class BatchResult:
    results: tuple[BatchItemResult, ...]
    invalid_ips: tuple[str, ...]
    requested: int
    valid: int
    invalid: int

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"results": [item.to_dict() for item in self.results]}
        # Omitted rather than empty when every input parsed.
        if self.invalid_ips:
            payload["invalidIPs"] = list(self.invalid_ips)
        payload["count"] = {
            "requested": self.requested,
            "valid": self.valid,
            "invalid": self.invalid,
        }
        return payload


@dataclass(frozen=True)
class LocationSummary:
    ip: str | None
    country: str | None
    city: str | None
    lat: float
    lon: float

    def to_dict(self) -> dict[str, Any]:
        return {
            "ip": self.ip,
            "country": self.country,
            "city": self.city,
            "lat": self.lat,
            "lon": self.lon,
        }


@dataclass(frozen=True)
class DistanceResult:
    origin: LocationSummary
    destination: LocationSummary
    distance_km: float
    distance_miles: float
    same_country: bool
    same_city: bool

    def to_dict(self) -> dict[str, Any]:
        return {
            "ip1": self.origin.to_dict(),
            "ip2": self.destination.to_dict(),
            "distance": {"km": self.distance_km, "miles": self.distance_miles},
            "sameCountry": self.same_country,
            "sameCity": self.same_city,
        }
