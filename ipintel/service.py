"""Public operations, each returning an ``{"output": ...}`` envelope."""

from __future__ import annotations

import logging
import time
from typing import Any, Callable

from ipintel.common.coerce import safe_dict, safe_str
from ipintel.common.config_loader import ConfigBundle
from ipintel.common.constants import (
    AGENT_NAME,
    BATCH_MIN_IPS,
    PRIMARY,
    SOURCE_PRIORITY,
)
from ipintel.common.errors import (
    IntelError,
    InvalidInputError,
    LookupFailedError,
    SourceUnavailableError,
)
from ipintel.common.http import HttpClient
from ipintel.common.ip_utils import is_valid_ip
from ipintel.common.logging import log_event
from ipintel.common.models import NormalizedGeoRecord
from ipintel.common.settle import settle_all
from ipintel.common.time_utils import utc_timestamp_iso
from ipintel.engine.batch import process_batch
from ipintel.engine.distance import build_distance_result
from ipintel.engine.reconcile import reconcile
from ipintel.engine.risk import score_risk
from ipintel.sources import ip_api
from ipintel.sources.registry import build_url, fetch_record

INVALID_IP_MESSAGE = "Invalid IP address format"
SOURCE_UNAVAILABLE_MESSAGE = "Source unavailable"
DISTANCE_FAILED_MESSAGE = "One or both IP lookups failed"


class IntelService:
    def __init__(
        self,
        config: ConfigBundle,
        *,
        client=None,
        logger: logging.Logger | None = None,
    ) -> None:
        self.config = config
        self.client = client or HttpClient(retry=config.retry_config())
        self.logger = logger or logging.getLogger("ipintel")

    def close(self) -> None:
        close = getattr(self.client, "close", None)
        if close is not None:
            close()

    def __enter__(self) -> "IntelService":
        return self

    def __exit__(self, *_exc_info) -> None:
        self.close()

    def _run(self, operation: str, handler: Callable[[], dict], **echo: Any) -> dict:
        started = time.monotonic()
        log_event(self.logger, "operation start", operation=operation, event="OPERATION_START", status="ok")
        try:
            output = handler()
            status = "ok"
            error_code = None
        except IntelError as exc:
            output = {"error": self._error_message(exc), **echo}
            status = "error"
            error_code = exc.error_code
        except Exception as exc:  # noqa: BLE001
            output = {"error": f"Unexpected error: {exc}", **echo}
            status = "error"
            error_code = "UNEXPECTED_ERROR"

        log_event(
            self.logger,
            "operation end",
            operation=operation,
            event="OPERATION_END",
            status=status,
            error_code=error_code,
            duration_ms=int((time.monotonic() - started) * 1000),
        )
        return {"output": output}

    @staticmethod
    def _error_message(exc: IntelError) -> str:
        if isinstance(exc, SourceUnavailableError):
            return SOURCE_UNAVAILABLE_MESSAGE
        return str(exc)

    def _require_valid(self, operation: str, *ips: Any) -> None:
        for ip in ips:
            if not is_valid_ip(ip):
                log_event(
                    self.logger,
                    "invalid ip rejected",
                    operation=operation,
                    ip=str(ip),
                    event="INVALID_INPUT",
                    status="error",
                    error_code=InvalidInputError.error_code,
                )
                raise InvalidInputError(INVALID_IP_MESSAGE)

    def _fetch(self, provider_id: str, ip: str, operation: str) -> NormalizedGeoRecord:
        return fetch_record(
            self.client,
            self.config,
            provider_id,
            ip,
            operation=operation,
            logger=self.logger,
        )

    def _fetch_primary(self, ip: str, operation: str) -> NormalizedGeoRecord:
        record = self._fetch(PRIMARY, ip, operation)
        if not record.ok:
            raise LookupFailedError(record.message or "Lookup failed")
        return record

    def _source_name(self, provider_id: str = PRIMARY) -> str:
        return self.config.source_name(provider_id)

    def overview(self) -> dict:
        def handler() -> dict:
            try:
                raw = self.client.get_json(
                    build_url(self.config, PRIMARY, ""),
                    params=ip_api.request_params("overview"),
                    timeout=self.config.timeout_for(PRIMARY),
                )
                sample_ip = safe_str(safe_dict(raw).get("query"))
            except SourceUnavailableError:
                sample_ip = None

            agent = self.config.service["agent"]
            return {
                "agent": agent.get("name", AGENT_NAME),
                "version": agent["version"],
                "description": agent["description"],
                "endpoints": {
                    name: {"price": entry["price"], "description": entry["description"]}
                    for name, entry in self.config.service["operations"].items()
                },
                "dataSources": [self._source_name(p) for p in SOURCE_PRIORITY],
                "sampleIP": sample_ip,
                "fetchedAt": utc_timestamp_iso(),
            }

        return self._run("overview", handler)

    def lookup(self, ip: str) -> dict:
        def handler() -> dict:
            self._require_valid("lookup", ip)
            record = self._fetch_primary(ip, "lookup")
            network = record.network
            return {
                "ip": record.ip,
                "location": record.location.to_dict(),
                "network": {
                    "isp": network.isp,
                    "org": network.org,
                    "asn": network.asn,
                    "asnName": network.asn_name,
                },
                "source": self._source_name(),
                "fetchedAt": utc_timestamp_iso(),
            }

        return self._run("lookup", handler, ip=ip)

    def full(self, ip: str) -> dict:
        def handler() -> dict:
            self._require_valid("full", ip)
            outcomes = settle_all(
                [lambda p=p: self._fetch(p, ip, "full") for p in SOURCE_PRIORITY],
                thread_name_prefix="full",
            )
            merged = reconcile([outcome.value if outcome.ok else None for outcome in outcomes], ip=ip)
            network = merged.network
            signals = merged.threat_signals
            return {
                "ip": merged.ip,
                "location": merged.location.to_dict(),
                "network": {
                    "isp": network.isp,
                    "org": network.org,
                    "asn": network.asn,
                    "hostname": network.hostname,
                    "domain": network.domain,
                },
                "threat": {
                    "isProxy": signals.is_proxy_or_vpn,
                    # No provider reports VPN separately.
                    "isVPN": signals.is_proxy_or_vpn,
                    "isHosting": signals.is_hosting,
                    "isMobile": signals.is_mobile,
                    "isAnycast": signals.is_anycast,
                },
                "confidence": merged.confidence.to_dict(),
                "sources": [self._source_name(p) for p in SOURCE_PRIORITY],
                "respondedSources": [self._source_name(p) for p in merged.sources],
                "fetchedAt": utc_timestamp_iso(),
            }

        return self._run("full", handler, ip=ip)

    def batch(self, ips: list[str]) -> dict:
        def handler() -> dict:
            max_ips = int(self.config.service["batch"]["max_ips"])
            if not isinstance(ips, (list, tuple)) or not BATCH_MIN_IPS <= len(ips) <= max_ips:
                raise InvalidInputError(f"Batch must contain between {BATCH_MIN_IPS} and {max_ips} IPs")

            result = process_batch(
                ips,
                lambda ip: self._fetch(PRIMARY, ip, "batch"),
                max_workers=int(self.config.service["batch"]["max_workers"]),
                logger=self.logger,
            )
            return {
                **result.to_dict(),
                "source": self._source_name(),
                "fetchedAt": utc_timestamp_iso(),
            }

        return self._run("batch", handler, ips=ips)

    def threat(self, ip: str) -> dict:
        def handler() -> dict:
            self._require_valid("threat", ip)
            record = self._fetch_primary(ip, "threat")
            signals = record.threat_signals
            network = record.network
            has_reverse_dns = network.hostname is not None
            risk = score_risk(signals, has_reverse_dns=has_reverse_dns)
            return {
                "ip": record.ip,
                "threat": {
                    "isProxy": signals.is_proxy_or_vpn,
                    "isVPN": signals.is_proxy_or_vpn,
                    "isHosting": signals.is_hosting,
                    "isMobile": signals.is_mobile,
                    "hasReverseDNS": has_reverse_dns,
                    "reverseDNS": network.hostname,
                },
                "risk": risk.to_dict(),
                "network": {
                    "isp": network.isp,
                    "org": network.org,
                    "asn": network.asn,
                    "asnName": network.asn_name,
                },
                "source": self._source_name(),
                "fetchedAt": utc_timestamp_iso(),
            }

        return self._run("threat", handler, ip=ip)

    def distance(self, ip1: str, ip2: str) -> dict:
        def handler() -> dict:
            self._require_valid("distance", ip1, ip2)
            first, second = settle_all(
                [
                    lambda: self._fetch(PRIMARY, ip1, "distance"),
                    lambda: self._fetch(PRIMARY, ip2, "distance"),
                ],
                thread_name_prefix="distance",
            )
            if not (first.ok and second.ok):
                raise LookupFailedError(DISTANCE_FAILED_MESSAGE)
            try:
                result = build_distance_result(first.value, second.value)
            except LookupFailedError as exc:
                raise LookupFailedError(DISTANCE_FAILED_MESSAGE) from exc
            return {
                **result.to_dict(),
                "source": self._source_name(),
                "fetchedAt": utc_timestamp_iso(),
            }

        return self._run("distance", handler, ip1=ip1, ip2=ip2)
