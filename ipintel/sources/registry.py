"""Provider dispatch: fetch one source and normalize its payload."""

from __future__ import annotations

import logging
import time
from types import ModuleType
from typing import Any
from urllib.parse import quote

from ipintel.common.config_loader import ConfigBundle
from ipintel.common.errors import SourceUnavailableError
from ipintel.common.logging import log_event
from ipintel.common.models import NormalizedGeoRecord
from ipintel.sources import ip_api, ipinfo, ipwho

ADAPTERS: dict[str, ModuleType] = {
    ip_api.PROVIDER_ID: ip_api,
    ipinfo.PROVIDER_ID: ipinfo,
    ipwho.PROVIDER_ID: ipwho,
}


def _adapter(provider_id: str) -> ModuleType:
    try:
        return ADAPTERS[provider_id]
    except KeyError:
        raise ValueError(f"Unknown provider: {provider_id}") from None


def normalize(provider_id: str, raw: Any) -> NormalizedGeoRecord:
    return _adapter(provider_id).normalize(raw)


def build_url(config: ConfigBundle, provider_id: str, ip: str) -> str:
    return config.provider(provider_id)["url_template"].format(ip=quote(ip, safe=":."))


def fetch_record(
    client,
    config: ConfigBundle,
    provider_id: str,
    ip: str,
    *,
    operation: str,
    logger: logging.Logger | None = None,
) -> NormalizedGeoRecord:
    """Fetch ``ip`` from one provider and normalize the payload.

    Raises SourceUnavailableError when the fetch itself fails. A provider that
    answers with a failure status yields a ``failure`` record instead.
    """
    adapter = _adapter(provider_id)
    started = time.monotonic()
    try:
        raw = client.get_json(
            build_url(config, provider_id, ip),
            params=adapter.request_params(operation),
            timeout=config.timeout_for(provider_id),
        )
    except Exception as exc:
        if logger is not None:
            log_event(
                logger,
                f"fetch failed: {exc}",
                operation=operation,
                source=provider_id,
                ip=ip,
                event="SOURCE_FETCH",
                status="error",
                duration_ms=int((time.monotonic() - started) * 1000),
                error_code=getattr(exc, "error_code", "UNEXPECTED_ERROR"),
            )
        if isinstance(exc, SourceUnavailableError):
            raise
        raise SourceUnavailableError(f"{provider_id} fetch failed: {exc}") from exc

    record = adapter.normalize(raw)
    if logger is not None:
        log_event(
            logger,
            "fetch complete",
            operation=operation,
            source=provider_id,
            ip=ip,
            event="SOURCE_FETCH",
            status="ok" if record.ok else "failure",
            duration_ms=int((time.monotonic() - started) * 1000),
        )
    return record
