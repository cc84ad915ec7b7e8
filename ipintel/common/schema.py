"""Minimal strict schemas for YAML config validation."""

from __future__ import annotations

from ipintel.common.constants import BATCH_MAX_IPS, SOURCE_PRIORITY
from ipintel.common.errors import ConfigError


def _assert_required_keys(obj: dict, required: set[str], ctx: str) -> None:
    if not isinstance(obj, dict):
        raise ConfigError(f"Expected a mapping for {ctx}")
    missing = required - set(obj)
    if missing:
        missing_str = ", ".join(sorted(missing))
        raise ConfigError(f"Missing keys in {ctx}: {missing_str}")


def _assert_no_unknown_keys(obj: dict, known: set[str], ctx: str, allow_unknown: bool) -> None:
    if allow_unknown:
        return
    unknown = set(obj) - known
    if unknown:
        unknown_str = ", ".join(sorted(unknown))
        raise ConfigError(f"Unknown keys in {ctx}: {unknown_str}")


def validate_providers_config(cfg: dict, *, allow_unknown: bool = False) -> dict:
    _assert_required_keys(cfg, {"providers", "http"}, "providers config")
    _assert_no_unknown_keys(cfg, {"providers", "http"}, "providers config", allow_unknown)

    providers = cfg["providers"]
    _assert_required_keys(providers, set(SOURCE_PRIORITY), "providers")
    _assert_no_unknown_keys(providers, set(SOURCE_PRIORITY), "providers", allow_unknown)

    for provider_id in SOURCE_PRIORITY:
        entry = providers[provider_id]
        ctx = f"providers.{provider_id}"
        _assert_required_keys(entry, {"source_name", "url_template", "timeout"}, ctx)
        _assert_required_keys(entry["timeout"], {"connect", "read"}, f"{ctx}.timeout")
        if "{ip}" not in entry["url_template"]:
            raise ConfigError(f"{ctx}.url_template must contain an {{ip}} placeholder")

    _assert_required_keys(cfg["http"], {"retry"}, "http")
    _assert_required_keys(cfg["http"]["retry"], {"max_attempts", "multiplier", "max_wait"}, "http.retry")
    if int(cfg["http"]["retry"]["max_attempts"]) < 1:
        raise ConfigError("http.retry.max_attempts must be at least 1")

    return cfg


def validate_service_config(cfg: dict, *, allow_unknown: bool = False) -> dict:
    top_required = {"agent", "batch", "operations", "logging"}
    _assert_required_keys(cfg, top_required, "service config")
    _assert_no_unknown_keys(cfg, top_required, "service config", allow_unknown)

    _assert_required_keys(cfg["agent"], {"name", "version", "description"}, "agent")
    _assert_required_keys(cfg["batch"], {"max_ips", "max_workers"}, "batch")
    _assert_required_keys(cfg["logging"], {"level"}, "logging")

    max_ips = int(cfg["batch"]["max_ips"])
    if not 1 <= max_ips <= BATCH_MAX_IPS:
        raise ConfigError(f"batch.max_ips must be between 1 and {BATCH_MAX_IPS}")

    for name, entry in cfg["operations"].items():
        _assert_required_keys(entry, {"price", "description"}, f"operations.{name}")

    return cfg
