"""Configuration loading and validation."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any

from ipintel.common.errors import ConfigError
from ipintel.common.fs import read_yaml
from ipintel.common.http import RetryConfig, TimeoutConfig
from ipintel.common.schema import validate_providers_config, validate_service_config


@dataclass(frozen=True)
class ConfigBundle:
    providers: dict
    service: dict

    def provider(self, provider_id: str) -> dict:
        return self.providers["providers"][provider_id]

    def source_name(self, provider_id: str) -> str:
        return self.provider(provider_id)["source_name"]

    def timeout_for(self, provider_id: str) -> TimeoutConfig:
        timeout = self.provider(provider_id)["timeout"]
        return TimeoutConfig(connect=float(timeout["connect"]), read=float(timeout["read"]))

    def retry_config(self) -> RetryConfig:
        retry = self.providers["http"]["retry"]
        return RetryConfig(
            max_attempts=int(retry["max_attempts"]),
            multiplier=float(retry["multiplier"]),
            max_wait=float(retry["max_wait"]),
        )


def _deep_merge(base: Any, overlay: Any) -> Any:
    if isinstance(base, dict) and isinstance(overlay, dict):
        merged = dict(base)
        for key, value in overlay.items():
            if key in merged:
                merged[key] = _deep_merge(merged[key], value)
            else:
                merged[key] = value
        return merged
    return overlay


def _load_yaml_with_overlay(path: Path, overlay_path: Path | None) -> dict:
    if not path.exists():
        raise ConfigError(f"Missing config file: {path}")
    base = read_yaml(path)
    if overlay_path is None or not overlay_path.exists():
        return base
    overlay = read_yaml(overlay_path)
    return _deep_merge(base, overlay)


def load_all_configs(
    config_dir: Path,
    *,
    allow_unknown: bool = False,
    overlay_config_dir: Path | None = None,
) -> ConfigBundle:
    def _overlay(name: str) -> Path | None:
        return (overlay_config_dir / name) if overlay_config_dir is not None else None

    providers = validate_providers_config(
        _load_yaml_with_overlay(config_dir / "providers.yml", _overlay("providers.yml")),
        allow_unknown=allow_unknown,
    )
    service = validate_service_config(
        _load_yaml_with_overlay(config_dir / "service.yml", _overlay("service.yml")),
        allow_unknown=allow_unknown,
    )
    return ConfigBundle(providers=providers, service=service)
