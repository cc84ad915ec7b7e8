"""Tolerant coercion of provider values; anything unusable becomes None."""

from __future__ import annotations

import math
from typing import Any


def safe_str(value: Any) -> str | None:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return str(value)
    if not isinstance(value, str):
        return None
    stripped = value.strip()
    return stripped or None


def safe_float(value: Any) -> float | None:
    if value is None or isinstance(value, bool):
        return None
    try:
        result = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(result):
        return None
    return result


def safe_bool(value: Any) -> bool | None:
    if isinstance(value, bool):
        return value
    return None


def safe_dict(value: Any) -> dict:
    if isinstance(value, dict):
        return value
    return {}
