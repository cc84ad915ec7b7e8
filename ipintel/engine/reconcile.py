"""Merge partial provider records with fixed source precedence."""

from __future__ import annotations

from dataclasses import fields
from typing import Any, Iterable, Sequence, TypeVar

from ipintel.common.models import (
    AggregatedIntelligence,
    Confidence,
    Location,
    Network,
    NormalizedGeoRecord,
    ThreatSignals,
)

T = TypeVar("T")


def first_present(values: Iterable[Any]) -> Any:
    """Return the first value that is not None; False and 0 count as present."""
    for value in values:
        if value is not None:
            return value
    return None


def responding(records: Sequence[NormalizedGeoRecord | None]) -> list[NormalizedGeoRecord]:
    return [record for record in records if record is not None and record.ok]


def _merge_block(block_type: type[T], blocks: list[Any]) -> T:
    merged = {
        item.name: first_present(getattr(block, item.name) for block in blocks)
        for item in fields(block_type)
    }
    return block_type(**merged)


def reconcile(
    records: Sequence[NormalizedGeoRecord | None],
    *,
    ip: str | None = None,
) -> AggregatedIntelligence:
    """Merge ``records`` given in priority order (primary, secondary, tertiary).

    Absent records and ``failure`` records contribute nothing. Every output
    field comes from the first responding record in which it is present.
    """
    present = responding(records)

    return AggregatedIntelligence(
        ip=ip if ip is not None else first_present(record.ip for record in present),
        location=_merge_block(Location, [record.location for record in present]),
        network=_merge_block(Network, [record.network for record in present]),
        threat_signals=_merge_block(ThreatSignals, [record.threat_signals for record in present]),
        confidence=Confidence(
            sources_queried=len(records),
            sources_responded=len(present),
        ),
        sources=tuple(record.source for record in present),
    )
