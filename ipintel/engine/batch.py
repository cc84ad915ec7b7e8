"""Batch lookups with per-item failure isolation."""

from __future__ import annotations

import logging
from typing import Callable, Sequence

from ipintel.common.ip_utils import is_valid_ip, partition_ips
from ipintel.common.logging import log_event
from ipintel.common.models import BatchItemResult, BatchResult, NormalizedGeoRecord
from ipintel.common.settle import Settled, settle_all

REQUEST_FAILED = "Request failed"
LOOKUP_FAILED = "Lookup failed"


def _item_result(ip: str, outcome: Settled[NormalizedGeoRecord]) -> BatchItemResult:
    if not outcome.ok:
        return BatchItemResult(ip=ip, error=REQUEST_FAILED)
    record = outcome.value
    if record is None or not record.ok:
        return BatchItemResult(ip=ip, error=LOOKUP_FAILED)
    return BatchItemResult(ip=ip, record=record)


def process_batch(
    ips: Sequence[str],
    lookup: Callable[[str], NormalizedGeoRecord],
    *,
    validator: Callable[[str], bool] = is_valid_ip,
    max_workers: int | None = None,
    logger: logging.Logger | None = None,
) -> BatchResult:
    """Look up every syntactically valid IP concurrently.

    Results follow input order. A lookup that raises or reports a failure
    status becomes an ``error`` item; it never fails the batch.
    """
    valid, invalid = partition_ips(ips, validator)

    outcomes = settle_all(
        [lambda ip=ip: lookup(ip) for ip in valid],
        max_workers=max_workers,
        thread_name_prefix="batch",
    )

    results = []
    for ip, outcome in zip(valid, outcomes):
        item = _item_result(ip, outcome)
        if item.error is not None and logger is not None:
            error_code = "LOOKUP_FAILED"
            if outcome.error is not None:
                error_code = getattr(outcome.error, "error_code", "UNEXPECTED_ERROR")
            log_event(
                logger,
                f"batch item failed: {outcome.error or item.error}",
                operation="batch",
                ip=ip,
                event="BATCH_ITEM_FAIL",
                status="error",
                error_code=error_code,
            )
        results.append(item)

    return BatchResult(
        results=tuple(results),
        invalid_ips=tuple(invalid),
        requested=len(ips),
        valid=len(valid),
        invalid=len(invalid),
    )
