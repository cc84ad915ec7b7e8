"""Settle-all fan-out: run every call to completion and keep each outcome."""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Callable, Generic, Sequence, TypeVar

T = TypeVar("T")


@dataclass(frozen=True)
class Settled(Generic[T]):
    value: T | None = None
    error: Exception | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


def _capture(call: Callable[[], T]) -> Settled[T]:
    try:
        return Settled(value=call())
    except Exception as exc:  # noqa: BLE001
        return Settled(error=exc)


def settle_all(
    calls: Sequence[Callable[[], T]],
    *,
    max_workers: int | None = None,
    thread_name_prefix: str = "settle",
) -> list[Settled[T]]:
    """Run ``calls`` concurrently and return one ``Settled`` per call, in call order.

    A failing call never cancels or delays its siblings; its exception is
    returned in ``Settled.error`` instead of being raised.
    """
    if not calls:
        return []

    workers = max_workers or len(calls)
    with ThreadPoolExecutor(max_workers=workers, thread_name_prefix=thread_name_prefix) as executor:
        futures = [executor.submit(_capture, call) for call in calls]
        return [future.result() for future in futures]
