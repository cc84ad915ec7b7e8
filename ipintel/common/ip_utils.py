"""IP address syntax checks."""

from __future__ import annotations

from ipaddress import ip_address
from typing import Callable, Iterable


def is_valid_ip(value: object) -> bool:
    """Return True for an IPv4 dotted-quad or IPv6 address string.

    IPv6 zone suffixes (``fe80::1%eth0``) are rejected; they are host-local and
    carry arbitrary text into provider URLs.
    """
    if not isinstance(value, str):
        return False
    try:
        address = ip_address(value)
    except ValueError:
        return False
    return getattr(address, "scope_id", None) is None


def partition_ips(
    ips: Iterable[str],
    validator: Callable[[str], bool] = is_valid_ip,
) -> tuple[list[str], list[str]]:
    valid: list[str] = []
    invalid: list[str] = []
    for ip in ips:
        if validator(ip):
            valid.append(ip)
        else:
            invalid.append(ip)
    return valid, invalid
