"""Deterministic additive risk scoring."""

from __future__ import annotations

from ipintel.common.constants import RISK_HIGH_THRESHOLD, RISK_MEDIUM_THRESHOLD
from ipintel.common.models import RiskAssessment, ThreatSignals

# (signal attribute, points, factor), evaluated in this order.
SIGNAL_RULES = (
    ("is_proxy_or_vpn", 40, "proxy_or_vpn"),
    ("is_hosting", 30, "datacenter_hosting"),
    ("is_mobile", 10, "mobile_carrier"),
)
NO_REVERSE_DNS_POINTS = 10
NO_REVERSE_DNS_FACTOR = "no_reverse_dns"


def risk_level(score: int) -> str:
    if score >= RISK_HIGH_THRESHOLD:
        return "high"
    if score >= RISK_MEDIUM_THRESHOLD:
        return "medium"
    return "low"


def score_risk(signals: ThreatSignals, *, has_reverse_dns: bool) -> RiskAssessment:
    score = 0
    factors: list[str] = []

    for attribute, points, factor in SIGNAL_RULES:
        if getattr(signals, attribute) is True:
            score += points
            factors.append(factor)

    if not has_reverse_dns:
        score += NO_REVERSE_DNS_POINTS
        factors.append(NO_REVERSE_DNS_FACTOR)

    return RiskAssessment(score=score, level=risk_level(score), factors=tuple(factors))
