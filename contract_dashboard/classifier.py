"""Severity classification for scan records.

Maps a record's vulnerability count onto one of four tiers and the display
attributes (colour, weight) the charts and the HTML report use for each tier.
"""

from __future__ import annotations

from contract_dashboard.models import SeverityTier

CRITICAL_THRESHOLD = 8
HIGH_THRESHOLD = 5
MEDIUM_THRESHOLD = 3

# Presentation order, most severe first
TIER_ORDER = (SeverityTier.CRITICAL, SeverityTier.HIGH, SeverityTier.MEDIUM, SeverityTier.LOW)

TIER_COLORS = {
    SeverityTier.CRITICAL: "#ef4444",
    SeverityTier.HIGH: "#f97316",
    SeverityTier.MEDIUM: "#eab308",
    SeverityTier.LOW: "#22c55e",
}

TIER_WEIGHTS = {
    SeverityTier.CRITICAL: 4,
    SeverityTier.HIGH: 3,
    SeverityTier.MEDIUM: 2,
    SeverityTier.LOW: 1,
}


def classify_tier(vulnerability_count: int) -> SeverityTier:
    """Return the severity tier for a vulnerability count."""
    if vulnerability_count >= CRITICAL_THRESHOLD:
        return SeverityTier.CRITICAL
    if vulnerability_count >= HIGH_THRESHOLD:
        return SeverityTier.HIGH
    if vulnerability_count >= MEDIUM_THRESHOLD:
        return SeverityTier.MEDIUM
    return SeverityTier.LOW


def tier_color(vulnerability_count: int) -> str:
    return TIER_COLORS[classify_tier(vulnerability_count)]


def tier_weight(vulnerability_count: int) -> int:
    return TIER_WEIGHTS[classify_tier(vulnerability_count)]


def riskiest_bar_color(vulnerability_count: int) -> str:
    """Bar colour for the riskiest-contracts chart.

    The chart only distinguishes three bands: anything below High is drawn
    with the Medium colour.
    """
    if vulnerability_count >= CRITICAL_THRESHOLD:
        return TIER_COLORS[SeverityTier.CRITICAL]
    if vulnerability_count >= HIGH_THRESHOLD:
        return TIER_COLORS[SeverityTier.HIGH]
    return TIER_COLORS[SeverityTier.MEDIUM]
