from __future__ import annotations

import pytest

from contract_dashboard.classifier import (
    TIER_COLORS,
    TIER_WEIGHTS,
    classify_tier,
    riskiest_bar_color,
    tier_color,
    tier_weight,
)
from contract_dashboard.models import SeverityTier


@pytest.mark.parametrize(
    "count,expected",
    [
        (0, SeverityTier.LOW),
        (2, SeverityTier.LOW),
        (3, SeverityTier.MEDIUM),
        (4, SeverityTier.MEDIUM),
        (5, SeverityTier.HIGH),
        (7, SeverityTier.HIGH),
        (8, SeverityTier.CRITICAL),
        (250, SeverityTier.CRITICAL),
    ],
)
def test_classify_tier_boundaries(count, expected):
    assert classify_tier(count) == expected


def test_severity_never_increases_as_count_decreases():
    weights = [tier_weight(count) for count in range(20, -1, -1)]
    assert weights == sorted(weights, reverse=True)


def test_tier_color_and_weight():
    assert tier_color(9) == TIER_COLORS[SeverityTier.CRITICAL]
    assert tier_color(1) == TIER_COLORS[SeverityTier.LOW]
    assert tier_weight(8) == TIER_WEIGHTS[SeverityTier.CRITICAL] == 4
    assert tier_weight(0) == 1


def test_riskiest_bar_color_uses_three_bands():
    assert riskiest_bar_color(8) == "#ef4444"
    assert riskiest_bar_color(5) == "#f97316"
    assert riskiest_bar_color(3) == "#eab308"
    # Low records are drawn with the Medium colour on the bar chart
    assert riskiest_bar_color(0) == "#eab308"
