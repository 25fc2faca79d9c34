"""Aggregate analytics over the scan history.

Provides the risk score, running risk-score trend, severity and network
distributions, riskiest-contract ranking and code totals. Every function takes
a newest-first sequence of records (as returned by ``RecordStore.all()``) and
never modifies it.
"""

from __future__ import annotations

import math
from collections.abc import Sequence
from typing import Any

from contract_dashboard.classifier import TIER_ORDER, classify_tier, riskiest_bar_color
from contract_dashboard.models import AggregateSnapshot, ScanRecord, SeverityTier
from contract_dashboard.store import RecordStore

MAX_RISK_SCORE = 100
# average vulnerabilities per scan that maps to a score of 100
RISK_SCALE = 10
DEFAULT_TOP_N = 10
CONTRACT_LABEL_LENGTH = 10


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def total_scans(records: Sequence[ScanRecord]) -> int:
    return len(records)


def total_vulnerabilities(records: Sequence[ScanRecord]) -> int:
    return sum(record.vulnerability_count for record in records)


def succeeded_scans(records: Sequence[ScanRecord]) -> int:
    return sum(1 for record in records if record.succeeded)


def success_rate(records: Sequence[ScanRecord]) -> float:
    """Fraction of successful scans (0.0 - 1.0), 0.0 for an empty history."""
    if not records:
        return 0.0
    return succeeded_scans(records) / len(records)


def calculate_risk_score(records: Sequence[ScanRecord]) -> int:
    """Calculate the aggregate risk score (0-100).

    The score is the average vulnerability count per scan scaled so that an
    average of 10 or more scores 100.
    """
    if not records:
        return 0
    average = total_vulnerabilities(records) / max(1, len(records))
    return _round_half_up(min(MAX_RISK_SCORE, average / RISK_SCALE * 100))


def risk_score_trend(records: Sequence[ScanRecord]) -> list[dict[str, Any]]:
    """Running risk score over growing chronological prefixes of the history."""
    trend = []
    running_total = 0
    for index, record in enumerate(reversed(records), start=1):
        running_total += record.vulnerability_count
        score = _round_half_up(min(MAX_RISK_SCORE, running_total / index / RISK_SCALE * 100))
        trend.append({"label": f"Scan {index}", "score": score})
    return trend


def scans_over_time(records: Sequence[ScanRecord]) -> list[dict[str, Any]]:
    """Per-scan vulnerability counts in chronological order."""
    return [
        {"label": f"Scan {index}", "vulnerabilities": record.vulnerability_count}
        for index, record in enumerate(reversed(records), start=1)
    ]


def severity_distribution(records: Sequence[ScanRecord]) -> dict[SeverityTier, int]:
    counts = {tier: 0 for tier in TIER_ORDER}
    for record in records:
        counts[classify_tier(record.vulnerability_count)] += 1
    return counts


def network_distribution(records: Sequence[ScanRecord]) -> list[dict[str, Any]]:
    """Scan count per network, in first-seen order walking newest-first."""
    counts: dict[str, int] = {}
    for record in records:
        counts[record.network] = counts.get(record.network, 0) + 1
    return [{"network": network, "count": count} for network, count in counts.items()]


def unique_networks(records: Sequence[ScanRecord]) -> list[str]:
    return list(dict.fromkeys(record.network for record in records))


def top_riskiest(records: Sequence[ScanRecord], n: int = DEFAULT_TOP_N) -> list[ScanRecord]:
    """Records with the most vulnerabilities first; ties keep history order."""
    if n <= 0:
        return []
    return sorted(records, key=lambda record: record.vulnerability_count, reverse=True)[:n]


def riskiest_contracts(records: Sequence[ScanRecord], n: int = DEFAULT_TOP_N) -> list[dict[str, Any]]:
    """Bar-chart feed for the riskiest contracts."""
    return [
        {
            "name": record.target[:CONTRACT_LABEL_LENGTH] + "...",
            "vulnerabilities": record.vulnerability_count,
            "fill": riskiest_bar_color(record.vulnerability_count),
        }
        for record in top_riskiest(records, n)
    ]


def success_failure(records: Sequence[ScanRecord]) -> list[dict[str, Any]]:
    succeeded = succeeded_scans(records)
    return [
        {"name": "Success", "value": succeeded},
        {"name": "Failed", "value": len(records) - succeeded},
    ]


def code_totals(records: Sequence[ScanRecord]) -> dict[str, int]:
    total_lines = sum(record.lines_of_code or 0 for record in records)
    total_functions = sum(record.functions_analyzed or 0 for record in records)
    average = _round_half_up(total_lines / len(records)) if records else 0
    return {
        "total_lines": total_lines,
        "total_functions": total_functions,
        "avg_lines_per_contract": average,
    }


def last_scan_date(records: Sequence[ScanRecord]) -> str:
    return records[0].date_label if records else "N/A"


def filter_scans(
    records: Sequence[ScanRecord],
    search: str | None = None,
    network: str | None = None,
) -> list[ScanRecord]:
    """Filter by case-insensitive target substring and exact network name.

    A network of ``None``, ``""`` or ``"all"`` matches every record.
    """
    needle = (search or "").lower()
    match_all_networks = not network or network == "all"
    return [
        record
        for record in records
        if needle in record.target.lower() and (match_all_networks or record.network == network)
    ]


def compute_snapshot(records: Sequence[ScanRecord], top_n: int = DEFAULT_TOP_N) -> AggregateSnapshot:
    succeeded = succeeded_scans(records)
    return AggregateSnapshot(
        total_scans=total_scans(records),
        total_vulnerabilities=total_vulnerabilities(records),
        succeeded_scans=succeeded,
        failed_scans=len(records) - succeeded,
        success_rate=success_rate(records),
        risk_score=calculate_risk_score(records),
        severity_distribution=severity_distribution(records),
        network_distribution=network_distribution(records),
        risk_score_trend=risk_score_trend(records),
        top_riskiest=top_riskiest(records, top_n),
        code_totals=code_totals(records),
        last_scan_date=last_scan_date(records),
    )


def build_snapshot(store: RecordStore, top_n: int = DEFAULT_TOP_N) -> AggregateSnapshot:
    """Build every aggregate from a single read of the store."""
    return compute_snapshot(store.all(), top_n)
