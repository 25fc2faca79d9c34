"""
Pytest configuration and shared fixtures for dashboard tests.
"""
import pytest

from contract_dashboard.models import ScanRecord
from contract_dashboard.store import RecordStore


def _make_record(vulns: int = 0, network: str = "Ethereum", target: str = "0xabc", **overrides) -> ScanRecord:
    fields = {
        "date_label": "Oct 15, 2025",
        "time_label": "1:45:01 AM",
        "target": target,
        "network": network,
        "vulnerability_count": vulns,
        "duration_label": "1.20s",
        "succeeded": True,
        "lines_of_code": 450,
        "functions_analyzed": 12,
        "compiler_version": "0.8.20",
    }
    fields.update(overrides)
    return ScanRecord(**fields)


@pytest.fixture
def make_record():
    """Factory for scan records with sensible defaults."""
    return _make_record


@pytest.fixture
def store():
    """A fresh, empty record store for every test."""
    return RecordStore()


@pytest.fixture
def scenario_store():
    """Polygon(5), Ethereum(8), Ethereum(2) appended in that order.

    Reading newest-first gives Ethereum(2), Ethereum(8), Polygon(5).
    """
    scenario = RecordStore()
    scenario.append(_make_record(5, "Polygon", target="0xPoly5"))
    scenario.append(_make_record(8, "Ethereum", target="0xEth8"))
    scenario.append(_make_record(2, "Ethereum", target="0xEth2"))
    return scenario
