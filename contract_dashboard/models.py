from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class DashboardError(Exception):
    pass


class ValidationError(DashboardError, ValueError):
    """Malformed input to the store or to a scan submission."""


class ExternalScanFailure(DashboardError, RuntimeError):
    """The scanning collaborator errored or timed out."""


class SeverityTier(str, Enum):
    """Risk tiers derived from a record's vulnerability count."""
    CRITICAL = "Critical"
    HIGH = "High"
    MEDIUM = "Medium"
    LOW = "Low"


class ScanRecord(BaseModel):
    model_config = ConfigDict(frozen=True)

    date_label: str
    time_label: str
    target: str
    network: str
    # negative counts are rejected by the store, not the model
    vulnerability_count: int
    duration_label: str
    succeeded: bool
    lines_of_code: int | None = Field(default=None, ge=0)
    functions_analyzed: int | None = Field(default=None, ge=0)
    compiler_version: str | None = None


class ScanRequest(BaseModel):
    target: str = ""
    network: str = "ethereum-mainnet"
    uploaded_file: str | None = None


class ScanOutcome(BaseModel):
    vulnerability_count: int = Field(ge=0)
    succeeded: bool
    duration_label: str | None = None
    lines_of_code: int | None = Field(default=None, ge=0)
    functions_analyzed: int | None = Field(default=None, ge=0)
    compiler_version: str | None = None


class TrendPoint(BaseModel):
    label: str
    score: int


class NetworkCount(BaseModel):
    network: str
    count: int


class CodeTotals(BaseModel):
    total_lines: int
    total_functions: int
    avg_lines_per_contract: int


class AggregateSnapshot(BaseModel):
    total_scans: int
    total_vulnerabilities: int
    succeeded_scans: int
    failed_scans: int
    success_rate: float
    risk_score: int
    severity_distribution: dict[SeverityTier, int]
    network_distribution: list[NetworkCount]
    risk_score_trend: list[TrendPoint]
    top_riskiest: list[ScanRecord]
    code_totals: CodeTotals
    last_scan_date: str


class VulnerabilityDetail(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    severity: SeverityTier
    description: str
    impact: str
    remediation: str
    code_example: str
