"""Scan submission: validate a request, await the scanning backend while
reporting progress, then record the outcome in the store."""

from __future__ import annotations

import asyncio
import contextlib
import logging
import time
from collections.abc import Callable
from datetime import datetime

from contract_dashboard.labels import (
    format_date_label,
    format_duration_label,
    format_time_label,
    network_display_name,
)
from contract_dashboard.models import ExternalScanFailure, ScanOutcome, ScanRecord, ScanRequest, ValidationError
from contract_dashboard.scanners import ScanBackend
from contract_dashboard.store import RecordStore

LOGGER = logging.getLogger(__name__)

ProgressCallback = Callable[[int], None]

PROGRESS_COMPLETE = 100


def resolve_target(request: ScanRequest) -> str:
    target = request.target.strip()
    if target:
        return target
    if request.uploaded_file:
        return request.uploaded_file
    raise ValidationError("Please enter a contract address or upload a .sol file")


def build_record(request: ScanRequest, outcome: ScanOutcome, started_at: datetime, elapsed_seconds: float) -> ScanRecord:
    return ScanRecord(
        date_label=format_date_label(started_at),
        time_label=format_time_label(started_at),
        target=resolve_target(request),
        network=network_display_name(request.network),
        vulnerability_count=outcome.vulnerability_count,
        duration_label=outcome.duration_label or format_duration_label(elapsed_seconds),
        succeeded=outcome.succeeded,
        lines_of_code=outcome.lines_of_code,
        functions_analyzed=outcome.functions_analyzed,
        compiler_version=outcome.compiler_version,
    )


class ScanSubmitter:
    """Runs one scan at a time per call and appends the result to a store.

    Progress starts at 0, climbs by ``progress_step`` every
    ``progress_interval`` seconds up to ``progress_ceiling`` while the backend
    works, and jumps to 100 once the record is stored. A cancelled or failed
    submission leaves the store untouched.
    """

    def __init__(
        self,
        store: RecordStore,
        backend: ScanBackend,
        timeout_seconds: float | None = None,
        progress_step: int = 5,
        progress_interval: float = 0.1,
        progress_ceiling: int = 95,
    ) -> None:
        self.store = store
        self.backend = backend
        self.timeout_seconds = timeout_seconds
        self.progress_step = progress_step
        self.progress_interval = progress_interval
        self.progress_ceiling = progress_ceiling

    async def _tick_progress(self, on_progress: ProgressCallback) -> None:
        progress = 0
        while progress < self.progress_ceiling:
            await asyncio.sleep(self.progress_interval)
            progress = min(progress + self.progress_step, self.progress_ceiling)
            on_progress(progress)

    async def _run_backend(self, request: ScanRequest) -> ScanOutcome:
        try:
            if self.timeout_seconds is None:
                return await self.backend.scan(request)
            return await asyncio.wait_for(self.backend.scan(request), timeout=self.timeout_seconds)
        except ExternalScanFailure:
            raise
        except asyncio.TimeoutError as exc:
            raise ExternalScanFailure(f"Scanner timed out after {self.timeout_seconds}s") from exc
        except Exception as exc:  # noqa: BLE001
            raise ExternalScanFailure(f"Scanner failed: {exc}") from exc

    async def submit(self, request: ScanRequest, on_progress: ProgressCallback | None = None) -> ScanRecord:
        target = resolve_target(request)
        report = on_progress or (lambda value: None)
        LOGGER.info("Starting scan for target=%s network=%s", target, request.network)

        started_at = datetime.now()
        started = time.monotonic()
        report(0)
        ticker = asyncio.create_task(self._tick_progress(report))
        try:
            outcome = await self._run_backend(request)
        except ExternalScanFailure as exc:
            LOGGER.warning("Scan failed for target=%s: %s", target, exc)
            raise
        finally:
            ticker.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await ticker

        record = build_record(request, outcome, started_at, time.monotonic() - started)
        self.store.append(record)
        report(PROGRESS_COMPLETE)
        LOGGER.info(
            "Recorded scan for target=%s with %s vulnerabilities", record.target, record.vulnerability_count
        )
        return record
