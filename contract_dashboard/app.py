from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any

from fastapi import FastAPI, HTTPException, Query, Request, status
from fastapi.responses import Response

from contract_dashboard.analytics import (
    build_snapshot,
    code_totals,
    filter_scans,
    network_distribution,
    risk_score_trend,
    riskiest_contracts,
    scans_over_time,
    severity_distribution,
    success_failure,
)
from contract_dashboard.catalog import get_vulnerability_detail
from contract_dashboard.config import default_settings_path, resolve_settings
from contract_dashboard.export import (
    CSV_MEDIA_TYPE,
    HTML_MEDIA_TYPE,
    PDF_MEDIA_TYPE,
    csv_filename,
    export_report_pdf,
    export_to_csv,
    export_to_html,
    pdf_report_filename,
    report_filename,
)
from contract_dashboard.models import (
    AggregateSnapshot,
    ExternalScanFailure,
    ScanRecord,
    ScanRequest,
    ValidationError,
    VulnerabilityDetail,
)
from contract_dashboard.monitoring import router as monitoring_router
from contract_dashboard.scanners import ScanBackend, build_backend
from contract_dashboard.store import RecordStore
from contract_dashboard.submission import ScanSubmitter

APP_TITLE = "Smart Contract Scan Dashboard"

LOGGER = logging.getLogger(__name__)


def _store(request: Request) -> RecordStore:
    return request.app.state.store


def _attachment(content: str | bytes, media_type: str, filename: str) -> Response:
    return Response(
        content=content,
        media_type=media_type,
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


def create_app(
    settings: dict[str, Any] | None = None,
    backend: ScanBackend | None = None,
    store: RecordStore | None = None,
) -> FastAPI:
    """Build the dashboard API around its own record store.

    Every app instance owns a separate store, so tests and parallel sessions
    never share history.
    """
    settings = settings or resolve_settings(default_settings_path())
    progress = settings.get("progress", {})
    default_top_n = int(settings.get("analytics", {}).get("top_n", 10))

    app = FastAPI(title=APP_TITLE)
    app.state.settings = settings
    app.state.store = store if store is not None else RecordStore()
    app.state.submitter = ScanSubmitter(
        store=app.state.store,
        backend=backend or build_backend(settings),
        timeout_seconds=settings.get("scanner", {}).get("timeout_seconds"),
        progress_step=int(progress.get("step", 5)),
        progress_interval=float(progress.get("interval_seconds", 0.1)),
        progress_ceiling=int(progress.get("ceiling", 95)),
    )
    app.include_router(monitoring_router, prefix="/api")

    @app.middleware("http")
    async def security_headers(request: Request, call_next):
        response = await call_next(request)
        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        response.headers["Referrer-Policy"] = "no-referrer"
        response.headers["Cache-Control"] = "no-store"
        return response

    # ──────────────────────────────────────────────────────────────────────
    # Scan history
    # ──────────────────────────────────────────────────────────────────────

    @app.get("/api/snapshot", response_model=AggregateSnapshot)
    def api_snapshot(request: Request, top_n: int = Query(default_top_n, ge=0, le=1000)) -> AggregateSnapshot:
        return build_snapshot(_store(request), top_n)

    @app.get("/api/scans", response_model=list[ScanRecord])
    def api_scans(request: Request, search: str | None = None, network: str | None = None) -> list[ScanRecord]:
        return filter_scans(_store(request).all(), search=search, network=network)

    @app.post("/api/scans", response_model=ScanRecord, status_code=status.HTTP_201_CREATED)
    async def api_submit_scan(request: Request, scan_request: ScanRequest) -> ScanRecord:
        try:
            return await request.app.state.submitter.submit(scan_request)
        except ValidationError as exc:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))
        except ExternalScanFailure as exc:
            raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(exc))

    @app.delete("/api/scans")
    def api_clear_scans(request: Request) -> dict:
        removed = _store(request).clear()
        LOGGER.info("Scan history cleared (%s records)", removed)
        return {"status": "cleared", "removed": removed}

    # ──────────────────────────────────────────────────────────────────────
    # Chart feeds
    # ──────────────────────────────────────────────────────────────────────

    @app.get("/api/analytics/trend")
    def analytics_trend(request: Request) -> list[dict]:
        return risk_score_trend(_store(request).all())

    @app.get("/api/analytics/severity")
    def analytics_severity(request: Request) -> dict:
        return {tier.value: count for tier, count in severity_distribution(_store(request).all()).items()}

    @app.get("/api/analytics/networks")
    def analytics_networks(request: Request) -> list[dict]:
        return network_distribution(_store(request).all())

    @app.get("/api/analytics/riskiest")
    def analytics_riskiest(request: Request, n: int = Query(default_top_n, ge=0, le=1000)) -> list[dict]:
        return riskiest_contracts(_store(request).all(), n)

    @app.get("/api/analytics/code")
    def analytics_code(request: Request) -> dict:
        return code_totals(_store(request).all())

    @app.get("/api/analytics/scans-over-time")
    def analytics_scans_over_time(request: Request) -> list[dict]:
        return scans_over_time(_store(request).all())

    @app.get("/api/analytics/success-failure")
    def analytics_success_failure(request: Request) -> list[dict]:
        return success_failure(_store(request).all())

    @app.get("/api/vulnerabilities/{name}", response_model=VulnerabilityDetail)
    def vulnerability_detail(name: str) -> VulnerabilityDetail:
        detail = get_vulnerability_detail(name)
        if detail is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Vulnerability type not found")
        return detail

    # ──────────────────────────────────────────────────────────────────────
    # Export endpoints
    # ──────────────────────────────────────────────────────────────────────

    @app.get("/api/export/scans.csv")
    def export_csv(request: Request) -> Response:
        content = export_to_csv(_store(request).all())
        return _attachment(content, CSV_MEDIA_TYPE, csv_filename(datetime.now(timezone.utc)))

    @app.get("/api/export/report.html")
    def export_report(request: Request) -> Response:
        now = datetime.now()
        content = export_to_html(_store(request).all(), generated_at=now)
        return _attachment(content, HTML_MEDIA_TYPE, report_filename(datetime.now(timezone.utc)))

    @app.get("/api/export/report.pdf")
    def export_report_as_pdf(request: Request) -> Response:
        now = datetime.now()
        content = export_report_pdf(_store(request).all(), generated_at=now)
        return _attachment(content, PDF_MEDIA_TYPE, pdf_report_filename(datetime.now(timezone.utc)))

    return app
