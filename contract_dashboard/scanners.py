from __future__ import annotations

import asyncio
import logging
import random
from typing import Any, Protocol

import httpx
from pydantic import ValidationError as ModelValidationError

from contract_dashboard.models import ExternalScanFailure, ScanOutcome, ScanRequest

LOGGER = logging.getLogger(__name__)

DEMO_COMPILER_VERSION = "0.8.20"
DEMO_DURATION_LABEL = "1.20s"


class ScanBackend(Protocol):
    async def scan(self, request: ScanRequest) -> ScanOutcome:
        ...


class HttpScanBackend:
    """Delegates the contract analysis to a remote scanning service.

    The service receives the request as JSON and must answer with the
    ``ScanOutcome`` fields. Transport errors, non-2xx answers and malformed
    bodies all surface as ``ExternalScanFailure``.
    """

    def __init__(self, url: str, timeout_seconds: float = 30.0, client: httpx.AsyncClient | None = None) -> None:
        if not url:
            raise ValueError("A scanner URL is required for the http backend")
        self.url = url
        self.timeout_seconds = timeout_seconds
        self._client = client

    async def _post(self, client: httpx.AsyncClient, payload: dict[str, Any]) -> httpx.Response:
        return await client.post(
            self.url,
            json=payload,
            headers={"User-Agent": "ContractDashboard-Scanner/1.0"},
        )

    async def scan(self, request: ScanRequest) -> ScanOutcome:
        payload = request.model_dump()
        try:
            if self._client is not None:
                response = await self._post(self._client, payload)
            else:
                async with httpx.AsyncClient(timeout=self.timeout_seconds) as client:
                    response = await self._post(client, payload)
        except httpx.HTTPError as exc:
            raise ExternalScanFailure(f"Scanner request failed: {exc}") from exc

        if not response.is_success:
            raise ExternalScanFailure(f"Scanner returned HTTP {response.status_code}: {response.text[:200]}")

        try:
            return ScanOutcome.model_validate(response.json())
        except (ValueError, ModelValidationError) as exc:
            raise ExternalScanFailure(f"Scanner returned an invalid result: {exc}") from exc


class DemoScanBackend:
    """Fabricates plausible scan outcomes for demos and local development."""

    def __init__(self, rng: random.Random | None = None, delay_seconds: float = 2.0) -> None:
        self.rng = rng or random.Random()
        self.delay_seconds = delay_seconds

    async def scan(self, request: ScanRequest) -> ScanOutcome:
        await asyncio.sleep(self.delay_seconds)
        return ScanOutcome(
            vulnerability_count=self.rng.randrange(10),
            succeeded=self.rng.random() > 0.2,
            duration_label=DEMO_DURATION_LABEL,
            lines_of_code=self.rng.randrange(800) + 200,
            functions_analyzed=self.rng.randrange(20) + 5,
            compiler_version=DEMO_COMPILER_VERSION,
        )


def build_backend(settings: dict[str, Any]) -> ScanBackend:
    scanner = settings.get("scanner", {})
    kind = str(scanner.get("backend", "demo")).lower()
    if kind == "http":
        return HttpScanBackend(
            url=str(scanner.get("url") or ""),
            timeout_seconds=float(scanner.get("timeout_seconds", 30)),
        )
    if kind == "demo":
        seed = scanner.get("demo_seed")
        LOGGER.info("Using demo scan backend (outcomes are randomly generated)")
        return DemoScanBackend(
            rng=random.Random(seed),
            delay_seconds=float(scanner.get("demo_delay_seconds", 2.0)),
        )
    raise ValueError(f"Unsupported scanner backend: {kind}")
