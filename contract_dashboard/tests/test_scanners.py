import json
import random

import httpx
import pytest

from contract_dashboard.models import ExternalScanFailure, ScanRequest
from contract_dashboard.scanners import DemoScanBackend, HttpScanBackend, build_backend

SCANNER_URL = "http://scanner.local/scan"


def _client(handler):
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


@pytest.mark.asyncio
async def test_http_backend_posts_request_and_parses_outcome():
    seen = []

    def handler(request):
        seen.append(request)
        return httpx.Response(
            200,
            json={
                "vulnerability_count": 4,
                "succeeded": True,
                "duration_label": "3.10s",
                "lines_of_code": 812,
                "functions_analyzed": 17,
                "compiler_version": "0.8.24",
            },
        )

    async with _client(handler) as client:
        backend = HttpScanBackend(SCANNER_URL, client=client)
        outcome = await backend.scan(ScanRequest(target="0xabc", network="bsc-mainnet"))

    assert outcome.vulnerability_count == 4
    assert outcome.duration_label == "3.10s"
    assert outcome.compiler_version == "0.8.24"
    assert len(seen) == 1
    assert seen[0].method == "POST"
    assert str(seen[0].url) == SCANNER_URL
    assert json.loads(seen[0].content) == {"target": "0xabc", "network": "bsc-mainnet", "uploaded_file": None}


@pytest.mark.asyncio
async def test_http_backend_non_2xx_is_a_failure():
    async with _client(lambda request: httpx.Response(503, text="overloaded")) as client:
        backend = HttpScanBackend(SCANNER_URL, client=client)
        with pytest.raises(ExternalScanFailure, match="HTTP 503"):
            await backend.scan(ScanRequest(target="0xabc"))


@pytest.mark.asyncio
async def test_http_backend_invalid_body_is_a_failure():
    async with _client(lambda request: httpx.Response(200, text="not json")) as client:
        backend = HttpScanBackend(SCANNER_URL, client=client)
        with pytest.raises(ExternalScanFailure, match="invalid result"):
            await backend.scan(ScanRequest(target="0xabc"))


@pytest.mark.asyncio
async def test_http_backend_rejects_negative_counts():
    payload = {"vulnerability_count": -1, "succeeded": True}
    async with _client(lambda request: httpx.Response(200, json=payload)) as client:
        backend = HttpScanBackend(SCANNER_URL, client=client)
        with pytest.raises(ExternalScanFailure):
            await backend.scan(ScanRequest(target="0xabc"))


@pytest.mark.asyncio
async def test_http_backend_transport_error_is_a_failure():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    async with _client(handler) as client:
        backend = HttpScanBackend(SCANNER_URL, client=client)
        with pytest.raises(ExternalScanFailure, match="request failed"):
            await backend.scan(ScanRequest(target="0xabc"))


def test_http_backend_requires_url():
    with pytest.raises(ValueError):
        HttpScanBackend("")


@pytest.mark.asyncio
async def test_demo_backend_outcomes_are_in_range():
    backend = DemoScanBackend(rng=random.Random(7), delay_seconds=0)

    for _ in range(50):
        outcome = await backend.scan(ScanRequest(target="0xabc"))
        assert 0 <= outcome.vulnerability_count <= 9
        assert 200 <= outcome.lines_of_code <= 999
        assert 5 <= outcome.functions_analyzed <= 24
        assert outcome.compiler_version == "0.8.20"


@pytest.mark.asyncio
async def test_demo_backend_is_reproducible_with_a_seed():
    first = DemoScanBackend(rng=random.Random(42), delay_seconds=0)
    second = DemoScanBackend(rng=random.Random(42), delay_seconds=0)
    request = ScanRequest(target="0xabc")

    assert [await first.scan(request) for _ in range(5)] == [await second.scan(request) for _ in range(5)]


def test_build_backend_selects_implementation():
    demo = build_backend({"scanner": {"backend": "demo", "demo_seed": 1, "demo_delay_seconds": 0}})
    assert isinstance(demo, DemoScanBackend)
    assert demo.delay_seconds == 0

    http = build_backend({"scanner": {"backend": "HTTP", "url": SCANNER_URL, "timeout_seconds": 5}})
    assert isinstance(http, HttpScanBackend)
    assert http.timeout_seconds == 5.0


def test_build_backend_rejects_unknown_kind():
    with pytest.raises(ValueError, match="Unsupported"):
        build_backend({"scanner": {"backend": "slither"}})
