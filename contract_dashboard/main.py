from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from datetime import datetime
from pathlib import Path

from contract_dashboard.analytics import build_snapshot
from contract_dashboard.config import default_settings_path, resolve_settings, setup_logging
from contract_dashboard.export import export_to_csv, export_to_html
from contract_dashboard.models import ExternalScanFailure, ScanRequest, ValidationError
from contract_dashboard.scanners import build_backend
from contract_dashboard.store import RecordStore
from contract_dashboard.submission import ScanSubmitter

LOGGER = logging.getLogger(__name__)


def write_text_file(path: str | Path, content: str) -> None:
    output = Path(path)
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(content, encoding="utf-8")


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Scan a smart contract and summarise the result")
    parser.add_argument("--target", default="", help="Contract address to scan")
    parser.add_argument("--file", dest="uploaded_file", help="Name of an uploaded .sol file to scan")
    parser.add_argument("--network", default="ethereum-mainnet", help="Network identifier, e.g. polygon-mainnet")
    parser.add_argument("--settings", default=default_settings_path(), help="Path to settings YAML")
    parser.add_argument("--log-level", help="Logging level, overrides logging.level from settings")
    parser.add_argument("--csv-output", help="Optional path for the CSV export")
    parser.add_argument("--report-output", help="Optional path for the HTML report")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_arg_parser().parse_args(argv)
    settings = resolve_settings(args.settings)
    setup_logging(args.log_level or settings["logging"]["level"])
    progress = settings["progress"]

    store = RecordStore()
    submitter = ScanSubmitter(
        store=store,
        backend=build_backend(settings),
        timeout_seconds=settings["scanner"].get("timeout_seconds"),
        progress_step=int(progress["step"]),
        progress_interval=float(progress["interval_seconds"]),
        progress_ceiling=int(progress["ceiling"]),
    )
    request = ScanRequest(target=args.target, network=args.network, uploaded_file=args.uploaded_file)

    try:
        asyncio.run(submitter.submit(request, on_progress=lambda value: LOGGER.debug("Scan progress %s%%", value)))
    except ValidationError as exc:
        LOGGER.error("Invalid arguments: %s", exc)
        return 2
    except ExternalScanFailure as exc:
        LOGGER.error("Scan failed: %s", exc)
        return 4

    records = store.all()
    if args.csv_output:
        write_text_file(args.csv_output, export_to_csv(records))
    if args.report_output:
        write_text_file(args.report_output, export_to_html(records, generated_at=datetime.now()))

    snapshot = build_snapshot(store, int(settings["analytics"]["top_n"]))
    print(json.dumps(snapshot.model_dump(mode="json"), indent=2, ensure_ascii=False))
    return 0


if __name__ == "__main__":
    sys.exit(main())
