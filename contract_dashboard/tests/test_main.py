import json

from contract_dashboard.main import main
from contract_dashboard.models import ExternalScanFailure
from contract_dashboard.scanners import HttpScanBackend


def _settings_file(tmp_path, backend="demo"):
    path = tmp_path / "settings.yaml"
    path.write_text(
        "scanner:\n"
        f"  backend: {backend}\n"
        "  demo_delay_seconds: 0\n"
        "  demo_seed: 3\n"
        "progress:\n"
        "  interval_seconds: 0.01\n",
        encoding="utf-8",
    )
    return str(path)


def test_main_prints_snapshot_and_writes_exports(tmp_path, capsys):
    csv_path = tmp_path / "out" / "scans.csv"
    report_path = tmp_path / "out" / "report.html"

    code = main(
        [
            "--target", "0xabc",
            "--network", "polygon-mainnet",
            "--settings", _settings_file(tmp_path),
            "--csv-output", str(csv_path),
            "--report-output", str(report_path),
        ]
    )

    assert code == 0
    snapshot = json.loads(capsys.readouterr().out)
    assert snapshot["total_scans"] == 1
    assert snapshot["network_distribution"] == [{"network": "Polygon", "count": 1}]
    assert csv_path.read_text(encoding="utf-8").count("\n") == 1
    assert '"0xabc","Polygon"' in csv_path.read_text(encoding="utf-8")
    assert "Smart Contract Vulnerability Scanner Report" in report_path.read_text(encoding="utf-8")


def test_main_accepts_uploaded_file(tmp_path, capsys):
    code = main(["--file", "Token.sol", "--settings", _settings_file(tmp_path)])

    assert code == 0
    snapshot = json.loads(capsys.readouterr().out)
    assert snapshot["top_riskiest"][0]["target"] == "Token.sol"


def test_main_without_target_is_a_usage_error(tmp_path, capsys):
    assert main(["--settings", _settings_file(tmp_path)]) == 2
    assert capsys.readouterr().out == ""


def test_main_reports_scanner_failure(tmp_path, monkeypatch, capsys):
    async def unavailable(self, request):
        raise ExternalScanFailure("Scanner returned HTTP 503: overloaded")

    monkeypatch.setattr(HttpScanBackend, "scan", unavailable)
    settings = tmp_path / "settings.yaml"
    settings.write_text(
        "scanner:\n  backend: http\n  url: http://scanner.local/scan\n  timeout_seconds: 1\n",
        encoding="utf-8",
    )

    assert main(["--target", "0xabc", "--settings", str(settings)]) == 4
    assert capsys.readouterr().out == ""


def test_main_uses_logging_level_from_settings(tmp_path, monkeypatch, capsys):
    levels = []
    monkeypatch.setattr("contract_dashboard.main.setup_logging", levels.append)
    path = tmp_path / "settings.yaml"
    path.write_text(
        "scanner:\n  demo_delay_seconds: 0\nlogging:\n  level: DEBUG\n",
        encoding="utf-8",
    )

    assert main(["--target", "0xabc", "--settings", str(path)]) == 0
    assert main(["--target", "0xabc", "--settings", str(path), "--log-level", "WARNING"]) == 0

    assert levels == ["DEBUG", "WARNING"]
