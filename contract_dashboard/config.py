from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any

import yaml

DEFAULT_SETTINGS_PATH = "/app/config/settings.yaml"


def default_settings_path() -> str:
    """Settings file named by DASHBOARD_SETTINGS, read at call time."""
    return os.getenv("DASHBOARD_SETTINGS", DEFAULT_SETTINGS_PATH)


def setup_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )


def load_yaml(path: str) -> dict[str, Any]:
    with open(path, "r", encoding="utf-8") as handle:
        return yaml.safe_load(handle) or {}


def resolve_settings(path: str | None = None) -> dict[str, Any]:
    """Load settings from YAML, filling gaps from the environment and defaults.

    A missing settings file is not an error; every key has a default.
    """
    settings: dict[str, Any] = {}
    if path and Path(path).exists():
        settings = load_yaml(path)
    settings.setdefault("scanner", {})
    settings.setdefault("progress", {})
    settings.setdefault("analytics", {})
    settings.setdefault("logging", {})
    settings["scanner"].setdefault("backend", os.getenv("DASHBOARD_SCANNER_BACKEND", "demo"))
    settings["scanner"].setdefault("url", os.getenv("DASHBOARD_SCANNER_URL", ""))
    settings["scanner"].setdefault("timeout_seconds", float(os.getenv("DASHBOARD_SCANNER_TIMEOUT_SECONDS", "30")))
    settings["scanner"].setdefault("demo_delay_seconds", 2.0)
    settings["scanner"].setdefault("demo_seed", None)
    settings["progress"].setdefault("step", 5)
    settings["progress"].setdefault("interval_seconds", 0.1)
    settings["progress"].setdefault("ceiling", 95)
    settings["analytics"].setdefault("top_n", int(os.getenv("DASHBOARD_TOP_N", "10")))
    settings["logging"].setdefault("level", os.getenv("LOG_LEVEL", "INFO"))
    return settings
