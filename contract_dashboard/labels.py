from __future__ import annotations

from datetime import datetime


def format_date_label(moment: datetime) -> str:
    """``Oct 5, 2025`` style date, as shown in the scan history table."""
    return f"{moment:%b} {moment.day}, {moment.year}"


def format_time_label(moment: datetime) -> str:
    """``1:45:01 AM`` style time of day."""
    hour = moment.hour % 12 or 12
    return f"{hour}:{moment:%M:%S %p}"


def format_timestamp_label(moment: datetime) -> str:
    return f"{moment.month}/{moment.day}/{moment.year}, {format_time_label(moment)}"


def format_duration_label(seconds: float) -> str:
    return f"{seconds:.2f}s"


def network_display_name(network_id: str) -> str:
    """Turn a network identifier such as ``ethereum-mainnet`` into ``Ethereum``."""
    head = (network_id or "").split("-")[0]
    return head[:1].upper() + head[1:]
