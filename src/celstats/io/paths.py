"""
Path helpers for weekly extracts, reports, and debug outputs.

Layout
- <data_dir>/<key>-rewards.csv     weekly extract (input)
- <output_dir>/<key>-rewards.json  weekly report (output)
- <debug_dir>/debug-output.json    decoded rows captured by a debug run
- <debug_dir>/rewards-metrics.json report produced by a debug run

Notes
- A week key is any token before "-rewards.csv" (normally a zero-padded counter: "01", "02").
- Week keys sort numerically when all-digit, otherwise lexicographically after the numeric ones.
"""

from __future__ import annotations

import os
import re

from .config import RewardsSettings
from .fs import listdir

__all__ = [
    "input_path",
    "report_path",
    "debug_rows_path",
    "debug_metrics_path",
    "discover_week_keys",
]

_EXTRACT_RE = re.compile(r"^(?P<key>[A-Za-z0-9_.]+)-rewards\.csv$")


def input_path(settings: RewardsSettings, key: str) -> str:
    """Path of the extract for week `key`."""
    return os.path.join(settings.data_dir, f"{key}-rewards.csv")


def report_path(settings: RewardsSettings, key: str) -> str:
    """Path of the report for week `key`."""
    return os.path.join(settings.output_dir, f"{key}-rewards.json")


def debug_rows_path(settings: RewardsSettings) -> str:
    return os.path.join(settings.debug_dir, "debug-output.json")


def debug_metrics_path(settings: RewardsSettings) -> str:
    return os.path.join(settings.debug_dir, "rewards-metrics.json")


def _key_order(key: str) -> tuple[int, int, str]:
    if key.isdigit():
        return 0, int(key), key
    return 1, 0, key


def discover_week_keys(settings: RewardsSettings) -> list[str]:
    """
    List the week keys of all extracts present under data_dir.

    Returns:
        list[str]: Keys in ascending order (oldest week first); [] if none.
    """
    keys = []
    for name in listdir(settings.data_dir):
        m = _EXTRACT_RE.match(name)
        if m:
            keys.append(m.group("key"))
    return sorted(keys, key=_key_order)
