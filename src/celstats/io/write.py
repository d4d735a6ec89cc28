"""
Atomic writers for reports and debug outputs.

Overview
- write_json(): serialize → write "<final>.tmp" → fsync → os.replace(tmp, final).
- write_report(): dumps a RewardsReport with its camelCase wire names via write_json.

Notes
- Single-writer semantics; no inter-process locking.
- A failed write leaves any previous file at the final path untouched.
"""

from __future__ import annotations

import logging
import os
from typing import Any

from celstats.core.schema import RewardsReport
from celstats.core.serde import json_dumps_pretty

from .errors import IoWriteError
from .fs import makedirs, open_write, remove_quietly, rename_atomic

__all__ = [
    "write_json",
    "write_report",
]

logger = logging.getLogger(__name__)


def write_json(obj: Any, path: str) -> str:
    """
    Write obj as indented JSON to path atomically.

    Args:
        obj (Any): JSON-serializable object.
        path (str): Final destination.

    Returns:
        str: The final path.

    Raises:
        IoWriteError: If the directory, tmp write, or rename fails.
    """
    tmp_path = path + ".tmp"
    try:
        parent = os.path.dirname(path)
        if parent:
            makedirs(parent, exist_ok=True)
        payload = json_dumps_pretty(obj).encode("utf-8")
        with open_write(tmp_path) as fh:
            fh.write(payload)
        rename_atomic(tmp_path, path)
    except OSError as exc:
        remove_quietly(tmp_path)
        raise IoWriteError(f"failed to write {path!r}: {exc}") from exc
    logger.info("Writing result to file: %s", path)
    return path


def write_report(report: RewardsReport, path: str) -> str:
    """Write a report document atomically; returns the final path."""
    return write_json(report.model_dump(mode="json", by_alias=True), path)
