"""
Lightweight JSON serialization/deserialization utilities.

Provides `json_loads` for row payloads and `json_dumps_pretty` for report documents as thin
wrappers around the stdlib `json` module. This module is zero-IO.

Notes:
    - json_loads keeps object key order (dict insertion order). The reducer relies on it:
      the last coin of a row decides the row's loyalty tier.
    - Reports are written indented for human inspection; key order is preserved, not sorted.
"""

from __future__ import annotations

import json
from typing import Any

__all__ = [
    "json_loads",
    "json_dumps_pretty",
]


def json_loads(s: str) -> Any:
    """
    Deserialize a JSON string to Python objects using the stdlib json module.

    Args:
        s (str): JSON string to parse.

    Returns:
        Any: Decoded Python object (dict, list, str, int, float, bool, or None).

    Raises:
        json.JSONDecodeError: If s is not valid JSON (callers wrap it in DecodeError).
    """
    return json.loads(s)


def json_dumps_pretty(obj: Any) -> str:
    """Serialize obj with 2-space indentation and unicode kept as-is."""
    return json.dumps(obj, indent=2, ensure_ascii=False)
