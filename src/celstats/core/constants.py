"""
Core defaults for the rewards aggregation engine.

Defines ranking offsets, distribution bounds, header/delimiter conventions, and decimal
precision consumed by the engine and IO layers. This module is zero-IO and uses only the
Python standard library.

Notes:
    - Ranking offsets are zero-based ordinals into a descending-sorted list, so offset 10
      is the 11th largest value and is reported as "top ten".
    - Changes to DISTRIBUTION_SIZE alter the emitted report shape consumed by the dashboard.
"""

from __future__ import annotations

__all__ = [
    "HEADER_ID",
    "FIELD_DELIMITER",
    "CEL_SYMBOL",
    "RANK_OFFSETS",
    "DISTRIBUTION_SIZE",
    "DECIMAL_PRECISION",
    "DEBUG_ROW_LIMIT",
]

# First field of the extract's header line.
HEADER_ID: str = "id"

# Separates the account id from the JSON payload (first occurrence only).
FIELD_DELIMITER: str = ","

# Interest paid in this symbol counts as "earning in CEL".
CEL_SYMBOL: str = "CEL"

# Ranking level name -> zero-based offset into the descending-sorted list.
RANK_OFFSETS: dict[str, int] = {
    "rank_1": 0,
    "rank_10": 10,
    "rank_100": 100,
    "rank_1000": 1000,
    "rank_10000": 10000,
}

# Per-coin holder distributions are truncated to this many entries after ranking.
DISTRIBUTION_SIZE: int = 100

# Significant digits for running decimal sums.
DECIMAL_PRECISION: int = 50

# Rows processed in debug mode before the run stops.
DEBUG_ROW_LIMIT: int = 100
