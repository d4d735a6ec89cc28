"""
celstats.io: File IO for weekly rewards extracts and reports.

## Responsibilities
- Load runtime configuration with env > TOML > defaults precedence (RewardsSettings).
- Stream extracts line by line into the engine and write reports atomically.
- Keep celstats.core as the single source of truth for schemas, constants, and engine errors.

## Public API
- RewardsSettings: configuration for layout, debug runs, and engine sizing.
- WeeklyDataset: facade bound to one week that processes its extract.
- process_all: process every week found under data_dir.

## Import DAG discipline
- Depends on stdlib, polars, pydantic, celstats.core, and celstats.engine.
- MUST NOT import the CLI.

## Examples
```python
from celstats.io import RewardsSettings, WeeklyDataset

settings = RewardsSettings(data_dir="data/raw", output_dir="out")  # doctest: +SKIP
summary = WeeklyDataset(settings, "05").process()  # doctest: +SKIP
summary.outputs  # ('out/05-rewards.json',)
```

## Notes
- Write path: tmp file → fsync → os.replace(tmp, final) on the same filesystem.
- Debug runs write under debug_dir and never replace a weekly report.
"""

from __future__ import annotations

from .config import RewardsSettings
from .dataset import RunSummary, WeeklyDataset, process_all

__all__ = [
    "RewardsSettings",
    "RunSummary",
    "WeeklyDataset",
    "process_all",
]
