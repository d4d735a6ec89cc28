"""
Dataset facade for weekly rewards extracts.

Binds RewardsSettings to a week key and drives one extract through the engine:
read lines → RewardsEngine.apply_line → finalize → write report.

Debug runs
- Stop after ``settings.debug_row_limit`` rows (or an explicit ``limit``).
- Capture the decoded rows keyed by account id.
- Write ``debug-output.json`` and ``rewards-metrics.json`` under debug_dir instead of the
  weekly report, so a partial run never replaces a full report.

Notes
- Each week is processed independently; process_all() runs one fresh engine per week.
- Fatal engine errors propagate; nothing is written for a failed week.
"""

from __future__ import annotations

import logging
from contextlib import closing
from dataclasses import dataclass
from typing import Any

from celstats.core.schema import RewardsReport
from celstats.engine import RewardsEngine

from .config import RewardsSettings
from .errors import IoConfigError, IoReadError
from .fs import exists
from .paths import (
    debug_metrics_path,
    debug_rows_path,
    discover_week_keys,
    input_path,
    report_path,
)
from .read import iter_lines
from .write import write_json, write_report

__all__ = [
    "RunSummary",
    "WeeklyDataset",
    "process_all",
]

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RunSummary:
    """
    Outcome of one weekly run.

    Attributes:
        key (str): Week key.
        rows (int): Data rows applied.
        coins (int): Coins in the report portfolio.
        warnings (int): Recoverable warnings collected (unrecognized tiers).
        debug (bool): True for a limited/debug run.
        outputs (tuple[str, ...]): Files written.
    """

    key: str
    rows: int
    coins: int
    warnings: int
    debug: bool
    outputs: tuple[str, ...]


class WeeklyDataset:
    """
    Facade bound to one week of data.

    Args:
        settings (RewardsSettings): Layout and engine configuration.
        key (str): Week key, e.g. "05".
    """

    def __init__(self, settings: RewardsSettings, key: str) -> None:
        self.settings = settings
        self.key = key

    @property
    def input_path(self) -> str:
        return input_path(self.settings, self.key)

    @property
    def report_path(self) -> str:
        return report_path(self.settings, self.key)

    def new_engine(self) -> RewardsEngine:
        return RewardsEngine(
            distribution_size=self.settings.distribution_size,
            decimal_precision=self.settings.decimal_precision,
        )

    def run(
        self, *, limit: int | None = None, capture: dict[str, Any] | None = None
    ) -> tuple[RewardsReport, RewardsEngine]:
        """
        Stream the extract through a fresh engine and finalize it, without writing.

        Args:
            limit (int | None): Stop after this many data rows.
            capture (dict[str, Any] | None): If given, decoded rows are stored here by account id.

        Returns:
            tuple[RewardsReport, RewardsEngine]: The report and the engine that produced it.

        Raises:
            IoReadError: Extract missing.
            celstats.core.errors.RewardsError: Any fatal engine error.
        """
        path = self.input_path
        if not exists(path):
            raise IoReadError(f"extract not found for week {self.key!r}: {path}")
        engine = self.new_engine()
        logger.info("Processing CSV file: %s ... Please wait a moment.", path)
        with closing(iter_lines(path)) as lines:
            for line in lines:
                row = engine.apply_line(line)
                if row is None:
                    continue
                if capture is not None:
                    capture[row.account_id] = {
                        coin: h.model_dump(mode="json", by_alias=True, exclude_none=True)
                        for coin, h in row.holdings.items()
                    }
                if limit is not None and engine.rows_applied >= limit:
                    break
        logger.info(
            "Finished processing %d rows. Now working on some summary stats.", engine.rows_applied
        )
        report = engine.finalize()
        if engine.state.warnings:
            logger.warning(
                "%d rows carried an unrecognized loyalty tier", len(engine.state.warnings)
            )
        return report, engine

    def process(self, *, debug: bool = False, limit: int | None = None) -> RunSummary:
        """
        Run the week and write its outputs.

        Args:
            debug (bool): Debug run (limited rows, outputs under debug_dir).
            limit (int | None): Row cap; implies a debug run. Defaults to
                settings.debug_row_limit when debug is set.

        Returns:
            RunSummary

        Raises:
            IoConfigError: If limit is below 1.
        """
        if limit is not None and limit < 1:
            raise IoConfigError(f"limit must be >= 1 (got {limit})")
        debug = debug or limit is not None
        if debug and limit is None:
            limit = self.settings.debug_row_limit
        if debug:
            logger.info("Running in debug mode. Processing up to %d rows.", limit)

        captured: dict[str, Any] | None = {} if debug else None
        report, engine = self.run(limit=limit, capture=captured)

        if debug:
            outputs = (
                write_json(captured, debug_rows_path(self.settings)),
                write_report(report, debug_metrics_path(self.settings)),
            )
        else:
            outputs = (write_report(report, self.report_path),)

        return RunSummary(
            key=self.key,
            rows=engine.rows_applied,
            coins=len(report.portfolio),
            warnings=len(engine.state.warnings),
            debug=debug,
            outputs=outputs,
        )


def process_all(settings: RewardsSettings) -> list[RunSummary]:
    """
    Process every extract under data_dir, oldest week first.

    Raises:
        IoReadError: If no extract is found.
    """
    keys = discover_week_keys(settings)
    if not keys:
        raise IoReadError(f"no '<key>-rewards.csv' extracts found in {settings.data_dir!r}")
    summaries = []
    for i, key in enumerate(keys):
        summaries.append(WeeklyDataset(settings, key).process())
        if i + 1 < len(keys):
            logger.info("Completed week %s, moving on to next file key: %s.", key, keys[i + 1])
    logger.info("All files processed.")
    return summaries
