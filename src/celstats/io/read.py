"""
Read utilities for extracts and written reports.

Overview
- iter_lines(): streams an extract line by line (terminators stripped, blank lines skipped).
- load_report(): loads a written report back into the RewardsReport model.
- portfolio_frame(): tabulates a report's portfolio as a Polars DataFrame for inspection.

Import DAG discipline
- Depends on stdlib, polars, pydantic, celstats.core, and celstats.io helpers.
"""

from __future__ import annotations

from collections.abc import Iterator

import polars as pl
from pydantic import ValidationError

from celstats.core.errors import DecodeError
from celstats.core.schema import RewardsReport

from .errors import IoReadError

__all__ = [
    "iter_lines",
    "load_report",
    "portfolio_frame",
]


def iter_lines(path: str) -> Iterator[str]:
    """
    Yield the lines of a text file in order.

    Args:
        path (str): Extract path.

    Yields:
        str: Each non-blank line without its terminator.

    Raises:
        IoReadError: If the file does not exist or cannot be opened.
        DecodeError: If a line is not valid UTF-8.
    """
    try:
        fh = open(path, "rb")
    except OSError as exc:
        raise IoReadError(f"cannot open extract {path!r}: {exc}") from exc
    with fh:
        for lineno, raw in enumerate(fh, start=1):
            try:
                text = raw.decode("utf-8")
            except UnicodeDecodeError as exc:
                shown = raw.decode("utf-8", errors="replace").rstrip("\r\n")
                raise DecodeError(
                    f"line {lineno} of {path!r} is not valid UTF-8: {exc.reason}", line=shown
                ) from exc
            line = text.rstrip("\r\n")
            if line.strip():
                yield line


def load_report(path: str) -> RewardsReport:
    """
    Load and validate a report written by celstats.io.write.write_report.

    Raises:
        IoReadError: If the file is missing or does not match RewardsReport.
    """
    try:
        with open(path, encoding="utf-8") as fh:
            text = fh.read()
    except OSError as exc:
        raise IoReadError(f"cannot read report {path!r}: {exc}") from exc
    try:
        return RewardsReport.model_validate_json(text)
    except ValidationError as exc:
        raise IoReadError(f"report {path!r} is not a valid rewards report: {exc}") from exc


def portfolio_frame(report: RewardsReport) -> pl.DataFrame:
    """
    Tabulate the report portfolio, most-held coins first.

    Returns:
        pl.DataFrame: Columns coin, holders (Int64), total, total_earn_in_cel (Int64),
        total_interest_in_coin, total_interest_in_usd. Ties on holders are ordered by coin.
    """
    rows = [
        {
            "coin": coin,
            "holders": e.number_of_users_holding,
            "total": e.total,
            "total_earn_in_cel": e.total_earn_in_cel,
            "total_interest_in_coin": e.total_interest_in_coin,
            "total_interest_in_usd": e.total_interest_in_usd,
        }
        for coin, e in report.portfolio.items()
    ]
    schema = {
        "coin": pl.String,
        "holders": pl.String,
        "total": pl.String,
        "total_earn_in_cel": pl.String,
        "total_interest_in_coin": pl.String,
        "total_interest_in_usd": pl.String,
    }
    df = pl.DataFrame(rows, schema=schema)
    return df.with_columns(
        pl.col("holders").cast(pl.Int64),
        pl.col("total_earn_in_cel").cast(pl.Int64),
    ).sort(["holders", "coin"], descending=[True, False])
