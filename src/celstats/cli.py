from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

import polars as pl

from celstats.core.errors import RewardsError
from celstats.io.config import RewardsSettings
from celstats.io.dataset import RunSummary, WeeklyDataset, process_all
from celstats.io.errors import IoError
from celstats.io.paths import discover_week_keys
from celstats.io.read import load_report, portfolio_frame

logger = logging.getLogger("celstats")


def _configure_logging(level: str) -> None:
    """Console logging in the "[INFO] message" style used by the CLI output."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="[%(levelname)s] %(message)s",
        stream=sys.stderr,
        force=True,
    )


def _load_settings(config: str) -> RewardsSettings:
    return RewardsSettings.load(config or None)


def _print_summary(summary: RunSummary) -> None:
    mode = "debug" if summary.debug else "full"
    print(
        f"week={summary.key} mode={mode} rows={summary.rows} coins={summary.coins} "
        f"warnings={summary.warnings}"
    )
    for path in summary.outputs:
        print(f"  wrote {path}")


def _cmd_process(argv: list[str]) -> int:
    p = argparse.ArgumentParser(
        prog="process",
        description="Aggregate a weekly rewards extract into a report JSON.",
    )
    which = p.add_mutually_exclusive_group()
    which.add_argument("--week", type=str, default="", help="Week key (default: latest found).")
    which.add_argument("--all", action="store_true", help="Process every week found in data_dir.")
    p.add_argument(
        "--debug",
        action="store_true",
        help="Process only the first debug_row_limit rows and write to debug_dir.",
    )
    p.add_argument("--limit", type=int, default=None, help="Row cap (implies --debug).")
    p.add_argument("--config", type=str, default="", help="Path to a celstats TOML file.")
    args = p.parse_args(argv)
    if args.limit is not None and args.limit < 1:
        p.error("--limit must be >= 1")

    settings = _load_settings(args.config)
    _configure_logging(settings.log_level)

    if args.all:
        if args.debug or args.limit is not None:
            p.error("--all cannot be combined with --debug/--limit")
        logger.info("Processing all CSV files.")
        for summary in process_all(settings):
            _print_summary(summary)
        return 0

    key = args.week
    if not key:
        keys = discover_week_keys(settings)
        if not keys:
            raise IoError(f"no extracts found in {settings.data_dir!r}; pass --week")
        key = keys[-1]
    summary = WeeklyDataset(settings, key).process(debug=args.debug, limit=args.limit)
    _print_summary(summary)
    return 0


def _cmd_show_report(argv: list[str]) -> int:
    p = argparse.ArgumentParser(prog="show-report", description="Show a report's portfolio head.")
    p.add_argument("--report", type=str, required=True, help="Path to a report JSON.")
    p.add_argument("--n", type=int, default=10, help="Rows to display.")
    args = p.parse_args(argv)

    report = load_report(str(Path(args.report)))
    with pl.Config(tbl_rows=args.n):
        print(portfolio_frame(report).head(args.n))
    for name, value in report.stats.model_dump(by_alias=True).items():
        print(f"{name}: {value}")
    return 0


def build_argparser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="celstats", description="Weekly rewards aggregation CLI.")
    sub = p.add_subparsers(dest="cmd", required=True)

    sub.add_parser("process")
    sub.add_parser("show-report")
    return p


def main(argv: list[str] | None = None) -> None:
    argv = list(sys.argv[1:] if argv is None else argv)
    if not argv:
        build_argparser().print_help()
        return
    cmd, rest = argv[0], argv[1:]
    try:
        if cmd == "process":
            code = _cmd_process(rest)
        elif cmd == "show-report":
            code = _cmd_show_report(rest)
        else:
            print(f"Unknown command: {cmd}", file=sys.stderr)
            code = 2
    except (RewardsError, IoError) as exc:
        print(f"[ERROR] {exc}", file=sys.stderr)
        code = 1
    raise SystemExit(code)


if __name__ == "__main__":
    main()
