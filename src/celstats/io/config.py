"""
Configuration for the celstats.io module and the CLI.

Defines RewardsSettings, a frozen dataclass carrying runtime configuration for weekly runs.
Defaults are sourced from celstats.core.constants (the single source of truth) and align
with a local file-based layout of one extract and one report per week.

Source of truth
- celstats.core.constants.DISTRIBUTION_SIZE, DECIMAL_PRECISION, DEBUG_ROW_LIMIT
- File layout semantics live in celstats.io.paths

Import DAG discipline
- Depends only on stdlib, celstats.core.constants, and celstats.io.errors.
- Does not import celstats.engine or the CLI.
"""

from __future__ import annotations

import logging
import os
import tomllib
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any

from celstats.core.constants import DEBUG_ROW_LIMIT as CORE_DEBUG_ROW_LIMIT
from celstats.core.constants import DECIMAL_PRECISION as CORE_DECIMAL_PRECISION
from celstats.core.constants import DISTRIBUTION_SIZE as CORE_DISTRIBUTION_SIZE

from .errors import IoConfigError

logger = logging.getLogger(__name__)

LOG_LEVELS = ("debug", "info", "warning", "error")

# Fewer significant digits than this would round the running sums of realistic balances.
MIN_DECIMAL_PRECISION = 28

_INT_FIELDS = ("debug_row_limit", "distribution_size", "decimal_precision")
_STR_FIELDS = ("data_dir", "output_dir", "debug_dir")


@dataclass(frozen=True)
class RewardsSettings:
    """
    Runtime settings for weekly runs.

    Attributes:
        data_dir (str): Directory holding ``<key>-rewards.csv`` extracts.
        output_dir (str): Directory receiving ``<key>-rewards.json`` reports.
        debug_dir (str): Directory receiving debug-mode outputs.
        debug_row_limit (int): Rows processed before a debug run stops (>=1).
        distribution_size (int): Holders kept per coin in the report (>=1).
        decimal_precision (int): Significant digits for running sums (>=28).
        log_level (str): One of "debug", "info", "warning", "error".

    Examples:
        >>> from celstats.io.config import RewardsSettings
        >>> RewardsSettings(data_dir="csv", output_dir="out")  # doctest: +ELLIPSIS
        RewardsSettings(...)
    """

    data_dir: str = "data/raw"
    output_dir: str = "out"
    debug_dir: str = "out/debug"
    debug_row_limit: int = CORE_DEBUG_ROW_LIMIT
    distribution_size: int = CORE_DISTRIBUTION_SIZE
    decimal_precision: int = CORE_DECIMAL_PRECISION
    log_level: str = "info"

    def validate(self) -> RewardsSettings:
        """
        Check value ranges.

        Returns:
            RewardsSettings: self, for chaining.

        Raises:
            IoConfigError: If a size/precision is out of range or the log level is unknown.
        """
        for name in _INT_FIELDS:
            if getattr(self, name) < 1:
                raise IoConfigError(f"{name} must be >= 1 (got {getattr(self, name)})")
        if self.decimal_precision < MIN_DECIMAL_PRECISION:
            raise IoConfigError(
                f"decimal_precision must be >= {MIN_DECIMAL_PRECISION} (got {self.decimal_precision})"
            )
        if self.log_level not in LOG_LEVELS:
            raise IoConfigError(f"log_level must be one of {LOG_LEVELS} (got {self.log_level!r})")
        return self

    # Configuration loaders (env/TOML) with precedence: env > TOML > defaults.

    @classmethod
    def _apply_mapping(cls, base: RewardsSettings, cfg: dict[str, Any] | None) -> RewardsSettings:
        """Apply a loose config mapping onto RewardsSettings, returning a new instance."""
        if not isinstance(cfg, dict):
            return base

        s = base

        for name in _STR_FIELDS:
            if name in cfg and isinstance(cfg[name], str) and cfg[name]:
                s = replace(s, **{name: cfg[name]})

        for name in _INT_FIELDS:
            if name not in cfg:
                continue
            try:
                s = replace(s, **{name: int(cfg[name])})
            except (TypeError, ValueError):
                logger.warning("ignoring non-integer %s=%r", name, cfg[name])

        if "log_level" in cfg and isinstance(cfg["log_level"], str):
            level = cfg["log_level"].strip().lower()
            if level == "warn":
                level = "warning"
            if level in LOG_LEVELS:
                s = replace(s, log_level=level)
            else:
                logger.warning("ignoring unknown log_level=%r", cfg["log_level"])

        return s

    @classmethod
    def from_env(
        cls, base: RewardsSettings | None = None, prefix: str = "CELSTATS_"
    ) -> RewardsSettings:
        """
        Build RewardsSettings from environment variables. Precedence is env > base > defaults.

        Recognized variables:
            - CELSTATS_DATA_DIR
            - CELSTATS_OUTPUT_DIR
            - CELSTATS_DEBUG_DIR
            - CELSTATS_DEBUG_ROW_LIMIT
            - CELSTATS_DISTRIBUTION_SIZE
            - CELSTATS_DECIMAL_PRECISION
            - CELSTATS_LOG_LEVEL (debug/info/warn/warning/error)
        """
        s = base or cls()
        mapping: dict[str, Any] = {}
        for name in (*_STR_FIELDS, *_INT_FIELDS, "log_level"):
            v = os.getenv(prefix + name.upper())
            if v:
                mapping[name] = v
        return cls._apply_mapping(s, mapping)

    @classmethod
    def from_toml(cls, path: str | os.PathLike[str] | None = None) -> RewardsSettings:
        """
        Build RewardsSettings from a TOML file.

        Search order when `path` is None:
            1) ./celstats.toml (with either top-level [rewards] or direct keys)
            2) ./pyproject.toml under [tool.celstats]

        Returns defaults if no file is present.

        Raises:
            IoConfigError: If an explicit `path` does not exist or is not valid TOML.
        """
        s = cls()

        cand: list[Path] = []
        if path is not None:
            p = Path(path)
            if not p.exists():
                raise IoConfigError(f"config file not found: {p}")
            cand.append(p)
        else:
            cand.append(Path.cwd() / "celstats.toml")
            cand.append(Path.cwd() / "pyproject.toml")

        cfg: dict[str, Any] | None = None
        for p in cand:
            if not p.exists():
                continue
            try:
                with p.open("rb") as fh:
                    data = tomllib.load(fh)
            except tomllib.TOMLDecodeError as exc:
                if path is not None:
                    raise IoConfigError(f"invalid TOML in {p}: {exc}") from exc
                logger.warning("skipping unreadable config %s: %s", p, exc)
                continue
            if p.name == "pyproject.toml":
                tool = data.get("tool", {})
                cfg = tool.get("celstats") if isinstance(tool, dict) else None
            elif isinstance(data.get("rewards"), dict):
                cfg = data["rewards"]
            else:
                cfg = data
            if cfg:
                break

        return cls._apply_mapping(s, cfg)

    @classmethod
    def load(cls, path: str | os.PathLike[str] | None = None) -> RewardsSettings:
        """
        Load RewardsSettings applying precedence: environment > TOML > defaults.

        Args:
            path: Optional explicit TOML path. If None, search defaults (celstats.toml,
                pyproject.toml).

        Returns:
            RewardsSettings: Validated settings.
        """
        s = cls.from_toml(path)
        s = cls.from_env(base=s)
        return s.validate()
