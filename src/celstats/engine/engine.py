"""
RewardsEngine: the owned, explicitly passed entry point for one weekly extract.

The engine owns one AggregationState and enforces its lifecycle: any number of
``apply_line``/``apply_row`` calls, then exactly one ``finalize``. Fatal errors propagate
unchanged (DecimalFieldError gets the raw line attached); the caller decides not to emit a
report.

Examples:
    >>> from celstats.engine import RewardsEngine
    >>> eng = RewardsEngine()
    >>> eng.apply_line("id,data") is None
    True
"""

from __future__ import annotations

from collections.abc import Iterable

from celstats.core.constants import DECIMAL_PRECISION, DISTRIBUTION_SIZE
from celstats.core.errors import DecimalFieldError, EngineStateError
from celstats.core.numeric import make_context
from celstats.core.schema import RewardsReport

from .decode import DecodedRow, decode_line
from .finalize import finalize
from .reduce import apply_row
from .report import build_report
from .state import AggregationState

__all__ = [
    "RewardsEngine",
]


class RewardsEngine:
    """
    Streaming aggregator for one extract.

    Args:
        distribution_size (int): Holders kept per coin in the report.
        decimal_precision (int): Significant digits for running sums.
        state (AggregationState | None): Pre-existing (unfinalized) state to continue from.

    Attributes:
        state (AggregationState): The accumulator.
        rows_applied (int): Data rows applied so far (header excluded).
    """

    def __init__(
        self,
        *,
        distribution_size: int = DISTRIBUTION_SIZE,
        decimal_precision: int = DECIMAL_PRECISION,
        state: AggregationState | None = None,
    ) -> None:
        self.distribution_size = distribution_size
        self.state = state if state is not None else AggregationState()
        self.rows_applied = 0
        self._ctx = make_context(decimal_precision)

    def _ensure_open(self) -> None:
        if self.state.finalized:
            raise EngineStateError("cannot apply rows after finalization")

    def apply_row(self, row: DecodedRow) -> None:
        """Apply one decoded row."""
        self._ensure_open()
        apply_row(self.state, row, self._ctx)
        self.rows_applied += 1

    def apply_line(self, line: str) -> DecodedRow | None:
        """
        Decode and apply one raw line.

        Returns:
            DecodedRow | None: The applied row, or None for the header line.

        Raises:
            DecodeError: Line could not be decoded.
            DecimalFieldError: A numeric field was invalid (``.line`` holds the raw line).
            EngineStateError: Engine already finalized.
        """
        self._ensure_open()
        row = decode_line(line)
        if row is None:
            return None
        try:
            self.apply_row(row)
        except DecimalFieldError as exc:
            exc.line = line
            raise
        return row

    def apply_lines(self, lines: Iterable[str]) -> int:
        """Apply every line; returns the number of data rows applied."""
        before = self.rows_applied
        for line in lines:
            self.apply_line(line)
        return self.rows_applied - before

    def finalize(self) -> RewardsReport:
        """
        Run the finalizer and build the report.

        Raises:
            DegenerateInputError: No rows were applied.
            EngineStateError: Already finalized.
        """
        finalize(self.state, distribution_size=self.distribution_size, ctx=self._ctx)
        return build_report(self.state)
