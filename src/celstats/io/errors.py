"""
Custom exceptions for the celstats.io module.

Purpose
- Provide IO-layer specific error types that map cleanly to responsibilities in celstats.io.
- Keep celstats.core as the source of truth for decode/arithmetic/degenerate-input errors
  (see celstats.core.errors).

Source of truth and boundaries
- celstats.core.errors.RewardsError subclasses are raised by the engine.
- celstats.io raises Io* errors for filesystem/config concerns:
  - IoConfigError: invalid or unsupported configuration.
  - IoReadError: extract or report missing or unreadable.
  - IoWriteError: atomic write path failed (tmp write/rename).

Notes
- These exceptions do not perform any IO and are stdlib-only.
"""

from __future__ import annotations


class IoError(Exception):
    """
    Base class for IO-related errors in celstats.io.

    Notes:
        Use this as a catch-all for IO-layer failures, distinct from celstats.core errors.
    """


class IoConfigError(IoError):
    """
    Raised when IO configuration is invalid or unsupported.

    Examples:
        - Non-positive distribution_size or decimal_precision
        - Unknown log level
    """


class IoReadError(IoError):
    """
    Raised when an input extract or a written report cannot be read.

    Notes:
        A report that exists but does not validate against RewardsReport also raises this.
    """


class IoWriteError(IoError):
    """
    Raised when a write operation fails to complete atomically.

    Notes:
        The write path is tmp file → os.replace(tmp, final). Failures at any step surface
        as IoWriteError (with best-effort cleanup of tmp files).
    """
