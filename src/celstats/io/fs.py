"""
Filesystem helpers for celstats.io (local files only).

Responsibilities
- Provide a minimal stdlib-only abstraction for the filesystem operations used by celstats.io:
  existence checks, directory creation, safe write handles, and atomic renames.
- Establish clear semantics for the atomic write path: tmp write → flush/fsync → atomic rename.

Notes
- Atomicity via os.replace is guaranteed only when src and dst reside on the same filesystem.
- All helpers are synchronous; the engine is single-writer by construction.
"""

from __future__ import annotations

import os
from collections.abc import Iterator
from contextlib import contextmanager
from typing import BinaryIO


def exists(path: str) -> bool:
    """
    Check whether a path exists.

    Args:
        path (str): Filesystem path.

    Returns:
        bool: True if the path exists, False otherwise.
    """
    return os.path.exists(path)


def makedirs(path: str, exist_ok: bool = True) -> None:
    """
    Create directories recursively.

    Args:
        path (str): Directory path to create.
        exist_ok (bool): Do not error if the directory already exists.
    """
    os.makedirs(path, exist_ok=exist_ok)


@contextmanager
def open_write(path: str) -> Iterator[BinaryIO]:
    """
    Open a file for binary write; flush and fsync before closing.

    Args:
        path (str): Destination path to open in write-binary mode.

    Yields:
        BinaryIO: A writable handle.

    Notes:
        Caller is responsible for the atomic os.replace of the temporary file to final path.
    """
    fh = open(path, "wb")
    try:
        yield fh
        fh.flush()
        os.fsync(fh.fileno())
    finally:
        fh.close()


def rename_atomic(src: str, dst: str) -> None:
    """
    Atomically rename src -> dst on the same filesystem.

    Notes:
        Uses os.replace, which is atomic only if src and dst reside on the same filesystem.
    """
    os.replace(src, dst)


def remove_quietly(path: str) -> None:
    """Remove a file if present; missing files and permission races are ignored."""
    try:
        os.remove(path)
    except OSError:
        pass


def listdir(path: str) -> list[str]:
    """
    List entry names in a directory (non-recursive).

    Returns:
        list[str]: Names of entries; [] if the directory does not exist.
    """
    try:
        return os.listdir(path)
    except FileNotFoundError:
        return []
