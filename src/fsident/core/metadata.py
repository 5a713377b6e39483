"""
Last-modified-time access for crawl candidates.

The modification time is only a change-detection heuristic, so a missing or
unreadable value falls back to "now". That forces a re-check instead of
silently skipping a file, and never stops a traversal.
"""

import logging
import os
from collections.abc import Callable
from datetime import datetime, timedelta, timezone

logger = logging.getLogger(__name__)

_NS_PER_MS = 1_000_000
_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def utc_now() -> datetime:
    """Current instant as a timezone-aware UTC datetime."""
    return datetime.now(timezone.utc)


def modified_time(path: str | os.PathLike) -> datetime | None:
    """
    Modification time of a filesystem entry, truncated to milliseconds.

    Args:
        path: Path to the entry (symlinks are followed)

    Returns:
        Aware UTC datetime, or None if the entry is missing, its metadata is
        unreadable, or the timestamp is pre-epoch or not representable
    """
    try:
        mtime_ns = os.stat(path).st_mtime_ns
    except (OSError, ValueError) as e:
        logger.debug(f"Cannot read modification time of {path}: {e}")
        return None

    if mtime_ns < 0:
        logger.debug(f"Pre-epoch modification time for {path}: {mtime_ns}ns")
        return None

    millis = mtime_ns // _NS_PER_MS
    try:
        return _EPOCH + timedelta(milliseconds=millis)
    except OverflowError as e:
        logger.debug(f"Unrepresentable modification time for {path}: {e}")
        return None


def last_modified(
    path: str | os.PathLike, now: Callable[[], datetime] = utc_now
) -> datetime:
    """
    Last modified time of a path, or ``now()`` when it is unavailable.

    Never raises for filesystem problems.
    """
    modified = modified_time(path)
    if modified is None:
        return now()
    return modified
