"""Access to the root directories a crawler should enumerate."""

from pathlib import Path

from fsident.core.config import UserSettings


def configured_roots(settings: UserSettings) -> list[Path]:
    """
    Return the configured watched paths from a settings snapshot.

    Paths are returned as configured; existence and accessibility are the
    crawler's concern.
    """
    return list(settings.filesystem_settings.watched_paths)
