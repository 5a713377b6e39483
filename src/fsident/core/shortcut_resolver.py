"""
Shortcut resolution for Windows shell link (.lnk) files.

Resolution is best-effort: a shortcut that cannot be read or parsed, or
that carries no local base path, has no target. Callers skip such entries
rather than indexing them as redirects.
"""

import logging
import os
import sys
from dataclasses import dataclass
from pathlib import Path, PurePath, PureWindowsPath
from typing import Any

import LnkParse3

logger = logging.getLogger(__name__)

SHORTCUT_EXTENSION = ".lnk"

# ShellLinkHeader: HeaderSize (0x4C, little endian) followed by LinkCLSID
_HEADER_SIZE = b"\x4c\x00\x00\x00"
_LINK_CLSID = bytes.fromhex("0114020000000000c000000000000046")
_HEADER_PREFIX_LEN = len(_HEADER_SIZE) + len(_LINK_CLSID)


@dataclass(frozen=True)
class LinkInfoPaths:
    """
    The two optional base-path fields of a shortcut's LinkInfo structure.

    Attributes:
        local_base_path: Base path in the system code page
        local_base_path_unicode: Base path stored as UTF-16
    """

    local_base_path: str | None = None
    local_base_path_unicode: str | None = None

    @classmethod
    def from_link_info(cls, link_info: dict[str, Any]) -> "LinkInfoPaths":
        return cls(
            local_base_path=link_info.get("local_base_path") or None,
            local_base_path_unicode=link_info.get("local_base_path_unicode") or None,
        )

    def preferred(self) -> str | None:
        """Local base path first, then the Unicode variant."""
        if self.local_base_path:
            return self.local_base_path
        if self.local_base_path_unicode:
            return self.local_base_path_unicode
        return None


@dataclass(frozen=True)
class ShortcutTarget:
    """
    Resolved destination of a shortcut file.

    Attributes:
        source_path: Path of the shortcut file itself
        target_path: Destination, or None if the shortcut could not be resolved
    """

    source_path: Path
    target_path: PurePath | None = None

    @property
    def is_resolved(self) -> bool:
        return self.target_path is not None


def is_indirection_file(path: str | os.PathLike) -> bool:
    """True when the path has the shortcut extension (case-insensitive)."""
    return PurePath(path).suffix.lower() == SHORTCUT_EXTENSION


def _native_target(target: str) -> PurePath:
    if sys.platform == "win32":
        return Path(target)
    return PureWindowsPath(target)


def read_link_info_paths(path: str | os.PathLike) -> LinkInfoPaths | None:
    """
    Parse a shortcut file and return its LinkInfo base paths.

    Args:
        path: Path to the shortcut file

    Returns:
        LinkInfoPaths (possibly with both fields empty), or None if the file
        cannot be read or is not a valid shell link
    """
    try:
        with open(path, "rb") as f:
            header = f.read(_HEADER_PREFIX_LEN)
            if header != _HEADER_SIZE + _LINK_CLSID:
                logger.debug(f"Not a shell link file: {path}")
                return None
            data = header + f.read()
    except OSError as e:
        logger.debug(f"Cannot read shortcut {path}: {e}")
        return None

    try:
        parsed = LnkParse3.lnk_file(indata=data).get_json()
    except Exception as e:
        # LnkParse3 raises assorted struct/decode errors on truncated input
        logger.debug(f"Cannot parse shortcut {path}: {e}")
        return None

    link_info = parsed.get("link_info") or {}
    return LinkInfoPaths.from_link_info(link_info)


def resolve(path: str | os.PathLike) -> ShortcutTarget:
    """Resolve a shortcut into a ShortcutTarget; never raises for bad input."""
    source_path = Path(path)
    paths = read_link_info_paths(source_path)
    if paths is None:
        return ShortcutTarget(source_path=source_path)

    target = paths.preferred()
    if target is None:
        logger.debug(f"Shortcut has no local base path: {source_path}")
        return ShortcutTarget(source_path=source_path)

    return ShortcutTarget(source_path=source_path, target_path=_native_target(target))


def resolve_target(path: str | os.PathLike) -> PurePath | None:
    """Destination of a shortcut, or None when it cannot be resolved."""
    return resolve(path).target_path
