"""
URI codec for filesystem paths.

Turns native paths into canonical ``file://`` URIs that the crawl queue and
search index use as opaque, stable keys, and turns those URIs back into
native paths. Supports:
- Windows drive letters (``C:`` is always written as ``C%3A``)
- Windows UNC paths and over-escaped backslashes from directory walking
- POSIX paths, including undecodable file names (surrogateescape)
- Lossless round-trips, including literal ``%`` and trailing slashes
"""

import os
import re
import sys
from dataclasses import dataclass
from pathlib import Path, PurePath, PurePosixPath, PureWindowsPath
from urllib.parse import quote, unquote, urlsplit

from fsident.core.errors import (
    ConversionError,
    EmptyPathError,
    NotALocalPathError,
    RelativePathError,
    UnencodablePathError,
)

FILE_SCHEME = "file"

# Reserved for device addressing. Everything lives in one local namespace today.
DEFAULT_HOST = ""

_WINDOWS_ABSOLUTE = re.compile(r"^([A-Za-z]:[\\/]|[\\/])")
_URI_DRIVE = re.compile(r"^/[A-Za-z]:(/|$)")


def _is_windows(windows: bool | None) -> bool:
    if windows is None:
        return sys.platform == "win32"
    return windows


def _collapse_backslashes(path_str: str) -> str:
    """
    Collapse doubled backslashes introduced by directory walking.

    A leading ``\\\\`` (UNC prefix) is kept as-is.
    """
    stripped = path_str.lstrip("\\")
    leading = len(path_str) - len(stripped)
    prefix = "\\\\" if leading >= 2 else "\\" * leading

    while "\\\\" in stripped:
        stripped = stripped.replace("\\\\", "\\")

    return prefix + stripped


def _windows_uri_path(path_str: str) -> str:
    path_str = _collapse_backslashes(path_str).replace("\\", "/")
    if not path_str.startswith("/"):
        # Drive-letter path: C:/tmp -> /C:/tmp
        path_str = "/" + path_str
    return quote(path_str, safe="/", errors="surrogatepass")


def path_string_to_uri(path_str: str, windows: bool | None = None) -> str:
    """
    Create a file URI from a native path string.

    Windows paths may use either separator, but the URI always holds forward
    slashes, so ``C:/tmp/a.txt`` comes back from ``uri_to_path_string`` as
    ``C:\\tmp\\a.txt``. The two compare equal as ``PureWindowsPath`` values.

    Args:
        path_str: Absolute native path
        windows: Encode with Windows rules (None = rules of the running platform)

    Returns:
        Canonical URI of the form ``file://<host><escaped path>``

    Raises:
        EmptyPathError: If path_str is empty
        RelativePathError: If path_str is not absolute
        UnencodablePathError: If a POSIX path holds a lone surrogate that
            surrogateescape cannot turn back into a byte
    """
    if not path_str:
        raise EmptyPathError("Cannot build a file URI from an empty path")

    if _is_windows(windows):
        if not _WINDOWS_ABSOLUTE.match(path_str):
            raise RelativePathError(f"Relative path has no file URI: {path_str!r}")
        uri_path = _windows_uri_path(path_str)
    else:
        if not path_str.startswith("/"):
            raise RelativePathError(f"Relative path has no file URI: {path_str!r}")
        try:
            uri_path = quote(path_str, safe="/", errors="surrogateescape")
        except UnicodeEncodeError as e:
            raise UnencodablePathError(f"Path has no byte encoding: {path_str!r}") from e

    return f"{FILE_SCHEME}://{DEFAULT_HOST}{uri_path}"


def path_to_uri(path: str | os.PathLike, windows: bool | None = None) -> str:
    """
    Create a file URI from a path.

    ``PureWindowsPath`` and ``PurePosixPath`` values carry their own flavour,
    so a Windows path can be encoded on any platform.
    """
    if windows is None and isinstance(path, PurePath):
        windows = isinstance(path, PureWindowsPath)
    return path_string_to_uri(os.fsdecode(path), windows=windows)


def uri_to_path_string(uri: str, windows: bool | None = None) -> str:
    """
    Convert a file URI back into the native path string it was built from.

    Args:
        uri: URI to convert
        windows: Decode with Windows rules (None = rules of the running platform)

    Returns:
        Native path string

    Raises:
        NotALocalPathError: If the URI does not address a local file
    """
    windows = _is_windows(windows)

    try:
        parts = urlsplit(uri)
    except ValueError as e:
        raise NotALocalPathError(f"Invalid URI {uri!r}: {e}") from e

    if parts.scheme.lower() != FILE_SCHEME:
        raise NotALocalPathError(f"Not a file URI: {uri!r}")

    # '?' and '#' are always escaped in paths, so raw ones mean a query or fragment
    if "?" in uri or "#" in uri:
        raise NotALocalPathError(f"File URI has a query or fragment: {uri!r}")

    host = parts.netloc
    if host.lower() == "localhost":
        host = ""
    if host and not windows:
        raise NotALocalPathError(f"File URI points at remote host {host!r}: {uri!r}")

    if not parts.path.startswith("/"):
        raise NotALocalPathError(f"File URI has no absolute path: {uri!r}")

    try:
        decoded = unquote(
            parts.path, errors="surrogatepass" if windows else "surrogateescape"
        )
    except UnicodeDecodeError as e:
        raise NotALocalPathError(f"File URI has invalid escapes: {uri!r}") from e

    if "\x00" in decoded:
        raise NotALocalPathError(f"File URI contains a NUL byte: {uri!r}")

    if not windows:
        return decoded

    if host:
        return "\\\\" + host + decoded.replace("/", "\\")
    if _URI_DRIVE.match(decoded):
        decoded = decoded[1:]
    return decoded.replace("/", "\\")


def uri_to_path(uri: str, windows: bool | None = None) -> PurePath:
    """
    Convert a file URI into a path object.

    Returns a concrete ``Path`` when the URI flavour matches the running
    platform, otherwise the matching pure path class.
    """
    windows = _is_windows(windows)
    path_str = uri_to_path_string(uri, windows=windows)

    native_windows = sys.platform == "win32"
    if windows == native_windows:
        return Path(path_str)
    return PureWindowsPath(path_str) if windows else PurePosixPath(path_str)


def to_display_string(uri: str) -> str:
    """Native path for a URI when it addresses a local file, otherwise the URI."""
    try:
        return uri_to_path_string(uri)
    except ConversionError:
        return uri


@dataclass(frozen=True)
class FileLocation:
    """
    Dual identity of one filesystem entry.

    Attributes:
        native_path: Platform path string
        uri: Canonical file URI, used downstream as the persisted key
    """

    native_path: str
    uri: str

    @classmethod
    def from_path(cls, path: str | os.PathLike, windows: bool | None = None) -> "FileLocation":
        return cls(native_path=os.fsdecode(path), uri=path_to_uri(path, windows=windows))

    @classmethod
    def from_uri(cls, uri: str, windows: bool | None = None) -> "FileLocation":
        """Build from a URI, re-encoding it so equivalent URIs share one key."""
        native_path = uri_to_path_string(uri, windows=windows)
        return cls(
            native_path=native_path,
            uri=path_string_to_uri(native_path, windows=windows),
        )
