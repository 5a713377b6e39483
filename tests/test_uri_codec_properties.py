"""
Property-based and example tests for the URI codec.

Uses Hypothesis for property-based testing with minimum 100 iterations.
"""

import sys
from pathlib import PurePosixPath, PureWindowsPath

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from fsident.core.errors import (
    ConversionError,
    EmptyPathError,
    NotALocalPathError,
    RelativePathError,
    UnencodablePathError,
)
from fsident.core.uri_codec import (
    FileLocation,
    path_string_to_uri,
    path_to_uri,
    to_display_string,
    uri_to_path,
    uri_to_path_string,
)


# =============================================================================
# Strategies for generating test data
# =============================================================================

def _segment(forbidden: str):
    return st.text(
        st.characters(blacklist_categories=["Cs", "Cc"], blacklist_characters=forbidden),
        min_size=1,
        max_size=12,
    )


@st.composite
def posix_paths(draw):
    """Absolute POSIX paths, including %, :, spaces, unicode and trailing slashes."""
    segments = draw(st.lists(_segment("/\x00"), min_size=0, max_size=6))
    trailing = draw(st.booleans()) and bool(segments)
    return "/" + "/".join(segments) + ("/" if trailing else "")


@st.composite
def windows_paths(draw):
    """Absolute drive-letter Windows paths without doubled separators."""
    drive = draw(st.sampled_from("CDEZcd"))
    segments = draw(st.lists(_segment("\\/\x00"), min_size=0, max_size=6))
    return f"{drive}:\\" + "\\".join(segments)


# =============================================================================
# Round-trip law
# =============================================================================

class TestRoundTrip:
    """uri_to_path(path_to_uri(p)) == p for representable paths."""

    @settings(max_examples=100)
    @given(path=posix_paths())
    def test_posix_round_trip(self, path: str):
        uri = path_string_to_uri(path, windows=False)
        assert uri_to_path_string(uri, windows=False) == path

    @settings(max_examples=100)
    @given(path=windows_paths())
    def test_windows_round_trip(self, path: str):
        uri = path_string_to_uri(path, windows=True)
        assert uri_to_path_string(uri, windows=True) == path

    @settings(max_examples=100)
    @given(path=posix_paths())
    def test_uri_is_plain_ascii_without_query_or_fragment(self, path: str):
        uri = path_string_to_uri(path, windows=False)
        assert uri.isascii()
        assert "?" not in uri
        assert "#" not in uri
        assert uri.startswith("file:///")

    @settings(max_examples=100)
    @given(path=windows_paths())
    def test_colon_is_always_escaped(self, path: str):
        uri = path_string_to_uri(path, windows=True)
        assert ":" not in uri[len("file:"):]

    def test_path_objects_round_trip(self):
        path = PureWindowsPath("C:\\Users\\me\\report 100%.docx")
        assert uri_to_path(path_to_uri(path), windows=True) == path

        posix = PurePosixPath("/home/me/notes.md")
        assert uri_to_path(path_to_uri(posix), windows=False) == posix

    def test_undecodable_posix_name_round_trips(self):
        # os.fsdecode(b"caf\xe9.txt") with a UTF-8 filesystem encoding
        path = "/tmp/caf\udce9.txt"
        uri = path_string_to_uri(path, windows=False)
        assert "%E9" in uri
        assert uri_to_path_string(uri, windows=False) == path


# =============================================================================
# Encoding examples
# =============================================================================

class TestPathToUri:
    """Concrete encodings."""

    def test_windows_drive_letter(self):
        path = PureWindowsPath("C:\\tmp\\path_to_uri\\test.txt")
        assert path_to_uri(path) == "file:///C%3A/tmp/path_to_uri/test.txt"

    def test_posix_path(self):
        assert (
            path_to_uri(PurePosixPath("/tmp/path_to_uri/test.txt"))
            == "file:///tmp/path_to_uri/test.txt"
        )
        assert (
            path_string_to_uri("/tmp/path_to_uri/test.txt", windows=False)
            == "file:///tmp/path_to_uri/test.txt"
        )

    def test_literal_percent_is_escaped(self):
        assert path_string_to_uri("/tmp/100%25", windows=False) == "file:///tmp/100%2525"

    def test_trailing_slash_is_kept(self):
        uri = path_string_to_uri("/tmp/dir/", windows=False)
        assert uri == "file:///tmp/dir/"
        assert uri_to_path_string(uri, windows=False) == "/tmp/dir/"

    def test_reserved_characters_escaped(self):
        uri = path_string_to_uri("/a b/c?d#e", windows=False)
        assert uri == "file:///a%20b/c%3Fd%23e"

    def test_posix_backslash_is_a_name_character(self):
        uri = path_string_to_uri("/tmp/a\\\\b", windows=False)
        assert uri == "file:///tmp/a%5C%5Cb"

    def test_doubled_backslashes_collapsed_on_windows(self):
        assert (
            path_string_to_uri("C:\\\\Users\\\\me\\\\\\\\file.txt", windows=True)
            == "file:///C%3A/Users/me/file.txt"
        )

    def test_unc_prefix_preserved(self):
        uri = path_string_to_uri("\\\\server\\share\\doc.txt", windows=True)
        assert uri == "file:////server/share/doc.txt"
        assert uri_to_path_string(uri, windows=True) == "\\\\server\\share\\doc.txt"

    def test_windows_drive_root(self):
        uri = path_string_to_uri("C:\\", windows=True)
        assert uri == "file:///C%3A/"
        assert uri_to_path_string(uri, windows=True) == "C:\\"

    def test_empty_path_rejected(self):
        with pytest.raises(EmptyPathError):
            path_string_to_uri("", windows=False)
        with pytest.raises(EmptyPathError):
            path_string_to_uri("", windows=True)

    @pytest.mark.parametrize(
        "path, windows",
        [
            ("relative/file.txt", False),
            ("file.txt", False),
            ("C:relative.txt", True),
            ("docs\\file.txt", True),
        ],
    )
    def test_relative_path_rejected(self, path, windows):
        with pytest.raises(RelativePathError):
            path_string_to_uri(path, windows=windows)

    def test_forward_slash_windows_path_decodes_with_backslashes(self):
        uri = path_string_to_uri("C:/tmp/a.txt", windows=True)

        assert uri == "file:///C%3A/tmp/a.txt"
        assert uri_to_path_string(uri, windows=True) == "C:\\tmp\\a.txt"
        assert uri_to_path(uri, windows=True) == PureWindowsPath("C:/tmp/a.txt")

    def test_lone_surrogate_rejected_on_posix(self):
        with pytest.raises(UnencodablePathError):
            path_string_to_uri("/a\ud800", windows=False)
        with pytest.raises(ConversionError):
            path_to_uri(PurePosixPath("/tmp/\ud800x"))

    def test_errors_share_conversion_error_base(self):
        with pytest.raises(ConversionError):
            path_string_to_uri("", windows=False)


# =============================================================================
# Decoding examples
# =============================================================================

class TestUriToPath:
    """Decoding and NotALocalPath failures."""

    def test_localhost_is_local(self):
        assert uri_to_path_string("file://localhost/tmp/x", windows=False) == "/tmp/x"

    def test_unescaped_drive_letter_accepted(self):
        assert uri_to_path_string("file:///C:/tmp/x.txt", windows=True) == "C:\\tmp\\x.txt"

    def test_windows_host_becomes_unc(self):
        assert (
            uri_to_path_string("file://server/share/x.txt", windows=True)
            == "\\\\server\\share\\x.txt"
        )

    def test_windows_flavour_returns_windows_path(self):
        path = uri_to_path("file:///C%3A/tmp/x.txt", windows=True)
        assert isinstance(path, PureWindowsPath)
        assert path == PureWindowsPath("C:\\tmp\\x.txt")

    @pytest.mark.parametrize(
        "uri",
        [
            "http://example.com/tmp/x",
            "https:///tmp/x",
            "not a uri",
            "",
            "file:relative/path",
            "file://",
            "file:///tmp/x?query=1",
            "file:///tmp/x#fragment",
            "file:///tmp/nul%00byte",
            "file://[::1/tmp/x",
            "file://remote-host/tmp/x",
        ],
    )
    def test_not_a_local_path(self, uri):
        with pytest.raises(NotALocalPathError):
            uri_to_path_string(uri, windows=False)

    def test_invalid_utf8_escape_rejected_on_windows(self):
        with pytest.raises(NotALocalPathError):
            uri_to_path_string("file:///C%3A/%FF.txt", windows=True)

    @pytest.mark.skipif(sys.platform == "win32", reason="POSIX display path")
    def test_to_display_string(self):
        uri = path_to_uri(PurePosixPath("/tmp/display me.txt"))
        assert to_display_string(uri) == "/tmp/display me.txt"

    def test_to_display_string_falls_back_to_uri(self):
        assert to_display_string("https://example.com/a") == "https://example.com/a"


class TestFileLocation:
    """FileLocation dual identity."""

    def test_from_path(self):
        location = FileLocation.from_path(PureWindowsPath("D:\\data\\a.csv"))
        assert location.native_path == "D:\\data\\a.csv"
        assert location.uri == "file:///D%3A/data/a.csv"

    def test_from_uri_canonicalizes(self):
        location = FileLocation.from_uri("file://localhost/tmp/a%20b", windows=False)
        assert location.native_path == "/tmp/a b"
        assert location.uri == "file:///tmp/a%20b"

    def test_is_immutable(self):
        location = FileLocation.from_uri("file:///tmp/a", windows=False)
        with pytest.raises(AttributeError):
            location.uri = "file:///tmp/b"
