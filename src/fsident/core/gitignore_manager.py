"""
Ignore-rule compilation for fsident.

Builds one immutable rule set from one .gitignore file, scoped to the
directory containing it. Supports:
- Pattern precedence (later patterns override earlier ones)
- Negation patterns (!)
- Directory-only patterns (trailing /)
- Anchored patterns (leading /)
- Double-star globs (**)
"""

import logging
import os
import sys
from dataclasses import dataclass, field
from pathlib import Path, PurePath

import pathspec

from fsident.core.errors import NoParentDirectoryError

logger = logging.getLogger(__name__)

IGNORE_FILE_NAME = ".gitignore"


@dataclass(frozen=True)
class GitignorePattern:
    """
    A gitignore pattern line with its position in the source file.

    Attributes:
        raw: Pattern as written (e.g., "!/important.py")
        negation: True if pattern starts with ! (re-includes files)
        line_number: 1-based line in the source file
    """

    raw: str
    negation: bool
    line_number: int = 0

    @classmethod
    def parse(cls, raw_line: str, line_number: int = 0) -> "GitignorePattern":
        """
        Parse a raw gitignore line into a GitignorePattern.

        Args:
            raw_line: Raw line from .gitignore file (already stripped)
            line_number: 1-based line number in the source file

        Returns:
            Parsed GitignorePattern instance
        """
        return cls(raw=raw_line, negation=raw_line.startswith("!"), line_number=line_number)


@dataclass(frozen=True)
class IgnoreRuleSet:
    """
    Compiled exclusion rules from one .gitignore file.

    A rule set never changes once built; recompile the file to pick up edits.

    Attributes:
        scope_dir: Directory the rules apply to (with all descendants)
        source_path: The .gitignore file the rules came from
        patterns: Parsed patterns, in file order
        case_sensitive: Whether matching is case sensitive
        compiled_patterns: pathspec matcher built from the patterns, one
            pathspec pattern per entry of ``patterns``
    """

    scope_dir: Path
    source_path: Path
    patterns: tuple[GitignorePattern, ...]
    case_sensitive: bool
    compiled_patterns: pathspec.PathSpec = field(repr=False, compare=False)

    @property
    def pattern_count(self) -> int:
        return len(self.patterns)

    def applies_to(self, path: str | os.PathLike) -> bool:
        """True if the path is the scope directory or lies beneath it."""
        path = PurePath(path)
        if not path.is_absolute():
            return True
        try:
            path.relative_to(self.scope_dir)
        except ValueError:
            return False
        return True

    def _match_path(self, path: str | os.PathLike, is_dir: bool) -> str | None:
        path = PurePath(path)
        if path.is_absolute():
            try:
                path = path.relative_to(self.scope_dir)
            except ValueError:
                return None

        rel_path_str = path.as_posix()
        if rel_path_str in ("", "."):
            # The scope directory itself is never ignored by its own rules
            return None

        if is_dir:
            rel_path_str += "/"
        if not self.case_sensitive:
            rel_path_str = rel_path_str.lower()
        return rel_path_str

    def deciding_pattern(
        self, path: str | os.PathLike, is_dir: bool = False
    ) -> GitignorePattern | None:
        """
        Find the pattern that decides a path's fate.

        Args:
            path: Absolute path, or path relative to scope_dir
            is_dir: True if the path is a directory

        Returns:
            The last matching pattern (a negation re-includes the path), or
            None if no pattern matches or the path is outside scope_dir
        """
        if not self.patterns:
            return None

        rel_path_str = self._match_path(path, is_dir)
        if rel_path_str is None:
            return None

        result = self.compiled_patterns.check_file(rel_path_str)
        if result.index is None:
            return None
        return self.patterns[result.index]

    def matches(self, path: str | os.PathLike, is_dir: bool = False) -> bool:
        """
        Check if a path is ignored by these rules.

        The last matching pattern wins, so negations can re-include paths.
        Paths outside scope_dir never match.
        """
        pattern = self.deciding_pattern(path, is_dir=is_dir)
        return pattern is not None and not pattern.negation


def is_ignore_definition_file(path: str | os.PathLike) -> bool:
    """True exactly for a file named ``.gitignore`` (case-sensitive)."""
    return PurePath(path).name == IGNORE_FILE_NAME


def _default_case_sensitive() -> bool:
    # Windows is case-insensitive, POSIX is case-sensitive
    return sys.platform != "win32"


def _read_ignore_file(ignore_file: Path) -> str | None:
    if not ignore_file.exists():
        logger.debug(f"Ignore file not found: {ignore_file}")
        return None

    try:
        return ignore_file.read_text(encoding="utf-8")
    except UnicodeDecodeError as e:
        logger.warning(f"Invalid UTF-8 encoding in {ignore_file}: {e}")
    except PermissionError as e:
        logger.warning(f"Permission denied reading {ignore_file}: {e}")
    except OSError as e:
        logger.warning(f"Error reading {ignore_file}: {e}")
    return None


def compile(ignore_file_path: str | os.PathLike, case_sensitive: bool | None = None) -> IgnoreRuleSet:
    """
    Build an IgnoreRuleSet from a single .gitignore file.

    Blank lines and comments are skipped. A line that fails to compile is
    logged and skipped; it does not fail the whole file. An unreadable file
    yields a rule set with no patterns.

    Args:
        ignore_file_path: Path to the .gitignore file
        case_sensitive: Override case sensitivity (None = auto-detect from platform)

    Returns:
        Compiled rule set scoped to the file's parent directory

    Raises:
        NoParentDirectoryError: If the path has no parent directory segment
    """
    ignore_file = Path(ignore_file_path)
    if len(ignore_file.parts) < 2:
        raise NoParentDirectoryError(
            f"Ignore file has no parent directory to scope rules to: {ignore_file_path!r}"
        )

    if case_sensitive is None:
        case_sensitive = _default_case_sensitive()

    ignore_file = ignore_file.absolute()
    content = _read_ignore_file(ignore_file) or ""

    patterns: list[GitignorePattern] = []
    for line_number, line in enumerate(content.splitlines(), start=1):
        line = line.strip()

        if not line or line.startswith("#"):
            continue

        match_line = line if case_sensitive else line.lower()
        try:
            pathspec.patterns.GitWildMatchPattern(match_line)
        except ValueError as e:
            logger.warning(f"Malformed pattern '{line}' in {ignore_file}:{line_number}: {e}")
            continue

        patterns.append(GitignorePattern.parse(line, line_number))

    lines = [p.raw if case_sensitive else p.raw.lower() for p in patterns]
    rule_set = IgnoreRuleSet(
        scope_dir=ignore_file.parent,
        source_path=ignore_file,
        patterns=tuple(patterns),
        case_sensitive=case_sensitive,
        compiled_patterns=pathspec.GitIgnoreSpec.from_lines(lines),
    )

    if patterns:
        logger.debug(f"Loaded {len(patterns)} patterns from {ignore_file}")
    return rule_set
