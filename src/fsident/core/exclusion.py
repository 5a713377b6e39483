"""
Exclusion engine: hidden-path detection and per-directory ignore rules.

A file is hidden when its own name is a known OS artifact, or when any
directory on its path starts with ".". Hiddenness therefore covers the whole
subtree under a dot-directory, not just its direct children.
"""

import logging
import os
import sys
from dataclasses import dataclass
from pathlib import Path

from fsident.core.errors import CompileError
from fsident.core.gitignore_manager import (
    IGNORE_FILE_NAME,
    GitignorePattern,
    IgnoreRuleSet,
    compile,
    is_ignore_definition_file,
)

logger = logging.getLogger(__name__)

# Metadata files generated by the OS, hidden on every platform
OS_ARTIFACT_NAMES: frozenset[str] = frozenset([".DS_Store"])

# Office lock files ("~$report.docx")
WINDOWS_ARTIFACT_PREFIXES: tuple[str, ...] = ("~$",)


@dataclass(frozen=True)
class CandidateClassification:
    """Hidden/ignore-definition verdict for one entry."""

    is_hidden: bool
    is_ignore_definition: bool


def is_os_artifact(name: str, platform: str | None = None) -> bool:
    """True if a file name is an OS-generated artifact on the given platform."""
    if platform is None:
        platform = sys.platform

    if name in OS_ARTIFACT_NAMES:
        return True
    if platform == "win32" and name.startswith(WINDOWS_ARTIFACT_PREFIXES):
        return True
    return False


def _is_dot_name(name: str) -> bool:
    return name.startswith(".") and name not in (".", "..")


def is_hidden(path: str | os.PathLike) -> bool:
    """
    Check if a path is hidden.

    Args:
        path: Path to check

    Returns:
        True if the path is a file with an OS-artifact name, or if the path
        or any of its ancestors is a directory whose name starts with "."
    """
    path = Path(path)

    if is_os_artifact(path.name) and path.is_file():
        return True

    for ancestor in (path, *path.parents):
        if _is_dot_name(ancestor.name) and ancestor.is_dir():
            return True

    return False


def classify(path: str | os.PathLike) -> CandidateClassification:
    return CandidateClassification(
        is_hidden=is_hidden(path),
        is_ignore_definition=is_ignore_definition_file(path),
    )


class ExclusionEngine:
    """
    Holds the compiled ignore rule sets of one traversal.

    Rule sets are loaded as .gitignore files are discovered and discarded
    when traversal of their subtree ends. An engine belongs to a single
    traversal; the rule sets it hands out are immutable.
    """

    def __init__(self, case_sensitive: bool | None = None):
        """
        Initialize the ExclusionEngine.

        Args:
            case_sensitive: Override case sensitivity (None = auto-detect from platform)
        """
        self._case_sensitive = case_sensitive
        self._rule_sets: dict[Path, IgnoreRuleSet] = {}

    @property
    def rule_sets(self) -> list[IgnoreRuleSet]:
        """Return the active rule sets, shallowest scope first."""
        return sorted(self._rule_sets.values(), key=lambda rs: len(rs.scope_dir.parts))

    def load(self, ignore_file: str | os.PathLike) -> IgnoreRuleSet | None:
        """
        Compile an ignore file and activate its rules.

        A CompileError is logged and leaves the directory without rules.

        Returns:
            The new rule set, or None if the file could not be compiled
        """
        try:
            rule_set = compile(ignore_file, case_sensitive=self._case_sensitive)
        except CompileError as e:
            logger.warning(f"No ignore rules for {ignore_file}: {e}")
            return None

        self._rule_sets[rule_set.scope_dir] = rule_set
        return rule_set

    def load_for_path(
        self, path: str | os.PathLike, root: str | os.PathLike | None = None
    ) -> int:
        """
        Load the .gitignore files of every directory above a path.

        Args:
            path: Path being checked
            root: Topmost directory to look in (None = filesystem root)

        Returns:
            Number of new rule sets loaded
        """
        path = Path(path).absolute()
        root_dir = Path(root).absolute() if root is not None else None

        loaded = 0
        for directory in path.parents:
            candidate = directory / IGNORE_FILE_NAME
            if directory not in self._rule_sets and candidate.is_file():
                if self.load(candidate) is not None:
                    loaded += 1
            if directory == root_dir:
                break

        return loaded

    def discard(self, scope_dir: str | os.PathLike) -> None:
        """Drop the rules scoped to a directory once its subtree is done."""
        self._rule_sets.pop(Path(scope_dir).absolute(), None)

    def deciding_rule(
        self, path: str | os.PathLike, is_dir: bool = False
    ) -> tuple[IgnoreRuleSet, GitignorePattern] | None:
        """
        Find the rule that decides whether a path is ignored.

        Deeper .gitignore files take precedence: rule sets are consulted from
        the deepest scope upwards and the first one with a matching pattern
        decides, so a nested negation re-includes what a parent excludes.

        Returns:
            (rule set, pattern) of the deciding rule, or None if nothing matches
        """
        path = Path(path).absolute()
        for rule_set in reversed(self.rule_sets):
            if not rule_set.applies_to(path):
                continue
            pattern = rule_set.deciding_pattern(path, is_dir=is_dir)
            if pattern is not None:
                return rule_set, pattern
        return None

    def is_ignored(self, path: str | os.PathLike, is_dir: bool = False) -> bool:
        """True if the deciding rule for the path excludes it."""
        rule = self.deciding_rule(path, is_dir=is_dir)
        return rule is not None and not rule[1].negation

    def classify(self, path: str | os.PathLike) -> CandidateClassification:
        return classify(path)

    def should_skip(self, path: str | os.PathLike, is_dir: bool = False) -> bool:
        """True if a crawler should not index (or descend into) the path."""
        return is_hidden(path) or self.is_ignored(path, is_dir=is_dir)
