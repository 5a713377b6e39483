"""
Core Layer - URI codec, metadata access, shortcut resolution, exclusion rules
and configuration.
"""

from fsident.core.config import (
    FilesystemSettings,
    LoggingConfig,
    UserSettings,
    configure_logging,
    load_settings,
)
from fsident.core.directory_sources import configured_roots
from fsident.core.errors import (
    CompileError,
    ConversionError,
    EmptyPathError,
    NoParentDirectoryError,
    NotALocalPathError,
    RelativePathError,
    UnencodablePathError,
)
from fsident.core.exclusion import (
    CandidateClassification,
    ExclusionEngine,
    classify,
    is_hidden,
    is_os_artifact,
)
from fsident.core.gitignore_manager import (
    GitignorePattern,
    IgnoreRuleSet,
    compile,
    is_ignore_definition_file,
)
from fsident.core.metadata import last_modified, modified_time, utc_now
from fsident.core.shortcut_resolver import (
    LinkInfoPaths,
    ShortcutTarget,
    is_indirection_file,
    resolve,
    resolve_target,
)
from fsident.core.uri_codec import (
    FileLocation,
    path_string_to_uri,
    path_to_uri,
    to_display_string,
    uri_to_path,
    uri_to_path_string,
)

__all__ = [
    # Config
    "FilesystemSettings",
    "LoggingConfig",
    "UserSettings",
    "configure_logging",
    "load_settings",
    "configured_roots",
    # Errors
    "ConversionError",
    "NotALocalPathError",
    "EmptyPathError",
    "RelativePathError",
    "UnencodablePathError",
    "CompileError",
    "NoParentDirectoryError",
    # URI Codec
    "FileLocation",
    "path_to_uri",
    "path_string_to_uri",
    "uri_to_path",
    "uri_to_path_string",
    "to_display_string",
    # Metadata
    "last_modified",
    "modified_time",
    "utc_now",
    # Shortcuts
    "LinkInfoPaths",
    "ShortcutTarget",
    "is_indirection_file",
    "resolve",
    "resolve_target",
    # Exclusion
    "GitignorePattern",
    "IgnoreRuleSet",
    "compile",
    "is_ignore_definition_file",
    "CandidateClassification",
    "ExclusionEngine",
    "classify",
    "is_hidden",
    "is_os_artifact",
]
