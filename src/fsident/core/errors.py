"""Exception types for path identity conversion and ignore-rule compilation."""


class ConversionError(Exception):
    """Base exception for path <-> URI conversion errors."""

    pass


class NotALocalPathError(ConversionError):
    """The URI does not address a file on the local filesystem."""

    pass


class EmptyPathError(ConversionError):
    """An empty path cannot be turned into a file URI."""

    pass


class RelativePathError(ConversionError):
    """A relative path has no file URI representation."""

    pass


class UnencodablePathError(ConversionError):
    """The path contains characters that have no byte encoding."""

    pass


class CompileError(Exception):
    """Base exception for ignore-rule compilation errors."""

    pass


class NoParentDirectoryError(CompileError):
    """The ignore file has no directory to scope its rules to.

    Rules in a .gitignore apply to the directory containing it, so a bare
    file name (or a filesystem root) cannot be compiled.
    """

    pass
