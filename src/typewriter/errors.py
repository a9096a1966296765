"""Exception hierarchy for typewriter."""

from typing import Optional


class TypewriterError(Exception):
    """Base class for every error raised by typewriter."""
    pass


class GoParseError(TypewriterError):
    """
    Raised when Go source cannot be parsed.

    The message is prefixed with "source:line:" when those are known,
    matching the format of the Go toolchain's own diagnostics.
    """

    def __init__(self, message: str, line: Optional[int] = None, source: Optional[str] = None):
        self.line = line
        self.source = source
        self.reason = message
        location = ""
        if source:
            location += f"{source}:"
        if line is not None:
            location += f"{line}:"
        if location:
            message = f"{location} {message}"
        super().__init__(message)


class UnsupportedTypeError(GoParseError):
    """Raised for Go types with no declaration equivalent (chan, func)."""
    pass


class ConfigError(TypewriterError):
    """Raised when the generator configuration is invalid."""
    pass


class EmitError(TypewriterError):
    """Raised when a declaration cannot be rendered."""
    pass
