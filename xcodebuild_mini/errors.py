"""Errors raised by the xcodebuild wrappers."""


class XcodebuildError(Exception):
    """Base class for all errors raised by this package."""


class ProcessStartError(XcodebuildError):
    """Raised when an external command cannot be started at all."""


class ArtifactError(XcodebuildError):
    """Raised when a result bundle is missing or cannot be interpreted."""


class EnumerationError(XcodebuildError):
    """Raised when test enumeration fails."""
