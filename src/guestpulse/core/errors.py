"""Error taxonomy for GuestPulse."""

from .constants import ErrorConstants


class GuestPulseError(Exception):
    """Base exception for pipeline failures shown to the user."""

    title = ErrorConstants.ANALYSIS_FAILED_TITLE

    def __init__(self, message: str = ErrorConstants.UNKNOWN_FAILURE):
        super().__init__(message)
        self.message = message


class InvalidFileError(GuestPulseError):
    """The upload has the wrong type or holds no valid rows."""

    title = ErrorConstants.INVALID_FILE_TITLE

    def __init__(self, message: str = ErrorConstants.NO_VALID_REVIEWS):
        super().__init__(message)


class ClassificationError(GuestPulseError):
    """A classification response was missing or malformed."""

    def __init__(self, message: str = ErrorConstants.CLASSIFICATION_FAILED):
        super().__init__(message)


class AnalysisError(GuestPulseError):
    """A summary, suggestion, topic, answer or reply response was missing or malformed."""


class UnknownError(GuestPulseError):
    """Any other failure during parsing or orchestration."""
