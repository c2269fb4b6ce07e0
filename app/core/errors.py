"""
Error types raised while handling event submissions
"""

from typing import Optional, Sequence

USAGE_EXAMPLE = "Title | YYYY-MM-DD HH:mm | 60 | https://link | public"

ACCEPTED_TIME_EXAMPLES = (
    "2025-12-15 19:00",
    "2025-12-15T19:00",
    "15.12.2025 19:00",
)


class EventBotError(Exception):
    """Base class for user-facing errors; ``error_code`` tags the variant."""

    error_code = "error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class TimeParseError(EventBotError):
    """The text matched none of the accepted date/time layouts."""

    error_code = "time_parse_error"

    def __init__(self, text: str, accepted_formats: Sequence[str] = ACCEPTED_TIME_EXAMPLES):
        self.text = text
        self.accepted_formats = list(accepted_formats)
        super().__init__(
            f'Could not recognise date/time "{text}". '
            f"Try one of: {' or '.join(self.accepted_formats)}"
        )


class SubmissionFormatError(EventBotError):
    """The submission line is malformed; never says which field failed."""

    error_code = "submission_format_error"

    def __init__(self, message: Optional[str] = None):
        super().__init__(message or f"Format: {USAGE_EXAMPLE}")


class StorageError(EventBotError):
    """Wraps a persistence failure so the presentation layer can report it."""

    error_code = "storage_error"

    def __init__(self, cause: Optional[BaseException] = None):
        self.cause = cause
        super().__init__("Could not save the event, please try again later.")
