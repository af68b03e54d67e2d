"""Exception types raised by the notice board core."""


class NoticeBoardError(Exception):
    """Base class for all notice board errors."""


class NoticeValidationError(NoticeBoardError):
    """A client-supplied record failed validation (HTTP 400)."""

    def __init__(self, field: str, message: str) -> None:
        super().__init__(message)
        self.field = field
        self.message = message


class MissingField(NoticeValidationError):
    """A required field is absent, empty, or null."""


class InvalidLength(NoticeValidationError):
    """A text field is empty after trimming or longer than allowed."""


class PersistenceError(NoticeBoardError):
    """The backing store could not complete a read or write (HTTP 500)."""


class ConfigurationError(NoticeBoardError):
    """Required configuration is missing or malformed. Fatal at startup."""
