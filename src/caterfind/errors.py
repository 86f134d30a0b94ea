"""Exceptions raised by the calendar subsystem."""


class CaterfindError(Exception):
    """Base class for all caterfind errors."""

    pass


class ValidationError(CaterfindError):
    """A required field is missing. The message stays until corrected."""

    pass


class PastDateError(CaterfindError):
    """Interaction with a date before today was blocked."""

    pass


class NetworkError(CaterfindError):
    """A remote load or write failed."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code
