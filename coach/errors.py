"""
Error types raised by Language Coach services.

Plan generation never raises for bad model output (it degrades to a
fallback plan); the narrower operations raise one of these so the UI can
show a short message and become idle again.
"""

from typing import Optional


class CoachError(Exception):
    """Base class for all errors surfaced to the UI."""


class MissingCredentialError(CoachError):
    """No API key configured. Raised before any request is built."""

    def __init__(self, message: str = "Add your API key to generate a custom plan.") -> None:
        super().__init__(message)


class RequestFailedError(CoachError):
    """Non-success HTTP status or transport failure from an endpoint."""

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class EmptyResponseError(CoachError):
    def __init__(self, message: str = "Model response was empty. Check the model and try again.") -> None:
        super().__init__(message)


class ParseError(CoachError):
    """Model output could not be coerced into the expected JSON shape."""


class EmptyResultError(CoachError):
    """Parsing succeeded but produced nothing usable."""


class StorageError(CoachError):
    """A local store read or write failed."""


class BusyError(CoachError):
    def __init__(self, action: str) -> None:
        super().__init__(f"'{action}' is already running.")
        self.action = action
