"""Exceptions raised by the explorer.

Field validation problems are not exceptions; they live in
``FormState.errors``.
"""


class ExplorerError(Exception):
    """Base class for recoverable explorer failures."""


class DocumentFetchError(ExplorerError):
    """The OpenAPI document could not be fetched, read or parsed."""

    def __init__(self, source: str, message: str):
        self.source = source
        self.message = message
        super().__init__(f"Failed to load API document from {source}: {message}")


class RequestExecutionError(ExplorerError):
    """Sending a built request failed.

    ``status_code`` is set when the server answered with an error status and
    is None for pure transport errors.
    """

    def __init__(self, message: str, status_code: int | None = None):
        self.message = message
        self.status_code = status_code
        super().__init__(message)

    def __str__(self) -> str:
        if self.status_code is not None:
            return f"{self.status_code} {self.message}"
        return self.message


class SessionBusyError(ExplorerError):
    """A request is already in flight for this session."""
