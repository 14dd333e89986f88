"""
Custom Exceptions.

Application-specific exception classes for consistent error handling.
"""


class ApplicationError(Exception):
    """Base exception for all application errors."""

    def __init__(self, message: str, code: str = "SYS_INTERNAL_ERROR") -> None:
        self.message = message
        self.code = code
        super().__init__(self.message)


class InvalidNoteError(ApplicationError):
    """Raised when a note cannot be written because a field is malformed.

    User-correctable; the message is meant to be shown as-is.
    """

    def __init__(self, message: str = "Invalid note", field: str | None = None) -> None:
        self.field = field
        super().__init__(message, code="NOTE_INVALID")


class InvalidOperationError(ApplicationError):
    """Raised when an operation is not allowed for the given note."""

    def __init__(self, message: str = "Invalid operation") -> None:
        super().__init__(message, code="NOTE_INVALID_OPERATION")


class NotFoundError(ApplicationError):
    """Raised when a resource cannot be found."""

    def __init__(self, message: str = "Resource not found") -> None:
        super().__init__(message, code="RES_NOT_FOUND")


class StoreError(ApplicationError):
    """Raised when the note store fails to read or write."""

    def __init__(self, message: str = "Store error") -> None:
        super().__init__(message, code="SYS_STORE_ERROR")
