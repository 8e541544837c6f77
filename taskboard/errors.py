"""
Exception hierarchy for the task board service.

Routes translate these into HTTP responses: validation problems are
the caller's to fix (400), storage problems are ours (500).
"""


class TaskBoardError(Exception):
    """Base class for all service errors."""

    status_code: int = 500


class ValidationError(TaskBoardError):
    """
    Input rejected before any store operation was attempted.

    Attributes:
        field: Name of the offending input field.
        message: Human readable explanation returned to the caller.
    """

    status_code = 400

    def __init__(self, field: str, message: str) -> None:
        super().__init__(message)
        self.field = field
        self.message = message


class StorageError(TaskBoardError):
    """The document store failed to carry out an operation."""

    status_code = 500


class MalformedBatchError(StorageError):
    """A reorder batch the store cannot accept as a whole."""
