"""
Exception hierarchy for the quiz runner.
"""


class QuizError(Exception):
    """Base class for quiz runner errors."""
    pass


class LoadError(QuizError):
    """Raised when the question source is missing, unreachable or malformed."""

    def __init__(self, message: str, source: str | None = None):
        self.source = source
        if source:
            message = f"{message} ({source})"
        super().__init__(message)


class StorageError(QuizError):
    """Raised when the key-value backend cannot be read or written."""
    pass
