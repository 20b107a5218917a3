"""
Core primitives shared by the quiz runner packages.
"""

from .errors import LoadError, QuizError, StorageError
from .shuffle import fisher_yates_shuffle

__all__ = [
    "LoadError",
    "QuizError",
    "StorageError",
    "fisher_yates_shuffle",
]
