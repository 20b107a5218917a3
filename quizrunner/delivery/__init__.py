"""
Persistence for the quiz runner.

Components:
- KeyValueStorage: SQLite string records
- ProgressStore: correctly answered question ids
- CategoryStore: selected categories
"""

from .category_store import DEFAULT_CATEGORIES_KEY, CategoryStore
from .progress_store import DEFAULT_PROGRESS_KEY, ProgressStore
from .storage import KeyValueStorage

__all__ = [
    "KeyValueStorage",
    "ProgressStore",
    "CategoryStore",
    "DEFAULT_PROGRESS_KEY",
    "DEFAULT_CATEGORIES_KEY",
]
