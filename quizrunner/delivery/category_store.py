"""
Category Selection Store: which categories feed the working set.

The record is a JSON list of category strings, written and read verbatim.
A stored selection is adopted as-is even if it names categories that no
longer exist or omits new ones.
"""

from __future__ import annotations

import json
from collections.abc import Iterable

from loguru import logger

from .storage import KeyValueStorage

DEFAULT_CATEGORIES_KEY = "gcpDevOpsQuizCategories"


class CategoryStore:
    """Sole writer of the category-selection record."""

    def __init__(self, storage: KeyValueStorage, key: str = DEFAULT_CATEGORIES_KEY):
        self.storage = storage
        self.key = key
        self._all_categories: list[str] = []
        self._selected: list[str] = []

    @property
    def all_categories(self) -> list[str]:
        return list(self._all_categories)

    @property
    def selected_categories(self) -> list[str]:
        return list(self._selected)

    def is_selected(self, category: str) -> bool:
        return category in self._selected

    def initialize(self, all_categories: Iterable[str]) -> list[str]:
        """
        Adopt the persisted selection, or fall back to every category.

        Args:
            all_categories: Categories derived from the loaded questions

        Returns:
            The selected categories
        """
        self._all_categories = list(all_categories)

        raw = self.storage.get(self.key)
        if raw is not None:
            try:
                parsed = json.loads(raw)
            except json.JSONDecodeError:
                parsed = None
            if isinstance(parsed, list) and all(isinstance(c, str) for c in parsed):
                self._selected = parsed
                return list(self._selected)
            logger.warning(f"Discarding malformed category record {self.key!r}")

        self._selected = list(self._all_categories)
        self._save()
        return list(self._selected)

    def toggle(self, category: str, included: bool) -> list[str]:
        """
        Include or exclude one category and persist the result.

        Returns:
            The selected categories
        """
        if included:
            if category not in self._selected:
                self._selected.append(category)
        else:
            self._selected = [c for c in self._selected if c != category]
        self._save()
        return list(self._selected)

    def set_selected(self, categories: Iterable[str]) -> list[str]:
        """Replace the whole selection (duplicates dropped, order kept)."""
        self._selected = list(dict.fromkeys(categories))
        self._save()
        return list(self._selected)

    def _save(self) -> None:
        self.storage.set(self.key, json.dumps(self._selected))
