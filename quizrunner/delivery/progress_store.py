"""
Progress Store: ids of questions ever answered correctly.

The record is a JSON list of id strings. The set only grows, except on an
explicit (confirmed) reset, which empties it and removes the record.
"""

from __future__ import annotations

import json

from loguru import logger

from .storage import KeyValueStorage

DEFAULT_PROGRESS_KEY = "gcpDevOpsQuizProgress"


class ProgressStore:
    """Sole writer of the progress record."""

    def __init__(self, storage: KeyValueStorage, key: str = DEFAULT_PROGRESS_KEY):
        self.storage = storage
        self.key = key
        self._correct_ids: set[str] = set()

    @property
    def correct_ids(self) -> frozenset[str]:
        """Snapshot of the correctly answered ids."""
        return frozenset(self._correct_ids)

    def is_correct(self, question_id: str) -> bool:
        return question_id in self._correct_ids

    def initialize(self) -> set[str]:
        """
        Read the persisted set.

        A record that is not a JSON list of strings is treated as empty and
        removed, so the failure does not repeat on the next start.

        Returns:
            The loaded ids
        """
        raw = self.storage.get(self.key)
        if raw is None:
            self._correct_ids = set()
            return set(self._correct_ids)

        try:
            parsed = json.loads(raw)
        except json.JSONDecodeError:
            parsed = None

        if isinstance(parsed, list) and all(isinstance(i, str) for i in parsed):
            self._correct_ids = set(parsed)
        else:
            logger.warning(f"Discarding malformed progress record {self.key!r}")
            self._correct_ids = set()
            self.storage.remove(self.key)

        return set(self._correct_ids)

    def record_correct(self, question_id: str) -> set[str]:
        """
        Mark a question as answered correctly.

        Persists only when the set actually changes.

        Returns:
            The updated ids
        """
        if question_id not in self._correct_ids:
            self._correct_ids.add(question_id)
            self._save()
            logger.debug(f"Recorded correct answer for {question_id}")
        return set(self._correct_ids)

    def reset(self) -> None:
        """Forget all progress. Callers must confirm with the user first."""
        self._correct_ids = set()
        self.storage.remove(self.key)
        logger.info("Progress reset")

    def _save(self) -> None:
        self.storage.set(self.key, json.dumps(sorted(self._correct_ids)))
