"""
Unit tests for the progress store.
"""

import json

import pytest

from quizrunner.delivery.progress_store import DEFAULT_PROGRESS_KEY, ProgressStore
from quizrunner.delivery.storage import KeyValueStorage


class CountingStorage(KeyValueStorage):
    """Storage that counts writes."""

    def __init__(self):
        super().__init__(":memory:")
        self.writes = 0

    def set(self, key, value):
        self.writes += 1
        super().set(key, value)


@pytest.fixture
def store(storage):
    progress = ProgressStore(storage)
    progress.initialize()
    return progress


class TestInitialize:

    def test_no_record_is_empty(self, store, storage):
        assert store.correct_ids == frozenset()
        assert storage.get(DEFAULT_PROGRESS_KEY) is None

    def test_reads_persisted_list(self, storage):
        storage.set(DEFAULT_PROGRESS_KEY, json.dumps(["q1", "q2"]))
        assert ProgressStore(storage).initialize() == {"q1", "q2"}

    def test_duplicates_dropped_on_read(self, storage):
        storage.set(DEFAULT_PROGRESS_KEY, json.dumps(["q1", "q1", "q2"]))
        assert ProgressStore(storage).initialize() == {"q1", "q2"}

    @pytest.mark.parametrize("raw", ["{broken", '{"q1": true}', "42", '["q1", 7]'])
    def test_corrupt_record_is_cleared(self, storage, raw):
        storage.set(DEFAULT_PROGRESS_KEY, raw)

        assert ProgressStore(storage).initialize() == set()
        assert storage.get(DEFAULT_PROGRESS_KEY) is None

    def test_custom_key(self, storage):
        storage.set("other", json.dumps(["x"]))
        assert ProgressStore(storage, key="other").initialize() == {"x"}


class TestRecordCorrect:

    def test_persists_full_set(self, store, storage):
        store.record_correct("q2")
        store.record_correct("q1")

        assert set(json.loads(storage.get(DEFAULT_PROGRESS_KEY))) == {"q1", "q2"}

    def test_recording_twice_same_as_once(self, store):
        first = store.record_correct("q1")
        second = store.record_correct("q1")
        assert first == second == {"q1"}

    def test_redundant_record_does_not_write(self):
        storage = CountingStorage()
        store = ProgressStore(storage)
        store.initialize()

        store.record_correct("q1")
        store.record_correct("q1")

        assert storage.writes == 1

    def test_never_shrinks(self, store):
        seen = set()
        for qid in ["a", "b", "a", "c", "b"]:
            current = store.record_correct(qid)
            assert seen <= current
            seen = current

    def test_survives_restart(self, store, storage):
        store.record_correct("q1")
        assert ProgressStore(storage).initialize() == {"q1"}


class TestReset:

    def test_reset_empties_and_removes_record(self, store, storage):
        store.record_correct("q1")
        store.reset()

        assert store.correct_ids == frozenset()
        assert storage.get(DEFAULT_PROGRESS_KEY) is None
        assert ProgressStore(storage).initialize() == set()
