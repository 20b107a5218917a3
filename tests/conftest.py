"""
Pytest Configuration and Fixtures.

This file configures pytest and provides shared fixtures for all tests.
"""
import random
import sys
from pathlib import Path

import pytest

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from quizrunner.content.models import parse_questions
from quizrunner.delivery.category_store import CategoryStore
from quizrunner.delivery.progress_store import ProgressStore
from quizrunner.delivery.storage import KeyValueStorage
from quizrunner.session.controller import SessionController


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line("markers", "unit: Unit tests")
    config.addinivalue_line("markers", "smoke: Smoke tests for CLI commands")
    config.addinivalue_line("markers", "slow: Slow tests")


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their location."""
    for item in items:
        if "unit" in str(item.fspath):
            item.add_marker(pytest.mark.unit)
        elif "smoke" in str(item.fspath):
            item.add_marker(pytest.mark.smoke)


@pytest.fixture(scope="session")
def project_root():
    """Return the project root directory."""
    return PROJECT_ROOT


def make_record(qid, category, answer="A", options=None, explanation=None):
    """Build a raw question record as it appears in questions.json."""
    return {
        "id": qid,
        "category": category,
        "question": f"Question {qid}?",
        "options": options if options is not None else {"A": "x", "B": "y"},
        "answer": answer,
        "explanation": explanation if explanation is not None else f"Because {qid}.",
    }


@pytest.fixture
def example_records():
    """The two-question example: one Monitoring, one Build."""
    return [
        make_record("q1", "Monitoring", answer="A"),
        make_record("q2", "Build", answer="B"),
    ]


@pytest.fixture
def sample_records():
    """Seven questions across three categories."""
    return [
        make_record("m1", "Monitoring", answer="A"),
        make_record("m2", "Monitoring", answer="B"),
        make_record("m3", "Monitoring", answer="A"),
        make_record("b1", "Build", answer="B"),
        make_record("b2", "Build", answer="A"),
        make_record("s1", "Security", answer="C", options={"A": "x", "B": "y", "C": "z"}),
        make_record("s2", "Security", answer="A"),
    ]


@pytest.fixture
def storage():
    """In-memory key-value storage."""
    store = KeyValueStorage(":memory:")
    yield store
    store.close()


@pytest.fixture
def make_controller(storage):
    """
    Factory for a READY controller over the shared storage.

    Calling it twice simulates a process restart: stores are re-read from
    the same storage.
    """
    def _make(records, seed=7):
        controller = SessionController(
            progress=ProgressStore(storage),
            categories=CategoryStore(storage),
            rng=random.Random(seed),
        )
        controller.on_loaded(parse_questions(records))
        return controller

    return _make


@pytest.fixture
def record():
    """Expose make_record to tests."""
    return make_record
