"""
Question sources.

A source produces the full question list exactly once, or raises LoadError.
There is no retry: a failed load leaves the session unavailable until the
process is restarted.
"""

from __future__ import annotations

import asyncio
import json
from pathlib import Path
from typing import Any, Protocol

import httpx
from loguru import logger

from quizrunner.core.errors import LoadError

from .models import Question, parse_questions


class QuestionSource(Protocol):
    """Anything that can asynchronously produce the question list."""

    @property
    def location(self) -> str:
        """Human-readable origin of the questions."""
        ...

    async def load(self) -> list[Question]:
        """Return every question, or raise LoadError."""
        ...


class StaticQuestionSource:
    """In-memory records. Still goes through shape validation."""

    def __init__(self, records: list[Any], location: str = "<memory>"):
        self._records = records
        self._location = location

    @property
    def location(self) -> str:
        return self._location

    async def load(self) -> list[Question]:
        return parse_questions(self._records, self._location)


class FileQuestionSource:
    """JSON question file on local disk."""

    def __init__(self, path: Path | str):
        self.path = Path(path)

    @property
    def location(self) -> str:
        return str(self.path)

    def _read(self) -> Any:
        with open(self.path, "r", encoding="utf-8") as f:
            return json.load(f)

    async def load(self) -> list[Question]:
        try:
            data = await asyncio.to_thread(self._read)
        except FileNotFoundError as e:
            raise LoadError("Question file not found", self.location) from e
        except OSError as e:
            raise LoadError(f"Question file could not be read: {e}", self.location) from e
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise LoadError(f"Question file is not valid JSON: {e}", self.location) from e

        questions = parse_questions(data, self.location)
        logger.info(f"Loaded {len(questions)} questions from {self.location}")
        return questions


class HttpQuestionSource:
    """Question list served over HTTP(S). One GET, no retries."""

    def __init__(self, url: str, timeout_seconds: float = 10.0):
        """
        Initialize the source.

        Args:
            url: Address of the question JSON
            timeout_seconds: Request timeout
        """
        self.url = url
        self.client = httpx.AsyncClient(
            timeout=httpx.Timeout(timeout_seconds),
            follow_redirects=True,
        )

    @property
    def location(self) -> str:
        return self.url

    async def close(self) -> None:
        """Close the HTTP client."""
        await self.client.aclose()

    async def load(self) -> list[Question]:
        try:
            response = await self.client.get(self.url)
            response.raise_for_status()
            data = response.json()
        except httpx.HTTPStatusError as e:
            raise LoadError(
                f"Question request failed with status {e.response.status_code}", self.url
            ) from e
        except httpx.HTTPError as e:
            raise LoadError(f"Question request failed: {e}", self.url) from e
        except ValueError as e:
            raise LoadError(f"Question response is not valid JSON: {e}", self.url) from e
        finally:
            await self.close()

        questions = parse_questions(data, self.url)
        logger.info(f"Fetched {len(questions)} questions from {self.url}")
        return questions


def open_source(location: str, timeout_seconds: float = 10.0) -> QuestionSource:
    """Pick the HTTP source for http(s) locations and the file source otherwise."""
    if location.startswith(("http://", "https://")):
        return HttpQuestionSource(location, timeout_seconds=timeout_seconds)
    return FileQuestionSource(location)
