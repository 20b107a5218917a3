"""
Quiz Session: the filter / shuffle / navigate / answer state machine.

Architecture:
- Questions -> quizrunner.content (loaded once per process)
- Correctness -> quizrunner.delivery.ProgressStore
- Category filter -> quizrunner.delivery.CategoryStore
- Rendering -> quizrunner.cli (reads current_view(), calls the operations)

Every operation is listed in Action and guarded by can(). An operation whose
precondition does not hold is a silent no-op; nothing here raises for an
illegal transition.
"""

from __future__ import annotations

import random
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum

from loguru import logger

from quizrunner.content.models import Question, derive_categories
from quizrunner.content.source import QuestionSource
from quizrunner.core.errors import LoadError
from quizrunner.core.shuffle import fisher_yates_shuffle
from quizrunner.delivery.category_store import CategoryStore
from quizrunner.delivery.progress_store import ProgressStore

# =============================================================================
# States, Actions, Results
# =============================================================================


class SessionPhase(str, Enum):
    """Lifecycle of a session around the one-shot question load."""

    LOADING = "loading"
    READY = "ready"
    UNAVAILABLE = "unavailable"  # terminal: load failed


class Action(str, Enum):
    """Operations the presentation layer can trigger."""

    ANSWER = "answer"
    NEXT = "next"
    PREVIOUS = "previous"
    SHUFFLE = "shuffle"
    TOGGLE_CATEGORY = "toggle_category"
    RESET_PROGRESS = "reset_progress"
    REVEAL_EXPLANATION = "reveal_explanation"
    DISMISS_CELEBRATION = "dismiss_celebration"


@dataclass(frozen=True)
class AnswerResult:
    """Result of submitting an answer."""

    question_id: str
    chosen_key: str
    correct_key: str
    correct: bool
    newly_correct: bool  # True if this answer added the id to progress
    explanation: str = ""


@dataclass(frozen=True)
class QuestionView:
    """Everything needed to render the current question."""

    question: Question
    index: int
    total: int
    selected_key: str | None
    already_correct: bool
    revealed: bool
    explanation_visible: bool

    @property
    def answer_locked(self) -> bool:
        """Options are disabled once correct or once answered in this view."""
        return self.already_correct or self.revealed

    @property
    def answered_correctly(self) -> bool:
        return self.selected_key is not None and self.question.is_correct(self.selected_key)


# =============================================================================
# Session Controller
# =============================================================================


class SessionController:
    """
    Owns the working set, cursor, reveal flag and per-question selections.

    The two stores are injected; the controller never touches storage
    directly.
    """

    def __init__(
        self,
        progress: ProgressStore,
        categories: CategoryStore,
        rng: random.Random | None = None,
    ):
        self.progress = progress
        self.categories = categories
        self.rng = rng or random.Random()

        self.phase = SessionPhase.LOADING
        self.load_error: str | None = None

        self._questions: list[Question] = []
        self.working_set: list[Question] = []
        self.cursor = 0
        self.revealed = False
        self.selected_answers: dict[str, str] = {}
        self.explanation_requested = False

        self.celebration_pending = False
        self._was_all_correct = False
        self._celebration_listeners: list[Callable[[], None]] = []

    # =========================================================================
    # Loading
    # =========================================================================

    async def start(self, source: QuestionSource) -> bool:
        """
        Await the one-shot question load and enter READY or UNAVAILABLE.

        Returns:
            True if the session is ready
        """
        if self.phase is not SessionPhase.LOADING:
            logger.debug(f"start() ignored in phase {self.phase.value}")
            return self.phase is SessionPhase.READY

        try:
            questions = await source.load()
        except LoadError as e:
            self.phase = SessionPhase.UNAVAILABLE
            self.load_error = str(e)
            logger.error(f"Questions unavailable: {e}")
            return False

        self.on_loaded(questions)
        return True

    def on_loaded(self, questions: list[Question]) -> None:
        """Adopt a successfully loaded question list and build the working set."""
        if self.phase is not SessionPhase.LOADING:
            logger.debug(f"on_loaded() ignored in phase {self.phase.value}")
            return
        self.progress.initialize()
        self.categories.initialize(derive_categories(questions))
        self.phase = SessionPhase.READY
        self.load(questions)

    def load(self, questions: list[Question] | None = None) -> None:
        """
        Filter to the selected categories and shuffle into a new working set.

        Args:
            questions: Replacement question list (defaults to the current one)
        """
        if self.phase is not SessionPhase.READY:
            logger.debug(f"load() ignored in phase {self.phase.value}")
            return
        if questions is not None:
            self._questions = list(questions)

        selected = set(self.categories.selected_categories)
        filtered = [q for q in self._questions if q.category in selected]
        self.working_set = list(fisher_yates_shuffle(filtered, self.rng))
        self._reset_view()
        logger.debug(f"Working set rebuilt: {len(self.working_set)} questions")
        self._check_celebration()

    # =========================================================================
    # Preconditions
    # =========================================================================

    def can(self, action: Action) -> bool:
        """Whether an operation would currently have any effect."""
        if self.phase is not SessionPhase.READY:
            return False

        question = self.current_question
        if action is Action.ANSWER:
            return (
                question is not None
                and not self.revealed
                and not self.progress.is_correct(question.id)
            )
        if action is Action.NEXT:
            return bool(self.working_set) and self.cursor < len(self.working_set) - 1
        if action is Action.PREVIOUS:
            return self.cursor > 0
        if action is Action.REVEAL_EXPLANATION:
            return question is not None and not self.explanation_visible
        if action is Action.DISMISS_CELEBRATION:
            return self.celebration_pending
        # SHUFFLE, TOGGLE_CATEGORY, RESET_PROGRESS
        return True

    def available_actions(self) -> set[Action]:
        return {action for action in Action if self.can(action)}

    # =========================================================================
    # Transitions
    # =========================================================================

    def shuffle(self) -> None:
        """Re-permute the current working set without re-filtering."""
        if not self.can(Action.SHUFFLE):
            return
        fisher_yates_shuffle(self.working_set, self.rng)
        self._reset_view()

    def answer(self, chosen_key: str, question: Question | None = None) -> AnswerResult | None:
        """
        Submit an option for the current question.

        Args:
            chosen_key: Option key picked by the user
            question: Question being answered (defaults to the current one)

        Returns:
            AnswerResult, or None if the answer was rejected
        """
        if not self.can(Action.ANSWER):
            return None
        current = self.current_question
        if question is not None and question.id != current.id:
            logger.debug(f"Answer for {question.id} ignored, current is {current.id}")
            return None
        if chosen_key not in current.options:
            logger.debug(f"Unknown option {chosen_key!r} for {current.id}")
            return None

        self.selected_answers[current.id] = chosen_key
        self.revealed = True

        correct = current.is_correct(chosen_key)
        newly_correct = False
        if correct and not self.progress.is_correct(current.id):
            self.progress.record_correct(current.id)
            newly_correct = True
            self._check_celebration()

        return AnswerResult(
            question_id=current.id,
            chosen_key=chosen_key,
            correct_key=current.correct_key,
            correct=correct,
            newly_correct=newly_correct,
            explanation=current.explanation,
        )

    def next(self) -> None:
        if not self.can(Action.NEXT):
            return
        self.cursor = min(self.cursor + 1, len(self.working_set) - 1)
        self._leave_question()

    def previous(self) -> None:
        if not self.can(Action.PREVIOUS):
            return
        self.cursor = max(self.cursor - 1, 0)
        self._leave_question()

    def toggle_category(self, category: str, included: bool) -> None:
        """Include or exclude a category, then rebuild the working set."""
        if not self.can(Action.TOGGLE_CATEGORY):
            return
        self.categories.toggle(category, included)
        self.load()

    def set_categories(self, categories: list[str]) -> None:
        """Replace the category selection, then rebuild the working set."""
        if not self.can(Action.TOGGLE_CATEGORY):
            return
        self.categories.set_selected(categories)
        self.load()

    def reset_progress(self, confirmed: bool = False) -> bool:
        """
        Forget every correct answer.

        DANGER: irreversible. Does nothing unless the caller confirmed with
        the user. An explanation opened with reveal_explanation() stays open.

        Returns:
            True if progress was reset
        """
        if not confirmed or not self.can(Action.RESET_PROGRESS):
            return False
        self.progress.reset()
        self.selected_answers.clear()
        self.revealed = False
        self._check_celebration()
        return True

    def reveal_explanation(self) -> None:
        """Show the explanation without answering."""
        if not self.can(Action.REVEAL_EXPLANATION):
            return
        self.explanation_requested = True

    def dismiss_celebration(self) -> None:
        if not self.can(Action.DISMISS_CELEBRATION):
            return
        self.celebration_pending = False

    def on_celebration(self, callback: Callable[[], None]) -> None:
        """Register a callback fired once per false -> true completion."""
        self._celebration_listeners.append(callback)

    # =========================================================================
    # Derived values
    # =========================================================================

    @property
    def questions(self) -> list[Question]:
        return list(self._questions)

    @property
    def current_question(self) -> Question | None:
        if not self.working_set:
            return None
        return self.working_set[self.cursor]

    @property
    def explanation_visible(self) -> bool:
        return self.revealed or self.explanation_requested

    @property
    def correct_count(self) -> int:
        correct_ids = self.progress.correct_ids
        return sum(1 for q in self.working_set if q.id in correct_ids)

    @property
    def total_count(self) -> int:
        return len(self.working_set)

    @property
    def all_correct(self) -> bool:
        return self.total_count > 0 and self.correct_count == self.total_count

    @property
    def progress_percent(self) -> float:
        """Position of the cursor through the working set, 0-100."""
        total = self.total_count
        if total == 0:
            return 0.0
        if total == 1:
            return 100.0
        return self.cursor / (total - 1) * 100

    def current_view(self) -> QuestionView | None:
        question = self.current_question
        if question is None:
            return None
        return QuestionView(
            question=question,
            index=self.cursor,
            total=self.total_count,
            selected_key=self.selected_answers.get(question.id),
            already_correct=self.progress.is_correct(question.id),
            revealed=self.revealed,
            explanation_visible=self.explanation_visible,
        )

    def category_breakdown(self) -> list[tuple[str, int, int, bool]]:
        """
        Per-category progress over the full question list.

        Returns:
            (category, correct, total, selected) for every known category
        """
        correct_ids = self.progress.correct_ids
        selected = set(self.categories.selected_categories)
        rows = []
        for category in self.categories.all_categories:
            in_category = [q for q in self._questions if q.category == category]
            correct = sum(1 for q in in_category if q.id in correct_ids)
            rows.append((category, correct, len(in_category), category in selected))
        return rows

    # =========================================================================
    # Internals
    # =========================================================================

    def _reset_view(self) -> None:
        self.cursor = 0
        self.revealed = False
        self.explanation_requested = False
        self.selected_answers.clear()

    def _leave_question(self) -> None:
        self.revealed = False
        self.explanation_requested = False

    def _check_celebration(self) -> None:
        """Raise the celebration only on the false -> true edge of all_correct."""
        now_all_correct = self.all_correct
        if now_all_correct and not self._was_all_correct:
            self.celebration_pending = True
            logger.info(f"All {self.total_count} questions answered correctly")
            for callback in self._celebration_listeners:
                callback()
        self._was_all_correct = now_all_correct
