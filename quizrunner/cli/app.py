"""
Quiz Runner CLI.

Commands:
- quizrunner play        - Answer questions interactively
- quizrunner categories  - Show or change the category filter
- quizrunner stats       - Progress per category
- quizrunner reset       - Forget all correct answers
- quizrunner validate    - Check the question file
"""
from __future__ import annotations

import asyncio
import sys
from typing import Optional

import typer
from loguru import logger
from rich.console import Console
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.prompt import Confirm, IntPrompt, Prompt

from quizrunner.config import get_settings
from quizrunner.content.models import derive_categories
from quizrunner.content.source import open_source
from quizrunner.core.errors import LoadError
from quizrunner.delivery.category_store import CategoryStore
from quizrunner.delivery.progress_store import ProgressStore
from quizrunner.delivery.storage import KeyValueStorage
from quizrunner.session.controller import SessionController

from . import views

# =============================================================================
# CLI Setup
# =============================================================================

app = typer.Typer(
    name="quizrunner",
    help="Multiple-choice quiz runner with persistent progress",
    no_args_is_help=True,
)
console = Console()

RESET_PROMPT = "Really reset progress? Every saved correct answer will be deleted."


def _open_storage() -> KeyValueStorage:
    return KeyValueStorage(get_settings().state_db_path)


def _build_controller(storage: KeyValueStorage) -> SessionController:
    settings = get_settings()
    return SessionController(
        progress=ProgressStore(storage, key=settings.progress_key),
        categories=CategoryStore(storage, key=settings.categories_key),
    )


def _start_session(storage: KeyValueStorage, source: str | None) -> SessionController:
    """Load questions behind a spinner; exit with code 1 if they are unavailable."""
    settings = get_settings()
    location = source or settings.question_source
    controller = _build_controller(storage)

    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        console=console,
        transient=True,
    ) as progress:
        progress.add_task(f"Loading questions from {location}...", total=None)
        ready = asyncio.run(
            controller.start(open_source(location, settings.http_timeout_seconds))
        )

    if not ready:
        views.render_unavailable(console, controller.load_error or "unknown error")
        raise typer.Exit(1)

    return controller


SourceOption = typer.Option(
    None,
    "--source", "-s",
    help="Question file path or URL (overrides QUIZ_QUESTION_SOURCE)",
)


# =============================================================================
# Interactive session
# =============================================================================


def _choose_category(controller: SessionController) -> None:
    """Toggle one category by number."""
    categories = controller.categories.all_categories
    if not categories:
        return
    views.render_categories(console, controller)
    choice = IntPrompt.ask("Toggle which category? (0 to cancel)", default=0)
    if choice < 1 or choice > len(categories):
        return
    category = categories[choice - 1]
    controller.toggle_category(category, not controller.categories.is_selected(category))


def _confirm_reset(controller: SessionController) -> None:
    confirmed = Confirm.ask(RESET_PROMPT, default=False)
    if controller.reset_progress(confirmed=confirmed):
        console.print("[green]Progress has been reset.[/green]")


def _match_option(controller: SessionController, choice: str) -> str | None:
    """Map typed input to an option key of the current question."""
    question = controller.current_question
    if question is None:
        return None
    if choice in question.options:
        return choice
    matches = [key for key in question.options if key.lower() == choice.lower()]
    return matches[0] if len(matches) == 1 else None


def _render(controller: SessionController) -> None:
    console.print()
    views.render_status(console, controller)
    view = controller.current_view()
    if view is None:
        views.render_empty(console)
    else:
        views.render_question(console, view)
    if controller.celebration_pending:
        views.render_celebration(console)
    console.print(views.COMMAND_HELP)


def run_loop(controller: SessionController) -> None:
    """Read commands until the user quits."""
    while True:
        _render(controller)
        choice = Prompt.ask("[bold cyan]>[/bold cyan]", default="").strip()
        command = choice.lower()

        if command in ("q", "quit", "exit"):
            break

        key = _match_option(controller, choice)
        if key is not None:
            if controller.answer(key) is None:
                console.print("[dim]This question is locked. Move on with 'n' or 'p'.[/dim]")
        elif command in ("n", "next"):
            controller.next()
        elif command in ("p", "prev", "previous"):
            controller.previous()
        elif command in ("x", "explain"):
            controller.reveal_explanation()
        elif command in ("s", "shuffle"):
            controller.shuffle()
        elif command in ("f", "filter"):
            _choose_category(controller)
        elif command == "all":
            controller.set_categories(controller.categories.all_categories)
        elif command == "reset":
            _confirm_reset(controller)
        elif command in ("close", "dismiss"):
            controller.dismiss_celebration()
        elif command:
            console.print(f"[yellow]Unknown command: {choice}[/yellow]")


# =============================================================================
# Commands
# =============================================================================


@app.command()
def play(source: Optional[str] = SourceOption) -> None:
    """
    Start an interactive quiz session.

    Questions are filtered by the saved category selection and shuffled.
    Correct answers are remembered between sessions.
    """
    with _open_storage() as storage:
        controller = _start_session(storage, source)
        console.print(
            f"\n[bold cyan]Quiz Runner[/bold cyan] - {len(controller.questions)} questions, "
            f"{len(controller.categories.all_categories)} categories"
        )
        try:
            run_loop(controller)
        except (KeyboardInterrupt, EOFError):
            console.print("\n[yellow]Session ended.[/yellow]")

        console.print(
            f"\nScore: [bold]{controller.correct_count}[/bold] / {controller.total_count}"
        )


@app.command()
def categories(
    source: Optional[str] = SourceOption,
    include: Optional[list[str]] = typer.Option(
        None, "--include", "-i", help="Category to include (repeatable)"
    ),
    exclude: Optional[list[str]] = typer.Option(
        None, "--exclude", "-e", help="Category to exclude (repeatable)"
    ),
    select_all: bool = typer.Option(False, "--all", help="Select every category"),
) -> None:
    """Show the category filter, optionally changing it first."""
    with _open_storage() as storage:
        controller = _start_session(storage, source)

        if select_all:
            controller.set_categories(controller.categories.all_categories)
        for category in include or []:
            if category not in controller.categories.all_categories:
                console.print(f"[yellow]Unknown category: {category}[/yellow]")
            controller.toggle_category(category, True)
        for category in exclude or []:
            controller.toggle_category(category, False)

        views.render_categories(console, controller)
        console.print(
            f"\n{controller.total_count} questions in "
            f"{len(controller.categories.selected_categories)} selected categories"
        )


@app.command()
def stats(source: Optional[str] = SourceOption) -> None:
    """Show correct answers per category."""
    with _open_storage() as storage:
        controller = _start_session(storage, source)
        views.render_breakdown(console, controller)
        console.print(
            f"\nCurrent selection: [bold]{controller.correct_count}[/bold] / "
            f"{controller.total_count} correct"
        )


@app.command()
def reset(
    confirm: bool = typer.Option(
        False,
        "--yes", "-y",
        help="Skip confirmation",
    ),
) -> None:
    """Forget every saved correct answer."""
    if not confirm and not Confirm.ask(RESET_PROMPT, default=False):
        console.print("Reset cancelled.")
        raise typer.Exit(0)

    with _open_storage() as storage:
        store = ProgressStore(storage, key=get_settings().progress_key)
        store.initialize()
        count = len(store.correct_ids)
        store.reset()

    console.print(f"[green]Progress has been reset ({count} answers removed).[/green]")


@app.command()
def validate(source: Optional[str] = SourceOption) -> None:
    """Load the question file and report what it contains."""
    settings = get_settings()
    location = source or settings.question_source

    try:
        questions = asyncio.run(open_source(location, settings.http_timeout_seconds).load())
    except LoadError as e:
        views.render_unavailable(console, str(e))
        raise typer.Exit(1)

    found = derive_categories(questions)
    console.print(
        f"[green]OK[/green] {len(questions)} questions in {len(found)} categories "
        f"from {location}"
    )
    for category in found:
        count = sum(1 for q in questions if q.category == category)
        console.print(f"  {category}: {count}")


# =============================================================================
# Entry Point
# =============================================================================


def main() -> None:
    """CLI entry point."""
    # Configure logging
    logger.remove()
    logger.add(
        sys.stderr,
        level=get_settings().log_level,
        format="<level>{message}</level>",
    )

    app()


if __name__ == "__main__":
    main()
