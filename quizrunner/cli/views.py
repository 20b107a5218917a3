"""
Rich rendering for the quiz CLI.

Pure display helpers: they read controller state and print, never mutate.
"""
from __future__ import annotations

from rich import box
from rich.console import Console, Group
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from quizrunner.session.controller import QuestionView, SessionController

# =============================================================================
# Styling
# =============================================================================

STYLES = {
    "correct": "bold green",
    "incorrect": "bold red",
    "info": "bold cyan",
    "warning": "bold yellow",
    "dim": "dim",
}

COMMAND_HELP = (
    "[dim]Option key = answer | n next | p previous | x explanation | s shuffle | "
    "f filter | all select all | reset | close | q quit[/dim]"
)


def format_progress_bar(percent: float, width: int = 20) -> str:
    """Format a text progress bar."""
    filled = int(round(percent / 100 * width))
    return "#" * filled + "-" * (width - filled)


# =============================================================================
# Session screens
# =============================================================================


def render_status(console: Console, controller: SessionController) -> None:
    """Score line and position bar."""
    total = controller.total_count
    position = controller.cursor + 1 if total else 0

    status = Table.grid(expand=True)
    status.add_column()
    status.add_column(justify="right")
    status.add_row(
        f"Score: [bold cyan]{controller.correct_count}[/bold cyan] / {total}",
        f"[dim]{position} / {total} questions[/dim]",
    )
    console.print(status)
    console.print(
        f"[cyan]{format_progress_bar(controller.progress_percent)}[/cyan] "
        f"{controller.progress_percent:.0f}%"
    )


def render_question(console: Console, view: QuestionView) -> None:
    """Display the current question, its options and any result."""
    q = view.question

    options = Table(box=box.MINIMAL, show_header=False)
    options.add_column("Key", style="cyan", justify="right", width=4)
    options.add_column("Option")
    options.add_column("Mark", width=2)

    for key, text in q.options.items():
        mark = ""
        style = ""
        if view.already_correct and key == q.correct_key:
            mark = "[green]✓[/green]"
            style = "green"
        elif view.revealed and key == view.selected_key and not q.is_correct(key):
            mark = "[red]✗[/red]"
            style = "red"
        elif key == view.selected_key:
            style = "bold"
        options.add_row(f"{key}:", Text(text, style=style), mark)

    title = f"[bold]{q.category}[/bold]  [dim]ID: {q.id}[/dim]"
    if view.answer_locked:
        title += "  [dim](locked)[/dim]"

    console.print(
        Panel(
            Group(Text(q.prompt, style="bold"), options),
            title=title,
            title_align="left",
            border_style="cyan",
            padding=(1, 2),
        )
    )

    if view.revealed and view.selected_key is not None:
        if view.answered_correctly:
            console.print(f"[{STYLES['correct']}]✓ Correct![/{STYLES['correct']}]")
        else:
            console.print(
                f"[{STYLES['incorrect']}]✗ Incorrect[/{STYLES['incorrect']}] "
                f"(answer: {q.correct_key})"
            )

    if view.explanation_visible:
        console.print(
            Panel(
                q.explanation or "[dim]No explanation provided.[/dim]",
                title="Explanation",
                border_style="dim",
                padding=(0, 2),
            )
        )


def render_empty(console: Console) -> None:
    console.print(
        Panel(
            "[yellow]No questions in the selected categories.[/yellow]\n"
            "[dim]Use 'f' to include a category or 'all' to select every category.[/dim]",
            border_style="yellow",
        )
    )


def render_celebration(console: Console) -> None:
    console.print(
        Panel(
            "[bold]Congratulations![/bold]\n\n"
            "Every question in this set has been answered correctly.\n"
            "[dim]Type 'close' to dismiss.[/dim]",
            title="[bold green]All correct[/bold green]",
            border_style="green",
            padding=(1, 2),
        )
    )


def render_unavailable(console: Console, message: str) -> None:
    """Blocking message for a failed question load."""
    console.print(
        Panel(
            f"[red]Failed to load the question data.[/red]\n\n{message}\n\n"
            "[dim]Check the location and format of the question file, then restart.[/dim]",
            title="[bold red]Unavailable[/bold red]",
            border_style="red",
        )
    )


# =============================================================================
# Category / stats tables
# =============================================================================


def render_categories(console: Console, controller: SessionController) -> None:
    """Numbered category list with selection marks."""
    table = Table(title="Categories")
    table.add_column("#", justify="right", style="dim")
    table.add_column("Category")
    table.add_column("Selected", justify="center")

    for i, category in enumerate(controller.categories.all_categories, 1):
        mark = "[green]✓[/green]" if controller.categories.is_selected(category) else ""
        table.add_row(str(i), category, mark)

    console.print(table)


def render_breakdown(console: Console, controller: SessionController) -> None:
    """Per-category correct counts over every loaded question."""
    table = Table(title="Progress by category")
    table.add_column("Category")
    table.add_column("Correct", justify="right")
    table.add_column("Total", justify="right")
    table.add_column("Progress")
    table.add_column("Selected", justify="center")

    total_correct = 0
    total_questions = 0
    for category, correct, total, selected in controller.category_breakdown():
        percent = correct / total * 100 if total else 0.0
        table.add_row(
            category,
            str(correct),
            str(total),
            f"{format_progress_bar(percent, width=10)} {percent:.0f}%",
            "[green]✓[/green]" if selected else "",
        )
        total_correct += correct
        total_questions += total

    table.add_section()
    table.add_row("[bold]All[/bold]", str(total_correct), str(total_questions), "", "")
    console.print(table)
