"""Output formatting helpers for the CLI."""

from __future__ import annotations

from collections.abc import Sequence

from rich.markup import escape

from booster.executor import Summary
from booster.task import Result, Task, TaskStatus

__all__ = [
    "format_duration",
    "format_error",
    "format_plan",
    "format_result",
    "format_summary",
]

_STATUS_STYLE = {
    TaskStatus.DONE: ("✓", "green"),
    TaskStatus.SKIPPED: ("○", "dim"),
    TaskStatus.FAILED: ("✗", "red"),
    TaskStatus.PENDING: ("·", "dim"),
    TaskStatus.RUNNING: ("…", "yellow"),
}


def format_error(message: str, suggestion: str | None = None) -> str:
    """Format an error message with an optional suggestion.

    Example:
        >>> print(format_error("config missing version field", "Add version: \\"1\\""))
        Error: config missing version field
        Suggestion: Add version: "1"
    """
    lines = [f"Error: {message}"]
    if suggestion:
        lines.append(f"Suggestion: {suggestion}")
    return "\n".join(lines)


def format_duration(duration_ms: int) -> str:
    """Format milliseconds for display.

    Examples:
        >>> format_duration(850)
        '850ms'
        >>> format_duration(2500)
        '2.5s'
    """
    if duration_ms < 1000:
        return f"{duration_ms}ms"
    return f"{duration_ms / 1000:.1f}s"


def format_plan(tasks: Sequence[Task]) -> str:
    """Numbered list of tasks, as shown by ``run --dry-run``."""
    lines = [f"Would execute {len(tasks)} task(s):", ""]
    lines.extend(f"  {i}. {task.name}" for i, task in enumerate(tasks, start=1))
    return "\n".join(lines)


def format_result(task: Task, result: Result) -> str:
    """One Rich-markup line describing a finished task."""
    symbol, style = _STATUS_STYLE[result.status]
    line = f"[{style}]{symbol}[/{style}] {escape(task.name)}"
    detail = result.message
    if result.status is TaskStatus.FAILED and result.error is not None:
        detail = str(result.error)
    if detail:
        line += f" [dim]({escape(detail)})[/dim]"
    if result.duration_ms >= 1000:
        line += f" [dim]{format_duration(result.duration_ms)}[/dim]"
    return line


def format_summary(summary: Summary, elapsed_ms: int) -> str:
    """Summary line printed after a run."""
    parts = [
        f"[green]{summary.done} done[/green]",
        f"{summary.skipped} skipped",
    ]
    if summary.failed:
        parts.append(f"[red]{summary.failed} failed[/red]")
    if summary.pending:
        parts.append(f"{summary.pending} not run")
    return ", ".join(parts) + f" in {format_duration(elapsed_ms)}"
