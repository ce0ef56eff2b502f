from __future__ import annotations
"""Rich logging – plain log records, live run progress & report rendering.

Log records go through the stdlib ``logging`` tree with a Rich handler.
Progress bars are opt-in: `attach()` subscribes them to executor events and
`stop()` tears them down again.
"""
from logging import DEBUG, ERROR, INFO, WARNING, Logger, basicConfig, getLogger
from typing import Any, Dict, Iterable, Sequence

from rich.console import Console
from rich.logging import RichHandler
from rich.progress import BarColumn, Progress, TextColumn, TimeElapsedColumn
from rich.table import Table

from pipestudio.utils.constants import STATUS_STYLE, SYMBOLS, STYLE
from pipestudio.utils.events import (
    NodeFinished,
    RunCompleted,
    RunStarted,
    subscribe,
    unsubscribe,
)

console = Console()

__all__ = [
    "log",
    "get",
    "console",
    "attach",
    "stop",
    "show_dag_tree",
    "show_order",
    "show_validation",
    "show_results",
    "show_recommendations",
]

_LEVEL_MAP = {
    "info": INFO,
    "debug": DEBUG,
    "warning": WARNING,
    "error": ERROR,
}

# Configure root once with Rich handler for plain log messages (non-progress)
basicConfig(
    level=INFO,
    format="%(message)s",
    datefmt="%H:%M:%S",
    handlers=[RichHandler(rich_tracebacks=True, markup=True, console=console)],
)

log: Logger = getLogger("pipestudio")


def get(level: str = "info") -> Logger:  # noqa: D401
    """Return the package logger set to *level* (str)."""
    lvl = _LEVEL_MAP.get(level.lower(), INFO)
    lg = getLogger("pipestudio")
    lg.setLevel(lvl)
    return lg


# --------------------------------------------------------------------------- #
# Progress handling
# --------------------------------------------------------------------------- #
_progress: Progress | None = None
_tasks: Dict[str, int] = {}


def _ensure_progress() -> Progress:  # noqa: D401
    global _progress
    if _progress is None:
        _progress = Progress(
            TextColumn("[bold blue]{task.fields[id]}[/]"),
            BarColumn(),
            "{task.percentage:>3.0f}%",
            TextColumn("[green]{task.completed}/{task.total}[/]"),
            "•",
            TimeElapsedColumn(),
            console=console,
            transient=True,
        )
        _progress.start()
    return _progress


def _on_run_started(evt: RunStarted):  # noqa: D401 – event hook
    prog = _ensure_progress()
    _tasks[evt.run_id] = prog.add_task(description="", total=evt.total, id=evt.pipeline)  # type: ignore[arg-type]


def _on_node_finished(evt: NodeFinished):  # noqa: D401 – event hook
    task_id = _tasks.get(evt.run_id)
    if _progress is not None and task_id is not None:
        _progress.update(task_id, advance=1)


def _on_run_completed(evt: RunCompleted):  # noqa: D401 – event hook
    task_id = _tasks.get(evt.run_id)
    if _progress is not None and task_id is not None:
        _progress.update(task_id, completed=evt.total)


_HOOKS = (
    (RunStarted, _on_run_started),
    (NodeFinished, _on_node_finished),
    (RunCompleted, _on_run_completed),
)


def attach() -> None:
    """Subscribe the live progress display to executor events."""
    for evt_type, hook in _HOOKS:
        unsubscribe(evt_type, hook)
        subscribe(evt_type)(hook)


def stop():  # noqa: D401
    global _progress
    for evt_type, hook in _HOOKS:
        unsubscribe(evt_type, hook)
    if _progress is not None:
        _progress.stop()
        _progress = None
    _tasks.clear()


# --------------------------------------------------------------------------- #
# Report rendering
# --------------------------------------------------------------------------- #

def show_dag_tree(graph: Any, **kw):  # noqa: D401
    """Render the pipeline graph as a tree."""
    from pipestudio.utils.dag import build_rich_tree

    console.print(build_rich_tree(graph, **kw))


def show_order(order: Sequence[Any], **kw):
    from pipestudio.utils.dag import build_order_tree

    console.print(build_order_tree(order, **kw))


def show_validation(report: Any) -> None:
    """Print every error and warning of a `ValidationReport`."""
    for err in report.errors:
        console.print(f"{SYMBOLS['error']}[{STYLE['error']}]{err}[/]")
    for warn in report.warnings:
        console.print(f"{SYMBOLS['warning']}[{STYLE['warning']}]{warn}[/]")
    if report.valid:
        console.print(f"{SYMBOLS['success']}[{STYLE['success']}]Pipeline is valid.[/]")


def show_results(results: Iterable[Any], title: str = "Run results") -> None:
    table = Table(title=title)
    table.add_column("#", style="dim", justify="right")
    table.add_column("Node", style=STYLE["node"], no_wrap=True)
    table.add_column("Status")
    table.add_column("Message")
    table.add_column("Metrics", style="dim")
    for i, r in enumerate(results, 1):
        status = r.status.value
        metrics = ", ".join(f"{m.name}={m.value:.2f}" for m in r.metric_rows)
        table.add_row(str(i), r.node_name, f"[{STATUS_STYLE[status]}]{status}[/]", r.message, metrics)
    console.print(table)


def show_recommendations(recs: Sequence[Any]) -> None:
    if not recs:
        console.print("[yellow]No suggestions for this node.[/]")
        return
    for i, rec in enumerate(recs):
        if rec.insert_before:
            console.print(
                f"{i}. {SYMBOLS['insert']}[bold]{rec.suggested_type}[/] before "
                f"[{STYLE['node']}]{rec.insert_before}[/] – {rec.reason}"
            )
        else:
            console.print(f"{i}. {SYMBOLS['step']}[bold]{rec.suggested_type}[/] – {rec.reason}")
