"""
Console styling shared by the CLI and the Rich renderers.

Status colours follow the result table of the pipeline editor: green for
success, yellow for warnings, red for failed nodes.
"""

# Prefix symbols (Rich markup included where coloured)
SYMBOLS = {
    "success": "[bold green]✓[/bold green] ",
    "error": "[bold red]![/bold red] ",
    "warning": "[bold yellow]⚠[/bold yellow] ",
    "step": "→ ",
    "insert": "⤵ ",
}

STYLE = {
    "warning": "yellow",
    "error": "red",
    "success": "green",
    # graph rendering
    "node": "cyan",
    "node_type": "magenta",
    "edge_label": "italic dim",
}

# ExecutionResult.status value -> Rich style
STATUS_STYLE = {status: STYLE[status] for status in ("success", "warning", "error")}
