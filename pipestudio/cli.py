from __future__ import annotations

"""pipestudio Command Line Interface."""

import json
from pathlib import Path
from typing import Optional

import typer
import yaml
from rich.console import Console
from pydantic import ValidationError as ModelValidationError
from jsonschema import ValidationError as SchemaValidationError

from pipestudio import (
    SimulationConfig,
    apply_recommendation,
    compare_pipelines,
    load_pipeline,
    recommend,
    run_pipeline,
    sequence,
    validate,
)
from pipestudio.config import from_env, load_config, make_config
from pipestudio.io.loader import PipelineDocument, dump_pipeline
from pipestudio.utils.constants import STATUS_STYLE

app = typer.Typer(
    name="pipestudio",
    help="CLI for pipestudio: validate, order, simulate and extend ML pipelines.",
    add_completion=False,
)

console = Console()


def _load(file: Path) -> PipelineDocument:
    """Load a pipeline document or exit with a readable error."""
    if not file.exists():
        console.print(f"[bold red]Error: File not found: {file}[/]")
        raise typer.Exit(code=1)
    try:
        return load_pipeline(file)
    except SchemaValidationError as e:
        console.print(f"[bold red]Error: {file} is not a pipeline document: {e.message}[/]")
    except (ModelValidationError, ValueError, yaml.YAMLError) as e:
        console.print(f"[bold red]Error loading {file}: {e}[/]")
    raise typer.Exit(code=1)


def _config(config_file: Optional[Path], seed: Optional[int], fast: bool) -> SimulationConfig:
    cfg = load_config(config_file) if config_file else from_env(SimulationConfig())
    overrides = cfg.to_dict()
    extra = overrides.pop("extra")
    if seed is not None:
        overrides["seed"] = seed
    if fast:
        overrides["min_delay"] = overrides["max_delay"] = 0.0
    return make_config(**overrides, **extra)


# --------------------------------------------------------------------------- #
# Static commands
# --------------------------------------------------------------------------- #

@app.command("validate")
def validate_cmd(
    pipeline_file: Path = typer.Argument(..., help="Pipeline document (.json/.yml)."),
):
    """Check a pipeline for structural errors and warnings."""
    from pipestudio.utils.logging import show_validation

    doc = _load(pipeline_file)
    report = validate(doc.graph)
    console.print(f"[cyan]Validating pipeline '[bold]{doc.name}[/]' ({len(doc.nodes)} nodes)...[/]")
    show_validation(report)
    if not report.valid:
        raise typer.Exit(code=1)


@app.command()
def order(
    pipeline_file: Path = typer.Argument(..., help="Pipeline document (.json/.yml)."),
):
    """Print the execution order of a pipeline."""
    from pipestudio.utils.logging import show_order

    doc = _load(pipeline_file)
    show_order(sequence(doc.graph), title=f"Execution order – {doc.name}")


@app.command("inspect-dag")
def inspect_dag(
    pipeline_file: Path = typer.Argument(..., help="Pipeline document (.json/.yml)."),
):
    """Print a Rich DAG tree without executing the pipeline."""
    from pipestudio.utils.logging import show_dag_tree

    doc = _load(pipeline_file)
    console.print(f"[bold]Pipeline:[/] {doc.name} • [bold]DAG ONLY[/]")
    console.print("")
    show_dag_tree(doc.graph, title=doc.name)
    console.print(f"[green]DAG inspection complete – {len(doc.nodes)} nodes, {len(doc.edges)} edges.[/]")


# --------------------------------------------------------------------------- #
# Simulation commands
# --------------------------------------------------------------------------- #

@app.command()
def run(
    pipeline_file: Path = typer.Argument(..., help="Pipeline document (.json/.yml)."),
    output_dir: Optional[Path] = typer.Option(None, "--out", help="Directory to save results.", file_okay=False, dir_okay=True, resolve_path=True),
    config_file: Optional[Path] = typer.Option(None, "--config", help="YAML simulation settings.", exists=True),
    seed: Optional[int] = typer.Option(None, "--seed", help="Seed for reproducible synthetic results."),
    fast: bool = typer.Option(False, "--fast", help="Skip simulated processing delays."),
    quiet: bool = typer.Option(False, "--quiet", help="Disable live progress/output."),
    json_logs: bool = typer.Option(False, "--json-logs", help="Emit JSON event logs instead of Rich UI."),
):
    """Simulate a pipeline run, streaming one result per node."""
    from pipestudio.utils import logging as ui
    from pipestudio.utils.events import NodeFinished, RunCompleted, RunRejected, subscribe, unsubscribe

    doc = _load(pipeline_file)
    cfg = _config(config_file, seed, fast)

    json_hooks = []
    if json_logs:
        def _emit(kind: str):
            def _handler(evt):
                payload = {"event": kind, **{k: getattr(evt, k) for k in evt.__dataclass_fields__}}
                print(json.dumps(payload, default=str))
            return _handler

        for evt_type, kind in ((NodeFinished, "node_finished"), (RunCompleted, "run_completed"), (RunRejected, "run_rejected")):
            json_hooks.append((evt_type, subscribe(evt_type)(_emit(kind))))
    elif not quiet:
        ui.show_order(sequence(doc.graph), title=f"Execution order – {doc.name}")
        ui.attach()

    def _on_result(result):
        if not quiet and not json_logs:
            style = STATUS_STYLE[result.status.value]
            console.print(f"[{style}]{result.status.value:>7}[/] {result.node_name}: {result.message}")

    try:
        report = run_pipeline(doc.graph, name=doc.name, config=cfg, on_result=_on_result)
    finally:
        ui.stop()
        for evt_type, hook in json_hooks:
            unsubscribe(evt_type, hook)

    if report.rejected:
        console.print("[bold red]Pipeline validation failed:[/]")
        ui.show_validation(report.validation)
        raise typer.Exit(code=1)

    if not quiet and not json_logs:
        ui.show_results(report.results, title=f"Results – {doc.name}")

    if output_dir is not None:
        from pipestudio.io.writer import RunWriter

        path = RunWriter(output_dir).write_report(report)
        console.print(f"Results written to {path}")

    failed = len(report.failed_nodes)
    console.print(
        f"[bold green]Pipeline execution complete[/] – processed {len(report.results)} nodes"
        + (f", [red]{failed} failed[/]" if failed else "")
    )


@app.command()
def compare(
    pipeline_a: Path = typer.Argument(..., help="Pipeline A document."),
    pipeline_b: Path = typer.Argument(..., help="Pipeline B document."),
    output_dir: Optional[Path] = typer.Option(None, "--out", help="Directory to save results.", file_okay=False, dir_okay=True, resolve_path=True),
    config_file: Optional[Path] = typer.Option(None, "--config", help="YAML simulation settings.", exists=True),
    seed: Optional[int] = typer.Option(None, "--seed"),
    fast: bool = typer.Option(False, "--fast", help="Skip simulated processing delays."),
):
    """Run two pipelines side by side (A/B) and compare their quality metrics."""
    from pipestudio.utils import logging as ui

    doc_a, doc_b = _load(pipeline_a), _load(pipeline_b)
    cfg = _config(config_file, seed, fast)

    console.print(f"[cyan]Comparing {doc_a.name} with {doc_b.name}...[/]")

    def _on_result(side: str, result):
        console.print(f"[dim]{side}[/] {result.status.value:>7} {result.node_name}")

    report = compare_pipelines(
        doc_a.graph, doc_b.graph, name_a=doc_a.name, name_b=doc_b.name, config=cfg, on_result=_on_result
    )

    for side, run_report in (("A", report.a), ("B", report.b)):
        if run_report.rejected:
            console.print(f"[bold red]Pipeline {side} ({run_report.pipeline}) was not run:[/]")
            ui.show_validation(run_report.validation)

    for diff in report.differences:
        console.print(f"[yellow]•[/] {diff}")
    summary = report.summary()
    console.print(summary or "[yellow]Not enough quality metrics to pick a winner.[/]")

    if output_dir is not None:
        from pipestudio.io.writer import RunWriter

        path = RunWriter(output_dir).write_comparison(report)
        console.print(f"Comparison written to {path}")


# --------------------------------------------------------------------------- #
# Templates
# --------------------------------------------------------------------------- #

@app.command()
def template(
    template_id: Optional[str] = typer.Argument(None, help="Template to instantiate; omit to list them."),
    out: Optional[Path] = typer.Option(None, "--out", help="Where to write the new pipeline (.json/.yml)."),
    stamp: Optional[str] = typer.Option(None, "--stamp", help="Id suffix (defaults to epoch milliseconds)."),
):
    """List starter pipelines or write a fresh copy of one."""
    from rich.table import Table

    from pipestudio.core.templates import get_template, instantiate, list_templates

    if template_id is None:
        table = Table(title="Pipeline templates")
        table.add_column("Id", style="cyan", no_wrap=True)
        table.add_column("Name")
        table.add_column("Description", style="dim")
        for t in list_templates():
            table.add_row(t.id, t.name, t.description)
        console.print(table)
        return

    try:
        tpl = get_template(template_id)
    except KeyError as e:
        console.print(f"[bold red]Error: {e.args[0]}[/]")
        raise typer.Exit(code=1)

    graph = instantiate(template_id, stamp=stamp)
    doc = PipelineDocument(name=tpl.name, description=tpl.description, nodes=graph.nodes, edges=graph.edges)
    path = dump_pipeline(doc, out or Path(f"{template_id}.json"))
    console.print(f"[green]Loaded the {tpl.name} template – pipeline written to {path}[/]")


# --------------------------------------------------------------------------- #
# Recommendations
# --------------------------------------------------------------------------- #

@app.command("recommend")
def recommend_cmd(
    pipeline_file: Path = typer.Argument(..., help="Pipeline document (.json/.yml)."),
    node_id: str = typer.Argument(..., help="Id of the focused node."),
    apply_index: Optional[int] = typer.Option(None, "--apply", help="Apply the suggestion at this index."),
    out: Optional[Path] = typer.Option(None, "--out", help="Where to write the edited pipeline (defaults to input)."),
):
    """Suggest next components for a node, optionally applying one."""
    from pipestudio.utils.logging import show_recommendations

    doc = _load(pipeline_file)
    if doc.graph.find_node(node_id) is None:
        console.print(f"[bold red]Error: Node '{node_id}' not found in {pipeline_file}[/]")
        raise typer.Exit(code=1)

    recs = recommend(doc.graph, node_id)
    show_recommendations(recs)

    if apply_index is None:
        return
    if not 0 <= apply_index < len(recs):
        console.print(f"[bold red]Error: No suggestion at index {apply_index}[/]")
        raise typer.Exit(code=1)

    graph = apply_recommendation(doc.graph, node_id, recs[apply_index])
    edited = doc.model_copy(update={"nodes": graph.nodes, "edges": graph.edges})
    path = dump_pipeline(edited, out or pipeline_file)
    console.print(f"[green]Added {recs[apply_index].suggested_type} – pipeline written to {path}[/]")


if __name__ == "__main__":
    app()
