from __future__ import annotations
"""Static structural checks for pipeline graphs (emptiness, cycles, sources…).

Problems are returned as data so a caller can show every issue at once;
nothing here raises for a malformed *pipeline*.
"""
from dataclasses import dataclass, field
from typing import List

from .catalog import is_data_source, is_feature, is_model
from .graph import Graph
from .sequencer import has_cycle

__all__ = [
    "ValidationReport",
    "validate",
    "EMPTY_PIPELINE",
    "NO_DATA_SOURCE",
    "CYCLE_DETECTED",
    "UNUSED_FEATURES",
]

EMPTY_PIPELINE = "Pipeline is empty. Add at least one node to proceed."
NO_DATA_SOURCE = "No data source node found. Add a data source to your pipeline."
CYCLE_DETECTED = (
    "Cyclical connections detected in pipeline. "
    "Remove cycles to ensure proper execution flow."
)
UNUSED_FEATURES = (
    "Feature engineering nodes detected but no model nodes. "
    "Consider adding a model node to use these features."
)


@dataclass(slots=True)
class ValidationReport:  # noqa: D101
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)

    @property
    def valid(self) -> bool:  # noqa: D401
        """True when no error was found; warnings never invalidate."""
        return not self.errors

    def to_dict(self) -> dict:
        return {"valid": self.valid, "errors": list(self.errors), "warnings": list(self.warnings)}


def validate(graph: Graph) -> ValidationReport:
    """Run every structural rule against *graph* in a fixed order."""
    report = ValidationReport()

    if not graph.nodes:
        report.errors.append(EMPTY_PIPELINE)
        return report

    connected = {e.source for e in graph.edges} | {e.target for e in graph.edges}
    disconnected = [n for n in graph.nodes if n.id not in connected]
    if disconnected:
        names = ", ".join(n.display_name for n in disconnected)
        report.warnings.append(f"Disconnected nodes detected: {names}")

    if not any(is_data_source(n.type) for n in graph.nodes):
        report.errors.append(NO_DATA_SOURCE)

    if has_cycle(graph):
        report.errors.append(CYCLE_DETECTED)

    types = [n.type for n in graph.nodes]
    if any(is_feature(t) for t in types) and not any(is_model(t) for t in types):
        report.warnings.append(UNUSED_FEATURES)

    return report
