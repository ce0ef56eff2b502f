from __future__ import annotations
"""Run summaries and A/B comparison analysis."""
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional

from .graph import Graph
from .result import ExecutionResult, RunReport, Status

__all__ = [
    "RunSummary",
    "summarize",
    "aggregate_quality",
    "improvement",
    "structural_differences",
    "ComparisonReport",
    "QUALITY_KEYS",
]

QUALITY_KEYS = ("accuracy", "precision", "recall", "f1Score", "auc")


@dataclass(slots=True)
class RunSummary:  # noqa: D101
    total: int
    counts: Dict[str, int]
    averages: Dict[str, float] = field(default_factory=dict)

    @property
    def success_rate(self) -> float:
        return self.counts.get(Status.SUCCESS.value, 0) / (self.total or 1)


def summarize(results: Iterable[ExecutionResult]) -> RunSummary:
    """Status counts plus the average of every metric seen (4 decimals)."""
    results = list(results)
    counts = {s.value: 0 for s in Status}
    sums: Dict[str, float] = {}
    seen: Dict[str, int] = {}
    for r in results:
        counts[r.status.value] += 1
        for name, value in r.metrics.items():
            sums[name] = sums.get(name, 0.0) + value
            seen[name] = seen.get(name, 0) + 1
    averages = {name: round(sums[name] / seen[name], 4) for name in sums}
    return RunSummary(total=len(results), counts=counts, averages=averages)


def _quality_key(metric_name: str) -> Optional[str]:
    name = metric_name.lower()
    if "accuracy" in name:
        return "accuracy"
    if "precision" in name:
        return "precision"
    if "recall" in name:
        return "recall"
    if "f1" in name:
        return "f1Score"
    if "auc" in name:
        return "auc"
    return None


def aggregate_quality(results: Iterable[ExecutionResult]) -> Dict[str, float]:
    """Fold quality metrics of a run into one score card.

    Every key is divided by the total number of quality metrics seen
    (``count``), not by its own occurrences.
    """
    agg: Dict[str, float] = {k: 0.0 for k in QUALITY_KEYS}
    count = 0
    for r in results:
        for name, value in r.metrics.items():
            key = _quality_key(name)
            if key:
                agg[key] += value
                count += 1
    if count:
        agg = {k: v / count for k, v in agg.items()}
    agg["count"] = count
    return agg


def improvement(a: float, b: float) -> float:
    """Relative change of *b* over *a* in percent; 0 when either is 0."""
    if not a or not b:
        return 0.0
    return (b - a) / a * 100


def structural_differences(graph_a: Graph, graph_b: Graph) -> List[str]:
    diffs: List[str] = []
    if len(graph_a.nodes) != len(graph_b.nodes):
        diffs.append(f"Different number of nodes: {len(graph_a.nodes)} vs {len(graph_b.nodes)}")
    if sorted(n.type for n in graph_a.nodes) != sorted(n.type for n in graph_b.nodes):
        diffs.append("Different node types or configurations")
    if len(graph_a.edges) != len(graph_b.edges):
        diffs.append(f"Different connections between nodes: {len(graph_a.edges)} vs {len(graph_b.edges)}")
    return diffs


@dataclass
class ComparisonReport:
    """Both sides of an A/B run plus derived quality comparisons."""

    a: RunReport
    b: RunReport
    graph_a: Graph
    graph_b: Graph

    @property
    def quality_a(self) -> Dict[str, float]:
        return aggregate_quality(self.a.results)

    @property
    def quality_b(self) -> Dict[str, float]:
        return aggregate_quality(self.b.results)

    @property
    def better(self) -> Optional[str]:
        """``"A"`` or ``"B"``; None when a side produced no quality metrics."""
        qa, qb = self.quality_a, self.quality_b
        if not qa["count"] or not qb["count"]:
            return None
        score_a = sum(qa[k] for k in QUALITY_KEYS)
        score_b = sum(qb[k] for k in QUALITY_KEYS)
        return "A" if score_a > score_b else "B"

    @property
    def improvements(self) -> Dict[str, float]:
        qa, qb = self.quality_a, self.quality_b
        out = {k: improvement(qa[k], qb[k]) for k in QUALITY_KEYS}
        if not (qa["auc"] and qb["auc"]):
            out["auc"] = 0.0
        return out

    @property
    def differences(self) -> List[str]:
        return structural_differences(self.graph_a, self.graph_b)

    @property
    def completed(self) -> bool:
        return self.a.completed and self.b.completed

    def summary(self) -> str:
        better = self.better
        if better is None:
            return ""
        name = self.a.pipeline if better == "A" else self.b.pipeline
        acc = self.improvements["accuracy"]
        delta = acc if better == "B" else -acc
        word = "improvement" if delta > 0 else "difference"
        return f"Pipeline {better} ({name}) performed better with {abs(delta):.2f}% {word} in accuracy."
