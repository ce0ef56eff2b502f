from __future__ import annotations
"""Next-component suggestions for a focused node.

Two sources feed `recommend`:

* contextual gap-filling – a data source wired straight into a model gets a
  preprocessing step suggested *between* them, a preprocessing/feature node
  wired straight into a deployment gets a model suggested likewise;
* the generic next-step table from :mod:`pipestudio.core.catalog`.

Contextual suggestions come first, duplicates by type are dropped (first one
wins) and at most four are returned.  Suggestions are advisory; the caller
applies them, e.g. with `apply_recommendation`.
"""
from dataclasses import dataclass
from typing import List, Optional

from .catalog import (
    CONDITIONAL_SPLIT,
    DATA_PREPROCESSING,
    DATA_SOURCE,
    NEXT_STEPS,
    SKLEARN_MODELS,
    default_label,
    edge_label,
    is_deployment,
    is_feature,
    is_model,
    is_preprocessing,
)
from .graph import Graph, NodeData, PipelineEdge, PipelineNode, Position
from ..utils.ids import new_node_id

__all__ = ["Recommendation", "recommend", "apply_recommendation", "MAX_RECOMMENDATIONS"]

MAX_RECOMMENDATIONS = 4


@dataclass(frozen=True, slots=True)
class Recommendation:  # noqa: D101
    suggested_type: str
    reason: str
    insert_before: Optional[str] = None  # splice into focus -> insert_before

    @property
    def is_insert(self) -> bool:
        return self.insert_before is not None


def _bridged(graph: Graph, source: str, target: str, predicate) -> bool:
    """True when some node matching *predicate* sits on a source→x→target path."""
    into = set(graph.successors(source))
    for n in graph.nodes:
        if n.id in into and predicate(n.type) and target in graph.successors(n.id):
            return True
    return False


def _contextual(graph: Graph, focus: PipelineNode) -> List[Recommendation]:
    recs: List[Recommendation] = []
    downstream = [graph.find_node(t) for t in graph.successors(focus.id)]
    downstream = [n for n in downstream if n is not None]

    if focus.type == DATA_SOURCE:
        for target in downstream:
            if is_model(target.type) and not _bridged(
                graph, focus.id, target.id, lambda t: t == DATA_PREPROCESSING
            ):
                recs.append(
                    Recommendation(DATA_PREPROCESSING, "Preprocess data before training model", target.id)
                )

    if is_preprocessing(focus.type) or is_feature(focus.type):
        for target in downstream:
            if is_deployment(target.type) and not _bridged(graph, focus.id, target.id, is_model):
                recs.append(Recommendation(SKLEARN_MODELS, "Train a model before deployment", target.id))

    return recs


def recommend(graph: Graph, focus_node_id: str | None) -> List[Recommendation]:
    """Return up to four suggestions for what to add after *focus_node_id*."""
    if not focus_node_id:
        return []
    focus = graph.find_node(focus_node_id)
    if focus is None or not focus.type:
        return []

    connected_types = set()
    for target_id in graph.successors(focus.id):
        target = graph.find_node(target_id)
        if target is not None:
            connected_types.add(target.type)

    generic = [
        Recommendation(t, reason or "Next step in pipeline")
        for t, reason in NEXT_STEPS.get(focus.type, [])
        if t not in connected_types
    ]

    unique: List[Recommendation] = []
    seen: set[str] = set()
    for rec in _contextual(graph, focus) + generic:
        if rec.suggested_type in seen:
            continue
        seen.add(rec.suggested_type)
        unique.append(rec)
    return unique[:MAX_RECOMMENDATIONS]


# --------------------------------------------------------------------------- #
# Applying a suggestion
# --------------------------------------------------------------------------- #

def _edge(source: PipelineNode, target: PipelineNode, existing: set[str]) -> PipelineEdge:
    branch = None
    label = edge_label(source.type, target.type)
    if source.type == CONDITIONAL_SPLIT:
        branch = "true"
        label = branch
    edge_id = f"e{source.id}-{target.id}"
    n = 1
    while edge_id in existing:
        n += 1
        edge_id = f"e{source.id}-{target.id}-{n}"
    existing.add(edge_id)
    return PipelineEdge(id=edge_id, source=source.id, target=target.id, label=label, branch=branch)


def apply_recommendation(
    graph: Graph,
    focus_node_id: str,
    rec: Recommendation,
    *,
    node_id: str | None = None,
) -> Graph:
    """Return a new graph with *rec* applied after *focus_node_id*.

    Appends connect focus → new.  Inserts remove the direct focus → target
    edge(s) and connect focus → new → target.  *graph* itself is unchanged.
    """
    focus = graph.find_node(focus_node_id)
    if focus is None:
        raise KeyError(f"Node '{focus_node_id}' not found")

    target: PipelineNode | None = None
    if rec.insert_before is not None:
        target = graph.find_node(rec.insert_before)
        if target is None:
            raise KeyError(f"Node '{rec.insert_before}' not found")

    if target is not None:
        pos = Position(
            x=(focus.position.x + target.position.x) / 2,
            y=(focus.position.y + target.position.y) / 2,
        )
    else:
        pos = Position(x=focus.position.x + 250, y=focus.position.y)

    new_id = node_id or new_node_id(rec.suggested_type)
    if graph.find_node(new_id) is not None:
        raise ValueError(f"Node id '{new_id}' already exists")
    new_node = PipelineNode(
        id=new_id,
        type=rec.suggested_type,
        position=pos,
        data=NodeData(label=default_label(rec.suggested_type)),
    )

    edges = list(graph.edges)
    if target is not None:
        edges = [e for e in edges if not (e.source == focus.id and e.target == target.id)]
    existing = {e.id for e in edges}
    edges.append(_edge(focus, new_node, existing))
    if target is not None:
        edges.append(_edge(new_node, target, existing))

    return graph.with_changes(nodes=[*graph.nodes, new_node], edges=edges)
