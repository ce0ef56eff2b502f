from __future__ import annotations
"""Starter pipelines for common ML workflows.

Every template is the same five-stage chain (source → preprocessing →
features → model → evaluation); they differ in the model type and labels.
`instantiate` re-stamps node and edge ids with a suffix so a template can be
loaded next to, or on top of, earlier copies without id clashes.
"""
import time
from dataclasses import dataclass
from typing import Dict, List

from .catalog import (
    DATA_PREPROCESSING,
    DATA_SOURCE,
    FEATURE_ENGINEERING,
    MODEL_EVALUATION,
    SKLEARN_MODELS,
)
from .graph import Graph, PipelineEdge, PipelineNode

__all__ = ["PipelineTemplate", "TEMPLATES", "list_templates", "get_template", "instantiate", "restamp"]


@dataclass(frozen=True, slots=True)
class PipelineTemplate:  # noqa: D101
    id: str
    name: str
    description: str
    graph: Graph


def _chain(model_type: str, model_label: str, eval_label: str, last_edge: str) -> Graph:
    stages = [
        ("data-source-1", DATA_SOURCE, "Data Source"),
        ("preprocessing-1", DATA_PREPROCESSING, "Data Preprocessing"),
        ("feature-eng-1", FEATURE_ENGINEERING, "Feature Engineering"),
        ("model-1", model_type, model_label),
        ("evaluation-1", MODEL_EVALUATION, eval_label),
    ]
    nodes = [
        PipelineNode(id=nid, type=t, position={"x": 100 + 250 * i, "y": 200}, data={"label": label})
        for i, (nid, t, label) in enumerate(stages)
    ]
    edge_labels = ["raw data", "processed data", "features", last_edge]
    edges = [
        PipelineEdge(id=f"e{i + 1}-{i + 2}", source=stages[i][0], target=stages[i + 1][0], label=label)
        for i, label in enumerate(edge_labels)
    ]
    return Graph(nodes=nodes, edges=edges)


TEMPLATES: Dict[str, PipelineTemplate] = {
    t.id: t
    for t in (
        PipelineTemplate(
            "classification",
            "Classification Pipeline",
            "A standard pipeline for binary or multi-class classification tasks",
            _chain(SKLEARN_MODELS, "Classification Model", "Model Evaluation", "predictions"),
        ),
        PipelineTemplate(
            "regression",
            "Regression Pipeline",
            "A pipeline for predicting continuous values",
            _chain(SKLEARN_MODELS, "Regression Model", "Model Evaluation", "predictions"),
        ),
        PipelineTemplate(
            "clustering",
            "Clustering Pipeline",
            "A pipeline for unsupervised clustering of data",
            _chain(SKLEARN_MODELS, "Clustering Model", "Cluster Evaluation", "clusters"),
        ),
        PipelineTemplate(
            "deep-learning",
            "Deep Learning Pipeline",
            "A pipeline for deep learning tasks with TensorFlow",
            _chain("tensorflow-models", "Deep Learning Model", "Model Evaluation", "predictions"),
        ),
    )
}


def list_templates() -> List[PipelineTemplate]:
    return list(TEMPLATES.values())


def get_template(template_id: str) -> PipelineTemplate:
    try:
        return TEMPLATES[template_id]
    except KeyError:
        raise KeyError(
            f"Unknown template '{template_id}' (available: {', '.join(TEMPLATES)})"
        ) from None


def restamp(graph: Graph, suffix: str | int) -> Graph:
    """Return *graph* with ``-<suffix>`` appended to every node and edge id."""
    nodes = [n.model_copy(update={"id": f"{n.id}-{suffix}"}) for n in graph.nodes]
    edges = [
        e.model_copy(
            update={
                "id": f"{e.id}-{suffix}",
                "source": f"{e.source}-{suffix}",
                "target": f"{e.target}-{suffix}",
            }
        )
        for e in graph.edges
    ]
    return graph.with_changes(nodes=nodes, edges=edges)


def instantiate(template_id: str, *, stamp: str | int | None = None) -> Graph:
    """Fresh copy of a template's graph; *stamp* defaults to epoch milliseconds."""
    template = get_template(template_id)
    if stamp is None:
        stamp = int(time.time() * 1000)
    return restamp(template.graph, stamp)
