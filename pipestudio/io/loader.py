from __future__ import annotations
"""Pipeline documents ⇄ JSON / YAML files.

A pipeline document is what the editor saves and exports::

    {
      "id": "…", "name": "Churn model", "description": "…",
      "nodes": [{"id": "src", "type": "data-source", "data": {"label": "CSV"}}],
      "edges": [{"id": "e1", "source": "src", "target": "prep", "label": "raw data"}],
      "lastSaved": "2024-05-01T10:00:00Z"
    }

Editor exports keep the edge label under ``data.label``; the loader lifts it
to the top level and turns ``"true"``/``"false"`` labels into branch tags.
The raw document is checked against a JSON Schema before the graph model
validates ids and references.

Usage:
    from pipestudio.io.loader import load_pipeline
    doc = load_pipeline("pipeline.yml")
    graph = doc.graph
"""
import json
import uuid
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

import yaml
from jsonschema import validate as _js_validate
from pydantic import BaseModel, ConfigDict, Field, model_validator

from pipestudio.core.graph import Graph, PipelineEdge, PipelineNode

__all__ = ["PipelineDocument", "load_pipeline", "parse_pipeline", "dump_pipeline"]

_YAML_SUFFIXES = {".yml", ".yaml"}


class PipelineDocument(BaseModel):  # noqa: D101
    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    name: str = "Untitled Pipeline"
    description: str = ""
    nodes: Tuple[PipelineNode, ...] = ()
    edges: Tuple[PipelineEdge, ...] = ()
    last_saved: Optional[datetime] = Field(default=None, alias="lastSaved")

    @model_validator(mode="after")
    def _check_graph(self) -> "PipelineDocument":
        # duplicate ids and dangling edges surface here
        Graph(nodes=self.nodes, edges=self.edges)
        return self

    @property
    def graph(self) -> Graph:
        return Graph(nodes=self.nodes, edges=self.edges)

    @classmethod
    def from_graph(cls, graph: Graph, **kwargs) -> "PipelineDocument":
        return cls(nodes=graph.nodes, edges=graph.edges, **kwargs)


# --------------------------------------------------------------------------- #

def _normalise_edge(raw: Dict[str, Any]) -> Dict[str, Any]:
    edge = {k: raw[k] for k in ("id", "source", "target", "label", "branch") if k in raw}
    data = raw.get("data") or {}
    if edge.get("label") is None and data.get("label") is not None:
        edge["label"] = data["label"]
    if edge.get("branch") is None and edge.get("label") in ("true", "false"):
        edge["branch"] = edge["label"]
    edge.setdefault("id", f"e{raw['source']}-{raw['target']}")
    return edge


def parse_pipeline(data: Dict[str, Any]) -> PipelineDocument:  # noqa: D401
    """Validate a raw mapping and return a :class:`PipelineDocument`."""
    _js_validate(instance=data, schema=_SCHEMA)
    payload = dict(data)
    payload["edges"] = [_normalise_edge(e) for e in data.get("edges", [])]
    return PipelineDocument.model_validate(payload)


def load_pipeline(path: str | Path) -> PipelineDocument:  # noqa: D401
    """Load the JSON or YAML pipeline document at *path*."""
    path = Path(path)
    text = path.read_text()
    data = yaml.safe_load(text) if path.suffix.lower() in _YAML_SUFFIXES else json.loads(text)
    if not isinstance(data, dict):
        raise ValueError(f"{path}: expected a pipeline mapping")
    return parse_pipeline(data)


def dump_pipeline(doc: PipelineDocument, path: str | Path) -> Path:
    """Write *doc* to *path* as YAML or JSON depending on the suffix."""
    path = Path(path)
    data = doc.model_dump(mode="json", by_alias=True, exclude_none=True)
    if path.suffix.lower() in _YAML_SUFFIXES:
        path.write_text(yaml.safe_dump(data, sort_keys=False))
    else:
        path.write_text(json.dumps(data, indent=2))
    return path


# --------------------------------------------------------------------------- #
# Minimal JSON Schema for pipeline documents
# --------------------------------------------------------------------------- #

_SCHEMA: Dict[str, Any] = {
    "type": "object",
    "properties": {
        "id": {"type": "string"},
        "name": {"type": "string"},
        "description": {"type": "string"},
        "nodes": {
            "type": "array",
            "items": {
                "type": "object",
                "required": ["id", "type"],
                "properties": {
                    "id": {"type": "string"},
                    "type": {"type": "string"},
                    "position": {
                        "type": "object",
                        "properties": {"x": {"type": "number"}, "y": {"type": "number"}},
                    },
                    "data": {"type": "object"},
                },
            },
        },
        "edges": {
            "type": "array",
            "items": {
                "type": "object",
                "required": ["source", "target"],
                "properties": {
                    "id": {"type": "string"},
                    "source": {"type": "string"},
                    "target": {"type": "string"},
                    "label": {"type": ["string", "null"]},
                    "branch": {"enum": ["true", "false", None]},
                },
            },
        },
    },
    "required": ["nodes"],
}
