from __future__ import annotations
"""Pipeline graph model – typed nodes joined by directed, optionally labelled edges.

The graph is an immutable value: every operation of the core (validation,
sequencing, simulation, recommendation) receives it read-only.  Edits are
expressed by building a new graph via :meth:`Graph.with_changes`.

A graph may be cyclic or disconnected; those are *reported* by the validator,
not rejected here.  What is rejected at construction time are consumer errors:
duplicate node ids, duplicate edge ids, dangling edges and parallel edges that
share the same branch tag.
"""
from typing import Any, Dict, Iterable, List, Literal, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, model_validator

__all__ = ["Position", "NodeData", "PipelineNode", "PipelineEdge", "Graph"]

Branch = Literal["true", "false"]


class Position(BaseModel):  # noqa: D101 – presentation only
    model_config = ConfigDict(frozen=True)

    x: float = 0.0
    y: float = 0.0


class NodeData(BaseModel):
    """Opaque node payload; only *label* has meaning for the core."""

    model_config = ConfigDict(frozen=True, extra="allow")

    label: Optional[str] = None


class PipelineNode(BaseModel):  # noqa: D101
    model_config = ConfigDict(frozen=True)

    id: str
    type: str
    position: Position = Field(default_factory=Position)
    data: NodeData = Field(default_factory=NodeData)

    @property
    def display_name(self) -> str:
        """Label shown to users – falls back to the node id."""
        return self.data.label or self.id


class PipelineEdge(BaseModel):  # noqa: D101
    model_config = ConfigDict(frozen=True)

    id: str
    source: str
    target: str
    label: Optional[str] = None
    branch: Optional[Branch] = None  # conditional-split true/false path


class Graph(BaseModel):  # noqa: D101
    model_config = ConfigDict(frozen=True)

    nodes: Tuple[PipelineNode, ...] = ()
    edges: Tuple[PipelineEdge, ...] = ()

    # ------------------------------------------------------------------ #
    @model_validator(mode="after")
    def _check_invariants(self) -> "Graph":
        node_ids: set[str] = set()
        for n in self.nodes:
            if n.id in node_ids:
                raise ValueError(f"Duplicate node id '{n.id}'")
            node_ids.add(n.id)

        edge_ids: set[str] = set()
        pairs: set[tuple[str, str, Optional[str]]] = set()
        for e in self.edges:
            if e.id in edge_ids:
                raise ValueError(f"Duplicate edge id '{e.id}'")
            edge_ids.add(e.id)
            for end in (e.source, e.target):
                if end not in node_ids:
                    raise ValueError(f"Edge '{e.id}' references unknown node '{end}'")
            key = (e.source, e.target, e.branch)
            if key in pairs:
                raise ValueError(
                    f"Edge '{e.id}' duplicates an existing {e.source} -> {e.target} connection"
                )
            pairs.add(key)
        return self

    # Lookups ----------------------------------------------------------- #
    def find_node(self, node_id: str) -> PipelineNode | None:
        for n in self.nodes:
            if n.id == node_id:
                return n
        return None

    def outgoing_edges(self, node_id: str) -> List[PipelineEdge]:
        return [e for e in self.edges if e.source == node_id]

    def incoming_edges(self, node_id: str) -> List[PipelineEdge]:
        return [e for e in self.edges if e.target == node_id]

    def successors(self, node_id: str) -> List[str]:
        """Targets of *node_id*'s outgoing edges, in edge order."""
        return [e.target for e in self.outgoing_edges(node_id)]

    def adjacency(self) -> Dict[str, List[str]]:
        """Return ``{node_id: [target, ...]}`` covering every node."""
        adj: Dict[str, List[str]] = {n.id: [] for n in self.nodes}
        for e in self.edges:
            adj[e.source].append(e.target)
        return adj

    def __len__(self) -> int:
        return len(self.nodes)

    # Edits -------------------------------------------------------------- #
    def with_changes(
        self,
        *,
        nodes: Iterable[PipelineNode] | None = None,
        edges: Iterable[PipelineEdge] | None = None,
    ) -> "Graph":
        """Return a new graph; *self* is left untouched."""
        return Graph(
            nodes=tuple(self.nodes if nodes is None else nodes),
            edges=tuple(self.edges if edges is None else edges),
        )

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Graph":  # noqa: D401
        """Build a graph from ``{"nodes": [...], "edges": [...]}``."""
        return cls.model_validate({"nodes": data.get("nodes", []), "edges": data.get("edges", [])})
