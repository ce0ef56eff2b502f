from __future__ import annotations
"""Execution ordering for pipeline graphs.

`sequence` is a depth-first post-order topological sort: roots are tried in
node order, out-neighbours in edge order, and a node is placed in front of
everything it reaches.  Traversal uses an explicit stack so deep pipelines do
not hit the interpreter recursion limit.

Cycles never raise.  When the DFS order is not a linear extension of the
edges, the sequencer degrades to a simple partition – nodes without incoming
edges first, then the rest, both in original node order.  That fallback is
not a topological order for cyclic graphs and is kept that way on purpose.
"""
from typing import Dict, Iterator, List, Set, Tuple

from .graph import Graph, PipelineNode

__all__ = ["sequence", "has_cycle", "dfs_order", "fallback_order"]


def dfs_order(graph: Graph) -> List[PipelineNode]:
    """Reverse post-order of a DFS over *graph* (visited nodes not re-descended)."""
    adj = graph.adjacency()
    by_id = {n.id: n for n in graph.nodes}
    visited: Set[str] = set()
    post: List[str] = []

    for root in graph.nodes:
        if root.id in visited:
            continue
        visited.add(root.id)
        stack: List[Tuple[str, Iterator[str]]] = [(root.id, iter(adj[root.id]))]
        while stack:
            nid, neighbours = stack[-1]
            for nb in neighbours:
                if nb not in visited:
                    visited.add(nb)
                    stack.append((nb, iter(adj[nb])))
                    break
            else:
                stack.pop()
                post.append(nid)

    post.reverse()
    return [by_id[nid] for nid in post]


def fallback_order(graph: Graph) -> List[PipelineNode]:
    """Source-like nodes first, then every other node – original order kept."""
    targets = {e.target for e in graph.edges}
    sources = [n for n in graph.nodes if n.id not in targets]
    others = [n for n in graph.nodes if n.id in targets]
    return sources + others


def _is_linear_extension(graph: Graph, order: List[PipelineNode]) -> bool:
    pos: Dict[str, int] = {n.id: i for i, n in enumerate(order)}
    if len(pos) != len(graph.nodes):
        return False
    # a self-loop compares equal positions and counts as a violation
    return all(pos[e.source] < pos[e.target] for e in graph.edges)


def sequence(graph: Graph) -> List[PipelineNode]:
    """Return every node of *graph* in execution order.

    Always a permutation of ``graph.nodes``.  For acyclic graphs every edge
    u → v has u before v; otherwise the fallback partition is returned.
    """
    order = dfs_order(graph)
    if not _is_linear_extension(graph, order):
        return fallback_order(graph)
    return order


def has_cycle(graph: Graph) -> bool:
    """DFS with a recursion stack; stops at the first back edge found."""
    adj = graph.adjacency()
    visited: Set[str] = set()
    on_path: Set[str] = set()

    for root in graph.nodes:
        if root.id in visited:
            continue
        visited.add(root.id)
        on_path.add(root.id)
        stack: List[Tuple[str, Iterator[str]]] = [(root.id, iter(adj[root.id]))]
        while stack:
            nid, neighbours = stack[-1]
            for nb in neighbours:
                if nb in on_path:
                    return True
                if nb not in visited:
                    visited.add(nb)
                    on_path.add(nb)
                    stack.append((nb, iter(adj[nb])))
                    break
            else:
                stack.pop()
                on_path.discard(nid)
    return False
