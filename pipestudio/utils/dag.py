from __future__ import annotations

"""DAG helpers (no side-effects).

iter_nodes(graph) yields (depth, node, edge) depth-first from the sources.
build_rich_tree(graph) returns a Rich *Tree* ready for printing.
"""
from typing import Dict, Iterator, List, Optional, Sequence, Set, Tuple

from pipestudio.core.graph import Graph, PipelineEdge, PipelineNode
from pipestudio.utils.constants import STYLE

__all__ = [
    "iter_nodes",
    "build_rich_tree",
    "build_order_tree",
]

# --------------------------------------------------------------------------- #
# Core traverser
# --------------------------------------------------------------------------- #

def iter_nodes(graph: Graph) -> Iterator[Tuple[int, PipelineNode, Optional[PipelineEdge], bool]]:  # noqa: D401
    """Yield *(depth, node, via_edge, repeated)* for a DFS over *graph*.

    Walks start at nodes without incoming edges; nodes left unreached (pure
    cycles) start walks of their own.  A node already shown is yielded once
    more with ``repeated=True`` and not descended into again.
    """
    by_id = {n.id: n for n in graph.nodes}
    out: Dict[str, List[PipelineEdge]] = {n.id: [] for n in graph.nodes}
    for e in graph.edges:
        out[e.source].append(e)

    targets = {e.target for e in graph.edges}
    starts = [n for n in graph.nodes if n.id not in targets]
    seen: Set[str] = set()

    def _walk(root: PipelineNode):
        # explicit stack: long chains must not hit the recursion limit
        stack: List[Tuple[int, PipelineNode, Optional[PipelineEdge]]] = [(0, root, None)]
        while stack:
            depth, node, via = stack.pop()
            if node.id in seen:
                yield depth, node, via, True
                continue
            seen.add(node.id)
            yield depth, node, via, False
            for edge in reversed(out[node.id]):
                stack.append((depth + 1, by_id[edge.target], edge))

    for root in starts:
        yield from _walk(root)
    for node in graph.nodes:
        if node.id not in seen:
            yield from _walk(node)


# --------------------------------------------------------------------------- #
# Rich-aware tree builders (import lazily to avoid hard dep at import time)
# --------------------------------------------------------------------------- #

def _label(node: PipelineNode, via: Optional[PipelineEdge], repeated: bool) -> str:
    text = f"[{STYLE['node']}]{node.display_name}[/] [{STYLE['node_type']}]({node.type})[/]"
    if via is not None and (via.label or via.branch):
        text = f"[{STYLE['edge_label']}]{via.label or via.branch} →[/] " + text
    if repeated:
        text += " [dim]↺[/]"
    return text


def build_rich_tree(graph: Graph, title: str = "Pipeline DAG"):  # noqa: D401 – return type is Tree
    """Return a *rich.tree.Tree* visualisation of *graph* (side-effect-free)."""
    from rich.tree import Tree  # local import keeps this module lightweight

    tree = Tree(f"[bold]{title}[/]")
    stack: List[Tuple[int, "Tree"]] = [(-1, tree)]
    for depth, node, via, repeated in iter_nodes(graph):
        while stack[-1][0] >= depth:
            stack.pop()
        branch = stack[-1][1].add(_label(node, via, repeated))
        stack.append((depth, branch))
    return tree


def build_order_tree(order: Sequence[PipelineNode], title: str = "Execution order"):
    """Return a flat Rich tree listing *order* with 1-based positions."""
    from rich.tree import Tree

    tree = Tree(f"[bold]{title}[/]")
    for i, node in enumerate(order, 1):
        tree.add(f"{i}. [{STYLE['node']}]{node.display_name}[/] [dim]{node.type}[/]")
    return tree
