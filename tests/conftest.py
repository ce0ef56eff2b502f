from typing import Iterable, Sequence, Tuple

import pytest

from pipestudio.core.graph import Graph
from pipestudio.utils import events


def build(nodes: Sequence[Tuple[str, str]], edges: Iterable[Tuple[str, str]] = ()) -> Graph:
    """Graph from ``[(id, type), ...]`` and ``[(source, target), ...]``."""
    return Graph.from_dict(
        {
            "nodes": [{"id": nid, "type": t, "data": {"label": nid}} for nid, t in nodes],
            "edges": [{"id": f"e{s}-{t}", "source": s, "target": t} for s, t in edges],
        }
    )


@pytest.fixture(autouse=True)
def _clean_bus():
    events.clear()
    yield
    events.clear()


@pytest.fixture
def chain() -> Graph:
    return build(
        [
            ("src", "data-source"),
            ("prep", "data-preprocessing"),
            ("feat", "feature-engineering"),
            ("model", "sklearn-models"),
        ],
        [("src", "prep"), ("prep", "feat"), ("feat", "model")],
    )
