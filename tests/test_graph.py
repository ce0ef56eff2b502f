import pytest

from pipestudio.core.graph import Graph, PipelineEdge, PipelineNode

from conftest import build


def test_graph_lookups(chain):
    assert len(chain) == 4
    assert chain.find_node("prep").type == "data-preprocessing"
    assert chain.find_node("nope") is None
    assert chain.successors("src") == ["prep"]
    assert [e.source for e in chain.incoming_edges("model")] == ["feat"]
    assert chain.adjacency() == {"src": ["prep"], "prep": ["feat"], "feat": ["model"], "model": []}


def test_display_name_falls_back_to_id():
    node = PipelineNode(id="n1", type="data-source")
    assert node.display_name == "n1"
    assert PipelineNode(id="n2", type="x", data={"label": "CSV", "path": "a.csv"}).display_name == "CSV"


def test_duplicate_node_id_rejected():
    with pytest.raises(ValueError, match="Duplicate node id"):
        build([("a", "data-source"), ("a", "sklearn-models")])


def test_dangling_edge_rejected():
    with pytest.raises(ValueError, match="unknown node"):
        build([("a", "data-source")], [("a", "ghost")])


def test_parallel_edges_need_distinct_branches():
    nodes = [PipelineNode(id="s", type="conditional-split"), PipelineNode(id="t", type="api-deployment")]
    Graph(
        nodes=nodes,
        edges=[
            PipelineEdge(id="e1", source="s", target="t", branch="true"),
            PipelineEdge(id="e2", source="s", target="t", branch="false"),
        ],
    )
    with pytest.raises(ValueError, match="duplicates"):
        Graph(
            nodes=nodes,
            edges=[
                PipelineEdge(id="e1", source="s", target="t"),
                PipelineEdge(id="e2", source="s", target="t"),
            ],
        )


def test_with_changes_leaves_original_untouched(chain):
    extra = PipelineNode(id="eval", type="model-evaluation")
    edited = chain.with_changes(
        nodes=[*chain.nodes, extra],
        edges=[*chain.edges, PipelineEdge(id="e5", source="model", target="eval")],
    )
    assert len(edited) == 5
    assert len(chain) == 4
    assert chain.find_node("eval") is None
