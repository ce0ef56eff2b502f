import pytest

from pipestudio.core.sequencer import sequence
from pipestudio.core.templates import TEMPLATES, get_template, instantiate, list_templates, restamp
from pipestudio.core.validator import validate


def test_four_templates_are_valid_chains():
    assert [t.id for t in list_templates()] == ["classification", "regression", "clustering", "deep-learning"]
    for t in list_templates():
        report = validate(t.graph)
        assert report.valid and report.warnings == []
        assert [n.id for n in sequence(t.graph)] == [
            "data-source-1", "preprocessing-1", "feature-eng-1", "model-1", "evaluation-1",
        ]


def test_template_details():
    dl = get_template("deep-learning")
    assert dl.graph.find_node("model-1").type == "tensorflow-models"
    clustering = TEMPLATES["clustering"].graph
    assert clustering.find_node("evaluation-1").display_name == "Cluster Evaluation"
    assert clustering.incoming_edges("evaluation-1")[0].label == "clusters"
    assert [n.position.x for n in clustering.nodes] == [100, 350, 600, 850, 1100]


def test_instantiate_restamps_ids():
    g = instantiate("classification", stamp=1700000000000)
    assert [n.id for n in g.nodes][0] == "data-source-1-1700000000000"
    first = g.edges[0]
    assert (first.id, first.source, first.target) == (
        "e1-2-1700000000000", "data-source-1-1700000000000", "preprocessing-1-1700000000000",
    )
    # the catalogue copy is left untouched
    assert TEMPLATES["classification"].graph.nodes[0].id == "data-source-1"


def test_default_stamp_and_unknown_template():
    g = instantiate("regression")
    assert all(n.id.rsplit("-", 1)[1].isdigit() for n in g.nodes)
    with pytest.raises(KeyError, match="Unknown template"):
        instantiate("forecasting")


def test_restamped_copies_can_be_merged():
    a, b = restamp(TEMPLATES["regression"].graph, "a"), restamp(TEMPLATES["regression"].graph, "b")
    merged = a.with_changes(nodes=[*a.nodes, *b.nodes], edges=[*a.edges, *b.edges])
    assert len(merged) == 10
