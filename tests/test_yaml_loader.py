import json
import textwrap

import pytest
from jsonschema import ValidationError

from pipestudio.io.loader import PipelineDocument, dump_pipeline, load_pipeline, parse_pipeline


def _export(tmp_path):
    doc = {
        "id": "p1",
        "name": "Churn",
        "nodes": [
            {"id": "src", "type": "data-source", "position": {"x": 0, "y": 0}, "data": {"label": "CSV", "path": "c.csv"}},
            {"id": "split", "type": "conditional-split", "data": {"label": "Good enough?"}},
            {"id": "deploy", "type": "api-deployment"},
        ],
        "edges": [
            {"id": "e1", "source": "src", "target": "split", "data": {"label": "raw data"}},
            {"source": "split", "target": "deploy", "data": {"label": "true"}},
        ],
        "lastSaved": "2024-05-01T10:00:00Z",
    }
    f = tmp_path / "pipeline.json"
    f.write_text(json.dumps(doc))
    return f


def test_json_export_is_normalised(tmp_path):
    doc = load_pipeline(_export(tmp_path))
    assert doc.name == "Churn"
    assert doc.last_saved is not None
    e1, e2 = doc.edges
    assert e1.label == "raw data" and e1.branch is None
    assert e2.id == "esplit-deploy"
    assert e2.branch == "true"
    assert doc.graph.find_node("src").data.model_extra == {"path": "c.csv"}


def test_yaml_loader(tmp_path):
    yml = textwrap.dedent(
        """
        name: YAML Test
        nodes:
          - id: src
            type: data-source
          - id: model
            type: sklearn-models
        edges:
          - source: src
            target: model
            label: raw data
        """
    )
    f = tmp_path / "pipeline.yml"
    f.write_text(yml)
    doc = load_pipeline(f)
    assert doc.name == "YAML Test"
    assert doc.graph.successors("src") == ["model"]


def test_dump_and_reload(tmp_path):
    doc = load_pipeline(_export(tmp_path))
    for name in ("copy.yaml", "copy.json"):
        again = load_pipeline(dump_pipeline(doc, tmp_path / name))
        assert again.graph == doc.graph
        assert again.last_saved == doc.last_saved


def test_yaml_invalid(tmp_path):
    bad = """
    nodes:
      - id: 123   # not string
    """
    f = tmp_path / "bad.yml"
    f.write_text(bad)
    with pytest.raises(ValidationError):
        load_pipeline(f)


def test_dangling_edge_rejected():
    with pytest.raises(ValueError):
        parse_pipeline({"nodes": [{"id": "a", "type": "data-source"}], "edges": [{"source": "a", "target": "b"}]})


def test_from_graph(chain):
    doc = PipelineDocument.from_graph(chain, name="chain")
    assert doc.graph == chain
    assert doc.name == "chain"
