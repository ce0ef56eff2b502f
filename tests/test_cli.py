import json

from typer.testing import CliRunner

from pipestudio.cli import app
from pipestudio.io.loader import load_pipeline

runner = CliRunner()


def _write(tmp_path, name, nodes, edges):
    doc = {
        "name": name,
        "nodes": [{"id": nid, "type": t, "data": {"label": nid.upper()}} for nid, t in nodes],
        "edges": [{"id": f"e{s}-{t}", "source": s, "target": t} for s, t in edges],
    }
    f = tmp_path / f"{name}.json"
    f.write_text(json.dumps(doc))
    return f


def _simple(tmp_path, name="simple"):
    return _write(
        tmp_path,
        name,
        [("src", "data-source"), ("model", "sklearn-models")],
        [("src", "model")],
    )


def test_validate_ok(tmp_path):
    result = runner.invoke(app, ["validate", str(_simple(tmp_path))])
    assert result.exit_code == 0, result.output
    assert "Pipeline is valid" in result.output


def test_validate_cycle_fails(tmp_path):
    f = _write(tmp_path, "loop", [("a", "data-source"), ("b", "data-preprocessing")], [("a", "b"), ("b", "a")])
    result = runner.invoke(app, ["validate", str(f)])
    assert result.exit_code == 1
    assert "Cyclical" in result.output


def test_missing_file(tmp_path):
    result = runner.invoke(app, ["order", str(tmp_path / "nope.json")])
    assert result.exit_code == 1
    assert "File not found" in result.output


def test_order_and_inspect(tmp_path):
    f = _simple(tmp_path)
    result = runner.invoke(app, ["order", str(f)])
    assert result.exit_code == 0, result.output
    assert result.output.index("SRC") < result.output.index("MODEL")

    result = runner.invoke(app, ["inspect-dag", str(f)])
    assert result.exit_code == 0, result.output
    assert "DAG inspection complete" in result.output


def test_run_writes_results(tmp_path):
    out = tmp_path / "out"
    result = runner.invoke(app, ["run", str(_simple(tmp_path)), "--fast", "--seed", "1", "--quiet", "--out", str(out)])
    assert result.exit_code == 0, result.output
    rows = json.loads((out / "results.json").read_text())
    assert [r["nodeId"] for r in rows] == ["src", "model"]


def test_run_json_logs(tmp_path):
    result = runner.invoke(app, ["run", str(_simple(tmp_path)), "--fast", "--json-logs"])
    assert result.exit_code == 0, result.output
    events = [json.loads(line) for line in result.output.splitlines() if line.startswith("{")]
    assert [e["event"] for e in events] == ["node_finished", "node_finished", "run_completed"]


def test_run_rejects_invalid(tmp_path):
    f = _write(tmp_path, "nosrc", [("p", "data-preprocessing")], [])
    result = runner.invoke(app, ["run", str(f), "--fast", "--quiet"])
    assert result.exit_code == 1


def test_compare(tmp_path):
    a = _simple(tmp_path, "a")
    b = _write(
        tmp_path,
        "b",
        [("src", "data-source"), ("prep", "data-preprocessing"), ("model", "xgboost-models")],
        [("src", "prep"), ("prep", "model")],
    )
    out = tmp_path / "cmp"
    result = runner.invoke(app, ["compare", str(a), str(b), "--fast", "--seed", "3", "--out", str(out)])
    assert result.exit_code == 0, result.output
    assert "performed better" in result.output
    assert (out / "comparison.json").exists()


def test_recommend_and_apply(tmp_path):
    f = _simple(tmp_path)
    result = runner.invoke(app, ["recommend", str(f), "src"])
    assert result.exit_code == 0, result.output
    assert "data-preprocessing" in result.output

    edited = tmp_path / "edited.yml"
    result = runner.invoke(app, ["recommend", str(f), "src", "--apply", "0", "--out", str(edited)])
    assert result.exit_code == 0, result.output
    graph = load_pipeline(edited).graph
    assert len(graph.nodes) == 3
    assert "model" not in graph.successors("src")


def test_recommend_unknown_node(tmp_path):
    result = runner.invoke(app, ["recommend", str(_simple(tmp_path)), "ghost"])
    assert result.exit_code == 1


def test_template_list_and_write(tmp_path):
    result = runner.invoke(app, ["template"])
    assert result.exit_code == 0, result.output
    assert "classification" in result.output

    out = tmp_path / "dl.yml"
    result = runner.invoke(app, ["template", "deep-learning", "--out", str(out), "--stamp", "42"])
    assert result.exit_code == 0, result.output
    doc = load_pipeline(out)
    assert doc.name == "Deep Learning Pipeline"
    assert doc.graph.find_node("model-1-42").type == "tensorflow-models"

    result = runner.invoke(app, ["template", "forecasting"])
    assert result.exit_code == 1
