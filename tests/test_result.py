from datetime import datetime, timezone

from pipestudio.core.result import ExecutionResult, Metric, Status


def _result(**metrics):
    return ExecutionResult(
        node_id="src",
        node_name="CSV",
        node_type="data-source",
        status=Status.WARNING,
        message="Execution completed with warning",
        timestamp=datetime(2024, 5, 1, 10, 0, tzinfo=timezone.utc),
        metrics=metrics,
    )


def test_metric_rows_keep_order():
    r = _result(**{"Data Size (MB)": 1.5, "Load Time (s)": 0.7})
    assert r.metric_rows == [Metric("Data Size (MB)", 1.5), Metric("Load Time (s)", 0.7)]
    assert r.ok


def test_to_dict_uses_metric_rows():
    d = _result(**{"Missing Values (%)": 11.2}).to_dict()
    assert d["nodeId"] == "src"
    assert d["status"] == "warning"
    assert d["timestamp"] == "2024-05-01T10:00:00+00:00"
    assert d["metrics"] == [{"name": "Missing Values (%)", "value": 11.2}]
    assert Metric("AUC", 0.9).to_dict() == {"name": "AUC", "value": 0.9}
