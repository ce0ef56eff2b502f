from pipestudio.core.validator import (
    CYCLE_DETECTED,
    EMPTY_PIPELINE,
    NO_DATA_SOURCE,
    UNUSED_FEATURES,
    validate,
)

from conftest import build


def test_empty_pipeline():
    report = validate(build([]))
    assert report.errors == [EMPTY_PIPELINE]
    assert report.warnings == []
    assert not report.valid


def test_valid_chain_has_no_findings(chain):
    report = validate(chain)
    assert report.valid
    assert report.errors == []
    assert report.warnings == []


def test_missing_data_source():
    g = build([("p", "data-preprocessing"), ("m", "sklearn-models")], [("p", "m")])
    assert validate(g).errors == [NO_DATA_SOURCE]


def test_cycle_is_an_error():
    g = build([("A", "data-source"), ("B", "data-preprocessing")], [("A", "B"), ("B", "A")])
    report = validate(g)
    assert report.errors == [CYCLE_DETECTED]
    assert "cyclical" in report.errors[0].lower()


def test_errors_follow_rule_order():
    g = build([("A", "data-preprocessing"), ("B", "feature-engineering")], [("A", "B"), ("B", "A")])
    assert validate(g).errors == [NO_DATA_SOURCE, CYCLE_DETECTED]


def test_disconnected_nodes_warning_lists_labels():
    g = build(
        [("src", "data-source"), ("model", "sklearn-models"), ("viz", "visualization"), ("dash", "dashboard")],
        [("src", "model")],
    )
    report = validate(g)
    assert report.valid
    assert report.warnings == ["Disconnected nodes detected: viz, dash"]


def test_single_node_is_disconnected():
    report = validate(build([("src", "data-source")]))
    assert report.valid
    assert report.warnings == ["Disconnected nodes detected: src"]


def test_features_without_model_warn():
    g = build([("src", "data-source"), ("feat", "feature-engineering")], [("src", "feat")])
    report = validate(g)
    assert report.valid
    assert report.warnings == [UNUSED_FEATURES]


def test_report_to_dict():
    d = validate(build([])).to_dict()
    assert d == {"valid": False, "errors": [EMPTY_PIPELINE], "warnings": []}
