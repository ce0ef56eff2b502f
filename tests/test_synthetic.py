import random

import pytest

from pipestudio.config import SimulationConfig, make_config
from pipestudio.core.result import Status
from pipestudio.core.synthetic import SyntheticResultProvider, model_family

TYPES = ["data-source", "data-preprocessing", "feature-engineering", "sklearn-models",
         "model-evaluation", "api-deployment", "visualization"]


def test_same_seed_same_fragments():
    p1 = SyntheticResultProvider(SimulationConfig(seed=42))
    p2 = SyntheticResultProvider(SimulationConfig(seed=42))
    assert [p1(t) for t in TYPES] == [p2(t) for t in TYPES]


def test_data_source_never_fails():
    provider = SyntheticResultProvider(make_config(error_rate=1.0, max_missing_pct=5.0), rng=random.Random(0))
    for _ in range(50):
        frag = provider("data-source")
        # at most 5% of cells go missing, below the warning threshold
        assert frag.status is Status.SUCCESS
        assert set(frag.metrics) == {"Data Size (MB)", "Missing Values (%)", "Load Time (s)"}
        assert 1000 <= frag.output["rows"] < 6000


def test_error_rate_one_fails_everything_else():
    provider = SyntheticResultProvider(make_config(error_rate=1.0), rng=random.Random(1))
    frag = provider("sklearn-models")
    assert frag.status is Status.ERROR
    assert frag.message in {
        "Execution failed: Convergence failed in training",
        "Execution failed: Insufficient training data",
        "Execution failed: Gradient explosion detected",
    }
    assert provider("visualization").status is Status.ERROR


def test_model_metrics_ranges():
    cfg = make_config(error_rate=0.0, model_warning_rate=0.0)
    provider = SyntheticResultProvider(cfg, rng=random.Random(7))
    for _ in range(20):
        frag = provider("sklearn-models")
        assert frag.status is Status.SUCCESS
        assert 0.7 <= frag.metrics["Accuracy"] <= 0.95
        assert 0.75 <= frag.metrics["AUC"] <= 0.95
        assert frag.output["model_type"] == "RandomForestClassifier"


def test_model_warning_rate():
    cfg = make_config(error_rate=0.0, model_warning_rate=1.0)
    frag = SyntheticResultProvider(cfg, rng=random.Random(3))("xgboost-models")
    assert frag.status is Status.WARNING
    assert frag.message.startswith("Model trained with warnings")


def test_baseline_pins_quality():
    cfg = make_config(error_rate=0.0, model_warning_rate=0.0)
    provider = SyntheticResultProvider(cfg, rng=random.Random(5), baseline={"accuracy": 0.9, "auc": 0.8})
    frag = provider("tensorflow-models")
    assert frag.metrics["Accuracy"] == 0.9
    assert frag.metrics["AUC"] == 0.8


def test_generic_and_deployment_nodes():
    provider = SyntheticResultProvider(make_config(error_rate=0.0), rng=random.Random(9))
    generic = provider("visualization")
    assert generic.status is Status.SUCCESS
    assert list(generic.metrics) == ["Execution Time (s)"]
    deploy = provider("api-deployment")
    assert deploy.output["status"] == "deployed"
    assert "API Latency (ms)" in deploy.metrics


def test_model_family():
    assert model_family("xgboost-models") == "XGBoost Classifier"
    assert model_family("custom-models") == "ML Model"


def test_high_missing_share_warns_on_data_source():
    provider = SyntheticResultProvider(SimulationConfig(), rng=random.Random(0))
    frags = [provider("data-source") for _ in range(200)]
    warned = [f for f in frags if f.status is Status.WARNING]
    assert warned
    assert all(f.metrics["Missing Values (%)"] >= 10.0 for f in warned)
    assert warned[0].message.startswith(
        "Execution completed with warning: High percentage of missing values"
    )
    assert all(f.status is not Status.ERROR for f in frags)


def test_missing_share_bound_is_configurable():
    provider = SyntheticResultProvider(make_config(max_missing_pct=0.0), rng=random.Random(4))
    frag = provider("data-source")
    assert frag.output["missing_values"] == 0
    assert frag.status is Status.SUCCESS
    with pytest.raises(ValueError):
        make_config(max_missing_pct=150.0)
