from __future__ import annotations
"""Synthetic result provider – fabricated metrics standing in for real work.

The executor only depends on the `ResultProvider` call signature
``(node_type) -> ResultFragment``, so a provider doing real computation can be
swapped in without touching sequencing or validation.
"""
import random
from typing import Any, Callable, Dict, List, Optional

from .catalog import (
    is_data_source,
    is_deployment,
    is_evaluation,
    is_feature,
    is_model,
    is_preprocessing,
    is_workflow,
)
from .result import ResultFragment, Status
from ..config import SimulationConfig

__all__ = ["ResultProvider", "SyntheticResultProvider", "model_family"]

ResultProvider = Callable[[str], ResultFragment]

_GENERIC_ERRORS: List[str] = [
    "Memory overflow during matrix calculation",
    "Incompatible data types detected",
    "Timeout exceeded for operation",
    "Invalid parameter configuration",
    "Missing dependency or library not found",
]

# Checked in order; first key contained in the node type wins.
_TYPE_ERRORS: Dict[str, List[str]] = {
    "data-source": [
        "Failed to connect to database",
        "Permission denied accessing data source",
        "File format not recognized",
    ],
    "model": [
        "Convergence failed in training",
        "Insufficient training data",
        "Gradient explosion detected",
    ],
    "preprocessing": [
        "Invalid imputation strategy for data type",
        "Scaling error with non-numeric data",
        "Feature encoding failed",
    ],
}


def model_family(node_type: str) -> str:
    """Human-readable model family for a ``*-models`` node type."""
    for key, name in (
        ("sklearn", "Random Forest Classifier"),
        ("tensorflow", "Neural Network"),
        ("pytorch", "Deep Neural Network"),
        ("xgboost", "XGBoost Classifier"),
        ("lightgbm", "LightGBM"),
        ("catboost", "CatBoost"),
    ):
        if key in node_type:
            return name
    return "ML Model"


class SyntheticResultProvider:
    """Random, type-aware result generator.

    *baseline* lets a run report consistent model quality across model and
    evaluation nodes (keys ``accuracy``, ``f1Score``, ``auc``, ``precision``,
    ``recall``); missing keys are drawn at random.
    """

    def __init__(
        self,
        config: SimulationConfig | None = None,
        *,
        rng: random.Random | None = None,
        baseline: Optional[Dict[str, float]] = None,
    ):
        self.config = config or SimulationConfig()
        self.rng = rng or random.Random(self.config.seed)
        self.baseline = dict(baseline or {})

    # ------------------------------------------------------------------ #
    def __call__(self, node_type: str) -> ResultFragment:
        node_type = node_type or ""
        if is_data_source(node_type):
            frag = self._data_source()
        elif is_preprocessing(node_type) or is_feature(node_type):
            frag = self._preprocessing()
        elif is_model(node_type):
            frag = self._model(node_type)
        elif is_evaluation(node_type):
            frag = self._evaluation()
        elif is_deployment(node_type) or is_workflow(node_type):
            frag = self._deployment()
        else:
            frag = ResultFragment(
                output={"status": "completed", "message": "Node executed successfully"},
                metrics={"Execution Time (s)": self._r2(self.rng.random() * 5)},
            )

        # data sources are never failed at random
        if not is_data_source(node_type) and self.rng.random() < self.config.error_rate:
            frag.status = Status.ERROR
            frag.message = "Execution failed: " + self.error_message(node_type)
        return frag

    def error_message(self, node_type: str) -> str:
        for key, messages in _TYPE_ERRORS.items():
            if key in node_type:
                return self.rng.choice(messages)
        return self.rng.choice(_GENERIC_ERRORS)

    # Per-family generators ---------------------------------------------- #
    def _data_source(self) -> ResultFragment:
        r = self.rng
        rows = r.randrange(1000, 6000)
        columns = r.randrange(5, 25)
        missing = int(r.random() * rows * columns * self.config.max_missing_pct / 100)
        missing_pct = missing / (rows * columns) * 100
        size_mb = rows * columns * 8 / (1024 * 1024)

        frag = ResultFragment(
            output={
                "rows": rows,
                "columns": columns,
                "missing_values": missing,
                "data_preview": {
                    "column_types": {
                        "numerical": int(columns * 0.7),
                        "categorical": int(columns * 0.2),
                        "datetime": int(columns * 0.1),
                    },
                    "memory_usage": f"{size_mb:.2f} MB",
                },
            },
            metrics={
                "Data Size (MB)": self._r2(size_mb),
                "Missing Values (%)": self._r2(missing_pct),
                "Load Time (s)": self._r2(r.random() * 2 + 0.5),
            },
        )
        if missing_pct > self.config.missing_warning_pct:
            frag.status = Status.WARNING
            frag.message = (
                "Execution completed with warning: High percentage of missing values "
                f"({missing_pct:.1f}%)"
            )
        return frag

    def _preprocessing(self) -> ResultFragment:
        r = self.rng
        n_in = r.randrange(5, 20)
        n_out = n_in + r.randrange(0, 8)
        outliers = r.randrange(0, 50)
        ratio = n_out / n_in

        frag = ResultFragment(
            output={
                "features_processed": n_in,
                "features_after_processing": n_out,
                "new_features_created": n_out - n_in,
                "outliers_detected": outliers,
                "outliers_handled": "Replaced with median" if outliers > 0 else "None detected",
                "operations_applied": [
                    "Missing value imputation",
                    "Outlier detection",
                    "Feature scaling",
                    "Categorical encoding",
                ],
            },
            metrics={
                "Processing Time (s)": self._r2(r.random() * 5),
                "Memory Usage (MB)": self._r2(r.random() * 200 + 50),
                "Features Ratio": self._r2(ratio),
            },
        )
        if ratio > 3:
            frag.status = Status.WARNING
            frag.message = (
                "Execution completed with warning: High feature expansion ratio may lead to overfitting"
            )
        return frag

    def _model(self, node_type: str) -> ResultFragment:
        r = self.rng
        accuracy = self.baseline.get("accuracy") or r.random() * 0.25 + 0.7
        f1 = self.baseline.get("f1Score") or r.random() * 0.3 + 0.65
        auc = self.baseline.get("auc") or r.random() * 0.2 + 0.75

        output: Dict[str, Any]
        if "sklearn" in node_type:
            output = {
                "model_type": "RandomForestClassifier",
                "parameters": {
                    "n_estimators": 100,
                    "max_depth": r.randrange(5, 25),
                    "min_samples_split": 2,
                },
            }
        elif "xgboost" in node_type:
            output = {
                "model_type": "XGBoostClassifier",
                "parameters": {"learning_rate": 0.1, "n_estimators": 100, "max_depth": 5, "subsample": 0.8},
                "training_iterations": r.randrange(50, 100),
            }
        elif "tensorflow" in node_type:
            output = {
                "model_type": "Neural Network",
                "architecture": {
                    "input_layer": r.randrange(10, 60),
                    "hidden_layers": [128, 64],
                    "output_layer": 1,
                    "activation": "relu",
                },
                "training_epochs": r.randrange(10, 30),
                "batch_size": 32,
            }
        else:
            output = {
                "model_type": model_family(node_type),
                "parameters": {"learning_rate": 0.01, "max_depth": 5, "n_estimators": 100},
            }

        frag = ResultFragment(
            output=output,
            metrics={
                "Accuracy": accuracy,
                "F1 Score": f1,
                "AUC": auc,
                "Training Time (s)": self._r2(r.random() * 30 + 5),
            },
        )
        if r.random() < self.config.model_warning_rate:
            frag.status = Status.WARNING
            frag.message = "Model trained with warnings: Consider tuning hyperparameters for better performance"
        return frag

    def _evaluation(self) -> ResultFragment:
        r = self.rng
        accuracy = self.baseline.get("accuracy") or r.random() * 0.25 + 0.7
        precision = self.baseline.get("precision") or r.random() * 0.25 + 0.7
        recall = self.baseline.get("recall") or r.random() * 0.3 + 0.65

        tp = r.randrange(500, 1000)
        fp = r.randrange(50, 150)
        tn = r.randrange(500, 1000)
        fn = r.randrange(50, 150)

        frag = ResultFragment(
            output={
                "evaluation_method": "Cross-validation (5-fold)",
                "confusion_matrix": {
                    "true_positives": tp,
                    "false_positives": fp,
                    "true_negatives": tn,
                    "false_negatives": fn,
                },
                "classification_report": {
                    "class_0": {
                        "precision": precision,
                        "recall": recall,
                        "f1_score": round(2 * precision * recall / (precision + recall), 4),
                    },
                    "class_1": {
                        "precision": round(tp / (tp + fp), 4),
                        "recall": round(tp / (tp + fn), 4),
                        "f1_score": round(2 * tp / (2 * tp + fp + fn), 4),
                    },
                },
            },
            metrics={
                "Precision": precision,
                "Recall": recall,
                "Accuracy": accuracy,
                "Evaluation Time (s)": self._r2(r.random() * 15),
            },
        )
        if accuracy < 0.75:
            frag.status = Status.WARNING
            frag.message = "Evaluation completed with warnings: Model performance below target threshold"
        return frag

    def _deployment(self) -> ResultFragment:
        r = self.rng
        return ResultFragment(
            output={
                "endpoint": "https://ml-api.example.com/predict",
                "version": "1.0.0",
                "status": "deployed",
                "deployment_info": {
                    "environment": "production",
                    "instances": r.randrange(1, 4),
                    "api_framework": "Flask",
                    "container": "Docker",
                    "cloud_provider": "AWS",
                },
                "monitoring": {
                    "health_status": "Online",
                    "uptime": "99.9%",
                    "request_count": r.randrange(0, 1000),
                },
            },
            metrics={
                "Deployment Time (s)": self._r2(r.random() * 30),
                "API Latency (ms)": self._r2(r.random() * 200 + 50),
                "Throughput (req/s)": float(r.randrange(20, 120)),
            },
        )

    @staticmethod
    def _r2(value: float) -> float:
        return round(value, 2)
