from __future__ import annotations
"""Node-type catalog: well-known type tags, predicates and labelling rules.

The catalog is open-ended – any string is a valid node type.  Predicates use
substring matching so that families like ``"xgboost-models"`` or
``"api-deployment"`` are recognised without being listed here.
"""
from typing import Dict, List, Tuple

__all__ = [
    "DATA_SOURCE",
    "DATA_PREPROCESSING",
    "FEATURE_ENGINEERING",
    "SKLEARN_MODELS",
    "MODEL_EVALUATION",
    "API_DEPLOYMENT",
    "CONDITIONAL_SPLIT",
    "NEXT_STEPS",
    "is_data_source",
    "is_preprocessing",
    "is_feature",
    "is_model",
    "is_evaluation",
    "is_deployment",
    "is_workflow",
    "default_label",
    "edge_label",
]

DATA_SOURCE = "data-source"
DATA_PREPROCESSING = "data-preprocessing"
FEATURE_ENGINEERING = "feature-engineering"
SKLEARN_MODELS = "sklearn-models"
MODEL_EVALUATION = "model-evaluation"
API_DEPLOYMENT = "api-deployment"
CONDITIONAL_SPLIT = "conditional-split"


# --------------------------------------------------------------------------- #
# Type families
# --------------------------------------------------------------------------- #

def is_data_source(node_type: str | None) -> bool:
    return bool(node_type) and DATA_SOURCE in node_type  # type: ignore[operator]


def is_preprocessing(node_type: str | None) -> bool:
    return bool(node_type) and "preprocessing" in node_type  # type: ignore[operator]


def is_feature(node_type: str | None) -> bool:
    return bool(node_type) and "feature" in node_type  # type: ignore[operator]


def is_model(node_type: str | None) -> bool:
    return bool(node_type) and "model" in node_type  # type: ignore[operator]


def is_evaluation(node_type: str | None) -> bool:
    return bool(node_type) and "evaluation" in node_type  # type: ignore[operator]


def is_deployment(node_type: str | None) -> bool:
    return bool(node_type) and "deployment" in node_type  # type: ignore[operator]


def is_workflow(node_type: str | None) -> bool:
    return bool(node_type) and "workflow" in node_type  # type: ignore[operator]


# --------------------------------------------------------------------------- #
# Labels
# --------------------------------------------------------------------------- #

def default_label(node_type: str) -> str:
    """Return the label a freshly created node of *node_type* gets.

    ``"data-source"`` → ``"Data source"``.
    """
    if not node_type:
        return ""
    return node_type[0].upper() + node_type[1:].replace("-", " ")


def edge_label(source_type: str | None, target_type: str | None) -> str:
    """Semantic label for an edge connecting *source_type* → *target_type*."""
    if source_type == DATA_SOURCE and is_preprocessing(target_type):
        return "raw data"
    if is_preprocessing(source_type) and is_feature(target_type):
        return "processed data"
    if is_feature(source_type) and is_model(target_type):
        return "features"
    if is_model(source_type) and is_evaluation(target_type):
        return "predictions"
    return "data flow"


# --------------------------------------------------------------------------- #
# Generic next-step table used by the recommendation engine
# --------------------------------------------------------------------------- #

NEXT_STEPS: Dict[str, List[Tuple[str, str]]] = {
    DATA_SOURCE: [
        (DATA_PREPROCESSING, "Clean and transform raw data"),
        (FEATURE_ENGINEERING, "Create features directly (basic)"),
    ],
    DATA_PREPROCESSING: [
        (FEATURE_ENGINEERING, "Extract features from processed data"),
        ("data-balancing", "Balance class distribution"),
        ("data-augmentation", "Augment data to increase sample size"),
        (SKLEARN_MODELS, "Train a model on processed data"),
    ],
    FEATURE_ENGINEERING: [
        (SKLEARN_MODELS, "Train a model on extracted features"),
        ("tensorflow-models", "Train a deep learning model"),
        ("pytorch-models", "Train a gradient boosting model"),
        ("xgboost-models", "Train an advanced gradient boosting model"),
        ("feature-importance", "Visualize feature importance"),
    ],
    SKLEARN_MODELS: [
        (MODEL_EVALUATION, "Evaluate model performance"),
        ("hyperparameter-tuning", "Optimize model parameters"),
        ("cross-validation", "Validate model with cross-validation"),
        (API_DEPLOYMENT, "Deploy the trained model"),
    ],
    MODEL_EVALUATION: [
        (API_DEPLOYMENT, "Deploy evaluated model as API"),
        ("model-monitoring", "Monitor deployed model performance"),
        (CONDITIONAL_SPLIT, "Apply conditional logic based on metrics"),
        ("visualization", "Visualize evaluation results"),
    ],
    "hyperparameter-tuning": [
        (MODEL_EVALUATION, "Evaluate tuned model performance"),
        ("model-versioning", "Version best performing model"),
    ],
}
