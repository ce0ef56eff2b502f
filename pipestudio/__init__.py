"""pipestudio: ordering, validation and simulation core for visual ML pipelines.

Main components:
* `Graph`: Typed nodes joined by directed, optionally labelled edges
* `sequence`: Execution order (DFS topological sort with a cycle fallback)
* `validate`: Structural checks returning errors and warnings
* `Executor`: Sequential simulated runs streaming per-node results
* `recommend`: Next-component suggestions for a focused node
"""

# Version info
__version__ = "0.1.0"

# Core components
from pipestudio.core.graph import Graph, PipelineNode, PipelineEdge, NodeData, Position
from pipestudio.core.sequencer import sequence, has_cycle
from pipestudio.core.validator import ValidationReport, validate
from pipestudio.core.result import ExecutionResult, Metric, ResultFragment, RunReport, Status
from pipestudio.core.synthetic import SyntheticResultProvider
from pipestudio.core.executor import Executor, run_pipeline, run_comparison, compare_pipelines
from pipestudio.core.compare import ComparisonReport, summarize
from pipestudio.core.recommend import Recommendation, recommend, apply_recommendation

# Configuration & documents
from pipestudio.config import SimulationConfig, make_config, load_config
from pipestudio.io.loader import PipelineDocument, load_pipeline, dump_pipeline

# Export all important symbols
__all__ = [
    # Graph model
    "Graph",
    "PipelineNode",
    "PipelineEdge",
    "NodeData",
    "Position",

    # Functions
    "sequence",
    "has_cycle",
    "validate",
    "recommend",
    "apply_recommendation",
    "run_pipeline",
    "run_comparison",
    "compare_pipelines",
    "summarize",
    "make_config",
    "load_config",
    "load_pipeline",
    "dump_pipeline",

    # Result / report classes
    "ValidationReport",
    "ExecutionResult",
    "Metric",
    "ResultFragment",
    "RunReport",
    "Status",
    "ComparisonReport",
    "Recommendation",

    # Runtime classes
    "Executor",
    "SyntheticResultProvider",
    "SimulationConfig",
    "PipelineDocument",
]
