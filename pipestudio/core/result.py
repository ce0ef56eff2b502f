from __future__ import annotations
"""Result types produced by a simulated pipeline run.

A node never throws its way out of a run: failures are recorded as an
`ExecutionResult` with ``Status.ERROR`` and the run moves on.
"""
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional

from .validator import ValidationReport

__all__ = ["Status", "Metric", "ResultFragment", "ExecutionResult", "RunReport"]


class Status(str, Enum):  # noqa: D101
    SUCCESS = "success"
    WARNING = "warning"
    ERROR = "error"


@dataclass(frozen=True, slots=True)
class Metric:
    """One named metric row as shown in the results panel."""

    name: str
    value: float

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "value": self.value}


@dataclass(slots=True)
class ResultFragment:
    """What a synthetic-result provider returns for one node type."""

    status: Status = Status.SUCCESS
    message: str = "Execution completed successfully"
    metrics: Dict[str, float] = field(default_factory=dict)
    output: Dict[str, Any] = field(default_factory=dict)


@dataclass(slots=True)
class ExecutionResult:  # noqa: D101
    node_id: str
    node_name: str
    node_type: str
    status: Status
    message: str
    timestamp: datetime
    metrics: Dict[str, float] = field(default_factory=dict)
    output: Dict[str, Any] = field(default_factory=dict)

    # ------------------------------------------------------------------ #
    @property
    def ok(self) -> bool:  # noqa: D401
        """Return True unless the node failed."""
        return self.status is not Status.ERROR

    @property
    def metric_rows(self) -> List[Metric]:
        """Metrics as ordered `Metric` rows."""
        return [Metric(name, value) for name, value in self.metrics.items()]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "nodeId": self.node_id,
            "nodeName": self.node_name,
            "nodeType": self.node_type,
            "status": self.status.value,
            "message": self.message,
            "timestamp": self.timestamp.isoformat(),
            "metrics": [m.to_dict() for m in self.metric_rows],
            "output": self.output,
        }


@dataclass(slots=True)
class RunReport:
    """Outcome of one pipeline run.

    *completed* is True once every node emitted its result, even when some of
    them report ``Status.ERROR``.  A rejected run has no results and carries
    the validation errors instead.
    """

    pipeline: str
    validation: ValidationReport
    results: List[ExecutionResult] = field(default_factory=list)
    completed: bool = False
    run_id: Optional[str] = None

    @property
    def rejected(self) -> bool:  # noqa: D401
        return not self.validation.valid

    @property
    def failed_nodes(self) -> List[str]:
        return [r.node_id for r in self.results if r.status is Status.ERROR]
