from __future__ import annotations
"""Simulated pipeline execution on an anyio event loop.

A run validates the graph, orders it with the sequencer and then processes
nodes strictly one at a time: sleep for a random delay, ask the result
provider for the node's fragment, emit the `ExecutionResult`.  The next node
starts only after the previous result was emitted.  A node reporting an error
never stops the nodes queued after it.

`run_comparison` drives two executors concurrently inside one task group, so
A's and B's results interleave while each side stays sequential.
"""
import inspect
import random
from datetime import datetime, timedelta, timezone
from functools import partial
from typing import Any, AsyncIterator, Awaitable, Callable, List, Optional, Union

import anyio

from .compare import ComparisonReport
from .graph import Graph, PipelineNode
from .result import ExecutionResult, ResultFragment, RunReport, Status
from .sequencer import sequence
from .synthetic import ResultProvider, SyntheticResultProvider
from .validator import ValidationReport, validate
from ..config import SimulationConfig
from ..utils.events import (
    ComparisonCompleted,
    NodeFinished,
    NodeStarted,
    RunCompleted,
    RunRejected,
    RunStarted,
    publish,
)
from ..utils.ids import new_run_id
from ..utils.logging import log

__all__ = ["Executor", "run_pipeline", "run_comparison", "compare_pipelines"]

ResultCallback = Callable[[ExecutionResult], Union[None, Awaitable[None]]]
SideCallback = Callable[[str, ExecutionResult], Union[None, Awaitable[None]]]


async def _maybe_await(value: Any) -> None:
    if inspect.isawaitable(value):
        await value


class Executor:  # noqa: D101
    def __init__(
        self,
        graph: Graph,
        *,
        name: str = "pipeline",
        provider: ResultProvider | None = None,
        config: SimulationConfig | None = None,
        rng: random.Random | None = None,
    ):
        self.graph = graph
        self.name = name
        self.config = config or SimulationConfig()
        self.rng = rng or random.Random(self.config.seed)
        self.provider: ResultProvider = provider or SyntheticResultProvider(self.config, rng=self.rng)
        self.run_id = new_run_id()

        self.validation: ValidationReport | None = None
        self.order: List[PipelineNode] = []
        self.completed = False
        self._running = False
        self._last_ts: datetime | None = None

    # ------------------------------------------------------------------ #
    async def run_iter(self) -> AsyncIterator[ExecutionResult]:
        """Yield one result per node, in sequencer order.

        Yields nothing when validation fails; the errors are then available
        on :attr:`validation`.
        """
        if self._running:
            raise RuntimeError(f"run '{self.run_id}' is already in progress")
        self._running = True
        try:
            self.validation = validate(self.graph)
            if not self.validation.valid:
                log.warning("Pipeline '%s' rejected: %s", self.name, "; ".join(self.validation.errors))
                publish(RunRejected(run_id=self.run_id, pipeline=self.name, errors=list(self.validation.errors)))
                return
            for warning in self.validation.warnings:
                log.info("Pipeline '%s': %s", self.name, warning)

            self.order = sequence(self.graph)
            log.debug("EXECUTOR order: %s", [n.id for n in self.order])
            publish(RunStarted(run_id=self.run_id, pipeline=self.name, total=len(self.order)))

            failed = 0
            for idx, node in enumerate(self.order):
                publish(NodeStarted(run_id=self.run_id, node_id=node.id, index=idx))
                await anyio.sleep(self._delay())

                result = self._execute_node(node)
                if result.status is Status.ERROR:
                    failed += 1
                publish(NodeFinished(run_id=self.run_id, node_id=node.id, index=idx, status=result.status.value))
                yield result

            self.completed = True
            log.info("Pipeline '%s' complete: %d nodes, %d failed", self.name, len(self.order), failed)
            publish(RunCompleted(run_id=self.run_id, pipeline=self.name, total=len(self.order), failed=failed))
        finally:
            self._running = False

    # ------------------------------------------------------------------ #
    async def run(self, on_result: ResultCallback | None = None) -> RunReport:
        """Drive :meth:`run_iter` to the end and return the full report.

        *on_result* (sync or async) sees every result as soon as it is emitted.
        """
        results: List[ExecutionResult] = []
        async for result in self.run_iter():
            results.append(result)
            if on_result is not None:
                await _maybe_await(on_result(result))

        if self.validation is None:
            raise RuntimeError(f"run '{self.run_id}' ended before the pipeline was validated")
        return RunReport(
            pipeline=self.name,
            validation=self.validation,
            results=results,
            completed=self.completed,
            run_id=self.run_id,
        )

    # Internals ---------------------------------------------------------- #
    def _delay(self) -> float:
        lo, hi = self.config.min_delay, self.config.max_delay
        return lo if hi <= lo else self.rng.uniform(lo, hi)

    def _stamp(self) -> datetime:
        # emission times are strictly increasing even on coarse clocks
        ts = datetime.now(timezone.utc)
        if self._last_ts is not None and ts <= self._last_ts:
            ts = self._last_ts + timedelta(microseconds=1)
        self._last_ts = ts
        return ts

    def _execute_node(self, node: PipelineNode) -> ExecutionResult:
        try:
            frag = self.provider(node.type)
        except Exception as e:  # noqa: BLE001 – recorded as a failed node
            log.exception("result provider failed on node '%s'", node.id)
            frag = ResultFragment(status=Status.ERROR, message=f"Execution failed: {e}")

        return ExecutionResult(
            node_id=node.id,
            node_name=node.data.label or node.type,
            node_type=node.type,
            status=frag.status,
            message=frag.message,
            timestamp=self._stamp(),
            metrics=dict(frag.metrics),
            output=dict(frag.output),
        )


# --------------------------------------------------------------------------- #
# Convenience entry points
# --------------------------------------------------------------------------- #

def run_pipeline(
    graph: Graph,
    *,
    name: str = "pipeline",
    config: SimulationConfig | None = None,
    provider: ResultProvider | None = None,
    on_result: ResultCallback | None = None,
) -> RunReport:
    """Blocking wrapper around :meth:`Executor.run`."""
    executor = Executor(graph, name=name, config=config, provider=provider)
    return anyio.run(executor.run, on_result)


async def run_comparison(
    graph_a: Graph,
    graph_b: Graph,
    *,
    name_a: str = "A",
    name_b: str = "B",
    config: SimulationConfig | None = None,
    provider_a: ResultProvider | None = None,
    provider_b: ResultProvider | None = None,
    on_result: SideCallback | None = None,
) -> ComparisonReport:
    """Run *graph_a* and *graph_b* concurrently; return once both finished.

    *on_result* receives ``("A" | "B", result)``.  No ordering holds between
    the two sides, only within each.
    """
    config = config or SimulationConfig()
    master = random.Random(config.seed)
    executors = {
        "A": Executor(graph_a, name=name_a, config=config, provider=provider_a,
                      rng=random.Random(master.getrandbits(64))),
        "B": Executor(graph_b, name=name_b, config=config, provider=provider_b,
                      rng=random.Random(master.getrandbits(64))),
    }
    reports: dict[str, RunReport] = {}

    async def _side(label: str) -> None:
        callback: Optional[ResultCallback] = None
        if on_result is not None:
            callback = partial(on_result, label)
        reports[label] = await executors[label].run(on_result=callback)

    async with anyio.create_task_group() as tg:
        tg.start_soon(_side, "A")
        tg.start_soon(_side, "B")

    publish(ComparisonCompleted(pipeline_a=name_a, pipeline_b=name_b))
    log.info("Comparison between '%s' and '%s' complete", name_a, name_b)
    return ComparisonReport(a=reports["A"], b=reports["B"], graph_a=graph_a, graph_b=graph_b)


def compare_pipelines(graph_a: Graph, graph_b: Graph, **kwargs) -> ComparisonReport:
    """Blocking wrapper around :func:`run_comparison`."""

    async def _main() -> ComparisonReport:
        return await run_comparison(graph_a, graph_b, **kwargs)

    return anyio.run(_main)
