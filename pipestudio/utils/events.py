from __future__ import annotations
"""Ultra-lightweight pub/sub **EventBus** used by the executor.

Example
-------
```python
from pipestudio.utils.events import subscribe, publish, NodeFinished

@subscribe(NodeFinished)
def _on_node(evt: NodeFinished):
    print(f"{evt.node_id} finished with {evt.status}")
```
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Type, TypeVar

__all__ = [
    "Event",
    "RunStarted",
    "NodeStarted",
    "NodeFinished",
    "RunRejected",
    "RunCompleted",
    "ComparisonCompleted",
    "subscribe",
    "unsubscribe",
    "publish",
    "clear",
]

T = TypeVar("T", bound="Event")
_Handler = Callable[[Any], None]
_REGISTRY: Dict[Type["Event"], List[_Handler]] = {}


def _now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(slots=True, kw_only=True)
class Event:  # noqa: D101 – base event
    ts: datetime = field(default_factory=_now)


# --------------------------------------------------------------------------- #
# Concrete events
# --------------------------------------------------------------------------- #
@dataclass(slots=True)
class RunStarted(Event):
    run_id: str
    pipeline: str
    total: int  # number of nodes queued


@dataclass(slots=True)
class NodeStarted(Event):
    run_id: str
    node_id: str
    index: int


@dataclass(slots=True)
class NodeFinished(Event):
    run_id: str
    node_id: str
    index: int
    status: str


@dataclass(slots=True)
class RunRejected(Event):
    run_id: str
    pipeline: str
    errors: List[str]


@dataclass(slots=True)
class RunCompleted(Event):
    run_id: str
    pipeline: str
    total: int
    failed: int


@dataclass(slots=True)
class ComparisonCompleted(Event):
    pipeline_a: str
    pipeline_b: str


# --------------------------------------------------------------------------- #
# API helpers
# --------------------------------------------------------------------------- #

def subscribe(event_type: Type[T]):  # noqa: D401
    """Decorator: register *func* to receive *event_type* events."""

    def _decorator(func: _Handler) -> _Handler:
        _REGISTRY.setdefault(event_type, []).append(func)
        return func

    return _decorator


def unsubscribe(event_type: Type[T], func: _Handler) -> None:
    handlers = _REGISTRY.get(event_type, [])
    if func in handlers:
        handlers.remove(func)


def clear() -> None:
    """Drop every registered handler."""
    _REGISTRY.clear()


def publish(evt: Event) -> None:  # noqa: D401
    """Publish an event to all registered subscribers."""
    for func in list(_REGISTRY.get(type(evt), [])):
        try:
            func(evt)
        except Exception as e:  # noqa: BLE001 – subscribers never abort a run
            from pipestudio.utils.logging import log

            log.warning("event handler %s failed: %s", getattr(func, "__name__", func), e)
