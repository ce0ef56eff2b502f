from __future__ import annotations

"""pipestudio.utils.ids
~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~
Identifier helpers.

* run ids tag events and the files written for a run;
* node ids are minted when a suggested component is added to a graph;
* :func:`snake_case` turns pipeline names into file-name prefixes.
"""

import re
import uuid
from datetime import datetime, timezone

__all__ = ["snake_case", "new_run_id", "new_node_id"]

_NON_WORD = re.compile(r"[^a-zA-Z0-9]+")


def snake_case(text: str) -> str:  # noqa: D401
    """Return *text* lower-cased with every non-alphanumeric run collapsed to ``_``.

    ``"Run A (tuned)"`` → ``"run_a_tuned"``.
    """
    return _NON_WORD.sub("_", text).strip("_").lower()


def _short_hex() -> str:
    return uuid.uuid4().hex[:8]


def new_run_id() -> str:
    """Return ``YYYYMMDDTHHMMSS-<hex>`` (UTC), sortable by start time."""
    return f"{datetime.now(timezone.utc):%Y%m%dT%H%M%S}-{_short_hex()}"


def new_node_id(node_type: str) -> str:
    """Return ``<node_type>-<hex>``, e.g. ``data-preprocessing-1f3a9c2e``."""
    return f"{node_type}-{_short_hex()}"
