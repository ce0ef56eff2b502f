# This file makes the 'utils' directory a Python package.

"""pipestudio utilities."""

from .ids import snake_case, new_run_id, new_node_id

__all__ = [
    "snake_case",
    "new_run_id",
    "new_node_id",
]
