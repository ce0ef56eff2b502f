from __future__ import annotations

"""Simulation settings for pipestudio runs.

Settings can be built in code (`make_config`), read from a YAML mapping
(`load_config`) or seeded from the environment (``PIPESTUDIO_SEED``).
"""

import os
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Dict, Optional

__all__ = [
    "SimulationConfig",
    "make_config",
    "load_config",
    "from_env",
    "SEED_ENV",
]

SEED_ENV = "PIPESTUDIO_SEED"


@dataclass
class SimulationConfig:  # noqa: D101 – self-documenting via fields
    # Per-node processing delay, seconds
    min_delay: float = 0.5
    max_delay: float = 1.5

    # Synthetic failure / warning knobs
    error_rate: float = 0.05
    model_warning_rate: float = 0.15
    max_missing_pct: float = 12.5  # upper bound of the drawn missing-cell share
    missing_warning_pct: float = 10.0

    # Reproducible runs when set
    seed: Optional[int] = None

    # Unknown keys are kept so configs stay forward-compatible
    extra: Dict[str, Any] = field(default_factory=dict)

    # -------------------------------------------------- #
    def check(self) -> "SimulationConfig":
        """Raise ValueError for inconsistent settings; return *self*."""
        if self.min_delay < 0 or self.max_delay < 0:
            raise ValueError("delays must be non-negative")
        if self.min_delay > self.max_delay:
            raise ValueError(
                f"min_delay ({self.min_delay}) is greater than max_delay ({self.max_delay})"
            )
        for name in ("error_rate", "model_warning_rate"):
            value = getattr(self, name)
            if not 0.0 <= value <= 1.0:
                raise ValueError(f"{name} must be within [0, 1], got {value}")
        if not 0.0 <= self.max_missing_pct <= 100.0:
            raise ValueError(f"max_missing_pct must be within [0, 100], got {self.max_missing_pct}")
        return self

    def to_dict(self) -> Dict[str, Any]:
        """Return a JSON-serialisable representation."""
        return {f.name: getattr(self, f.name) for f in fields(self)}

    @classmethod
    def instant(cls, **kwargs) -> "SimulationConfig":
        """Config without delays – handy for tests and ``--fast`` runs."""
        return make_config(min_delay=0.0, max_delay=0.0, **kwargs)


# --------------------------------------------------------------------------- #
# Factories
# --------------------------------------------------------------------------- #

def make_config(**kwargs) -> SimulationConfig:  # noqa: D401 – simple factory
    """Build a :class:`SimulationConfig`.

    Keyword arguments map to the dataclass fields; unknown keys are stored in
    *extra*.
    """
    known = {f.name for f in fields(SimulationConfig)} - {"extra"}
    cfg_kwargs = {k: v for k, v in kwargs.items() if k in known}
    extra = {k: v for k, v in kwargs.items() if k not in known}
    return SimulationConfig(extra=extra, **cfg_kwargs).check()


def from_env(cfg: SimulationConfig | None = None) -> SimulationConfig:
    """Apply environment overrides to *cfg* (or to the defaults)."""
    cfg = cfg or SimulationConfig()
    seed = os.environ.get(SEED_ENV)
    if seed:
        try:
            cfg.seed = int(seed)
        except ValueError as e:
            raise ValueError(f"{SEED_ENV} must be an integer, got {seed!r}") from e
    return cfg


def load_config(path: str | Path) -> SimulationConfig:
    """Load settings from a YAML mapping at *path*, then apply env overrides."""
    import yaml

    data = yaml.safe_load(Path(path).read_text()) or {}
    if not isinstance(data, dict):
        raise ValueError(f"{path}: expected a mapping of settings")
    return from_env(make_config(**data))
