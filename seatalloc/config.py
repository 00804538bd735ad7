"""Tunable weights for seat selection."""

from dataclasses import dataclass, fields, replace
from pathlib import Path

import yaml


@dataclass(frozen=True)
class SelectionParams:
    base_score: int = 5
    handoff_bonus: int = 160  # existing passenger exits where we board (or boards where we exit)
    disjoint_bonus: int = 40  # existing passenger entirely before or after us
    front_origin: int = 200
    front_step: int = 10
    min_pool: int = 12
    pool_factor: int = 4

    def pool_size(self, count: int) -> int:
        """Number of top-ranked free seats the combination search may use."""
        return max(self.min_pool, self.pool_factor * count)


DEFAULT_PARAMS = SelectionParams()


def load_params(yaml_path: Path, base: SelectionParams = DEFAULT_PARAMS) -> SelectionParams:
    """
    Load parameter overrides from a YAML file.

    The file holds a flat mapping of field name to integer value. Missing
    fields keep the value from ``base``.
    """
    with yaml_path.open(encoding="utf-8") as f:
        data = yaml.safe_load(f)

    if not data:
        return base
    if not isinstance(data, dict):
        raise ValueError(f"Expected a mapping of parameters in {yaml_path}")

    known = {f.name for f in fields(SelectionParams)}
    unknown = sorted(set(data) - known)
    if unknown:
        raise ValueError(f"Unknown parameters: {', '.join(unknown)}")

    overrides: dict[str, int] = {}
    for name, value in data.items():
        if isinstance(value, bool) or not isinstance(value, int):
            raise ValueError(f"Parameter {name} must be an integer, got {value!r}")
        overrides[name] = value

    return replace(base, **overrides)
