"""Search configuration with validation and file loading."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Optional

import yaml
from pydantic import BaseModel, Field

from boxstack.algorithms.annealing import schedule_length


class SearchConfig(BaseModel):
    """
    All tuneable parameters for a single stacking search.

    Temperature and cooling rate must both be positive and finite: the annealing loop
    cools linearly and only terminates once the temperature drops to zero.
    """

    initial_temperature: float = Field(gt=0, allow_inf_nan=False, description="Starting temperature")
    cooling_rate: float = Field(
        gt=0,
        allow_inf_nan=False,
        description="Temperature decrement per iteration")
    seed: Optional[int] = Field(default=None, description="Random seed for reproducible runs")
    max_iterations: Optional[int] = Field(
        default=None,
        gt=0,
        description="Optional hard cap on annealing iterations")
    multi_start: bool = Field(
        default=False,
        description="Try every candidate as the greedy base and keep the tallest")

    @property
    def iteration_budget(self) -> int:
        """Number of iterations the temperature schedule allows."""
        budget = schedule_length(self.initial_temperature, self.cooling_rate)
        if self.max_iterations is not None:
            budget = min(budget, self.max_iterations)
        return budget

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump()

    @classmethod
    def from_file(cls, filepath: Path | str, **overrides: Any) -> "SearchConfig":
        """
        Load configuration from a JSON or YAML file.

        Keyword overrides that are not None replace values from the file.

        Raises:
            ValueError: If the file extension is not recognized or the file
                does not hold a mapping.
            yaml.YAMLError: If a YAML file cannot be parsed.
            pydantic.ValidationError: If the resulting values are invalid.
        """
        filepath = Path(filepath)
        with filepath.open() as f:
            if filepath.suffix == ".json":
                data = json.load(f)
            elif filepath.suffix in (".yml", ".yaml"):
                data = yaml.safe_load(f) or {}
            else:
                raise ValueError(f"Unsupported config file format: {filepath}")

        if not isinstance(data, dict):
            raise ValueError(f"Config file must hold a mapping: {filepath}")
        data.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**data)

    def save_to_file(self, filepath: Path | str) -> None:
        """Save configuration to a JSON or YAML file."""
        filepath = Path(filepath)
        filepath.parent.mkdir(parents=True, exist_ok=True)

        with filepath.open("w") as f:
            if filepath.suffix == ".json":
                json.dump(self.to_dict(), f, indent=2)
            elif filepath.suffix in (".yml", ".yaml"):
                yaml.safe_dump(self.to_dict(), f, default_flow_style=False)
            else:
                raise ValueError(f"Unsupported config file format: {filepath}")
