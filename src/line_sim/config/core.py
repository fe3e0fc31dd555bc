"""Run configuration for the line simulation."""

import math
from dataclasses import asdict, dataclass, fields, replace
from typing import Any

from line_sim.product.core import Stage

# camelCase keys used by the dashboard front end
_CAMEL_CASE_KEYS = {
    "duration": "duration",
    "mouldingMachines": "moulding_machines",
    "inspectionStations": "inspection_stations",
    "packagingMachines": "packaging_machines",
    "arrivalIntervalMean": "arrival_interval_mean",
    "degradationCostPerMinute": "degradation_cost_per_minute",
    "degradationThreshold": "degradation_threshold",
    "replications": "replications",
    "seed": "seed",
}

_MACHINE_FIELDS = {
    Stage.MOULDING: "moulding_machines",
    Stage.INSPECTION: "inspection_stations",
    Stage.PACKAGING: "packaging_machines",
}


class InvalidConfigError(ValueError):
    """Raised when a configuration cannot drive a meaningful run."""

    def __init__(self, errors: list[str]) -> None:
        self.errors = list(errors)
        super().__init__("Invalid simulation config: " + "; ".join(self.errors))


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _is_number(value: Any) -> bool:
    """Finite real number; NaN and infinities are rejected."""
    if not isinstance(value, (int, float)) or isinstance(value, bool):
        return False
    return math.isfinite(value)


@dataclass(frozen=True)
class SimulationConfig:
    """
    Immutable parameters of one invocation.

    Times are in minutes. Defaults reproduce the standard 8 hour shift
    scenario (2 moulding machines, 2 inspection stations, 1 packer).
    """

    duration: float = 480.0
    moulding_machines: int = 2
    inspection_stations: int = 2
    packaging_machines: int = 1
    arrival_interval_mean: float = 5.0

    # Degradation: cost accrues while a part waits for inspection
    degradation_cost_per_minute: float = 2.5
    degradation_threshold: float = 0.0  # Grace period before cost starts

    replications: int = 1
    seed: int = 42

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "SimulationConfig":
        """Build a config from snake_case or camelCase keys."""
        known = {f.name for f in fields(cls)}
        kwargs: dict[str, Any] = {}
        unknown = []
        for key, value in data.items():
            name = _CAMEL_CASE_KEYS.get(key, key)
            if name not in known:
                unknown.append(key)
                continue
            kwargs[name] = value
        if unknown:
            raise InvalidConfigError([f"unknown field '{k}'" for k in sorted(unknown)])
        return cls(**kwargs)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    def with_overrides(self, **changes: Any) -> "SimulationConfig":
        known = {f.name for f in fields(self)}
        unknown = sorted(k for k in changes if k not in known)
        if unknown:
            raise InvalidConfigError([f"unknown field '{k}'" for k in unknown])
        return replace(self, **changes)

    def machines_for(self, stage: Stage) -> int:
        """Server count configured for a stage."""
        count: int = getattr(self, _MACHINE_FIELDS[stage])
        return count

    def with_machines(self, stage: Stage, count: int) -> "SimulationConfig":
        return replace(self, **{_MACHINE_FIELDS[stage]: count})

    def validate(self) -> "SimulationConfig":
        """
        Check every field and raise InvalidConfigError listing all violations.
        Returns self so calls can be chained.
        """
        errors: list[str] = []

        if not _is_number(self.duration) or self.duration <= 0:
            errors.append(
                f"duration must be a finite number > 0 (got {self.duration!r})"
            )

        for name in _MACHINE_FIELDS.values():
            count = getattr(self, name)
            if not _is_int(count) or count <= 0:
                errors.append(f"{name} must be a positive integer (got {count!r})")

        if not _is_number(self.arrival_interval_mean) or self.arrival_interval_mean <= 0:
            errors.append(
                "arrival_interval_mean must be a finite number > 0 "
                f"(got {self.arrival_interval_mean!r})"
            )
        if (
            not _is_number(self.degradation_cost_per_minute)
            or self.degradation_cost_per_minute < 0
        ):
            errors.append(
                "degradation_cost_per_minute must be >= 0 "
                f"(got {self.degradation_cost_per_minute!r})"
            )
        if not _is_number(self.degradation_threshold) or self.degradation_threshold < 0:
            errors.append(
                f"degradation_threshold must be >= 0 (got {self.degradation_threshold!r})"
            )
        if not _is_int(self.replications) or self.replications < 1:
            errors.append(
                f"replications must be an integer >= 1 (got {self.replications!r})"
            )
        if not _is_int(self.seed):
            errors.append(f"seed must be an integer (got {self.seed!r})")

        if errors:
            raise InvalidConfigError(errors)
        return self
