"""Configuration dataclasses for the partition sampler."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class SolverConfig:
    """Tilt-solver knobs."""

    # Above this weight the unrestricted tilt uses the closed form.
    asymptotic_threshold: int = 200
    # Absolute gap between the bracket residuals at which bisection stops.
    tolerance: float = 1e-5
    max_iterations: int = 1000
    # Upper bracket is 1 - upper_gap.
    upper_gap: float = 1e-16


@dataclass(frozen=True)
class ConditionerConfig:
    """Retry budget for the exact-weight conditioners."""

    max_attempts: int | None = 1_000_000  # None → unbounded


@dataclass(frozen=True)
class PolicyConfig:
    """Selects one of the reference restriction policies."""

    name: str = "unrestricted"
    max_part: int = 10  # "max-part": parts ≤ max_part
    min_part: int = 4  # "min-part": parts ≥ min_part
    j: int = 5  # "j-mod-m": parts ≡ j (mod m)
    m: int = 7


@dataclass
class RunConfig:
    """Top-level knobs for one CLI run."""

    target: int = 100
    n_samples: int = 1
    method: str = "default"  # "default" | "pdc" | "rejection" | "random-size"
    seed: int | None = None
    manual_tilt: float | None = None
    show_ferrers: bool = False
    db_path: str | None = None
    compare: bool = False
    policy: PolicyConfig = field(default_factory=PolicyConfig)
    solver: SolverConfig = field(default_factory=SolverConfig)
    conditioner: ConditionerConfig = field(default_factory=ConditionerConfig)
