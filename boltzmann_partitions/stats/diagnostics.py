"""stats/diagnostics.py — Sanity checks on sampler output."""

from __future__ import annotations

import logging
from dataclasses import dataclass

import numpy as np
from scipy.stats import norm

from ..config import ConditionerConfig, SolverConfig
from ..policy.restrictions import RestrictionPolicy, policy_name
from ..sampling.boltzmann import RngLike, random_size_draw
from ..sampling.conditioners import CONDITIONERS
from ..sampling.state import PartitionState
from ..search.tilt import solve_tilt

logger = logging.getLogger(__name__)


@dataclass
class MeanWeightCheck:
    """Sample mean of Boltzmann weights against the target."""

    target: int
    tilt: float
    n_draws: int
    mean: float
    std: float

    @property
    def stderr(self) -> float:
        return self.std / np.sqrt(self.n_draws)

    @property
    def z_score(self) -> float:
        if self.stderr == 0.0:
            return 0.0 if self.mean == self.target else float("inf")
        return (self.mean - self.target) / self.stderr

    @property
    def p_value(self) -> float:
        """Two-sided normal p-value for ``mean == target``."""
        return float(2.0 * norm.sf(abs(self.z_score)))

    def within(self, confidence: float = 0.999) -> bool:
        """True if the target lies inside the normal *confidence* band."""
        return abs(self.z_score) <= norm.ppf(0.5 + confidence / 2.0)


@dataclass
class AttemptStats:
    """Attempts per accepted sample for one conditioner."""

    method: str
    mean: float
    std: float
    max: int


def boltzmann_mean_check(
    policy: RestrictionPolicy,
    n: int,
    n_draws: int = 1_000,
    rng: RngLike = None,
    tilt: float | None = None,
    solver: SolverConfig | None = None,
) -> MeanWeightCheck:
    """Draw *n_draws* unconditioned partitions and summarise their weights."""
    gen = np.random.default_rng(rng)
    x = tilt if tilt is not None else solve_tilt(n, policy, solver)
    state = PartitionState(policy=policy)
    weights = np.empty(n_draws, dtype=np.float64)
    for k in range(n_draws):
        weights[k] = random_size_draw(state, n, x, gen).weight

    check = MeanWeightCheck(
        target=n,
        tilt=x,
        n_draws=n_draws,
        mean=float(weights.mean()),
        std=float(weights.std(ddof=1)) if n_draws > 1 else 0.0,
    )
    logger.info(
        "Boltzmann mean for %s n=%d: %.2f ± %.2f over %d draws (z=%.2f)",
        policy_name(policy), n, check.mean, check.stderr, n_draws, check.z_score,
    )
    return check


def compare_conditioners(
    policy: RestrictionPolicy,
    n: int,
    n_samples: int = 100,
    rng: RngLike = None,
    methods: tuple[str, ...] = ("pdc", "rejection"),
    conditioner: ConditionerConfig | None = None,
    solver: SolverConfig | None = None,
) -> dict[str, AttemptStats]:
    """Attempts-per-sample for each exact-weight method on the same target."""
    if n_samples < 1:
        raise ValueError(f"n_samples must be >= 1, got {n_samples}")
    if conditioner is None:
        conditioner = ConditionerConfig()
    gen = np.random.default_rng(rng)
    state = PartitionState(policy=policy)
    x = solve_tilt(n, policy, solver) if n > 0 and state.support(n).size else None

    stats: dict[str, AttemptStats] = {}
    for method in methods:
        sampler = CONDITIONERS[method]
        attempts = np.empty(n_samples, dtype=np.int64)
        for k in range(n_samples):
            sampler(state, n, tilt=x, rng=gen, max_attempts=conditioner.max_attempts)
            attempts[k] = state.last_attempts
        stats[method] = AttemptStats(
            method=method,
            mean=float(attempts.mean()),
            std=float(attempts.std()),
            max=int(attempts.max()),
        )
        logger.info(
            "%-10s n=%d  attempts/sample: mean=%.1f  std=%.1f  max=%d",
            method, n, stats[method].mean, stats[method].std, stats[method].max,
        )
    return stats
