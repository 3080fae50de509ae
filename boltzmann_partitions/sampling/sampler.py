"""
sampling/sampler.py — Stateful sampler that owns a policy and a generator.

Each ``PartitionSampler`` holds its own ``numpy.random.Generator``; two
samplers never share random state, so one per thread is safe without locks.
"""

from __future__ import annotations

import logging

import numpy as np

from ..config import ConditionerConfig, SolverConfig
from ..policy.restrictions import RestrictionPolicy, policy_name, unrestricted
from ..search.tilt import solve_tilt
from .boltzmann import random_size_draw
from .conditioners import (
    pdc_deterministic_second_half,
    random_partition,
    rejection_sampling,
)
from .state import PartitionState

logger = logging.getLogger(__name__)

METHODS: tuple[str, ...] = ("default", "pdc", "rejection", "random-size")


class PartitionSampler:
    """Random integer partitions with parts restricted by *policy*.

    Parameters
    ----------
    policy:
        Restriction policy, ``index(i) -> i-th allowed part`` (0 ends it).
    seed:
        Seed or ``Generator`` for the private RNG.
    solver:
        Tilt-solver settings.
    conditioner:
        Retry budget for the exact-weight methods.
    """

    def __init__(
        self,
        policy: RestrictionPolicy = unrestricted,
        seed: int | np.random.Generator | None = None,
        solver: SolverConfig | None = None,
        conditioner: ConditionerConfig | None = None,
    ) -> None:
        self.policy = policy
        self.solver = solver or SolverConfig()
        self.conditioner = conditioner or ConditionerConfig()
        self.state = PartitionState(policy=policy)
        self._rng = np.random.default_rng(seed)

    def __repr__(self) -> str:
        return f"PartitionSampler(policy={policy_name(self.policy)}, state={self.state.as_dict()})"

    # ---------------------------------------------------------------- #
    #  Sampling                                                        #
    # ---------------------------------------------------------------- #

    def __call__(self, n: int, tilt: float | None = None) -> PartitionState:
        """Uniform (conditioned Boltzmann) partition of exactly *n*."""
        return random_partition(
            self.state, n, tilt=tilt, rng=self._rng,
            max_attempts=self.conditioner.max_attempts, solver=self.solver,
        )

    def random_size(self, n: int, tilt: float | None = None) -> PartitionState:
        """Boltzmann partition with expected weight *n* (exact weight random)."""
        return random_size_draw(self.state, n, tilt=tilt, rng=self._rng, solver=self.solver)

    def rejection_sampling(self, n: int, tilt: float | None = None) -> PartitionState:
        return rejection_sampling(
            self.state, n, tilt=tilt, rng=self._rng,
            max_attempts=self.conditioner.max_attempts, solver=self.solver,
        )

    def pdc_deterministic_second_half(self, n: int, tilt: float | None = None) -> PartitionState:
        return pdc_deterministic_second_half(
            self.state, n, tilt=tilt, rng=self._rng,
            max_attempts=self.conditioner.max_attempts, solver=self.solver,
        )

    def draw(self, n: int, method: str = "default", tilt: float | None = None) -> PartitionState:
        """Dispatch to one of :data:`METHODS` by name."""
        if method == "default":
            return self(n, tilt)
        if method == "pdc":
            return self.pdc_deterministic_second_half(n, tilt)
        if method == "rejection":
            return self.rejection_sampling(n, tilt)
        if method == "random-size":
            return self.random_size(n, tilt)
        raise ValueError(f"unknown method {method!r}; choose from {', '.join(METHODS)}")

    def sample_many(
        self,
        n: int,
        count: int,
        method: str = "default",
        tilt: float | None = None,
    ) -> list[dict[int, int]]:
        """Draw *count* independent partitions and return their multiplicities."""
        if tilt is None and n > 0 and self.state.support(n).size:
            # Solve once for the whole batch.
            tilt = self.tilt(n)
        samples: list[dict[int, int]] = []
        for _ in range(count):
            samples.append(self.draw(n, method, tilt).as_dict())
        logger.info(
            "Drew %d %s samples of n=%d under policy %s",
            count, method, n, policy_name(self.policy),
        )
        return samples

    def tilt(self, n: int) -> float:
        return solve_tilt(n, self.policy, self.solver)
