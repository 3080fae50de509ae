"""
sampling/conditioners.py — Exact-weight samplers built on the Boltzmann draw.

Both algorithms return a partition of weight exactly ``n`` whose law is the
Boltzmann law conditioned on that weight (uniform over all partitions of
``n`` for the unrestricted policy).

Design notes
------------
* **Rejection sampling** — redraw everything until the weight is ``n``.
  Expected attempts grow like ``n^(3/4)`` for unrestricted parts.
* **PDC deterministic second half** — the smallest allowed part ``s`` is
  not sampled; its count ``Z`` is filled in afterwards.  Given the rest of
  the partition with weight ``T``, ``Z`` must equal ``k = (n - T) / s``.
  Under the Boltzmann model ``P(Z = k) = (1 - x^s) x^(s k)``, whose maximum
  over ``k`` is at ``k = 0``.  Accepting with probability
  ``P(Z = k) / P(Z = 0) = x^(s k)`` therefore reproduces the exact
  conditional law.  Only the remainder has to line up, so far fewer
  attempts are needed.
* **Tilt** — solved once per call and reused on every attempt.  A manual
  tilt is used for both the draws and the acceptance test.
* **Budget** — every loop is capped by ``max_attempts``; running out raises
  :class:`ExhaustedRetries` instead of hanging.
"""

from __future__ import annotations

import logging
from itertools import count
from typing import Iterator

import numpy as np

from ..config import ConditionerConfig, SolverConfig
from ..errors import ExhaustedRetries, InfeasibleTarget
from ..policy.restrictions import support_gcd
from ..search.tilt import solve_tilt
from .boltzmann import RngLike, check_tilt, random_size_draw
from .state import PartitionState

logger = logging.getLogger(__name__)

_DEFAULT_MAX_ATTEMPTS = ConditionerConfig().max_attempts


def _attempts(max_attempts: int | None) -> Iterator[int]:
    if max_attempts is None:
        return count(1)
    if max_attempts < 1:
        raise ValueError(f"max_attempts must be >= 1 or None, got {max_attempts}")
    return iter(range(1, max_attempts + 1))


def _prepare(state: PartitionState, n: int) -> bool:
    """Clear *state* and check that *n* is reachable.

    Returns ``False`` when there is nothing to sample (``n == 0``).
    """
    state.clear()
    state.last_attempts = 0
    if n < 0:
        raise ValueError(f"target weight must be >= 0, got {n}")
    if n == 0:
        return False

    parts = state.support(n)
    if parts.size == 0:
        raise InfeasibleTarget(n, "every allowed part is larger than the target")
    g = support_gcd(parts)
    if n % g:
        raise InfeasibleTarget(n, f"all allowed parts <= {n} are multiples of {g}")
    return True


def _resolve_tilt(
    state: PartitionState,
    n: int,
    tilt: float | None,
    solver: SolverConfig | None,
) -> float:
    if tilt is not None:
        return check_tilt(tilt)
    return solve_tilt(n, state.policy, solver)


def rejection_sampling(
    state: PartitionState,
    n: int,
    tilt: float | None = None,
    rng: RngLike = None,
    max_attempts: int | None = _DEFAULT_MAX_ATTEMPTS,
    solver: SolverConfig | None = None,
) -> PartitionState:
    """Redraw a Boltzmann partition until its weight is exactly *n*."""
    if not _prepare(state, n):
        return state
    x = _resolve_tilt(state, n, tilt, solver)
    gen = np.random.default_rng(rng)

    attempt = 0
    for attempt in _attempts(max_attempts):
        random_size_draw(state, n, x, gen)
        if state.weight == n:
            state.last_attempts = attempt
            logger.debug("Rejection sampling accepted n=%d after %d attempts", n, attempt)
            return state

    state.clear()
    raise ExhaustedRetries("rejection_sampling", n, attempt)


def pdc_deterministic_second_half(
    state: PartitionState,
    n: int,
    tilt: float | None = None,
    rng: RngLike = None,
    max_attempts: int | None = _DEFAULT_MAX_ATTEMPTS,
    solver: SolverConfig | None = None,
) -> PartitionState:
    """Draw the large parts, then complete with the smallest part.

    See the module notes for why the acceptance probability ``x^(s k)``
    keeps the output distribution exact.
    """
    if not _prepare(state, n):
        return state
    x = _resolve_tilt(state, n, tilt, solver)
    gen = np.random.default_rng(rng)
    s = int(state.support(n)[0])
    log_x = np.log(np.longdouble(x))

    attempt = 0
    for attempt in _attempts(max_attempts):
        random_size_draw(state, n, x, gen)
        state.set_multiplicity(s, 0)
        diff = n - state.weight
        if diff < 0 or diff % s:
            continue
        k = diff // s
        if gen.random() <= np.exp(log_x * s * k):
            state.set_multiplicity(s, k)
            state.prune()
            state.last_attempts = attempt
            logger.debug(
                "PDC accepted n=%d after %d attempts (smallest part %d × %d)",
                n, attempt, s, k,
            )
            return state

    state.clear()
    raise ExhaustedRetries("pdc_deterministic_second_half", n, attempt)


def random_partition(
    state: PartitionState,
    n: int,
    tilt: float | None = None,
    rng: RngLike = None,
    max_attempts: int | None = _DEFAULT_MAX_ATTEMPTS,
    solver: SolverConfig | None = None,
) -> PartitionState:
    """Default exact-weight sampler.

    Prefer this over naming an algorithm: it currently forwards to
    :func:`pdc_deterministic_second_half` and will follow whichever method
    is fastest.
    """
    return pdc_deterministic_second_half(
        state, n, tilt=tilt, rng=rng, max_attempts=max_attempts, solver=solver
    )


CONDITIONERS = {
    "default": random_partition,
    "pdc": pdc_deterministic_second_half,
    "rejection": rejection_sampling,
}
