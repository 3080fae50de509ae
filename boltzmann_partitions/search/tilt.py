"""
search/tilt.py — Solve for the Boltzmann tilt that centres the weight.

Under the Boltzmann model with tilt ``x`` the multiplicity of each allowed
part size ``i`` is an independent geometric variable with
``P(c) = (1 - x^i) x^(i c)``.  The expected weight is therefore

    E_x = sum_i i x^i / (1 - x^i)

and the solver looks for ``x`` with ``E_x = n``.

Design notes
------------
* **Unrestricted parts** — for ``n`` above the threshold the partition
  asymptotics give ``x = 1 - pi / sqrt(6 n)`` directly; below it a
  precomputed table is used.
* **Restricted parts** — always bisection.  The sum is truncated at parts
  ``<= n``; larger parts contribute almost nothing for ``x < 1``.
* **Precision** — all sums run in ``numpy.longdouble``.  Near ``x = 1`` the
  terms blow up and the bracket residual needs the extra mantissa bits.
* **Non-convergence** is not an error: the best midpoint is returned and a
  warning is logged.  Callers who distrust it can pass a manual tilt to the
  samplers instead.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass

import numpy as np
from numpy.typing import NDArray

from ..config import SolverConfig
from ..policy.restrictions import RestrictionPolicy, allowed_parts, unrestricted
from .tilt_table import SMALL_WEIGHT_TILT

logger = logging.getLogger(__name__)

_PI_OVER_SQRT6 = math.pi / math.sqrt(6.0)


@dataclass
class TiltSolution:
    """Outcome of a bisection solve."""

    x: float
    iterations: int
    residual: float  # E_x - n at x
    converged: bool


def asymptotic_tilt(n: int) -> float:
    """``1 - pi / sqrt(6 n)``, exact in the limit for unrestricted parts."""
    return 1.0 - _PI_OVER_SQRT6 / math.sqrt(n)


def _weight_sum(x: np.longdouble, parts: NDArray[np.longdouble]) -> np.longdouble:
    with np.errstate(divide="ignore", over="ignore", invalid="ignore"):
        xi = np.power(x, parts)
        return np.sum(parts * xi / (1 - xi))


def expected_weight(x: float, n: int, policy: RestrictionPolicy = unrestricted) -> float:
    """Expected Boltzmann weight at tilt *x* over allowed parts ``<= n``."""
    parts = allowed_parts(policy, n).astype(np.longdouble)
    return float(_weight_sum(np.longdouble(x), parts))


def bisect_tilt(
    n: int,
    policy: RestrictionPolicy = unrestricted,
    config: SolverConfig | None = None,
) -> TiltSolution:
    """Solve ``E_x = n`` by bisection on ``[1 - pi/sqrt(6n), 1)``."""
    if config is None:
        config = SolverConfig()
    if n < 1:
        raise ValueError(f"target weight must be >= 1, got {n}")

    parts = allowed_parts(policy, n).astype(np.longdouble)
    if parts.size == 0:
        raise ValueError(f"policy allows no part <= {n}; the tilt is undefined")
    target = np.longdouble(n)

    def residual(x: np.longdouble) -> np.longdouble:
        return _weight_sum(x, parts) - target

    lo = np.longdouble(asymptotic_tilt(n))
    hi = np.longdouble(1) - np.longdouble(config.upper_gap)
    r_lo = residual(lo) if lo > 0 else -target
    # The closed form can land at or below zero (tiny n), or past the root
    # for sparse supports; widen to the full interval in that case.
    if lo <= 0 or r_lo > 0:
        lo, r_lo = np.longdouble(0), -target
    r_hi = residual(hi)

    mid = (lo + hi) / 2
    r_mid = residual(mid)
    iterations = 0
    while abs(r_hi - r_lo) > config.tolerance and iterations < config.max_iterations:
        mid = (lo + hi) / 2
        if mid == lo or mid == hi:
            break
        r_mid = residual(mid)
        if r_mid < 0:
            lo, r_lo = mid, r_mid
        else:
            hi, r_hi = mid, r_mid
        iterations += 1

    converged = bool(abs(r_hi - r_lo) <= config.tolerance)
    if not converged:
        logger.warning(
            "Tilt bisection for n=%d stopped after %d iterations with bracket "
            "residual gap %.3g (tolerance %.1g); using x=%.12f",
            n, iterations, float(abs(r_hi - r_lo)), config.tolerance, float(mid),
        )
    else:
        logger.debug("Tilt for n=%d: x=%.12f after %d iterations", n, float(mid), iterations)
    return TiltSolution(
        x=float(mid),
        iterations=iterations,
        residual=float(r_mid),
        converged=converged,
    )


def solve_tilt(
    n: int,
    policy: RestrictionPolicy = unrestricted,
    config: SolverConfig | None = None,
) -> float:
    """Return the tilt ``x`` in (0, 1) whose expected weight is *n*."""
    if config is None:
        config = SolverConfig()
    if n < 1:
        raise ValueError(f"target weight must be >= 1, got {n}")

    if policy is unrestricted:
        if n > config.asymptotic_threshold or n >= len(SMALL_WEIGHT_TILT):
            return asymptotic_tilt(n)
        return SMALL_WEIGHT_TILT[n]
    return bisect_tilt(n, policy, config).x
