"""
sampling/boltzmann.py — Fristedt's random-weight partition sampler.

For a fixed tilt ``x`` every allowed part size ``i`` gets an independent
geometric multiplicity with ``P(c) = (1 - x^i) x^(i c)``.  The inverse
transform of a single uniform ``u`` gives

    c = floor( log(u) / (i log x) )

so one draw per part size suffices and no distribution object is built per
parameter.  The resulting weight has mean ``n`` when ``x`` solves the tilt
equation, but is almost never exactly ``n``; the conditioners fix that.
"""

from __future__ import annotations

import numpy as np

from ..config import SolverConfig
from ..search.tilt import solve_tilt
from .state import PartitionState

RngLike = int | np.random.Generator | None


def check_tilt(x: float) -> float:
    if not 0.0 < x < 1.0:
        raise ValueError(f"tilt must lie strictly between 0 and 1, got {x}")
    return x


def random_size_draw(
    state: PartitionState,
    n: int,
    tilt: float | None = None,
    rng: RngLike = None,
    solver: SolverConfig | None = None,
) -> PartitionState:
    """Overwrite *state* with a Boltzmann partition of expected weight *n*.

    Parameters
    ----------
    state:
        Partition to overwrite; its policy selects the allowed parts.
    n:
        Target (expected) weight.  Parts larger than *n* are never drawn.
    tilt:
        Manual tilt in (0, 1).  Solved from *n* when omitted.
    rng:
        ``numpy.random.Generator`` or a seed for one.
    """
    state.clear()
    if n < 0:
        raise ValueError(f"target weight must be >= 0, got {n}")
    parts = state.support(n)
    if parts.size == 0:
        return state

    x = check_tilt(tilt) if tilt is not None else solve_tilt(n, state.policy, solver)
    gen = np.random.default_rng(rng)

    # 1 - U(0,1) lies in (0, 1], so the log is finite and u = 1 gives c = 0.
    u = 1.0 - gen.random(parts.size)
    log_x = np.log(np.longdouble(x))
    counts = np.floor(
        np.log(u.astype(np.longdouble)) / (parts.astype(np.longdouble) * log_x)
    ).astype(np.int64)

    drawn = counts > 0
    state.multiplicities = dict(zip(parts[drawn].tolist(), counts[drawn].tolist()))
    return state
