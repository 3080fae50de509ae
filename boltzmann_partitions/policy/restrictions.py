"""
policy/restrictions.py — Restriction policies and support enumeration.

A restriction policy is any callable ``index(i) -> int`` that returns the
i-th allowed part size (1-based).  The sequence must be strictly increasing;
returning ``0`` ends a finite support set.  No base class is needed: plain
functions and closures are the expected form.
"""

from __future__ import annotations

from math import gcd
from typing import Callable

import numpy as np
from numpy.typing import NDArray

from ..config import PolicyConfig
from ..errors import InvalidPolicy

RestrictionPolicy = Callable[[int], int]


# ------------------------------------------------------------------ #
#  Reference policies                                                 #
# ------------------------------------------------------------------ #

def unrestricted(i: int) -> int:
    return i


def even(i: int) -> int:
    return 2 * i


def odd(i: int) -> int:
    return 2 * i - 1


def triangular(i: int) -> int:
    return i * (i + 1) // 2


def cubes(i: int) -> int:
    return i * i * i


def j_mod_m(j: int, m: int) -> RestrictionPolicy:
    """Parts congruent to *j* modulo *m*, starting at *j*."""
    if j < 1 or m < 1:
        raise ValueError(f"j_mod_m needs j >= 1 and m >= 1, got j={j}, m={m}")

    def index(i: int) -> int:
        return m * (i - 1) + j

    index.__name__ = f"j_mod_m_{j}_{m}"
    return index


def max_part(k: int) -> RestrictionPolicy:
    """Parts 1..k only (finite support)."""
    if k < 1:
        raise ValueError(f"max_part needs k >= 1, got {k}")

    def index(i: int) -> int:
        return i if i <= k else 0

    index.__name__ = f"max_part_{k}"
    return index


def min_part(k: int) -> RestrictionPolicy:
    """Parts k, k+1, k+2, ..."""
    if k < 1:
        raise ValueError(f"min_part needs k >= 1, got {k}")

    def index(i: int) -> int:
        return i + k - 1

    index.__name__ = f"min_part_{k}"
    return index


_SIMPLE_POLICIES: dict[str, RestrictionPolicy] = {
    "unrestricted": unrestricted,
    "even": even,
    "odd": odd,
    "triangular": triangular,
    "cubes": cubes,
}

POLICY_NAMES: tuple[str, ...] = (*_SIMPLE_POLICIES, "j-mod-m", "max-part", "min-part")


def build_policy(cfg: PolicyConfig) -> RestrictionPolicy:
    """Instantiate the reference policy named by *cfg*."""
    if cfg.name in _SIMPLE_POLICIES:
        return _SIMPLE_POLICIES[cfg.name]
    if cfg.name == "j-mod-m":
        return j_mod_m(cfg.j, cfg.m)
    if cfg.name == "max-part":
        return max_part(cfg.max_part)
    if cfg.name == "min-part":
        return min_part(cfg.min_part)
    raise ValueError(f"unknown policy {cfg.name!r}; choose from {', '.join(POLICY_NAMES)}")


def policy_name(policy: RestrictionPolicy) -> str:
    return getattr(policy, "__name__", repr(policy))


# ------------------------------------------------------------------ #
#  Support enumeration                                                #
# ------------------------------------------------------------------ #

def allowed_parts(policy: RestrictionPolicy, limit: int) -> NDArray[np.int64]:
    """Return the allowed part sizes ``<= limit`` in increasing order.

    The policy is checked lazily while walking the sequence: the first
    non-positive or non-increasing value raises :class:`InvalidPolicy`.
    """
    sizes: list[int] = []
    previous = 0
    k = 1
    while True:
        size = int(policy(k))
        if size == 0:
            if k == 1:
                raise InvalidPolicy("policy has an empty support: index(1) == 0", index=1)
            break
        if size < 0:
            raise InvalidPolicy(f"index({k}) = {size} is negative", index=k)
        if size <= previous:
            raise InvalidPolicy(
                f"policy is not strictly increasing: index({k - 1}) = {previous}, "
                f"index({k}) = {size}",
                index=k,
            )
        if size > limit:
            break
        sizes.append(size)
        previous = size
        k += 1
    return np.array(sizes, dtype=np.int64)


def support_gcd(parts: NDArray[np.int64]) -> int:
    """Greatest common divisor of the given part sizes (0 for an empty set)."""
    g = 0
    for p in parts.tolist():
        g = gcd(g, p)
        if g == 1:
            break
    return g
