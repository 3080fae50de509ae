"""sampling/state.py — Mutable part → multiplicity representation."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterator

import numpy as np
from numpy.typing import NDArray

from ..policy.restrictions import RestrictionPolicy, allowed_parts, unrestricted


@dataclass
class PartitionState:
    """The current partition, stored as ``{part size: multiplicity}``.

    Keys are kept in increasing order.  A zero multiplicity may sit in the
    map while a conditioner is working on it; such entries are ignored by
    :attr:`weight`, :meth:`items` and the renderers.
    """

    policy: RestrictionPolicy = unrestricted
    multiplicities: dict[int, int] = field(default_factory=dict)
    # Attempts used by the last conditioner call (0 for an immediate answer).
    last_attempts: int = field(default=0, compare=False)
    _support_policy: RestrictionPolicy | None = field(
        default=None, init=False, repr=False, compare=False
    )
    _support_limit: int = field(default=-1, init=False, repr=False, compare=False)
    _support: NDArray[np.int64] = field(
        default_factory=lambda: np.empty(0, dtype=np.int64), init=False, repr=False, compare=False
    )

    # ---------------------------------------------------------------- #
    #  Reads                                                           #
    # ---------------------------------------------------------------- #

    @property
    def weight(self) -> int:
        """Sum of part × multiplicity, in Python integers."""
        return sum(int(part) * int(count) for part, count in self.multiplicities.items())

    @property
    def num_parts(self) -> int:
        return sum(int(count) for count in self.multiplicities.values())

    def items(self) -> Iterator[tuple[int, int]]:
        """Yield ``(part, multiplicity)`` pairs with positive multiplicity, ascending."""
        for part in sorted(self.multiplicities):
            count = self.multiplicities[part]
            if count > 0:
                yield part, count

    def as_dict(self) -> dict[int, int]:
        return dict(self.items())

    def __len__(self) -> int:
        return sum(1 for _ in self.items())

    # ---------------------------------------------------------------- #
    #  Writes                                                          #
    # ---------------------------------------------------------------- #

    def clear(self) -> None:
        self.multiplicities.clear()

    def set_multiplicity(self, part: int, count: int) -> None:
        if count < 0:
            raise ValueError(f"multiplicity of part {part} cannot be negative ({count})")
        self.multiplicities[int(part)] = int(count)

    def prune(self) -> None:
        """Drop zero-multiplicity entries and restore ascending key order."""
        self.multiplicities = {
            part: count for part, count in sorted(self.multiplicities.items()) if count > 0
        }

    # ---------------------------------------------------------------- #
    #  Support                                                         #
    # ---------------------------------------------------------------- #

    def support(self, limit: int) -> NDArray[np.int64]:
        """Allowed part sizes ``<= limit``, cached for the last policy and limit."""
        if limit != self._support_limit or self.policy is not self._support_policy:
            self._support = allowed_parts(self.policy, limit)
            self._support_limit = limit
            self._support_policy = self.policy
        return self._support
