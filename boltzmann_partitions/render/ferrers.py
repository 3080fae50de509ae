"""render/ferrers.py — Read-only text views of a partition."""

from __future__ import annotations

from typing import Mapping

from ..sampling.state import PartitionState

PartitionLike = PartitionState | Mapping[int, int]


def _pairs(partition: PartitionLike) -> list[tuple[int, int]]:
    if isinstance(partition, PartitionState):
        return list(partition.items())
    return sorted((p, c) for p, c in partition.items() if c > 0)


def as_multiset(partition: PartitionLike) -> list[int]:
    """Every part listed once per copy, largest first."""
    parts: list[int] = []
    for part, count in reversed(_pairs(partition)):
        parts.extend([part] * count)
    return parts


def format_stream(partition: PartitionLike, sep: str = ",") -> str:
    """Compact form, e.g. ``"17,7,4,4,1"``."""
    return sep.join(str(p) for p in as_multiset(partition))


def ferrers_diagram(partition: PartitionLike, cell: str = "* ") -> str:
    """One row of *cell* per part, largest part on the top row."""
    return "\n".join((cell * part).rstrip() for part in as_multiset(partition))
