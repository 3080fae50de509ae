"""Shared pytest fixtures for the boltzmann_partitions test suite.

Fixtures defined here are automatically available to all test files.
"""

import numpy as np
import pytest

from boltzmann_partitions.policy.restrictions import (
    cubes,
    even,
    j_mod_m,
    max_part,
    min_part,
    odd,
    triangular,
    unrestricted,
)
from boltzmann_partitions.sampling.state import PartitionState


@pytest.fixture
def rng() -> np.random.Generator:
    """Seeded generator so every test is deterministic."""
    return np.random.default_rng(20141211)


@pytest.fixture
def reference_policies() -> dict:
    """Reference policies mapped to a few targets that admit a partition.

    Returns a dict ``name -> (policy, targets)``.
    """
    return {
        "unrestricted": (unrestricted, [1, 2, 7, 30, 64]),
        "even": (even, [2, 10, 36, 64]),
        "odd": (odd, [1, 4, 21, 50]),
        "triangular": (triangular, [1, 9, 40]),
        "cubes": (cubes, [1, 8, 30, 100]),
        "j_mod_m_5_7": (j_mod_m(5, 7), [5, 12, 24, 50, 100]),
        "max_part_10": (max_part(10), [1, 15, 60]),
        "min_part_4": (min_part(4), [4, 9, 30]),
    }


@pytest.fixture
def sample_state() -> PartitionState:
    """Partition 7 + 4 + 1 + 1 (weight 13)."""
    return PartitionState(policy=unrestricted, multiplicities={1: 2, 4: 1, 7: 1})
