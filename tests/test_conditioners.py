"""Tests for the exact-weight conditioners.

Covers:
- Weight exactness for every reference policy
- Policy compliance and the J mod M support
- Degenerate and infeasible targets
- Retry budgets
- Uniformity over all partitions of small n (the PDC acceptance law)
"""

from __future__ import annotations

from collections import Counter

import pytest
from scipy.stats import chisquare

from boltzmann_partitions.errors import ExhaustedRetries, InfeasibleTarget
from boltzmann_partitions.policy.restrictions import (
    allowed_parts,
    even,
    j_mod_m,
    max_part,
    unrestricted,
)
from boltzmann_partitions.render.ferrers import as_multiset
from boltzmann_partitions.sampling.conditioners import (
    pdc_deterministic_second_half,
    random_partition,
    rejection_sampling,
)
from boltzmann_partitions.sampling.state import PartitionState

CONDITIONERS = [rejection_sampling, pdc_deterministic_second_half, random_partition]

# =========================================================================
# Exactness
# =========================================================================


class TestExactWeight:

    @pytest.mark.parametrize("conditioner", CONDITIONERS)
    def test_reference_policies(self, conditioner, reference_policies, rng):
        for policy, targets in reference_policies.values():
            state = PartitionState(policy=policy)
            for n in targets:
                conditioner(state, n, rng=rng)
                assert state.weight == n
                allowed = set(allowed_parts(policy, n).tolist())
                assert set(state.multiplicities) <= allowed
                assert all(c > 0 for c in state.multiplicities.values())

    def test_pdc_broad_range(self, rng):
        state = PartitionState()
        for n in range(1, 120):
            pdc_deterministic_second_half(state, n, rng=rng)
            assert state.weight == n

    def test_pdc_large_target(self, rng):
        state = PartitionState()
        pdc_deterministic_second_half(state, 5_000, rng=rng)
        assert state.weight == 5_000
        assert state.last_attempts >= 1

    def test_max_part_never_exceeded(self, rng):
        state = PartitionState(policy=max_part(10))
        for n in range(1, 300, 3):
            random_partition(state, n, rng=rng)
            assert state.weight == n
            assert max(state.multiplicities) <= 10

    def test_j_mod_m_support(self, rng):
        state = PartitionState(policy=j_mod_m(5, 7))
        for _ in range(20):
            random_partition(state, 100, rng=rng)
            assert state.weight == 100
            assert all(p % 7 == 5 and p >= 5 for p in state.multiplicities)

    def test_keys_sorted_after_pdc(self, rng):
        state = PartitionState()
        for _ in range(20):
            pdc_deterministic_second_half(state, 60, rng=rng)
            keys = list(state.multiplicities)
            assert keys == sorted(keys)

    def test_manual_tilt(self, rng):
        state = PartitionState()
        for conditioner in CONDITIONERS:
            conditioner(state, 40, tilt=0.85, rng=rng)
            assert state.weight == 40

    def test_reproducible(self):
        a, b = PartitionState(), PartitionState()
        random_partition(a, 150, rng=11)
        random_partition(b, 150, rng=11)
        assert a.multiplicities == b.multiplicities
        assert a.last_attempts == b.last_attempts


# =========================================================================
# Degenerate and impossible targets
# =========================================================================


class TestEdgeCases:

    @pytest.mark.parametrize("conditioner", CONDITIONERS)
    def test_zero_weight_is_empty(self, conditioner, rng):
        state = PartitionState(multiplicities={4: 2})
        conditioner(state, 0, rng=rng)
        assert state.multiplicities == {}
        assert state.weight == 0
        assert state.last_attempts == 0

    @pytest.mark.parametrize("conditioner", CONDITIONERS)
    def test_negative_weight(self, conditioner, rng):
        with pytest.raises(ValueError):
            conditioner(PartitionState(), -5, rng=rng)

    @pytest.mark.parametrize("conditioner", CONDITIONERS)
    def test_odd_target_with_even_parts(self, conditioner, rng):
        with pytest.raises(InfeasibleTarget, match="multiples of 2"):
            conditioner(PartitionState(policy=even), 7, rng=rng)

    @pytest.mark.parametrize("conditioner", CONDITIONERS)
    def test_target_below_smallest_part(self, conditioner, rng):
        with pytest.raises(InfeasibleTarget) as info:
            conditioner(PartitionState(policy=j_mod_m(5, 7)), 3, rng=rng)
        assert info.value.target == 3
        assert not info.value.retryable

    @pytest.mark.parametrize("conditioner", [rejection_sampling, pdc_deterministic_second_half])
    def test_budget_exhausted(self, conditioner, rng):
        # Parts {5, 12}: gcd 1, yet 13 is not a sum of them.
        state = PartitionState(policy=j_mod_m(5, 7))
        with pytest.raises(ExhaustedRetries) as info:
            conditioner(state, 13, rng=rng, max_attempts=50)
        assert info.value.attempts == 50
        assert info.value.retryable
        assert state.multiplicities == {}

    def test_invalid_budget(self, rng):
        with pytest.raises(ValueError, match="max_attempts"):
            rejection_sampling(PartitionState(), 10, rng=rng, max_attempts=0)

    def test_unbounded_budget(self, rng):
        state = PartitionState()
        rejection_sampling(state, 30, rng=rng, max_attempts=None)
        assert state.weight == 30


# =========================================================================
# Distribution
# =========================================================================


def _frequencies(conditioner, policy, n, draws, rng):
    state = PartitionState(policy=policy)
    counts = Counter()
    for _ in range(draws):
        conditioner(state, n, rng=rng)
        counts[tuple(as_multiset(state))] += 1
    return counts


class TestUniformity:
    """Conditioned on weight n the Boltzmann law is uniform over partitions."""

    @pytest.mark.parametrize(
        "conditioner", [rejection_sampling, pdc_deterministic_second_half]
    )
    def test_unrestricted_n6(self, conditioner, rng):
        counts = _frequencies(conditioner, unrestricted, 6, 4400, rng)
        assert len(counts) == 11  # p(6)
        assert chisquare(list(counts.values())).pvalue > 1e-4

    def test_pdc_even_parts(self, rng):
        # Partitions of 12 into even parts mirror partitions of 6.  The
        # smallest part is 2 here, so a wrong acceptance exponent would
        # skew the counts toward partitions with few 2s.
        counts = _frequencies(pdc_deterministic_second_half, even, 12, 4400, rng)
        assert len(counts) == 11
        assert chisquare(list(counts.values())).pvalue > 1e-4

    def test_pdc_j_mod_m(self, rng):
        # Parts {5, 12, 19}: 24 splits only as 12 + 12 or 19 + 5.
        counts = _frequencies(pdc_deterministic_second_half, j_mod_m(5, 7), 24, 2000, rng)
        assert set(counts) == {(12, 12), (19, 5)}
        assert chisquare(list(counts.values())).pvalue > 1e-4

    def test_pdc_beats_rejection(self, rng):
        def mean_attempts(conditioner):
            state = PartitionState()
            total = 0
            for _ in range(200):
                conditioner(state, 400, rng=rng)
                total += state.last_attempts
            return total / 200

        assert mean_attempts(pdc_deterministic_second_half) < mean_attempts(rejection_sampling)
