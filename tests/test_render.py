"""Tests for boltzmann_partitions.render.ferrers."""

from __future__ import annotations

from boltzmann_partitions.render.ferrers import as_multiset, ferrers_diagram, format_stream
from boltzmann_partitions.sampling.state import PartitionState


class TestMultiset:

    def test_descending(self, sample_state):
        assert as_multiset(sample_state) == [7, 4, 1, 1]

    def test_accepts_mapping(self):
        assert as_multiset({2: 3, 5: 1, 9: 0}) == [5, 2, 2, 2]

    def test_ignores_zero_entries(self, sample_state):
        sample_state.set_multiplicity(3, 0)
        assert as_multiset(sample_state) == [7, 4, 1, 1]

    def test_empty(self):
        assert as_multiset(PartitionState()) == []


class TestStream:

    def test_comma_separated(self, sample_state):
        assert format_stream(sample_state) == "7,4,1,1"

    def test_custom_separator(self, sample_state):
        assert format_stream(sample_state, sep=" + ") == "7 + 4 + 1 + 1"

    def test_empty(self):
        assert format_stream({}) == ""


class TestFerrers:

    def test_rows_largest_first(self, sample_state):
        rows = ferrers_diagram(sample_state).splitlines()
        assert rows == ["* * * * * * *", "* * * *", "*", "*"]

    def test_row_lengths_match_parts(self):
        diagram = ferrers_diagram({3: 2, 1: 1})
        assert [row.count("*") for row in diagram.splitlines()] == [3, 3, 1]

    def test_custom_cell(self):
        assert ferrers_diagram({2: 1}, cell="#") == "##"
