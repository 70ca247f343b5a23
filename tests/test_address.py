"""Tests for address parsing, grammar and ordering."""

import itertools

import pytest

from zettel.address import (
    ALPHA,
    NUMERIC,
    Segment,
    ancestor_addresses,
    canonicalize,
    compare,
    depth,
    is_valid,
    parent_address,
    parse,
    parse_address_list,
    segments_to_address,
    sort_key,
)


# ---------------------------------------------------------------------------
# parse
# ---------------------------------------------------------------------------


class TestParse:
    def test_simple(self):
        assert parse("1a2b") == [
            Segment(NUMERIC, 1), Segment(ALPHA, "a"), Segment(NUMERIC, 2), Segment(ALPHA, "b"),
        ]

    def test_multi_digit_and_multi_letter_runs(self):
        assert parse("12ab345") == [Segment(NUMERIC, 12), Segment(ALPHA, "ab"), Segment(NUMERIC, 345)]

    def test_leading_zeros_dropped_from_value(self):
        assert parse("01a2") == [Segment(NUMERIC, 1), Segment(ALPHA, "a"), Segment(NUMERIC, 2)]

    def test_case_and_whitespace(self):
        assert parse("  1A2 ") == parse("1a2")

    def test_punctuation_skipped(self):
        assert parse("1.a-2/b") == parse("1a2b")

    def test_blank(self):
        assert parse("") == []
        assert parse("   ") == []

    def test_no_alphanumerics(self):
        assert parse("-./!") == []

    def test_non_ascii_letters_skipped(self):
        assert parse("1é2") == [Segment(NUMERIC, 1), Segment(NUMERIC, 2)]


class TestSegmentsToAddress:
    def test_round_trip_to_numeric_value_form(self):
        assert segments_to_address(parse("01a2")) == "1a2"

    @pytest.mark.parametrize("address", ["1", "1a", "1a2", "12bc3d", "7z99"])
    def test_round_trip_canonical(self, address):
        assert segments_to_address(parse(address)) == address

    def test_prefix(self):
        assert segments_to_address(parse("1a2b")[:2]) == "1a"

    def test_empty(self):
        assert segments_to_address([]) == ""


# ---------------------------------------------------------------------------
# Grammar
# ---------------------------------------------------------------------------


class TestIsValid:
    @pytest.mark.parametrize("address", ["1", "1a", "1a2", "1a2b", "1aa", "10b20", " 3C ", "007"])
    def test_valid(self, address):
        assert is_valid(address)

    @pytest.mark.parametrize("address", ["", "   ", "a", "a1", "ab2", "-", "!!"])
    def test_invalid(self, address):
        assert not is_valid(address)

    def test_non_alternating_after_skip(self):
        # "1-2" parses to two adjacent numeric segments
        assert not is_valid("1-2")
        assert not is_valid("1a b")

    def test_forgiving_punctuation_still_valid(self):
        assert is_valid("1.a.2")


class TestDepth:
    def test_depths(self):
        assert depth("1") == 1
        assert depth("1aa") == 2
        assert depth("1a2b") == 4

    def test_blank(self):
        assert depth("") == 0


class TestCanonicalize:
    def test_trim_and_lower(self):
        assert canonicalize("  1A2B\t") == "1a2b"

    def test_does_not_validate(self):
        assert canonicalize(" A1 ") == "a1"

    def test_keeps_leading_zeros(self):
        assert canonicalize("01a") == "01a"


class TestAncestry:
    def test_parent(self):
        assert parent_address("1a2b") == "1a2"
        assert parent_address("1a") == "1"

    def test_top_level_has_no_parent(self):
        assert parent_address("1") is None
        assert parent_address("") is None

    def test_ancestors_longest_first(self):
        assert ancestor_addresses("1a2c3") == ["1a2c", "1a2", "1a", "1"]

    def test_top_level_has_no_ancestors(self):
        assert ancestor_addresses("5") == []


class TestParseAddressList:
    def test_split_and_canonicalize(self):
        assert parse_address_list("  1A   3b\t12 ") == ["1a", "3b", "12"]

    def test_blank(self):
        assert parse_address_list("   ") == []


# ---------------------------------------------------------------------------
# compare
# ---------------------------------------------------------------------------


class TestCompare:
    def test_equal(self):
        assert compare("1a2", "1a2") == 0
        assert compare("1A2", " 1a2") == 0

    def test_numeric_by_value(self):
        assert compare("2", "10") == -1
        assert compare("1a10", "1a9") == 1

    def test_alpha_by_string(self):
        assert compare("1a", "1b") == -1
        assert compare("1b", "1aa") == 1
        assert compare("1a", "1aa") == -1

    def test_prefix_first(self):
        assert compare("1a", "1a2") == -1
        assert compare("1a2", "1a") == 1
        assert compare("1", "1a2b3") == -1

    def test_descendant_before_next_sibling(self):
        assert compare("1a9z", "1b") == -1

    def test_type_mismatch_numeric_first(self):
        # Malformed input: number vs letter at the same position
        assert compare("1", "a") == -1
        assert compare("a", "1") == 1
        assert compare("1-2", "1a") == -1
        assert compare("1a", "1-2") == 1

    def test_leading_zeros_compare_equal(self):
        assert compare("01a", "1a") == 0

    def test_blank_sorts_first(self):
        assert compare("", "1") == -1
        assert compare("", "") == 0


ADDRESSES = ["1", "1a", "1a1", "1a2", "1a10", "1aa", "1b", "2", "2a", "10", "10a3c", "3"]


class TestTotalOrder:
    def test_antisymmetric(self):
        for a, b in itertools.product(ADDRESSES, repeat=2):
            assert compare(a, b) == -compare(b, a)

    def test_transitive(self):
        for a, b, c in itertools.product(ADDRESSES, repeat=3):
            if compare(a, b) < 0 and compare(b, c) < 0:
                assert compare(a, c) < 0

    def test_strict_over_distinct(self):
        for a, b in itertools.combinations(ADDRESSES, 2):
            assert compare(a, b) != 0

    def test_sorted_is_tree_order(self):
        assert sorted(ADDRESSES, key=sort_key) == [
            "1", "1a", "1a1", "1a2", "1a10", "1aa", "1b", "2", "2a", "3", "10", "10a3c",
        ]
