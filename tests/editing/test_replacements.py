"""Tests for Replacement, Replacements and apply_replacements."""

import pytest

from autofix.editing.replacements import (
    ConflictError,
    Replacement,
    Replacements,
    apply_replacements,
)


class TestReplacement:
    def test_rejects_negative_start(self):
        with pytest.raises(ValueError):
            Replacement(-1, 2, "x")

    def test_rejects_end_before_start(self):
        with pytest.raises(ValueError):
            Replacement(5, 3, "x")

    def test_zero_length_is_insertion(self):
        assert Replacement(4, 4, "x").is_insertion
        assert not Replacement(4, 5, "x").is_insertion

    def test_origin_ignored_by_equality(self):
        a = Replacement(1, 3, "x", origin="CheckA")
        b = Replacement(1, 3, "x", origin="CheckB")
        assert a == b
        assert hash(a) == hash(b)

    def test_adjacent_ranges_do_not_overlap(self):
        assert not Replacement(0, 2, "a").overlaps(Replacement(2, 4, "b"))

    def test_partial_overlap(self):
        assert Replacement(2, 5, "x").overlaps(Replacement(4, 6, "y"))

    def test_insertion_inside_range_overlaps(self):
        assert Replacement(5, 5, "x").overlaps(Replacement(3, 7, "y"))
        assert Replacement(3, 7, "y").overlaps(Replacement(5, 5, "x"))

    def test_insertion_at_range_boundary_does_not_overlap(self):
        assert not Replacement(3, 3, "x").overlaps(Replacement(3, 7, "y"))
        assert not Replacement(7, 7, "x").overlaps(Replacement(3, 7, "y"))

    def test_insertions_at_same_offset_overlap(self):
        assert Replacement(4, 4, "a").overlaps(Replacement(4, 4, "b"))

    def test_identical_replacements_do_not_conflict(self):
        assert not Replacement(2, 5, "x").conflicts_with(Replacement(2, 5, "x"))
        assert Replacement(2, 5, "x").conflicts_with(Replacement(2, 5, "y"))


class TestReplacementsAdd:
    def test_duplicate_is_noop(self):
        reps = Replacements()
        assert reps.add(Replacement(2, 5, "x")) is True
        assert reps.add(Replacement(2, 5, "x")) is False
        assert len(reps) == 1

    def test_overlap_raises_with_both_ranges(self):
        reps = Replacements()
        reps.add(Replacement(2, 5, "x", origin="First"))
        with pytest.raises(ConflictError) as info:
            reps.add(Replacement(4, 6, "y", origin="Second"))

        err = info.value
        assert err.existing == Replacement(2, 5, "x")
        assert err.incoming == Replacement(4, 6, "y")
        message = str(err)
        assert "[2, 5) from First" in message
        assert "[4, 6) from Second" in message
        assert len(reps) == 1

    def test_same_range_different_text_conflicts(self):
        reps = Replacements([Replacement(2, 5, "x")])
        with pytest.raises(ConflictError):
            reps.add(Replacement(2, 5, "y"))

    def test_two_insertions_at_same_offset_conflict(self):
        reps = Replacements([Replacement(3, 3, "a")])
        with pytest.raises(ConflictError):
            reps.add(Replacement(3, 3, "b"))

    def test_identical_insertions_tolerated(self):
        reps = Replacements([Replacement(3, 3, "a")])
        assert reps.add(Replacement(3, 3, "a")) is False

    def test_wide_range_over_inserted_members_conflicts(self):
        reps = Replacements([
            Replacement(20, 25, "d"),
            Replacement(12, 12, "c"),
            Replacement(0, 4, "a"),
            Replacement(6, 8, "b"),
        ])
        with pytest.raises(ConflictError) as info:
            reps.add(Replacement(9, 18, "wide"))
        assert info.value.existing == Replacement(12, 12, "c")
        assert len(reps) == 4

    def test_insertion_inside_range_behind_boundary_insertion(self):
        reps = Replacements([
            Replacement(10, 10, "end"),
            Replacement(0, 10, "body"),
            Replacement(0, 0, "start"),
        ])
        with pytest.raises(ConflictError) as info:
            reps.add(Replacement(5, 5, "mid"))
        assert info.value.existing == Replacement(0, 10, "body")

    def test_duplicate_found_among_many_members(self):
        reps = Replacements(Replacement(i * 3, i * 3 + 2, str(i)) for i in range(50))
        assert reps.add(Replacement(30, 32, "10")) is False
        assert len(reps) == 50

    def test_find_conflict_returns_overlapping_member(self):
        reps = Replacements(Replacement(i * 10, i * 10 + 5, str(i)) for i in range(20))
        assert reps.find_conflict(Replacement(93, 97, "z")) == Replacement(90, 95, "9")
        assert reps.find_conflict(Replacement(95, 100, "z")) is None
        assert reps.find_conflict(Replacement(90, 95, "9")) is None

    def test_conflict_message_names_file(self):
        err = ConflictError(Replacement(0, 2, "a"), Replacement(1, 3, "b"))
        err.file_name = "Foo.java"
        assert "in Foo.java" in str(err)

    def test_is_empty(self):
        reps = Replacements()
        assert reps.is_empty()
        reps.add(Replacement(0, 0, "x"))
        assert not reps.is_empty()


class TestReplacementsOrdering:
    def test_ascending_regardless_of_insertion_order(self):
        reps = Replacements([
            Replacement(10, 12, "c"),
            Replacement(0, 1, "a"),
            Replacement(5, 6, "b"),
        ])
        assert [r.start for r in reps] == [0, 5, 10]

    def test_descending_for_application(self):
        reps = Replacements([
            Replacement(0, 1, "a"),
            Replacement(10, 12, "c"),
            Replacement(5, 6, "b"),
        ])
        assert [r.start for r in reps.descending()] == [10, 5, 0]

    def test_wider_range_applied_before_insertion_at_same_start(self):
        reps = Replacements([Replacement(3, 3, "ins"), Replacement(3, 7, "rep")])
        assert reps.descending() == [Replacement(3, 7, "rep"), Replacement(3, 3, "ins")]

    def test_copy_is_independent(self):
        reps = Replacements([Replacement(0, 1, "a")])
        clone = reps.copy()
        clone.add(Replacement(5, 6, "b"))
        assert len(reps) == 1
        assert len(clone) == 2


class TestApplyReplacements:
    def test_single_replacement(self):
        text = "AAAAAAAAAABBBCCCCC"
        assert apply_replacements(text, [Replacement(10, 13, "xyz")]) == "AAAAAAAAAAxyzCCCCC"

    def test_multiple_replacements_no_offset_drift(self):
        text = "abcdefgh"
        result = apply_replacements(
            text, [Replacement(0, 2, "Z"), Replacement(5, 7, "Q")]
        )
        assert result == "ZcdeQh"

    def test_insertion_lands_before_replacement_at_same_start(self):
        result = apply_replacements(
            "0123456789", [Replacement(3, 7, "-"), Replacement(3, 3, "+")]
        )
        assert result == "012+-789"

    def test_insertion_at_end_of_text(self):
        assert apply_replacements("abc", [Replacement(3, 3, "d")]) == "abcd"

    def test_result_independent_of_input_order(self):
        edits = [
            Replacement(0, 1, "A"),
            Replacement(4, 4, "__"),
            Replacement(6, 9, ""),
        ]
        forward = apply_replacements("abcdefghij", edits)
        backward = apply_replacements("abcdefghij", list(reversed(edits)))
        assert forward == backward == "Abcd__efj"

    def test_overlap_raises(self):
        with pytest.raises(ConflictError):
            apply_replacements("abcdefgh", [Replacement(2, 5, "x"), Replacement(4, 6, "y")])

    def test_out_of_bounds_raises(self):
        with pytest.raises(ValueError):
            apply_replacements("abc", [Replacement(1, 10, "x")])
