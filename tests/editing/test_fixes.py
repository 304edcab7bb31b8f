"""Tests for SuggestedFix and the fix choosers."""

import pytest

from autofix.editing.fixes import (
    FirstFixChooser,
    LeastConflictingFixChooser,
    SuggestedFix,
    get_fix_chooser,
)
from autofix.editing.replacements import Replacement, Replacements


class FakeNode:
    """Tree node whose end offset lives in an end-position table."""

    def __init__(self, name: str, start: int):
        self.name = name
        self.start = start

    def get_start_position(self) -> int:
        return self.start

    def get_end_position(self, end_positions) -> int:
        return end_positions[self.name]


class TestSuggestedFix:
    def test_replace_by_offsets(self):
        fix = SuggestedFix().replace(2, 5, "abc")
        assert fix.get_replacements(None) == [Replacement(2, 5, "abc")]

    def test_node_positions_resolved_through_context(self):
        node = FakeNode("expr", 10)
        fix = SuggestedFix().replace_node(node, "Integer.valueOf(0)")

        assert fix.get_replacements({"expr": 24}) == [
            Replacement(10, 24, "Integer.valueOf(0)")
        ]

    def test_prefix_and_postfix(self):
        node = FakeNode("stmt", 4)
        fix = SuggestedFix().prefix_with(node, "/* a */").postfix_with(node, "// b")

        assert fix.get_replacements({"stmt": 9}) == [
            Replacement(4, 4, "/* a */"),
            Replacement(9, 9, "// b"),
        ]

    def test_delete(self):
        node = FakeNode("stmt", 3)
        assert SuggestedFix().delete(node).get_replacements({"stmt": 8}) == [
            Replacement(3, 8, "")
        ]

    def test_imports_normalized(self):
        fix = (SuggestedFix()
               .add_import("java.util.List")
               .add_static_import("org.junit.Assert.assertTrue")
               .remove_import("java.util.Vector"))

        assert fix.get_imports_to_add() == {
            "import java.util.List",
            "import static org.junit.Assert.assertTrue",
        }
        assert fix.get_imports_to_remove() == {"import java.util.Vector"}

    def test_merge(self):
        fix = SuggestedFix().replace(0, 1, "a").merge(
            SuggestedFix().replace(5, 6, "b").add_import("x.Y")
        )
        assert len(fix.get_replacements(None)) == 2
        assert fix.get_imports_to_add() == {"import x.Y"}

    def test_is_empty(self):
        assert SuggestedFix().is_empty()
        assert not SuggestedFix().remove_static_import("a.B.c").is_empty()


class TestFixChoosers:
    def test_first_picks_index_zero(self):
        a = SuggestedFix().replace(0, 1, "a")
        b = SuggestedFix().replace(2, 3, "b")
        assert FirstFixChooser().choose([a, b], Replacements(), None) is a

    def test_first_with_no_fixes(self):
        assert FirstFixChooser().choose([], Replacements(), None) is None

    def test_least_conflicting_skips_clashing_fix(self):
        pending = Replacements([Replacement(0, 5, "x")])
        clashing = SuggestedFix().replace(2, 3, "a")
        clean = SuggestedFix().replace(6, 7, "b")

        chooser = LeastConflictingFixChooser()
        assert chooser.choose([clashing, clean], pending, None) is clean

    def test_least_conflicting_falls_back_to_fewest(self):
        pending = Replacements([Replacement(0, 5, "x"), Replacement(10, 15, "y")])
        two = SuggestedFix().replace(1, 2, "a").replace(11, 12, "b")
        one = SuggestedFix().replace(3, 4, "c")

        chooser = LeastConflictingFixChooser()
        assert chooser.choose([two, one], pending, None) is one

    def test_lookup_by_name(self):
        assert isinstance(get_fix_chooser("first"), FirstFixChooser)
        assert isinstance(get_fix_chooser("least_conflicting"), LeastConflictingFixChooser)
        with pytest.raises(ValueError):
            get_fix_chooser("random")
