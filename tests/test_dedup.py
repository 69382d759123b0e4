"""Tests for path deduplication."""

from statepaths.core.dedup import deduplicate
from statepaths.core.path import MakePathOptions, Path, make_paths


class DescribedPath:
    def __init__(self, *events: str) -> None:
        self.events = events
        self.description = " -> ".join(events)

    def __len__(self) -> int:
        return len(self.events)

    def __repr__(self) -> str:
        return f"DescribedPath({self.description!r})"


class TestDeduplicate:
    """Test containment-based deduplication."""

    def test_keeps_only_maximal_path(self):
        a = DescribedPath("A")
        a_b = DescribedPath("A", "B")
        a_b_c = DescribedPath("A", "B", "C")

        assert deduplicate([a, a_b, a_b_c]) == [a_b_c]

    def test_disjoint_paths_are_kept_shortest_first(self):
        a_b = DescribedPath("A", "B")
        x_y_z = DescribedPath("X", "Y", "Z")

        assert deduplicate([x_y_z, a_b]) == [a_b, x_y_z]

    def test_ties_come_out_reversed(self):
        """Test that equal-length paths come out in reverse input order."""
        first = DescribedPath("A", "B")
        second = DescribedPath("C", "D")
        third = DescribedPath("E", "F")

        assert deduplicate([first, second, third]) == [third, second, first]

    def test_duplicates_collapse_to_one(self):
        first = DescribedPath("A", "B")
        second = DescribedPath("A", "B")

        assert deduplicate([first, second]) == [first]

    def test_infix_is_removed(self):
        """Test that containment is by substring, not just prefix."""
        middle = DescribedPath("B", "C")
        full = DescribedPath("A", "B", "C", "D")

        assert deduplicate([middle, full]) == [full]

    def test_input_is_not_modified(self):
        paths = [DescribedPath("A"), DescribedPath("A", "B")]
        original = list(paths)

        deduplicate(paths)

        assert paths == original

    def test_empty(self):
        assert deduplicate([]) == []


class TestDeduplicateGeneratedPaths:
    """Test deduplication on generated paths."""

    def test_prefixes_are_removed(self, linear_machine):
        every_path = make_paths(linear_machine, MakePathOptions(filter_path=lambda path: True))

        kept = Path.deduplicate(every_path)

        assert [p.description for p in kept] == [
            "xstate.init -> start -> NEXT -> middle -> NEXT -> end",
        ]

    def test_final_paths_are_already_maximal(self, nested_machine):
        paths = make_paths(nested_machine)

        kept = deduplicate(paths)

        assert [p.description for p in kept] == [p.description for p in reversed(paths)]

    def test_deduplicating_twice_changes_nothing(self, nested_machine):
        every_path = make_paths(nested_machine, MakePathOptions(filter_path=lambda path: True))

        once = deduplicate(every_path)
        twice = deduplicate(once)

        assert len(once) < len(every_path)
        assert [p.description for p in twice] == [p.description for p in once]

    def test_no_kept_path_contains_another(self, nested_machine):
        every_path = make_paths(nested_machine, MakePathOptions(filter_path=lambda path: True))

        kept = [p.description for p in deduplicate(every_path)]

        for i, description in enumerate(kept):
            for j, other in enumerate(kept):
                if i != j:
                    assert description not in other
