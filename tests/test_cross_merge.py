"""Tests for cross_merge."""

from statepaths.core.events import EventSource
from statepaths.utils import cross_merge, cross_merge_iter


class TestCrossMerge:
    """Test combining payload variants."""

    def test_every_combination(self):
        merged = cross_merge([{"a": 1}, {"a": 2}], [{"b": 1}, {"b": 2}])

        assert merged == [
            {"a": 1, "b": 1},
            {"a": 1, "b": 2},
            {"a": 2, "b": 1},
            {"a": 2, "b": 2},
        ]

    def test_right_overrides_left(self):
        assert cross_merge([{"a": 1, "b": 0}], [{"b": 2}]) == [{"a": 1, "b": 2}]

    def test_equal_merges_are_kept(self):
        merged = cross_merge([{"a": 1}, {"a": 2}], [{"a": 3}])

        assert merged == [{"a": 3}, {"a": 3}]

    def test_empty_side(self):
        assert cross_merge([], [{"b": 1}]) == []
        assert cross_merge([{"a": 1}], []) == []

    def test_list_matches_iterator(self):
        left, right = [{"a": 1}, {"a": 2}], [{"b": 1}, {"a": 3}]

        assert cross_merge(left, right) == list(cross_merge_iter(left, right))

    def test_feeds_event_source(self):
        names = [{"name": ""}, {"name": "alice"}]
        ages = [{"age": 0}, {"age": 30}]

        source = EventSource({
            "SUBMIT": [{"type": "SUBMIT", **payload} for payload in cross_merge(names, ages)],
        })

        assert len(list(source.generate_events("SUBMIT"))) == 4
