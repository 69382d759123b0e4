"""Tests for grouping and rendering paths."""

from rich.console import Console

from statepaths.core.events import EventSource
from statepaths.core.path import MakePathOptions, make_paths
from statepaths.reporting import build_tree, recursively_describe, render_paths
from statepaths.reporting.tree import group_by_target


class Recorder:
    """Records nested describe blocks as indented lines."""

    def __init__(self) -> None:
        self.lines: list[str] = []
        self.depth = 0

    def describe(self, name, block):
        self.lines.append("  " * self.depth + name)
        self.depth += 1
        block()
        self.depth -= 1

    def each(self, path):
        self.lines.append("  " * self.depth + "*")


class TestGroupByTarget:
    """Test grouping paths by target."""

    def test_groups_keep_first_seen_order(self, linear_machine):
        paths = make_paths(linear_machine, MakePathOptions(filter_path=lambda path: True))

        groups = group_by_target(paths)

        assert list(groups) == ['"start"', '"middle"', '"end"']
        assert all(len(group) == 1 for group in groups.values())


class TestRecursivelyDescribe:
    """Test nested describe blocks."""

    def test_linear_machine(self, linear_machine):
        recorder = Recorder()

        recursively_describe(make_paths(linear_machine), recorder.describe, recorder.each)

        assert recorder.lines == [
            'reaches "end"',
            "  NEXT",
            "    NEXT",
            "      *",
        ]

    def test_initial_path_is_described_by_init_event(self, linear_machine):
        """Test that a path with only the initial segment runs in an init block."""
        recorder = Recorder()
        initial_only = make_paths(
            linear_machine, MakePathOptions(max_length=1, filter_path=lambda path: True)
        )

        recursively_describe(initial_only, recorder.describe, recorder.each)

        assert recorder.lines == ['reaches "start"', "  xstate.init", "    *"]

    def test_each_called_once_per_path(self, nested_machine):
        paths = make_paths(nested_machine)
        seen = []

        recursively_describe(paths, lambda name, block: block(), seen.append)

        assert seen == paths


class TestBuildTree:
    """Test the rich tree rendering."""

    def test_shared_prefixes_are_merged(self, nested_machine):
        tree = build_tree(make_paths(nested_machine))

        assert len(tree.children) == 1
        target = tree.children[0]
        # Every path starts with NEXT
        assert len(target.children) == 1
        assert [str(child.label) for child in target.children[0].children] == ["B", "NEXT"]

    def test_render_paths(self, nested_machine):
        console = Console(record=True, width=120)

        render_paths(make_paths(nested_machine), console=console, label="checkout")

        output = console.export_text()
        assert "checkout" in output
        assert 'reaches "end"' in output
        assert "NEXT" in output

    def test_payload_brackets_render_literally(self, input_machine):
        source = EventSource({"INPUT": [{"type": "INPUT", "items": [1, 2]}]})
        console = Console(record=True, width=120)

        render_paths(make_paths(input_machine, MakePathOptions(event_source=source)), console=console)

        assert 'INPUT {"items":[1,2]}' in console.export_text()
