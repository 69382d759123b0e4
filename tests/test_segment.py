"""
Tests for Segment.

This test module verifies:
- Descriptions and equality predicates
- Final-state detection
- Next segment generation with and without an event source
- Replay, including mismatch detection and action execution
"""

import pytest

from statepaths.core.events import EventSource
from statepaths.core.segment import Segment
from statepaths.errors import ErrorCode, ReplayMismatchError, StatePathsError
from statepaths.machine import Statechart


class TestSegmentDescription:
    """Test segment descriptions."""

    def test_initial_segment(self, linear_machine):
        """Test that the initial segment defaults to the machine's initial state."""
        segment = Segment(linear_machine)

        assert segment.event == {"type": "xstate.init"}
        assert segment.target == "start"
        assert segment.description == "xstate.init -> start"

    def test_nested_target(self, nested_machine):
        """Test the description of a segment reaching a nested state."""
        state = nested_machine.transition(nested_machine.initial_state, "NEXT")
        segment = Segment(nested_machine, state)

        assert segment.description == "NEXT -> middle.a"
        assert segment.target == {"middle": "a"}

    def test_payload_in_description(self, input_machine):
        """Test that event payloads appear in the description."""
        state = input_machine.transition(
            input_machine.initial_state, {"type": "INPUT", "value": "foo"}
        )

        assert Segment(input_machine, state).description == 'INPUT {"value":"foo"} -> filled'


class TestSegmentPredicates:
    """Test matching, similarity and final-state checks."""

    def test_matches_requires_equal_payload(self, input_machine):
        initial = input_machine.initial_state
        foo = Segment(input_machine, input_machine.transition(initial, {"type": "INPUT", "value": "foo"}))
        bar = Segment(input_machine, input_machine.transition(initial, {"type": "INPUT", "value": "bar"}))
        foo_again = Segment(input_machine, input_machine.transition(initial, {"type": "INPUT", "value": "foo"}))

        assert foo.matches(foo_again)
        assert not foo.matches(bar)

    def test_similar_ignores_payload(self, input_machine):
        initial = input_machine.initial_state
        foo = Segment(input_machine, input_machine.transition(initial, {"type": "INPUT", "value": "foo"}))
        bar = Segment(input_machine, input_machine.transition(initial, {"type": "INPUT", "value": "bar"}))

        assert foo.is_similar(bar)
        assert foo.has_similar_event(bar)
        assert foo.has_same_target(bar)

    def test_different_target_is_not_similar(self, nested_machine):
        middle_a = nested_machine.transition(nested_machine.initial_state, "NEXT")
        end = nested_machine.transition(middle_a, "NEXT")

        first = Segment(nested_machine, middle_a)
        second = Segment(nested_machine, end)

        assert first.has_similar_event(second)
        assert not first.has_same_target(second)
        assert not first.is_similar(second)

    def test_is_final(self, linear_machine):
        middle = linear_machine.transition(linear_machine.initial_state, "NEXT")
        end = linear_machine.transition(middle, "NEXT")

        assert not Segment(linear_machine, middle).is_final()
        assert Segment(linear_machine, end).is_final()

    def test_reaches_state(self, nested_machine):
        state = nested_machine.transition(nested_machine.initial_state, "NEXT")
        segment = Segment(nested_machine, state)

        assert segment.reaches_state(state)
        assert not segment.reaches_state(nested_machine.initial_state)


class TestNextSegments:
    """Test candidate segment generation."""

    def test_default_events_follow_next_events(self, nested_machine):
        """Test that every enabled type produces one payload-free segment."""
        state = nested_machine.transition(nested_machine.initial_state, "NEXT")
        segments = list(Segment(nested_machine, state).generate_next_segments())

        assert [s.description for s in segments] == ["B -> middle.b", "NEXT -> end"]

    def test_event_source_payloads(self, input_machine):
        """Test one segment per payload variant."""
        source = EventSource({
            "INPUT": [
                {"type": "INPUT", "value": "foo"},
                {"type": "INPUT", "value": "bar"},
            ],
        })

        segments = list(Segment(input_machine).generate_next_segments(source))

        assert len(segments) == 2
        assert [s.event_description for s in segments] == [
            'INPUT {"value":"foo"}',
            'INPUT {"value":"bar"}',
        ]

    def test_final_state_has_no_next_segments(self, linear_machine):
        middle = linear_machine.transition(linear_machine.initial_state, "NEXT")
        end = linear_machine.transition(middle, "NEXT")

        assert list(Segment(linear_machine, end).generate_next_segments()) == []

    def test_generation_is_restartable(self, nested_machine):
        segment = Segment(nested_machine)

        first = [s.description for s in segment.generate_next_segments()]
        second = [s.description for s in segment.generate_next_segments()]

        assert first == second == ["NEXT -> middle.a"]


class TestSegmentRun:
    """Test replaying a segment."""

    @pytest.mark.asyncio
    async def test_run_returns_next_state(self, linear_machine):
        middle = linear_machine.transition(linear_machine.initial_state, "NEXT")
        segment = Segment(linear_machine, middle)

        state = await segment.run(linear_machine.initial_state)

        assert state.value == "middle"

    @pytest.mark.asyncio
    async def test_run_from_wrong_state_raises_mismatch(self, linear_machine):
        """Test that replaying from a state that leads elsewhere fails."""
        middle = linear_machine.transition(linear_machine.initial_state, "NEXT")
        segment = Segment(linear_machine, middle)

        with pytest.raises(ReplayMismatchError) as exc_info:
            await segment.run(middle)

        error = exc_info.value
        assert error.expected == "middle"
        assert error.actual == "end"
        assert error.error_code == ErrorCode.REPLAY_MISMATCH
        assert error.recoverable is False
        assert isinstance(error, StatePathsError)
        assert str(error).startswith("[E101] Expected state to be middle, but was end")

    @pytest.mark.asyncio
    async def test_run_executes_actions_in_order(self):
        """Test that actions run sequentially with (context, event, meta)."""
        calls = []

        def log_exit(context, event, meta):
            calls.append(("exit", event["type"]))

        async def log_entry(context, event, meta):
            calls.append(("entry", context["user"]))

        machine = Statechart(
            {
                "id": "actions",
                "initial": "idle",
                "context": {"user": "alice"},
                "states": {
                    "idle": {"on": {"GO": "busy"}, "exit": [log_exit]},
                    "busy": {"entry": ["log_entry"], "type": "final"},
                },
            },
            actions={"log_entry": log_entry},
        )
        busy = machine.transition(machine.initial_state, "GO")
        segment = Segment(machine, busy)

        await segment.run(machine.initial_state)

        assert calls == [("exit", "GO"), ("entry", "alice")]

    @pytest.mark.asyncio
    async def test_mismatch_skips_actions(self):
        """Test that no action runs when the replayed state does not match."""
        calls = []
        machine = Statechart({
            "id": "m",
            "initial": "a",
            "states": {
                "a": {"on": {"GO": "b"}},
                "b": {"on": {"GO": "c"}, "entry": [lambda c, e, m: calls.append("b")]},
                "c": {"entry": [lambda c, e, m: calls.append("c")], "type": "final"},
            },
        })
        b = machine.transition(machine.initial_state, "GO")
        segment = Segment(machine, b)

        with pytest.raises(ReplayMismatchError):
            await segment.run(b)

        assert calls == []


class TestSegmentTests:
    """Test meta test callbacks."""

    def test_tests_from_meta(self):
        def check(state):
            pass

        machine = Statechart({
            "id": "m",
            "initial": "a",
            "states": {
                "a": {"meta": {"test": check, "label": "A"}, "on": {"GO": "b"}},
                "b": {"type": "final"},
            },
        })

        assert Segment(machine).tests == [check]
        b = machine.transition(machine.initial_state, "GO")
        assert Segment(machine, b).tests == []
