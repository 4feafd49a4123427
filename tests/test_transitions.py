"""Tests for compute_next_cursor: advance, descend, return and terminal routing."""
import pytest

from convo_flow.domain.models import create_step
from convo_flow.execution.exceptions import InvalidStreamReferenceError
from convo_flow.execution.transitions import compute_next_cursor
from convo_flow.state.models import Cursor, Frame


def step_to(next_stream=None):
    return create_step(next=lambda: next_stream)


class TestAdvanceWithinStream:
    def test_no_next_advances_index(self):
        a0, a1 = step_to(), step_to()
        streams = {"a": [a0, a1], "end": [step_to()]}
        result = compute_next_cursor(a0, streams, Cursor(stream_name="a"))
        assert (result.stream_name, result.step_index) == ("a", 1)
        assert result.stream_stack == ()

    def test_unknown_next_advances_index(self):
        a0 = step_to("nowhere")
        streams = {"a": [a0, step_to()], "end": [step_to()]}
        result = compute_next_cursor(a0, streams, Cursor(stream_name="a"))
        assert (result.stream_name, result.step_index) == ("a", 1)

    def test_self_pointer_never_grows_stack(self):
        steps = [step_to("a"), step_to("a"), step_to("a")]
        streams = {"a": steps, "b": "a", "end": [step_to()]}
        cursor = Cursor(stream_name="a", step_index=1)

        result = compute_next_cursor(steps[1], streams, cursor)

        assert (result.stream_name, result.step_index) == ("a", 2)
        assert result.stream_stack == ()

    def test_does_not_mutate_input_cursor(self):
        a0 = step_to()
        cursor = Cursor(stream_name="a")
        compute_next_cursor(a0, {"a": [a0, step_to()]}, cursor)
        assert cursor.step_index == 0


class TestCrossStream:
    def test_next_names_other_stream_pushes_return_frame(self):
        a = [step_to(), step_to(), step_to("b")]
        streams = {"a": a, "b": [step_to(), step_to()], "c": "a", "end": [step_to()]}
        cursor = Cursor(stream_name="a", step_index=2)

        result = compute_next_cursor(a[2], streams, cursor)

        assert (result.stream_name, result.step_index) == ("b", 0)
        assert result.stream_stack == (Frame(stream_name="a", step_index=3),)

    def test_pointer_element_descends(self):
        b0, b2 = step_to(), step_to()
        streams = {"a": [step_to(), step_to()], "b": [b0, "a", b2], "end": [step_to()]}

        result = compute_next_cursor(b0, streams, Cursor(stream_name="b"))

        assert (result.stream_name, result.step_index) == ("a", 0)
        assert result.stream_stack == (Frame(stream_name="b", step_index=2),)

    def test_exhausted_sub_stream_returns_after_descent(self):
        a1 = step_to()
        streams = {"a": [step_to(), a1], "b": [step_to(), "a", step_to()], "end": [step_to()]}
        cursor = Cursor(
            stream_name="a", step_index=1,
            stream_stack=(Frame(stream_name="b", step_index=2),),
        )

        result = compute_next_cursor(a1, streams, cursor)

        assert (result.stream_name, result.step_index) == ("b", 2)
        assert result.stream_stack == ()

    def test_stack_symmetry_on_straight_path(self):
        b0 = step_to()
        streams = {"a": [step_to()], "b": [b0, "a", step_to()], "end": [step_to()]}

        cursor = compute_next_cursor(b0, streams, Cursor(stream_name="b"))
        assert len(cursor.stream_stack) == 1

        cursor = compute_next_cursor(streams["a"][0], streams, cursor)
        assert (cursor.stream_name, cursor.step_index) == ("b", 2)
        assert cursor.stream_stack == ()

    def test_pop_resumes_once_without_unwinding(self):
        inner = step_to()
        streams = {
            "outer": [step_to(), "middle"],
            "middle": [step_to(), "inner"],
            "inner": [inner],
            "end": [step_to()],
        }
        cursor = Cursor(
            stream_name="inner",
            stream_stack=(
                Frame(stream_name="outer", step_index=2),
                Frame(stream_name="middle", step_index=2),
            ),
        )

        result = compute_next_cursor(inner, streams, cursor)

        # Only the top frame is popped, even though "middle" is exhausted too
        assert (result.stream_name, result.step_index) == ("middle", 2)
        assert result.stream_stack == (Frame(stream_name="outer", step_index=2),)


class TestTerminalRouting:
    def test_overflow_with_empty_stack_routes_to_end(self):
        a1 = step_to()
        streams = {"a": [step_to(), a1], "end": [step_to()]}
        cursor = Cursor(stream_name="a", step_index=1)

        result = compute_next_cursor(a1, streams, cursor)

        assert (result.stream_name, result.step_index) == ("end", 0)
        assert result.stream_stack == (Frame(stream_name="a", step_index=2),)

    def test_exhausted_end_stream_stays_put(self):
        end_step = step_to()
        streams = {"end": [end_step]}

        result = compute_next_cursor(end_step, streams, Cursor(stream_name="end"))

        assert (result.stream_name, result.step_index) == ("end", 1)
        assert result.stream_stack == ()

    def test_overflow_without_end_stream_stays_exhausted(self):
        a0 = step_to()
        result = compute_next_cursor(a0, {"a": [a0]}, Cursor(stream_name="a"))

        assert (result.stream_name, result.step_index) == ("a", 1)
        assert result.stream_stack == ()

    def test_exhausted_end_returns_to_parent(self):
        end_step = step_to()
        streams = {"a": [step_to(), step_to()], "end": [end_step]}
        cursor = Cursor(stream_name="end", stream_stack=(Frame(stream_name="a", step_index=1),))

        result = compute_next_cursor(end_step, streams, cursor)

        assert (result.stream_name, result.step_index) == ("a", 1)
        assert result.stream_stack == ()


class TestInvalidReferences:
    def test_unknown_string_element_raises(self):
        a0 = step_to()
        streams = {"a": [a0, "ghost"], "end": [step_to()]}
        with pytest.raises(InvalidStreamReferenceError, match="ghost") as exc_info:
            compute_next_cursor(a0, streams, Cursor(stream_name="a"))
        assert exc_info.value.token == "ghost"

    def test_empty_element_raises(self):
        a0 = step_to()
        streams = {"a": [a0, None], "end": [step_to()]}
        with pytest.raises(InvalidStreamReferenceError):
            compute_next_cursor(a0, streams, Cursor(stream_name="a"))
