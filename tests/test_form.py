import pytest

from textsub.form import (
    BACKSPACE,
    CANCEL,
    FIELD_COUNT,
    NEXT,
    PREVIOUS,
    FormEvent,
    FormState,
    FormStatus,
    ParameterForm,
    parse_fields,
    step,
)


def _type(state: FormState, text: str) -> FormState:
    for ch in text:
        state = step(state, FormEvent.char_input(ch))
    return state


class TestStep:
    def test_initial_state(self):
        s = FormState()
        assert s.fields == ("",) * FIELD_COUNT
        assert s.focus == 0
        assert s.status is FormStatus.EDITING

    def test_char_appends_to_focused_field(self):
        s = _type(FormState(), "src")
        assert s.fields[0] == "src"
        s = step(s, NEXT)
        s = _type(s, "swift")
        assert s.fields[:2] == ("src", "swift")

    def test_backspace(self):
        s = _type(FormState(), "ab")
        s = step(s, BACKSPACE)
        assert s.current == "a"
        s = step(step(s, BACKSPACE), BACKSPACE)
        assert s.current == ""
        assert s.status is FormStatus.EDITING

    def test_previous_clamps_at_zero(self):
        s = step(FormState(), PREVIOUS)
        assert s.focus == 0
        s = step(step(s, NEXT), NEXT)
        assert step(s, PREVIOUS).focus == 1

    def test_next_from_last_field_submits(self):
        s = FormState()
        for _ in range(FIELD_COUNT - 1):
            s = step(s, NEXT)
        assert s.focus == FIELD_COUNT - 1
        assert s.status is FormStatus.EDITING
        s = step(s, NEXT)
        assert s.status is FormStatus.SUBMITTED
        assert s.focus == FIELD_COUNT - 1

    @pytest.mark.parametrize("moves", [0, 2, 4])
    def test_cancel_from_any_field(self, moves):
        s = FormState()
        for _ in range(moves):
            s = step(s, NEXT)
        assert step(s, CANCEL).status is FormStatus.CANCELLED

    def test_terminal_states_ignore_events(self):
        cancelled = step(FormState(), CANCEL)
        assert step(cancelled, FormEvent.char_input("x")) is cancelled
        assert step(cancelled, NEXT) is cancelled

    def test_transitions_do_not_mutate(self):
        s = FormState()
        step(s, FormEvent.char_input("x"))
        assert s.fields[0] == ""

    def test_initial_defaults(self):
        s = FormState.initial(["a", "b", "c", "d", "e"])
        assert s.fields == ("a", "b", "c", "d", "e")
        with pytest.raises(ValueError):
            FormState.initial(["a"])


class TestParseFields:
    def test_parse(self):
        p = parse_fields(["  src ", ".swift, txt", "private, build", r"c(\d+)", "c$1"])
        assert p.root == "src"
        assert p.included_extensions == frozenset({"swift", "txt"})
        assert p.excluded_names == frozenset({"private", "build"})
        assert p.pattern == r"c(\d+)"
        assert p.replacement == "c$1"

    def test_empty_root_means_current_dir(self):
        p = parse_fields(["", "", "", "x", ""])
        assert p.root == "."
        assert p.included_extensions == frozenset()
        assert p.excluded_names == frozenset()

    def test_pattern_and_replacement_kept_verbatim(self):
        p = parse_fields(["src", "txt", "", "  a ", " b "])
        assert (p.pattern, p.replacement) == ("  a ", " b ")


class TestParameterForm:
    def test_run_submits(self):
        events = []
        for text in ("src", "swift", "private", r"Constants\.c(\d+)\.rawValue", "Constants.c$1"):
            events.extend(FormEvent.char_input(ch) for ch in text)
            events.append(NEXT)
        it = iter(events)
        rendered = []
        form = ParameterForm(render=rendered.append)
        params = form.run(lambda: next(it))
        assert params.root == "src"
        assert params.included_extensions == frozenset({"swift"})
        assert params.excluded_names == frozenset({"private"})
        assert params.replacement == "Constants.c$1"
        assert rendered[-1].status is FormStatus.SUBMITTED
        assert len(rendered) == len(events) + 1

    def test_run_cancelled_returns_none(self):
        it = iter([FormEvent.char_input("s"), CANCEL])
        assert ParameterForm().run(lambda: next(it)) is None

    def test_run_stops_reading_after_submit(self):
        form = ParameterForm(defaults=["src", "txt", "", "a", "b"])
        calls = []

        def read():
            calls.append(1)
            return NEXT

        params = form.run(read)
        assert len(calls) == FIELD_COUNT
        assert params.pattern == "a"
