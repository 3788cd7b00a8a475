"""Property-based tests using Hypothesis.

These drive the state machine with random key sequences and check the
invariants that must hold after every key, then check the chaining
rules against the evaluator directly.
"""
from __future__ import annotations

from hypothesis import given, settings
from hypothesis import strategies as st

from handcalc.calculator import INITIAL_STATE, readout, run, transition
from handcalc.display import ERROR_TEXT, MAX_DISPLAY_LEN, format_display
from handcalc.evaluator import EvaluationError, evaluate
from handcalc.keys import KEY_LABELS, OPERATOR_GLYPHS, KeyKind, parse_key, to_internal

# ---------------------------------------------------------------------------
# Strategies
# ---------------------------------------------------------------------------

key_labels = st.sampled_from(KEY_LABELS)
key_sequences = st.lists(key_labels, max_size=40)
glyphs = st.sampled_from(OPERATOR_GLYPHS)
operands = st.text(alphabet="0123456789", min_size=1, max_size=6)


def _press(*labels: str):
    return run(parse_key(label) for label in labels)


def _expected_display(result: str | EvaluationError) -> str:
    return format_display(result)


# ===================================================================
# INVARIANTS AFTER EVERY KEY
# ===================================================================

class TestStateInvariants:

    @given(labels=key_sequences)
    @settings(max_examples=400)
    def test_invariants_hold(self, labels):
        state = INITIAL_STATE
        for label in labels:
            event = parse_key(label)
            nxt = transition(state, event)

            assert nxt.buffer != ""
            assert nxt.buffer.count(".") <= 1
            if nxt.operator is not None:
                assert nxt.accumulator is not None
            if state.is_error and event.kind not in (KeyKind.CLEAR_ALL, KeyKind.CLEAR_ENTRY):
                assert nxt == state
            if event.kind == KeyKind.CLEAR_ALL:
                assert nxt == INITIAL_STATE

            state = nxt

    @given(labels=key_sequences)
    @settings(max_examples=400)
    def test_readout_is_consistent(self, labels):
        state = INITIAL_STATE
        for label in labels:
            state = transition(state, parse_key(label))
            view = readout(state)
            assert view.display
            assert (view.pending_operator is None) == (state.operator is None)
            if state.is_error:
                assert view.display == ERROR_TEXT
            raw_entry = view.display.endswith(".") or view.display == "-"
            if not raw_entry and "e" not in view.display:
                assert len(view.display) <= MAX_DISPLAY_LEN

    @given(labels=key_sequences)
    def test_deterministic(self, labels):
        assert _press(*labels) == _press(*labels)

    @given(labels=key_sequences)
    def test_clear_entry_always_leaves_error(self, labels):
        state = transition(_press(*labels), parse_key("C"))
        assert not state.is_error
        assert state.buffer == "0"
        assert state.awaiting_next is False


# ===================================================================
# CHAINING RULES
# ===================================================================

class TestChaining:

    @given(a=operands, op1=glyphs, b=operands, op2=glyphs, c=operands)
    @settings(max_examples=300)
    def test_left_to_right(self, a, op1, b, op2, c):
        """a op1 b op2 c = evaluates (a op1 b) op2 c."""
        first = evaluate(a, to_internal(op1), b)
        if isinstance(first, EvaluationError):
            expected = ERROR_TEXT
        else:
            expected = _expected_display(evaluate(first, to_internal(op2), c))
        state = _press(*a, op1, *b, op2, *c, "=")
        assert readout(state).display == expected

    @given(a=operands, op=glyphs, b=operands)
    def test_repeat_equals(self, a, op, b):
        """a op b = = applies "op b" twice."""
        token = to_internal(op)
        once = evaluate(a, token, b)
        state = _press(*a, op, *b, "=", "=")
        if isinstance(once, EvaluationError):
            assert state.is_error
            return
        twice = evaluate(once, token, b)
        assert readout(state).display == _expected_display(twice)

    @given(a=operands, op1=glyphs, op2=glyphs, b=operands)
    def test_operator_replacement(self, a, op1, op2, b):
        """a op1 op2 b = behaves like a op2 b =."""
        assert _press(*a, op1, op2, *b, "=") == _press(*a, op2, *b, "=")

    @given(a=operands)
    def test_divide_by_zero_locks_until_clear(self, a):
        state = _press(*a, "÷", "0", "=")
        assert state.is_error
        for label in ["7", "+", "=", ".", "%", "+/-", "⌫"]:
            assert transition(state, parse_key(label)) == state
        assert not transition(state, parse_key("AC")).is_error
        assert not transition(state, parse_key("C")).is_error


# ===================================================================
# ENTRY
# ===================================================================

class TestEntry:

    @given(digits=st.text(alphabet="123456789", min_size=1, max_size=12))
    def test_typed_digits_are_buffered_verbatim(self, digits):
        assert _press(*digits).buffer == digits

    @given(digits=st.text(alphabet="123456789", min_size=1, max_size=12))
    def test_toggle_twice_restores(self, digits):
        assert _press(*digits, "+/-", "+/-").buffer == digits

    @given(digits=st.text(alphabet="0123456789", min_size=1, max_size=12))
    def test_backspace_undoes_entry(self, digits):
        state = _press(*digits)
        for _ in digits:
            state = transition(state, parse_key("⌫"))
        assert state.buffer == "0"
