"""Unit tests for poll state-machine guardrails."""

import pytest

from momocollect.common.state_machine import is_terminal, validate_transition


def test_valid_transition():
    """Sanity check: a legal transition should pass."""

    validate_transition("PENDING", "SUCCESSFUL")
    validate_transition("QUERY_ERROR", "PENDING")
    validate_transition("QUERY_ERROR", "TIMED_OUT")


def test_invalid_transition():
    """Nothing may leave a terminal state."""

    with pytest.raises(ValueError):
        validate_transition("FAILED", "SUCCESSFUL")
    with pytest.raises(ValueError):
        validate_transition("TIMED_OUT", "PENDING")


def test_terminal_states():
    assert is_terminal("SUCCESSFUL")
    assert is_terminal("FAILED")
    assert is_terminal("TIMED_OUT")
    assert not is_terminal("PENDING")
    assert not is_terminal("QUERY_ERROR")


def test_open_states_may_reach_every_state():
    for current in ("PENDING", "QUERY_ERROR"):
        for new in ("PENDING", "QUERY_ERROR", "SUCCESSFUL", "FAILED", "TIMED_OUT"):
            validate_transition(current, new)
