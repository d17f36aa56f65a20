"""Poll state machine transitions enforced by the status poller."""

PENDING = "PENDING"
QUERY_ERROR = "QUERY_ERROR"
SUCCESSFUL = "SUCCESSFUL"
FAILED = "FAILED"
TIMED_OUT = "TIMED_OUT"

_FROM_OPEN_STATES = {PENDING, QUERY_ERROR, SUCCESSFUL, FAILED, TIMED_OUT}

ALLOWED_TRANSITIONS: dict[str, set[str]] = {
    PENDING: _FROM_OPEN_STATES,
    # QUERY_ERROR is transient: the next round may land anywhere PENDING can.
    QUERY_ERROR: _FROM_OPEN_STATES,
    SUCCESSFUL: set(),
    FAILED: set(),
    TIMED_OUT: set(),
}

TERMINAL_STATES = frozenset({SUCCESSFUL, FAILED, TIMED_OUT})


def validate_transition(current: str, new: str) -> None:
    """Raise when a transition is not allowed by the state machine."""

    if new not in ALLOWED_TRANSITIONS.get(current, set()):
        raise ValueError(f"Invalid transition: {current} -> {new}")


def is_terminal(state: str) -> bool:
    """Return True once polling must stop."""

    return state in TERMINAL_STATES
