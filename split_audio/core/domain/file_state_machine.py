"""
Input file lifecycle state machine definitions.

This module defines the states an input file passes through during a run
and the allowed transitions between them. It is passive and
validation-only: the orchestrator drives the transitions and uses these
helpers to check and report them.
"""

from __future__ import annotations

DISCOVERED = "discovered"
DATE_EXTRACTED = "date_extracted"
SPLITTING = "splitting"
RENAMING = "renaming"
DONE = "done"
SKIPPED = "skipped"
ABORTED = "aborted"

# Terminal file states: the loop moves on to the next file.
FILE_TERMINAL_STATES: frozenset[str] = frozenset(
    {
        DONE,
        SKIPPED,
        ABORTED,
    }
)


# Allowed file state transitions.
#
# Key   : previous state (or None before the file was discovered)
# Value : set of allowed next states
#
# There is no retry edge: a terminal state is final for the run.
FILE_ALLOWED_TRANSITIONS: dict[str | None, frozenset[str]] = {
    None: frozenset({DISCOVERED}),

    DISCOVERED: frozenset(
        {
            DATE_EXTRACTED,
            SKIPPED,
        }
    ),

    DATE_EXTRACTED: frozenset({SPLITTING}),

    SPLITTING: frozenset(
        {
            RENAMING,
            ABORTED,
        }
    ),

    RENAMING: frozenset(
        {
            DONE,
            ABORTED,
        }
    ),
}


def is_terminal_state(state: str | None) -> bool:
    """Return True if the given state is terminal."""
    return state in FILE_TERMINAL_STATES


def is_valid_transition(prev_state: str | None, next_state: str) -> bool:
    """Return True if the transition prev_state -> next_state is allowed."""
    allowed = FILE_ALLOWED_TRANSITIONS.get(prev_state)
    if allowed is None:
        return False
    return next_state in allowed
