"""Main loop state machine.

States:
    RUNNING: Reading and answering commands (initial)
    STOPPED: Conversation over (terminal)

Valid Transitions:
    RUNNING → RUNNING   any non-shutdown command, or a parse error
    RUNNING → STOPPED   shutdown answered, or end of input

Usage:
    sm = RunnerStateMachine()
    sm.transition(RunnerState.RUNNING)
    sm.stop()
"""

from datetime import datetime, timezone
from enum import StrEnum

import structlog

from gamepack.core.exceptions import InvalidStateTransition


log = structlog.get_logger()


class RunnerState(StrEnum):
    """Main loop states."""

    RUNNING = "RUNNING"
    STOPPED = "STOPPED"


VALID_TRANSITIONS: frozenset[tuple[RunnerState, RunnerState]] = frozenset([
    (RunnerState.RUNNING, RunnerState.RUNNING),
    (RunnerState.RUNNING, RunnerState.STOPPED),
])


def is_valid_transition(from_state: RunnerState, to_state: RunnerState) -> bool:
    """Check if a state transition is valid."""
    return (from_state, to_state) in VALID_TRANSITIONS


class RunnerStateMachine:
    """Strict main loop state machine.

    Attributes:
        current_state: Current state (read-only).
        history: Distinct states entered, with timestamps (read-only copy).
    """

    def __init__(self) -> None:
        self._current_state = RunnerState.RUNNING
        self._history: list[tuple[RunnerState, datetime]] = [
            (RunnerState.RUNNING, datetime.now(timezone.utc))
        ]

    @property
    def current_state(self) -> RunnerState:
        return self._current_state

    @property
    def history(self) -> list[tuple[RunnerState, datetime]]:
        return list(self._history)

    @property
    def is_running(self) -> bool:
        return self._current_state is RunnerState.RUNNING

    def transition(self, to_state: RunnerState) -> None:
        """Transition to a new state.

        Raises:
            InvalidStateTransition: If transition is not valid.
        """
        from_state = self._current_state

        if not is_valid_transition(from_state, to_state):
            raise InvalidStateTransition(
                from_state=str(from_state),
                to_state=str(to_state),
            )

        if from_state == to_state:
            return

        self._current_state = to_state
        self._history.append((to_state, datetime.now(timezone.utc)))
        log.info("runner_state_changed", from_state=str(from_state), to_state=str(to_state))

    def stop(self) -> None:
        """Transition from RUNNING to STOPPED.

        Raises:
            InvalidStateTransition: If already STOPPED.
        """
        self.transition(RunnerState.STOPPED)
