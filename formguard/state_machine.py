"""Form lifecycle state machine.

A form is in one of two states:

    EDITING --(field change)--> EDITING
    EDITING --(valid submit)--> SUBMITTED
    EDITING --(invalid submit)-> EDITING

SUBMITTED is terminal. Resetting a submitted form is the host's business and
is done by starting a fresh FormState, not by a transition.

Usage:
    >>> from formguard.types import FormStatus
    >>> can_transition(FormStatus.EDITING, FormStatus.SUBMITTED)
    True
    >>> can_transition(FormStatus.SUBMITTED, FormStatus.EDITING)
    False
"""

import logging
from typing import Dict, Set

from formguard.types import FormStatus

logger = logging.getLogger(__name__)


class InvalidStateTransitionError(Exception):
    """Raised when attempting an invalid state transition.

    Attributes:
        current_state: The current state before the attempted transition
        target_state: The target state that was attempted
    """

    def __init__(self, current_state: FormStatus, target_state: FormStatus, message: str):
        self.current_state = current_state
        self.target_state = target_state
        super().__init__(message)


# Maps each state to the set of states it can transition to
VALID_TRANSITIONS: Dict[FormStatus, Set[FormStatus]] = {
    FormStatus.EDITING: {
        FormStatus.EDITING,
        FormStatus.SUBMITTED,
    },
    # Terminal state - no transitions allowed
    FormStatus.SUBMITTED: set(),
}


def can_transition(current: FormStatus, target: FormStatus) -> bool:
    """Check if a transition from ``current`` to ``target`` is valid."""
    return target in VALID_TRANSITIONS.get(current, set())


def is_terminal(status: FormStatus) -> bool:
    """Check if no further transitions are possible from ``status``."""
    return len(VALID_TRANSITIONS[status]) == 0


def check_transition(current: FormStatus, target: FormStatus) -> None:
    """Enforce the transition rules.

    Raises:
        InvalidStateTransitionError: If the transition is not allowed
    """
    if can_transition(current, target):
        logger.debug("Form transition %s -> %s", current.value, target.value)
        return

    if VALID_TRANSITIONS[current]:
        message = (
            f"Invalid state transition: cannot transition from "
            f"'{current.value}' to '{target.value}'. "
            f"Valid transitions from '{current.value}' are: "
            f"{', '.join(sorted(s.value for s in VALID_TRANSITIONS[current]))}"
        )
    else:
        message = (
            f"Invalid state transition: '{current.value}' is a terminal state, "
            f"no transitions are allowed."
        )
    raise InvalidStateTransitionError(current_state=current, target_state=target, message=message)


__all__ = [
    "InvalidStateTransitionError",
    "VALID_TRANSITIONS",
    "can_transition",
    "is_terminal",
    "check_transition",
]
