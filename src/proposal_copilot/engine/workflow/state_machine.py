from __future__ import annotations

from enum import Enum


class WorkflowState(str, Enum):
    IDLE = "idle"
    ANALYZING = "analyzing"
    DRAFTING = "drafting"
    REVIEW = "review"
    COMPLETE = "complete"


class ActiveView(str, Enum):
    """Which surface the presentation layer should focus."""

    INBOX = "inbox"
    DOCUMENT = "document"


ALLOWED_TRANSITIONS: dict[WorkflowState, set[WorkflowState]] = {
    WorkflowState.IDLE: {WorkflowState.ANALYZING},
    WorkflowState.ANALYZING: {WorkflowState.DRAFTING, WorkflowState.REVIEW},
    WorkflowState.DRAFTING: {WorkflowState.REVIEW},
    WorkflowState.REVIEW: {WorkflowState.ANALYZING, WorkflowState.COMPLETE},
    WorkflowState.COMPLETE: set(),
}


class IllegalTransitionError(ValueError):
    """A script tried to move the state machine along an edge it does not have.

    Scripts are fixed data, so this always means a programming error.
    """


def transition(*, current: WorkflowState, to: WorkflowState) -> WorkflowState:
    if to == current:
        return current
    allowed = ALLOWED_TRANSITIONS.get(current, set())
    if to not in allowed:
        raise IllegalTransitionError(f"Illegal transition: {current.value} -> {to.value}")
    return to
