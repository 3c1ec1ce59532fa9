from __future__ import annotations

from dataclasses import dataclass

from .events import EntryPoint
from .proposal import ProposalRecord
from .state_machine import WorkflowState

DEFAULT_REVISED_DISCOUNT_PERCENT = 10.0


@dataclass(frozen=True, slots=True)
class Suggestion:
    """A quick action offered to the operator.

    Inert suggestions have no entry point and are never enabled.
    """

    label: str
    entry_point: EntryPoint | None
    enabled: bool


def suggestions(
    state: WorkflowState,
    proposal: ProposalRecord,
    *,
    revised_discount_percent: float = DEFAULT_REVISED_DISCOUNT_PERCENT,
) -> tuple[Suggestion, ...]:
    """Policy: (state, proposal) -> follow-up quick actions.

    This is intentionally small and explicit. It reads, never writes, and is
    re-evaluated on every call.
    """

    if state != WorkflowState.REVIEW:
        return ()
    if proposal.read().discount_percent != proposal.initial.discount_percent:
        return ()
    return (
        Suggestion(
            label=f"Reduce discount to {revised_discount_percent:g}% (Auto-Approve)",
            entry_point=EntryPoint.REVISE_TERMS,
            enabled=True,
        ),
        Suggestion(label="Request VP Approval", entry_point=None, enabled=False),
    )


def suggested_entry_points(
    state: WorkflowState,
    proposal: ProposalRecord,
    *,
    revised_discount_percent: float = DEFAULT_REVISED_DISCOUNT_PERCENT,
) -> set[EntryPoint]:
    return {
        s.entry_point
        for s in suggestions(state, proposal, revised_discount_percent=revised_discount_percent)
        if s.enabled and s.entry_point is not None
    }
