"""Declarative scripts for the three operator entry points.

A script is plain data: an ordered tuple of steps. Each step waits for its
delay and then applies its effects in a fixed order (revision, message, state,
view). The controller is the only thing that executes them.

Message text is fixed except where it quotes the deal's discounts.
"""

from __future__ import annotations

from dataclasses import dataclass

from .events import EntryPoint
from .messages import ActionCard, MessageDraft, Role
from .proposal import ProposalTerms
from .state_machine import ActiveView, WorkflowState

GREETING = (
    "I am monitoring your inbox for high-value opportunities. "
    "I will alert you if I detect actionable requests."
)


@dataclass(frozen=True, slots=True)
class Step:
    """One delay plus the effects applied once it has elapsed.

    `delay` is in seconds, before scaling by the controller.
    """

    delay: float = 0.0
    message: MessageDraft | None = None
    revise_discount: float | None = None
    state: WorkflowState | None = None
    view: ActiveView | None = None


@dataclass(frozen=True, slots=True)
class Script:
    entry_point: EntryPoint
    steps: tuple[Step, ...]

    @property
    def messages(self) -> tuple[MessageDraft, ...]:
        return tuple(step.message for step in self.steps if step.message is not None)


def _pct(value: float) -> str:
    return f"{value:g}%"


def greeting() -> MessageDraft:
    return MessageDraft.plain(Role.AGENT, GREETING)


def analyze_script(terms: ProposalTerms) -> Script:
    return Script(
        entry_point=EntryPoint.ANALYZE_EMAIL,
        steps=(
            Step(
                state=WorkflowState.ANALYZING,
                message=MessageDraft.plain(Role.USER, "Analyze this email and help me respond."),
            ),
            Step(
                delay=1.0,
                message=MessageDraft.reasoning(
                    "Analyzing intent and gathering context...",
                    "Intent: Rate Request (RFP) detected",
                    "Entity: Northstar Enterprises",
                    f"Product: AI Analytics Suite ({terms.seat_count} Seats)",
                ),
            ),
            Step(
                delay=2.5,
                message=MessageDraft.reasoning(
                    "Querying internal systems for account data...",
                    "Salesforce: Found Account 'Northstar Ent' (Tier 1)",
                    "SharePoint: Retrieved 'Q1_Pricing_Policy.pdf'",
                    "Graph API: Checked calendar availability",
                ),
            ),
            Step(
                delay=2.0,
                message=MessageDraft.action(
                    "I have prepared a draft based on the 'Enterprise_SaaS_Template_v4'.",
                    ActionCard(
                        title="Proposal Ready for Review",
                        description=(
                            f"Includes {_pct(terms.discount_percent)} discount "
                            "and standard SLA terms."
                        ),
                        action_label="Open Draft in Word",
                        entry_point=EntryPoint.OPEN_DRAFT,
                    ),
                ),
            ),
        ),
    )


def open_draft_script(terms: ProposalTerms) -> Script:
    return Script(
        entry_point=EntryPoint.OPEN_DRAFT,
        steps=(
            Step(
                state=WorkflowState.DRAFTING,
                message=MessageDraft.plain(Role.USER, "Open the draft."),
            ),
            Step(delay=0.8, message=MessageDraft.plain(Role.AGENT, "Opening Microsoft Word...")),
            Step(delay=1.0, state=WorkflowState.REVIEW, view=ActiveView.DOCUMENT),
            Step(
                delay=1.5,
                message=MessageDraft.plain(
                    Role.AGENT,
                    "I've flagged one section regarding Data Sovereignty. Also, note that the "
                    f"{_pct(terms.discount_percent)} discount requires VP approval.",
                ),
            ),
        ),
    )


def revise_terms_script(terms: ProposalTerms, *, revised_discount_percent: float) -> Script:
    current = _pct(terms.discount_percent)
    revised = _pct(revised_discount_percent)
    return Script(
        entry_point=EntryPoint.REVISE_TERMS,
        steps=(
            Step(
                message=MessageDraft.plain(
                    Role.USER,
                    f"The {current} discount is too aggressive for Q1. "
                    f"Let's drop it to {revised} to avoid approval delays.",
                ),
            ),
            Step(
                delay=0.8,
                state=WorkflowState.ANALYZING,
                message=MessageDraft.reasoning(
                    "Updating proposal terms...",
                    f"Policy Check: {revised} discount is within Account Executive limits.",
                    f"Action: update_table_row(id='discount', value='{revised}')",
                    "Recalculating Totals...",
                ),
            ),
            Step(
                delay=2.0,
                revise_discount=revised_discount_percent,
                state=WorkflowState.REVIEW,
                message=MessageDraft.plain(
                    Role.AGENT,
                    f"I've updated the discount to {revised} and recalculated the total. "
                    "No VP approval is required for this tier.",
                ),
            ),
        ),
    )
