"""Pydantic models for the REST server."""

from __future__ import annotations

from pydantic import BaseModel, Field

from proposal_copilot.engine.workflow.events import EntryPoint
from proposal_copilot.engine.workflow.messages import Message
from proposal_copilot.engine.workflow.policy import Suggestion
from proposal_copilot.engine.workflow.proposal import ProposalTerms
from proposal_copilot.engine.workflow.state_machine import ActiveView, WorkflowState


class ApiSuggestion(BaseModel):
    label: str
    entry_point: EntryPoint | None = None
    enabled: bool

    @staticmethod
    def from_suggestion(suggestion: Suggestion) -> ApiSuggestion:
        return ApiSuggestion(
            label=suggestion.label,
            entry_point=suggestion.entry_point,
            enabled=suggestion.enabled,
        )


class SessionView(BaseModel):
    state: WorkflowState
    view: ActiveView
    running: bool
    revision: int

    messages: list[Message] = Field(default_factory=list)
    proposal: ProposalTerms
    suggestions: list[ApiSuggestion] = Field(default_factory=list)
    available_entry_points: list[EntryPoint] = Field(default_factory=list)

    last_error: str | None = None
