"""Scripted workflow engine.

This package introduces first-class types for:
- Entry points the operator can trigger, and change notices
- An append-only message log and the proposal record
- Declarative scripts of timed steps
- The workflow state machine and the controller that drives it
- The suggestion policy

Scripts are data; only the controller executes them, one at a time.
"""

from .controller import InvalidTransition, WorkflowController
from .events import ChangeKind, ChangeNotice, EntryPoint
from .messages import Message, MessageKind, MessageLog, Role
from .policy import Suggestion, suggestions
from .proposal import ProposalRecord, ProposalTerms
from .session import WorkflowSession
from .state_machine import ActiveView, IllegalTransitionError, WorkflowState

__all__ = [
    "ActiveView",
    "ChangeKind",
    "ChangeNotice",
    "EntryPoint",
    "IllegalTransitionError",
    "InvalidTransition",
    "Message",
    "MessageKind",
    "MessageLog",
    "ProposalRecord",
    "ProposalTerms",
    "Role",
    "Suggestion",
    "WorkflowController",
    "WorkflowSession",
    "WorkflowState",
    "suggestions",
]
