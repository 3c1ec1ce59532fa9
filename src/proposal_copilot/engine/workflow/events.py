from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class EntryPoint(str, Enum):
    """A named action the operator can trigger.

    Each entry point except ``REQUEST_VP_APPROVAL`` is bound to exactly one
    script. VP approval is offered as a suggestion but never does anything.
    """

    ANALYZE_EMAIL = "analyze_email"
    OPEN_DRAFT = "open_draft"
    REVISE_TERMS = "revise_terms"
    REQUEST_VP_APPROVAL = "request_vp_approval"


class ChangeKind(str, Enum):
    MESSAGE = "message"
    PROPOSAL = "proposal"
    STATE = "state"
    VIEW = "view"


@dataclass(frozen=True, slots=True)
class ChangeNotice:
    """Emitted once per applied step, after all of its effects are visible.

    `revision` increases by one with every notice in a session.
    """

    revision: int
    entry_point: EntryPoint
    changes: frozenset[ChangeKind]
