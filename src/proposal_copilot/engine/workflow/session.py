from __future__ import annotations

import logging

from proposal_copilot.engine.config import SimulationSettings

from .controller import WorkflowController
from .messages import MessageLog
from .proposal import ProposalRecord, ProposalTerms
from .scripts import greeting

logger = logging.getLogger(__name__)


class WorkflowSession:
    """One simulated session: message log, proposal record and controller.

    Nothing is persisted. A fresh session (or :meth:`reset`) starts from the
    seeded greeting, the initial terms and the idle state.
    """

    def __init__(self, settings: SimulationSettings | None = None) -> None:
        self.settings = settings or SimulationSettings()
        self._build()

    def _build(self) -> None:
        s = self.settings
        self.log = MessageLog(seed=greeting())
        self.proposal = ProposalRecord(
            ProposalTerms.priced(
                unit_price=s.unit_price,
                seat_count=s.seat_count,
                discount_percent=s.initial_discount_percent,
            )
        )
        self.controller = WorkflowController(
            log=self.log,
            proposal=self.proposal,
            revised_discount_percent=s.revised_discount_percent,
            delay_scale=s.step_delay_scale,
        )

    def reset(self) -> None:
        if self.controller.running:
            raise RuntimeError("Cannot reset a session while a script is running")
        self._build()
        logger.info("Session reset")
