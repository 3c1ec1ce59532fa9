"""Background script runner for the REST server.

The server owns one in-memory session. Scripts triggered without `wait` run as
asyncio tasks on the server's event loop; failures are logged and kept on the
runner so the next read can report them.
"""

from __future__ import annotations

import asyncio
import logging

from proposal_copilot.engine.config import SimulationSettings
from proposal_copilot.engine.workflow.events import EntryPoint
from proposal_copilot.engine.workflow.session import WorkflowSession
from proposal_copilot.server.models import ApiSuggestion, SessionView

logger = logging.getLogger(__name__)


class SessionRunner:
    def __init__(self, settings: SimulationSettings) -> None:
        self.session = WorkflowSession(settings)
        self.last_error: str | None = None
        self._task: asyncio.Task[None] | None = None

    def start(self, entry_point: EntryPoint) -> None:
        """Start the script in the background. Raises InvalidTransition when rejected."""

        task = self.session.controller.start(entry_point)
        self.last_error = None
        self._task = task
        task.add_done_callback(self._on_done)

    async def run(self, entry_point: EntryPoint) -> None:
        self.last_error = None
        await self.session.controller.trigger(entry_point)

    def reset(self) -> None:
        self.session.reset()
        self.last_error = None
        self._task = None

    def view(self) -> SessionView:
        controller = self.session.controller
        return SessionView(
            state=controller.state,
            view=controller.view,
            running=controller.running,
            revision=controller.revision,
            messages=list(self.session.log.snapshot()),
            proposal=self.session.proposal.read(),
            suggestions=[ApiSuggestion.from_suggestion(s) for s in controller.suggestions()],
            available_entry_points=sorted(
                controller.available_entry_points(), key=lambda e: e.value
            ),
            last_error=self.last_error,
        )

    def _on_done(self, task: asyncio.Task[None]) -> None:
        if task.cancelled():
            self.last_error = "Script cancelled"
            logger.warning("Script cancelled", extra={"task": task.get_name()})
            return
        exc = task.exception()
        if exc is not None:
            self.last_error = str(exc)
            logger.error(
                "Script failed",
                extra={"task": task.get_name()},
                exc_info=(type(exc), exc, exc.__traceback__),
            )
