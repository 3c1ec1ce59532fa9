"""The workflow controller: runs one script at a time on the asyncio loop.

The controller is the single writer of the session's message log, proposal
record, workflow state and active view. Readers go through its accessors.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from typing import NoReturn

from .events import ChangeKind, ChangeNotice, EntryPoint
from .messages import ActionCard, MessageLog
from .policy import (
    DEFAULT_REVISED_DISCOUNT_PERCENT,
    Suggestion,
    suggested_entry_points,
    suggestions,
)
from .proposal import ProposalRecord
from .scripts import Script, analyze_script, open_draft_script, revise_terms_script
from .state_machine import ActiveView, WorkflowState, transition

logger = logging.getLogger(__name__)

ChangeListener = Callable[[ChangeNotice], None]


class InvalidTransition(Exception):
    """The entry point is not valid for the controller's current state.

    Raised before anything is changed.
    """

    def __init__(self, entry_point: EntryPoint, state: WorkflowState, reason: str) -> None:
        super().__init__(f"Cannot trigger '{entry_point.value}' in state '{state.value}': {reason}")
        self.entry_point = entry_point
        self.state = state
        self.reason = reason


class WorkflowController:
    def __init__(
        self,
        *,
        log: MessageLog,
        proposal: ProposalRecord,
        revised_discount_percent: float = DEFAULT_REVISED_DISCOUNT_PERCENT,
        delay_scale: float = 1.0,
    ) -> None:
        if delay_scale < 0:
            raise ValueError("delay_scale must be >= 0")
        self._log = log
        self._proposal = proposal
        self._revised_discount_percent = revised_discount_percent
        self._delay_scale = delay_scale

        self._state = WorkflowState.IDLE
        self._view = ActiveView.INBOX
        self._active: Script | None = None
        self._pending_card: ActionCard | None = None
        self._revision = 0
        self._listeners: list[ChangeListener] = []
        self._task: asyncio.Task[None] | None = None

    @property
    def state(self) -> WorkflowState:
        return self._state

    @property
    def view(self) -> ActiveView:
        return self._view

    @property
    def running(self) -> bool:
        return self._active is not None

    @property
    def revision(self) -> int:
        return self._revision

    def subscribe(self, listener: ChangeListener) -> Callable[[], None]:
        """Register a change listener. Returns a callable that unsubscribes it."""

        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    def suggestions(self) -> tuple[Suggestion, ...]:
        return suggestions(
            self._state,
            self._proposal,
            revised_discount_percent=self._revised_discount_percent,
        )

    def available_entry_points(self) -> set[EntryPoint]:
        if self._active is not None:
            return set()

        available: set[EntryPoint] = set()
        if self._state == WorkflowState.IDLE:
            available.add(EntryPoint.ANALYZE_EMAIL)
        if self._state == WorkflowState.ANALYZING and self._pending_card is not None:
            available.add(self._pending_card.entry_point)
        available |= suggested_entry_points(
            self._state,
            self._proposal,
            revised_discount_percent=self._revised_discount_percent,
        )
        return available

    async def trigger(self, entry_point: EntryPoint) -> None:
        """Run the script bound to `entry_point` to completion.

        The script runs in its own task. Cancelling the caller stops the wait,
        not the script.

        Raises:
            InvalidTransition: if the entry point is not currently available,
                including while another script is in flight.
        """

        task = self.start(entry_point)
        await asyncio.shield(task)

    def start(self, entry_point: EntryPoint) -> asyncio.Task[None]:
        """Validate synchronously, then run the script in the background.

        A leading zero-delay step is applied before this returns, so readers
        never see a running script still in its pre-trigger state.
        """

        loop = asyncio.get_running_loop()
        script = self._begin(entry_point)
        first = 0
        try:
            if script.steps and script.steps[0].delay == 0:
                self._apply(script, 0)
                first = 1
        except BaseException:
            self._active = None
            raise

        task = loop.create_task(self._run(script, first), name=f"script-{entry_point.value}")
        # The loop only holds tasks weakly.
        self._task = task
        return task

    def _begin(self, entry_point: EntryPoint) -> Script:
        if self._active is not None:
            running = self._active.entry_point.value
            self._reject(entry_point, f"script '{running}' is still running")
        if entry_point not in self.available_entry_points():
            self._reject(entry_point, "entry point is not available")

        script = self._build_script(entry_point)
        self._active = script
        if entry_point == EntryPoint.OPEN_DRAFT:
            self._pending_card = None

        logger.info(
            "Script started",
            extra={"entry_point": entry_point.value, "state": self._state.value},
        )
        return script

    def _reject(self, entry_point: EntryPoint, reason: str) -> NoReturn:
        logger.info(
            "Trigger rejected",
            extra={"entry_point": entry_point.value, "state": self._state.value, "reason": reason},
        )
        raise InvalidTransition(entry_point, self._state, reason)

    def _build_script(self, entry_point: EntryPoint) -> Script:
        terms = self._proposal.read()
        if entry_point == EntryPoint.ANALYZE_EMAIL:
            return analyze_script(terms)
        if entry_point == EntryPoint.OPEN_DRAFT:
            return open_draft_script(terms)
        if entry_point == EntryPoint.REVISE_TERMS:
            return revise_terms_script(
                terms, revised_discount_percent=self._revised_discount_percent
            )
        raise AssertionError(f"No script bound to {entry_point.value}")

    async def _run(self, script: Script, first: int = 0) -> None:
        try:
            for index in range(first, len(script.steps)):
                await asyncio.sleep(script.steps[index].delay * self._delay_scale)
                self._apply(script, index)
        finally:
            self._active = None

        logger.info(
            "Script completed",
            extra={
                "entry_point": script.entry_point.value,
                "state": self._state.value,
                "messages": len(self._log),
            },
        )

    def _apply(self, script: Script, index: int) -> None:
        assert self._active is script, "step applied outside its running script"
        step = script.steps[index]

        # Resolve the state change first so an illegal edge fails before any write.
        next_state = self._state
        if step.state is not None:
            next_state = transition(current=self._state, to=step.state)

        changes: set[ChangeKind] = set()
        if step.revise_discount is not None:
            self._proposal.apply_revision(step.revise_discount)
            changes.add(ChangeKind.PROPOSAL)
        if step.message is not None:
            self._log.append(step.message)
            if isinstance(step.message.metadata, ActionCard):
                self._pending_card = step.message.metadata
            changes.add(ChangeKind.MESSAGE)
        if next_state != self._state:
            self._state = next_state
            changes.add(ChangeKind.STATE)
        if step.view is not None and step.view != self._view:
            self._view = step.view
            changes.add(ChangeKind.VIEW)

        logger.debug(
            "Step applied",
            extra={
                "entry_point": script.entry_point.value,
                "step": index,
                "state": self._state.value,
            },
        )
        if changes:
            self._notify(script.entry_point, changes)

    def _notify(self, entry_point: EntryPoint, changes: set[ChangeKind]) -> None:
        self._revision += 1
        notice = ChangeNotice(
            revision=self._revision, entry_point=entry_point, changes=frozenset(changes)
        )
        for listener in list(self._listeners):
            try:
                listener(notice)
            except Exception:
                # The step is already applied; a failing listener cannot undo it.
                logger.exception(
                    "Change listener failed",
                    extra={"entry_point": entry_point.value, "revision": notice.revision},
                )
