"""Unit tests for the workflow controller.

Delays are scaled to zero; each step still yields to the event loop once.
"""

from __future__ import annotations

import asyncio
import logging

import pytest

from proposal_copilot.engine.workflow.controller import InvalidTransition, WorkflowController
from proposal_copilot.engine.workflow.events import ChangeKind, ChangeNotice, EntryPoint
from proposal_copilot.engine.workflow.messages import MessageDraft, MessageLog
from proposal_copilot.engine.workflow.proposal import ProposalRecord, ProposalTerms
from proposal_copilot.engine.workflow.scripts import (
    analyze_script,
    greeting,
    open_draft_script,
    revise_terms_script,
)
from proposal_copilot.engine.workflow.session import WorkflowSession
from proposal_copilot.engine.workflow.state_machine import ActiveView, WorkflowState

FULL_RUN = [EntryPoint.ANALYZE_EMAIL, EntryPoint.OPEN_DRAFT, EntryPoint.REVISE_TERMS]


def _observable(session: WorkflowSession) -> tuple[object, ...]:
    c = session.controller
    return (session.log.snapshot(), session.proposal.read(), c.state, c.view, c.revision)


def _as_drafts(session: WorkflowSession) -> list[MessageDraft]:
    return [
        MessageDraft(role=m.role, content=m.content, metadata=m.metadata)
        for m in session.log.snapshot()
    ]


@pytest.mark.asyncio
async def test_full_run_appends_every_scripted_message_in_order(
    session: WorkflowSession,
) -> None:
    initial = session.proposal.read()

    for entry_point in FULL_RUN:
        await session.controller.trigger(entry_point)

    expected = [
        greeting(),
        *analyze_script(initial).messages,
        *open_draft_script(initial).messages,
        *revise_terms_script(initial, revised_discount_percent=10).messages,
    ]
    assert _as_drafts(session) == expected
    assert len(session.log) == 11
    assert [m.id for m in session.log.snapshot()] == list(range(1, 12))

    terms = session.proposal.read()
    assert (terms.discount_percent, terms.unit_price, terms.total) == (10, 30, 13500)
    assert session.controller.state == WorkflowState.REVIEW
    assert session.controller.view == ActiveView.DOCUMENT
    assert session.controller.suggestions() == ()
    assert session.controller.available_entry_points() == set()


@pytest.mark.asyncio
async def test_message_counts_per_script(session: WorkflowSession) -> None:
    counts = []
    for entry_point in FULL_RUN:
        before = len(session.log)
        await session.controller.trigger(entry_point)
        counts.append(len(session.log) - before)
    assert counts == [4, 3, 3]


@pytest.mark.asyncio
async def test_state_moves_through_every_step(session: WorkflowSession) -> None:
    seen: list[tuple[EntryPoint, WorkflowState]] = []
    session.controller.subscribe(
        lambda notice: seen.append((notice.entry_point, session.controller.state))
    )

    for entry_point in FULL_RUN:
        await session.controller.trigger(entry_point)

    assert [state for _, state in seen] == [
        WorkflowState.ANALYZING,
        WorkflowState.ANALYZING,
        WorkflowState.ANALYZING,
        WorkflowState.ANALYZING,
        WorkflowState.DRAFTING,
        WorkflowState.DRAFTING,
        WorkflowState.REVIEW,
        WorkflowState.REVIEW,
        WorkflowState.REVIEW,
        WorkflowState.ANALYZING,
        WorkflowState.REVIEW,
    ]


@pytest.mark.asyncio
async def test_notices_describe_each_step(session: WorkflowSession) -> None:
    notices: list[ChangeNotice] = []
    unsubscribe = session.controller.subscribe(notices.append)

    await session.controller.trigger(EntryPoint.ANALYZE_EMAIL)
    await session.controller.trigger(EntryPoint.OPEN_DRAFT)

    assert [n.revision for n in notices] == list(range(1, 9))
    assert notices[0].changes == {ChangeKind.MESSAGE, ChangeKind.STATE}
    assert notices[1].changes == {ChangeKind.MESSAGE}
    # The document step switches view and state without a message.
    assert notices[6].changes == {ChangeKind.STATE, ChangeKind.VIEW}

    unsubscribe()
    await session.controller.trigger(EntryPoint.REVISE_TERMS)
    assert len(notices) == 8
    assert session.controller.revision == 11


@pytest.mark.asyncio
async def test_revision_notice_changes_proposal_and_state_together(
    session: WorkflowSession,
) -> None:
    await session.controller.trigger(EntryPoint.ANALYZE_EMAIL)
    await session.controller.trigger(EntryPoint.OPEN_DRAFT)

    observed: list[tuple[float, float, WorkflowState]] = []

    def _watch(notice: ChangeNotice) -> None:
        terms = session.proposal.read()
        observed.append((terms.discount_percent, terms.total, session.controller.state))

    session.controller.subscribe(_watch)
    await session.controller.trigger(EntryPoint.REVISE_TERMS)

    assert observed == [
        (15, 12750, WorkflowState.REVIEW),
        (15, 12750, WorkflowState.ANALYZING),
        (10, 13500, WorkflowState.REVIEW),
    ]


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "entry_point",
    [EntryPoint.OPEN_DRAFT, EntryPoint.REVISE_TERMS, EntryPoint.REQUEST_VP_APPROVAL],
)
async def test_invalid_trigger_from_idle_changes_nothing(
    session: WorkflowSession, entry_point: EntryPoint
) -> None:
    before = _observable(session)

    with pytest.raises(InvalidTransition) as excinfo:
        await session.controller.trigger(entry_point)

    assert excinfo.value.entry_point == entry_point
    assert excinfo.value.state == WorkflowState.IDLE
    assert _observable(session) == before


@pytest.mark.asyncio
async def test_revise_terms_rejected_while_analyzing(session: WorkflowSession) -> None:
    await session.controller.trigger(EntryPoint.ANALYZE_EMAIL)
    assert session.controller.state == WorkflowState.ANALYZING
    assert session.controller.available_entry_points() == {EntryPoint.OPEN_DRAFT}
    before = _observable(session)

    with pytest.raises(InvalidTransition):
        await session.controller.trigger(EntryPoint.REVISE_TERMS)

    assert _observable(session) == before


@pytest.mark.asyncio
async def test_second_analyze_is_rejected(session: WorkflowSession) -> None:
    await session.controller.trigger(EntryPoint.ANALYZE_EMAIL)

    with pytest.raises(InvalidTransition):
        await session.controller.trigger(EntryPoint.ANALYZE_EMAIL)


@pytest.mark.asyncio
async def test_action_card_is_consumed_by_open_draft(session: WorkflowSession) -> None:
    await session.controller.trigger(EntryPoint.ANALYZE_EMAIL)
    await session.controller.trigger(EntryPoint.OPEN_DRAFT)
    assert session.controller.available_entry_points() == {EntryPoint.REVISE_TERMS}

    await session.controller.trigger(EntryPoint.REVISE_TERMS)

    with pytest.raises(InvalidTransition):
        await session.controller.trigger(EntryPoint.OPEN_DRAFT)
    with pytest.raises(InvalidTransition):
        await session.controller.trigger(EntryPoint.REVISE_TERMS)


@pytest.mark.asyncio
async def test_trigger_while_script_in_flight_is_rejected(session: WorkflowSession) -> None:
    task = session.controller.start(EntryPoint.ANALYZE_EMAIL)
    assert session.controller.running
    assert session.controller.available_entry_points() == set()

    with pytest.raises(InvalidTransition) as excinfo:
        await session.controller.trigger(EntryPoint.ANALYZE_EMAIL)
    assert "still running" in excinfo.value.reason

    # Still in flight after yielding to the loop; the action card is not out yet.
    await asyncio.sleep(0)
    with pytest.raises(InvalidTransition):
        session.controller.start(EntryPoint.OPEN_DRAFT)

    await task
    assert not session.controller.running
    assert len(session.log) == 5
    assert session.controller.available_entry_points() == {EntryPoint.OPEN_DRAFT}



def _controller(delay_scale: float) -> WorkflowController:
    log = MessageLog(seed=greeting())
    proposal = ProposalRecord(
        ProposalTerms.priced(unit_price=30, seat_count=500, discount_percent=15)
    )
    return WorkflowController(log=log, proposal=proposal, delay_scale=delay_scale)


@pytest.mark.asyncio
async def test_start_applies_the_opening_step_before_returning(
    session: WorkflowSession,
) -> None:
    task = session.controller.start(EntryPoint.ANALYZE_EMAIL)

    assert session.controller.running
    assert session.controller.state == WorkflowState.ANALYZING
    assert len(session.log) == 2
    assert session.controller.revision == 1

    await task
    assert len(session.log) == 5


@pytest.mark.asyncio
async def test_cancelled_caller_does_not_stop_the_script() -> None:
    controller = _controller(delay_scale=0.05)
    await controller.trigger(EntryPoint.ANALYZE_EMAIL)

    # Open Draft waits 40 ms before its second step.
    with pytest.raises(asyncio.TimeoutError):
        await asyncio.wait_for(controller.trigger(EntryPoint.OPEN_DRAFT), timeout=0.01)
    assert controller.running
    assert controller.state == WorkflowState.DRAFTING

    loop = asyncio.get_running_loop()
    deadline = loop.time() + 5.0
    while controller.running and loop.time() < deadline:
        await asyncio.sleep(0.01)

    assert not controller.running
    assert controller.state == WorkflowState.REVIEW
    assert controller.view == ActiveView.DOCUMENT
    assert controller.revision == 8
    assert controller.available_entry_points() == {EntryPoint.REVISE_TERMS}


@pytest.mark.asyncio
async def test_failing_listener_does_not_stop_the_script(
    session: WorkflowSession, caplog: pytest.LogCaptureFixture
) -> None:
    def _broken(notice: ChangeNotice) -> None:
        if notice.revision == 2:
            raise RuntimeError("listener bug")

    seen: list[ChangeNotice] = []
    session.controller.subscribe(_broken)
    session.controller.subscribe(seen.append)

    with caplog.at_level(logging.ERROR, logger="proposal_copilot.engine.workflow.controller"):
        await session.controller.trigger(EntryPoint.ANALYZE_EMAIL)

    assert len(session.log) == 5
    assert session.controller.state == WorkflowState.ANALYZING
    assert session.controller.available_entry_points() == {EntryPoint.OPEN_DRAFT}
    assert [n.revision for n in seen] == [1, 2, 3, 4]
    assert "Change listener failed" in caplog.text


@pytest.mark.asyncio
async def test_delays_are_scaled() -> None:
    controller = _controller(delay_scale=0.001)

    loop = asyncio.get_running_loop()
    started = loop.time()
    await controller.trigger(EntryPoint.ANALYZE_EMAIL)

    # 1.0 + 2.5 + 2.0 seconds of scripted delay, scaled by 0.001.
    assert loop.time() - started >= 0.0055 - 0.001


def test_negative_delay_scale_is_rejected() -> None:
    log = MessageLog()
    proposal = ProposalRecord(
        ProposalTerms.priced(unit_price=30, seat_count=500, discount_percent=15)
    )
    with pytest.raises(ValueError):
        WorkflowController(log=log, proposal=proposal, delay_scale=-1)


@pytest.mark.asyncio
async def test_reset_restores_initial_session(session: WorkflowSession) -> None:
    for entry_point in FULL_RUN:
        await session.controller.trigger(entry_point)

    session.reset()

    assert len(session.log) == 1
    assert session.proposal.read().discount_percent == 15
    assert session.controller.state == WorkflowState.IDLE
    assert session.controller.view == ActiveView.INBOX
    assert session.controller.available_entry_points() == {EntryPoint.ANALYZE_EMAIL}


@pytest.mark.asyncio
async def test_reset_refused_while_running(session: WorkflowSession) -> None:
    task = session.controller.start(EntryPoint.ANALYZE_EMAIL)
    with pytest.raises(RuntimeError):
        session.reset()
    await task
