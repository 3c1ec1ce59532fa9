#!/usr/bin/env python3
"""Programmatic session example.

This demonstrates using the engine components directly:

* load settings from `.env`
* subscribe to change notices
* trigger each operator action in turn and watch the proposal change

Delays are real unless `--delay-scale` says otherwise.
"""

from __future__ import annotations

import argparse
import asyncio
from typing import Sequence

from proposal_copilot.engine.config import SimulationSettings
from proposal_copilot.engine.logging import configure_logging
from proposal_copilot.engine.workflow import ChangeNotice, EntryPoint, WorkflowSession


def _parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Run a proposal session (programmatic example).")
    parser.add_argument(
        "--delay-scale",
        type=float,
        default=0.25,
        help="Multiplier for scripted delays (default: 0.25)",
    )
    return parser.parse_args(argv)


async def _drive(session: WorkflowSession) -> None:
    def on_change(notice: ChangeNotice) -> None:
        last = session.log.last()
        kinds = ",".join(sorted(k.value for k in notice.changes))
        print(f"#{notice.revision} {session.controller.state.value:<9} [{kinds}]")
        if last is not None and "message" in kinds:
            print(f"    {last.role.value}: {last.content}")

    session.controller.subscribe(on_change)

    await session.controller.trigger(EntryPoint.ANALYZE_EMAIL)
    await session.controller.trigger(EntryPoint.OPEN_DRAFT)

    for suggestion in session.controller.suggestions():
        print(f"Suggested: {suggestion.label} (enabled={suggestion.enabled})")

    await session.controller.trigger(EntryPoint.REVISE_TERMS)


def main(argv: Sequence[str] | None = None) -> int:
    args = _parse_args(argv)

    overrides = {"PROPOSAL_COPILOT_STEP_DELAY_SCALE": args.delay_scale}
    settings = SimulationSettings(**overrides)  # type: ignore[arg-type]
    configure_logging(settings.log_level)

    session = WorkflowSession(settings)
    asyncio.run(_drive(session))

    terms = session.proposal.read()
    print(f"Final total: ${terms.total:,.2f} at {terms.discount_percent:g}% discount")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
