"""CLI entrypoint for the proposal copilot simulation.

Runs the scripted session in-process and prints the resulting transcript.
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys

from pydantic import ValidationError

from proposal_copilot import __version__
from proposal_copilot.engine.config import SimulationSettings
from proposal_copilot.engine.logging import configure_logging
from proposal_copilot.engine.workflow.controller import InvalidTransition
from proposal_copilot.engine.workflow.events import EntryPoint
from proposal_copilot.engine.workflow.messages import ActionCard, Message, ReasoningTrace
from proposal_copilot.engine.workflow.proposal import ProposalTerms
from proposal_copilot.engine.workflow.session import WorkflowSession

logger = logging.getLogger(__name__)

# Operator actions in the order a full session performs them.
SCRIPT_ORDER: dict[str, EntryPoint] = {
    "analyze": EntryPoint.ANALYZE_EMAIL,
    "open-draft": EntryPoint.OPEN_DRAFT,
    "revise-terms": EntryPoint.REVISE_TERMS,
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="proposal-copilot",
        description="Scripted sales proposal copilot simulation",
    )
    parser.add_argument("--version", action="version", version=f"proposal-copilot {__version__}")

    subparsers = parser.add_subparsers(dest="command", required=True)

    for name, help_text in (
        ("run", "Run the session and print the transcript"),
        ("suggestions", "Run the session and print the quick actions offered afterwards"),
    ):
        sub = subparsers.add_parser(name, help=help_text)
        sub.add_argument(
            "--through",
            choices=list(SCRIPT_ORDER),
            default="revise-terms",
            help="Last operator action to perform (default: revise-terms)",
        )
        sub.add_argument(
            "--delay-scale",
            type=float,
            default=None,
            help="Override PROPOSAL_COPILOT_STEP_DELAY_SCALE (0 runs without waiting)",
        )

    return parser


def entry_points_through(name: str) -> list[EntryPoint]:
    order = list(SCRIPT_ORDER)
    return [SCRIPT_ORDER[n] for n in order[: order.index(name) + 1]]


async def run_session(session: WorkflowSession, entry_points: list[EntryPoint]) -> None:
    for entry_point in entry_points:
        await session.controller.trigger(entry_point)


def format_message(message: Message) -> list[str]:
    lines = [f"[{message.id}] {message.role.value}: {message.content}"]
    if isinstance(message.metadata, ReasoningTrace):
        lines.extend(f"      - {step}" for step in message.metadata.steps)
    elif isinstance(message.metadata, ActionCard):
        card = message.metadata
        lines.append(f"      * {card.title}: {card.description} [{card.action_label}]")
    return lines


def format_terms(terms: ProposalTerms) -> str:
    return (
        f"{terms.seat_count} seats x ${terms.unit_price:,.2f} = ${terms.list_price:,.2f}; "
        f"discount {terms.discount_percent:g}% (-${terms.discount_amount:,.2f}); "
        f"total ${terms.total:,.2f}"
    )


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    overrides: dict[str, object] = {}
    if args.delay_scale is not None:
        overrides["PROPOSAL_COPILOT_STEP_DELAY_SCALE"] = args.delay_scale

    try:
        settings = SimulationSettings(**overrides)  # type: ignore[arg-type]
    except ValidationError as e:
        # Logging isn't configured yet; keep it simple and actionable.
        print("Configuration error (check your .env):", file=sys.stderr)
        print(e, file=sys.stderr)
        return 2

    configure_logging(settings.log_level)

    session = WorkflowSession(settings)
    try:
        asyncio.run(run_session(session, entry_points_through(args.through)))

        if args.command == "run":
            for message in session.log.snapshot():
                for line in format_message(message):
                    print(line)
            print()
            print(f"Proposal: {format_terms(session.proposal.read())}")
            print(f"State: {session.controller.state.value}")
            return 0

        if args.command == "suggestions":
            offered = session.controller.suggestions()
            if not offered:
                print(f"No suggestions in state '{session.controller.state.value}'")
                return 0
            for suggestion in offered:
                marker = "*" if suggestion.enabled else "-"
                print(f"{marker} {suggestion.label}")
            return 0

        logger.error("Unknown command", extra={"command": args.command})
        return 2

    except InvalidTransition as e:
        logger.warning(str(e), extra={"entry_point": e.entry_point.value, "state": e.state.value})
        print(str(e), file=sys.stderr)
        return 3

    except Exception:
        logger.exception("Command failed")
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
