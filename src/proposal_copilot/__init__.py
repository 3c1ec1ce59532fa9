"""Proposal Copilot.

A scripted sales-assistant simulation:
- an agent analyses an RFP email and drafts a proposal
- the operator opens the draft and can revise the discount
- every step is timed, logged to a conversation and applied to the proposal
"""

__version__ = "0.1.0"

from proposal_copilot.engine.config import SimulationSettings

__all__ = ["__version__", "SimulationSettings"]
