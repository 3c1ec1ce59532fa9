"""FastAPI server adapter for proposal-copilot.

This module exposes a REST API over the in-process workflow session.

Design intent:
- Keep workflow logic in `proposal_copilot.engine.*`
- Keep server-specific concerns (routing, CORS, background runs) here
"""

from __future__ import annotations

__all__ = ["create_app"]

from proposal_copilot.server.app import create_app
