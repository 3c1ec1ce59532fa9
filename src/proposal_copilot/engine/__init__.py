"""In-process simulation engine.

Provides:
- Settings loaded from .env
- Structured logging
- The scripted workflow engine (`proposal_copilot.engine.workflow`)
- A small CLI surface
"""
