"""Console entrypoint shim.

The CLI is implemented in `proposal_copilot.engine.main`.
"""

from __future__ import annotations

from proposal_copilot.engine.main import main

__all__ = ["main"]


if __name__ == "__main__":
    raise SystemExit(main())
