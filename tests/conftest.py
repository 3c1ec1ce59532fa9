"""Test configuration and fixtures."""

from pathlib import Path

import pytest

from proposal_copilot.engine.config import SimulationSettings
from proposal_copilot.engine.workflow.session import WorkflowSession

_SETTINGS_ENV = (
    "LOG_LEVEL",
    "PROPOSAL_COPILOT_STEP_DELAY_SCALE",
    "PROPOSAL_COPILOT_INITIAL_DISCOUNT",
    "PROPOSAL_COPILOT_REVISED_DISCOUNT",
    "PROPOSAL_COPILOT_UNIT_PRICE",
    "PROPOSAL_COPILOT_SEAT_COUNT",
    "PROPOSAL_COPILOT_CORS_ORIGINS",
)


@pytest.fixture
def clean_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Run from an empty directory with no simulation variables set."""
    for name in _SETTINGS_ENV:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)
    return tmp_path


@pytest.fixture
def settings(clean_env: Path) -> SimulationSettings:
    """Default deal terms with scripted delays disabled."""
    return SimulationSettings(PROPOSAL_COPILOT_STEP_DELAY_SCALE=0)  # type: ignore[call-arg]


@pytest.fixture
def session(settings: SimulationSettings) -> WorkflowSession:
    """Provide a fresh workflow session."""
    return WorkflowSession(settings)
