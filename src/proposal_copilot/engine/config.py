"""Configuration for the proposal copilot simulation.

Configuration is loaded from:
- environment variables
- and a local `.env` file (if present)

All values have defaults, so the simulation runs with no configuration at all.
"""

from __future__ import annotations

import logging

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class SimulationSettings(BaseSettings):
    """Settings for a simulated proposal session.

    Environment variables:
    - LOG_LEVEL                          (optional)
    - PROPOSAL_COPILOT_STEP_DELAY_SCALE  (optional)
    - PROPOSAL_COPILOT_INITIAL_DISCOUNT  (optional)
    - PROPOSAL_COPILOT_REVISED_DISCOUNT  (optional)
    - PROPOSAL_COPILOT_UNIT_PRICE        (optional)
    - PROPOSAL_COPILOT_SEAT_COUNT        (optional)

    Notes:
        Pydantic-settings supports overriding the env file in tests via:
        `SimulationSettings(_env_file=path_to_env)`.
    """

    log_level: str = Field(
        default="INFO",
        validation_alias="LOG_LEVEL",
        description="Root logging level",
    )

    step_delay_scale: float = Field(
        default=1.0,
        ge=0.0,
        validation_alias="PROPOSAL_COPILOT_STEP_DELAY_SCALE",
        description="Multiplier applied to every scripted delay. 0 runs scripts without waiting.",
    )

    initial_discount_percent: float = Field(
        default=15.0,
        ge=0.0,
        le=100.0,
        validation_alias="PROPOSAL_COPILOT_INITIAL_DISCOUNT",
        description="Volume discount the first draft is priced with",
    )
    revised_discount_percent: float = Field(
        default=10.0,
        ge=0.0,
        le=100.0,
        validation_alias="PROPOSAL_COPILOT_REVISED_DISCOUNT",
        description="Discount the auto-approve suggestion revises the proposal to",
    )

    unit_price: float = Field(
        default=30.0,
        gt=0.0,
        validation_alias="PROPOSAL_COPILOT_UNIT_PRICE",
        description="Monthly price per seat",
    )
    seat_count: int = Field(
        default=500,
        gt=0,
        validation_alias="PROPOSAL_COPILOT_SEAT_COUNT",
        description="Number of seats quoted",
    )

    model_config = SettingsConfigDict(
        env_prefix="",
        env_file=".env",
        extra="ignore",
    )

    @field_validator("log_level")
    @classmethod
    def _known_log_level(cls, value: str) -> str:
        level = value.strip().upper()
        if level not in logging.getLevelNamesMapping():
            raise ValueError(f"Unknown log level '{value}'")
        return level

    @model_validator(mode="after")
    def _revision_lowers_discount(self) -> SimulationSettings:
        if self.revised_discount_percent >= self.initial_discount_percent:
            raise ValueError(
                "PROPOSAL_COPILOT_REVISED_DISCOUNT must be lower than "
                "PROPOSAL_COPILOT_INITIAL_DISCOUNT"
            )
        return self
