"""
Engine configuration.

Design constants can be overridden through environment variables so a
deployment can tune them without code changes. The configuration is built
lazily and shared by every caller that does not pass its own instance.

Example:
    >>> config = get_config()
    >>> config.luteal_length
    14
"""
import os
from typing import Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic import ValidationError as PydanticValidationError

from cyclecast.services.constants import (
    CLUSTER_GAP_DAYS,
    DEFAULT_CYCLE_LENGTH,
    DEFAULT_PERIOD_LENGTH,
    FERTILE_DAYS_AFTER_OVULATION,
    FERTILE_DAYS_BEFORE_OVULATION,
    LUTEAL_PHASE_LENGTH,
    MAX_CYCLE_GAPS,
    PREDICTION_HORIZON_CYCLES,
)
from cyclecast.services.exceptions import ValidationError
from cyclecast.utils.logging import log_rejected_input, logger

ENV_PREFIX = "CYCLECAST_"

# Environment variable suffix -> EngineConfig field
ENV_FIELDS: Dict[str, str] = {
    "LUTEAL_LENGTH": "luteal_length",
    "CLUSTER_GAP_DAYS": "cluster_gap_days",
    "MAX_CYCLE_GAPS": "max_cycle_gaps",
    "HORIZON_CYCLES": "horizon_cycles",
    "DEFAULT_CYCLE_LENGTH": "default_cycle_length",
    "DEFAULT_PERIOD_LENGTH": "default_period_length",
    "FERTILE_DAYS_BEFORE": "fertile_days_before_ovulation",
    "FERTILE_DAYS_AFTER": "fertile_days_after_ovulation",
}


class EngineConfig(BaseModel):
    """
    Tunable constants for clustering, estimation and prediction.
    """
    model_config = ConfigDict(frozen=True)

    luteal_length: int = Field(LUTEAL_PHASE_LENGTH, ge=1)
    cluster_gap_days: int = Field(CLUSTER_GAP_DAYS, ge=0)
    max_cycle_gaps: int = Field(MAX_CYCLE_GAPS, ge=1)
    horizon_cycles: int = Field(PREDICTION_HORIZON_CYCLES, ge=0)
    default_cycle_length: int = Field(DEFAULT_CYCLE_LENGTH, ge=2)
    default_period_length: int = Field(DEFAULT_PERIOD_LENGTH, ge=1)
    fertile_days_before_ovulation: int = Field(FERTILE_DAYS_BEFORE_OVULATION, ge=0)
    fertile_days_after_ovulation: int = Field(FERTILE_DAYS_AFTER_OVULATION, ge=0)

    @model_validator(mode="after")
    def _check_default_lengths(self) -> "EngineConfig":
        if self.default_cycle_length < self.default_period_length + 1:
            raise ValueError("default_cycle_length must exceed default_period_length")
        return self


def load_config(environ: Optional[Dict[str, str]] = None) -> EngineConfig:
    """
    Build an EngineConfig from environment variables.

    Args:
        environ: Mapping to read from, defaults to os.environ

    Returns:
        EngineConfig with overrides applied

    Raises:
        ValidationError: If a variable is set to an invalid value
    """
    environ = os.environ if environ is None else environ
    overrides = {
        field: environ[ENV_PREFIX + suffix]
        for suffix, field in ENV_FIELDS.items()
        if environ.get(ENV_PREFIX + suffix)
    }
    try:
        return EngineConfig(**overrides)
    except PydanticValidationError as e:
        log_rejected_input(logger, "Rejected engine configuration", e, extra={"overrides": overrides})
        raise ValidationError(f"Invalid engine configuration: {e}") from e


_config = None

def get_config() -> EngineConfig:
    """Get or create the shared engine configuration."""
    global _config
    if _config is None:
        _config = load_config()
    return _config

def reset_config() -> None:
    """Drop the shared configuration so the next call re-reads the environment."""
    global _config
    _config = None
