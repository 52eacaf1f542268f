# Requires Python 3.12+
"""Configuration for fixed-rate amortization."""

from __future__ import annotations

import os
from dataclasses import dataclass

from fixed_rate_amortization.errors import InvalidParameterError

__version__ = "0.1.0"

_TRUE_VALUES = frozenset({"1", "true", "yes", "on"})
_FALSE_VALUES = frozenset({"0", "false", "no", "off", ""})
_LOG_FORMATS = frozenset({"standard", "json"})


@dataclass(frozen=True)
class AmortizationConfig:
    """
    Process-wide defaults.

    strict_payoff: Raise IncompleteAmortizationError when a calendar runs out
        before the loan is paid off (default: return a short ledger and warn)
    log_level: Level applied by fixed_rate_amortization.logging.setup_logging
    log_format: "standard" or "json"
    """

    strict_payoff: bool = False
    log_level: str = "WARNING"
    log_format: str = "standard"

    def __post_init__(self) -> None:
        if self.log_format not in _LOG_FORMATS:
            raise InvalidParameterError(
                f"log_format must be one of {sorted(_LOG_FORMATS)}, got {self.log_format!r}"
            )

    @classmethod
    def from_env(cls) -> AmortizationConfig:
        """Create config from AMORTIZATION_* environment variables."""
        return cls(
            strict_payoff=_env_flag("AMORTIZATION_STRICT_PAYOFF", False),
            log_level=os.getenv("AMORTIZATION_LOG_LEVEL", "WARNING").upper(),
            log_format=os.getenv("AMORTIZATION_LOG_FORMAT", "standard").lower(),
        )


def _env_flag(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    value = raw.strip().lower()
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    raise InvalidParameterError(f"{name} must be a boolean flag, got {raw!r}")


_config: AmortizationConfig | None = None


def get_config() -> AmortizationConfig:
    """Process default config, read from the environment on first use."""
    global _config
    if _config is None:
        _config = AmortizationConfig.from_env()
    return _config


def set_config(config: AmortizationConfig | None) -> None:
    """Replace the process default config; None re-reads the environment on next use."""
    global _config
    _config = config
