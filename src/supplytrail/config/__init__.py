"""Application configuration helpers."""

from __future__ import annotations

from .env import optional_env_var, require_env_var, require_env_vars
from .errors import ConfigurationError, MissingConfigurationError
from .http_resilience import RateLimit, ResilienceConfig, RetryPolicy
from .ledger import LedgerConfig, build_ledger_config, get_ledger_config
from .logging import configure_logging

__all__ = [
    "ConfigurationError",
    "LedgerConfig",
    "MissingConfigurationError",
    "RateLimit",
    "ResilienceConfig",
    "RetryPolicy",
    "build_ledger_config",
    "configure_logging",
    "get_ledger_config",
    "optional_env_var",
    "require_env_var",
    "require_env_vars",
]
