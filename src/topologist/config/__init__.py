"""Application configuration helpers."""

from __future__ import annotations

from .builder import (
    ALLOW_DELETE_OPTION,
    BROKERS_OPTION,
    CLIENT_CONFIG_OPTION,
    DRY_RUN_OPTION,
    QUIET_OPTION,
    BuilderConfig,
    StateBackendKind,
)
from .errors import ConfigurationError, MissingConfigurationError
from .http_resilience import ResilienceConfig, RetryPolicy
from .logging import configure_logging
from .properties import load_properties, parse_properties
from .storage import StorageConfig, get_storage_config

__all__ = [
    "ALLOW_DELETE_OPTION",
    "BROKERS_OPTION",
    "CLIENT_CONFIG_OPTION",
    "DRY_RUN_OPTION",
    "QUIET_OPTION",
    "BuilderConfig",
    "ConfigurationError",
    "MissingConfigurationError",
    "ResilienceConfig",
    "RetryPolicy",
    "StateBackendKind",
    "StorageConfig",
    "configure_logging",
    "get_storage_config",
    "load_properties",
    "parse_properties",
]
