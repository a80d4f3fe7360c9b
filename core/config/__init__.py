"""
Runtime Configuration Module

Provides configuration loading and management for the engine and registry.
"""

from .runtime import (
    DEFAULT_PLATFORM_FEE_WEI,
    LoggingConfig,
    RegistryConfig,
    RuntimeConfig,
    get_default_config,
    set_default_config,
)

__all__ = [
    "DEFAULT_PLATFORM_FEE_WEI",
    "LoggingConfig",
    "RegistryConfig",
    "RuntimeConfig",
    "get_default_config",
    "set_default_config",
]
