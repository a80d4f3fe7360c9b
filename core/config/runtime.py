"""
Runtime Configuration

Central configuration for the tree registry and logging.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Any, Optional
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()


# 0.001 ether
DEFAULT_PLATFORM_FEE_WEI = 10**15

ENV_PREFIX = "PROOFX_"


def _env_bool(value: str) -> bool:
    return value.strip().lower() in ("1", "true", "yes", "on")


@dataclass
class RegistryConfig:
    """Configuration for the tree registry."""
    platform_fee: int = DEFAULT_PLATFORM_FEE_WEI
    treasury_address: Optional[str] = None
    owner_address: Optional[str] = None
    # When False, only the previous creator may re-register a removed root
    allow_reregistration_by_other: bool = True
    store_path: Optional[str] = None


@dataclass
class LoggingConfig:
    """Configuration for logging."""
    level: str = "INFO"
    file: Optional[str] = None


@dataclass
class RuntimeConfig:
    """
    Complete runtime configuration.

    Can be loaded from:
    - Environment variables (PROOFX_* prefix, .env supported)
    - YAML file
    - Programmatic construction
    """
    registry: RegistryConfig = field(default_factory=RegistryConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    extra: dict[str, Any] = field(default_factory=dict)

    @staticmethod
    def _get_env_overrides() -> dict[str, Any]:
        """
        Get configuration overrides from environment variables.

        Supported variables:
        - PROOFX_PLATFORM_FEE: Platform fee in wei
        - PROOFX_TREASURY_ADDRESS: Address receiving registration fees
        - PROOFX_OWNER_ADDRESS: Address allowed to change the platform fee
        - PROOFX_ALLOW_REREGISTRATION: Let other callers re-register removed roots
        - PROOFX_STORE_PATH: JSON file backing the registry
        - PROOFX_LOG_LEVEL: Log level
        - PROOFX_LOG_FILE: Log file path
        """
        overrides: dict[str, Any] = {}

        if os.getenv(f"{ENV_PREFIX}PLATFORM_FEE"):
            overrides.setdefault("registry", {})["platform_fee"] = int(
                os.getenv(f"{ENV_PREFIX}PLATFORM_FEE", "0")
            )
        if os.getenv(f"{ENV_PREFIX}TREASURY_ADDRESS"):
            overrides.setdefault("registry", {})["treasury_address"] = os.getenv(
                f"{ENV_PREFIX}TREASURY_ADDRESS"
            )
        if os.getenv(f"{ENV_PREFIX}OWNER_ADDRESS"):
            overrides.setdefault("registry", {})["owner_address"] = os.getenv(
                f"{ENV_PREFIX}OWNER_ADDRESS"
            )
        if os.getenv(f"{ENV_PREFIX}ALLOW_REREGISTRATION"):
            overrides.setdefault("registry", {})["allow_reregistration_by_other"] = _env_bool(
                os.getenv(f"{ENV_PREFIX}ALLOW_REREGISTRATION", "true")
            )
        if os.getenv(f"{ENV_PREFIX}STORE_PATH"):
            overrides.setdefault("registry", {})["store_path"] = os.getenv(
                f"{ENV_PREFIX}STORE_PATH"
            )

        if os.getenv(f"{ENV_PREFIX}LOG_LEVEL"):
            overrides.setdefault("logging", {})["level"] = os.getenv(f"{ENV_PREFIX}LOG_LEVEL")
        if os.getenv(f"{ENV_PREFIX}LOG_FILE"):
            overrides.setdefault("logging", {})["file"] = os.getenv(f"{ENV_PREFIX}LOG_FILE")

        return overrides

    @classmethod
    def from_env(cls) -> "RuntimeConfig":
        """Load configuration from defaults plus environment variables."""
        return cls.from_dict(cls._get_env_overrides())

    @classmethod
    def from_yaml(cls, path: str | Path) -> "RuntimeConfig":
        """Load configuration from a YAML file."""
        import yaml
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")

        with open(path) as f:
            data = yaml.safe_load(f) or {}

        return cls.from_dict(data)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "RuntimeConfig":
        """Load configuration from a dictionary (supports partial data)."""
        registry_data = data.get("registry", {}) or {}
        logging_data = data.get("logging", {}) or {}

        registry = RegistryConfig(**registry_data) if registry_data else RegistryConfig()
        log = LoggingConfig(**logging_data) if logging_data else LoggingConfig()

        return cls(
            registry=registry,
            logging=log,
            extra=data.get("extra", {}),
        )

    def with_env_overrides(self) -> "RuntimeConfig":
        """
        Return a new config with environment variable overrides applied.

        This allows loading from a config file first, then overlaying env vars.
        """
        overrides = self._get_env_overrides()
        if not overrides:
            return self

        import copy
        new_config = copy.deepcopy(self)

        for key, value in overrides.get("registry", {}).items():
            setattr(new_config.registry, key, value)

        for key, value in overrides.get("logging", {}).items():
            setattr(new_config.logging, key, value)

        return new_config

    def to_dict(self) -> dict[str, Any]:
        """Convert configuration to a dictionary."""
        return {
            "registry": {
                "platform_fee": self.registry.platform_fee,
                "treasury_address": self.registry.treasury_address,
                "owner_address": self.registry.owner_address,
                "allow_reregistration_by_other": self.registry.allow_reregistration_by_other,
                "store_path": self.registry.store_path,
            },
            "logging": {
                "level": self.logging.level,
                "file": self.logging.file,
            },
            "extra": self.extra,
        }


# Global default configuration
_default_config: Optional[RuntimeConfig] = None


def get_default_config() -> RuntimeConfig:
    """Get the default runtime configuration."""
    global _default_config
    if _default_config is None:
        _default_config = RuntimeConfig.from_env()
    return _default_config


def set_default_config(config: RuntimeConfig) -> None:
    """Set the default runtime configuration."""
    global _default_config
    _default_config = config
