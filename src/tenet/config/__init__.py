"""
Configuration management for Mantissa Tenet.

Provides configuration classes and utilities for managing the project
context, license policy and custom compatibility rules of a scan.
"""

from tenet.config.scan_config import (
    DEFAULT_FAIL_ON,
    ConfigurationError,
    PolicyConfig,
    ProjectConfig,
    RuleConfig,
    ScanConfiguration,
    create_default_config,
    load_config_from_env,
)

__all__ = [
    "DEFAULT_FAIL_ON",
    "ConfigurationError",
    "PolicyConfig",
    "ProjectConfig",
    "RuleConfig",
    "ScanConfiguration",
    "create_default_config",
    "load_config_from_env",
]
