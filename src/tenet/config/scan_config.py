"""
Scan configuration for Mantissa Tenet.

Provides configuration management for scan parameters including the
project context, policy gates, custom compatibility rules and
deterministic output.
"""

from __future__ import annotations

import json
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from tenet.models.context import (
    DistributionModel,
    LinkingModel,
    ProjectContext,
    ProjectIntent,
)
from tenet.models.license import CompatibilityRule, Severity

DEFAULT_FAIL_ON = ["critical", "high"]

_TRUE_VALUES = {"1", "true", "yes", "on"}


class ConfigurationError(Exception):
    """Exception raised when a configuration cannot be loaded or is invalid."""

    def __init__(self, message: str, source_path: str | None = None):
        self.source_path = source_path
        prefix = f"{source_path}: " if source_path else ""
        super().__init__(f"{prefix}{message}")


@dataclass
class ProjectConfig:
    """How the scanned project is licensed, linked and shipped."""

    license: str = "UNLICENSED"
    intent: ProjectIntent = ProjectIntent.UNDECIDED
    distribution_model: DistributionModel = DistributionModel.PROPRIETARY
    linking_model: LinkingModel = LinkingModel.STATIC
    future_flexibility: bool = False

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "license": self.license,
            "intent": self.intent.value,
            "distribution_model": self.distribution_model.value,
            "linking_model": self.linking_model.value,
            "future_flexibility": self.future_flexibility,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ProjectConfig:
        """Create from dictionary."""
        return cls(
            license=data.get("license", "UNLICENSED"),
            intent=ProjectIntent.from_string(data.get("intent", "undecided")),
            distribution_model=DistributionModel.from_string(
                data.get("distribution_model", "proprietary")
            ),
            linking_model=LinkingModel.from_string(data.get("linking_model", "static")),
            future_flexibility=bool(data.get("future_flexibility", False)),
        )


@dataclass
class PolicyConfig:
    """Configuration for license policy evaluation."""

    strict_mode: bool = False  # Only explicit rules, no heuristics
    allowed_licenses: list[str] = field(default_factory=list)
    forbidden_licenses: list[str] = field(default_factory=list)
    ignored_packages: list[str] = field(default_factory=list)  # Glob patterns
    fail_on: list[str] = field(default_factory=lambda: list(DEFAULT_FAIL_ON))

    def fail_on_severities(self) -> list[Severity]:
        """Get the failing severities as enum values."""
        return [Severity.from_string(s) for s in self.fail_on]

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "strict_mode": self.strict_mode,
            "allowed_licenses": self.allowed_licenses,
            "forbidden_licenses": self.forbidden_licenses,
            "ignored_packages": self.ignored_packages,
            "fail_on": self.fail_on,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> PolicyConfig:
        """Create from dictionary."""
        fail_on = [s.lower() for s in data.get("fail_on", DEFAULT_FAIL_ON)]
        for value in fail_on:
            Severity.from_string(value)
        return cls(
            strict_mode=bool(data.get("strict_mode", False)),
            allowed_licenses=data.get("allowed_licenses", []),
            forbidden_licenses=data.get("forbidden_licenses", []),
            ignored_packages=data.get("ignored_packages", []),
            fail_on=fail_on,
        )


@dataclass
class RuleConfig:
    """Custom compatibility rules consulted before the built-in table."""

    custom_rules: list[CompatibilityRule] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {"custom_rules": [r.to_dict() for r in self.custom_rules]}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> RuleConfig:
        """Create from dictionary."""
        return cls(
            custom_rules=[
                CompatibilityRule.from_dict(r) for r in data.get("custom_rules", [])
            ],
        )


@dataclass
class ScanConfiguration:
    """
    Complete scan configuration.

    This is the main configuration class that contains all settings
    for running Tenet scans.
    """

    name: str = "default"
    description: str = ""
    project: ProjectConfig = field(default_factory=ProjectConfig)
    policy: PolicyConfig = field(default_factory=PolicyConfig)
    rules: RuleConfig = field(default_factory=RuleConfig)
    deterministic: bool = False

    @property
    def project_license(self) -> str:
        return self.project.license

    @property
    def strict_mode(self) -> bool:
        return self.policy.strict_mode

    def project_context(self, detected_from: str = "config") -> ProjectContext:
        """
        Build the immutable project context for a scan.

        Args:
            detected_from: Provenance recorded on the context

        Returns:
            ProjectContext mirroring the project section
        """
        return ProjectContext(
            intent=self.project.intent,
            distribution_model=self.project.distribution_model,
            linking_model=self.project.linking_model,
            project_license=self.project.license or None,
            future_flexibility=self.project.future_flexibility,
            detected_from=detected_from,
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "name": self.name,
            "description": self.description,
            "project": self.project.to_dict(),
            "policy": self.policy.to_dict(),
            "rules": self.rules.to_dict(),
            "deterministic": self.deterministic,
        }

    def to_json(self, indent: int = 2) -> str:
        """Convert to JSON string."""
        return json.dumps(self.to_dict(), indent=indent)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ScanConfiguration:
        """
        Create from dictionary.

        Raises:
            ValueError: If an enum or severity value is invalid
        """
        return cls(
            name=data.get("name", "default"),
            description=data.get("description", ""),
            project=ProjectConfig.from_dict(data.get("project") or {}),
            policy=PolicyConfig.from_dict(data.get("policy") or {}),
            rules=RuleConfig.from_dict(data.get("rules") or {}),
            deterministic=bool(data.get("deterministic", False)),
        )

    @classmethod
    def from_json(cls, json_str: str) -> ScanConfiguration:
        """Create from JSON string."""
        return cls.from_dict(json.loads(json_str))

    @classmethod
    def from_file(cls, path: str) -> ScanConfiguration:
        """
        Load configuration from a JSON or YAML file.

        Raises:
            ConfigurationError: If the file is missing, unparsable or invalid
        """
        path = os.path.expanduser(path)
        try:
            with open(path, "r", encoding="utf-8") as f:
                if path.endswith(".json"):
                    data = json.load(f)
                else:
                    data = yaml.safe_load(f)
        except FileNotFoundError:
            raise ConfigurationError("File not found", path)
        except (OSError, json.JSONDecodeError, yaml.YAMLError) as e:
            raise ConfigurationError(str(e), path)

        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise ConfigurationError("Configuration must be a mapping", path)

        try:
            return cls.from_dict(data)
        except (KeyError, TypeError, ValueError, AttributeError) as e:
            raise ConfigurationError(f"Invalid configuration: {e}", path)

    def save(self, path: str) -> None:
        """Save configuration to a JSON or YAML file."""
        path = os.path.expanduser(path)
        Path(path).parent.mkdir(parents=True, exist_ok=True)

        with open(path, "w", encoding="utf-8") as f:
            if path.endswith(".json"):
                json.dump(self.to_dict(), f, indent=2)
            else:
                yaml.safe_dump(self.to_dict(), f, default_flow_style=False, sort_keys=False)


def _env_flag(name: str) -> bool | None:
    value = os.getenv(name)
    if value is None:
        return None
    return value.strip().lower() in _TRUE_VALUES


def load_config_from_env() -> ScanConfiguration:
    """
    Load configuration from environment variables.

    Environment variables:
        TENET_CONFIG_FILE: Path to configuration file
        TENET_PROJECT_LICENSE: Project license SPDX id
        TENET_INTENT: open-source, proprietary or undecided
        TENET_DISTRIBUTION: Distribution model
        TENET_LINKING: Linking model
        TENET_STRICT: Enable strict mode (1/true/yes)
        TENET_DETERMINISTIC: Fixed scan id and timestamp (1/true/yes)

    Returns:
        ScanConfiguration instance

    Raises:
        ConfigurationError: If a variable holds an invalid value
    """
    # Check for config file
    config_file = os.getenv("TENET_CONFIG_FILE")
    if config_file and os.path.exists(os.path.expanduser(config_file)):
        config = ScanConfiguration.from_file(config_file)
    else:
        config = ScanConfiguration()

    try:
        license_id = os.getenv("TENET_PROJECT_LICENSE")
        if license_id:
            config.project.license = license_id.strip()

        intent = os.getenv("TENET_INTENT")
        if intent:
            config.project.intent = ProjectIntent.from_string(intent)

        distribution = os.getenv("TENET_DISTRIBUTION")
        if distribution:
            config.project.distribution_model = DistributionModel.from_string(distribution)

        linking = os.getenv("TENET_LINKING")
        if linking:
            config.project.linking_model = LinkingModel.from_string(linking)
    except ValueError as e:
        raise ConfigurationError(str(e))

    strict = _env_flag("TENET_STRICT")
    if strict is not None:
        config.policy.strict_mode = strict

    deterministic = _env_flag("TENET_DETERMINISTIC")
    if deterministic is not None:
        config.deterministic = deterministic

    return config


def create_default_config() -> ScanConfiguration:
    """
    Create a default scan configuration.

    Returns:
        ScanConfiguration with sensible defaults
    """
    return ScanConfiguration(
        name="default",
        description="Default Mantissa Tenet configuration",
        project=ProjectConfig(
            license="MIT",
            intent=ProjectIntent.PROPRIETARY,
            distribution_model=DistributionModel.PROPRIETARY,
            linking_model=LinkingModel.STATIC,
        ),
        policy=PolicyConfig(
            strict_mode=False,
            fail_on=list(DEFAULT_FAIL_ON),
        ),
    )
