"""
Project context models for Mantissa Tenet.

The project context describes how the scanned project is licensed,
linked, and shipped. It is immutable for the duration of a scan.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any


class _ValueEnum(Enum):
    """Enum base that parses its own values case-insensitively."""

    @classmethod
    def from_string(cls, value: Any):
        if isinstance(value, cls):
            return value
        value_norm = str(value).lower().strip().replace("_", "-")
        for member in cls:
            if member.value == value_norm:
                return member
        raise ValueError(f"Invalid {cls.__name__}: {value}")


class LinkingModel(_ValueEnum):
    """How dependency code is combined with the consuming project."""

    STATIC = "static"
    DYNAMIC = "dynamic"
    RUNTIME = "runtime"  # process-separated at runtime
    MICROSERVICE = "microservice"


class DistributionModel(_ValueEnum):
    """How the consuming project reaches its end users."""

    PROPRIETARY = "proprietary"
    SAAS = "saas"
    CLI = "cli"
    LIBRARY = "library"
    OPEN_SOURCE = "open-source"
    INTERNAL_ONLY = "internal-only"


class ProjectIntent(_ValueEnum):
    """Licensing intent declared by the project owner."""

    OPEN_SOURCE = "open-source"
    PROPRIETARY = "proprietary"
    UNDECIDED = "undecided"


@dataclass(frozen=True)
class ProjectContext:
    """
    Multi-dimensional project context used for dynamic severity grading.

    Attributes:
        intent: Declared licensing intent
        distribution_model: How the project is shipped
        linking_model: How dependencies are linked
        project_license: Declared project license, if any
        future_flexibility: Owner wants to keep relicensing options open
        detected_from: Where the context came from (config, auto-detect, ...)
    """

    intent: ProjectIntent = ProjectIntent.UNDECIDED
    distribution_model: DistributionModel = DistributionModel.PROPRIETARY
    linking_model: LinkingModel = LinkingModel.STATIC
    project_license: str | None = None
    future_flexibility: bool = False
    detected_from: str = "config"

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "intent": self.intent.value,
            "distribution_model": self.distribution_model.value,
            "linking_model": self.linking_model.value,
            "project_license": self.project_license,
            "future_flexibility": self.future_flexibility,
            "detected_from": self.detected_from,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ProjectContext:
        """Create from dictionary."""
        return cls(
            intent=ProjectIntent.from_string(data.get("intent", "undecided")),
            distribution_model=DistributionModel.from_string(
                data.get("distribution_model", "proprietary")
            ),
            linking_model=LinkingModel.from_string(data.get("linking_model", "static")),
            project_license=data.get("project_license"),
            future_flexibility=data.get("future_flexibility", False),
            detected_from=data.get("detected_from", "config"),
        )
