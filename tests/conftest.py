"""
Pytest configuration and fixtures for Mantissa Tenet tests.

This module provides common fixtures used across unit and integration tests.
"""

from __future__ import annotations

import logging
from typing import Any, Callable

import pytest

from tenet.config import PolicyConfig, ProjectConfig, ScanConfiguration
from tenet.licenses import LicenseCatalog
from tenet.models import (
    Conflict,
    ConflictDependency,
    ContaminationStep,
    DependencyNode,
    DistributionModel,
    LinkingModel,
    ProjectContext,
    ProjectIntent,
    Severity,
)


# Configuration fixtures


@pytest.fixture
def mit_config() -> ScanConfiguration:
    """MIT project shipped as a statically linked proprietary product."""
    return ScanConfiguration(
        name="test",
        project=ProjectConfig(
            license="MIT",
            intent=ProjectIntent.PROPRIETARY,
            distribution_model=DistributionModel.PROPRIETARY,
            linking_model=LinkingModel.STATIC,
        ),
        policy=PolicyConfig(),
    )


@pytest.fixture
def make_config() -> Callable[..., ScanConfiguration]:
    """Factory for configurations with overridden project or policy fields."""

    def _make(
        license: str = "MIT",
        intent: ProjectIntent = ProjectIntent.PROPRIETARY,
        distribution: DistributionModel = DistributionModel.PROPRIETARY,
        linking: LinkingModel = LinkingModel.STATIC,
        deterministic: bool = False,
        **policy: Any,
    ) -> ScanConfiguration:
        return ScanConfiguration(
            name="test",
            project=ProjectConfig(
                license=license,
                intent=intent,
                distribution_model=distribution,
                linking_model=linking,
            ),
            policy=PolicyConfig(**policy),
            deterministic=deterministic,
        )

    return _make


# Context fixtures


@pytest.fixture
def proprietary_context() -> ProjectContext:
    return ProjectContext(
        intent=ProjectIntent.PROPRIETARY,
        distribution_model=DistributionModel.PROPRIETARY,
        linking_model=LinkingModel.STATIC,
        project_license="MIT",
    )


@pytest.fixture
def open_source_context() -> ProjectContext:
    return ProjectContext(
        intent=ProjectIntent.OPEN_SOURCE,
        distribution_model=DistributionModel.OPEN_SOURCE,
        linking_model=LinkingModel.STATIC,
        project_license="GPL-3.0",
    )


@pytest.fixture
def undecided_context() -> ProjectContext:
    return ProjectContext(
        intent=ProjectIntent.UNDECIDED,
        distribution_model=DistributionModel.CLI,
        linking_model=LinkingModel.RUNTIME,
        future_flexibility=True,
    )


# Dependency tree fixtures


@pytest.fixture
def simple_tree() -> DependencyNode:
    """Project with one permissive and one GPL-3.0 direct dependency."""
    return DependencyNode.from_dict({
        "name": "app",
        "version": "1.0.0",
        "license": "MIT",
        "children": [
            {"name": "express", "version": "4.18.2", "license": "MIT"},
            {"name": "readline", "version": "8.2.0", "license": "GPL-3.0"},
        ],
    })


@pytest.fixture
def nested_tree() -> DependencyNode:
    """Project with a transitive GPL dependency and a dev-only one."""
    return DependencyNode.from_dict({
        "name": "app",
        "version": "1.0.0",
        "license": "MIT",
        "children": [
            {
                "name": "web-framework",
                "version": "2.1.0",
                "license": "MIT",
                "children": [
                    {"name": "gpl-util", "version": "0.3.1", "license": "GPL-3.0"},
                    {"name": "tiny-helper", "version": "1.0.0", "license": "ISC"},
                ],
            },
            {"name": "lodash", "version": "4.17.21", "license": "MIT"},
            {"name": "test-runner", "version": "29.0.0", "license": "GPL-3.0", "dev": True},
        ],
    })


@pytest.fixture
def clean_tree() -> DependencyNode:
    """Project whose dependencies are all permissive."""
    return DependencyNode.from_dict({
        "name": "app",
        "license": "MIT",
        "children": [
            {"name": "express", "license": "MIT"},
            {"name": "axios", "license": "MIT"},
            {"name": "typescript", "license": "Apache-2.0"},
        ],
    })


@pytest.fixture
def cyclic_tree() -> DependencyNode:
    """Malformed tree where a node is its own descendant."""
    a = DependencyNode(name="a", version="1.0.0", license="MIT", depth=1, path=["app", "a"])
    b = DependencyNode(name="b", version="1.0.0", license="GPL-3.0", depth=2, path=["app", "a", "b"])
    a.children.append(b)
    b.children.append(a)
    return DependencyNode(name="app", version="1.0.0", license="MIT", path=["app"], children=[a])


# Conflict fixtures


@pytest.fixture
def make_conflict() -> Callable[..., Conflict]:
    """Factory for conflicts along a named path."""

    def _make(
        path: list[str],
        severity: Severity = Severity.CRITICAL,
        license: str = "GPL-3.0",
    ) -> Conflict:
        steps = [ContaminationStep(name=path[0], license="MIT")]
        steps += [ContaminationStep(name=name, license="MIT") for name in path[1:-1]]
        steps.append(ContaminationStep(name=path[-1], license=license, is_conflict=True))
        return Conflict(
            id=f"conflict-{'-'.join(path)}",
            severity=severity,
            dependency=ConflictDependency(
                name=path[-1], version="1.0.0", license=license, path=list(path)
            ),
            reason="test conflict",
            contamination_path=steps,
        )

    return _make


# Shared components


@pytest.fixture
def catalog() -> LicenseCatalog:
    return LicenseCatalog()


@pytest.fixture
def restore_tenet_logger():
    """Restore the "tenet" logger after tests that configure logging."""
    logger = logging.getLogger("tenet")
    handlers = list(logger.handlers)
    level = logger.level
    yield logger
    logger.handlers[:] = handlers
    logger.setLevel(level)
