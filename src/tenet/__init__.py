"""
Mantissa Tenet - License Compatibility and Risk Analysis

Answers one question about a dependency tree:
"Which licenses here conflict with how we ship, and what do we do about it?"

Key Features:
- Rule matrix keyed by license pair, linking model and distribution model
- Deterministic fallback: wildcard rules, strict mode, category heuristics
- Contamination paths from the project root to each conflicting package
- Severity regraded against project intent (open source, proprietary, undecided)
- Causal risk attribution and risk hotspot ranking
- Effort-ranked fix suggestions naming curated replacement packages

Quick Start:
    >>> from tenet import DependencyNode, create_default_config, run_scan
    >>>
    >>> tree = DependencyNode.from_dict({
    ...     "name": "my-app", "license": "MIT",
    ...     "children": [{"name": "readline", "license": "GPL-3.0"}],
    ... })
    >>> result = run_scan(tree, create_default_config())
    >>> print(f"Risk score {result.risk_score}, {len(result.conflicts)} conflicts")
"""

from __future__ import annotations

__version__ = "0.1.0"
__author__ = "Mantissa"

# Core models
from tenet.models import (
    CausalImpact,
    CompatibilityResult,
    CompatibilityRule,
    Conflict,
    ConflictPath,
    DependencyNode,
    DistributionModel,
    DynamicSeverity,
    EnhancedConflict,
    FixSuggestion,
    HotspotsResult,
    IntentScanResult,
    LicenseCategory,
    LinkingModel,
    ProjectContext,
    ProjectIntent,
    RiskLevel,
    ScanResult,
    Severity,
)

# License catalog
from tenet.licenses import AlternativesCatalog, LicenseCatalog, default_catalog

# Configuration
from tenet.config import (
    ConfigurationError,
    ScanConfiguration,
    create_default_config,
    load_config_from_env,
)

# Engine
from tenet.engine import (
    CausalImpactEngine,
    CompatibilityMatrix,
    ConflictDetector,
    DynamicRiskEngine,
    FixEngine,
    HotspotAnalyzer,
    PathResolver,
    ScanOrchestrator,
    analyze_hotspots,
    analyze_impact,
    calculate_severity,
    detect_conflicts,
    generate_fixes,
    run_scan,
)

# Observability
from tenet.observability import configure_logging, get_logger

__all__ = [
    # Version
    "__version__",
    # Models
    "CausalImpact",
    "CompatibilityResult",
    "CompatibilityRule",
    "Conflict",
    "ConflictPath",
    "DependencyNode",
    "DistributionModel",
    "DynamicSeverity",
    "EnhancedConflict",
    "FixSuggestion",
    "HotspotsResult",
    "IntentScanResult",
    "LicenseCategory",
    "LinkingModel",
    "ProjectContext",
    "ProjectIntent",
    "RiskLevel",
    "ScanResult",
    "Severity",
    # Licenses
    "AlternativesCatalog",
    "LicenseCatalog",
    "default_catalog",
    # Config
    "ConfigurationError",
    "ScanConfiguration",
    "create_default_config",
    "load_config_from_env",
    # Engine
    "CausalImpactEngine",
    "CompatibilityMatrix",
    "ConflictDetector",
    "DynamicRiskEngine",
    "FixEngine",
    "HotspotAnalyzer",
    "PathResolver",
    "ScanOrchestrator",
    "analyze_hotspots",
    "analyze_impact",
    "calculate_severity",
    "detect_conflicts",
    "generate_fixes",
    "run_scan",
    # Observability
    "configure_logging",
    "get_logger",
]
