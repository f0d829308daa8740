"""
Curated replacement packages for Mantissa Tenet.

Each entry names a permissively licensed package that can stand in for
a dependency under a restrictive license, with similarity, confidence
and adoption signals used to rank candidates. The table is offline and
read-only; lookups are deterministic.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import Any

from tenet.licenses.catalog import LicenseCatalog, default_catalog

logger = logging.getLogger(__name__)

# Maturity weight of an alternative
QUALITY_WEIGHTS: dict[str, float] = {
    "production": 1.0,
    "stable": 0.8,
    "experimental": 0.5,
}

SIMILARITY_WEIGHT = 0.35
CONFIDENCE_WEIGHT = 0.30
ADOPTION_WEIGHT = 0.20
QUALITY_WEIGHT = 0.15


def _clamp(value: float) -> float:
    return max(0.0, min(1.0, value))


@dataclass(frozen=True)
class PackageAlternative:
    """
    A permissively licensed replacement for packages under a license.

    Attributes:
        license: License of the packages this entry replaces
        package: Replacement package name
        ecosystem: Package ecosystem (js, python, go)
        weekly_downloads: Adoption signal
        similarity: Functional similarity, 0-1
        confidence: Confidence in the recommendation, 0-1
        rationale: Why the package is a good replacement
        quality: production, stable or experimental
        api_compatibility: drop-in, minor-changes or rewrite
        tradeoffs: Known costs of switching
        tags: Functional area tags
    """

    license: str
    package: str
    ecosystem: str
    weekly_downloads: int
    similarity: float
    confidence: float
    rationale: str
    quality: str = "stable"
    api_compatibility: str = "minor-changes"
    tradeoffs: tuple[str, ...] = ()
    tags: tuple[str, ...] = field(default_factory=tuple)

    @property
    def adoption(self) -> float:
        """Log-scaled adoption, 100M weekly downloads maps to 1.0."""
        return _clamp(math.log10(self.weekly_downloads + 1) / 8)

    @property
    def score(self) -> float:
        """Weighted ranking score in [0, 1]."""
        return (
            _clamp(self.similarity) * SIMILARITY_WEIGHT
            + _clamp(self.confidence) * CONFIDENCE_WEIGHT
            + self.adoption * ADOPTION_WEIGHT
            + QUALITY_WEIGHTS.get(self.quality, 0.5) * QUALITY_WEIGHT
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "license": self.license,
            "package": self.package,
            "ecosystem": self.ecosystem,
            "weekly_downloads": self.weekly_downloads,
            "similarity": self.similarity,
            "confidence": self.confidence,
            "rationale": self.rationale,
            "quality": self.quality,
            "api_compatibility": self.api_compatibility,
            "tradeoffs": list(self.tradeoffs),
            "tags": list(self.tags),
            "score": round(self.score, 4),
        }


def _alt(
    license_id: str,
    package: str,
    ecosystem: str,
    downloads: int,
    similarity: float,
    confidence: float,
    rationale: str,
    quality: str,
    api: str,
    tradeoffs: tuple[str, ...],
    tags: tuple[str, ...] = (),
) -> PackageAlternative:
    return PackageAlternative(
        license=license_id,
        package=package,
        ecosystem=ecosystem,
        weekly_downloads=downloads,
        similarity=similarity,
        confidence=confidence,
        rationale=rationale,
        quality=quality,
        api_compatibility=api,
        tradeoffs=tradeoffs,
        tags=tags,
    )


ALTERNATIVES_DATABASE: list[PackageAlternative] = [
    # GPL-2.0
    _alt("GPL-2.0", "mysql2", "js", 50_000_000, 0.62, 0.78,
         "MIT-licensed MySQL driver with an active release cadence.",
         "production", "drop-in", ("Requires native bindings on Alpine",), ("database", "sql")),
    _alt("GPL-2.0", "pg", "js", 40_000_000, 0.55, 0.75,
         "PostgreSQL client with broad ecosystem support and a permissive license.",
         "production", "minor-changes", ("Switching database engine requires migration",), ("database", "sql")),
    _alt("GPL-2.0", "better-sqlite3", "js", 5_000_000, 0.48, 0.65,
         "MIT-licensed SQLite bindings for embedded and desktop workloads.",
         "production", "minor-changes", ("Node.js only",), ("database", "sql", "embedded")),
    _alt("GPL-2.0", "PyMySQL", "python", 15_000_000, 0.64, 0.74,
         "Pure-Python MySQL client under the MIT license.",
         "production", "minor-changes", ("Slower than C-accelerated drivers",), ("database", "sql")),

    # GPL-3.0
    _alt("GPL-3.0", "axios", "js", 200_000_000, 0.82, 0.86,
         "MIT-licensed HTTP client with interceptors and a mature ecosystem.",
         "production", "drop-in", ("Bundle size larger than fetch",), ("http", "client")),
    _alt("GPL-3.0", "undici", "js", 30_000_000, 0.74, 0.78,
         "Modern HTTP/1.1 client maintained by the Node.js core team.",
         "production", "minor-changes", ("Node 18+ recommended",), ("http", "client")),
    _alt("GPL-3.0", "node-fetch", "js", 80_000_000, 0.70, 0.72,
         "Lightweight fetch-compatible client under the MIT license.",
         "stable", "drop-in", ("CommonJS/ESM interop considerations",), ("http", "client")),
    _alt("GPL-3.0", "requests", "python", 120_000_000, 0.72, 0.80,
         "De facto Python HTTP client under Apache-2.0.",
         "production", "drop-in", ("Synchronous only",), ("http", "client")),
    _alt("GPL-3.0", "httpx", "python", 4_500_000, 0.70, 0.76,
         "Async-capable HTTP client under the BSD-3-Clause license.",
         "production", "minor-changes", ("API differs for streaming responses",), ("http", "client")),

    # AGPL-3.0
    _alt("AGPL-3.0", "express", "js", 500_000_000, 0.68, 0.82,
         "MIT-licensed web server with a large middleware ecosystem.",
         "production", "minor-changes", ("Less opinionated than AGPL frameworks",), ("web", "server")),
    _alt("AGPL-3.0", "fastify", "js", 30_000_000, 0.72, 0.80,
         "High-performance MIT-licensed server with a solid plugin model.",
         "production", "minor-changes", ("Framework-specific helpers need migration",), ("web", "server")),
    _alt("AGPL-3.0", "hapi", "js", 5_000_000, 0.55, 0.70,
         "BSD-licensed framework with configuration-driven routing.",
         "stable", "rewrite", ("Routing style differs materially",), ("web", "server")),
    _alt("AGPL-3.0", "fiber", "go", 250_000, 0.66, 0.74,
         "Express-inspired Go web framework under the MIT license.",
         "stable", "minor-changes", ("Smaller middleware ecosystem than gin",), ("web", "server")),
    _alt("AGPL-3.0", "fasthttp", "go", 10_000, 0.60, 0.70,
         "BSD-licensed HTTP server and client for Go.",
         "stable", "minor-changes", ("Not fully net/http compatible",), ("web", "server")),

    # LGPL-2.1
    _alt("LGPL-2.1", "lodash", "js", 600_000_000, 0.77, 0.82,
         "MIT-licensed utility toolkit with broad coverage.",
         "production", "minor-changes", ("Tree-shaking recommended",), ("utilities",)),
    _alt("LGPL-2.1", "underscore", "js", 20_000_000, 0.60, 0.70,
         "Mature MIT-licensed utility library with a lodash-like API.",
         "stable", "minor-changes", ("Slower release cadence",), ("utilities",)),

    # LGPL-3.0
    _alt("LGPL-3.0", "date-fns", "js", 40_000_000, 0.70, 0.80,
         "Tree-shakeable date library under the MIT license.",
         "production", "minor-changes", ("API differs from moment",), ("datetime",)),
    _alt("LGPL-3.0", "dayjs", "js", 20_000_000, 0.68, 0.75,
         "Lightweight immutable date library close to the moment API.",
         "production", "minor-changes", ("Plugins required for some features",), ("datetime",)),
    _alt("LGPL-3.0", "luxon", "js", 6_000_000, 0.66, 0.72,
         "MIT-licensed date library with strong timezone support.",
         "stable", "minor-changes", ("Different API surface than moment",), ("datetime",)),

    # MPL-2.0
    _alt("MPL-2.0", "typescript", "js", 100_000_000, 0.60, 0.78,
         "Apache-2.0 compiler toolchain with strong governance.",
         "production", "minor-changes", ("Affects the build pipeline",), ("language", "tooling")),
]


class AlternativesCatalog:
    """
    Ranked lookup of replacement packages by license.

    Example:
        >>> catalog = AlternativesCatalog()
        >>> [a.package for a in catalog.search("GPL-3.0", "readline", limit=2)]
        ['axios', 'requests']
    """

    def __init__(
        self,
        alternatives: list[PackageAlternative] | None = None,
        catalog: LicenseCatalog | None = None,
    ):
        self._catalog = catalog or default_catalog
        self._by_license: dict[str, list[PackageAlternative]] = {}
        for entry in (alternatives if alternatives is not None else ALTERNATIVES_DATABASE):
            key = self._catalog.normalize(entry.license)
            self._by_license.setdefault(key, []).append(entry)

    def __len__(self) -> int:
        return sum(len(entries) for entries in self._by_license.values())

    def search(
        self,
        license_id: str,
        package_name: str | None = None,
        ecosystem: str | None = None,
        limit: int = 3,
        min_confidence: float = 0.6,
    ) -> list[PackageAlternative]:
        """
        Find replacements for a package under the given license.

        Args:
            license_id: License of the package being replaced
            package_name: Package being replaced; never suggested for itself
            ecosystem: Restrict results to one ecosystem
            limit: Maximum number of results
            min_confidence: Minimum confidence score

        Returns:
            Alternatives ordered by score (highest first), then name
        """
        candidates = [
            entry
            for entry in self._by_license.get(self._catalog.normalize(license_id), [])
            if entry.confidence >= min_confidence
            and (ecosystem is None or entry.ecosystem == ecosystem)
            and (package_name is None or entry.package.lower() != package_name.lower())
        ]
        candidates.sort(key=lambda entry: (-entry.score, entry.package))
        logger.debug(f"{len(candidates)} alternatives for {package_name or '*'} under {license_id}")
        return candidates[:limit]

    def package_names(self, license_id: str, package_name: str | None = None, limit: int = 3) -> list[str]:
        """Names of the top replacements for a package."""
        return [entry.package for entry in self.search(license_id, package_name, limit=limit)]


# Shared alternatives instance
default_alternatives = AlternativesCatalog()
