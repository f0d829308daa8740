"""
Remediation suggestions for Mantissa Tenet.

Every conflicting dependency gets a non-empty list of fix strategies,
ordered from least to most effort.
"""

from __future__ import annotations

from tenet.licenses.alternatives import AlternativesCatalog, default_alternatives
from tenet.licenses.catalog import LicenseCatalog, default_catalog, is_gpl_family
from tenet.models.intelligence import FixEffort, FixStrategy, FixSuggestion


class FixEngine:
    """Generates effort-ranked fix suggestions for a conflicting dependency."""

    def __init__(
        self,
        catalog: LicenseCatalog | None = None,
        alternatives: AlternativesCatalog | None = None,
    ):
        self._catalog = catalog or default_catalog
        self._alternatives = alternatives or default_alternatives

    def generate_fixes(
        self,
        package_name: str,
        dependency_license: str,
        project_license: str | None = None,
    ) -> list[FixSuggestion]:
        """
        Generate fix suggestions for a dependency.

        Args:
            package_name: Conflicting package
            dependency_license: License of the package
            project_license: Declared project license, if any

        Returns:
            Suggestions sorted by effort (stable within an effort level)
        """
        fixes = [
            self._replacement(package_name, dependency_license),
            self._isolation(package_name, dependency_license),
            self._removal(package_name),
            self._boundary_refactor(package_name),
        ]

        if self._catalog.normalize(dependency_license) == "GPL-2.0":
            fixes.append(self._upgrade(package_name))

        if (
            is_gpl_family(dependency_license)
            and project_license
            and not is_gpl_family(project_license)
        ):
            fixes.append(self._dual_license(package_name))

        return sorted(fixes, key=lambda f: f.effort.rank)

    def _replacement(self, name: str, license_id: str) -> FixSuggestion:
        if is_gpl_family(license_id) or self._catalog.is_strong_copyleft(license_id):
            target = "a permissive alternative"
        else:
            target = "a compatible alternative"
        candidates = self._alternatives.package_names(license_id, name)
        if candidates:
            implementation = (
                f"Remove {name} from the manifest and add one of: {', '.join(candidates)}."
            )
        else:
            implementation = (
                f"Remove {name} from the manifest and add an alternative package with equivalent functionality."
            )
        return FixSuggestion(
            effort=FixEffort.LOW,
            strategy=FixStrategy.REPLACE,
            description=f"Replace {name} with {target}",
            implementation=implementation,
            tradeoffs=["Requires API migration", "May need regression tests"],
            estimated_time="30 minutes",
            alternatives=candidates,
        )

    def _isolation(self, name: str, license_id: str) -> FixSuggestion:
        if self._catalog.is_file_scoped(license_id) or "MPL" in license_id.upper():
            note = "file-level copyleft"
        else:
            note = "license boundary"
        return FixSuggestion(
            effort=FixEffort.MEDIUM,
            strategy=FixStrategy.ISOLATE,
            description=f"Isolate {name} behind a microservice or plugin boundary ({note})",
            implementation=(
                "Expose the functionality through an API or plugin and run the dependency "
                "out of process."
            ),
            tradeoffs=["Adds deployment complexity", "Introduces latency"],
            estimated_time="1-2 days",
        )

    def _removal(self, name: str) -> FixSuggestion:
        return FixSuggestion(
            effort=FixEffort.HIGH,
            strategy=FixStrategy.REMOVE,
            description=f"Remove {name} and replace the functionality",
            implementation=f"Evaluate usages of {name} and strip or reimplement the feature.",
            tradeoffs=["Lose functionality", "Requires refactoring"],
            estimated_time="6 hours",
        )

    def _boundary_refactor(self, name: str) -> FixSuggestion:
        return FixSuggestion(
            effort=FixEffort.HIGH,
            strategy=FixStrategy.BOUNDARY_REFACTOR,
            description=f"Refactor the boundary that pulls in {name}",
            implementation=(
                "Consider a plugin architecture or dynamic linking, or reimplement the needed portion."
            ),
            tradeoffs=["Higher engineering effort", "Possible functionality loss"],
            estimated_time="5-8 hours",
        )

    def _upgrade(self, name: str) -> FixSuggestion:
        return FixSuggestion(
            effort=FixEffort.LOW,
            strategy=FixStrategy.UPGRADE,
            description=f"Upgrade {name} to a release under a later compatible license (e.g. GPL-3.0)",
            implementation="Move to a version published under the later license.",
            tradeoffs=["Requires testing"],
            estimated_time="30 minutes",
        )

    def _dual_license(self, name: str) -> FixSuggestion:
        return FixSuggestion(
            effort=FixEffort.LOW,
            strategy=FixStrategy.DUAL_LICENSE,
            description=f"Request or negotiate a dual license for {name}",
            implementation="Contact the maintainers about a commercial or dual-license agreement.",
            tradeoffs=["May incur cost", "Requires maintainer cooperation"],
            estimated_time="30 minutes",
        )
