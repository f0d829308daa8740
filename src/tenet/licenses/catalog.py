"""
License catalog for Mantissa Tenet.

Provides normalized license lookup (SPDX id or informal alias) to a
license record carrying its category, obligations, permissions and
limitations. The catalog is read-only; unknown licenses resolve to the
UNKNOWN category instead of raising.
"""

from __future__ import annotations

import logging
import re

from tenet.models.dependency import UNKNOWN_LICENSE
from tenet.models.license import LicenseCategory, LicenseRecord

logger = logging.getLogger(__name__)

# Common obligation/permission sets
_PERMISSIVE_OBLIGATIONS = ("attribution", "include-license-text")
_PERMISSIVE_PERMISSIONS = ("commercial-use", "distribution", "modification", "private-use")
_PATENT_PERMISSIONS = _PERMISSIVE_PERMISSIONS + ("patent-use",)
_STANDARD_LIMITATIONS = ("liability", "warranty")
_WEAK_OBLIGATIONS = ("disclose-source", "include-license-text", "state-changes")
_STRONG_OBLIGATIONS = (
    "disclose-source",
    "include-copyright",
    "include-license-text",
    "same-license",
    "state-changes",
)
_NETWORK_OBLIGATIONS = _STRONG_OBLIGATIONS + ("network-use-disclose",)


def _permissive(license_id: str, name: str, **kwargs) -> LicenseRecord:
    kwargs.setdefault("obligations", _PERMISSIVE_OBLIGATIONS)
    kwargs.setdefault("permissions", _PERMISSIVE_PERMISSIONS)
    kwargs.setdefault("limitations", _STANDARD_LIMITATIONS)
    kwargs.setdefault("osi_approved", True)
    return LicenseRecord(id=license_id, name=name, category=LicenseCategory.PERMISSIVE, **kwargs)


def _public_domain(license_id: str, name: str, **kwargs) -> LicenseRecord:
    kwargs.setdefault("obligations", ())
    return _permissive(license_id, name, **kwargs)


def _weak(license_id: str, name: str, **kwargs) -> LicenseRecord:
    kwargs.setdefault("obligations", _WEAK_OBLIGATIONS)
    kwargs.setdefault("permissions", _PATENT_PERMISSIONS)
    kwargs.setdefault("limitations", _STANDARD_LIMITATIONS)
    kwargs.setdefault("osi_approved", True)
    return LicenseRecord(id=license_id, name=name, category=LicenseCategory.WEAK_COPYLEFT, **kwargs)


def _strong(license_id: str, name: str, **kwargs) -> LicenseRecord:
    kwargs.setdefault("obligations", _STRONG_OBLIGATIONS)
    kwargs.setdefault("permissions", _PATENT_PERMISSIONS)
    kwargs.setdefault("limitations", _STANDARD_LIMITATIONS)
    kwargs.setdefault("osi_approved", True)
    return LicenseRecord(id=license_id, name=name, category=LicenseCategory.STRONG_COPYLEFT, **kwargs)


def _proprietary(license_id: str, name: str, **kwargs) -> LicenseRecord:
    kwargs.setdefault("obligations", ("obtain-permission",))
    kwargs.setdefault("permissions", ())
    kwargs.setdefault("limitations", ("commercial-use", "distribution", "modification"))
    return LicenseRecord(id=license_id, name=name, category=LicenseCategory.PROPRIETARY, **kwargs)


# License database with known licenses and their properties
LICENSE_DATABASE: dict[str, LicenseRecord] = {
    record.id: record
    for record in (
        # Permissive licenses
        _permissive("MIT", "MIT License"),
        _permissive("MIT-0", "MIT No Attribution", obligations=()),
        _permissive(
            "Apache-2.0",
            "Apache License 2.0",
            obligations=("attribution", "include-license-text", "state-changes"),
            permissions=_PATENT_PERMISSIONS,
            limitations=("liability", "trademark-use", "warranty"),
        ),
        _permissive("Apache-1.1", "Apache License 1.1"),
        _permissive("BSD-2-Clause", "BSD 2-Clause License"),
        _permissive("BSD-3-Clause", "BSD 3-Clause License"),
        _permissive("BSD-3-Clause-Clear", "BSD 3-Clause Clear License", osi_approved=False),
        _permissive("ISC", "ISC License"),
        _permissive("Zlib", "zlib License"),
        _permissive("BSL-1.0", "Boost Software License 1.0"),
        _permissive("Artistic-2.0", "Artistic License 2.0"),
        _permissive("PSF-2.0", "Python Software Foundation License 2.0", osi_approved=False),
        _permissive("Python-2.0", "Python License 2.0"),
        _permissive("X11", "X11 License", osi_approved=False),
        _permissive("NCSA", "University of Illinois/NCSA Open Source License"),
        _permissive("PostgreSQL", "PostgreSQL License"),
        _permissive("UPL-1.0", "Universal Permissive License v1.0", permissions=_PATENT_PERMISSIONS),
        _permissive("BlueOak-1.0.0", "Blue Oak Model License 1.0.0", permissions=_PATENT_PERMISSIONS),
        _permissive("CC-BY-3.0", "Creative Commons Attribution 3.0", osi_approved=False),
        _permissive("CC-BY-4.0", "Creative Commons Attribution 4.0", osi_approved=False),
        # Public domain equivalents
        _public_domain("0BSD", "Zero-Clause BSD"),
        _public_domain("Unlicense", "The Unlicense"),
        _public_domain("CC0-1.0", "Creative Commons Zero v1.0 Universal", osi_approved=False),
        _public_domain("WTFPL", "Do What The F*ck You Want To Public License", osi_approved=False),
        # Weak copyleft
        _weak("LGPL-2.0", "GNU Library General Public License v2"),
        _weak("LGPL-2.1", "GNU Lesser General Public License v2.1", permissions=_PERMISSIVE_PERMISSIONS),
        _weak("LGPL-3.0", "GNU Lesser General Public License v3.0"),
        _weak(
            "MPL-1.1",
            "Mozilla Public License 1.1",
            obligations=("disclose-source", "include-license-text"),
            file_scoped=True,
        ),
        _weak(
            "MPL-2.0",
            "Mozilla Public License 2.0",
            obligations=("disclose-source", "include-license-text"),
            limitations=("liability", "trademark-use", "warranty"),
            file_scoped=True,
        ),
        _weak("EPL-1.0", "Eclipse Public License 1.0"),
        _weak("EPL-2.0", "Eclipse Public License 2.0"),
        _weak("CDDL-1.0", "Common Development and Distribution License 1.0", file_scoped=True),
        _weak("CDDL-1.1", "Common Development and Distribution License 1.1", file_scoped=True),
        _weak("CPL-1.0", "Common Public License 1.0"),
        _weak("EUPL-1.1", "European Union Public License 1.1"),
        _weak("EUPL-1.2", "European Union Public License 1.2"),
        # Strong copyleft
        _strong("GPL-1.0", "GNU General Public License v1.0", osi_approved=False),
        _strong("GPL-2.0", "GNU General Public License v2.0", permissions=_PERMISSIVE_PERMISSIONS),
        _strong("GPL-3.0", "GNU General Public License v3.0"),
        _strong(
            "AGPL-3.0",
            "GNU Affero General Public License v3.0",
            obligations=_NETWORK_OBLIGATIONS,
            network_clause=True,
        ),
        _strong(
            "SSPL-1.0",
            "Server Side Public License v1",
            obligations=_NETWORK_OBLIGATIONS,
            osi_approved=False,
            network_clause=True,
        ),
        _strong("OSL-3.0", "Open Software License 3.0", obligations=_NETWORK_OBLIGATIONS, network_clause=True),
        _strong("CC-BY-SA-4.0", "Creative Commons Attribution Share Alike 4.0", osi_approved=False),
        # Proprietary / source-available
        _proprietary("UNLICENSED", "Unlicensed (all rights reserved)"),
        _proprietary("Proprietary", "Proprietary License"),
        _proprietary("CC-BY-NC-4.0", "Creative Commons Attribution Non Commercial 4.0"),
        _proprietary("BUSL-1.1", "Business Source License 1.1"),
        _proprietary("Elastic-2.0", "Elastic License 2.0"),
        _proprietary("Commons-Clause", "Commons Clause License Condition v1.0"),
    )
}

# License name aliases (lowercase keys)
LICENSE_ALIASES: dict[str, str] = {
    # MIT variants
    "mit license": "MIT",
    "the mit license": "MIT",
    "mit/x11": "MIT",
    "expat": "MIT",
    # Apache variants
    "apache": "Apache-2.0",
    "apache 2": "Apache-2.0",
    "apache 2.0": "Apache-2.0",
    "apache-2": "Apache-2.0",
    "apache2": "Apache-2.0",
    "apache license 2.0": "Apache-2.0",
    "apache license, version 2.0": "Apache-2.0",
    "apache software license": "Apache-2.0",
    # BSD variants
    "bsd": "BSD-3-Clause",
    "bsd license": "BSD-3-Clause",
    "bsd-2": "BSD-2-Clause",
    "bsd 2-clause": "BSD-2-Clause",
    "simplified bsd": "BSD-2-Clause",
    "bsd-3": "BSD-3-Clause",
    "bsd 3-clause": "BSD-3-Clause",
    "new bsd": "BSD-3-Clause",
    "modified bsd": "BSD-3-Clause",
    # GPL variants
    "gpl": "GPL-3.0",
    "gpl2": "GPL-2.0",
    "gpl-2": "GPL-2.0",
    "gpl v2": "GPL-2.0",
    "gplv2": "GPL-2.0",
    "gnu gpl v2": "GPL-2.0",
    "gpl3": "GPL-3.0",
    "gpl-3": "GPL-3.0",
    "gpl v3": "GPL-3.0",
    "gplv3": "GPL-3.0",
    "gnu gpl v3": "GPL-3.0",
    # LGPL variants
    "lgpl": "LGPL-3.0",
    "lgpl2.1": "LGPL-2.1",
    "lgpl v2.1": "LGPL-2.1",
    "lgpl3": "LGPL-3.0",
    "lgpl-3": "LGPL-3.0",
    "lgpl v3": "LGPL-3.0",
    # AGPL variants
    "agpl": "AGPL-3.0",
    "agpl3": "AGPL-3.0",
    "agpl-3": "AGPL-3.0",
    "agpl v3": "AGPL-3.0",
    "affero gpl": "AGPL-3.0",
    # MPL variants
    "mpl": "MPL-2.0",
    "mpl 2.0": "MPL-2.0",
    "mpl-2": "MPL-2.0",
    "mozilla public license": "MPL-2.0",
    # Other
    "isc license": "ISC",
    "public domain": "Unlicense",
    "cc0": "CC0-1.0",
    "cc0 1.0": "CC0-1.0",
    "artistic": "Artistic-2.0",
    "artistic 2.0": "Artistic-2.0",
    "boost": "BSL-1.0",
    "boost software license": "BSL-1.0",
    "zlib/libpng": "Zlib",
    "psf": "PSF-2.0",
    "python software foundation license": "PSF-2.0",
    "sspl": "SSPL-1.0",
    "proprietary": "Proprietary",
    "commercial": "Proprietary",
}

# Deprecated SPDX suffixes that map to the base identifier
_SUFFIX_PATTERN = re.compile(r"(-only|-or-later|\+)$", flags=re.IGNORECASE)

# Licenses treated as unknown regardless of spelling
_UNKNOWN_MARKERS = {"", "unknown", "noassertion", "none"}


class LicenseCatalog:
    """
    Read-only license lookup.

    Resolves SPDX identifiers, case variants, deprecated suffixes and
    informal aliases to catalog records.
    """

    def __init__(
        self,
        licenses: dict[str, LicenseRecord] | None = None,
        aliases: dict[str, str] | None = None,
    ):
        """
        Initialize the catalog.

        Args:
            licenses: License records keyed by SPDX id. Defaults to the
                built-in database.
            aliases: Lowercase alias to SPDX id. Defaults to the built-in
                alias table.
        """
        self._licenses = dict(licenses if licenses is not None else LICENSE_DATABASE)
        self._aliases = dict(aliases if aliases is not None else LICENSE_ALIASES)
        self._by_lower = {lic_id.lower(): lic_id for lic_id in self._licenses}

    def __len__(self) -> int:
        return len(self._licenses)

    def __contains__(self, license_id: object) -> bool:
        return isinstance(license_id, str) and self.get(license_id) is not None

    def normalize(self, license_id: str | None) -> str:
        """
        Normalize a license identifier to its canonical SPDX form.

        Unknown identifiers are returned trimmed; empty input becomes
        "UNKNOWN".
        """
        if license_id is None:
            return UNKNOWN_LICENSE
        trimmed = license_id.strip()
        if trimmed.lower() in _UNKNOWN_MARKERS:
            return UNKNOWN_LICENSE

        resolved = self._resolve(trimmed)
        if resolved:
            return resolved

        # GPL-2.0-only, GPL-3.0-or-later, GPL-2.0+
        base = _SUFFIX_PATTERN.sub("", trimmed)
        if base != trimmed:
            resolved = self._resolve(base)
            if resolved:
                return resolved

        return trimmed

    def _resolve(self, candidate: str) -> str | None:
        if candidate in self._licenses:
            return candidate
        lowered = candidate.lower()
        if lowered in self._by_lower:
            return self._by_lower[lowered]
        alias = self._aliases.get(lowered)
        if alias and alias in self._licenses:
            return alias
        return None

    def get(self, license_id: str | None) -> LicenseRecord | None:
        """Get the record for a license id or alias, None if unknown."""
        return self._licenses.get(self.normalize(license_id))

    def category_of(self, license_id: str | None) -> LicenseCategory:
        """Get the category of a license, UNKNOWN if not in the catalog."""
        record = self.get(license_id)
        return record.category if record else LicenseCategory.UNKNOWN

    def is_known(self, license_id: str | None) -> bool:
        return self.get(license_id) is not None

    def is_permissive(self, license_id: str | None) -> bool:
        return self.category_of(license_id) == LicenseCategory.PERMISSIVE

    def is_copyleft(self, license_id: str | None) -> bool:
        return self.category_of(license_id) in (
            LicenseCategory.WEAK_COPYLEFT,
            LicenseCategory.STRONG_COPYLEFT,
        )

    def is_weak_copyleft(self, license_id: str | None) -> bool:
        return self.category_of(license_id) == LicenseCategory.WEAK_COPYLEFT

    def is_strong_copyleft(self, license_id: str | None) -> bool:
        return self.category_of(license_id) == LicenseCategory.STRONG_COPYLEFT

    def is_network_copyleft(self, license_id: str | None) -> bool:
        record = self.get(license_id)
        return bool(record and record.network_clause)

    def is_file_scoped(self, license_id: str | None) -> bool:
        record = self.get(license_id)
        return bool(record and record.file_scoped)

    def obligations_of(self, license_id: str | None) -> list[str]:
        record = self.get(license_id)
        return list(record.obligations) if record else []

    def list_licenses(self, category: LicenseCategory | None = None) -> list[LicenseRecord]:
        """List catalog records, optionally filtered by category."""
        records = sorted(self._licenses.values(), key=lambda r: r.id)
        if category is None:
            return records
        return [r for r in records if r.category == category]


def is_gpl_family(license_id: str | None) -> bool:
    """Check for a GNU GPL-family identifier (GPL, LGPL, AGPL)."""
    return bool(license_id) and "GPL" in license_id.upper()


# Shared catalog instance
default_catalog = LicenseCatalog()
