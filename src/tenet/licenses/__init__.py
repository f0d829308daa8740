"""
License catalog for Mantissa Tenet.

Maps SPDX identifiers and informal aliases to license records with
category, obligations, permissions and limitations, and lists curated
permissively licensed replacements for restrictive dependencies.
"""

from tenet.licenses.alternatives import (
    ALTERNATIVES_DATABASE,
    AlternativesCatalog,
    PackageAlternative,
    default_alternatives,
)
from tenet.licenses.catalog import (
    LICENSE_ALIASES,
    LICENSE_DATABASE,
    LicenseCatalog,
    default_catalog,
    is_gpl_family,
)

__all__ = [
    # Catalog
    "LICENSE_ALIASES",
    "LICENSE_DATABASE",
    "LicenseCatalog",
    "default_catalog",
    "is_gpl_family",
    # Alternatives
    "ALTERNATIVES_DATABASE",
    "AlternativesCatalog",
    "PackageAlternative",
    "default_alternatives",
]
