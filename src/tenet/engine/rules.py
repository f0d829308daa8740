"""
Built-in license compatibility rules.

Each rule is keyed by the 4-tuple (project license, dependency license,
linking model, distribution model). License fields may be the wildcard
"*". Rules are kept in a flat list and scanned in order, so earlier
rules win when several match.
"""

from __future__ import annotations

from dataclasses import replace

from tenet.models.context import DistributionModel, LinkingModel
from tenet.models.license import WILDCARD, CompatibilityRule, Severity

STATIC = LinkingModel.STATIC
DYNAMIC = LinkingModel.DYNAMIC
RUNTIME = LinkingModel.RUNTIME
MICROSERVICE = LinkingModel.MICROSERVICE

PROPRIETARY = DistributionModel.PROPRIETARY
SAAS = DistributionModel.SAAS
OPEN_SOURCE = DistributionModel.OPEN_SOURCE

LOW = Severity.LOW
MEDIUM = Severity.MEDIUM
HIGH = Severity.HIGH
CRITICAL = Severity.CRITICAL


def generate_rule_id(
    project_license: str,
    dependency_license: str,
    linking_model: LinkingModel,
    distribution_model: DistributionModel,
    index: int,
) -> str:
    """
    Generate a stable rule id from a rule's key and table position.

    MIT + GPL-3.0, static, proprietary at index 5 becomes
    "MIT_GPL3.0_STA_PRO_005".
    """
    proj = project_license.replace("-", "")[:6].upper()
    dep = dependency_license.replace("-", "")[:6].upper()
    link = linking_model.value[:3].upper()
    dist = distribution_model.value[:3].upper()
    return f"{proj}_{dep}_{link}_{dist}_{index:03d}"


def _rule(
    project: str,
    dependency: str,
    linking: LinkingModel,
    distribution: DistributionModel,
    compatible: bool,
    severity: Severity,
    reason: str,
    ref: str | None = None,
    basis: str | None = None,
    rule_id: str = "",
) -> CompatibilityRule:
    return CompatibilityRule(
        project_license=project,
        dependency_license=dependency,
        linking_model=linking,
        distribution_model=distribution,
        compatible=compatible,
        severity=severity,
        reason=reason,
        rule_id=rule_id,
        legal_reference=ref,
        legal_basis=basis,
    )


_AGPL_SAAS_REASON = (
    "AGPL-3.0 requires offering the complete source code to users who interact "
    "with the software over a network. This conflicts with a closed SaaS offering."
)
_AGPL_SAAS_BASIS = "AGPL Section 13 triggers on network interaction, not just distribution."
_AGPL_SECTION_13 = "AGPL-3.0 Section 13 - Remote Network Interaction"

_CURATED_RULES: list[CompatibilityRule] = [
    # MIT project
    _rule("MIT", "MIT", STATIC, PROPRIETARY, True, LOW,
          "MIT is compatible with MIT.",
          ref="MIT License - https://spdx.org/licenses/MIT.html"),
    _rule("MIT", "Apache-2.0", STATIC, PROPRIETARY, True, LOW,
          "Apache-2.0 is compatible with MIT projects.",
          ref="Apache-2.0 Section 4 - Redistribution"),
    _rule("MIT", "BSD-3-Clause", STATIC, PROPRIETARY, True, LOW,
          "BSD-3-Clause is compatible with MIT projects.",
          ref="BSD-3-Clause - https://spdx.org/licenses/BSD-3-Clause.html"),
    _rule("MIT", "ISC", STATIC, PROPRIETARY, True, LOW,
          "ISC is compatible with MIT projects.",
          ref="ISC License - https://spdx.org/licenses/ISC.html"),
    _rule("MIT", "GPL-2.0", STATIC, PROPRIETARY, False, CRITICAL,
          "GPL-2.0 requires the entire combined work to be GPL-2.0. Static linking with "
          "proprietary MIT code creates a derivative work that must be GPL-2.0.",
          ref="GPL-2.0 Section 2(b) - Derivative Works",
          basis="GPLv2 requires derivative works to be licensed under GPL-2.0."),
    _rule("MIT", "GPL-3.0", STATIC, PROPRIETARY, False, CRITICAL,
          "GPL-3.0 requires the entire combined work to be GPL-3.0. Static linking with "
          "proprietary MIT code creates a derivative work that must be GPL-3.0.",
          ref="GPL-3.0 Section 5 - Conveying Modified Source Versions",
          basis="GPLv3 Section 5(c) requires derivative works to be GPL-3.0."),
    _rule("MIT", "AGPL-3.0", STATIC, PROPRIETARY, False, CRITICAL,
          "AGPL-3.0 requires the entire combined work, including server-side code, to be "
          "AGPL-3.0. This conflicts with proprietary distribution.",
          ref=_AGPL_SECTION_13,
          basis="AGPL extends GPL copyleft to network services."),
    _rule("MIT", "AGPL-3.0", STATIC, SAAS, False, CRITICAL,
          _AGPL_SAAS_REASON, ref=_AGPL_SECTION_13, basis=_AGPL_SAAS_BASIS),
    _rule("MIT", "LGPL-2.1", DYNAMIC, PROPRIETARY, True, LOW,
          "LGPL-2.1 allows dynamic linking with proprietary code.",
          ref="LGPL-2.1 Section 6 - Combining with Non-LGPL Works",
          basis="LGPL explicitly permits dynamic linking."),
    _rule("MIT", "LGPL-2.1", STATIC, PROPRIETARY, False, HIGH,
          "LGPL-2.1 with static linking requires providing object files so users can "
          "re-link against a modified library. This is often impractical for proprietary software.",
          ref="LGPL-2.1 Section 6(a) - Object Code Requirements",
          basis="LGPL requires the ability for users to re-link with a modified library."),
    _rule("MIT", "LGPL-3.0", DYNAMIC, PROPRIETARY, True, LOW,
          "LGPL-3.0 allows dynamic linking with proprietary code.",
          ref="LGPL-3.0 Section 4 - Combined Works",
          basis="LGPLv3 Section 4 permits combination with non-LGPL works."),
    _rule("MIT", "LGPL-3.0", STATIC, PROPRIETARY, False, HIGH,
          "LGPL-3.0 with static linking requires object files for re-linking and carries "
          "the anti-tivoization clause.",
          ref="LGPL-3.0 Section 4(d) - Combined Works"),
    _rule("MIT", "MPL-2.0", STATIC, PROPRIETARY, True, MEDIUM,
          "MPL-2.0 is file-level copyleft. Only modified MPL files need to be disclosed.",
          ref="MPL-2.0 Section 3.2 - Distribution of Executable Form",
          basis="MPL copyleft applies at file level, not to the entire work."),
    # Apache-2.0 project
    _rule("Apache-2.0", "MIT", STATIC, PROPRIETARY, True, LOW,
          "MIT is compatible with Apache-2.0 projects."),
    _rule("Apache-2.0", "Apache-2.0", STATIC, PROPRIETARY, True, LOW,
          "Apache-2.0 is compatible with Apache-2.0."),
    _rule("Apache-2.0", "GPL-2.0", STATIC, PROPRIETARY, False, CRITICAL,
          "GPL-2.0 is incompatible with Apache-2.0 due to patent clause conflicts.",
          ref="GPL-2.0 Section 6 - No Further Restrictions"),
    _rule("Apache-2.0", "GPL-3.0", STATIC, PROPRIETARY, False, CRITICAL,
          "GPL-3.0 requires the entire work to be GPL-3.0. Apache-2.0 code in a proprietary "
          "project cannot be relicensed as GPL-3.0.",
          ref="GPL-3.0 Section 5 - Conveying Modified Source Versions"),
    # GPL projects
    _rule("GPL-3.0", "MIT", STATIC, OPEN_SOURCE, True, LOW,
          "MIT code can be incorporated into GPL-3.0 projects."),
    _rule("GPL-3.0", "Apache-2.0", STATIC, OPEN_SOURCE, True, LOW,
          "Apache-2.0 is compatible with GPL-3.0 (but not GPL-2.0)."),
    _rule("GPL-3.0", "GPL-3.0", STATIC, OPEN_SOURCE, True, LOW,
          "GPL-3.0 is compatible with GPL-3.0."),
    _rule("GPL-2.0", "Apache-2.0", STATIC, OPEN_SOURCE, False, HIGH,
          "GPL-2.0 is incompatible with Apache-2.0 due to patent clause conflicts.",
          ref="GPL-2.0 Section 6 - No Further Restrictions"),
    _rule("AGPL-3.0", "AGPL-3.0", STATIC, OPEN_SOURCE, True, LOW,
          "AGPL-3.0 is compatible with AGPL-3.0."),
    _rule("AGPL-3.0", "GPL-3.0", STATIC, OPEN_SOURCE, True, LOW,
          "GPL-3.0 code may be combined with AGPL-3.0 code.",
          ref="AGPL-3.0 Section 13 - Use with the GNU General Public License"),
    # Microservice architecture
    _rule("MIT", "GPL-3.0", MICROSERVICE, PROPRIETARY, True, LOW,
          "GPL-3.0 in a separate microservice communicating over the network does not create "
          "a derivative work. Each service can carry its own license."),
    _rule("MIT", "AGPL-3.0", MICROSERVICE, SAAS, False, HIGH,
          "AGPL-3.0 requires source disclosure even in a microservice architecture when "
          "users interact with the service.",
          ref=_AGPL_SECTION_13),
    # BSD-3-Clause project
    _rule("BSD-3-Clause", "MIT", STATIC, PROPRIETARY, True, LOW,
          "MIT is compatible with BSD-3-Clause projects."),
    _rule("BSD-3-Clause", "Apache-2.0", STATIC, PROPRIETARY, True, LOW,
          "Apache-2.0 is compatible with BSD-3-Clause projects."),
    _rule("BSD-3-Clause", "BSD-3-Clause", STATIC, PROPRIETARY, True, LOW,
          "BSD-3-Clause is compatible with itself."),
    _rule("BSD-3-Clause", "BSD-2-Clause", STATIC, PROPRIETARY, True, LOW,
          "BSD-2-Clause is compatible with BSD-3-Clause."),
    _rule("BSD-3-Clause", "ISC", STATIC, PROPRIETARY, True, LOW,
          "ISC is compatible with BSD-3-Clause."),
    _rule("BSD-3-Clause", "GPL-3.0", STATIC, PROPRIETARY, False, CRITICAL,
          "GPL-3.0 requires derivative works to be GPL-3.0. Static linking creates an "
          "incompatibility with proprietary BSD projects."),
    _rule("BSD-3-Clause", "GPL-2.0", STATIC, PROPRIETARY, False, CRITICAL,
          "GPL-2.0 requires derivative works to be GPL-2.0. Static linking creates an "
          "incompatibility with proprietary BSD projects."),
    # ISC project
    _rule("ISC", "MIT", STATIC, PROPRIETARY, True, LOW,
          "MIT is compatible with ISC projects."),
    _rule("ISC", "ISC", STATIC, PROPRIETARY, True, LOW,
          "ISC is compatible with ISC."),
    _rule("ISC", "Apache-2.0", STATIC, PROPRIETARY, True, LOW,
          "Apache-2.0 is compatible with ISC."),
    _rule("ISC", "BSD-3-Clause", STATIC, PROPRIETARY, True, LOW,
          "BSD-3-Clause is compatible with ISC."),
    _rule("ISC", "GPL-3.0", STATIC, PROPRIETARY, False, CRITICAL,
          "GPL-3.0 requires derivative works to be GPL-3.0. Static linking creates an "
          "incompatibility with proprietary ISC projects."),
    # Public domain equivalents
    _rule("0BSD", "MIT", STATIC, PROPRIETARY, True, LOW,
          "MIT is compatible with 0BSD (public domain equivalent)."),
    _rule("0BSD", "GPL-3.0", STATIC, PROPRIETARY, False, CRITICAL,
          "GPL-3.0 requires derivative works to be GPL-3.0. This conflicts with proprietary "
          "0BSD projects."),
    _rule("MIT", "0BSD", STATIC, PROPRIETARY, True, LOW,
          "0BSD (public domain equivalent) is compatible with everything."),
    _rule("MIT", "Unlicense", STATIC, PROPRIETARY, True, LOW,
          "Unlicense (public domain) is compatible with all licenses."),
    _rule("Apache-2.0", "Unlicense", STATIC, PROPRIETARY, True, LOW,
          "Unlicense (public domain) is compatible with all licenses."),
    _rule("GPL-3.0", "Unlicense", STATIC, OPEN_SOURCE, True, LOW,
          "Unlicense (public domain) can be incorporated into GPL projects."),
    _rule("MIT", "CC0-1.0", STATIC, PROPRIETARY, True, LOW,
          "CC0 (public domain dedication) is compatible with all licenses."),
    _rule("Apache-2.0", "CC0-1.0", STATIC, PROPRIETARY, True, LOW,
          "CC0 (public domain dedication) is compatible with all licenses."),
    _rule("MIT", "WTFPL", STATIC, PROPRIETARY, True, LOW,
          "WTFPL is compatible with all licenses."),
    _rule("Apache-2.0", "WTFPL", STATIC, PROPRIETARY, True, LOW,
          "WTFPL is compatible with all licenses."),
    # Other permissive licenses
    _rule("MIT", "Artistic-2.0", STATIC, PROPRIETARY, True, LOW,
          "Artistic-2.0 is a permissive license compatible with MIT."),
    _rule("Apache-2.0", "Artistic-2.0", STATIC, PROPRIETARY, True, LOW,
          "Artistic-2.0 is compatible with Apache-2.0."),
    _rule("MIT", "Zlib", STATIC, PROPRIETARY, True, LOW,
          "Zlib is a permissive license compatible with MIT."),
    _rule("Apache-2.0", "Zlib", STATIC, PROPRIETARY, True, LOW,
          "Zlib is a permissive license compatible with Apache-2.0."),
    _rule("MIT", "PSF-2.0", STATIC, PROPRIETARY, True, LOW,
          "PSF-2.0 is compatible with permissive licenses."),
    # EUPL
    _rule("MIT", "EUPL-1.2", STATIC, PROPRIETARY, False, HIGH,
          "EUPL-1.2 is a copyleft license. Derivative works must be EUPL-1.2 or a listed "
          "compatible license."),
    _rule("GPL-3.0", "EUPL-1.2", STATIC, OPEN_SOURCE, True, LOW,
          "EUPL-1.2 is explicitly compatible with GPL-3.0.",
          ref="EUPL-1.2 Appendix - Compatible Licences"),
    # EPL
    _rule("MIT", "EPL-2.0", STATIC, PROPRIETARY, False, HIGH,
          "EPL-2.0 requires derivative works to be EPL-2.0 or a compatible license. This may "
          "conflict with proprietary use."),
    _rule("MIT", "EPL-2.0", DYNAMIC, PROPRIETARY, True, MEDIUM,
          "EPL-2.0 allows dynamic linking with proprietary code (secondary license provision)."),
    _rule("Apache-2.0", "EPL-2.0", STATIC, PROPRIETARY, False, HIGH,
          "EPL-2.0 copyleft requirements conflict with proprietary Apache projects."),
    # CDDL
    _rule("MIT", "CDDL-1.0", STATIC, PROPRIETARY, True, MEDIUM,
          "CDDL-1.0 is file-level copyleft. Only modified CDDL files need to be disclosed."),
    _rule("GPL-2.0", "CDDL-1.0", STATIC, OPEN_SOURCE, False, CRITICAL,
          "CDDL-1.0 is incompatible with GPL-2.0 due to conflicting copyleft terms."),
    # Open-source distribution
    _rule("MIT", "GPL-2.0", STATIC, OPEN_SOURCE, True, MEDIUM,
          "When distributing as open source, MIT code can be combined with GPL-2.0, but the "
          "combined work becomes GPL-2.0."),
    _rule("MIT", "GPL-3.0", STATIC, OPEN_SOURCE, True, MEDIUM,
          "When distributing as open source, MIT code can be combined with GPL-3.0, but the "
          "combined work becomes GPL-3.0."),
    _rule("Apache-2.0", "GPL-3.0", STATIC, OPEN_SOURCE, True, MEDIUM,
          "Apache-2.0 can be incorporated into GPL-3.0 open-source projects."),
    _rule("BSD-3-Clause", "GPL-3.0", STATIC, OPEN_SOURCE, True, MEDIUM,
          "BSD-3-Clause can be incorporated into GPL-3.0 open-source projects."),
    # SaaS distribution
    _rule("MIT", "GPL-3.0", STATIC, SAAS, True, LOW,
          "GPL-3.0 does not require source disclosure for SaaS because no distribution "
          "occurs. Only AGPL has SaaS requirements."),
    _rule("Apache-2.0", "GPL-3.0", STATIC, SAAS, True, LOW,
          "GPL-3.0 does not require source disclosure for SaaS because no distribution occurs."),
    _rule("MIT", "LGPL-2.1", STATIC, SAAS, True, LOW,
          "LGPL-2.1 does not trigger for SaaS because no distribution occurs."),
    _rule("Apache-2.0", "AGPL-3.0", STATIC, SAAS, False, CRITICAL,
          "AGPL-3.0 requires source disclosure for SaaS applications, even without distribution.",
          ref=_AGPL_SECTION_13, basis=_AGPL_SAAS_BASIS),
    # Dynamic linking
    _rule("MIT", "GPL-2.0", DYNAMIC, PROPRIETARY, False, CRITICAL,
          "GPL-2.0 copyleft applies to dynamically linked works distributed together."),
    _rule("MIT", "GPL-3.0", DYNAMIC, PROPRIETARY, False, CRITICAL,
          "GPL-3.0 copyleft applies to dynamically linked works distributed together."),
    _rule("Apache-2.0", "LGPL-2.1", DYNAMIC, PROPRIETARY, True, LOW,
          "LGPL-2.1 explicitly allows dynamic linking with proprietary code."),
    _rule("Apache-2.0", "LGPL-3.0", DYNAMIC, PROPRIETARY, True, LOW,
          "LGPL-3.0 explicitly allows dynamic linking with proprietary code."),
    _rule("BSD-3-Clause", "LGPL-2.1", DYNAMIC, PROPRIETARY, True, LOW,
          "LGPL-2.1 allows dynamic linking with proprietary BSD-3-Clause projects."),
    # LGPL static linking
    _rule("Apache-2.0", "LGPL-2.1", STATIC, PROPRIETARY, False, HIGH,
          "LGPL-2.1 with static linking requires providing object files for re-linking."),
    _rule("Apache-2.0", "LGPL-3.0", STATIC, PROPRIETARY, False, HIGH,
          "LGPL-3.0 with static linking carries copyleft requirements."),
    # Creative Commons (non-code assets)
    _rule("MIT", "CC-BY-4.0", STATIC, PROPRIETARY, True, LOW,
          "CC-BY-4.0 requires attribution only. Compatible with proprietary projects."),
    _rule("MIT", "CC-BY-SA-4.0", STATIC, PROPRIETARY, False, HIGH,
          "CC-BY-SA-4.0 (ShareAlike) requires derivative works to use the same license."),
    _rule("MIT", "CC-BY-NC-4.0", STATIC, PROPRIETARY, False, CRITICAL,
          "CC-BY-NC-4.0 prohibits commercial use."),
    # GPL version pinning
    _rule("GPL-2.0-only", "GPL-3.0-only", STATIC, OPEN_SOURCE, False, CRITICAL,
          'GPL-2.0-only is incompatible with GPL-3.0-only. They cannot be combined without '
          'an "or later" clause.'),
    _rule("GPL-2.0-or-later", "GPL-3.0-only", STATIC, OPEN_SOURCE, True, LOW,
          "GPL-2.0-or-later can be upgraded to GPL-3.0, making the combination possible."),
    # Any project license
    _rule(WILDCARD, "AGPL-3.0", STATIC, SAAS, False, CRITICAL,
          _AGPL_SAAS_REASON, ref=_AGPL_SECTION_13, basis=_AGPL_SAAS_BASIS),
    _rule(WILDCARD, "AGPL-3.0", DYNAMIC, SAAS, False, CRITICAL,
          _AGPL_SAAS_REASON, ref=_AGPL_SECTION_13, basis=_AGPL_SAAS_BASIS),
    _rule(WILDCARD, "AGPL-3.0", RUNTIME, SAAS, False, CRITICAL,
          _AGPL_SAAS_REASON, ref=_AGPL_SECTION_13, basis=_AGPL_SAAS_BASIS),
    _rule(WILDCARD, "AGPL-3.0", MICROSERVICE, SAAS, False, HIGH,
          "AGPL-3.0 requires source disclosure even in a microservice architecture when "
          "users interact with the service.",
          ref=_AGPL_SECTION_13),
    _rule(WILDCARD, "GPL-3.0", STATIC, SAAS, True, LOW,
          "GPL-3.0 does not require source disclosure for SaaS because no distribution occurs."),
    _rule(WILDCARD, "GPL-2.0", STATIC, PROPRIETARY, False, CRITICAL,
          "GPL-2.0 requires derivative works to be GPL-2.0. Static linking creates an "
          "incompatibility with proprietary distribution.",
          ref="GPL-2.0 Section 2(b) - Derivative Works"),
]


def build_rules(curated: list[CompatibilityRule] | None = None) -> list[CompatibilityRule]:
    """
    Build the rule table, assigning generated ids to rules without one.

    Ids are derived from each rule's key and its 1-based table position,
    so they are stable for an unchanged table.
    """
    rules = []
    for index, rule in enumerate(curated if curated is not None else _CURATED_RULES, start=1):
        if not rule.rule_id:
            rule = replace(
                rule,
                rule_id=generate_rule_id(
                    rule.project_license,
                    rule.dependency_license,
                    rule.linking_model,
                    rule.distribution_model,
                    index,
                ),
            )
        rules.append(rule)
    return rules


BUILTIN_RULES: list[CompatibilityRule] = build_rules()
