# Perl::Critic report -> SARIF 2.1.0 translation and serialization.
import json
from typing import Dict, List, Optional

from packages.config.settings import Settings
from packages.schema.errors import MappingError
from packages.schema.models import Violation, ViolationReport
from packages.schema.sarif import (
    Level,
    SarifArtifactContent,
    SarifArtifactLocation,
    SarifDocument,
    SarifDriver,
    SarifLocation,
    SarifMessage,
    SarifPhysicalLocation,
    SarifRegion,
    SarifResult,
    SarifRule,
    SarifRun,
    SarifTool,
    VersionControlDetails,
)

# Naive on purpose: suppression/baseline nuance (SARIF 3.27.10) is not modelled.
SEVERITY_LEVELS: Dict[int, Level] = {
    1: "none",
    2: "none",
    3: "note",
    4: "warning",
    5: "error",
}

POLICY_NAMESPACE = "Perl::Critic::Policy::"
FALLBACK_MESSAGE = "Perl::Critic policy violation"


def severity_to_level(severity: int) -> Level:
    try:
        return SEVERITY_LEVELS[severity]
    except (KeyError, TypeError) as exc:
        raise MappingError(severity) from exc


def policy_to_name(policy: str) -> str:
    """Short rule name: `Perl::Critic::Policy::Variables::ProhibitReusedNames` -> `VariablesProhibitReusedNames`."""
    if policy.startswith(POLICY_NAMESPACE) and len(policy) > len(POLICY_NAMESPACE):
        return "".join(policy[len(POLICY_NAMESPACE):].split("::"))
    return policy


def translate(
    report: ViolationReport,
    settings: Optional[Settings] = None,
    provenance: Optional[VersionControlDetails] = None,
) -> SarifDocument:
    """
    Build a SARIF v2.1.0 document with one run.

    Rules are keyed by policy in first-seen order; the first violation for a
    policy names the rule. Every violation yields exactly one result, in input
    order, including severity 1/2 ones which map to level "none".
    """
    settings = settings or Settings()
    rules: Dict[str, SarifRule] = {}
    rule_index: Dict[str, int] = {}
    results: List[SarifResult] = []

    for violation in report.violations:
        if violation.policy not in rules:
            rule_index[violation.policy] = len(rules)
            rules[violation.policy] = _rule(violation, settings)
        results.append(_result(violation, rule_index[violation.policy], settings))

    driver = SarifDriver(
        name=settings.tool_name,
        fullName=settings.tool_full_name,
        version=report.tool_version,
        informationUri=settings.information_uri,
        rules=list(rules.values()),
    )
    if provenance is not None and settings.uri_base_id and provenance.mappedTo is None:
        # Checkout root is what the uriBaseId resolves to.
        provenance = provenance.model_copy(
            update={"mappedTo": SarifArtifactLocation(uri="", uriBaseId=settings.uri_base_id)}
        )

    run = SarifRun(
        tool=SarifTool(driver=driver),
        versionControlProvenance=[provenance] if provenance is not None else None,
        results=results,
    )
    return SarifDocument(runs=[run])


def to_json(document: SarifDocument, indent: Optional[int] = 2) -> str:
    payload = document.model_dump(mode="json", by_alias=True, exclude_none=True)
    return json.dumps(payload, indent=indent, ensure_ascii=False)


def _rule(violation: Violation, settings: Settings) -> SarifRule:
    return SarifRule(
        id=violation.policy,
        name=policy_to_name(violation.policy),
        shortDescription=SarifMessage(text=violation.description or violation.policy),
        fullDescription=SarifMessage(text=violation.explanation) if violation.explanation else None,
        helpUri=settings.help_uri(violation.policy),
    )


def _result(violation: Violation, index: int, settings: Settings) -> SarifResult:
    level = severity_to_level(violation.severity)
    text = violation.description or violation.explanation or FALLBACK_MESSAGE

    region = SarifRegion(
        startLine=violation.line_number,
        startColumn=violation.column_number,
        snippet=SarifArtifactContent(text=violation.source) if violation.source else None,
    )
    location = SarifLocation(
        physicalLocation=SarifPhysicalLocation(
            artifactLocation=SarifArtifactLocation(
                uri=violation.filename,
                uriBaseId=settings.uri_base_id,
            ),
            region=region,
        )
    )

    properties: Dict[str, object] = {"severity": violation.severity}
    if violation.diagnostics:
        properties["diagnostics"] = violation.diagnostics

    return SarifResult(
        ruleId=violation.policy,
        ruleIndex=index,
        level=level,
        message=SarifMessage(text=text),
        locations=[location],
        properties=properties,
    )


__all__ = [
    "FALLBACK_MESSAGE",
    "SEVERITY_LEVELS",
    "policy_to_name",
    "severity_to_level",
    "to_json",
    "translate",
]
