"""SARIF v2.1.0 output formatter for codeaudit findings."""

import json
import re
from datetime import datetime, timezone
from importlib.metadata import PackageNotFoundError, version

from codeaudit.models import ScanResult, Severity, Vulnerability
from codeaudit.rules import RULES_VERSION

SARIF_SCHEMA = "https://raw.githubusercontent.com/oasis-tcs/sarif-spec/main/sarif-2.1/schema/sarif-schema-2.1.0.json"

SEVERITY_TO_SARIF_LEVEL = {
    Severity.CRITICAL: "error",
    Severity.HIGH: "error",
    Severity.MEDIUM: "warning",
    Severity.LOW: "note",
}

# CWE taxonomy reference
CWE_TAXONOMY = {
    "name": "CWE",
    "organization": "MITRE",
    "shortDescription": {"text": "Common Weakness Enumeration"},
    "informationUri": "https://cwe.mitre.org/",
}

_NON_SLUG = re.compile(r"[^a-z0-9]+")


def _tool_version() -> str:
    try:
        return version("codeaudit")
    except PackageNotFoundError:
        return "0.0.0"


def rule_id(finding: Vulnerability) -> str:
    """Stable rule ID such as ``injection/sql-injection-risk``."""
    category = _NON_SLUG.sub("-", finding.category.lower()).strip("-")
    title = _NON_SLUG.sub("-", finding.title.lower()).strip("-")
    return f"{category}/{title}"


def _location(source: str, finding: Vulnerability) -> dict:
    return {
        "physicalLocation": {
            "artifactLocation": {"uri": source},
            "region": {"startLine": finding.line or 1},
        }
    }


def _rule(finding: Vulnerability) -> dict:
    rule = {
        "id": rule_id(finding),
        "shortDescription": {"text": finding.title},
        "fullDescription": {"text": finding.description},
        "defaultConfiguration": {"level": SEVERITY_TO_SARIF_LEVEL[finding.severity]},
        "help": {
            "text": finding.fix,
            "markdown": f"**Remediation:** {finding.fix}",
        },
        "properties": {
            "tags": ["security", *([finding.cwe] if finding.cwe else [])],
            "security-severity": f"{finding.cvss_score:.1f}",
        },
    }
    if finding.cwe:
        rule["relationships"] = [
            {
                "target": {"id": finding.cwe, "toolComponent": {"name": "CWE"}},
                "kinds": ["superset"],
            }
        ]
    return rule


def render_sarif(result: ScanResult, source: str, min_severity: Severity = Severity.LOW) -> str:
    """Render a scan result as SARIF v2.1.0 JSON; ``source`` becomes the artifact URI."""
    findings = [f for f in result.vulnerabilities if f.severity >= min_severity]

    # Collect unique rules
    rules_map: dict[str, dict] = {}
    for f in findings:
        rules_map.setdefault(rule_id(f), _rule(f))

    sarif_results = []
    for f in findings:
        sarif_result = {
            "ruleId": rule_id(f),
            "level": SEVERITY_TO_SARIF_LEVEL[f.severity],
            "message": {"text": f.description},
            "locations": [_location(source, f)],
            "properties": {
                "confidence": f.confidence.value,
                "owasp": f.owasp,
                "cvssVector": f.cvss_vector,
            },
        }
        if f.cwe:
            sarif_result["taxa"] = [{"id": f.cwe, "toolComponent": {"name": "CWE"}}]
        sarif_results.append(sarif_result)

    # Collect CWE taxa
    cwe_taxa = []
    seen_cwes = set()
    for f in findings:
        if f.cwe and f.cwe not in seen_cwes:
            seen_cwes.add(f.cwe)
            cwe_taxa.append({"id": f.cwe, "shortDescription": {"text": f.cwe}})

    sarif = {
        "$schema": SARIF_SCHEMA,
        "version": "2.1.0",
        "runs": [
            {
                "tool": {
                    "driver": {
                        "name": "codeaudit",
                        "version": _tool_version(),
                        "properties": {"rulesVersion": RULES_VERSION},
                        "rules": list(rules_map.values()),
                    }
                },
                "results": sarif_results,
                "taxonomies": [{**CWE_TAXONOMY, "taxa": cwe_taxa}] if cwe_taxa else [],
                "invocations": [
                    {
                        "executionSuccessful": True,
                        "endTimeUtc": datetime.now(timezone.utc).isoformat(),
                    }
                ],
            }
        ],
    }

    return json.dumps(sarif, indent=2)
