"""Baseline/diff mode - compare the current scan against a saved JSON report."""

import hashlib
import json
from dataclasses import dataclass
from pathlib import Path

from codeaudit.models import ScanResult, Severity, Vulnerability


def fingerprint(title: str, line: int | None) -> str:
    """Stable fingerprint for a finding, keyed like deduplication on (title, line)."""
    raw = f"{title}:{line if line is not None else '-'}"
    return hashlib.sha256(raw.encode()).hexdigest()[:16]


@dataclass
class DiffResult:
    new_findings: list[Vulnerability]
    fixed_findings: list[dict]
    unchanged_findings: list[Vulnerability]


def load_baseline(path: str) -> dict[str, dict]:
    """Load a ``codeaudit scan --format json`` report as fingerprint -> finding dict."""
    try:
        data = json.loads(Path(path).read_text())
    except json.JSONDecodeError as exc:
        raise ValueError(f"Baseline {path} is not valid JSON: {exc}") from exc
    if not isinstance(data, dict):
        raise ValueError(f"Baseline {path} must be a JSON object")

    baseline = {}
    for f in data.get("result", {}).get("vulnerabilities", []):
        baseline[fingerprint(f.get("title", ""), f.get("line"))] = f
    return baseline


def compute_diff(result: ScanResult, baseline: dict[str, dict]) -> DiffResult:
    """Split current findings into new and unchanged, and list baseline findings now gone."""
    current = {fingerprint(f.title, f.line): f for f in result.vulnerabilities}

    return DiffResult(
        new_findings=[f for fp, f in current.items() if fp not in baseline],
        fixed_findings=[f for fp, f in baseline.items() if fp not in current],
        unchanged_findings=[f for fp, f in current.items() if fp in baseline],
    )


def has_new_findings(diff: DiffResult, min_severity: Severity) -> bool:
    """Check if there are new findings at or above the given severity."""
    return any(f.severity >= min_severity for f in diff.new_findings)
