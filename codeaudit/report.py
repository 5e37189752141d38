"""Report generation - rich terminal tables and JSON output."""

from __future__ import annotations

import json
from datetime import datetime
from typing import TYPE_CHECKING

from rich.console import Console
from rich.table import Table

from codeaudit.fixes import fix_for_health_issue
from codeaudit.models import CodeHealthResult, CodeMetrics, ScanResult, Severity
from codeaudit.owasp import group_by_owasp

if TYPE_CHECKING:
    from codeaudit.baseline import DiffResult

SCHEMA = "codeaudit-v1"

SEVERITY_COLORS = {
    Severity.CRITICAL: "bold red",
    Severity.HIGH: "red",
    Severity.MEDIUM: "yellow",
    Severity.LOW: "cyan",
}

GRADE_COLORS = {"A": "bold green", "B": "green", "C": "yellow", "D": "red", "F": "bold red"}


def _score_color(score: int, scale: int = 100) -> str:
    ratio = score / scale
    if ratio >= 0.8:
        return "green"
    if ratio >= 0.6:
        return "yellow"
    return "red"


def render_table(result: ScanResult, min_severity: Severity = Severity.LOW) -> None:
    console = Console()
    findings = [f for f in result.vulnerabilities if f.severity >= min_severity]

    grade_color = GRADE_COLORS[result.grade]
    console.print(f"\n[bold]Security grade:[/] [{grade_color}]{result.grade}[/] ({result.score}/100)")
    console.print(result.summary)

    if not findings:
        console.print("\n[bold green]No findings above the severity threshold.[/]")
        _print_summary(console, result, findings)
        return

    table = Table(title="codeaudit Findings", show_lines=True)
    table.add_column("Severity", width=10)
    table.add_column("Line", justify="right", width=6)
    table.add_column("Title", width=34)
    table.add_column("Category", width=16)
    table.add_column("CWE", width=9)
    table.add_column("CVSS", justify="right", width=5)

    for f in findings:
        color = SEVERITY_COLORS[f.severity]
        table.add_row(
            f"[{color}]{f.severity.value}[/]",
            str(f.line) if f.line is not None else "-",
            f.title,
            f.category,
            f.cwe,
            f"{f.cvss_score:.1f}",
        )

    console.print()
    console.print(table)
    _print_summary(console, result, findings)


def _print_summary(console: Console, result: ScanResult, findings: list) -> None:
    counts = {s: 0 for s in Severity}
    for f in findings:
        counts[f.severity] += 1

    parts = []
    for sev in Severity:
        if counts[sev] > 0:
            color = SEVERITY_COLORS[sev]
            parts.append(f"[{color}]{sev.value}: {counts[sev]}[/]")

    console.print(f"\n[bold]Summary:[/] {len(findings)} finding(s) | {' | '.join(parts) if parts else 'Clean'}")
    console.print(f"Checks run: {result.total_checks} | Duration: {result.duration_ms:.1f}ms\n")


def render_compliance(result: ScanResult) -> None:
    """Render compliance issues grouped in one table, with per-framework flags."""
    console = Console()
    compliance = result.compliance
    if compliance is None:
        return

    flags = {
        "GDPR": compliance.gdpr_compliant,
        "HIPAA": compliance.hipaa_compliant,
        "PCI DSS": compliance.pci_compliant,
    }
    status = " | ".join(
        f"[green]{name} ✓[/]" if ok else f"[red]{name} ✗[/]" for name, ok in flags.items()
    )
    console.print(f"\n[bold]Compliance:[/] {status}")
    console.print(compliance.summary)

    if not compliance.issues:
        console.print()
        return

    table = Table(show_lines=False)
    table.add_column("Framework", width=9)
    table.add_column("Article", width=18)
    table.add_column("Title", width=40)
    table.add_column("Line", justify="right", width=6)
    for issue in compliance.issues:
        table.add_row(
            issue.framework.label,
            issue.article,
            issue.title,
            str(issue.line) if issue.line is not None else "-",
        )
    console.print(table)
    console.print()


def render_json(
    result: ScanResult, source: str, language: str, min_severity: Severity = Severity.LOW,
) -> str:
    filtered = [f for f in result.vulnerabilities if f.severity >= min_severity]
    result_dict = result.to_dict()
    result_dict["vulnerabilities"] = [f.to_dict() for f in filtered]

    total_by_severity = {s.value: 0 for s in Severity}
    for f in filtered:
        total_by_severity[f.severity.value] += 1

    output = {
        "$schema": SCHEMA,
        "generated_at": datetime.now().isoformat(),
        "source": source,
        "language": language,
        "result": result_dict,
        "summary": {
            "total": len(filtered),
            "by_severity": total_by_severity,
        },
    }
    return json.dumps(output, indent=2, ensure_ascii=False)


def render_owasp(result: ScanResult, min_severity: Severity = Severity.LOW) -> None:
    """Render findings grouped by OWASP Top 10 2021 and Mobile Top 10 categories."""
    console = Console()
    groups = group_by_owasp(list(result.vulnerabilities), min_severity)

    if not groups:
        console.print("\n[bold green]No findings mapped to OWASP categories.[/]\n")
        return

    console.print("\n[bold]OWASP Report[/]\n")

    for label in sorted(groups):
        findings = groups[label]
        console.print(f"[bold]{label}[/] ({len(findings)} finding(s))")

        table = Table(show_lines=False, box=None, padding=(0, 2))
        table.add_column("Severity", width=10)
        table.add_column("Title", width=50)
        table.add_column("Line", width=6)

        for f in findings:
            color = SEVERITY_COLORS[f.severity]
            table.add_row(
                f"[{color}]{f.severity.value}[/]",
                f.title,
                str(f.line) if f.line is not None else "-",
            )
        console.print(table)
        console.print()


def render_diff_summary(diff: DiffResult) -> None:
    """Render a colored summary of baseline diff results."""
    console = Console()
    console.print("\n[bold]Baseline Comparison:[/]")
    console.print(f"  [bold red]New findings:[/]       {len(diff.new_findings)}")
    console.print(f"  [bold green]Fixed findings:[/]     {len(diff.fixed_findings)}")
    console.print(f"  [dim]Unchanged findings:[/]  {len(diff.unchanged_findings)}")

    if diff.new_findings:
        console.print("\n[bold red]New findings:[/]")
        for f in diff.new_findings:
            color = SEVERITY_COLORS[f.severity]
            console.print(f"  [{color}]{f.severity.value}[/] {f.title} @ line {f.line}")

    if diff.fixed_findings:
        console.print("\n[bold green]Fixed findings:[/]")
        for f in diff.fixed_findings:
            console.print(f"  [green]{f.get('title', 'unknown')}[/] @ line {f.get('line', '?')}")

    console.print()


def render_health(health: CodeHealthResult, show_fixes: bool = False) -> None:
    console = Console()
    color = _score_color(health.overall_score)
    console.print(f"\n[bold]Code health:[/] [{color}]{health.overall_score}/100[/]")
    console.print(health.summary)

    dimensions = Table(title="Dimensions", show_header=True)
    dimensions.add_column("Dimension", width=12)
    dimensions.add_column("Score", justify="right", width=6)
    for name, score in health.dimensions.items():
        dimensions.add_row(name, f"[{_score_color(score, 10)}]{score}/10[/]")
    console.print()
    console.print(dimensions)

    if health.issues:
        issues = Table(title="Issues", show_lines=True)
        issues.add_column("Severity", width=10)
        issues.add_column("Title", width=34)
        issues.add_column("Description", width=60)
        for issue in health.issues:
            issues.add_row(
                f"[{SEVERITY_COLORS[issue.severity]}]{issue.severity.value}[/]",
                issue.title,
                issue.description,
            )
        console.print(issues)

    if show_fixes:
        for issue in health.issues:
            snippet = fix_for_health_issue(issue.title)
            if snippet:
                console.print(f"\n[bold]Fix for {issue.title}:[/]")
                console.print(snippet, markup=False, highlight=False)

    if health.best_practices:
        console.print("\n[bold green]Best practices:[/]")
        for practice in health.best_practices:
            console.print(f"  [green]✓[/] {practice}")

    render_metrics(health.metrics)


def render_metrics(metrics: CodeMetrics) -> None:
    console = Console()
    table = Table(title="Metrics", show_header=True)
    table.add_column("Metric", width=24)
    table.add_column("Value", justify="right", width=8)
    for name, value in metrics.to_dict().items():
        table.add_row(name.replace("_", " ").capitalize(), str(value))
    console.print()
    console.print(table)
    console.print()


def render_health_json(health: CodeHealthResult, source: str, language: str) -> str:
    output = {
        "$schema": SCHEMA,
        "generated_at": datetime.now().isoformat(),
        "source": source,
        "language": language,
        "health": health.to_dict(),
    }
    return json.dumps(output, indent=2, ensure_ascii=False)
