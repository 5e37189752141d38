"""Click-based CLI interface for codeaudit."""

import json
import logging
import sys
from pathlib import Path

import click
from rich.logging import RichHandler

from codeaudit.baseline import compute_diff, has_new_findings, load_baseline
from codeaudit.config import Config, load_config
from codeaudit.formatters.sarif import render_sarif
from codeaudit.health import analyze_health
from codeaudit.metrics import calculate_metrics
from codeaudit.models import Severity
from codeaudit.report import (
    render_compliance,
    render_diff_summary,
    render_health,
    render_health_json,
    render_json,
    render_metrics,
    render_owasp,
    render_table,
)
from codeaudit.scanner import scan_security
from codeaudit.text import looks_like_code

SEVERITY_CHOICES = [s.value for s in Severity]
DEFAULT_FAIL_UNDER = 60
STDIN_SOURCE = "stdin"

EXTENSION_LANGUAGES = {
    ".kt": "Kotlin",
    ".kts": "Kotlin",
    ".java": "Java",
    ".xml": "XML",
    ".py": "Python",
    ".js": "JavaScript",
    ".ts": "TypeScript",
    ".swift": "Swift",
    ".go": "Go",
    ".rb": "Ruby",
    ".php": "PHP",
    ".cs": "C#",
}


def _load_config(ctx: click.Context) -> Config:
    try:
        return load_config(ctx.obj.get("config_path"), project_root=str(Path.cwd()))
    except (FileNotFoundError, ValueError) as exc:
        raise click.ClickException(str(exc)) from exc


def _read_source(path: str, config: Config) -> tuple[str, str]:
    """Return ``(code, source name)`` for a file path or ``-`` for stdin."""
    if path == "-":
        code = click.get_text_stream("stdin").read()
        source = STDIN_SOURCE
    else:
        code = Path(path).read_text(encoding="utf-8", errors="replace")
        source = path

    if len(code) > config.max_input_chars:
        raise click.ClickException(
            f"Input is {len(code)} characters; the limit is {config.max_input_chars} (max_input_chars)."
        )
    if not looks_like_code(code):
        click.echo("Warning: input does not look like source code; results may not be meaningful.", err=True)
    return code, source


def _language_for(path: str, language: str | None, config: Config) -> str:
    if language:
        return language
    return EXTENSION_LANGUAGES.get(Path(path).suffix.lower(), config.language)


def _emit(text_out: str, output: str | None) -> None:
    if output:
        Path(output).write_text(text_out)
        click.echo(f"Report written to {output}")
    else:
        click.echo(text_out)


@click.group()
@click.version_option(package_name="codeaudit")
@click.option("--config", "config_path", type=click.Path(), default=None,
              help="Path to .codeaudit.yml config file.")
@click.option("--verbose", "-v", is_flag=True, help="Log engine diagnostics to stderr.")
@click.pass_context
def cli(ctx, config_path, verbose):
    """codeaudit - rule-based security and code health analysis."""
    ctx.ensure_object(dict)
    ctx.obj["config_path"] = config_path
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(message)s",
            handlers=[RichHandler(show_path=False)],
        )


@cli.command()
@click.argument("path", type=click.Path(exists=True, dir_okay=False, allow_dash=True))
@click.option("--language", "-l", type=str, default=None, help="Language label (default: from extension or config).")
@click.option("--format", "fmt", type=click.Choice(["table", "json", "sarif"]), default="table")
@click.option("--severity", "min_severity", type=click.Choice(SEVERITY_CHOICES), default=None)
@click.option("--output", "-o", type=str, default=None, help="Write JSON report to file.")
@click.option("--exit-code", is_flag=True, help="Exit with code 1 if findings >= severity.")
@click.option("--baseline", type=click.Path(exists=True), default=None, help="Baseline JSON for diff mode.")
@click.option("--compliance/--no-compliance", default=None, help="Show the compliance table.")
@click.option("--owasp", is_flag=True, help="Group findings by OWASP category.")
@click.pass_context
def scan(ctx, path, language, fmt, min_severity, output, exit_code, baseline, compliance, owasp):
    """Scan a source file (or - for stdin) for security vulnerabilities."""
    config = _load_config(ctx)
    code, source = _read_source(path, config)
    language = _language_for(path, language, config)
    sev = Severity(min_severity or config.severity_threshold)
    show_compliance = config.compliance if compliance is None else compliance

    result = scan_security(code, language)

    diff = None
    if baseline:
        try:
            diff = compute_diff(result, load_baseline(baseline))
        except ValueError as exc:
            raise click.ClickException(str(exc)) from exc

    if fmt == "sarif":
        _emit(render_sarif(result, source, min_severity=sev), output)
    elif fmt == "json":
        _emit(render_json(result, source, language, min_severity=sev), output)
    else:
        render_table(result, min_severity=sev)
        if show_compliance:
            render_compliance(result)
        if output:
            Path(output).write_text(render_json(result, source, language, min_severity=sev))
            click.echo(f"JSON report also written to {output}")

    if diff:
        render_diff_summary(diff)

    if owasp:
        render_owasp(result, min_severity=sev)

    if exit_code:
        if diff:
            # With baseline, only fail on NEW findings
            if has_new_findings(diff, sev):
                sys.exit(1)
        elif config.fail_under is not None:
            if result.score < config.fail_under:
                sys.exit(1)
        elif any(f.severity >= sev for f in result.vulnerabilities):
            sys.exit(1)


@cli.command()
@click.argument("path", type=click.Path(exists=True, dir_okay=False, allow_dash=True))
@click.option("--language", "-l", type=str, default=None)
@click.option("--format", "fmt", type=click.Choice(["table", "json"]), default="table")
@click.option("--output", "-o", type=str, default=None)
@click.option("--exit-code", is_flag=True, help="Exit with code 1 if the health score is below fail_under.")
@click.option("--fixes", is_flag=True, help="Show example fixes for reported issues.")
@click.pass_context
def health(ctx, path, language, fmt, output, exit_code, fixes):
    """Score code health across five dimensions."""
    config = _load_config(ctx)
    code, source = _read_source(path, config)
    language = _language_for(path, language, config)

    result = analyze_health(code, language)

    if fmt == "json":
        _emit(render_health_json(result, source, language), output)
    else:
        render_health(result, show_fixes=fixes)
        if output:
            Path(output).write_text(render_health_json(result, source, language))
            click.echo(f"JSON report also written to {output}")

    threshold = config.fail_under if config.fail_under is not None else DEFAULT_FAIL_UNDER
    if exit_code and result.overall_score < threshold:
        sys.exit(1)


@cli.command()
@click.argument("path", type=click.Path(exists=True, dir_okay=False, allow_dash=True))
@click.option("--format", "fmt", type=click.Choice(["table", "json"]), default="table")
@click.pass_context
def metrics(ctx, path, fmt):
    """Print structural code metrics."""
    config = _load_config(ctx)
    code, _ = _read_source(path, config)

    result = calculate_metrics(code)
    if fmt == "json":
        click.echo(json.dumps(result.to_dict(), indent=2))
    else:
        render_metrics(result)
