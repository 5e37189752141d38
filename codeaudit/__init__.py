"""codeaudit - rule-based security and code health analysis for source text."""

from codeaudit.health import analyze_health
from codeaudit.scanner import scan_security

__all__ = ["analyze_health", "scan_security"]
