"""Checker registry for codeaudit."""

from codeaudit.checks import critical, high, low, medium
from codeaudit.checks.base import Check
from codeaudit.context import DataFlowContext
from codeaudit.models import Vulnerability

CRITICAL_CHECKS: dict[str, Check] = {
    "hardcoded_secrets": critical.check_hardcoded_secrets,
    "sql_injection": critical.check_sql_injection,
    "command_injection": critical.check_command_injection,
    "path_traversal": critical.check_path_traversal,
    "insecure_deserialization": critical.check_insecure_deserialization,
    "xxe": critical.check_xxe,
    "query_injection": critical.check_query_injection,
}

HIGH_CHECKS: dict[str, Check] = {
    "sensitive_logging": high.check_sensitive_logging,
    "insecure_http": high.check_insecure_http,
    "ssl_bypass": high.check_ssl_bypass,
    "empty_catch": high.check_empty_catch,
    "webview": high.check_webview,
    "debuggable": high.check_debuggable,
    "open_redirect": high.check_open_redirect,
    "broadcast_receiver": high.check_broadcast_receiver,
    "content_provider": high.check_content_provider,
    "pending_intent": high.check_pending_intent,
    "cleartext_traffic": high.check_cleartext_traffic,
    "exported_component": high.check_exported_component,
}

MEDIUM_CHECKS: dict[str, Check] = {
    "weak_crypto": medium.check_weak_crypto,
    "insecure_random": medium.check_insecure_random,
    "shared_prefs_secrets": medium.check_shared_prefs_secrets,
    "hardcoded_ip": medium.check_hardcoded_ip,
    "file_permissions": medium.check_file_permissions,
    "force_unwrap": medium.check_force_unwrap,
    "clipboard": medium.check_clipboard,
    "external_storage": medium.check_external_storage,
    "deeplink": medium.check_deeplink,
    "weak_key_size": medium.check_weak_key_size,
    "hardcoded_iv": medium.check_hardcoded_iv,
}

LOW_CHECKS: dict[str, Check] = {
    "broad_exception": low.check_broad_exception,
    "security_todo": low.check_security_todo,
    "unvalidated_input": low.check_unvalidated_input,
    "obfuscation": low.check_obfuscation,
    "reflection": low.check_reflection,
    "dynamic_loading": low.check_dynamic_loading,
    "backup": low.check_backup,
    "dangerous_permission": low.check_dangerous_permission,
}

ALL_CHECKS: dict[str, Check] = {**CRITICAL_CHECKS, **HIGH_CHECKS, **MEDIUM_CHECKS, **LOW_CHECKS}

TOTAL_CHECKS = len(ALL_CHECKS)


def detect(lines: list[str], context: DataFlowContext) -> list[Vulnerability]:
    """Run every registered checker in tier order and concatenate the findings."""
    findings: list[Vulnerability] = []
    for check in ALL_CHECKS.values():
        findings.extend(check(lines, context))
    return findings


__all__ = [
    "ALL_CHECKS",
    "CRITICAL_CHECKS",
    "HIGH_CHECKS",
    "MEDIUM_CHECKS",
    "LOW_CHECKS",
    "TOTAL_CHECKS",
    "detect",
]
