"""OWASP, CWE and CVSS enrichment for vulnerability findings."""

from dataclasses import replace

from codeaudit.models import Severity, Vulnerability

# OWASP Top 10 2021
OWASP_TOP_10: dict[str, str] = {
    "A01:2021": "Broken Access Control",
    "A02:2021": "Cryptographic Failures",
    "A03:2021": "Injection",
    "A04:2021": "Insecure Design",
    "A05:2021": "Security Misconfiguration",
    "A06:2021": "Vulnerable Components",
    "A07:2021": "Auth & Identity Failures",
    "A08:2021": "Software & Data Integrity",
    "A09:2021": "Logging & Monitoring Failures",
    "A10:2021": "Server-Side Request Forgery",
}

# OWASP Mobile Top 10 2024
OWASP_MOBILE_TOP_10: dict[str, str] = {
    "M01": "Improper Credential Usage",
    "M02": "Inadequate Supply Chain Security",
    "M03": "Insecure Authentication",
    "M04": "Insufficient Input/Output Validation",
    "M05": "Insecure Communication",
    "M06": "Inadequate Privacy Controls",
    "M07": "Insufficient Binary Protections",
    "M08": "Security Misconfiguration",
    "M09": "Insecure Data Storage",
    "M10": "Insufficient Cryptography",
}

SEPARATOR = " | "


def _label(owasp_id: str) -> str:
    name = OWASP_TOP_10.get(owasp_id) or OWASP_MOBILE_TOP_10[owasp_id]
    return f"{owasp_id} {name}"


def _labels(*ids: str) -> str:
    return SEPARATOR.join(_label(i) for i in ids)


A01, A02, A03, A04, A05 = "A01:2021", "A02:2021", "A03:2021", "A04:2021", "A05:2021"
A07, A08, A09 = "A07:2021", "A08:2021", "A09:2021"
M01, M04, M05, M06, M07, M08, M09, M10 = "M01", "M04", "M05", "M06", "M07", "M08", "M09", "M10"

# Category -> ordered (title keywords, OWASP ids, CWE) rules plus the category default.
# The first rule with any keyword contained in the lowercase title wins.
CATEGORY_MAPPINGS: dict[str, dict] = {
    "secrets": {
        "rules": [
            (("api key",), (A02, M01), "CWE-798"),
            (("password",), (A07, M01), "CWE-259"),
            (("token", "secret"), (A02, M01), "CWE-798"),
            (("private key",), (A02, M01), "CWE-321"),
            (("connection string",), (A02, M09), "CWE-798"),
        ],
        "default": ((A02,), "CWE-798"),
    },
    "injection": {
        "rules": [
            (("sql",), (A03, M04), "CWE-89"),
            (("command",), (A03, M04), "CWE-78"),
            (("xpath",), (A03,), "CWE-643"),
            (("path",), (A01, M04), "CWE-22"),
            (("ldap",), (A03,), "CWE-90"),
            (("xxe", "xml"), (A05,), "CWE-611"),
            (("deserialization",), (A08,), "CWE-502"),
            (("header",), (A03,), "CWE-113"),
            (("open redirect",), (A01,), "CWE-601"),
        ],
        "default": ((A03,), "CWE-74"),
    },
    "data leak": {
        "rules": [
            (("log",), (A09, M09), "CWE-532"),
            (("clipboard",), (M09, M06), "CWE-200"),
        ],
        "default": ((A09,), "CWE-200"),
    },
    "transport": {
        "rules": [
            (("http",), (A02, M05), "CWE-319"),
            (("ssl", "tls", "certificate"), (A02, M05), "CWE-295"),
        ],
        "default": ((A02,), "CWE-319"),
    },
    "error handling": {
        "rules": [
            (("empty catch",), (A05,), "CWE-390"),
            (("broad",), (A05,), "CWE-396"),
        ],
        "default": ((A05,), "CWE-755"),
    },
    "webview": {
        "rules": [
            (("javascript interface",), (A05, M08), "CWE-749"),
            (("javascript",), (A05, M08), "CWE-79"),
            (("file access",), (A01, M08), "CWE-200"),
        ],
        "default": ((A05,), "CWE-749"),
    },
    "cryptography": {
        "rules": [
            (("key size", "key length"), (A02, M10), "CWE-326"),
            (("weak",), (A02, M10), "CWE-327"),
            (("random",), (A02, M10), "CWE-330"),
            (("iv", "nonce"), (A02, M10), "CWE-329"),
        ],
        "default": ((A02,), "CWE-327"),
    },
    "storage": {
        "rules": [
            (("sharedpreferences", "shared pref"), (A02, M09), "CWE-312"),
            (("world",), (A01, M09), "CWE-276"),
            (("external storage",), (A01, M09), "CWE-922"),
            (("backup",), (A05, M09), "CWE-312"),
        ],
        "default": ((M09,), "CWE-312"),
    },
    "configuration": {
        "rules": [
            (("debuggable",), (A05, M08), "CWE-489"),
            (("ip",), (A05,), "CWE-200"),
            (("exported",), (A01, M08), "CWE-926"),
            (("backup",), (A05, M08), "CWE-312"),
        ],
        "default": ((A05,), "CWE-16"),
    },
    "input validation": {"rules": [], "default": ((A03, M04), "CWE-20")},
    "null safety": {"rules": [], "default": ((A04,), "CWE-476")},
    "incomplete": {"rules": [], "default": ((A04,), "CWE-1164")},
    "android component": {
        "rules": [
            (("broadcast",), (A01, M08), "CWE-925"),
            (("content provider",), (A01, M08), "CWE-926"),
            (("pending intent", "pendingintent"), (A01, M08), "CWE-927"),
            (("deeplink", "deep link"), (A01, M04), "CWE-939"),
        ],
        "default": ((M08,), "CWE-926"),
    },
    "binary protection": {
        "rules": [
            (("obfuscation", "proguard"), (A05, M07), "CWE-656"),
            (("root", "jailbreak"), (M07,), "CWE-919"),
            (("dynamic", "reflection"), (M07,), "CWE-470"),
        ],
        "default": ((M07,), "CWE-693"),
    },
    "privacy": {"rules": [], "default": ((A01, M06), "CWE-359")},
}

DEFAULT_MAPPING = ((A04,), "CWE-710")

_RCE = "CVSS:3.1/AV:N/AC:L/PR:N/UI:N/S:U/C:H/I:H/A:H"
_NET_READ_WRITE = "CVSS:3.1/AV:N/AC:L/PR:N/UI:N/S:U/C:H/I:H/A:N"
_NET_SCOPE_READ = "CVSS:3.1/AV:N/AC:L/PR:N/UI:N/S:C/C:H/I:N/A:N"
_NET_READ = "CVSS:3.1/AV:N/AC:L/PR:N/UI:N/S:U/C:H/I:N/A:N"
_NET_HARD_READ = "CVSS:3.1/AV:N/AC:H/PR:N/UI:N/S:U/C:H/I:N/A:N"
_NET_USER_SCOPE = "CVSS:3.1/AV:N/AC:L/PR:N/UI:R/S:C/C:L/I:L/A:N"
_LOCAL_READ = "CVSS:3.1/AV:L/AC:L/PR:N/UI:N/S:U/C:H/I:N/A:N"

# Ordered CVSS v3.1 heuristics: title keywords, optional category substring,
# optional severity, base score and vector. The first matching rule wins.
CVSS_RULES: list[dict] = [
    {"keywords": ("sql injection",), "score": 9.8, "vector": _RCE},
    {"keywords": ("command injection",), "score": 9.8, "vector": _RCE},
    {"keywords": ("deserialization",), "severity": Severity.CRITICAL, "score": 9.8, "vector": _RCE},
    {"keywords": ("xxe", "xml external"), "score": 9.1, "vector": _NET_READ_WRITE},
    {"keywords": ("api key", "openai", "aws", "github"), "score": 8.6, "vector": _NET_SCOPE_READ},
    {"keywords": ("private key",), "score": 9.1, "vector": _NET_READ_WRITE},
    {"keywords": ("password",), "category": "secrets", "score": 7.5, "vector": _NET_READ},
    {"keywords": ("connection string",), "score": 8.6, "vector": _NET_SCOPE_READ},
    {"keywords": ("secret", "token"), "score": 7.5, "vector": _NET_READ},
    {"keywords": ("path traversal",), "score": 7.5, "vector": _NET_READ},
    {"keywords": ("ssl", "tls"), "score": 7.4, "vector": "CVSS:3.1/AV:N/AC:H/PR:N/UI:N/S:U/C:H/I:H/A:N"},
    {"keywords": ("cleartext",), "score": 7.5, "vector": _NET_READ},
    {"keywords": ("http",), "category": "transport", "score": 5.9, "vector": _NET_HARD_READ},
    {
        "keywords": ("pending intent", "pendingintent"),
        "score": 7.8,
        "vector": "CVSS:3.1/AV:L/AC:L/PR:N/UI:N/S:U/C:H/I:H/A:N",
    },
    {"keywords": ("broadcast",), "score": 6.5, "vector": _LOCAL_READ},
    {"keywords": ("content provider",), "score": 6.5, "vector": _LOCAL_READ},
    {"keywords": ("javascript",), "category": "webview", "score": 6.1, "vector": _NET_USER_SCOPE},
    {"keywords": ("open redirect",), "score": 6.1, "vector": _NET_USER_SCOPE},
    {
        "keywords": ("log",),
        "category": "leak",
        "score": 5.5,
        "vector": "CVSS:3.1/AV:L/AC:L/PR:L/UI:N/S:U/C:H/I:N/A:N",
    },
    {"keywords": ("empty catch",), "score": 5.3, "vector": "CVSS:3.1/AV:N/AC:H/PR:N/UI:N/S:U/C:N/I:N/A:H"},
    {"keywords": ("debuggable",), "score": 5.5, "vector": _LOCAL_READ},
    {"keywords": ("weak crypto", "md5", "sha1", "des"), "score": 5.3, "vector": _NET_HARD_READ},
    {"keywords": ("random",), "category": "cryptography", "score": 5.3, "vector": _NET_HARD_READ},
    {"keywords": ("key size",), "score": 5.3, "vector": _NET_HARD_READ},
    {"keywords": ("hardcoded iv", "nonce"), "score": 5.3, "vector": _NET_HARD_READ},
    {
        "keywords": ("sharedpreferences", "shared pref"),
        "score": 4.4,
        "vector": "CVSS:3.1/AV:L/AC:L/PR:L/UI:N/S:U/C:H/I:N/A:N",
    },
    {"keywords": ("external storage",), "score": 4.7, "vector": "CVSS:3.1/AV:L/AC:L/PR:N/UI:N/S:U/C:L/I:L/A:N"},
    {"keywords": ("world",), "category": "storage", "score": 5.5, "vector": _LOCAL_READ},
    {"keywords": ("clipboard",), "score": 4.3, "vector": "CVSS:3.1/AV:L/AC:L/PR:N/UI:R/S:U/C:L/I:N/A:N"},
    {"keywords": ("hardcoded ip",), "score": 3.7, "vector": "CVSS:3.1/AV:N/AC:H/PR:N/UI:N/S:U/C:L/I:N/A:N"},
    {
        "keywords": ("deeplink", "deep link"),
        "score": 5.3,
        "vector": "CVSS:3.1/AV:N/AC:L/PR:N/UI:R/S:U/C:L/I:L/A:N",
    },
    {
        "keywords": ("force unwrap", "unsafe cast"),
        "score": 3.7,
        "vector": "CVSS:3.1/AV:L/AC:H/PR:N/UI:N/S:U/C:N/I:N/A:L",
    },
    {
        "keywords": ("broad exception", "overly broad"),
        "score": 3.1,
        "vector": "CVSS:3.1/AV:L/AC:H/PR:L/UI:N/S:U/C:N/I:N/A:L",
    },
    {"keywords": ("todo", "fixme"), "score": 2.0, "vector": "CVSS:3.1/AV:L/AC:H/PR:H/UI:N/S:U/C:L/I:N/A:N"},
    {"keywords": ("unvalidated",), "score": 3.5, "vector": "CVSS:3.1/AV:L/AC:L/PR:N/UI:R/S:U/C:L/I:N/A:N"},
    {"keywords": ("reflection",), "score": 3.1, "vector": "CVSS:3.1/AV:L/AC:H/PR:L/UI:N/S:U/C:L/I:L/A:N"},
    {"keywords": ("dynamic code",), "score": 4.7, "vector": "CVSS:3.1/AV:L/AC:H/PR:N/UI:N/S:U/C:L/I:H/A:N"},
    {"keywords": ("obfuscation", "proguard"), "score": 2.0, "vector": "CVSS:3.1/AV:L/AC:H/PR:H/UI:N/S:U/C:L/I:N/A:N"},
    {"keywords": ("backup",), "score": 2.4, "vector": "CVSS:3.1/AV:L/AC:L/PR:H/UI:N/S:U/C:L/I:N/A:N"},
]

SEVERITY_CVSS: dict[Severity, tuple[float, str]] = {
    Severity.CRITICAL: (9.0, _RCE),
    Severity.HIGH: (7.0, _NET_READ),
    Severity.MEDIUM: (5.0, "CVSS:3.1/AV:L/AC:L/PR:N/UI:N/S:U/C:L/I:L/A:N"),
    Severity.LOW: (3.0, "CVSS:3.1/AV:L/AC:H/PR:L/UI:N/S:U/C:L/I:N/A:N"),
}


def deduplicate(findings: list[Vulnerability]) -> list[Vulnerability]:
    """Drop findings that repeat an earlier (line, title) pair, keeping order."""
    seen: set[tuple[int | None, str]] = set()
    unique = []
    for f in findings:
        key = (f.line, f.title)
        if key not in seen:
            seen.add(key)
            unique.append(f)
    return unique


def get_mapping(category: str, title: str) -> tuple[str, str]:
    """Map a finding's category and title to its OWASP labels and CWE id."""
    lower_title = title.lower()
    table = CATEGORY_MAPPINGS.get(category.lower())
    if table is None:
        ids, cwe = DEFAULT_MAPPING
        return _labels(*ids), cwe
    for keywords, ids, cwe in table["rules"]:
        if any(k in lower_title for k in keywords):
            return _labels(*ids), cwe
    ids, cwe = table["default"]
    return _labels(*ids), cwe


def calculate_cvss(finding: Vulnerability) -> tuple[float, str]:
    """Estimate a CVSS v3.1 base score and vector from the finding's title.

    This is a lookup, not a metric evaluation: the first rule whose keywords,
    category and severity constraints all hold supplies the score. Findings
    matching no rule fall back to a per-severity default.
    """
    lower_title = finding.title.lower()
    lower_cat = finding.category.lower()
    for rule in CVSS_RULES:
        if not any(k in lower_title for k in rule["keywords"]):
            continue
        if "category" in rule and rule["category"] not in lower_cat:
            continue
        if "severity" in rule and finding.severity != rule["severity"]:
            continue
        return rule["score"], rule["vector"]
    return SEVERITY_CVSS[finding.severity]


def enrich(finding: Vulnerability) -> Vulnerability:
    owasp, cwe = get_mapping(finding.category, finding.title)
    score, vector = calculate_cvss(finding)
    return replace(finding, owasp=owasp, cwe=cwe, cvss_score=score, cvss_vector=vector)


def split_owasp(owasp: str) -> list[str]:
    return [part.strip() for part in owasp.split("|") if part.strip()]


def covered_categories(findings: list[Vulnerability]) -> list[str]:
    """Sorted unique OWASP labels referenced by ``findings``."""
    return sorted({label for f in findings for label in split_owasp(f.owasp)})


def group_by_owasp(
    findings: list[Vulnerability], min_severity: Severity = Severity.LOW,
) -> dict[str, list[Vulnerability]]:
    """Group findings under every OWASP label they map to."""
    groups: dict[str, list[Vulnerability]] = {}
    for f in findings:
        if f.severity < min_severity:
            continue
        for label in split_owasp(f.owasp):
            groups.setdefault(label, []).append(f)
    return groups
