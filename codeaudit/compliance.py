"""Regulatory compliance checks (GDPR, HIPAA, PCI DSS, SOC 2, COPPA).

Each framework checker is a pure function of the source lines and returns its
own issues. HIPAA, PCI DSS and COPPA only run when the code mentions their
domain (health data, card data, children) so generic code stays quiet.

Keyword tables are matched against lowercased source, so they are written in
lowercase.
"""

import re

from codeaudit.models import ComplianceFramework, ComplianceIssue, ComplianceResult
from codeaudit.text import nearby_lines, split_lines

PERSONAL_DATA_KEYWORDS = (
    "email", "phone", "address", "name", "dateofbirth", "date_of_birth",
    "dob", "ssn", "social_security", "nationality", "gender", "age",
    "location", "latitude", "longitude", "ip_address", "ipaddress",
    "device_id", "deviceid", "advertising_id", "advertisingid",
)
DELETION_MARKERS = ("delete", "remove", "clear", "erase", "purge", "wipe")
CONSENT_MARKERS = ("consent", "agree", "opt_in", "optin", "permission", "gdpr")
THIRD_PARTY_SDKS = (
    "firebase", "analytics", "facebook", "google", "amplitude",
    "mixpanel", "segment", "crashlytics", "appsflyer", "adjust",
)
KV_STORE_WRITES = ("putString", "putInt", "putLong")

PHI_KEYWORDS = (
    "patient", "diagnosis", "medical", "health", "prescription",
    "medication", "treatment", "insurance", "claim", "provider",
    "hospital", "doctor", "nurse", "symptom", "condition",
    "blood", "heart_rate", "heartrate", "blood_pressure", "bloodpressure",
    "weight", "height", "bmi", "allergy", "vaccine", "immunization",
)
ENCRYPTION_MARKERS = ("encrypt", "cipher", "aes")
AUDIT_MARKERS = ("audit", "access_log", "accesslog", "activity_log")

CARD_DATA_KEYWORDS = (
    "card_number", "cardnumber", "credit_card", "creditcard",
    "cvv", "cvc", "card_verification", "expiry", "expiration",
    "pan", "primary_account", "cardholder", "card_holder",
    "stripe", "payment", "billing", "merchant",
)
LOCAL_STORAGE_MARKERS = ("putstring", "sharedpreferences", "sqlite", "room")

ERROR_HANDLER_MARKERS = ("onerror", "on_error", "handleerror", "handle_error")
CREDENTIAL_LITERAL = re.compile(r'(?:password|secret|key|token)\s*=\s*"[^"]{5,}"', re.IGNORECASE)

CHILD_INDICATORS = (
    "child", "kid", "minor", "underage", "under_13", "under13",
    "parental", "parent_consent", "age_gate", "age_check",
    "young", "teen", "student", "school",
)
AGE_CHECK_MARKERS = ("check", "verify", "gate", ">=", "> 12", "> 13")
TRACKING_MARKERS = ("analytics", "track", "advertising", "ad_id")

LOG_MARKERS = ("Log.", "println", "Timber.", "logger.", "System.out")


def is_log_statement(line: str) -> bool:
    return any(marker in line for marker in LOG_MARKERS)


def _first_keyword(text: str, keywords: tuple[str, ...]) -> str | None:
    return next((k for k in keywords if k in text), None)


def _logged_keywords(lines: list[str], keywords: tuple[str, ...]):
    """Yield (index, keyword) for log statements mentioning one of ``keywords``."""
    for i, line in enumerate(lines):
        if not is_log_statement(line):
            continue
        found = _first_keyword(line.lower(), keywords)
        if found is not None:
            yield i, found


def check_gdpr(lines: list[str], code: str) -> list[ComplianceIssue]:
    issues = []
    gdpr = ComplianceFramework.GDPR

    for i, found in _logged_keywords(lines, PERSONAL_DATA_KEYWORDS):
        issues.append(ComplianceIssue(
            gdpr, "Art. 5(1)(f) - Integrity & Confidentiality", "Personal Data Logged",
            f"Personal data field '{found}' found in log statement. Logs are not encrypted.",
            i + 1, "Remove personal data from logs. Use anonymized identifiers.",
        ))

    for i, line in enumerate(lines):
        if not any(w in line for w in KV_STORE_WRITES):
            continue
        found = _first_keyword(line.lower(), PERSONAL_DATA_KEYWORDS)
        if found is None:
            continue
        if any("encrypt" in near.lower() for near in nearby_lines(lines, i, 5)):
            continue
        issues.append(ComplianceIssue(
            gdpr, "Art. 32 - Security of Processing", "Unencrypted Personal Data Storage",
            f"Personal data '{found}' stored without encryption.",
            i + 1, "Use EncryptedSharedPreferences or encrypt data before storage.",
        ))

    has_personal_data = _first_keyword(code, PERSONAL_DATA_KEYWORDS) is not None
    if not has_personal_data:
        return issues

    if "http://" in code:
        issues.append(ComplianceIssue(
            gdpr, "Art. 32 - Security of Processing", "Personal Data Over Unencrypted Channel",
            "Code contains personal data fields and insecure HTTP. Data may be transmitted unencrypted.",
            None, "Use HTTPS for all connections handling personal data.",
        ))
    if _first_keyword(code, DELETION_MARKERS) is None:
        issues.append(ComplianceIssue(
            gdpr, "Art. 17 - Right to Erasure", "No Data Deletion Mechanism",
            "Code processes personal data but has no visible deletion/erasure functionality.",
            None, "Implement data deletion for all personal data. Users have the right to erasure.",
        ))
    if _first_keyword(code, CONSENT_MARKERS) is None:
        issues.append(ComplianceIssue(
            gdpr, "Art. 6/7 - Lawful Basis & Consent", "No Consent Mechanism",
            "Code processes personal data without visible consent/opt-in mechanism.",
            None, "Implement consent collection before processing personal data.",
        ))
    if _first_keyword(code, THIRD_PARTY_SDKS) is not None:
        issues.append(ComplianceIssue(
            gdpr, "Art. 28 - Processor Requirements", "Third-Party Data Processing",
            "Personal data may be shared with third-party SDKs without proper data processing agreements.",
            None, "Ensure Data Processing Agreements (DPAs) with all third parties. Document data flows.",
        ))
    return issues


def check_hipaa(lines: list[str], code: str) -> list[ComplianceIssue]:
    if _first_keyword(code, PHI_KEYWORDS) is None:
        return []

    hipaa = ComplianceFramework.HIPAA
    issues = [
        ComplianceIssue(
            hipaa, "§164.312(a)(1) - Access Control", "PHI in Logs",
            f"Protected health information '{found}' found in log statement.",
            i + 1, "Never log PHI. Use de-identified data for debugging.",
        )
        for i, found in _logged_keywords(lines, PHI_KEYWORDS)
    ]
    if _first_keyword(code, ENCRYPTION_MARKERS) is None:
        issues.append(ComplianceIssue(
            hipaa, "§164.312(a)(2)(iv) - Encryption", "PHI Without Encryption",
            "Code handles health data but no encryption mechanism is visible.",
            None, "All PHI must be encrypted at rest and in transit. Use AES-256 encryption.",
        ))
    if "http://" in code:
        issues.append(ComplianceIssue(
            hipaa, "§164.312(e)(1) - Transmission Security", "PHI Over Insecure Channel",
            "Health data may be transmitted over unencrypted HTTP.",
            None, "Use HTTPS/TLS for all PHI transmission. Implement certificate pinning.",
        ))
    if _first_keyword(code, AUDIT_MARKERS) is None:
        issues.append(ComplianceIssue(
            hipaa, "§164.312(b) - Audit Controls", "No Audit Trail",
            "No audit logging for PHI access. HIPAA requires tracking who accesses health data.",
            None, "Implement audit logging for all PHI read/write/delete operations.",
        ))
    return issues


def check_pci_dss(lines: list[str], code: str) -> list[ComplianceIssue]:
    if _first_keyword(code, CARD_DATA_KEYWORDS) is None:
        return []

    pci = ComplianceFramework.PCI_DSS
    issues = [
        ComplianceIssue(
            pci, "Req. 3.4 - Render PAN Unreadable", "Card Data in Logs",
            f"Payment card data '{found}' found in logs. PCI DSS prohibits logging card details.",
            i + 1, "Never log card numbers, CVV, or expiry dates. Mask if needed: ****1234.",
        )
        for i, found in _logged_keywords(lines, CARD_DATA_KEYWORDS)
    ]
    if _first_keyword(code, LOCAL_STORAGE_MARKERS) is not None:
        issues.append(ComplianceIssue(
            pci, "Req. 3.1 - Minimize Data Storage", "Card Data Stored Locally",
            "Payment card data appears to be stored on device. Minimize card data retention.",
            None, "Never store full card numbers or CVV. Use tokenization via payment processor.",
        ))
    if "http://" in code:
        issues.append(ComplianceIssue(
            pci, "Req. 4.1 - Encrypt Transmission", "Card Data Over Insecure Channel",
            "Payment data may be sent over HTTP. PCI DSS requires encrypted transmission.",
            None, "Use TLS 1.2+ for all payment data transmission.",
        ))
    return issues


def check_soc2(lines: list[str], code: str) -> list[ComplianceIssue]:
    issues = []
    soc2 = ComplianceFramework.SOC2
    has_try_catch = "try" in code and "catch" in code
    has_handler = _first_keyword(code, ERROR_HANDLER_MARKERS) is not None
    if not has_try_catch and not has_handler and len(lines) > 20:
        issues.append(ComplianceIssue(
            soc2, "CC7.2 - System Monitoring", "Insufficient Error Handling",
            "No error handling visible. SOC 2 requires proper error detection and monitoring.",
            None, "Implement try-catch blocks. Log errors for monitoring.",
        ))
    if CREDENTIAL_LITERAL.search(code):
        issues.append(ComplianceIssue(
            soc2, "CC6.1 - Logical Access Security", "Hardcoded Credentials",
            "Credentials in source code. SOC 2 requires proper credential management.",
            None, "Use a secrets manager or encrypted configuration. Rotate credentials regularly.",
        ))
    return issues


def check_coppa(lines: list[str], code: str) -> list[ComplianceIssue]:
    if _first_keyword(code, CHILD_INDICATORS) is None:
        return []

    issues = []
    coppa = ComplianceFramework.COPPA
    has_age_check = "age" in code and _first_keyword(code, AGE_CHECK_MARKERS) is not None
    if not has_age_check:
        issues.append(ComplianceIssue(
            coppa, "16 CFR §312.3 - Parental Consent", "No Age Verification",
            "Code targets children but has no age verification mechanism.",
            None, "Implement age gate before collecting any data from users under 13.",
        ))
    if _first_keyword(code, TRACKING_MARKERS) is not None:
        issues.append(ComplianceIssue(
            coppa, "16 CFR §312.5 - Data Collection", "Tracking in Child Context",
            "Analytics/tracking detected in code that references children.",
            None, "Disable tracking and advertising for users under 13. No behavioral advertising.",
        ))
    return issues


FRAMEWORK_CHECKS = {
    ComplianceFramework.GDPR: check_gdpr,
    ComplianceFramework.HIPAA: check_hipaa,
    ComplianceFramework.PCI_DSS: check_pci_dss,
    ComplianceFramework.SOC2: check_soc2,
    ComplianceFramework.COPPA: check_coppa,
}


def build_summary(issues: list[ComplianceIssue]) -> str:
    if not issues:
        return "✅ No compliance issues detected."
    frameworks = dict.fromkeys(issue.framework for issue in issues)
    names = ", ".join(f.label for f in frameworks)
    return f"⚠️ {len(issues)} compliance issues across {names}."


def check_compliance(code: str, language: str = "") -> ComplianceResult:
    """Run every framework checker over ``code``.

    A framework is compliant when it produced no issues. ``language`` is
    accepted for symmetry with the scanners; the rules are language-agnostic.
    """
    lines = split_lines(code)
    code = code.lower()
    issues: list[ComplianceIssue] = []
    for check in FRAMEWORK_CHECKS.values():
        issues.extend(check(lines, code))

    def compliant(framework: ComplianceFramework) -> bool:
        return not any(issue.framework == framework for issue in issues)

    return ComplianceResult(
        issues=tuple(issues),
        gdpr_compliant=compliant(ComplianceFramework.GDPR),
        hipaa_compliant=compliant(ComplianceFramework.HIPAA),
        pci_compliant=compliant(ComplianceFramework.PCI_DSS),
        summary=build_summary(issues),
    )
