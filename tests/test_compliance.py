"""Tests for the regulatory compliance checks."""

import textwrap

from codeaudit.compliance import check_compliance
from codeaudit.models import ComplianceFramework


def _titles(result, framework):
    return [i.title for i in result.issues if i.framework == framework]


class TestCleanCode:
    def test_no_issues(self, clean_kotlin):
        result = check_compliance(clean_kotlin, "Kotlin")
        assert result.issues == ()
        assert result.gdpr_compliant
        assert result.hipaa_compliant
        assert result.pci_compliant
        assert result.summary == "✅ No compliance issues detected."

    def test_empty_input(self):
        result = check_compliance("")
        assert result.issues == ()


class TestGdpr:
    def test_personal_data_logged(self):
        result = check_compliance('Log.d(TAG, "email: " + user.email)\n')
        titles = _titles(result, ComplianceFramework.GDPR)
        assert "Personal Data Logged" in titles
        assert not result.gdpr_compliant

    def test_missing_deletion_and_consent(self):
        result = check_compliance("val email = form.email\n")
        titles = _titles(result, ComplianceFramework.GDPR)
        assert "No Data Deletion Mechanism" in titles
        assert "No Consent Mechanism" in titles

    def test_deletion_and_consent_present(self):
        code = textwrap.dedent("""\
            val email = form.email
            if (hasConsent) store(email)
            fun erase() = store.delete(email)
        """)
        titles = _titles(check_compliance(code), ComplianceFramework.GDPR)
        assert "No Data Deletion Mechanism" not in titles
        assert "No Consent Mechanism" not in titles

    def test_unencrypted_storage(self):
        result = check_compliance('prefs.edit().putString("email", email).apply()\n')
        assert "Unencrypted Personal Data Storage" in _titles(result, ComplianceFramework.GDPR)


class TestHipaa:
    def test_gated_on_health_keywords(self, clean_kotlin):
        assert _titles(check_compliance(clean_kotlin), ComplianceFramework.HIPAA) == []

    def test_patient_code_without_safeguards(self):
        result = check_compliance("val patient = repo.load(id)\n")
        titles = _titles(result, ComplianceFramework.HIPAA)
        assert "PHI Without Encryption" in titles
        assert "No Audit Trail" in titles
        assert not result.hipaa_compliant

    def test_phi_in_logs_has_line(self):
        result = check_compliance("val x = 1\nprintln(diagnosis)\n")
        logged = [i for i in result.issues if i.title == "PHI in Logs"]
        assert len(logged) == 1
        assert logged[0].line == 2


class TestPciDss:
    def test_card_data_logged(self):
        result = check_compliance("println(cardNumber)\n")
        assert "Card Data in Logs" in _titles(result, ComplianceFramework.PCI_DSS)
        assert not result.pci_compliant


class TestSoc2:
    def test_hardcoded_credentials(self):
        result = check_compliance('val token = "abcdef123"\n')
        assert "Hardcoded Credentials" in _titles(result, ComplianceFramework.SOC2)

    def test_long_file_without_error_handling(self):
        code = "\n".join(f"val v{i} = {i}" for i in range(25))
        assert "Insufficient Error Handling" in _titles(check_compliance(code), ComplianceFramework.SOC2)

    def test_short_file_not_flagged(self):
        code = "\n".join(f"val v{i} = {i}" for i in range(5))
        assert _titles(check_compliance(code), ComplianceFramework.SOC2) == []


class TestCoppa:
    def test_child_context_with_tracking(self):
        result = check_compliance("val child = current()\nanalytics.track(child)\n")
        titles = _titles(result, ComplianceFramework.COPPA)
        assert "No Age Verification" in titles
        assert "Tracking in Child Context" in titles


class TestSummary:
    def test_summary_lists_frameworks(self):
        result = check_compliance("val patient = repo.load(id)\n")
        assert result.summary.startswith(f"⚠️ {len(result.issues)} compliance issues across ")
        assert "HIPAA" in result.summary
