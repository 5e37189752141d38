"""Data models for security scan findings, compliance issues and health results."""

from dataclasses import dataclass, field
from enum import Enum


class Severity(Enum):
    CRITICAL = "CRITICAL"
    HIGH = "HIGH"
    MEDIUM = "MEDIUM"
    LOW = "LOW"

    @property
    def rank(self) -> int:
        return {
            Severity.CRITICAL: 4,
            Severity.HIGH: 3,
            Severity.MEDIUM: 2,
            Severity.LOW: 1,
        }[self]

    @property
    def ordinal(self) -> int:
        """Sort position, Critical first."""
        return 4 - self.rank

    def __ge__(self, other: "Severity") -> bool:
        return self.rank >= other.rank

    def __gt__(self, other: "Severity") -> bool:
        return self.rank > other.rank

    def __le__(self, other: "Severity") -> bool:
        return self.rank <= other.rank

    def __lt__(self, other: "Severity") -> bool:
        return self.rank < other.rank


class Confidence(Enum):
    HIGH = "HIGH"
    MEDIUM = "MEDIUM"
    LOW = "LOW"


@dataclass(frozen=True)
class Vulnerability:
    severity: Severity
    category: str
    title: str
    description: str
    line: int | None
    snippet: str | None
    fix: str
    confidence: Confidence = Confidence.HIGH
    owasp: str = ""
    cwe: str = ""
    cvss_score: float = 0.0
    cvss_vector: str = ""

    def to_dict(self) -> dict:
        return {
            "severity": self.severity.value,
            "category": self.category,
            "title": self.title,
            "description": self.description,
            "line": self.line,
            "snippet": self.snippet,
            "fix": self.fix,
            "confidence": self.confidence.value,
            "owasp": self.owasp,
            "cwe": self.cwe,
            "cvss_score": self.cvss_score,
            "cvss_vector": self.cvss_vector,
        }


class ComplianceFramework(Enum):
    GDPR = "GDPR"
    HIPAA = "HIPAA"
    PCI_DSS = "PCI_DSS"
    SOC2 = "SOC2"
    COPPA = "COPPA"

    @property
    def label(self) -> str:
        return {
            ComplianceFramework.GDPR: "GDPR",
            ComplianceFramework.HIPAA: "HIPAA",
            ComplianceFramework.PCI_DSS: "PCI DSS",
            ComplianceFramework.SOC2: "SOC 2",
            ComplianceFramework.COPPA: "COPPA",
        }[self]


@dataclass(frozen=True)
class ComplianceIssue:
    framework: ComplianceFramework
    article: str
    title: str
    description: str
    line: int | None
    fix: str

    def to_dict(self) -> dict:
        return {
            "framework": self.framework.value,
            "article": self.article,
            "title": self.title,
            "description": self.description,
            "line": self.line,
            "fix": self.fix,
        }


@dataclass(frozen=True)
class ComplianceResult:
    issues: tuple[ComplianceIssue, ...]
    gdpr_compliant: bool
    hipaa_compliant: bool
    pci_compliant: bool
    summary: str

    def to_dict(self) -> dict:
        return {
            "issues": [i.to_dict() for i in self.issues],
            "gdpr_compliant": self.gdpr_compliant,
            "hipaa_compliant": self.hipaa_compliant,
            "pci_compliant": self.pci_compliant,
            "summary": self.summary,
        }


@dataclass(frozen=True)
class ScanResult:
    grade: str
    score: int
    vulnerabilities: tuple[Vulnerability, ...]
    summary: str
    critical_count: int = 0
    high_count: int = 0
    medium_count: int = 0
    low_count: int = 0
    # Wall-clock time varies between runs, so it never takes part in equality.
    duration_ms: float = field(default=0.0, compare=False)
    owasp_coverage: tuple[str, ...] = ()
    total_checks: int = 0
    compliance: ComplianceResult | None = None

    def to_dict(self) -> dict:
        return {
            "grade": self.grade,
            "score": self.score,
            "summary": self.summary,
            "vulnerabilities": [v.to_dict() for v in self.vulnerabilities],
            "counts": {
                "critical": self.critical_count,
                "high": self.high_count,
                "medium": self.medium_count,
                "low": self.low_count,
            },
            "duration_ms": self.duration_ms,
            "owasp_coverage": list(self.owasp_coverage),
            "total_checks": self.total_checks,
            "compliance": self.compliance.to_dict() if self.compliance else None,
        }


@dataclass(frozen=True)
class HealthIssue:
    severity: Severity
    title: str
    description: str

    def to_dict(self) -> dict:
        return {
            "severity": self.severity.value,
            "title": self.title,
            "description": self.description,
        }


@dataclass(frozen=True)
class CodeMetrics:
    total_lines: int = 0
    code_lines: int = 0
    comment_lines: int = 0
    blank_lines: int = 0
    function_count: int = 0
    class_count: int = 0
    avg_function_length: int = 0
    max_function_length: int = 0
    max_nesting_depth: int = 0
    cyclomatic_complexity: int = 1
    val_count: int = 0
    var_count: int = 0
    comment_percentage: int = 0
    import_count: int = 0
    longest_line: int = 0
    todo_count: int = 0

    def to_dict(self) -> dict:
        return {
            "total_lines": self.total_lines,
            "code_lines": self.code_lines,
            "comment_lines": self.comment_lines,
            "blank_lines": self.blank_lines,
            "function_count": self.function_count,
            "class_count": self.class_count,
            "avg_function_length": self.avg_function_length,
            "max_function_length": self.max_function_length,
            "max_nesting_depth": self.max_nesting_depth,
            "cyclomatic_complexity": self.cyclomatic_complexity,
            "val_count": self.val_count,
            "var_count": self.var_count,
            "comment_percentage": self.comment_percentage,
            "import_count": self.import_count,
            "longest_line": self.longest_line,
            "todo_count": self.todo_count,
        }


@dataclass(frozen=True)
class CodeHealthResult:
    overall_score: int
    bug_risk: int
    performance: int
    security: int
    readability: int
    complexity: int
    issues: tuple[HealthIssue, ...]
    summary: str
    metrics: CodeMetrics
    best_practices: tuple[str, ...] = ()

    @property
    def dimensions(self) -> dict[str, int]:
        return {
            "Bug Risk": self.bug_risk,
            "Performance": self.performance,
            "Security": self.security,
            "Readability": self.readability,
            "Complexity": self.complexity,
        }

    def to_dict(self) -> dict:
        return {
            "overall_score": self.overall_score,
            "bug_risk": self.bug_risk,
            "performance": self.performance,
            "security": self.security,
            "readability": self.readability,
            "complexity": self.complexity,
            "issues": [i.to_dict() for i in self.issues],
            "summary": self.summary,
            "metrics": self.metrics.to_dict(),
            "best_practices": list(self.best_practices),
        }
