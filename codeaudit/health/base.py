"""Score accumulator shared by the health dimension scorers."""

from codeaudit.models import HealthIssue, Severity

MIN_SCORE = 1
MAX_SCORE = 10


def clamp_dimension(score: int) -> int:
    return max(MIN_SCORE, min(MAX_SCORE, score))


class Scorecard:
    """Running score for one health dimension.

    Every matched condition costs points; only the first ``cap`` issues are
    kept so one noisy rule cannot flood the report.
    """

    def __init__(self, baseline: int = MAX_SCORE, cap: int = 5):
        self.score = baseline
        self.cap = cap
        self.issues: list[HealthIssue] = []

    def deduct(self, points: int) -> None:
        self.score -= points

    def add(self, severity: Severity, title: str, description: str) -> None:
        if len(self.issues) < self.cap:
            self.issues.append(HealthIssue(severity=severity, title=title, description=description))

    def report(self, points: int, severity: Severity, title: str, description: str) -> None:
        self.deduct(points)
        self.add(severity, title, description)

    def result(self) -> tuple[int, list[HealthIssue]]:
        return clamp_dimension(self.score), self.issues
