"""Review result models."""

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class Severity(Enum):
    """Severity levels for issues, declared from highest to lowest priority.

    - CRITICAL: Must fix; exploitable security holes or data loss.
    - HIGH: Should fix soon; real bugs or serious risks.
    - MEDIUM: Worth fixing; correctness or maintainability concerns.
    - LOW: Optional polish.
    """

    CRITICAL = "critical"
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class Category(Enum):
    """Categories for review issues."""

    BUG = "bug"
    SECURITY = "security"
    PERFORMANCE = "performance"
    STYLE = "style"


SEVERITY_VALUES = frozenset(s.value for s in Severity)
CATEGORY_VALUES = frozenset(c.value for c in Category)


def _coerce_line(value: Any) -> int | None:
    """Line numbers arrive as JSON numbers; keep integral ones only."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    if isinstance(value, float):
        if not value.is_integer():
            return None
        return int(value)
    return value


def _optional_str(value: Any) -> str | None:
    if value is None:
        return None
    return str(value)


@dataclass(frozen=True)
class ReviewIssue:
    """A single issue reported by the review agent.

    Severity and category are kept as the strings the agent emitted so that
    bucketing is an exact match on what was reported.
    """

    severity: str
    category: str
    file: str
    description: str
    line: int | None = None
    suggestion: str | None = None

    @property
    def location(self) -> str:
        """``file:line`` when a line is known, otherwise just ``file``."""
        if self.line:
            return f"{self.file}:{self.line}"
        return self.file

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> "ReviewIssue":
        """Build an issue from one entry of the structured payload."""
        return cls(
            severity=str(raw.get("severity", "")),
            category=str(raw.get("category", "")),
            file=str(raw.get("file", "")),
            description=str(raw.get("description", "")),
            line=_coerce_line(raw.get("line")),
            suggestion=_optional_str(raw.get("suggestion")),
        )

    def to_dict(self) -> dict[str, Any]:
        """Serialize using the payload's key names, omitting absent optionals."""
        data: dict[str, Any] = {
            "severity": self.severity,
            "category": self.category,
            "file": self.file,
        }
        if self.line is not None:
            data["line"] = self.line
        data["description"] = self.description
        if self.suggestion is not None:
            data["suggestion"] = self.suggestion
        return data


@dataclass(frozen=True)
class ReviewResult:
    """Final validated review output."""

    summary: str
    overall_score: int | float
    issues: tuple[ReviewIssue, ...] = field(default_factory=tuple)

    @property
    def issue_count(self) -> int:
        """Total number of issues."""
        return len(self.issues)

    @property
    def issues_by_severity(self) -> dict[Severity, list[ReviewIssue]]:
        """Partition issues into severity buckets, critical first.

        Membership is an exact match on the severity string and each bucket
        keeps the agent's original relative order.
        """
        buckets: dict[Severity, list[ReviewIssue]] = {s: [] for s in Severity}
        for issue in self.issues:
            if issue.severity in SEVERITY_VALUES:
                buckets[Severity(issue.severity)].append(issue)
        return buckets

    def to_dict(self) -> dict[str, Any]:
        """Serialize back to the structured-output shape."""
        return {
            "issues": [issue.to_dict() for issue in self.issues],
            "summary": self.summary,
            "overallScore": self.overall_score,
        }
