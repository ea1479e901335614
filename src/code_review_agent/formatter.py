"""Report rendering for validated review results."""

from typing import Any

from rich.console import Console

from code_review_agent.console import banner, emit
from code_review_agent.models.review import ReviewIssue, ReviewResult, Severity

SEVERITY_ICONS = {
    Severity.CRITICAL: "🔴",
    Severity.HIGH: "🟠",
    Severity.MEDIUM: "🟡",
    Severity.LOW: "🟢",
}

SEVERITY_STYLES = {
    Severity.CRITICAL: "bold red",
    Severity.HIGH: "bold dark_orange",
    Severity.MEDIUM: "bold yellow",
    Severity.LOW: "bold green",
}


def format_score(score: int | float) -> str:
    """Format the overall score as ``<score>/100``.

    The value is shown as reported; it is never clamped to 0-100.
    """
    if isinstance(score, float) and score.is_integer():
        score = int(score)
    return f"{score}/100"


def non_empty_buckets(result: ReviewResult) -> list[tuple[Severity, list[ReviewIssue]]]:
    """Severity buckets in priority order, skipping empty ones."""
    return [(s, issues) for s, issues in result.issues_by_severity.items() if issues]


class ReportRenderer:
    """Writes a severity-bucketed report to the console."""

    def __init__(self, console: Console) -> None:
        self.console = console

    def render(self, result: ReviewResult) -> None:
        """Render the header, then each non-empty bucket from critical to low."""
        banner(self.console, "📊 REVIEW RESULTS")

        emit(self.console, f"Score: {format_score(result.overall_score)}", style="bold")
        emit(self.console, f"Issues Found: {result.issue_count}")
        emit(self.console)
        emit(self.console, f"Summary: {result.summary}")
        emit(self.console)

        for severity, issues in non_empty_buckets(result):
            emit(self.console)
            emit(
                self.console,
                f"{SEVERITY_ICONS[severity]} {severity.value.upper()} ({len(issues)})",
                style=SEVERITY_STYLES[severity],
            )
            emit(self.console, "-" * 30)
            for issue in issues:
                self._render_issue(issue)

    def _render_issue(self, issue: ReviewIssue) -> None:
        emit(self.console)
        emit(self.console, f"[{issue.category}] {issue.location}")
        emit(self.console, f"  {issue.description}")
        if issue.suggestion:
            emit(self.console, f"  💡 {issue.suggestion}", style="cyan")


def format_review_as_json(result: ReviewResult) -> dict[str, Any]:
    """Format the result as a JSON-serializable dict in the payload's shape."""
    return result.to_dict()


def format_review_as_markdown(result: ReviewResult) -> str:
    """Format the result as a markdown document with the same bucketing."""
    lines = [
        "# Code Review Results",
        "",
        f"**Score:** {format_score(result.overall_score)}",
        f"**Issues Found:** {result.issue_count}",
        "",
        f"**Summary:** {result.summary}",
    ]

    for severity, issues in non_empty_buckets(result):
        lines.extend(["", f"## {SEVERITY_ICONS[severity]} {severity.value.upper()} ({len(issues)})", ""])
        for issue in issues:
            lines.append(f"- **[{issue.category}]** `{issue.location}`")
            lines.append(f"  {issue.description}")
            if issue.suggestion:
                lines.append(f"  💡 {issue.suggestion}")

    return "\n".join(lines) + "\n"
