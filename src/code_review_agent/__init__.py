"""Code Review Agent - agent-driven codebase review with a severity-ranked report."""

__version__ = "0.1.0"
