"""Console sink shared by progress output and report rendering."""

from rich.console import Console

RULE_WIDTH = 50


def emit(console: Console, text: str = "", style: str | None = None) -> None:
    """Write one line verbatim.

    Agent-provided text may contain square brackets or colons, so markup,
    emoji codes and highlighting are disabled and long lines are not wrapped.
    """
    console.print(text, style=style, markup=False, emoji=False, highlight=False, soft_wrap=True)


def banner(console: Console, title: str, *details: str) -> None:
    """Write a ruled banner block."""
    emit(console)
    emit(console, "=" * RULE_WIDTH)
    emit(console, title, style="bold")
    for detail in details:
        emit(console, detail)
    emit(console, "=" * RULE_WIDTH)
    emit(console)
