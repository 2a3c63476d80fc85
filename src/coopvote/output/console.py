"""Rich Console factory and theme.

Consoles render into a StringIO buffer so renderers keep a plain
``-> str`` contract. Rich drops color codes when it detects no terminal,
which covers pipes and click's CliRunner.
"""

from __future__ import annotations

from io import StringIO

from rich.console import Console
from rich.theme import Theme

COOP_THEME = Theme(
    {
        "coop.ok": "bold green",
        "coop.error": "bold red",
        "coop.warning": "bold yellow",
        "coop.op": "bold cyan",
        "coop.key": "dim",
        "coop.id": "bold blue",
        "coop.title": "bold",
        "coop.status.open": "green",
        "coop.status.closed": "dim",
        "coop.choice.for": "green",
        "coop.choice.against": "red",
        "coop.choice.abstain": "yellow",
        "coop.outcome.passed": "bold green",
        "coop.outcome.failed": "bold red",
        "coop.outcome.pending": "yellow",
    }
)


def create_console(*, no_color: bool = False, width: int | None = None) -> Console:
    return Console(
        file=StringIO(),
        theme=COOP_THEME,
        no_color=no_color,
        highlight=False,
        width=width or 120,
    )


def get_output(console: Console) -> str:
    """Extract rendered text from a StringIO-backed Console."""
    assert isinstance(console.file, StringIO)
    return console.file.getvalue()


def style_for(kind: str, value: object) -> str:
    """Theme style for a status / choice / outcome value ("" when unknown)."""
    name = f"coop.{kind}.{value}"
    return name if name in COOP_THEME.styles else ""
