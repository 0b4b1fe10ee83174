"""Rich Console factory and theme for obridge output.

Consoles render to a StringIO buffer, preserving the
``format_result() -> str`` contract. In non-TTY environments (tests,
pipes) Rich automatically disables color codes.
"""

from __future__ import annotations

from io import StringIO

from rich.console import Console
from rich.theme import Theme

BRIDGE_THEME = Theme(
    {
        "ob.ok": "bold green",
        "ob.error": "bold red",
        "ob.warning": "bold yellow",
        "ob.op": "bold cyan",
        "ob.key": "dim",
        "ob.path": "dim",
        "ob.name": "bold",
        "ob.count": "magenta",
        "ob.flag.on": "green",
        "ob.flag.off": "red",
    }
)


def create_console(*, no_color: bool = False, width: int | None = None) -> Console:
    """Create a Console that renders to a StringIO buffer."""
    return Console(
        file=StringIO(),
        theme=BRIDGE_THEME,
        no_color=no_color,
        highlight=False,
        width=width or 120,
    )


def get_output(console: Console) -> str:
    """Extract rendered text from a StringIO-backed Console."""
    assert isinstance(console.file, StringIO)
    return console.file.getvalue()
