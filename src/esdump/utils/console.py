"""
Console output for humans.

Everything goes to stderr: stdout may be carrying the NDJSON export.
Messages are printed literally; index names and server error reasons
routinely contain ``[`` which rich would otherwise read as markup.
"""

from typing import List

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

console = Console(stderr=True)


def _say(symbol: str, message: str, style: str) -> None:
    text = f"{symbol} {escape(message)}" if symbol else escape(message)
    console.print(text, style=style)


def success(message: str):
    """Display success message"""
    _say("✔", message, "bold green")


def error(message: str):
    """Display error message"""
    _say("✖", message, "bold red")


def warning(message: str):
    """Display warning message"""
    _say("⚠ ", message, "bold yellow")


def info(message: str):
    _say("", message, "cyan")


def is_interactive() -> bool:
    """True when stderr is a terminal, i.e. progress bars are worth drawing"""
    return console.is_terminal


def create_table(title: str, columns: List[str]) -> Table:
    """Create a rich table with a bold header row"""
    table = Table(title=title, show_header=True, header_style="bold magenta")
    for column in columns:
        table.add_column(column)
    return table


def display_panel(content: str, title: str, style: str = "blue"):
    """Display pre-escaped content in a bordered panel"""
    console.print(Panel(content, title=escape(title), border_style=style))
