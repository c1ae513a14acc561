"""Rich-based terminal output for the CLI."""

from __future__ import annotations

from typing import List, Optional

from rich.console import Console
from rich.panel import Panel
from rich.syntax import Syntax
from rich.table import Table
from rich.text import Text

DEFAULT_SYNTAX_THEME = "monokai"


class ConsoleUI:
    """Wrap the Rich console so every command renders the same way."""

    def __init__(self, *, theme: str = "default", console: Optional[Console] = None) -> None:
        self.console = console or Console()
        self.theme = theme

    def print_header(self, title: str) -> None:
        self.console.rule(Text(title, style="bold magenta"))

    def info(self, message: str) -> None:
        self.console.print(Text(message, style="green"))

    def warn(self, message: str) -> None:
        self.console.print(Text(message, style="yellow"))

    def error(self, message: str) -> None:
        self.console.print(Text(message, style="bold red"))

    def code(self, source: str, *, language: str = "javascript", title: Optional[str] = None) -> None:
        theme = DEFAULT_SYNTAX_THEME if self.theme == "default" else self.theme
        syntax = Syntax(source, language, theme=theme, line_numbers=False)
        self.console.print(Panel(syntax, title=title, border_style="magenta"))

    def table(self, title: str, columns: List[str], rows: List[List[str]]) -> Table:
        table = Table(title=title)
        for column in columns:
            table.add_column(column)
        for row in rows:
            table.add_row(*row)
        return table


__all__ = ["ConsoleUI"]
