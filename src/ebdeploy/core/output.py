"""Terminal output for ebdeploy commands."""

import json
from enum import Enum
from typing import Any

import yaml
from rich.console import Console
from rich.prompt import Confirm
from rich.syntax import Syntax
from rich.table import Table

error_console = Console(stderr=True)


class OutputFormat(str, Enum):
    """Supported output formats."""

    TABLE = "table"
    JSON = "json"
    YAML = "yaml"
    RAW = "raw"


class OutputFormatter:
    """Renders command results and status lines.

    Status lines (info, success) are suppressed in quiet mode; errors always
    go to stderr. Records are flat mappings such as an environment's id and
    CNAME prefix, rendered in the configured format.
    """

    def __init__(
        self,
        format: OutputFormat = OutputFormat.TABLE,
        color: bool = True,
        quiet: bool = False,
    ):
        self.format = format
        self.color = color
        self.quiet = quiet
        self._console = Console(force_terminal=color, no_color=not color, highlight=color)

    def print_info(self, message: str) -> None:
        if not self.quiet:
            self._console.print(f"[blue]ℹ[/blue] {message}")

    def print_success(self, message: str) -> None:
        if not self.quiet:
            self._console.print(f"[green]✓[/green] {message}")

    def print_error(self, message: str) -> None:
        error_console.print(f"[red]Error:[/red] {message}")

    def print_data(self, record: dict[str, Any], title: str | None = None) -> None:
        """Print one record in the configured format."""
        if self.format == OutputFormat.JSON:
            self._print_serialized(json.dumps(record, indent=2, default=str), "json")
        elif self.format == OutputFormat.YAML:
            self._print_serialized(yaml.safe_dump(record, default_flow_style=False, sort_keys=False), "yaml")
        elif self.format == OutputFormat.RAW:
            for key, value in record.items():
                print(f"{key}: {value}")
        else:
            table = Table(title=title, show_header=True, header_style="bold cyan")
            table.add_column("Field", style="dim")
            table.add_column("Value")
            for key, value in record.items():
                table.add_row(str(key), "" if value is None else str(value))
            self._console.print(table)

    def _print_serialized(self, text: str, lexer: str) -> None:
        # Plain print keeps piped output machine-readable
        if self.color:
            self._console.print(Syntax(text, lexer, theme="monokai"))
        else:
            print(text.rstrip("\n"))

    def confirm(self, message: str, default: bool = False) -> bool:
        """Ask a yes/no question; quiet mode answers with the default."""
        if self.quiet:
            return default
        try:
            return Confirm.ask(message, default=default, console=self._console)
        except (EOFError, KeyboardInterrupt):
            return False
