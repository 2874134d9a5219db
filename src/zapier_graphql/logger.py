"""Logging for zapier-graphql with CLI output helpers."""

import json
import logging
from pathlib import Path
from typing import Any

from rich.console import Console
from rich.logging import RichHandler
from rich.syntax import Syntax


class ZapierGraphQLLogger(logging.Logger):
    """
    Logger that also renders the generator's CLI output.

    Diagnostics go through the standard levels (debug, info, warning, error). Results of a
    command (written files, generated documents, field listings) go through the console
    helpers below, which bypass the level filter.
    """

    def __init__(self, name: str, level: int = logging.INFO) -> None:
        super().__init__(name, level)
        self.console = Console()

        handler = RichHandler(
            console=self.console,
            rich_tracebacks=True,
            show_time=True,
            show_path=False,
        )
        handler.setFormatter(logging.Formatter("%(message)s"))
        self.addHandler(handler)

    def print(self, message: str, markup: bool = True) -> None:
        """
        Print a message to the console.

        Args:
            message: Message to display
            markup: Interpret Rich markup such as "[green]...[/green]"
        """
        self.console.print(message, markup=markup, highlight=markup)

    def success(self, message: str) -> None:
        """Print a green check mark followed by the message."""
        self.print(f"[green]✓[/green] {message}")

    def hint(self, message: str) -> None:
        self.print(f"[dim]{message}[/dim]")

    def written(self, path: Path, project_dir: Path | None = None) -> None:
        """
        Report a file or directory written by the generator.

        Args:
            path: Path that was written
            project_dir: When given, the path is shown relative to it
        """
        shown = path.relative_to(project_dir) if project_dir and path.is_relative_to(project_dir) else path
        self.print(f"  [cyan]-[/cyan] {shown}")

    def rule(self, title: str, style: str = "bold blue") -> None:
        """Print a horizontal separator with a title."""
        self.console.rule(f"[{style}]{title}")

    def key_value(self, key: str, value: Any, key_style: str = "dim") -> None:
        """Print a pair such as "Label: Finds Dragons"."""
        self.console.print(f"[{key_style}]{key}:[/{key_style}] ", end="")
        self.print(str(value), markup=False)

    def code(self, source: str, lexer: str = "graphql") -> None:
        """
        Print generated source with syntax highlighting.

        Args:
            source: Source text, printed verbatim
            lexer: Pygments lexer name, e.g. "graphql" or "javascript"
        """
        self.console.print(Syntax(source, lexer, theme="ansi_dark", word_wrap=True))

    def print_json(self, data: Any) -> None:
        """Print JSON serializable data with syntax highlighting."""
        self.console.print_json(json.dumps(data, indent=2))


def get_logger(name: str = "zapier_graphql") -> ZapierGraphQLLogger:
    """
    Get or create a zapier-graphql logger instance.

    Args:
        name: Logger name (default: "zapier_graphql")

    Returns:
        ZapierGraphQLLogger instance
    """
    logging.setLoggerClass(ZapierGraphQLLogger)
    logger = logging.getLogger(name)
    logging.setLoggerClass(logging.Logger)

    return logger  # type: ignore[return-value]
