"""
Colored console output for pipeline progress.

Markers:
    [+]  success (green)
    [!]  progress / warning (yellow)
    [-]  error (red)
"""

import time

from rich.console import Console
from rich.markup import escape

console = Console(highlight=False, emoji=False, soft_wrap=True)


def success(message: str):
    console.print(f"[green][+][/green] {escape(message)}")


def warning(message: str):
    console.print(f"[yellow][!][/yellow] {escape(message)}")


def error(message: str):
    console.print(f"[red][-] {escape(message)}[/red]")


def plain(message: str = ""):
    console.print(escape(message))


def elapsed_since(start_time: float) -> str:
    """Format seconds elapsed since start_time, e.g. "Elapsed Time: 3.02 seconds"."""
    return f"Elapsed Time: {time.monotonic() - start_time:.2f} seconds"
