"""Rich console logging helpers.

All log output goes to stderr so stdout stays free for machine-readable
results (GitHub Actions ``key=value`` lines or JSON).
"""

from rich.console import Console

_console: Console | None = None


def get_console() -> Console:
    """Return the shared stderr console.

    Returns
    -------
    Console
        Rich console writing to stderr.

    """
    global _console  # noqa: PLW0603
    if _console is None:
        _console = Console(stderr=True)
    return _console


def log_info(message: str) -> None:
    """Log an informational message."""
    get_console().print(f"[blue]ℹ[/blue] {message}")


def log_success(message: str) -> None:
    """Log a success message."""
    get_console().print(f"[green]✓[/green] {message}")


def log_warning(message: str) -> None:
    """Log a warning message."""
    get_console().print(f"[yellow]⚠[/yellow] {message}")


def log_error(message: str) -> None:
    """Log an error message."""
    get_console().print(f"[red]✗[/red] {message}")


def log_exception() -> None:
    """Log the exception currently being handled with a rich traceback."""
    get_console().print_exception()
