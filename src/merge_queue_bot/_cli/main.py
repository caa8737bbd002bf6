"""Main CLI entry point for merge-queue-bot."""

import click
from rich.console import Console
from rich.panel import Panel

from ..utils.logging import get_console
from .commands.cycle import cycle
from .commands.run import run
from .utils import get_version


def print_banner(console: Console) -> None:
    """Print a one-box summary of the tool and its version."""
    console.print(
        Panel.fit(
            "[bold white]Merge Queue Bot[/bold white]\n"
            "[cyan]Updates the oldest approved pull request and merges it[/cyan]",
            subtitle=f"v{get_version()}",
            border_style="cyan",
        )
    )


def show_version(ctx: click.Context, param: click.Parameter, value: bool) -> None:
    """Eager ``--version`` handler."""
    if value and not ctx.resilient_parsing:
        click.echo(f"merge-queue-bot {get_version()}")
        ctx.exit()


@click.group(
    invoke_without_command=True,
    help="Keep the oldest approved pull request up to date and optionally auto-merge it",
)
@click.option(
    "--version",
    is_flag=True,
    callback=show_version,
    expose_value=False,
    is_eager=True,
    help="Show version and exit",
)
@click.option(
    "--no-banner",
    is_flag=True,
    envvar="MERGE_QUEUE_NO_BANNER",
    help="Disable banner (env: MERGE_QUEUE_NO_BANNER)",
)
@click.pass_context
def cli(ctx: click.Context, no_banner: bool) -> None:
    """Merge Queue Bot - a minimal merge queue for GitHub.

    Each cycle picks the oldest approved pull request, brings it up to
    date with its base branch and, with --auto-merge, squash-merges it
    once checks pass.

    Use 'merge-queue-bot COMMAND --help' for command-specific help.
    """
    if ctx.invoked_subcommand is not None:
        return
    if not no_banner:
        print_banner(get_console())
    click.echo(ctx.get_help())


cli.add_command(cycle)
cli.add_command(run)


if __name__ == "__main__":
    cli()
