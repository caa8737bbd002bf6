"""CLI command for a single queue cycle."""

import sys

import click
from rich.console import Console
from rich.markup import escape

from ...auto_merger import CycleResult, GatewayError, run_cycle
from ...utils.logging import log_error
from ..options import build_queue, queue_options


def _output_result(result: CycleResult, output_format: str) -> None:
    """Write the cycle result to stdout in the requested format."""
    data = result.to_dict()
    stdout_console = Console(stderr=False, highlight=False)

    if output_format == "json":
        stdout_console.print_json(data=data)
        return

    # github format - output for GITHUB_OUTPUT
    for key, value in data.items():
        if key == "message":
            continue
        stdout_console.print(
            f"{key.replace('_', '-')}={'' if value is None else value}",
            markup=False,
            soft_wrap=True,
        )


@click.command()
@queue_options
@click.option(
    "--output-format",
    type=click.Choice(["json", "github"], case_sensitive=False),
    default="github",
    help="Output format: 'github' for GitHub Actions variables, 'json' for structured output",
)
def cycle(
    owner: str,
    repo: str,
    author: str | None,
    auto_merge: bool,
    require_all_checks: bool,
    token: str | None,
    output_format: str,
) -> None:
    r"""Run one queue cycle and report its outcome.

    Intended for external schedulers such as cron or a GitHub Actions
    ``schedule`` trigger.

    Examples:
      \b
      # Inside a workflow, using the workflow token
      merge-queue-bot cycle --owner my-org --repo my-repo --auto-merge

    """
    criteria, gateway = build_queue(
        owner, repo, author, auto_merge, require_all_checks, token
    )

    try:
        result = run_cycle(criteria, gateway)
    except GatewayError as e:
        log_error(f"Cycle failed: {escape(str(e))}")
        sys.exit(1)

    _output_result(result, output_format.lower())
