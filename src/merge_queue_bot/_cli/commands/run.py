"""CLI command for the long-running queue loop."""

from functools import partial

import click

from ...auto_merger import run_cycle, run_forever
from ...auto_merger.scheduler import DEFAULT_INTERVAL_SECONDS
from ...utils.logging import log_info
from ..options import build_queue, queue_options


@click.command()
@queue_options
@click.option(
    "--interval",
    type=click.FloatRange(min=0),
    default=DEFAULT_INTERVAL_SECONDS,
    show_default=True,
    envvar="MERGE_QUEUE_INTERVAL",
    help="Seconds to wait after a cycle before starting the next",
)
@click.option(
    "--max-cycles",
    type=click.IntRange(min=1),
    default=None,
    help="Stop after this many cycles (default: run until interrupted)",
)
def run(
    owner: str,
    repo: str,
    author: str | None,
    auto_merge: bool,
    require_all_checks: bool,
    token: str | None,
    interval: float,
    max_cycles: int | None,
) -> None:
    r"""Keep the lead pull request up to date, one cycle every interval.

    Examples:
      \b
      # Update the oldest approved PR every 5 minutes
      merge-queue-bot run --owner my-org --repo my-repo

      \b
      # Also squash-merge it once every check is green
      merge-queue-bot run --owner my-org --repo my-repo \\
        --auto-merge --require-all-checks

    """
    criteria, gateway = build_queue(
        owner, repo, author, auto_merge, require_all_checks, token
    )

    log_info(
        f"Starting merge queue for {criteria.repository} "
        f"(auto-merge: {criteria.auto_merge}, "
        f"require all checks: {criteria.require_all_checks})"
    )
    run_forever(
        partial(run_cycle, criteria, gateway),
        interval_seconds=interval,
        max_cycles=max_cycles,
    )
