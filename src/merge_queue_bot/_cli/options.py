"""Options shared by the queue commands."""

import sys
from collections.abc import Callable
from typing import Any

import click
from rich.markup import escape

from ..auto_merger import GitHubGateway, SelectionCriteria, resolve_token
from ..auto_merger.models import IDENTIFIER_PATTERN, ConfigurationError
from ..utils.logging import log_error


def validate_identifier(
    ctx: click.Context, param: click.Parameter, value: str | None
) -> str | None:
    """Reject owner/repo/author values outside ``[a-z0-9-]``."""
    if value is None:
        return None
    if not IDENTIFIER_PATTERN.fullmatch(value):
        raise click.BadParameter(
            f"{value!r} must contain only lowercase letters, digits and hyphens"
        )
    return value


def queue_options(func: Callable[..., Any]) -> Callable[..., Any]:
    """Attach the repository, filter and merge options to a command."""
    decorators = [
        click.option(
            "--owner",
            required=True,
            envvar="MERGE_QUEUE_OWNER",
            callback=validate_identifier,
            help="Repository owner (env: MERGE_QUEUE_OWNER)",
        ),
        click.option(
            "--repo",
            required=True,
            envvar="MERGE_QUEUE_REPO",
            callback=validate_identifier,
            help="Repository name (env: MERGE_QUEUE_REPO)",
        ),
        click.option(
            "--author",
            required=False,
            envvar="MERGE_QUEUE_AUTHOR",
            callback=validate_identifier,
            help="Only queue pull requests opened by this login (env: MERGE_QUEUE_AUTHOR)",
        ),
        click.option(
            "--auto-merge",
            is_flag=True,
            default=False,
            envvar="MERGE_QUEUE_AUTO_MERGE",
            help="Squash-merge the lead pull request once it is up to date",
        ),
        click.option(
            "--require-all-checks",
            is_flag=True,
            default=False,
            envvar="MERGE_QUEUE_REQUIRE_ALL_CHECKS",
            help="Only merge when every check succeeded",
        ),
        click.option(
            "--token",
            required=False,
            help="GitHub token (default: GH_TOKEN, then GITHUB_TOKEN)",
        ),
    ]
    for decorator in reversed(decorators):
        func = decorator(func)
    return func


def build_queue(
    owner: str,
    repo: str,
    author: str | None,
    auto_merge: bool,
    require_all_checks: bool,
    token: str | None,
) -> tuple[SelectionCriteria, GitHubGateway]:
    """Build the criteria and an authenticated gateway, exiting on bad config.

    Returns
    -------
    tuple[SelectionCriteria, GitHubGateway]
        Validated criteria and gateway.

    """
    try:
        criteria = SelectionCriteria(
            owner=owner,
            repo=repo,
            author=author,
            auto_merge=auto_merge,
            require_all_checks=require_all_checks,
        ).validate()
        gateway = GitHubGateway(gh_token=resolve_token(token))
    except ConfigurationError as e:
        log_error(f"Configuration error: {escape(str(e))}")
        sys.exit(1)
    return criteria, gateway
