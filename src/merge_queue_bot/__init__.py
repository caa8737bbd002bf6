"""Merge Queue Bot - keep the lead pull request current and auto-merge it."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("merge-queue-bot")
except PackageNotFoundError:
    # Package not installed, use fallback
    __version__ = "0.1.0.dev"

from .auto_merger import (
    Action,
    ComparisonResult,
    CycleOutcome,
    CycleResult,
    GitHubGateway,
    PullRequestSummary,
    SelectionCriteria,
    decide,
    run_cycle,
    run_forever,
    select_candidate,
)

__all__ = [
    "Action",
    "ComparisonResult",
    "CycleOutcome",
    "CycleResult",
    "GitHubGateway",
    "PullRequestSummary",
    "SelectionCriteria",
    "decide",
    "run_cycle",
    "run_forever",
    "select_candidate",
    "__version__",
]
