"""Auto-merger: keep the lead pull request current and merge it."""

from .credentials import resolve_token, token_from_env
from .decider import decide
from .gateway import GitHubGateway, PlatformGateway
from .models import (
    Action,
    ComparisonResult,
    ConfigurationError,
    CycleOutcome,
    CycleResult,
    GatewayError,
    MergeError,
    PullRequestSummary,
    SelectionCriteria,
)
from .queue_manager import run_cycle
from .scheduler import run_forever
from .selector import select_candidate

__all__ = [
    "Action",
    "ComparisonResult",
    "ConfigurationError",
    "CycleOutcome",
    "CycleResult",
    "GatewayError",
    "GitHubGateway",
    "MergeError",
    "PlatformGateway",
    "PullRequestSummary",
    "SelectionCriteria",
    "decide",
    "resolve_token",
    "run_cycle",
    "run_forever",
    "select_candidate",
    "token_from_env",
]
