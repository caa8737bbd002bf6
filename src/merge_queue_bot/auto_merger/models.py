"""Data models for the merge queue."""

import re
from dataclasses import dataclass
from enum import Enum
from typing import Any

IDENTIFIER_PATTERN = re.compile(r"[a-z0-9-]+")


class ConfigurationError(ValueError):
    """Raised when the queue configuration is missing or invalid."""


class GatewayError(RuntimeError):
    """Raised when a GitHub API call fails.

    Parameters
    ----------
    operation : str
        Name of the gateway operation that failed.
    message : str
        Error details (gh stderr or GraphQL error messages).

    """

    def __init__(self, operation: str, message: str):
        """Initialize gateway error."""
        super().__init__(f"{operation} failed: {message}")
        self.operation = operation
        self.message = message


class MergeError(GatewayError):
    """Raised when GitHub rejects a merge mutation."""


class Action(Enum):
    """Action chosen for the lead pull request in one cycle."""

    UPDATE_BRANCH = "update_branch"
    MERGE = "merge"
    WAIT = "wait"
    WAIT_CHECKS_NOT_SUCCESSFUL = "wait_checks_not_successful"
    NO_OP = "no_op"


class CycleOutcome(Enum):
    """Result of a single queue cycle."""

    FETCH_FAILED = "fetch_failed"
    NO_PULL_REQUESTS = "no_pull_requests"
    NO_CANDIDATE = "no_candidate"
    COMPARISON_UNAVAILABLE = "comparison_unavailable"
    UPDATE_REQUESTED = "update_requested"
    MERGE_REQUESTED = "merge_requested"
    WAITING_ON_CHECKS = "waiting_on_checks"
    WAITING_CHECKS_NOT_SUCCESSFUL = "waiting_checks_not_successful"
    NO_ACTION = "no_action"
    MERGE_FAILED = "merge_failed"


@dataclass(frozen=True)
class PullRequestSummary:
    """Snapshot of one open pull request.

    Attributes
    ----------
    id : str
        GraphQL node ID.
    number : int
        Pull request number.
    title : str
        Pull request title.
    author : str or None
        Author login, None if GitHub did not report one (e.g. deleted user).
    head_ref : str
        Head branch name.
    head_oid : str
        Head commit SHA.
    base_ref : str
        Base branch name.
    review_decision : str or None
        "APPROVED", "CHANGES_REQUESTED", "REVIEW_REQUIRED" or None.
    check_state : str or None
        Status check rollup of the head commit: "SUCCESS", "PENDING",
        "FAILURE", "ERROR", "EXPECTED" or None.
    is_cross_repository : bool
        True if the head branch lives in a fork.

    """

    id: str
    number: int
    title: str
    author: str | None
    head_ref: str
    head_oid: str
    base_ref: str
    review_decision: str | None = None
    check_state: str | None = None
    is_cross_repository: bool = False

    @classmethod
    def from_graphql(cls, node: dict[str, Any]) -> "PullRequestSummary":
        """Build a summary from a ``PullRequest`` GraphQL node.

        Parameters
        ----------
        node : dict[str, Any]
            Node from ``repository.pullRequests.nodes``.

        Returns
        -------
        PullRequestSummary
            Parsed summary.

        """
        author = node.get("author") or {}

        check_state = None
        commits = (node.get("commits") or {}).get("nodes") or []
        if commits:
            commit = (commits[-1] or {}).get("commit") or {}
            rollup = commit.get("statusCheckRollup") or {}
            check_state = rollup.get("state")

        return cls(
            id=node["id"],
            number=int(node["number"]),
            title=node.get("title", ""),
            author=author.get("login"),
            head_ref=node["headRefName"],
            head_oid=node.get("headRefOid", ""),
            base_ref=node["baseRefName"],
            review_decision=node.get("reviewDecision"),
            check_state=check_state,
            is_cross_repository=bool(node.get("isCrossRepository")),
        )


@dataclass(frozen=True)
class ComparisonResult:
    """Relationship between a head branch and its base branch.

    Attributes
    ----------
    behind_by : int
        Commits on base not yet in head.
    ahead_by : int
        Commits on head not yet in base.
    status : str
        "IDENTICAL", "AHEAD", "BEHIND" or "DIVERGED".

    """

    behind_by: int
    ahead_by: int
    status: str

    @classmethod
    def from_graphql(cls, comparison: dict[str, Any]) -> "ComparisonResult":
        """Build a comparison from a ``Comparison`` GraphQL object."""
        return cls(
            behind_by=int(comparison.get("behindBy") or 0),
            ahead_by=int(comparison.get("aheadBy") or 0),
            status=comparison.get("status") or "UNKNOWN",
        )


@dataclass(frozen=True)
class SelectionCriteria:
    """Queue configuration, captured once at startup.

    Attributes
    ----------
    owner : str
        Repository owner.
    repo : str
        Repository name.
    author : str or None
        Only consider pull requests opened by this login.
    auto_merge : bool
        Squash-merge the lead pull request once it is up to date.
    require_all_checks : bool
        Only merge when the check rollup is SUCCESS.

    """

    owner: str
    repo: str
    author: str | None = None
    auto_merge: bool = False
    require_all_checks: bool = False

    @property
    def repository(self) -> str:
        """Return the repository in owner/repo format."""
        return f"{self.owner}/{self.repo}"

    def validate(self) -> "SelectionCriteria":
        """Check owner, repo and author against the identifier pattern.

        Returns
        -------
        SelectionCriteria
            This instance, for chaining.

        Raises
        ------
        ConfigurationError
            If any identifier is missing or invalid.

        """
        for name, value, required in (
            ("owner", self.owner, True),
            ("repo", self.repo, True),
            ("author", self.author, False),
        ):
            if value is None and not required:
                continue
            if not value or not IDENTIFIER_PATTERN.fullmatch(value):
                raise ConfigurationError(
                    f"Invalid {name} {value!r}: use lowercase letters, "
                    "digits and hyphens only"
                )
        return self


@dataclass
class CycleResult:
    """Outcome of one queue cycle, with the context it was decided on."""

    outcome: CycleOutcome
    pull_request: PullRequestSummary | None = None
    comparison: ComparisonResult | None = None
    message: str = ""
    action: Action | None = None

    def to_dict(self) -> dict[str, Any]:
        """Serialize for JSON output."""
        pr = self.pull_request
        comparison = self.comparison
        return {
            "outcome": self.outcome.value,
            "action": self.action.value if self.action else None,
            "pr_number": pr.number if pr else None,
            "pr_title": pr.title if pr else None,
            "head_ref": pr.head_ref if pr else None,
            "base_ref": pr.base_ref if pr else None,
            "behind_by": comparison.behind_by if comparison else None,
            "ahead_by": comparison.ahead_by if comparison else None,
            "message": self.message,
        }
