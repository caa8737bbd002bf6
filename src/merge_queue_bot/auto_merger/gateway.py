"""GitHub GraphQL gateway via gh CLI."""

import json
import os
import subprocess
from typing import Any, Protocol

from ..utils.logging import log_info
from .models import (
    ComparisonResult,
    GatewayError,
    MergeError,
    PullRequestSummary,
)

PAGE_SIZE = 100

LIST_PULL_REQUESTS_QUERY = """
query($owner: String!, $name: String!, $first: Int!, $cursor: String) {
  repository(owner: $owner, name: $name) {
    pullRequests(states: OPEN, first: $first, after: $cursor) {
      nodes {
        id
        number
        title
        author { login }
        headRefName
        headRefOid
        baseRefName
        isCrossRepository
        reviewDecision
        commits(last: 1) {
          nodes {
            commit {
              statusCheckRollup { state }
            }
          }
        }
      }
      pageInfo {
        hasNextPage
        endCursor
      }
    }
  }
}
"""

COMPARE_QUERY = """
query($owner: String!, $name: String!, $base: String!, $head: String!) {
  repository(owner: $owner, name: $name) {
    ref(qualifiedName: $base) {
      compare(headRef: $head) {
        aheadBy
        behindBy
        status
      }
    }
  }
}
"""

UPDATE_BRANCH_MUTATION = """
mutation($pullRequestId: ID!, $method: PullRequestBranchUpdateMethod!) {
  updatePullRequestBranch(
    input: {pullRequestId: $pullRequestId, updateMethod: $method}
  ) {
    pullRequest { number headRefOid }
  }
}
"""

MERGE_MUTATION = """
mutation($pullRequestId: ID!, $method: PullRequestMergeMethod!) {
  mergePullRequest(
    input: {pullRequestId: $pullRequestId, mergeMethod: $method}
  ) {
    pullRequest { number merged }
  }
}
"""


class PlatformGateway(Protocol):
    """Operations the queue needs from the hosting platform."""

    def list_open_pull_requests(
        self, owner: str, repo: str
    ) -> list[PullRequestSummary]: ...

    def compare_branches(
        self, owner: str, repo: str, base: str, head: str
    ) -> ComparisonResult | None: ...

    def request_branch_update(
        self, pull_request_id: str, method: str = "MERGE"
    ) -> None: ...

    def request_merge(self, pull_request_id: str, method: str = "SQUASH") -> None: ...


class GitHubGateway:
    """Query and mutate pull requests through ``gh api graphql``.

    Parameters
    ----------
    gh_token : str
        GitHub token with pull request write access.

    Attributes
    ----------
    gh_token : str
        GitHub token passed to gh as GH_TOKEN.

    """

    def __init__(self, gh_token: str):
        """Initialize gateway.

        Parameters
        ----------
        gh_token : str
            GitHub token with pull request write access.

        """
        self.gh_token = gh_token

    def _run_gh_command(self, cmd: list[str]) -> str:
        """Execute gh CLI command.

        Parameters
        ----------
        cmd : list[str]
            Command and arguments to execute.

        Returns
        -------
        str
            Stripped stdout from command.

        Raises
        ------
        subprocess.CalledProcessError
            If command fails.

        """
        env = os.environ.copy()
        env["GH_TOKEN"] = self.gh_token

        result = subprocess.run(
            cmd,
            capture_output=True,
            text=True,
            check=True,
            env=env,
        )
        return result.stdout.strip()

    def _graphql(
        self, operation: str, query: str, variables: dict[str, Any]
    ) -> dict[str, Any]:
        """Run a GraphQL document and return its ``data`` object.

        String variables are passed with ``-f`` and everything else with
        ``-F`` so gh sends integers as integers. None values are omitted.

        Raises
        ------
        GatewayError
            If gh fails, prints invalid JSON, or GitHub reports errors.

        """
        cmd = ["gh", "api", "graphql", "-f", f"query={query}"]
        for key, value in variables.items():
            if value is None:
                continue
            flag = "-f" if isinstance(value, str) else "-F"
            cmd.extend([flag, f"{key}={value}"])

        try:
            output = self._run_gh_command(cmd)
        except subprocess.CalledProcessError as e:
            detail = (e.stderr or "").strip() or str(e)
            raise GatewayError(operation, detail) from e
        except OSError as e:
            raise GatewayError(operation, f"could not run gh: {e}") from e

        try:
            payload = json.loads(output)
        except json.JSONDecodeError as e:
            raise GatewayError(operation, f"invalid JSON response: {e}") from e

        if payload.get("errors"):
            messages = "; ".join(
                error.get("message", "Unknown error") for error in payload["errors"]
            )
            raise GatewayError(operation, messages)

        return payload.get("data") or {}

    def list_open_pull_requests(
        self, owner: str, repo: str
    ) -> list[PullRequestSummary]:
        """Fetch every open pull request, draining all pages.

        Parameters
        ----------
        owner : str
            Repository owner.
        repo : str
            Repository name.

        Returns
        -------
        list[PullRequestSummary]
            All open pull requests in platform order.

        Raises
        ------
        GatewayError
            If any page fails. Partial results are discarded.

        """
        pull_requests: list[PullRequestSummary] = []
        cursor = None

        while True:
            data = self._graphql(
                "list_open_pull_requests",
                LIST_PULL_REQUESTS_QUERY,
                {"owner": owner, "name": repo, "first": PAGE_SIZE, "cursor": cursor},
            )
            repository = data.get("repository")
            if repository is None:
                raise GatewayError(
                    "list_open_pull_requests", f"repository {owner}/{repo} not found"
                )

            connection = repository["pullRequests"]
            pull_requests.extend(
                PullRequestSummary.from_graphql(node)
                for node in connection.get("nodes") or []
                if node
            )

            page_info = connection.get("pageInfo") or {}
            if not page_info.get("hasNextPage"):
                return pull_requests
            cursor = page_info.get("endCursor")
            if not cursor:
                raise GatewayError("list_open_pull_requests", "missing endCursor")

    def compare_branches(
        self, owner: str, repo: str, base: str, head: str
    ) -> ComparisonResult | None:
        """Compare a head branch against its base branch.

        Parameters
        ----------
        owner : str
            Repository owner.
        repo : str
            Repository name.
        base : str
            Base branch name.
        head : str
            Head branch name.

        Returns
        -------
        ComparisonResult or None
            Comparison, or None if the base ref or comparison is missing.

        """
        data = self._graphql(
            "compare_branches",
            COMPARE_QUERY,
            {"owner": owner, "name": repo, "base": base, "head": head},
        )
        ref = (data.get("repository") or {}).get("ref")
        if not ref or not ref.get("compare"):
            return None
        return ComparisonResult.from_graphql(ref["compare"])

    def request_branch_update(
        self, pull_request_id: str, method: str = "MERGE"
    ) -> None:
        """Merge the base branch into the pull request's head branch.

        Raises
        ------
        GatewayError
            If GitHub rejects the update.

        """
        self._graphql(
            "request_branch_update",
            UPDATE_BRANCH_MUTATION,
            {"pullRequestId": pull_request_id, "method": method},
        )
        log_info(f"  Branch update requested ({method.lower()})")

    def request_merge(self, pull_request_id: str, method: str = "SQUASH") -> None:
        """Merge the pull request.

        Raises
        ------
        MergeError
            If GitHub rejects the merge (conflict, branch protection,
            transient error).

        """
        try:
            self._graphql(
                "request_merge",
                MERGE_MUTATION,
                {"pullRequestId": pull_request_id, "method": method},
            )
        except GatewayError as e:
            raise MergeError(e.operation, e.message) from e
        log_info(f"  Merge requested ({method.lower()})")
